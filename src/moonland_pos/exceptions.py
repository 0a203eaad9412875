from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ApiError(Exception):
    code: str
    message: str
    details: object | None
    trace_id: str | None
    status_code: int
    raw_payload: object | None = None

    def __str__(self) -> str:
        trace = f" trace_id={self.trace_id}" if self.trace_id else ""
        return f"[{self.status_code}] {self.code}: {self.message}{trace}"


class UnauthorizedError(ApiError):
    pass


class ForbiddenError(ApiError):
    pass


class NotFoundError(ApiError):
    pass


class ValidationError(ApiError):
    pass


class AuthError(UnauthorizedError):
    """Authentication failed or session is invalid."""


class ConflictError(ApiError):
    """409 or conflict-style errors."""


class RateLimitError(ApiError):
    """429 throttling error."""


class ServerError(ApiError):
    """5xx server-side failures."""


class TransportError(ApiError):
    """Network/transport failure before an HTTP response was returned."""


class CartEmptyError(ValueError):
    """Checkout attempted with no cart lines."""

    def __init__(self, message: str = "Cart is empty") -> None:
        super().__init__(message)
        self.message = message


class DecodeError(ValueError):
    """A server field that should carry encoded JSON could not be decoded."""

    def __init__(self, field: str, raw: object) -> None:
        super().__init__(f"Could not decode field {field!r}")
        self.field = field
        self.raw = raw
