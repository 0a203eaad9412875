from __future__ import annotations

from dataclasses import dataclass

from .exceptions import ApiError

FALLBACK_MESSAGE = "Unexpected client error"


@dataclass(frozen=True)
class UserFacingError:
    """Text shown in a destructive notification, plus what goes to the log."""

    message: str
    technical_details: str | None = None
    trace_id: str | None = None


def _api_details(exc: ApiError) -> str:
    summary = f"{exc.code} (HTTP {exc.status_code})"
    return f"{summary}: {exc.details}" if exc.details else summary


def to_user_facing_error(exc: Exception) -> UserFacingError:
    if isinstance(exc, ApiError):
        return UserFacingError(
            message=exc.message.strip() or "Request failed",
            technical_details=_api_details(exc),
            trace_id=exc.trace_id,
        )
    return UserFacingError(message=str(exc) or FALLBACK_MESSAGE, technical_details=type(exc).__name__)
