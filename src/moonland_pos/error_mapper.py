from __future__ import annotations

from typing import Mapping

from .exceptions import (
    ApiError,
    AuthError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    RateLimitError,
    ServerError,
    ValidationError,
)

_ERRORS_BY_STATUS: dict[int, type[ApiError]] = {
    400: ValidationError,
    401: AuthError,
    403: ForbiddenError,
    404: NotFoundError,
    409: ConflictError,
    422: ValidationError,
    429: RateLimitError,
}

# Keys a POS backend may use for the human-readable reason, in priority order.
_MESSAGE_KEYS = ("message", "error", "detail")


def _error_class(status_code: int) -> type[ApiError]:
    if status_code >= 500:
        return ServerError
    return _ERRORS_BY_STATUS.get(status_code, ApiError)


def _first_text(payload: Mapping[str, object], keys: tuple[str, ...]) -> str | None:
    for key in keys:
        value = payload.get(key)
        if isinstance(value, str) and value.strip():
            return value
    return None


def map_error(status_code: int, payload: Mapping[str, object] | None, trace_id: str | None) -> ApiError:
    """Turn a non-2xx response into the matching ApiError subclass."""
    body = dict(payload or {})
    body_trace = body.get("trace_id")
    return _error_class(status_code)(
        code=str(body.get("code") or "HTTP_ERROR"),
        message=_first_text(body, _MESSAGE_KEYS) or "Request failed",
        details=body.get("details"),
        trace_id=str(body_trace) if body_trace is not None else trace_id,
        status_code=status_code,
        raw_payload=body,
    )
