"""Map routing errors onto HTTP responses."""

from __future__ import annotations

from fastapi import HTTPException

from safeplace.domain.errors import (
    Conflict,
    Forbidden,
    InvalidCategory,
    InvalidInput,
    NoProfessionalsAvailable,
    NotFound,
    RoutingError,
    StoreUnavailable,
)

STATUS_CODES: dict[type[RoutingError], int] = {
    InvalidInput: 400,
    InvalidCategory: 400,
    Forbidden: 403,
    NotFound: 404,
    NoProfessionalsAvailable: 404,
    Conflict: 409,
    StoreUnavailable: 503,
}


def to_http_exception(error: RoutingError) -> HTTPException:
    status_code = next(
        (code for cls, code in STATUS_CODES.items() if isinstance(error, cls)), 500
    )
    headers = {"Retry-After": "5"} if error.retryable else None
    return HTTPException(
        status_code=status_code,
        detail={"error": type(error).__name__, "message": error.message},
        headers=headers,
    )
