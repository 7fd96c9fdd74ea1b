"""Mapping of domain errors onto HTTP errors."""

from uuid import UUID

import logfire
from fastapi import HTTPException, status

from huddle.domain.error import DomainError, NotAuthorizedError, NotFoundError


def http_error(error: DomainError, operation: str) -> HTTPException:
    """Translate a domain error into an ``HTTPException``.

    Args:
        error: Error raised by a use case
        operation: Short operation name for the log event

    Returns:
        HTTPException with 404, 403 or 400 status
    """
    if isinstance(error, NotFoundError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(error, NotAuthorizedError):
        code = status.HTTP_403_FORBIDDEN
    else:
        code = status.HTTP_400_BAD_REQUEST

    logfire.warn(
        "Request rejected",
        operation=operation,
        error_type=type(error).__name__,
        error=str(error),
        status_code=code,
    )
    return HTTPException(status_code=code, detail=str(error))


def invalid_request(error: ValueError, operation: str) -> HTTPException:
    """Translate a request validation failure into a 400."""
    logfire.warn("Request validation error", operation=operation, error=str(error))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))


def require_user(user_id: UUID | None) -> UUID:
    """Return the requesting member ID or fail with 401.

    The upstream gateway authenticates the member and forwards the ID in
    the ``X-User-Id`` header.
    """
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-User-Id header required",
        )
    return user_id


def cache_header(hit: bool) -> dict[str, str]:
    """Headers for a response served through the microcache."""
    return {"X-Cache": "HIT" if hit else "MISS"}
