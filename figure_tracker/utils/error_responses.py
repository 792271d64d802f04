"""Helpers for constructing structured API error responses.

Besides the generic builders, :func:`error_response_for` maps the domain's
closed :class:`~figure_tracker.errors.ErrorKind` set onto HTTP status codes so
every handler reports domain failures identically.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timezone

from fastapi import status

from figure_tracker.errors import ErrorKind, TrackerError
from figure_tracker.schemas.error import (
    ErrorResponse,
    ErrorType,
    ValidationErrorDetail,
    ValidationErrorResponse,
)
from figure_tracker.utils.request_context import get_request_id

__all__ = [
    "ERROR_KIND_STATUS",
    "build_error_response",
    "build_validation_error_response",
    "error_response_for",
]

ERROR_KIND_STATUS: dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.ALREADY_EXISTS: status.HTTP_409_CONFLICT,
    ErrorKind.INVALID_ARGUMENT: status.HTTP_400_BAD_REQUEST,
    # Unknown and disabled share tokens look like a plain 404 to viewers.
    ErrorKind.NOT_AVAILABLE: status.HTTP_404_NOT_FOUND,
    ErrorKind.UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
}

_RETRY_AFTER_SECONDS = 5


def _current_timestamp() -> datetime:
    """Return a timezone-aware timestamp; split out so tests can freeze it."""

    return datetime.now(timezone.utc)


def build_validation_error_response(
    *,
    errors: Sequence[ValidationErrorDetail],
    message: str,
    detail: str,
    status_code: int,
    path: str,
    request_id: str | None = None,
) -> ValidationErrorResponse:
    return ValidationErrorResponse(
        error_type=ErrorType.VALIDATION_ERROR,
        message=message,
        detail=detail,
        status_code=status_code,
        timestamp=_current_timestamp(),
        request_id=request_id or get_request_id(),
        path=path,
        errors=list(errors),
    )


def build_error_response(
    *,
    error_type: ErrorType,
    message: str,
    detail: str | None,
    status_code: int,
    path: str,
    retry_after: int | None = None,
    request_id: str | None = None,
) -> ErrorResponse:
    """Construct a generic ``ErrorResponse`` enriched with request metadata."""

    return ErrorResponse(
        error_type=error_type,
        message=message,
        detail=detail,
        status_code=status_code,
        timestamp=_current_timestamp(),
        request_id=request_id or get_request_id(),
        path=path,
        retry_after=retry_after,
    )


def error_response_for(exc: TrackerError, *, path: str) -> ErrorResponse:
    """Translate a domain error into its HTTP payload."""

    status_code = ERROR_KIND_STATUS[exc.kind]
    retry_after = _RETRY_AFTER_SECONDS if exc.kind is ErrorKind.UNAVAILABLE else None
    return build_error_response(
        error_type=ErrorType.from_kind(exc.kind),
        message=exc.message,
        detail=None,
        status_code=status_code,
        path=path,
        retry_after=retry_after,
    )
