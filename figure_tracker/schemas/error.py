"""Error response schemas for consistent error handling."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from figure_tracker.errors import ErrorKind


class ErrorType(str, Enum):
    """Categories reported in HTTP error payloads.

    The first five mirror :class:`~figure_tracker.errors.ErrorKind` one to one;
    the remaining members cover request validation and unexpected faults.
    """

    NOT_FOUND = ErrorKind.NOT_FOUND.value
    ALREADY_EXISTS = ErrorKind.ALREADY_EXISTS.value
    INVALID_ARGUMENT = ErrorKind.INVALID_ARGUMENT.value
    NOT_AVAILABLE = ErrorKind.NOT_AVAILABLE.value
    UNAVAILABLE = ErrorKind.UNAVAILABLE.value
    VALIDATION_ERROR = "validation_error"
    INTERNAL_ERROR = "internal_error"
    AUTHENTICATION_ERROR = "authentication_error"

    @classmethod
    def from_kind(cls, kind: ErrorKind) -> "ErrorType":
        return cls(kind.value)


class ErrorResponse(BaseModel):
    """Standardized error response model."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error_type": "already_exists",
                "message": "Item '0x01' is already in the caller's collection",
                "detail": None,
                "status_code": 409,
                "timestamp": "2025-11-03T10:30:00Z",
                "request_id": "req_abc123xyz",
                "path": "/collection",
                "retry_after": None,
            }
        }
    )

    error_type: ErrorType = Field(..., description="Category of error")
    message: str = Field(..., description="Human-readable error message")
    detail: str | None = Field(None, description="Additional error details or context")
    status_code: int = Field(..., description="HTTP status code")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When error occurred",
    )
    request_id: str | None = Field(None, description="Unique request identifier for tracking")
    path: str | None = Field(None, description="Request path that caused the error")
    retry_after: int | None = Field(
        None, description="Seconds to wait before retrying (for store outages)"
    )


class ValidationErrorDetail(BaseModel):
    """Details for validation errors."""

    field: str = Field(..., description="Field that failed validation")
    message: str = Field(..., description="Validation error message")
    value: Any = Field(None, description="Value that failed validation")


class ValidationErrorResponse(ErrorResponse):
    """Extended error response for validation errors."""

    error_type: ErrorType = Field(default=ErrorType.VALIDATION_ERROR)
    errors: list[ValidationErrorDetail] = Field(
        default_factory=list, description="List of validation errors"
    )
