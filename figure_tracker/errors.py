"""Closed error taxonomy surfaced by the domain service layer.

Repositories and services raise the :class:`TrackerError` subclasses below;
the FastAPI application translates them into structured error payloads so the
presentation layer never sees store-specific exceptions.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Every failure category a caller of the service layer can observe."""

    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"
    INVALID_ARGUMENT = "invalid_argument"
    NOT_AVAILABLE = "not_available"
    UNAVAILABLE = "unavailable"


class TrackerError(Exception):
    """Base class for domain failures carrying an :class:`ErrorKind`."""

    kind: ErrorKind = ErrorKind.UNAVAILABLE

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(TrackerError, LookupError):
    """The addressed record does not exist. Usually recoverable."""

    kind = ErrorKind.NOT_FOUND


class AlreadyExistsError(TrackerError):
    """A uniqueness constraint rejected the write."""

    kind = ErrorKind.ALREADY_EXISTS


class InvalidArgumentError(TrackerError, ValueError):
    """The caller supplied an argument outside the accepted contract."""

    kind = ErrorKind.INVALID_ARGUMENT


class NotAvailableError(TrackerError):
    """A share token is unknown or disabled.

    Both cases deliberately share one message so viewers cannot learn which
    tokens once existed.
    """

    kind = ErrorKind.NOT_AVAILABLE

    def __init__(self, message: str = "Shared collection not found or no longer available") -> None:
        super().__init__(message)


class StoreUnavailableError(TrackerError):
    """The backing store could not be reached. Safe to retry later."""

    kind = ErrorKind.UNAVAILABLE


__all__ = [
    "AlreadyExistsError",
    "ErrorKind",
    "InvalidArgumentError",
    "NotAvailableError",
    "NotFoundError",
    "StoreUnavailableError",
    "TrackerError",
]
