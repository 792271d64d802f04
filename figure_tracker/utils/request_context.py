"""Per-request correlation ids.

The HTTP middleware binds a fresh id for every request; error payloads and
log lines read it back so a client-reported ``request_id`` can be matched to
the server logs.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar, Token

__all__ = [
    "REQUEST_ID_CONTEXT",
    "RequestIdLogFilter",
    "clear_request_id",
    "get_request_id",
    "set_request_id",
]

REQUEST_ID_CONTEXT: ContextVar[str] = ContextVar("request_id", default="")

_NO_REQUEST = "-"


def set_request_id(request_id: str) -> Token[str]:
    return REQUEST_ID_CONTEXT.set(request_id)


def get_request_id() -> str:
    """Return the id bound to the running request, or ``""`` outside one."""

    return REQUEST_ID_CONTEXT.get()


def clear_request_id(token: Token[str] | None = None) -> None:
    """Restore the value ``token`` replaced, or unbind the id when no token is given."""

    if token is None:
        REQUEST_ID_CONTEXT.set("")
        return
    REQUEST_ID_CONTEXT.reset(token)


class RequestIdLogFilter(logging.Filter):
    """Stamp ``record.request_id`` so formatters can print ``%(request_id)s``."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id() or _NO_REQUEST
        return True
