"""Caller identity as forwarded by the upstream identity provider.

Authentication happens before requests reach this service.  The gateway
forwards the stable caller id and an optional display name as headers; both
are treated as opaque strings.
"""

from __future__ import annotations

from fastapi import Header, HTTPException, status

from figure_tracker.services.sharing_service import Caller

CALLER_ID_HEADER = "X-Caller-Id"
CALLER_NAME_HEADER = "X-Caller-Name"
# Widths of the ``caller_id`` and ``owner_display_name`` columns.
MAX_CALLER_ID_LENGTH = 128
MAX_DISPLAY_NAME_LENGTH = 255


async def get_current_caller(
    caller_id: str | None = Header(default=None, alias=CALLER_ID_HEADER),
    caller_name: str | None = Header(default=None, alias=CALLER_NAME_HEADER),
) -> Caller:
    """Resolve the authenticated caller or reject the request with 401.

    Ids longer than the stored column are rejected rather than shortened, so
    two distinct callers can never collapse onto the same owner.
    """

    caller_id = caller_id.strip() if caller_id else ""
    if not caller_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Missing {CALLER_ID_HEADER} header",
        )
    if len(caller_id) > MAX_CALLER_ID_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"{CALLER_ID_HEADER} exceeds {MAX_CALLER_ID_LENGTH} characters",
        )
    display_name = caller_name.strip()[:MAX_DISPLAY_NAME_LENGTH] if caller_name else None
    return Caller(id=caller_id, display_name=display_name or None)
