"""SharingRegistry: one share link per caller and resource kind.

Lifecycle per ``(caller, kind)``::

    NoShare -> Active -> Inactive -> Active -> ...

Unsharing only clears the ``active`` flag, so the token and its accumulated
view counter survive a later re-share.  The ``(caller_id, kind)`` unique
constraint backs :meth:`SharingRegistry.create_or_refresh`; when two requests
race to create the first link, the loser re-reads the winner's row and
refreshes it instead of failing.
"""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError

from figure_tracker.db.models import ShareKind, ShareLink
from figure_tracker.db.repositories import ShareLinkRepository
from figure_tracker.errors import NotFoundError, StoreUnavailableError
from figure_tracker.schemas.sharing import ShareLinkDetail
from figure_tracker.settings import AppSettings, get_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Caller:
    """Authenticated party as supplied by the identity provider."""

    id: str
    display_name: str | None = None


def generate_share_token(num_bytes: int) -> str:
    """Return a URL-safe token drawn from the OS CSPRNG."""

    return secrets.token_urlsafe(num_bytes)


class SharingRegistry:
    def __init__(
        self,
        repository: ShareLinkRepository,
        *,
        settings: AppSettings | None = None,
    ) -> None:
        self._repository = repository
        self._settings = settings or get_settings()

    def share_url(self, link: ShareLink) -> str:
        base = self._settings.public_site_url.rstrip("/")
        return f"{base}/shared/{ShareKind(link.kind).value}/{link.token}"

    def to_detail(self, link: ShareLink) -> ShareLinkDetail:
        return ShareLinkDetail(
            id=link.id,
            kind=link.kind,
            token=link.token,
            title=link.title,
            description=link.description,
            active=link.active,
            view_count=link.view_count,
            created_at=link.created_at,
            share_url=self.share_url(link),
        )

    async def get(self, caller_id: str, kind: ShareKind) -> ShareLink | None:
        return await self._repository.get_for_caller(caller_id, kind)

    async def create_or_refresh(
        self,
        caller: Caller,
        kind: ShareKind,
        title: str,
        description: str | None = None,
    ) -> ShareLink:
        """Create the caller's link for ``kind`` or refresh the existing one.

        Existing rows keep their token and view counter; only the title,
        description and display name are updated and the link is reactivated.
        """

        link = await self._repository.get_for_caller(caller.id, kind)
        if link is not None:
            return await self._refresh(link, caller, title, description)

        link = ShareLink(
            caller_id=caller.id,
            kind=kind,
            token=generate_share_token(self._settings.share_token_bytes),
            title=title,
            description=description,
            owner_display_name=caller.display_name,
            active=True,
            view_count=0,
        )
        try:
            await self._repository.insert(link)
        except IntegrityError as exc:
            existing = await self._repository.get_for_caller(caller.id, kind)
            if existing is None:
                # Token collision rather than a concurrent create for this caller.
                raise StoreUnavailableError(
                    "Could not allocate a share token. Please retry."
                ) from exc
            logger.info(
                "Concurrent %s share creation for caller %s; refreshing winner",
                kind.value,
                caller.id,
            )
            return await self._refresh(existing, caller, title, description)

        logger.info("Created %s share link %s for caller %s", kind.value, link.id, caller.id)
        return link

    async def _refresh(
        self,
        link: ShareLink,
        caller: Caller,
        title: str,
        description: str | None,
    ) -> ShareLink:
        was_active = link.active
        link.title = title
        link.description = description
        link.active = True
        if caller.display_name:
            link.owner_display_name = caller.display_name
        await self._repository.save(link)
        if not was_active:
            logger.info("Reactivated %s share link %s", ShareKind(link.kind).value, link.id)
        return link

    async def set_active(self, caller_id: str, kind: ShareKind, active: bool) -> ShareLink:
        """Flip the active flag; a no-op when the link is already in that state."""

        link = await self._repository.get_for_caller(caller_id, kind)
        if link is None:
            raise NotFoundError(f"No {kind.value} share link exists for this caller")
        if link.active == active:
            return link
        link.active = active
        await self._repository.save(link)
        logger.info(
            "%s %s share link %s",
            "Activated" if active else "Deactivated",
            kind.value,
            link.id,
        )
        return link

    async def resolve(self, token: str) -> ShareLink | None:
        """Return the link for ``token`` whether active or not, or ``None``."""

        return await self._repository.get_by_token(token)

    async def record_view(self, share_link_id: int) -> None:
        await self._repository.increment_views(share_link_id)


__all__ = ["Caller", "SharingRegistry", "generate_share_token"]
