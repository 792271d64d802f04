"""Persistence for share links and their view counters."""

from __future__ import annotations

from sqlalchemy import select, update

from figure_tracker.db.models import ShareKind, ShareLink
from figure_tracker.db.repositories.base import BaseRepository, store_errors


class ShareLinkRepository(BaseRepository):
    """CRUD over ``share_links``; at most one row per ``(caller_id, kind)``."""

    async def get_for_caller(self, caller_id: str, kind: ShareKind) -> ShareLink | None:
        query = (
            select(ShareLink)
            .where(ShareLink.caller_id == caller_id, ShareLink.kind == kind)
            .execution_options(populate_existing=True)
        )
        async with store_errors("load share link"):
            result = await self._session.execute(query)
        return result.scalars().one_or_none()

    async def list_active_for_caller(self, caller_id: str) -> list[ShareLink]:
        query = (
            select(ShareLink)
            .where(ShareLink.caller_id == caller_id, ShareLink.active.is_(True))
            .execution_options(populate_existing=True)
        )
        async with store_errors("list share links"):
            result = await self._session.execute(query)
        return list(result.scalars().all())

    async def get_by_token(self, token: str) -> ShareLink | None:
        """Look a link up by token regardless of its active flag."""

        query = (
            select(ShareLink)
            .where(ShareLink.token == token)
            .execution_options(populate_existing=True)
        )
        async with store_errors("resolve share token"):
            result = await self._session.execute(query)
        return result.scalars().one_or_none()

    async def insert(self, link: ShareLink) -> ShareLink:
        """Persist a brand-new link.

        Raises :class:`IntegrityError` when another request created the
        ``(caller_id, kind)`` row first; the caller re-reads and refreshes it.
        """

        self._session.add(link)
        await self._commit("create share link")
        return link

    async def save(self, link: ShareLink) -> ShareLink:
        """Commit in-place changes made to an already persistent link."""

        await self._commit("update share link")
        return link

    async def increment_views(self, share_link_id: int) -> None:
        """Add one view using a server-side delta so concurrent viewers never collide."""

        statement = (
            update(ShareLink)
            .where(ShareLink.id == share_link_id)
            .values(view_count=ShareLink.view_count + 1)
            .execution_options(synchronize_session=False)
        )
        await self._write(statement, "record share view")


__all__ = ["ShareLinkRepository"]
