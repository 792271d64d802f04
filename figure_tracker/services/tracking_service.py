"""OwnershipStore and DesireStore: per-caller collection and wishlist workflows.

Both stores share one contract:

* ``add`` raises :class:`AlreadyExistsError` when the pair already exists and
  :class:`NotFoundError` for ids missing from the catalog.
* ``remove`` is idempotent and returns a :class:`RemovalResult` whose
  ``removed`` flag tells the caller whether a row was actually deleted.
* ``list`` returns records joined with their catalog item, newest first.

Ownership and desire are kept mutually exclusive by policy only.  Adding an
item to the collection commits the ownership row first and then deletes the
matching wishlist row as a second, independent write.  When that second write
fails the caller ends up owning and wishing for the same item; the condition
is logged, not retried, and clears itself the next time the wishlist entry is
removed.  Clients reconcile by re-listing both stores after a mutation.
"""

from __future__ import annotations

import logging

from figure_tracker.db.models import DesireRecord, OwnershipRecord
from figure_tracker.db.repositories import DesireRepository, OwnershipRepository
from figure_tracker.errors import TrackerError
from figure_tracker.schemas.catalog import CatalogItem
from figure_tracker.schemas.tracking import (
    CollectionEntry,
    CollectionListResponse,
    DesireMetadata,
    OwnershipMetadata,
    RemovalResult,
    WishlistEntry,
    WishlistListResponse,
)

logger = logging.getLogger(__name__)


def collection_entry(record: OwnershipRecord) -> CollectionEntry:
    return CollectionEntry(
        item=CatalogItem.model_validate(record.item),
        acquired_at=record.acquired_at,
        condition=record.condition,
        note=record.note,
        is_favorite=record.is_favorite,
    )


def wishlist_entry(record: DesireRecord) -> WishlistEntry:
    return WishlistEntry(
        item=CatalogItem.model_validate(record.item),
        created_at=record.created_at,
        priority=record.priority,
        note=record.note,
    )


class OwnershipStore:
    """Collection workflows for one store handle; callers pass their id explicitly."""

    def __init__(
        self,
        ownership: OwnershipRepository,
        desire: DesireRepository,
    ) -> None:
        self._ownership = ownership
        self._desire = desire

    async def add(
        self,
        caller_id: str,
        item_id: str,
        metadata: OwnershipMetadata | None = None,
    ) -> CollectionEntry:
        metadata = metadata or OwnershipMetadata()
        values = metadata.model_dump(exclude_none=True)
        record = await self._ownership.add(caller_id, item_id, values)
        logger.info("Caller %s added item %s to collection", caller_id, item_id)

        await self._clear_wishlist_entry(caller_id, item_id)
        return collection_entry(record)

    async def _clear_wishlist_entry(self, caller_id: str, item_id: str) -> None:
        """Best-effort compensating write keeping ownership and desire exclusive."""

        try:
            removed = await self._desire.remove(caller_id, item_id)
        except TrackerError as exc:
            logger.warning(
                "Item %s is owned but may still be wishlisted for caller %s: %s",
                item_id,
                caller_id,
                exc,
            )
            return
        if removed:
            logger.info(
                "Removed item %s from wishlist of caller %s after acquisition",
                item_id,
                caller_id,
            )

    async def remove(self, caller_id: str, item_id: str) -> RemovalResult:
        removed = await self._ownership.remove(caller_id, item_id)
        if not removed:
            logger.debug("Collection removal for %s/%s matched no row", caller_id, item_id)
        return RemovalResult(item_id=item_id, removed=removed)

    async def list(self, caller_id: str) -> CollectionListResponse:
        records = await self._ownership.list_for_caller(caller_id)
        entries = [collection_entry(record) for record in records]
        return CollectionListResponse(total=len(entries), entries=entries)

    async def contains(self, caller_id: str, item_id: str) -> bool:
        return await self._ownership.contains(caller_id, item_id)

    async def count(self, caller_id: str) -> int:
        return await self._ownership.count_for_caller(caller_id)


class DesireStore:
    """Wishlist workflows mirroring :class:`OwnershipStore`."""

    def __init__(self, desire: DesireRepository) -> None:
        self._desire = desire

    async def add(
        self,
        caller_id: str,
        item_id: str,
        metadata: DesireMetadata | None = None,
    ) -> WishlistEntry:
        metadata = metadata or DesireMetadata()
        record = await self._desire.add(caller_id, item_id, metadata.model_dump())
        logger.info("Caller %s added item %s to wishlist", caller_id, item_id)
        return wishlist_entry(record)

    async def remove(self, caller_id: str, item_id: str) -> RemovalResult:
        removed = await self._desire.remove(caller_id, item_id)
        return RemovalResult(item_id=item_id, removed=removed)

    async def list(self, caller_id: str) -> WishlistListResponse:
        records = await self._desire.list_for_caller(caller_id)
        entries = [wishlist_entry(record) for record in records]
        return WishlistListResponse(total=len(entries), entries=entries)

    async def contains(self, caller_id: str, item_id: str) -> bool:
        return await self._desire.contains(caller_id, item_id)

    async def count(self, caller_id: str) -> int:
        return await self._desire.count_for_caller(caller_id)


__all__ = ["DesireStore", "OwnershipStore", "collection_entry", "wishlist_entry"]
