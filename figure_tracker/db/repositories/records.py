"""Repositories for the per-caller ownership and desire tables.

Both tables share the same shape: one row per ``(caller_id, item_id)`` pair,
guarded by a unique constraint, plus a timestamp used for newest-first
listings.  :class:`_CallerRecordRepository` holds the shared logic and the two
concrete classes only declare which model and timestamp attribute they manage.
"""

from __future__ import annotations

import logging
from typing import Any, ClassVar, Generic, TypeVar

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError

from figure_tracker.db.models import DesireRecord, Item, OwnershipRecord
from figure_tracker.db.repositories.base import BaseRepository, store_errors
from figure_tracker.errors import AlreadyExistsError, NotFoundError

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", OwnershipRecord, DesireRecord)


class _CallerRecordRepository(BaseRepository, Generic[RecordT]):
    model: ClassVar[type]
    timestamp_field: ClassVar[str]
    label: ClassVar[str]

    def _pair_clause(self, caller_id: str, item_id: str):
        return (self.model.caller_id == caller_id) & (self.model.item_id == item_id)

    async def get(self, caller_id: str, item_id: str) -> RecordT | None:
        query = select(self.model).where(self._pair_clause(caller_id, item_id))
        async with store_errors(f"load {self.label} record"):
            result = await self._session.execute(query)
        return result.scalars().one_or_none()

    async def contains(self, caller_id: str, item_id: str) -> bool:
        query = select(self.model.id).where(self._pair_clause(caller_id, item_id))
        async with store_errors(f"check {self.label} record"):
            found = await self._session.scalar(query)
        return found is not None

    async def add(
        self, caller_id: str, item_id: str, values: dict[str, Any]
    ) -> RecordT:
        """Insert a record for the pair, committing it as its own unit of work.

        The existence check gives a clean error for the common case; the unique
        constraint decides concurrent inserts that both pass the check.
        """

        if await self.contains(caller_id, item_id):
            raise AlreadyExistsError(
                f"Item '{item_id}' is already in the caller's {self.label}"
            )

        async with store_errors(f"load item for {self.label}"):
            item = await self._session.get(Item, item_id)
        if item is None:
            raise NotFoundError(f"Item '{item_id}' does not exist in the catalog")

        record = self.model(caller_id=caller_id, item_id=item_id, **values)
        record.item = item
        self._session.add(record)
        try:
            await self._commit(f"add {self.label} record")
        except IntegrityError as exc:
            logger.info(
                "Concurrent %s insert lost the race for caller=%s item=%s",
                self.label,
                caller_id,
                item_id,
            )
            raise AlreadyExistsError(
                f"Item '{item_id}' is already in the caller's {self.label}"
            ) from exc
        return record

    async def remove(self, caller_id: str, item_id: str) -> bool:
        """Delete the pair's row and report whether one existed."""

        statement = delete(self.model).where(self._pair_clause(caller_id, item_id))
        return bool(await self._write(statement, f"remove {self.label} record"))

    async def list_for_caller(self, caller_id: str) -> list[RecordT]:
        """Newest first, ties broken by item id so pages render deterministically."""

        timestamp = getattr(self.model, self.timestamp_field)
        query = (
            select(self.model)
            .where(self.model.caller_id == caller_id)
            .order_by(timestamp.desc(), self.model.item_id.asc())
        )
        async with store_errors(f"list {self.label}"):
            result = await self._session.execute(query)
        return list(result.scalars().all())

    async def count_for_caller(self, caller_id: str) -> int:
        query = select(func.count(self.model.id)).where(
            self.model.caller_id == caller_id
        )
        async with store_errors(f"count {self.label}"):
            total = await self._session.scalar(query)
        return int(total or 0)


class OwnershipRepository(_CallerRecordRepository[OwnershipRecord]):
    model = OwnershipRecord
    timestamp_field = "acquired_at"
    label = "collection"


class DesireRepository(_CallerRecordRepository[DesireRecord]):
    model = DesireRecord
    timestamp_field = "created_at"
    label = "wishlist"


__all__ = ["DesireRepository", "OwnershipRepository"]
