"""Read-only access to the figure catalog."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import func, select
from sqlalchemy.sql.elements import ColumnElement

from figure_tracker.db.models import Item, OwnershipRecord
from figure_tracker.db.repositories.base import (
    SEARCHABLE_FIELDS,
    BaseRepository,
    store_errors,
)
from figure_tracker.errors import InvalidArgumentError

_SEARCH_COLUMNS = {
    "character": Item.character,
    "series": Item.series,
    "sub_series": Item.sub_series,
    "name": Item.name,
}


def _search_column(field: str):
    """Return the column for ``field`` or reject fields outside the allow-list."""

    column = _SEARCH_COLUMNS.get(field)
    if column is None:
        allowed = ", ".join(SEARCHABLE_FIELDS)
        raise InvalidArgumentError(
            f"Unsupported search field '{field}'. Expected one of: {allowed}"
        )
    return column


class CatalogRepository(BaseRepository):
    """Queries over ``items``; nothing in this service writes to the catalog."""

    async def list_items(self) -> list[Item]:
        query = select(Item).order_by(Item.character, Item.id)
        async with store_errors("list catalog"):
            result = await self._session.execute(query)
        return list(result.scalars().all())

    async def get_item(self, item_id: str) -> Item | None:
        async with store_errors("load catalog item"):
            return await self._session.get(Item, item_id)

    async def count_items(self) -> int:
        async with store_errors("count catalog"):
            total = await self._session.scalar(select(func.count(Item.id)))
        return int(total or 0)

    async def search(self, term: str, field: str) -> list[Item]:
        """Case-insensitive substring match on one allow-listed column.

        Wildcard characters in ``term`` are escaped so ``%`` and ``_`` match
        literally.
        """

        column = _search_column(field)
        query = (
            select(Item)
            .where(column.icontains(term, autoescape=True))
            .order_by(Item.character, Item.id)
        )
        async with store_errors("search catalog"):
            result = await self._session.execute(query)
        return list(result.scalars().all())

    def _unowned_clause(self, caller_id: str) -> ColumnElement[bool]:
        owned_ids = select(OwnershipRecord.item_id).where(
            OwnershipRecord.caller_id == caller_id
        )
        return Item.id.not_in(owned_ids)

    async def count_unowned(self, caller_id: str) -> int:
        query = select(func.count(Item.id)).where(self._unowned_clause(caller_id))
        async with store_errors("count unowned items"):
            total = await self._session.scalar(query)
        return int(total or 0)

    async def unowned_at_positions(
        self, caller_id: str, positions: Sequence[int]
    ) -> list[Item]:
        """Return the items at ``positions`` (0-based) of the caller's unowned ids.

        Positions index the id-ordered list of unowned items, so the caller can
        pick any subset of them without loading the whole list.
        """

        if not positions:
            return []
        ranked = (
            select(
                Item.id.label("item_id"),
                func.row_number().over(order_by=Item.id).label("position"),
            )
            .where(self._unowned_clause(caller_id))
            .subquery()
        )
        query = (
            select(Item)
            .join(ranked, ranked.c.item_id == Item.id)
            .where(ranked.c.position.in_([position + 1 for position in positions]))
            .order_by(Item.id)
        )
        async with store_errors("load recommendation candidates"):
            result = await self._session.execute(query)
        return list(result.scalars().all())
