"""StatsAggregator: completion metrics for the dashboard."""

from __future__ import annotations

import logging

from figure_tracker.db.models import ShareKind
from figure_tracker.db.repositories import ShareLinkRepository
from figure_tracker.schemas.stats import CollectionStats
from figure_tracker.services.catalog_service import CatalogService
from figure_tracker.services.tracking_service import DesireStore, OwnershipStore

logger = logging.getLogger(__name__)


def completion_percentage(owned: int, total: int) -> int:
    """Return ``round(owned / total * 100)``, defining an empty catalog as 0%."""

    if total <= 0:
        return 0
    return round(owned / total * 100)


class StatsAggregator:
    """Combine one count query per resource into a :class:`CollectionStats`.

    Counts of different resources may be read at slightly different moments;
    each individual count comes from a single ``COUNT`` statement.
    """

    def __init__(
        self,
        catalog: CatalogService,
        ownership: OwnershipStore,
        desire: DesireStore,
        share_links: ShareLinkRepository,
    ) -> None:
        self._catalog = catalog
        self._ownership = ownership
        self._desire = desire
        self._share_links = share_links

    async def compute_stats(self, caller_id: str) -> CollectionStats:
        total = await self._catalog.count_items()
        owned = await self._ownership.count(caller_id)
        wishlisted = await self._desire.count(caller_id)

        views: dict[ShareKind, int] = {
            link.kind: link.view_count
            for link in await self._share_links.list_active_for_caller(caller_id)
        }

        stats = CollectionStats(
            total_items=total,
            owned_count=owned,
            wishlist_count=wishlisted,
            completion_percentage=completion_percentage(owned, total),
            ownership_share_views=views.get(ShareKind.OWNERSHIP),
            desire_share_views=views.get(ShareKind.DESIRE),
        )
        logger.debug("Computed stats for caller %s: %s", caller_id, stats)
        return stats


__all__ = ["StatsAggregator", "completion_percentage"]
