"""RecommendationSampler: random catalog items the caller does not own yet.

The sampler never loads the whole catalog.  It counts the caller's unowned
items, draws a candidate window of ``limit * oversample_factor`` distinct
positions uniformly from that range, loads just those rows, shuffles them and
keeps the first ``limit`` items.  Every unowned item is equally likely to be a
candidate regardless of where its id sorts.  Ownership is excluded inside the
query, so an owned item can never be returned.
"""

from __future__ import annotations

import logging
import random

from figure_tracker.db.models import Item
from figure_tracker.db.repositories import CatalogRepository
from figure_tracker.errors import InvalidArgumentError
from figure_tracker.schemas.catalog import CatalogItem
from figure_tracker.schemas.stats import RecommendationResponse
from figure_tracker.settings import AppSettings, get_settings

logger = logging.getLogger(__name__)

MAX_RECOMMENDATIONS = 100


class RecommendationSampler:
    def __init__(
        self,
        catalog: CatalogRepository,
        *,
        settings: AppSettings | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._catalog = catalog
        self._settings = settings or get_settings()
        self._rng = rng or random.SystemRandom()

    def _window_size(self, limit: int) -> int:
        oversampled = limit * self._settings.recommendation_oversample_factor
        return max(limit, min(oversampled, self._settings.recommendation_window_cap))

    async def _draw(self, caller_id: str, limit: int) -> tuple[list[Item], int]:
        if limit < 0 or limit > MAX_RECOMMENDATIONS:
            raise InvalidArgumentError(
                f"limit must be between 0 and {MAX_RECOMMENDATIONS}, received {limit}"
            )

        unowned = await self._catalog.count_unowned(caller_id)
        if unowned == 0:
            logger.debug("Caller %s owns the whole catalog", caller_id)
            return [], unowned
        if limit == 0:
            return [], unowned

        window = min(self._window_size(limit), unowned)
        positions = self._rng.sample(range(unowned), window)
        candidates = await self._catalog.unowned_at_positions(caller_id, positions)
        # Fisher-Yates shuffle; slicing afterwards keeps selection without replacement.
        self._rng.shuffle(candidates)
        return candidates[:limit], unowned

    async def sample(self, caller_id: str, limit: int = 9) -> list[CatalogItem]:
        """Return ``min(limit, unowned)`` distinct unowned items in random order."""

        items, _ = await self._draw(caller_id, limit)
        return [CatalogItem.model_validate(item) for item in items]

    async def recommend(self, caller_id: str, limit: int = 9) -> RecommendationResponse:
        items, unowned = await self._draw(caller_id, limit)
        return RecommendationResponse(
            requested=limit,
            items=[CatalogItem.model_validate(item) for item in items],
            fully_collected=unowned == 0,
        )


__all__ = ["MAX_RECOMMENDATIONS", "RecommendationSampler"]
