"""Tests for completion statistics."""

from __future__ import annotations

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from figure_tracker.db.models import ShareKind
from figure_tracker.db.repositories import (
    CatalogRepository,
    DesireRepository,
    OwnershipRepository,
    ShareLinkRepository,
)
from figure_tracker.services.catalog_service import CatalogService
from figure_tracker.services.sharing_service import Caller, SharingRegistry
from figure_tracker.services.stats_service import StatsAggregator, completion_percentage
from figure_tracker.services.tracking_service import DesireStore, OwnershipStore
from figure_tracker.settings import AppSettings


@pytest.mark.parametrize(
    ("owned", "total", "expected"),
    [
        (0, 0, 0),
        (5, 0, 0),
        (0, 5, 0),
        (3, 5, 60),
        (1, 3, 33),
        (2, 3, 67),
        (5, 5, 100),
        (1, 200, 0),
        (1, 8, 12),
    ],
)
def test_completion_percentage(owned: int, total: int, expected: int) -> None:
    assert completion_percentage(owned, total) == expected


def _aggregator(session: AsyncSession, settings: AppSettings) -> StatsAggregator:
    catalog = CatalogService(CatalogRepository(session), settings=settings)
    ownership = OwnershipStore(OwnershipRepository(session), DesireRepository(session))
    desire = DesireStore(DesireRepository(session))
    return StatsAggregator(catalog, ownership, desire, ShareLinkRepository(session))


@pytest.mark.asyncio
async def test_empty_catalog_reports_zero_percent(
    session: AsyncSession, settings: AppSettings
) -> None:
    stats = await _aggregator(session, settings).compute_stats("caller-1")

    assert stats.total_items == 0
    assert stats.owned_count == 0
    assert stats.completion_percentage == 0
    assert stats.ownership_share_views is None
    assert stats.desire_share_views is None


@pytest.mark.asyncio
async def test_desire_then_ownership_nets_out_wishlist_count(
    session: AsyncSession, catalog: list[str], settings: AppSettings
) -> None:
    aggregator = _aggregator(session, settings)
    ownership = OwnershipStore(OwnershipRepository(session), DesireRepository(session))
    desire = DesireStore(DesireRepository(session))

    await desire.add("caller-1", "I07")
    before = await aggregator.compute_stats("caller-1")

    await desire.add("caller-1", "I42")
    await ownership.add("caller-1", "I42")
    after = await aggregator.compute_stats("caller-1")

    assert after.owned_count == before.owned_count + 1
    assert after.wishlist_count == before.wishlist_count == 1
    assert after.total_items == 5
    assert after.completion_percentage == 20


@pytest.mark.asyncio
async def test_active_share_links_contribute_view_counts(
    session: AsyncSession, catalog: list[str], settings: AppSettings
) -> None:
    aggregator = _aggregator(session, settings)
    repository = ShareLinkRepository(session)
    registry = SharingRegistry(repository, settings=settings)
    caller = Caller(id="caller-1", display_name="Ash")

    ownership_link = await registry.create_or_refresh(
        caller, ShareKind.OWNERSHIP, "My shelf"
    )
    await registry.create_or_refresh(caller, ShareKind.DESIRE, "Wanted")
    await registry.record_view(ownership_link.id)
    await registry.record_view(ownership_link.id)
    await registry.set_active("caller-1", ShareKind.DESIRE, False)

    stats = await aggregator.compute_stats("caller-1")

    assert stats.ownership_share_views == 2
    assert stats.desire_share_views is None
