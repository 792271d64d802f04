"""Tests for random recommendations of unowned items."""

from __future__ import annotations

import random

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from figure_tracker.db.models import Item, OwnershipRecord
from figure_tracker.db.repositories import CatalogRepository
from figure_tracker.errors import InvalidArgumentError
from figure_tracker.services.recommendation_service import (
    MAX_RECOMMENDATIONS,
    RecommendationSampler,
)
from figure_tracker.settings import AppSettings


async def _own(session: AsyncSession, caller_id: str, *item_ids: str) -> None:
    session.add_all(
        [OwnershipRecord(caller_id=caller_id, item_id=item_id) for item_id in item_ids]
    )
    await session.commit()


@pytest.mark.asyncio
async def test_returns_exactly_the_unowned_items_when_fewer_than_limit(
    session: AsyncSession, catalog: list[str], settings: AppSettings
) -> None:
    await _own(session, "caller-1", "I42", "I07", "I13")
    sampler = RecommendationSampler(CatalogRepository(session), settings=settings)

    items = await sampler.sample("caller-1", 9)

    assert sorted(item.id for item in items) == ["I21", "I99"]


@pytest.mark.asyncio
async def test_fully_collected_caller_gets_empty_sample(
    session: AsyncSession, catalog: list[str], settings: AppSettings
) -> None:
    await _own(session, "caller-1", *catalog)
    sampler = RecommendationSampler(CatalogRepository(session), settings=settings)

    response = await sampler.recommend("caller-1", 3)

    assert response.items == []
    assert response.fully_collected is True
    assert response.requested == 3


@pytest.mark.asyncio
@pytest.mark.parametrize("limit", [-1, MAX_RECOMMENDATIONS + 1])
async def test_limit_outside_range_is_rejected(
    session: AsyncSession, catalog: list[str], settings: AppSettings, limit: int
) -> None:
    sampler = RecommendationSampler(CatalogRepository(session), settings=settings)

    with pytest.raises(InvalidArgumentError):
        await sampler.sample("caller-1", limit)


@pytest.mark.asyncio
async def test_zero_limit_returns_empty_sample(
    session: AsyncSession, catalog: list[str], settings: AppSettings
) -> None:
    sampler = RecommendationSampler(CatalogRepository(session), settings=settings)

    response = await sampler.recommend("caller-1", 0)

    assert response.items == []
    assert response.requested == 0
    assert response.fully_collected is False


@pytest.mark.asyncio
async def test_large_catalog_sample_excludes_owned_and_has_no_duplicates(
    session: AsyncSession, settings: AppSettings
) -> None:
    session.add_all(
        [
            Item(id=f"X{index:04d}", name=f"Figure {index}", character=f"Hero {index}")
            for index in range(120)
        ]
    )
    await session.commit()
    owned = [f"X{index:04d}" for index in range(0, 120, 2)]
    await _own(session, "caller-1", *owned)

    sampler = RecommendationSampler(
        CatalogRepository(session), settings=settings, rng=random.Random(7)
    )

    for _ in range(5):
        items = await sampler.sample("caller-1", 10)
        ids = [item.id for item in items]
        assert len(ids) == 10
        assert len(set(ids)) == 10
        assert not set(ids) & set(owned)


@pytest.mark.asyncio
async def test_candidates_span_the_whole_unowned_range(
    session: AsyncSession, settings: AppSettings
) -> None:
    """Items with the highest ids are sampled as readily as the lowest ones."""

    session.add_all(
        [
            Item(id=f"Y{index:04d}", name=f"Figure {index}", character=f"Hero {index}")
            for index in range(200)
        ]
    )
    await session.commit()

    sampler = RecommendationSampler(
        CatalogRepository(session), settings=settings, rng=random.Random(1234)
    )

    seen: set[str] = set()
    for _ in range(40):
        seen.update(item.id for item in await sampler.sample("caller-1", 5))

    lowest = {f"Y{index:04d}" for index in range(15)}
    highest = {f"Y{index:04d}" for index in range(185, 200)}
    assert seen & lowest
    assert seen & highest
    assert seen - lowest - highest


@pytest.mark.asyncio
async def test_unowned_positions_skip_owned_items(
    session: AsyncSession, catalog: list[str]
) -> None:
    await _own(session, "caller-1", "I13")
    repository = CatalogRepository(session)

    # Unowned ids in order: I07, I21, I42, I99.
    items = await repository.unowned_at_positions("caller-1", [3, 0])

    assert [item.id for item in items] == ["I07", "I99"]
    assert await repository.unowned_at_positions("caller-1", []) == []


def test_window_size_is_oversampled_and_capped(settings: AppSettings) -> None:
    sampler = RecommendationSampler(None, settings=settings)  # type: ignore[arg-type]
    capped = RecommendationSampler(
        None,  # type: ignore[arg-type]
        settings=settings.model_copy(update={"recommendation_window_cap": 20}),
    )

    assert sampler._window_size(9) == 27
    assert capped._window_size(9) == 20
    assert capped._window_size(50) == 50
