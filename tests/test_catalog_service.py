"""Unit tests for catalog reads, search and caching."""

from __future__ import annotations

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from figure_tracker.cache import (
    catalog_count_key,
    catalog_item_key,
    catalog_list_key,
    catalog_search_key,
)
from figure_tracker.db.models import Item
from figure_tracker.db.repositories import CatalogRepository
from figure_tracker.errors import InvalidArgumentError, NotFoundError
from figure_tracker.services import caching as caching_module
from figure_tracker.services.caching import LocalTTLCache
from figure_tracker.services.catalog_service import CatalogService
from figure_tracker.settings import AppSettings


class MemoryCache:
    """In-memory cache double that mimics :class:`figure_tracker.cache.CacheClient`."""

    def __init__(self) -> None:
        self.store: dict[str, object] = {}
        self.ttls: dict[str, int | None] = {}

    async def get_json(self, key: str) -> object | None:
        return self.store.get(key)

    async def set_json(self, key: str, value: object, ttl: int | None = None) -> None:
        self.store[key] = value
        self.ttls[key] = ttl


def _service(
    session: AsyncSession,
    settings: AppSettings,
    cache: MemoryCache | None = None,
) -> CatalogService:
    return CatalogService(CatalogRepository(session), cache=cache, settings=settings)


@pytest.mark.asyncio
async def test_list_items_orders_by_character(
    session: AsyncSession, catalog: list[str], settings: AppSettings
) -> None:
    listing = await _service(session, settings).list_items()

    assert listing.total == 5
    assert [item.character for item in listing.items] == [
        "Isabelle",
        "Link",
        "Mario",
        "Yoshi",
        "Zelda",
    ]


@pytest.mark.asyncio
async def test_get_item_and_missing_item(
    session: AsyncSession, catalog: list[str], settings: AppSettings
) -> None:
    service = _service(session, settings)

    item = await service.get_item("I13")
    assert item.name == "Zelda"
    assert item.series == "The Legend of Zelda"

    with pytest.raises(NotFoundError):
        await service.get_item("missing")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("term", "field", "expected"),
    [
        ("zel", "character", {"I13"}),
        ("LEGEND", "series", {"I07", "I13"}),
        ("smash", "sub_series", {"I42", "I07", "I13"}),
        ("summer", "name", {"I21"}),
        ("nobody", "character", set()),
    ],
)
async def test_search_is_case_insensitive_per_field(
    session: AsyncSession,
    catalog: list[str],
    settings: AppSettings,
    term: str,
    field: str,
    expected: set[str],
) -> None:
    result = await _service(session, settings).search(term, field)

    assert {item.id for item in result.items} == expected
    assert result.total == len(expected)


@pytest.mark.asyncio
async def test_search_treats_wildcards_literally(
    session: AsyncSession, catalog: list[str], settings: AppSettings
) -> None:
    service = _service(session, settings)

    percent = await service.search("100%", "name")
    underscore = await service.search("_", "name")

    assert [item.id for item in percent.items] == ["I99"]
    assert underscore.total == 0


@pytest.mark.asyncio
async def test_search_rejects_unknown_field(
    session: AsyncSession, catalog: list[str], settings: AppSettings
) -> None:
    with pytest.raises(InvalidArgumentError):
        await _service(session, settings).search("mario", "caller_id")


@pytest.mark.asyncio
async def test_catalog_reads_populate_the_cache(
    session: AsyncSession, catalog: list[str], settings: AppSettings
) -> None:
    cache = MemoryCache()
    service = _service(session, settings, cache)

    await service.list_items()
    await service.count_items()
    await service.get_item("I42")
    await service.search("Link", "character")

    assert cache.store[catalog_list_key()]["total"] == 5
    assert cache.store[catalog_count_key()] == 5
    assert cache.store[catalog_item_key("I42")]["name"] == "Mario"
    assert catalog_search_key("Link", "character") in cache.store
    assert cache.ttls[catalog_list_key()] == settings.catalog_cache_ttl_seconds


@pytest.mark.asyncio
async def test_cached_listing_is_served_without_the_store(
    session: AsyncSession, catalog: list[str], settings: AppSettings
) -> None:
    cache = MemoryCache()
    service = _service(session, settings, cache)
    await service.list_items()

    session.add(Item(id="I100", name="Kirby", character="Kirby"))
    await session.commit()

    cached = await service.list_items()
    assert cached.total == 5

    uncached = await _service(
        session, settings.model_copy(update={"catalog_cache_ttl_seconds": 0})
    ).list_items()
    assert uncached.total == 6


def test_search_key_normalizes_case_and_whitespace() -> None:
    assert catalog_search_key(" Mario ", "Character") == catalog_search_key(
        "mario", "character"
    )
    assert catalog_search_key("mario", "series") != catalog_search_key(
        "mario", "character"
    )


def test_local_cache_entries_expire(monkeypatch: pytest.MonkeyPatch) -> None:
    now = {"value": 100.0}
    monkeypatch.setattr(caching_module, "monotonic", lambda: now["value"])
    local = LocalTTLCache()

    local.set("catalog:count", 5, ttl=60)
    local.set("catalog:list", {"total": 5})

    now["value"] = 159.0
    assert local.get("catalog:count") == 5
    now["value"] = 160.0
    assert local.get("catalog:count") is None
    # Entries without a TTL fall back to five minutes.
    assert local.get("catalog:list") == {"total": 5}
    now["value"] = 400.0
    assert local.get("catalog:list") is None


@pytest.mark.asyncio
async def test_listing_survives_without_redis_via_local_tier(
    session: AsyncSession, catalog: list[str], settings: AppSettings
) -> None:
    service = _service(session, settings)
    await service.list_items()

    session.add(Item(id="I101", name="Pikachu", character="Pikachu"))
    await session.commit()

    assert (await service.list_items()).total == 5
