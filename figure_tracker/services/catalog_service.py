"""CatalogReader: cached, read-only access to the figure catalog."""

from __future__ import annotations

from figure_tracker.cache import (
    CacheClient,
    catalog_count_key,
    catalog_item_key,
    catalog_list_key,
    catalog_search_key,
)
from figure_tracker.db.repositories import CatalogRepository
from figure_tracker.errors import NotFoundError
from figure_tracker.schemas.catalog import CatalogItem, CatalogListResponse
from figure_tracker.services.caching import CacheableService, cached
from figure_tracker.settings import AppSettings, get_settings


def _catalog_ttl(service: "CatalogService") -> int:
    return service._settings.catalog_cache_ttl_seconds


def _dump_list(response: CatalogListResponse) -> dict:
    return response.model_dump(mode="json")


class CatalogService(CacheableService):
    """Expose catalog reads; the catalog is immutable from this service's view."""

    def __init__(
        self,
        repository: CatalogRepository,
        *,
        cache: CacheClient | None = None,
        settings: AppSettings | None = None,
    ) -> None:
        super().__init__(cache=cache)
        self._repository = repository
        self._settings = settings or get_settings()

    @cached(
        lambda _self: catalog_list_key(),
        ttl=_catalog_ttl,
        serializer=_dump_list,
        deserializer=CatalogListResponse.model_validate,
    )
    async def list_items(self) -> CatalogListResponse:
        """Every catalog item ordered by character name."""

        items = await self._repository.list_items()
        return CatalogListResponse(
            total=len(items),
            items=[CatalogItem.model_validate(item) for item in items],
        )

    @cached(
        lambda _self, item_id: catalog_item_key(item_id),
        ttl=_catalog_ttl,
        serializer=lambda item: item.model_dump(mode="json"),
        deserializer=CatalogItem.model_validate,
    )
    async def get_item(self, item_id: str) -> CatalogItem:
        item = await self._repository.get_item(item_id)
        if item is None:
            raise NotFoundError(f"Item '{item_id}' does not exist in the catalog")
        return CatalogItem.model_validate(item)

    @cached(lambda _self: catalog_count_key(), ttl=_catalog_ttl)
    async def count_items(self) -> int:
        return await self._repository.count_items()

    @cached(
        lambda _self, term, field="character": catalog_search_key(term, field),
        ttl=_catalog_ttl,
        serializer=_dump_list,
        deserializer=CatalogListResponse.model_validate,
    )
    async def search(self, term: str, field: str = "character") -> CatalogListResponse:
        """Case-insensitive substring search over one allow-listed field.

        Raises :class:`~figure_tracker.errors.InvalidArgumentError` for fields
        outside ``character``, ``series``, ``sub_series`` and ``name``.
        """

        items = await self._repository.search(term, field)
        return CatalogListResponse(
            total=len(items),
            items=[CatalogItem.model_validate(item) for item in items],
        )


__all__ = ["CatalogService"]
