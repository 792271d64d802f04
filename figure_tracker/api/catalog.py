"""FastAPI router exposing read-only catalog endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from figure_tracker.schemas.catalog import CatalogItem, CatalogListResponse
from figure_tracker.services.catalog_service import CatalogService
from figure_tracker.services.dependencies import get_catalog_service

router = APIRouter()


@router.get("/items", response_model=CatalogListResponse)
async def list_items(
    service: CatalogService = Depends(get_catalog_service),
) -> CatalogListResponse:
    """Return the whole catalog ordered by character."""

    return await service.list_items()


@router.get("/search", response_model=CatalogListResponse)
async def search_items(
    term: str = Query(..., min_length=1, max_length=100),
    field: str = Query(
        "character",
        description="One of character, series, sub_series or name",
    ),
    service: CatalogService = Depends(get_catalog_service),
) -> CatalogListResponse:
    """Case-insensitive substring search over a single catalog field."""

    return await service.search(term, field)


@router.get("/items/{item_id}", response_model=CatalogItem)
async def get_item(
    item_id: str,
    service: CatalogService = Depends(get_catalog_service),
) -> CatalogItem:
    return await service.get_item(item_id)
