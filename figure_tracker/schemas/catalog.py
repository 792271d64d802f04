"""Read models for catalog items."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict, Field


class CatalogItem(BaseModel):
    """Immutable catalog entry as exposed to the presentation layer."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., description="Stable catalog identifier")
    name: str
    character: str
    series: str | None = None
    sub_series: str | None = None
    kind: str | None = Field(None, description="Figure, card, yarn, band, ...")
    image_ref: str | None = Field(None, description="URL or path of the item image")
    release_date: date | None = None


class CatalogListResponse(BaseModel):
    """Container returned by catalog listing and search endpoints."""

    total: int = Field(..., ge=0)
    items: list[CatalogItem]
