"""Pydantic schemas for collection (ownership) and wishlist (desire) records."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from figure_tracker.schemas.catalog import CatalogItem


class OwnershipMetadata(BaseModel):
    """Optional details captured when an item joins a collection."""

    condition: str = Field(
        "mint",
        min_length=1,
        max_length=32,
        description="Free-form condition tag such as 'mint', 'loose' or 'damaged box'.",
    )
    note: str = Field("", max_length=1024)
    is_favorite: bool = False
    acquired_at: datetime | None = Field(
        None,
        description="When the item was acquired; defaults to the time of the request.",
    )

    @field_validator("condition")
    @classmethod
    def _normalize_condition(cls, value: str) -> str:
        cleaned = value.strip().lower()
        if not cleaned:
            raise ValueError("Condition must not be blank once whitespace is removed")
        return cleaned


class DesireMetadata(BaseModel):
    """Optional details captured when an item joins a wishlist."""

    priority: int = Field(
        3,
        ge=1,
        le=5,
        description="Ordinal rank from 1 (someday) to 5 (must have).",
    )
    note: str = Field("", max_length=1024)


class OwnershipCreate(OwnershipMetadata):
    """Request body for adding an item to the caller's collection."""

    item_id: str = Field(..., min_length=1, max_length=64)


class DesireCreate(DesireMetadata):
    """Request body for adding an item to the caller's wishlist."""

    item_id: str = Field(..., min_length=1, max_length=64)


class CollectionEntry(BaseModel):
    """Ownership record joined with its catalog item."""

    item: CatalogItem
    acquired_at: datetime
    condition: str
    note: str
    is_favorite: bool


class WishlistEntry(BaseModel):
    """Desire record joined with its catalog item."""

    item: CatalogItem
    created_at: datetime
    priority: int
    note: str


class CollectionListResponse(BaseModel):
    total: int
    entries: list[CollectionEntry]


class WishlistListResponse(BaseModel):
    total: int
    entries: list[WishlistEntry]


class RemovalResult(BaseModel):
    """Outcome of an idempotent removal; ``removed`` is false when nothing matched."""

    item_id: str
    removed: bool


class OwnershipStatus(BaseModel):
    item_id: str
    owned: bool
