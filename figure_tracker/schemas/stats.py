"""Schemas for dashboard statistics and recommendations."""

from __future__ import annotations

from pydantic import BaseModel, Field

from figure_tracker.schemas.catalog import CatalogItem


class CollectionStats(BaseModel):
    """Completion metrics for one caller.

    ``completion_percentage`` is ``round(owned_count / total_items * 100)`` and
    is ``0`` for an empty catalog.  The share view counts are only present
    while the corresponding share link is active.
    """

    total_items: int = Field(..., ge=0)
    owned_count: int = Field(..., ge=0)
    wishlist_count: int = Field(..., ge=0)
    completion_percentage: int = Field(..., ge=0)
    ownership_share_views: int | None = Field(
        None, description="View count of the active collection share link"
    )
    desire_share_views: int | None = Field(
        None, description="View count of the active wishlist share link"
    )


class RecommendationResponse(BaseModel):
    """Random sample of catalog items the caller does not own yet."""

    requested: int = Field(..., ge=0)
    items: list[CatalogItem]
    fully_collected: bool = Field(
        ..., description="True when the caller already owns every catalog item"
    )
