"""Schemas for share links and the anonymous public view."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from figure_tracker.db.models import ShareKind
from figure_tracker.schemas.catalog import CatalogItem


class ShareLinkUpsert(BaseModel):
    """Payload for creating or refreshing the caller's share link."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=1024)

    @field_validator("title")
    @classmethod
    def _trim_title(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("Title must not be blank once whitespace is removed")
        return cleaned

    @field_validator("description")
    @classmethod
    def _trim_description(cls, value: str | None) -> str | None:
        if value is None:
            return None
        cleaned = value.strip()
        return cleaned or None


class ShareLinkToggle(BaseModel):
    active: bool


class ShareLinkDetail(BaseModel):
    """Owner-facing view of a share link, including the public URL."""

    id: int
    kind: ShareKind
    token: str
    title: str
    description: str | None = None
    active: bool
    view_count: int = Field(..., ge=0)
    created_at: datetime
    share_url: str


class PublicCollectionEntry(BaseModel):
    """Ownership entry stripped of anything that identifies the owner."""

    item: CatalogItem
    acquired_at: datetime
    condition: str
    note: str
    is_favorite: bool


class PublicCollectionView(BaseModel):
    """Read-only projection served to anonymous token holders."""

    kind: ShareKind
    title: str
    description: str | None = None
    owner_display_name: str
    view_count: int = Field(..., ge=0)
    shared_since: datetime
    total: int
    entries: list[PublicCollectionEntry]
