"""Repository package for database access layer.

Each repository wraps one table family and translates store connectivity
failures into domain errors via :func:`store_errors`.
"""

from figure_tracker.db.repositories.base import (
    SEARCHABLE_FIELDS,
    BaseRepository,
    store_errors,
)
from figure_tracker.db.repositories.catalog import CatalogRepository
from figure_tracker.db.repositories.records import DesireRepository, OwnershipRepository
from figure_tracker.db.repositories.share_links import ShareLinkRepository

__all__ = [
    "BaseRepository",
    "CatalogRepository",
    "DesireRepository",
    "OwnershipRepository",
    "SEARCHABLE_FIELDS",
    "ShareLinkRepository",
    "store_errors",
]
