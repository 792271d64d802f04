"""Pydantic schemas for API responses."""

from figure_tracker.schemas.catalog import CatalogItem, CatalogListResponse  # noqa: F401
from figure_tracker.schemas.sharing import (  # noqa: F401
    PublicCollectionEntry,
    PublicCollectionView,
    ShareLinkDetail,
    ShareLinkToggle,
    ShareLinkUpsert,
)
from figure_tracker.schemas.stats import (  # noqa: F401
    CollectionStats,
    RecommendationResponse,
)
from figure_tracker.schemas.tracking import (  # noqa: F401
    CollectionEntry,
    CollectionListResponse,
    DesireCreate,
    DesireMetadata,
    OwnershipCreate,
    OwnershipMetadata,
    OwnershipStatus,
    RemovalResult,
    WishlistEntry,
    WishlistListResponse,
)
