"""FastAPI dependency wiring for backend services.

Separating dependency factories from service implementation modules keeps the
latter free of web-layer concerns, enabling easier reuse in tests and other
consumers (e.g. CLI utilities).  Every service receives its store handle
explicitly; none of them reads ambient request state.
"""

from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from figure_tracker.cache import CacheClient, get_cache_client
from figure_tracker.db.connection import get_db
from figure_tracker.db.repositories import (
    CatalogRepository,
    DesireRepository,
    OwnershipRepository,
    ShareLinkRepository,
)
from figure_tracker.services.catalog_service import CatalogService
from figure_tracker.services.public_view_service import PublicViewResolver
from figure_tracker.services.recommendation_service import RecommendationSampler
from figure_tracker.services.sharing_service import SharingRegistry
from figure_tracker.services.stats_service import StatsAggregator
from figure_tracker.services.tracking_service import DesireStore, OwnershipStore


def get_catalog_service(
    session: AsyncSession = Depends(get_db),
    cache: CacheClient = Depends(get_cache_client),
) -> CatalogService:
    return CatalogService(CatalogRepository(session), cache=cache)


def get_ownership_store(session: AsyncSession = Depends(get_db)) -> OwnershipStore:
    return OwnershipStore(OwnershipRepository(session), DesireRepository(session))


def get_desire_store(session: AsyncSession = Depends(get_db)) -> DesireStore:
    return DesireStore(DesireRepository(session))


def get_sharing_registry(session: AsyncSession = Depends(get_db)) -> SharingRegistry:
    return SharingRegistry(ShareLinkRepository(session))


def get_stats_aggregator(
    session: AsyncSession = Depends(get_db),
    catalog: CatalogService = Depends(get_catalog_service),
    ownership: OwnershipStore = Depends(get_ownership_store),
    desire: DesireStore = Depends(get_desire_store),
) -> StatsAggregator:
    return StatsAggregator(catalog, ownership, desire, ShareLinkRepository(session))


def get_recommendation_sampler(
    session: AsyncSession = Depends(get_db),
) -> RecommendationSampler:
    return RecommendationSampler(CatalogRepository(session))


def get_public_view_resolver(
    registry: SharingRegistry = Depends(get_sharing_registry),
    ownership: OwnershipStore = Depends(get_ownership_store),
) -> PublicViewResolver:
    return PublicViewResolver(registry, ownership)


__all__ = [
    "get_catalog_service",
    "get_desire_store",
    "get_ownership_store",
    "get_public_view_resolver",
    "get_recommendation_sampler",
    "get_sharing_registry",
    "get_stats_aggregator",
]
