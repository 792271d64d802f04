"""Dashboard endpoints: completion stats and recommendations."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from figure_tracker.api.identity import get_current_caller
from figure_tracker.schemas.stats import CollectionStats, RecommendationResponse
from figure_tracker.services.dependencies import (
    get_recommendation_sampler,
    get_stats_aggregator,
)
from figure_tracker.services.recommendation_service import RecommendationSampler
from figure_tracker.services.sharing_service import Caller
from figure_tracker.services.stats_service import StatsAggregator

router = APIRouter()


@router.get("/stats", response_model=CollectionStats)
async def get_stats(
    caller: Caller = Depends(get_current_caller),
    aggregator: StatsAggregator = Depends(get_stats_aggregator),
) -> CollectionStats:
    """Return catalog size, owned and wishlist counts, and completion percentage."""

    return await aggregator.compute_stats(caller.id)


@router.get("/recommendations", response_model=RecommendationResponse)
async def get_recommendations(
    limit: int = Query(9, description="Maximum number of items to return"),
    caller: Caller = Depends(get_current_caller),
    sampler: RecommendationSampler = Depends(get_recommendation_sampler),
) -> RecommendationResponse:
    """Random catalog items the caller does not own yet."""

    return await sampler.recommend(caller.id, limit)
