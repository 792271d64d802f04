"""Share link management for owners and the anonymous public read path."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from figure_tracker.api.identity import get_current_caller
from figure_tracker.db.models import ShareKind
from figure_tracker.schemas.sharing import (
    PublicCollectionView,
    ShareLinkDetail,
    ShareLinkToggle,
    ShareLinkUpsert,
)
from figure_tracker.services.dependencies import (
    get_public_view_resolver,
    get_sharing_registry,
)
from figure_tracker.services.public_view_service import PublicViewResolver
from figure_tracker.services.sharing_service import Caller, SharingRegistry

router = APIRouter()
public_router = APIRouter()


@router.get("/{kind}", response_model=ShareLinkDetail)
async def get_share_link(
    kind: ShareKind,
    caller: Caller = Depends(get_current_caller),
    registry: SharingRegistry = Depends(get_sharing_registry),
) -> ShareLinkDetail:
    """Return the caller's link for ``kind`` whether or not it is active."""

    link = await registry.get(caller.id, kind)
    if link is None:
        raise HTTPException(status_code=404, detail="No share link for this resource")
    return registry.to_detail(link)


@router.put("/{kind}", response_model=ShareLinkDetail)
async def create_or_refresh_share_link(
    kind: ShareKind,
    payload: ShareLinkUpsert,
    caller: Caller = Depends(get_current_caller),
    registry: SharingRegistry = Depends(get_sharing_registry),
) -> ShareLinkDetail:
    """Create the link, or reactivate/retitle the existing one without a new token."""

    link = await registry.create_or_refresh(
        caller, kind, payload.title, payload.description
    )
    return registry.to_detail(link)


@router.patch("/{kind}", response_model=ShareLinkDetail)
async def toggle_share_link(
    kind: ShareKind,
    payload: ShareLinkToggle,
    caller: Caller = Depends(get_current_caller),
    registry: SharingRegistry = Depends(get_sharing_registry),
) -> ShareLinkDetail:
    """Enable or disable the link; view counts survive either way."""

    link = await registry.set_active(caller.id, kind, payload.active)
    return registry.to_detail(link)


@public_router.get(
    "/{kind}/{token}",
    response_model=PublicCollectionView,
    status_code=status.HTTP_200_OK,
)
async def view_shared(
    kind: ShareKind,
    token: str,
    resolver: PublicViewResolver = Depends(get_public_view_resolver),
) -> PublicCollectionView:
    """Anonymous, read-only snapshot addressed by share token."""

    return await resolver.view_by_token(token, kind)
