"""FastAPI routers for the caller's collection and wishlist."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from figure_tracker.api.identity import get_current_caller
from figure_tracker.schemas.tracking import (
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
from figure_tracker.services.dependencies import get_desire_store, get_ownership_store
from figure_tracker.services.sharing_service import Caller
from figure_tracker.services.tracking_service import DesireStore, OwnershipStore

collection_router = APIRouter()
wishlist_router = APIRouter()


@collection_router.get("", response_model=CollectionListResponse)
async def list_collection(
    caller: Caller = Depends(get_current_caller),
    store: OwnershipStore = Depends(get_ownership_store),
) -> CollectionListResponse:
    """Return the caller's owned items, most recently acquired first."""

    return await store.list(caller.id)


@collection_router.post(
    "",
    response_model=CollectionEntry,
    status_code=status.HTTP_201_CREATED,
)
async def add_to_collection(
    payload: OwnershipCreate,
    caller: Caller = Depends(get_current_caller),
    store: OwnershipStore = Depends(get_ownership_store),
) -> CollectionEntry:
    """Record ownership; a matching wishlist entry is dropped afterwards."""

    metadata = OwnershipMetadata.model_validate(payload.model_dump(exclude={"item_id"}))
    return await store.add(caller.id, payload.item_id, metadata)


@collection_router.get("/{item_id}", response_model=OwnershipStatus)
async def check_ownership(
    item_id: str,
    caller: Caller = Depends(get_current_caller),
    store: OwnershipStore = Depends(get_ownership_store),
) -> OwnershipStatus:
    return OwnershipStatus(item_id=item_id, owned=await store.contains(caller.id, item_id))


@collection_router.delete("/{item_id}", response_model=RemovalResult)
async def remove_from_collection(
    item_id: str,
    caller: Caller = Depends(get_current_caller),
    store: OwnershipStore = Depends(get_ownership_store),
) -> RemovalResult:
    """Idempotent removal; ``removed`` reports whether a row existed."""

    return await store.remove(caller.id, item_id)


@wishlist_router.get("", response_model=WishlistListResponse)
async def list_wishlist(
    caller: Caller = Depends(get_current_caller),
    store: DesireStore = Depends(get_desire_store),
) -> WishlistListResponse:
    return await store.list(caller.id)


@wishlist_router.post(
    "",
    response_model=WishlistEntry,
    status_code=status.HTTP_201_CREATED,
)
async def add_to_wishlist(
    payload: DesireCreate,
    caller: Caller = Depends(get_current_caller),
    store: DesireStore = Depends(get_desire_store),
) -> WishlistEntry:
    metadata = DesireMetadata.model_validate(payload.model_dump(exclude={"item_id"}))
    return await store.add(caller.id, payload.item_id, metadata)


@wishlist_router.delete("/{item_id}", response_model=RemovalResult)
async def remove_from_wishlist(
    item_id: str,
    caller: Caller = Depends(get_current_caller),
    store: DesireStore = Depends(get_desire_store),
) -> RemovalResult:
    return await store.remove(caller.id, item_id)
