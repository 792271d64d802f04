"""Tests for the share link lifecycle."""

from __future__ import annotations

import re

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from figure_tracker.db.models import ShareKind, ShareLink
from figure_tracker.db.repositories import ShareLinkRepository
from figure_tracker.errors import NotFoundError
from figure_tracker.services.sharing_service import (
    Caller,
    SharingRegistry,
    generate_share_token,
)
from figure_tracker.settings import AppSettings

ASH = Caller(id="caller-1", display_name="Ash")


def _registry(session: AsyncSession, settings: AppSettings) -> SharingRegistry:
    return SharingRegistry(ShareLinkRepository(session), settings=settings)


def test_generated_tokens_are_url_safe_and_unique() -> None:
    tokens = {generate_share_token(24) for _ in range(200)}

    assert len(tokens) == 200
    assert all(re.fullmatch(r"[A-Za-z0-9_-]{32}", token) for token in tokens)


@pytest.mark.asyncio
async def test_create_returns_active_link_with_share_url(
    session: AsyncSession, settings: AppSettings
) -> None:
    registry = _registry(session, settings)

    link = await registry.create_or_refresh(
        ASH, ShareKind.OWNERSHIP, "My shelf", "Everything so far"
    )
    detail = registry.to_detail(link)

    assert link.active is True
    assert link.view_count == 0
    assert link.owner_display_name == "Ash"
    assert detail.share_url == f"https://figures.example/shared/ownership/{link.token}"
    assert detail.description == "Everything so far"


@pytest.mark.asyncio
async def test_refresh_keeps_token_and_updates_title(
    session: AsyncSession, settings: AppSettings
) -> None:
    registry = _registry(session, settings)

    first = await registry.create_or_refresh(ASH, ShareKind.OWNERSHIP, "My shelf")
    token = first.token
    second = await registry.create_or_refresh(
        Caller(id="caller-1"), ShareKind.OWNERSHIP, "Renamed shelf"
    )

    assert second.id == first.id
    assert second.token == token
    assert second.title == "Renamed shelf"
    # Missing display name on refresh keeps the captured one.
    assert second.owner_display_name == "Ash"


@pytest.mark.asyncio
async def test_disable_then_reshare_preserves_token_and_views(
    session: AsyncSession, settings: AppSettings
) -> None:
    registry = _registry(session, settings)

    link = await registry.create_or_refresh(ASH, ShareKind.OWNERSHIP, "My shelf")
    token = link.token
    await registry.record_view(link.id)
    await registry.record_view(link.id)

    disabled = await registry.set_active("caller-1", ShareKind.OWNERSHIP, False)
    assert disabled.active is False
    assert disabled.view_count == 2

    reshared = await registry.create_or_refresh(ASH, ShareKind.OWNERSHIP, "Back again")

    assert reshared.active is True
    assert reshared.token == token
    assert reshared.view_count == 2

    await registry.set_active("caller-1", ShareKind.OWNERSHIP, False)
    enabled = await registry.set_active("caller-1", ShareKind.OWNERSHIP, True)
    assert enabled.token == token


@pytest.mark.asyncio
async def test_set_active_without_link_raises_not_found(
    session: AsyncSession, settings: AppSettings
) -> None:
    registry = _registry(session, settings)

    with pytest.raises(NotFoundError):
        await registry.set_active("caller-1", ShareKind.DESIRE, True)


@pytest.mark.asyncio
async def test_set_active_to_current_state_is_a_no_op(
    session: AsyncSession, settings: AppSettings
) -> None:
    registry = _registry(session, settings)
    link = await registry.create_or_refresh(ASH, ShareKind.DESIRE, "Wanted")

    same = await registry.set_active("caller-1", ShareKind.DESIRE, True)

    assert same.id == link.id
    assert same.active is True


@pytest.mark.asyncio
async def test_one_link_per_caller_and_kind(
    session: AsyncSession, settings: AppSettings
) -> None:
    registry = _registry(session, settings)

    ownership = await registry.create_or_refresh(ASH, ShareKind.OWNERSHIP, "Shelf")
    desire = await registry.create_or_refresh(ASH, ShareKind.DESIRE, "Wanted")
    other = await registry.create_or_refresh(
        Caller(id="caller-2"), ShareKind.OWNERSHIP, "Shelf"
    )

    assert len({ownership.token, desire.token, other.token}) == 3
    assert await registry.get("caller-1", ShareKind.OWNERSHIP) is ownership


@pytest.mark.asyncio
async def test_unique_constraint_rejects_second_row_for_same_kind(
    session: AsyncSession,
) -> None:
    repository = ShareLinkRepository(session)
    await repository.insert(
        ShareLink(
            caller_id="caller-1",
            kind=ShareKind.OWNERSHIP,
            token=generate_share_token(24),
            title="First",
        )
    )

    with pytest.raises(IntegrityError):
        await repository.insert(
            ShareLink(
                caller_id="caller-1",
                kind=ShareKind.OWNERSHIP,
                token=generate_share_token(24),
                title="Second",
            )
        )


@pytest.mark.asyncio
async def test_lost_creation_race_refreshes_the_winner(
    session: AsyncSession, settings: AppSettings
) -> None:
    """A concurrent create that loses on the unique constraint reuses the row."""

    class RacingRepository(ShareLinkRepository):
        def __init__(self, db_session: AsyncSession) -> None:
            super().__init__(db_session)
            self._first_lookup = True

        async def get_for_caller(self, caller_id, kind):
            if self._first_lookup:
                # Simulate the row not being visible yet when the request began.
                self._first_lookup = False
                return None
            return await super().get_for_caller(caller_id, kind)

    winner = await _registry(session, settings).create_or_refresh(
        ASH, ShareKind.OWNERSHIP, "Winner"
    )
    racing = SharingRegistry(RacingRepository(session), settings=settings)

    link = await racing.create_or_refresh(ASH, ShareKind.OWNERSHIP, "Loser")

    assert link.id == winner.id
    assert link.token == winner.token
    assert link.title == "Loser"


@pytest.mark.asyncio
async def test_resolve_returns_inactive_links(
    session: AsyncSession, settings: AppSettings
) -> None:
    registry = _registry(session, settings)
    link = await registry.create_or_refresh(ASH, ShareKind.OWNERSHIP, "Shelf")
    await registry.set_active("caller-1", ShareKind.OWNERSHIP, False)

    resolved = await registry.resolve(link.token)

    assert resolved is not None
    assert resolved.active is False
    assert await registry.resolve("unknown-token-value") is None
