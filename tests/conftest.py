"""Shared fixtures for the figure tracker test-suite.

Every database test runs against a fresh in-memory SQLite database seeded with
a small catalog.  The in-process catalog cache is cleared around each test so
cached listings never leak between databases.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import AsyncIterator, Iterator
from datetime import date
from typing import Any

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from tests import _ensure_repo_on_path

import figure_tracker.services.caching as caching_module
from figure_tracker.db.models import Base, Item
from figure_tracker.settings import AppSettings


class _AsyncioCompatPlugin:
    """Minimal fallback runner for ``async def`` tests."""

    def pytest_pyfunc_call(self, pyfuncitem: Any) -> bool | None:
        """Execute coroutine-based tests when ``pytest-asyncio`` is unavailable."""

        test_function = pyfuncitem.obj
        if inspect.iscoroutinefunction(test_function):
            asyncio.run(test_function(**pyfuncitem.funcargs))
            return True
        return None


def pytest_configure(config: pytest.Config) -> None:
    """Hook executed by pytest prior to running any tests."""

    _ensure_repo_on_path()

    if not config.pluginmanager.hasplugin("asyncio"):
        config.addinivalue_line(
            "markers",
            "asyncio: fallback marker handled by tests.conftest when pytest-asyncio is absent",
        )
        config.pluginmanager.register(_AsyncioCompatPlugin(), name="asyncio_compat")


CATALOG_ROWS: list[dict[str, Any]] = [
    {
        "id": "I42",
        "name": "Mario",
        "character": "Mario",
        "series": "Super Mario",
        "sub_series": "Super Smash Bros.",
        "kind": "Figure",
        "release_date": date(2014, 11, 21),
    },
    {
        "id": "I07",
        "name": "Link",
        "character": "Link",
        "series": "The Legend of Zelda",
        "sub_series": "Super Smash Bros.",
        "kind": "Figure",
        "release_date": date(2014, 11, 21),
    },
    {
        "id": "I13",
        "name": "Zelda",
        "character": "Zelda",
        "series": "The Legend of Zelda",
        "sub_series": "Super Smash Bros.",
        "kind": "Figure",
        "release_date": date(2014, 12, 14),
    },
    {
        "id": "I21",
        "name": "Isabelle - Summer Outfit",
        "character": "Isabelle",
        "series": "Animal Crossing",
        "sub_series": "Animal Crossing",
        "kind": "Figure",
        "release_date": date(2015, 11, 13),
    },
    {
        "id": "I99",
        "name": "Yarn Yoshi 100%",
        "character": "Yoshi",
        "series": "Yoshi's Woolly World",
        "sub_series": "Yoshi's Woolly World",
        "kind": "Yarn",
        "release_date": None,
    },
]


@pytest.fixture(autouse=True)
def reset_local_cache() -> Iterator[None]:
    """Drop in-process cache entries before and after each test."""

    caching_module._local_cache.clear()
    yield
    caching_module._local_cache.clear()


@pytest.fixture
def settings() -> AppSettings:
    """Isolated settings instance with deterministic tuning values."""

    return AppSettings(
        public_site_url="https://figures.example",
        share_token_bytes=24,
        recommendation_oversample_factor=3,
        recommendation_window_cap=500,
        catalog_cache_ttl_seconds=600,
    )


@pytest_asyncio.fixture
async def session() -> AsyncIterator[AsyncSession]:
    """Yield an in-memory SQLite session with freshly created tables."""

    engine = create_async_engine("sqlite+aiosqlite:///:memory:", future=True)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    session_factory = async_sessionmaker(engine, expire_on_commit=False)
    async with session_factory() as db_session:
        yield db_session
        if db_session.in_transaction():
            await db_session.rollback()
    await engine.dispose()


@pytest_asyncio.fixture
async def catalog(session: AsyncSession) -> list[str]:
    """Seed the five-item catalog and return the item ids."""

    session.add_all([Item(**row) for row in CATALOG_ROWS])
    await session.commit()
    return [row["id"] for row in CATALOG_ROWS]
