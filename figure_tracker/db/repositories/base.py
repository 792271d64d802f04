"""Base repository utilities shared across all repository implementations.

Every repository runs its statements inside :func:`store_errors`, which turns
connectivity failures raised by SQLAlchemy into the domain's
:class:`~figure_tracker.errors.StoreUnavailableError`.  Integrity violations are
left untouched because each repository decides what a uniqueness conflict
means for its own table.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError
from sqlalchemy.exc import TimeoutError as SQLAlchemyTimeoutError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.expression import Executable

from figure_tracker.errors import StoreUnavailableError

logger = logging.getLogger(__name__)

# Columns a caller may search the catalog by.  Keys are the public field names.
SEARCHABLE_FIELDS: tuple[str, ...] = ("character", "series", "sub_series", "name")


@asynccontextmanager
async def store_errors(operation: str) -> AsyncIterator[None]:
    """Translate store connectivity failures into ``StoreUnavailableError``."""

    try:
        yield
    except IntegrityError:
        raise
    except (OperationalError, DBAPIError, SQLAlchemyTimeoutError) as exc:
        logger.error("Store unavailable during %s: %s", operation, exc)
        raise StoreUnavailableError(
            f"The data store could not complete '{operation}'. Please retry."
        ) from exc


class BaseRepository:
    """Base class for repositories holding the shared async session."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def _commit(self, operation: str) -> None:
        """Commit the current unit of work, rolling back when it fails."""

        try:
            async with store_errors(operation):
                await self._session.commit()
        except Exception:
            await self._session.rollback()
            raise

    async def _write(self, statement: Executable, operation: str) -> int:
        """Execute one write, commit it and return the affected row count.

        Either step failing rolls the session back: a failed statement leaves
        a PostgreSQL transaction aborted, and later reads on this session need
        it cleared.
        """

        try:
            async with store_errors(operation):
                result = await self._session.execute(statement)
                rowcount = result.rowcount
                await self._session.commit()
        except Exception:
            await self._session.rollback()
            raise
        return rowcount


__all__ = ["BaseRepository", "SEARCHABLE_FIELDS", "store_errors"]
