#!/usr/bin/env python
"""Initialize database tables for local SQLite development.

PostgreSQL deployments should run ``alembic upgrade head`` instead.
"""
import asyncio

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from figure_tracker.db.connection import create_engine
from figure_tracker.db.models import Base
from figure_tracker.main import validate_environment


async def init_db() -> None:
    engine = create_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    await engine.dispose()
    print("✓ Database tables created successfully")


if __name__ == "__main__":
    validate_environment()
    asyncio.run(init_db())
