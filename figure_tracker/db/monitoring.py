"""Slow query logging for the async engine."""

import logging
import time
from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine

logger = logging.getLogger(__name__)

_MAX_LOGGED_STATEMENT = 500


def setup_query_monitoring(engine: AsyncEngine, slow_query_threshold: float) -> None:
    """Log a warning for every statement slower than ``slow_query_threshold`` seconds."""

    @event.listens_for(engine.sync_engine, "before_cursor_execute")
    def receive_before_cursor_execute(
        conn: Any,
        cursor: Any,
        statement: str,
        parameters: Any,
        context: Any,
        executemany: bool,
    ) -> None:
        conn.info.setdefault("query_start_time", []).append(time.perf_counter())

    @event.listens_for(engine.sync_engine, "after_cursor_execute")
    def receive_after_cursor_execute(
        conn: Any,
        cursor: Any,
        statement: str,
        parameters: Any,
        context: Any,
        executemany: bool,
    ) -> None:
        total = time.perf_counter() - conn.info["query_start_time"].pop()
        if total <= slow_query_threshold:
            return

        truncated_statement = statement[:_MAX_LOGGED_STATEMENT]
        if len(statement) > _MAX_LOGGED_STATEMENT:
            truncated_statement += "..."
        logger.warning(
            f"Slow query detected ({total:.3f}s): {truncated_statement}",
            extra={
                "duration_seconds": total,
                "threshold_seconds": slow_query_threshold,
            },
        )

    logger.info(
        f"Query performance monitoring enabled (slow query threshold: {slow_query_threshold}s)"
    )
