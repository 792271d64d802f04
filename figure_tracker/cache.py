from __future__ import annotations

import asyncio
import json
import logging
from hashlib import sha256
from time import monotonic
from typing import Any

from redis.asyncio import Redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

from figure_tracker.settings import get_settings

logger = logging.getLogger(__name__)

_DEFAULT_TTL_SECONDS = 600
_CATALOG_LIST_KEY = "catalog:list"
_CATALOG_COUNT_KEY = "catalog:count"
_CATALOG_ITEM_PREFIX = "catalog:item"
_CATALOG_SEARCH_PREFIX = "catalog:search"

_redis_client: Redis | None = None
_client_lock = asyncio.Lock()
_redis_retry_at: float | None = None


def catalog_list_key() -> str:
    return _CATALOG_LIST_KEY


def catalog_count_key() -> str:
    return _CATALOG_COUNT_KEY


def catalog_item_key(item_id: str) -> str:
    return f"{_CATALOG_ITEM_PREFIX}:{item_id}"


def catalog_search_key(term: str, field: str) -> str:
    parts = [field.strip().lower(), term.strip().lower()]
    digest = sha256("|".join(parts).encode("utf-8")).hexdigest()
    return f"{_CATALOG_SEARCH_PREFIX}:{digest}"


def _is_redis_connection_error(exc: BaseException) -> bool:
    """Return ``True`` when ``exc`` represents a Redis connectivity failure."""

    return isinstance(exc, (RedisConnectionError, RedisTimeoutError, OSError))


def _in_backoff() -> bool:
    return _redis_retry_at is not None and monotonic() < _redis_retry_at


async def get_redis() -> Redis | None:
    """Get Redis client, returning None while Redis is unreachable.

    A failed connection starts a cool-down of ``REDIS_RETRY_BACKOFF_SECONDS``
    during which no new attempt is made.
    """
    global _redis_client, _redis_retry_at

    if _in_backoff():
        logger.debug("Redis connection in cool-down after previous failure; skipping attempt.")
        return None

    # ALWAYS acquire lock first to prevent TOCTOU race
    async with _client_lock:
        # Double-check pattern inside lock
        if _redis_client is not None:
            return _redis_client

        if _in_backoff():
            return None

        client = Redis.from_url(
            get_settings().redis_url, decode_responses=True, encoding="utf-8"
        )
        try:
            # Test connection before storing the singleton instance.
            await client.ping()
        except Exception as exc:
            if _is_redis_connection_error(exc):
                backoff = get_settings().redis_retry_backoff_seconds
                logger.warning(
                    f"Redis connection failed: {exc}. Caching is disabled. "
                    f"Retrying after {backoff:.0f}s."
                )
                _redis_retry_at = monotonic() + backoff
                await client.aclose()
                return None
            raise
        _redis_client = client
        _redis_retry_at = None
        logger.info("Redis connection established successfully")
        return _redis_client


class CacheClient:
    """JSON-over-Redis helper that degrades to a no-op when Redis is missing."""

    def __init__(self, redis: Redis | None) -> None:
        self._redis = redis

    async def get_json(self, key: str) -> Any:
        if self._redis is None:
            return None
        try:
            payload = await self._redis.get(key)
        except Exception as exc:
            if _is_redis_connection_error(exc):
                logger.debug(f"Redis get failed for key {key}: {exc}")
                return None
            raise
        if payload is None:
            return None
        try:
            return json.loads(payload)
        except json.JSONDecodeError:
            return None

    async def set_json(self, key: str, value: Any, ttl: int | None = None) -> None:
        if self._redis is None:
            return
        encoded = json.dumps(value, default=str)
        if ttl is None:
            ttl = _DEFAULT_TTL_SECONDS
        try:
            await self._redis.set(key, encoded, ex=ttl)
        except Exception as exc:
            if _is_redis_connection_error(exc):
                logger.debug(f"Redis set failed for key {key}: {exc}")
                return
            raise


async def get_cache_client() -> CacheClient:
    redis = await get_redis()
    return CacheClient(redis)


async def close_redis() -> None:
    """Close the global Redis connection gracefully."""
    global _redis_client, _redis_retry_at
    if _redis_client is not None:
        await _redis_client.aclose()
        _redis_client = None
    _redis_retry_at = None


__all__ = [
    "CacheClient",
    "catalog_count_key",
    "catalog_item_key",
    "catalog_list_key",
    "catalog_search_key",
    "close_redis",
    "get_cache_client",
    "get_redis",
]
