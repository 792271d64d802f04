"""Read-through caching for catalog reads.

Two tiers are consulted in order: Redis (shared between workers, optional) and
an in-process TTL map that keeps serving when Redis is down.  Only data this
service never writes belongs here; per-caller records are always read live.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from functools import wraps
from time import monotonic
from typing import Any, Concatenate, ParamSpec, TypeVar, cast

from figure_tracker.cache import CacheClient

logger = logging.getLogger(__name__)

P = ParamSpec("P")
T = TypeVar("T")

KeyBuilder = Callable[Concatenate["CacheableService", P], str | None]
TTLSpec = int | Callable[["CacheableService"], int] | None
ServiceMethod = Callable[Concatenate["CacheableService", P], Awaitable[T]]

_FALLBACK_TTL_SECONDS = 300


class LocalTTLCache:
    """Process-local key/value map whose entries expire after a TTL.

    Every operation completes without awaiting, so the event loop never
    interleaves two of them and no lock is needed.
    """

    def __init__(self) -> None:
        self._entries: dict[str, tuple[float, Any]] = {}

    def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if expires_at <= monotonic():
            del self._entries[key]
            return None
        return value

    def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        lifetime = ttl if ttl else _FALLBACK_TTL_SECONDS
        self._entries[key] = (monotonic() + lifetime, value)

    def clear(self) -> None:
        self._entries.clear()


_local_cache = LocalTTLCache()


class CacheableService:
    """Mixin giving services a Redis-then-local read path."""

    def __init__(self, cache: CacheClient | None = None) -> None:
        self._cache = cache

    async def _cache_get(self, key: str) -> Any:
        if self._cache is not None:
            shared = await self._cache.get_json(key)
            if shared is not None:
                return shared
        return _local_cache.get(key)

    async def _cache_set(self, key: str, value: Any, ttl: int | None = None) -> None:
        if value is None:
            return
        if self._cache is not None:
            await self._cache.set_json(key, value, ttl=ttl)
        _local_cache.set(key, value, ttl=ttl)


def cached(
    key_builder: KeyBuilder[P],
    *,
    ttl: TTLSpec = None,
    serializer: Callable[[T], Any] | None = None,
    deserializer: Callable[[Any], T] | None = None,
) -> Callable[[ServiceMethod[P, T]], ServiceMethod[P, T]]:
    """Cache the result of an async service method.

    ``key_builder`` receives the method's arguments and returns the cache key,
    or ``None`` to bypass caching for that call.  ``ttl`` is either seconds or
    a callable reading them from the service; ``0`` turns caching off.
    ``serializer`` and ``deserializer`` convert results to and from JSON-ready
    payloads.
    """

    def decorator(func: ServiceMethod[P, T]) -> ServiceMethod[P, T]:
        @wraps(func)
        async def wrapper(self: CacheableService, *args: P.args, **kwargs: P.kwargs) -> T:
            lifetime = ttl(self) if callable(ttl) else ttl
            key = key_builder(self, *args, **kwargs) if lifetime != 0 else None
            if not key:
                return await func(self, *args, **kwargs)

            hit = await self._cache_get(key)
            if hit is not None:
                if deserializer is None:
                    return cast(T, hit)
                try:
                    return deserializer(hit)
                except Exception as exc:  # pragma: no cover - payload written by an older model
                    logger.warning("Discarding unreadable cache entry %s: %s", key, exc)

            result = await func(self, *args, **kwargs)
            if result is not None:
                payload = serializer(result) if serializer is not None else result
                try:
                    await self._cache_set(key, payload, ttl=lifetime)
                except Exception as exc:  # pragma: no cover - cache backend issues
                    logger.warning("Could not store cache entry %s: %s", key, exc)
            return result

        return wrapper

    return decorator


__all__ = ["CacheableService", "LocalTTLCache", "cached"]
