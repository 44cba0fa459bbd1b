"""In-memory TTL cache for library listings and health checks."""

import asyncio
from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta
from typing import Any, TypeVar

from media_panel.logging_config import get_logger, log_with_context

logger = get_logger(__name__)

T = TypeVar("T")


class CacheEntry:
    """A cached value with expiration time."""

    def __init__(self, value: Any, expires_at: datetime):
        self.value = value
        self.expires_at = expires_at

    def is_expired(self) -> bool:
        return datetime.now() >= self.expires_at


class SimpleCache:
    """Simple in-memory cache with TTL support, guarded by an asyncio.Lock."""

    def __init__(self):
        self._cache: dict[str, CacheEntry] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._cache)

    def keys(self) -> list[str]:
        return list(self._cache)

    async def get(self, key: str) -> Any | None:
        """Get cached value, or None if missing or expired."""
        async with self._lock:
            entry = self._cache.get(key)
            if entry and not entry.is_expired():
                log_with_context(logger, "debug", "Cache hit", cache_key=key, event_type="cache_hit")
                return entry.value

            if entry:
                del self._cache[key]
                log_with_context(logger, "debug", "Cache expired", cache_key=key, event_type="cache_expired")

            return None

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        """Set cached value with TTL."""
        async with self._lock:
            self._cache[key] = CacheEntry(value, datetime.now() + timedelta(seconds=ttl_seconds))
            log_with_context(
                logger,
                "debug",
                "Cache set",
                cache_key=key,
                ttl_seconds=ttl_seconds,
                event_type="cache_set",
            )

    async def clear(self, prefix: str | None = None) -> int:
        """Drop every entry whose key starts with ``prefix`` (all entries if None).

        Returns:
            Number of entries removed
        """
        async with self._lock:
            if prefix is None:
                removed = len(self._cache)
                self._cache.clear()
            else:
                doomed = [key for key in self._cache if key.startswith(prefix)]
                for key in doomed:
                    del self._cache[key]
                removed = len(doomed)
            log_with_context(
                logger,
                "info",
                "Cache cleared",
                prefix=prefix,
                removed=removed,
                event_type="cache_clear",
            )
            return removed


async def cached(
    cache: SimpleCache,
    key: str,
    ttl_seconds: int,
    fetch_func: Callable[[], Awaitable[T]],
) -> T:
    """Return the cached value for ``key`` or fetch and store it.

    Exceptions from ``fetch_func`` propagate and nothing is stored, so only
    successful fetches are ever cached.
    """
    cached_value: T | None = await cache.get(key)
    if cached_value is not None:
        return cached_value

    log_with_context(logger, "debug", "Cache miss, fetching fresh data", cache_key=key, event_type="cache_miss")
    value: T = await fetch_func()
    await cache.set(key, value, ttl_seconds)
    return value


_cache = SimpleCache()


def get_cache() -> SimpleCache:
    """Get the process-wide cache instance."""
    return _cache
