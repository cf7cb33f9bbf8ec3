"""Time-bounded string caches for lookup results.

A cached empty string is a real answer ("no country found") and is distinct
from ``MISS``. Entries disappear when their TTL runs out; there is no
explicit invalidation.
"""

import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from cachetools import TLRUCache
from redis.asyncio import Redis, RedisError

from geolocator.logger import logger
from geolocator.settings import GeolocationSettings


class _Miss:
    def __repr__(self) -> str:
        return "MISS"


MISS = _Miss()


class BaseCacheStore(ABC):
    """Abstract key/value store with per-entry expiry."""

    @abstractmethod
    async def get(self, key: str) -> str | _Miss:
        """Return the cached value for key, or MISS if absent or expired."""
        raise NotImplementedError

    @abstractmethod
    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store value under key for ttl_seconds."""
        raise NotImplementedError

    async def close(self) -> None:
        """Release backend resources. Nothing to release by default."""
        return None


def _entry_expiry(key: str, entry: tuple[str, int], now: float) -> float:
    return now + entry[1]


class MemoryCacheStore(BaseCacheStore):
    """Per-process cache; suitable for a single worker or for tests."""

    def __init__(self, max_entries: int = 10_000, timer: Callable[[], float] = time.monotonic) -> None:
        self._entries: TLRUCache[str, tuple[str, int]] = TLRUCache(
            maxsize=max_entries, ttu=_entry_expiry, timer=timer
        )

    async def get(self, key: str) -> str | _Miss:
        entry = self._entries.get(key)
        if entry is None:
            return MISS
        return entry[0]

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        self._entries[key] = (value, ttl_seconds)


class RedisCacheStore(BaseCacheStore):
    """Cache shared between workers, backed by Redis.

    Redis failures never reach the caller: reads degrade to MISS and writes
    are dropped.
    """

    def __init__(self, redis: Redis) -> None:
        self._redis = redis

    @classmethod
    def from_url(cls, url: str) -> "RedisCacheStore":
        return cls(Redis.from_url(url, decode_responses=True))

    async def get(self, key: str) -> str | _Miss:
        try:
            value: Any = await self._redis.get(key)
        except RedisError as exc:
            logger.warning(f"Cache read failed, treating as miss key={key} error={exc!r}")
            return MISS
        if value is None:
            return MISS
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return str(value)

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        try:
            await self._redis.set(key, value, ex=ttl_seconds)
        except RedisError as exc:
            logger.warning(f"Cache write failed key={key} error={exc!r}")

    async def close(self) -> None:
        """Close the connection pool."""
        await self._redis.aclose()


def create_cache_store(settings: GeolocationSettings) -> BaseCacheStore:
    """Use Redis when a URL is configured, otherwise an in-memory store."""
    if settings.redis_url:
        logger.info("Using Redis cache store")
        return RedisCacheStore.from_url(settings.redis_url)
    return MemoryCacheStore(max_entries=settings.cache_max_entries)
