"""Short-lived scan result cache, keyed by mint address.

Two backends behind one async interface:

- ``MemoryResultCache`` — per-process dict. Entries go stale after ``ttl_sec``
  (dropped lazily on read) and a periodic ``sweep()`` evicts anything older
  than ``max_age_sec`` that was never read again.
- ``RedisResultCache`` — JSON blobs with ``SETEX``; Redis handles expiry so
  ``sweep()`` is a no-op.

Instances are created by the app factory and owned by the application; no
module-level cache state.
"""

import asyncio
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from loguru import logger
from redis.asyncio import Redis

from config.settings import Settings
from src.models.token import AnalysisResult

KEY_PREFIX = "scan:"


class ResultCache(Protocol):
    async def get(self, key: str) -> AnalysisResult | None: ...

    async def set(self, key: str, value: AnalysisResult) -> None: ...

    async def sweep(self) -> int: ...

    async def size(self) -> int: ...

    async def close(self) -> None: ...


@dataclass
class _Entry:
    value: AnalysisResult
    stored_at: float


class MemoryResultCache:
    def __init__(
        self,
        ttl_sec: float = 60,
        max_age_sec: float = 600,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl_sec = ttl_sec
        self._max_age_sec = max_age_sec
        self._clock = clock
        self._entries: dict[str, _Entry] = {}

    async def get(self, key: str) -> AnalysisResult | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.stored_at > self._ttl_sec:
            del self._entries[key]
            return None
        return entry.value

    async def set(self, key: str, value: AnalysisResult) -> None:
        self._entries[key] = _Entry(value=value, stored_at=self._clock())

    async def sweep(self) -> int:
        """Evict entries older than max age. Returns how many were dropped."""
        now = self._clock()
        stale = [k for k, e in self._entries.items() if now - e.stored_at > self._max_age_sec]
        for key in stale:
            del self._entries[key]
        return len(stale)

    async def size(self) -> int:
        return len(self._entries)

    async def close(self) -> None:
        self._entries.clear()


class RedisResultCache:
    def __init__(self, redis: Redis, ttl_sec: int = 60) -> None:
        self._redis = redis
        self._ttl_sec = ttl_sec

    async def get(self, key: str) -> AnalysisResult | None:
        raw = await self._redis.get(KEY_PREFIX + key)
        if raw is None:
            return None
        return AnalysisResult.model_validate_json(raw)

    async def set(self, key: str, value: AnalysisResult) -> None:
        await self._redis.setex(
            KEY_PREFIX + key, self._ttl_sec, value.model_dump_json(by_alias=True)
        )

    async def sweep(self) -> int:
        return 0

    async def size(self) -> int:
        count = 0
        async for _ in self._redis.scan_iter(match=KEY_PREFIX + "*"):
            count += 1
        return count

    async def close(self) -> None:
        await self._redis.aclose()


def build_result_cache(settings: Settings) -> ResultCache:
    if settings.redis_url:
        redis = Redis.from_url(settings.redis_url, decode_responses=True)
        return RedisResultCache(redis, ttl_sec=settings.scan_cache_ttl_sec)
    return MemoryResultCache(
        ttl_sec=settings.scan_cache_ttl_sec,
        max_age_sec=settings.scan_cache_max_age_sec,
    )


async def run_sweeper(cache: ResultCache, interval_sec: float) -> None:
    """Periodic eviction loop. Runs until cancelled."""
    while True:
        await asyncio.sleep(interval_sec)
        try:
            dropped = await cache.sweep()
        except Exception as e:
            logger.warning(f"[CACHE] Sweep failed: {e}")
            continue
        if dropped:
            logger.debug(f"[CACHE] Swept {dropped} stale scan results")
