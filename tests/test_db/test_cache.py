"""Tests for the scan result cache backends and the sweeper loop."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from config.settings import Settings
from src.db.cache import (
    KEY_PREFIX,
    MemoryResultCache,
    RedisResultCache,
    build_result_cache,
    run_sweeper,
)
from src.models.token import AnalysisResult
from src.parsers.mock_provider import KNOWN_TOKENS, USDC_MINT
from src.scoring.analyzer import analyze


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def _make_result() -> AnalysisResult:
    return analyze(KNOWN_TOKENS[USDC_MINT])


class TestMemoryResultCache:
    @pytest.mark.asyncio
    async def test_miss(self) -> None:
        cache = MemoryResultCache()
        assert await cache.get("nothing") is None

    @pytest.mark.asyncio
    async def test_hit_within_ttl(self) -> None:
        clock = FakeClock()
        cache = MemoryResultCache(ttl_sec=60, clock=clock)
        result = _make_result()
        await cache.set(USDC_MINT, result)

        clock.now += 60
        assert await cache.get(USDC_MINT) == result

    @pytest.mark.asyncio
    async def test_expired_entry_dropped_on_read(self) -> None:
        clock = FakeClock()
        cache = MemoryResultCache(ttl_sec=60, clock=clock)
        await cache.set(USDC_MINT, _make_result())

        clock.now += 60.5
        assert await cache.get(USDC_MINT) is None
        assert await cache.size() == 0

    @pytest.mark.asyncio
    async def test_set_refreshes_timestamp(self) -> None:
        clock = FakeClock()
        cache = MemoryResultCache(ttl_sec=60, clock=clock)
        await cache.set(USDC_MINT, _make_result())
        clock.now += 50
        await cache.set(USDC_MINT, _make_result())
        clock.now += 50
        assert await cache.get(USDC_MINT) is not None

    @pytest.mark.asyncio
    async def test_sweep_drops_only_old_entries(self) -> None:
        clock = FakeClock()
        cache = MemoryResultCache(ttl_sec=60, max_age_sec=600, clock=clock)
        await cache.set("old", _make_result())
        clock.now += 500
        await cache.set("young", _make_result())
        clock.now += 101

        assert await cache.sweep() == 1
        assert await cache.size() == 1
        assert await cache.sweep() == 0

    @pytest.mark.asyncio
    async def test_close_clears(self) -> None:
        cache = MemoryResultCache()
        await cache.set(USDC_MINT, _make_result())
        await cache.close()
        assert await cache.size() == 0


class TestRedisResultCache:
    @pytest.mark.asyncio
    async def test_set_uses_setex_with_prefix(self) -> None:
        redis = MagicMock()
        redis.setex = AsyncMock()
        cache = RedisResultCache(redis, ttl_sec=60)
        result = _make_result()

        await cache.set(USDC_MINT, result)

        key, ttl, payload = redis.setex.await_args.args
        assert key == KEY_PREFIX + USDC_MINT
        assert ttl == 60
        assert '"degenScore"' in payload

    @pytest.mark.asyncio
    async def test_get_round_trips_json(self) -> None:
        result = _make_result()
        redis = MagicMock()
        redis.get = AsyncMock(return_value=result.model_dump_json(by_alias=True))
        cache = RedisResultCache(redis)

        assert await cache.get(USDC_MINT) == result
        redis.get.assert_awaited_once_with(KEY_PREFIX + USDC_MINT)

    @pytest.mark.asyncio
    async def test_get_miss(self) -> None:
        redis = MagicMock()
        redis.get = AsyncMock(return_value=None)
        assert await RedisResultCache(redis).get(USDC_MINT) is None

    @pytest.mark.asyncio
    async def test_size_counts_prefixed_keys(self) -> None:
        async def scan_iter(match: str):
            assert match == KEY_PREFIX + "*"
            for key in ("scan:a", "scan:b"):
                yield key

        redis = MagicMock()
        redis.scan_iter = scan_iter
        cache = RedisResultCache(redis)

        assert await cache.size() == 2
        assert await cache.sweep() == 0

    @pytest.mark.asyncio
    async def test_close(self) -> None:
        redis = MagicMock()
        redis.aclose = AsyncMock()
        await RedisResultCache(redis).close()
        redis.aclose.assert_awaited_once()


class TestBuildResultCache:
    def test_memory_by_default(self) -> None:
        cache = build_result_cache(Settings(_env_file=None, redis_url=""))
        assert isinstance(cache, MemoryResultCache)

    def test_redis_when_url_set(self) -> None:
        cache = build_result_cache(
            Settings(_env_file=None, redis_url="redis://localhost:6379/0")
        )
        assert isinstance(cache, RedisResultCache)


class TestSweeper:
    @pytest.mark.asyncio
    async def test_sweeps_until_cancelled(self) -> None:
        cache = MagicMock()
        swept = asyncio.Event()

        async def sweep() -> int:
            swept.set()
            return 3

        cache.sweep = sweep
        task = asyncio.create_task(run_sweeper(cache, interval_sec=0.01))
        await asyncio.wait_for(swept.wait(), timeout=1.0)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    @pytest.mark.asyncio
    async def test_sweep_failure_keeps_loop_alive(self) -> None:
        cache = MagicMock()
        calls = 0
        recovered = asyncio.Event()

        async def sweep() -> int:
            nonlocal calls
            calls += 1
            if calls == 1:
                raise RuntimeError("redis down")
            recovered.set()
            return 0

        cache.sweep = sweep
        task = asyncio.create_task(run_sweeper(cache, interval_sec=0.01))
        await asyncio.wait_for(recovered.wait(), timeout=1.0)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert calls >= 2
