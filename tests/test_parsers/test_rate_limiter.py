"""Tests for the outbound request pacer."""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from src.parsers.rate_limiter import RateLimiter


def test_min_interval() -> None:
    assert RateLimiter(4.0).min_interval == pytest.approx(0.25)
    assert RateLimiter(0).min_interval == 0.0
    assert RateLimiter(-1).min_interval == 0.0


@pytest.mark.asyncio
async def test_disabled_never_sleeps() -> None:
    limiter = RateLimiter(0)
    with patch("src.parsers.rate_limiter.asyncio.sleep", new_callable=AsyncMock) as sleep:
        for _ in range(5):
            await limiter.acquire()
    sleep.assert_not_awaited()


@pytest.mark.asyncio
async def test_back_to_back_calls_are_spaced() -> None:
    limiter = RateLimiter(20.0)
    loop = asyncio.get_running_loop()

    start = loop.time()
    for _ in range(3):
        await limiter.acquire()
    elapsed = loop.time() - start

    # First call is immediate, the next two wait ~50ms each
    assert elapsed >= 0.09
