"""Tests for the offline mock metrics provider."""

import random
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, patch

import pytest

from src.parsers.address import ensure_mint_address, is_valid_mint_length
from src.parsers.exceptions import InvalidAddressError
from src.parsers.mock_provider import (
    BONK_MINT,
    KNOWN_TOKENS,
    SAMO_MINT,
    USDC_MINT,
    MockMetricsProvider,
)

RANDOM_MINT = "So11111111111111111111111111111111111111112"
FIXED_NOW = datetime(2025, 1, 1, 12, 0, tzinfo=UTC)


class TestAddressChecks:
    def test_length_window(self) -> None:
        assert is_valid_mint_length("a" * 32)
        assert is_valid_mint_length("a" * 44)
        assert not is_valid_mint_length("a" * 31)
        assert not is_valid_mint_length("a" * 45)

    def test_ensure_rejects_short_and_empty(self) -> None:
        with pytest.raises(InvalidAddressError, match="Invalid mint address format"):
            ensure_mint_address("short")
        with pytest.raises(InvalidAddressError):
            ensure_mint_address("")

    def test_ensure_returns_address(self) -> None:
        assert ensure_mint_address(USDC_MINT) == USDC_MINT


class TestKnownTokens:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("mint", [USDC_MINT, BONK_MINT, SAMO_MINT])
    async def test_fixture_returned_unchanged(self, mint: str) -> None:
        provider = MockMetricsProvider(latency_sec=0.0)
        metrics = await provider.fetch_metrics(mint)
        assert metrics == KNOWN_TOKENS[mint]
        assert metrics.address == mint

    @pytest.mark.asyncio
    async def test_usdc_fixture_values(self) -> None:
        provider = MockMetricsProvider(latency_sec=0.0)
        metrics = await provider.fetch_metrics(USDC_MINT)
        assert metrics.symbol == "USDC"
        assert metrics.age_hours == 32000
        assert metrics.liquidity_usd == 5_000_000_000
        assert metrics.net_buys_vs_sells == 3000
        assert metrics.is_renounced is True

    @pytest.mark.asyncio
    async def test_known_tokens_are_stable(self) -> None:
        provider = MockMetricsProvider(latency_sec=0.0)
        first = await provider.fetch_metrics(SAMO_MINT)
        second = await provider.fetch_metrics(SAMO_MINT)
        assert first == second


class TestGeneratedTokens:
    def test_ranges(self) -> None:
        provider = MockMetricsProvider(rng=random.Random(42), clock=lambda: FIXED_NOW)
        for _ in range(200):
            m = provider.generate(RANDOM_MINT)
            assert m.address == RANDOM_MINT
            assert 1 <= m.age_hours <= 1000
            assert 0 <= m.market_cap < 1_000_000_000
            assert 100 <= m.holder_count <= 100_099
            assert 10 <= m.top10_holder_percentage < 90
            assert 5 <= m.dev_holder_percentage < 35
            assert -10 <= m.price_change_1h <= 10
            assert -100 <= m.net_buys_vs_sells <= 99
            assert 0 <= m.buy_count_1h <= 999
            assert m.created_at == FIXED_NOW - timedelta(hours=m.age_hours)
            assert isinstance(m.is_renounced, bool)

    def test_seeded_rng_is_reproducible(self) -> None:
        a = MockMetricsProvider(rng=random.Random(7), clock=lambda: FIXED_NOW)
        b = MockMetricsProvider(rng=random.Random(7), clock=lambda: FIXED_NOW)
        assert a.generate(RANDOM_MINT) == b.generate(RANDOM_MINT)

    @pytest.mark.asyncio
    async def test_unknown_address_generates(self) -> None:
        provider = MockMetricsProvider(latency_sec=0.0, rng=random.Random(1))
        metrics = await provider.fetch_metrics(RANDOM_MINT)
        assert metrics.address == RANDOM_MINT
        assert metrics.name == f"Token {RANDOM_MINT[:8]}"
        assert metrics.symbol == f"TKN{RANDOM_MINT[:4]}"


class TestFetch:
    @pytest.mark.asyncio
    async def test_short_address_rejected_before_sleep(self) -> None:
        provider = MockMetricsProvider(latency_sec=5.0)
        with patch("src.parsers.mock_provider.asyncio.sleep", new_callable=AsyncMock) as sleep:
            with pytest.raises(InvalidAddressError):
                await provider.fetch_metrics("tooshort")
        sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_simulated_latency(self) -> None:
        provider = MockMetricsProvider(latency_sec=0.3)
        with patch("src.parsers.mock_provider.asyncio.sleep", new_callable=AsyncMock) as sleep:
            await provider.fetch_metrics(USDC_MINT)
        sleep.assert_awaited_once_with(0.3)

    @pytest.mark.asyncio
    async def test_zero_latency_skips_sleep(self) -> None:
        provider = MockMetricsProvider(latency_sec=0.0)
        with patch("src.parsers.mock_provider.asyncio.sleep", new_callable=AsyncMock) as sleep:
            await provider.fetch_metrics(USDC_MINT)
        sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_close_is_noop(self) -> None:
        provider = MockMetricsProvider()
        await provider.close()
        assert provider.name == "mock"
