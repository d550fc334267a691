"""Mock metrics provider — fixed fixtures for well-known mints, random otherwise.

Used when no market-data API key is configured. Known tokens always return
the same record; any other address gets a freshly generated one whose
ranges resemble a mid-cap memecoin. Net buys is an independent draw in
[-100, 99], so it need not equal buys minus sells.
"""

import asyncio
import math
import random
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from loguru import logger

from src.models.token import TokenMetrics
from src.parsers.address import ensure_mint_address

USDC_MINT = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
BONK_MINT = "DezXAZ8z7PnrnRJjz3wXBoRgixCa6xjnB7YaB1pPB263"
SAMO_MINT = "7xKXtg2CW87d97TXJSDpbD5jBkheTqA83TZRuJosgAsU"

KNOWN_TOKENS: dict[str, TokenMetrics] = {
    USDC_MINT: TokenMetrics(
        address=USDC_MINT,
        name="USD Coin",
        symbol="USDC",
        decimals=6,
        created_at=datetime(2021, 6, 1, tzinfo=UTC),
        age_hours=32000,
        price_usd=1.0,
        price_change_1h=0.01,
        price_change_24h=0.02,
        market_cap=35_000_000_000,
        fully_diluted_valuation=35_000_000_000,
        liquidity_usd=5_000_000_000,
        holder_count=2_500_000,
        top10_holder_percentage=15.2,
        dev_holder_percentage=0.5,
        volume_1h=120_000_000,
        volume_24h=2_800_000_000,
        buy_count_1h=45000,
        sell_count_1h=42000,
        net_buys_vs_sells=3000,
        website="https://www.centre.io/usdc",
        twitter="https://twitter.com/centre_io",
        is_renounced=True,
        is_freeze_authority_revoked=True,
        is_mint_authority_revoked=True,
    ),
    BONK_MINT: TokenMetrics(
        address=BONK_MINT,
        name="Bonk",
        symbol="BONK",
        decimals=5,
        created_at=datetime(2022, 12, 25, tzinfo=UTC),
        age_hours=9000,
        price_usd=0.000023,
        price_change_1h=5.2,
        price_change_24h=-12.4,
        market_cap=1_500_000_000,
        fully_diluted_valuation=2_300_000_000,
        liquidity_usd=85_000_000,
        holder_count=450_000,
        top10_holder_percentage=42.8,
        dev_holder_percentage=18.5,
        volume_1h=25_000_000,
        volume_24h=180_000_000,
        buy_count_1h=12000,
        sell_count_1h=15000,
        net_buys_vs_sells=-3000,
        website="https://www.bonkcoin.com",
        twitter="https://twitter.com/bonk_inu",
        telegram="https://t.me/bonk_inu",
        is_renounced=True,
        is_freeze_authority_revoked=True,
        is_mint_authority_revoked=False,
    ),
    SAMO_MINT: TokenMetrics(
        address=SAMO_MINT,
        name="Samoyedcoin",
        symbol="SAMO",
        decimals=9,
        created_at=datetime(2021, 6, 15, tzinfo=UTC),
        age_hours=31000,
        price_usd=0.012,
        price_change_1h=-2.3,
        price_change_24h=8.7,
        market_cap=48_000_000,
        fully_diluted_valuation=120_000_000,
        liquidity_usd=3_200_000,
        holder_count=85000,
        top10_holder_percentage=68.4,
        dev_holder_percentage=25.3,
        volume_1h=450_000,
        volume_24h=5_200_000,
        buy_count_1h=450,
        sell_count_1h=620,
        net_buys_vs_sells=-170,
        website="https://samoyedcoin.com",
        twitter="https://twitter.com/samoyedcoin",
        is_renounced=False,
        is_freeze_authority_revoked=False,
        is_mint_authority_revoked=False,
    ),
}


class MockMetricsProvider:
    """Offline stand-in for a market-data API."""

    name = "mock"

    def __init__(
        self,
        *,
        latency_sec: float = 0.3,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._latency_sec = latency_sec
        self._rng = rng or random.Random()
        self._clock = clock or (lambda: datetime.now(UTC))

    async def fetch_metrics(self, address: str) -> TokenMetrics:
        ensure_mint_address(address)

        if self._latency_sec > 0:
            await asyncio.sleep(self._latency_sec)

        known = KNOWN_TOKENS.get(address)
        if known is not None:
            return known.model_copy()

        logger.debug(f"[MOCK] Generating random metrics for {address[:12]}")
        return self.generate(address)

    def generate(self, address: str) -> TokenMetrics:
        rng = self._rng
        age_hours = rng.randint(1, 1000)
        market_cap = rng.random() * 1_000_000_000

        return TokenMetrics(
            address=address,
            name=f"Token {address[:8]}",
            symbol=f"TKN{address[:4]}",
            decimals=9,
            created_at=self._clock() - timedelta(hours=age_hours),
            age_hours=age_hours,
            price_usd=rng.random() * 10,
            price_change_1h=(rng.random() - 0.5) * 20,
            price_change_24h=(rng.random() - 0.5) * 40,
            market_cap=market_cap,
            fully_diluted_valuation=market_cap * (rng.random() + 1),
            liquidity_usd=market_cap * (rng.random() * 0.1 + 0.01),
            holder_count=rng.randint(100, 100_099),
            top10_holder_percentage=rng.random() * 80 + 10,
            dev_holder_percentage=rng.random() * 30 + 5,
            volume_1h=market_cap * (rng.random() * 0.05),
            volume_24h=market_cap * (rng.random() * 0.15),
            buy_count_1h=rng.randint(0, 999),
            sell_count_1h=rng.randint(0, 999),
            net_buys_vs_sells=math.floor((rng.random() - 0.5) * 200),
            is_renounced=rng.random() > 0.7,
            is_freeze_authority_revoked=rng.random() > 0.6,
            is_mint_authority_revoked=rng.random() > 0.8,
        )

    async def close(self) -> None:
        return None
