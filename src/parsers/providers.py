"""Metrics providers — turn a mint address into a TokenMetrics record.

One provider is active per process, picked by ``settings.metrics_provider``.
There is no failover between providers: a provider error propagates to the
caller, which decides how to surface it.
"""

import asyncio
from collections.abc import Callable
from datetime import UTC, datetime
from decimal import Decimal
from typing import Protocol

from loguru import logger

from config.settings import Settings
from src.models.token import TokenMetrics
from src.parsers.address import ensure_mint_address
from src.parsers.birdeye.client import BirdeyeClient
from src.parsers.birdeye.models import BirdeyeTokenOverview, BirdeyeTokenSecurity
from src.parsers.dexscreener.client import DexScreenerClient
from src.parsers.dexscreener.models import DexScreenerPair
from src.parsers.exceptions import TokenNotFoundError
from src.parsers.mock_provider import MockMetricsProvider


class MetricsProvider(Protocol):
    name: str

    async def fetch_metrics(self, address: str) -> TokenMetrics: ...

    async def close(self) -> None: ...


def _float(value: Decimal | str | None) -> float | None:
    if value is None:
        return None
    return float(value)


def _pct(fraction: Decimal | None) -> float | None:
    """Birdeye fraction (0.15) -> percentage (15.0)."""
    if fraction is None:
        return None
    return float(fraction * 100)


def _age_hours(created_at: datetime | None, now: datetime) -> float | None:
    if created_at is None:
        return None
    return max(0.0, (now - created_at).total_seconds() / 3600)


def birdeye_to_metrics(
    address: str,
    overview: BirdeyeTokenOverview,
    security: BirdeyeTokenSecurity | None,
    *,
    now: datetime,
) -> TokenMetrics:
    """Merge a Birdeye overview and (optional) security report."""
    created_at = None
    top10 = dev_pct = None
    mint_revoked = freeze_revoked = None
    if security is not None:
        if security.creationTime:
            created_at = datetime.fromtimestamp(security.creationTime, tz=UTC)
        top10 = _pct(security.top10HolderPercent)
        dev_pct = _pct(security.dev_fraction)
        mint_revoked = not security.is_mintable
        freeze_revoked = not security.is_freezable

    links = overview.extensions or {}
    return TokenMetrics(
        address=address,
        name=overview.name,
        symbol=overview.symbol,
        decimals=overview.decimals,
        created_at=created_at,
        age_hours=_age_hours(created_at, now),
        price_usd=_float(overview.price),
        price_change_1h=_float(overview.priceChange1hPercent),
        price_change_24h=_float(overview.priceChange24hPercent),
        market_cap=_float(overview.marketCap),
        fully_diluted_valuation=_float(overview.fdv),
        liquidity_usd=_float(overview.liquidity),
        holder_count=overview.holder,
        top10_holder_percentage=top10,
        dev_holder_percentage=dev_pct,
        volume_1h=_float(overview.v1hUSD),
        volume_24h=_float(overview.v24hUSD),
        buy_count_1h=overview.buy1h,
        sell_count_1h=overview.sell1h,
        net_buys_vs_sells=overview.net_buys_1h,
        website=links.get("website"),
        twitter=links.get("twitter"),
        telegram=links.get("telegram"),
        # On Solana "renounced" means nobody can mint more supply
        is_renounced=mint_revoked,
        is_freeze_authority_revoked=freeze_revoked,
        is_mint_authority_revoked=mint_revoked,
    )


def dexscreener_to_metrics(
    address: str, pair: DexScreenerPair, *, now: datetime
) -> TokenMetrics:
    """Map the deepest pair. DexScreener has no holder or authority data."""
    created_at = None
    if pair.pairCreatedAt:
        created_at = datetime.fromtimestamp(pair.pairCreatedAt / 1000, tz=UTC)

    buys = sells = net_buys = None
    if pair.txns is not None and pair.txns.h1 is not None:
        buys, sells = pair.txns.h1.buys, pair.txns.h1.sells
        if buys is not None and sells is not None:
            net_buys = buys - sells

    price_change = pair.priceChange
    volume = pair.volume
    info = pair.info
    return TokenMetrics(
        address=address,
        name=pair.baseToken.name if pair.baseToken else None,
        symbol=pair.baseToken.symbol if pair.baseToken else None,
        created_at=created_at,
        age_hours=_age_hours(created_at, now),
        price_usd=_float(pair.priceUsd),
        price_change_1h=_float(price_change.h1) if price_change else None,
        price_change_24h=_float(price_change.h24) if price_change else None,
        market_cap=_float(pair.marketCap),
        fully_diluted_valuation=_float(pair.fdv),
        liquidity_usd=_float(pair.liquidity.usd) if pair.liquidity else None,
        volume_1h=_float(volume.h1) if volume else None,
        volume_24h=_float(volume.h24) if volume else None,
        buy_count_1h=buys,
        sell_count_1h=sells,
        net_buys_vs_sells=net_buys,
        website=info.websites[0].url if info and info.websites else None,
        twitter=info.social("twitter") if info else None,
        telegram=info.social("telegram") if info else None,
    )


class BirdeyeMetricsProvider:
    name = "birdeye"

    def __init__(
        self,
        client: BirdeyeClient,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._client = client
        self._clock = clock or (lambda: datetime.now(UTC))

    async def fetch_metrics(self, address: str) -> TokenMetrics:
        ensure_mint_address(address)
        overview, security = await asyncio.gather(
            self._client.get_token_overview(address),
            self._client.get_token_security(address),
            return_exceptions=True,
        )
        if isinstance(overview, BaseException):
            raise overview
        if isinstance(security, BaseException):
            # Overview alone still scores; authority/holder fields show up as missing
            logger.warning(f"[BIRDEYE] Security report unavailable for {address[:12]}: {security}")
            security = None
        return birdeye_to_metrics(address, overview, security, now=self._clock())

    async def close(self) -> None:
        await self._client.close()


class DexScreenerMetricsProvider:
    name = "dexscreener"

    def __init__(
        self,
        client: DexScreenerClient,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._client = client
        self._clock = clock or (lambda: datetime.now(UTC))

    async def fetch_metrics(self, address: str) -> TokenMetrics:
        ensure_mint_address(address)
        pairs = await self._client.get_token_pairs(address)
        if not pairs:
            raise TokenNotFoundError(f"No DexScreener pairs for {address}")
        deepest = max(pairs, key=lambda p: p.liquidity_usd)
        return dexscreener_to_metrics(address, deepest, now=self._clock())

    async def close(self) -> None:
        await self._client.close()


def build_provider(settings: Settings) -> MetricsProvider:
    """Instantiate the configured provider."""
    kind = settings.metrics_provider.lower()
    if kind == "birdeye":
        if not settings.birdeye_api_key:
            raise ValueError("metrics_provider=birdeye requires BIRDEYE_API_KEY")
        return BirdeyeMetricsProvider(
            BirdeyeClient(settings.birdeye_api_key, max_rps=settings.birdeye_max_rps)
        )
    if kind == "dexscreener":
        return DexScreenerMetricsProvider(
            DexScreenerClient(max_rps=settings.dexscreener_max_rps)
        )
    if kind == "mock":
        return MockMetricsProvider(latency_sec=settings.mock_latency_sec)
    raise ValueError(f"Unknown metrics provider: {settings.metrics_provider!r}")
