"""Pydantic models for Birdeye Data Services API responses."""

from decimal import Decimal

from pydantic import BaseModel


class BirdeyeTokenOverview(BaseModel):
    """Response from /defi/token_overview.

    Price, mcap, liquidity, volume, holders, 1h trade counts. 30 CU per call.
    """

    address: str = ""
    name: str | None = None
    symbol: str | None = None
    decimals: int | None = None

    price: Decimal | None = None
    marketCap: Decimal | None = None
    fdv: Decimal | None = None
    liquidity: Decimal | None = None
    holder: int | None = None

    # Volume in USD by time window
    v1hUSD: Decimal | None = None
    v24hUSD: Decimal | None = None

    # Trade counts (1h window is what the scorer reads)
    buy1h: int | None = None
    sell1h: int | None = None

    priceChange1hPercent: Decimal | None = None
    priceChange24hPercent: Decimal | None = None

    # Social links: {"website": ..., "twitter": ..., "telegram": ...}
    extensions: dict | None = None

    model_config = {"extra": "ignore"}

    @property
    def net_buys_1h(self) -> int | None:
        if self.buy1h is None or self.sell1h is None:
            return None
        return self.buy1h - self.sell1h


class BirdeyeTokenSecurity(BaseModel):
    """Response from /defi/token_security. 50 CU.

    Holder percentages come back as fractions (0.15 == 15%).
    """

    ownerAddress: str | None = None
    ownerPercentage: Decimal | None = None
    creatorAddress: str | None = None
    creatorPercentage: Decimal | None = None
    creationTime: int | None = None  # unix seconds
    top10HolderPercent: Decimal | None = None
    totalSupply: Decimal | None = None
    freezeAuthority: str | None = None
    mintAuthority: str | None = None

    model_config = {"extra": "ignore"}

    @property
    def is_mintable(self) -> bool:
        return self.mintAuthority is not None

    @property
    def is_freezable(self) -> bool:
        return self.freezeAuthority is not None

    @property
    def dev_fraction(self) -> Decimal | None:
        """Creator share, falling back to the current owner's share."""
        if self.creatorPercentage is not None:
            return self.creatorPercentage
        return self.ownerPercentage
