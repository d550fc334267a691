"""Token metrics input record and analysis result output record.

Attributes are snake_case; JSON in and out uses the camelCase aliases the
web client speaks (``ageHours``, ``degenScore`` ...). Serialize with
``model_dump(by_alias=True)``.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Verdict(str, Enum):
    """Categorical risk label."""

    COOKED = "COOKED"
    DEGEN = "DEGEN"
    SAFE = "SAFE"
    SCAM = "SCAM"
    UNCLEAR = "UNCLEAR"
    APEX_RISK = "APEX_RISK"
    BASED = "BASED"


class TokenMetrics(BaseModel):
    """Descriptive metrics for one token. Only ``address`` is required.

    Absent fields stay ``None``; the scoring engine decides how to treat them.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    address: str

    # Basic token info
    name: str | None = None
    symbol: str | None = None
    decimals: int | None = None

    # Age
    created_at: datetime | None = Field(default=None, alias="createdAt")
    age_hours: float | None = Field(default=None, alias="ageHours")

    # Market
    price_usd: float | None = Field(default=None, alias="priceUsd")
    price_change_1h: float | None = Field(default=None, alias="priceChange1h")
    price_change_24h: float | None = Field(default=None, alias="priceChange24h")
    market_cap: float | None = Field(default=None, alias="marketCap")
    fully_diluted_valuation: float | None = Field(default=None, alias="fullyDilutedValuation")

    # Liquidity
    liquidity_usd: float | None = Field(default=None, alias="liquidityUsd")

    # Holders (percentages are 0-100)
    holder_count: int | None = Field(default=None, alias="holderCount")
    top10_holder_percentage: float | None = Field(default=None, alias="top10HolderPercentage")
    dev_holder_percentage: float | None = Field(default=None, alias="devHolderPercentage")

    # Volume / trading activity
    volume_1h: float | None = Field(default=None, alias="volume1h")
    volume_24h: float | None = Field(default=None, alias="volume24h")
    buy_count_1h: int | None = Field(default=None, alias="buyCount1h")
    sell_count_1h: int | None = Field(default=None, alias="sellCount1h")
    net_buys_vs_sells: int | None = Field(default=None, alias="netBuysVsSells")

    # Social (not scored)
    website: str | None = None
    twitter: str | None = None
    telegram: str | None = None

    # Authority flags
    is_renounced: bool | None = Field(default=None, alias="isRenounced")
    is_freeze_authority_revoked: bool | None = Field(default=None, alias="isFreezeAuthorityRevoked")
    is_mint_authority_revoked: bool | None = Field(default=None, alias="isMintAuthorityRevoked")


class KeyMetrics(BaseModel):
    """Display strings for the nine headline metrics."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    age: str
    liquidity: str
    market_cap: str = Field(alias="marketCap")
    holders: str
    top10_percentage: str = Field(alias="top10Percentage")
    dev_percentage: str = Field(alias="devPercentage")
    volume_1h: str = Field(alias="volume1h")
    buys_vs_sells: str = Field(alias="buysVsSells")
    price_change: str = Field(alias="priceChange")


class AnalysisResult(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    verdict: Verdict
    degen_score: int = Field(alias="degenScore", ge=0, le=10)
    confidence: int = Field(ge=0, le=100)

    red_flags: list[str] = Field(default_factory=list, alias="redFlags")
    yellow_flags: list[str] = Field(default_factory=list, alias="yellowFlags")
    green_flags: list[str] = Field(default_factory=list, alias="greenFlags")

    key_metrics: KeyMetrics = Field(alias="keyMetrics")
    watch_list: list[str] = Field(default_factory=list, alias="watchList")
    missing_data: list[str] = Field(default_factory=list, alias="missingData")

    raw_metrics: TokenMetrics = Field(alias="rawMetrics")
