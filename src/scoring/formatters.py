"""Display formatting for analysis results — key metrics and watch list.

All fixed-point output goes through ``to_fixed``, which rounds exact ties
away from zero (12.25 -> "12.3") rather than to even.
"""

from decimal import ROUND_HALF_UP, Decimal

from src.models.token import KeyMetrics

# Watch-list thresholds, separate from the scoring thresholds in analyzer.py
WATCH_LIQUIDITY_USD = 50_000
WATCH_TOP10_PCT = 60
WATCH_DEV_PCT = 15
WATCH_AGE_HOURS = 48
WATCH_VOLUME_RATIO = 0.05


def to_fixed(value: float, digits: int) -> str:
    # + 0.0 folds -0.0 into 0.0
    exact = Decimal(value + 0.0)
    return f"{exact.quantize(Decimal(1).scaleb(-digits), rounding=ROUND_HALF_UP):f}"


def format_usd(value: float) -> str:
    """Compact dollar amount: $1.23B / $4.56M / $7.89K / $0.12."""
    if value >= 1_000_000_000:
        return f"${to_fixed(value / 1_000_000_000, 2)}B"
    if value >= 1_000_000:
        return f"${to_fixed(value / 1_000_000, 2)}M"
    if value >= 1_000:
        return f"${to_fixed(value / 1_000, 2)}K"
    return f"${to_fixed(value, 2)}"


def format_percentage(value: float) -> str:
    return f"{to_fixed(value, 1)}%"


def format_age(age_hours: float) -> str:
    if age_hours < 24:
        return f"{to_fixed(age_hours, 1)} hours"
    return f"{to_fixed(age_hours / 24, 1)} days"


def format_holders(count: int) -> str:
    return f"{count:,}"


def format_buys_vs_sells(net_buys: int) -> str:
    if net_buys >= 0:
        return f"+{net_buys} net buys"
    return f"{net_buys} net sells"


def build_key_metrics(
    *,
    age_hours: float,
    liquidity: float,
    market_cap: float,
    holders: int,
    top10_pct: float,
    dev_pct: float,
    volume_1h: float,
    net_buys: int,
    price_change_1h: float,
) -> KeyMetrics:
    """Render zero-defaulted raw values into the nine display strings."""
    return KeyMetrics(
        age=format_age(age_hours),
        liquidity=format_usd(liquidity),
        market_cap=format_usd(market_cap),
        holders=format_holders(holders),
        top10_percentage=format_percentage(top10_pct),
        dev_percentage=format_percentage(dev_pct),
        volume_1h=format_usd(volume_1h),
        buys_vs_sells=format_buys_vs_sells(net_buys),
        price_change=format_percentage(price_change_1h),
    )


def build_watch_list(
    *,
    liquidity: float,
    top10_pct: float,
    dev_pct: float,
    age_hours: float,
    volume_ratio: float,
) -> list[str]:
    watch: list[str] = []
    if liquidity < WATCH_LIQUIDITY_USD:
        watch.append("Monitor liquidity changes")
    if top10_pct > WATCH_TOP10_PCT:
        watch.append("Watch for large holder sells")
    if dev_pct > WATCH_DEV_PCT:
        watch.append("Monitor dev wallet activity")
    if age_hours < WATCH_AGE_HOURS:
        watch.append("Token is very new - high risk period")
    if volume_ratio > WATCH_VOLUME_RATIO:
        watch.append("High volatility - set stop losses")
    return watch
