"""Degen score engine — rule-based risk verdict for a single token.

Evaluates a TokenMetrics record against a fixed battery of independent
rules. Each rule nudges the degen score up (riskier) or down (safer) and
may emit one red/yellow/green flag. The summed score, the flag counts and
the missing-data report then pick a verdict by strict priority.

Pure function: no IO, no shared state. Identical input gives an identical
result.

Scoring breakdown (baseline 5):
- Age: <1h +3 red, <24h +2 yellow, >7d -1 green
- Liquidity: <$10k +3 red, <$100k +1 yellow, >$1M -1 green
- Top 10 holders: >80% +3 red, >50% +2 yellow, <20% -1 green
- Dev holdings: >30% +3 red, >10% +1 yellow, <5% -1 green
- Mint renounced: no +1 yellow, yes -2 green
- Freeze authority revoked: -1 green
- 1h volume / market cap > 0.1: +1 yellow
- Net buys: >0 -1 green, < -50 +1 yellow
- |1h price change| > 20%: +1 yellow
"""

from dataclasses import dataclass, field

from src.models.token import AnalysisResult, TokenMetrics, Verdict
from src.scoring.formatters import build_key_metrics, build_watch_list, format_percentage

BASELINE_SCORE = 5
MIN_SCORE = 0
MAX_SCORE = 10

DEFAULT_CONFIDENCE = 75
UNCLEAR_CONFIDENCE = 50
MIN_CONFIDENCE = 30
MISSING_FIELD_PENALTY = 15

UNCLEAR_MISSING_COUNT = 3
SCAM_RED_FLAG_COUNT = 3
BASED_GREEN_FLAG_COUNT = 3

VOLATILE_VOLUME_RATIO = 0.1
VOLATILE_PRICE_CHANGE_PCT = 20

# (report token, TokenMetrics attribute)
CRITICAL_FIELDS: tuple[tuple[str, str], ...] = (
    ("age", "age_hours"),
    ("liquidity", "liquidity_usd"),
    ("holders", "holder_count"),
    ("top10_holdings", "top10_holder_percentage"),
    ("dev_holdings", "dev_holder_percentage"),
)


@dataclass
class Scorecard:
    """Running tally while the rules are evaluated."""

    score: int = BASELINE_SCORE
    red_flags: list[str] = field(default_factory=list)
    yellow_flags: list[str] = field(default_factory=list)
    green_flags: list[str] = field(default_factory=list)
    volume_ratio: float = 0.0  # 1h volume / market cap, shared with the watch list

    def red(self, text: str, delta: int) -> None:
        self.red_flags.append(text)
        self.score += delta

    def yellow(self, text: str, delta: int) -> None:
        self.yellow_flags.append(text)
        self.score += delta

    def green(self, text: str, delta: int) -> None:
        self.green_flags.append(text)
        self.score += delta


def _num(value: float | int | None) -> float:
    """Absent numeric input scores as zero."""
    return 0.0 if value is None else float(value)


def _count(value: int | None) -> int:
    return 0 if value is None else int(value)


def find_missing_data(metrics: TokenMetrics) -> list[str]:
    """Report tokens for critical inputs that are absent or zero.

    Zero counts as missing: a token with exactly 0% dev holdings is reported
    the same as one where dev holdings are unknown.
    """
    return [token for token, attr in CRITICAL_FIELDS if not getattr(metrics, attr)]


def volume_to_mcap_ratio(metrics: TokenMetrics) -> float:
    market_cap = _num(metrics.market_cap)
    if market_cap == 0:
        market_cap = 1.0
    return _num(metrics.volume_1h) / market_cap


def evaluate_rules(metrics: TokenMetrics) -> Scorecard:
    """Apply every rule in order. One tier per signal, signals independent."""
    card = Scorecard()

    # --- Age ---
    age_hours = _num(metrics.age_hours)
    if age_hours < 1:
        card.red("Token is less than 1 hour old - extreme rug risk", 3)
    elif age_hours < 24:
        card.yellow("Token is less than 24 hours old - high risk", 2)
    elif age_hours > 168:
        card.green("Token is over 7 days old - established", -1)

    # --- Liquidity ---
    liquidity = _num(metrics.liquidity_usd)
    if liquidity < 10_000:
        card.red("Liquidity under $10k - high rug pull risk", 3)
    elif liquidity < 100_000:
        card.yellow("Liquidity $10k-$100k - thin liquidity", 1)
    elif liquidity > 1_000_000:
        card.green("Liquidity over $1M - healthy pool", -1)

    # --- Holder concentration ---
    top10 = _num(metrics.top10_holder_percentage)
    if top10 > 80:
        card.red(f"Top 10 holders control {format_percentage(top10)} - extreme concentration risk", 3)
    elif top10 > 50:
        card.yellow(f"Top 10 holders control {format_percentage(top10)} - high concentration", 2)
    elif top10 < 20:
        card.green(f"Top 10 holders control {format_percentage(top10)} - good distribution", -1)

    # --- Dev holdings ---
    dev_pct = _num(metrics.dev_holder_percentage)
    if dev_pct > 30:
        card.red(f"Dev holds {format_percentage(dev_pct)} - high insider control", 3)
    elif dev_pct > 10:
        card.yellow(f"Dev holds {format_percentage(dev_pct)} - concerning insider holdings", 1)
    elif dev_pct < 5:
        card.green(f"Dev holds {format_percentage(dev_pct)} - reasonable insider holdings", -1)

    # --- Contract authorities (unknown scores as not renounced) ---
    if metrics.is_renounced is True:
        card.green("Mint authority renounced - contract safety", -2)
    else:
        card.yellow("Mint authority not renounced - dev can mint more tokens", 1)

    if metrics.is_freeze_authority_revoked is True:
        card.green("Freeze authority revoked - cannot freeze accounts", -1)

    # --- Volume vs market cap ---
    card.volume_ratio = volume_to_mcap_ratio(metrics)
    if card.volume_ratio > VOLATILE_VOLUME_RATIO:
        card.yellow("High 1h volume relative to market cap - extreme volatility", 1)

    # --- Buy pressure ---
    net_buys = _count(metrics.net_buys_vs_sells)
    if net_buys > 0:
        card.green(f"Net positive buys in last hour (+{net_buys}) - buying pressure", -1)
    elif net_buys < -50:
        card.yellow(f"Net negative buys in last hour ({net_buys}) - selling pressure", 1)

    # --- Price volatility ---
    price_change = _num(metrics.price_change_1h)
    if abs(price_change) > VOLATILE_PRICE_CHANGE_PCT:
        card.yellow(f"1h price change {format_percentage(price_change)} - extreme volatility", 1)

    return card


def derive_verdict(
    score: int, red_count: int, green_count: int, missing_count: int
) -> Verdict:
    """Pick the verdict by strict priority on the unclamped score.

    Order matters: a score of exactly 4 hits APEX_RISK before SAFE is
    considered.
    """
    if missing_count >= UNCLEAR_MISSING_COUNT:
        return Verdict.UNCLEAR
    if red_count >= SCAM_RED_FLAG_COUNT:
        return Verdict.SCAM
    if score >= 8:
        return Verdict.COOKED
    if score >= 6:
        return Verdict.DEGEN
    if score >= 4:
        return Verdict.APEX_RISK
    if score <= 2 and green_count >= BASED_GREEN_FLAG_COUNT:
        return Verdict.BASED
    if score <= 4:
        return Verdict.SAFE
    return Verdict.UNCLEAR


def compute_confidence(missing_count: int) -> int:
    """Confidence drops 15 points per missing critical field, floor 30."""
    if missing_count >= UNCLEAR_MISSING_COUNT:
        return UNCLEAR_CONFIDENCE
    if missing_count > 0:
        return max(MIN_CONFIDENCE, 100 - missing_count * MISSING_FIELD_PENALTY)
    return DEFAULT_CONFIDENCE


def analyze(metrics: TokenMetrics) -> AnalysisResult:
    """Score one token and build the full analysis result."""
    missing_data = find_missing_data(metrics)
    card = evaluate_rules(metrics)

    verdict = derive_verdict(
        card.score,
        red_count=len(card.red_flags),
        green_count=len(card.green_flags),
        missing_count=len(missing_data),
    )
    degen_score = max(MIN_SCORE, min(MAX_SCORE, card.score))
    confidence = compute_confidence(len(missing_data))

    age_hours = _num(metrics.age_hours)
    liquidity = _num(metrics.liquidity_usd)
    top10 = _num(metrics.top10_holder_percentage)
    dev_pct = _num(metrics.dev_holder_percentage)

    key_metrics = build_key_metrics(
        age_hours=age_hours,
        liquidity=liquidity,
        market_cap=_num(metrics.market_cap),
        holders=_count(metrics.holder_count),
        top10_pct=top10,
        dev_pct=dev_pct,
        volume_1h=_num(metrics.volume_1h),
        net_buys=_count(metrics.net_buys_vs_sells),
        price_change_1h=_num(metrics.price_change_1h),
    )
    watch_list = build_watch_list(
        liquidity=liquidity,
        top10_pct=top10,
        dev_pct=dev_pct,
        age_hours=age_hours,
        volume_ratio=card.volume_ratio,
    )

    return AnalysisResult(
        verdict=verdict,
        degen_score=degen_score,
        confidence=confidence,
        red_flags=card.red_flags,
        yellow_flags=card.yellow_flags,
        green_flags=card.green_flags,
        key_metrics=key_metrics,
        watch_list=watch_list,
        missing_data=missing_data,
        raw_metrics=metrics,
    )
