"""Scan one or more tokens from the command line, bypassing the HTTP layer.

Uses the provider configured in .env (mock by default) and prints either a
short text report or the raw JSON the API would return in ``data``.

Usage:
    poetry run python scripts/scan_token.py EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v
    poetry run python scripts/scan_token.py <mint> <mint> --provider dexscreener --json
"""

import argparse
import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from config.settings import settings  # noqa: E402
from src.models.token import AnalysisResult  # noqa: E402
from src.parsers.exceptions import ProviderError  # noqa: E402
from src.parsers.providers import build_provider  # noqa: E402
from src.scoring.analyzer import analyze  # noqa: E402


def print_report(result: AnalysisResult) -> None:
    raw = result.raw_metrics
    label = raw.symbol or raw.address[:12]
    print(f"\n=== {label} ({raw.address}) ===")
    print(f"Verdict:    {result.verdict.value}")
    print(f"Degen:      {result.degen_score}/10")
    print(f"Confidence: {result.confidence}%")

    km = result.key_metrics
    print(
        f"Age {km.age} | Liq {km.liquidity} | MCap {km.market_cap} | "
        f"Holders {km.holders} | Top10 {km.top10_percentage} | Dev {km.dev_percentage}"
    )
    print(f"Vol 1h {km.volume_1h} | {km.buys_vs_sells} | 1h {km.price_change}")

    for title, flags in (
        ("RED", result.red_flags),
        ("YELLOW", result.yellow_flags),
        ("GREEN", result.green_flags),
        ("WATCH", result.watch_list),
    ):
        for flag in flags:
            print(f"  [{title}] {flag}")

    if result.missing_data:
        print(f"  Missing: {', '.join(result.missing_data)}")


async def main() -> None:
    parser = argparse.ArgumentParser(description="Scan Solana tokens for degen risk")
    parser.add_argument("addresses", nargs="+", help="Mint address(es)")
    parser.add_argument(
        "--provider",
        choices=["mock", "birdeye", "dexscreener"],
        default=None,
        help="Override METRICS_PROVIDER",
    )
    parser.add_argument("--json", action="store_true", help="Print result JSON")
    args = parser.parse_args()

    cfg = settings.model_copy(update={"mock_latency_sec": 0.0})
    if args.provider:
        cfg = cfg.model_copy(update={"metrics_provider": args.provider})
    provider = build_provider(cfg)

    exit_code = 0
    try:
        for address in args.addresses:
            try:
                metrics = await provider.fetch_metrics(address)
            except ProviderError as e:
                print(f"{address}: {e}", file=sys.stderr)
                exit_code = 1
                continue
            result = analyze(metrics)
            if args.json:
                print(result.model_dump_json(by_alias=True, exclude_none=True, indent=2))
            else:
                print_report(result)
    finally:
        await provider.close()

    sys.exit(exit_code)


if __name__ == "__main__":
    asyncio.run(main())
