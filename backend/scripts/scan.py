#!/usr/bin/env python3
"""
Sniper market scan.

Runs one scan (or one scan every --interval seconds) against the live
CoinGecko universe and Binance candles, and prints the ranked signals.

Usage:
    python scripts/scan.py                    # single scan, top 50 assets
    python scripts/scan.py --limit 100        # scan the top 100
    python scripts/scan.py --interval 60      # rescan every 60 seconds
    python scripts/scan.py --loop             # rescan every SCAN_INTERVAL seconds
    python scripts/scan.py --top 10 --json    # JSON output, best 10 only
"""

import argparse
import asyncio
import json
import logging
import math
import sys
from pathlib import Path

# Make the backend packages importable when run from a checkout
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.config import get_settings
from app.scanner_profile import load_scanner_profile
from app.services import MarketScanner, build_market_scanner
from core.models import TradeSignal

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


def format_table(signals: list[TradeSignal]) -> str:
    """Render signals as a fixed-width text table."""
    header = (
        f"{'SYMBOL':<8} {'SCORE':>5} {'STATUS':<7} {'PRICE':>12} "
        f"{'24H%':>7} {'VOLUME':>9} {'RSI':>5} {'ADX':>5} "
        f"{'STOP':>12} {'TARGET':>12}  REASON"
    )
    lines = [header, "-" * len(header)]
    for s in signals:
        change = "n/a" if math.isnan(s.price_change_percent) else f"{s.price_change_percent:+.2f}"
        lines.append(
            f"{s.symbol:<8} {s.score:>5.0f} {s.status.value:<7} {s.entry_price:>12.4f} "
            f"{change:>7} {s.volume_label:>9} {s.rsi:>5.0f} {s.adx:>5.0f} "
            f"{s.stop_loss:>12.4f} {s.take_profit:>12.4f}  {s.reason}"
        )
    return "\n".join(lines)


def format_json(signals: list[TradeSignal]) -> str:
    """Render signals as a JSON array (NaN becomes null)."""
    rows = []
    for s in signals:
        row = s.model_dump(mode="json")
        row["volume_label"] = s.volume_label
        row["analysis"] = s.analysis
        rows.append(row)
    return json.dumps(rows, indent=2)


async def run_once(scanner: MarketScanner, args: argparse.Namespace) -> None:
    signals = await scanner.scan(args.limit)
    if args.top:
        signals = signals[: args.top]
    if args.json:
        print(format_json(signals))
    elif signals:
        print(format_table(signals))
    else:
        print("No signals (market data unavailable)")


async def main(args: argparse.Namespace) -> None:
    settings = get_settings()
    profile_path = args.profile or settings.profile_path
    profile = load_scanner_profile(Path(profile_path) if profile_path else None)
    scanner = build_market_scanner(settings, profile)
    interval = args.interval or (settings.scan_interval if args.loop else 0)

    try:
        while True:
            await run_once(scanner, args)
            if interval <= 0:
                break
            logger.info(f"Next scan in {interval:.0f}s")
            await asyncio.sleep(interval)
    finally:
        await scanner.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Sniper market scan")
    parser.add_argument("--limit", type=int, default=None, help="Universe size (default from settings)")
    parser.add_argument("--interval", type=float, default=0, help="Rescan every N seconds (0 = once)")
    parser.add_argument("--loop", action="store_true", help="Rescan every SCAN_INTERVAL seconds")
    parser.add_argument("--top", type=int, default=0, help="Show only the best N signals")
    parser.add_argument("--json", action="store_true", help="Print JSON instead of a table")
    parser.add_argument("--profile", type=str, default="", help="Path to scanner.yaml")
    args = parser.parse_args()

    try:
        asyncio.run(main(args))
    except KeyboardInterrupt:
        pass
