"""CLI entry point for the signal engine.

Usage:
    python -m pulse_app signal --ticker AAPL --csv prices/AAPL.csv
    python -m pulse_app signal --ticker AAPL --csv prices/AAPL.csv --date 2025-01-02 --explain
    python -m pulse_app refresh --tickers AAPL,MSFT,NVDA --price-dir prices
"""

import argparse
import asyncio
import logging
import sys
from dataclasses import asdict
from datetime import date, datetime
from pathlib import Path

import orjson

from pulse_core import EmptyPriceSeriesError, evaluate_signal
from pulse_core.models import closes_from_bars

from pulse_app.config import Settings, get_settings
from pulse_app.repository import InMemorySignalRepository
from pulse_app.runner import SignalRefreshRunner, today_utc
from pulse_app.sources import (
    CsvPriceSource,
    FallbackPriceSource,
    PriceSourceError,
    load_bars_csv,
)

logger = logging.getLogger(__name__)


def parse_date(date_str: str) -> date:
    """Parse YYYY-MM-DD."""
    try:
        return datetime.strptime(date_str, "%Y-%m-%d").date()
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"Invalid date format: {date_str} (expected YYYY-MM-DD)"
        )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pulse_app",
        description="Composite technical signals from daily close prices",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose logging",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    signal = commands.add_parser("signal", help="Score one ticker from a CSV file")
    signal.add_argument("--ticker", required=True, help="Ticker symbol")
    signal.add_argument("--csv", required=True, type=Path, help="Daily price CSV")
    signal.add_argument(
        "--date",
        type=parse_date,
        default=None,
        help="Signal date (YYYY-MM-DD, default: today UTC)",
    )
    signal.add_argument(
        "--explain",
        action="store_true",
        help="Include the five sub-scores in the output",
    )

    refresh = commands.add_parser("refresh", help="Refresh signals for many tickers")
    refresh.add_argument(
        "--tickers",
        required=True,
        help="Comma-separated tickers, e.g. AAPL,MSFT",
    )
    refresh.add_argument(
        "--price-dir",
        type=Path,
        default=None,
        help="Directory of <TICKER>.csv files (default: PULSE_PRICE_DIR)",
    )
    refresh.add_argument(
        "--date",
        type=parse_date,
        default=None,
        help="Signal date (YYYY-MM-DD, default: today UTC)",
    )

    return parser.parse_args(argv)


def _dump(data: dict) -> None:
    print(orjson.dumps(data, option=orjson.OPT_INDENT_2).decode("utf-8"))


def cmd_signal(args: argparse.Namespace, settings: Settings) -> int:
    """Score one ticker and print the SignalResult as JSON."""
    ticker = args.ticker.strip().upper()
    try:
        bars = load_bars_csv(args.csv, ticker)
    except PriceSourceError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    closes = closes_from_bars(bars)
    config = settings.signal_config()
    try:
        result, breakdown = evaluate_signal(
            ticker, closes, args.date or today_utc(), config
        )
    except EmptyPriceSeriesError:
        print(f"Error: {args.csv} contains no prices", file=sys.stderr)
        return 1

    output = result.model_dump(mode="json")
    if args.explain:
        output["breakdown"] = asdict(breakdown)
    _dump(output)
    return 0


async def cmd_refresh(args: argparse.Namespace, settings: Settings) -> int:
    """Run the refresh runner over CSV files and print the report."""
    # Missing or unreadable files are reported as no_data
    source = FallbackPriceSource([CsvPriceSource(args.price_dir or settings.price_dir)])
    repository = InMemorySignalRepository()
    runner = SignalRefreshRunner(
        source=source,
        repository=repository,
        config=settings.signal_config(),
        fetch_delay=settings.fetch_delay_seconds,
    )

    report = await runner.run(args.tickers.split(","), args.date)
    _dump(report.to_dict())
    return 0


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    settings = get_settings()

    level = logging.DEBUG if args.verbose else settings.log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    if args.command == "signal":
        return cmd_signal(args, settings)
    return asyncio.run(cmd_refresh(args, settings))


if __name__ == "__main__":
    sys.exit(main())
