"""Price history sources.

The engine only consumes close prices; these sources produce the daily
bars it is fed from. Any provider (vendor API, database, files) can be
plugged in by implementing PriceHistorySource.
"""

from __future__ import annotations

import asyncio
import csv
import logging
from pathlib import Path
from typing import Protocol, Sequence, runtime_checkable

from pydantic import ValidationError

from pulse_core.models import DailyBar, sort_bars

logger = logging.getLogger(__name__)


class PriceSourceError(Exception):
    """Raised when a source cannot produce a price history."""


@runtime_checkable
class PriceHistorySource(Protocol):
    """Protocol for daily price history access."""

    async def get_history(self, ticker: str) -> list[DailyBar]:
        """Return daily bars for ``ticker`` ordered oldest -> newest."""
        ...


def load_bars_csv(path: Path, ticker: str) -> list[DailyBar]:
    """
    Read daily bars from a CSV file.

    Expects a header row with at least ``date`` and ``close``; ``open``,
    ``high``, ``low`` default to the close and ``volume`` to 0.

    Raises:
        PriceSourceError: If the file is missing or a row is malformed
    """
    try:
        with path.open(newline="", encoding="utf-8") as f:
            rows = list(csv.DictReader(f))
    except FileNotFoundError:
        raise PriceSourceError(f"No price file for {ticker}: {path}") from None

    bars = []
    for line_no, row in enumerate(rows, start=2):
        try:
            close = float(row["close"])
            bars.append(
                DailyBar(
                    ticker=ticker,
                    price_date=row["date"],
                    open=float(row.get("open") or close),
                    high=float(row.get("high") or close),
                    low=float(row.get("low") or close),
                    close=close,
                    volume=int(float(row.get("volume") or 0)),
                )
            )
        except (KeyError, TypeError, ValueError, ValidationError) as e:
            raise PriceSourceError(f"{path}:{line_no}: invalid price row ({e})") from e

    return sort_bars(bars)


class CsvPriceSource:
    """Read price history from ``<TICKER>.csv`` files in one directory."""

    def __init__(self, directory: Path | str):
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    async def get_history(self, ticker: str) -> list[DailyBar]:
        """Load and sort the ticker's file without blocking the event loop."""
        path = self._directory / f"{ticker}.csv"
        return await asyncio.to_thread(load_bars_csv, path, ticker)


class FallbackPriceSource:
    """Try several sources in order and return the first non-empty history.

    A failing or empty source is logged and the next one is tried. When
    every source fails the history is empty, which callers treat as
    "no data" for that ticker.
    """

    def __init__(self, sources: Sequence[PriceHistorySource]):
        if not sources:
            raise ValueError("FallbackPriceSource needs at least one source")
        self._sources = list(sources)

    async def get_history(self, ticker: str) -> list[DailyBar]:
        for source in self._sources:
            name = type(source).__name__
            try:
                bars = await source.get_history(ticker)
            except Exception as e:
                logger.warning(f"{name} failed for {ticker}, trying next source: {e}")
                continue

            if bars:
                return sort_bars(bars)
            logger.warning(f"{name} returned no data for {ticker}")

        logger.error(f"All price sources failed for {ticker}")
        return []
