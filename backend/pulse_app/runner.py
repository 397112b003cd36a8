"""SignalRefreshRunner: nightly signal refresh across many tickers.

For each ticker: fetch the price history, run the signal engine on the
close series and upsert the result. Failures are isolated per ticker so
one bad symbol never aborts the batch.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Iterable

from pulse_core import generate_signals
from pulse_core.models import SignalConfig, SignalLabel, closes_from_bars

from pulse_app.repository import SignalRepository
from pulse_app.sources import PriceHistorySource

logger = logging.getLogger(__name__)

STATUS_OK = "ok"
STATUS_NO_DATA = "no_data"


@dataclass
class TickerResult:
    """Outcome of refreshing one ticker."""

    ticker: str
    status: str
    signal_label: SignalLabel | None = None
    signal_score: int | None = None

    def to_dict(self) -> dict:
        data: dict = {"ticker": self.ticker, "status": self.status}
        if self.signal_label is not None:
            data["signal_label"] = self.signal_label.value
            data["signal_score"] = self.signal_score
        return data


@dataclass
class RefreshReport:
    """Summary of a refresh run."""

    message: str
    duration_ms: int
    results: list[TickerResult] = field(default_factory=list)

    @property
    def updated(self) -> int:
        return sum(1 for r in self.results if r.status == STATUS_OK)

    def to_dict(self) -> dict:
        return {
            "message": self.message,
            "duration_ms": self.duration_ms,
            "results": [r.to_dict() for r in self.results],
        }


def normalize_tickers(tickers: Iterable[str]) -> list[str]:
    """Strip and upper-case tickers, dropping blanks and duplicates (first wins)."""
    seen: dict[str, None] = {}
    for ticker in tickers:
        symbol = ticker.strip().upper()
        if symbol:
            seen.setdefault(symbol, None)
    return list(seen)


def today_utc() -> date:
    return datetime.now(timezone.utc).date()


class SignalRefreshRunner:
    """Refresh stored signals for a set of tickers."""

    def __init__(
        self,
        source: PriceHistorySource,
        repository: SignalRepository,
        config: SignalConfig | None = None,
        fetch_delay: float = 0.0,
    ):
        self._source = source
        self._repository = repository
        self.config = config or SignalConfig()
        self.fetch_delay = fetch_delay

    async def run(
        self,
        tickers: Iterable[str],
        signal_date: date | None = None,
    ) -> RefreshReport:
        """Refresh every ticker and return a per-ticker report."""
        start_time = time.monotonic()
        symbols = normalize_tickers(tickers)
        signal_date = signal_date or today_utc()

        if not symbols:
            return RefreshReport(
                message="No active tickers to update",
                duration_ms=self._elapsed_ms(start_time),
            )

        logger.info(f"Updating {len(symbols)} tickers: {', '.join(symbols)}")

        results = []
        for i, ticker in enumerate(symbols):
            results.append(await self._refresh_ticker(ticker, signal_date))

            # Rate limit upstream calls; no wait after the last ticker
            if self.fetch_delay > 0 and i < len(symbols) - 1:
                logger.debug(f"Rate limiting: waiting {self.fetch_delay}s")
                await asyncio.sleep(self.fetch_delay)

        report = RefreshReport(
            message="",
            duration_ms=self._elapsed_ms(start_time),
            results=results,
        )
        report.message = f"Updated {report.updated}/{len(symbols)} tickers"
        logger.info(f"{report.message} in {report.duration_ms}ms")
        return report

    async def _refresh_ticker(self, ticker: str, signal_date: date) -> TickerResult:
        try:
            bars = await self._source.get_history(ticker)
            if not bars:
                logger.warning(f"[{ticker}] No price data")
                return TickerResult(ticker=ticker, status=STATUS_NO_DATA)

            result = generate_signals(
                ticker, closes_from_bars(bars), signal_date, self.config
            )
            await self._repository.upsert_signal(result)
        except Exception as e:
            logger.error(f"[{ticker}] Signal refresh failed", exc_info=True)
            return TickerResult(ticker=ticker, status=f"error: {e}")

        logger.info(
            f"[{ticker}] {result.signal_label.value} ({result.signal_score:+d}) "
            f"from {len(bars)} bars"
        )
        return TickerResult(
            ticker=ticker,
            status=STATUS_OK,
            signal_label=result.signal_label,
            signal_score=result.signal_score,
        )

    @staticmethod
    def _elapsed_ms(start_time: float) -> int:
        return int((time.monotonic() - start_time) * 1000)
