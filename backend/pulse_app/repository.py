"""Signal repository protocol and an in-memory implementation.

Any storage backend (PostgreSQL, key-value store, in-memory) can implement
SignalRepository. Signals are unique on (ticker, signal_date) and saving
an existing key replaces it.
"""

from __future__ import annotations

from datetime import date
from typing import Protocol, runtime_checkable

from pulse_core.models import SignalResult


@runtime_checkable
class SignalRepository(Protocol):
    """Protocol that signal storage backends must implement."""

    async def upsert_signal(self, result: SignalResult) -> None:
        """Insert or replace the signal for (ticker, signal_date)."""
        ...

    async def get_signal(self, ticker: str, signal_date: date) -> SignalResult | None:
        """Get the signal for one ticker and date."""
        ...

    async def list_signals(self, signal_date: date | None = None) -> list[SignalResult]:
        """List stored signals, optionally for a single date."""
        ...


class InMemorySignalRepository:
    """Dict-backed SignalRepository."""

    def __init__(self):
        self._signals: dict[tuple[str, date], SignalResult] = {}

    async def upsert_signal(self, result: SignalResult) -> None:
        self._signals[result.key] = result

    async def get_signal(self, ticker: str, signal_date: date) -> SignalResult | None:
        return self._signals.get((ticker, signal_date))

    async def list_signals(self, signal_date: date | None = None) -> list[SignalResult]:
        signals = [
            s for s in self._signals.values()
            if signal_date is None or s.signal_date == signal_date
        ]
        return sorted(signals, key=lambda s: (s.signal_date, s.ticker))

    def __len__(self) -> int:
        return len(self._signals)
