"""Daily price bar model and helpers for turning bars into a close series."""

from datetime import date
from typing import Sequence

from pydantic import BaseModel, ConfigDict, Field


class DailyBar(BaseModel):
    """One day of OHLCV data for a ticker.

    Prices must be positive and finite; the engine divides by the close.
    """

    model_config = ConfigDict(frozen=True)

    ticker: str
    price_date: date
    open: float = Field(gt=0, allow_inf_nan=False)
    high: float = Field(gt=0, allow_inf_nan=False)
    low: float = Field(gt=0, allow_inf_nan=False)
    close: float = Field(gt=0, allow_inf_nan=False)
    volume: int = Field(default=0, ge=0)


def sort_bars(bars: Sequence[DailyBar]) -> list[DailyBar]:
    """Return bars ordered oldest -> newest."""
    return sorted(bars, key=lambda bar: bar.price_date)


def closes_from_bars(bars: Sequence[DailyBar]) -> list[float]:
    """Extract close prices in the order given (expected oldest -> newest)."""
    return [bar.close for bar in bars]


def latest_close(bars: Sequence[DailyBar]) -> float | None:
    """Get the most recent close, or None for an empty history."""
    if not bars:
        return None
    return bars[-1].close
