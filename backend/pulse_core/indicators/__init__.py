"""Technical indicators (pure math, no I/O)."""

from pulse_core.indicators.indicators import (
    NEUTRAL_RSI,
    MacdResult,
    MovingAverageSeries,
    ema,
    ema_series,
    latest_ema,
    macd,
    rsi,
)
from pulse_core.indicators.levels import fibonacci_levels, nearest_levels

__all__ = [
    "NEUTRAL_RSI",
    "MacdResult",
    "MovingAverageSeries",
    "ema",
    "ema_series",
    "latest_ema",
    "macd",
    "rsi",
    "fibonacci_levels",
    "nearest_levels",
]
