"""Moving-average and oscillator indicators (EMA, RSI, MACD).

All functions take a close-price sequence ordered oldest -> newest and
never mutate it. Short input degrades to a documented default instead of
raising:

- ema / ema_series: empty result
- rsi: 50.0 (neutral)
- macd: all zeros
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence

import numpy as np

NEUTRAL_RSI = 50.0


@dataclass(frozen=True)
class MovingAverageSeries:
    """EMA values tagged with the price index each one belongs to.

    values[0] belongs to price index ``start`` (= period - 1), so two
    series of different periods can be joined on index.
    """

    period: int
    start: int
    values: tuple[float, ...] = ()

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self) -> Iterator[float]:
        return iter(self.values)

    @property
    def last(self) -> float | None:
        """Latest EMA value, or None when the series is empty."""
        return self.values[-1] if self.values else None

    def items(self) -> Iterator[tuple[int, float]]:
        """Iterate (price_index, value) pairs."""
        return zip(range(self.start, self.start + len(self.values)), self.values)


@dataclass(frozen=True)
class MacdResult:
    """Latest MACD line, signal line and histogram."""

    line: float = 0.0
    signal: float = 0.0
    histogram: float = 0.0


def _as_array(values: Sequence[float]) -> np.ndarray:
    return np.asarray(values, dtype=np.float64)


def _check_period(period: int) -> None:
    if period < 1:
        raise ValueError(f"period must be >= 1, got {period}")


def ema_series(prices: Sequence[float], period: int) -> MovingAverageSeries:
    """
    Calculate an Exponential Moving Average with its price indices.

    The first value is the simple mean of the first ``period`` prices;
    each later value is ``prev + (price - prev) * 2 / (period + 1)``.

    Args:
        prices: Close prices, oldest first
        period: EMA period (>= 1)

    Returns:
        MovingAverageSeries with ``len(prices) - period + 1`` values,
        or no values when there are fewer than ``period`` prices
    """
    _check_period(period)
    arr = _as_array(prices)
    if len(arr) < period:
        return MovingAverageSeries(period=period, start=period - 1)

    multiplier = 2.0 / (period + 1)

    # cumsum adds left to right; np.sum would use pairwise summation
    previous = float(np.cumsum(arr[:period])[-1]) / period
    values = [previous]
    for price in arr[period:].tolist():
        previous = previous + (price - previous) * multiplier
        values.append(previous)

    return MovingAverageSeries(period=period, start=period - 1, values=tuple(values))


def ema(prices: Sequence[float], period: int) -> list[float]:
    """
    Calculate an Exponential Moving Average.

    Args:
        prices: Close prices, oldest first
        period: EMA period (>= 1)

    Returns:
        List of EMA values, empty if there are fewer than ``period`` prices
    """
    return list(ema_series(prices, period).values)


def latest_ema(prices: Sequence[float], period: int) -> float:
    """Latest EMA value, falling back to the latest price when too short."""
    value = ema_series(prices, period).last
    if value is None:
        return float(prices[-1])
    return value


def rsi(prices: Sequence[float], period: int = 14) -> float:
    """
    Calculate the Relative Strength Index with Wilder's smoothing.

    The first averages are plain means of the gains and losses over the
    first ``period`` price changes; every later change is folded in with
    ``avg = (avg * (period - 1) + x) / period``.

    Args:
        prices: Close prices, oldest first
        period: Look-back period

    Returns:
        RSI in [0, 100]; 50.0 if there are fewer than ``period + 1`` prices,
        100.0 if the average loss is zero
    """
    _check_period(period)
    arr = _as_array(prices)
    if len(arr) < period + 1:
        return NEUTRAL_RSI

    deltas = np.diff(arr)
    gains = np.where(deltas > 0, deltas, 0.0)
    losses = np.where(deltas < 0, -deltas, 0.0)

    avg_gain = float(np.cumsum(gains[:period])[-1]) / period
    avg_loss = float(np.cumsum(losses[:period])[-1]) / period

    for gain, loss in zip(gains[period:].tolist(), losses[period:].tolist()):
        avg_gain = (avg_gain * (period - 1) + gain) / period
        avg_loss = (avg_loss * (period - 1) + loss) / period

    if avg_loss == 0:
        return 100.0

    rs = avg_gain / avg_loss
    return 100.0 - 100.0 / (1.0 + rs)


def macd(
    prices: Sequence[float],
    fast: int = 12,
    slow: int = 26,
    signal: int = 9,
) -> MacdResult:
    """
    Calculate MACD (fast EMA - slow EMA) with its signal line.

    The MACD line is built by joining the fast and slow EMAs on the price
    index they belong to; the signal line is an EMA of that line.

    Args:
        prices: Close prices, oldest first
        fast: Fast EMA period
        slow: Slow EMA period (must be longer than ``fast``)
        signal: Signal line EMA period

    Returns:
        MacdResult for the latest bar; zeros if either EMA is unavailable
    """
    if fast >= slow:
        raise ValueError(f"fast period ({fast}) must be shorter than slow ({slow})")

    fast_ema = ema_series(prices, fast)
    slow_ema = ema_series(prices, slow)
    if not fast_ema or not slow_ema:
        return MacdResult()

    fast_by_index = dict(fast_ema.items())
    macd_values = [fast_by_index[index] - value for index, value in slow_ema.items()]

    signal_ema = ema_series(macd_values, signal)
    line = macd_values[-1]
    signal_line = signal_ema.last if signal_ema else 0.0

    return MacdResult(line=line, signal=signal_line, histogram=line - signal_line)
