"""Signal engine: close-price history in, SignalResult out.

This module is pure business logic with no I/O dependencies. Fetching
prices and persisting results belong to the caller (see pulse_app).
"""

import logging
import math
from dataclasses import dataclass
from datetime import date
from typing import Sequence

from pulse_core.indicators import (
    MacdResult,
    fibonacci_levels,
    latest_ema,
    macd,
    nearest_levels,
    rsi,
)
from pulse_core.models import EMA_PERIODS, RetracementLevels, SignalConfig, SignalResult
from pulse_core.scoring import ScoreBreakdown, score_signal

logger = logging.getLogger(__name__)

PRICE_DECIMALS = 2
MACD_DECIMALS = 4

_DEFAULT_CONFIG = SignalConfig()


class EmptyPriceSeriesError(ValueError):
    """Raised when the engine is given no prices at all."""


@dataclass(frozen=True)
class IndicatorSnapshot:
    """Unrounded indicator readings for the latest bar."""

    price: float
    rsi: float
    emas: tuple[float, ...]
    macd: MacdResult
    fib_levels: RetracementLevels
    support: float | None
    resistance: float | None


def round_half_up(value: float, decimals: int) -> float:
    """Round to ``decimals`` places, ties going towards +infinity."""
    factor = 10**decimals
    return math.floor(value * factor + 0.5) / factor


def compute_indicators(
    close_prices: Sequence[float],
    config: SignalConfig | None = None,
) -> IndicatorSnapshot:
    """
    Compute every indicator the composite score needs.

    Args:
        close_prices: Close prices, oldest -> newest (at least one)
        config: Indicator parameters, defaults to SignalConfig()

    Raises:
        EmptyPriceSeriesError: If ``close_prices`` is empty
    """
    if len(close_prices) == 0:
        raise EmptyPriceSeriesError("close_prices must contain at least one price")

    config = config or _DEFAULT_CONFIG
    price = float(close_prices[-1])

    levels = fibonacci_levels(close_prices, config.fib_lookback)
    support, resistance = nearest_levels(price, levels)

    return IndicatorSnapshot(
        price=price,
        rsi=rsi(close_prices, config.rsi_period),
        emas=tuple(latest_ema(close_prices, period) for period in EMA_PERIODS),
        macd=macd(
            close_prices,
            fast=config.macd_fast,
            slow=config.macd_slow,
            signal=config.macd_signal,
        ),
        fib_levels=levels,
        support=support,
        resistance=resistance,
    )


def score_snapshot(snapshot: IndicatorSnapshot) -> ScoreBreakdown:
    """Score an indicator snapshot."""
    return score_signal(
        price=snapshot.price,
        rsi_value=snapshot.rsi,
        emas=snapshot.emas,
        macd_result=snapshot.macd,
        levels=snapshot.fib_levels,
        support=snapshot.support,
        resistance=snapshot.resistance,
    )


def explain_signal(
    close_prices: Sequence[float],
    config: SignalConfig | None = None,
) -> ScoreBreakdown:
    """Return the sub-scores behind a signal without building the result."""
    return score_snapshot(compute_indicators(close_prices, config))


def evaluate_signal(
    ticker: str,
    close_prices: Sequence[float],
    signal_date: date | str,
    config: SignalConfig | None = None,
) -> tuple[SignalResult, ScoreBreakdown]:
    """
    Generate a signal together with the sub-scores behind it.

    Indicators are computed once and shared by the result and the breakdown.

    Raises:
        EmptyPriceSeriesError: If ``close_prices`` is empty
    """
    snapshot = compute_indicators(close_prices, config)
    breakdown = score_snapshot(snapshot)
    return _build_result(ticker, signal_date, snapshot, breakdown), breakdown


def generate_signals(
    ticker: str,
    close_prices: Sequence[float],
    signal_date: date | str,
    config: SignalConfig | None = None,
) -> SignalResult:
    """
    Generate the composite technical signal for one ticker.

    Scores are computed from unrounded readings; the result then carries
    RSI and EMAs rounded to 2 decimals and MACD values to 4.

    Args:
        ticker: Instrument identifier
        close_prices: Close prices, oldest -> newest (at least one)
        signal_date: As-of date (date or ISO string)
        config: Indicator parameters, defaults to SignalConfig()

    Returns:
        SignalResult for (ticker, signal_date)

    Raises:
        EmptyPriceSeriesError: If ``close_prices`` is empty
    """
    result, _ = evaluate_signal(ticker, close_prices, signal_date, config)
    return result


def _build_result(
    ticker: str,
    signal_date: date | str,
    snapshot: IndicatorSnapshot,
    breakdown: ScoreBreakdown,
) -> SignalResult:
    ema_9, ema_21, ema_50, ema_200 = (
        round_half_up(value, PRICE_DECIMALS) for value in snapshot.emas
    )

    result = SignalResult(
        ticker=ticker,
        signal_date=signal_date,
        rsi_14=round_half_up(snapshot.rsi, PRICE_DECIMALS),
        ema_9=ema_9,
        ema_21=ema_21,
        ema_50=ema_50,
        ema_200=ema_200,
        macd_line=round_half_up(snapshot.macd.line, MACD_DECIMALS),
        macd_signal=round_half_up(snapshot.macd.signal, MACD_DECIMALS),
        macd_histogram=round_half_up(snapshot.macd.histogram, MACD_DECIMALS),
        fib_levels=snapshot.fib_levels,
        nearest_fib_support=snapshot.support,
        nearest_fib_resistance=snapshot.resistance,
        signal_score=breakdown.total,
        signal_label=breakdown.label,
    )

    logger.debug(
        "%s %s: score=%d label=%s %s",
        ticker,
        result.signal_date,
        result.signal_score,
        result.signal_label.value,
        breakdown,
    )
    return result
