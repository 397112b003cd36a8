"""Sub-scores of the composite signal.

Composite weight bands:

    Fibonacci position   ±30 (reachable: -25 .. +25)
    RSI zone             ±20
    EMA alignment        ±20
    S/R proximity        ±15
    MACD momentum        ±15
"""

from __future__ import annotations

from typing import Sequence

from pulse_core.indicators import MacdResult
from pulse_core.models import EMA_PERIODS, RetracementLevels
from pulse_core.scoring.rules import ScoreRule, clamp, first_match

# =============================================================================
# Fibonacci position (position = 0 at window low, 1 at window high)
# =============================================================================

FIB_BREAKOUT_POINTS = 25
FIB_BREAKDOWN_POINTS = -25
FIB_GOLDEN_ZONE_POINTS = 20
FIB_UPPER_PULLBACK_POINTS = 15
FIB_MILD_PULLBACK_POINTS = 10
FIB_UPTREND_POINTS = 5
FIB_LOWER_ZONE_POINTS = -15

FIB_POSITION_RULES: tuple[ScoreRule[float, int], ...] = (
    ScoreRule("breakout_above_window", lambda p: p > 1.0, FIB_BREAKOUT_POINTS),
    ScoreRule("breakdown_below_window", lambda p: p < 0.0, FIB_BREAKDOWN_POINTS),
    ScoreRule("golden_zone", lambda p: 0.60 <= p <= 0.65, FIB_GOLDEN_ZONE_POINTS),
    ScoreRule("upper_pullback", lambda p: 0.75 <= p <= 0.80, FIB_UPPER_PULLBACK_POINTS),
    ScoreRule("mild_pullback", lambda p: 0.35 <= p <= 0.40, FIB_MILD_PULLBACK_POINTS),
    ScoreRule("healthy_uptrend", lambda p: p > 0.764, FIB_UPTREND_POINTS),
    ScoreRule("lower_zone", lambda p: p < 0.30, FIB_LOWER_ZONE_POINTS),
)

# =============================================================================
# RSI zones
# =============================================================================

RSI_OVERSOLD_POINTS = 20
RSI_WEAK_POINTS = 10
RSI_OVERBOUGHT_POINTS = -20
RSI_STRONG_POINTS = -10

RSI_RULES: tuple[ScoreRule[float, int], ...] = (
    ScoreRule("oversold", lambda r: r <= 30, RSI_OVERSOLD_POINTS),
    ScoreRule("weak", lambda r: r <= 40, RSI_WEAK_POINTS),
    ScoreRule("overbought", lambda r: r >= 70, RSI_OVERBOUGHT_POINTS),
    ScoreRule("strong", lambda r: r >= 60, RSI_STRONG_POINTS),
)

# =============================================================================
# EMA alignment
# =============================================================================

EMA_ALIGNMENT_LIMIT = 20
EMA_STACK_POINTS = 4

# Points for price above (+) / below (-) each EMA, paired with EMA_PERIODS
EMA_POSITION_POINTS: tuple[int, ...] = (5, 4, 4, 3)


def _price_position_rules(points: int) -> tuple[ScoreRule[tuple[float, float], int], ...]:
    return (
        ScoreRule("price_above_ema", lambda pair: pair[0] > pair[1], points),
        ScoreRule("price_below_ema", lambda pair: pair[0] < pair[1], -points),
    )


EMA_POSITION_RULES: dict[int, tuple[ScoreRule[tuple[float, float], int], ...]] = {
    period: _price_position_rules(points)
    for period, points in zip(EMA_PERIODS, EMA_POSITION_POINTS)
}

EMA_STACK_RULES: tuple[ScoreRule[Sequence[float], int], ...] = (
    ScoreRule("bullish_stack", lambda e: e[0] > e[1] > e[2] > e[3], EMA_STACK_POINTS),
    ScoreRule("bearish_stack", lambda e: e[0] < e[1] < e[2] < e[3], -EMA_STACK_POINTS),
)

# =============================================================================
# Support / resistance proximity (distance as a fraction of price)
# =============================================================================

SR_PROXIMITY_LIMIT = 15
SR_NEAR_POINTS = 12
SR_CLOSE_POINTS = 6

SUPPORT_PROXIMITY_RULES: tuple[ScoreRule[float, int], ...] = (
    ScoreRule("within_2pct_of_support", lambda d: d <= 0.02, SR_NEAR_POINTS),
    ScoreRule("within_5pct_of_support", lambda d: d <= 0.05, SR_CLOSE_POINTS),
)

RESISTANCE_PROXIMITY_RULES: tuple[ScoreRule[float, int], ...] = (
    ScoreRule("within_2pct_of_resistance", lambda d: d <= 0.02, -SR_NEAR_POINTS),
    ScoreRule("within_5pct_of_resistance", lambda d: d <= 0.05, -SR_CLOSE_POINTS),
)

# =============================================================================
# MACD momentum
# =============================================================================

MACD_MOMENTUM_LIMIT = 15
MACD_CROSS_POINTS = 7
MACD_HISTOGRAM_POINTS = 5
MACD_ZERO_LINE_POINTS = 3

MACD_CROSS_RULES: tuple[ScoreRule[MacdResult, int], ...] = (
    ScoreRule("line_above_signal", lambda m: m.line > m.signal, MACD_CROSS_POINTS),
    ScoreRule("line_not_above_signal", lambda m: True, -MACD_CROSS_POINTS),
)

MACD_HISTOGRAM_RULES: tuple[ScoreRule[MacdResult, int], ...] = (
    ScoreRule("histogram_positive", lambda m: m.histogram > 0, MACD_HISTOGRAM_POINTS),
    ScoreRule("histogram_not_positive", lambda m: True, -MACD_HISTOGRAM_POINTS),
)

MACD_ZERO_LINE_RULES: tuple[ScoreRule[MacdResult, int], ...] = (
    ScoreRule("above_zero", lambda m: m.line > 0 and m.signal > 0, MACD_ZERO_LINE_POINTS),
    ScoreRule("below_zero", lambda m: m.line < 0 and m.signal < 0, -MACD_ZERO_LINE_POINTS),
)


def fib_position(price: float, levels: RetracementLevels) -> float | None:
    """Position of price inside the window (0 = low, 1 = high); None if flat."""
    range_size = levels.range_size
    if range_size == 0:
        return None
    return (price - levels.low) / range_size


def score_fib_position(price: float, levels: RetracementLevels) -> int:
    """Score where price sits in the Fibonacci window."""
    position = fib_position(price, levels)
    if position is None:
        return 0
    return first_match(FIB_POSITION_RULES, position, 0)


def score_rsi(rsi_value: float) -> int:
    """Score the RSI zone: oversold is bullish, overbought is bearish."""
    return first_match(RSI_RULES, rsi_value, 0)


def score_ema_alignment(price: float, emas: Sequence[float]) -> int:
    """
    Score price against the EMA stack.

    Args:
        price: Current price
        emas: Latest EMA values in EMA_PERIODS order (fast to slow)
    """
    if len(emas) != len(EMA_PERIODS):
        raise ValueError(f"expected {len(EMA_PERIODS)} EMA values, got {len(emas)}")

    score = 0
    for period, value in zip(EMA_PERIODS, emas):
        score += first_match(EMA_POSITION_RULES[period], (price, value), 0)
    score += first_match(EMA_STACK_RULES, emas, 0)

    return clamp(score, EMA_ALIGNMENT_LIMIT)


def score_sr_proximity(
    price: float,
    support: float | None,
    resistance: float | None,
) -> int:
    """Score closeness to support (bullish) and resistance (bearish)."""
    if support is None and resistance is None:
        return 0

    score = 0
    if support is not None:
        score += first_match(SUPPORT_PROXIMITY_RULES, (price - support) / price, 0)
    if resistance is not None:
        score += first_match(RESISTANCE_PROXIMITY_RULES, (resistance - price) / price, 0)

    return clamp(score, SR_PROXIMITY_LIMIT)


def score_macd_momentum(result: MacdResult) -> int:
    """Score MACD crossover state, histogram sign and zero-line side."""
    score = (
        first_match(MACD_CROSS_RULES, result, 0)
        + first_match(MACD_HISTOGRAM_RULES, result, 0)
        + first_match(MACD_ZERO_LINE_RULES, result, 0)
    )
    return clamp(score, MACD_MOMENTUM_LIMIT)
