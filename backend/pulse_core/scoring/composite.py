"""Composite signal score and label mapping."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from pulse_core.indicators import MacdResult
from pulse_core.models import RetracementLevels, SignalLabel
from pulse_core.scoring.components import (
    score_ema_alignment,
    score_fib_position,
    score_macd_momentum,
    score_rsi,
    score_sr_proximity,
)
from pulse_core.scoring.rules import ScoreRule, clamp, first_match

SCORE_LIMIT = 100

LABEL_RULES: tuple[ScoreRule[int, SignalLabel], ...] = (
    ScoreRule("strong_buy", lambda s: s >= 50, SignalLabel.STRONG_BUY),
    ScoreRule("buy", lambda s: s >= 20, SignalLabel.BUY),
    ScoreRule("strong_sell", lambda s: s <= -50, SignalLabel.STRONG_SELL),
    ScoreRule("sell", lambda s: s <= -20, SignalLabel.SELL),
)


def label_from_score(score: int) -> SignalLabel:
    """Map a composite score to its label (first match wins)."""
    return first_match(LABEL_RULES, score, SignalLabel.NEUTRAL)


@dataclass(frozen=True)
class ScoreBreakdown:
    """The five sub-scores of one evaluation."""

    fib_position: int
    rsi: int
    ema_alignment: int
    sr_proximity: int
    macd_momentum: int

    @property
    def raw_total(self) -> int:
        return (
            self.fib_position
            + self.rsi
            + self.ema_alignment
            + self.sr_proximity
            + self.macd_momentum
        )

    @property
    def total(self) -> int:
        """Composite score clamped to [-100, 100]."""
        return clamp(self.raw_total, SCORE_LIMIT)

    @property
    def label(self) -> SignalLabel:
        return label_from_score(self.total)


def score_signal(
    price: float,
    rsi_value: float,
    emas: Sequence[float],
    macd_result: MacdResult,
    levels: RetracementLevels,
    support: float | None,
    resistance: float | None,
) -> ScoreBreakdown:
    """
    Score one set of indicator readings.

    Args:
        price: Latest close
        rsi_value: RSI reading
        emas: Latest EMA values, fast to slow (9, 21, 50, 200)
        macd_result: MACD reading
        levels: Fibonacci levels of the trailing window
        support: Nearest level at or below price
        resistance: Nearest level at or above price

    Returns:
        ScoreBreakdown with each sub-score
    """
    return ScoreBreakdown(
        fib_position=score_fib_position(price, levels),
        rsi=score_rsi(rsi_value),
        ema_alignment=score_ema_alignment(price, emas),
        sr_proximity=score_sr_proximity(price, support, resistance),
        macd_momentum=score_macd_momentum(macd_result),
    )
