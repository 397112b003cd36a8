"""Rule-table scoring of indicator readings."""

from pulse_core.scoring.components import (
    fib_position,
    score_ema_alignment,
    score_fib_position,
    score_macd_momentum,
    score_rsi,
    score_sr_proximity,
)
from pulse_core.scoring.composite import (
    LABEL_RULES,
    SCORE_LIMIT,
    ScoreBreakdown,
    label_from_score,
    score_signal,
)
from pulse_core.scoring.rules import ScoreRule, clamp, first_match, matching_rule

__all__ = [
    "fib_position",
    "score_ema_alignment",
    "score_fib_position",
    "score_macd_momentum",
    "score_rsi",
    "score_sr_proximity",
    "LABEL_RULES",
    "SCORE_LIMIT",
    "ScoreBreakdown",
    "label_from_score",
    "score_signal",
    "ScoreRule",
    "clamp",
    "first_match",
    "matching_rule",
]
