"""Core signal engine: indicators, scoring and models.

This package contains pure business logic with no I/O dependencies
(no database, network or filesystem access). Every function is a pure
transformation of its inputs, so callers may evaluate many tickers
concurrently without synchronization.
"""

from pulse_core.engine import (
    EmptyPriceSeriesError,
    IndicatorSnapshot,
    compute_indicators,
    evaluate_signal,
    explain_signal,
    generate_signals,
    round_half_up,
)

__all__ = [
    "EmptyPriceSeriesError",
    "IndicatorSnapshot",
    "compute_indicators",
    "evaluate_signal",
    "explain_signal",
    "generate_signals",
    "round_half_up",
]
