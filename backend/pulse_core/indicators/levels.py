"""Fibonacci retracement levels and nearest support/resistance lookup."""

from typing import Sequence

import numpy as np

from pulse_core.models.config import FIB_RATIOS
from pulse_core.models.signal import RetracementLevels

_LEVEL_FIELDS = ("level_236", "level_382", "level_500", "level_618", "level_786")


def fibonacci_levels(prices: Sequence[float], lookback: int = 60) -> RetracementLevels:
    """
    Calculate Fibonacci retracement levels over the trailing window.

    level = high - (high - low) * ratio, for ratios 0.236 .. 0.786

    A flat window collapses every level onto the single price.

    Args:
        prices: Close prices, oldest first (must not be empty)
        lookback: Number of trailing prices to use; a shorter series
            uses all of it

    Returns:
        RetracementLevels for the window
    """
    if lookback < 1:
        raise ValueError(f"lookback must be >= 1, got {lookback}")

    window = np.asarray(prices, dtype=np.float64)[-lookback:]
    high = float(window.max())
    low = float(window.min())
    range_size = high - low

    levels = {
        field: high - range_size * ratio
        for field, ratio in zip(_LEVEL_FIELDS, FIB_RATIOS)
    }
    return RetracementLevels(high=high, low=low, **levels)


def nearest_levels(
    price: float,
    levels: RetracementLevels,
) -> tuple[float | None, float | None]:
    """
    Find the nearest level at-or-below and at-or-above the price.

    A level equal to the price counts as both support and resistance.

    Returns:
        Tuple of (support, resistance); support is None below the window
        low, resistance is None above the window high
    """
    support = None
    resistance = None

    for level in levels.as_candidates():
        if level <= price:
            if support is None or level > support:
                support = level
        if level >= price:
            if resistance is None or level < resistance:
                resistance = level

    return support, resistance
