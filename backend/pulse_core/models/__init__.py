"""Data models shared by the engine and its callers."""

from pulse_core.models.bar import DailyBar, closes_from_bars, latest_close, sort_bars
from pulse_core.models.config import EMA_PERIODS, FIB_RATIOS, SignalConfig
from pulse_core.models.signal import (
    LABEL_ORDER,
    RetracementLevels,
    SignalLabel,
    SignalResult,
)

__all__ = [
    "DailyBar",
    "closes_from_bars",
    "latest_close",
    "sort_bars",
    "EMA_PERIODS",
    "FIB_RATIOS",
    "SignalConfig",
    "LABEL_ORDER",
    "RetracementLevels",
    "SignalLabel",
    "SignalResult",
]
