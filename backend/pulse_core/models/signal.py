"""Signal result and Fibonacci level models."""

from datetime import date
from enum import Enum

from pydantic import BaseModel, ConfigDict, model_validator


class SignalLabel(str, Enum):
    """Categorical reading of a composite score."""

    STRONG_BUY = "strong_buy"
    BUY = "buy"
    NEUTRAL = "neutral"
    SELL = "sell"
    STRONG_SELL = "strong_sell"


# Bearish to bullish, used when comparing labels
LABEL_ORDER: tuple[SignalLabel, ...] = (
    SignalLabel.STRONG_SELL,
    SignalLabel.SELL,
    SignalLabel.NEUTRAL,
    SignalLabel.BUY,
    SignalLabel.STRONG_BUY,
)


class RetracementLevels(BaseModel):
    """Fibonacci retracement levels of one trailing window.

    Levels are measured down from the high, so
    high >= level_236 >= level_382 >= level_500 >= level_618 >= level_786 >= low.
    """

    model_config = ConfigDict(frozen=True)

    high: float
    low: float
    level_236: float
    level_382: float
    level_500: float
    level_618: float
    level_786: float

    @property
    def range_size(self) -> float:
        """Get the window range (high - low)."""
        return self.high - self.low

    def as_candidates(self) -> tuple[float, ...]:
        """Return all seven levels from the low up to the high."""
        return (
            self.low,
            self.level_786,
            self.level_618,
            self.level_500,
            self.level_382,
            self.level_236,
            self.high,
        )


class SignalResult(BaseModel):
    """Technical signal for one ticker on one date.

    Indicator fields are rounded for storage (2 decimals for RSI/EMA,
    4 for MACD). Fibonacci levels and nearest levels keep full precision.
    """

    model_config = ConfigDict(frozen=True)

    ticker: str
    signal_date: date
    rsi_14: float
    ema_9: float
    ema_21: float
    ema_50: float
    ema_200: float
    macd_line: float
    macd_signal: float
    macd_histogram: float
    fib_levels: RetracementLevels
    nearest_fib_support: float | None = None
    nearest_fib_resistance: float | None = None
    signal_score: int
    signal_label: SignalLabel

    @model_validator(mode="after")
    def _check_score_range(self) -> "SignalResult":
        if not -100 <= self.signal_score <= 100:
            raise ValueError(
                f"signal_score must be within [-100, 100], got {self.signal_score}"
            )
        return self

    @property
    def key(self) -> tuple[str, date]:
        """Unique storage key: (ticker, signal_date)."""
        return self.ticker, self.signal_date

    def to_row(self) -> dict:
        """Flatten to the signal_history column layout."""
        return {
            "ticker": self.ticker,
            "signal_date": self.signal_date.isoformat(),
            "rsi_14": self.rsi_14,
            "ema_9": self.ema_9,
            "ema_21": self.ema_21,
            "ema_50": self.ema_50,
            "ema_200": self.ema_200,
            "macd_line": self.macd_line,
            "macd_signal": self.macd_signal,
            "macd_histogram": self.macd_histogram,
            "signal_score": self.signal_score,
            "signal_label": self.signal_label.value,
            "nearest_fib_support": self.nearest_fib_support,
            "nearest_fib_resistance": self.nearest_fib_resistance,
        }
