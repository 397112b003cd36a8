"""Signal engine configuration models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

# EMA snapshot periods, fast to slow. Output fields are named after these.
EMA_PERIODS: tuple[int, int, int, int] = (9, 21, 50, 200)

# Fibonacci retracement ratios, measured down from the window high
FIB_RATIOS: tuple[float, ...] = (0.236, 0.382, 0.5, 0.618, 0.786)


class SignalConfig(BaseModel):
    """Indicator parameters for the signal engine."""

    model_config = ConfigDict(frozen=True)

    rsi_period: int = Field(default=14, ge=1)
    fib_lookback: int = Field(default=60, ge=1)

    # MACD (fast, slow, signal)
    macd_fast: int = Field(default=12, ge=1)
    macd_slow: int = Field(default=26, ge=1)
    macd_signal: int = Field(default=9, ge=1)

    @model_validator(mode="after")
    def _check_macd_periods(self) -> SignalConfig:
        if self.macd_fast >= self.macd_slow:
            raise ValueError(
                f"macd_fast ({self.macd_fast}) must be shorter than "
                f"macd_slow ({self.macd_slow})"
            )
        return self
