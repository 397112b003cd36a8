"""Application configuration."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from pulse_core.models import SignalConfig


class Settings(BaseSettings):
    """Application settings loaded from PULSE_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="PULSE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging
    log_level: str = "INFO"

    # Indicator parameters
    rsi_period: int = 14
    fib_lookback: int = 60

    # Seconds between upstream price requests (Alpha Vantage free tier: 12.5)
    fetch_delay_seconds: float = 0.0

    # Directory of <TICKER>.csv daily price files
    price_dir: Path = Path("prices")

    def signal_config(self) -> SignalConfig:
        """Build the engine configuration from these settings."""
        return SignalConfig(
            rsi_period=self.rsi_period,
            fib_lookback=self.fib_lookback,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
