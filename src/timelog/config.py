"""Configuration management for the time log core."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

SUPPORTED_ROUNDING_INTERVALS = frozenset({0, 1, 5, 6, 15})


@dataclass(frozen=True)
class Settings:
    """Library defaults loaded from environment.

    Attributes:
        rounding_interval: Minutes to round billable durations to when the
            caller does not pass an interval. Default 15 (quarter hour).
        default_currency: Currency reported when no cost carries one.
            Default USD.
    """

    rounding_interval: int = 15
    default_currency: str = "USD"

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.rounding_interval not in SUPPORTED_ROUNDING_INTERVALS:
            raise ValueError(
                f"rounding_interval must be one of {sorted(SUPPORTED_ROUNDING_INTERVALS)}"
            )
        if len(self.default_currency) != 3 or not self.default_currency.isalpha():
            raise ValueError("default_currency must be a 3-letter currency code")

    @classmethod
    def from_env(cls) -> Settings:
        """Load settings from environment variables."""
        load_dotenv()

        return cls(
            rounding_interval=int(os.getenv("TIMELOG_ROUNDING_INTERVAL", "15")),
            default_currency=os.getenv("TIMELOG_DEFAULT_CURRENCY", "USD").upper(),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings.from_env()
