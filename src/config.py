"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Every curve parameter has a default matching the reference deployment
    - get_settings() is cached (lru_cache): single instance per process

Environment variables use the TOKENOMICS_ prefix, e.g. TOKENOMICS_SLOPE=0.0002.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.core.math.bonding_curve import (
    DEFAULT_BASE_PRICE,
    DEFAULT_FOUNDER_ALLOCATION,
    DEFAULT_FUNDING_GOAL,
    DEFAULT_MAX_QUOTE_STEPS,
    DEFAULT_SLOPE,
)


class Settings(BaseSettings):
    """Engine settings from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TOKENOMICS_", env_file=".env", case_sensitive=False, extra="ignore",
    )

    # Bonding curve
    base_price: float = Field(DEFAULT_BASE_PRICE, gt=0)
    slope: float = Field(DEFAULT_SLOPE, ge=0)
    max_quote_steps: int = Field(DEFAULT_MAX_QUOTE_STEPS, ge=1)

    # Issuance
    founder_allocation: int = Field(DEFAULT_FOUNDER_ALLOCATION, ge=0)
    default_funding_goal: float = Field(DEFAULT_FUNDING_GOAL, gt=0)

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
