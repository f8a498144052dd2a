"""Engine settings with environment variable support.

Uses pydantic-settings for typed configuration validation.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings

from investsim.core.exceptions import ConfigurationError


class SimulatorSettings(BaseSettings):
    """Engine configuration loaded from environment variables."""

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    json_logs: bool = Field(default=False, description="Render logs as JSON")

    # Alert thresholds
    mismatch_tolerance: float = Field(default=1.0, ge=0, description="Allowed financed total gap in currency units")
    max_debt_to_income_pct: float = Field(default=40.0, ge=0, description="Debt-to-income error threshold %")
    max_item_financing_pct: float = Field(default=80.0, ge=0, le=100, description="Per-item financing warning threshold %")
    max_remodeling_share_pct: float = Field(default=30.0, ge=0, le=100, description="Remodeling share info threshold %")

    # Projection
    default_sample_step_months: int = Field(default=6, ge=1, description="Projection sampling cadence")

    # Default credit terms per credit type (nominal annual %, months)
    personal_rate_pct: float = Field(default=35.0, ge=0)
    personal_term_months: int = Field(default=24, ge=1)
    capital_rate_pct: float = Field(default=25.0, ge=0)
    capital_term_months: int = Field(default=60, ge=1)
    mortgage_rate_pct: float = Field(default=12.0, ge=0)
    mortgage_term_months: int = Field(default=240, ge=1)

    model_config = {
        "env_prefix": "INVESTSIM_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @model_validator(mode="after")
    def _check_log_level(self) -> "SimulatorSettings":
        if self.log_level.upper() not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ConfigurationError(f"Unknown log level: {self.log_level}")
        return self

    def credit_terms(self) -> dict[str, tuple[float, int]]:
        """Default (rate %, term months) keyed by credit type value."""
        return {
            "personal": (self.personal_rate_pct, self.personal_term_months),
            "capital": (self.capital_rate_pct, self.capital_term_months),
            "mortgage": (self.mortgage_rate_pct, self.mortgage_term_months),
        }


@lru_cache
def get_settings() -> SimulatorSettings:
    """Get cached engine settings."""
    return SimulatorSettings()
