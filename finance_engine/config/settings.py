"""
Configuration Management for the Finance Engine

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All tunable thresholds live here.
The defaults reproduce the product rules exactly (80% budget warning,
2-12 installments, one-cent negligible delta), so an unconfigured
engine behaves identically to the documented one.
"""

from decimal import Decimal
from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineSettings(BaseSettings):
    """Thresholds used by the budget comparator and the simulation overlay."""

    model_config = SettingsConfigDict(
        env_prefix="FINANCE_ENGINE_",
        extra="ignore"
    )

    # Budget classification
    budget_warning_percent: Decimal = Field(
        default=Decimal("80"),
        ge=0,
        description="Emit an alert once spend reaches this share of the budget"
    )
    budget_over_percent: Decimal = Field(
        default=Decimal("100"),
        ge=0,
        description="Classify as 'over' strictly above this share"
    )

    # Installment simulation
    min_installments: int = Field(
        default=2,
        ge=2,
        description="Smallest allowed installment count"
    )
    max_installments: int = Field(
        default=12,
        ge=2,
        description="Largest allowed installment count"
    )

    # Currency granularity for "is this a real change"
    negligible_delta: Decimal = Field(
        default=Decimal("0.01"),
        gt=0,
        description="Deltas strictly below this are treated as noise"
    )

    simulated_id_prefix: str = Field(
        default="simulated",
        min_length=1,
        description="Prefix for ids of rows created by the simulation overlay"
    )

    @model_validator(mode='after')
    def validate_ranges(self) -> 'EngineSettings':
        """Validate threshold relationships."""
        if self.min_installments > self.max_installments:
            raise ValueError("min_installments cannot exceed max_installments")
        if self.budget_warning_percent > self.budget_over_percent:
            raise ValueError("budget_warning_percent cannot exceed budget_over_percent")
        return self


class LoggingSettings(BaseSettings):
    """structlog output configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FINANCE_ENGINE_",
        extra="ignore"
    )

    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Minimum level for engine logs"
    )
    log_json: bool = Field(
        default=True,
        description="Render logs as JSON (False = human readable console)"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def engine(self) -> EngineSettings:
        return EngineSettings()

    @property
    def logging(self) -> LoggingSettings:
        return LoggingSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus
    "<name>_error" entries for the ones that failed.
    """
    results = {}

    settings = get_settings()

    for name in ("engine", "logging"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
