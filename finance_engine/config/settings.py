"""
Configuration Management for the Finance Engine

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: Only presentation and policy knobs live here.
Monetary precision and the one-cent tolerance are part of the engine's
semantics and are fixed in finance_engine.money.
"""

from decimal import Decimal
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineSettings(BaseSettings):
    """Engine policy and presentation settings."""

    model_config = SettingsConfigDict(
        env_prefix="FINANCE_ENGINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    reference_currency: str = Field(
        default="BRL",
        min_length=3,
        max_length=3,
        description="Currency totals are aggregated in"
    )
    owner_display_name: str = Field(
        default="Você",
        description="How the primary account holder is named in settlement text"
    )
    unknown_participant_name: str = Field(
        default="Desconhecido",
        description="Name used for ids missing from the participant list"
    )
    all_settled_message: str = Field(
        default="Tudo quitado! Nenhuma pendência em aberto.",
        description="Sentinel line returned when nobody owes anything"
    )
    health_warning_savings_rate: Decimal = Field(
        default=Decimal("0.10"),
        ge=0,
        le=1,
        description="Savings rate below which health is WARNING"
    )

    @field_validator("reference_currency")
    @classmethod
    def normalize_currency(cls, v: str) -> str:
        return v.upper()


class LoggingSettings(BaseSettings):
    """structlog output configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FINANCE_LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Minimum level emitted by engine loggers"
    )
    json_output: bool = Field(
        default=True,
        description="Render log lines as JSON (otherwise key=value console output)"
    )

    @field_validator("level", mode="before")
    @classmethod
    def upper_level(cls, v):
        return v.upper() if isinstance(v, str) else v


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
