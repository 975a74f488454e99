"""Configuration package."""

from finance_engine.config.settings import (
    EngineSettings,
    LoggingSettings,
    Settings,
    get_settings,
)

__all__ = [
    "EngineSettings",
    "LoggingSettings",
    "Settings",
    "get_settings",
]
