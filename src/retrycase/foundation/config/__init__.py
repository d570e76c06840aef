"""Configuration management using pydantic-settings.

Provides environment-based configuration with type safety and validation.
"""

from .settings import (
    BackoffStrategy,
    LoggingSettings,
    RetrycaseSettings,
    RetrySettings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "BackoffStrategy",
    "LoggingSettings",
    "RetrySettings",
    "RetrycaseSettings",
    "clear_settings_cache",
    "get_settings",
]
