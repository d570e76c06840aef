"""Environment-based configuration using pydantic-settings.

Provides type-safe, validated defaults for retriers built from the
environment rather than in code. Supports .env files and nested configuration.

Example:
    >>> from retrycase.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.retry.max_retry_attempts
    10
    >>> settings.logging.level
    'WARNING'

    # Or with environment variables:
    # RETRYCASE_RETRY_STRATEGY=full_jitter
    # RETRYCASE_RETRY_BASE_INTERVAL_MS=50
    # RETRYCASE_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

from enum import StrEnum
from functools import lru_cache
from typing import Literal

from pydantic import Field, NonNegativeInt, PositiveInt, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from retrycase.runtime.retry.backoff import (
    Backoff,
    CappedExponentialBackoff,
    ConstantBackoff,
    DecorrelatedJitter,
    EqualJitterBackoff,
    FullJitterBackoff,
    TruncatedExponentialBackoff,
)
from retrycase.runtime.retry.duration import MILLISECOND
from retrycase.runtime.retry.rand import Rand, Randomizer, default_rand


class BackoffStrategy(StrEnum):
    """Names accepted for RETRYCASE_RETRY_STRATEGY."""
    CONSTANT = "constant"
    CAPPED_EXPONENTIAL = "capped_exponential"
    FULL_JITTER = "full_jitter"
    EQUAL_JITTER = "equal_jitter"
    TRUNCATED_EXPONENTIAL = "truncated_exponential"
    DECORRELATED = "decorrelated"


class RetrySettings(BaseSettings):
    """Default retry configuration."""

    model_config = SettingsConfigDict(
        env_prefix="RETRYCASE_RETRY_",
        extra="ignore",
    )

    max_retry_attempts: NonNegativeInt = 10
    strategy: BackoffStrategy = BackoffStrategy.CONSTANT
    base_interval_ms: PositiveInt = Field(default=100, description="Base backoff interval in milliseconds")
    max_interval_ms: PositiveInt = Field(default=1000, description="Maximum backoff interval in milliseconds")
    seed: int | None = Field(default=None, description="Seed for a dedicated Rand; shared process Rand if unset")

    @field_validator("strategy", mode="before")
    @classmethod
    def _normalize_strategy(cls, v: str) -> str:
        """Accept 'Full-Jitter', 'FULL_JITTER', etc."""
        return v.strip().lower().replace("-", "_") if isinstance(v, str) else v

    def randomizer(self) -> Randomizer:
        return default_rand() if self.seed is None else Rand(self.seed)

    def build_backoff(self) -> Backoff:
        """Fresh strategy instance; decorrelated state is never shared between calls."""
        base = self.base_interval_ms * MILLISECOND
        cap = self.max_interval_ms * MILLISECOND
        match self.strategy:
            case BackoffStrategy.CONSTANT:
                return ConstantBackoff(base)
            case BackoffStrategy.CAPPED_EXPONENTIAL:
                return CappedExponentialBackoff(cap, base)
            case BackoffStrategy.FULL_JITTER:
                return FullJitterBackoff(cap, base, self.randomizer())
            case BackoffStrategy.EQUAL_JITTER:
                return EqualJitterBackoff(cap, base, self.randomizer())
            case BackoffStrategy.TRUNCATED_EXPONENTIAL:
                return TruncatedExponentialBackoff(cap, base, self.randomizer())
            case BackoffStrategy.DECORRELATED:
                return DecorrelatedJitter(cap, base, self.randomizer())
        raise ValueError(f"unknown backoff strategy: {self.strategy}")


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="RETRYCASE_LOG_",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    format: Literal["json", "text"] = "text"
    include_timestamps: bool = True

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


class RetrycaseSettings(BaseSettings):
    """Root settings for retrycase.

    Loads configuration from environment variables with RETRYCASE_ prefix.
    Supports nested configuration and .env files.

    Example environment variables:
        RETRYCASE_DEBUG=true
        RETRYCASE_RETRY_MAX_RETRY_ATTEMPTS=3
        RETRYCASE_RETRY_STRATEGY=decorrelated
        RETRYCASE_LOG_FORMAT=json
    """

    model_config = SettingsConfigDict(
        env_prefix="RETRYCASE_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    debug: bool = Field(default=False, description="Enable debug mode")

    retry: RetrySettings = Field(default_factory=RetrySettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @computed_field
    @property
    def effective_log_level(self) -> str:
        """DEBUG when debug mode is on, otherwise the configured level."""
        return "DEBUG" if self.debug else self.logging.level


@lru_cache(maxsize=1)
def get_settings() -> RetrycaseSettings:
    """Get the global settings instance (cached)."""
    return RetrycaseSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing).

    After calling this, the next get_settings() call will
    reload configuration from environment.
    """
    get_settings.cache_clear()
