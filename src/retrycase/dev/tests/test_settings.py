"""Tests for environment settings and logging configuration."""

from __future__ import annotations

import io
import logging

import orjson
import pytest

from retrycase import (
    MILLISECOND,
    SECOND,
    BackoffStrategy,
    CappedExponentialBackoff,
    ConstantBackoff,
    DecorrelatedJitter,
    FullJitterBackoff,
    Rand,
    Retrier,
    RetrySettings,
    clear_settings_cache,
    configure_logging,
    default_rand,
    get_settings,
)
from retrycase.foundation.testing import FlakyOperation


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch) -> object:
    """Isolate from ambient RETRYCASE_* variables and reset cached settings."""
    import os
    for key in list(os.environ):
        if key.startswith("RETRYCASE_"):
            monkeypatch.delenv(key)
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def restore_logger() -> object:
    logger = logging.getLogger("retrycase")
    handlers, level = list(logger.handlers), logger.level
    yield logger
    logger.handlers = handlers
    logger.setLevel(level)


# ─────────────────────────────────────────────────────────────────────────────
# Settings
# ─────────────────────────────────────────────────────────────────────────────


def test_defaults_match_retrier_defaults() -> None:
    settings = get_settings()
    assert settings.retry.max_retry_attempts == 10
    assert settings.retry.strategy == BackoffStrategy.CONSTANT
    assert settings.retry.build_backoff() == ConstantBackoff(100 * MILLISECOND)
    assert settings.logging.level == "WARNING"
    assert settings.effective_log_level == "WARNING"


def test_settings_cached() -> None:
    assert get_settings() is get_settings()


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RETRYCASE_RETRY_MAX_RETRY_ATTEMPTS", "3")
    monkeypatch.setenv("RETRYCASE_RETRY_STRATEGY", "Full-Jitter")
    monkeypatch.setenv("RETRYCASE_RETRY_BASE_INTERVAL_MS", "50")
    monkeypatch.setenv("RETRYCASE_RETRY_MAX_INTERVAL_MS", "2000")
    monkeypatch.setenv("RETRYCASE_DEBUG", "true")

    settings = get_settings()
    backoff = settings.retry.build_backoff()

    assert settings.retry.max_retry_attempts == 3
    assert isinstance(backoff, FullJitterBackoff)
    assert backoff.base_interval == 50 * MILLISECOND
    assert backoff.max_interval == 2 * SECOND
    assert backoff.rand is default_rand()
    assert settings.effective_log_level == "DEBUG"


def test_seed_gives_dedicated_rand() -> None:
    backoff = RetrySettings(strategy="equal_jitter", seed=7).build_backoff()
    assert isinstance(backoff.rand, Rand)
    assert backoff.rand is not default_rand()


def test_decorrelated_built_fresh_each_time() -> None:
    settings = RetrySettings(strategy=BackoffStrategy.DECORRELATED)
    first, second = settings.build_backoff(), settings.build_backoff()
    assert isinstance(first, DecorrelatedJitter)
    assert first is not second


@pytest.mark.parametrize("bad", [{"max_retry_attempts": -1}, {"base_interval_ms": 0}, {"strategy": "linear"}])
def test_invalid_settings(bad: dict[str, object]) -> None:
    from pydantic import ValidationError
    with pytest.raises(ValidationError):
        RetrySettings(**bad)


def test_retrier_from_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RETRYCASE_RETRY_MAX_RETRY_ATTEMPTS", "2")
    monkeypatch.setenv("RETRYCASE_RETRY_STRATEGY", "capped_exponential")
    monkeypatch.setenv("RETRYCASE_RETRY_BASE_INTERVAL_MS", "1")

    retrier = Retrier.from_settings()
    assert retrier.max_retry_attempts == 2
    assert retrier.backoff == CappedExponentialBackoff(SECOND, MILLISECOND)

    op = FlakyOperation(failures=2, error=OSError("busy"), result="ok")
    assert retrier.do(op) == "ok"


def test_retrier_from_explicit_settings() -> None:
    retrier = Retrier.from_settings(RetrySettings(max_retry_attempts=0))
    assert retrier.max_retry_attempts == 0


# ─────────────────────────────────────────────────────────────────────────────
# Logging
# ─────────────────────────────────────────────────────────────────────────────


def test_configure_logging_json(restore_logger: logging.Logger) -> None:
    stream = io.StringIO()
    configure_logging(level="debug", format="json", stream=stream)

    with pytest.raises(OSError):
        Retrier(max_retry_attempts=1, backoff=ConstantBackoff(1)).do(FlakyOperation(5, OSError("busy")))

    lines = [orjson.loads(line) for line in stream.getvalue().splitlines()]
    assert len(lines) == 1
    assert lines[0]["level"] == "debug"
    assert lines[0]["logger"] == "retrycase.retry"
    assert lines[0]["event"].startswith("Retry 1/1")
    assert "timestamp" in lines[0]


def test_configure_logging_text_replaces_handler(restore_logger: logging.Logger) -> None:
    stream = io.StringIO()
    configure_logging(level="INFO", format="text", stream=io.StringIO())
    logger = configure_logging(level="INFO", format="text", stream=stream, include_timestamps=False)

    assert sum(type(h).__name__ == "_RetrycaseHandler" for h in logger.handlers) == 1

    logging.getLogger("retrycase.retry").info("hello")
    assert stream.getvalue() == "[INFO] retrycase.retry: hello\n"


def test_configure_logging_defaults_from_env(monkeypatch: pytest.MonkeyPatch, restore_logger: logging.Logger) -> None:
    monkeypatch.setenv("RETRYCASE_LOG_LEVEL", "error")
    logger = configure_logging(stream=io.StringIO())
    assert logger.level == logging.ERROR


def test_configure_logging_rejects_unknown_format(restore_logger: logging.Logger) -> None:
    with pytest.raises(ValueError, match="Unknown format"):
        configure_logging(format="xml")
