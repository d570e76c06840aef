"""Foundation - Core building blocks for retrycase.

Contains: error taxonomy, configuration, testing helpers.
"""

from __future__ import annotations

__all__ = [
    # Errors
    "RetryError", "UnretryableError", "CancellationError", "unretryable",
    "unwrap", "walk", "find", "is_kind", "contains", "is_unretryable",
    # Config
    "RetrycaseSettings", "RetrySettings", "LoggingSettings", "BackoffStrategy",
    "get_settings", "clear_settings_cache",
    # Testing
    "StubRandomizer", "RecordingBackoff", "FlakyOperation",
]


def __getattr__(name: str):
    errors_attrs = {
        "RetryError", "UnretryableError", "CancellationError", "unretryable",
        "unwrap", "walk", "find", "is_kind", "contains", "is_unretryable",
    }
    if name in errors_attrs:
        from . import errors
        return getattr(errors, name)

    config_attrs = {
        "RetrycaseSettings", "RetrySettings", "LoggingSettings", "BackoffStrategy",
        "get_settings", "clear_settings_cache",
    }
    if name in config_attrs:
        from . import config
        return getattr(config, name)

    testing_attrs = {"StubRandomizer", "RecordingBackoff", "FlakyOperation"}
    if name in testing_attrs:
        from . import testing
        return getattr(testing, name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
