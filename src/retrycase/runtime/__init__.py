"""Runtime - Execution flow, control, and monitoring.

Contains: retry, concurrency, observability.
"""

from __future__ import annotations

__all__ = [
    # Retry
    "Backoff", "ConstantBackoff", "CappedExponentialBackoff", "FullJitterBackoff",
    "EqualJitterBackoff", "TruncatedExponentialBackoff", "DecorrelatedJitter",
    "Randomizer", "Rand", "default_rand",
    "Retrier", "RetryOptions", "do", "do_with_context", "do_async", "do_async_with_context",
    # Concurrency
    "Context", "CANCELLED", "DEADLINE_EXCEEDED",
    # Observability
    "configure_logging", "JsonFormatter",
]


def __getattr__(name: str):
    retry_attrs = {
        "Backoff", "ConstantBackoff", "CappedExponentialBackoff", "FullJitterBackoff",
        "EqualJitterBackoff", "TruncatedExponentialBackoff", "DecorrelatedJitter",
        "Randomizer", "Rand", "default_rand",
        "Retrier", "RetryOptions", "do", "do_with_context", "do_async", "do_async_with_context",
    }
    if name in retry_attrs:
        from . import retry
        return getattr(retry, name)

    if name in {"Context", "CANCELLED", "DEADLINE_EXCEEDED"}:
        from . import concurrency
        return getattr(concurrency, name)

    if name in {"configure_logging", "JsonFormatter"}:
        from . import observability
        return getattr(observability, name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
