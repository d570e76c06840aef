"""retrycase - Retry orchestration with pluggable backoff strategies.

Re-runs a fallible operation until it succeeds, raises an unretryable
error, exhausts its attempt budget, or its cancellation signal fires
while waiting between attempts.

Quick Start (one-shot):
    >>> from retrycase import do, CappedExponentialBackoff
    >>>
    >>> do(fetch_report, max_retry_attempts=3, backoff=CappedExponentialBackoff())

Reusable Retrier (safe to share across threads and tasks):
    >>> from retrycase import Retrier, FullJitterBackoff, Rand, SECOND, MILLISECOND
    >>>
    >>> retrier = Retrier(
    ...     max_retry_attempts=5,
    ...     backoff=FullJitterBackoff(SECOND, 50 * MILLISECOND, Rand()),
    ... )
    >>> retrier.do(fetch_report)
    >>> await retrier.do_async(fetch_report_async)

Stopping early:
    >>> from retrycase import unretryable
    >>>
    >>> def fetch_report():
    ...     resp = session.get(url)
    ...     if resp.status_code == 400:
    ...         raise unretryable(ValueError("bad request"))
    ...     return resp.json()

Cancellation:
    >>> from retrycase import Context, CancellationError, do_with_context
    >>>
    >>> try:
    ...     do_with_context(Context.with_timeout(2.0), fetch_report)
    ... except CancellationError as e:
    ...     print("gave up waiting, last failure:", e.cause)

Decorator:
    >>> from retrycase import retry
    >>>
    >>> @retry(max_retry_attempts=3)
    ... def fetch_report(): ...
"""

from __future__ import annotations

__version__ = "0.1.0"

# Errors
from .foundation.errors import (
    CancellationError,
    RetryError,
    UnretryableError,
    contains,
    find,
    is_kind,
    is_unretryable,
    unretryable,
    unwrap,
    walk,
)

# Concurrency
from .runtime.concurrency import CANCELLED, DEADLINE_EXCEEDED, Context

# Retry
from .runtime.retry import (
    DEFAULT_BACKOFF_BASE_INTERVAL,
    DEFAULT_BACKOFF_MAXIMUM_INTERVAL,
    DEFAULT_RETRY_BACKOFF,
    DEFAULT_RETRY_MAX_ATTEMPTS,
    MAX_DURATION,
    MICROSECOND,
    MILLISECOND,
    NANOSECOND,
    SECOND,
    Backoff,
    CappedExponentialBackoff,
    ConstantBackoff,
    DecorrelatedJitter,
    Duration,
    EqualJitterBackoff,
    FullJitterBackoff,
    Rand,
    Randomizer,
    Retrier,
    RetryOptions,
    TruncatedExponentialBackoff,
    as_duration,
    default_rand,
    do,
    do_async,
    do_async_with_context,
    do_with_context,
    retry,
    to_seconds,
)

# Config
from .foundation.config import (
    BackoffStrategy,
    LoggingSettings,
    RetrycaseSettings,
    RetrySettings,
    clear_settings_cache,
    get_settings,
)

# Observability
from .runtime.observability import configure_logging

__all__ = [
    "__version__",
    # Errors
    "RetryError", "UnretryableError", "CancellationError", "unretryable",
    "unwrap", "walk", "find", "is_kind", "contains", "is_unretryable",
    # Concurrency
    "Context", "CANCELLED", "DEADLINE_EXCEEDED",
    # Durations
    "Duration", "NANOSECOND", "MICROSECOND", "MILLISECOND", "SECOND", "MAX_DURATION",
    "as_duration", "to_seconds",
    # Randomizer
    "Randomizer", "Rand", "default_rand",
    # Backoff
    "Backoff", "ConstantBackoff", "CappedExponentialBackoff", "FullJitterBackoff",
    "EqualJitterBackoff", "TruncatedExponentialBackoff", "DecorrelatedJitter",
    "DEFAULT_BACKOFF_BASE_INTERVAL", "DEFAULT_BACKOFF_MAXIMUM_INTERVAL",
    # Retrier
    "Retrier", "RetryOptions", "DEFAULT_RETRY_MAX_ATTEMPTS", "DEFAULT_RETRY_BACKOFF",
    "do", "do_with_context", "do_async", "do_async_with_context", "retry",
    # Config
    "RetrycaseSettings", "RetrySettings", "LoggingSettings", "BackoffStrategy",
    "get_settings", "clear_settings_cache",
    # Observability
    "configure_logging",
]
