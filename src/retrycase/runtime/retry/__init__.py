"""Retry orchestration with pluggable backoff.

Example:
    >>> from retrycase import Retrier, FullJitterBackoff, Rand, SECOND, MILLISECOND
    >>>
    >>> retrier = Retrier(
    ...     max_retry_attempts=5,
    ...     backoff=FullJitterBackoff(SECOND, 50 * MILLISECOND, Rand()),
    ... )
    >>> retrier.do(lambda: client.get("/health"))
"""

from .backoff import (
    DEFAULT_BACKOFF_BASE_INTERVAL,
    DEFAULT_BACKOFF_MAXIMUM_INTERVAL,
    Backoff,
    CappedExponentialBackoff,
    ConstantBackoff,
    DecorrelatedJitter,
    EqualJitterBackoff,
    FullJitterBackoff,
    TruncatedExponentialBackoff,
)
from .duration import MAX_DURATION, MICROSECOND, MILLISECOND, NANOSECOND, SECOND, Duration, as_duration, to_seconds
from .rand import Rand, Randomizer, default_rand
from .retrier import (
    DEFAULT_RETRY_BACKOFF,
    DEFAULT_RETRY_MAX_ATTEMPTS,
    Retrier,
    RetryOptions,
    do,
    do_async,
    do_async_with_context,
    do_with_context,
    retry,
)

__all__ = [
    # Durations
    "Duration", "NANOSECOND", "MICROSECOND", "MILLISECOND", "SECOND", "MAX_DURATION",
    "as_duration", "to_seconds",
    # Randomizer
    "Randomizer", "Rand", "default_rand",
    # Backoff strategies
    "Backoff",
    "ConstantBackoff",
    "CappedExponentialBackoff",
    "FullJitterBackoff",
    "EqualJitterBackoff",
    "TruncatedExponentialBackoff",
    "DecorrelatedJitter",
    "DEFAULT_BACKOFF_BASE_INTERVAL",
    "DEFAULT_BACKOFF_MAXIMUM_INTERVAL",
    # Retrier
    "Retrier",
    "RetryOptions",
    "DEFAULT_RETRY_MAX_ATTEMPTS",
    "DEFAULT_RETRY_BACKOFF",
    "do",
    "do_with_context",
    "do_async",
    "do_async_with_context",
    "retry",
]
