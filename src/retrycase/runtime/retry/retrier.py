"""Retry loop driving an operation through a Backoff strategy.

A Retrier owns an immutable RetryOptions (attempt budget, backoff,
optional on_retry hook) and runs operations with it:

    Running(0) --ok--> Success
        |
        +--exception--> attempt >= max or unretryable? --yes--> re-raise
                              |
                              no: delay = backoff.get(attempt)
                              |
                              race delay against Context
                              |-- Context fired --> raise CancellationError(exc)
                              +-- delay elapsed --> Running(attempt + 1)

Attempts never overlap. Only the wait between attempts is interruptible;
a running operation is never cut short. Each call keeps its own attempt
counter, so one Retrier may serve many threads or tasks at once.

Example:
    >>> retrier = Retrier(
    ...     max_retry_attempts=3,
    ...     backoff=TruncatedExponentialBackoff(SECOND, MILLISECOND, Rand()),
    ... )
    >>> retrier.do(fetch_profile)
    >>> await retrier.do_async(fetch_profile_async)
"""

from __future__ import annotations

import functools
import inspect
import logging
from typing import TYPE_CHECKING, Callable, TypeVar

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt

from retrycase.foundation.errors import CancellationError, is_unretryable
from retrycase.runtime.concurrency import CANCELLED, Context

from .backoff import DEFAULT_BACKOFF_BASE_INTERVAL, Backoff, ConstantBackoff
from .duration import Duration, to_seconds

if TYPE_CHECKING:
    from collections.abc import Awaitable

    from retrycase.foundation.config import RetrySettings

T = TypeVar("T")

logger = logging.getLogger("retrycase.retry")

DEFAULT_RETRY_MAX_ATTEMPTS = 10
DEFAULT_RETRY_BACKOFF: Backoff = ConstantBackoff(DEFAULT_BACKOFF_BASE_INTERVAL)

OnRetry = Callable[[int, Exception, Duration], None]


class RetryOptions(BaseModel):
    """Retrier configuration.

    Attributes:
        max_retry_attempts: Retries after the first try (0 = try once)
        backoff: Delay strategy between attempts (default: constant 100ms)
        on_retry: Called as (attempt, exception, delay_ns) before each wait
    """

    model_config = ConfigDict(
        frozen=True,
        arbitrary_types_allowed=True,  # For Backoff protocol
        extra="forbid",
        revalidate_instances="never",
    )

    max_retry_attempts: NonNegativeInt = DEFAULT_RETRY_MAX_ATTEMPTS
    backoff: Backoff = Field(default=DEFAULT_RETRY_BACKOFF, repr=False)
    on_retry: OnRetry | None = Field(default=None, exclude=True, repr=False)


class Retrier:
    """Runs operations with retry. Build once, reuse freely.

    Accepts either a RetryOptions or its fields as keyword arguments;
    keywords override fields of a given RetryOptions.
    """

    __slots__ = ("_options",)

    def __init__(self, options: RetryOptions | None = None, **overrides: object) -> None:
        if options is None:
            options = RetryOptions(**overrides)
        elif overrides:
            options = RetryOptions(**{**dict(options), **overrides})
        self._options = options

    @classmethod
    def from_settings(cls, settings: RetrySettings | None = None) -> Retrier:
        """Build from environment-driven RetrySettings (default: get_settings().retry)."""
        if settings is None:
            from retrycase.foundation.config import get_settings
            settings = get_settings().retry
        return cls(max_retry_attempts=settings.max_retry_attempts, backoff=settings.build_backoff())

    @property
    def options(self) -> RetryOptions:
        return self._options

    @property
    def max_retry_attempts(self) -> int:
        return self._options.max_retry_attempts

    @property
    def backoff(self) -> Backoff:
        return self._options.backoff

    def do(self, operation: Callable[[], T]) -> T:
        """Run operation, retrying on exception, waiting without a cancellation signal.

        Args:
            operation: Zero-argument callable; raising signals failure

        Returns:
            The value of the first successful call

        Raises:
            Exception: The last failure once attempts run out, or the
                unretryable failure that stopped the loop, unchanged
        """
        return self._run(Context.background(), operation)

    def do_with_context(self, ctx: Context, operation: Callable[[], T]) -> T:
        """Run operation with retry; ctx can interrupt the waits between attempts.

        Args:
            ctx: Cancellation signal raced against each backoff delay
            operation: Zero-argument callable; raising signals failure

        Returns:
            The value of the first successful call

        Raises:
            CancellationError: ctx fired while waiting; wraps the pending failure
            Exception: As for do()
        """
        return self._run(ctx, operation)

    async def do_async(self, operation: Callable[[], Awaitable[T]]) -> T:
        """Async form of do(); waits between attempts without blocking the loop.

        Args:
            operation: Zero-argument callable returning an awaitable

        Returns:
            The awaited value of the first successful call
        """
        return await self._run_async(Context.background(), operation)

    async def do_async_with_context(self, ctx: Context, operation: Callable[[], Awaitable[T]]) -> T:
        """Async form of do_with_context().

        Args:
            ctx: Cancellation signal, may be fired from any thread
            operation: Zero-argument callable returning an awaitable

        Returns:
            The awaited value of the first successful call

        Raises:
            CancellationError: ctx fired while waiting; wraps the pending failure
        """
        return await self._run_async(ctx, operation)

    def wrap(self, fn: Callable[..., T]) -> Callable[..., T]:
        """Decorate fn so every call runs through this Retrier. Coroutine functions stay async."""
        if inspect.iscoroutinefunction(fn):
            @functools.wraps(fn)
            async def async_wrapper(*args: object, **kwargs: object) -> T:
                return await self.do_async(lambda: fn(*args, **kwargs))
            return async_wrapper  # type: ignore[return-value]

        @functools.wraps(fn)
        def wrapper(*args: object, **kwargs: object) -> T:
            return self.do(lambda: fn(*args, **kwargs))
        return wrapper

    def _run(self, ctx: Context, operation: Callable[[], T]) -> T:
        attempt = 0
        while True:
            try:
                return operation()
            except Exception as exc:
                if not self._is_retryable(attempt, exc):
                    raise
                delay = self._schedule(attempt, exc)
                if ctx.wait(to_seconds(delay)):
                    raise self._cancelled(ctx, attempt, exc) from exc
            attempt += 1

    async def _run_async(self, ctx: Context, operation: Callable[[], Awaitable[T]]) -> T:
        attempt = 0
        while True:
            try:
                return await operation()
            except Exception as exc:
                if not self._is_retryable(attempt, exc):
                    raise
                delay = self._schedule(attempt, exc)
                if await ctx.wait_async(to_seconds(delay)):
                    raise self._cancelled(ctx, attempt, exc) from exc
            attempt += 1

    def _is_retryable(self, attempt: int, exc: BaseException | None) -> bool:
        if attempt >= self._options.max_retry_attempts:
            return False
        return not is_unretryable(exc)

    def _schedule(self, attempt: int, exc: Exception) -> Duration:
        delay = self._options.backoff.get(attempt)
        logger.debug(
            f"Retry {attempt + 1}/{self._options.max_retry_attempts} "
            f"after {to_seconds(delay):.3f}s ({type(exc).__name__}: {exc})"
        )
        if self._options.on_retry:
            self._options.on_retry(attempt, exc, delay)
        return delay

    def _cancelled(self, ctx: Context, attempt: int, exc: Exception) -> CancellationError:
        reason = ctx.reason or CANCELLED
        logger.info(f"Retry aborted after attempt {attempt + 1}: {reason}")
        return CancellationError(exc, reason)

    def __repr__(self) -> str:
        return f"Retrier(max_retry_attempts={self.max_retry_attempts}, backoff={self.backoff!r})"


def do(operation: Callable[[], T], **options: object) -> T:
    """One-shot form of Retrier(**options).do(operation)."""
    return Retrier(**options).do(operation)


def do_with_context(ctx: Context, operation: Callable[[], T], **options: object) -> T:
    return Retrier(**options).do_with_context(ctx, operation)


async def do_async(operation: Callable[[], Awaitable[T]], **options: object) -> T:
    return await Retrier(**options).do_async(operation)


async def do_async_with_context(ctx: Context, operation: Callable[[], Awaitable[T]], **options: object) -> T:
    return await Retrier(**options).do_async_with_context(ctx, operation)


def retry(**options: object) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Decorator factory.

    Example:
        >>> @retry(max_retry_attempts=3, backoff=CappedExponentialBackoff())
        ... def fetch(url: str) -> bytes:
        ...     return client.get(url).content
    """
    return Retrier(**options).wrap
