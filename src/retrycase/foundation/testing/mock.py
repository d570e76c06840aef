"""Deterministic stand-ins for the Randomizer and Backoff capabilities.

Provides:
- StubRandomizer: scripted int63n() results with recorded bounds
- RecordingBackoff: scripted delays with recorded attempts
- FlakyOperation: fails a set number of times, then succeeds

Example:
    >>> rand = StubRandomizer([500_000])
    >>> FullJitterBackoff(SECOND, MILLISECOND, rand).get(0)
    500000
    >>> rand.bounds
    [1000000]
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from retrycase.runtime.retry.duration import Duration

T = TypeVar("T")


@dataclass
class StubRandomizer:
    """Randomizer returning queued values in order.

    Values are returned as-is (no bound check) so tests can force
    overflow paths. With no values left, falls back to `default` if set,
    otherwise raises AssertionError.
    """

    values: Iterable[int] = ()
    default: int | None = None
    bounds: list[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        self._queue: deque[int] = deque(self.values)

    @property
    def call_count(self) -> int:
        return len(self.bounds)

    def int63n(self, n: int) -> int:
        self.bounds.append(n)
        if self._queue:
            return self._queue.popleft()
        if self.default is not None:
            return self.default
        raise AssertionError(f"Unexpected int63n({n}) call")

    def assert_not_called(self) -> None:
        if self.bounds:
            raise AssertionError(f"int63n called {len(self.bounds)} times: {self.bounds}")


@dataclass
class RecordingBackoff:
    """Backoff that records attempts and returns a fixed (or scripted) delay."""

    delay: Duration = 0
    script: dict[int, Duration] = field(default_factory=dict)
    attempts: list[int] = field(default_factory=list)

    @property
    def call_count(self) -> int:
        return len(self.attempts)

    def get(self, attempt: int) -> Duration:
        self.attempts.append(attempt)
        return self.script.get(attempt, self.delay)


@dataclass
class FlakyOperation(Generic[T]):
    """Callable raising `error` for the first `failures` calls, then returning `result`."""

    failures: int
    error: Exception
    result: T | None = None
    calls: int = 0

    def __call__(self) -> T | None:
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error
        return self.result
