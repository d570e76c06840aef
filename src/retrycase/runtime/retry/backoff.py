"""Backoff strategies for the retry loop.

Provides pluggable delay calculation between attempts:
- ConstantBackoff: Fixed delay
- CappedExponentialBackoff: base * 2^attempt, capped at max
- FullJitterBackoff: random(0, capped exponential)
- EqualJitterBackoff: half of capped exponential plus random(0, half)
- TruncatedExponentialBackoff: capped exponential plus random(0, base)
- DecorrelatedJitter: AWS-style decorrelated jitter (stateful)

All delays are integer nanoseconds. The exponential family saturates to
max_interval whenever 2^attempt or base * 2^attempt would overflow a
signed 64-bit nanosecond value, so attempt >= 63 always yields max_interval.

Reference: https://aws.amazon.com/blogs/architecture/exponential-backoff-and-jitter/
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Protocol, runtime_checkable

from .duration import MAX_DURATION, MAX_SHIFT, MILLISECOND, Duration, add, as_duration, exponential
from .rand import Randomizer, default_rand

DEFAULT_BACKOFF_MAXIMUM_INTERVAL: Duration = 1000 * MILLISECOND
DEFAULT_BACKOFF_BASE_INTERVAL: Duration = 100 * MILLISECOND


@runtime_checkable
class Backoff(Protocol):
    """Protocol for backoff delay calculation.

    Attempt numbers are 0-indexed (first retry = attempt 0).
    """

    def get(self, attempt: int) -> Duration:
        """Calculate delay for the retry following the given attempt.

        Args:
            attempt: 0-indexed retry attempt number

        Returns:
            Delay in nanoseconds, never negative
        """
        ...


def _interval(value: Duration | timedelta, default: Duration, name: str) -> Duration:
    ns = as_duration(value)
    if ns < 0:
        raise ValueError(f"{name} must not be negative, got {ns}")
    return ns or default


def _capped(base: Duration, max_interval: Duration, attempt: int) -> Duration | None:
    d = exponential(base, attempt)
    return None if d is None else min(max_interval, d)


@dataclass(frozen=True, slots=True)
class ConstantBackoff:
    """Fixed delay between retries.

    Attributes:
        base_interval: Delay returned for every attempt (0 = 100ms)
    """

    base_interval: Duration = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "base_interval", _interval(self.base_interval, DEFAULT_BACKOFF_BASE_INTERVAL, "base_interval"))

    def get(self, attempt: int) -> Duration:
        return self.base_interval


@dataclass(frozen=True, slots=True)
class _ExponentialBase:
    max_interval: Duration = 0
    base_interval: Duration = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "max_interval", _interval(self.max_interval, DEFAULT_BACKOFF_MAXIMUM_INTERVAL, "max_interval"))
        object.__setattr__(self, "base_interval", _interval(self.base_interval, DEFAULT_BACKOFF_BASE_INTERVAL, "base_interval"))


@dataclass(frozen=True, slots=True)
class CappedExponentialBackoff(_ExponentialBase):
    """Delay = min(max_interval, base_interval * 2^attempt)."""

    def get(self, attempt: int) -> Duration:
        d = _capped(self.base_interval, self.max_interval, attempt)
        return self.max_interval if d is None else d


@dataclass(frozen=True, slots=True)
class _JitteredBase(_ExponentialBase):
    rand: Randomizer | None = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        _ExponentialBase.__post_init__(self)
        if self.rand is None:
            object.__setattr__(self, "rand", default_rand())


@dataclass(frozen=True, slots=True)
class FullJitterBackoff(_JitteredBase):
    """Delay = random(0, min(max_interval, base_interval * 2^attempt)).

    Spreads retries over the whole window; best for avoiding thundering herds.
    """

    def get(self, attempt: int) -> Duration:
        d = _capped(self.base_interval, self.max_interval, attempt)
        if d is None:
            return self.max_interval
        return self.rand.int63n(d)


@dataclass(frozen=True, slots=True)
class EqualJitterBackoff(_JitteredBase):
    """Keeps half of the capped exponential delay and jitters the other half.

    Delay = half + random(0, half) where half = min(max_interval, base * 2^attempt) / 2
    """

    def get(self, attempt: int) -> Duration:
        d = _capped(self.base_interval, self.max_interval, attempt)
        if d is None:
            return self.max_interval
        half = d // 2
        if half == 0:
            return d
        return half + self.rand.int63n(half)


@dataclass(frozen=True, slots=True)
class TruncatedExponentialBackoff(_JitteredBase):
    """Delay = min(max_interval, base_interval * 2^attempt + random(0, base_interval)).

    The jitter is bounded by base_interval, not by the exponential term.
    """

    def get(self, attempt: int) -> Duration:
        if attempt >= MAX_SHIFT:
            return self.max_interval
        jitter = self.rand.int63n(self.base_interval)
        d = exponential(self.base_interval, attempt)
        if d is None:
            return self.max_interval
        total = add(d, jitter)
        return self.max_interval if total is None else min(self.max_interval, total)


@dataclass(slots=True)
class DecorrelatedJitter:
    """AWS-style decorrelated jitter backoff.

    Ignores the attempt number. Each delay is drawn from
    [base_interval, previous * 3), capped at max_interval, and remembered
    as the next "previous". The first previous is base_interval.

    State is guarded by a lock, so one instance may be shared between
    threads, but the remembered delay is then shared too: a Retrier that
    reuses this instance across unrelated do() calls carries the grown
    jitter window from one run into the next. Create one instance per
    logical retry sequence, or call reset(), to start fresh.

    Attributes:
        max_interval: Upper bound for every delay (0 = 1000ms)
        base_interval: Lower bound and starting delay (0 = 100ms)
        rand: Randomizer (default: process-wide Rand)
    """

    max_interval: Duration = 0
    base_interval: Duration = 0
    rand: Randomizer | None = field(default=None, compare=False, repr=False)
    _prev: Duration = field(default=0, init=False, compare=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, compare=False, repr=False)

    def __post_init__(self) -> None:
        self.max_interval = _interval(self.max_interval, DEFAULT_BACKOFF_MAXIMUM_INTERVAL, "max_interval")
        self.base_interval = _interval(self.base_interval, DEFAULT_BACKOFF_BASE_INTERVAL, "base_interval")
        if self.rand is None:
            self.rand = default_rand()
        self._prev = self.base_interval

    @property
    def previous(self) -> Duration:
        """Most recently returned delay (base_interval before the first call)."""
        with self._lock:
            return self._prev

    def reset(self) -> None:
        with self._lock:
            self._prev = self.base_interval

    def get(self, attempt: int) -> Duration:
        with self._lock:
            upper = self._prev * 3
            if upper > MAX_DURATION:
                return self.max_interval
            span = upper - self.base_interval
            # Only reachable when max_interval < base_interval.
            if span <= 0:
                self._prev = min(self.max_interval, self.base_interval)
                return self._prev
            d = add(self.rand.int63n(span), self.base_interval)
            if d is None:
                return self.max_interval
            self._prev = min(self.max_interval, d)
            return self._prev


__all__ = [
    "Backoff",
    "ConstantBackoff",
    "CappedExponentialBackoff",
    "FullJitterBackoff",
    "EqualJitterBackoff",
    "TruncatedExponentialBackoff",
    "DecorrelatedJitter",
    "DEFAULT_BACKOFF_MAXIMUM_INTERVAL",
    "DEFAULT_BACKOFF_BASE_INTERVAL",
]
