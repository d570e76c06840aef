"""Randomizer capability consumed by jittered backoff strategies.

Only int63n(n) is ever called, so tests can substitute any object with
that method (see retrycase.foundation.testing.StubRandomizer).
"""

from __future__ import annotations

import random
import threading
import time
from typing import Protocol, runtime_checkable


@runtime_checkable
class Randomizer(Protocol):
    """Source of uniformly distributed non-negative integers."""

    def int63n(self, n: int) -> int:
        """Return an integer in [0, n). n must be positive."""
        ...


class Rand:
    """random.Random wrapper safe to share between threads.

    Example:
        >>> r = Rand(seed=42)
        >>> 0 <= r.int63n(100) < 100
        True
    """

    __slots__ = ("_rand", "_lock")

    def __init__(self, seed: int | None = None) -> None:
        self._rand = random.Random(time.time_ns() if seed is None else seed)
        self._lock = threading.Lock()

    def int63n(self, n: int) -> int:
        if n <= 0:
            raise ValueError(f"invalid argument to int63n: {n}")
        with self._lock:
            return self._rand.randrange(n)


_default: Rand | None = None
_default_lock = threading.Lock()


def default_rand() -> Rand:
    """Process-wide Rand, created on first use."""
    global _default
    if _default is None:
        with _default_lock:
            if _default is None:
                _default = Rand()
    return _default
