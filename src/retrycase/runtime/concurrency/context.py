"""Cancellation signal shared between a caller and the retry loop.

A Context fires at most once, either through cancel() or when its
deadline passes. The retry loop only checks it while waiting between
attempts, racing the backoff delay against the signal:

    >>> ctx = Context.with_timeout(5.0)
    >>> do_with_context(ctx, fetch)          # gives up waiting after 5s

    >>> ctx = Context()
    >>> threading.Timer(1.0, ctx.cancel).start()
    >>> do_with_context(ctx, fetch)          # cancelled from another thread

Both the thread-blocking wait() and the asyncio wait_async() wake up as
soon as the signal fires; neither polls.
"""

from __future__ import annotations

import asyncio
import threading
import time
from typing import Final

CANCELLED: Final = "cancelled"
DEADLINE_EXCEEDED: Final = "deadline exceeded"


class Context:
    """One-shot cancellation signal with an optional deadline.

    Args:
        timeout: Seconds from now until the signal fires by itself (None = never)
    """

    __slots__ = ("_event", "_lock", "_deadline", "_reason", "_waiters")

    def __init__(self, timeout: float | None = None) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._deadline = None if timeout is None else time.monotonic() + timeout
        self._reason: str | None = None
        self._waiters: list[tuple[asyncio.AbstractEventLoop, asyncio.Future[None]]] = []

    @classmethod
    def background(cls) -> Context:
        """Fresh Context with no deadline.

        It fires only if a holder calls cancel(). Each call returns a new
        instance, so cancelling one never affects another.
        """
        return cls()

    @classmethod
    def with_timeout(cls, seconds: float) -> Context:
        return cls(timeout=seconds)

    @property
    def deadline(self) -> float | None:
        """time.monotonic() value at which the signal fires, if any."""
        return self._deadline

    @property
    def done(self) -> bool:
        if not self._event.is_set():
            self._check_deadline()
        return self._event.is_set()

    @property
    def reason(self) -> str | None:
        """CANCELLED or DEADLINE_EXCEEDED once fired, else None."""
        return self._reason if self.done else None

    def cancel(self) -> None:
        self._fire(CANCELLED)

    def wait(self, timeout: float) -> bool:
        """Block up to timeout seconds; True if the signal fired first."""
        if self.done:
            return True
        budget, hits_deadline = self._budget(timeout)
        if self._event.wait(budget):
            return True
        if hits_deadline:
            self._fire(DEADLINE_EXCEEDED)
            return True
        return False

    async def wait_async(self, timeout: float) -> bool:
        """Suspend the current task up to timeout seconds; True if the signal fired first."""
        if self.done:
            return True
        loop = asyncio.get_running_loop()
        fut: asyncio.Future[None] = loop.create_future()
        with self._lock:
            if self._event.is_set():
                return True
            self._waiters.append((loop, fut))
        budget, hits_deadline = self._budget(timeout)
        try:
            done, _ = await asyncio.wait({fut}, timeout=budget)
        finally:
            with self._lock:
                if (loop, fut) in self._waiters:
                    self._waiters.remove((loop, fut))
            if not fut.done():
                fut.cancel()
        if done:
            return True
        if hits_deadline:
            self._fire(DEADLINE_EXCEEDED)
            return True
        return False

    def _budget(self, timeout: float) -> tuple[float, bool]:
        """Effective wait time, and whether the deadline cuts it short."""
        timeout = max(timeout, 0.0)
        if self._deadline is None:
            return timeout, False
        remaining = max(self._deadline - time.monotonic(), 0.0)
        if remaining <= timeout:
            return remaining, True
        return timeout, False

    def _check_deadline(self) -> None:
        if self._deadline is not None and time.monotonic() >= self._deadline:
            self._fire(DEADLINE_EXCEEDED)

    def _fire(self, reason: str) -> None:
        with self._lock:
            if self._event.is_set():
                return
            self._reason = reason
            self._event.set()
            waiters, self._waiters = self._waiters, []
        for loop, fut in waiters:
            if not loop.is_closed():
                loop.call_soon_threadsafe(_resolve, fut)

    def __repr__(self) -> str:
        state = self._reason or "pending"
        return f"Context({state}, deadline={self._deadline})"


def _resolve(fut: asyncio.Future[None]) -> None:
    if not fut.done():
        fut.set_result(None)
