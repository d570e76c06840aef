"""Concurrency primitives: the cancellation signal raced against backoff timers."""

from .context import CANCELLED, DEADLINE_EXCEEDED, Context

__all__ = ["Context", "CANCELLED", "DEADLINE_EXCEEDED"]
