"""Integer nanosecond durations with signed 64-bit saturation bounds."""

from __future__ import annotations

from datetime import timedelta
from typing import TypeAlias

Duration: TypeAlias = int

NANOSECOND: Duration = 1
MICROSECOND: Duration = 1_000 * NANOSECOND
MILLISECOND: Duration = 1_000 * MICROSECOND
SECOND: Duration = 1_000 * MILLISECOND

# Largest value a signed 64-bit nanosecond clock can hold; anything above overflows.
MAX_DURATION: Duration = 2**63 - 1

# 1 << 63 no longer fits a signed 64-bit integer.
MAX_SHIFT = 63


def as_duration(value: Duration | timedelta) -> Duration:
    """Normalize an int (nanoseconds) or timedelta to nanoseconds."""
    if isinstance(value, timedelta):
        return (value.days * 86_400 + value.seconds) * SECOND + value.microseconds * MICROSECOND
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"duration must be int nanoseconds or timedelta, got {type(value).__name__}")
    return value


def to_seconds(value: Duration) -> float:
    return value / SECOND


def exponential(base: Duration, attempt: int) -> Duration | None:
    """base * 2**attempt, or None when the factor or product overflows 64 bits."""
    if attempt >= MAX_SHIFT:
        return None
    product = base << attempt
    return None if product > MAX_DURATION else product


def add(a: Duration, b: Duration) -> Duration | None:
    """a + b, or None on signed 64-bit overflow."""
    total = a + b
    return None if total > MAX_DURATION else total
