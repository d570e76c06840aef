"""Testing utilities for code built on retrycase."""

from .mock import FlakyOperation, RecordingBackoff, StubRandomizer

__all__ = ["StubRandomizer", "RecordingBackoff", "FlakyOperation"]
