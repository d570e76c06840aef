"""Tests for the error taxonomy and chain inspection."""

from __future__ import annotations

import pytest

from retrycase import (
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


def test_unretryable_wraps_cause() -> None:
    cause = ValueError("bad request")
    err = unretryable(cause)

    assert isinstance(err, UnretryableError)
    assert isinstance(err, RetryError)
    assert err.cause is cause
    assert err.unwrap() is cause
    assert err.__cause__ is cause
    assert str(err) == "unretryable error: bad request"
    assert contains(err, cause)


def test_cancellation_error_message_and_reason() -> None:
    cause = ConnectionError("refused")
    err = CancellationError(cause, "deadline exceeded")

    assert err.cause is cause
    assert err.reason == "deadline exceeded"
    assert str(err) == "context done error: refused"
    assert CancellationError(cause).reason == "cancelled"
    assert not is_unretryable(err)


def test_marker_found_through_explicit_wrapping() -> None:
    cause = KeyError("user")
    with pytest.raises(RuntimeError) as excinfo:
        try:
            raise unretryable(cause)
        except UnretryableError as e:
            raise RuntimeError("loading profile") from e

    outer = excinfo.value
    assert is_unretryable(outer)
    assert isinstance(find(outer, UnretryableError), UnretryableError)
    assert contains(outer, cause)
    assert find(outer, KeyError) is cause


def test_implicit_context_is_not_wrapping() -> None:
    """Raising while handling a marker does not inherit it."""
    with pytest.raises(LookupError) as excinfo:
        try:
            raise unretryable(OSError("disk"))
        except UnretryableError:
            raise LookupError("while handling")

    assert isinstance(excinfo.value.__context__, UnretryableError)
    assert unwrap(excinfo.value) is None
    assert not is_unretryable(excinfo.value)
    assert list(walk(excinfo.value)) == [excinfo.value]


def test_suppressed_context_hides_marker() -> None:
    with pytest.raises(LookupError) as excinfo:
        try:
            raise unretryable(OSError("disk"))
        except UnretryableError:
            raise LookupError("fresh") from None

    assert not is_unretryable(excinfo.value)


def test_plain_exception_chain() -> None:
    err = ValueError("x")
    assert list(walk(err)) == [err]
    assert unwrap(err) is None
    assert not is_kind(err, UnretryableError)
    assert find(None, ValueError) is None
    assert not contains(err, ValueError("x"))


def test_walk_is_cycle_safe() -> None:
    a, b = ValueError("a"), TypeError("b")
    a.__cause__ = b
    b.__cause__ = a
    assert list(walk(a)) == [a, b]
    assert not is_kind(a, KeyError)


def test_nested_wrappers() -> None:
    root = TimeoutError("slow")
    err = CancellationError(unretryable(root))
    assert [type(e) for e in walk(err)] == [CancellationError, UnretryableError, TimeoutError]
    assert is_unretryable(err)
    assert contains(err, root)
