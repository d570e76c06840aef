"""Error taxonomy for retry orchestration.

Two wrapper kinds sit on top of whatever the retried operation raises:
- UnretryableError: raised by operation code to stop retrying immediately
- CancellationError: raised by the retry loop when its Context fires
  while waiting between attempts

Both keep the wrapped exception reachable, so callers can inspect the
original failure after any number of extra wrapping layers via the
chain helpers below (walk, find, is_kind, contains).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from collections.abc import Iterator

E = TypeVar("E", bound=BaseException)


class RetryError(Exception):
    """Base for exceptions that wrap an underlying cause."""

    __slots__ = ("cause",)

    prefix: str = "retry error"

    def __init__(self, cause: BaseException) -> None:
        self.cause = cause
        super().__init__(f"{self.prefix}: {cause}")
        self.__cause__ = cause

    def unwrap(self) -> BaseException:
        return self.cause


class UnretryableError(RetryError):
    """Permanent failure: the retry loop stops and re-raises this error."""

    __slots__ = ()

    prefix = "unretryable error"


class CancellationError(RetryError):
    """The cancellation signal fired while waiting for the next attempt.

    Attributes:
        cause: Exception from the attempt that was pending when the signal fired
        reason: Why the signal fired ("cancelled" or "deadline exceeded")
    """

    __slots__ = ("reason",)

    prefix = "context done error"

    def __init__(self, cause: BaseException, reason: str = "cancelled") -> None:
        super().__init__(cause)
        self.reason = reason


def unretryable(exc: BaseException) -> UnretryableError:
    """Mark an exception as permanent.

    Example:
        >>> def fetch():
        ...     resp = client.get(url)
        ...     if resp.status_code == 400:
        ...         raise unretryable(ValueError("bad request"))
        ...     return resp
    """
    return UnretryableError(exc)


def unwrap(exc: BaseException) -> BaseException | None:
    """Next link in the chain: wrapper cause, else the explicit `raise ... from` cause.

    Implicit __context__ is not followed; an exception raised while another
    was being handled does not wrap it.
    """
    if isinstance(exc, RetryError):
        return exc.cause
    return exc.__cause__


def walk(exc: BaseException | None) -> Iterator[BaseException]:
    """Yield exc and every exception reachable through unwrap(), each once."""
    seen: set[int] = set()
    while exc is not None and id(exc) not in seen:
        seen.add(id(exc))
        yield exc
        exc = unwrap(exc)


def find(exc: BaseException | None, kind: type[E]) -> E | None:
    """First exception in the chain that is an instance of kind."""
    for link in walk(exc):
        if isinstance(link, kind):
            return link
    return None


def is_kind(exc: BaseException | None, kind: type[BaseException]) -> bool:
    return find(exc, kind) is not None


def contains(exc: BaseException | None, target: BaseException) -> bool:
    """Whether target itself (by identity) appears anywhere in the chain."""
    return any(link is target for link in walk(exc))


def is_unretryable(exc: BaseException | None) -> bool:
    return is_kind(exc, UnretryableError)
