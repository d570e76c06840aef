"""Error taxonomy for retrycase.

- RetryError: Base wrapper carrying an underlying cause
- UnretryableError/unretryable: Caller-applied "stop retrying" marker
- CancellationError: Raised when the cancellation signal fires between attempts
- walk/find/is_kind/contains: Chain inspection across arbitrary wrapping
"""

from .errors import (
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

__all__ = [
    "RetryError", "UnretryableError", "CancellationError", "unretryable",
    "unwrap", "walk", "find", "is_kind", "contains", "is_unretryable",
]
