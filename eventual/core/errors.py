"""
Exception types for the promise engine.

Rejection reasons are arbitrary values; these types only cover failures of the
engine's own helpers and the reason used for self-resolution.
"""

from typing import Any


class PromiseError(Exception):
    """Base class for engine errors."""
    pass


class ChainingCycleError(PromiseError, TypeError):
    """Rejection reason used when a deferred is resolved with its own promise."""
    pass


class SchedulerError(PromiseError):
    """Raised when a scheduler cannot be drained or exceeds its turn budget."""
    pass


class UnsettledError(PromiseError):
    """Raised when a promise is still pending after the scheduler went idle."""
    pass


class RejectedError(PromiseError):
    """
    Raised by wait() for a promise rejected with a non-exception reason.

    Fields:
        reason: The original rejection reason
    """

    def __init__(self, reason: Any) -> None:
        super().__init__(f"Promise rejected: {reason!r}")
        self.reason = reason
