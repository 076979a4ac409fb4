"""
Deferred / Promise pair.

A Deferred is the settle side of an eventual value and the only way to
transition its cell. A Promise is the read-only view handed out to consumers;
it exposes chaining through then() and never direct settlement.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Optional

from .cell import Reaction, SettlementCell, State
from .errors import ChainingCycleError, RejectedError, SchedulerError, UnsettledError
from .scheduler import QueueScheduler, Scheduler, get_scheduler

if TYPE_CHECKING:
    from .clock import TimerService

logger = logging.getLogger(__name__)


def is_thenable(value: Any) -> bool:
    """
    Check whether value can be adopted: a Promise, or any object exposing a
    callable then(on_fulfilled, on_rejected).

    An exception raised while reading value.then propagates to the caller.
    """
    if isinstance(value, Promise):
        return True
    if isinstance(value, type):
        return False
    return callable(getattr(value, "then", None))


@dataclass(frozen=True)
class Snapshot:
    """
    Point-in-time view of a promise.

    Fields:
        state: Current state
        value: Fulfillment value (None unless FULFILLED)
        reason: Rejection reason (None unless REJECTED)
    """
    state: State
    value: Any = None
    reason: Any = None


class Promise:
    """Read-only handle over a settlement cell."""

    def __init__(self, cell: SettlementCell) -> None:
        self._cell = cell

    @property
    def scheduler(self) -> Scheduler:
        return self._cell.scheduler

    def then(
        self,
        on_fulfilled: Optional[Callable[[Any], Any]] = None,
        on_rejected: Optional[Callable[[Any], Any]] = None,
    ) -> "Promise":
        """
        Attach handlers and return the promise of their outcome.

        A missing handler for the branch that fires passes the value or reason
        through unchanged. A handler's return value resolves the returned
        promise (adopting it if it is thenable); an exception rejects it.
        """
        downstream = Deferred(self._cell.scheduler)
        self._cell.subscribe(Reaction(on_fulfilled, on_rejected, downstream))
        return downstream.promise

    def catch(self, on_rejected: Callable[[Any], Any]) -> "Promise":
        return self.then(None, on_rejected)

    def inspect(self) -> Snapshot:
        cell = self._cell
        if cell.state is State.FULFILLED:
            return Snapshot(cell.state, value=cell.value)
        if cell.state is State.REJECTED:
            return Snapshot(cell.state, reason=cell.value)
        return Snapshot(cell.state)

    def __repr__(self) -> str:
        return f"<Promise {self._cell.label} {self._cell.state.value}>"


class Deferred:
    """
    Settle side of a promise.

    Usage:
        deferred = Deferred()
        deferred.promise.then(on_value)
        deferred.resolve(42)

    Only the first resolve()/reject() call counts. Resolving with a thenable
    locks the deferred to that thenable's eventual outcome.
    """

    def __init__(self, scheduler: Optional[Scheduler] = None) -> None:
        self._cell = SettlementCell(scheduler or get_scheduler())
        self.promise = Promise(self._cell)

    def resolve(self, value: Any = None) -> None:
        if self._cell.locked:
            return
        self._cell.locked = True
        self._resolve(value)

    def reject(self, reason: Any = None) -> None:
        if self._cell.locked:
            return
        self._cell.locked = True
        self._reject(reason)

    def _reject(self, reason: Any) -> None:
        self._cell.settle(State.REJECTED, reason)

    def _resolve(self, value: Any) -> None:
        if isinstance(value, Promise):
            if value._cell is self._cell:
                self._reject(ChainingCycleError(f"{self._cell.label} resolved with itself"))
                return
            logger.debug(
                "%s adopting %s",
                self._cell.label,
                value._cell.label,
                extra={"trace_id": self._cell.label},
            )
            value._cell.subscribe(Reaction(None, None, self))
            return

        try:
            thenable = is_thenable(value)
        except Exception as exc:
            self._reject(exc)
            return
        if thenable:
            self._adopt_foreign(value)
        else:
            self._cell.settle(State.FULFILLED, value)

    def _adopt_foreign(self, thenable: Any) -> None:
        called = False

        def on_fulfilled(value: Any = None) -> None:
            nonlocal called
            if not called:
                called = True
                self._resolve(value)

        def on_rejected(reason: Any = None) -> None:
            nonlocal called
            if not called:
                called = True
                self._reject(reason)

        def subscribe() -> None:
            nonlocal called
            try:
                thenable.then(on_fulfilled, on_rejected)
            except Exception as exc:
                if not called:
                    called = True
                    self._reject(exc)

        logger.debug(
            "%s adopting foreign thenable %r",
            self._cell.label,
            thenable,
            extra={"trace_id": self._cell.label},
        )
        self._cell.scheduler.enqueue(subscribe)


def defer(scheduler: Optional[Scheduler] = None) -> Deferred:
    """Create a pending Deferred on scheduler (default: process-wide scheduler)."""
    return Deferred(scheduler)


def resolve(value: Any = None, scheduler: Optional[Scheduler] = None) -> Promise:
    """
    Get a promise resolved with value.

    A Promise is returned as is; a foreign thenable is adopted.
    """
    if isinstance(value, Promise):
        return value
    deferred = Deferred(scheduler)
    deferred.resolve(value)
    return deferred.promise


def reject(reason: Any = None, scheduler: Optional[Scheduler] = None) -> Promise:
    """Get a promise rejected with reason (never adopted, even if thenable)."""
    deferred = Deferred(scheduler)
    deferred.reject(reason)
    return deferred.promise


def wait(
    promise: Promise,
    scheduler: Optional[Scheduler] = None,
    timers: Optional["TimerService"] = None,
) -> Any:
    """
    Drive a QueueScheduler until promise settles.

    When timers is given, virtual time is advanced to the next due timer
    whenever the queue goes idle with the promise still pending.

    Returns:
        Fulfillment value

    Raises:
        SchedulerError: If scheduler is not a QueueScheduler
        UnsettledError: If nothing is left to run and promise is still pending
        RejectedError: If promise rejected with a non-exception reason
        Exception: The rejection reason itself, when it is an exception
    """
    scheduler = scheduler or promise.scheduler
    if not isinstance(scheduler, QueueScheduler):
        raise SchedulerError(f"Cannot drain {type(scheduler).__name__}; use a QueueScheduler")

    while True:
        scheduler.run()
        if not promise._cell.pending:
            break
        if timers is None or not timers.advance_next():
            break

    snapshot = promise.inspect()
    if snapshot.state is State.PENDING:
        raise UnsettledError(f"{promise!r} still pending with nothing left to run")
    if snapshot.state is State.REJECTED:
        if isinstance(snapshot.reason, BaseException):
            raise snapshot.reason
        raise RejectedError(snapshot.reason)
    return snapshot.value
