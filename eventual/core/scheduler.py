"""
Cooperative deferred-callback scheduling.

Every reaction in the engine runs through a Scheduler, never synchronously
inside the call that triggered it. QueueScheduler is a manually stepped FIFO
queue; AsyncioScheduler hands callbacks to a host event loop.
"""

import asyncio
import logging
import os
from abc import ABC, abstractmethod
from collections import deque
from contextlib import contextmanager
from typing import Any, Callable, Deque, Iterator, Optional

from .errors import SchedulerError

logger = logging.getLogger(__name__)

Callback = Callable[[], Any]

DEFAULT_MAX_TURNS = 100000


def _max_turns_from_env() -> int:
    raw = os.getenv("EVENTUAL_MAX_TURNS", "")
    try:
        return int(raw) if raw else DEFAULT_MAX_TURNS
    except ValueError:
        logger.warning("Ignoring invalid EVENTUAL_MAX_TURNS=%r", raw, extra={"trace_id": "scheduler"})
        return DEFAULT_MAX_TURNS


class Scheduler(ABC):
    """
    Abstract deferred-callback queue.

    Implementations must guarantee:
    - A callback never runs inside the enqueue() call that scheduled it
    - Callbacks run in the order they were enqueued
    - An exception raised by a callback never escapes the dispatch loop
    """

    @abstractmethod
    def enqueue(self, callback: Callback) -> None:
        """Schedule callback for a later turn."""
        ...

    def _invoke(self, callback: Callback) -> None:
        try:
            callback()
        except Exception:
            logger.exception("Scheduled callback %r raised", callback, extra={"trace_id": "scheduler"})


class QueueScheduler(Scheduler):
    """
    FIFO scheduler driven explicitly by its owner.

    Usage:
        scheduler = QueueScheduler()
        deferred = defer(scheduler)
        deferred.promise.then(print)
        deferred.resolve(1)
        scheduler.run()  # prints 1
    """

    def __init__(self, max_turns: Optional[int] = None) -> None:
        self._queue: Deque[Callback] = deque()
        self._max_turns = max_turns
        # Callbacks run over the scheduler lifetime
        self.turns = 0

    def enqueue(self, callback: Callback) -> None:
        self._queue.append(callback)

    @property
    def pending(self) -> int:
        """Number of callbacks waiting to run."""
        return len(self._queue)

    def step(self) -> bool:
        """
        Run the oldest queued callback.

        Returns:
            False if the queue was empty
        """
        if not self._queue:
            return False
        self._invoke(self._queue.popleft())
        self.turns += 1
        return True

    def run(self, max_turns: Optional[int] = None) -> int:
        """
        Run callbacks until the queue is empty, including ones enqueued meanwhile.

        Args:
            max_turns: Turn budget (None = constructor value or EVENTUAL_MAX_TURNS, 0 = unlimited)

        Returns:
            Number of callbacks run

        Raises:
            SchedulerError: If the budget is exhausted with callbacks still queued
        """
        if max_turns is None:
            max_turns = self._max_turns if self._max_turns is not None else _max_turns_from_env()

        turns = 0
        while self._queue:
            if max_turns and turns >= max_turns:
                raise SchedulerError(
                    f"Scheduler exceeded {max_turns} turns with {len(self._queue)} callbacks queued"
                )
            self.step()
            turns += 1
        return turns


class AsyncioScheduler(Scheduler):
    """
    Scheduler backed by an asyncio event loop (loop.call_soon).

    When no loop is given, the running loop at enqueue time is used.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    def enqueue(self, callback: Callback) -> None:
        loop = self._loop or asyncio.get_running_loop()
        loop.call_soon(self._invoke, callback)


_default: Scheduler = QueueScheduler()


def get_scheduler() -> Scheduler:
    """Get the process-wide default scheduler."""
    return _default


def set_scheduler(scheduler: Scheduler) -> Scheduler:
    """
    Replace the process-wide default scheduler.

    Returns:
        The previous default
    """
    global _default
    previous, _default = _default, scheduler
    return previous


@contextmanager
def use_scheduler(scheduler: Scheduler) -> Iterator[Scheduler]:
    """Temporarily install scheduler as the default."""
    previous = set_scheduler(scheduler)
    try:
        yield scheduler
    finally:
        set_scheduler(previous)
