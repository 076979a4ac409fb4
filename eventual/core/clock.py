"""
Virtual time for tests and integration harnesses.

DeterministicClock is an immutable virtual time source; TimerService keeps
timeouts against it and hands due callbacks to a scheduler, so simulated
delays never depend on wall-clock time.
"""

import heapq
import itertools
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Set, Tuple

from .promise import Deferred, Promise
from .scheduler import Scheduler, get_scheduler


@dataclass(frozen=True)
class DeterministicClock:
    """
    Virtual time source, in milliseconds.

    Since DeterministicClock is immutable, tick() returns a new instance.
    """
    current: int = 0

    def now(self) -> int:
        return self.current

    def tick(self, step: int = 1) -> "DeterministicClock":
        if step < 0:
            raise ValueError(f"Clock cannot move backwards (step={step})")
        return DeterministicClock(self.current + step)


class TimerService:
    """
    setTimeout-style timers over virtual time.

    Usage:
        timers = TimerService(scheduler)
        timers.set_timeout(deferred.resolve, 50, "done")
        timers.advance(50)   # enqueues deferred.resolve("done")
        scheduler.run()

    Timers due at the same instant fire in the order they were set.
    """

    def __init__(self, scheduler: Optional[Scheduler] = None) -> None:
        self._scheduler = scheduler or get_scheduler()
        self._clock = DeterministicClock()
        self._heap: List[Tuple[int, int, Callable[..., Any], Tuple[Any, ...]]] = []
        self._handles = itertools.count(1)
        self._cancelled: Set[int] = set()

    def now(self) -> int:
        return self._clock.now()

    @property
    def scheduler(self) -> Scheduler:
        return self._scheduler

    @property
    def pending(self) -> int:
        return len(self._heap) - len(self._cancelled)

    def set_timeout(self, callback: Callable[..., Any], delay: int = 0, *args: Any) -> int:
        """
        Schedule callback(*args) once virtual time reaches now + delay.

        Returns:
            Handle for clear_timeout()
        """
        if delay < 0:
            delay = 0
        handle = next(self._handles)
        heapq.heappush(self._heap, (self._clock.now() + delay, handle, callback, args))
        return handle

    def clear_timeout(self, handle: int) -> None:
        if any(entry[1] == handle for entry in self._heap):
            self._cancelled.add(handle)

    def advance(self, step: int = 1) -> int:
        """
        Move virtual time forward by step, enqueueing every timer that came due.

        Returns:
            Number of timers fired

        Raises:
            ValueError: If step is negative
        """
        if step < 0:
            raise ValueError(f"Cannot advance timers by a negative step ({step})")
        target = self._clock.now() + step
        fired = 0
        while self._heap and self._heap[0][0] <= target:
            due, handle, callback, args = heapq.heappop(self._heap)
            self._clock = self._clock.tick(max(due - self._clock.now(), 0))
            if handle in self._cancelled:
                self._cancelled.discard(handle)
                continue
            self._scheduler.enqueue(lambda callback=callback, args=args: callback(*args))
            fired += 1
        self._clock = self._clock.tick(target - self._clock.now())
        return fired

    def advance_next(self) -> int:
        """
        Jump to the next due timer and fire everything due at that instant.

        Returns:
            Number of timers fired (0 when none are pending)
        """
        while self._heap and self._heap[0][1] in self._cancelled:
            self._cancelled.discard(heapq.heappop(self._heap)[1])
        if not self._heap:
            return 0
        return self.advance(max(self._heap[0][0] - self._clock.now(), 0))


def delay(value: Any, ms: int, timers: TimerService) -> Promise:
    """Get a promise resolved with value after ms of virtual time."""
    deferred = Deferred(timers.scheduler)
    timers.set_timeout(deferred.resolve, ms, value)
    return deferred.promise
