"""
eventual

Single-threaded promise/deferred engine: exactly-once settlement, chaining
with adoption of promise-like values, and aggregate and lifting combinators.
"""

from .core import (
    AsyncioScheduler,
    ChainingCycleError,
    Deferred,
    DeterministicClock,
    Promise,
    PromiseError,
    QueueScheduler,
    RejectedError,
    Scheduler,
    SchedulerError,
    Snapshot,
    State,
    TimerService,
    UnsettledError,
    defer,
    delay,
    get_scheduler,
    is_thenable,
    reject,
    resolve,
    set_scheduler,
    use_scheduler,
    wait,
)
from .combinators import all_, promised, race

__version__ = "0.1.0"

# Not in __all__: star-imports must not shadow the builtin
all = all_

__all__ = [
    "AsyncioScheduler",
    "ChainingCycleError",
    "Deferred",
    "DeterministicClock",
    "Promise",
    "PromiseError",
    "QueueScheduler",
    "RejectedError",
    "Scheduler",
    "SchedulerError",
    "Snapshot",
    "State",
    "TimerService",
    "UnsettledError",
    "all_",
    "defer",
    "delay",
    "get_scheduler",
    "is_thenable",
    "promised",
    "race",
    "reject",
    "resolve",
    "set_scheduler",
    "use_scheduler",
    "wait",
]
