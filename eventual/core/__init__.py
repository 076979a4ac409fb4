"""
Core promise primitives.

This module provides the settlement machinery:
- Scheduler: Cooperative deferred-callback queue
- SettlementCell: Exactly-once state machine behind one eventual value
- Deferred / Promise: Settle side and read-only view
- Clock: Virtual time and timers for simulated delay
"""

from .scheduler import (
    Scheduler,
    QueueScheduler,
    AsyncioScheduler,
    get_scheduler,
    set_scheduler,
    use_scheduler,
)
from .cell import State, Reaction, SettlementCell
from .promise import Promise, Deferred, Snapshot, defer, resolve, reject, is_thenable, wait
from .clock import DeterministicClock, TimerService, delay
from .errors import PromiseError, ChainingCycleError, SchedulerError, UnsettledError, RejectedError

__all__ = [
    "Scheduler",
    "QueueScheduler",
    "AsyncioScheduler",
    "get_scheduler",
    "set_scheduler",
    "use_scheduler",
    "State",
    "Reaction",
    "SettlementCell",
    "Promise",
    "Deferred",
    "Snapshot",
    "defer",
    "resolve",
    "reject",
    "is_thenable",
    "wait",
    "DeterministicClock",
    "TimerService",
    "delay",
    "PromiseError",
    "ChainingCycleError",
    "SchedulerError",
    "UnsettledError",
    "RejectedError",
]
