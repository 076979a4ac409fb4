"""
Settlement cell: the state machine behind one eventual value.

PENDING -> FULFILLED(value) or PENDING -> REJECTED(reason), both terminal.
Reactions attached while pending are queued in attachment order and handed to
the scheduler on settlement; reactions attached later are scheduled at once.
"""

import itertools
import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, List, Optional

from .scheduler import Scheduler

if TYPE_CHECKING:
    from .promise import Deferred

logger = logging.getLogger(__name__)

_labels = itertools.count(1)


class State(Enum):
    PENDING = "pending"
    FULFILLED = "fulfilled"
    REJECTED = "rejected"


@dataclass
class Reaction:
    """
    One-shot subscription to a cell.

    Fields:
        on_fulfilled: Handler for the fulfilled branch (None = pass value through)
        on_rejected: Handler for the rejected branch (None = pass reason through)
        downstream: Deferred settled with the handler's outcome
    """
    on_fulfilled: Optional[Callable[[Any], Any]]
    on_rejected: Optional[Callable[[Any], Any]]
    downstream: "Deferred"

    def fire(self, state: State, value: Any) -> None:
        handler = self.on_fulfilled if state is State.FULFILLED else self.on_rejected
        if handler is None:
            if state is State.FULFILLED:
                self.downstream._resolve(value)
            else:
                self.downstream._reject(value)
            return

        try:
            result = handler(value)
        except Exception as exc:
            logger.debug(
                "Handler %r raised %r, rejecting downstream",
                handler,
                exc,
                extra={"trace_id": self.downstream._cell.label},
            )
            self.downstream._reject(exc)
        else:
            self.downstream._resolve(result)


class SettlementCell:
    """
    Mutable settlement state shared by a Deferred and its Promise views.

    Only the owning Deferred writes to it; the terminal write happens once.
    """

    def __init__(self, scheduler: Scheduler) -> None:
        self.scheduler = scheduler
        self.state = State.PENDING
        self.value: Any = None
        self.reactions: List[Reaction] = []
        # Set once the owner accepted its first resolve/reject call
        self.locked = False
        self.label = f"cell-{next(_labels)}"

    @property
    def pending(self) -> bool:
        return self.state is State.PENDING

    def settle(self, state: State, value: Any) -> bool:
        """
        Move to a terminal state and schedule every queued reaction.

        Returns:
            False if the cell had already settled (nothing changes)
        """
        if state is State.PENDING:
            raise ValueError("Cannot settle a cell into PENDING")
        if self.state is not State.PENDING:
            return False

        self.state = state
        self.value = value
        reactions, self.reactions = self.reactions, []
        logger.debug(
            "%s %s with %r (%d reactions)",
            self.label,
            state.value,
            value,
            len(reactions),
            extra={"trace_id": self.label},
        )
        for reaction in reactions:
            self._schedule(reaction)
        return True

    def subscribe(self, reaction: Reaction) -> None:
        if self.state is State.PENDING:
            self.reactions.append(reaction)
        else:
            self._schedule(reaction)

    def _schedule(self, reaction: Reaction) -> None:
        state, value = self.state, self.value
        self.scheduler.enqueue(lambda: reaction.fire(state, value))
