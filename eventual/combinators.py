"""
Combinators built on then() and Deferred.

all_ aggregates a sequence of promises and plain values, race follows the
first element to settle, and promised lifts a plain function into one that
waits on promise-valued arguments and returns a promise.
"""

import functools
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, List, Optional

from .core.promise import Deferred, Promise, is_thenable, resolve
from .core.scheduler import Scheduler


@dataclass
class _Aggregate:
    """
    Bookkeeping for one all_() call.

    Fields:
        deferred: Settles the aggregate promise
        results: Slot per input element, in input order
        remaining: Elements not yet fulfilled
        settled: Aggregate already fulfilled or rejected
    """
    deferred: Deferred
    results: List[Any] = field(default_factory=list)
    remaining: int = 0
    settled: bool = False

    def fulfill(self, index: int, value: Any) -> None:
        if self.settled:
            return
        self.results[index] = value
        self.remaining -= 1
        if self.remaining == 0:
            self.settled = True
            self.deferred.resolve(self.results)

    def reject(self, reason: Any) -> None:
        if self.settled:
            return
        self.settled = True
        self.deferred.reject(reason)


def all_(items: Iterable[Any], scheduler: Optional[Scheduler] = None) -> Promise:
    """
    Get a promise of every element's value, in input order.

    Plain values are taken as already fulfilled; nested lists are single
    elements and are never flattened. The first rejection to be observed
    rejects the aggregate; already-rejected elements are observed in index
    order, so the lowest index wins a tie.

    Args:
        items: Promises, foreign thenables and plain values
        scheduler: Scheduler for the aggregate (None = default)

    Returns:
        Promise of a list the same length as items
    """
    items = list(items)
    aggregate = _Aggregate(
        deferred=Deferred(scheduler),
        results=[None] * len(items),
        remaining=len(items),
    )
    if not items:
        aggregate.settled = True
        aggregate.deferred.resolve([])
        return aggregate.deferred.promise

    for index, item in enumerate(items):
        try:
            thenable = is_thenable(item)
        except Exception as exc:
            aggregate.reject(exc)
            break
        if thenable:
            resolve(item, scheduler).then(
                functools.partial(aggregate.fulfill, index),
                aggregate.reject,
            )
        else:
            aggregate.fulfill(index, item)
    return aggregate.deferred.promise


def race(items: Iterable[Any], scheduler: Optional[Scheduler] = None) -> Promise:
    """
    Get a promise settled like the first element to settle.

    Plain values count as already fulfilled and are observed in index order
    together with already-settled promises. An empty input never settles.
    """
    deferred = Deferred(scheduler)
    for item in items:
        resolve(item, scheduler).then(deferred.resolve, deferred.reject)
    return deferred.promise


def promised(fn: Callable[..., Any], scheduler: Optional[Scheduler] = None) -> Callable[..., Promise]:
    """
    Lift fn so that calling it returns a promise of its result.

    The lifted function never runs fn synchronously. Promise-valued positional
    and keyword arguments are awaited first (lists are passed through as
    single values); the first rejection rejects the result without calling
    fn. A promise returned by fn is adopted, an exception rejects.

    Usage:
        @promised
        def add(x, y):
            return x + y

        add(1, deferred.promise).then(print)
    """

    @functools.wraps(fn)
    def lifted(*args: Any, **kwargs: Any) -> Promise:
        names = list(kwargs)
        positional = len(args)

        def call(values: List[Any]) -> Any:
            return fn(*values[:positional], **dict(zip(names, values[positional:])))

        return all_(list(args) + [kwargs[name] for name in names], scheduler).then(call)

    return lifted
