"""
Tests for the all_ and race combinators.
"""

import pytest

from eventual import all as all_alias
from eventual.combinators import all_, race
from eventual.core.cell import State
from eventual.core.clock import TimerService, delay
from eventual.core.errors import RejectedError
from eventual.core.promise import defer, reject, resolve, wait


def test_all_for_all_promises(scheduler):
    assert wait(all_([resolve(5), resolve(7), resolve(10)])) == [5, 7, 10]


def test_all_is_exported_as_all():
    assert all_alias is all_


def test_all_aborts_upon_first_reject(scheduler):
    timers = TimerService()
    fulfilled = []
    reasons = []

    all_([resolve(5), reject("error"), delay("late", 50, timers)]).then(fulfilled.append, reasons.append)
    scheduler.run()

    assert reasons == ["error"]

    timers.advance(50)
    scheduler.run()

    assert fulfilled == []
    assert reasons == ["error"]


def test_all_with_non_promise_elements(scheduler):
    assert wait(all_([resolve(5), resolve(10), 925])) == [5, 10, 925]


def test_all_resolves_with_an_empty_list(scheduler):
    result = all_([])
    assert wait(result) == []


def test_all_with_multiple_rejected(scheduler):
    with pytest.raises(RejectedError) as exc_info:
        wait(all_([reject("error1"), reject("error2"), reject("error3")]))
    assert exc_info.value.reason == "error1"


def test_all_keeps_input_order_not_settlement_order(scheduler):
    first, second, third = defer(), defer(), defer()
    result = all_([first.promise, second.promise, third.promise])

    third.resolve("c")
    second.resolve("b")
    scheduler.run()
    assert result.inspect().state is State.PENDING

    first.resolve("a")

    assert wait(result) == ["a", "b", "c"]


def test_all_does_not_flatten_nested_lists(scheduler):
    nested = [1, [2, 3]]
    assert wait(all_([nested, resolve([4])])) == [[1, [2, 3]], [4]]


def test_all_later_rejection_wins_when_observed_first(scheduler):
    early, late = defer(), defer()
    result = all_([late.promise, early.promise])

    early.reject("early")
    scheduler.run()
    late.reject("late")

    with pytest.raises(RejectedError) as exc_info:
        wait(result)
    assert exc_info.value.reason == "early"


def test_all_accepts_any_iterable(scheduler):
    assert wait(all_(resolve(n) for n in range(3))) == [0, 1, 2]


def test_race_follows_first_to_settle(scheduler):
    timers = TimerService()
    result = race([delay("slow", 20, timers), delay("fast", 5, timers)])

    assert wait(result, timers=timers) == "fast"


def test_race_rejection(scheduler):
    timers = TimerService()
    slow = delay("slow", 20, timers)
    failing = defer()
    timers.set_timeout(failing.reject, 5, "timeout")

    with pytest.raises(RejectedError) as exc_info:
        wait(race([slow, failing.promise]), timers=timers)
    assert exc_info.value.reason == "timeout"


def test_race_plain_values_win_in_index_order(scheduler):
    assert wait(race([defer().promise, "plain", resolve("settled")])) == "plain"


def test_race_empty_never_settles(scheduler):
    result = race([])
    scheduler.run()
    assert result.inspect().state is State.PENDING


def test_all_rejects_when_then_lookup_raises(scheduler):
    class ExplodingThen:
        @property
        def then(self):
            raise RuntimeError("then getter exploded")

    with pytest.raises(RuntimeError, match="then getter exploded"):
        wait(all_([resolve(1), ExplodingThen(), 3]))


def test_race_rejects_when_then_lookup_raises(scheduler):
    class ExplodingThen:
        @property
        def then(self):
            raise RuntimeError("then getter exploded")

    with pytest.raises(RuntimeError, match="then getter exploded"):
        wait(race([defer().promise, ExplodingThen()]))
