"""
End-to-end smoke scenario over the public API.

One chain walks all_, resolve, reject, a timer-backed deferred and promised
on a private scheduler, recording what each step observed.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, Field

from .combinators import all_, promised
from .core.clock import TimerService
from .core.promise import Deferred, reject, resolve, wait
from .core.scheduler import QueueScheduler
from .logging_config import get_logger

logger = get_logger(__name__, trace_id="selfcheck")

# Step names, in chain order
STEPS = ["all", "resolve", "reject", "defer", "promised"]


class CheckResult(BaseModel):
    name: str
    expected: Any = None
    actual: Any = None
    passed: bool = False


class SelfCheckReport(BaseModel):
    checks: List[CheckResult] = Field(default_factory=list)
    turns: int = 0
    elapsed: int = 0
    error: Optional[str] = None

    @property
    def passed(self) -> bool:
        return self.error is None and len(self.checks) == len(STEPS) and all(c.passed for c in self.checks)


def run_selfcheck() -> SelfCheckReport:
    """
    Run the scenario to completion and report every step.

    Steps that never ran because the chain broke are reported as failed.
    """
    scheduler = QueueScheduler()
    timers = TimerService(scheduler)
    report = SelfCheckReport()

    def record(name: str, expected: Any, actual: Any) -> None:
        check = CheckResult(name=name, expected=expected, actual=actual, passed=expected == actual)
        logger.info("%s: expected=%r actual=%r passed=%s", name, expected, actual, check.passed)
        report.checks.append(check)

    def after_all(values: Any) -> Any:
        record("all", [5, 10, 925], values)
        return resolve(1000, scheduler)

    def after_resolve(value: Any) -> Any:
        record("resolve", 1000, value)
        return reject("testing reject", scheduler)

    def after_reject(reason: Any) -> Any:
        record("reject", "testing reject", reason)
        deferred = Deferred(scheduler)
        timers.set_timeout(deferred.resolve, 10, "\\m/")
        return deferred.promise

    def after_defer(value: Any) -> Any:
        record("defer", "\\m/", value)
        return promised(lambda x: x * x, scheduler)(5)

    def after_promised(value: Any) -> None:
        record("promised", 25, value)

    chain = (
        all_([resolve(5, scheduler), resolve(10, scheduler), 925], scheduler)
        .then(after_all)
        .then(after_resolve)
        .then(None, after_reject)
        .then(after_defer)
        .then(after_promised)
    )

    try:
        wait(chain, scheduler, timers)
    except Exception as exc:
        report.error = f"{type(exc).__name__}: {exc}"
        logger.warning("Scenario chain did not fulfill: %s", report.error)
    report.turns = scheduler.turns
    report.elapsed = timers.now()

    seen = {check.name for check in report.checks}
    for name in STEPS:
        if name not in seen:
            report.checks.append(CheckResult(name=name))
    return report
