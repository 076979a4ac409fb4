import logging

import pytest

from eventual.core.scheduler import QueueScheduler, set_scheduler


@pytest.fixture
def scheduler():
    """Fresh QueueScheduler installed as the default for one test."""
    sched = QueueScheduler()
    previous = set_scheduler(sched)
    yield sched
    set_scheduler(previous)


@pytest.fixture
def restore_root_logger():
    """Undo setup_logging() changes to the root logger."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)
