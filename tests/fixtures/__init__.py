# Test fixtures package
from tests.fixtures.fakes import (
    FakeProcessLister,
    ManualScheduler,
    ManualTimer,
)
from tests.fixtures.helpers import (
    SCREEN,
    events_of,
    load_current,
    make_items,
)

__all__ = [
    "FakeProcessLister",
    "ManualScheduler",
    "ManualTimer",
    "SCREEN",
    "events_of",
    "load_current",
    "make_items",
]
