"""Deterministic stand-ins for the process table and the GUI timers."""

from __future__ import annotations

import heapq
import itertools
from typing import Callable, Optional


class FakeProcessLister:
    """Process table driven by the test: set ``table`` before each tick."""

    def __init__(self, table: Optional[dict[int, Optional[str]]] = None):
        self.table: dict[int, Optional[str]] = dict(table or {})
        self.resolved: list[int] = []

    def pids(self) -> set[int]:
        return set(self.table)

    def command_line(self, pid: int) -> Optional[str]:
        self.resolved.append(pid)
        return self.table.get(pid)


class ManualTimer:
    def __init__(self, scheduler: "ManualScheduler", due: float, interval: Optional[float], fn):
        self._scheduler = scheduler
        self.due = due
        self.interval = interval
        self.fn = fn
        self.cancelled = False
        self.fired = False

    @property
    def active(self) -> bool:
        if self.cancelled:
            return False
        return self.interval is not None or not self.fired

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Virtual-time scheduler. Nothing runs until ``advance`` or ``run_soon``."""

    def __init__(self):
        self.now = 0.0
        self._queue: list[tuple[float, int, ManualTimer]] = []
        self._seq = itertools.count()
        self._soon: list[Callable[[], None]] = []

    def call_later(self, delay_s: float, fn) -> ManualTimer:
        timer = ManualTimer(self, self.now + delay_s, None, fn)
        heapq.heappush(self._queue, (timer.due, next(self._seq), timer))
        return timer

    def call_repeating(self, interval_s: float, fn) -> ManualTimer:
        timer = ManualTimer(self, self.now + interval_s, interval_s, fn)
        heapq.heappush(self._queue, (timer.due, next(self._seq), timer))
        return timer

    def call_soon(self, fn) -> None:
        self._soon.append(fn)

    def run_soon(self) -> None:
        pending, self._soon = self._soon, []
        for fn in pending:
            fn()

    @property
    def pending(self) -> list[ManualTimer]:
        return [t for _, _, t in self._queue if t.active]

    def advance(self, seconds: float) -> None:
        end = self.now + seconds
        while self._queue and self._queue[0][0] <= end:
            due, _, timer = heapq.heappop(self._queue)
            if timer.cancelled:
                continue
            self.now = due
            timer.fired = True
            timer.fn()
            if timer.interval is not None and not timer.cancelled:
                timer.due = due + timer.interval
                heapq.heappush(self._queue, (timer.due, next(self._seq), timer))
        self.now = end
