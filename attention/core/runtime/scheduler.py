"""
Timer contract shared by the playback controller and the motion drivers.

Everything scheduled through a Scheduler runs on one consuming context
(the GUI thread in the desktop app), so callbacks never interleave.
"""

from __future__ import annotations

from typing import Callable, Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None:
        ...

    @property
    def active(self) -> bool:
        ...


class Scheduler(Protocol):
    def call_later(self, delay_s: float, fn: Callable[[], None]) -> TimerHandle:
        """Run ``fn`` once after ``delay_s`` seconds."""
        ...

    def call_repeating(self, interval_s: float, fn: Callable[[], None]) -> TimerHandle:
        """Run ``fn`` every ``interval_s`` seconds until cancelled."""
        ...

    def call_soon(self, fn: Callable[[], None]) -> None:
        """Run ``fn`` on the consuming context. Safe to call from any thread."""
        ...
