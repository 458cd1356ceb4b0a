"""
Scheduler backed by Qt timers on the GUI thread.

call_soon is the one entry point that may be used from other threads (the
process monitor); it hops onto the GUI thread through a queued signal.
"""

from __future__ import annotations

import logging
from typing import Callable

from PySide6.QtCore import QObject, QTimer, Qt, Signal, Slot

log = logging.getLogger(__name__)


class QtTimerHandle:
    def __init__(self, timer: QTimer) -> None:
        self._timer = timer
        self._done = False

    @property
    def active(self) -> bool:
        return not self._done and self._timer.isActive()

    def cancel(self) -> None:
        if self._done:
            return
        self._done = True
        self._timer.stop()
        self._timer.deleteLater()

    def _finish(self) -> None:
        self._done = True
        self._timer.deleteLater()


class QtScheduler(QObject):
    _posted = Signal(object)

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._posted.connect(self._run_posted, Qt.QueuedConnection)

    def call_later(self, delay_s: float, fn: Callable[[], None]) -> QtTimerHandle:
        timer = QTimer(self)
        timer.setSingleShot(True)
        handle = QtTimerHandle(timer)

        def fire() -> None:
            handle._finish()
            self._guarded(fn)

        timer.timeout.connect(fire)
        timer.start(max(0, int(delay_s * 1000)))
        return handle

    def call_repeating(self, interval_s: float, fn: Callable[[], None]) -> QtTimerHandle:
        timer = QTimer(self)
        timer.setTimerType(Qt.PreciseTimer)
        timer.timeout.connect(lambda: self._guarded(fn))
        timer.start(max(1, int(round(interval_s * 1000))))
        return QtTimerHandle(timer)

    def call_soon(self, fn: Callable[[], None]) -> None:
        self._posted.emit(fn)

    @Slot(object)
    def _run_posted(self, fn: Callable[[], None]) -> None:
        self._guarded(fn)

    @staticmethod
    def _guarded(fn: Callable[[], None]) -> None:
        try:
            fn()
        except Exception:
            log.exception("Scheduled callback failed")
