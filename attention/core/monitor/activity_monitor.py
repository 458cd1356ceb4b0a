from __future__ import annotations

import threading
import time
import logging
from typing import Callable, Optional

from .classifier import CommandClassifier
from .process_detector import ProcessLister, PsutilProcessLister
from .types import (
    COMMAND_FINISHED,
    COMMAND_STARTED,
    EMPTY_SNAPSHOT,
    MonitorConfig,
    MonitorState,
    ProcessSnapshot,
    TrackedProcess,
)


log = logging.getLogger(__name__)


def _now_iso() -> str:
    return time.strftime("%Y-%m-%dT%H:%M:%S", time.localtime())


def _now_ms() -> int:
    return int(time.time() * 1000)


class ProcessActivityMonitor:
    """Background monitor that emits COMMAND_STARTED / COMMAND_FINISHED by diffing process snapshots.

    Every COMMAND_STARTED is followed by exactly one COMMAND_FINISHED for the
    same pid, unless tracked state is discarded with ``reset_tracked()`` or
    ``stop()``.
    """

    def __init__(
        self,
        config: dict,
        lister: Optional[ProcessLister] = None,
        classifier: Optional[CommandClassifier] = None,
    ) -> None:
        self._cfg = MonitorConfig(**config)
        self._lister = lister or PsutilProcessLister()
        self._classifier = classifier or CommandClassifier()
        self._state = MonitorState()
        self._previous: ProcessSnapshot = EMPTY_SNAPSHOT
        self._lock = threading.RLock()
        # Bumped by start/stop/reset so a tick racing with them emits nothing
        self._generation = 0

        self._event_cb: Optional[Callable[[dict], None]] = None
        self._error_cb: Optional[Callable[[str], None]] = None

        self._thread: Optional[threading.Thread] = None
        self._stop_evt = threading.Event()

    def on_event(self, cb: Callable[[dict], None]) -> None:
        self._event_cb = cb

    def on_error(self, cb: Callable[[str], None]) -> None:
        self._error_cb = cb

    def update_config(self, config: dict) -> None:
        with self._lock:
            self._cfg = MonitorConfig(**config)

    def get_state(self) -> MonitorState:
        with self._lock:
            return MonitorState(
                status=self._state.status,
                tracked=dict(self._state.tracked),
                tick_count=self._state.tick_count,
            )

    def start(self) -> None:
        with self._lock:
            if self._state.status == "RUNNING":
                return
            self._state.status = "RUNNING"
            self._state.tracked.clear()
            self._state.tick_count = 0
            self._generation += 1

        # Whatever is already running at start-up is the baseline, not news
        baseline = self._take_snapshot()
        with self._lock:
            self._previous = baseline

        self._stop_evt = threading.Event()
        self._thread = threading.Thread(
            target=self._run, args=(self._stop_evt,), name="ProcessActivityMonitor", daemon=True
        )
        self._thread.start()
        log.info("Process monitor started (%d processes in baseline)", len(baseline))

    def stop(self) -> None:
        self._stop_evt.set()
        with self._lock:
            was_running = self._state.status == "RUNNING"
            self._state.status = "STOPPED"
            self._state.tracked.clear()
            self._previous = EMPTY_SNAPSHOT
            self._generation += 1
        if was_running:
            log.info("Process monitor stopped")

    def reset_tracked(self) -> list[int]:
        """Forget every tracked pid without emitting COMMAND_FINISHED."""
        with self._lock:
            dropped = sorted(self._state.tracked)
            self._state.tracked.clear()
            self._generation += 1
        if dropped:
            log.info("Discarded tracked pids %s", dropped)
        return dropped

    def running_pids(self) -> set[int]:
        return set(self._lister.pids())

    def tick(self) -> list[dict]:
        """Run one poll step and return the events it emitted."""
        with self._lock:
            generation = self._generation
            previous = self._previous

        current = self._take_snapshot()

        matches: list[tuple[int, str]] = []
        for pid in sorted(current.new_since(previous)):
            line = self._lister.command_line(pid)
            if not line:
                continue
            result = self._classifier.classify(line)
            if result:
                log.debug("pid %d matched %s (%s): %s", pid, result.tool, result.rule, line)
                matches.append((pid, line))

        events: list[dict] = []
        with self._lock:
            if generation != self._generation:
                return []
            self._state.tick_count += 1
            epoch = self._state.tick_count
            tracked = self._state.tracked

            for pid, line in matches:
                if pid in tracked:
                    continue
                tracked[pid] = TrackedProcess(pid=pid, command=line, epoch=epoch, started_at_ms=current.taken_at_ms)
                events.append({"type": COMMAND_STARTED, "pid": pid, "command": line, "at": _now_iso()})

            for pid in sorted(p for p in tracked if p not in current):
                del tracked[pid]
                events.append({"type": COMMAND_FINISHED, "pid": pid, "at": _now_iso()})

            self._previous = current

        # stop() and reset_tracked() wait for an in-flight emit
        emitted: list[dict] = []
        for evt in events:
            with self._lock:
                if generation != self._generation:
                    break
                self._emit(evt)
            emitted.append(evt)
        return emitted

    def _take_snapshot(self) -> ProcessSnapshot:
        return ProcessSnapshot(pids=frozenset(self._lister.pids()), taken_at_ms=_now_ms())

    def _emit(self, evt: dict) -> None:
        if self._event_cb:
            self._event_cb(evt)

    def _emit_error(self, msg: str) -> None:
        if self._error_cb:
            self._error_cb(msg)

    def _run(self, stop_evt: threading.Event) -> None:
        while not stop_evt.is_set():
            try:
                self.tick()
            except Exception as e:
                log.exception("Monitor loop error")
                self._emit_error(str(e))

            with self._lock:
                interval_s = self._cfg.poll_interval_ms / 1000.0
            stop_evt.wait(interval_s)
