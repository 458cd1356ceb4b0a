"""Tests for attention/core/monitor/activity_monitor.py."""

import pytest

from attention.core.monitor.activity_monitor import ProcessActivityMonitor
from attention.core.monitor.types import COMMAND_FINISHED, COMMAND_STARTED


@pytest.fixture
def monitor(lister):
    m = ProcessActivityMonitor(config={"poll_interval_ms": 60_000}, lister=lister)
    m.events = []
    m.on_event(m.events.append)
    yield m
    m.stop()


def kinds(events):
    return [(e["type"], e["pid"]) for e in events]


# =============================================================================
# START / FINISH PAIRING
# =============================================================================


class TestPairing:
    """Each tracked pid yields exactly one started and one finished event."""

    def test_single_build_command(self, monitor, lister):
        """pid 100 running npm install appears for three ticks, then exits."""
        lister.table = {1: "launchd"}
        monitor.tick()

        lister.table[100] = "npm install"
        for _ in range(3):
            monitor.tick()
        del lister.table[100]
        monitor.tick()
        monitor.tick()

        assert kinds(monitor.events) == [(COMMAND_STARTED, 100), (COMMAND_FINISHED, 100)]
        assert monitor.events[0]["command"] == "npm install"

    def test_tick_returns_emitted_events(self, monitor, lister):
        """tick() hands back what it emitted."""
        lister.table = {7: "cargo build"}
        events = monitor.tick()
        assert kinds(events) == [(COMMAND_STARTED, 7)]
        assert monitor.tick() == []

    def test_non_matching_processes_are_ignored(self, monitor, lister):
        """Dev servers and unrelated processes never reach the callback."""
        lister.table = {10: "npm run dev", 11: "vim main.c", 12: "yarn start"}
        monitor.tick()
        lister.table = {}
        monitor.tick()
        assert monitor.events == []

    def test_started_events_in_pid_order(self, monitor, lister):
        """Several new matches in one tick are reported in ascending pid order."""
        lister.table = {30: "make", 10: "npm ci", 20: "cargo test"}
        monitor.tick()
        assert [pid for _, pid in kinds(monitor.events)] == [10, 20, 30]

    def test_command_line_resolved_once(self, monitor, lister):
        """A pid is classified only on the tick it first appears."""
        lister.table = {5: "make all"}
        monitor.tick()
        monitor.tick()
        monitor.tick()
        assert lister.resolved == [5]

    def test_vanished_before_resolution(self, monitor, lister):
        """A process gone before its command line is read is skipped silently."""
        lister.table = {9: None}
        monitor.tick()
        del lister.table[9]
        monitor.tick()
        assert monitor.events == []

    def test_pid_reuse_after_exit(self, monitor, lister):
        """A pid that exits and comes back is a new command."""
        lister.table = {42: "npm install"}
        monitor.tick()
        lister.table = {}
        monitor.tick()
        lister.table = {42: "npm test"}
        monitor.tick()
        assert kinds(monitor.events) == [
            (COMMAND_STARTED, 42),
            (COMMAND_FINISHED, 42),
            (COMMAND_STARTED, 42),
        ]

    def test_tracked_state(self, monitor, lister):
        """get_state exposes the tracked pid with its command."""
        lister.table = {55: "tsc -p ."}
        monitor.tick()
        state = monitor.get_state()
        assert set(state.tracked) == {55}
        assert state.tracked[55].command == "tsc -p ."
        assert state.tracked[55].epoch == 1
        state.tracked.clear()
        assert 55 in monitor.get_state().tracked


# =============================================================================
# LIFECYCLE
# =============================================================================


class TestLifecycle:
    """Baseline at start, state cleared at stop and on reset."""

    def test_preexisting_processes_are_baseline(self, monitor, lister):
        """A build already running at start() is never reported."""
        lister.table = {1: "npm install", 2: "launchd"}
        monitor.start()
        monitor.tick()
        assert all(e["pid"] != 1 for e in monitor.events)
        assert monitor.get_state().status == "RUNNING"

    def test_stop_clears_tracked(self, monitor, lister):
        """stop() forgets tracked pids without emitting finished events."""
        lister.table = {3: "make"}
        monitor.tick()
        monitor.stop()
        assert monitor.get_state().tracked == {}
        assert monitor.get_state().status == "STOPPED"
        assert kinds(monitor.events) == [(COMMAND_STARTED, 3)]

    def test_reset_tracked(self, monitor, lister):
        """reset_tracked drops tracking; the still-running pid is not re-reported."""
        lister.table = {3: "make", 4: "cargo build"}
        monitor.tick()
        assert monitor.reset_tracked() == [3, 4]

        monitor.tick()
        lister.table = {}
        monitor.tick()
        assert kinds(monitor.events) == [(COMMAND_STARTED, 3), (COMMAND_STARTED, 4)]

    def test_nothing_emitted_after_stop(self, monitor, lister):
        """A stop() from inside the event callback cuts off the rest of the tick."""
        def on_event(evt):
            monitor.events.append(evt)
            monitor.stop()

        monitor.on_event(on_event)
        lister.table = {1: "make", 2: "cargo build"}
        emitted = monitor.tick()

        assert kinds(monitor.events) == [(COMMAND_STARTED, 1)]
        assert kinds(emitted) == [(COMMAND_STARTED, 1)]
        assert monitor.get_state().tracked == {}

    def test_nothing_emitted_after_reset(self, monitor, lister):
        """Dropped pids get no late start event once reset_tracked returns."""
        def on_event(evt):
            monitor.events.append(evt)
            monitor.reset_tracked()

        monitor.on_event(on_event)
        lister.table = {1: "make", 2: "cargo build"}
        monitor.tick()
        lister.table = {}
        monitor.tick()

        assert kinds(monitor.events) == [(COMMAND_STARTED, 1)]

    def test_running_pids(self, monitor, lister):
        lister.table = {1: "a", 2: "b"}
        assert monitor.running_pids() == {1, 2}

    def test_update_config(self, monitor):
        """Poll interval can change while the monitor exists."""
        monitor.update_config({"poll_interval_ms": 250})
        assert monitor._cfg.poll_interval_ms == 250


# =============================================================================
# ERRORS
# =============================================================================


class TestErrors:
    """Lister failures go to the error callback and the loop keeps polling."""

    def test_loop_reports_errors(self, lister, mocker):
        """An exception inside a tick reaches on_error."""
        m = ProcessActivityMonitor(config={"poll_interval_ms": 60_000}, lister=lister)
        errors = []
        m.on_error(errors.append)
        stop_evt = mocker.Mock()
        stop_evt.is_set.side_effect = [False, True]
        mocker.patch.object(m, "tick", side_effect=RuntimeError("table unavailable"))

        m._run(stop_evt)

        assert errors == ["table unavailable"]
        stop_evt.wait.assert_called_once_with(60.0)
