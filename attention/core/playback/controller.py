"""
Playback session controller.

Owns every on-screen session and decides when they exist. Sessions are
shown exactly while ``ActivationReasons.should_show()`` holds: a tracked
build command is running, test mode is on, or the screensaver is active.
All calls are expected on one consuming context (the GUI thread).
"""

from __future__ import annotations

import itertools
import logging
import random
from typing import Callable, Iterable, Optional

from attention.core.monitor.types import COMMAND_FINISHED, COMMAND_STARTED
from attention.core.motion.geometry import (
    DEFAULT_SCREEN,
    DEFAULT_WINDOW_HEIGHT,
    DEFAULT_WINDOW_WIDTH,
    Rect,
    centered_frame,
    random_frame,
)
from attention.core.runtime.scheduler import Scheduler

from .media import MediaLibrary
from .session import PlaybackSession
from .types import MAX_WINDOWS, ActivationReasons, PlaybackConfig, SessionState

log = logging.getLogger(__name__)


def _clamp_count(n: int) -> int:
    return max(1, min(MAX_WINDOWS, int(n)))


class PlaybackSessionController:
    def __init__(
        self,
        config: dict,
        scheduler: Scheduler,
        library_loader: Callable[[], MediaLibrary],
        rng: Optional[random.Random] = None,
        screen: Rect = DEFAULT_SCREEN,
    ) -> None:
        self._cfg = PlaybackConfig(**config)
        self._scheduler = scheduler
        self._load_library = library_loader
        self._rng = rng or random.Random()
        self._screen = screen

        self._loop = self._cfg.loop_mode
        self._bounce = self._cfg.bounce_mode
        self._window_count = _clamp_count(self._cfg.window_count)
        self._enabled = True
        self._reasons = ActivationReasons()
        self._sessions: list[PlaybackSession] = []
        self._tokens = itertools.count(1)

        self._event_cb: Optional[Callable[[dict], None]] = None

    def on_event(self, cb: Callable[[dict], None]) -> None:
        self._event_cb = cb

    def _emit(self, evt: dict) -> None:
        if self._event_cb:
            self._event_cb(evt)

    # -- read side -------------------------------------------------------

    @property
    def active(self) -> bool:
        return bool(self._sessions)

    @property
    def sessions(self) -> list[PlaybackSession]:
        return list(self._sessions)

    @property
    def window_count(self) -> int:
        return self._window_count

    @property
    def loop_mode(self) -> bool:
        return self._loop

    @property
    def bounce_mode(self) -> bool:
        return self._bounce

    @property
    def enabled(self) -> bool:
        return self._enabled

    def reasons(self) -> ActivationReasons:
        return ActivationReasons(
            active_pids=set(self._reasons.active_pids),
            test_mode=self._reasons.test_mode,
            screensaver_active=self._reasons.screensaver_active,
        )

    def get_state(self) -> list[SessionState]:
        return [s.state() for s in self._sessions]

    def session(self, window: int) -> Optional[PlaybackSession]:
        if 0 <= window < len(self._sessions):
            return self._sessions[window]
        return None

    # -- session lifecycle -----------------------------------------------

    def request_start(self, window_count: Optional[int] = None, randomize: bool = False) -> None:
        if self._sessions:
            self._apply_modes()
            return

        count = _clamp_count(window_count if window_count is not None else self._window_count)
        library = self._load_library()
        random_start = randomize or count > 1
        loop, bounce = self._effective_modes()

        log.info("Starting %d playback session(s) with %d media file(s)", count, len(library))
        for i in range(count):
            if random_start:
                frame = random_frame(self._screen, DEFAULT_WINDOW_WIDTH, DEFAULT_WINDOW_HEIGHT, self._rng)
            else:
                frame = centered_frame(self._screen, DEFAULT_WINDOW_WIDTH, DEFAULT_WINDOW_HEIGHT)
            session = PlaybackSession(
                window=i,
                library=library,
                scheduler=self._scheduler,
                emit=self._emit,
                config=self._cfg,
                screen=self._screen,
                frame=frame,
                rng=self._rng,
                loop=loop,
                bounce=bounce,
                tokens=self._tokens,
            )
            self._sessions.append(session)
            session.start(randomize=random_start)

    def request_stop(self) -> None:
        if not self._sessions:
            return
        sessions, self._sessions = self._sessions, []
        for session in sessions:
            session.stop()
        log.info("Stopped %d playback session(s)", len(sessions))

    def force_stop_all(self) -> None:
        """Emergency reset: drop every activation reason and every session."""
        self._reasons.clear()
        self.request_stop()

    def set_window_count(self, count: int) -> None:
        count = _clamp_count(count)
        if count == self._window_count:
            return
        self._window_count = count
        if self._sessions:
            self.request_stop()
            self.request_start()

    # -- activation reasons ----------------------------------------------

    def handle_monitor_event(self, evt: dict) -> None:
        t = evt.get("type")
        if t == COMMAND_STARTED:
            self.command_started(evt["pid"], evt.get("command", ""))
        elif t == COMMAND_FINISHED:
            self.command_finished(evt["pid"])

    def command_started(self, pid: int, command: str) -> None:
        if not self._enabled:
            return
        log.info("Build command started (pid %d): %s", pid, command)
        self._reasons.active_pids.add(pid)
        self._sync()

    def command_finished(self, pid: int) -> None:
        if pid not in self._reasons.active_pids:
            return
        self._reasons.active_pids.discard(pid)
        log.info("Build command finished (pid %d)", pid)
        self._sync()

    def prune_processes(self, live_pids: Iterable[int]) -> None:
        """Forget active pids that are no longer running."""
        live = set(live_pids)
        stale = self._reasons.active_pids - live
        if stale:
            log.debug("Pruning stale pids %s", sorted(stale))
            self._reasons.active_pids &= live
            self._sync()

    def set_test_mode(self, enabled: bool) -> None:
        self._reasons.test_mode = enabled
        self._sync()

    def set_screensaver_active(self, active: bool) -> None:
        if active == self._reasons.screensaver_active:
            return
        self._reasons.screensaver_active = active
        if active and self._sessions:
            # Screensaver takes over the windows already on screen
            self._apply_modes()
        self._sync()

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled
        if not enabled:
            self._reasons.active_pids.clear()
            self._sync()

    def _sync(self) -> None:
        if self._reasons.should_show():
            self.request_start()
        else:
            self.request_stop()

    # -- modes -----------------------------------------------------------

    def _effective_modes(self) -> tuple[bool, bool]:
        if self._reasons.screensaver_active:
            return True, True
        return self._loop, self._bounce

    def _apply_modes(self) -> None:
        loop, bounce = self._effective_modes()
        for session in self._sessions:
            session.set_loop(loop)
            session.set_bounce(bounce)

    def set_loop(self, enabled: bool) -> None:
        self._loop = enabled
        self._apply_modes()

    def set_bounce(self, enabled: bool) -> None:
        self._bounce = enabled
        self._apply_modes()

    # -- navigation ------------------------------------------------------

    def skip_next(self) -> None:
        for session in self._sessions:
            session.skip_next()

    def skip_previous(self) -> None:
        for session in self._sessions:
            session.skip_previous()

    # -- presentation callbacks -----------------------------------------

    def media_loaded(self, window: int, token: int, width: float, height: float) -> None:
        session = self.session(window)
        if session is not None:
            session.media_loaded(token, width, height)

    def media_finished(self, window: int, token: int) -> None:
        session = self.session(window)
        if session is not None:
            session.media_finished(token)

    def media_failed(self, window: int, token: int) -> None:
        session = self.session(window)
        if session is not None:
            session.media_failed(token)

    def set_screen_bounds(self, screen: Rect) -> None:
        self._screen = screen
        for session in self._sessions:
            session.set_screen(screen)

    def reload_media(self) -> None:
        if not self._sessions:
            return
        library = self._load_library()
        for session in self._sessions:
            session.replace_library(library)
        log.info("Media library reloaded (%d files)", len(library))
