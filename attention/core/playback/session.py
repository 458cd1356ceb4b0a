"""
One playback window: playlist selection, history navigation and media timers.

State machine::

    IDLE -> LOADING -> PLAYING -> (end of media) -> LOADING -> ...
              |
              +-> PLACEHOLDER (no media / everything failed)
    any state -> STOPPED

Each play bumps the session token. The presentation layer echoes the token
back in media_loaded/media_finished/media_failed and every timer captures
it, so callbacks for media that is no longer current are ignored.
"""

from __future__ import annotations

import itertools
import logging
import random
from typing import Callable, Iterator, Optional

from attention.core.motion.bounce import BounceDriver, BounceMotionEngine
from attention.core.motion.geometry import (
    Rect,
    clamp_into,
    fit_window_size,
    resize_around_center,
)
from attention.core.runtime.scheduler import Scheduler, TimerHandle

from .media import MediaItem, MediaLibrary
from .types import (
    MEDIA_RESTART,
    SESSION_STATE,
    WINDOW_FRAME,
    WINDOW_HIDDEN,
    PlaybackConfig,
    SessionState,
    SessionStatus,
)

log = logging.getLogger(__name__)


class PlaybackSession:
    def __init__(
        self,
        window: int,
        library: MediaLibrary,
        scheduler: Scheduler,
        emit: Callable[[dict], None],
        config: PlaybackConfig,
        screen: Rect,
        frame: Rect,
        rng: random.Random,
        loop: bool = False,
        bounce: bool = False,
        tokens: Optional[Iterator[int]] = None,
    ) -> None:
        self._window = window
        self._library = library
        self._scheduler = scheduler
        self._emit_cb = emit
        self._cfg = config
        self._screen = screen
        self._rng = rng

        self._status: SessionStatus = "IDLE"
        self._current: Optional[MediaItem] = None
        self._history: list[MediaItem] = []
        self._index = -1
        self._loop = loop
        self._bounce = bounce
        self._visible = False
        # Shared with sibling sessions so a token never names two plays
        self._tokens = tokens if tokens is not None else itertools.count(1)
        self._token = 0
        # Items that failed since the last successful load
        self._failed: set[MediaItem] = set()

        self._timer: Optional[TimerHandle] = None
        self._timer_seq = 0

        engine = BounceMotionEngine(
            bounds=screen,
            frame=frame,
            speed_min=config.bounce_speed_min,
            speed_max=config.bounce_speed_max,
            rng=rng,
        )
        self._motion = BounceDriver(window, engine, scheduler, emit, fps=config.bounce_fps)

    # -- read side -------------------------------------------------------

    @property
    def window(self) -> int:
        return self._window

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def current(self) -> Optional[MediaItem]:
        return self._current

    @property
    def token(self) -> int:
        return self._token

    @property
    def frame(self) -> Rect:
        return self._motion.engine.frame

    @property
    def bouncing(self) -> bool:
        return self._motion.running

    @property
    def motion(self) -> BounceDriver:
        return self._motion

    def state(self) -> SessionState:
        return SessionState(
            window=self._window,
            status=self._status,
            media=self._current,
            history=tuple(self._history),
            history_index=self._index,
            loop=self._loop,
            bounce=self._bounce,
            token=self._token,
        )

    # -- lifecycle -------------------------------------------------------

    def start(self, randomize: bool = False) -> None:
        self._history.clear()
        self._index = -1
        self._failed.clear()
        self._current = None

        if not self._library:
            self._enter_placeholder()
            return

        if randomize:
            first = self._library.pick_next(None, self._rng)
        else:
            first = self._library.items[0]
        self._play(first, add_to_history=True)

    def stop(self) -> None:
        self._cancel_timer()
        self._motion.stop()
        self._token = next(self._tokens)
        self._visible = False
        self._set_status("STOPPED")
        self._emit({"type": WINDOW_HIDDEN})

    # -- presentation callbacks -----------------------------------------

    def media_loaded(self, token: int, width: float, height: float) -> bool:
        if token != self._token or self._status != "LOADING":
            return False
        self._failed.clear()

        w, h = fit_window_size(width, height)
        frame = clamp_into(self._screen, resize_around_center(self.frame, w, h))
        self._motion.engine.set_frame(frame)
        self._emit({"type": WINDOW_FRAME, "frame": frame})

        self._visible = True
        self._set_status("PLAYING")

        if self._current is not None and not self._current.is_video:
            self._arm_image_timer()
        if self._bounce:
            self._motion.start()
        return True

    def media_finished(self, token: int) -> bool:
        if token != self._token or self._status != "PLAYING":
            return False
        self._end_of_media()
        return True

    def media_failed(self, token: int) -> bool:
        if token != self._token or self._status not in ("LOADING", "PLAYING"):
            return False
        if self._current is not None:
            self._failed.add(self._current)
        log.warning("Window %d could not play %s", self._window, self._current.name if self._current else "?")
        if all(item in self._failed for item in self._library.items):
            log.warning("Window %d: every media file failed, showing placeholder", self._window)
            self._enter_placeholder()
            return True
        self._advance()
        return True

    # -- user commands ---------------------------------------------------

    def skip_next(self) -> bool:
        if self._status in ("IDLE", "PLACEHOLDER", "STOPPED") or not self._library:
            return False
        self._advance()
        return True

    def skip_previous(self) -> bool:
        if self._status in ("IDLE", "PLACEHOLDER", "STOPPED") or self._index <= 0:
            return False
        self._index -= 1
        self._play(self._history[self._index], add_to_history=False)
        return True

    def set_loop(self, enabled: bool) -> None:
        if enabled == self._loop:
            return
        self._loop = enabled
        # A pending image timer restarts its countdown under the new mode
        if self._status == "PLAYING" and self._current is not None and not self._current.is_video:
            self._arm_image_timer()

    def set_bounce(self, enabled: bool) -> None:
        self._bounce = enabled
        if enabled and self._visible and self._status == "PLAYING":
            self._motion.start()
        else:
            self._motion.stop()

    def set_screen(self, screen: Rect) -> None:
        self._screen = screen
        self._motion.engine.set_bounds(screen)

    def replace_library(self, library: MediaLibrary) -> None:
        self._library = library

    # -- internals -------------------------------------------------------

    def _play(self, item: MediaItem, add_to_history: bool) -> None:
        self._cancel_timer()
        self._token = next(self._tokens)
        self._current = item

        if add_to_history:
            del self._history[self._index + 1:]
            self._history.append(item)
            overflow = len(self._history) - self._cfg.max_history
            if overflow > 0:
                del self._history[:overflow]
            self._index = len(self._history) - 1

        seek_s = 0.0
        if item.is_video:
            seek_s = self._rng.uniform(self._cfg.video_seek_min_s, self._cfg.video_seek_max_s)

        log.debug("Window %d loading %s (token %d)", self._window, item.name, self._token)
        self._set_status("LOADING", seek_s=seek_s)

    def _advance(self) -> None:
        nxt = self._library.pick_next(self._current, self._rng, exclude=self._failed)
        if nxt is None:
            self._enter_placeholder()
            return
        self._play(nxt, add_to_history=True)

    def _end_of_media(self) -> None:
        if self._loop and self._current is not None:
            self._emit({"type": MEDIA_RESTART, "media": self._current, "token": self._token, "seek_s": 0.0})
            if not self._current.is_video:
                self._arm_image_timer()
            return
        self._advance()

    def _enter_placeholder(self) -> None:
        self._cancel_timer()
        self._motion.stop()
        self._token = next(self._tokens)
        self._current = None
        self._visible = True
        self._emit({"type": WINDOW_FRAME, "frame": self.frame})
        self._set_status("PLACEHOLDER")

    def _arm_image_timer(self) -> None:
        self._cancel_timer()
        self._timer_seq += 1
        token, seq = self._token, self._timer_seq
        self._timer = self._scheduler.call_later(
            self._cfg.image_duration_s, lambda: self._on_image_timer(token, seq)
        )

    def _on_image_timer(self, token: int, seq: int) -> None:
        if token != self._token or seq != self._timer_seq or self._status != "PLAYING":
            return
        self._timer = None
        self._end_of_media()

    def _cancel_timer(self) -> None:
        self._timer_seq += 1
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _set_status(self, status: SessionStatus, seek_s: float = 0.0) -> None:
        self._status = status
        self._emit({
            "type": SESSION_STATE,
            "state": status,
            "media": self._current,
            "token": self._token,
            "seek_s": seek_s,
        })

    def _emit(self, evt: dict) -> None:
        evt["window"] = self._window
        self._emit_cb(evt)
