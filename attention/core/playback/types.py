from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Optional

from .media import MediaItem

SessionStatus = Literal["IDLE", "LOADING", "PLAYING", "PLACEHOLDER", "STOPPED"]

SESSION_STATE = "SESSION_STATE"
MEDIA_RESTART = "MEDIA_RESTART"
WINDOW_FRAME = "WINDOW_FRAME"
WINDOW_HIDDEN = "WINDOW_HIDDEN"

MAX_WINDOWS = 4


@dataclass(frozen=True)
class PlaybackConfig:
    window_count: int = 1
    loop_mode: bool = False
    bounce_mode: bool = False
    image_duration_s: float = 8.0
    bounce_fps: int = 60
    bounce_speed_min: float = 3.0
    bounce_speed_max: float = 6.0
    video_seek_min_s: float = 10.0
    video_seek_max_s: float = 20.0
    max_history: int = 200


@dataclass(frozen=True)
class SessionState:
    """Read-only view of one session for the UI and tests."""
    window: int
    status: SessionStatus
    media: Optional[MediaItem]
    history: tuple[MediaItem, ...]
    history_index: int
    loop: bool
    bounce: bool
    token: int


@dataclass
class ActivationReasons:
    """Why sessions are on screen. Sessions show iff any reason holds."""
    active_pids: set[int] = field(default_factory=set)
    test_mode: bool = False
    screensaver_active: bool = False

    def should_show(self) -> bool:
        return bool(self.active_pids) or self.test_mode or self.screensaver_active

    def clear(self) -> None:
        self.active_pids.clear()
        self.test_mode = False
        self.screensaver_active = False
