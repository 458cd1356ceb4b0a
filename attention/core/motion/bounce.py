"""
DVD-style bounce motion for media windows.

BounceMotionEngine is a pure fixed-step integrator: each step adds the
velocity to the position and reflects each axis independently off the
screen bounds. BounceDriver runs one engine on a scheduler at a fixed
rate and reports every new position.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Callable, Optional

from attention.core.runtime.scheduler import Scheduler, TimerHandle

from .geometry import Rect

log = logging.getLogger(__name__)

MOTION_TICK = "MOTION_TICK"

VERTICAL_SPEED_RATIO = 0.7


@dataclass
class MotionState:
    x: float
    y: float
    vx: float = 0.0
    vy: float = 0.0

    @property
    def position(self) -> tuple[float, float]:
        return self.x, self.y


@dataclass(frozen=True)
class StepResult:
    position: tuple[float, float]
    flipped_x: bool
    flipped_y: bool


def _reflect(pos: float, vel: float, size: float, lo: float, hi: float) -> tuple[float, float]:
    if size >= hi - lo:
        # Window does not fit on this axis: pin to the minimum edge
        return lo, vel
    if pos <= lo:
        return lo, abs(vel)
    if pos + size >= hi:
        return hi - size, -abs(vel)
    return pos, vel


class BounceMotionEngine:
    def __init__(
        self,
        bounds: Rect,
        frame: Rect,
        speed_min: float = 3.0,
        speed_max: float = 6.0,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._bounds = bounds
        self._width = frame.width
        self._height = frame.height
        self._speed_min = speed_min
        self._speed_max = speed_max
        self._rng = rng or random.Random()
        self._state = MotionState(x=frame.x, y=frame.y)

    @property
    def state(self) -> MotionState:
        return MotionState(self._state.x, self._state.y, self._state.vx, self._state.vy)

    @property
    def bounds(self) -> Rect:
        return self._bounds

    @property
    def frame(self) -> Rect:
        return Rect(self._state.x, self._state.y, self._width, self._height)

    def set_bounds(self, bounds: Rect) -> None:
        self._bounds = bounds

    def set_frame(self, frame: Rect) -> None:
        self._state.x = frame.x
        self._state.y = frame.y
        self._width = frame.width
        self._height = frame.height

    def set_velocity(self, vx: float, vy: float) -> None:
        self._state.vx = vx
        self._state.vy = vy

    def randomize_velocity(self) -> None:
        speed = self._rng.uniform(self._speed_min, self._speed_max)
        vertical = self._rng.uniform(self._speed_min, self._speed_max) * VERTICAL_SPEED_RATIO
        self._state.vx = speed if self._rng.random() < 0.5 else -speed
        self._state.vy = vertical if self._rng.random() < 0.5 else -vertical

    def step(self) -> StepResult:
        s = self._state
        b = self._bounds
        old_vx, old_vy = s.vx, s.vy

        s.x, s.vx = _reflect(s.x + s.vx, s.vx, self._width, b.x, b.max_x)
        s.y, s.vy = _reflect(s.y + s.vy, s.vy, self._height, b.y, b.max_y)

        return StepResult(
            position=(s.x, s.y),
            flipped_x=(old_vx > 0) != (s.vx > 0) and old_vx != 0,
            flipped_y=(old_vy > 0) != (s.vy > 0) and old_vy != 0,
        )


class BounceDriver:
    """Steps one window's engine at a fixed rate while bouncing is on."""

    def __init__(
        self,
        window: int,
        engine: BounceMotionEngine,
        scheduler: Scheduler,
        emit: Callable[[dict], None],
        fps: int = 60,
    ) -> None:
        self._window = window
        self._engine = engine
        self._scheduler = scheduler
        self._emit = emit
        self._interval_s = 1.0 / max(1, fps)
        self._handle: Optional[TimerHandle] = None

    @property
    def engine(self) -> BounceMotionEngine:
        return self._engine

    @property
    def running(self) -> bool:
        return self._handle is not None and self._handle.active

    def start(self) -> None:
        if self.running:
            return
        self._engine.randomize_velocity()
        self._handle = self._scheduler.call_repeating(self._interval_s, self._tick)
        log.debug("Bounce started for window %d", self._window)

    def stop(self) -> None:
        # Position is kept; only the stepping halts
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _tick(self) -> None:
        result = self._engine.step()
        self._emit({"type": MOTION_TICK, "window": self._window, "position": result.position})
