from __future__ import annotations

import random
from dataclasses import dataclass

MIN_WINDOW_WIDTH = 320.0
MIN_WINDOW_HEIGHT = 240.0
MAX_WINDOW_WIDTH = 480.0
MAX_WINDOW_HEIGHT = 360.0
CONTENT_SCALE = 0.6

DEFAULT_WINDOW_WIDTH = 400.0
DEFAULT_WINDOW_HEIGHT = 300.0


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def max_y(self) -> float:
        return self.y + self.height

    @property
    def mid_x(self) -> float:
        return self.x + self.width / 2

    @property
    def mid_y(self) -> float:
        return self.y + self.height / 2

    def contains(self, other: "Rect") -> bool:
        return (
            other.x >= self.x
            and other.y >= self.y
            and other.max_x <= self.max_x
            and other.max_y <= self.max_y
        )


DEFAULT_SCREEN = Rect(0, 0, 800, 600)


def fit_window_size(content_width: float, content_height: float) -> tuple[float, float]:
    """Scale media's natural size into the allowed window box, keeping aspect ratio."""
    if content_width <= 0 or content_height <= 0:
        return DEFAULT_WINDOW_WIDTH, DEFAULT_WINDOW_HEIGHT

    width = content_width * CONTENT_SCALE
    height = content_height * CONTENT_SCALE

    if width < MIN_WINDOW_WIDTH or height < MIN_WINDOW_HEIGHT:
        scale = max(MIN_WINDOW_WIDTH / width, MIN_WINDOW_HEIGHT / height)
        width *= scale
        height *= scale

    if width > MAX_WINDOW_WIDTH or height > MAX_WINDOW_HEIGHT:
        scale = min(MAX_WINDOW_WIDTH / width, MAX_WINDOW_HEIGHT / height)
        width *= scale
        height *= scale

    return width, height


def centered_frame(screen: Rect, width: float, height: float) -> Rect:
    return Rect(screen.mid_x - width / 2, screen.mid_y - height / 2, width, height)


def random_frame(screen: Rect, width: float, height: float, rng: random.Random) -> Rect:
    max_x = max(screen.x, screen.max_x - width)
    max_y = max(screen.y, screen.max_y - height)
    return Rect(rng.uniform(screen.x, max_x), rng.uniform(screen.y, max_y), width, height)


def clamp_into(screen: Rect, frame: Rect) -> Rect:
    x = min(max(frame.x, screen.x), max(screen.x, screen.max_x - frame.width))
    y = min(max(frame.y, screen.y), max(screen.y, screen.max_y - frame.height))
    return Rect(x, y, frame.width, frame.height)


def resize_around_center(frame: Rect, width: float, height: float) -> Rect:
    return Rect(frame.mid_x - width / 2, frame.mid_y - height / 2, width, height)
