"""Small builders shared by the playback tests."""

from pathlib import Path

from attention.core.motion.geometry import Rect
from attention.core.playback.media import MediaItem

SCREEN = Rect(0, 0, 1440, 900)


def make_items(*names):
    return [MediaItem.from_path(Path("/media") / n) for n in names]


def load_current(controller, window=0, width=1280, height=720):
    """Play the part of the presentation layer: report the current media as loaded."""
    session = controller.session(window)
    controller.media_loaded(window, session.token, width, height)
    return session


def events_of(controller, type_, window=None):
    return [
        e for e in controller.events
        if e["type"] == type_ and (window is None or e.get("window") == window)
    ]
