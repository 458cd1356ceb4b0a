"""Shared pytest fixtures for attention tests."""

import random

import pytest

from attention.core.playback.controller import PlaybackSessionController
from attention.core.playback.media import MediaLibrary
from tests.fixtures.fakes import FakeProcessLister, ManualScheduler
from tests.fixtures.helpers import SCREEN, make_items


# =============================================================================
# TIME AND RANDOMNESS
# =============================================================================


@pytest.fixture
def scheduler():
    """Virtual-time scheduler standing in for Qt timers."""
    return ManualScheduler()


@pytest.fixture
def rng():
    """Seeded RNG so random playlist picks are reproducible."""
    return random.Random(1234)


# =============================================================================
# PROCESS TABLE
# =============================================================================


@pytest.fixture
def lister():
    """Empty fake process table."""
    return FakeProcessLister()


# =============================================================================
# MEDIA
# =============================================================================


@pytest.fixture
def media_dir(tmp_path):
    """Directory with a mix of playable and ignored files."""
    d = tmp_path / "media"
    d.mkdir()
    for name in ["clip.mp4", "loop.MOV", "cat.png", "dog.jpeg", "notes.txt", "archive.zip"]:
        (d / name).write_bytes(b"\x00")
    (d / "nested").mkdir()
    return d


@pytest.fixture
def library():
    """Four-item library: two videos, two images."""
    return MediaLibrary(make_items("a.mp4", "b.mp4", "c.png", "d.jpg"))


@pytest.fixture
def make_controller(scheduler, rng):
    """Factory building a controller over a fixed library, recording every event."""

    def factory(items=None, **config):
        lib = MediaLibrary(items if items is not None else make_items("a.mp4", "b.mp4", "c.png", "d.jpg"))
        controller = PlaybackSessionController(
            config=config,
            scheduler=scheduler,
            library_loader=lambda: lib,
            rng=rng,
            screen=SCREEN,
        )
        controller.events = []
        controller.on_event(controller.events.append)
        return controller

    return factory

