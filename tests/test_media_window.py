"""Tests for the failure reporting in apps/desktop/ui/media_window.py."""

import pytest

pytest.importorskip("PySide6.QtMultimediaWidgets")

from PySide6.QtMultimedia import QMediaPlayer  # noqa: E402

from apps.desktop.ui.media_window import MediaWindow  # noqa: E402


@pytest.fixture
def window(mocker):
    """Stand-in for a MediaWindow instance; only the attributes the handlers read."""
    w = mocker.Mock()
    w._window = 1
    w._token = 7
    w._seek_ms = 0
    return w


class TestFailureReports:
    """One broken file produces exactly one media_failed for its own token."""

    def test_invalid_media_reports_failure(self, window):
        MediaWindow._on_media_status(window, QMediaPlayer.MediaStatus.InvalidMedia)
        window._controller.media_failed.assert_called_once_with(1, 7)

    def test_player_error_only_logs(self, window):
        """errorOccurred arrives after the next item may already be loading."""
        MediaWindow._on_player_error(window, QMediaPlayer.Error.ResourceError, "cannot open")
        window._controller.media_failed.assert_not_called()

    def test_broken_file_counts_once(self, window):
        """InvalidMedia then errorOccurred for the same file, with the token moved on in between."""
        MediaWindow._on_media_status(window, QMediaPlayer.MediaStatus.InvalidMedia)
        window._token = 8
        MediaWindow._on_player_error(window, QMediaPlayer.Error.FormatError, "unsupported")
        window._controller.media_failed.assert_called_once_with(1, 7)

    def test_end_of_media(self, window):
        MediaWindow._on_media_status(window, QMediaPlayer.MediaStatus.EndOfMedia)
        window._controller.media_finished.assert_called_once_with(1, 7)
        window._controller.media_failed.assert_not_called()
