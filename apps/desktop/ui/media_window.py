"""
Frameless always-on-top window that renders one playback session.

The window holds no playback logic: it applies controller events
(SESSION_STATE, MEDIA_RESTART, WINDOW_FRAME, WINDOW_HIDDEN, MOTION_TICK)
and reports load/end/failure back with the token it was given.
"""

from __future__ import annotations

import logging
from PySide6.QtCore import QTimer, Qt, QUrl
from PySide6.QtGui import QPixmap
from PySide6.QtMultimedia import QAudioOutput, QMediaMetaData, QMediaPlayer
from PySide6.QtMultimediaWidgets import QVideoWidget
from PySide6.QtWidgets import QLabel, QStackedLayout, QWidget

from attention.core.motion.bounce import MOTION_TICK
from attention.core.playback.controller import PlaybackSessionController
from attention.core.playback.media import MediaItem
from attention.core.playback.types import MEDIA_RESTART, SESSION_STATE, WINDOW_FRAME, WINDOW_HIDDEN

log = logging.getLogger(__name__)

PLACEHOLDER_TEXT = "No media found.\nPlace videos or images in ~/Movies/"


class MediaWindow(QWidget):
    def __init__(self, window: int, controller: PlaybackSessionController) -> None:
        super().__init__(None)
        self._window = window
        self._controller = controller
        self._token = 0
        self._seek_ms = 0
        self._pixmap: QPixmap | None = None

        self.setWindowFlags(Qt.Tool | Qt.FramelessWindowHint | Qt.WindowStaysOnTopHint)
        self.setAttribute(Qt.WA_ShowWithoutActivating)
        self.setStyleSheet("background-color: black;")

        self._stack = QStackedLayout(self)
        self._stack.setContentsMargins(0, 0, 0, 0)

        self._video = QVideoWidget(self)
        self._stack.addWidget(self._video)

        self._image = QLabel(self)
        self._image.setAlignment(Qt.AlignCenter)
        self._stack.addWidget(self._image)

        self._placeholder = QLabel(PLACEHOLDER_TEXT, self)
        self._placeholder.setAlignment(Qt.AlignCenter)
        self._placeholder.setStyleSheet("color: white; font-size: 14px;")
        self._stack.addWidget(self._placeholder)

        # Muted, and kept out of the system's now-playing controls
        self._audio = QAudioOutput(self)
        self._audio.setMuted(True)
        self._player = QMediaPlayer(self)
        self._player.setAudioOutput(self._audio)
        self._player.setVideoOutput(self._video)
        self._player.mediaStatusChanged.connect(self._on_media_status)
        self._player.errorOccurred.connect(self._on_player_error)

    def apply(self, evt: dict) -> None:
        t = evt.get("type")
        if t == SESSION_STATE:
            state = evt.get("state")
            if state == "LOADING":
                self._load(evt["media"], evt["token"], evt.get("seek_s", 0.0))
            elif state == "PLACEHOLDER":
                self._player.stop()
                self._token = evt["token"]
                self._stack.setCurrentWidget(self._placeholder)
            elif state == "STOPPED":
                self._player.stop()
        elif t == MEDIA_RESTART:
            if evt["media"].is_video:
                self._player.setPosition(0)
                self._player.play()
        elif t == WINDOW_FRAME:
            frame = evt["frame"]
            self.setGeometry(int(frame.x), int(frame.y), int(frame.width), int(frame.height))
            if not self.isVisible():
                self.show()
            self.raise_()
        elif t == MOTION_TICK:
            x, y = evt["position"]
            self.move(int(x), int(y))
        elif t == WINDOW_HIDDEN:
            self._player.stop()
            self.hide()

    def shutdown(self) -> None:
        self._player.stop()
        self._player.setSource(QUrl())
        self.close()
        self.deleteLater()

    def _load(self, media: MediaItem, token: int, seek_s: float) -> None:
        self._token = token
        self._player.stop()

        if media.is_video:
            self._seek_ms = int(seek_s * 1000)
            self._stack.setCurrentWidget(self._video)
            self._player.setSource(QUrl.fromLocalFile(str(media.path)))
            return

        pixmap = QPixmap(str(media.path))
        if pixmap.isNull():
            log.warning("Could not decode image %s", media.path)
            QTimer.singleShot(0, lambda: self._controller.media_failed(self._window, token))
            return

        self._pixmap = pixmap
        self._stack.setCurrentWidget(self._image)
        self._render_image()
        QTimer.singleShot(
            0, lambda: self._controller.media_loaded(self._window, token, pixmap.width(), pixmap.height())
        )

    def _render_image(self) -> None:
        if self._pixmap is None:
            return
        self._image.setPixmap(
            self._pixmap.scaled(self._image.size(), Qt.KeepAspectRatio, Qt.SmoothTransformation)
        )

    def resizeEvent(self, event) -> None:
        super().resizeEvent(event)
        self._render_image()

    def _on_media_status(self, status: QMediaPlayer.MediaStatus) -> None:
        token = self._token
        if status == QMediaPlayer.MediaStatus.LoadedMedia:
            resolution = self._player.metaData().value(QMediaMetaData.Key.Resolution)
            width = resolution.width() if resolution is not None else 0
            height = resolution.height() if resolution is not None else 0
            # Short clips start from the beginning instead of past their end
            if 0 < self._seek_ms < self._player.duration():
                self._player.setPosition(self._seek_ms)
            self._seek_ms = 0
            self._player.play()
            self._controller.media_loaded(self._window, token, width, height)
        elif status == QMediaPlayer.MediaStatus.EndOfMedia:
            self._controller.media_finished(self._window, token)
        elif status == QMediaPlayer.MediaStatus.InvalidMedia:
            self._controller.media_failed(self._window, token)

    def _on_player_error(self, error: QMediaPlayer.Error, message: str) -> None:
        if error == QMediaPlayer.Error.NoError:
            return
        # InvalidMedia from mediaStatusChanged is the single failure report
        log.warning("Playback error in window %d: %s", self._window, message)
