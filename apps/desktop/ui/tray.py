"""
System tray front end: wires the process monitor, the playback controller
and one MediaWindow per session, and exposes the user commands as a menu.
"""

from __future__ import annotations

import logging
from PySide6.QtCore import QObject, QUrl
from PySide6.QtGui import QAction, QActionGroup, QDesktopServices, QGuiApplication
from PySide6.QtWidgets import QApplication, QMenu, QStyle, QSystemTrayIcon

from attention.shared.config import AppConfig
from attention.shared.paths import bundled_media_dir
from attention.shared.store import ConfigStore
from attention.core.monitor.activity_monitor import ProcessActivityMonitor
from attention.core.monitor.types import COMMAND_FINISHED, COMMAND_STARTED
from attention.core.motion.geometry import DEFAULT_SCREEN, Rect
from attention.core.playback.controller import PlaybackSessionController
from attention.core.playback.media import MediaLibrary
from attention.core.playback.types import MAX_WINDOWS, WINDOW_HIDDEN

from .media_window import MediaWindow
from .qt_scheduler import QtScheduler

log = logging.getLogger(__name__)


def _screen_rect() -> Rect:
    screen = QGuiApplication.primaryScreen()
    if screen is None:
        return DEFAULT_SCREEN
    g = screen.availableGeometry()
    return Rect(g.x(), g.y(), g.width(), g.height())


class AttentionTray(QObject):
    def __init__(self, app: QApplication) -> None:
        super().__init__(app)
        self._app = app

        self.store = ConfigStore()
        self.cfg: AppConfig = self.store.load()

        self.scheduler = QtScheduler(self)
        self.controller = PlaybackSessionController(
            config=self.cfg.to_playback_config(),
            scheduler=self.scheduler,
            library_loader=lambda: MediaLibrary.scan(self.cfg.media_folder),
            screen=_screen_rect(),
        )
        self.controller.on_event(self._on_playback_event)

        self.monitor = ProcessActivityMonitor(config=self.cfg.to_monitor_config())
        # The monitor runs on its own thread; hop to the GUI thread first
        self.monitor.on_event(lambda evt: self.scheduler.call_soon(lambda: self._on_monitor_event(evt)))
        self.monitor.on_error(lambda msg: self.scheduler.call_soon(lambda: log.error("Monitor error: %s", msg)))

        self._windows: dict[int, MediaWindow] = {}

        screen = QGuiApplication.primaryScreen()
        if screen is not None:
            screen.availableGeometryChanged.connect(lambda _g: self.controller.set_screen_bounds(_screen_rect()))

        self._build_tray()

        if self.cfg.enabled:
            self.monitor.start()
        else:
            self.controller.set_enabled(False)

    # -- tray menu -------------------------------------------------------

    def _build_tray(self) -> None:
        icon = self._app.style().standardIcon(QStyle.SP_MediaPlay)
        self.tray = QSystemTrayIcon(icon, self)
        self.tray.setToolTip("Attention")

        menu = QMenu()

        self.act_enabled = self._toggle(menu, "Enabled", self.cfg.enabled, self._toggle_enabled)
        self.act_bounce = self._toggle(menu, "DVD Bounce Mode", self.cfg.bounce_mode, self._toggle_bounce)
        self.act_loop = self._toggle(menu, "Loop Current Video", self.cfg.loop_mode, self._toggle_loop)

        count_menu = menu.addMenu("Video Count")
        group = QActionGroup(count_menu)
        group.setExclusive(True)
        for n in range(1, MAX_WINDOWS + 1):
            act = QAction(str(n), count_menu, checkable=True)
            act.setChecked(n == self.cfg.window_count)
            act.triggered.connect(lambda _checked=False, n=n: self._set_window_count(n))
            group.addAction(act)
            count_menu.addAction(act)

        menu.addSeparator()
        self.act_test = self._toggle(menu, "Test Video", False, self._toggle_test)
        menu.addAction("Stop All Videos", self._force_stop_all)

        menu.addSeparator()
        menu.addAction("Previous", self.controller.skip_previous)
        menu.addAction("Next", self.controller.skip_next)

        menu.addSeparator()
        menu.addAction("Reload Media", self.controller.reload_media)
        menu.addAction("Open Media Folder...", self._open_media_folder)

        menu.addSeparator()
        menu.addAction("Quit", self.quit)

        self._menu = menu
        self.tray.setContextMenu(menu)
        self.tray.show()

    @staticmethod
    def _toggle(menu: QMenu, title: str, checked: bool, slot) -> QAction:
        act = QAction(title, menu, checkable=True)
        act.setChecked(checked)
        act.toggled.connect(slot)
        menu.addAction(act)
        return act

    def _toggle_enabled(self, checked: bool) -> None:
        self.cfg = self.store.update(self.cfg, enabled=checked)
        self.controller.set_enabled(checked)
        if checked:
            self.monitor.start()
        else:
            self.monitor.stop()

    def _toggle_bounce(self, checked: bool) -> None:
        self.cfg = self.store.update(self.cfg, bounce_mode=checked)
        self.controller.set_bounce(checked)

    def _toggle_loop(self, checked: bool) -> None:
        self.cfg = self.store.update(self.cfg, loop_mode=checked)
        self.controller.set_loop(checked)

    def _set_window_count(self, count: int) -> None:
        self.cfg = self.store.update(self.cfg, window_count=count)
        self.controller.set_window_count(count)

    def _toggle_test(self, checked: bool) -> None:
        if not checked:
            self.controller.prune_processes(self.monitor.running_pids())
        self.controller.set_test_mode(checked)

    def _force_stop_all(self) -> None:
        self.monitor.reset_tracked()
        self.controller.force_stop_all()
        self.act_test.blockSignals(True)
        self.act_test.setChecked(False)
        self.act_test.blockSignals(False)
        self._update_tooltip()

    def _open_media_folder(self) -> None:
        path = self.cfg.media_folder or str(bundled_media_dir())
        QDesktopServices.openUrl(QUrl.fromLocalFile(path))

    def quit(self) -> None:
        self.monitor.stop()
        self.controller.request_stop()
        self.tray.hide()
        self._app.quit()

    # -- events ----------------------------------------------------------

    def _on_monitor_event(self, evt: dict) -> None:
        t = evt.get("type")
        if t == COMMAND_STARTED:
            log.info("COMMAND_STARTED: %s (pid %s)", evt.get("command"), evt.get("pid"))
        elif t == COMMAND_FINISHED:
            log.info("COMMAND_FINISHED: pid %s", evt.get("pid"))
        self.controller.handle_monitor_event(evt)
        self._update_tooltip()

    def _on_playback_event(self, evt: dict) -> None:
        idx = evt.get("window")
        if idx is None:
            return
        win = self._windows.get(idx)
        if win is None:
            if evt.get("type") == WINDOW_HIDDEN:
                return
            win = MediaWindow(idx, self.controller)
            self._windows[idx] = win
        win.apply(evt)
        if evt.get("type") == WINDOW_HIDDEN:
            self._windows.pop(idx, None)
            win.shutdown()

    def _update_tooltip(self) -> None:
        running = len(self.controller.reasons().active_pids)
        if running:
            self.tray.setToolTip(f"Attention - {running} build command(s) running")
        else:
            self.tray.setToolTip("Attention")
