"""Main application window."""

from __future__ import annotations

import logging
from pathlib import Path

from PySide6.QtCore import QSignalBlocker, Slot
from PySide6.QtGui import QAction, QColor, QKeySequence
from PySide6.QtWidgets import QColorDialog, QFileDialog, QMainWindow, QMessageBox

from snapthumb.models.export_preset import DEFAULT_PRESETS, find_preset
from snapthumb.models.project import Mode, ProjectState
from snapthumb.services.autosave import AutoSaveManager
from snapthumb.services.history import HistoryStore
from snapthumb.services.project_io import ProjectStorage
from snapthumb.services.settings_manager import SettingsManager
from snapthumb.services.video_source import VideoSource
from snapthumb.ui.controllers import AppContext
from snapthumb.ui.controllers.export_controller import ExportController
from snapthumb.ui.controllers.overlay_controller import OverlayController
from snapthumb.ui.controllers.project_controller import ProjectController
from snapthumb.ui.main_window_ui import build_main_window_ui
from snapthumb.ui.overlay_drag import OverlayDragManager
from snapthumb.utils.config import APP_NAME, APP_VERSION, IMAGE_FILTER, VIDEO_FILTER
from snapthumb.utils.time_utils import ms_to_seconds, seconds_to_badge, seconds_to_ms

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    def __init__(self, settings: SettingsManager | None = None) -> None:
        super().__init__()
        self.setWindowTitle(f"{APP_NAME} v{APP_VERSION}")
        self.setMinimumSize(1100, 700)
        self.resize(1440, 900)

        self._settings = settings or SettingsManager()
        self._storage = ProjectStorage(self._settings.qsettings)
        self._autosave = AutoSaveManager(self._storage, self._settings.get_autosave_debounce_ms(), self)
        self._autosave.save_failed.connect(self._on_autosave_failed)

        initial = self._storage.load()
        if initial is not None:
            logger.info("Restored project from local storage")
        self._history = HistoryStore(initial or ProjectState(), autosave=self._autosave, parent=self)
        self._video = VideoSource(self)

        ctx = AppContext()
        ctx.history = self._history
        ctx.drag = OverlayDragManager(self._history)
        ctx.window = self
        ctx.video = self._video
        ctx.settings = self._settings
        ctx.show_notice = lambda title, text: QMessageBox.warning(self, title, text)
        self._ctx = ctx

        build_main_window_ui(self)
        ctx.stage = self._stage

        self._project_ctrl = ProjectController(ctx)
        self._overlay_ctrl = OverlayController(ctx)
        self._export_ctrl = ExportController(ctx)
        ctx.project_ctrl = self._project_ctrl
        ctx.overlay_ctrl = self._overlay_ctrl
        ctx.export_ctrl = self._export_ctrl

        self._build_menu()
        self._connect_signals()
        self._restore_geometry()
        self._on_state_changed(self._history.present)
        self._on_history_changed(self._history.can_undo, self._history.can_redo)
        self.statusBar().showMessage("Ready")

    # ------------------------------------------------------------------ Menu

    def _build_menu(self) -> None:
        menubar = self.menuBar()

        file_menu = menubar.addMenu("&File")
        new_action = QAction("&New", self)
        new_action.setShortcut(QKeySequence("Ctrl+N"))
        new_action.triggered.connect(self._project_ctrl.on_new_project)
        file_menu.addAction(new_action)
        file_menu.addSeparator()

        for text, slot in (("Open &Background...", self._on_open_background),
                           ("Open &Overlay...", self._on_open_overlay),
                           ("Open &Video...", self._on_open_video)):
            action = QAction(text, self)
            action.triggered.connect(slot)
            file_menu.addAction(action)
        file_menu.addSeparator()

        png_action = QAction("Export &PNG", self)
        png_action.setShortcut(QKeySequence("Ctrl+E"))
        png_action.triggered.connect(lambda: self._export_ctrl.export_png())
        file_menu.addAction(png_action)

        jpeg_action = QAction("Export &JPEG", self)
        jpeg_action.setShortcut(QKeySequence("Ctrl+Shift+E"))
        jpeg_action.triggered.connect(lambda: self._export_ctrl.export_jpeg())
        file_menu.addAction(jpeg_action)

        copy_action = QAction("&Copy to Clipboard", self)
        copy_action.setShortcut(QKeySequence("Ctrl+Shift+C"))
        copy_action.triggered.connect(self._export_ctrl.copy_to_clipboard)
        file_menu.addAction(copy_action)
        file_menu.addSeparator()

        quit_action = QAction("&Quit", self)
        quit_action.setShortcut(QKeySequence("Ctrl+Q"))
        quit_action.triggered.connect(self.close)
        file_menu.addAction(quit_action)

        edit_menu = menubar.addMenu("&Edit")
        self._undo_action = QAction("&Undo", self)
        self._undo_action.setShortcut(QKeySequence("Ctrl+Z"))
        self._undo_action.triggered.connect(self._on_undo)
        edit_menu.addAction(self._undo_action)

        self._redo_action = QAction("&Redo", self)
        self._redo_action.setShortcuts([QKeySequence("Ctrl+Shift+Z"), QKeySequence("Ctrl+Y")])
        self._redo_action.triggered.connect(self._on_redo)
        edit_menu.addAction(self._redo_action)

    # ------------------------------------------------------------------ Signals

    def _connect_signals(self) -> None:
        history = self._history
        history.state_changed.connect(self._on_state_changed)
        history.history_changed.connect(self._on_history_changed)

        self._video.metadata_ready.connect(self._project_ctrl.on_video_metadata)
        self._video.time_updated.connect(self._project_ctrl.on_video_time)

        self._new_btn.clicked.connect(self._project_ctrl.on_new_project)
        self._undo_btn.clicked.connect(self._on_undo)
        self._redo_btn.clicked.connect(self._on_redo)
        self._export_png_btn.clicked.connect(lambda: self._export_ctrl.export_png())
        self._export_jpeg_btn.clicked.connect(lambda: self._export_ctrl.export_jpeg())
        self._copy_btn.clicked.connect(self._export_ctrl.copy_to_clipboard)

        self._bg_btn.clicked.connect(self._on_open_background)
        self._overlay_btn.clicked.connect(self._on_open_overlay)
        self._video_btn.clicked.connect(self._on_open_video)
        self._mode_combo.currentIndexChanged.connect(
            lambda i: self._project_ctrl.set_mode(self._mode_combo.itemData(i)))

        self._preset_combo.currentIndexChanged.connect(self._on_preset_selected)
        self._width_spin.valueChanged.connect(self._project_ctrl.set_export_width)
        self._height_spin.valueChanged.connect(self._project_ctrl.set_export_height)
        self._grid_check.toggled.connect(self._project_ctrl.set_grid_on)
        self._grid_spin.valueChanged.connect(self._project_ctrl.set_grid_size)
        self._safe_check.toggled.connect(self._project_ctrl.set_safe_zones_on)
        self._bg_color_btn.clicked.connect(self._on_pick_bg_color)
        self._transparent_check.toggled.connect(self._project_ctrl.set_transparent_bg)
        self._jpeg_spin.valueChanged.connect(lambda v: self._project_ctrl.set_jpeg_quality(v / 100.0))

        ov = self._overlay_ctrl
        self._ov_x.valueChanged.connect(ov.set_x)
        self._ov_y.valueChanged.connect(ov.set_y)
        self._ov_w.valueChanged.connect(ov.set_width)
        self._ov_h.valueChanged.connect(ov.set_height)
        self._ov_rot.valueChanged.connect(ov.set_rotation)
        self._ov_opacity.valueChanged.connect(ov.set_opacity_percent)
        self._ov_shadow.valueChanged.connect(ov.set_shadow)
        self._keep_aspect_check.toggled.connect(ov.set_keep_aspect)
        self._snap_check.toggled.connect(ov.set_snap)
        self._center_btn.clicked.connect(ov.center)
        self._reset_rot_btn.clicked.connect(ov.reset_rotation)
        self._remove_overlay_btn.clicked.connect(ov.remove)

        self._play_btn.clicked.connect(self._project_ctrl.toggle_playback)
        self._scrubber.valueChanged.connect(lambda ms: self._project_ctrl.seek(ms_to_seconds(ms)))
        self._capture_btn.clicked.connect(self._project_ctrl.on_capture_frame)

    @Slot(object)
    def _on_state_changed(self, project: ProjectState) -> None:
        """Mirror the present entry into every control without re-emitting edits."""
        widgets = (
            self._mode_combo, self._preset_combo, self._width_spin, self._height_spin,
            self._grid_check, self._grid_spin, self._safe_check, self._transparent_check,
            self._jpeg_spin, self._ov_x, self._ov_y, self._ov_w, self._ov_h, self._ov_rot,
            self._ov_opacity, self._ov_shadow, self._keep_aspect_check, self._snap_check,
            self._scrubber,
        )
        blockers = [QSignalBlocker(w) for w in widgets]
        try:
            self._mode_combo.setCurrentIndex(1 if project.mode == Mode.VIDEO else 0)
            preset = find_preset(project.export_w, project.export_h)
            self._preset_combo.setCurrentIndex(DEFAULT_PRESETS.index(preset) + 1 if preset else 0)
            self._width_spin.setValue(project.export_w)
            self._height_spin.setValue(project.export_h)
            self._grid_check.setChecked(project.grid_on)
            self._grid_spin.setValue(project.grid_size)
            self._safe_check.setChecked(project.safe_zones_on)
            self._transparent_check.setChecked(project.transparent_bg)
            self._jpeg_spin.setValue(round(project.jpeg_quality * 100))

            o = project.overlay
            self._ov_x.setValue(o.x)
            self._ov_y.setValue(o.y)
            self._ov_w.setValue(o.w)
            self._ov_h.setValue(o.h)
            self._ov_rot.setValue(o.rotation)
            self._ov_opacity.setValue(round(o.opacity * 100))
            self._ov_shadow.setValue(o.shadow)
            self._keep_aspect_check.setChecked(o.keep_aspect)
            self._snap_check.setChecked(o.snap)

            self._scrubber.setRange(0, seconds_to_ms(project.video_duration))
            self._scrubber.setValue(seconds_to_ms(project.video_time))
        finally:
            del blockers

        self._overlay_box.setEnabled(project.overlay.has_source)
        self._bg_color_btn.setStyleSheet(f"background-color: {QColor(project.bg_color).name()};")
        self._video_bar.setVisible(project.mode == Mode.VIDEO)
        self._capture_btn.setEnabled(project.can_capture)
        self._play_btn.setEnabled(project.has_video)
        self._play_btn.setText("Pause" if self._video.is_playing else "Play")
        self._time_badge.setText(
            f"{seconds_to_badge(project.video_time)} / {seconds_to_badge(project.video_duration)}")
        names = [n for n in (project.base_name, project.video_name) if n]
        self._source_label.setText("\n".join(names))
        self._stage.refresh()

    @Slot(bool, bool)
    def _on_history_changed(self, can_undo: bool, can_redo: bool) -> None:
        self._undo_btn.setEnabled(can_undo)
        self._undo_action.setEnabled(can_undo)
        self._redo_btn.setEnabled(can_redo)
        self._redo_action.setEnabled(can_redo)

    def _on_undo(self) -> None:
        if not self._ctx.drag.is_active:
            self._history.undo()

    def _on_redo(self) -> None:
        if not self._ctx.drag.is_active:
            self._history.redo()

    @Slot()
    def _on_autosave_failed(self) -> None:
        self.statusBar().showMessage("Autosave failed", 5000)

    # ------------------------------------------------------------------ Pickers

    def _on_open_background(self) -> None:
        path, _ = QFileDialog.getOpenFileName(self, "Open Background", "", IMAGE_FILTER)
        if path and not self._project_ctrl.on_pick_background(Path(path)):
            QMessageBox.warning(self, "Open Background", f"Could not load {Path(path).name}")

    def _on_open_overlay(self) -> None:
        path, _ = QFileDialog.getOpenFileName(self, "Open Overlay", "", IMAGE_FILTER)
        if path and not self._project_ctrl.on_pick_overlay(Path(path)):
            QMessageBox.warning(self, "Open Overlay", f"Could not load {Path(path).name}")

    def _on_open_video(self) -> None:
        path, _ = QFileDialog.getOpenFileName(self, "Open Video", "", VIDEO_FILTER)
        if path and not self._project_ctrl.on_pick_video(Path(path)):
            QMessageBox.warning(self, "Open Video", f"Could not open {Path(path).name}")

    def _on_preset_selected(self, index: int) -> None:
        preset = self._preset_combo.itemData(index)
        if preset is not None:
            self._project_ctrl.apply_preset(preset)

    def _on_pick_bg_color(self) -> None:
        color = QColorDialog.getColor(QColor(self._history.present.bg_color), self, "Background colour")
        if color.isValid():
            self._project_ctrl.set_bg_color(color.name())

    # ------------------------------------------------------------------ Lifecycle

    def _restore_geometry(self) -> None:
        geometry = self._settings.get_window_geometry()
        if geometry:
            self.restoreGeometry(geometry)

    def closeEvent(self, event) -> None:
        self._settings.set_window_geometry(self.saveGeometry())
        self._ctx.drag.on_release()
        self._video.set_source(None)
        # Final save before closing
        self._history.shutdown()
        super().closeEvent(event)
