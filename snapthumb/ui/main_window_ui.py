"""MainWindow UI construction. Signal wiring lives in main_window.py."""

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QCheckBox,
    QComboBox,
    QDoubleSpinBox,
    QFormLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QScrollArea,
    QSlider,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from snapthumb.models.export_preset import DEFAULT_PRESETS
from snapthumb.models.project import Mode
from snapthumb.ui.stage_widget import StageWidget
from snapthumb.utils.config import (
    EXPORT_MAX_H,
    EXPORT_MAX_W,
    EXPORT_MIN_H,
    EXPORT_MIN_W,
    GRID_MAX,
    GRID_MIN,
    MIN_OVERLAY_SIZE,
    ROTATION_LIMIT,
    SHADOW_MAX,
)

_BTN_STYLE = """
    QPushButton { background: rgb(60,60,60); color: white; border: 1px solid rgb(80,80,80); border-radius: 3px; padding: 2px 10px; font-size: 12px; }
    QPushButton:hover { background: rgb(80,80,80); }
    QPushButton:disabled { color: rgb(120,120,120); }
"""


class StageHost(QWidget):
    """Centers the stage and reports its own width as the stage container."""

    def __init__(self, stage: StageWidget, parent: QWidget = None):
        super().__init__(parent)
        self._stage = stage
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addStretch(1)
        row = QHBoxLayout()
        row.addStretch(1)
        row.addWidget(stage)
        row.addStretch(1)
        layout.addLayout(row)
        layout.addStretch(1)
        self.setStyleSheet("background-color: rgb(24, 24, 24);")

    def resizeEvent(self, event) -> None:
        super().resizeEvent(event)
        self._stage.set_container_width(self.width())


def _spin(lo: int, hi: int, suffix: str = "") -> QSpinBox:
    spin = QSpinBox()
    spin.setRange(lo, hi)
    spin.setKeyboardTracking(False)
    if suffix:
        spin.setSuffix(suffix)
    return spin


def _dspin(lo: float, hi: float, decimals: int = 0, suffix: str = "") -> QDoubleSpinBox:
    spin = QDoubleSpinBox()
    spin.setRange(lo, hi)
    spin.setDecimals(decimals)
    spin.setKeyboardTracking(False)
    if suffix:
        spin.setSuffix(suffix)
    return spin


def _button(text: str, tooltip: str = "") -> QPushButton:
    btn = QPushButton(text)
    btn.setStyleSheet(_BTN_STYLE)
    if tooltip:
        btn.setToolTip(tooltip)
    return btn


def build_main_window_ui(window) -> None:
    """Build the central widget on *window* and attach the widget attributes.

    Called after window._ctx exists so the stage can read the present project.
    """
    central = QWidget()
    window.setCentralWidget(central)
    root = QHBoxLayout(central)
    root.setContentsMargins(0, 0, 0, 0)
    root.setSpacing(0)

    # ---- Left: stage + action bar + video strip ----
    left = QWidget()
    left_layout = QVBoxLayout(left)
    left_layout.setContentsMargins(8, 8, 8, 8)
    left_layout.setSpacing(6)

    actions = QHBoxLayout()
    window._new_btn = _button("New", "Clear media and start over")
    window._undo_btn = _button("Undo", "Undo (Ctrl+Z)")
    window._redo_btn = _button("Redo", "Redo (Ctrl+Shift+Z)")
    window._export_png_btn = _button("Export PNG")
    window._export_jpeg_btn = _button("Export JPEG")
    window._copy_btn = _button("Copy", "Copy PNG to clipboard")
    for btn in (window._new_btn, window._undo_btn, window._redo_btn):
        actions.addWidget(btn)
    actions.addStretch(1)
    for btn in (window._export_png_btn, window._export_jpeg_btn, window._copy_btn):
        actions.addWidget(btn)
    left_layout.addLayout(actions)

    window._stage = StageWidget(window._ctx)
    window._stage_host = StageHost(window._stage)
    left_layout.addWidget(window._stage_host, 1)

    window._video_bar = QWidget()
    video_layout = QHBoxLayout(window._video_bar)
    video_layout.setContentsMargins(0, 0, 0, 0)
    window._play_btn = _button("Play", "Play / Pause")
    window._scrubber = QSlider(Qt.Orientation.Horizontal)
    window._scrubber.setRange(0, 0)
    window._time_badge = QLabel("00:00 / 00:00")
    window._time_badge.setStyleSheet("color: rgb(180,180,180); font-size: 11px;")
    window._capture_btn = _button("Capture frame", "Use the current frame as background")
    video_layout.addWidget(window._play_btn)
    video_layout.addWidget(window._scrubber, 1)
    video_layout.addWidget(window._time_badge)
    video_layout.addWidget(window._capture_btn)
    left_layout.addWidget(window._video_bar)

    root.addWidget(left, 1)

    # ---- Right: settings panels ----
    panel = QWidget()
    panel_layout = QVBoxLayout(panel)
    panel_layout.setContentsMargins(8, 8, 8, 8)

    source_box = QGroupBox("Source")
    source_form = QFormLayout(source_box)
    window._mode_combo = QComboBox()
    window._mode_combo.addItem("Screenshot", Mode.SCREENSHOT)
    window._mode_combo.addItem("Video", Mode.VIDEO)
    source_form.addRow("Mode", window._mode_combo)
    window._bg_btn = _button("Background...")
    window._overlay_btn = _button("Overlay...")
    window._video_btn = _button("Video...")
    source_form.addRow(window._bg_btn)
    source_form.addRow(window._overlay_btn)
    source_form.addRow(window._video_btn)
    window._source_label = QLabel("")
    window._source_label.setWordWrap(True)
    source_form.addRow(window._source_label)
    panel_layout.addWidget(source_box)

    canvas_box = QGroupBox("Canvas")
    canvas_form = QFormLayout(canvas_box)
    window._preset_combo = QComboBox()
    window._preset_combo.addItem("Custom", None)
    for preset in DEFAULT_PRESETS:
        window._preset_combo.addItem(preset.display_label, preset)
    canvas_form.addRow("Preset", window._preset_combo)
    window._width_spin = _spin(EXPORT_MIN_W, EXPORT_MAX_W, " px")
    window._height_spin = _spin(EXPORT_MIN_H, EXPORT_MAX_H, " px")
    canvas_form.addRow("Width", window._width_spin)
    canvas_form.addRow("Height", window._height_spin)
    window._grid_check = QCheckBox("Grid (G)")
    window._grid_spin = _spin(GRID_MIN, GRID_MAX, " px")
    canvas_form.addRow(window._grid_check, window._grid_spin)
    window._safe_check = QCheckBox("Safe zones (S)")
    canvas_form.addRow(window._safe_check)
    window._bg_color_btn = _button("Background colour")
    window._transparent_check = QCheckBox("Transparent")
    canvas_form.addRow(window._bg_color_btn, window._transparent_check)
    window._jpeg_spin = _spin(1, 100, " %")
    canvas_form.addRow("JPEG quality", window._jpeg_spin)
    panel_layout.addWidget(canvas_box)

    overlay_box = QGroupBox("Overlay")
    overlay_form = QFormLayout(overlay_box)
    window._ov_x = _dspin(-EXPORT_MAX_W, EXPORT_MAX_W)
    window._ov_y = _dspin(-EXPORT_MAX_H, EXPORT_MAX_H)
    window._ov_w = _dspin(MIN_OVERLAY_SIZE, EXPORT_MAX_W * 4)
    window._ov_h = _dspin(MIN_OVERLAY_SIZE, EXPORT_MAX_H * 4)
    window._ov_rot = _dspin(-ROTATION_LIMIT, ROTATION_LIMIT, 1, " °")
    window._ov_opacity = _spin(0, 100, " %")
    window._ov_shadow = _dspin(0, SHADOW_MAX, 0, " px")
    overlay_form.addRow("X", window._ov_x)
    overlay_form.addRow("Y", window._ov_y)
    overlay_form.addRow("W", window._ov_w)
    overlay_form.addRow("H", window._ov_h)
    overlay_form.addRow("Rotation", window._ov_rot)
    overlay_form.addRow("Opacity", window._ov_opacity)
    overlay_form.addRow("Shadow", window._ov_shadow)
    window._keep_aspect_check = QCheckBox("Keep aspect (K)")
    window._snap_check = QCheckBox("Snap (N)")
    overlay_form.addRow(window._keep_aspect_check, window._snap_check)
    row = QHBoxLayout()
    window._center_btn = _button("Center")
    window._reset_rot_btn = _button("0°")
    window._remove_overlay_btn = _button("Remove")
    row.addWidget(window._center_btn)
    row.addWidget(window._reset_rot_btn)
    row.addWidget(window._remove_overlay_btn)
    overlay_form.addRow(row)
    window._overlay_box = overlay_box
    panel_layout.addWidget(overlay_box)
    panel_layout.addStretch(1)

    scroll = QScrollArea()
    scroll.setWidget(panel)
    scroll.setWidgetResizable(True)
    scroll.setFixedWidth(300)
    root.addWidget(scroll)
