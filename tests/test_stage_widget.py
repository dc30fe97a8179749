"""Tests for the preview stage: scale, pointer drags and key forwarding."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from PySide6.QtCore import QEvent, QPointF, Qt
from PySide6.QtGui import QMouseEvent

from snapthumb.models.overlay import OverlayState
from snapthumb.models.project import ProjectState
from snapthumb.services.history import HistoryStore
from snapthumb.ui.controllers.app_context import AppContext
from snapthumb.ui.controllers.overlay_controller import OverlayController
from snapthumb.ui.overlay_drag import OverlayDragManager
from snapthumb.ui.stage_widget import StageWidget

SRC = "data:image/png;base64,AA=="


def _mouse(kind: QEvent.Type, x: float, y: float, button=Qt.MouseButton.LeftButton) -> QMouseEvent:
    pos = QPointF(x, y)
    buttons = Qt.MouseButton.NoButton if kind == QEvent.Type.MouseButtonRelease else Qt.MouseButton.LeftButton
    if kind == QEvent.Type.MouseMove:
        button = Qt.MouseButton.NoButton
    return QMouseEvent(kind, pos, pos, button, buttons, Qt.KeyboardModifier.NoModifier)


@pytest.fixture
def stage(qtbot):
    ctx = AppContext()
    ctx.history = HistoryStore(ProjectState(overlay=OverlayState(src=SRC)))
    ctx.drag = OverlayDragManager(ctx.history)
    ctx.overlay_ctrl = OverlayController(ctx)
    ctx.project_ctrl = MagicMock()
    widget = StageWidget(ctx)
    qtbot.addWidget(widget)
    widget.set_container_width(1000)
    return widget


class TestStageWidget:
    def test_scale_and_size(self, stage):
        assert stage.scale == pytest.approx(0.5)
        assert (stage.width(), stage.height()) == (960, 540)

    def test_rescales_with_export_size(self, stage):
        stage.ctx.history.mutate(lambda d: setattr(d, "export_w", 640))
        stage.refresh()
        assert stage.scale == 1.0
        assert stage.width() == 640

    def test_drag_body_is_one_undo_step(self, stage):
        history = stage.ctx.history
        stage.mousePressEvent(_mouse(QEvent.Type.MouseButtonPress, 200, 150))
        assert stage.ctx.drag.is_active
        stage.mouseMoveEvent(_mouse(QEvent.Type.MouseMove, 210, 155))
        stage.mouseMoveEvent(_mouse(QEvent.Type.MouseMove, 220, 160))
        stage.mouseReleaseEvent(_mouse(QEvent.Type.MouseButtonRelease, 220, 160))
        assert not stage.ctx.drag.is_active
        assert (history.present.overlay.x, history.present.overlay.y) == (240, 220)
        assert len(history.past) == 1

    def test_press_outside_overlay(self, stage):
        stage.mousePressEvent(_mouse(QEvent.Type.MouseButtonPress, 900, 500))
        assert not stage.ctx.drag.is_active

    def test_keys_forwarded(self, stage, qtbot):
        qtbot.keyClick(stage, Qt.Key.Key_Right)
        assert stage.ctx.project.overlay.x == 201

    def test_paint_does_not_raise(self, stage):
        stage.grab()
