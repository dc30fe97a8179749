"""Live preview stage: background, guides and the draggable overlay."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from PySide6.QtCore import QPointF, QRectF, QSize, Qt
from PySide6.QtGui import QColor, QImage, QPainter, QPen
from PySide6.QtWidgets import QSizePolicy, QWidget

from snapthumb.errors import ImageDecodeError
from snapthumb.models.project import ProjectState
from snapthumb.services.compositor import paint_cover, paint_overlay_body
from snapthumb.ui.overlay_drag import DragMode
from snapthumb.ui.overlay_hit_test import handle_positions, hit_test
from snapthumb.utils.config import HANDLE_RADIUS_PX
from snapthumb.utils.data_url import decode_image
from snapthumb.utils.geometry import grid_lines, safe_zone_rect, stage_scale, thirds_lines

if TYPE_CHECKING:
    from snapthumb.ui.controllers.app_context import AppContext

logger = logging.getLogger(__name__)

_CURSORS = {
    DragMode.MOVE: Qt.CursorShape.SizeAllCursor,
    DragMode.RESIZE_NW: Qt.CursorShape.SizeFDiagCursor,
    DragMode.RESIZE_SE: Qt.CursorShape.SizeFDiagCursor,
    DragMode.RESIZE_NE: Qt.CursorShape.SizeBDiagCursor,
    DragMode.RESIZE_SW: Qt.CursorShape.SizeBDiagCursor,
    DragMode.ROTATE: Qt.CursorShape.CrossCursor,
}


def _image_or_none(url: str | None) -> QImage | None:
    if not url:
        return None
    try:
        return decode_image(url)
    except ImageDecodeError as e:
        logger.debug(f"Preview skipped undecodable image: {e}")
        return None


class StageWidget(QWidget):
    """Paints the project at preview scale and feeds pointer drags to the engine."""

    def __init__(self, ctx: AppContext, parent: QWidget = None):
        super().__init__(parent)
        self.ctx = ctx
        self._scale = 1.0
        self._container_w = 1280
        self.setMouseTracking(True)
        self.setAcceptDrops(True)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self.setSizePolicy(QSizePolicy.Policy.Fixed, QSizePolicy.Policy.Fixed)

    # ------------------------------------------------------------------ Scale

    @property
    def scale(self) -> float:
        return self._scale

    def set_container_width(self, width: int) -> None:
        self._container_w = width
        self.refresh()

    def refresh(self) -> None:
        project = self.ctx.project
        self._scale = stage_scale(self._container_w, project.export_w)
        size = QSize(round(project.export_w * self._scale), round(project.export_h * self._scale))
        if size != self.size():
            self.setFixedSize(size)
        self.update()

    def sizeHint(self) -> QSize:
        project = self.ctx.project
        return QSize(round(project.export_w * self._scale), round(project.export_h * self._scale))

    # ------------------------------------------------------------------ Paint

    def paintEvent(self, event) -> None:
        project = self.ctx.project
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing, True)
        painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform, True)
        try:
            painter.save()
            painter.scale(self._scale, self._scale)
            # The preview always shows the fill colour, even with transparent_bg.
            painter.fillRect(QRectF(0, 0, project.export_w, project.export_h), QColor(project.bg_color))
            background = _image_or_none(project.base_image)
            if background is not None:
                paint_cover(painter, background, project.export_w, project.export_h)
            painter.restore()

            if project.grid_on:
                self._paint_grid(painter, project)
            if project.safe_zones_on:
                self._paint_safe_zones(painter, project)
            self._paint_overlay(painter, project)
        finally:
            painter.end()

    def _paint_grid(self, painter: QPainter, project: ProjectState) -> None:
        s = self._scale
        painter.setPen(QPen(QColor(255, 255, 255, 30), 1))
        for x in grid_lines(project.export_w, project.grid_size):
            painter.drawLine(QPointF(round(x * s), 0), QPointF(round(x * s), self.height()))
        for y in grid_lines(project.export_h, project.grid_size):
            painter.drawLine(QPointF(0, round(y * s)), QPointF(self.width(), round(y * s)))

    def _paint_safe_zones(self, painter: QPainter, project: ProjectState) -> None:
        s = self._scale
        left, top, right, bottom = (v * s for v in safe_zone_rect(project.export_w, project.export_h))
        safe = QRectF(left, top, right - left, bottom - top)
        shade = QColor(16, 16, 16, 64)
        painter.fillRect(QRectF(0, 0, self.width(), top), shade)
        painter.fillRect(QRectF(0, bottom, self.width(), self.height() - bottom), shade)
        painter.fillRect(QRectF(0, top, left, bottom - top), shade)
        painter.fillRect(QRectF(right, top, self.width() - right, bottom - top), shade)
        painter.setPen(QPen(QColor(255, 255, 255, 90), 1, Qt.PenStyle.DashLine))
        painter.drawRect(safe)
        xs, ys = thirds_lines(project.export_w, project.export_h)
        painter.setPen(QPen(QColor(255, 255, 255, 50), 1))
        for x in xs:
            painter.drawLine(QPointF(x * s, 0), QPointF(x * s, self.height()))
        for y in ys:
            painter.drawLine(QPointF(0, y * s), QPointF(self.width(), y * s))

    def _paint_overlay(self, painter: QPainter, project: ProjectState) -> None:
        overlay = project.overlay
        image = _image_or_none(overlay.src)
        if image is None:
            return
        painter.save()
        painter.scale(self._scale, self._scale)
        painter.setOpacity(overlay.opacity)
        paint_overlay_body(painter, overlay, image)
        painter.restore()

        # Bounding box and handles in screen space, rotated with the overlay.
        s = self._scale
        cx, cy = (v * s for v in overlay.center)
        painter.save()
        painter.translate(cx, cy)
        painter.rotate(overlay.rotation)
        painter.translate(-cx, -cy)
        painter.setPen(QPen(QColor(230, 230, 230, 200), 1))
        painter.setBrush(Qt.BrushStyle.NoBrush)
        painter.drawRect(QRectF(overlay.x * s, overlay.y * s, overlay.w * s, overlay.h * s))
        painter.setBrush(QColor(245, 245, 245))
        r = HANDLE_RADIUS_PX * 0.75
        for mode, (hx, hy) in handle_positions(overlay, s).items():
            if mode == DragMode.ROTATE:
                painter.drawLine(QPointF(hx, hy), QPointF(hx, overlay.y * s))
            painter.drawEllipse(QPointF(hx, hy), r, r)
        painter.restore()

    # ------------------------------------------------------------------ Pointer

    def mousePressEvent(self, event) -> None:
        if event.button() != Qt.MouseButton.LeftButton:
            super().mousePressEvent(event)
            return
        pos = event.position()
        mode = hit_test(self.ctx.project.overlay, self._scale, pos.x(), pos.y())
        if self.ctx.drag.start(mode, pos.x(), pos.y(), self._scale):
            self.grabMouse()
            event.accept()
            return
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event) -> None:
        pos = event.position()
        if self.ctx.drag.on_move(pos.x(), pos.y()):
            event.accept()
            return
        mode = hit_test(self.ctx.project.overlay, self._scale, pos.x(), pos.y())
        if mode in _CURSORS:
            self.setCursor(_CURSORS[mode])
        else:
            self.unsetCursor()
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event) -> None:
        if event.button() == Qt.MouseButton.LeftButton and self.ctx.drag.on_release():
            self.releaseMouse()
            event.accept()
            return
        super().mouseReleaseEvent(event)

    def focusOutEvent(self, event) -> None:
        # Losing the pointer mid-gesture still ends with a committed state.
        if self.ctx.drag.on_release():
            self.releaseMouse()
        super().focusOutEvent(event)

    def keyPressEvent(self, event) -> None:
        ctrl = self.ctx.overlay_ctrl
        try:
            key = Qt.Key(event.key())
        except ValueError:
            key = None
        if ctrl is not None and key is not None and ctrl.handle_key(key, event.modifiers()):
            event.accept()
            return
        super().keyPressEvent(event)

    # ------------------------------------------------------------------ Drops

    def dragEnterEvent(self, event) -> None:
        if event.mimeData().hasUrls():
            event.acceptProposedAction()

    def dropEvent(self, event) -> None:
        urls = event.mimeData().urls()
        if not urls or not urls[0].isLocalFile():
            return
        if self.ctx.project_ctrl.on_drop(Path(urls[0].toLocalFile())):
            event.acceptProposedAction()
