"""OverlayController: overlay field edits, nudges and keyboard shortcuts."""

from __future__ import annotations

from typing import TYPE_CHECKING

from PySide6.QtCore import Qt

from snapthumb.models.project import ProjectState
from snapthumb.utils.config import (
    MIN_OVERLAY_SIZE,
    NUDGE_STEP,
    NUDGE_STEP_LARGE,
    ROTATE_STEP,
    ROTATE_STEP_LARGE,
    ROTATION_LIMIT,
    SHADOW_MAX,
)
from snapthumb.utils.geometry import clamp

if TYPE_CHECKING:
    from snapthumb.ui.controllers.app_context import AppContext

_ARROWS = {
    Qt.Key.Key_Left: (-1, 0),
    Qt.Key.Key_Right: (1, 0),
    Qt.Key.Key_Up: (0, -1),
    Qt.Key.Key_Down: (0, 1),
}


class OverlayController:
    """Edits to the single overlay. Every call is its own undo step."""

    def __init__(self, ctx: AppContext) -> None:
        self.ctx = ctx

    def _edit(self, fn) -> None:
        self.ctx.history.mutate(fn)

    # ---- Fields ----

    def set_x(self, x: float) -> None:
        self._edit(lambda d: setattr(d.overlay, "x", float(x)))

    def set_y(self, y: float) -> None:
        self._edit(lambda d: setattr(d.overlay, "y", float(y)))

    def set_width(self, w: float) -> None:
        self._edit(lambda d: setattr(d.overlay, "w", max(MIN_OVERLAY_SIZE, float(w))))

    def set_height(self, h: float) -> None:
        self._edit(lambda d: setattr(d.overlay, "h", max(MIN_OVERLAY_SIZE, float(h))))

    def set_rotation(self, degrees: float) -> None:
        self._edit(lambda d: setattr(d.overlay, "rotation",
                                     clamp(float(degrees), -ROTATION_LIMIT, ROTATION_LIMIT)))

    def set_opacity_percent(self, percent: float) -> None:
        self._edit(lambda d: setattr(d.overlay, "opacity", clamp(percent / 100.0, 0.0, 1.0)))

    def set_shadow(self, blur: float) -> None:
        self._edit(lambda d: setattr(d.overlay, "shadow", clamp(float(blur), 0.0, SHADOW_MAX)))

    def set_keep_aspect(self, on: bool) -> None:
        self._edit(lambda d: setattr(d.overlay, "keep_aspect", bool(on)))

    def set_snap(self, on: bool) -> None:
        self._edit(lambda d: setattr(d.overlay, "snap", bool(on)))

    # ---- Actions ----

    def center(self) -> None:
        def _apply(d: ProjectState) -> None:
            d.overlay.x = (d.export_w - d.overlay.w) / 2
            d.overlay.y = (d.export_h - d.overlay.h) / 2

        self._edit(_apply)

    def reset_rotation(self) -> None:
        self._edit(lambda d: setattr(d.overlay, "rotation", 0.0))

    def remove(self) -> None:
        if not self.ctx.project.overlay.has_source:
            return
        self._edit(lambda d: setattr(d.overlay, "src", None))

    def nudge(self, dx: float, dy: float) -> None:
        def _apply(d: ProjectState) -> None:
            d.overlay.x += dx
            d.overlay.y += dy

        self._edit(_apply)

    def rotate_by(self, degrees: float) -> None:
        self._edit(lambda d: setattr(d.overlay, "rotation",
                                     clamp(d.overlay.rotation + degrees, -ROTATION_LIMIT, ROTATION_LIMIT)))

    # ---- Keyboard ----

    def handle_key(self, key: int, modifiers: Qt.KeyboardModifier) -> bool:
        """Apply a shortcut; returns True when the key was consumed."""
        ctx = self.ctx
        ctrl = bool(modifiers & (Qt.KeyboardModifier.ControlModifier | Qt.KeyboardModifier.MetaModifier))
        shift = bool(modifiers & Qt.KeyboardModifier.ShiftModifier)

        # Only Escape reaches an active gesture; everything else is swallowed.
        if ctx.drag is not None and ctx.drag.is_active:
            if key == Qt.Key.Key_Escape:
                return ctx.drag.cancel()
            return True

        if ctrl and key == Qt.Key.Key_Z:
            if shift:
                ctx.history.redo()
            else:
                ctx.history.undo()
            return True
        if ctrl and key == Qt.Key.Key_Y:
            ctx.history.redo()
            return True
        if ctrl:
            return False

        if key == Qt.Key.Key_Escape:
            return ctx.drag.cancel() if ctx.drag is not None else False

        if key in _ARROWS:
            step = NUDGE_STEP_LARGE if shift else NUDGE_STEP
            ux, uy = _ARROWS[key]
            self.nudge(ux * step, uy * step)
            return True
        if key in (Qt.Key.Key_BracketLeft, Qt.Key.Key_BracketRight, Qt.Key.Key_BraceLeft, Qt.Key.Key_BraceRight):
            step = ROTATE_STEP_LARGE if shift else ROTATE_STEP
            sign = -1 if key in (Qt.Key.Key_BracketLeft, Qt.Key.Key_BraceLeft) else 1
            self.rotate_by(sign * step)
            return True

        project = ctx.project
        if key == Qt.Key.Key_G:
            ctx.history.mutate(lambda d: setattr(d, "grid_on", not project.grid_on))
            return True
        if key == Qt.Key.Key_S:
            ctx.history.mutate(lambda d: setattr(d, "safe_zones_on", not project.safe_zones_on))
            return True
        if key == Qt.Key.Key_K:
            self.set_keep_aspect(not project.overlay.keep_aspect)
            return True
        if key == Qt.Key.Key_N:
            self.set_snap(not project.overlay.snap)
            return True
        return False
