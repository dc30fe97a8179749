"""Stage (x, y) hit testing for the overlay's body and handles."""

from __future__ import annotations

from snapthumb.models.overlay import OverlayState
from snapthumb.ui.overlay_drag import DragMode
from snapthumb.utils.config import HANDLE_RADIUS_PX, ROTATE_HANDLE_OFFSET_PX
from snapthumb.utils.geometry import rotate_point


def handle_positions(overlay: OverlayState, scale: float,
                     origin: tuple[float, float] = (0.0, 0.0)) -> dict[DragMode, tuple[float, float]]:
    """Unrotated handle centers in stage coordinates."""
    left = origin[0] + overlay.x * scale
    top = origin[1] + overlay.y * scale
    right = left + overlay.w * scale
    bottom = top + overlay.h * scale
    return {
        DragMode.ROTATE: ((left + right) / 2, top - ROTATE_HANDLE_OFFSET_PX),
        DragMode.RESIZE_NW: (left, top),
        DragMode.RESIZE_NE: (right, top),
        DragMode.RESIZE_SW: (left, bottom),
        DragMode.RESIZE_SE: (right, bottom),
    }


def hit_test(overlay: OverlayState, scale: float, x: float, y: float,
             origin: tuple[float, float] = (0.0, 0.0)) -> DragMode:
    """Return the gesture a press at (x, y) starts, or ``DragMode.NONE``.

    The point is rotated back into the overlay's unrotated frame first, so
    handles follow the rotated box. Handles win over the body.
    """
    if not overlay.has_source or scale <= 0:
        return DragMode.NONE
    cx = origin[0] + (overlay.x + overlay.w / 2) * scale
    cy = origin[1] + (overlay.y + overlay.h / 2) * scale
    lx, ly = rotate_point(x, y, cx, cy, -overlay.rotation)

    for mode, (hx, hy) in handle_positions(overlay, scale, origin).items():
        if abs(lx - hx) <= HANDLE_RADIUS_PX and abs(ly - hy) <= HANDLE_RADIUS_PX:
            return mode

    left = origin[0] + overlay.x * scale
    top = origin[1] + overlay.y * scale
    if left <= lx <= left + overlay.w * scale and top <= ly <= top + overlay.h * scale:
        return DragMode.MOVE
    return DragMode.NONE
