"""Pure numeric helpers for overlay geometry (no Qt dependency)."""

from __future__ import annotations

import math

from snapthumb.utils.config import SAFE_ZONE_INSET, STAGE_MARGIN, STAGE_MAX_W


def clamp(v: float, lo: float, hi: float) -> float:
    """Saturate *v* into ``[lo, hi]``."""
    return max(lo, min(hi, v))


def snap_to(v: float, step: float) -> float:
    """Round *v* to the nearest multiple of *step* (halves round up).

    ``step <= 0`` disables snapping.
    """
    if step <= 0:
        return v
    return math.floor(v / step + 0.5) * step


def bearing(px: float, py: float, cx: float, cy: float) -> float:
    """Angle (radians) of point (px, py) as seen from center (cx, cy)."""
    return math.atan2(py - cy, px - cx)


def rotate_point(px: float, py: float, cx: float, cy: float, degrees: float) -> tuple[float, float]:
    """Rotate (px, py) about (cx, cy) by *degrees* (clockwise in screen space)."""
    rad = math.radians(degrees)
    cos_a = math.cos(rad)
    sin_a = math.sin(rad)
    dx = px - cx
    dy = py - cy
    return cx + dx * cos_a - dy * sin_a, cy + dx * sin_a + dy * cos_a


def cover_rect(src_w: float, src_h: float, out_w: float, out_h: float) -> tuple[float, float, float, float]:
    """Return the ``(dx, dy, dw, dh)`` that cover-fits a source into the output.

    The source is scaled uniformly by ``max(out_w/src_w, out_h/src_h)`` and
    centered; overflow is cropped by the caller's clip rectangle.
    A degenerate source dimension is treated as 1 pixel.
    """
    src_w = src_w or 1
    src_h = src_h or 1
    scale = max(out_w / src_w, out_h / src_h)
    dw = src_w * scale
    dh = src_h * scale
    return (out_w - dw) / 2, (out_h - dh) / 2, dw, dh


def stage_scale(container_w: float, export_w: float) -> float:
    """Preview scale for a stage inside a container of *container_w* pixels.

    Never upscales; the stage is capped at ``STAGE_MAX_W`` display pixels.
    """
    max_w = min(STAGE_MAX_W, container_w - STAGE_MARGIN)
    if export_w <= 0 or max_w <= 0:
        return 1.0
    return min(1.0, max_w / export_w)


def safe_zone_rect(w: float, h: float, inset: float = SAFE_ZONE_INSET) -> tuple[float, float, float, float]:
    """Inset rectangle ``(left, top, right, bottom)`` of the title-safe area."""
    return w * inset, h * inset, w * (1 - inset), h * (1 - inset)


def thirds_lines(w: float, h: float) -> tuple[list[float], list[float]]:
    """Rule-of-thirds guide positions as (xs, ys)."""
    return [w / 3, 2 * w / 3], [h / 3, 2 * h / 3]


def grid_lines(length: float, cell: float) -> list[float]:
    """Interior grid line offsets along one axis (edges excluded)."""
    if cell <= 0:
        return []
    count = math.ceil(length / cell)
    return [i * cell for i in range(1, count)]
