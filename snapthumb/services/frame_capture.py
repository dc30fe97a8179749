"""Rasterize the current video frame into a new background image."""

from __future__ import annotations

import logging

from PySide6.QtGui import QImage

from snapthumb.models.project import ProjectState
from snapthumb.services.compositor import FillMode, fill_color, new_raster, paint_cover, paint_fill, raster_painter
from snapthumb.utils.data_url import image_to_data_url

logger = logging.getLogger(__name__)


def capture_name(project: ProjectState) -> str:
    """Display name for a captured frame, e.g. ``clip.mp4@1500ms.png``."""
    return f"{project.video_name or 'frame'}@{int(project.video_time * 1000 + 0.5)}ms.png"


def render_frame(project: ProjectState, frame: QImage) -> QImage:
    """Fill + cover-fitted *frame* at export resolution (no overlay)."""
    target = new_raster(project.export_w, project.export_h)
    with raster_painter(target) as painter:
        paint_fill(painter, fill_color(project, FillMode.OPAQUE), project.export_w, project.export_h)
        paint_cover(painter, frame, project.export_w, project.export_h)
    return target


def capture_frame(project: ProjectState, frame: QImage | None) -> tuple[str, str] | None:
    """Return ``(data_url, name)`` for the frame, or None when not capturable.

    Requires video mode with metadata loaded and a decoded frame.
    """
    if not project.can_capture:
        logger.debug("Capture skipped: video not ready")
        return None
    if frame is None or frame.isNull():
        logger.debug("Capture skipped: no frame available")
        return None
    image = render_frame(project, frame)
    return image_to_data_url(image, "PNG"), capture_name(project)
