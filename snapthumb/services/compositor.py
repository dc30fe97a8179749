"""Deterministic compositing of a project into a raster image.

The stack is always replayed in the same order, each layer optional:

1. fill with the background colour (or nothing / black, see :class:`FillMode`)
2. background image, cover-fitted and centered
3. overlay at its export-pixel geometry, rotated about its center, at its
   opacity, with a blurred rgba(0,0,0,0.8) drop shadow

Overlay coordinates are export pixels, so no scaling is applied to them here
whatever the output size. The live stage paints the same layers through
:func:`paint_fill` and :func:`paint_cover` under a view scale.
"""

from __future__ import annotations

import logging
import math
import re
import sys
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path

import numpy as np
from PIL import Image, ImageFilter
from PySide6.QtCore import QRectF, Qt
from PySide6.QtGui import QColor, QImage, QPainter

from snapthumb.errors import ImageDecodeError
from snapthumb.models.overlay import OverlayState
from snapthumb.models.project import ProjectState
from snapthumb.utils.config import DEFAULT_EXPORT_BASENAME, JPEG_QUALITY_MIN, SHADOW_COLOR, SHADOW_MAX
from snapthumb.utils.data_url import decode_image, encode_data_url, image_to_bytes
from snapthumb.utils.geometry import clamp, cover_rect

logger = logging.getLogger(__name__)

# Painting is serialized; every call still owns its own QImage target.
_raster_lock = threading.Lock()

_ALPHA_INDEX = 3 if sys.byteorder == "little" else 0


class FillMode(Enum):
    """How layer 1 is painted."""
    OPAQUE = auto()     # PNG export: always fill with bg_color
    CLIPBOARD = auto()  # skip the fill when transparent_bg is set
    JPEG = auto()       # always opaque; black when transparency was requested


@dataclass(frozen=True)
class ExportArtifact:
    """An encoded composite ready for download."""

    data: bytes
    mime: str
    filename: str
    width: int
    height: int

    @property
    def data_url(self) -> str:
        return encode_data_url(self.data, self.mime)

    def save(self, path: Path) -> Path:
        """Write the encoded bytes to *path* exactly as given."""
        path = Path(path)
        path.write_bytes(self.data)
        return path


# ---------------------------------------------------------------- layers


def fill_color(project: ProjectState, fill: FillMode) -> QColor | None:
    """Colour for layer 1, or None to leave the target transparent."""
    if fill == FillMode.CLIPBOARD and project.transparent_bg:
        return None
    if fill == FillMode.JPEG and project.transparent_bg:
        return QColor(0, 0, 0)
    color = QColor(project.bg_color or "#000000")
    if not color.isValid():
        color = QColor(0, 0, 0)
    return color


def paint_fill(painter: QPainter, color: QColor | None, width: float, height: float) -> None:
    if color is not None:
        painter.fillRect(QRectF(0, 0, width, height), color)


def paint_cover(painter: QPainter, image: QImage, width: float, height: float) -> None:
    """Draw *image* cover-fitted into ``(0, 0, width, height)``, cropping overflow."""
    dx, dy, dw, dh = cover_rect(image.width(), image.height(), width, height)
    painter.save()
    painter.setClipRect(QRectF(0, 0, width, height))
    painter.drawImage(QRectF(dx, dy, dw, dh), image)
    painter.restore()


def paint_overlay_body(painter: QPainter, overlay: OverlayState, image: QImage) -> None:
    """Draw the overlay image at its geometry, rotated about its center."""
    cx, cy = overlay.center
    painter.save()
    painter.translate(cx, cy)
    painter.rotate(overlay.rotation)
    painter.drawImage(QRectF(-overlay.w / 2, -overlay.h / 2, overlay.w, overlay.h), image)
    painter.restore()


def new_raster(width: int, height: int) -> QImage:
    image = QImage(width, height, QImage.Format.Format_ARGB32_Premultiplied)
    image.fill(Qt.GlobalColor.transparent)
    return image


def _begin(image: QImage) -> QPainter:
    painter = QPainter(image)
    painter.setRenderHint(QPainter.RenderHint.Antialiasing, True)
    painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform, True)
    return painter


@contextmanager
def raster_painter(image: QImage):
    """Exclusive, hinted painter on *image* for the duration of the block."""
    with _raster_lock:
        painter = _begin(image)
        try:
            yield painter
        finally:
            painter.end()


def _alpha_channel(image: QImage) -> np.ndarray:
    h, w = image.height(), image.width()
    buf = np.frombuffer(image.constBits(), dtype=np.uint8, count=image.sizeInBytes())
    rows = buf.reshape(h, image.bytesPerLine())[:, : w * 4]
    return rows.reshape(h, w, 4)[..., _ALPHA_INDEX].copy()


def _image_from_bgra(arr: np.ndarray) -> QImage:
    h, w, _ = arr.shape
    data = np.ascontiguousarray(arr).tobytes()
    return QImage(data, w, h, w * 4, QImage.Format.Format_ARGB32_Premultiplied).copy()


def shadow_image(layer: QImage, blur: float) -> QImage | None:
    """Blurred black silhouette of *layer* (canvas-style ``shadowBlur``).

    The blur radius maps to a Gaussian with sigma ``blur / 2``.
    """
    blur = clamp(blur, 0.0, SHADOW_MAX)
    if blur <= 0:
        return None
    alpha = _alpha_channel(layer)
    blurred = Image.fromarray(alpha, "L").filter(ImageFilter.GaussianBlur(radius=blur / 2))
    strength = SHADOW_COLOR[3] / 255.0
    shadow_alpha = np.clip(np.asarray(blurred, dtype=np.float32) * strength + 0.5, 0, 255).astype(np.uint8)
    bgra = np.zeros(shadow_alpha.shape + (4,), dtype=np.uint8)
    # Premultiplied black: colour channels stay 0.
    bgra[..., _ALPHA_INDEX] = shadow_alpha
    return _image_from_bgra(bgra)


def paint_overlay(painter: QPainter, overlay: OverlayState, image: QImage,
                  width: int, height: int) -> None:
    """Layer 3: overlay plus shadow, composited at the overlay's opacity."""
    pad = int(math.ceil(1.5 * clamp(overlay.shadow, 0.0, SHADOW_MAX)))
    layer = new_raster(width + 2 * pad, height + 2 * pad)
    lp = _begin(layer)
    try:
        lp.translate(pad, pad)
        paint_overlay_body(lp, overlay, image)
    finally:
        lp.end()

    shadow = shadow_image(layer, overlay.shadow)
    painter.save()
    painter.setOpacity(clamp(overlay.opacity, 0.0, 1.0))
    if shadow is not None:
        painter.drawImage(-pad, -pad, shadow)
    painter.drawImage(-pad, -pad, layer)
    painter.restore()


# ---------------------------------------------------------------- compose


def _decode_or_none(url: str | None, what: str) -> QImage | None:
    if not url:
        return None
    try:
        return decode_image(url)
    except ImageDecodeError as e:
        logger.warning(f"Skipping {what} layer: {e}")
        return None


def compose(project: ProjectState, width: int, height: int,
            fill: FillMode = FillMode.OPAQUE) -> QImage:
    """Rasterize *project* into a new ``width`` x ``height`` image."""
    width = max(1, int(width))
    height = max(1, int(height))
    target = new_raster(width, height)
    background = _decode_or_none(project.base_image, "background")
    overlay_image = _decode_or_none(project.overlay.src, "overlay")

    with raster_painter(target) as painter:
        paint_fill(painter, fill_color(project, fill), width, height)
        if background is not None:
            paint_cover(painter, background, width, height)
        if overlay_image is not None:
            paint_overlay(painter, project.overlay, overlay_image, width, height)
    return target


# ---------------------------------------------------------------- outputs


def export_basename(project: ProjectState) -> str:
    """Background display name without its extension, or the default name."""
    return re.sub(r"\.[a-zA-Z0-9]+$", "", project.base_name or DEFAULT_EXPORT_BASENAME)


def export_filename(project: ProjectState, extension: str) -> str:
    return f"{export_basename(project)}_{project.export_w}x{project.export_h}.{extension}"


def jpeg_quality_percent(project: ProjectState) -> int:
    return int(round(clamp(project.jpeg_quality, JPEG_QUALITY_MIN, 1.0) * 100))


def export_png(project: ProjectState) -> ExportArtifact:
    """Full-resolution PNG with an opaque fill."""
    image = compose(project, project.export_w, project.export_h, FillMode.OPAQUE)
    return ExportArtifact(
        data=image_to_bytes(image, "PNG"),
        mime="image/png",
        filename=export_filename(project, "png"),
        width=project.export_w,
        height=project.export_h,
    )


def export_jpeg(project: ProjectState) -> ExportArtifact:
    """Full-resolution JPEG at the project's quality; never transparent."""
    image = compose(project, project.export_w, project.export_h, FillMode.JPEG)
    rgb = image.convertToFormat(QImage.Format.Format_RGB32)
    return ExportArtifact(
        data=image_to_bytes(rgb, "JPEG", jpeg_quality_percent(project)),
        mime="image/jpeg",
        filename=export_filename(project, "jpg"),
        width=project.export_w,
        height=project.export_h,
    )


def render_clipboard_image(project: ProjectState) -> QImage:
    """Full-resolution composite for the clipboard (transparent when requested)."""
    return compose(project, project.export_w, project.export_h, FillMode.CLIPBOARD)
