"""Copy a composite to the system clipboard, with a data-URL text fallback."""

from __future__ import annotations

import logging
from enum import Enum

from PySide6.QtGui import QClipboard, QGuiApplication, QImage

from snapthumb.errors import ClipboardError, ImageDecodeError
from snapthumb.utils.data_url import image_to_data_url

logger = logging.getLogger(__name__)


class CopyResult(Enum):
    IMAGE = "image"
    TEXT_FALLBACK = "text"
    FAILED = "failed"


def _system_clipboard() -> QClipboard | None:
    app = QGuiApplication.instance()
    return QGuiApplication.clipboard() if app is not None else None


def _write_image(clipboard: QClipboard, image: QImage) -> None:
    clipboard.setImage(image)
    if clipboard.image().isNull():
        raise ClipboardError("clipboard did not accept the image payload")


def _write_text(clipboard: QClipboard, text: str) -> None:
    clipboard.setText(text)
    if clipboard.text() != text:
        raise ClipboardError("clipboard did not accept the text payload")


def copy_image(image: QImage, clipboard: QClipboard | None = None) -> CopyResult:
    """Put *image* on the clipboard.

    Falls back to the PNG data URL as text when the platform clipboard cannot
    hold images. Never raises; the caller reports ``CopyResult.FAILED``.
    """
    clipboard = clipboard if clipboard is not None else _system_clipboard()
    if clipboard is None:
        logger.warning("No clipboard available")
        return CopyResult.FAILED
    try:
        _write_image(clipboard, image)
        return CopyResult.IMAGE
    except (ClipboardError, RuntimeError) as e:
        logger.info(f"Image clipboard write failed, trying text fallback: {e}")
    try:
        _write_text(clipboard, image_to_data_url(image, "PNG"))
        return CopyResult.TEXT_FALLBACK
    except (ClipboardError, ImageDecodeError, RuntimeError) as e:
        logger.warning(f"Clipboard copy failed: {e}")
        return CopyResult.FAILED
