"""Turn picked or dropped files into project sources."""

from __future__ import annotations

import logging
import mimetypes
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path

from PySide6.QtCore import QUrl
from PySide6.QtGui import QImage

from snapthumb.utils.config import IMAGE_EXTENSIONS, VIDEO_EXTENSIONS
from snapthumb.utils.data_url import encode_data_url

logger = logging.getLogger(__name__)


class MediaKind(Enum):
    IMAGE = auto()
    VIDEO = auto()
    UNSUPPORTED = auto()


@dataclass(slots=True)
class ImportedImage:
    """A decoded still image, self-contained as a data URL."""

    data_url: str
    name: str
    width: int
    height: int


def classify(path: Path | str) -> MediaKind:
    """Decide from MIME type (falling back to extension) what a file is."""
    path = Path(path)
    mime, _ = mimetypes.guess_type(path.name)
    if mime:
        if mime.startswith("image/"):
            return MediaKind.IMAGE
        if mime.startswith("video/"):
            return MediaKind.VIDEO
    ext = path.suffix.lower()
    if ext in IMAGE_EXTENSIONS:
        return MediaKind.IMAGE
    if ext in VIDEO_EXTENSIONS:
        return MediaKind.VIDEO
    return MediaKind.UNSUPPORTED


def load_image(path: Path | str) -> ImportedImage | None:
    """Read and validate an image file. Returns None for anything unusable."""
    path = Path(path)
    if classify(path) != MediaKind.IMAGE:
        logger.debug(f"Rejected non-image file: {path.name}")
        return None
    try:
        data = path.read_bytes()
    except OSError as e:
        logger.debug(f"Could not read {path}: {e}")
        return None
    image = QImage.fromData(data)
    if image.isNull():
        logger.debug(f"Rejected undecodable image: {path.name}")
        return None
    mime = mimetypes.guess_type(path.name)[0] or "image/png"
    return ImportedImage(
        data_url=encode_data_url(data, mime),
        name=path.name,
        width=image.width(),
        height=image.height(),
    )


def video_url(path: Path | str) -> str | None:
    """Local file URL for a video, or None when *path* is not a video file."""
    path = Path(path)
    if classify(path) != MediaKind.VIDEO or not path.is_file():
        logger.debug(f"Rejected non-video file: {path.name}")
        return None
    return QUrl.fromLocalFile(str(path.resolve())).toString()
