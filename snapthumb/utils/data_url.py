"""Data URL helpers: the self-contained image reference stored in the project."""

from __future__ import annotations

import base64
import binascii
from functools import lru_cache

from PySide6.QtCore import QBuffer, QByteArray, QIODevice
from PySide6.QtGui import QImage

from snapthumb.errors import ImageDecodeError

_FORMAT_MIME = {
    "PNG": "image/png",
    "JPEG": "image/jpeg",
    "JPG": "image/jpeg",
}


def encode_data_url(data: bytes, mime: str) -> str:
    """Wrap raw bytes into a base64 ``data:`` URL."""
    payload = base64.b64encode(data).decode("ascii")
    return f"data:{mime};base64,{payload}"


def parse_data_url(url: str) -> tuple[str, bytes]:
    """Split a base64 data URL into ``(mime, bytes)``.

    Raises:
        ImageDecodeError: if *url* is not a base64 data URL.
    """
    if not isinstance(url, str) or not url.startswith("data:"):
        raise ImageDecodeError("not a data URL")
    header, sep, payload = url.partition(",")
    if not sep or not header.endswith(";base64"):
        raise ImageDecodeError("data URL is not base64 encoded")
    mime = header[len("data:"):-len(";base64")] or "application/octet-stream"
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ImageDecodeError(f"invalid base64 payload: {e}") from e
    return mime, data


@lru_cache(maxsize=8)
def decode_image(url: str) -> QImage:
    """Decode a data URL into a QImage (cached by URL).

    Raises:
        ImageDecodeError: if the payload is not a decodable image.
    """
    _mime, data = parse_data_url(url)
    image = QImage.fromData(data)
    if image.isNull():
        raise ImageDecodeError("image payload could not be decoded")
    return image


def image_to_bytes(image: QImage, fmt: str = "PNG", quality: int = -1) -> bytes:
    """Serialize *image* with Qt's image writer (*quality* 0-100, -1 = default)."""
    ba = QByteArray()
    buf = QBuffer(ba)
    buf.open(QIODevice.OpenModeFlag.WriteOnly)
    try:
        if not image.save(buf, fmt, quality):
            raise ImageDecodeError(f"could not encode image as {fmt}")
    finally:
        buf.close()
    return bytes(ba.data())


def image_to_data_url(image: QImage, fmt: str = "PNG", quality: int = -1) -> str:
    """Serialize *image* and wrap it into a data URL."""
    mime = _FORMAT_MIME.get(fmt.upper(), "image/png")
    return encode_data_url(image_to_bytes(image, fmt, quality), mime)
