"""Exception types raised inside the composer core."""


class SnapthumbError(Exception):
    """Base class for all composer errors."""


class ImageDecodeError(SnapthumbError):
    """A data URL or file could not be decoded into an image."""


class ClipboardError(SnapthumbError):
    """The system clipboard rejected a write."""
