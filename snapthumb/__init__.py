"""Snapthumb: thumbnail composer with a live preview and pixel-exact export."""

from snapthumb.utils.config import APP_VERSION

__version__ = APP_VERSION
