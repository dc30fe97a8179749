"""Shared fixtures: headless Qt, isolated QSettings and tiny test images."""

from __future__ import annotations

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PySide6.QtCore import QSettings
from PySide6.QtGui import QColor, QImage

from snapthumb.utils.data_url import image_to_data_url


def solid_image(width: int, height: int, color: str | QColor = "#ff0000") -> QImage:
    image = QImage(width, height, QImage.Format.Format_ARGB32)
    image.fill(QColor(color))
    return image


@pytest.fixture
def qsettings(qapp, tmp_path):
    return QSettings(str(tmp_path / "settings.ini"), QSettings.Format.IniFormat)


@pytest.fixture
def make_data_url(qapp):
    """Factory: ``make_data_url(w, h, color)`` -> PNG data URL."""
    def _make(width: int = 4, height: int = 4, color: str | QColor = "#ff0000") -> str:
        return image_to_data_url(solid_image(width, height, color), "PNG")
    return _make
