"""Tests for the compositor: layer order, fill modes, cover fit and outputs."""

from __future__ import annotations

import pytest
from PySide6.QtCore import QRect
from PySide6.QtGui import QColor, QImage, QPainter

from conftest import solid_image
from snapthumb.models.overlay import OverlayState
from snapthumb.models.project import ProjectState
from snapthumb.services import compositor
from snapthumb.services.compositor import FillMode, compose, fill_color, shadow_image
from snapthumb.utils.data_url import image_to_data_url


def _split_image(width: int, height: int) -> QImage:
    """Left half red, right half blue."""
    image = solid_image(width, height, "#ff0000")
    painter = QPainter(image)
    painter.fillRect(QRect(width // 2, 0, width - width // 2, height), QColor("#0000ff"))
    painter.end()
    return image


def _small_project(**kwargs) -> ProjectState:
    return ProjectState(export_w=320, export_h=240, **kwargs)


def _rgb(image: QImage, x: int, y: int) -> tuple[int, int, int]:
    c = image.pixelColor(x, y)
    return c.red(), c.green(), c.blue()


@pytest.fixture(autouse=True)
def _app(qapp):
    return qapp


class TestFillColor:
    def test_opaque_uses_bg_color(self):
        assert fill_color(ProjectState(bg_color="#112233", transparent_bg=True),
                          FillMode.OPAQUE).name() == "#112233"

    def test_clipboard_transparent(self):
        assert fill_color(ProjectState(transparent_bg=True), FillMode.CLIPBOARD) is None

    def test_jpeg_transparent_falls_back_to_black(self):
        p = ProjectState(bg_color="#ffffff", transparent_bg=True)
        assert fill_color(p, FillMode.JPEG).name() == "#000000"

    def test_invalid_color(self):
        assert fill_color(ProjectState(bg_color="nope"), FillMode.OPAQUE).name() == "#000000"


class TestCompose:
    def test_output_size(self):
        image = compose(_small_project(), 320, 240)
        assert (image.width(), image.height()) == (320, 240)

    def test_fill_only(self):
        image = compose(_small_project(bg_color="#112233"), 320, 240)
        assert _rgb(image, 0, 0) == (0x11, 0x22, 0x33)
        assert image.pixelColor(319, 239).alpha() == 255

    def test_background_cover_fit(self):
        # 100x50 into 320x240: scale 4.8, drawn at x=-80 with width 480.
        url = image_to_data_url(_split_image(100, 50))
        image = compose(_small_project(base_image=url), 320, 240)
        assert _rgb(image, 10, 120) == (255, 0, 0)
        assert _rgb(image, 300, 120) == (0, 0, 255)
        assert _rgb(image, 150, 5) == (255, 0, 0)

    def test_overlay_drawn_at_export_geometry(self):
        url = image_to_data_url(solid_image(10, 10, "#00ff00"))
        overlay = OverlayState(src=url, x=100, y=100, w=40, h=40, shadow=0)
        image = compose(_small_project(overlay=overlay), 320, 240)
        assert _rgb(image, 120, 120) == (0, 255, 0)
        assert _rgb(image, 90, 120) == (0, 0, 0)

    def test_overlay_rotation_about_center(self):
        url = image_to_data_url(solid_image(10, 10, "#00ff00"))
        overlay = OverlayState(src=url, x=100, y=100, w=100, h=20, rotation=90, shadow=0)
        image = compose(_small_project(overlay=overlay), 320, 240)
        assert _rgb(image, 150, 70) == (0, 255, 0)
        assert _rgb(image, 110, 110) == (0, 0, 0)

    def test_overlay_opacity(self):
        url = image_to_data_url(solid_image(10, 10, "#ffffff"))
        overlay = OverlayState(src=url, x=100, y=100, w=40, h=40, shadow=0, opacity=0.5)
        image = compose(_small_project(overlay=overlay), 320, 240)
        r, g, b = _rgb(image, 120, 120)
        assert 120 <= r <= 135

    def test_overlay_shadow_darkens_surroundings(self):
        url = image_to_data_url(solid_image(10, 10, "#ff0000"))
        overlay = OverlayState(src=url, x=100, y=100, w=40, h=40, shadow=12)
        image = compose(_small_project(bg_color="#ffffff", overlay=overlay), 320, 240)
        assert _rgb(image, 142, 120)[1] < 250
        assert _rgb(image, 10, 10) == (255, 255, 255)

    def test_undecodable_layers_are_skipped(self):
        bad = "data:image/png;base64,AA=="
        p = _small_project(bg_color="#336699", base_image=bad, overlay=OverlayState(src=bad))
        image = compose(p, 320, 240)
        assert _rgb(image, 160, 120) == (0x33, 0x66, 0x99)

    def test_clipboard_transparent_corner(self):
        image = compose(_small_project(transparent_bg=True), 320, 240, FillMode.CLIPBOARD)
        assert image.pixelColor(0, 0).alpha() == 0


class TestShadowImage:
    def test_no_blur(self):
        assert shadow_image(solid_image(8, 8), 0) is None

    def test_shadow_is_black_with_reduced_alpha(self):
        layer = compositor.new_raster(40, 40)
        painter = QPainter(layer)
        painter.fillRect(QRect(10, 10, 20, 20), QColor("#ff0000"))
        painter.end()
        shadow = shadow_image(layer, 4)
        center = shadow.pixelColor(20, 20)
        assert (center.red(), center.green(), center.blue()) == (0, 0, 0)
        assert 190 <= center.alpha() <= 210
        assert shadow.pixelColor(0, 0).alpha() < center.alpha()


class TestOutputs:
    def test_png_artifact(self):
        artifact = compositor.export_png(_small_project(base_name="shot.final.png"))
        assert artifact.mime == "image/png"
        assert artifact.filename == "shot.final_320x240.png"
        assert artifact.data.startswith(b"\x89PNG")
        assert artifact.data_url.startswith("data:image/png;base64,")
        decoded = QImage.fromData(artifact.data)
        assert (decoded.width(), decoded.height()) == (320, 240)

    def test_jpeg_artifact_is_opaque_black_when_transparent(self):
        artifact = compositor.export_jpeg(_small_project(bg_color="#ffffff", transparent_bg=True))
        assert artifact.mime == "image/jpeg"
        assert artifact.filename == "snapthumb_320x240.jpg"
        decoded = QImage.fromData(artifact.data)
        r, g, b = _rgb(decoded, 0, 0)
        assert max(r, g, b) <= 8
        assert not decoded.hasAlphaChannel()

    def test_default_basename(self):
        assert compositor.export_basename(ProjectState()) == "snapthumb"

    def test_jpeg_quality_percent(self):
        assert compositor.jpeg_quality_percent(ProjectState()) == 92
        assert compositor.jpeg_quality_percent(ProjectState(jpeg_quality=0)) == 1

    def test_save(self, tmp_path):
        artifact = compositor.export_png(_small_project())
        assert artifact.filename == "snapthumb_320x240.png"
        path = artifact.save(tmp_path / "chosen.png")
        assert path == tmp_path / "chosen.png"
        assert path.read_bytes() == artifact.data

    def test_clipboard_image_full_resolution(self):
        image = compositor.render_clipboard_image(_small_project(transparent_bg=True))
        assert (image.width(), image.height()) == (320, 240)
        assert image.pixelColor(5, 5).alpha() == 0
