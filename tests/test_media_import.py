"""Tests for classifying and loading picked or dropped media."""

from __future__ import annotations

import pytest

from conftest import solid_image
from snapthumb.services.media_import import MediaKind, classify, load_image, video_url
from snapthumb.utils.data_url import decode_image


@pytest.fixture
def png_file(qapp, tmp_path):
    path = tmp_path / "shot.png"
    assert solid_image(30, 20, "#123456").save(str(path), "PNG")
    return path


class TestClassify:
    @pytest.mark.parametrize("name, kind", [
        ("a.png", MediaKind.IMAGE),
        ("b.JPG", MediaKind.IMAGE),
        ("c.webp", MediaKind.IMAGE),
        ("d.mp4", MediaKind.VIDEO),
        ("e.webm", MediaKind.VIDEO),
        ("f.txt", MediaKind.UNSUPPORTED),
        ("noext", MediaKind.UNSUPPORTED),
    ])
    def test_kinds(self, name, kind):
        assert classify(name) == kind


class TestLoadImage:
    def test_loads_as_data_url(self, png_file):
        imported = load_image(png_file)
        assert imported.name == "shot.png"
        assert (imported.width, imported.height) == (30, 20)
        assert imported.data_url.startswith("data:image/png;base64,")
        assert decode_image(imported.data_url).width() == 30

    def test_rejects_non_image(self, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("hello")
        assert load_image(path) is None

    def test_rejects_corrupt_image(self, qapp, tmp_path):
        path = tmp_path / "broken.png"
        path.write_bytes(b"not really a png")
        assert load_image(path) is None

    def test_missing_file(self, tmp_path):
        assert load_image(tmp_path / "gone.png") is None


class TestVideoUrl:
    def test_local_file_url(self, tmp_path):
        path = tmp_path / "clip.mp4"
        path.write_bytes(b"\x00")
        url = video_url(path)
        assert url.startswith("file://")
        assert url.endswith("clip.mp4")

    def test_missing_or_wrong_kind(self, tmp_path):
        assert video_url(tmp_path / "none.mp4") is None
        img = tmp_path / "x.png"
        img.write_bytes(b"\x00")
        assert video_url(img) is None
