"""Tests for data URL encoding and image decoding."""

import pytest

from conftest import solid_image
from snapthumb.errors import ImageDecodeError
from snapthumb.utils.data_url import (
    decode_image,
    encode_data_url,
    image_to_bytes,
    image_to_data_url,
    parse_data_url,
)


class TestParse:
    def test_round_trip_bytes(self):
        url = encode_data_url(b"\x01\x02\x03", "image/png")
        assert url == "data:image/png;base64,AQID"
        assert parse_data_url(url) == ("image/png", b"\x01\x02\x03")

    @pytest.mark.parametrize("url", [
        "http://example.com/a.png",
        "data:image/png,rawtext",
        "data:image/png;base64,@@@",
        None,
    ])
    def test_rejects(self, url):
        with pytest.raises(ImageDecodeError):
            parse_data_url(url)


class TestImages:
    def test_decode_encoded_png(self, qapp):
        url = image_to_data_url(solid_image(7, 5, "#abcdef"))
        image = decode_image(url)
        assert (image.width(), image.height()) == (7, 5)
        assert image.pixelColor(3, 2).name() == "#abcdef"

    def test_decode_garbage(self, qapp):
        with pytest.raises(ImageDecodeError):
            decode_image(encode_data_url(b"garbage", "image/png"))

    def test_jpeg_mime(self, qapp):
        assert image_to_data_url(solid_image(4, 4), "JPEG", 80).startswith("data:image/jpeg;base64,")

    def test_png_signature(self, qapp):
        assert image_to_bytes(solid_image(2, 2)).startswith(b"\x89PNG")
