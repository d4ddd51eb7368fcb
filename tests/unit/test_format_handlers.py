"""Unit tests for format handlers."""

from io import BytesIO

import pytest
from PIL import Image

from imgconv.core.conversion.formats import get_handler
from imgconv.core.conversion.formats.avif_handler import AVIFHandler
from imgconv.core.conversion.formats.base import decode_image, quality_percent
from imgconv.core.conversion.formats.gif_handler import GifHandler
from imgconv.core.conversion.formats.jpeg_handler import JPEGHandler
from imgconv.core.conversion.formats.png_handler import PNGHandler
from imgconv.core.conversion.formats.webp_handler import WebPHandler
from imgconv.core.exceptions import DecodeFailureError, EncodeFailureError
from imgconv.core.sniffer import detect_type


def _encode(handler, image, quality=0.5) -> bytes:
    buffer = BytesIO()
    handler.save_image(image, buffer, quality)
    return buffer.getvalue()


class TestRegistry:
    def test_resolves_aliases(self):
        assert isinstance(get_handler("jpg"), JPEGHandler)
        assert isinstance(get_handler("JPEG"), JPEGHandler)
        assert isinstance(get_handler("webp"), WebPHandler)

    def test_unknown_format(self):
        assert get_handler("bmp") is None


@pytest.mark.parametrize(
    "quality,expected", [(0.5, 50), (0.923, 92), (1.0, 100), (1.5, 100), (-0.2, 0)]
)
def test_quality_percent(quality, expected):
    assert quality_percent(quality) == expected


def test_decode_image_rejects_garbage():
    with pytest.raises(DecodeFailureError):
        decode_image(b"definitely not an image")


def test_decode_image_applies_exif_orientation():
    exif = Image.Exif()
    exif[0x0112] = 6  # Rotated 90 degrees clockwise
    buffer = BytesIO()
    Image.new("RGB", (40, 20), "blue").save(buffer, format="JPEG", exif=exif)

    assert decode_image(buffer.getvalue()).size == (20, 40)


class TestJPEGHandler:
    @pytest.fixture
    def jpeg_handler(self):
        return JPEGHandler()

    def test_quality_params(self, jpeg_handler):
        assert jpeg_handler.get_quality_param(0.95) == {"quality": 95, "subsampling": 0}
        assert jpeg_handler.get_quality_param(0.5) == {"quality": 50, "subsampling": 2}
        assert jpeg_handler.get_quality_param(0.0)["quality"] == 1

    def test_flattens_transparency_onto_white(self, jpeg_handler):
        transparent = Image.new("RGBA", (16, 16), (0, 0, 0, 0))

        data = _encode(jpeg_handler, transparent, quality=0.9)
        decoded = Image.open(BytesIO(data))

        assert detect_type(data) == "image/jpeg"
        assert decoded.mode == "RGB"
        assert all(channel > 245 for channel in decoded.getpixel((8, 8)))

    def test_load_converts_cmyk(self, jpeg_handler):
        buffer = BytesIO()
        Image.new("CMYK", (8, 8), (0, 255, 255, 0)).save(buffer, format="JPEG")

        assert jpeg_handler.load_image(buffer.getvalue()).mode == "RGB"


class TestPNGHandler:
    def test_is_lossless(self):
        handler = PNGHandler()
        assert handler.lossless is True
        assert handler.get_quality_param(0.1) == {}

    def test_keeps_alpha(self):
        data = _encode(PNGHandler(), Image.new("RGBA", (4, 4), (10, 20, 30, 40)))
        assert Image.open(BytesIO(data)).mode == "RGBA"


class TestWebPHandler:
    def test_encodes_webp(self):
        data = _encode(WebPHandler(), Image.new("RGB", (10, 10), "green"))
        assert detect_type(data) == "image/webp"

    def test_quality_params_include_method(self):
        assert WebPHandler().get_quality_param(0.8) == {"quality": 80, "method": 4}


class TestGifHandler:
    def test_is_lossless(self):
        handler = GifHandler()
        assert handler.lossless is True
        assert handler.get_quality_param(0.1) == {}
        assert handler.get_quality_param(0.9) == {}

    def test_encodes_rgb_as_palette(self):
        data = _encode(GifHandler(), Image.new("RGB", (10, 10), "red"))

        decoded = Image.open(BytesIO(data))
        assert detect_type(data) == "image/gif"
        assert decoded.mode == "P"

    def test_keeps_binary_transparency(self):
        image = Image.new("RGBA", (10, 10), (255, 0, 0, 255))
        image.putpixel((0, 0), (0, 0, 0, 0))

        decoded = Image.open(BytesIO(_encode(GifHandler(), image)))

        assert "transparency" in decoded.info

    def test_load_takes_first_frame(self):
        frames = [Image.new("P", (6, 6), color) for color in (1, 2, 3)]
        buffer = BytesIO()
        frames[0].save(buffer, format="GIF", save_all=True, append_images=frames[1:])

        loaded = GifHandler().load_image(buffer.getvalue())

        assert loaded.size == (6, 6)
        assert loaded.mode in ("RGB", "RGBA")


class TestAVIFHandler:
    def test_unavailable_encoder_raises(self, monkeypatch):
        handler = AVIFHandler()
        monkeypatch.setattr(handler, "is_available", lambda: False)

        with pytest.raises(EncodeFailureError) as exc_info:
            _encode(handler, Image.new("RGB", (4, 4)))

        assert exc_info.value.error_code == "CONV305"

    def test_subsampling_follows_quality(self):
        handler = AVIFHandler()
        assert handler.get_quality_param(0.95)["subsampling"] == "4:4:4"
        assert handler.get_quality_param(0.5)["subsampling"] == "4:2:0"
