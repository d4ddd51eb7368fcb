"""Unit tests for the byte sniffer."""

import pytest

from imgconv.core.constants import AVIF_PROBE_SAMPLE, UNKNOWN_TYPE
from imgconv.core.sniffer import detect_type, mimetype_subtype, to_hex


class TestDetectType:
    """Detection from leading bytes."""

    def test_detects_pillow_encoded_images(
        self, png_bytes, jpeg_bytes, gif_bytes, webp_bytes
    ):
        assert detect_type(png_bytes) == "image/png"
        assert detect_type(jpeg_bytes) == "image/jpeg"
        assert detect_type(gif_bytes) == "image/gif"
        assert detect_type(webp_bytes) == "image/webp"

    @pytest.mark.parametrize("marker", [b"\x00\x00\x00\x20", b"\x00\x00\x00\x1c"])
    def test_detects_avif_container(self, marker):
        header = marker + b"ftypavif" + b"\x00" * 4
        assert detect_type(header) == "image/avif"

    def test_detects_embedded_avif_sample(self):
        assert detect_type(AVIF_PROBE_SAMPLE) == "image/avif"

    @pytest.mark.parametrize(
        "second_byte_pair", [b"\xff\xdb", b"\xff\xe0", b"\xff\xe1", b"\xff\xee"]
    )
    def test_detects_jpeg_markers(self, second_byte_pair):
        assert detect_type(b"\xff\xd8" + second_byte_pair + b"\x00" * 8) == "image/jpeg"

    def test_detects_pdf(self):
        assert detect_type(b"%PDF-1.7\n%\xe2\xe3\xcf\xd3") == "application/pdf"

    def test_riff_without_webp_is_unknown(self):
        assert detect_type(b"RIFF\x24\x00\x00\x00WAVEfmt ") == UNKNOWN_TYPE

    def test_short_and_empty_input_is_unknown(self):
        assert detect_type(b"\x89PN") == UNKNOWN_TYPE
        assert detect_type(b"") == UNKNOWN_TYPE

    def test_text_is_unknown(self):
        assert detect_type(b"just some plain text") == UNKNOWN_TYPE

    def test_bytes_past_header_are_ignored(self, png_bytes):
        assert detect_type(png_bytes[:12]) == detect_type(png_bytes)


def test_to_hex_is_uppercase_without_separators():
    assert to_hex(b"\x00\xab\x1c") == "00AB1C"


def test_mimetype_subtype():
    assert mimetype_subtype("image/png") == "png"
    assert mimetype_subtype(UNKNOWN_TYPE) == ""
