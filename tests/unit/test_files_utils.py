"""Unit tests for file name and size helpers."""

import pytest

from imgconv.core.constants import SNIFFABLE_IMAGE_FORMATS
from imgconv.utils.files import (
    error_file_exts,
    file_size,
    get_accepted_extensions,
    get_extension,
    get_image_file_name,
)


@pytest.mark.parametrize(
    "num_bytes,expected",
    [
        (0, "0 B"),
        (512, "512 B"),
        (1023, "1023 B"),
        (1024, "1 KB"),
        (1536, "1.5 KB"),
        (5_000_000, "4.77 MB"),
    ],
)
def test_file_size(num_bytes, expected):
    assert file_size(num_bytes) == expected


def test_get_image_file_name_strips_last_extension():
    assert get_image_file_name("holiday.png") == "holiday"
    assert get_image_file_name("photo.final.jpeg") == "photo.final"
    assert get_image_file_name("noext") == "noext"


def test_get_extension():
    assert get_extension("a.b.PNG") == "PNG"
    assert get_extension("photo.webp") == "webp"


class TestAcceptedExtensions:
    def test_mimetype_list(self):
        assert get_accepted_extensions("image/png, image/jpeg") == ["png", "jpeg"]

    def test_bare_extensions_map_onto_subtypes(self):
        assert get_accepted_extensions(".jpg, .png, .JPEG") == ["jpeg", "png"]

    def test_wildcard_expands_to_known_images(self):
        assert get_accepted_extensions("image/*") == list(SNIFFABLE_IMAGE_FORMATS)

    def test_empty_declaration(self):
        assert get_accepted_extensions("") == []
        assert get_accepted_extensions(" , ") == []


def test_error_file_exts():
    assert error_file_exts(["gif", "jpeg", "png", "webp"]) == "gif, jpeg, png, or webp."
    assert error_file_exts(["png", "gif"]) == "png, or gif."
    assert error_file_exts(["png"]) == "png."
    assert error_file_exts([]) == ""
