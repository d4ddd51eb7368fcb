"""Pytest fixtures for image form converter tests."""

import os
from io import BytesIO

import pytest
from PIL import Image

# Set test environment variables BEFORE any imports
os.environ["IMGCONV_ENV"] = "testing"
os.environ["IMGCONV_LOGGING_ENABLED"] = "false"

from imgconv.models.files import FileInput, SelectedFile  # noqa: E402


def make_image_bytes(
    fmt: str = "PNG", size=(32, 24), mode: str = "RGB", color="red"
) -> bytes:
    """Encode a solid-colour image with Pillow."""
    img = Image.new(mode, size, color=color)
    buffer = BytesIO()
    img.save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def png_bytes() -> bytes:
    return make_image_bytes("PNG")


@pytest.fixture
def jpeg_bytes() -> bytes:
    return make_image_bytes("JPEG")


@pytest.fixture
def gif_bytes() -> bytes:
    return make_image_bytes("GIF", mode="P", color=1)


@pytest.fixture
def webp_bytes() -> bytes:
    return make_image_bytes("WEBP")


@pytest.fixture
def rgba_png_bytes() -> bytes:
    return make_image_bytes("PNG", mode="RGBA", color=(0, 128, 255, 100))


@pytest.fixture
def png_file(png_bytes) -> SelectedFile:
    return SelectedFile.from_bytes("holiday.png", png_bytes)


@pytest.fixture
def file_input() -> FileInput:
    return FileInput(
        name="image1",
        accept="image/gif, image/jpeg, image/png, image/webp",
        max_filesize=5_000_000,
        enabled=True,
    )
