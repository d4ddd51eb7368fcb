"""Base format handler interface."""

from abc import ABC, abstractmethod
from io import BytesIO
from typing import Any, BinaryIO, Dict

from PIL import Image, ImageOps

from imgconv.core.exceptions import DecodeFailureError


def quality_percent(quality: float) -> int:
    """Map a 0-1 quality fraction onto Pillow's 0-100 scale."""
    return max(0, min(100, int(round(quality * 100))))


def decode_image(image_data: bytes) -> Image.Image:
    """Decode image bytes into a raster with its display orientation."""
    try:
        with BytesIO(image_data) as buffer:
            img = Image.open(buffer)
            # Load image data to ensure it's fully read
            img.load()
            return ImageOps.exif_transpose(img)
    except Exception as e:
        raise DecodeFailureError(
            f"Failed to decode image: {str(e)}", details={"error": str(e)}
        )


class BaseFormatHandler(ABC):
    """Abstract base class for format handlers."""

    def __init__(self) -> None:
        """Initialize format handler."""
        self.supported_formats: list[str] = []
        self.format_name: str = ""
        self.lossless: bool = False

    @property
    def mimetype(self) -> str:
        return f"image/{self.supported_formats[0]}"

    def is_available(self) -> bool:
        """Whether the runtime can encode this format."""
        return True

    def load_image(self, image_data: bytes) -> Image.Image:
        """Decode image bytes into a raster."""
        return decode_image(image_data)

    @abstractmethod
    def save_image(
        self, image: Image.Image, output_buffer: BinaryIO, quality: float
    ) -> None:
        """Encode a raster into the buffer at the given quality."""

    def get_quality_param(self, quality: float) -> Dict[str, Any]:
        """Get format-specific quality parameters."""
        if self.lossless:
            return {}
        return {"quality": quality_percent(quality)}

    def prepare_image(self, image: Image.Image) -> Image.Image:
        """Prepare image for encoding (e.g., convert color mode if needed)."""
        # Flatten transparency onto white for formats without an alpha channel
        if image.mode in ("RGBA", "LA", "P") and not self._supports_transparency():
            rgba = image.convert("RGBA")
            background = Image.new("RGB", rgba.size, (255, 255, 255))
            background.paste(rgba, mask=rgba.split()[3])
            return background

        if not self._supports_mode(image.mode):
            if "transparency" in image.info or image.mode in ("RGBA", "LA", "P", "PA"):
                return image.convert("RGBA")
            return image.convert("RGB")

        return image

    def _supports_transparency(self) -> bool:
        """Check if format supports transparency."""
        return False

    def _supports_mode(self, mode: str) -> bool:
        """Check if format supports the given color mode."""
        return mode in ("RGB", "RGBA")
