"""PNG format handler."""

from typing import BinaryIO

from PIL import Image

from imgconv.core.conversion.formats.base import BaseFormatHandler
from imgconv.core.exceptions import EncodeFailureError


class PNGHandler(BaseFormatHandler):
    """Handler for PNG format. Lossless, so quality is ignored."""

    def __init__(self) -> None:
        """Initialize PNG handler."""
        super().__init__()
        self.supported_formats = ["png"]
        self.format_name = "PNG"
        self.lossless = True

    def save_image(
        self, image: Image.Image, output_buffer: BinaryIO, quality: float
    ) -> None:
        """Save image as PNG."""
        try:
            image = self.prepare_image(image)
            image.save(output_buffer, format="PNG", **self.get_quality_param(quality))
            output_buffer.seek(0)

        except Exception as e:
            raise EncodeFailureError(
                f"Failed to save image as PNG: {str(e)}",
                details={"output_format": "png", "error": str(e)},
            )

    def _supports_transparency(self) -> bool:
        """PNG supports transparency."""
        return True

    def _supports_mode(self, mode: str) -> bool:
        """Check if PNG supports the given color mode."""
        return mode in ("RGB", "RGBA", "L", "LA", "P", "1")
