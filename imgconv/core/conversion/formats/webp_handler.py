"""WebP format handler."""

from typing import Any, BinaryIO, Dict

from PIL import Image

from imgconv.core.conversion.formats.base import BaseFormatHandler
from imgconv.core.exceptions import EncodeFailureError


class WebPHandler(BaseFormatHandler):
    """Handler for WebP format."""

    def __init__(self):
        """Initialize WebP handler."""
        super().__init__()
        self.supported_formats = ["webp"]
        self.format_name = "WEBP"

    def save_image(
        self, image: Image.Image, output_buffer: BinaryIO, quality: float
    ) -> None:
        """Save image as WebP."""
        try:
            image = self.prepare_image(image)
            save_params = self.get_quality_param(quality)

            if image.mode == "RGBA":
                save_params["exact"] = False  # Allow inexact RGBA->RGBA conversion

            image.save(output_buffer, format="WEBP", **save_params)
            output_buffer.seek(0)

        except Exception as e:
            raise EncodeFailureError(
                f"Failed to save image as WebP: {str(e)}",
                details={"output_format": "webp", "error": str(e)},
            )

    def get_quality_param(self, quality: float) -> Dict[str, Any]:
        """Get WebP-specific quality parameters."""
        params = super().get_quality_param(quality)
        params["method"] = 4  # Balanced speed/compression
        return params

    def _supports_transparency(self) -> bool:
        """WebP supports transparency."""
        return True
