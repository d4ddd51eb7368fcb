"""JPEG format handler."""

from typing import Any, BinaryIO, Dict

from PIL import Image

from imgconv.core.conversion.formats.base import BaseFormatHandler, quality_percent
from imgconv.core.exceptions import DecodeFailureError, EncodeFailureError


class JPEGHandler(BaseFormatHandler):
    """Handler for JPEG format."""

    def __init__(self):
        """Initialize JPEG handler."""
        super().__init__()
        self.supported_formats = ["jpeg", "jpg", "jpe", "jfif"]
        self.format_name = "JPEG"

    def load_image(self, image_data: bytes) -> Image.Image:
        """Load JPEG image from bytes."""
        img = super().load_image(image_data)

        # Some JPEGs are stored as CMYK
        if img.mode == "CMYK":
            try:
                img = img.convert("RGB")
            except Exception as e:
                raise DecodeFailureError(
                    f"Failed to decode JPEG image: {str(e)}",
                    details={"input_format": "jpeg", "error": str(e)},
                )

        return img

    def save_image(
        self, image: Image.Image, output_buffer: BinaryIO, quality: float
    ) -> None:
        """Save image as JPEG."""
        try:
            image = self.prepare_image(image)
            image.save(output_buffer, format="JPEG", **self.get_quality_param(quality))
            output_buffer.seek(0)

        except Exception as e:
            raise EncodeFailureError(
                f"Failed to save image as JPEG: {str(e)}",
                details={"output_format": "jpeg", "error": str(e)},
            )

    def get_quality_param(self, quality: float) -> Dict[str, Any]:
        """Get JPEG-specific quality parameters."""
        percent = max(1, quality_percent(quality))

        return {
            "quality": percent,
            "subsampling": 0 if percent > 90 else 2,  # Use 4:4:4 for high quality
        }

    def _supports_mode(self, mode: str) -> bool:
        """Check if JPEG supports the given color mode."""
        return mode in ("RGB", "L")
