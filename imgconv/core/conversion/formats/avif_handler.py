"""AVIF format handler."""

from typing import Any, BinaryIO, Dict

import structlog
from PIL import Image, features

from imgconv.core.conversion.formats.base import BaseFormatHandler
from imgconv.core.exceptions import EncodeFailureError

logger = structlog.get_logger()

try:
    import pillow_avif  # noqa: F401

    AVIF_PLUGIN_AVAILABLE = True
except ImportError:
    AVIF_PLUGIN_AVAILABLE = False


def avif_available() -> bool:
    """AVIF is usable through Pillow's own codec or the pillow-avif plugin."""
    return AVIF_PLUGIN_AVAILABLE or bool(features.check("avif"))


class AVIFHandler(BaseFormatHandler):
    """Handler for AVIF format."""

    def __init__(self):
        """Initialize AVIF handler."""
        super().__init__()
        self.supported_formats = ["avif"]
        self.format_name = "AVIF"

    def is_available(self) -> bool:
        return avif_available()

    def save_image(
        self, image: Image.Image, output_buffer: BinaryIO, quality: float
    ) -> None:
        """Save image as AVIF."""
        if not self.is_available():
            raise EncodeFailureError(
                "AVIF encoding is not available. Please install pillow-avif-plugin.",
                details={"output_format": "avif"},
            )

        try:
            image = self.prepare_image(image)
            save_params = self.get_quality_param(quality)
            save_params["speed"] = 6  # Balanced speed/compression

            image.save(output_buffer, format="AVIF", **save_params)
            output_buffer.seek(0)

        except Exception as e:
            raise EncodeFailureError(
                f"Failed to save image as AVIF: {str(e)}",
                details={"output_format": "avif", "error": str(e)},
            )

    def get_quality_param(self, quality: float) -> Dict[str, Any]:
        """Get AVIF-specific quality parameters."""
        params = super().get_quality_param(quality)
        params["subsampling"] = "4:2:0" if params["quality"] < 90 else "4:4:4"
        return params

    def _supports_transparency(self) -> bool:
        """AVIF supports transparency."""
        return True
