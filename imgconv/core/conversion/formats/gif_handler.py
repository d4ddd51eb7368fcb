"""GIF format handler."""

from io import BytesIO
from typing import BinaryIO

import structlog
from PIL import Image

from imgconv.core.conversion.formats.base import BaseFormatHandler
from imgconv.core.exceptions import DecodeFailureError, EncodeFailureError

logger = structlog.get_logger()


class GifHandler(BaseFormatHandler):
    """Handler for GIF format. Palette based and lossless, quality is ignored."""

    def __init__(self) -> None:
        """Initialize GIF handler."""
        super().__init__()
        self.supported_formats = ["gif"]
        self.format_name = "GIF"
        self.lossless = True

    def load_image(self, image_data: bytes) -> Image.Image:
        """Load GIF image from bytes (first frame only)."""
        try:
            with BytesIO(image_data) as buffer:
                img = Image.open(buffer)

                if getattr(img, "is_animated", False):
                    logger.debug(
                        "Animated GIF detected, extracting first frame",
                        n_frames=getattr(img, "n_frames", 1),
                    )
                    img.seek(0)

                img.load()

                # Keep transparency when the palette declares one
                if img.mode == "P" and "transparency" in img.info:
                    return img.convert("RGBA")
                if img.mode not in ("RGB", "RGBA"):
                    return img.convert("RGB")
                return img.copy()

        except Exception as e:
            raise DecodeFailureError(
                f"Failed to decode GIF image: {str(e)}",
                details={"input_format": "gif", "error": str(e)},
            )

    def save_image(
        self, image: Image.Image, output_buffer: BinaryIO, quality: float
    ) -> None:
        """Save image as GIF."""
        try:
            save_params = {}

            if image.mode == "RGBA":
                alpha = image.split()[3]

                # 255 colors, leaving index 255 for transparency
                img_p = image.convert("RGB").convert(
                    "P", palette=Image.Palette.ADAPTIVE, colors=255
                )

                img_with_transparency = Image.new("P", img_p.size, 255)
                img_with_transparency.putpalette(img_p.getpalette())
                img_with_transparency.paste(
                    img_p, mask=Image.eval(alpha, lambda a: 255 if a >= 128 else 0)
                )
                image = img_with_transparency
                save_params["transparency"] = 255
            elif image.mode not in ("P", "L"):
                image = image.convert("RGB").convert(
                    "P", palette=Image.Palette.ADAPTIVE, colors=256
                )

            if "transparency" in image.info:
                save_params["transparency"] = image.info["transparency"]

            image.save(output_buffer, format="GIF", **save_params)
            output_buffer.seek(0)

        except Exception as e:
            raise EncodeFailureError(
                f"Failed to save image as GIF: {str(e)}",
                details={"output_format": "gif", "error": str(e)},
            )
