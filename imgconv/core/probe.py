"""Format capability probe for AVIF decoding."""

import asyncio
from io import BytesIO
from typing import Callable, Iterable, Optional

import structlog
from PIL import Image

# Registers the AVIF plugin with Pillow when it is installed
from imgconv.core.conversion.formats import avif_handler  # noqa: F401
from imgconv.core.constants import AVIF_MIMETYPE, AVIF_PROBE_SAMPLE, DEFAULT_ALLOWED_FORMATS
from imgconv.models.files import FileInput

logger = structlog.get_logger()

SampleDecoder = Callable[[bytes], object]


def decode_sample(data: bytes) -> Image.Image:
    """Fully decode an image through Pillow."""
    with BytesIO(data) as buffer:
        with Image.open(buffer) as img:
            img.load()
            return img.copy()


async def probe_avif_support(
    file_inputs: Iterable[FileInput],
    decoder: Optional[SampleDecoder] = None,
) -> bool:
    """
    Check whether the runtime can decode AVIF and widen accept lists if so.

    Args:
        file_inputs: Inputs whose accept declaration gains ``image/avif``
        decoder: Callable decoding the embedded sample; defaults to Pillow

    Returns:
        True when the sample decoded, False otherwise (never raises)
    """
    decode = decoder or decode_sample
    loop = asyncio.get_running_loop()

    try:
        await loop.run_in_executor(None, decode, AVIF_PROBE_SAMPLE)
    except Exception as e:
        logger.info("AVIF decoding not supported", error=str(e))
        return False

    for file_input in file_inputs:
        if not file_input.accept.strip():
            file_input.widen_accept(
                *(f"image/{fmt}" for fmt in DEFAULT_ALLOWED_FORMATS)
            )
        file_input.widen_accept(AVIF_MIMETYPE)

    logger.info("AVIF decoding supported")
    return True
