"""Converter - decodes a validated image and re-encodes it to a target format."""

import asyncio
import time
from io import BytesIO

import structlog
from PIL import Image

from imgconv.core.conversion.formats import BaseFormatHandler, get_handler
from imgconv.core.conversion.formats.base import decode_image, quality_percent
from imgconv.core.exceptions import DecodeFailureError, EncodeFailureError
from imgconv.core.sniffer import detect_type, mimetype_subtype
from imgconv.models.conversion import ConversionRequest, ConversionResult

logger = structlog.get_logger()


async def convert(request: ConversionRequest) -> ConversionResult:
    """
    Convert the request's file into the requested format.

    The stages run strictly in order: full read, decode, encode. The raster
    returned for preview is the one the blob was encoded from.

    Args:
        request: Source file, target format and quality

    Returns:
        ConversionResult with the encoded blob and the decoded raster

    Raises:
        DecodeFailureError: If the source bytes are not a decodable image
        EncodeFailureError: If encoding fails or produces no bytes
    """
    start_time = time.time()
    loop = asyncio.get_running_loop()

    output_handler = get_handler(request.target_format)
    if output_handler is None:
        raise EncodeFailureError(
            f"No encoder registered for '{request.target_format}'",
            details={"output_format": request.target_format},
        )
    if not output_handler.is_available():
        raise EncodeFailureError(
            f"{output_handler.format_name} encoding is not available in this environment",
            details={"output_format": request.target_format},
        )

    source_data = await request.file.read()

    input_handler = get_handler(mimetype_subtype(detect_type(source_data)))
    decoder = input_handler.load_image if input_handler else decode_image
    raster = await loop.run_in_executor(None, decoder, source_data)

    blob = await loop.run_in_executor(
        None, _encode, output_handler, raster, request.quality
    )

    logger.info(
        "Image converted",
        output_format=request.target_format,
        quality=None if output_handler.lossless else quality_percent(request.quality),
        input_size=len(source_data),
        output_size=len(blob),
        width=raster.width,
        height=raster.height,
        processing_time=round(time.time() - start_time, 3),
    )

    return ConversionResult(
        blob=blob, mimetype=output_handler.mimetype, raster=raster
    )


def _encode(handler: BaseFormatHandler, raster: Image.Image, quality: float) -> bytes:
    if raster.width == 0 or raster.height == 0:
        raise EncodeFailureError("Cannot encode an empty raster")

    with BytesIO() as buffer:
        handler.save_image(raster, buffer, quality)
        blob = buffer.getvalue()

    if not blob:
        raise EncodeFailureError(
            f"Encoder produced no data for {handler.format_name}",
            details={"output_format": handler.supported_formats[0]},
        )
    return blob


__all__ = ["convert", "DecodeFailureError", "EncodeFailureError"]
