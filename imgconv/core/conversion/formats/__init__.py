"""Format handler registry."""

from typing import Dict, Optional

from imgconv.core.constants import FORMAT_ALIASES
from imgconv.core.conversion.formats.avif_handler import AVIFHandler
from imgconv.core.conversion.formats.base import BaseFormatHandler
from imgconv.core.conversion.formats.gif_handler import GifHandler
from imgconv.core.conversion.formats.jpeg_handler import JPEGHandler
from imgconv.core.conversion.formats.png_handler import PNGHandler
from imgconv.core.conversion.formats.webp_handler import WebPHandler

_HANDLERS: Dict[str, BaseFormatHandler] = {}


def register_handler(format_name: str, handler: BaseFormatHandler) -> None:
    """Register a handler under a canonical format name."""
    _HANDLERS[format_name.lower()] = handler


def get_handler(format_name: str) -> Optional[BaseFormatHandler]:
    """Return the handler for a format token or alias."""
    format_lower = format_name.lower()
    return _HANDLERS.get(FORMAT_ALIASES.get(format_lower, format_lower))


register_handler("jpeg", JPEGHandler())
register_handler("png", PNGHandler())
register_handler("webp", WebPHandler())
register_handler("gif", GifHandler())
register_handler("avif", AVIFHandler())

__all__ = ["BaseFormatHandler", "get_handler", "register_handler"]
