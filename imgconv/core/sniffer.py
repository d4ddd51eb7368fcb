"""
Byte sniffer - detects the real image type from leading file bytes.
File names and declared mimetypes are never consulted.
"""

import structlog

from imgconv.core.constants import FORMAT_SIGNATURES, SNIFF_HEADER_LENGTH, UNKNOWN_TYPE

logger = structlog.get_logger()


def to_hex(data: bytes) -> str:
    """Uppercase hex, two digits per byte, no separators."""
    return data.hex().upper()


def detect_type(header: bytes) -> str:
    """
    Detect the mimetype of a file from its first bytes.

    Args:
        header: At least the first 12 bytes of the file; extra bytes are ignored

    Returns:
        The mimetype (e.g. ``image/png``) or ``UNKNOWN_TYPE``
    """
    hex_header = to_hex(header[:SNIFF_HEADER_LENGTH])
    first_hex = hex_header[0:8]
    second_hex = hex_header[16:24]

    for first_patterns, second_patterns, mimetype in FORMAT_SIGNATURES:
        if first_hex not in first_patterns:
            continue
        if second_patterns and second_hex not in second_patterns:
            continue
        return mimetype

    logger.debug("No known signature matched", header_bytes=len(header))
    return UNKNOWN_TYPE


def mimetype_subtype(mimetype: str) -> str:
    """Return the part after the slash (``image/png`` -> ``png``)."""
    return mimetype.split("/", 1)[1] if "/" in mimetype else ""
