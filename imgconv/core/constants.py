"""Constants and configuration values for the image form converter."""

import base64
from typing import Dict, FrozenSet, List, Tuple

# Number of leading bytes the sniffer needs
SNIFF_HEADER_LENGTH = 12

# Returned by the sniffer when no signature matches
UNKNOWN_TYPE = "unknown"

# Ordered (first four bytes, bytes 8-11 or None, mimetype) signatures.
# AVIF container markers must stay ahead of the RIFF/WEBP entry.
FORMAT_SIGNATURES: List[Tuple[FrozenSet[str], FrozenSet[str], str]] = [
    (frozenset({"00000020", "0000001C"}), frozenset(), "image/avif"),
    (frozenset({"89504E47"}), frozenset(), "image/png"),
    (frozenset({"47494638"}), frozenset(), "image/gif"),
    (frozenset({"25504446"}), frozenset(), "application/pdf"),
    (
        frozenset({"FFD8FFDB", "FFD8FFE0", "FFD8FFE1", "FFD8FFEE"}),
        frozenset(),
        "image/jpeg",
    ),
    (frozenset({"52494646"}), frozenset({"57454250"}), "image/webp"),
]

# Accepted subtypes when a file input declares no accept list
DEFAULT_ALLOWED_FORMATS = ("gif", "jpeg", "png", "webp")

AVIF_MIMETYPE = "image/avif"

# Every image subtype the sniffer can report
SNIFFABLE_IMAGE_FORMATS = ("avif", "gif", "jpeg", "png", "webp")

# Target formats the converter can encode to
TARGET_FORMATS = ("jpeg", "png", "webp", "gif", "avif")

# Target formats where quality has no effect
LOSSLESS_FORMATS = frozenset({"png", "gif"})

# Extension aliases that map onto a mimetype subtype
FORMAT_ALIASES: Dict[str, str] = {
    "jpg": "jpeg",
    "jpe": "jpeg",
    "jfif": "jpeg",
}

# Extension used for generated file names
FORMAT_TO_EXTENSION: Dict[str, str] = {
    "jpeg": "jpg",
}

# Default quality fraction applied when a lossy target is chosen
DEFAULT_QUALITY = 0.5

# Decimal megabyte used in user facing size limits
BYTES_PER_MEGABYTE = 1_000_000

# Binary units for displayed file sizes
FILE_SIZE_UNITS = ("B", "KB", "MB", "GB", "TB", "PB", "EB", "ZB", "YB")
FILE_SIZE_BASE = 1024
FILE_SIZE_DECIMALS = 2

# Minimal 1x1 AVIF used to probe decoder support
AVIF_PROBE_SAMPLE = base64.b64decode(
    "AAAAIGZ0eXBhdmlmAAAAAGF2aWZtaWYxbWlhZk1BMUIAAADybWV0YQAAAAAAAAAoaGRscgAAAAAAAAAA"
    "cGljdAAAAAAAAAAAAAAAAGxpYmF2aWYAAAAADnBpdG0AAAAAAAEAAAAeaWxvYwAAAABEAAABAAEAAAAB"
    "AAABGgAAAB0AAAAoaWluZgAAAAAAAQAAABppbmZlAgAAAAABAABhdjAxQ29sb3IAAAAAamlwcnAAAABL"
    "aXBjbwAAABRpc3BlAAAAAAAAAAIAAAACAAAAEHBpeGkAAAAAAwgICAAAAAxhdjFDgQ0MAAAAABNjb2xy"
    "bmNseAACAAIAAYAAAAAXaXBtYQAAAAAAAAABAAEEAQKDBAAAACVtZGF0EgAKCBgANogQEAwgMg8f8D//"
    "/8WfhwB8+ErK42A="
)

# Upload endpoint messages
UPLOAD_SUCCESS_MESSAGE = "{filename} uploaded successfully!"
UPLOAD_FAILURE_MESSAGE = "Error uploading file(s)."

# Filename limits
MAX_FILENAME_LENGTH = 255
