"""Helpers for file names, accept declarations and displayed sizes."""

import math
import re
from typing import List, Sequence

from imgconv.core.constants import (
    FILE_SIZE_BASE,
    FILE_SIZE_DECIMALS,
    FILE_SIZE_UNITS,
    FORMAT_ALIASES,
    SNIFFABLE_IMAGE_FORMATS,
)

_EXTENSION_PATTERN = re.compile(r"\.[^/.]+$")


def file_size(num_bytes: int) -> str:
    """Return a file size in readable units (e.g. ``1.5 KB``)."""
    if not num_bytes:
        return "0 B"

    index = min(
        int(math.floor(math.log(num_bytes) / math.log(FILE_SIZE_BASE))),
        len(FILE_SIZE_UNITS) - 1,
    )
    value = round(num_bytes / FILE_SIZE_BASE**index, FILE_SIZE_DECIMALS)
    return f"{value:g} {FILE_SIZE_UNITS[index]}"


def get_image_file_name(filename: str) -> str:
    """Return the file name without its last extension."""
    return _EXTENSION_PATTERN.sub("", filename)


def get_extension(filename: str) -> str:
    """Return the text after the last dot of a file name."""
    return filename.split(".")[-1]


def get_accepted_extensions(accept: str) -> List[str]:
    """
    Parse an accept declaration into mimetype subtypes.

    ``image/png, image/jpeg`` gives ``["png", "jpeg"]``. Bare extensions
    (``.jpg``) are mapped onto their subtype and ``image/*`` expands to
    every image type the sniffer recognizes.
    """
    extensions: List[str] = []

    for entry in accept.split(","):
        token = entry.strip().lower()
        if not token:
            continue

        if token == "image/*":
            candidates: Sequence[str] = SNIFFABLE_IMAGE_FORMATS
        elif "/" in token:
            candidates = [token.split("/", 1)[1]]
        else:
            bare = token.lstrip(".")
            candidates = [FORMAT_ALIASES.get(bare, bare)]

        for candidate in candidates:
            if candidate and candidate not in extensions:
                extensions.append(candidate)

    return extensions


def error_file_exts(extensions: Sequence[str]) -> str:
    """Format extensions as an ``a, b, or c.`` list for error messages."""
    if not extensions:
        return ""
    if len(extensions) == 1:
        return f"{extensions[0]}."
    return ", ".join(extensions[:-1]) + f", or {extensions[-1]}."
