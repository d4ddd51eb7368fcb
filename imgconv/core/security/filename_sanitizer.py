"""
Filename sanitization utilities for secure file handling.
"""

import os
import re
from typing import List, Optional

from imgconv.core.constants import MAX_FILENAME_LENGTH

DEFAULT_IMAGE_EXTENSIONS = [".avif", ".gif", ".jfif", ".jpe", ".jpeg", ".jpg", ".png", ".webp"]


def sanitize_filename(filename: str, max_length: int = MAX_FILENAME_LENGTH) -> str:
    """
    Sanitize a filename to prevent path traversal and other security issues.

    Args:
        filename: The filename to sanitize
        max_length: Maximum allowed length for the filename

    Returns:
        Sanitized filename safe for filesystem use
    """
    # Remove any path components (both separators, whatever the host OS)
    filename = re.split(r"[\\/]", filename)[-1]

    # Keep only alphanumeric, spaces, dots, hyphens, and underscores
    filename = re.sub(r"[^\w\s.-]", "_", filename)

    # Collapse runs of dots to prevent extension confusion
    filename = re.sub(r"\.+", ".", filename)

    filename = filename.strip(". ")

    if not filename:
        filename = "unnamed_file"

    name_parts = filename.rsplit(".", 1)
    name = name_parts[0]
    ext = name_parts[1] if len(name_parts) > 1 else ""

    # Truncate name if too long (preserve extension)
    if ext:
        max_name_length = max_length - len(ext) - 1
        if len(name) > max_name_length:
            name = name[:max_name_length]
        filename = f"{name}.{ext}"
    elif len(filename) > max_length:
        filename = filename[:max_length]

    return filename


def is_safe_filename(filename: str) -> bool:
    """
    Check if a filename is safe (no path traversal attempts).

    Args:
        filename: The filename to check

    Returns:
        True if the filename is safe, False otherwise
    """
    dangerous_patterns = [
        "..",
        "/",
        "\\",
        "\x00",  # Null byte
        "\n",
        "\r",
    ]

    for pattern in dangerous_patterns:
        if pattern in filename:
            return False

    return os.path.basename(filename) == filename


def get_safe_extension(
    filename: str, allowed_extensions: Optional[List[str]] = None
) -> str:
    """
    Extract and validate file extension.

    Args:
        filename: The filename to extract extension from
        allowed_extensions: List of allowed extensions (with dots, e.g., ['.jpg', '.png'])

    Returns:
        Safe extension or empty string if invalid
    """
    if allowed_extensions is None:
        allowed_extensions = DEFAULT_IMAGE_EXTENSIONS

    _, ext = os.path.splitext(filename.lower())

    if ext in allowed_extensions:
        return ext

    return ""
