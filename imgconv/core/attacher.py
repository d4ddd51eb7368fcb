"""Form attacher - repackages converted bytes as a file for the form."""

import time
from typing import Optional

from imgconv.core.constants import FORMAT_TO_EXTENSION
from imgconv.models.files import AttachedFile, FileCollection, SelectedFile
from imgconv.utils.files import get_image_file_name


def attached_file_name(original_name: str, target_format: str, timestamp_ms: int) -> str:
    """``<stem>-<epoch millis>.<ext>``, with ``jpeg`` written as ``jpg``."""
    extension = FORMAT_TO_EXTENSION.get(target_format, target_format)
    return f"{get_image_file_name(original_name)}-{timestamp_ms}.{extension}"


def attach(
    original: SelectedFile,
    encoded: bytes,
    target_format: str,
    timestamp_ms: Optional[int] = None,
) -> FileCollection:
    """
    Wrap converted bytes in a new named file inside a file collection.

    The original file is left untouched; the returned collection is meant
    to replace the file input's current value.

    Args:
        original: The file the bytes were converted from
        encoded: The converted bytes
        target_format: Target format token (e.g. ``webp``)
        timestamp_ms: Attachment time in epoch milliseconds, defaults to now
    """
    target_format = target_format.lower()
    now = timestamp_ms if timestamp_ms is not None else int(time.time() * 1000)

    attached = AttachedFile(
        name=attached_file_name(original.name, target_format, now),
        data=encoded,
        mimetype=f"image/{target_format}",
        last_modified=now,
    )
    return FileCollection([attached])
