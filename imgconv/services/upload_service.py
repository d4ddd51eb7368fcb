"""Service layer persisting uploaded images to disk."""

import asyncio
from pathlib import Path
from typing import Optional, Sequence

import structlog

from imgconv.config import settings
from imgconv.core.constants import (
    FORMAT_ALIASES,
    SNIFFABLE_IMAGE_FORMATS,
    UPLOAD_FAILURE_MESSAGE,
    UPLOAD_SUCCESS_MESSAGE,
)
from imgconv.core.security.filename_sanitizer import (
    get_safe_extension,
    is_safe_filename,
    sanitize_filename,
)
from imgconv.core.sniffer import detect_type, mimetype_subtype
from imgconv.core.validator import max_size_label
from imgconv.models.conversion import UploadMessage

logger = structlog.get_logger()


class UploadService:
    """Writes each uploaded file under a sanitized name in the upload directory.

    Files are re-checked here: the content must sniff as an allowed image,
    the extension must agree with that content and the size must be within
    the limit. Every file gets its own success or error message.
    """

    def __init__(
        self,
        upload_dir: Optional[str] = None,
        max_file_size: Optional[int] = None,
        allowed_formats: Sequence[str] = SNIFFABLE_IMAGE_FORMATS,
    ) -> None:
        self.upload_dir = Path(upload_dir or settings.upload_dir)
        self.max_file_size = max_file_size or settings.max_file_size
        self.allowed_formats = tuple(allowed_formats)

    def exceeds_limit(self, size: Optional[int]) -> bool:
        """Whether a declared size is over the limit; unknown sizes pass."""
        return size is not None and size > self.max_file_size

    def too_large(self, filename: str) -> UploadMessage:
        return UploadMessage(
            kind="error",
            message=f"{sanitize_filename(filename)} is too large ({max_size_label(self.max_file_size)} or less).",
        )

    async def save(self, filename: str, data: bytes) -> UploadMessage:
        """Verify and persist one uploaded file."""
        if not is_safe_filename(filename):
            logger.warning("Unsafe upload filename sanitized")
        safe_name = sanitize_filename(filename)

        detected = mimetype_subtype(detect_type(data))
        if detected not in self.allowed_formats:
            return UploadMessage(
                kind="error", message=f"{safe_name} is not a supported image type."
            )

        extension = get_safe_extension(safe_name).lstrip(".")
        if FORMAT_ALIASES.get(extension, extension) != detected:
            return UploadMessage(
                kind="error",
                message=f"{safe_name} does not match its content (image/{detected}).",
            )

        if self.exceeds_limit(len(data)):
            return self.too_large(safe_name)

        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, self._write, safe_name, data)
        except OSError as e:
            logger.error("Failed to store upload", error=str(e))
            return UploadMessage(kind="error", message=UPLOAD_FAILURE_MESSAGE)

        logger.info("Upload stored", output_format=detected, output_size=len(data))
        return UploadMessage(
            kind="success", message=UPLOAD_SUCCESS_MESSAGE.format(filename=safe_name)
        )

    def _write(self, filename: str, data: bytes) -> None:
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        (self.upload_dir / filename).write_bytes(data)


upload_service = UploadService()
