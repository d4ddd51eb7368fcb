"""Image validator - gates selected files on sniffed type and size."""

import re

import structlog

from imgconv.core.constants import BYTES_PER_MEGABYTE, SNIFF_HEADER_LENGTH
from imgconv.core.exceptions import (
    FileTooLargeError,
    UnsupportedEnvironmentError,
    UnsupportedTypeError,
)
from imgconv.core.sniffer import detect_type
from imgconv.models.conversion import ValidationPolicy
from imgconv.models.files import SelectedFile
from imgconv.utils.files import error_file_exts

logger = structlog.get_logger()


def is_allowed(mimetype: str, policy: ValidationPolicy) -> bool:
    """Case-insensitive allow-list test on the mimetype subtype."""
    pattern = "image/({})".format("|".join(re.escape(f) for f in policy.allowed_formats))
    return re.fullmatch(pattern, mimetype, re.IGNORECASE) is not None


def max_size_label(max_bytes: int) -> str:
    """Whole megabytes, rounded down (``5 MB``)."""
    return f"{max_bytes // BYTES_PER_MEGABYTE} MB"


async def validate(file: SelectedFile, policy: ValidationPolicy) -> None:
    """
    Validate a selected file against a policy.

    Only the leading bytes are read; the declared name and extension play
    no part in the decision.

    Args:
        file: The selected file
        policy: Size limit and allow-list to enforce

    Raises:
        UnsupportedEnvironmentError: If the file cannot be read as binary
        UnsupportedTypeError: If the sniffed type is not allowed
        FileTooLargeError: If the file is larger than ``policy.max_bytes``
    """
    if not file.supports_binary_read:
        raise UnsupportedEnvironmentError()

    header = await file.slice(0, SNIFF_HEADER_LENGTH)
    mimetype = detect_type(header)

    if not is_allowed(mimetype, policy):
        logger.info("Rejected file type", mimetype=mimetype)
        raise UnsupportedTypeError(
            "This is not a correct image file type. Please choose from either a "
            + error_file_exts(policy.allowed_formats),
            details={"mimetype": mimetype, "allowed_formats": policy.allowed_formats},
        )

    if file.size > policy.max_bytes:
        logger.info("Rejected file size", file_size=file.size, max_bytes=policy.max_bytes)
        raise FileTooLargeError(
            f"The file size is too large. Please choose another ({max_size_label(policy.max_bytes)} or less).",
            details={"file_size": file.size, "max_bytes": policy.max_bytes},
        )

    logger.debug("File accepted", mimetype=mimetype, file_size=file.size)
