from .conversion import (
    ConversionRequest,
    ConversionResult,
    UploadMessage,
    ValidationPolicy,
)
from .files import AttachedFile, FileCollection, FileInput, SelectedFile

__all__ = [
    "AttachedFile",
    "ConversionRequest",
    "ConversionResult",
    "FileCollection",
    "FileInput",
    "SelectedFile",
    "UploadMessage",
    "ValidationPolicy",
]
