"""Data models for validation and conversion."""

import base64
from typing import List

from PIL import Image
from pydantic import BaseModel, ConfigDict, Field, field_validator

from imgconv.core.constants import (
    DEFAULT_ALLOWED_FORMATS,
    DEFAULT_QUALITY,
    LOSSLESS_FORMATS,
    TARGET_FORMATS,
)
from imgconv.models.files import FileInput, SelectedFile
from imgconv.utils.files import get_accepted_extensions


class ValidationPolicy(BaseModel):
    """Size limit and allow-list a selected file is checked against."""

    max_bytes: int = Field(..., gt=0, description="Maximum file size in bytes")
    allowed_formats: List[str] = Field(
        default_factory=lambda: list(DEFAULT_ALLOWED_FORMATS),
        description="Accepted mimetype subtypes",
    )

    @field_validator("allowed_formats")
    @classmethod
    def normalize_formats(cls, v: List[str]) -> List[str]:
        normalized = [item.strip().lower() for item in v if item.strip()]
        return normalized or list(DEFAULT_ALLOWED_FORMATS)

    @classmethod
    def from_file_input(cls, file_input: FileInput) -> "ValidationPolicy":
        """Derive the policy from a file input's declared attributes."""
        return cls(
            max_bytes=file_input.max_filesize,
            allowed_formats=get_accepted_extensions(file_input.accept),
        )


class ConversionRequest(BaseModel):
    """A source file and the target format/quality it should become."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    file: SelectedFile = Field(..., description="Source file")
    target_format: str = Field(..., description="Target format token")
    quality: float = Field(
        default=DEFAULT_QUALITY,
        ge=0.0,
        le=1.0,
        description="Quality fraction, used by lossy formats only",
    )

    @field_validator("target_format")
    @classmethod
    def validate_target_format(cls, v: str) -> str:
        v = v.lower()
        if v not in TARGET_FORMATS:
            raise ValueError(f"target_format must be one of {list(TARGET_FORMATS)}")
        return v

    @property
    def is_lossless(self) -> bool:
        return self.target_format in LOSSLESS_FORMATS


class ConversionResult(BaseModel):
    """Encoded bytes plus the raster they were produced from."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    blob: bytes = Field(..., description="Encoded image bytes")
    mimetype: str = Field(..., description="Mimetype of the encoded bytes")
    raster: Image.Image = Field(..., description="Decoded raster used for preview")

    @property
    def size(self) -> int:
        return len(self.blob)

    @property
    def width(self) -> int:
        return self.raster.width

    @property
    def height(self) -> int:
        return self.raster.height

    def preview_data_url(self) -> str:
        """Return the converted bytes as a ``data:`` URL for display."""
        encoded = base64.b64encode(self.blob).decode("ascii")
        return f"data:{self.mimetype};base64,{encoded}"


class UploadMessage(BaseModel):
    """One entry of the upload endpoint's response array."""

    kind: str = Field(..., description="'success' or 'error'")
    message: str = Field(..., description="Human-readable message")

    @field_validator("kind")
    @classmethod
    def validate_kind(cls, v: str) -> str:
        if v not in ("success", "error"):
            raise ValueError("kind must be 'success' or 'error'")
        return v

    @classmethod
    def from_json(cls, item: dict) -> "UploadMessage":
        if not isinstance(item, dict) or len(item) != 1:
            raise ValueError("Upload message must be a single-key object")
        ((kind, message),) = item.items()
        return cls(kind=kind, message=str(message))

    def to_json(self) -> dict:
        return {self.kind: self.message}

