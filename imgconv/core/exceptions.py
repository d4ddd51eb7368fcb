from typing import Dict, List, Optional, TypedDict, Union


class ConversionDetails(TypedDict, total=False):
    """Type-safe details for conversion errors."""

    input_format: str
    output_format: str
    file_size: int
    dimensions: tuple[int, int]
    quality: float
    error: str


class ValidationDetails(TypedDict, total=False):
    """Type-safe details for validation errors."""

    field_name: str
    field_value: Union[str, int, float, bool]
    expected_values: List[Union[str, int]]
    constraints: str


class RejectionDetails(TypedDict, total=False):
    """Type-safe details for rejected image files."""

    mimetype: str
    allowed_formats: List[str]
    file_size: int
    max_bytes: int


class SubmissionDetails(TypedDict, total=False):
    """Type-safe details for upload submission errors."""

    status_code: int
    url: str
    reason: str


# Union type for all possible error details
ErrorDetails = Union[
    ConversionDetails,
    ValidationDetails,
    RejectionDetails,
    SubmissionDetails,
    Dict[str, Union[str, int, float, bool, List[str]]],
]


class ImageConverterError(Exception):
    """Base exception for all image converter errors."""

    def __init__(
        self,
        message: str,
        error_code: str,
        status_code: int = 500,
        details: Optional[ErrorDetails] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}


class ValidationError(ImageConverterError):
    """Raised when input validation fails."""

    def __init__(self, message: str, details: Optional[ValidationDetails] = None):
        super().__init__(
            message=message, error_code="CONV002", status_code=400, details=details
        )


# Validator rejections
class ImageRejectedError(ImageConverterError):
    """Base class for files refused by the image validator."""


class UnsupportedTypeError(ImageRejectedError):
    """Raised when the sniffed format is not in the allow-list."""

    def __init__(self, message: str, details: Optional[RejectionDetails] = None):
        super().__init__(
            message=message, error_code="CONV301", status_code=415, details=details
        )


class FileTooLargeError(ImageRejectedError):
    """Raised when a file exceeds the maximum allowed size."""

    def __init__(self, message: str, details: Optional[RejectionDetails] = None):
        super().__init__(
            message=message, error_code="CONV302", status_code=413, details=details
        )


class UnsupportedEnvironmentError(ImageRejectedError):
    """Raised when the file source cannot be read as binary data."""

    def __init__(
        self,
        message: str = "Unfortunately this functionality is not supported in your environment.",
        details: Optional[RejectionDetails] = None,
    ):
        super().__init__(
            message=message, error_code="CONV303", status_code=501, details=details
        )


# Converter failures
class DecodeFailureError(ImageConverterError):
    """Raised when source bytes cannot be decoded as an image."""

    def __init__(
        self,
        message: str = "Failed to decode image",
        details: Optional[ConversionDetails] = None,
    ):
        super().__init__(
            message=message, error_code="CONV304", status_code=422, details=details
        )


class EncodeFailureError(ImageConverterError):
    """Raised when a raster cannot be encoded to the target format."""

    def __init__(
        self,
        message: str = "Failed to encode image",
        details: Optional[ConversionDetails] = None,
    ):
        super().__init__(
            message=message, error_code="CONV305", status_code=500, details=details
        )


class SubmissionError(ImageConverterError):
    """Raised when uploading converted files fails."""

    def __init__(self, message: str, details: Optional[SubmissionDetails] = None):
        super().__init__(
            message=message, error_code="UPL001", status_code=502, details=details
        )
