"""Form state: one section per file input plus the page that owns them.

A section drives the select, validate, convert and attach flow for its
input. Re-selecting while an earlier flow is still converting is resolved
last-write-wins: every selection (and every reset) bumps a sequence token,
and a flow that finishes with an outdated token drops its result.
"""

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING, Awaitable, Callable, Iterable, List, Optional

import structlog

from imgconv.config import settings
from imgconv.core.attacher import attach
from imgconv.core.constants import LOSSLESS_FORMATS, TARGET_FORMATS
from imgconv.core.conversion import convert
from imgconv.core.exceptions import (
    ImageConverterError,
    ImageRejectedError,
    SubmissionError,
    ValidationError,
)
from imgconv.core.probe import probe_avif_support
from imgconv.core.validator import validate
from imgconv.models.conversion import (
    ConversionRequest,
    ConversionResult,
    UploadMessage,
    ValidationPolicy,
)
from imgconv.models.files import FileCollection, FileInput, SelectedFile
from imgconv.utils.files import file_size, get_extension

if TYPE_CHECKING:
    from imgconv.services.submission_service import UploadClient

logger = structlog.get_logger()

Probe = Callable[[Iterable[FileInput]], Awaitable[bool]]


@dataclass
class PreviewLabel:
    """Caption shown beside a preview (``Original: PNG``, ``12.5 KB``)."""

    label: str = ""
    size_text: str = ""


class FormSection:
    """State of one file input with its format and quality controls."""

    def __init__(
        self,
        file_input: FileInput,
        target_format: Optional[str] = None,
        quality: Optional[float] = None,
    ) -> None:
        if not file_input.max_filesize:
            file_input.max_filesize = settings.max_file_size
        if not file_input.accept:
            file_input.accept = settings.default_accept

        self.file_input = file_input
        self.target_format = settings.default_target_format
        self.quality = settings.default_quality
        if target_format is not None:
            self.set_target_format(target_format)
        if quality is not None:
            self.set_quality(quality)

        self.message: Optional[str] = None
        self.original = PreviewLabel()
        self.converted = PreviewLabel()
        self.result: Optional[ConversionResult] = None
        self.preview_visible = False
        self._sequence = 0

    @property
    def quality_editable(self) -> bool:
        return self.target_format not in LOSSLESS_FORMATS

    @property
    def ready(self) -> bool:
        """Whether a converted file is attached to the input."""
        return self.result is not None and len(self.file_input.files) > 0

    @property
    def preview(self) -> Optional[str]:
        """Converted image as a ``data:`` URL, once a conversion landed."""
        return self.result.preview_data_url() if self.result else None

    def set_target_format(self, target_format: str) -> None:
        """Select a target format; quality goes back to its default."""
        target_format = target_format.lower()
        if target_format not in TARGET_FORMATS:
            raise ValidationError(
                f"Unsupported target format: {target_format}",
                details={
                    "field_name": "target_format",
                    "field_value": target_format,
                    "expected_values": list(TARGET_FORMATS),
                },
            )
        self.target_format = target_format
        self.quality = settings.default_quality

    def set_quality(self, quality: float) -> None:
        if not self.quality_editable:
            raise ValidationError(
                f"Quality cannot be changed for {self.target_format.upper()}",
                details={"field_name": "quality", "field_value": quality},
            )
        if not 0.0 <= quality <= 1.0:
            raise ValidationError(
                "Quality must be between 0 and 1",
                details={
                    "field_name": "quality",
                    "field_value": quality,
                    "constraints": "0 <= quality <= 1",
                },
            )
        self.quality = quality

    def reset(self) -> None:
        """Clear the input value, previews and message."""
        self._sequence += 1
        self.file_input.clear()
        self.message = None
        self.original = PreviewLabel()
        self.converted = PreviewLabel()
        self.result = None
        self.preview_visible = False

    def _is_current(self, token: int) -> bool:
        return token == self._sequence

    async def select(self, file: SelectedFile) -> Optional[FileCollection]:
        """
        Run the selection flow for a newly chosen file.

        A rejected file leaves the section with the rejection message set
        and nothing attached. The input only ever holds the converted file,
        never the pending original. Decode and encode failures propagate.

        Returns:
            The collection now held by the input, or None when the file was
            rejected or a newer selection superseded this one
        """
        if not self.file_input.enabled:
            raise ValidationError("File input is not enabled yet")

        self.reset()
        token = self._sequence
        policy = ValidationPolicy.from_file_input(self.file_input)
        target_format = self.target_format

        try:
            await validate(file, policy)
        except ImageRejectedError as e:
            if self._is_current(token):
                self.message = e.message
            return None

        if not self._is_current(token):
            return None

        self.preview_visible = True
        self.original = PreviewLabel(
            label=f"Original: {get_extension(file.name).upper()}",
            size_text=file_size(file.size),
        )

        request = ConversionRequest(
            file=file, target_format=target_format, quality=self.quality
        )
        try:
            result = await convert(request)
        except ImageConverterError as e:
            if self._is_current(token):
                self.message = e.message
            raise

        if not self._is_current(token):
            logger.debug("Discarding superseded conversion", output_format=target_format)
            return None

        self.result = result
        self.converted = PreviewLabel(
            label=f"Converted: {target_format.upper()}",
            size_text=file_size(result.size),
        )
        self.file_input.files = attach(file, result.blob, target_format)
        return self.file_input.files


class FormPage:
    """A form holding several sections and a single submit action."""

    def __init__(self, sections: Iterable[FormSection], probe: Probe = probe_avif_support) -> None:
        self.sections: List[FormSection] = list(sections)
        self.avif_supported: Optional[bool] = None
        self._probe = probe
        self._probe_task: Optional[asyncio.Task] = None

    @property
    def file_inputs(self) -> List[FileInput]:
        return [section.file_input for section in self.sections]

    @property
    def submit_enabled(self) -> bool:
        return any(section.ready for section in self.sections)

    async def initialize(self) -> bool:
        """Probe AVIF support once, then enable every file input."""
        if self._probe_task is None:
            self._probe_task = asyncio.ensure_future(self._probe(self.file_inputs))
        self.avif_supported = await self._probe_task
        for file_input in self.file_inputs:
            file_input.enabled = True
        return self.avif_supported

    def form_files(self) -> List[tuple]:
        """``(field name, file)`` pairs for every converted, attached file."""
        return [
            (section.file_input.name, attached)
            for section in self.sections
            if section.ready
            for attached in section.file_input.files
        ]

    async def submit(self, client: "UploadClient") -> Optional[List[UploadMessage]]:
        """
        Upload every attached file and clear the sections on success.

        Returns:
            The server's per-file messages, or None if the upload failed
        """
        if not self.submit_enabled:
            raise ValidationError("There are no converted files to submit")

        try:
            messages = await client.upload(self.form_files())
        except SubmissionError as e:
            logger.error("Error uploading file(s)", error=e.message, details=e.details)
            return None

        for section in self.sections:
            section.reset()
        return messages
