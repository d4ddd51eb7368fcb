"""Client posting converted files to the upload endpoint."""

from typing import Iterable, List, Optional, Tuple

import httpx
import structlog

from imgconv.config import settings
from imgconv.core.exceptions import SubmissionError
from imgconv.models.conversion import UploadMessage
from imgconv.models.files import SelectedFile

logger = structlog.get_logger()

FormFile = Tuple[str, SelectedFile]


class UploadClient:
    """Submits form files as multipart and decodes the per-file messages."""

    def __init__(
        self,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.url = url or settings.upload_url
        self.timeout = timeout if timeout is not None else settings.upload_timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "UploadClient":
        self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def upload(self, files: Iterable[FormFile]) -> List[UploadMessage]:
        """
        Post every ``(field name, file)`` pair in one multipart request.

        Returns:
            One message per file, in the order the server reported them

        Raises:
            SubmissionError: On transport failure, a non-2xx status or a
                response body that is not a list of single-key objects
        """
        multipart = []
        for field_name, file in files:
            data = await file.read()
            mimetype = getattr(file, "mimetype", None) or "application/octet-stream"
            multipart.append((field_name, (file.name, data, mimetype)))

        client = self._ensure_client()
        try:
            response = await client.post(self.url, files=multipart)
        except httpx.HTTPError as e:
            logger.error("Upload request failed", error=str(e))
            raise SubmissionError(
                "File upload(s) failed!", details={"url": self.url, "reason": str(e)}
            ) from e

        if not response.is_success:
            raise SubmissionError(
                "File upload(s) failed!",
                details={"url": self.url, "status_code": response.status_code},
            )

        try:
            payload = response.json()
            messages = [UploadMessage.from_json(item) for item in payload]
        except (ValueError, TypeError) as e:
            raise SubmissionError(
                "Upload response could not be read",
                details={"url": self.url, "reason": str(e)},
            ) from e

        logger.info("Files uploaded", file_count=len(multipart))
        return messages
