from typing import Dict, List

from fastapi import APIRouter, Request
from starlette.datastructures import UploadFile

from ...core.exceptions import ValidationError
from ...services.upload_service import upload_service
from ...utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.post("/upload", response_model=List[Dict[str, str]])
async def upload_files(request: Request) -> List[Dict[str, str]]:
    """
    Store every file of a multipart form.

    Each file is handled on its own; the response holds one
    ``{"success": ...}`` or ``{"error": ...}`` object per file, in form order.
    Files whose declared size is over the limit are refused unread.
    """
    content_type = request.headers.get("content-type", "")
    if not content_type.startswith("multipart/form-data"):
        raise ValidationError(
            "Uploads must be sent as multipart/form-data",
            details={
                "field_name": "content-type",
                "field_value": content_type,
                "expected_values": ["multipart/form-data"],
            },
        )

    form = await request.form()
    messages = []
    try:
        for _, value in form.multi_items():
            if not isinstance(value, UploadFile):
                continue
            filename = value.filename or ""
            if upload_service.exceeds_limit(value.size):
                messages.append(upload_service.too_large(filename))
                continue
            messages.append(await upload_service.save(filename, await value.read()))
    finally:
        await form.close()

    logger.info("Upload handled", file_count=len(messages))
    return [message.to_json() for message in messages]
