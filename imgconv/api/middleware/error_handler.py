import traceback
import uuid
from typing import Any, Dict, Optional, Tuple

import structlog
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ...core.exceptions import ImageConverterError
from ...models.responses import ErrorResponse

logger = structlog.get_logger()

ErrorParts = Tuple[int, str, str, Optional[Dict[str, Any]]]


async def error_handler_middleware(request: Request, call_next):
    """Assign a correlation ID and turn escaped errors into ErrorResponse."""
    correlation_id = str(uuid.uuid4())
    request.state.correlation_id = correlation_id

    try:
        return await call_next(request)
    except Exception as exc:
        return error_response(exc, correlation_id)


def describe_error(exc: Exception) -> ErrorParts:
    """Map an exception onto status code, error code, message and details."""
    if isinstance(exc, ImageConverterError):
        return exc.status_code, exc.error_code, exc.message, dict(exc.details) or None

    if isinstance(exc, RequestValidationError):
        return (
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            "VAL422",
            "Request validation failed",
            {"validation_errors": exc.errors()},
        )

    if isinstance(exc, StarletteHTTPException):
        return (
            exc.status_code,
            f"HTTP{exc.status_code}",
            str(exc.detail) if exc.detail else "HTTP error",
            None,
        )

    return (
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "SRV500",
        "An unexpected error occurred",
        None,
    )


def error_response(exc: Exception, correlation_id: str) -> JSONResponse:
    status_code, error_code, message, details = describe_error(exc)

    log = logger.bind(
        correlation_id=correlation_id,
        error_code=error_code,
        error_type=type(exc).__name__,
    )
    if status_code >= 500:
        log.error("Unexpected error", error=str(exc), traceback=traceback.format_exc())
    else:
        log.warning("Request rejected", message=message, status_code=status_code)

    body = ErrorResponse(
        error_code=error_code,
        message=message,
        correlation_id=correlation_id,
        details=details,
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json"),
        headers={"X-Correlation-ID": correlation_id},
    )


def setup_exception_handlers(app) -> None:
    """Route every handled exception type through ``error_response``."""

    async def handle(request: Request, exc: Exception) -> JSONResponse:
        correlation_id = getattr(request.state, "correlation_id", str(uuid.uuid4()))
        return error_response(exc, correlation_id)

    for exc_class in (
        ImageConverterError,
        RequestValidationError,
        StarletteHTTPException,
        Exception,
    ):
        app.add_exception_handler(exc_class, handle)
