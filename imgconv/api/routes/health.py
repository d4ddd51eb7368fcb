from fastapi import APIRouter, Request

from ... import __version__
from ...models.responses import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """
    Health check endpoint to verify the API is running.

    Returns:
        Service status plus whether the runtime decodes AVIF
    """
    return HealthResponse(
        status="healthy",
        version=__version__,
        avif_supported=getattr(request.app.state, "avif_supported", False),
    )
