from fastapi import APIRouter

from ...config import settings
from .health import router as health_router
from .upload import router as upload_router

api_router = APIRouter(prefix=settings.api_prefix)

api_router.include_router(health_router, tags=["health"])
api_router.include_router(upload_router, tags=["upload"])

__all__ = ["api_router", "health_router", "upload_router"]
