import asyncio
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .api.middleware import (
    error_handler_middleware,
    logging_middleware,
    setup_exception_handlers,
)
from .api.routes import api_router, upload_router
from .config import settings
from .core.probe import probe_avif_support
from .utils.logging import cleanup_old_logs, get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    setup_logging(
        log_level=settings.log_level,
        json_logs=settings.env == "production",
        enable_file_logging=settings.logging_enabled,
        log_dir=settings.log_dir,
        max_log_size_mb=settings.max_log_size_mb,
        backup_count=settings.log_backup_count,
    )
    logger.info("Starting API", app_name=settings.app_name, port=settings.api_port)

    Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)
    app.state.avif_supported = await probe_avif_support([])

    cleanup_task = None
    if settings.logging_enabled:

        async def periodic_log_cleanup():
            while True:
                try:
                    cleanup_old_logs(
                        log_dir=settings.log_dir,
                        retention_hours=settings.log_retention_hours,
                    )
                except OSError as e:
                    logger.warning("Log cleanup error", error=str(e))
                await asyncio.sleep(3600)  # Run every hour

        cleanup_task = asyncio.create_task(periodic_log_cleanup())

    yield

    # Shutdown
    logger.info("Shutting down API", app_name=settings.app_name)
    if cleanup_task is not None:
        cleanup_task.cancel()


app = FastAPI(
    title=settings.app_name,
    description="Receives converted images submitted from the image form",
    version=__version__,
    openapi_url=f"{settings.api_prefix}/openapi.json",
    docs_url=f"{settings.api_prefix}/docs",
    redoc_url=None,
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.middleware("http")(logging_middleware)
app.middleware("http")(error_handler_middleware)

setup_exception_handlers(app)

# The form posts to /upload; the same handlers are mounted under the API prefix
app.include_router(upload_router, tags=["upload"])
app.include_router(api_router)
