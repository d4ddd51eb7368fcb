from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response model."""

    error_code: str = Field(..., description="Error code (e.g., CONV301)")
    message: str = Field(..., description="Human-readable error message")
    correlation_id: str = Field(..., description="Request correlation ID for tracking")
    details: Optional[Dict[str, Any]] = Field(
        None, description="Additional error details"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Error timestamp",
    )


class HealthResponse(BaseModel):
    """Response model for the health endpoint."""

    status: str = Field(..., description="Service status")
    version: str = Field(..., description="Application version")
    avif_supported: bool = Field(..., description="Whether AVIF can be decoded")
