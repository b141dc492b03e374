"""
Pydantic schemas for API request/response models
"""

from pydantic import BaseModel, Field, validator
from typing import Optional
from datetime import datetime, timezone
from schemas.keywords import RunSummary
from models.base import SyncStatus


# ============================================================================
# Health Check Schemas
# ============================================================================

class HealthCheckResponse(BaseModel):
    """Health check response model"""
    database_connected: bool
    last_run: Optional[RunSummary] = None
    pending_publications: Optional[int] = None
    enriched_publications: Optional[int] = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    status: str = Field("healthy", description="Overall system status: healthy, degraded, unhealthy")

    @validator("status", pre=True, always=True)
    def determine_status(cls, v, values):
        """Determine overall health status"""
        if not values.get("database_connected", False):
            return "unhealthy"

        last_run = values.get("last_run")
        if last_run is not None and last_run.status == SyncStatus.FAILED:
            return "degraded"
        if last_run is not None and last_run.batches_failed:
            return "degraded"
        return "healthy"

    class Config:
        json_schema_extra = {
            "example": {
                "status": "healthy",
                "timestamp": "2024-01-15T10:30:00Z",
                "database_connected": True,
                "pending_publications": 12,
                "enriched_publications": 1488,
                "last_run": None
            }
        }


class ErrorResponse(BaseModel):
    """Body returned when a sync cannot run"""
    error: str
    error_type: str
    request_id: Optional[str] = None
