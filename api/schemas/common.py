"""
Schemas shared by several routers: the error envelope and health reports.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ErrorDetail(BaseModel):
    code: str = Field(..., description="Machine-readable error code, e.g. plan_limit")
    message: str = Field(..., description="Message shown to the user")
    details: Optional[Dict[str, Any]] = None


class ErrorResponse(BaseModel):
    """Body of every non-2xx response."""

    success: bool = False
    error: ErrorDetail


# Documented error bodies for the generation endpoints
GENERATION_ERROR_RESPONSES: Dict[int | str, Dict[str, Any]] = {
    401: {"model": ErrorResponse, "description": "Missing or invalid bearer token"},
    403: {"model": ErrorResponse, "description": "Free plan limit reached"},
    409: {"model": ErrorResponse, "description": "Another generation is still running"},
    502: {"model": ErrorResponse, "description": "Model call failed or returned no project"},
}


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


class ComponentHealth(BaseModel):
    """State of one dependency (database, redis, gemini_api)."""

    status: HealthStatus
    latency_ms: Optional[float] = None
    error: Optional[str] = None
    details: Optional[Dict[str, Any]] = None


class HealthCheckResponse(BaseModel):
    status: HealthStatus
    timestamp: datetime = Field(default_factory=_utcnow)


class DetailedHealthCheckResponse(HealthCheckResponse):
    version: str
    environment: str
    uptime_seconds: float
    components: Dict[str, ComponentHealth] = Field(default_factory=dict)


class MessageResponse(BaseModel):
    message: str
    success: bool = True
