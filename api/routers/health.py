"""
Health check endpoints.

- GET /api/health          process is up
- GET /api/health/live     liveness
- GET /api/health/ready    database answers
- GET /api/health/detailed database, redis and gemini_api components
"""

import time

from fastapi import APIRouter, Depends

from api.schemas.common import (
    ComponentHealth,
    DetailedHealthCheckResponse,
    HealthCheckResponse,
    HealthStatus,
)
from core.config import Settings, get_settings
from core.redis import RedisHealthCheck
from database import is_database_available, ping_database

router = APIRouter(prefix="/health", tags=["health"])

_started_at = time.monotonic()


async def _database_health(settings: Settings) -> ComponentHealth:
    if not settings.is_database_configured:
        return ComponentHealth(status=HealthStatus.UNHEALTHY, error="Database not configured")
    if not is_database_available():
        return ComponentHealth(status=HealthStatus.UNHEALTHY, error="Database not initialized")

    try:
        latency_ms = await ping_database()
    except Exception as e:
        return ComponentHealth(status=HealthStatus.UNHEALTHY, error=str(e))
    return ComponentHealth(status=HealthStatus.HEALTHY, latency_ms=round(latency_ms, 2))


async def _redis_health() -> ComponentHealth:
    report = await RedisHealthCheck.check()
    version = report.get("version")
    return ComponentHealth(
        # The API keeps serving without Redis, it only loses the generation slot
        status=HealthStatus.HEALTHY if report["status"] == "healthy" else HealthStatus.DEGRADED,
        latency_ms=report.get("latency_ms"),
        error=report.get("error"),
        details={"version": version} if version else None,
    )


def _gemini_health(settings: Settings) -> ComponentHealth:
    if not settings.is_gemini_configured:
        return ComponentHealth(status=HealthStatus.UNHEALTHY, error="GOOGLE_API_KEY not configured")
    return ComponentHealth(status=HealthStatus.HEALTHY, details={"model": settings.gemini_model})


def _overall(components: dict[str, ComponentHealth]) -> HealthStatus:
    statuses = {c.status for c in components.values()}
    if HealthStatus.UNHEALTHY in statuses:
        return HealthStatus.UNHEALTHY
    if HealthStatus.DEGRADED in statuses:
        return HealthStatus.DEGRADED
    return HealthStatus.HEALTHY


@router.get("", response_model=HealthCheckResponse, summary="Basic health check")
async def health_check() -> HealthCheckResponse:
    return HealthCheckResponse(status=HealthStatus.HEALTHY)


@router.get("/detailed", response_model=DetailedHealthCheckResponse, summary="Detailed health check")
async def detailed_health_check(
    settings: Settings = Depends(get_settings),
) -> DetailedHealthCheckResponse:
    """
    Report every dependency.

    Database or Gemini problems make the service unhealthy; a missing Redis
    only degrades it.
    """
    components = {
        "database": await _database_health(settings),
        "redis": await _redis_health(),
        "gemini_api": _gemini_health(settings),
    }

    return DetailedHealthCheckResponse(
        status=_overall(components),
        version=settings.app_version,
        environment=settings.environment,
        uptime_seconds=round(time.monotonic() - _started_at, 2),
        components=components,
    )


@router.get("/ready", response_model=HealthCheckResponse, summary="Readiness check")
async def readiness_check(settings: Settings = Depends(get_settings)) -> HealthCheckResponse:
    database = await _database_health(settings)
    return HealthCheckResponse(status=database.status)


@router.get("/live", response_model=HealthCheckResponse, summary="Liveness check")
async def liveness_check() -> HealthCheckResponse:
    return HealthCheckResponse(status=HealthStatus.HEALTHY)
