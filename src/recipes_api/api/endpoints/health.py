"""Health check endpoints for load balancers and orchestrators."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from recipes_api.api.dependencies import get_app_context
from recipes_api.core.context import AppContext
from recipes_api.schemas.health import HealthResponse, ReadinessResponse


router = APIRouter(tags=["health"])

_OK_STATUSES = frozenset({"healthy", "not_configured"})


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Liveness probe",
    description="Reports that the process is up. Does not touch dependencies.",
)
async def health_check(
    context: Annotated[AppContext, Depends(get_app_context)],
) -> HealthResponse:
    settings = context.settings
    return HealthResponse(
        status="healthy",
        version=settings.app.version,
        environment=settings.APP_ENV,
    )


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    summary="Readiness probe",
    description="Pings MongoDB and Redis and reports each dependency.",
)
async def readiness_check(
    context: Annotated[AppContext, Depends(get_app_context)],
) -> ReadinessResponse:
    dependencies = await context.check_health()
    ready = all(status in _OK_STATUSES for status in dependencies.values())
    return ReadinessResponse(
        status="ready" if ready else "degraded",
        version=context.settings.app.version,
        environment=context.settings.APP_ENV,
        dependencies=dependencies,
    )
