"""Health check schemas."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import Field

from recipes_api.schemas.base import APIResponse


class HealthResponse(APIResponse):
    """Liveness probe response."""

    status: str = Field(..., description="Health status", examples=["healthy"])
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="Current server timestamp",
    )
    version: str = Field(..., description="Application version")
    environment: str = Field(..., description="Deployment environment")


class ReadinessResponse(HealthResponse):
    """Readiness probe response with per-dependency status."""

    dependencies: dict[str, str] = Field(
        default_factory=dict,
        description="healthy, unhealthy or not_configured per dependency",
    )
