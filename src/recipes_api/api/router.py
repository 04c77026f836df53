"""Top-level API router.

Which optional endpoints exist (recipe search, recipe delete, the session
endpoints) is decided here from settings.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter

from recipes_api.api.endpoints import auth, health, recipes


if TYPE_CHECKING:
    from slowapi import Limiter

    from recipes_api.core.config import Settings


def build_router(settings: Settings, limiter: Limiter) -> APIRouter:
    router = APIRouter()
    router.include_router(health.router)
    router.include_router(
        recipes.build_router(
            search_enabled=settings.features.search_enabled,
            delete_enabled=settings.features.delete_enabled,
        )
    )
    if settings.auth.enabled:
        router.include_router(auth.build_router(limiter, settings.rate_limiting.auth))
    return router
