"""FastAPI dependencies for reaching the application context.

The context is built during startup and stored on ``app.state.context``;
handlers receive its services through these dependencies.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Request

from recipes_api.core.exceptions import ServiceUnavailableException


if TYPE_CHECKING:
    from recipes_api.auth.service import AuthService
    from recipes_api.core.context import AppContext
    from recipes_api.services.recipes.service import RecipeService


async def get_app_context(request: Request) -> AppContext:
    """Return the context of the app serving this request.

    Raises:
        ServiceUnavailableException: 503 if startup has not completed.
    """
    context: AppContext | None = getattr(request.app.state, "context", None)
    if context is None:
        raise ServiceUnavailableException("Application is not ready")
    return context


async def get_recipe_service(request: Request) -> RecipeService:
    return (await get_app_context(request)).recipe_service


async def get_auth_service(request: Request) -> AuthService:
    """Return the auth service, or 503 when authentication is disabled."""
    service = (await get_app_context(request)).auth_service
    if service is None:
        raise ServiceUnavailableException("Authentication is not enabled")
    return service
