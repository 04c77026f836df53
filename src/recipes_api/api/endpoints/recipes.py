"""Recipe endpoints.

Reads and tag search are public. Create, update and delete are served by
``SessionGuardedRoute``, which rejects unauthenticated calls with 401 before
the body is parsed or the store is touched (and lets everything through when
auth is disabled).

Routes are registered by ``build_router`` so the composition root can leave
out search or delete; ``/recipes/search`` is always registered before
``/recipes/{recipe_id}`` so it is not captured as an id.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query

from recipes_api.api.dependencies import get_recipe_service
from recipes_api.auth.dependencies import SessionGuard, SessionGuardedRoute
from recipes_api.schemas.recipe import (
    MessageResponse,
    RecipeCreate,
    RecipeResponse,
    RecipeUpdate,
)
from recipes_api.services.recipes.service import RecipeService


RecipeServiceDep = Annotated[RecipeService, Depends(get_recipe_service)]
RecipeId = Annotated[str, Path(description="24-character hex recipe id")]

TAGS = ["recipes"]


async def create_recipe(
    payload: RecipeCreate,
    service: RecipeServiceDep,
    _session: SessionGuard,
) -> RecipeResponse:
    """Store a new recipe; the server assigns ``id`` and ``publishedAt``."""
    recipe = await service.create_recipe(payload)
    return RecipeResponse.from_record(recipe)


async def list_recipes(service: RecipeServiceDep) -> list[RecipeResponse]:
    recipes = await service.list_recipes()
    return [RecipeResponse.from_record(recipe) for recipe in recipes]


async def search_recipes(
    service: RecipeServiceDep,
    tag: Annotated[str, Query(min_length=1, description="Tag to match")],
) -> list[RecipeResponse]:
    """Case-insensitive exact match on any of a recipe's tags."""
    recipes = await service.search_by_tag(tag)
    return [RecipeResponse.from_record(recipe) for recipe in recipes]


async def get_recipe(recipe_id: RecipeId, service: RecipeServiceDep) -> RecipeResponse:
    recipe = await service.get_recipe(recipe_id)
    return RecipeResponse.from_record(recipe)


async def update_recipe(
    recipe_id: RecipeId,
    payload: RecipeUpdate,
    service: RecipeServiceDep,
    _session: SessionGuard,
) -> MessageResponse:
    """Replace name, tags, ingredients and instructions."""
    message = await service.update_recipe(recipe_id, payload)
    return MessageResponse(message=message)


async def delete_recipe(
    recipe_id: RecipeId,
    service: RecipeServiceDep,
    _session: SessionGuard,
) -> MessageResponse:
    message = await service.delete_recipe(recipe_id)
    return MessageResponse(message=message)


def build_router(
    *, search_enabled: bool = True, delete_enabled: bool = True
) -> APIRouter:
    """Assemble the recipe routes, leaving out disabled optional endpoints."""
    router = APIRouter(prefix="/recipes", tags=TAGS, route_class=SessionGuardedRoute)

    router.add_api_route(
        "",
        create_recipe,
        methods=["POST"],
        response_model=RecipeResponse,
        summary="Create a recipe",
    )
    router.add_api_route(
        "",
        list_recipes,
        methods=["GET"],
        response_model=list[RecipeResponse],
        summary="List all recipes",
    )
    if search_enabled:
        router.add_api_route(
            "/search",
            search_recipes,
            methods=["GET"],
            response_model=list[RecipeResponse],
            summary="Search recipes by tag",
        )
    router.add_api_route(
        "/{recipe_id}",
        get_recipe,
        methods=["GET"],
        response_model=RecipeResponse,
        summary="Get one recipe",
    )
    router.add_api_route(
        "/{recipe_id}",
        update_recipe,
        methods=["PUT"],
        response_model=MessageResponse,
        summary="Update a recipe",
    )
    if delete_enabled:
        router.add_api_route(
            "/{recipe_id}",
            delete_recipe,
            methods=["DELETE"],
            response_model=MessageResponse,
            summary="Delete a recipe",
        )
    return router
