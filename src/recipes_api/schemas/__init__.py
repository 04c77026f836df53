"""Pydantic schemas for request/response validation."""

from recipes_api.schemas.auth import SessionResponse, SignInRequest
from recipes_api.schemas.base import APIRequest, APIResponse
from recipes_api.schemas.health import HealthResponse, ReadinessResponse
from recipes_api.schemas.recipe import (
    MessageResponse,
    RecipeCreate,
    RecipeResponse,
    RecipeUpdate,
)


__all__ = [
    "APIRequest",
    "APIResponse",
    "HealthResponse",
    "MessageResponse",
    "ReadinessResponse",
    "RecipeCreate",
    "RecipeResponse",
    "RecipeUpdate",
    "SessionResponse",
    "SignInRequest",
]
