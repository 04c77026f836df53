"""Recipe service exceptions.

These extend the application exceptions so the shared handler renders them
without per-endpoint translation.
"""

from __future__ import annotations

from recipes_api.core.exceptions import (
    NotFoundException,
    StoreException,
    ValidationException,
)
from recipes_api.services.recipes.constants import RECIPE_RESOURCE


class RecipeValidationError(ValidationException):
    """Payload does not describe a valid recipe."""


class RecipeNotFoundError(NotFoundException):
    """No recipe has the requested id."""

    def __init__(self, recipe_id: str) -> None:
        self.recipe_id = recipe_id
        super().__init__(RECIPE_RESOURCE, recipe_id)


class RecipeStoreError(StoreException):
    """The recipe store failed; details are in the logs."""
