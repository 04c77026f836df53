"""Recipe service package.

Provides recipe CRUD and tag search over a pluggable store.
"""

from recipes_api.services.recipes.exceptions import (
    RecipeNotFoundError,
    RecipeStoreError,
    RecipeValidationError,
)
from recipes_api.services.recipes.service import RecipeService


__all__ = [
    "RecipeNotFoundError",
    "RecipeService",
    "RecipeStoreError",
    "RecipeValidationError",
]
