"""Recipe and user repositories."""

from recipes_api.database.repositories.memory import (
    InMemoryRecipeRepository,
    InMemoryUserRepository,
)
from recipes_api.database.repositories.protocol import RecipeStore, UserStore
from recipes_api.database.repositories.recipe import MongoRecipeRepository
from recipes_api.database.repositories.user import MongoUserRepository


__all__ = [
    "InMemoryRecipeRepository",
    "InMemoryUserRepository",
    "MongoRecipeRepository",
    "MongoUserRepository",
    "RecipeStore",
    "UserStore",
]
