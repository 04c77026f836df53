"""Process-local stores used for development, tests and seeded demos.

State lives on the instance, which is owned by the application context.
Every mutation completes without awaiting, so concurrent requests on the
event loop never observe a half-applied change.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from recipes_api.database.exceptions import RecordNotFoundError
from recipes_api.database.ids import new_id
from recipes_api.database.models import MUTABLE_RECIPE_FIELDS, RecipeRecord


if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from recipes_api.database.models import UserRecord


class InMemoryRecipeRepository:
    """RecipeStore keeping records in insertion order in a dict."""

    def __init__(self, recipes: Iterable[RecipeRecord] = ()) -> None:
        self._recipes: dict[str, RecipeRecord] = {}
        for recipe in recipes:
            self._add(recipe)

    def _add(self, recipe: RecipeRecord) -> str:
        recipe_id = new_id()
        self._recipes[recipe_id] = recipe.model_copy(
            update={"id": recipe_id}, deep=True
        )
        return recipe_id

    async def insert(self, recipe: RecipeRecord) -> str:
        return self._add(recipe)

    async def insert_many(self, recipes: Sequence[RecipeRecord]) -> int:
        for recipe in recipes:
            self._add(recipe)
        return len(recipes)

    async def find_all(self) -> list[RecipeRecord]:
        return [recipe.model_copy(deep=True) for recipe in self._recipes.values()]

    async def find_by_id(self, recipe_id: str) -> RecipeRecord:
        try:
            return self._recipes[recipe_id].model_copy(deep=True)
        except KeyError:
            raise RecordNotFoundError(recipe_id) from None

    async def update(self, recipe_id: str, changes: Mapping[str, Any]) -> None:
        current = self._recipes.get(recipe_id)
        if current is None:
            raise RecordNotFoundError(recipe_id)
        fields = {k: v for k, v in changes.items() if k in MUTABLE_RECIPE_FIELDS}
        self._recipes[recipe_id] = current.model_copy(update=fields, deep=True)

    async def delete(self, recipe_id: str) -> None:
        if self._recipes.pop(recipe_id, None) is None:
            raise RecordNotFoundError(recipe_id)

    async def count(self) -> int:
        return len(self._recipes)


class InMemoryUserRepository:
    """UserStore keyed by username."""

    def __init__(self, users: Iterable[UserRecord] = ()) -> None:
        self._users = {user.username: user for user in users}

    async def find_by_username(self, username: str) -> UserRecord | None:
        return self._users.get(username)

    async def upsert(self, user: UserRecord) -> None:
        self._users[user.username] = user
