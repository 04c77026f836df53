"""Repository protocols implemented by the MongoDB and in-memory stores."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable


if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from recipes_api.database.models import RecipeRecord, UserRecord


@runtime_checkable
class RecipeStore(Protocol):
    """Persistence for recipes.

    Identifiers are 24-character hex ObjectIds assigned on insert. Unknown or
    malformed identifiers raise RecordNotFoundError; backend failures raise
    StoreError. Implementations do no business validation.
    """

    async def insert(self, recipe: RecipeRecord) -> str:
        """Persist a new recipe and return its assigned id."""
        ...

    async def insert_many(self, recipes: Sequence[RecipeRecord]) -> int:
        """Persist several recipes, each receiving a new id. Returns the count."""
        ...

    async def find_all(self) -> list[RecipeRecord]:
        """Return every stored recipe."""
        ...

    async def find_by_id(self, recipe_id: str) -> RecipeRecord:
        """Return one recipe."""
        ...

    async def update(self, recipe_id: str, changes: Mapping[str, Any]) -> None:
        """Overwrite the given editable fields of one recipe."""
        ...

    async def delete(self, recipe_id: str) -> None:
        """Remove one recipe."""
        ...

    async def count(self) -> int:
        """Number of stored recipes."""
        ...


@runtime_checkable
class UserStore(Protocol):
    """Lookup of stored credentials by username."""

    async def find_by_username(self, username: str) -> UserRecord | None:
        """Return the user or None when unknown."""
        ...

    async def upsert(self, user: UserRecord) -> None:
        """Create or replace a user's credentials."""
        ...
