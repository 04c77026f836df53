"""Data transfer objects shared by the store implementations."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


# Fields an update is allowed to overwrite.
MUTABLE_RECIPE_FIELDS = frozenset({"name", "tags", "ingredients", "instructions"})


class RecipeRecord(BaseModel):
    """A recipe as held by a store.

    ``id`` is None until the store assigns one on insert.
    """

    id: str | None = None
    name: str
    tags: list[str] = Field(default_factory=list)
    ingredients: list[str] = Field(default_factory=list)
    instructions: list[str] = Field(default_factory=list)
    published_at: datetime


class UserRecord(BaseModel):
    """Stored credentials: username and lowercase hex SHA-256 of the password."""

    username: str
    password_hash: str
