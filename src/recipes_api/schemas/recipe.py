"""Recipe request and response schemas."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Annotated

from pydantic import Field, StringConstraints

from recipes_api.schemas.base import APIRequest, APIResponse


if TYPE_CHECKING:
    from recipes_api.database.models import RecipeRecord


RecipeName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class RecipeCreate(APIRequest):
    """Body of ``POST /recipes``.

    ``id`` and ``publishedAt`` are assigned server-side and ignored if sent.
    """

    name: RecipeName = Field(..., description="Recipe title")
    tags: list[str] = Field(default_factory=list, description="Free-form labels")
    ingredients: list[str] = Field(default_factory=list)
    instructions: list[str] = Field(default_factory=list)


class RecipeUpdate(RecipeCreate):
    """Body of ``PUT /recipes/{id}``; replaces the four editable fields."""


class RecipeResponse(APIResponse):
    """A stored recipe as returned to clients."""

    id: str
    name: str
    tags: list[str]
    ingredients: list[str]
    instructions: list[str]
    published_at: datetime

    @classmethod
    def from_record(cls, record: RecipeRecord) -> RecipeResponse:
        return cls(
            id=record.id,
            name=record.name,
            tags=list(record.tags),
            ingredients=list(record.ingredients),
            instructions=list(record.instructions),
            published_at=record.published_at,
        )


class MessageResponse(APIResponse):
    """Plain confirmation message."""

    message: str
