"""Seed files for the in-memory stores and the MongoDB seeding script.

``recipes.json`` holds a list of recipe objects. Incoming ``id`` values are
discarded since stores assign their own; ``publishedAt`` is kept when
present. ``users.json`` holds ``{"username", "password"}`` pairs with plain
passwords which are hashed on load.
"""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

import orjson
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from recipes_api.auth.passwords import DEFAULT_ROUNDS, hash_password
from recipes_api.database.models import RecipeRecord, UserRecord
from recipes_api.observability.logging import get_logger


logger = get_logger(__name__)


class _SeedRecipe(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = Field(min_length=1)
    tags: list[str] = Field(default_factory=list)
    ingredients: list[str] = Field(default_factory=list)
    instructions: list[str] = Field(default_factory=list)
    published_at: datetime | None = Field(default=None, alias="publishedAt")


class _SeedUser(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


_recipes_adapter = TypeAdapter(list[_SeedRecipe])
_users_adapter = TypeAdapter(list[_SeedUser])


def load_recipes_file(path: str | Path) -> list[RecipeRecord]:
    """Parse a recipes seed file into unsaved records.

    Raises:
        OSError: If the file cannot be read.
        pydantic.ValidationError: If an entry is malformed.
    """
    seeds = _recipes_adapter.validate_python(orjson.loads(Path(path).read_bytes()))
    now = datetime.now(UTC)
    records = [
        RecipeRecord(
            name=seed.name,
            tags=seed.tags,
            ingredients=seed.ingredients,
            instructions=seed.instructions,
            published_at=seed.published_at or now,
        )
        for seed in seeds
    ]
    logger.info("Loaded recipe seed file", path=str(path), count=len(records))
    return records


def load_users_file(
    path: str | Path, rounds: int = DEFAULT_ROUNDS
) -> list[UserRecord]:
    """Parse a users seed file, hashing each plain password with bcrypt."""
    seeds = _users_adapter.validate_python(orjson.loads(Path(path).read_bytes()))
    logger.info("Loaded user seed file", path=str(path), count=len(seeds))
    return [
        UserRecord(
            username=seed.username,
            password_hash=hash_password(seed.password, rounds),
        )
        for seed in seeds
    ]
