"""Recipe service: validation, store calls, tag search and listing cache.

Endpoints call into this service; it is also used by the seed script, which
is why payloads may be either parsed request models or plain mappings.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from recipes_api.core.exceptions import error_details_from
from recipes_api.database.exceptions import RecordNotFoundError, StoreError
from recipes_api.database.models import RecipeRecord
from recipes_api.observability.logging import get_logger
from recipes_api.schemas.recipe import RecipeCreate
from recipes_api.services.recipes.constants import (
    LIST_CACHE_KEY,
    LIST_VERSION_KEY,
    RECIPE_DELETED_MESSAGE,
    RECIPE_UPDATED_MESSAGE,
)
from recipes_api.services.recipes.exceptions import (
    RecipeNotFoundError,
    RecipeStoreError,
    RecipeValidationError,
)


if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from recipes_api.cache.manager import CacheManager
    from recipes_api.database.repositories.protocol import RecipeStore

logger = get_logger(__name__)

_records_adapter = TypeAdapter(list[RecipeRecord])


def _utcnow() -> datetime:
    # MongoDB keeps millisecond precision; match it so reads equal the create response.
    now = datetime.now(UTC)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


class RecipeService:
    """Operations behind the ``/recipes`` endpoints."""

    def __init__(
        self,
        store: RecipeStore,
        cache: CacheManager | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """Initialize the recipe service.

        Args:
            store: Recipe store owned by the application context.
            cache: Listing cache; None disables caching.
            clock: Source of ``publishedAt`` timestamps.
        """
        self._store = store
        self._cache = cache
        self._clock = clock

    @staticmethod
    def _validate(payload: RecipeCreate | Mapping[str, Any]) -> RecipeCreate:
        if isinstance(payload, RecipeCreate):
            return payload
        try:
            return RecipeCreate.model_validate(payload)
        except PydanticValidationError as e:
            raise RecipeValidationError(
                "Invalid recipe", details=error_details_from(e.errors())
            ) from e

    async def create_recipe(
        self, payload: RecipeCreate | Mapping[str, Any]
    ) -> RecipeRecord:
        """Validate and persist a new recipe.

        The store assigns the id and ``publishedAt`` is stamped here; any
        values the client sent for either are ignored.

        Raises:
            RecipeValidationError: The payload is not a valid recipe.
            RecipeStoreError: The insert failed.
        """
        data = self._validate(payload)
        record = RecipeRecord(
            name=data.name,
            tags=data.tags,
            ingredients=data.ingredients,
            instructions=data.instructions,
            published_at=self._clock(),
        )
        try:
            recipe_id = await self._store.insert(record)
        except StoreError as e:
            raise RecipeStoreError("Error while inserting a new recipe") from e

        await self._invalidate_listing()
        logger.info("Recipe created", recipe_id=recipe_id)
        return record.model_copy(update={"id": recipe_id})

    async def list_recipes(self) -> list[RecipeRecord]:
        """Return every recipe, from the listing cache when it is current.

        The cached listing carries the mutation generation read before the
        store query. An entry written by a read that overlapped a create,
        update or delete carries an older generation and is ignored.
        """
        if self._cache is None:
            return await self._find_all()

        version = await self._cache.get(LIST_VERSION_KEY, default=0)
        cached = await self._cache.get(LIST_CACHE_KEY)
        if cached is not None:
            recipes = self._from_cache(cached, version)
            if recipes is not None:
                return recipes

        recipes = await self._find_all()
        await self._cache.set(
            LIST_CACHE_KEY,
            {
                "version": version,
                "recipes": [recipe.model_dump(mode="json") for recipe in recipes],
            },
        )
        return recipes

    async def _find_all(self) -> list[RecipeRecord]:
        try:
            return await self._store.find_all()
        except StoreError as e:
            raise RecipeStoreError("Error while listing recipes") from e

    @staticmethod
    def _from_cache(cached: Any, version: Any) -> list[RecipeRecord] | None:
        if not isinstance(cached, dict) or "recipes" not in cached:
            logger.warning("Ignoring malformed recipe listing in cache")
            return None
        if cached.get("version") != version:
            logger.debug("Ignoring stale recipe listing in cache")
            return None
        try:
            return _records_adapter.validate_python(cached["recipes"])
        except PydanticValidationError:
            logger.warning("Ignoring malformed recipe listing in cache")
            return None

    async def get_recipe(self, recipe_id: str) -> RecipeRecord:
        try:
            return await self._store.find_by_id(recipe_id)
        except RecordNotFoundError:
            raise RecipeNotFoundError(recipe_id) from None
        except StoreError as e:
            raise RecipeStoreError("Error while reading a recipe") from e

    async def update_recipe(
        self, recipe_id: str, payload: RecipeCreate | Mapping[str, Any]
    ) -> str:
        """Overwrite name, tags, ingredients and instructions of a recipe.

        The id and ``publishedAt`` never change.

        Returns:
            Confirmation message.

        Raises:
            RecipeValidationError: The payload is not a valid recipe.
            RecipeNotFoundError: No recipe has this id.
            RecipeStoreError: The update failed.
        """
        data = self._validate(payload)
        changes = {
            "name": data.name,
            "tags": data.tags,
            "ingredients": data.ingredients,
            "instructions": data.instructions,
        }
        try:
            await self._store.update(recipe_id, changes)
        except RecordNotFoundError:
            raise RecipeNotFoundError(recipe_id) from None
        except StoreError as e:
            raise RecipeStoreError("Error while updating a recipe") from e

        await self._invalidate_listing()
        logger.info("Recipe updated", recipe_id=recipe_id)
        return RECIPE_UPDATED_MESSAGE

    async def delete_recipe(self, recipe_id: str) -> str:
        """Remove a recipe and return a confirmation message."""
        try:
            await self._store.delete(recipe_id)
        except RecordNotFoundError:
            raise RecipeNotFoundError(recipe_id) from None
        except StoreError as e:
            raise RecipeStoreError("Error while deleting a recipe") from e

        await self._invalidate_listing()
        logger.info("Recipe deleted", recipe_id=recipe_id)
        return RECIPE_DELETED_MESSAGE

    async def search_by_tag(self, tag: str) -> list[RecipeRecord]:
        """Recipes carrying ``tag``, compared case-insensitively.

        Returns an empty list when nothing matches.

        Raises:
            RecipeValidationError: The tag is blank.
        """
        if not tag.strip():
            raise RecipeValidationError("Query parameter 'tag' must not be blank")

        needle = tag.casefold()

        recipes = await self.list_recipes()
        return [
            recipe
            for recipe in recipes
            if any(candidate.casefold() == needle for candidate in recipe.tags)
        ]

    async def _invalidate_listing(self) -> None:
        if self._cache is not None:
            await self._cache.incr(LIST_VERSION_KEY)
            await self._cache.delete(LIST_CACHE_KEY)
