"""MongoDB recipe repository.

Documents are laid out as::

    {_id: ObjectId, name, tags, ingredients, instructions, publishedAt}
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from bson import ObjectId
from pymongo.errors import PyMongoError

from recipes_api.database.exceptions import RecordNotFoundError, StoreError
from recipes_api.database.ids import parse_object_id
from recipes_api.database.models import MUTABLE_RECIPE_FIELDS, RecipeRecord
from recipes_api.observability.logging import get_logger


if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping, Sequence

    from pymongo.asynchronous.collection import AsyncCollection

logger = get_logger(__name__)


@contextmanager
def translate_driver_errors(operation: str, collection: str) -> Iterator[None]:
    """Log driver failures and re-raise them as StoreError."""
    try:
        yield
    except PyMongoError as e:
        logger.exception(
            "MongoDB operation failed", operation=operation, collection=collection
        )
        msg = f"{operation} on '{collection}' failed"
        raise StoreError(msg) from e


class MongoRecipeRepository:
    """RecipeStore backed by a MongoDB collection."""

    def __init__(self, collection: AsyncCollection[dict[str, Any]]) -> None:
        self._collection = collection

    @property
    def collection_name(self) -> str:
        return self._collection.name

    async def insert(self, recipe: RecipeRecord) -> str:
        document = self._to_document(recipe)
        with translate_driver_errors("insert", self.collection_name):
            await self._collection.insert_one(document)
        return str(document["_id"])

    async def insert_many(self, recipes: Sequence[RecipeRecord]) -> int:
        if not recipes:
            return 0
        documents = [self._to_document(recipe) for recipe in recipes]
        with translate_driver_errors("insert_many", self.collection_name):
            result = await self._collection.insert_many(documents)
        return len(result.inserted_ids)

    async def find_all(self) -> list[RecipeRecord]:
        with translate_driver_errors("find", self.collection_name):
            documents = await self._collection.find({}).to_list()
        return [self._document_to_record(doc) for doc in documents]

    async def find_by_id(self, recipe_id: str) -> RecipeRecord:
        object_id = parse_object_id(recipe_id)
        with translate_driver_errors("find_one", self.collection_name):
            document = await self._collection.find_one({"_id": object_id})
        if document is None:
            raise RecordNotFoundError(recipe_id)
        return self._document_to_record(document)

    async def update(self, recipe_id: str, changes: Mapping[str, Any]) -> None:
        object_id = parse_object_id(recipe_id)
        fields = {k: v for k, v in changes.items() if k in MUTABLE_RECIPE_FIELDS}
        with translate_driver_errors("update_one", self.collection_name):
            result = await self._collection.update_one(
                {"_id": object_id}, {"$set": fields}
            )
        if result.matched_count == 0:
            raise RecordNotFoundError(recipe_id)

    async def delete(self, recipe_id: str) -> None:
        object_id = parse_object_id(recipe_id)
        with translate_driver_errors("delete_one", self.collection_name):
            result = await self._collection.delete_one({"_id": object_id})
        if result.deleted_count == 0:
            raise RecordNotFoundError(recipe_id)

    async def count(self) -> int:
        with translate_driver_errors("count_documents", self.collection_name):
            return await self._collection.count_documents({})

    @staticmethod
    def _to_document(recipe: RecipeRecord) -> dict[str, Any]:
        """Build a new document; the store always assigns a fresh ``_id``."""
        return {
            "_id": ObjectId(),
            "name": recipe.name,
            "tags": list(recipe.tags),
            "ingredients": list(recipe.ingredients),
            "instructions": list(recipe.instructions),
            "publishedAt": recipe.published_at,
        }

    @staticmethod
    def _document_to_record(document: Mapping[str, Any]) -> RecipeRecord:
        return RecipeRecord(
            id=str(document["_id"]),
            name=document.get("name", ""),
            tags=document.get("tags") or [],
            ingredients=document.get("ingredients") or [],
            instructions=document.get("instructions") or [],
            published_at=document["publishedAt"],
        )
