"""MongoDB user repository.

Documents keep the ``{username, password}`` layout where ``password`` is
the hex SHA-256 digest of the plain password.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pymongo import ASCENDING

from recipes_api.database.models import UserRecord
from recipes_api.database.repositories.recipe import translate_driver_errors


if TYPE_CHECKING:
    from pymongo.asynchronous.collection import AsyncCollection


class MongoUserRepository:
    """UserStore backed by a MongoDB collection."""

    def __init__(self, collection: AsyncCollection[dict[str, Any]]) -> None:
        self._collection = collection

    async def find_by_username(self, username: str) -> UserRecord | None:
        with translate_driver_errors("find_one", self._collection.name):
            document = await self._collection.find_one({"username": username})
        if document is None:
            return None
        return UserRecord(
            username=document["username"], password_hash=document["password"]
        )

    async def upsert(self, user: UserRecord) -> None:
        with translate_driver_errors("replace_one", self._collection.name):
            await self._collection.replace_one(
                {"username": user.username},
                {"username": user.username, "password": user.password_hash},
                upsert=True,
            )

    async def ensure_indexes(self) -> None:
        """Create the unique username index if it does not exist yet."""
        with translate_driver_errors("create_index", self._collection.name):
            await self._collection.create_index(
                [("username", ASCENDING)], unique=True
            )
