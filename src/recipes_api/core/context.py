"""Application context: the clients, stores and services of one app instance.

The context is built once in the lifespan, stored on ``app.state.context``
and resolved per request through dependencies. It is the only owner of
connections and of in-process state such as the in-memory stores.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from recipes_api.auth.service import AuthService
from recipes_api.auth.sessions import InMemorySessionStore, RedisSessionStore
from recipes_api.cache.manager import CacheManager
from recipes_api.cache.redis import check_redis_health, close_redis, connect_redis
from recipes_api.core.config import SessionBackend
from recipes_api.database.connection import (
    check_mongo_health,
    close_mongo,
    connect_mongo,
)
from recipes_api.database.repositories.memory import (
    InMemoryRecipeRepository,
    InMemoryUserRepository,
)
from recipes_api.database.repositories.recipe import MongoRecipeRepository
from recipes_api.database.repositories.user import MongoUserRepository
from recipes_api.database.seed import load_recipes_file, load_users_file
from recipes_api.observability.logging import get_logger
from recipes_api.services.recipes.service import RecipeService


if TYPE_CHECKING:
    from pymongo import AsyncMongoClient
    from redis.asyncio import Redis

    from recipes_api.auth.sessions import SessionStore
    from recipes_api.core.config import Settings
    from recipes_api.database.repositories.protocol import RecipeStore, UserStore

logger = get_logger(__name__)


@dataclass
class AppContext:
    """Everything request handlers need, built from settings at startup."""

    settings: Settings
    recipe_store: RecipeStore
    user_store: UserStore
    recipe_service: RecipeService
    auth_service: AuthService | None = None
    mongo_client: AsyncMongoClient | None = None
    redis_client: Redis | None = None
    _closed: bool = field(default=False, init=False, repr=False)

    async def check_health(self) -> dict[str, str]:
        """Status of each external dependency."""
        return {
            "mongodb": await check_mongo_health(self.mongo_client),
            "redis": await check_redis_health(self.redis_client),
        }

    async def close(self) -> None:
        """Release connections. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        if self.redis_client is not None:
            await close_redis(self.redis_client)
        if self.mongo_client is not None:
            await close_mongo(self.mongo_client)


async def build_app_context(settings: Settings) -> AppContext:
    """Connect to the configured backends and wire the services.

    Raises:
        PyMongoError: MongoDB is selected and unreachable.
        RedisError: Redis is configured and unreachable.
        OSError: A configured seed file cannot be read.
    """
    mongo_client: AsyncMongoClient | None = None
    redis_client: Redis | None = None
    try:
        if settings.uses_mongo:
            # Presence of both values is enforced by Settings validation.
            mongo_client = await connect_mongo(
                settings.MONGO_URI or "",
                server_selection_timeout_ms=settings.database.server_selection_timeout_ms,
                app_name=settings.app.name,
            )
        if settings.uses_redis:
            redis_client = await connect_redis(settings.REDIS_URI or "")

        recipe_store, user_store = _build_stores(settings, mongo_client)
        cache = None
        if redis_client is not None and settings.cache.enabled:
            cache = CacheManager(
                redis_client, prefix=settings.cache.key_prefix, ttl=settings.cache.ttl
            )
        auth_service = None
        if settings.auth.enabled:
            auth_service = AuthService(
                user_store,
                _build_session_store(settings, redis_client),
                ttl_seconds=settings.sessions.ttl_seconds,
            )
    except Exception:
        if redis_client is not None:
            await close_redis(redis_client)
        if mongo_client is not None:
            await close_mongo(mongo_client)
        raise

    logger.info(
        "Application context ready",
        store=settings.database.backend,
        sessions=settings.sessions.backend if auth_service else "disabled",
        cache_enabled=cache is not None,
    )
    return AppContext(
        settings=settings,
        recipe_store=recipe_store,
        user_store=user_store,
        recipe_service=RecipeService(recipe_store, cache=cache),
        auth_service=auth_service,
        mongo_client=mongo_client,
        redis_client=redis_client,
    )


def _build_stores(
    settings: Settings, mongo_client: AsyncMongoClient | None
) -> tuple[RecipeStore, UserStore]:
    if mongo_client is not None:
        database = mongo_client[settings.MONGO_DATABASE or ""]
        return (
            MongoRecipeRepository(database[settings.database.recipes_collection]),
            MongoUserRepository(database[settings.database.users_collection]),
        )

    recipes = []
    if settings.database.seed_file:
        recipes = load_recipes_file(settings.database.seed_file)
    users = []
    if settings.database.users_seed_file:
        users = load_users_file(
            settings.database.users_seed_file, settings.auth.password_rounds
        )
    return InMemoryRecipeRepository(recipes), InMemoryUserRepository(users)


def _build_session_store(
    settings: Settings, redis_client: Redis | None
) -> SessionStore:
    if settings.sessions.backend == SessionBackend.REDIS and redis_client is not None:
        return RedisSessionStore(redis_client, prefix=settings.sessions.key_prefix)
    return InMemorySessionStore()
