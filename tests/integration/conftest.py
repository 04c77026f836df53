"""Integration test fixtures.

Starts MongoDB and Redis with testcontainers once per session and builds the
application against them.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

import pytest
from httpx import ASGITransport, AsyncClient
from testcontainers.mongodb import MongoDbContainer
from testcontainers.redis import RedisContainer

from recipes_api.auth.passwords import hash_password
from recipes_api.cache.redis import close_redis, connect_redis
from recipes_api.core.config import SessionBackend, StoreBackend
from recipes_api.core.config.settings import DatabaseSettings, SessionSettings
from recipes_api.core.context import build_app_context
from recipes_api.database.connection import close_mongo, connect_mongo
from recipes_api.database.models import UserRecord
from recipes_api.factory import create_app


if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Callable, Generator

    from fastapi import FastAPI
    from pymongo import AsyncMongoClient
    from redis.asyncio import Redis

    from recipes_api.core.config import Settings
    from recipes_api.core.context import AppContext


pytestmark = pytest.mark.integration


@pytest.fixture(scope="session")
def mongo_container() -> Generator[MongoDbContainer]:
    """Start a MongoDB container for the test session."""
    with MongoDbContainer("mongo:7.0") as mongo:
        yield mongo


@pytest.fixture(scope="session")
def mongo_uri(mongo_container: MongoDbContainer) -> str:
    return mongo_container.get_connection_url()


@pytest.fixture(scope="session")
def redis_container() -> Generator[RedisContainer]:
    """Start a Redis container for the test session."""
    with RedisContainer("redis:7-alpine") as redis:
        yield redis


@pytest.fixture(scope="session")
def redis_uri(redis_container: RedisContainer) -> str:
    host = redis_container.get_container_host_ip()
    port = redis_container.get_exposed_port(6379)
    return f"redis://{host}:{port}/0"


@pytest.fixture
def database_name() -> str:
    """A fresh database per test so state never leaks between tests."""
    return f"recipes_test_{uuid.uuid4().hex[:8]}"


@pytest.fixture
async def mongo_client(mongo_uri: str) -> AsyncGenerator[AsyncMongoClient]:
    client = await connect_mongo(mongo_uri)
    try:
        yield client
    finally:
        await close_mongo(client)


@pytest.fixture
async def redis_client(redis_uri: str) -> AsyncGenerator[Redis]:
    client = await connect_redis(redis_uri)
    try:
        yield client
    finally:
        await client.flushdb()
        await close_redis(client)


@pytest.fixture
def integration_settings(
    settings_factory: Callable[..., Settings],
    mongo_uri: str,
    redis_uri: str,
    database_name: str,
) -> Settings:
    """Settings selecting MongoDB recipes and Redis sessions."""
    return settings_factory(
        MONGO_URI=mongo_uri,
        MONGO_DATABASE=database_name,
        REDIS_URI=redis_uri,
        database=DatabaseSettings(backend=StoreBackend.MONGO),
        sessions=SessionSettings(backend=SessionBackend.REDIS),
    )


@pytest.fixture
async def integration_context(
    integration_settings: Settings,
) -> AsyncGenerator[AppContext]:
    """Context connected to the containers, with one known user."""
    context = await build_app_context(integration_settings)
    await context.user_store.upsert(
        UserRecord(
            username="chef",
            password_hash=hash_password("mise-en-place", rounds=4),
        )
    )
    try:
        yield context
    finally:
        if context.mongo_client is not None:
            await context.mongo_client.drop_database(
                integration_settings.MONGO_DATABASE or ""
            )
        if context.redis_client is not None:
            await context.redis_client.flushdb()
        await context.close()


@pytest.fixture
def integration_app(
    integration_settings: Settings, integration_context: AppContext
) -> FastAPI:
    app = create_app(integration_settings)
    app.state.context = integration_context
    return app


@pytest.fixture
async def integration_client(
    integration_app: FastAPI,
) -> AsyncGenerator[AsyncClient]:
    async with AsyncClient(
        transport=ASGITransport(app=integration_app),
        base_url="http://test",
    ) as ac:
        yield ac
