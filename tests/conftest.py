"""Shared test fixtures for the Recipes API tests.

The application is built against the in-memory stores so unit tests need no
MongoDB or Redis. The lifespan does not run under ``ASGITransport``; fixtures
build the application context themselves and attach it to ``app.state``.
"""

from __future__ import annotations

import os
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import pytest
from httpx import ASGITransport, AsyncClient


os.environ["APP_ENV"] = "test"

from recipes_api.auth.passwords import hash_password  # noqa: E402
from recipes_api.core.config import SessionBackend, Settings, StoreBackend  # noqa: E402
from recipes_api.core.config.settings import (  # noqa: E402
    AuthSettings,
    DatabaseSettings,
    LoggingSettings,
    MetricsSettings,
    ObservabilitySettings,
    RateLimitingSettings,
    SessionSettings,
    TracingSettings,
)
from recipes_api.core.context import build_app_context  # noqa: E402
from recipes_api.database.models import RecipeRecord, UserRecord  # noqa: E402
from recipes_api.factory import create_app  # noqa: E402


if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Callable

    from fastapi import FastAPI

    from recipes_api.core.context import AppContext


TEST_USERNAME = "gordon"
TEST_PASSWORD = "hells-kitchen"


def make_settings(**overrides: object) -> Settings:
    """Build in-memory test settings; keyword arguments replace sections."""
    values: dict[str, object] = {
        "APP_ENV": "test",
        "MONGO_URI": None,
        "MONGO_DATABASE": None,
        "REDIS_URI": None,
        "database": DatabaseSettings(backend=StoreBackend.MEMORY),
        "sessions": SessionSettings(backend=SessionBackend.MEMORY),
        "auth": AuthSettings(enabled=True, password_rounds=4),
        "rate_limiting": RateLimitingSettings(enabled=False),
        "logging": LoggingSettings(level="WARNING", format="text"),
        "observability": ObservabilitySettings(
            tracing=TracingSettings(enabled=False),
            metrics=MetricsSettings(enabled=False),
        ),
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def test_settings() -> Settings:
    """Settings with memory stores and authentication enabled."""
    return make_settings()


@pytest.fixture
def make_recipe() -> Callable[..., RecipeRecord]:
    """Factory for unsaved recipe records."""

    def _make(
        name: str = "Pancakes",
        tags: list[str] | None = None,
        ingredients: list[str] | None = None,
        instructions: list[str] | None = None,
    ) -> RecipeRecord:
        return RecipeRecord(
            name=name,
            tags=["breakfast"] if tags is None else tags,
            ingredients=(
                ["flour", "milk", "eggs"] if ingredients is None else ingredients
            ),
            instructions=["Mix", "Fry"] if instructions is None else instructions,
            published_at=datetime(2024, 5, 1, 12, 0, tzinfo=UTC),
        )

    return _make


@pytest.fixture
async def app_context(test_settings: Settings) -> AsyncGenerator[AppContext]:
    """Application context with one known user."""
    context = await build_app_context(test_settings)
    await context.user_store.upsert(
        UserRecord(
            username=TEST_USERNAME,
            password_hash=hash_password(TEST_PASSWORD, rounds=4),
        )
    )
    try:
        yield context
    finally:
        await context.close()


@pytest.fixture
def app(test_settings: Settings, app_context: AppContext) -> FastAPI:
    """FastAPI app wired to the test context."""
    application = create_app(test_settings)
    application.state.context = app_context
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for testing."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
async def session_token(app_context: AppContext) -> str:
    """A live session token for the test user."""
    assert app_context.auth_service is not None
    session = await app_context.auth_service.authenticate(TEST_USERNAME, TEST_PASSWORD)
    return session.token


@pytest.fixture
def auth_headers(session_token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {session_token}"}


@pytest.fixture
def settings_factory() -> Callable[..., Settings]:
    """Expose ``make_settings`` to tests that need non-default sections."""
    return make_settings


@pytest.fixture
def credentials() -> dict[str, str]:
    """Sign-in body for the user created in ``app_context``."""
    return {"username": TEST_USERNAME, "password": TEST_PASSWORD}
