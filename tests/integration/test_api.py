"""End-to-end API flow against MongoDB and Redis containers."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest


if TYPE_CHECKING:
    from httpx import AsyncClient

    from recipes_api.core.context import AppContext


pytestmark = pytest.mark.integration


@pytest.fixture
async def auth_headers(integration_client: AsyncClient) -> dict[str, str]:
    response = await integration_client.post(
        "/signin", json={"username": "chef", "password": "mise-en-place"}
    )
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


async def test_ready_reports_both_backends(integration_client: AsyncClient) -> None:
    response = await integration_client.get("/ready")

    assert response.status_code == 200
    assert response.json()["dependencies"] == {
        "mongodb": "healthy",
        "redis": "healthy",
    }


async def test_recipe_lifecycle(
    integration_client: AsyncClient,
    integration_context: AppContext,
    auth_headers: dict[str, str],
) -> None:
    """Create, list, search, update and delete one recipe."""
    created = await integration_client.post(
        "/recipes",
        json={"name": "Carbonara", "tags": ["Italian"], "ingredients": ["guanciale"]},
        headers=auth_headers,
    )
    assert created.status_code == 200
    recipe_id = created.json()["id"]

    listing = await integration_client.get("/recipes")
    assert [r["id"] for r in listing.json()] == [recipe_id]
    assert await integration_context.redis_client.exists("recipes:all") == 1

    search = await integration_client.get("/recipes/search", params={"tag": "italian"})
    assert [r["id"] for r in search.json()] == [recipe_id]

    updated = await integration_client.put(
        f"/recipes/{recipe_id}",
        json={"name": "Cacio e Pepe", "tags": ["italian"]},
        headers=auth_headers,
    )
    assert updated.json() == {"message": "Recipe has been updated"}
    assert await integration_context.redis_client.exists("recipes:all") == 0
    assert int(await integration_context.redis_client.get("recipes:all:version")) == 2

    fetched = await integration_client.get(f"/recipes/{recipe_id}")
    assert fetched.json()["name"] == "Cacio e Pepe"
    assert fetched.json()["publishedAt"] == created.json()["publishedAt"]

    deleted = await integration_client.delete(
        f"/recipes/{recipe_id}", headers=auth_headers
    )
    assert deleted.status_code == 200
    assert (await integration_client.get(f"/recipes/{recipe_id}")).status_code == 404


async def test_signout_revokes_redis_session(
    integration_client: AsyncClient, auth_headers: dict[str, str]
) -> None:
    response = await integration_client.post("/signout", headers=auth_headers)

    assert response.status_code == 200
    rejected = await integration_client.post(
        "/recipes", json={"name": "Late"}, headers=auth_headers
    )
    assert rejected.status_code == 401
