"""Unit tests for RecipeService.

Tests cover:
- Create, list, get, update and delete against the in-memory store
- Payload validation
- Case-insensitive tag search
- Listing cache reads and invalidation
- Store failure translation
"""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from recipes_api.database.exceptions import StoreError
from recipes_api.database.repositories.memory import InMemoryRecipeRepository
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
from recipes_api.services.recipes.service import RecipeService


if TYPE_CHECKING:
    from collections.abc import Callable

    from recipes_api.database.models import RecipeRecord


pytestmark = pytest.mark.unit

FIXED_NOW = datetime(2025, 1, 2, 3, 4, 5, tzinfo=UTC)
UNKNOWN_ID = "0123456789abcdef01234567"


@pytest.fixture
def store() -> InMemoryRecipeRepository:
    return InMemoryRecipeRepository()


@pytest.fixture
def service(store: InMemoryRecipeRepository) -> RecipeService:
    return RecipeService(store, clock=lambda: FIXED_NOW)


@pytest.fixture
def mock_cache() -> MagicMock:
    cache = MagicMock()
    cache.get = AsyncMock(side_effect=lambda key, default=None: default)
    cache.set = AsyncMock(return_value=True)
    cache.delete = AsyncMock(return_value=True)
    cache.incr = AsyncMock(return_value=1)
    return cache


# =============================================================================
# Create
# =============================================================================


class TestCreateRecipe:
    """Tests for RecipeService.create_recipe."""

    async def test_assigns_id_and_published_at(self, service: RecipeService) -> None:
        """Should return the stored recipe with server-assigned fields."""
        recipe = await service.create_recipe(
            RecipeCreate(name="Pizza", tags=["italian"], ingredients=["dough"])
        )

        assert recipe.id is not None
        assert len(recipe.id) == 24
        assert recipe.published_at == FIXED_NOW
        assert recipe.name == "Pizza"
        assert recipe.tags == ["italian"]

    async def test_ignores_client_id_and_published_at(
        self, service: RecipeService, store: InMemoryRecipeRepository
    ) -> None:
        """Should discard id and publishedAt sent by the client."""
        recipe = await service.create_recipe(
            {
                "id": "client-chosen",
                "name": "Soup",
                "publishedAt": "1999-01-01T00:00:00Z",
            }
        )

        assert recipe.id != "client-chosen"
        assert recipe.published_at == FIXED_NOW
        assert await store.count() == 1

    async def test_accepts_mapping_payload(self, service: RecipeService) -> None:
        """Should validate plain mappings like request models."""
        recipe = await service.create_recipe({"name": "Toast"})

        assert recipe.tags == []
        assert recipe.ingredients == []
        assert recipe.instructions == []

    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"name": ""},
            {"name": "   "},
            {"name": "Stew", "tags": "not-a-list"},
            {"name": 42},
        ],
    )
    async def test_rejects_invalid_payload(
        self,
        service: RecipeService,
        store: InMemoryRecipeRepository,
        payload: dict[str, object],
    ) -> None:
        """Should raise a 400 validation error and store nothing."""
        with pytest.raises(RecipeValidationError) as exc_info:
            await service.create_recipe(payload)

        assert exc_info.value.status_code == 400
        assert exc_info.value.details
        assert await store.count() == 0

    async def test_translates_store_failure(self) -> None:
        """Should surface insert failures as RecipeStoreError."""
        store = AsyncMock()
        store.insert.side_effect = StoreError("connection reset")
        service = RecipeService(store)

        with pytest.raises(RecipeStoreError) as exc_info:
            await service.create_recipe({"name": "Stew"})

        assert exc_info.value.status_code == 500
        assert exc_info.value.message == "Error while inserting a new recipe"
        assert "connection reset" not in exc_info.value.message


# =============================================================================
# Read
# =============================================================================


class TestListAndGet:
    """Tests for listing and fetching recipes."""

    async def test_list_empty_store(self, service: RecipeService) -> None:
        """Should return an empty list when nothing is stored."""
        assert await service.list_recipes() == []

    async def test_list_returns_created_recipes(self, service: RecipeService) -> None:
        """Should include every created recipe."""
        first = await service.create_recipe({"name": "A"})
        second = await service.create_recipe({"name": "B"})

        recipes = await service.list_recipes()

        assert [r.id for r in recipes] == [first.id, second.id]

    async def test_get_returns_recipe(self, service: RecipeService) -> None:
        """Should return the recipe with the given id."""
        created = await service.create_recipe({"name": "Curry", "tags": ["spicy"]})

        fetched = await service.get_recipe(created.id or "")

        assert fetched == created

    @pytest.mark.parametrize("recipe_id", [UNKNOWN_ID, "not-an-id", ""])
    async def test_get_unknown_id(self, service: RecipeService, recipe_id: str) -> None:
        """Should raise 404 for ids that do not name a recipe."""
        with pytest.raises(RecipeNotFoundError) as exc_info:
            await service.get_recipe(recipe_id)

        assert exc_info.value.status_code == 404
        assert exc_info.value.recipe_id == recipe_id

    async def test_list_translates_store_failure(self) -> None:
        """Should surface read failures as RecipeStoreError."""
        store = AsyncMock()
        store.find_all.side_effect = StoreError("timeout")

        with pytest.raises(RecipeStoreError):
            await RecipeService(store).list_recipes()


# =============================================================================
# Update / Delete
# =============================================================================


class TestUpdateRecipe:
    """Tests for RecipeService.update_recipe."""

    async def test_overwrites_editable_fields(self, service: RecipeService) -> None:
        """Should replace the four editable fields and keep id and publishedAt."""
        created = await service.create_recipe(
            {"name": "Old", "tags": ["a"], "ingredients": ["x"], "instructions": ["1"]}
        )

        message = await service.update_recipe(
            created.id or "",
            {"name": "New", "tags": ["b"], "ingredients": [], "instructions": ["2"]},
        )
        updated = await service.get_recipe(created.id or "")

        assert message == RECIPE_UPDATED_MESSAGE
        assert updated.id == created.id
        assert updated.published_at == created.published_at
        assert updated.name == "New"
        assert updated.tags == ["b"]
        assert updated.ingredients == []
        assert updated.instructions == ["2"]

    async def test_unknown_id(self, service: RecipeService) -> None:
        """Should raise 404 when no recipe matches."""
        with pytest.raises(RecipeNotFoundError):
            await service.update_recipe(UNKNOWN_ID, {"name": "Ghost"})

    async def test_invalid_payload_leaves_recipe_untouched(
        self, service: RecipeService
    ) -> None:
        """Should validate before writing."""
        created = await service.create_recipe({"name": "Keep"})

        with pytest.raises(RecipeValidationError):
            await service.update_recipe(created.id or "", {"name": ""})

        assert (await service.get_recipe(created.id or "")).name == "Keep"

    async def test_translates_store_failure(self) -> None:
        """Should surface update failures as RecipeStoreError."""
        store = AsyncMock()
        store.update.side_effect = StoreError("boom")

        with pytest.raises(RecipeStoreError):
            await RecipeService(store).update_recipe(UNKNOWN_ID, {"name": "X"})


class TestDeleteRecipe:
    """Tests for RecipeService.delete_recipe."""

    async def test_deletes_recipe(self, service: RecipeService) -> None:
        """Should remove the recipe so later reads return 404."""
        created = await service.create_recipe({"name": "Gone"})

        message = await service.delete_recipe(created.id or "")

        assert message == RECIPE_DELETED_MESSAGE
        with pytest.raises(RecipeNotFoundError):
            await service.get_recipe(created.id or "")

    async def test_second_delete_is_not_found(self, service: RecipeService) -> None:
        """Should raise 404 when deleting the same id twice."""
        created = await service.create_recipe({"name": "Once"})
        await service.delete_recipe(created.id or "")

        with pytest.raises(RecipeNotFoundError):
            await service.delete_recipe(created.id or "")


# =============================================================================
# Search
# =============================================================================


class TestSearchByTag:
    """Tests for RecipeService.search_by_tag."""

    @pytest.fixture
    async def seeded(
        self,
        store: InMemoryRecipeRepository,
        make_recipe: Callable[..., RecipeRecord],
    ) -> None:
        await store.insert_many(
            [
                make_recipe(name="Pizza", tags=["italian", "dinner"]),
                make_recipe(name="Carbonara", tags=["Italian"]),
                make_recipe(name="Tacos", tags=["mexican"]),
                make_recipe(name="Plain", tags=[]),
            ]
        )

    @pytest.mark.usefixtures("seeded")
    @pytest.mark.parametrize("tag", ["italian", "ITALIAN", "Italian"])
    async def test_matches_case_insensitively(
        self, service: RecipeService, tag: str
    ) -> None:
        """Should match tags regardless of case."""
        results = await service.search_by_tag(tag)

        assert sorted(r.name for r in results) == ["Carbonara", "Pizza"]

    @pytest.mark.usefixtures("seeded")
    async def test_no_match_returns_empty_list(self, service: RecipeService) -> None:
        """Should return an empty list rather than raising."""
        assert await service.search_by_tag("french") == []

    @pytest.mark.usefixtures("seeded")
    async def test_partial_tag_does_not_match(self, service: RecipeService) -> None:
        """Should compare whole tags only."""
        assert await service.search_by_tag("ital") == []

    async def test_surrounding_whitespace_is_significant(
        self,
        service: RecipeService,
        store: InMemoryRecipeRepository,
        make_recipe: Callable[..., RecipeRecord],
    ) -> None:
        """Should compare the tag exactly as sent, apart from case."""
        await store.insert(make_recipe(name="Padded", tags=[" Italian "]))
        await store.insert(make_recipe(name="Carbonara", tags=["Italian"]))

        padded = await service.search_by_tag(" ITALIAN ")
        plain = await service.search_by_tag("italian")

        assert [r.name for r in padded] == ["Padded"]
        assert [r.name for r in plain] == ["Carbonara"]

    async def test_blank_tag_rejected(self, service: RecipeService) -> None:
        """Should raise a validation error for a blank tag."""
        with pytest.raises(RecipeValidationError):
            await service.search_by_tag("   ")


# =============================================================================
# Listing cache
# =============================================================================


class DictCache:
    """In-process stand-in for CacheManager."""

    def __init__(self) -> None:
        self.values: dict[str, Any] = {}

    async def get(self, key: str, default: Any = None) -> Any:
        return self.values.get(key, default)

    async def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        self.values[key] = value
        return True

    async def delete(self, key: str) -> bool:
        return self.values.pop(key, None) is not None

    async def incr(self, key: str) -> int:
        self.values[key] = self.values.get(key, 0) + 1
        return self.values[key]


class PausingStore(InMemoryRecipeRepository):
    """Store whose find_all takes its snapshot, then waits to return it."""

    def __init__(self) -> None:
        super().__init__()
        self.snapshot_taken = asyncio.Event()
        self.release = asyncio.Event()

    async def find_all(self) -> list[RecipeRecord]:
        snapshot = await super().find_all()
        self.snapshot_taken.set()
        await self.release.wait()
        return snapshot


class TestListingCache:
    """Tests for the cache-aside listing."""

    async def test_miss_reads_store_and_fills_cache(
        self, store: InMemoryRecipeRepository, mock_cache: MagicMock
    ) -> None:
        """Should populate the cache after reading from the store."""
        service = RecipeService(store, cache=mock_cache, clock=lambda: FIXED_NOW)
        created = await service.create_recipe({"name": "Cached"})

        recipes = await service.list_recipes()

        assert [r.id for r in recipes] == [created.id]
        mock_cache.get.assert_any_await(LIST_VERSION_KEY, default=0)
        mock_cache.get.assert_awaited_with(LIST_CACHE_KEY)
        key, value = mock_cache.set.await_args.args
        assert key == LIST_CACHE_KEY
        assert value["version"] == 0
        assert value["recipes"][0]["id"] == created.id
        assert value["recipes"][0]["published_at"] == (
            FIXED_NOW.isoformat().replace("+00:00", "Z")
        )

    async def test_hit_skips_store(
        self, make_recipe: Callable[..., RecipeRecord]
    ) -> None:
        """Should serve the listing from the cache when its generation matches."""
        cached = make_recipe(name="From cache").model_copy(
            update={"id": UNKNOWN_ID}
        )
        cache = DictCache()
        cache.values[LIST_VERSION_KEY] = 4
        cache.values[LIST_CACHE_KEY] = {
            "version": 4,
            "recipes": [cached.model_dump(mode="json")],
        }
        store = AsyncMock()
        service = RecipeService(store, cache=cache)

        recipes = await service.list_recipes()

        assert recipes == [cached]
        store.find_all.assert_not_awaited()

    async def test_entry_from_older_generation_is_ignored(
        self,
        store: InMemoryRecipeRepository,
        make_recipe: Callable[..., RecipeRecord],
    ) -> None:
        cache = DictCache()
        cache.values[LIST_VERSION_KEY] = 5
        cache.values[LIST_CACHE_KEY] = {
            "version": 4,
            "recipes": [make_recipe(name="Stale").model_dump(mode="json")],
        }
        await store.insert(make_recipe(name="Fresh"))
        service = RecipeService(store, cache=cache)

        recipes = await service.list_recipes()

        assert [r.name for r in recipes] == ["Fresh"]
        assert cache.values[LIST_CACHE_KEY]["version"] == 5

    @pytest.mark.parametrize(
        "entry",
        [
            [{"unexpected": True}],
            {"version": 0, "recipes": [{"unexpected": True}]},
            {"version": 0},
        ],
    )
    async def test_malformed_cache_entry_falls_back_to_store(
        self, store: InMemoryRecipeRepository, entry: Any
    ) -> None:
        """Should ignore cache contents that are not a recipe listing."""
        cache = DictCache()
        cache.values[LIST_CACHE_KEY] = entry
        service = RecipeService(store, cache=cache)

        assert await service.list_recipes() == []

    async def test_write_during_listing_is_not_hidden(self) -> None:
        """Should not serve a snapshot taken before a completed create."""
        store = PausingStore()
        service = RecipeService(store, cache=DictCache())

        listing = asyncio.create_task(service.list_recipes())
        await store.snapshot_taken.wait()
        created = await service.create_recipe({"name": "Pizza", "tags": ["Italian"]})
        store.release.set()
        assert await listing == []

        recipes = await service.list_recipes()
        found = await service.search_by_tag("italian")

        assert [r.id for r in recipes] == [created.id]
        assert [r.id for r in found] == [created.id]

    async def test_mutations_invalidate_listing(
        self, store: InMemoryRecipeRepository, mock_cache: MagicMock
    ) -> None:
        """Should bump the generation and drop the listing on every mutation."""
        service = RecipeService(store, cache=mock_cache)

        created = await service.create_recipe({"name": "Draft"})
        await service.update_recipe(created.id or "", {"name": "Final"})
        await service.delete_recipe(created.id or "")

        assert mock_cache.incr.await_count == 3
        mock_cache.incr.assert_awaited_with(LIST_VERSION_KEY)
        assert mock_cache.delete.await_count == 3
        mock_cache.delete.assert_awaited_with(LIST_CACHE_KEY)

    async def test_failed_mutation_keeps_listing(self, mock_cache: MagicMock) -> None:
        """Should not invalidate when nothing changed."""
        service = RecipeService(InMemoryRecipeRepository(), cache=mock_cache)

        with pytest.raises(RecipeNotFoundError):
            await service.delete_recipe(UNKNOWN_ID)

        mock_cache.incr.assert_not_awaited()
        mock_cache.delete.assert_not_awaited()
