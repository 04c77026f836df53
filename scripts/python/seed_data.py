"""Load the recipe and user seed files into MongoDB.

Reads ``MONGO_URI`` and ``MONGO_DATABASE`` like the API does. Recipes are
only inserted into an empty collection unless ``--force`` is given; users
are upserted by username.

Usage:
    python -m scripts.python.seed_data --recipes data/recipes.json --users data/users.json
"""

from __future__ import annotations

import argparse
import asyncio
import sys

from recipes_api.core.config import Settings, StoreBackend
from recipes_api.core.config.settings import AuthSettings, DatabaseSettings
from recipes_api.database.connection import close_mongo, connect_mongo
from recipes_api.database.repositories.recipe import MongoRecipeRepository
from recipes_api.database.repositories.user import MongoUserRepository
from recipes_api.database.seed import load_recipes_file, load_users_file
from recipes_api.observability.logging import get_logger, setup_logging


logger = get_logger(__name__)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed MongoDB with recipes and users")
    parser.add_argument("--recipes", default="data/recipes.json", help="Recipes JSON file")
    parser.add_argument("--users", default="data/users.json", help="Users JSON file")
    parser.add_argument(
        "--force",
        action="store_true",
        help="Insert recipes even if the collection already has documents",
    )
    return parser.parse_args(argv)


async def seed(settings: Settings, args: argparse.Namespace) -> None:
    client = await connect_mongo(
        settings.MONGO_URI or "",
        server_selection_timeout_ms=settings.database.server_selection_timeout_ms,
    )
    try:
        database = client[settings.MONGO_DATABASE or ""]
        recipes = MongoRecipeRepository(database[settings.database.recipes_collection])
        users = MongoUserRepository(database[settings.database.users_collection])

        existing = await recipes.count()
        if existing and not args.force:
            logger.info("Recipes already present, skipping", count=existing)
        else:
            inserted = await recipes.insert_many(load_recipes_file(args.recipes))
            logger.info("Inserted recipes", count=inserted)

        await users.ensure_indexes()
        for user in load_users_file(args.users, settings.auth.password_rounds):
            await users.upsert(user)
        logger.info("Users seeded")
    finally:
        await close_mongo(client)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    # Sessions are irrelevant here, so Redis is not required.
    settings = Settings(
        database=DatabaseSettings(backend=StoreBackend.MONGO),
        auth=AuthSettings(enabled=False),
    )
    setup_logging(settings.logging.level, "text")
    asyncio.run(seed(settings, args))
    return 0


if __name__ == "__main__":
    sys.exit(main())
