"""MongoDB database layer.

This module provides:
- Client lifecycle and health checks
- Recipe and user repositories (MongoDB and in-memory)
- Seed file loading
"""

from recipes_api.database.connection import check_mongo_health, close_mongo, connect_mongo
from recipes_api.database.exceptions import RecordNotFoundError, StoreError
from recipes_api.database.models import RecipeRecord, UserRecord


__all__ = [
    "RecipeRecord",
    "RecordNotFoundError",
    "StoreError",
    "UserRecord",
    "check_mongo_health",
    "close_mongo",
    "connect_mongo",
]
