"""Redis-backed helpers.

This module provides:
- Redis client lifecycle and health checks
- A JSON cache manager for the recipe listing
- Rate limiting with SlowAPI
"""

from recipes_api.cache.manager import CacheManager
from recipes_api.cache.redis import check_redis_health, close_redis, connect_redis


__all__ = [
    "CacheManager",
    "check_redis_health",
    "close_redis",
    "connect_redis",
]
