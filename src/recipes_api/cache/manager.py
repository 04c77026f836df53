"""JSON cache on top of an injected Redis client.

Cache failures are logged and reported as misses; they never fail the
caller.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import orjson

from recipes_api.observability.logging import get_logger


if TYPE_CHECKING:
    from redis.asyncio import Redis

logger = get_logger(__name__)


class CacheManager:
    """Namespaced get/set/delete of JSON values."""

    def __init__(self, client: Redis, prefix: str = "recipes", ttl: int = 300) -> None:
        """Initialize cache manager.

        Args:
            client: Redis client owned by the application context.
            prefix: Prefix joined to every key with ``:``.
            ttl: Default time to live in seconds.
        """
        self._client = client
        self.prefix = prefix
        self.ttl = ttl

    def make_key(self, key: str) -> str:
        return f"{self.prefix}:{key}"

    async def get(self, key: str, default: Any = None) -> Any:
        """Return the decoded value, or ``default`` on a miss or error."""
        try:
            value = await self._client.get(self.make_key(key))
        except Exception:
            logger.exception("Cache get error", key=key)
            return default
        if value is None:
            logger.debug("Cache miss", key=key)
            return default
        try:
            return orjson.loads(value)
        except orjson.JSONDecodeError:
            logger.warning("Discarding undecodable cache entry", key=key)
            return default

    async def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        """Store ``value`` as JSON with an expiry.

        Returns:
            True if the value was written, False otherwise.
        """
        try:
            await self._client.set(
                self.make_key(key), orjson.dumps(value), ex=ttl or self.ttl
            )
        except Exception:
            logger.exception("Cache set error", key=key)
            return False
        return True

    async def delete(self, key: str) -> bool:
        """Drop a key. Returns True if something was deleted."""
        try:
            deleted = await self._client.delete(self.make_key(key))
        except Exception:
            logger.exception("Cache delete error", key=key)
            return False
        return deleted > 0

    async def incr(self, key: str) -> int | None:
        """Atomically increment an integer counter that never expires.

        Returns:
            The new value, or None if Redis could not be reached.
        """
        try:
            return await self._client.incr(self.make_key(key))
        except Exception:
            logger.exception("Cache incr error", key=key)
            return None
