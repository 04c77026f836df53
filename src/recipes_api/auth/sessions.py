"""Session token stores.

A session is an opaque token mapped to a username with a time to live.
Redis expires keys on its own; the in-memory store checks expiry on read.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from redis.exceptions import RedisError

from recipes_api.database.exceptions import StoreError
from recipes_api.observability.logging import get_logger


if TYPE_CHECKING:
    from collections.abc import Callable

    from redis.asyncio import Redis

logger = get_logger(__name__)


@runtime_checkable
class SessionStore(Protocol):
    """Token to username mapping with expiry."""

    async def save(self, token: str, username: str, ttl_seconds: int) -> None:
        """Store a new token."""
        ...

    async def get_username(self, token: str) -> str | None:
        """Return the owner of a live token, or None."""
        ...

    async def delete(self, token: str) -> None:
        """Revoke a token. Unknown tokens are ignored."""
        ...


class RedisSessionStore:
    """SessionStore keeping ``{prefix}:{token}`` keys in Redis."""

    def __init__(self, client: Redis, prefix: str = "session") -> None:
        self._client = client
        self._prefix = prefix

    def _key(self, token: str) -> str:
        return f"{self._prefix}:{token}"

    async def save(self, token: str, username: str, ttl_seconds: int) -> None:
        try:
            await self._client.set(self._key(token), username, ex=ttl_seconds)
        except RedisError as e:
            logger.exception("Failed to store session")
            msg = "Session store unavailable"
            raise StoreError(msg) from e

    async def get_username(self, token: str) -> str | None:
        try:
            return await self._client.get(self._key(token))
        except RedisError as e:
            logger.exception("Failed to read session")
            msg = "Session store unavailable"
            raise StoreError(msg) from e

    async def delete(self, token: str) -> None:
        try:
            await self._client.delete(self._key(token))
        except RedisError as e:
            logger.exception("Failed to delete session")
            msg = "Session store unavailable"
            raise StoreError(msg) from e


class InMemorySessionStore:
    """SessionStore for single-process deployments and tests."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._sessions: dict[str, tuple[str, float]] = {}

    async def save(self, token: str, username: str, ttl_seconds: int) -> None:
        self._sessions[token] = (username, self._clock() + ttl_seconds)

    async def get_username(self, token: str) -> str | None:
        entry = self._sessions.get(token)
        if entry is None:
            return None
        username, expires_at = entry
        if self._clock() >= expires_at:
            del self._sessions[token]
            return None
        return username

    async def delete(self, token: str) -> None:
        self._sessions.pop(token, None)
