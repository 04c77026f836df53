"""Redis client lifecycle for sessions, the listing cache and rate limits."""

from __future__ import annotations

import redis.asyncio as redis

from recipes_api.observability.logging import get_logger


logger = get_logger(__name__)


async def connect_redis(uri: str, *, max_connections: int = 20) -> redis.Redis:
    """Create a client from ``uri`` and verify it with ``PING``.

    Raises:
        redis.RedisError: If the server cannot be reached. The client is
            closed before the error propagates.
    """
    logger.info("Initializing Redis client")
    client = redis.Redis.from_url(
        uri, decode_responses=True, max_connections=max_connections
    )
    try:
        await client.ping()
    except redis.RedisError:
        logger.exception("Failed to connect to Redis")
        await client.aclose()
        raise
    logger.info("Redis connection established successfully")
    return client


async def close_redis(client: redis.Redis) -> None:
    logger.info("Closing Redis client")
    await client.aclose()


async def check_redis_health(client: redis.Redis | None) -> str:
    """Return ``healthy``, ``unhealthy`` or ``not_configured``."""
    if client is None:
        return "not_configured"
    try:
        await client.ping()
    except redis.RedisError:
        logger.warning("Redis health check failed")
        return "unhealthy"
    return "healthy"
