"""MongoDB client lifecycle.

The client is created once during startup, verified with ``ping`` and owned
by the application context. Nothing here keeps module-level state.
"""

from __future__ import annotations

from pymongo import AsyncMongoClient
from pymongo.errors import PyMongoError

from recipes_api.observability.logging import get_logger


logger = get_logger(__name__)


async def connect_mongo(
    uri: str,
    *,
    server_selection_timeout_ms: int = 5000,
    app_name: str | None = None,
) -> AsyncMongoClient:
    """Create a client and verify the server answers ``ping``.

    Raises:
        PyMongoError: If the server cannot be reached. The client is closed
            before the error propagates.
    """
    logger.info("Initializing MongoDB client")
    client: AsyncMongoClient = AsyncMongoClient(
        uri,
        tz_aware=True,
        appname=app_name,
        serverSelectionTimeoutMS=server_selection_timeout_ms,
    )
    try:
        await client.admin.command("ping")
    except PyMongoError:
        logger.exception("Failed to connect to MongoDB")
        await client.close()
        raise
    logger.info("MongoDB connection established successfully")
    return client


async def close_mongo(client: AsyncMongoClient) -> None:
    logger.info("Closing MongoDB client")
    await client.close()


async def check_mongo_health(client: AsyncMongoClient | None) -> str:
    """Return ``healthy``, ``unhealthy`` or ``not_configured``."""
    if client is None:
        return "not_configured"
    try:
        await client.admin.command("ping")
    except PyMongoError:
        logger.warning("MongoDB health check failed")
        return "unhealthy"
    return "healthy"
