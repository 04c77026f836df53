"""Application lifespan.

Startup configures logging and builds the application context. A failure to
reach MongoDB or Redis, or to read a seed file, propagates out of the
lifespan so the server never starts serving. Shutdown closes the context and
flushes traces.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from recipes_api.core.context import build_app_context
from recipes_api.observability.logging import get_logger, setup_logging
from recipes_api.observability.tracing import shutdown_tracing


if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from fastapi import FastAPI

    from recipes_api.core.config import Settings

logger = get_logger(__name__)


async def _startup(app: FastAPI, settings: Settings) -> None:
    setup_logging(
        log_level=settings.logging.level,
        log_format=settings.logging.format,
        is_development=settings.is_development,
        log_file=settings.logging.file,
    )
    logger.info(
        "Starting application",
        app_name=settings.app.name,
        environment=settings.APP_ENV,
        debug=settings.app.debug,
    )

    try:
        app.state.context = await build_app_context(settings)
    except Exception:
        logger.exception("Failed to initialize application context")
        raise

    logger.info("Application startup complete")


async def _shutdown(app: FastAPI) -> None:
    logger.info("Shutting down application")

    context = getattr(app.state, "context", None)
    if context is not None:
        await context.close()
        app.state.context = None

    shutdown_tracing()
    logger.info("Application shutdown complete")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Build the context on startup and release it on shutdown.

    Settings are taken from ``app.state.settings``, set by ``create_app``.
    """
    settings: Settings = app.state.settings
    await _startup(app, settings)
    try:
        yield
    finally:
        await _shutdown(app)
