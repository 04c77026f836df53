"""Application factory.

``create_app`` builds a FastAPI instance from settings: exception handlers,
middleware, rate limiting, routers and observability. Connections are not
opened here; the lifespan builds the application context on startup.
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from recipes_api.api.router import build_router
from recipes_api.cache.rate_limit import create_limiter, setup_rate_limiting
from recipes_api.core.config import Settings, get_settings
from recipes_api.core.events import lifespan
from recipes_api.core.exceptions import setup_exception_handlers
from recipes_api.core.middleware import (
    AccessLogMiddleware,
    RequestIDMiddleware,
    SecurityHeadersMiddleware,
)
from recipes_api.observability.metrics import setup_metrics
from recipes_api.observability.tracing import setup_tracing


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure a FastAPI application instance.

    Args:
        settings: Optional settings override. If not provided, uses get_settings().

    Returns:
        Configured FastAPI application instance.
    """
    if settings is None:
        settings = get_settings()

    docs_enabled = not settings.is_production
    app = FastAPI(
        title=settings.app.name,
        version=settings.app.version,
        description="CRUD API for recipes with tag search and session sign-in",
        lifespan=lifespan,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
        debug=settings.app.debug,
    )
    app.state.settings = settings

    setup_exception_handlers(app)

    # Added first so it runs innermost, after request ids are assigned.
    limiter = create_limiter(settings)
    setup_rate_limiting(app, limiter)

    _setup_middleware(app, settings)
    app.include_router(build_router(settings, limiter), prefix=settings.api.prefix)
    _setup_root(app, settings)

    setup_tracing(app, settings)
    setup_metrics(app, settings)

    return app


def _setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Configure middleware stack.

    Middleware runs in reverse order of addition. On the way in:
    security headers, request id, access log, GZip, CORS, rate limiting.
    """
    if settings.api.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.api.cors_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "DELETE"],
            allow_headers=["*"],
            expose_headers=["X-Request-ID", "X-Process-Time"],
        )

    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(
        AccessLogMiddleware,
        quiet_paths={
            f"{settings.api.prefix}/health",
            f"{settings.api.prefix}/ready",
            f"{settings.api.prefix}/metrics",
            "/favicon.ico",
        },
    )
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)


def _setup_root(app: FastAPI, settings: Settings) -> None:
    @app.get("/", include_in_schema=False)
    async def root() -> dict[str, str]:
        return {
            "service": settings.app.name,
            "version": settings.app.version,
            "docs": "disabled" if settings.is_production else "/docs",
        }
