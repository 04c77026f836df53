"""Rate limiting using SlowAPI.

Counters live in Redis when ``REDIS_URI`` is configured and in process
memory otherwise. A default limit applies to every route through
``SlowAPIMiddleware``; ``/signin`` gets a stricter per-IP limit.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import status
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from recipes_api.core.exceptions import render_error
from recipes_api.observability.logging import get_logger


if TYPE_CHECKING:
    from fastapi import FastAPI
    from starlette.requests import Request
    from starlette.responses import Response

    from recipes_api.core.config import Settings

logger = get_logger(__name__)


def auth_rate_limit_key(request: Request) -> str:
    """Always key sign-in attempts by client address."""
    return f"auth:{get_remote_address(request)}"


def create_limiter(settings: Settings) -> Limiter:
    return Limiter(
        key_func=get_remote_address,
        default_limits=[settings.rate_limiting.default],
        storage_uri=settings.rate_limit_storage_uri,
        strategy="fixed-window",
        headers_enabled=True,
        enabled=settings.rate_limiting.enabled,
    )


def rate_limit_exceeded_handler(request: Request, exc: Exception) -> Response:
    """Render a 429 in the shared error format.

    Kept synchronous so SlowAPIMiddleware can call it directly.
    """
    detail = str(exc.detail) if isinstance(exc, RateLimitExceeded) else str(exc)
    logger.warning(
        "Rate limit exceeded",
        path=request.url.path,
        method=request.method,
        client_ip=get_remote_address(request),
        limit=detail,
    )
    return render_error(
        request,
        status.HTTP_429_TOO_MANY_REQUESTS,
        "RATE_LIMIT_EXCEEDED",
        f"Too many requests: {detail}",
        headers={"Retry-After": "60"},
    )


def setup_rate_limiting(app: FastAPI, limiter: Limiter) -> None:
    """Attach the limiter, its middleware and its 429 handler to ``app``."""
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)
    logger.info("Rate limiting configured", enabled=limiter.enabled)
