"""Access logging and timing middleware.

Binds method, path and client address to the logging context, logs one line
per completed request with its duration, sets ``X-Process-Time`` and warns
about requests slower than the threshold.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from recipes_api.observability.logging import bind_context, get_logger


if TYPE_CHECKING:
    from starlette.requests import Request
    from starlette.responses import Response
    from starlette.types import ASGIApp

logger = get_logger(__name__)

SLOW_REQUEST_THRESHOLD = 1.0  # seconds

DEFAULT_QUIET_PATHS = frozenset({"/health", "/ready", "/metrics", "/favicon.ico"})


def client_ip(request: Request) -> str:
    """First hop of X-Forwarded-For, then X-Real-IP, then the socket peer."""
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip
    return request.client.host if request.client else "unknown"


class AccessLogMiddleware(BaseHTTPMiddleware):
    """One structured log line and a timing header per request."""

    def __init__(
        self,
        app: ASGIApp,
        *,
        quiet_paths: frozenset[str] | set[str] = DEFAULT_QUIET_PATHS,
        slow_threshold: float = SLOW_REQUEST_THRESHOLD,
        header_name: str = "X-Process-Time",
    ) -> None:
        super().__init__(app)
        self.quiet_paths = frozenset(quiet_paths)
        self.slow_threshold = slow_threshold
        self.header_name = header_name

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        path = request.url.path
        bind_context(method=request.method, path=path, client_ip=client_ip(request))

        start = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start
        elapsed_ms = round(elapsed * 1000, 2)

        response.headers[self.header_name] = f"{elapsed_ms}ms"

        if elapsed > self.slow_threshold:
            logger.warning(
                "Slow request detected",
                status_code=response.status_code,
                process_time_ms=elapsed_ms,
                threshold_ms=self.slow_threshold * 1000,
            )
        elif path not in self.quiet_paths:
            logger.info(
                "Request completed",
                status_code=response.status_code,
                process_time_ms=elapsed_ms,
            )
        return response
