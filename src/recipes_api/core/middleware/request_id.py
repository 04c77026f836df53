"""Request ID middleware.

Each request gets an id, either the caller's ``X-Request-ID`` (when it looks
sane) or a fresh UUID. The id lands on ``request.state``, in the logging
context, in error bodies and in the response header.
"""

from __future__ import annotations

import re
import uuid
from typing import TYPE_CHECKING

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from recipes_api.observability.logging import bind_context, clear_context


if TYPE_CHECKING:
    from starlette.requests import Request
    from starlette.responses import Response
    from starlette.types import ASGIApp

_ACCEPTED_ID = re.compile(r"^[A-Za-z0-9._-]{1,128}$")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Propagate or generate a request id."""

    def __init__(self, app: ASGIApp, header_name: str = "X-Request-ID") -> None:
        super().__init__(app)
        self.header_name = header_name

    def _resolve_id(self, request: Request) -> str:
        incoming = request.headers.get(self.header_name)
        if incoming and _ACCEPTED_ID.match(incoming):
            return incoming
        return uuid.uuid4().hex

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        clear_context()
        request_id = self._resolve_id(request)
        request.state.request_id = request_id
        bind_context(request_id=request_id)

        response = await call_next(request)
        response.headers[self.header_name] = request_id
        return response
