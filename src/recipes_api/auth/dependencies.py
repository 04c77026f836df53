"""FastAPI security dependencies.

The session token is read from ``Authorization: Bearer <token>`` first and
from the session cookie second. Mutating recipe endpoints are served by
``SessionGuardedRoute``, which checks the session before the request body is
read; the check is a no-op when authentication is disabled.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated, Any

from fastapi import Depends, Request
from fastapi.routing import APIRoute
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from fastapi.security.utils import get_authorization_scheme_param

from recipes_api.api.dependencies import get_app_context
from recipes_api.auth.models import Principal
from recipes_api.observability.logging import bind_context


if TYPE_CHECKING:
    from collections.abc import Callable, Coroutine

    from fastapi import Response


MUTATING_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})

bearer_scheme = HTTPBearer(
    scheme_name="Session",
    description="Session token returned by /signin",
    auto_error=False,
)


def _token_from_request(request: Request, cookie_name: str) -> str | None:
    scheme, credentials = get_authorization_scheme_param(
        request.headers.get("Authorization")
    )
    if scheme.lower() == "bearer" and credentials:
        return credentials
    return request.cookies.get(cookie_name) or None


async def get_session_token(
    request: Request,
    _credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ],
) -> str | None:
    """Return the presented session token, if any."""
    context = await get_app_context(request)
    return _token_from_request(request, context.settings.sessions.cookie_name)


async def authorize_request(request: Request) -> Principal | None:
    """Resolve the request's session to its principal.

    The principal is kept on ``request.state`` so later dependencies reuse
    it. Returns None when authentication is disabled.

    Raises:
        AuthError: 401 if the token is missing, unknown or expired.
    """
    if hasattr(request.state, "principal"):
        return request.state.principal

    context = await get_app_context(request)
    principal = None
    if context.settings.auth.enabled and context.auth_service is not None:
        token = _token_from_request(request, context.settings.sessions.cookie_name)
        principal = await context.auth_service.validate_session(token)
        bind_context(username=principal.username)
    request.state.principal = principal
    return principal


async def require_session(
    request: Request,
    _credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ],
) -> Principal | None:
    """Principal of a mutating request; documents the bearer scheme."""
    return await authorize_request(request)


class SessionGuardedRoute(APIRoute):
    """Route that authorizes mutating methods before the body is parsed.

    Unauthenticated writes are answered with 401 whatever the body holds,
    malformed JSON included.
    """

    def get_route_handler(
        self,
    ) -> Callable[[Request], Coroutine[Any, Any, Response]]:
        handler = super().get_route_handler()
        if not self.methods & MUTATING_METHODS:
            return handler

        async def guarded_handler(request: Request) -> Response:
            await authorize_request(request)
            return await handler(request)

        return guarded_handler


SessionGuard = Annotated[Principal | None, Depends(require_session)]
