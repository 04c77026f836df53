"""Session endpoints: sign in, refresh and sign out.

Only mounted when authentication is enabled. The issued token is returned in
the body and set as an HTTP-only cookie.
"""

# Annotations stay evaluated here: the rate limit decorator wraps ``signin``
# and FastAPI would resolve string annotations against the wrapper's module.

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response
from slowapi import Limiter

from recipes_api.api.dependencies import get_app_context, get_auth_service
from recipes_api.auth.dependencies import get_session_token
from recipes_api.auth.models import Session
from recipes_api.auth.service import AuthService
from recipes_api.cache.rate_limit import auth_rate_limit_key
from recipes_api.core.config.settings import SessionSettings
from recipes_api.core.context import AppContext
from recipes_api.schemas.auth import SessionResponse, SignInRequest
from recipes_api.schemas.recipe import MessageResponse


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
ContextDep = Annotated[AppContext, Depends(get_app_context)]
SessionToken = Annotated[str | None, Depends(get_session_token)]

SIGNED_OUT_MESSAGE = "Signed out"


def _set_session_cookie(
    response: Response, session: Session, settings: SessionSettings
) -> None:
    response.set_cookie(
        key=settings.cookie_name,
        value=session.token,
        max_age=settings.ttl_seconds,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
    )


def _to_response(session: Session) -> SessionResponse:
    return SessionResponse(
        token=session.token,
        username=session.username,
        expires_at=session.expires_at,
    )


async def signin(
    request: Request,
    response: Response,
    credentials: SignInRequest,
    auth: AuthServiceDep,
    context: ContextDep,
) -> SessionResponse:
    """Exchange a username and password for a session token."""
    # ``request`` is read by the rate limiter wrapping this endpoint.
    session = await auth.authenticate(credentials.username, credentials.password)
    _set_session_cookie(response, session, context.settings.sessions)
    return _to_response(session)


async def refresh(
    response: Response,
    token: SessionToken,
    auth: AuthServiceDep,
    context: ContextDep,
) -> SessionResponse:
    """Replace the current session token with a new one."""
    session = await auth.refresh(token)
    _set_session_cookie(response, session, context.settings.sessions)
    return _to_response(session)


async def signout(
    response: Response,
    token: SessionToken,
    auth: AuthServiceDep,
    context: ContextDep,
) -> MessageResponse:
    """Revoke the current session and clear the cookie."""
    await auth.validate_session(token)
    await auth.invalidate(token or "")
    response.delete_cookie(context.settings.sessions.cookie_name)
    return MessageResponse(message=SIGNED_OUT_MESSAGE)


def build_router(limiter: Limiter, signin_limit: str) -> APIRouter:
    """Assemble the session routes with a per-IP limit on ``/signin``."""
    router = APIRouter(tags=["auth"])
    router.add_api_route(
        "/signin",
        limiter.limit(signin_limit, key_func=auth_rate_limit_key)(signin),
        methods=["POST"],
        response_model=SessionResponse,
        summary="Sign in",
    )
    router.add_api_route(
        "/refresh",
        refresh,
        methods=["POST"],
        response_model=SessionResponse,
        summary="Refresh the session token",
    )
    router.add_api_route(
        "/signout",
        signout,
        methods=["POST"],
        response_model=MessageResponse,
        summary="Sign out",
    )
    return router
