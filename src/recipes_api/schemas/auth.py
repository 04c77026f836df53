"""Session authentication schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from recipes_api.schemas.base import APIRequest, APIResponse


class SignInRequest(APIRequest):
    """Credentials posted to ``/signin``."""

    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1)


class SessionResponse(APIResponse):
    """A freshly issued session.

    The token is also set as an HTTP-only cookie; clients that cannot keep
    cookies send it back as ``Authorization: Bearer <token>``.
    """

    token: str
    username: str
    expires_at: datetime
