"""Authentication exceptions.

All of them render as 401 through the application exception handler.
"""

from __future__ import annotations

from recipes_api.core.exceptions import UnauthorizedException


class AuthError(UnauthorizedException):
    """Base class for authentication failures."""


class InvalidCredentialsError(AuthError):
    """Unknown user or wrong password."""

    def __init__(self) -> None:
        super().__init__("Invalid username or password")


class SessionMissingError(AuthError):
    """No session token was presented."""

    def __init__(self) -> None:
        super().__init__("Authentication required")


class SessionInvalidError(AuthError):
    """The token is unknown, revoked or expired."""

    def __init__(self) -> None:
        super().__init__("Session is invalid or has expired")
