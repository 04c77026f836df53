"""Session authentication over the user and session stores."""

from __future__ import annotations

import secrets
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from recipes_api.auth.exceptions import (
    InvalidCredentialsError,
    SessionInvalidError,
    SessionMissingError,
)
from recipes_api.auth.models import Principal, Session
from recipes_api.auth.passwords import hash_password, verify_password
from recipes_api.core.exceptions import StoreException
from recipes_api.database.exceptions import StoreError
from recipes_api.observability.logging import get_logger


if TYPE_CHECKING:
    from collections.abc import Callable

    from recipes_api.auth.sessions import SessionStore
    from recipes_api.database.repositories.protocol import UserStore

logger = get_logger(__name__)

# Compared against when the username is unknown so both paths hash once.
_DUMMY_HASH = hash_password(secrets.token_hex(16))


def generate_token() -> str:
    """Opaque URL-safe session token."""
    return secrets.token_urlsafe(32)


class AuthService:
    """Issue, validate, refresh and revoke session tokens."""

    def __init__(
        self,
        users: UserStore,
        sessions: SessionStore,
        ttl_seconds: int = 3600,
        token_factory: Callable[[], str] = generate_token,
    ) -> None:
        self._users = users
        self._sessions = sessions
        self.ttl_seconds = ttl_seconds
        self._token_factory = token_factory

    async def authenticate(self, username: str, password: str) -> Session:
        """Check credentials and open a new session.

        Raises:
            InvalidCredentialsError: Unknown user or wrong password.
            StoreException: A backing store failed.
        """
        try:
            user = await self._users.find_by_username(username)
        except StoreError as e:
            raise StoreException("The user store is unavailable") from e

        stored_hash = user.password_hash if user else _DUMMY_HASH
        if not verify_password(password, stored_hash) or user is None:
            logger.info("Rejected sign-in", username=username)
            raise InvalidCredentialsError

        session = await self._open_session(user.username)
        logger.info("User signed in", username=user.username)
        return session

    async def validate_session(self, token: str | None) -> Principal:
        """Resolve a token to its principal.

        Raises:
            SessionMissingError: No token was supplied.
            SessionInvalidError: The token is unknown or expired.
        """
        if not token:
            raise SessionMissingError
        try:
            username = await self._sessions.get_username(token)
        except StoreError as e:
            raise StoreException("The session store is unavailable") from e
        if username is None:
            raise SessionInvalidError
        return Principal(username=username)

    async def invalidate(self, token: str) -> None:
        """Revoke a token. Revoking an unknown token is a no-op."""
        try:
            await self._sessions.delete(token)
        except StoreError as e:
            raise StoreException("The session store is unavailable") from e

    async def refresh(self, token: str | None) -> Session:
        """Swap a live token for a new one with a fresh expiry."""
        principal = await self.validate_session(token)
        session = await self._open_session(principal.username)
        # validate_session guarantees a non-empty token here
        await self.invalidate(token or "")
        logger.info("Session refreshed", username=principal.username)
        return session

    async def _open_session(self, username: str) -> Session:
        token = self._token_factory()
        try:
            await self._sessions.save(token, username, self.ttl_seconds)
        except StoreError as e:
            raise StoreException("The session store is unavailable") from e
        return Session(
            token=token,
            username=username,
            expires_at=datetime.now(UTC) + timedelta(seconds=self.ttl_seconds),
        )
