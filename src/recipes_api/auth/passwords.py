"""Salted bcrypt password hashes for the ``users`` collection."""

from __future__ import annotations

import bcrypt

from recipes_api.observability.logging import get_logger


logger = get_logger(__name__)

DEFAULT_ROUNDS = 12

# bcrypt only reads the first 72 bytes of a password.
_MAX_PASSWORD_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:_MAX_PASSWORD_BYTES]


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Hash a password with a fresh salt.

    Args:
        password: Plain text password.
        rounds: bcrypt work factor (log2 of the iteration count).

    Returns:
        The ``$2b$`` modular-crypt string to store.
    """
    return bcrypt.hashpw(_encode(password), bcrypt.gensalt(rounds=rounds)).decode(
        "ascii"
    )


def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against a stored bcrypt hash.

    A stored value that is not a bcrypt hash never verifies.
    """
    try:
        return bcrypt.checkpw(_encode(password), password_hash.encode("ascii"))
    except ValueError:
        logger.warning("Stored password hash is not a bcrypt hash")
        return False
