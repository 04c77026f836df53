"""Recipe identifier helpers."""

from __future__ import annotations

from bson import ObjectId
from bson.errors import InvalidId

from recipes_api.database.exceptions import RecordNotFoundError


_HEX_ID_LENGTH = 24


def new_id() -> str:
    """Generate a fresh identifier in the 24-hex ObjectId form."""
    return str(ObjectId())


def parse_object_id(recipe_id: str) -> ObjectId:
    """Parse a client-supplied id.

    Only the 24-hex form is accepted; anything else cannot name a stored
    record and raises RecordNotFoundError.
    """
    if len(recipe_id) != _HEX_ID_LENGTH:
        raise RecordNotFoundError(recipe_id)
    try:
        return ObjectId(recipe_id)
    except (InvalidId, TypeError):
        raise RecordNotFoundError(recipe_id) from None
