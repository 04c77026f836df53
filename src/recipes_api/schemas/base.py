"""Base schema configuration for the API's Pydantic models.

Usage:
    - APIRequest: incoming request bodies (unknown fields are ignored)
    - APIResponse: outgoing response bodies (unknown fields are rejected)
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _BaseSchema(BaseModel):
    """Shared camelCase configuration. Inherit from a public subclass."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        validate_default=True,
        validate_assignment=True,
        serialize_by_alias=True,
    )


class APIRequest(_BaseSchema):
    """Base class for incoming API request schemas.

    Clients may send properties we do not recognize, such as ``id`` or
    ``publishedAt`` on a recipe body; those are dropped.
    """

    model_config = ConfigDict(extra="ignore")


class APIResponse(_BaseSchema):
    """Base class for outgoing API response schemas."""

    model_config = ConfigDict(extra="forbid")
