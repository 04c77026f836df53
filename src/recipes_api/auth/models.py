"""Authentication value objects."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class Principal(BaseModel):
    """The user a valid session belongs to."""

    model_config = ConfigDict(frozen=True)

    username: str


class Session(BaseModel):
    """An issued session token and when it stops being accepted."""

    model_config = ConfigDict(frozen=True)

    token: str
    username: str
    expires_at: datetime
