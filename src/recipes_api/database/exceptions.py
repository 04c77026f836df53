"""Store-level exceptions raised by every repository implementation."""

from __future__ import annotations


class StoreError(Exception):
    """The backing store failed to complete an operation."""


class RecordNotFoundError(StoreError):
    """No record matches the given identifier."""

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__(f"No record with identifier '{identifier}'")
