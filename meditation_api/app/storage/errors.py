"""
Exceptions raised by meditation stores.

Every backend reports failures through this hierarchy so that callers
can handle them without knowing which store is in use.  Stores never
retry and never return placeholder records: a missing record is always
a ``NotFoundError``.
"""

from typing import Optional


class StoreError(Exception):
    """Base class for all storage failures."""


class NotFoundError(StoreError):
    """The owner has no records, or none of them has the requested id."""

    def __init__(self, owner_id: str, meditation_id: Optional[str] = None) -> None:
        self.owner_id = owner_id
        self.meditation_id = meditation_id
        if meditation_id is None:
            message = f"No user with id {owner_id} was found"
        else:
            message = f"No meditation with id {meditation_id} was found"
        super().__init__(message)


class WriteFailureError(StoreError):
    """The backend rejected or could not complete a write, delete or batch."""


class ReadFailureError(StoreError):
    """The backend query failed or returned an undecodable item."""
