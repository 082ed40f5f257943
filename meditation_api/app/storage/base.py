"""
Storage interface shared by all meditation backends.

The application picks one implementation at start-up and injects it
into the service layer; handlers never depend on a concrete backend.
All methods are synchronous and block until the backend has answered.
"""

from abc import ABC, abstractmethod
from typing import List

from ..schemas.meditation import Meditation


class MeditationStore(ABC):
    """Per-owner CRUD contract for meditation records."""

    @abstractmethod
    def save(self, meditation: Meditation) -> None:
        """Insert ``meditation``, overwriting any record stored under the same key.

        Raises ``WriteFailureError`` if the backend write fails.
        """

    @abstractmethod
    def list(self, owner_id: str) -> List[Meditation]:
        """Return every record of ``owner_id`` in no particular order.

        An unknown owner yields an empty list, not an error.
        """

    @abstractmethod
    def get(self, owner_id: str, meditation_id: str) -> Meditation:
        """Return the record ``meditation_id`` of ``owner_id``.

        Raises ``NotFoundError`` if the owner has no records or no record
        with that id.
        """

    @abstractmethod
    def delete(self, owner_id: str, meditation_id: str) -> None:
        """Remove exactly one record; other records of the owner are untouched.

        Raises ``NotFoundError`` under the same conditions as :meth:`get`.
        """

    @abstractmethod
    def update(self, meditation: Meditation) -> None:
        """Replace the stored record with the same owner and id.

        Raises ``NotFoundError`` if there is no such record.  A changed
        name may move the record to a new physical key.
        """

    def repair_stale_entries(self) -> int:
        """Remove entries a backend left behind after a partial write.

        Returns the number of entries removed.  Backends that never
        leave such entries have nothing to do.
        """
        return 0
