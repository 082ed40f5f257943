"""
In-memory meditation store.

Records are kept in a dictionary mapping each owner to a list of
meditations.  Nothing survives a restart, which makes this backend
suitable for development and tests.

Deleting a record swaps it with the last element of the owner's list
and truncates the list, so the order returned by ``list`` changes
after a delete.  Callers must treat that order as unspecified.

A single lock guards the whole dictionary.  Every read and write holds
it, so concurrent updates and deletes of the same record are applied
one after the other.  Owners only get an entry once they save a
record, and the entry is dropped when their last record is deleted;
lookups of unknown owners allocate nothing.
"""

import logging
import threading
from typing import Dict, List

from ..schemas.meditation import Meditation
from .base import MeditationStore
from .errors import NotFoundError

logger = logging.getLogger(__name__)


class InMemoryMeditationStore(MeditationStore):
    """Dictionary-backed store guarded by one lock."""

    def __init__(self) -> None:
        self._meditations: Dict[str, List[Meditation]] = {}
        self._lock = threading.Lock()

    def _partition(self, owner_id: str) -> List[Meditation]:
        """Return the owner's list, or raise ``NotFoundError``.  Caller holds the lock."""
        meditations = self._meditations.get(owner_id)
        if not meditations:
            raise NotFoundError(owner_id)
        return meditations

    @staticmethod
    def _index_of(meditations: List[Meditation], meditation_id: str) -> int:
        for i, m in enumerate(meditations):
            if m.id == meditation_id:
                return i
        return -1

    def _require_index(self, meditations: List[Meditation], owner_id: str, meditation_id: str) -> int:
        idx = self._index_of(meditations, meditation_id)
        if idx < 0:
            raise NotFoundError(owner_id, meditation_id)
        return idx

    def save(self, meditation: Meditation) -> None:
        with self._lock:
            meditations = self._meditations.setdefault(meditation.owner_id, [])
            idx = self._index_of(meditations, meditation.id)
            if idx > -1:
                meditations[idx] = meditation
            else:
                meditations.append(meditation)
        logger.debug("Saved meditation %s for user %s", meditation.id, meditation.owner_id)

    def list(self, owner_id: str) -> List[Meditation]:
        with self._lock:
            return list(self._meditations.get(owner_id, ()))

    def get(self, owner_id: str, meditation_id: str) -> Meditation:
        with self._lock:
            meditations = self._partition(owner_id)
            return meditations[self._require_index(meditations, owner_id, meditation_id)]

    def delete(self, owner_id: str, meditation_id: str) -> None:
        with self._lock:
            meditations = self._partition(owner_id)
            idx = self._require_index(meditations, owner_id, meditation_id)
            # Swap with the last element and truncate.
            last = len(meditations) - 1
            meditations[idx], meditations[last] = meditations[last], meditations[idx]
            meditations.pop()
            if not meditations:
                del self._meditations[owner_id]
        logger.debug("Deleted meditation %s for user %s", meditation_id, owner_id)

    def update(self, meditation: Meditation) -> None:
        with self._lock:
            meditations = self._partition(meditation.owner_id)
            idx = self._require_index(meditations, meditation.owner_id, meditation.id)
            meditations[idx] = meditation
        logger.debug("Updated meditation %s for user %s", meditation.id, meditation.owner_id)
