"""
Service layer for meditations.

``MeditationService`` turns request payloads into stored records: it
assigns new identifiers, stamps the owner taken from the request and
delegates persistence to the injected ``MeditationStore``.  Store
exceptions (``NotFoundError``, ``WriteFailureError``,
``ReadFailureError``) are not caught here; the API layer maps them to
HTTP responses.
"""

from __future__ import annotations

import logging
import uuid
from typing import List

from meditation_api.app.schemas.meditation import Meditation, MeditationCreate, MeditationUpdate
from meditation_api.app.storage.base import MeditationStore

logger = logging.getLogger(__name__)


class MeditationService:
    """Business logic for a single user's meditations."""

    def __init__(self, store: MeditationStore) -> None:
        self.store = store

    def create_meditation(self, owner_id: str, data: MeditationCreate) -> Meditation:
        """Create a meditation with a freshly generated id and return it."""
        meditation = Meditation(
            id=str(uuid.uuid4()),
            owner_id=owner_id,
            name=data.name,
            url=data.url,
        )
        self.store.save(meditation)
        logger.info("Created meditation %s for user %s", meditation.id, owner_id)
        return meditation

    def list_meditations(self, owner_id: str) -> List[Meditation]:
        """Return all meditations of ``owner_id`` in unspecified order."""
        return self.store.list(owner_id)

    def get_meditation(self, owner_id: str, meditation_id: str) -> Meditation:
        return self.store.get(owner_id, meditation_id)

    def update_meditation(self, owner_id: str, meditation_id: str, data: MeditationUpdate) -> Meditation:
        """Replace the name and URL of an existing meditation.

        The id and owner never change.  Returns the stored record.
        """
        meditation = Meditation(
            id=meditation_id,
            owner_id=owner_id,
            name=data.name,
            url=data.url,
        )
        self.store.update(meditation)
        logger.info("Updated meditation %s for user %s", meditation_id, owner_id)
        return meditation

    def delete_meditation(self, owner_id: str, meditation_id: str) -> None:
        self.store.delete(owner_id, meditation_id)
        logger.info("Deleted meditation %s for user %s", meditation_id, owner_id)
