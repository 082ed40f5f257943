"""
FastAPI dependencies giving handlers access to the configured store.

The store is built once by ``create_app`` and kept on
``app.state.store``; handlers receive a ``MeditationService`` bound to
it and never see the concrete backend.
"""

from fastapi import Request

from ..services.meditation_service import MeditationService
from ..storage.base import MeditationStore


def get_store(request: Request) -> MeditationStore:
    return request.app.state.store


def get_meditation_service(request: Request) -> MeditationService:
    return MeditationService(get_store(request))
