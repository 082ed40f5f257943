"""
Meditation endpoints for API v1.

Every route is scoped to the owner named by the ``User-Id`` header:
a user can only list, read, change or delete their own meditations.
Handlers are plain functions because the stores block on I/O; FastAPI
runs them in its thread pool.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from meditation_api.app.core.dependencies import get_meditation_service
from meditation_api.app.core.security import get_owner_id
from meditation_api.app.schemas.meditation import Meditation, MeditationCreate, MeditationUpdate
from meditation_api.app.services.meditation_service import MeditationService
from meditation_api.app.storage.errors import NotFoundError, StoreError

router = APIRouter()


def _server_error(exc: StoreError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.get("/", response_model=List[Meditation])
def list_meditations(
    owner_id: str = Depends(get_owner_id),
    service: MeditationService = Depends(get_meditation_service),
) -> List[Meditation]:
    """Return all meditations of the current user.

    An empty list is returned for users without meditations.  The
    order of the list is not defined.
    """
    try:
        return service.list_meditations(owner_id)
    except StoreError as e:
        raise _server_error(e) from e


@router.get("/{meditation_id}", response_model=Meditation)
def get_meditation(
    meditation_id: str,
    owner_id: str = Depends(get_owner_id),
    service: MeditationService = Depends(get_meditation_service),
) -> Meditation:
    """Retrieve a single meditation.  Returns 404 if it does not exist."""
    try:
        return service.get_meditation(owner_id, meditation_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except StoreError as e:
        raise _server_error(e) from e


@router.post("/", response_model=Meditation, status_code=status.HTTP_201_CREATED)
def create_meditation(
    meditation_in: MeditationCreate,
    owner_id: str = Depends(get_owner_id),
    service: MeditationService = Depends(get_meditation_service),
) -> Meditation:
    """Create a meditation; the server assigns its ``_id``."""
    try:
        return service.create_meditation(owner_id, meditation_in)
    except StoreError as e:
        raise _server_error(e) from e


@router.put("/{meditation_id}", response_model=Meditation)
def update_meditation(
    meditation_id: str,
    meditation_in: MeditationUpdate,
    owner_id: str = Depends(get_owner_id),
    service: MeditationService = Depends(get_meditation_service),
) -> Meditation:
    """Replace the name and audio URL of a meditation."""
    try:
        return service.update_meditation(owner_id, meditation_id, meditation_in)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except StoreError as e:
        raise _server_error(e) from e


@router.delete("/{meditation_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_meditation(
    meditation_id: str,
    owner_id: str = Depends(get_owner_id),
    service: MeditationService = Depends(get_meditation_service),
) -> None:
    """Delete a meditation.  Returns 404 if it does not exist."""
    try:
        service.delete_meditation(owner_id, meditation_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except StoreError as e:
        raise _server_error(e) from e
    return None
