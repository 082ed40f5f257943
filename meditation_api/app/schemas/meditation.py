"""
Pydantic schemas for meditation entries.

A meditation is a named audio recording owned by a single user.  The
JSON field names follow the public API (``_id``, ``_userId``,
``audioUrl`` and ``name``); Python code uses the attribute names
``id``, ``owner_id``, ``url`` and ``name``.  Both spellings are
accepted on input.

Only request bodies reject empty values.  Stored records are read back
as they are, so an item written by another client with an empty field
still decodes.
"""

from pydantic import BaseModel, Field


class MeditationBase(BaseModel):
    name: str = Field(..., description="Display name of the meditation")
    url: str = Field(..., alias="audioUrl", description="URL of the audio recording")

    model_config = {
        "populate_by_name": True,
    }


class MeditationRequest(MeditationBase):
    name: str = Field(..., min_length=1, description="Display name of the meditation")
    url: str = Field(..., alias="audioUrl", min_length=1, description="URL of the audio recording")


class MeditationCreate(MeditationRequest):
    """Schema for creating a new meditation."""


class MeditationUpdate(MeditationRequest):
    """Schema for replacing an existing meditation.

    Both fields are required; the update overwrites the stored name
    and URL.  The identifier and owner come from the request path and
    headers.
    """


class Meditation(MeditationBase):
    """A stored meditation record.

    Instances are immutable so that stores can hand them out without
    copying.  ``id`` is generated by the creator and never changes;
    ``owner_id`` partitions the data so that no user sees another
    user's records.
    """

    id: str = Field(..., alias="_id")
    owner_id: str = Field(..., alias="_userId")

    model_config = {
        "populate_by_name": True,
        "frozen": True,
    }
