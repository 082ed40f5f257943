"""
Request owner resolution.

The API does not authenticate users itself.  Every request carries a
``User-Id`` header supplied by a trusted upstream (gateway or client
app), and that value becomes the owner of the records the request may
see or change.  Requests without the header are rejected with HTTP
400.
"""

from typing import Optional

from fastapi import Header, HTTPException, status

OWNER_HEADER = "User-Id"


def get_owner_id(user_id: Optional[str] = Header(None, alias=OWNER_HEADER)) -> str:
    """Dependency returning the owner id taken from the ``User-Id`` header."""
    if user_id is None or not user_id.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"No {OWNER_HEADER} header present",
        )
    return user_id.strip()
