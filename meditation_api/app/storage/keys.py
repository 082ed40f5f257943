"""
Physical key layout for the DynamoDB backend.

Each record lives at ``pk = owner_id`` and ``sk = "<name>/<id>"``.
The whole record is also stored, as JSON, in the ``data`` attribute.
The sort key is only ever built, never parsed: records are decoded
from the payload, so names may contain the separator.
"""

from dataclasses import dataclass
from typing import Any, Dict

from pydantic import ValidationError

from ..schemas.meditation import Meditation
from .errors import ReadFailureError

PARTITION_KEY = "pk"
SORT_KEY = "sk"
PAYLOAD = "data"
SORT_KEY_SEPARATOR = "/"


@dataclass(frozen=True)
class StorageKey:
    """Primary key of one item."""

    partition_key: str
    sort_key: str

    def to_item_key(self) -> Dict[str, Dict[str, str]]:
        """Return the key in DynamoDB attribute-value form."""
        return {
            PARTITION_KEY: {"S": self.partition_key},
            SORT_KEY: {"S": self.sort_key},
        }


def build_sort_key(name: str, meditation_id: str) -> str:
    return f"{name}{SORT_KEY_SEPARATOR}{meditation_id}"


def key_for(meditation: Meditation) -> StorageKey:
    return StorageKey(
        partition_key=meditation.owner_id,
        sort_key=build_sort_key(meditation.name, meditation.id),
    )


def encode_payload(meditation: Meditation) -> str:
    return meditation.model_dump_json(by_alias=True)


def encode_item(meditation: Meditation) -> Dict[str, Dict[str, str]]:
    """Build the full DynamoDB item for ``meditation``."""
    item = key_for(meditation).to_item_key()
    item[PAYLOAD] = {"S": encode_payload(meditation)}
    return item


def key_of_item(item: Dict[str, Any]) -> StorageKey:
    return StorageKey(
        partition_key=item[PARTITION_KEY]["S"],
        sort_key=item[SORT_KEY]["S"],
    )


def decode_item(item: Dict[str, Any]) -> Meditation:
    """Rebuild a record from a DynamoDB item.

    Raises ``ReadFailureError`` if the payload is missing or invalid.
    """
    try:
        raw = item[PAYLOAD]["S"]
    except (KeyError, TypeError) as exc:
        raise ReadFailureError(f"Item {item.get(SORT_KEY)!r} has no payload") from exc
    try:
        return Meditation.model_validate_json(raw)
    except ValidationError as exc:
        raise ReadFailureError(f"Item {item.get(SORT_KEY)!r} has an invalid payload") from exc
