"""
DynamoDB meditation store.

Items are addressed by ``pk = owner_id`` and ``sk = "<name>/<id>"``
(see :mod:`.keys`).  Because the sort key embeds the name rather than
the id alone, looking a record up by id means querying the owner's
partition and scanning the result.  Renaming a record changes its key,
so an update with a new name writes the item at the new key and
removes the old one.

By default that relocation is a single ``TransactWriteItems`` call:
the put of the new item and the delete of the old one succeed or fail
together, and the delete is conditioned on the old payload being
unchanged so that a concurrent writer makes the rename fail instead of
leaving a duplicate.

With ``use_transactions=False`` the store issues the put and then the
delete as separate calls, the delete again conditioned on the old
payload.  If the delete fails the update still succeeds, and the old
entry stays behind in the table.  This store instance remembers the
key together with the payload left there, hides the entry from
``list`` and ``get`` while it still holds that payload, and removes it
with :meth:`DynamoDBMeditationStore.repair_stale_entries`.  The repair
runs after the next successful relocation and when the application
shuts down; it only deletes entries that are still unchanged, so a
record written at the same key in the meantime survives.  Other
processes sharing the table do not know about stale entries and may
see both until the repair runs.

Deletes and same-name updates read the record first and then write;
concurrent writers to the same record race, and the last write wins.
"""

import logging
import threading
from typing import Any, Dict, List, Tuple

from botocore.exceptions import BotoCoreError, ClientError

from ..schemas.meditation import Meditation
from .base import MeditationStore
from .errors import NotFoundError, ReadFailureError, WriteFailureError
from .keys import (
    PAYLOAD,
    SORT_KEY,
    StorageKey,
    decode_item,
    encode_item,
    key_for,
    key_of_item,
)

logger = logging.getLogger(__name__)

CONDITIONAL_CHECK_FAILED = "ConditionalCheckFailedException"


def _error_code(exc: Exception) -> str:
    if isinstance(exc, ClientError):
        return exc.response.get("Error", {}).get("Code", "")
    return ""


class DynamoDBMeditationStore(MeditationStore):
    """Store backed by a DynamoDB table with a ``pk``/``sk`` primary key.

    Parameters
    ----------
    client
        A low-level ``boto3`` DynamoDB client.
    table_name : str
        Name of an existing table keyed by string attributes ``pk``
        (partition) and ``sk`` (sort).
    use_transactions : bool
        Relocate renamed records with a single transaction (default).
        When ``False`` the put and the delete are separate calls.
    """

    def __init__(self, client: Any, table_name: str, use_transactions: bool = True) -> None:
        self.client = client
        self.table_name = table_name
        self.use_transactions = use_transactions
        # owner_id -> {sort key: payload of the entry left behind}
        self._stale: Dict[str, Dict[str, Dict[str, str]]] = {}
        self._stale_lock = threading.Lock()

    # ------------------------------------------------------------------
    # Stale key bookkeeping
    # ------------------------------------------------------------------

    def _mark_stale(self, key: StorageKey, payload: Dict[str, str]) -> None:
        with self._stale_lock:
            self._stale.setdefault(key.partition_key, {})[key.sort_key] = payload

    def _clear_stale(self, key: StorageKey) -> None:
        with self._stale_lock:
            entries = self._stale.get(key.partition_key)
            if entries is None:
                return
            entries.pop(key.sort_key, None)
            if not entries:
                del self._stale[key.partition_key]

    def _stale_entries(self, owner_id: str) -> Dict[str, Dict[str, str]]:
        with self._stale_lock:
            return dict(self._stale.get(owner_id, {}))

    def stale_keys(self) -> List[StorageKey]:
        """Return the keys still waiting for :meth:`repair_stale_entries`."""
        with self._stale_lock:
            return [
                StorageKey(partition_key=owner_id, sort_key=sort_key)
                for owner_id, entries in self._stale.items()
                for sort_key in sorted(entries)
            ]

    # ------------------------------------------------------------------
    # Backend calls
    # ------------------------------------------------------------------

    def _put(self, meditation: Meditation) -> None:
        try:
            item = encode_item(meditation)
        except ValueError as exc:
            raise WriteFailureError(f"Could not serialise meditation {meditation.id}") from exc
        try:
            self.client.put_item(TableName=self.table_name, Item=item)
        except (ClientError, BotoCoreError) as exc:
            raise WriteFailureError(f"Could not save meditation {meditation.id}: {exc}") from exc
        self._clear_stale(key_for(meditation))
        logger.debug("PutItem %s/%s", meditation.owner_id, key_for(meditation).sort_key)

    def _delete_key(self, key: StorageKey, **kwargs: Any) -> None:
        self.client.delete_item(TableName=self.table_name, Key=key.to_item_key(), **kwargs)
        logger.debug("DeleteItem %s/%s", key.partition_key, key.sort_key)

    def _query_partition(self, owner_id: str) -> List[Dict[str, Any]]:
        items: List[Dict[str, Any]] = []
        params: Dict[str, Any] = {
            "TableName": self.table_name,
            "KeyConditionExpression": "#pk = :owner",
            "ExpressionAttributeNames": {"#pk": "pk"},
            "ExpressionAttributeValues": {":owner": {"S": owner_id}},
            "ConsistentRead": True,
        }
        while True:
            try:
                response = self.client.query(**params)
            except (ClientError, BotoCoreError) as exc:
                raise ReadFailureError(f"Could not query meditations of user {owner_id}: {exc}") from exc
            items.extend(response.get("Items", []))
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                return items
            params["ExclusiveStartKey"] = last_key

    def _find(self, owner_id: str, meditation_id: str) -> Tuple[Meditation, Dict[str, Any]]:
        """Return the record and its raw item, or raise ``NotFoundError``."""
        for meditation, item in self._scan(owner_id):
            if meditation.id == meditation_id:
                return meditation, item
        raise NotFoundError(owner_id, meditation_id)

    def _scan(self, owner_id: str) -> List[Tuple[Meditation, Dict[str, Any]]]:
        # A stale entry is hidden only while it still holds the payload it
        # was left with; anything written there since is a live record.
        stale = self._stale_entries(owner_id)
        return [
            (decode_item(item), item)
            for item in self._query_partition(owner_id)
            if item[SORT_KEY]["S"] not in stale or stale[item[SORT_KEY]["S"]] != item.get(PAYLOAD)
        ]

    # ------------------------------------------------------------------
    # MeditationStore
    # ------------------------------------------------------------------

    def save(self, meditation: Meditation) -> None:
        self._put(meditation)

    def list(self, owner_id: str) -> List[Meditation]:
        return [meditation for meditation, _ in self._scan(owner_id)]

    def get(self, owner_id: str, meditation_id: str) -> Meditation:
        meditation, _ = self._find(owner_id, meditation_id)
        return meditation

    def delete(self, owner_id: str, meditation_id: str) -> None:
        existing, _ = self._find(owner_id, meditation_id)
        key = key_for(existing)
        try:
            self._delete_key(key, ConditionExpression="attribute_exists(sk)")
        except ClientError as exc:
            if _error_code(exc) == CONDITIONAL_CHECK_FAILED:
                raise NotFoundError(owner_id, meditation_id) from exc
            raise WriteFailureError(f"Could not delete meditation {meditation_id}: {exc}") from exc
        except BotoCoreError as exc:
            raise WriteFailureError(f"Could not delete meditation {meditation_id}: {exc}") from exc

    def update(self, meditation: Meditation) -> None:
        existing, item = self._find(meditation.owner_id, meditation.id)
        if existing.name == meditation.name:
            self._put(meditation)
            return
        if self.use_transactions:
            self._relocate_atomically(item, meditation)
        else:
            self._relocate(item, meditation)

    def _relocate_atomically(self, old_item: Dict[str, Any], meditation: Meditation) -> None:
        old_key = key_of_item(old_item)
        try:
            new_item = encode_item(meditation)
        except ValueError as exc:
            raise WriteFailureError(f"Could not serialise meditation {meditation.id}") from exc
        try:
            self.client.transact_write_items(
                TransactItems=[
                    {"Put": {"TableName": self.table_name, "Item": new_item}},
                    {
                        "Delete": {
                            "TableName": self.table_name,
                            "Key": old_key.to_item_key(),
                            "ConditionExpression": "#data = :expected",
                            "ExpressionAttributeNames": {"#data": PAYLOAD},
                            "ExpressionAttributeValues": {":expected": old_item[PAYLOAD]},
                        }
                    },
                ]
            )
        except (ClientError, BotoCoreError) as exc:
            raise WriteFailureError(f"Could not move meditation {meditation.id}: {exc}") from exc
        self._clear_stale(key_for(meditation))
        logger.debug(
            "Moved meditation %s from %s to %s",
            meditation.id,
            old_key.sort_key,
            key_for(meditation).sort_key,
        )

    def _relocate(self, old_item: Dict[str, Any], meditation: Meditation) -> None:
        old_key = key_of_item(old_item)
        # The new item must exist before the old one goes away.
        self._put(meditation)
        try:
            self._delete_unchanged(old_key, old_item[PAYLOAD])
        except ClientError as exc:
            if _error_code(exc) == CONDITIONAL_CHECK_FAILED:
                logger.warning(
                    "Old entry %s of meditation %s was changed by another writer and was kept",
                    old_key.sort_key,
                    meditation.id,
                )
                return
            self._leave_stale(old_key, old_item[PAYLOAD], meditation, exc)
            return
        except BotoCoreError as exc:
            self._leave_stale(old_key, old_item[PAYLOAD], meditation, exc)
            return
        # The backend accepts deletes again; clear what earlier moves left.
        if self.stale_keys():
            self.repair_stale_entries()

    def _leave_stale(self, old_key: StorageKey, payload: Dict[str, str], meditation: Meditation, exc: Exception) -> None:
        self._mark_stale(old_key, payload)
        logger.warning(
            "Meditation %s moved to %s but the old entry %s could not be removed: %s",
            meditation.id,
            key_for(meditation).sort_key,
            old_key.sort_key,
            exc,
        )

    def _delete_unchanged(self, key: StorageKey, payload: Dict[str, str]) -> None:
        """Delete ``key`` only if it still holds ``payload``."""
        self._delete_key(
            key,
            ConditionExpression="#data = :expected",
            ExpressionAttributeNames={"#data": PAYLOAD},
            ExpressionAttributeValues={":expected": payload},
        )

    def repair_stale_entries(self) -> int:
        """Retry deleting entries left behind by failed relocations.

        An entry is deleted only if it still holds the payload it was
        left with.  If something else has been written at that key
        since, the entry is live again: it is kept and no longer treated
        as stale.  Returns the number of entries removed; entries that
        still cannot be deleted stay pending for the next call.
        """
        repaired = 0
        for key in self.stale_keys():
            payload = self._stale_entries(key.partition_key).get(key.sort_key)
            if payload is None:
                continue
            try:
                self._delete_unchanged(key, payload)
            except ClientError as exc:
                if _error_code(exc) == CONDITIONAL_CHECK_FAILED:
                    logger.info("Stale entry %s/%s was overwritten; keeping it", key.partition_key, key.sort_key)
                    self._clear_stale(key)
                    continue
                logger.warning("Could not remove stale entry %s/%s: %s", key.partition_key, key.sort_key, exc)
                continue
            except BotoCoreError as exc:
                logger.warning("Could not remove stale entry %s/%s: %s", key.partition_key, key.sort_key, exc)
                continue
            self._clear_stale(key)
            repaired += 1
        if repaired:
            logger.info("Removed %d stale meditation entries", repaired)
        return repaired
