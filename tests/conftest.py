"""Pytest configuration and shared fixtures for the test suite."""

import copy
from typing import Any, Dict, List, Optional, Tuple

import pytest
from botocore.exceptions import ClientError

from meditation_api.app.schemas.meditation import Meditation
from meditation_api.app.storage.dynamodb import DynamoDBMeditationStore
from meditation_api.app.storage.memory import InMemoryMeditationStore

TABLE_NAME = "meditations-test"


def client_error(code: str, operation: str, message: str = "simulated failure") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": message}}, operation)


class FakeDynamoDBClient:
    """Dict-backed stand-in for the low-level DynamoDB client.

    Implements the calls the store makes, with the same request and
    response shapes.  ``failures`` maps an operation name (``PutItem``,
    ``Query``, ``DeleteItem``, ``TransactWriteItems``) to an exception
    raised on every call of that operation until removed.
    """

    def __init__(self, page_size: Optional[int] = None) -> None:
        self.items: Dict[Tuple[str, str], Dict[str, Any]] = {}
        self.calls: List[str] = []
        self.failures: Dict[str, Exception] = {}
        self.page_size = page_size

    def _record(self, operation: str) -> None:
        self.calls.append(operation)
        exc = self.failures.get(operation)
        if exc is not None:
            raise exc

    @staticmethod
    def _key(key: Dict[str, Any]) -> Tuple[str, str]:
        return key["pk"]["S"], key["sk"]["S"]

    def put_item(self, TableName: str, Item: Dict[str, Any]) -> Dict[str, Any]:
        self._record("PutItem")
        self.items[self._key(Item)] = copy.deepcopy(Item)
        return {}

    def query(self, **params: Any) -> Dict[str, Any]:
        self._record("Query")
        owner = params["ExpressionAttributeValues"][":owner"]["S"]
        keys = sorted(k for k in self.items if k[0] == owner)
        start = params.get("ExclusiveStartKey")
        if start is not None:
            keys = [k for k in keys if k[1] > start["sk"]["S"]]
        response: Dict[str, Any] = {}
        if self.page_size is not None and len(keys) > self.page_size:
            keys = keys[: self.page_size]
            last = keys[-1]
            response["LastEvaluatedKey"] = {"pk": {"S": last[0]}, "sk": {"S": last[1]}}
        response["Items"] = [copy.deepcopy(self.items[k]) for k in keys]
        return response

    def delete_item(
        self,
        TableName: str,
        Key: Dict[str, Any],
        ConditionExpression: Optional[str] = None,
        ExpressionAttributeNames: Optional[Dict[str, str]] = None,
        ExpressionAttributeValues: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        self._record("DeleteItem")
        key = self._key(Key)
        current = self.items.get(key)
        if ConditionExpression == "attribute_exists(sk)":
            holds = current is not None
        elif ConditionExpression == "#data = :expected":
            attribute = ExpressionAttributeNames["#data"]
            holds = current is not None and current.get(attribute) == ExpressionAttributeValues[":expected"]
        else:
            holds = ConditionExpression is None
        if not holds:
            raise client_error("ConditionalCheckFailedException", "DeleteItem", "The conditional request failed")
        self.items.pop(key, None)
        return {}

    def transact_write_items(self, TransactItems: List[Dict[str, Any]]) -> Dict[str, Any]:
        self._record("TransactWriteItems")
        for action in TransactItems:
            delete = action.get("Delete")
            if delete is None:
                continue
            current = self.items.get(self._key(delete["Key"]))
            expected = delete["ExpressionAttributeValues"][":expected"]
            if current is None or current["data"] != expected:
                raise client_error("TransactionCanceledException", "TransactWriteItems", "ConditionalCheckFailed")
        for action in TransactItems:
            if "Put" in action:
                item = action["Put"]["Item"]
                self.items[self._key(item)] = copy.deepcopy(item)
            else:
                self.items.pop(self._key(action["Delete"]["Key"]), None)
        return {}


@pytest.fixture
def dynamodb_client() -> FakeDynamoDBClient:
    return FakeDynamoDBClient()


@pytest.fixture
def memory_store() -> InMemoryMeditationStore:
    return InMemoryMeditationStore()


@pytest.fixture
def dynamodb_store(dynamodb_client: FakeDynamoDBClient) -> DynamoDBMeditationStore:
    return DynamoDBMeditationStore(dynamodb_client, TABLE_NAME)


@pytest.fixture(params=["memory", "dynamodb", "dynamodb-no-transactions"])
def store(request, dynamodb_client: FakeDynamoDBClient):
    """Every backend, for tests of the shared store contract."""
    if request.param == "memory":
        return InMemoryMeditationStore()
    return DynamoDBMeditationStore(
        dynamodb_client,
        TABLE_NAME,
        use_transactions=request.param == "dynamodb",
    )


@pytest.fixture
def calm() -> Meditation:
    return Meditation(id="a1", owner_id="u1", name="calm", url="http://x")
