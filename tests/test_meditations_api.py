"""Integration tests for the /api/v1/meditations endpoints."""

import pytest
from fastapi.testclient import TestClient

from meditation_api.app.main import create_app
from meditation_api.app.storage.memory import InMemoryMeditationStore

from .conftest import client_error

BASE = "/api/v1/meditations"


@pytest.fixture
def client(store) -> TestClient:
    """Create a test client for an app bound to the given store."""
    return TestClient(create_app(store=store))


def _headers(user_id: str = "u1") -> dict:
    return {"User-Id": user_id}


def _create(client: TestClient, name: str = "calm", url: str = "http://x", user_id: str = "u1") -> dict:
    response = client.post(f"{BASE}/", json={"name": name, "audioUrl": url}, headers=_headers(user_id))
    assert response.status_code == 201
    return response.json()


class TestMeditationEndpoints:
    def test_missing_user_header(self, client: TestClient) -> None:
        response = client.get(f"{BASE}/")

        assert response.status_code == 400
        assert response.json() == {"detail": "No User-Id header present"}

    def test_blank_user_header(self, client: TestClient) -> None:
        response = client.get(f"{BASE}/", headers={"User-Id": "  "})

        assert response.status_code == 400

    def test_list_empty(self, client: TestClient) -> None:
        response = client.get(f"{BASE}/", headers=_headers())

        assert response.status_code == 200
        assert response.json() == []

    def test_create_uses_public_field_names(self, client: TestClient) -> None:
        body = _create(client)

        assert set(body) == {"_id", "_userId", "name", "audioUrl"}
        assert body["_userId"] == "u1"
        assert body["name"] == "calm"
        assert body["audioUrl"] == "http://x"

    def test_create_requires_name_and_url(self, client: TestClient) -> None:
        response = client.post(f"{BASE}/", json={"name": "calm"}, headers=_headers())
        assert response.status_code == 422

        response = client.post(f"{BASE}/", json={"name": "", "audioUrl": "http://x"}, headers=_headers())
        assert response.status_code == 422

    def test_get_and_list(self, client: TestClient) -> None:
        created = _create(client)

        response = client.get(f"{BASE}/{created['_id']}", headers=_headers())
        assert response.status_code == 200
        assert response.json() == created

        response = client.get(f"{BASE}/", headers=_headers())
        assert response.json() == [created]

    def test_get_unknown(self, client: TestClient) -> None:
        _create(client)

        response = client.get(f"{BASE}/missing", headers=_headers())

        assert response.status_code == 404
        assert response.json() == {"detail": "No meditation with id missing was found"}

    def test_update_renames(self, client: TestClient) -> None:
        created = _create(client)

        response = client.put(
            f"{BASE}/{created['_id']}",
            json={"name": "calm2", "audioUrl": "http://x"},
            headers=_headers(),
        )

        assert response.status_code == 200
        assert response.json() == {**created, "name": "calm2"}
        listed = client.get(f"{BASE}/", headers=_headers()).json()
        assert listed == [{**created, "name": "calm2"}]

    def test_update_unknown(self, client: TestClient) -> None:
        response = client.put(f"{BASE}/missing", json={"name": "a", "audioUrl": "http://x"}, headers=_headers())

        assert response.status_code == 404

    def test_delete(self, client: TestClient) -> None:
        created = _create(client)

        response = client.delete(f"{BASE}/{created['_id']}", headers=_headers())
        assert response.status_code == 204

        response = client.get(f"{BASE}/{created['_id']}", headers=_headers())
        assert response.status_code == 404
        assert client.get(f"{BASE}/", headers=_headers()).json() == []

    def test_delete_unknown(self, client: TestClient) -> None:
        response = client.delete(f"{BASE}/missing", headers=_headers())

        assert response.status_code == 404

    def test_users_are_isolated(self, client: TestClient) -> None:
        created = _create(client, user_id="u1")

        assert client.get(f"{BASE}/", headers=_headers("u2")).json() == []
        assert client.get(f"{BASE}/{created['_id']}", headers=_headers("u2")).status_code == 404
        assert client.delete(f"{BASE}/{created['_id']}", headers=_headers("u2")).status_code == 404
        assert client.get(f"{BASE}/{created['_id']}", headers=_headers("u1")).status_code == 200


class TestBackendFailures:
    def test_write_failure_is_server_error(self, dynamodb_store, dynamodb_client) -> None:
        client = TestClient(create_app(store=dynamodb_store))
        dynamodb_client.failures["PutItem"] = client_error("InternalServerError", "PutItem")

        response = client.post(f"{BASE}/", json={"name": "calm", "audioUrl": "http://x"}, headers=_headers())

        assert response.status_code == 500

    def test_read_failure_is_server_error(self, dynamodb_store, dynamodb_client) -> None:
        client = TestClient(create_app(store=dynamodb_store))
        dynamodb_client.failures["Query"] = client_error("InternalServerError", "Query")

        response = client.get(f"{BASE}/", headers=_headers())

        assert response.status_code == 500


def test_app_state_holds_injected_store() -> None:
    store = InMemoryMeditationStore()

    app = create_app(store=store)

    assert app.state.store is store
