"""
Integration tests for the HTTP API.
"""

import pytest
from fastapi.testclient import TestClient

from adoptapp.api import create_app
from adoptapp.config import Settings
from adoptapp.services import AdoptAppServices


class TestAdoptionAPI:
    """Drive the managers through the FastAPI app."""

    @pytest.fixture
    def client(self, sample_city, sample_pets):
        services = AdoptAppServices(
            config=Settings(store_backend="memory", max_interest_requests=2),
            cities=[sample_city],
            pets=sample_pets,
        )
        return TestClient(create_app(services))

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_submit_and_repeat(self, client, valid_payload):
        """Test the documented scenario: create, then duplicate request."""
        response = client.post("/users", json=valid_payload)

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "User Ana was added."
        assert [pet["pet_id"] for pet in body["user"]["interested_in"]] == [42]

        response = client.post("/users", json=valid_payload)

        assert response.status_code == 400
        body = response.json()
        assert body["kind"] == "rule_violation"
        assert "already registered" in body["error"]

        users = client.get("/users").json()
        assert [pet["pet_id"] for pet in users[0]["interested_in"]] == [42]

    def test_unknown_city_is_404(self, client, valid_payload):
        valid_payload["zipCode"] = 9999

        response = client.post("/users", json=valid_payload)

        assert response.status_code == 404
        assert response.json()["context"] == {"zip_code": 9999}

    def test_missing_field_is_400(self, client, valid_payload):
        del valid_payload["livingPlace"]

        response = client.post("/users", json=valid_payload)

        assert response.status_code == 400
        assert response.json()["kind"] == "malformed_request"

    def test_get_user(self, client, valid_payload):
        user_id = client.post("/users", json=valid_payload).json()["user"]["user_id"]

        assert client.get(f"/users/{user_id}").json()["email"] == "a@x.com"
        assert client.get("/users/999").status_code == 404

    def test_withdraw_twice_is_409(self, client, valid_payload):
        client.post("/users", json=valid_payload)

        first = client.delete("/users/a@x.com/pets/42")
        second = client.delete("/users/a@x.com/pets/42")

        assert first.status_code == 200
        assert first.json()["user"]["interested_in"] == []
        assert second.status_code == 409
        assert second.json()["kind"] == "conflict"

    def test_delete_user(self, client, valid_payload):
        client.post("/users", json=valid_payload)

        response = client.delete("/users/a@x.com")

        assert response.status_code == 200
        assert response.json()["message"] == "Ana was deleted from database."
        assert client.get("/users").json() == []
        assert client.delete("/users/a@x.com").status_code == 404

    def test_complete_adoption(self, client, valid_payload):
        client.post("/users", json=valid_payload)

        response = client.post("/adoptions", json={"email": "a@x.com", "pet_id": 42})

        assert response.status_code == 200
        assert response.json()["adoption"]["pet_id"] == 42
        assert len(client.get("/adoptions").json()) == 1

    @pytest.mark.parametrize(
        "method, path, body",
        [
            ("post", "/users", ["not", "an", "object"]),
            ("post", "/adoptions", {"email": "a@x.com"}),
            ("post", "/adoptions", {"email": "a@x.com", "pet_id": "abc"}),
            ("delete", "/users/a@x.com/pets/abc", None),
            ("get", "/users/abc", None),
        ],
    )
    def test_request_validation_is_malformed_400(self, client, method, path, body):
        """Test that framework-level validation uses the error body and status of every other failure."""
        kwargs = {"json": body} if body is not None else {}

        response = getattr(client, method)(path, **kwargs)

        assert response.status_code == 400
        payload = response.json()
        assert payload["status"] == 400
        assert payload["kind"] == "malformed_request"
        assert payload["error"].startswith("Invalid request: ")
        assert payload["context"]["errors"]

    def test_invalid_json_is_malformed_400(self, client):
        response = client.post(
            "/users",
            content="{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["kind"] == "malformed_request"

    def test_docs_hidden_in_production(self, sample_city, sample_pets):
        services = AdoptAppServices(
            config=Settings(store_backend="memory", environment="production"),
            cities=[sample_city],
            pets=sample_pets,
        )
        client = TestClient(create_app(services))

        assert client.get("/docs").status_code == 404
        assert client.get("/openapi.json").status_code == 404
        assert client.get("/health").status_code == 200

    def test_docs_served_outside_production(self, client):
        assert client.get("/openapi.json").status_code == 200
