"""
HTTP tests for the contact form endpoints.
"""
import logging
from datetime import datetime

from fastapi.testclient import TestClient

from main import app
from storage import MemStorage, get_storage


def _parse_ts(value):
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def test_health_check(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_submit_contact_message(client):
    response = client.post(
        "/api/contact",
        json={"firstName": "A", "lastName": "B", "email": "a@b.com", "message": "Hello there"},
    )
    assert response.status_code == 201

    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Contact message received successfully"
    assert isinstance(body["data"]["id"], int)
    assert _parse_ts(body["data"]["createdAt"]).tzinfo is not None


def test_submit_reports_every_invalid_field(client):
    response = client.post(
        "/api/contact",
        json={"firstName": "A", "lastName": "B", "email": "not-an-email", "message": "Hi"},
    )
    assert response.status_code == 400

    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Validation error"
    fields = {err["field"] for err in body["errors"]}
    assert fields == {"email", "message"}


def test_submit_missing_required_fields(client):
    response = client.post("/api/contact", json={"email": "a@b.com", "message": "Hello there"})
    assert response.status_code == 400

    errors = response.json()["errors"]
    assert {err["field"] for err in errors} == {"firstName", "lastName"}
    assert all(err["type"] == "missing" for err in errors)


def test_submit_empty_name_is_rejected(client, valid_payload):
    valid_payload["firstName"] = ""
    response = client.post("/api/contact", json=valid_payload)
    assert response.status_code == 400
    assert [err["field"] for err in response.json()["errors"]] == ["firstName"]


def test_submit_message_too_short(client, valid_payload):
    valid_payload["message"] = "abcd"
    response = client.post("/api/contact", json=valid_payload)
    assert response.status_code == 400
    assert [err["field"] for err in response.json()["errors"]] == ["message"]


def test_submit_service_type_is_optional(client, valid_payload):
    del valid_payload["serviceType"]
    response = client.post("/api/contact", json=valid_payload)
    assert response.status_code == 201

    message_id = response.json()["data"]["id"]
    data = client.get(f"/api/contact/{message_id}").json()["data"]
    assert data["serviceType"] is None


def test_submit_ignores_unknown_fields(client, store, valid_payload):
    valid_payload["phone"] = ""
    valid_payload["createdAt"] = "1999-01-01T00:00:00Z"
    valid_payload["id"] = 42
    response = client.post("/api/contact", json=valid_payload)
    assert response.status_code == 201

    data = response.json()["data"]
    assert data["id"] == 1
    assert not data["createdAt"].startswith("1999")


def test_submit_non_object_body(client):
    response = client.post("/api/contact", json=["firstName", "A"])
    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "body"


def test_submit_malformed_json(client):
    response = client.post(
        "/api/contact",
        content=b'{"firstName": "A",',
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["errors"][0]["field"] == "body"


def test_sequential_submissions_get_unique_ids(client, valid_payload):
    ids = []
    stamps = []
    for _ in range(5):
        data = client.post("/api/contact", json=valid_payload).json()["data"]
        ids.append(data["id"])
        stamps.append(_parse_ts(data["createdAt"]))

    assert len(set(ids)) == len(ids)
    assert stamps == sorted(stamps)


def test_list_newest_first(client, valid_payload):
    for name in ("First", "Second", "Third"):
        valid_payload["firstName"] = name
        assert client.post("/api/contact", json=valid_payload).status_code == 201

    response = client.get("/api/contact")
    assert response.status_code == 200

    data = response.json()["data"]
    assert [m["firstName"] for m in data] == ["Third", "Second", "First"]
    stamps = [_parse_ts(m["createdAt"]) for m in data]
    assert stamps == sorted(stamps, reverse=True)


def test_list_empty(client):
    response = client.get("/api/contact")
    assert response.status_code == 200
    assert response.json() == {"success": True, "data": []}


def test_get_by_id(client, valid_payload):
    created = client.post("/api/contact", json=valid_payload).json()["data"]

    response = client.get(f"/api/contact/{created['id']}")
    assert response.status_code == 200

    data = response.json()["data"]
    assert data["id"] == created["id"]
    assert data["firstName"] == "Jordan"
    assert data["lastName"] == "Spieth"
    assert data["email"] == "jordan@gmail.com"
    assert data["serviceType"] == "regrip"
    assert data["message"] == "Need new grips on my irons."
    assert data["createdAt"] == created["createdAt"]


def test_get_by_id_rejects_non_integer(client):
    for raw in ("abc", "12abc", "1.5"):
        response = client.get(f"/api/contact/{raw}")
        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "Invalid ID format"}


def test_get_by_id_not_found(client):
    for raw in ("999", "0", "-1", "99999999999"):
        response = client.get(f"/api/contact/{raw}")
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Contact message not found"}


class _BrokenStorage(MemStorage):
    async def create_contact_message(self, message):
        raise RuntimeError("connection refused to db-internal:5432")

    async def get_all_contact_messages(self):
        raise RuntimeError("connection refused to db-internal:5432")

    async def get_contact_message_by_id(self, message_id):
        raise RuntimeError("connection refused to db-internal:5432")


def test_storage_failures_return_generic_500(valid_payload):
    broken = _BrokenStorage()
    app.dependency_overrides[get_storage] = lambda: broken
    try:
        with TestClient(app) as client:
            responses = [
                client.post("/api/contact", json=valid_payload),
                client.get("/api/contact"),
                client.get("/api/contact/1"),
            ]
    finally:
        app.dependency_overrides.clear()

    for response in responses:
        assert response.status_code == 500
        assert response.json()["success"] is False
        assert "db-internal" not in response.text

    assert responses[0].json()["message"] == "An unexpected error occurred while processing your request"
    assert responses[1].json()["message"] == "An error occurred while retrieving contact messages"
    assert responses[2].json()["message"] == "An error occurred while retrieving the contact message"


def test_submit_keeps_email_as_typed(client, valid_payload):
    valid_payload["email"] = "Jordan@GMAIL.COM"
    message_id = client.post("/api/contact", json=valid_payload).json()["data"]["id"]

    data = client.get(f"/api/contact/{message_id}").json()["data"]
    assert data["email"] == "Jordan@GMAIL.COM"


def test_submit_rejects_special_use_domain(client, valid_payload):
    valid_payload["email"] = "a@shop.local"
    response = client.post("/api/contact", json=valid_payload)
    assert response.status_code == 400
    assert [err["field"] for err in response.json()["errors"]] == ["email"]


def test_submit_html_form(client, valid_payload):
    valid_payload["serviceType"] = ""
    response = client.post("/api/contact", data=valid_payload)
    assert response.status_code == 201

    message_id = response.json()["data"]["id"]
    data = client.get(f"/api/contact/{message_id}").json()["data"]
    assert data["firstName"] == "Jordan"
    assert data["serviceType"] is None


def test_submit_html_form_validation(client, valid_payload):
    valid_payload["message"] = "Hi"
    response = client.post("/api/contact", data=valid_payload)
    assert response.status_code == 400
    assert [err["field"] for err in response.json()["errors"]] == ["message"]


def test_submit_empty_body(client):
    response = client.post("/api/contact")
    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "body"


def test_unhandled_error_returns_generic_500(caplog):
    def unavailable_storage():
        raise RuntimeError("pool exhausted at db-internal:5432")

    caplog.set_level(logging.INFO, logger="main")
    app.dependency_overrides[get_storage] = unavailable_storage
    try:
        with TestClient(app, raise_server_exceptions=False) as client:
            response = client.get("/api/contact")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Internal Server Error"}
    assert "db-internal" not in response.text
    assert any(r.getMessage().startswith("GET /api/contact 500 in") for r in caplog.records)


def test_api_requests_are_logged(client, caplog):
    caplog.set_level(logging.INFO, logger="main")

    client.get("/api/contact")
    client.get("/health")

    lines = [r.getMessage() for r in caplog.records if r.name == "main"]
    api_lines = [line for line in lines if line.startswith("GET /api/contact 200 in")]
    assert len(api_lines) == 1
    assert api_lines[0].endswith(':: {"success":true,"data":[]}')
    assert not any("/health" in line for line in lines)
