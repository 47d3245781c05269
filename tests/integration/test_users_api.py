"""Integration tests for the account endpoints."""

from __future__ import annotations

from tests.helpers.assertions import assert_json_keys, assert_problem
from tests.helpers.auth import bearer, corrupt_signature_char, flip_signature_byte

API = "/api/v1"


def _id_token(client, email: str = "me@example.com") -> str:
    resp = client.post(f"{API}/auth/signup", json={"email": email, "password": "secret123"})
    assert resp.status_code == 201
    return resp.get_json()["tokens"]["idToken"]


def test_me_returns_current_user(client) -> None:
    token = _id_token(client)

    resp = client.get(f"{API}/me", headers=bearer(token))

    assert resp.status_code == 200
    user = resp.get_json()["user"]
    assert_json_keys(user, {"id", "email", "name", "imageUrl", "website"})
    assert user["email"] == "me@example.com"


def test_me_requires_auth(client) -> None:
    assert_problem(client.get(f"{API}/me"), 401, "unauthorized")


def test_me_rejects_tampered_token(client) -> None:
    token = _id_token(client)

    resp = client.get(f"{API}/me", headers=bearer(flip_signature_byte(token)))

    body = assert_problem(resp, 401, "unauthorized")
    assert body["detail"] == "Unauthorized"


def test_me_rejects_signature_with_invalid_characters(client) -> None:
    token = _id_token(client)

    resp = client.get(f"{API}/me", headers=bearer(corrupt_signature_char(token)))

    assert_problem(resp, 401, "unauthorized")


def test_me_rejects_undecodable_token(client) -> None:
    assert_problem(client.get(f"{API}/me", headers=bearer("garbage")), 400, "bad_request")


def test_update_details(client) -> None:
    token = _id_token(client)

    resp = client.put(
        f"{API}/details",
        headers=bearer(token),
        json={"email": "me@example.com", "name": "Ada", "website": "https://ada.example.com"},
    )

    assert resp.status_code == 200
    user = resp.get_json()["user"]
    assert user["name"] == "Ada"
    assert user["website"] == "https://ada.example.com"


def test_update_details_email_taken(client) -> None:
    _id_token(client, "taken@example.com")
    token = _id_token(client)

    resp = client.put(f"{API}/details", headers=bearer(token), json={"email": "taken@example.com"})

    assert_problem(resp, 409, "conflict")


def test_health(client) -> None:
    resp = client.get(f"{API}/health")

    assert resp.status_code == 200
    assert resp.get_json()["redis"] == "ok"
