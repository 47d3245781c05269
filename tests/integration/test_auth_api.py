"""Integration tests for the authentication endpoints."""

from __future__ import annotations

from tests.factories.user import DEFAULT_PASSWORD
from tests.helpers.assertions import assert_problem, assert_token_pair
from tests.helpers.auth import bearer

API = "/api/v1"


def _signup(client, email: str = "user@example.com", password: str = "secret123") -> dict:
    resp = client.post(f"{API}/auth/signup", json={"email": email, "password": password})
    assert resp.status_code == 201, resp.get_data(as_text=True)
    return assert_token_pair(resp.get_json())


def test_signup_signin_refresh_signout_flow(client) -> None:
    tokens = _signup(client)

    resp = client.post(
        f"{API}/auth/signin", json={"email": "user@example.com", "password": "secret123"}
    )
    assert resp.status_code == 200
    signin_tokens = assert_token_pair(resp.get_json())

    resp = client.post(f"{API}/auth/tokens", json={"refresh_token": signin_tokens["refreshToken"]})
    assert resp.status_code == 200
    refreshed = assert_token_pair(resp.get_json())
    assert refreshed["refreshToken"] != signin_tokens["refreshToken"]

    resp = client.post(f"{API}/auth/signout", headers=bearer(refreshed["idToken"]))
    assert resp.status_code == 200

    for rt in (tokens["refreshToken"], refreshed["refreshToken"]):
        resp = client.post(f"{API}/auth/tokens", json={"refresh_token": rt})
        assert_problem(resp, 401, "unauthorized")


def test_refresh_token_cannot_be_redeemed_twice(client) -> None:
    tokens = _signup(client)

    first = client.post(f"{API}/auth/tokens", json={"refresh_token": tokens["refreshToken"]})
    second = client.post(f"{API}/auth/tokens", json={"refresh_token": tokens["refreshToken"]})

    assert first.status_code == 200
    body = assert_problem(second, 401, "unauthorized")
    assert body["detail"] == "Unauthorized"


def test_signup_duplicate_email_conflicts(client, user) -> None:
    resp = client.post(f"{API}/auth/signup", json={"email": user.email, "password": "secret123"})

    assert_problem(resp, 409, "conflict")


def test_signup_validation_error(client) -> None:
    resp = client.post(f"{API}/auth/signup", json={"email": "not-an-email", "password": "x"})

    body = assert_problem(resp, 422, "validation_error")
    assert set(body["details"]["errors"]) == {"email", "password"}


def test_signin_with_bad_credentials_is_generic(client, user) -> None:
    wrong_password = client.post(
        f"{API}/auth/signin", json={"email": user.email, "password": "wrong-one"}
    )
    unknown_email = client.post(
        f"{API}/auth/signin", json={"email": "ghost@example.com", "password": DEFAULT_PASSWORD}
    )

    a = assert_problem(wrong_password, 401, "unauthorized")
    b = assert_problem(unknown_email, 401, "unauthorized")
    assert a["detail"] == b["detail"]


def test_tokens_requires_refresh_token(client) -> None:
    resp = client.post(f"{API}/auth/tokens", json={})

    assert_problem(resp, 422, "validation_error")


def test_tokens_with_garbage_is_bad_request(client) -> None:
    resp = client.post(f"{API}/auth/tokens", json={"refresh_token": "garbage"})

    assert_problem(resp, 400, "bad_request")


def test_signout_requires_bearer(client) -> None:
    assert_problem(client.post(f"{API}/auth/signout"), 401, "unauthorized")
    assert_problem(
        client.post(f"{API}/auth/signout", headers={"Authorization": "Token abc"}),
        401,
        "unauthorized",
    )


def test_request_id_is_echoed(client) -> None:
    resp = client.get(f"{API}/health", headers={"X-Request-ID": "rid-123"})

    assert resp.headers["X-Request-ID"] == "rid-123"
