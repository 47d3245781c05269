"""Assertion helper utilities for tests."""

from __future__ import annotations

from typing import Any


def assert_json_keys(data: dict, required: set[str]) -> None:
    """Ensure that all required keys are present in ``data``.

    Raises
    ------
    AssertionError
        If any required key is missing.
    """

    missing = required - data.keys()
    assert not missing, f"Missing keys: {', '.join(sorted(missing))}"


def assert_problem(resp: Any, status: int, code: str) -> dict:
    """Validate an RFC 7807 problem response and return its body."""

    assert resp.status_code == status, resp.get_data(as_text=True)
    assert resp.mimetype == "application/problem+json"
    body = resp.get_json()
    assert_json_keys(body, {"type", "title", "status", "detail", "code", "request_id"})
    assert body["status"] == status
    assert body["code"] == code
    return body


def assert_token_pair(body: dict) -> dict:
    """Validate a ``{"tokens": {...}}`` body and return the pair."""

    assert_json_keys(body, {"tokens"})
    assert_json_keys(body["tokens"], {"idToken", "refreshToken"})
    return body["tokens"]
