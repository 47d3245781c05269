"""Unit tests for configuration loading."""

from __future__ import annotations

import runpy
from datetime import timedelta
from pathlib import Path

import pytest

from sessionauth.core.config import (
    ConfigError,
    DevelopmentConfig,
    ProductionConfig,
    ServerConfig,
    TestingConfig,
    TokenConfig,
    get_config,
)

BASE = {
    "PRIV_KEY_FILE": "/keys/rsa_private.pem",
    "PUB_KEY_FILE": "/keys/rsa_public.pem",
    "REFRESH_SECRET": "s3cret-s3cret-s3cret-s3cret-s3cret",
    "ID_TOKEN_EXP": "900",
    "REFRESH_TOKEN_EXP": "259200",
}


def test_token_config_from_mapping() -> None:
    cfg = TokenConfig.from_mapping(BASE)

    assert cfg.id_token_ttl == timedelta(minutes=15)
    assert cfg.refresh_token_ttl == timedelta(days=3)
    assert cfg.leeway == timedelta(0)
    assert cfg.refresh_secret == BASE["REFRESH_SECRET"]


def test_token_config_accepts_explicit_leeway() -> None:
    cfg = TokenConfig.from_mapping({**BASE, "TOKEN_LEEWAY": "30"})

    assert cfg.leeway == timedelta(seconds=30)


@pytest.mark.parametrize("missing", ["PRIV_KEY_FILE", "PUB_KEY_FILE", "REFRESH_SECRET"])
def test_token_config_requires_key_settings(missing: str) -> None:
    settings = {**BASE, missing: ""}

    with pytest.raises(ConfigError, match=missing):
        TokenConfig.from_mapping(settings)


def test_token_config_rejects_short_refresh_secret() -> None:
    with pytest.raises(ConfigError, match="REFRESH_SECRET"):
        TokenConfig.from_mapping({**BASE, "REFRESH_SECRET": "too-short"})


@pytest.mark.parametrize("value", ["0", "-5", "fifteen", ""])
def test_token_config_rejects_bad_lifetimes(value: str) -> None:
    with pytest.raises(ConfigError, match="ID_TOKEN_EXP"):
        TokenConfig.from_mapping({**BASE, "ID_TOKEN_EXP": value})


def test_token_config_is_immutable() -> None:
    cfg = TokenConfig.from_mapping(BASE)

    with pytest.raises(AttributeError):
        cfg.refresh_secret = "other"  # type: ignore[misc]


@pytest.mark.parametrize(
    ("env", "expected"),
    [
        ("testing", TestingConfig),
        ("production", ProductionConfig),
        ("development", DevelopmentConfig),
        ("unknown", DevelopmentConfig),
    ],
)
def test_get_config_follows_app_env(monkeypatch: pytest.MonkeyPatch, env: str, expected) -> None:
    monkeypatch.setenv("APP_ENV", env)

    assert get_config() is expected


def test_server_config_defaults() -> None:
    cfg = ServerConfig.from_env({})

    assert cfg == ServerConfig(port=8000, handler_timeout=60, graceful_timeout=5, workers=2)


def test_server_config_reads_environment() -> None:
    cfg = ServerConfig.from_env(
        {"SERVER_PORT": "8080", "HANDLER_TIMEOUT": "10", "GRACEFUL_TIMEOUT": "3"}
    )

    assert cfg.port == 8080
    assert cfg.handler_timeout == 10
    assert cfg.graceful_timeout == 3


@pytest.mark.parametrize(
    ("key", "value"),
    [("SERVER_PORT", "70000"), ("SERVER_PORT", "http"), ("HANDLER_TIMEOUT", "0")],
)
def test_server_config_rejects_bad_values(key: str, value: str) -> None:
    with pytest.raises(ConfigError, match=key):
        ServerConfig.from_env({key: value})


def test_gunicorn_conf_applies_server_config(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SERVER_PORT", "9000")
    monkeypatch.setenv("HANDLER_TIMEOUT", "15")
    monkeypatch.setenv("GRACEFUL_TIMEOUT", "5")

    conf = runpy.run_path(str(Path(__file__).resolve().parents[2] / "gunicorn.conf.py"))

    assert conf["bind"] == "0.0.0.0:9000"
    assert conf["timeout"] == 15
    assert conf["graceful_timeout"] == 5
    assert conf["wsgi_app"] == "sessionauth:create_app()"
