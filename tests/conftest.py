"""Global pytest fixtures for the sessionauth service."""

from __future__ import annotations

from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import fakeredis
import pytest
from flask import Flask

from sessionauth import create_app
from sessionauth.core.config import TestingConfig, TokenConfig
from sessionauth.core.extensions import db
from sessionauth.infra.crypto.pem_signing_material import (
    load_pem_signing_material,
    write_rsa_keypair,
)
from sessionauth.models.user import User
from sessionauth.services._shared.ports import SigningMaterial

from tests.factories.user import UserFactory
from tests.helpers.auth import TEST_REFRESH_SECRET


@pytest.fixture(scope="session")
def rsa_key_files(tmp_path_factory: pytest.TempPathFactory) -> tuple[Path, Path]:
    """Write one RSA key pair for the whole test session."""

    return write_rsa_keypair(tmp_path_factory.mktemp("keys"))


@pytest.fixture(scope="session")
def test_config(rsa_key_files: tuple[Path, Path]) -> type[TestingConfig]:
    """``TestingConfig`` pointing at the session key pair."""

    priv, pub = rsa_key_files

    class _Config(TestingConfig):
        PRIV_KEY_FILE = str(priv)
        PUB_KEY_FILE = str(pub)
        REFRESH_SECRET = TEST_REFRESH_SECRET
        ID_TOKEN_EXP = "900"
        REFRESH_TOKEN_EXP = "3600"
        TOKEN_LEEWAY = "0"
        LOG_LEVEL = "WARNING"
        LOG_FILE = None

    return _Config


@pytest.fixture(scope="session")
def signing(rsa_key_files: tuple[Path, Path]) -> SigningMaterial:
    """Signing material loaded from the session key pair."""

    priv, pub = rsa_key_files
    return load_pem_signing_material(priv, pub, TEST_REFRESH_SECRET)


@pytest.fixture()
def token_config(test_config: type[TestingConfig]) -> TokenConfig:
    return TokenConfig.from_mapping(vars_of(test_config))


@pytest.fixture()
def redis_client() -> fakeredis.FakeRedis:
    """A fresh in-process Redis per test."""

    return fakeredis.FakeRedis()


@pytest.fixture()
def app(
    test_config: type[TestingConfig], redis_client: fakeredis.FakeRedis
) -> Generator[Flask, None, None]:
    """Create the application with an in-memory database and fake Redis."""

    application = create_app(
        test_config, redis_client=redis_client, instance_relative_config=False
    )
    with application.app_context():
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def session(app: Flask) -> Any:
    """The Flask-scoped SQLAlchemy session."""

    return db.session


@pytest.fixture()
def client(app: Flask) -> Any:
    """Return a Flask test client."""

    return app.test_client()


@pytest.fixture()
def user(session: Any) -> User:
    """Persist and return a user instance (password: ``DEFAULT_PASSWORD``)."""

    return UserFactory()


@pytest.fixture()
def freeze_time() -> Callable[[str | None], Any]:
    """Factory returning :func:`freezegun.freeze_time`.

    Examples
    --------
    >>> def test_with_frozen_time(freeze_time):
    ...     with freeze_time("2024-01-01"):
    ...         ...
    """

    from freezegun import freeze_time as _freeze_time

    def _factory(target: str | None = None) -> Any:
        return _freeze_time(target or "2024-01-01")

    return _factory


def vars_of(config_cls: type) -> dict[str, Any]:
    """Collect upper-case settings from a config class, like ``from_object``."""

    return {key: getattr(config_cls, key) for key in dir(config_cls) if key.isupper()}
