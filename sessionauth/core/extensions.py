"""Global Flask extension instances and initialization helpers."""

from __future__ import annotations

import redis
from flask import Flask
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_sqlalchemy import SQLAlchemy
from redis.exceptions import RedisError
from sqlalchemy import MetaData

# Global naming convention for all constraints
convention = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)

# Global singletons (import-safe)
db: SQLAlchemy = SQLAlchemy(session_options={"autoflush": False}, metadata=metadata)
limiter = Limiter(key_func=get_remote_address)

REDIS_EXTENSION_KEY = "redis_client"
TOKEN_CONFIG_KEY = "token_config"
SIGNING_MATERIAL_KEY = "signing_material"


def init_app(app: Flask, *, redis_client: redis.Redis | None = None) -> None:
    """Initialize SQLAlchemy, the rate limiter and the session-store client.

    Parameters
    ----------
    app: flask.Flask
        Application used to bind extension instances.
    redis_client: redis.Redis | None
        Pre-built client (tests pass a ``fakeredis.FakeRedis``). When omitted,
        a client is created from ``REDIS_URL`` and pinged so startup fails
        fast if the store is unreachable.
    """
    db.init_app(app)

    # Ensure models are imported so metadata is complete
    from sessionauth import models as _models  # noqa: F401

    limiter.init_app(app)

    if redis_client is None:
        redis_url = app.config.get("REDIS_URL")
        if not redis_url:
            raise RuntimeError("REDIS_URL is not configured and no Redis client was provided.")
        redis_client = redis.Redis.from_url(
            redis_url,
            socket_timeout=float(app.config.get("REDIS_SOCKET_TIMEOUT", 5)),
        )
        try:
            redis_client.ping()
        except RedisError as exc:
            raise RuntimeError(f"Failed to connect to Redis at {redis_url!r}") from exc

    app.extensions[REDIS_EXTENSION_KEY] = redis_client


def get_redis(app: Flask) -> redis.Redis:
    """Return the session-store client bound to ``app``."""
    client = app.extensions.get(REDIS_EXTENSION_KEY)
    if client is None:
        raise RuntimeError("Redis client is not initialized. Call init_app() first.")
    return client

