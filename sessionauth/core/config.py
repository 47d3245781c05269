"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Final

from dotenv import load_dotenv

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'

# Loads .env in development (no-op when the file does not exist)
load_dotenv()


# HS256 key length floor, the SHA-256 digest size
MIN_REFRESH_SECRET_BYTES: Final[int] = 32


class ConfigError(RuntimeError):
    """Raised when a required setting is missing or cannot be parsed."""


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean flag from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: bool, optional
        Value returned when the variable is unset. Defaults to ``False``.

    Returns
    -------
    bool
        ``True`` if the value resembles ``{"1", "true", "yes", "y", "on"}``
        ignoring case; otherwise ``False`` or ``default`` when missing.
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    PRIV_KEY_FILE: str | None
        Path to the PEM-encoded RSA private key signing identity tokens.
    PUB_KEY_FILE: str | None
        Path to the PEM-encoded RSA public key verifying identity tokens.
    REFRESH_SECRET: str | None
        Symmetric secret authenticating refresh tokens (HS256).
    ID_TOKEN_EXP: str
        Identity token lifetime in seconds. Keep it short: issued identity
        tokens stay valid after signout until they expire.
    REFRESH_TOKEN_EXP: str
        Refresh token lifetime in seconds.
    TOKEN_LEEWAY: str
        Clock-skew tolerance in seconds applied to ``exp`` checks.
    SQLALCHEMY_DATABASE_URI: str
        Database connection string consumed by SQLAlchemy.
    REDIS_URL: str | None
        Session store location. Tests inject a fake client instead.
    REDIS_SOCKET_TIMEOUT: str
        Per-call deadline (seconds) applied by the Redis client.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    LOG_FILE: str | None
        Optional file that receives a copy of the JSON log stream.
    CORS_ORIGINS: str
        Comma-separated list of allowed origins for CORS.
    AUTH_SIGNIN_RATE_LIMIT: str
        Flask-Limiter expression applied to the sign-in endpoint.

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes. Token-related values are validated
    once at startup by :meth:`TokenConfig.from_mapping`.
    """

    API_BASE_PREFIX = "/api"

    # Secrets / signing material
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")
    PRIV_KEY_FILE = os.getenv("PRIV_KEY_FILE")
    PUB_KEY_FILE = os.getenv("PUB_KEY_FILE")
    REFRESH_SECRET = os.getenv("REFRESH_SECRET")

    # Token lifetimes (seconds)
    ID_TOKEN_EXP = os.getenv("ID_TOKEN_EXP", "900")
    REFRESH_TOKEN_EXP = os.getenv("REFRESH_TOKEN_EXP", "259200")
    TOKEN_LEEWAY = os.getenv("TOKEN_LEEWAY", "0")

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    # Session store
    REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    REDIS_SOCKET_TIMEOUT = os.getenv("REDIS_SOCKET_TIMEOUT", "5")

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Logging, CORS & rate limits
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_FILE = os.getenv("LOG_FILE")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173")
    AUTH_SIGNIN_RATE_LIMIT = os.getenv("AUTH_SIGNIN_RATE_LIMIT", "5 per minute")
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")

    # Flask built-ins
    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development."""

    DEBUG = env_bool("FLASK_DEBUG", True)
    CORS_MAX_AGE = 600  # 10 minutes


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Leaves ``REDIS_URL`` unset; the test suite injects a fake client.
    - Disables rate limiting so flows can sign in repeatedly.
    """

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    REDIS_URL = None
    RATELIMIT_ENABLED = False
    PROPAGATE_EXCEPTIONS = False


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments."""

    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False


# Map names -> classes (simple, explicit)
CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)


def _positive_int(
    settings: Mapping[str, Any],
    key: str,
    *,
    allow_zero: bool = False,
    default: str | None = None,
) -> int:
    raw = settings.get(key, default)
    if raw is None or str(raw).strip() == "":
        raise ConfigError(f"{key} is required")
    try:
        value = int(str(raw).strip(), 0)
    except ValueError as exc:
        raise ConfigError(f"could not parse {key} as int: {raw!r}") from exc
    if value < 0 or (value == 0 and not allow_zero):
        raise ConfigError(f"{key} must be a positive integer")
    return value


def _seconds(settings: Mapping[str, Any], key: str, **kwargs: Any) -> timedelta:
    return timedelta(seconds=_positive_int(settings, key, **kwargs))


def _required(settings: Mapping[str, Any], key: str) -> str:
    value = settings.get(key)
    if not value or not str(value).strip():
        raise ConfigError(f"{key} is required")
    return str(value)


def _refresh_secret(settings: Mapping[str, Any]) -> str:
    secret = _required(settings, "REFRESH_SECRET")
    if len(secret.encode("utf-8")) < MIN_REFRESH_SECRET_BYTES:
        raise ConfigError(f"REFRESH_SECRET must be at least {MIN_REFRESH_SECRET_BYTES} bytes")
    return secret


@dataclass(frozen=True, slots=True)
class TokenConfig:
    """
    Validated token settings, built once at startup.

    :param private_key_path: PEM file with the identity-token signing key.
    :param public_key_path: PEM file with the identity-token verification key.
    :param refresh_secret: HMAC secret for refresh tokens.
    :param id_token_ttl: Identity token lifetime.
    :param refresh_token_ttl: Refresh token lifetime.
    :param leeway: Clock-skew tolerance for ``exp`` checks (zero by default).
    """

    private_key_path: str
    public_key_path: str
    refresh_secret: str
    id_token_ttl: timedelta
    refresh_token_ttl: timedelta
    leeway: timedelta = timedelta(0)

    @classmethod
    def from_mapping(cls, settings: Mapping[str, Any]) -> TokenConfig:
        """
        Build the value object from a Flask config (or any mapping).

        :raises ConfigError: When a value is missing or unparseable.
        """
        return cls(
            private_key_path=_required(settings, "PRIV_KEY_FILE"),
            public_key_path=_required(settings, "PUB_KEY_FILE"),
            refresh_secret=_refresh_secret(settings),
            id_token_ttl=_seconds(settings, "ID_TOKEN_EXP"),
            refresh_token_ttl=_seconds(settings, "REFRESH_TOKEN_EXP"),
            leeway=_seconds(settings, "TOKEN_LEEWAY", allow_zero=True, default="0"),
        )


@dataclass(frozen=True, slots=True)
class ServerConfig:
    """
    Process-level serving settings consumed by ``gunicorn.conf.py``.

    :param port: TCP port to bind on all interfaces.
    :param handler_timeout: Seconds a worker may spend on one request before
        it is killed and restarted.
    :param graceful_timeout: Seconds in-flight requests get to finish after a
        shutdown signal.
    :param workers: Number of worker processes.
    """

    port: int
    handler_timeout: int
    graceful_timeout: int
    workers: int

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ServerConfig:
        """
        Read ``SERVER_PORT``, ``HANDLER_TIMEOUT``, ``GRACEFUL_TIMEOUT`` and
        ``GUNICORN_WORKERS`` from the environment.

        :raises ConfigError: When a value is not a positive integer or the
            port is out of range.
        """
        env = os.environ if environ is None else environ
        port = _positive_int(env, "SERVER_PORT", default="8000")
        if port > 65535:
            raise ConfigError(f"SERVER_PORT out of range: {port}")
        return cls(
            port=port,
            handler_timeout=_positive_int(env, "HANDLER_TIMEOUT", default="60"),
            graceful_timeout=_positive_int(env, "GRACEFUL_TIMEOUT", default="5"),
            workers=_positive_int(env, "GUNICORN_WORKERS", default="2"),
        )
