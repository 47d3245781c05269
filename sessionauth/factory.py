"""Application factory wiring Flask extensions and blueprints."""

from __future__ import annotations

import redis
from flask import Flask

from sessionauth.core.config import BaseConfig, TokenConfig, get_config
from sessionauth.core.logger import configure_logging, init_app as init_logging


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    redis_client: redis.Redis | None = None,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
) -> Flask:
    """Build and configure the Flask application.

    Token settings and signing material are loaded here, before any request
    is served; a missing key file or bad value aborts startup with
    :class:`~sessionauth.core.config.ConfigError` or
    :class:`~sessionauth.services._shared.ports.SigningMaterialError`.

    :param config: Config class, object or import path; defaults to ``APP_ENV``.
    :param redis_client: Pre-built session-store client (tests use fakeredis).
    """

    app = Flask(__name__, instance_relative_config=instance_relative_config)

    app.config.from_object(get_config() if config is None else config)
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"), app.config.get("LOG_FILE"))

    from sessionauth.core import extensions

    extensions.init_app(app, redis_client=redis_client)

    from sessionauth.infra.crypto.pem_signing_material import load_from_config

    token_cfg = TokenConfig.from_mapping(app.config)
    app.extensions[extensions.TOKEN_CONFIG_KEY] = token_cfg
    app.extensions[extensions.SIGNING_MATERIAL_KEY] = load_from_config(token_cfg)

    init_logging(app)

    from sessionauth.core import cors

    cors.init_app(app)

    from sessionauth.api import init_app as init_api

    init_api(app)

    from sessionauth.core import errors

    errors.init_app(app)

    from sessionauth import cli as app_cli

    app_cli.init_app(app)

    return app
