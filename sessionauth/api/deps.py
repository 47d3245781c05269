"""Shared API helpers for request parsing and cross-cutting concerns."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, TypeVar

from flask import Response, current_app, g, jsonify, request

from sessionauth.core.errors import Unauthorized
from sessionauth.core.extensions import SIGNING_MATERIAL_KEY, TOKEN_CONFIG_KEY, get_redis
from sessionauth.core.logger import ensure_request_id, request_logger
from sessionauth.infra.redis.redis_token_repository import RedisTokenRepository
from sessionauth.services._shared.base import BaseService, ServiceContext
from sessionauth.services._shared.errors import ServiceError
from sessionauth.services.identity import IdentityService
from sessionauth.services.tokens import TokenService

F = TypeVar("F", bound=Callable[..., Any])

BEARER_PREFIX = "Bearer "


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]


@contextmanager
def service_errors() -> Iterator[None]:
    """Re-raise service-layer errors as their HTTP counterparts."""

    try:
        yield
    except ServiceError as exc:
        raise BaseService.translate_exceptions(exc) from exc


# --------------------------------------------------------------------------- #
# Service wiring
# --------------------------------------------------------------------------- #


def _context() -> ServiceContext:
    return ServiceContext(actor_id=getattr(g, "user_id", None), request_id=ensure_request_id())


def build_identity_service() -> IdentityService:
    """Return an identity service bound to the current request."""

    return IdentityService(ctx=_context(), logger=request_logger("sessionauth.services.identity"))


def build_token_service(identity: IdentityService | None = None) -> TokenService:
    """Return a token service wired to the app's Redis client and signing material."""

    app = current_app._get_current_object()  # type: ignore[attr-defined]
    identity = identity or build_identity_service()
    return TokenService(
        repository=RedisTokenRepository(get_redis(app)),
        signing=app.extensions[SIGNING_MATERIAL_KEY],
        config=app.extensions[TOKEN_CONFIG_KEY],
        user_lookup=identity.find_by_id,
        ctx=_context(),
        logger=request_logger("sessionauth.services.tokens"),
    )


# --------------------------------------------------------------------------- #
# Authentication
# --------------------------------------------------------------------------- #


def bearer_token() -> str:
    """
    Extract the identity token from ``Authorization: Bearer <token>``.

    :raises Unauthorized: When the header is missing or malformed.
    """

    header = request.headers.get("Authorization", "")
    if not header.startswith(BEARER_PREFIX) or not header[len(BEARER_PREFIX) :].strip():
        raise Unauthorized("Must provide Authorization header with format `Bearer {token}`")
    return header[len(BEARER_PREFIX) :].strip()


def require_auth(func: F) -> F:
    """Ensure the request carries a valid identity token; sets ``g.user_id``."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        token = bearer_token()
        with service_errors():
            g.user_id = build_token_service().validate_identity_token(token)
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]
