"""Authentication endpoints using the service layer."""

from __future__ import annotations

from flask import Blueprint, current_app, g, request

from sessionauth.api.deps import (
    build_identity_service,
    build_token_service,
    json_response,
    require_auth,
    service_errors,
    timing,
)
from sessionauth.core.extensions import limiter
from sessionauth.schemas import (
    SigninSchema,
    SignupSchema,
    TokenPairSchema,
    TokensRequestSchema,
)
from sessionauth.services.identity import SigninIn, SignupIn

bp = Blueprint("auth", __name__)

signup_schema = SignupSchema()
signin_schema = SigninSchema()
tokens_request_schema = TokensRequestSchema()
token_pair_schema = TokenPairSchema()


def _signin_rate_limit() -> str:
    return str(current_app.config.get("AUTH_SIGNIN_RATE_LIMIT", "5 per minute"))


@bp.post("/signup")
@timing
def signup():
    """Create an account and return its first token pair."""

    data = signup_schema.load(request.get_json(silent=True) or {})
    identity = build_identity_service()
    with service_errors():
        user = identity.signup(SignupIn(**data))
        pair = build_token_service(identity).new_pair_from_user(user)
    return json_response({"tokens": token_pair_schema.dump(pair)}, status=201)


@bp.post("/signin")
@limiter.limit(_signin_rate_limit)
@timing
def signin():
    """Verify credentials and issue a token pair."""

    data = signin_schema.load(request.get_json(silent=True) or {})
    identity = build_identity_service()
    with service_errors():
        user = identity.signin(SigninIn(**data))
        pair = build_token_service(identity).new_pair_from_user(user)
    return json_response({"tokens": token_pair_schema.dump(pair)})


@bp.post("/tokens")
@timing
def tokens():
    """Redeem a refresh token for a new pair."""

    data = tokens_request_schema.load(request.get_json(silent=True) or {})
    with service_errors():
        pair = build_token_service().refresh(data["refresh_token"])
    return json_response({"tokens": token_pair_schema.dump(pair)})


@bp.post("/signout")
@require_auth
@timing
def signout():
    """Revoke every refresh token of the authenticated user."""

    with service_errors():
        build_token_service().signout(g.user_id)
    return json_response({"message": "user signed out successfully!"})
