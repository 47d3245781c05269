"""Endpoints for the authenticated user's own account."""

from __future__ import annotations

from flask import Blueprint, g, request

from sessionauth.api.deps import (
    build_identity_service,
    json_response,
    require_auth,
    service_errors,
    timing,
)
from sessionauth.schemas import DetailsSchema, UserSchema
from sessionauth.services.identity import UpdateDetailsIn

bp = Blueprint("users", __name__)

user_schema = UserSchema()
details_schema = DetailsSchema()


@bp.get("/me")
@require_auth
@timing
def me():
    """Return the authenticated user."""

    with service_errors():
        user = build_identity_service().get_user(g.user_id)
    return json_response({"user": user_schema.dump(user)})


@bp.put("/details")
@require_auth
@timing
def details():
    """Update name, email and website of the authenticated user."""

    data = details_schema.load(request.get_json(silent=True) or {})
    with service_errors():
        user = build_identity_service().update_details(g.user_id, UpdateDetailsIn(**data))
    return json_response({"user": user_schema.dump(user)})
