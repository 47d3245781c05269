"""User resource schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate


class UserSchema(Schema):
    """Public representation of a user entity."""

    id = fields.Integer(required=True)
    email = fields.Email(required=True)
    name = fields.String(required=True)
    image_url = fields.String(required=True, data_key="imageUrl")
    website = fields.String(required=True)


class DetailsSchema(Schema):
    """Payload for updating the authenticated user's details."""

    email = fields.Email(required=True, validate=validate.Length(max=254))
    name = fields.String(load_default=None, validate=validate.Length(max=50))
    website = fields.Url(load_default=None, validate=validate.Length(max=200))
