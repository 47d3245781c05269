"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import SigninSchema, SignupSchema, TokenPairSchema, TokensRequestSchema
from .user import DetailsSchema, UserSchema

__all__ = [
    "SignupSchema",
    "SigninSchema",
    "TokensRequestSchema",
    "TokenPairSchema",
    "UserSchema",
    "DetailsSchema",
]
