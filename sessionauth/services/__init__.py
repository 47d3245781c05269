"""Service layer public API.

Re-exports
----------
- Base primitives (from ``sessionauth.services._shared.base``)
    * :class:`BaseService`
    * :class:`ServiceContext`

- Identity service (from ``sessionauth.services.identity``)
    * :class:`IdentityService`
    * DTOs: :class:`SignupIn`, :class:`SigninIn`, :class:`UpdateDetailsIn`,
      :class:`UserPublicOut`

- Token service (from ``sessionauth.services.tokens``)
    * :class:`TokenService`
    * DTOs: :class:`TokenPair`, :class:`RefreshToken`
"""

from __future__ import annotations

from sessionauth.services._shared.base import BaseService, ServiceContext
from sessionauth.services.identity import (
    IdentityService,
    SigninIn,
    SignupIn,
    UpdateDetailsIn,
    UserPublicOut,
)
from sessionauth.services.tokens import RefreshToken, TokenPair, TokenService

__all__ = [
    "BaseService",
    "ServiceContext",
    "IdentityService",
    "SigninIn",
    "SignupIn",
    "UpdateDetailsIn",
    "UserPublicOut",
    "TokenService",
    "TokenPair",
    "RefreshToken",
]
