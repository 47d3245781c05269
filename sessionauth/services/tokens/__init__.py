"""Identity/refresh token issuance, validation and rotation."""

from __future__ import annotations

from .dto import RefreshToken, TokenPair, TokenUser, UserLookup
from .service import TokenService

__all__ = ["RefreshToken", "TokenPair", "TokenService", "TokenUser", "UserLookup"]
