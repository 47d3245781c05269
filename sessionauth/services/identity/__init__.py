from __future__ import annotations

from .dto import SigninIn, SignupIn, UpdateDetailsIn, UserPublicOut
from .service import IdentityService

__all__ = ["IdentityService", "SigninIn", "SignupIn", "UpdateDetailsIn", "UserPublicOut"]
