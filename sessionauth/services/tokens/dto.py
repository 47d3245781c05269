"""
DTOs for TokenService.

The token service accepts any user-like object (ORM model or DTO) and
returns plain dataclasses, so it never depends on the persistence layer.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

# --------------------------------------------------------------------------- #
# Inputs
# --------------------------------------------------------------------------- #


class TokenUser(Protocol):
    """Minimal view of a user needed to build identity claims."""

    @property
    def id(self) -> int: ...

    @property
    def email(self) -> str: ...


#: Resolves a user id to a user-like object, or ``None`` when it no longer exists.
UserLookup = Callable[[int], "TokenUser | None"]


# --------------------------------------------------------------------------- #
# Outputs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class TokenPair:
    """
    Output DTO with the identity and refresh tokens.

    :param identity_token: RS256-signed JWT, verifiable with the public key alone.
    :type identity_token: str
    :param refresh_token: HS256-tagged JWT carrying the refresh identifier.
    :type refresh_token: str
    """

    identity_token: str
    refresh_token: str


@dataclass(frozen=True, slots=True)
class RefreshToken:
    """
    A refresh token known to be authentic and present in the repository.

    :param id: Refresh identifier (UUID4 string).
    :param user_id: Owning user.
    :param expires_at: Timezone-aware UTC expiry.
    :param signed: Encoded token as handed to the client.
    """

    id: str
    user_id: int
    expires_at: datetime
    signed: str
