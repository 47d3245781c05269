"""Claim structures and JWT encode/decode helpers for both token kinds."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey, RSAPublicKey
from jwt.utils import base64url_decode

IDENTITY_ALGORITHM = "RS256"
REFRESH_ALGORITHM = "HS256"

_IDENTITY_REQUIRED = ["sub", "iat", "exp"]
_REFRESH_REQUIRED = ["sub", "jti", "iat", "exp"]


@dataclass(frozen=True, slots=True)
class IdentityClaims:
    """
    Claims carried by an identity token.

    :param sub: User id in string form.
    :param iat: Issued-at (epoch seconds).
    :param exp: Expiry (epoch seconds).
    :param email: User email.
    :param name: Display name, may be empty.
    """

    sub: str
    iat: int
    exp: int
    email: str = ""
    name: str = ""

    @classmethod
    def issue(
        cls, *, user_id: int, email: str, name: str, now: datetime, ttl: timedelta
    ) -> IdentityClaims:
        return cls(
            sub=str(user_id),
            iat=int(now.timestamp()),
            exp=int((now + ttl).timestamp()),
            email=email,
            name=name,
        )

    @property
    def user_id(self) -> int:
        return int(self.sub)


@dataclass(frozen=True, slots=True)
class RefreshClaims:
    """Claims carried by a refresh token; ``jti`` is the repository member."""

    sub: str
    jti: str
    iat: int
    exp: int

    @classmethod
    def issue(cls, *, user_id: int, token_id: str, now: datetime, ttl: timedelta) -> RefreshClaims:
        return cls(
            sub=str(user_id),
            jti=token_id,
            iat=int(now.timestamp()),
            exp=int((now + ttl).timestamp()),
        )

    @property
    def user_id(self) -> int:
        return int(self.sub)

    @property
    def expires_at(self) -> datetime:
        return datetime.fromtimestamp(self.exp, UTC)


def encode_identity(claims: IdentityClaims, private_key: RSAPrivateKey) -> str:
    return jwt.encode(asdict(claims), private_key, algorithm=IDENTITY_ALGORITHM)


def decode_identity(token: str, public_key: RSAPublicKey, *, leeway: timedelta) -> IdentityClaims:
    """
    Verify an identity token and return its claims.

    Only RS256 is accepted; a header naming any other algorithm fails with
    :class:`jwt.InvalidAlgorithmError`.

    :raises jwt.InvalidTokenError: On any verification failure.
    """
    payload: dict[str, Any] = jwt.decode(
        token,
        public_key,
        algorithms=[IDENTITY_ALGORITHM],
        options={"require": _IDENTITY_REQUIRED},
        leeway=leeway,
    )
    return IdentityClaims(
        sub=_subject(payload),
        iat=int(payload["iat"]),
        exp=int(payload["exp"]),
        email=str(payload.get("email", "")),
        name=str(payload.get("name", "")),
    )


def encode_refresh(claims: RefreshClaims, secret: str) -> str:
    return jwt.encode(asdict(claims), secret, algorithm=REFRESH_ALGORITHM)


def decode_refresh(token: str, secret: str, *, leeway: timedelta) -> RefreshClaims:
    """
    Verify the HMAC tag of a refresh token and return its claims.

    :raises jwt.InvalidTokenError: On any verification failure.
    """
    payload: dict[str, Any] = jwt.decode(
        token,
        secret,
        algorithms=[REFRESH_ALGORITHM],
        options={"require": _REFRESH_REQUIRED},
        leeway=leeway,
    )
    return RefreshClaims(
        sub=_subject(payload),
        jti=str(payload["jti"]),
        iat=int(payload["iat"]),
        exp=int(payload["exp"]),
    )


def _subject(payload: dict[str, Any]) -> str:
    sub = str(payload["sub"])
    if not sub.isdigit():
        raise jwt.InvalidTokenError("subject is not a user id")
    return sub


def is_well_formed(token: str) -> bool:
    """
    Whether ``token`` parses as a compact JWS: three segments, with a header
    and payload that decode to JSON objects. The signature is not inspected.
    """
    segments = token.split(".")
    if len(segments) != 3:
        return False
    try:
        return all(isinstance(json.loads(base64url_decode(s)), dict) for s in segments[:2])
    except ValueError:
        return False
