"""
TokenService
============

Issues, validates, rotates and revokes session tokens.

- Identity tokens are RS256 JWTs. They are verified with the public key alone
  and the service keeps no state for them.
- Refresh tokens are HS256 JWTs whose ``jti`` must be present in the
  :class:`TokenRepository` under the owning user.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import NoReturn
from uuid import uuid4

import jwt

from sessionauth.core.config import TokenConfig
from sessionauth.services._shared.base import BaseService, ServiceContext
from sessionauth.services._shared.errors import (
    AuthorizationError,
    BadRequestError,
    InternalError,
    ServiceError,
)
from sessionauth.services._shared.ports import SigningMaterialProvider, TokenRepository
from sessionauth.services.tokens import claims as codec
from sessionauth.services.tokens.dto import RefreshToken, TokenPair, TokenUser, UserLookup


class TokenService(BaseService):
    """
    Token lifecycle service (issue / validate / refresh / signout).

    Callers only ever see :class:`AuthorizationError` for a bad token; the
    specific cause is written to the log.
    """

    def __init__(
        self,
        *,
        repository: TokenRepository,
        signing: SigningMaterialProvider,
        config: TokenConfig,
        user_lookup: UserLookup | None = None,
        clock: Callable[[], datetime] | None = None,
        ctx: ServiceContext | None = None,
        logger: logging.Logger | logging.LoggerAdapter | None = None,
    ) -> None:
        """
        :param repository: Refresh-token store.
        :param signing: Keys and refresh secret, loaded at startup.
        :param config: Token lifetimes and leeway.
        :param user_lookup: Resolves a user id during :meth:`refresh`.
        :param clock: Returns the current UTC time; defaults to :meth:`now_utc`.
        """
        super().__init__(ctx=ctx, logger=logger)
        self.repository = repository
        self.signing = signing
        self.cfg = config
        self.user_lookup = user_lookup
        self.clock = clock or self.now_utc

    # ------------------------------------------------------------------ #
    # Issue / rotate
    # ------------------------------------------------------------------ #

    def new_pair_from_user(
        self, user: TokenUser, previous: RefreshToken | None = None
    ) -> TokenPair:
        """
        Issue a fresh token pair for ``user``.

        When ``previous`` is given it is deleted from the repository before the
        new refresh identifier is stored. If nothing was deleted the previous
        token was already redeemed or revoked and the call fails.

        :param user: Object exposing ``id``, ``email`` and optionally ``name``.
        :param previous: A refresh token returned by :meth:`validate_refresh_token`.
        :returns: New identity/refresh pair.
        :raises AuthorizationError: When ``previous`` was already consumed.
        :raises InternalError: When signing or the repository fails.
        """
        now = self.clock()
        user_id = int(user.id)

        id_claims = codec.IdentityClaims.issue(
            user_id=user_id,
            email=user.email,
            name=getattr(user, "name", "") or "",
            now=now,
            ttl=self.cfg.id_token_ttl,
        )
        rt_claims = codec.RefreshClaims.issue(
            user_id=user_id,
            token_id=str(uuid4()),
            now=now,
            ttl=self.cfg.refresh_token_ttl,
        )
        try:
            identity_token = codec.encode_identity(id_claims, self.signing.private_key)
            refresh_token = codec.encode_refresh(rt_claims, self.signing.refresh_secret)
        except (jwt.PyJWTError, ValueError, TypeError) as exc:
            self.log.error(
                "token.sign_failed", extra={"event": "token.sign_failed", "user_id": user_id}
            )
            raise InternalError("Could not sign tokens") from exc

        # Rotation: delete the old identifier before storing the new one
        if previous is not None:
            if previous.user_id != user_id:
                self._reject("user_mismatch", user_id=previous.user_id)
            if not self.repository.delete_refresh_token(str(previous.user_id), previous.id):
                self._reject("refresh_reused", user_id=previous.user_id)
            self.log.info(
                "token.rotated", extra={"event": "token.rotated", "user_id": previous.user_id}
            )

        self.repository.set_refresh_token(
            str(user_id), rt_claims.jti, self.cfg.refresh_token_ttl
        )
        self.log.info("token.issued", extra={"event": "token.issued", "user_id": user_id})
        return TokenPair(identity_token=identity_token, refresh_token=refresh_token)

    # ------------------------------------------------------------------ #
    # Validation
    # ------------------------------------------------------------------ #

    def validate_identity_token(self, token: str) -> int:
        """
        Verify an identity token and return its user id.

        :raises BadRequestError: When the token cannot be decoded at all.
        :raises AuthorizationError: When the signature, algorithm or expiry is invalid.
        """
        try:
            claims = codec.decode_identity(token, self.signing.public_key, leeway=self.cfg.leeway)
        except jwt.InvalidTokenError as exc:
            raise self._decode_failure(exc, token, kind="identity") from exc
        return claims.user_id

    def validate_refresh_token(self, token: str) -> RefreshToken:
        """
        Verify a refresh token and confirm it is still live in the repository.

        The HMAC tag is checked before the repository is touched.

        :raises BadRequestError: When the token cannot be decoded at all.
        :raises AuthorizationError: When the token is invalid, expired, redeemed or revoked.
        :raises InternalError: When the repository is unavailable.
        """
        try:
            claims = codec.decode_refresh(token, self.signing.refresh_secret, leeway=self.cfg.leeway)
        except jwt.InvalidTokenError as exc:
            raise self._decode_failure(exc, token, kind="refresh") from exc

        if not self.repository.exists(claims.sub, claims.jti):
            self._reject("refresh_not_found", user_id=claims.user_id)

        return RefreshToken(
            id=claims.jti,
            user_id=claims.user_id,
            expires_at=claims.expires_at,
            signed=token,
        )

    # ------------------------------------------------------------------ #
    # Refresh / signout
    # ------------------------------------------------------------------ #

    def refresh(self, token: str) -> TokenPair:
        """
        Redeem a refresh token for a new pair; the old token stops working.

        :raises AuthorizationError: When the token is not redeemable or its user is gone.
        """
        if self.user_lookup is None:
            raise InternalError("User lookup is not configured")

        validated = self.validate_refresh_token(token)
        user = self.user_lookup(validated.user_id)
        if user is None:
            self._reject("user_missing", user_id=validated.user_id)
        return self.new_pair_from_user(user, previous=validated)

    def signout(self, user_id: int) -> None:
        """Revoke every refresh token of ``user_id``."""
        self.repository.delete_user_refresh_tokens(str(user_id))
        self.log.info(
            "token.signout",
            extra={"event": "token.signout", "user_id": user_id},
        )

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    def _decode_failure(
        self, exc: jwt.InvalidTokenError, token: str, *, kind: str
    ) -> ServiceError:
        # Only a token whose structure cannot be parsed is a bad request
        if codec.is_well_formed(token):
            self.log.warning(
                "token.rejected",
                extra={"event": f"{kind}.rejected", "reason": type(exc).__name__},
            )
            return AuthorizationError()
        self.log.warning(
            "token.malformed", extra={"event": f"{kind}.malformed", "reason": str(exc)}
        )
        return BadRequestError("Malformed token")

    def _reject(self, reason: str, *, user_id: int) -> NoReturn:
        self.log.warning(
            "token.rejected",
            extra={"event": "refresh.rejected", "reason": reason, "user_id": user_id},
        )
        raise AuthorizationError()
