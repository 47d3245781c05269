"""
IdentityService
===============

Aggregate service responsible for the `User` aggregate:
- Account creation and credential verification (no token issuance)
- Retrieval and profile updates
"""

from __future__ import annotations

import secrets
import time
from functools import lru_cache
from typing import Any

from sqlalchemy.exc import IntegrityError
from werkzeug.security import check_password_hash, generate_password_hash

from sessionauth.models.user import User
from sessionauth.repositories.user import UserRepository
from sessionauth.services._shared.base import BaseService
from sessionauth.services._shared.errors import (
    AuthorizationError,
    BadRequestError,
    ConflictError,
    NotFoundError,
    violates,
)
from sessionauth.services.identity.dto import (
    SigninIn,
    SignupIn,
    UpdateDetailsIn,
    UserPublicOut,
)

INVALID_CREDENTIALS = "Invalid email and password combination"


@lru_cache(maxsize=1)
def _dummy_password_hash() -> str:
    return generate_password_hash(secrets.token_urlsafe(16))


def _to_public(user: User) -> UserPublicOut:
    return UserPublicOut(
        id=user.id,
        email=user.email,
        name=user.name,
        image_url=user.image_url,
        website=user.website,
    )


class IdentityService(BaseService):
    """
    Application service for the `User` aggregate.

    Responsibilities
    ----------------
    - Sign users up ensuring email uniqueness.
    - Verify credentials without revealing which part was wrong.
    - Retrieve and update user details.
    """

    # --------------------------------------------------------------------- #
    # Signup
    # --------------------------------------------------------------------- #

    def signup(self, dto: SignupIn) -> UserPublicOut:
        """
        Create a new account.

        :param dto: Signup input DTO.
        :type dto: SignupIn
        :returns: Public-safe user DTO.
        :rtype: UserPublicOut
        :raises ConflictError: If the email is already registered.
        """

        with self.rw_uow() as uow:
            repo: UserRepository = uow.users

            if repo.exists_by_email(dto.email):
                raise ConflictError("User", "email already in use")

            try:
                user = repo.model(email=dto.email, password=dto.password)  # model hashes via setter
                repo.add(user)
            except IntegrityError as exc:
                if violates(exc, "uq_users_email"):
                    raise ConflictError("User", "email already in use") from exc
                raise
            except ValueError as exc:
                raise BadRequestError(str(exc)) from exc

            self.log.info("user.signup", extra={"event": "user.signup", "user_id": user.id})
            return _to_public(user)

    # --------------------------------------------------------------------- #
    # Signin
    # --------------------------------------------------------------------- #

    def signin(self, dto: SigninIn) -> UserPublicOut:
        """
        Verify an email/password combination.

        :param dto: Signin input DTO.
        :returns: The authenticated user.
        :raises AuthorizationError: Unknown email or wrong password (same message).
        """
        start = time.perf_counter()
        with self.ro_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get_by_email(dto.email)
            if user is None:
                # Unknown emails pay the same hashing cost as a wrong password
                check_password_hash(_dummy_password_hash(), dto.password)
                verified = False
            else:
                verified = user.verify_password(dto.password)

            if not verified:
                self.log.warning(
                    "user.signin_failed",
                    extra={
                        "event": "user.signin_failed",
                        "key": dto.email.strip().lower(),
                        "reason": "unknown_email" if user is None else "bad_password",
                        "elapsed_ms": round((time.perf_counter() - start) * 1000, 2),
                    },
                )
                raise AuthorizationError(INVALID_CREDENTIALS)

            self.log.info(
                "user.signin",
                extra={
                    "event": "user.signin",
                    "user_id": user.id,
                    "elapsed_ms": round((time.perf_counter() - start) * 1000, 2),
                },
            )
            return _to_public(user)

    # --------------------------------------------------------------------- #
    # Retrieval
    # --------------------------------------------------------------------- #

    def get_user(self, user_id: int) -> UserPublicOut:
        """
        Retrieve a user by identifier.

        :raises NotFoundError: If user does not exist.
        """

        user = self.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    def find_by_id(self, user_id: int) -> UserPublicOut | None:
        """Like :meth:`get_user` but returns ``None``; used as the token user lookup."""
        with self.ro_uow() as uow:
            user = uow.users.get(user_id)
            return _to_public(user) if user is not None else None

    # --------------------------------------------------------------------- #
    # Update details
    # --------------------------------------------------------------------- #

    def update_details(self, user_id: int, dto: UpdateDetailsIn) -> UserPublicOut:
        """
        Update name, email and website. ``None`` fields are left untouched.

        :raises NotFoundError: When the user does not exist.
        :raises ConflictError: When the new email belongs to another account.
        """

        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)

            updates: dict[str, Any] = {
                k: v
                for k, v in {
                    "name": dto.name,
                    "email": dto.email,
                    "website": dto.website,
                }.items()
                if v is not None
            }

            new_email = updates.get("email")
            if new_email and new_email.strip().lower() != user.email and repo.exists_by_email(
                new_email
            ):
                raise ConflictError("User", "email already in use")

            try:
                repo.update(user, **updates)
            except IntegrityError as exc:
                if violates(exc, "uq_users_email"):
                    raise ConflictError("User", "email already in use") from exc
                raise
            except ValueError as exc:
                raise BadRequestError(str(exc)) from exc

            return _to_public(user)
