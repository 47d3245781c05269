"""
DTOs for IdentityService.

Data Transfer Objects (DTOs) isolate the service layer from ORM models,
ensuring clear input/output contracts and type safety.
"""

from __future__ import annotations

from dataclasses import dataclass

# --------------------------------------------------------------------------- #
# Input DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class SignupIn:
    """
    Input DTO for account creation.

    :param email: Login email (normalized to lowercase by the model).
    :type email: str
    :param password: Raw password to be hashed by the model.
    :type password: str
    """

    email: str
    password: str


@dataclass(frozen=True, slots=True)
class SigninIn:
    """
    Input DTO for credential verification.

    :param email: Login email.
    :type email: str
    :param password: Raw password candidate.
    :type password: str
    """

    email: str
    password: str


@dataclass(frozen=True, slots=True)
class UpdateDetailsIn:
    """
    Input DTO for profile updates. ``None`` leaves a field unchanged.

    :param name: New display name.
    :param email: New login email.
    :param website: New personal website.
    """

    name: str | None = None
    email: str | None = None
    website: str | None = None


# --------------------------------------------------------------------------- #
# Output DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class UserPublicOut:
    """
    Public-safe representation of a user; also satisfies ``TokenUser``.

    :param id: User identifier.
    :param email: Login email.
    :param name: Display name.
    :param image_url: Avatar location.
    :param website: Personal website.
    """

    id: int
    email: str
    name: str
    image_url: str
    website: str
