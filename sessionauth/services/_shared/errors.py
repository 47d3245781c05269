"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic**: they never import Flask or
HTTP types. The translation to HTTP responses (RFC 7807) is handled by
``BaseService.translate_exceptions()`` and ``sessionauth.core.errors``.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    :param exc: The exception raised by SQLAlchemy during flush/commit.
    :param constraint_name: Constraint to match (e.g., ``"uq_users_email"``).
    :returns: True if the IntegrityError mentions the given constraint.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    return constraint_name.lower() in message


# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - They can be safely raised from repositories or domain logic.
    """


# --------------------------------------------------------------------------- #
# Specific domain-level errors
# --------------------------------------------------------------------------- #


class AuthorizationError(ServiceError):
    """
    Invalid credentials or an invalid, expired, tampered or revoked token.

    The message is generic on purpose; the specific cause is logged where
    the error is raised and never carried to the caller.
    """

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class BadRequestError(ServiceError):
    """Structurally malformed input, e.g. a token that cannot be decoded at all."""

    def __init__(self, message: str = "Bad request") -> None:
        super().__init__(message)


class InternalError(ServiceError):
    """Infrastructure failure: session store unavailable, signing failure."""

    def __init__(self, message: str = "Internal server error") -> None:
        super().__init__(message)


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found in the repository.

    :param entity: Entity name (e.g., "User").
    :param key: Identifier or search key.
    """

    entity: str
    key: str | int

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.entity} not found: {self.key}"


@dataclass(slots=True)
class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "User").
    :param detail: Short human-readable explanation.
    """

    entity: str
    detail: str

    def __str__(self) -> str:  # pragma: no cover
        return f"Conflict on {self.entity}: {self.detail}"
