from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey, RSAPublicKey

from sessionauth.core.config import MIN_REFRESH_SECRET_BYTES


class SigningMaterialError(RuntimeError):
    """Raised at startup when keys or the refresh secret are missing or unusable."""


class SigningMaterialProvider(Protocol):
    """
    Read-only access to the process-wide signing material.

    The RSA pair signs and verifies identity tokens; the symmetric secret
    authenticates refresh tokens. Loaded once before traffic is accepted.
    """

    @property
    def private_key(self) -> RSAPrivateKey: ...

    @property
    def public_key(self) -> RSAPublicKey: ...

    @property
    def refresh_secret(self) -> str: ...


@dataclass(frozen=True, slots=True)
class SigningMaterial:
    """Loaded signing material. Built by the PEM loader or directly in tests."""

    private_key: RSAPrivateKey
    public_key: RSAPublicKey
    refresh_secret: str

    def __post_init__(self) -> None:
        if not self.refresh_secret:
            raise SigningMaterialError("Refresh secret must not be empty.")
        if len(self.refresh_secret.encode("utf-8")) < MIN_REFRESH_SECRET_BYTES:
            raise SigningMaterialError(
                f"Refresh secret must be at least {MIN_REFRESH_SECRET_BYTES} bytes."
            )
