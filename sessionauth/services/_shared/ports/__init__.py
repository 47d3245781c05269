"""
sessionauth.services._shared.ports
==================================

*Ports* (hexagonal interfaces) that decouple the token service from the
session-store technology and the key format.

Modules
-------
- :mod:`token_repository`:
    :class:`~.TokenRepository` plus the in-memory implementation.
- :mod:`signing_material`:
    :class:`~.SigningMaterialProvider` plus the frozen :class:`~.SigningMaterial` value.

Concrete adapters (Redis, PEM files) live under ``sessionauth.infra``.
"""

from __future__ import annotations

from .signing_material import (
    SigningMaterial,
    SigningMaterialError,
    SigningMaterialProvider,
)
from .token_repository import InMemoryTokenRepository, TokenRepository

__all__ = [
    "TokenRepository",
    "InMemoryTokenRepository",
    "SigningMaterialProvider",
    "SigningMaterialError",
    "SigningMaterial",
]
