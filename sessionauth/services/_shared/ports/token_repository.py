from __future__ import annotations

import threading
from datetime import UTC, datetime, timedelta
from typing import Protocol


class TokenRepository(Protocol):
    """
    Per-user collection of live refresh-token identifiers.

    Each entry carries its own expiry. Implementations surface store failures
    as :class:`~sessionauth.services._shared.errors.InternalError` and never
    retry.
    """

    def set_refresh_token(self, user_id: str, token_id: str, ttl: timedelta) -> None:
        """
        Add ``token_id`` to the user's collection and arm its expiry.

        Insertion and expiry are a single logical operation.
        """

    def delete_refresh_token(self, user_id: str, token_id: str) -> bool:
        """
        Remove one identifier. Idempotent.

        :returns: ``True`` when an entry was removed, ``False`` when it was absent.
        """

    def delete_user_refresh_tokens(self, user_id: str) -> int:
        """
        Drop the user's whole collection in one operation.

        :returns: Number of collections removed (0 or 1).
        """

    def exists(self, user_id: str, token_id: str) -> bool:
        """Return ``True`` when ``token_id`` is registered for the user and not expired."""


class InMemoryTokenRepository(TokenRepository):
    """
    Process-local token repository for unit tests and Redis-less development.

    .. note::
       Uses a threading lock so concurrent rotations behave like the Redis
       adapter: only one delete of a given identifier reports success.
    """

    def __init__(self) -> None:
        self._by_user: dict[str, dict[str, datetime]] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _now() -> datetime:
        return datetime.now(UTC)

    def set_refresh_token(self, user_id: str, token_id: str, ttl: timedelta) -> None:
        with self._lock:
            now = self._now()
            live = {
                tid: exp for tid, exp in self._by_user.get(user_id, {}).items() if exp > now
            }
            live[token_id] = now + ttl
            self._by_user[user_id] = live

    def delete_refresh_token(self, user_id: str, token_id: str) -> bool:
        with self._lock:
            return self._by_user.get(user_id, {}).pop(token_id, None) is not None

    def delete_user_refresh_tokens(self, user_id: str) -> int:
        with self._lock:
            return 1 if self._by_user.pop(user_id, None) is not None else 0

    def exists(self, user_id: str, token_id: str) -> bool:
        with self._lock:
            expires_at = self._by_user.get(user_id, {}).get(token_id)
            return expires_at is not None and expires_at > self._now()
