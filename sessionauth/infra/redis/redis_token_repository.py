from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import redis
from redis.exceptions import RedisError

from sessionauth.services._shared.errors import InternalError
from sessionauth.services._shared.ports import TokenRepository


@dataclass(slots=True)
class RedisTokenRepository(TokenRepository):
    """
    Redis-backed refresh-token repository.

    Each user owns one sorted set ``rt:u:{user_id}``; members are refresh
    identifiers and scores are their expiry (epoch seconds). Deleting the key
    revokes every session of the user in one command.

    :param r: A Redis client (already connected).
    """

    r: redis.Redis

    # -------------------- helpers --------------------

    @staticmethod
    def _ku(user_id: str) -> str:
        return f"rt:u:{user_id}"

    @staticmethod
    def _now_ts() -> float:
        return datetime.now(UTC).timestamp()

    # -------------------- API ------------------------

    def set_refresh_token(self, user_id: str, token_id: str, ttl: timedelta) -> None:
        """
        Register ``token_id`` with its own expiry in one MULTI/EXEC block.

        Expired members are pruned in the same transaction. The key TTL follows
        the newest entry, which outlives older ones since every refresh token
        is issued with the same configured lifetime.
        """
        seconds = max(1, int(ttl.total_seconds()))
        now = self._now_ts()
        key = self._ku(user_id)
        try:
            pipe = self.r.pipeline(transaction=True)
            pipe.zremrangebyscore(key, "-inf", now)
            pipe.zadd(key, {token_id: now + seconds})
            pipe.expire(key, seconds)
            pipe.execute()
        except RedisError as exc:
            raise InternalError("Could not store refresh token") from exc

    def delete_refresh_token(self, user_id: str, token_id: str) -> bool:
        try:
            removed = self.r.zrem(self._ku(user_id), token_id)
        except RedisError as exc:
            raise InternalError("Could not delete refresh token") from exc
        return bool(removed)

    def delete_user_refresh_tokens(self, user_id: str) -> int:
        try:
            return int(self.r.delete(self._ku(user_id)))
        except RedisError as exc:
            raise InternalError("Could not delete user refresh tokens") from exc

    def exists(self, user_id: str, token_id: str) -> bool:
        try:
            score = self.r.zscore(self._ku(user_id), token_id)
        except RedisError as exc:
            raise InternalError("Could not read refresh token") from exc
        return score is not None and float(score) > self._now_ts()
