"""Unit tests for the Redis and in-memory token repositories."""

from __future__ import annotations

from datetime import timedelta

import fakeredis
import pytest

from sessionauth.infra.redis.redis_token_repository import RedisTokenRepository
from sessionauth.services._shared.errors import InternalError
from sessionauth.services._shared.ports import InMemoryTokenRepository

TTL = timedelta(hours=1)


@pytest.fixture()
def r() -> fakeredis.FakeRedis:
    return fakeredis.FakeRedis()


@pytest.fixture(params=["redis", "memory"])
def repo(request: pytest.FixtureRequest, r: fakeredis.FakeRedis):
    if request.param == "redis":
        return RedisTokenRepository(r)
    return InMemoryTokenRepository()


def test_set_then_exists(repo) -> None:
    repo.set_refresh_token("42", "t1", TTL)

    assert repo.exists("42", "t1") is True
    assert repo.exists("42", "t2") is False
    assert repo.exists("43", "t1") is False


def test_delete_reports_whether_an_entry_was_removed(repo) -> None:
    repo.set_refresh_token("42", "t1", TTL)

    assert repo.delete_refresh_token("42", "t1") is True
    assert repo.delete_refresh_token("42", "t1") is False
    assert repo.exists("42", "t1") is False


def test_delete_user_drops_every_entry(repo) -> None:
    repo.set_refresh_token("42", "t1", TTL)
    repo.set_refresh_token("42", "t2", TTL)
    repo.set_refresh_token("7", "t3", TTL)

    assert repo.delete_user_refresh_tokens("42") == 1
    assert repo.delete_user_refresh_tokens("42") == 0
    assert not repo.exists("42", "t1")
    assert not repo.exists("42", "t2")
    assert repo.exists("7", "t3")


def test_entries_expire_individually(repo, freeze_time) -> None:
    with freeze_time("2024-01-01 00:00:00") as frozen:
        repo.set_refresh_token("42", "short", timedelta(minutes=5))
        repo.set_refresh_token("42", "long", timedelta(hours=1))

        frozen.tick(timedelta(minutes=10))

        assert repo.exists("42", "short") is False
        assert repo.exists("42", "long") is True


# --------------------------------------------------------------------------- #
# Redis specifics
# --------------------------------------------------------------------------- #


def test_redis_layout_is_one_sorted_set_per_user(r: fakeredis.FakeRedis) -> None:
    repo = RedisTokenRepository(r)
    repo.set_refresh_token("42", "t1", TTL)
    repo.set_refresh_token("42", "t2", TTL)

    assert r.type("rt:u:42") == b"zset"
    assert set(r.zrange("rt:u:42", 0, -1)) == {b"t1", b"t2"}
    assert 0 < r.ttl("rt:u:42") <= int(TTL.total_seconds())


def test_redis_set_prunes_expired_members(r: fakeredis.FakeRedis) -> None:
    repo = RedisTokenRepository(r)
    r.zadd("rt:u:42", {"stale": 1.0})

    repo.set_refresh_token("42", "fresh", TTL)

    assert r.zscore("rt:u:42", "stale") is None
    assert r.zscore("rt:u:42", "fresh") is not None


def test_redis_errors_surface_as_internal() -> None:
    server = fakeredis.FakeServer()
    server.connected = False
    repo = RedisTokenRepository(fakeredis.FakeRedis(server=server))

    with pytest.raises(InternalError):
        repo.set_refresh_token("42", "t1", TTL)
    with pytest.raises(InternalError):
        repo.exists("42", "t1")
    with pytest.raises(InternalError):
        repo.delete_refresh_token("42", "t1")
    with pytest.raises(InternalError):
        repo.delete_user_refresh_tokens("42")
