from __future__ import annotations

import fakeredis
import pytest

from clicker.infra.redis_client import DEFAULT_REDIS_URL, get_redis_url
from clicker.lock import lock_key, player_lock


def test_lock_is_released_after_the_block() -> None:
    r = fakeredis.FakeRedis(decode_responses=True)

    with player_lock(r=r, player_id="p1") as token:
        assert r.get(lock_key("p1")) == token

    assert r.get(lock_key("p1")) is None


def test_second_holder_is_rejected_while_locked() -> None:
    r = fakeredis.FakeRedis(decode_responses=True)

    with player_lock(r=r, player_id="p1"):
        with pytest.raises(ValueError, match="Session is busy"):
            with player_lock(r=r, player_id="p1"):
                pass
        # The rejected attempt must not release the held lock.
        assert r.get(lock_key("p1")) is not None

    # Other players are independent.
    with player_lock(r=r, player_id="p2"):
        pass


def test_lock_is_released_when_the_block_raises() -> None:
    r = fakeredis.FakeRedis(decode_responses=True)

    with pytest.raises(RuntimeError):
        with player_lock(r=r, player_id="p1"):
            raise RuntimeError("boom")

    assert r.get(lock_key("p1")) is None


def test_expired_holder_does_not_release_a_lock_it_no_longer_owns() -> None:
    r = fakeredis.FakeRedis(decode_responses=True)

    with player_lock(r=r, player_id="p1", ttl_ms=50) as token:
        # TTL elapsed and another request took the lock.
        r.set(lock_key("p1"), "other-holder")
        assert token != "other-holder"

    assert r.get(lock_key("p1")) == "other-holder"


def test_each_acquisition_gets_a_fresh_token() -> None:
    r = fakeredis.FakeRedis(decode_responses=True)

    with player_lock(r=r, player_id="p1") as first:
        pass
    with player_lock(r=r, player_id="p1") as second:
        pass

    assert first != second


def test_redis_url_prefers_service_specific_variable(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("REDIS_URL", raising=False)
    assert get_redis_url() == DEFAULT_REDIS_URL

    monkeypatch.setenv("REDIS_URL", "redis://shared:6379/0")
    assert get_redis_url() == "redis://shared:6379/0"

    monkeypatch.setenv("CLICKER_REDIS_URL", "redis://clicker:6379/3")
    assert get_redis_url() == "redis://clicker:6379/3"
