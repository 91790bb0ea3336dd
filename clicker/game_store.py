from __future__ import annotations

import json
import time
from collections.abc import Callable

import redis

from clicker.api.models import GameSnapshot, VipTier
from clicker.catalog.singleton import get_catalog
from clicker.clicks import RandomSource
from clicker.config import get_settings
from clicker.engine import GameEngine
from clicker.snapshots import load_snapshot


SESSIONS_SET_KEY = "clicker:sessions"
SESSION_KEY_PREFIX = "clicker:session:"  # + {player_id}
VIP_KEY_PREFIX = "clicker:vip:"  # + {player_id}; written only by the trusted VIP source


def _session_key(player_id: str) -> str:
    return f"{SESSION_KEY_PREFIX}{player_id}"


def _vip_key(player_id: str) -> str:
    return f"{VIP_KEY_PREFIX}{player_id}"


def validate_player_id(player_id: str) -> str:
    pid = player_id.strip()
    if not pid:
        raise ValueError("player_id is required")
    if len(pid) > 128 or any(c.isspace() for c in pid):
        raise ValueError("player_id must be a non-empty token without whitespace")
    return pid


def save_snapshot(*, r: redis.Redis, player_id: str, snapshot: GameSnapshot) -> None:
    r.set(_session_key(player_id), snapshot.model_dump_json())


def get_snapshot(*, r: redis.Redis, player_id: str) -> GameSnapshot | None:
    raw = r.get(_session_key(player_id))
    if not raw:
        return None
    # Older records are migrated on read; the next save writes the current version.
    return load_snapshot(json.loads(raw))


def require_snapshot(*, r: redis.Redis, player_id: str) -> GameSnapshot:
    snapshot = get_snapshot(r=r, player_id=player_id)
    if snapshot is None:
        raise ValueError("Session not found")
    return snapshot


def get_trusted_vip_tier(*, r: redis.Redis, player_id: str) -> VipTier:
    raw = r.get(_vip_key(player_id))
    if not raw:
        return VipTier.none
    try:
        return VipTier(raw)
    except ValueError:
        return VipTier.none


def set_trusted_vip_tier(*, r: redis.Redis, player_id: str, tier: VipTier) -> None:
    if tier == VipTier.none:
        r.delete(_vip_key(player_id))
    else:
        r.set(_vip_key(player_id), tier.value)


def build_engine(
    *,
    r: redis.Redis,
    player_id: str,
    snapshot: GameSnapshot | None,
    clock: Callable[[], float] = time.time,
    rng: RandomSource | None = None,
) -> GameEngine:
    """Engine for one request, with the VIP tier re-read from Redis whenever it is needed."""

    def _vip_status() -> VipTier:
        return get_trusted_vip_tier(r=r, player_id=player_id)

    kwargs = dict(catalog=get_catalog(), settings=get_settings(), rng=rng, clock=clock, vip_status=_vip_status)
    if snapshot is None:
        return GameEngine(**kwargs)
    return GameEngine.restore(snapshot, **kwargs)


def create_session(
    *,
    r: redis.Redis,
    player_id: str,
    clock: Callable[[], float] = time.time,
) -> GameEngine:
    pid = validate_player_id(player_id)
    if r.exists(_session_key(pid)):
        raise ValueError("Session already exists")

    engine = build_engine(r=r, player_id=pid, snapshot=None, clock=clock)
    engine.set_vip_status(get_trusted_vip_tier(r=r, player_id=pid))

    save_snapshot(r=r, player_id=pid, snapshot=engine.snapshot())
    r.sadd(SESSIONS_SET_KEY, pid)
    return engine


def load_engine(
    *,
    r: redis.Redis,
    player_id: str,
    clock: Callable[[], float] = time.time,
    rng: RandomSource | None = None,
) -> GameEngine:
    snapshot = require_snapshot(r=r, player_id=player_id)
    return build_engine(r=r, player_id=player_id, snapshot=snapshot, clock=clock, rng=rng)


def list_player_ids(*, r: redis.Redis) -> list[str]:
    return sorted(r.smembers(SESSIONS_SET_KEY))
