"""Versioned save/restore format.

The persistence collaborator stores `GameSnapshot` records and hands them back
on load. Older records are upgraded step by step through `MIGRATIONS`.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from typing import Any

from clicker.api.models import GameSnapshot, GameState, VipTier


SNAPSHOT_VERSION = 2

# Version 1 was the browser store format: camelCase keys, marketing tier names.
_LEGACY_TIER_NAMES = {"Nova": VipTier.tier1, "Supernova": VipTier.tier2, "Galaxy": VipTier.tier3}

_LEGACY_KEYS = {
    "totalCookies": "total_cookies",
    "cookiesPerClick": "cookies_per_click",
    "xpToNextLevel": "xp_to_next_level",
    "maxStreak": "max_streak",
    "timePlayed": "time_played",
    "totalActiveTime": "total_active_time",
    "prestigeLevel": "prestige_level",
    "prestigePoints": "prestige_points",
    "unlockedAchievements": "unlocked_achievements",
    "coinMultiplier": "coin_multiplier",
    "coinShopDiscounts": "coin_shop_discounts",
    "isActiveSession": "is_active_session",
    "sessionStartTime": "session_start_timestamp",
    "lastSaveTime": "last_tick_timestamp",
    "lastPauseTime": "last_pause_timestamp",
    "vipTier": "vip_tier",
    "soundEnabled": "sound_enabled",
    "animationsEnabled": "animations_enabled",
    "performanceMode": "performance_mode",
}


def _migrate_v1_to_v2(raw: dict[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key, value in raw.items():
        out[_LEGACY_KEYS.get(key, key)] = value

    # Browser timestamps were epoch milliseconds.
    for key in ("session_start_timestamp", "last_tick_timestamp", "last_pause_timestamp"):
        if isinstance(out.get(key), (int, float)):
            out[key] = out[key] / 1000.0

    # The browser store paid an open pause on load; bank it as offline time.
    pause = out.get("last_pause_timestamp")
    if out.get("is_active_session", True) and isinstance(pause, (int, float)):
        last = out.get("last_tick_timestamp")
        if isinstance(last, (int, float)) and last > pause:
            out["pending_offline_seconds"] = last - pause
        out["last_pause_timestamp"] = None

    tier = out.get("vip_tier")
    if tier not in set(VipTier):
        out["vip_tier"] = _LEGACY_TIER_NAMES.get(tier, VipTier.none)

    # Retired fields: `achievements` was superseded by `unlockedAchievements`;
    # the rest are derived or belonged to the leaderboard.
    retired = ("achievements", "cookiesPerSecond", "hasVipPassiveIncome", "offlineCpsMultiplier", "playerName", "playerRank")
    for key in retired:
        out.pop(key, None)

    out["version"] = 2
    return out


MIGRATIONS: dict[int, Callable[[dict[str, Any]], dict[str, Any]]] = {
    1: _migrate_v1_to_v2,
}


def migrate(raw: dict[str, Any]) -> dict[str, Any]:
    data = dict(raw)
    version = int(data.get("version", 1))
    if version > SNAPSHOT_VERSION:
        raise ValueError(f"Snapshot version {version} is newer than supported ({SNAPSHOT_VERSION})")
    while version < SNAPSHOT_VERSION:
        step = MIGRATIONS.get(version)
        if step is None:
            raise ValueError(f"No migration from snapshot version {version}")
        data = step(data)
        version = int(data["version"])
    return data


def load_snapshot(raw: dict[str, Any]) -> GameSnapshot:
    return GameSnapshot.model_validate(migrate(raw))


def state_to_snapshot(state: GameState) -> GameSnapshot:
    fields = set(GameSnapshot.model_fields) - {"version"}
    return GameSnapshot(version=SNAPSHOT_VERSION, **state.model_dump(include=fields))


def _non_negative(value: float, default: float = 0.0) -> float:
    if not math.isfinite(value) or value < 0:
        return default
    return value


def snapshot_to_state(snapshot: GameSnapshot) -> GameState:
    """Rebuild GameState from a snapshot; corrupt numbers are reset, never propagated.

    `cookies_per_second` is left at 0 for the engine to recompute from buildings.
    """

    data = snapshot.model_dump(exclude={"version"})
    state = GameState(**data)

    state.cookies = _non_negative(state.cookies)
    state.total_cookies = _non_negative(state.total_cookies)
    state.cookies_per_click = _non_negative(state.cookies_per_click, 1.0) or 1.0
    state.xp = _non_negative(state.xp)
    state.xp_to_next_level = _non_negative(state.xp_to_next_level, 1000.0) or 1000.0
    state.coins = _non_negative(state.coins)
    state.coin_multiplier = max(1.0, _non_negative(state.coin_multiplier, 1.0))
    state.time_played = _non_negative(state.time_played)
    state.total_active_time = _non_negative(state.total_active_time)
    state.pending_offline_seconds = _non_negative(state.pending_offline_seconds)
    state.level = max(1, state.level)
    state.clicks = max(0, state.clicks)
    state.streak = max(0, state.streak)
    state.max_streak = max(0, state.max_streak)
    state.prestige_level = max(0, state.prestige_level)
    state.prestige_points = max(0, state.prestige_points)
    state.buildings = {k: v for k, v in state.buildings.items() if v > 0}
    state.upgrades = {k: True for k, v in state.upgrades.items() if v}
    # Drop duplicates but keep unlock order.
    state.unlocked_achievements = list(dict.fromkeys(state.unlocked_achievements))
    return state
