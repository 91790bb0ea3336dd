from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class VipTier(StrEnum):
    none = "none"
    tier1 = "tier1"
    tier2 = "tier2"
    tier3 = "tier3"


class GameState(BaseModel):
    # Spendable balance and lifetime production (lifetime drives achievements + prestige).
    cookies: float = 0.0
    total_cookies: float = 0.0
    cookies_per_click: float = 1.0
    cookies_per_second: float = 0.0

    level: int = 1
    xp: float = 0.0
    xp_to_next_level: float = 1000.0

    streak: int = 0
    max_streak: int = 0
    last_click_timestamp: float = 0.0

    clicks: int = 0
    time_played: float = 0.0
    total_active_time: float = 0.0

    prestige_level: int = 0
    prestige_points: int = 0

    buildings: dict[str, int] = Field(default_factory=dict)
    upgrades: dict[str, bool] = Field(default_factory=dict)

    # Append-only; order is unlock order.
    unlocked_achievements: list[str] = Field(default_factory=list)

    coins: float = 0.0
    coin_multiplier: float = 1.0
    # Coin shop purchases: discount id -> percent.
    coin_shop_discounts: dict[str, float] = Field(default_factory=dict)

    is_active_session: bool = True
    session_start_timestamp: float = 0.0
    last_tick_timestamp: float = 0.0
    last_pause_timestamp: float | None = None
    # Closed pause windows not yet paid out as offline income.
    pending_offline_seconds: float = 0.0

    # Supplied from outside (e-commerce VIP status); the engine never infers it.
    vip_tier: VipTier = VipTier.none
    offline_cps_multiplier: float = 0.0

    sound_enabled: bool = True
    animations_enabled: bool = True
    performance_mode: bool = False


class ParticleKind(StrEnum):
    click = "click"
    critical = "critical"
    combo = "combo"
    coin = "coin"


class Particle(BaseModel):
    id: str
    x: float
    y: float
    value: float
    timestamp: float
    kind: ParticleKind


class AchievementNotification(BaseModel):
    id: str
    achievement_id: str
    timestamp: float
    rarity: str
    reward_coins: float


class GameSnapshot(BaseModel):
    """Persisted subset of GameState. Transient effect/notification queues are excluded."""

    version: int
    cookies: float = 0.0
    total_cookies: float = 0.0
    cookies_per_click: float = 1.0
    level: int = 1
    xp: float = 0.0
    xp_to_next_level: float = 1000.0
    streak: int = 0
    max_streak: int = 0
    last_click_timestamp: float = 0.0
    clicks: int = 0
    time_played: float = 0.0
    total_active_time: float = 0.0
    prestige_level: int = 0
    prestige_points: int = 0
    buildings: dict[str, int] = Field(default_factory=dict)
    upgrades: dict[str, bool] = Field(default_factory=dict)
    unlocked_achievements: list[str] = Field(default_factory=list)
    coins: float = 0.0
    coin_multiplier: float = 1.0
    coin_shop_discounts: dict[str, float] = Field(default_factory=dict)
    is_active_session: bool = True
    session_start_timestamp: float = 0.0
    last_tick_timestamp: float = 0.0
    last_pause_timestamp: float | None = None
    pending_offline_seconds: float = 0.0
    vip_tier: VipTier = VipTier.none
    sound_enabled: bool = True
    animations_enabled: bool = True
    performance_mode: bool = False


class VipStatusRequest(BaseModel):
    tier: VipTier


class ActionResponse(BaseModel):
    state: GameState
    ok: bool = True
    effects: list[Particle] = Field(default_factory=list)
    notifications: list[AchievementNotification] = Field(default_factory=list)


class CatalogResponse(BaseModel):
    buildings: list[dict[str, Any]]
    upgrades: list[dict[str, Any]]
    achievements: list[dict[str, Any]]
    coin_shop: list[dict[str, Any]]
