from __future__ import annotations

import os
from dataclasses import dataclass, fields


@dataclass(frozen=True, slots=True)
class EngineSettings:
    """Tuning constants for the economy.

    Balance changes belong here, not in the engine modules.
    """

    base_click_yield: float = 1.0

    # Critical hits.
    crit_chance: float = 0.10
    crit_multiplier: float = 10.0

    # Combo / streak.
    combo_window_seconds: float = 2.0
    combo_bonus_per_streak: float = 0.10
    combo_cap: float = 2.0

    # Click rewards. Coins and xp accrue much slower than cookies on purpose.
    click_xp_divisor: float = 10.0
    click_coin_divisor: float = 5000.0

    # Idle rewards.
    idle_xp_divisor: float = 20.0
    idle_coin_divisor: float = 10000.0

    # Leveling.
    base_xp_to_next_level: float = 1000.0
    level_growth_factor: float = 1.3
    level_click_bonus: float = 1.0
    level_coin_bonus: float = 2.0

    # Purchases.
    building_cost_growth: float = 1.2

    # Prestige.
    prestige_threshold: float = 1_000_000.0
    prestige_bonus_per_point: float = 0.1

    # Ticking.
    max_tick_delta_seconds: float = 1.0
    achievement_check_interval: int = 5

    # Visual-effect buffer.
    particle_ttl_seconds: float = 2.0
    max_particles: int = 50


def _env_name(field_name: str) -> str:
    return f"CLICKER_{field_name.upper()}"


def settings_from_env() -> EngineSettings:
    """Build settings, letting `CLICKER_<FIELD>` env vars override defaults."""

    overrides: dict[str, float | int] = {}
    for f in fields(EngineSettings):
        raw = os.environ.get(_env_name(f.name))
        if raw is None or not raw.strip():
            continue
        try:
            overrides[f.name] = int(raw) if f.type in ("int", int) else float(raw)
        except ValueError as e:
            raise ValueError(f"Invalid value for {_env_name(f.name)}: {raw!r}") from e
    return EngineSettings(**overrides)


_SETTINGS: EngineSettings | None = None


def get_settings() -> EngineSettings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = settings_from_env()
    return _SETTINGS


def reset_settings_for_tests() -> None:
    global _SETTINGS
    _SETTINGS = None
