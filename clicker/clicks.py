from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Protocol

from clicker.api.models import GameState
from clicker.config import EngineSettings
from clicker.progression import apply_xp


class RandomSource(Protocol):
    def random(self) -> float:  # pragma: no cover
        ...


@dataclass(frozen=True, slots=True)
class ClickOutcome:
    gained: float
    critical: bool
    streak: int
    combo_multiplier: float
    xp_gained: float
    coins_gained: float
    leveled_up: bool


def combo_multiplier(streak: int, settings: EngineSettings) -> float:
    return min(settings.combo_cap, 1.0 + streak * settings.combo_bonus_per_streak)


def resolve_click(state: GameState, settings: EngineSettings, rng: RandomSource, now: float) -> ClickOutcome:
    """Resolve one click into cookies, xp and coins, and apply it to `state`.

    Order matters: crit roll, then combo, then the derived xp/coins.
    """

    time_since_last_click = now - state.last_click_timestamp

    gained = state.cookies_per_click

    critical = rng.random() < settings.crit_chance
    if critical:
        gained *= settings.crit_multiplier

    multiplier = 1.0
    if 0 <= time_since_last_click < settings.combo_window_seconds:
        streak = state.streak + 1
        multiplier = combo_multiplier(streak, settings)
        gained *= multiplier
    else:
        # Combo lost.
        streak = 0

    if not math.isfinite(gained) or gained < 0:
        gained = 0.0

    xp_gained = float(math.floor(gained / settings.click_xp_divisor))
    coins_gained = math.floor(gained / settings.click_coin_divisor) * state.coin_multiplier

    state.cookies += gained
    state.total_cookies += gained
    state.clicks += 1
    state.last_click_timestamp = now
    state.streak = streak
    state.max_streak = max(state.max_streak, streak)
    if coins_gained > 0:
        state.coins += coins_gained

    leveled_up = apply_xp(state, settings, xp_gained)

    return ClickOutcome(
        gained=gained,
        critical=critical,
        streak=streak,
        combo_multiplier=multiplier,
        xp_gained=xp_gained,
        coins_gained=coins_gained,
        leveled_up=leveled_up,
    )
