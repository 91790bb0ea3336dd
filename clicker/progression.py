from __future__ import annotations

import logging
import math

from clicker.api.models import GameState
from clicker.config import EngineSettings


logger = logging.getLogger(__name__)


def apply_xp(state: GameState, settings: EngineSettings, gained: float) -> bool:
    """Accumulate xp and run the level-up check.

    At most one level is gained per call; leftover xp is discarded by the
    reset to 0, even if `gained` alone would cover the next threshold too.
    Returns True if a level-up happened.
    """

    if gained > 0:
        state.xp += gained

    if state.xp < state.xp_to_next_level:
        return False

    state.level += 1
    state.xp = 0.0
    state.xp_to_next_level = float(math.floor(state.xp_to_next_level * settings.level_growth_factor))
    state.cookies_per_click += settings.level_click_bonus
    state.coins += state.level * settings.level_coin_bonus
    logger.debug("level up -> %s (next at %s xp)", state.level, state.xp_to_next_level)
    return True


def is_prestige_eligible(state: GameState, settings: EngineSettings) -> bool:
    return state.total_cookies >= settings.prestige_threshold


def prestige_points_for(total_cookies: float, settings: EngineSettings) -> int:
    if not math.isfinite(total_cookies) or total_cookies <= 0:
        return 0
    return int(total_cookies // settings.prestige_threshold)


def apply_prestige(state: GameState, settings: EngineSettings) -> int:
    """Convert lifetime production into prestige points and reset the run.

    Returns the number of points gained; 0 means not eligible and the state is untouched.
    """

    if not is_prestige_eligible(state, settings):
        return 0

    points = prestige_points_for(state.total_cookies, settings)
    state.prestige_level += 1
    state.prestige_points += points

    state.cookies = 0.0
    state.total_cookies = 0.0
    state.cookies_per_click = settings.base_click_yield + state.prestige_points * settings.prestige_bonus_per_point
    state.cookies_per_second = 0.0
    state.level = 1
    state.xp = 0.0
    state.xp_to_next_level = settings.base_xp_to_next_level
    state.streak = 0
    state.clicks = 0
    state.buildings = {}
    state.upgrades = {}

    logger.info(
        "prestige #%s: +%s points (total %s)",
        state.prestige_level,
        points,
        state.prestige_points,
    )
    return points
