from __future__ import annotations

import logging
from uuid import uuid4

from clicker.api.models import AchievementNotification, GameState
from clicker.catalog.registry import AchievementDefinition, Catalog, RequirementKind
from clicker.economy import total_buildings


logger = logging.getLogger(__name__)


def requirement_progress(state: GameState, kind: RequirementKind) -> float:
    """Current value of the state field an achievement kind is measured against."""

    if kind == RequirementKind.total_cookies:
        return state.total_cookies
    if kind == RequirementKind.clicks:
        return state.clicks
    if kind == RequirementKind.buildings_owned:
        return total_buildings(state.buildings)
    if kind == RequirementKind.max_streak:
        return state.max_streak
    if kind == RequirementKind.level:
        return state.level
    if kind == RequirementKind.prestige_level:
        return state.prestige_level
    return 0.0


def is_satisfied(state: GameState, definition: AchievementDefinition) -> bool:
    return requirement_progress(state, definition.requirement_kind) >= definition.requirement_value


def _grant(state: GameState, definition: AchievementDefinition, now: float) -> AchievementNotification:
    state.unlocked_achievements.append(definition.id)
    state.coins += definition.reward_coins
    logger.info("achievement unlocked: %s (+%s coins)", definition.id, definition.reward_coins)
    return AchievementNotification(
        id=uuid4().hex,
        achievement_id=definition.id,
        timestamp=now,
        rarity=definition.rarity.value,
        reward_coins=definition.reward_coins,
    )


def unlock_achievement(
    state: GameState,
    catalog: Catalog,
    achievement_id: str,
    now: float,
) -> AchievementNotification | None:
    """Grant one achievement by id. Unknown or already unlocked ids are ignored."""

    definition = catalog.achievements.get(achievement_id)
    if definition is None or achievement_id in state.unlocked_achievements:
        return None
    return _grant(state, definition, now)


def evaluate_achievements(state: GameState, catalog: Catalog, now: float) -> list[AchievementNotification]:
    """Unlock every satisfied achievement that isn't unlocked yet.

    Idempotent: a second run without a state change returns an empty list.
    """

    unlocked = set(state.unlocked_achievements)
    # Decide against one consistent view first; rewards (coins) don't feed any requirement.
    due = [d for d in catalog.achievements if d.id not in unlocked and is_satisfied(state, d)]
    return [_grant(state, d, now) for d in due]
