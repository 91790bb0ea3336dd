from __future__ import annotations

from clicker.api.models import GameState
from clicker.achievements import evaluate_achievements, requirement_progress, unlock_achievement
from clicker.catalog.registry import RequirementKind


def test_first_click_unlocks_once(catalog) -> None:
    state = GameState(clicks=1, total_cookies=1)

    first = evaluate_achievements(state, catalog, now=1.0)
    second = evaluate_achievements(state, catalog, now=2.0)

    assert [n.achievement_id for n in first] == ["first_click"]
    assert second == []
    assert state.unlocked_achievements == ["first_click"]
    assert state.coins == 10


def test_evaluation_unlocks_everything_satisfied_in_catalog_order(catalog) -> None:
    state = GameState(clicks=20, total_cookies=5_000, buildings={"cursor": 1})

    unlocked = evaluate_achievements(state, catalog, now=1.0)

    assert [n.achievement_id for n in unlocked] == [
        "first_click",
        "hundred_cookies",
        "thousand_cookies",
        "first_building",
    ]
    assert state.coins == 10 + 25 + 50 + 30


def test_notification_carries_rarity_and_reward(catalog) -> None:
    state = GameState(prestige_level=1)

    (n,) = evaluate_achievements(state, catalog, now=42.0)

    assert n.achievement_id == "prestige_master"
    assert n.rarity == "rare"
    assert n.reward_coins == 1_000
    assert n.timestamp == 42.0
    assert n.id


def test_manual_unlock_ignores_unknown_and_duplicate_ids(catalog) -> None:
    state = GameState()

    assert unlock_achievement(state, catalog, "does_not_exist", now=1.0) is None
    assert unlock_achievement(state, catalog, "level_10", now=1.0) is not None
    assert unlock_achievement(state, catalog, "level_10", now=2.0) is None

    assert state.unlocked_achievements == ["level_10"]
    assert state.coins == 200


def test_requirement_progress_reads_owned_buildings() -> None:
    state = GameState(buildings={"cursor": 3, "farm": 2})
    assert requirement_progress(state, RequirementKind.buildings_owned) == 5
