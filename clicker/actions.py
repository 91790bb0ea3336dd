from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Literal

import redis

from clicker.api.models import AchievementNotification, GameState, Particle, VipTier
from clicker.clicks import RandomSource
from clicker.engine import GameEngine
from clicker.game_store import load_engine, save_snapshot, set_trusted_vip_tier
from clicker.lock import player_lock
from clicker.streams import publish_unlocks


logger = logging.getLogger(__name__)

ActionName = Literal[
    "click",
    "buy_building",
    "buy_upgrade",
    "tick",
    "prestige",
    "pause",
    "resume",
    "spend_coins",
    "buy_discount",
    "spend_cookies",
    "toggle_sound",
    "toggle_animations",
    "toggle_performance_mode",
]

ACTION_NAMES: frozenset[str] = frozenset(ActionName.__args__)  # type: ignore[attr-defined]


@dataclass(frozen=True, slots=True)
class ActionResult:
    state: GameState
    ok: bool
    effects: list[Particle] = field(default_factory=list)
    notifications: list[AchievementNotification] = field(default_factory=list)
    mailbox_entry_ids: list[str] = field(default_factory=list)


def _required_str(payload: dict[str, Any], key: str) -> str:
    value = payload.get(key)
    if value is None or not str(value).strip():
        raise ValueError(f"{key} is required")
    return str(value)


def _number(payload: dict[str, Any], key: str) -> Any:
    # Bad numbers are passed through untouched; the engine rejects them as a no-op.
    value = payload.get(key)
    if value is None:
        raise ValueError(f"{key} is required")
    return value


def _coordinate(payload: dict[str, Any], key: str) -> float:
    try:
        return float(payload.get(key) or 0.0)
    except (TypeError, ValueError) as e:
        raise ValueError(f"{key} must be a number") from e


def apply_action(engine: GameEngine, action: str, payload: dict[str, Any]) -> tuple[bool, list[Particle]]:
    """Run one engine operation. Returns (ok, emitted effects)."""

    if action == "click":
        x = _coordinate(payload, "x")
        y = _coordinate(payload, "y")
        particle = engine.click_cookie(x, y)
        return True, [particle] if particle is not None else []
    if action == "buy_building":
        return engine.buy_building(_required_str(payload, "building_id")), []
    if action == "buy_upgrade":
        return engine.buy_upgrade(_required_str(payload, "upgrade_id")), []
    if action == "tick":
        outcome = engine.tick()
        return outcome.active, []
    if action == "prestige":
        return engine.prestige(), []
    if action == "pause":
        engine.pause_session()
        return True, []
    if action == "resume":
        engine.resume_session()
        return True, []
    if action == "spend_coins":
        return engine.spend_coins(_number(payload, "amount")), []
    if action == "buy_discount":
        return engine.buy_coin_shop_discount(_required_str(payload, "discount_id")), []
    if action == "spend_cookies":
        return engine.spend_cookies_for_discount(_number(payload, "amount")), []
    if action == "toggle_sound":
        engine.toggle_sound()
        return True, []
    if action == "toggle_animations":
        engine.toggle_animations()
        return True, []
    if action == "toggle_performance_mode":
        engine.toggle_performance_mode()
        return True, []
    raise ValueError(f"Unknown action: {action}")


def dispatch_action(
    *,
    r: redis.Redis,
    player_id: str,
    action: str,
    payload: dict[str, Any],
    clock: Callable[[], float] = time.time,
    rng: RandomSource | None = None,
) -> ActionResult:
    """Entry point for the UI.

    Applies an action by:
    - acquiring a per-player lock
    - restoring the engine from the stored snapshot
    - running the operation, then the deferred achievement pass
    - persisting the new snapshot
    - emitting unlock notifications to the player's mailbox (Redis Streams)
    """

    if action not in ACTION_NAMES:
        raise ValueError(f"Unknown action: {action}")

    with player_lock(r=r, player_id=player_id):
        engine = load_engine(r=r, player_id=player_id, clock=clock, rng=rng)

        ok, effects = apply_action(engine, action, payload)

        # One request == one frame: flush the deferred achievement pass before saving.
        engine.run_deferred()
        notifications = engine.drain_notifications()

        save_snapshot(r=r, player_id=player_id, snapshot=engine.snapshot())

        ids = publish_unlocks(r=r, player_id=player_id, notifications=notifications)

    if not ok:
        logger.debug("action %s for %s had no effect", action, player_id)

    return ActionResult(
        state=engine.state,
        ok=ok,
        effects=effects,
        notifications=notifications,
        mailbox_entry_ids=ids,
    )


def apply_vip_status(
    *,
    r: redis.Redis,
    player_id: str,
    tier: VipTier,
    clock: Callable[[], float] = time.time,
) -> GameState:
    """Record the VIP tier from the trusted source and mirror it into the session."""

    with player_lock(r=r, player_id=player_id):
        engine = load_engine(r=r, player_id=player_id, clock=clock)
        set_trusted_vip_tier(r=r, player_id=player_id, tier=tier)
        engine.set_vip_status(tier)
        save_snapshot(r=r, player_id=player_id, snapshot=engine.snapshot())
    return engine.state
