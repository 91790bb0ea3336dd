from __future__ import annotations

import logging
import math
import random
import time
from collections.abc import Callable
from typing import Any

from clicker.achievements import evaluate_achievements, unlock_achievement
from clicker.api.models import AchievementNotification, GameSnapshot, GameState, Particle, ParticleKind, VipTier
from clicker.catalog.registry import Catalog, UpgradeEffect
from clicker.clicks import RandomSource, resolve_click
from clicker.config import EngineSettings
from clicker.economy import production_multiplier, purchase_cost, recompute_production_rate, upgrade_cost
from clicker.effects import EffectBuffer, EffectSink, particle_kind_for
from clicker.fsm import SessionFSM
from clicker.offline import VipStatusProvider, offline_cps_multiplier
from clicker.progression import apply_prestige, is_prestige_eligible
from clicker.snapshots import load_snapshot, snapshot_to_state, state_to_snapshot
from clicker.tick import TickOutcome, advance, close_pause_window


logger = logging.getLogger(__name__)


def _amount(value: Any) -> float | None:
    """Validate an externally supplied amount; None means reject (no-op)."""

    try:
        v = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(v) or v < 0:
        return None
    return v


def new_game_state(*, settings: EngineSettings, now: float) -> GameState:
    return GameState(
        cookies_per_click=settings.base_click_yield,
        xp_to_next_level=settings.base_xp_to_next_level,
        session_start_timestamp=now,
        last_tick_timestamp=now,
    )


class GameEngine:
    """Owns one GameState and exposes every operation that may mutate it.

    Mutations are synchronous and run to completion. Achievement checks are
    two-phase: mutating operations only mark the state dirty, and
    `run_deferred()` (called by the driver, or every few ticks) evaluates.

    Gameplay input never raises: unknown ids, unaffordable purchases and
    bad amounts return False / None and leave the state untouched.
    """

    def __init__(
        self,
        state: GameState | None = None,
        *,
        catalog: Catalog,
        settings: EngineSettings | None = None,
        rng: RandomSource | None = None,
        clock: Callable[[], float] = time.time,
        vip_status: VipStatusProvider | None = None,
        effect_sink: EffectSink | None = None,
    ) -> None:
        self.catalog = catalog
        self.settings = settings or EngineSettings()
        self._rng = rng or random.Random()
        self._clock = clock
        self._vip_status = vip_status
        self._effect_sink = effect_sink

        self._state = state if state is not None else new_game_state(settings=self.settings, now=clock())
        self._effects = EffectBuffer(ttl_seconds=self.settings.particle_ttl_seconds, capacity=self.settings.max_particles)
        self._notifications: list[AchievementNotification] = []
        self._achievements_dirty = False
        self._tick_count = 0
        self._multiplier = production_multiplier(self._state.upgrades, catalog)

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def particles(self) -> tuple[Particle, ...]:
        return self._effects.items

    @property
    def notifications(self) -> tuple[AchievementNotification, ...]:
        return tuple(self._notifications)

    @property
    def achievements_pending(self) -> bool:
        return self._achievements_dirty

    def building_cost(self, building_id: str) -> float | None:
        definition = self.catalog.buildings.get(building_id)
        if definition is None:
            return None
        owned = self._state.buildings.get(building_id, 0)
        return purchase_cost(definition, owned, self.settings.building_cost_growth)

    def current_vip_tier(self) -> VipTier:
        """Tier from the trusted provider when wired, else the externally set one."""

        if self._vip_status is not None:
            return self._vip_status()
        return self._state.vip_tier

    def click_cookie(self, x: float = 0.0, y: float = 0.0) -> Particle | None:
        now = self._clock()
        outcome = resolve_click(self._state, self.settings, self._rng, now)
        self._achievements_dirty = True

        if not self._state.animations_enabled or self._state.performance_mode:
            return None
        return self._emit_particle(
            x=x,
            y=y,
            value=outcome.gained,
            kind=particle_kind_for(critical=outcome.critical, streak=outcome.streak, coins_gained=outcome.coins_gained),
            now=now,
        )

    def _emit_particle(self, *, x: float, y: float, value: float, kind: ParticleKind, now: float) -> Particle | None:
        # The economic mutation is already applied; effect failures must not undo or abort it.
        try:
            particle = self._effects.push(x=float(x), y=float(y), value=value, kind=kind, now=now)
            if particle is not None and self._effect_sink is not None:
                self._effect_sink(particle)
        except Exception:
            logger.warning("visual effect emission failed", exc_info=True)
            return None
        return particle

    def buy_building(self, building_id: str) -> bool:
        definition = self.catalog.buildings.get(building_id)
        if definition is None:
            return False

        owned = self._state.buildings.get(building_id, 0)
        cost = purchase_cost(definition, owned, self.settings.building_cost_growth)
        if self._state.cookies < cost:
            return False

        self._state.cookies -= cost
        self._state.buildings[building_id] = owned + 1
        self._state.cookies_per_second += definition.base_cps * self._multiplier
        self._achievements_dirty = True
        return True

    def buy_upgrade(self, upgrade_id: str) -> bool:
        definition = self.catalog.upgrades.get(upgrade_id)
        if definition is None or self._state.upgrades.get(upgrade_id):
            return False

        cost = upgrade_cost(definition)
        if self._state.cookies < cost:
            return False

        self._state.cookies -= cost
        self._state.upgrades[upgrade_id] = True

        if definition.effect_kind == UpgradeEffect.multiply_click_yield:
            self._state.cookies_per_click *= definition.effect_magnitude
        elif definition.effect_kind == UpgradeEffect.add_click_yield:
            self._state.cookies_per_click += definition.effect_magnitude
        elif definition.effect_kind == UpgradeEffect.multiply_production:
            self._multiplier *= definition.effect_magnitude
            self._state.cookies_per_second *= definition.effect_magnitude

        self._achievements_dirty = True
        return True

    def tick(self, now: float | None = None) -> TickOutcome:
        now = self._clock() if now is None else now
        if not math.isfinite(now):
            return TickOutcome(delta_seconds=0.0, active=self._state.is_active_session)
        outcome = advance(self._state, self.settings, now, self.current_vip_tier)
        self._effects.prune(now)

        if outcome.produced > 0 or outcome.offline_income > 0 or outcome.leveled_up:
            self._achievements_dirty = True

        self._tick_count += 1
        if self._tick_count % max(1, self.settings.achievement_check_interval) == 0:
            self.run_deferred(now=now)
        return outcome

    def pause_session(self) -> None:
        fsm = SessionFSM(self._state)
        if fsm.current_state != fsm.active:
            return
        fsm.pause()
        fsm.sync_to_model()
        self._state.last_pause_timestamp = self._clock()
        logger.debug("session paused")

    def resume_session(self) -> None:
        fsm = SessionFSM(self._state)
        if fsm.current_state != fsm.paused:
            return
        fsm.resume()
        fsm.sync_to_model()
        now = self._clock()
        # Close the pause window; the next tick pays it as offline income.
        close_pause_window(self._state, now)
        self._state.session_start_timestamp = now
        logger.debug("session resumed")

    def prestige(self) -> bool:
        if not is_prestige_eligible(self._state, self.settings):
            return False

        # Settle achievements earned in this run before its progress is wiped.
        self.run_deferred()
        apply_prestige(self._state, self.settings)

        self._multiplier = 1.0
        self._state.cookies_per_second = recompute_production_rate(self._state.buildings, self.catalog)
        self._effects.clear()
        self._achievements_dirty = True
        self.run_deferred()
        return True

    def run_deferred(self, *, now: float | None = None) -> list[AchievementNotification]:
        """Evaluate achievements if anything changed since the last evaluation."""

        if not self._achievements_dirty:
            return []
        return self.check_achievements(now=now)

    def check_achievements(self, *, now: float | None = None) -> list[AchievementNotification]:
        now = self._clock() if now is None else now
        unlocked = evaluate_achievements(self._state, self.catalog, now)
        self._notifications.extend(unlocked)
        self._achievements_dirty = False
        return unlocked

    def unlock_achievement(self, achievement_id: str) -> bool:
        notification = unlock_achievement(self._state, self.catalog, achievement_id, self._clock())
        if notification is None:
            return False
        self._notifications.append(notification)
        return True

    def drain_notifications(self) -> list[AchievementNotification]:
        out = self._notifications
        self._notifications = []
        return out

    def set_vip_status(self, tier: VipTier | str) -> None:
        try:
            resolved = VipTier(tier)
        except ValueError:
            logger.warning("ignoring unknown VIP tier %r", tier)
            return
        self._state.vip_tier = resolved
        self._state.offline_cps_multiplier = offline_cps_multiplier(resolved)

    def earn_coins(self, amount: float) -> bool:
        value = _amount(amount)
        if value is None:
            return False
        self._state.coins += value * self._state.coin_multiplier
        return True

    def spend_coins(self, amount: float) -> bool:
        value = _amount(amount)
        if value is None or self._state.coins < value:
            return False
        self._state.coins -= value
        return True

    def buy_coin_shop_discount(self, discount_id: str) -> bool:
        discount = self.catalog.coin_shop.get(discount_id)
        if discount is None or not self.spend_coins(discount.cost):
            return False
        self._state.coin_shop_discounts[discount.id] = discount.discount_percent
        return True

    def spend_cookies_for_discount(self, amount: float) -> bool:
        # Only the spendable balance is charged; lifetime production is untouched.
        value = _amount(amount)
        if value is None or self._state.cookies < value:
            return False
        self._state.cookies -= value
        return True

    def toggle_sound(self) -> bool:
        self._state.sound_enabled = not self._state.sound_enabled
        return self._state.sound_enabled

    def toggle_animations(self) -> bool:
        self._state.animations_enabled = not self._state.animations_enabled
        if not self._state.animations_enabled:
            self._effects.clear()
        return self._state.animations_enabled

    def toggle_performance_mode(self) -> bool:
        self._state.performance_mode = not self._state.performance_mode
        return self._state.performance_mode

    def snapshot(self) -> GameSnapshot:
        return state_to_snapshot(self._state)

    @classmethod
    def restore(
        cls,
        snapshot: GameSnapshot | dict[str, Any],
        *,
        catalog: Catalog,
        settings: EngineSettings | None = None,
        rng: RandomSource | None = None,
        clock: Callable[[], float] = time.time,
        vip_status: VipStatusProvider | None = None,
        effect_sink: EffectSink | None = None,
    ) -> "GameEngine":
        if not isinstance(snapshot, GameSnapshot):
            snapshot = load_snapshot(snapshot)

        state = snapshot_to_state(snapshot)
        state.offline_cps_multiplier = offline_cps_multiplier(state.vip_tier)
        state.cookies_per_second = recompute_production_rate(
            state.buildings,
            catalog,
            production_multiplier(state.upgrades, catalog),
        )
        return cls(
            state,
            catalog=catalog,
            settings=settings,
            rng=rng,
            clock=clock,
            vip_status=vip_status,
            effect_sink=effect_sink,
        )
