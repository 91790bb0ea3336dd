from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from clicker.api.models import GameState
from clicker.config import EngineSettings
from clicker.offline import VipStatusProvider, offline_gain
from clicker.progression import apply_xp


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TickOutcome:
    delta_seconds: float
    produced: float = 0.0
    offline_income: float = 0.0
    leveled_up: bool = False
    active: bool = True


def clamp_delta(raw: float, cap: float) -> float:
    if not math.isfinite(raw) or raw <= 0:
        return 0.0
    return min(raw, cap)


def close_pause_window(state: GameState, now: float) -> None:
    """Bank the open pause window as pending offline time.

    Windows accumulate until the next active tick pays them out.
    """

    if state.last_pause_timestamp is None:
        return
    elapsed = now - state.last_pause_timestamp
    if math.isfinite(elapsed) and elapsed > 0:
        state.pending_offline_seconds += elapsed
    state.last_pause_timestamp = None


def advance(
    state: GameState,
    settings: EngineSettings,
    now: float,
    vip_status: VipStatusProvider,
) -> TickOutcome:
    """Advance idle simulation to `now`.

    A single tick produces at most `max_tick_delta_seconds` worth of cookies;
    longer gaps are only paid through the VIP offline-income path, which pays
    the pause windows closed by `resume` (never time spent active).
    """

    delta = clamp_delta(now - state.last_tick_timestamp, settings.max_tick_delta_seconds)

    if not state.is_active_session:
        state.last_tick_timestamp = now
        return TickOutcome(delta_seconds=0.0, active=False)

    # A pause marker on an active session is stale; it never pays.
    state.last_pause_timestamp = None

    offline_income = 0.0
    if state.pending_offline_seconds > 0:
        # Tier is read at payout, not when the pause started.
        tier = vip_status()
        offline_income = offline_gain(state.cookies_per_second, state.pending_offline_seconds, tier)
        if offline_income > 0:
            state.cookies += offline_income
            state.total_cookies += offline_income
            logger.info("offline income %.0f cookies (tier=%s)", offline_income, tier.value)
        state.pending_offline_seconds = 0.0

    produced = 0.0
    leveled_up = False
    if state.cookies_per_second > 0 and delta > 0:
        produced = state.cookies_per_second * delta
        xp_gained = float(math.floor(produced / settings.idle_xp_divisor))
        coins_gained = math.floor(produced / settings.idle_coin_divisor) * state.coin_multiplier

        state.cookies += produced
        state.total_cookies += produced
        if coins_gained > 0:
            state.coins += coins_gained
        leveled_up = apply_xp(state, settings, xp_gained)

    state.time_played += delta
    state.total_active_time += delta
    state.last_tick_timestamp = now

    return TickOutcome(
        delta_seconds=delta,
        produced=produced,
        offline_income=offline_income,
        leveled_up=leveled_up,
    )
