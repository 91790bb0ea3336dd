from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass

from clicker.api.models import VipTier


@dataclass(frozen=True, slots=True)
class OfflinePolicy:
    max_offline_seconds: float
    cps_multiplier: float


OFFLINE_POLICIES: dict[VipTier, OfflinePolicy] = {
    VipTier.tier1: OfflinePolicy(max_offline_seconds=4 * 3600, cps_multiplier=0.3),
    VipTier.tier2: OfflinePolicy(max_offline_seconds=8 * 3600, cps_multiplier=0.5),
    VipTier.tier3: OfflinePolicy(max_offline_seconds=12 * 3600, cps_multiplier=0.75),
}

# Returns the player's current tier from the trusted source (never a cached copy).
VipStatusProvider = Callable[[], VipTier]


def max_offline_seconds(tier: VipTier) -> float:
    policy = OFFLINE_POLICIES.get(tier)
    return policy.max_offline_seconds if policy is not None else 0.0


def offline_cps_multiplier(tier: VipTier) -> float:
    policy = OFFLINE_POLICIES.get(tier)
    return policy.cps_multiplier if policy is not None else 0.0


def offline_gain(cookies_per_second: float, seconds_offline: float, vip_tier: VipTier) -> float:
    """Cookies credited for time spent paused.

    Non-VIP players get nothing; VIP time is capped per tier and paid at a reduced rate.
    """

    policy = OFFLINE_POLICIES.get(vip_tier)
    if policy is None:
        return 0.0
    if not (math.isfinite(cookies_per_second) and cookies_per_second > 0):
        return 0.0
    if math.isnan(seconds_offline) or seconds_offline <= 0:
        return 0.0

    capped_seconds = min(seconds_offline, policy.max_offline_seconds)
    return float(math.floor(cookies_per_second * capped_seconds * policy.cps_multiplier))
