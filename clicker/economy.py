"""Purchase prices and production rates.

Everything here is pure: callers own the state mutation.
"""

from __future__ import annotations

import math
from collections.abc import Mapping

from clicker.catalog.registry import BuildingDefinition, Catalog, UpgradeDefinition, UpgradeEffect


def purchase_cost(definition: BuildingDefinition, owned: int, growth_rate: float) -> float:
    """Price of the next unit when `owned` are already owned: floor(base * growth^owned)."""

    owned = max(0, int(owned))
    try:
        raw = definition.base_cost * growth_rate**owned
    except OverflowError:
        return math.inf
    # Non-finite prices are unpayable.
    if not math.isfinite(raw):
        return math.inf
    return float(math.floor(raw))


def upgrade_cost(definition: UpgradeDefinition) -> float:
    return float(definition.cost)


def total_buildings(buildings: Mapping[str, int]) -> int:
    return sum(max(0, n) for n in buildings.values())


def production_multiplier(upgrades: Mapping[str, bool], catalog: Catalog) -> float:
    multiplier = 1.0
    for upgrade_id, owned in upgrades.items():
        if not owned:
            continue
        definition = catalog.upgrades.get(upgrade_id)
        if definition is not None and definition.effect_kind == UpgradeEffect.multiply_production:
            multiplier *= definition.effect_magnitude
    return multiplier


def recompute_production_rate(
    buildings: Mapping[str, int],
    catalog: Catalog,
    multiplier: float = 1.0,
) -> float:
    """Full recompute of cookies-per-second.

    Used at restore/prestige; purchases update the rate incrementally instead.
    Ids missing from the catalog contribute nothing.
    """

    rate = 0.0
    for building_id, owned in buildings.items():
        definition = catalog.buildings.get(building_id)
        if definition is None or owned <= 0:
            continue
        rate += owned * definition.base_cps
    return rate * multiplier
