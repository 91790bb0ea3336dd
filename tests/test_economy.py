from __future__ import annotations

import math

from clicker.catalog.registry import BuildingDefinition
from clicker.economy import production_multiplier, purchase_cost, recompute_production_rate, total_buildings


def test_cursor_cost_progression(catalog) -> None:
    cursor = catalog.buildings.get("cursor")
    assert cursor is not None

    assert purchase_cost(cursor, 0, 1.2) == 15
    assert purchase_cost(cursor, 1, 1.2) == 18
    assert purchase_cost(cursor, 2, 1.2) == 21


def test_cost_strictly_increases_with_owned_count(catalog) -> None:
    for definition in catalog.buildings:
        costs = [purchase_cost(definition, n, 1.2) for n in range(40)]
        assert all(b > a for a, b in zip(costs, costs[1:])), definition.id


def test_negative_owned_is_treated_as_zero() -> None:
    d = BuildingDefinition("x", "X", 100, 1)
    assert purchase_cost(d, -3, 1.2) == purchase_cost(d, 0, 1.2) == 100


def test_non_finite_or_overflowing_cost_is_unpayable() -> None:
    assert purchase_cost(BuildingDefinition("x", "X", float("nan"), 1), 0, 1.2) == math.inf
    assert purchase_cost(BuildingDefinition("x", "X", float("inf"), 1), 0, 1.2) == math.inf
    assert purchase_cost(BuildingDefinition("x", "X", 15, 1), 100_000, 1.2) == math.inf


def test_total_buildings_ignores_negative_counts() -> None:
    assert total_buildings({"cursor": 3, "grandma": 2, "farm": -1}) == 5


def test_recompute_production_rate_skips_unknown_ids(catalog) -> None:
    rate = recompute_production_rate({"cursor": 10, "grandma": 1, "retired_building": 99}, catalog)
    assert rate == 10 * 0.3 + 3


def test_production_multiplier_only_counts_production_upgrades(catalog) -> None:
    upgrades = {"assembly_line": True, "cookie_conveyor": True, "reinforced_index": True, "unknown": True}
    assert production_multiplier(upgrades, catalog) == 1.5 * 2
    assert production_multiplier({"assembly_line": False}, catalog) == 1.0
