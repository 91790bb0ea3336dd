from __future__ import annotations

import csv
import math
import os
import re
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import Generic, TypeVar


# Smallest base price whose floored costs still rise by at least 1 per unit at 1.2x growth.
MIN_BUILDING_BASE_COST = 5.0


def _slug_id(s: str) -> str:
    s = s.strip().casefold()
    s = re.sub(r"[^a-z0-9]+", "_", s)
    return s.strip("_")


class UpgradeEffect(StrEnum):
    multiply_click_yield = "multiply_click_yield"
    add_click_yield = "add_click_yield"
    multiply_production = "multiply_production"


class RequirementKind(StrEnum):
    total_cookies = "total_cookies"
    clicks = "clicks"
    buildings_owned = "buildings_owned"
    max_streak = "max_streak"
    level = "level"
    prestige_level = "prestige_level"


class Rarity(StrEnum):
    common = "common"
    uncommon = "uncommon"
    rare = "rare"
    epic = "epic"
    legendary = "legendary"
    nebula = "nebula"


@dataclass(frozen=True, slots=True)
class BuildingDefinition:
    id: str
    name: str
    base_cost: float
    base_cps: float
    description: str = ""


@dataclass(frozen=True, slots=True)
class UpgradeDefinition:
    id: str
    name: str
    cost: float
    effect_kind: UpgradeEffect
    effect_magnitude: float
    description: str = ""


@dataclass(frozen=True, slots=True)
class AchievementDefinition:
    id: str
    name: str
    requirement_kind: RequirementKind
    requirement_value: float
    reward_coins: float
    rarity: Rarity = Rarity.common
    description: str = ""


@dataclass(frozen=True, slots=True)
class CoinShopDiscount:
    id: str
    name: str
    discount_percent: float
    cost: float
    kind: str = "product"


class CatalogLoadError(RuntimeError):
    pass


T = TypeVar("T", BuildingDefinition, UpgradeDefinition, AchievementDefinition, CoinShopDiscount)


@dataclass(frozen=True, slots=True)
class DefinitionTable(Generic[T]):
    """Ordered, id-keyed table of static definitions.

    Order is the display/evaluation order; lookups by id never raise.
    """

    items: tuple[T, ...]
    _by_id: dict[str, T]

    @staticmethod
    def from_rows(rows: list[T]) -> "DefinitionTable[T]":
        by_id: dict[str, T] = {}
        for row in rows:
            if row.id in by_id:
                raise CatalogLoadError(f"Duplicate definition id: {row.id}")
            by_id[row.id] = row
        return DefinitionTable(items=tuple(rows), _by_id=by_id)

    def get(self, id: str) -> T | None:
        return self._by_id.get(id)

    def ids(self) -> tuple[str, ...]:
        return tuple(d.id for d in self.items)

    def __contains__(self, item: object) -> bool:
        return isinstance(item, str) and item in self._by_id

    def __iter__(self):
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


@dataclass(frozen=True, slots=True)
class Catalog:
    buildings: DefinitionTable[BuildingDefinition]
    upgrades: DefinitionTable[UpgradeDefinition]
    achievements: DefinitionTable[AchievementDefinition]
    coin_shop: DefinitionTable[CoinShopDiscount]


def _read_csv_rows(path: Path) -> list[dict[str, str]]:
    try:
        with path.open(encoding="utf-8-sig", newline="") as f:
            reader = csv.DictReader(f)
            rows = [{k.strip().casefold(): (v or "").strip() for k, v in row.items() if k is not None} for row in reader]
    except FileNotFoundError as e:
        raise CatalogLoadError(f"Catalog file not found: {path}") from e

    return [row for row in rows if any(row.values())]


def _require_columns(path: Path, rows: list[dict[str, str]], columns: tuple[str, ...]) -> None:
    if not rows:
        raise CatalogLoadError(f"Empty catalog CSV: {path}")
    missing = [c for c in columns if c not in rows[0]]
    if missing:
        raise CatalogLoadError(f"Missing columns in {path}: {missing}")


def _number(
    path: Path,
    row: dict[str, str],
    column: str,
    *,
    minimum: float = 0.0,
    positive: bool = False,
    maximum: float | None = None,
) -> float:
    """Parse a finite number in [minimum, maximum]; `positive` excludes 0."""

    raw = row[column]
    try:
        value = float(raw)
    except ValueError as e:
        raise CatalogLoadError(f"Bad {column} value in {path}: {raw!r}") from e
    if not math.isfinite(value) or value < minimum or (positive and value <= 0):
        raise CatalogLoadError(f"Out of range {column} value in {path}: {raw!r}")
    if maximum is not None and value > maximum:
        raise CatalogLoadError(f"Out of range {column} value in {path}: {raw!r}")
    return value


def _row_id(row: dict[str, str]) -> str:
    return row.get("id") or _slug_id(row["name"])


def load_buildings_csv(path: Path) -> DefinitionTable[BuildingDefinition]:
    rows = _read_csv_rows(path)
    _require_columns(path, rows, ("id", "name", "base_cost", "base_cps"))
    return DefinitionTable.from_rows(
        [
            BuildingDefinition(
                id=_row_id(row),
                name=row["name"],
                base_cost=_number(path, row, "base_cost", minimum=MIN_BUILDING_BASE_COST),
                base_cps=_number(path, row, "base_cps"),
                description=row.get("description", ""),
            )
            for row in rows
            if row["name"]
        ]
    )


def load_upgrades_csv(path: Path) -> DefinitionTable[UpgradeDefinition]:
    rows = _read_csv_rows(path)
    _require_columns(path, rows, ("id", "name", "cost", "effect_kind", "effect_magnitude"))
    out: list[UpgradeDefinition] = []
    for row in rows:
        try:
            effect = UpgradeEffect(row["effect_kind"])
        except ValueError as e:
            raise CatalogLoadError(f"Unknown upgrade effect in {path}: {row['effect_kind']!r}") from e
        out.append(
            UpgradeDefinition(
                id=_row_id(row),
                name=row["name"],
                cost=_number(path, row, "cost", positive=True),
                effect_kind=effect,
                effect_magnitude=_number(path, row, "effect_magnitude", positive=True),
                description=row.get("description", ""),
            )
        )
    return DefinitionTable.from_rows(out)


def load_achievements_csv(path: Path) -> DefinitionTable[AchievementDefinition]:
    rows = _read_csv_rows(path)
    _require_columns(path, rows, ("id", "name", "requirement_kind", "requirement_value", "reward_coins"))
    out: list[AchievementDefinition] = []
    for row in rows:
        try:
            kind = RequirementKind(row["requirement_kind"])
            rarity = Rarity(row.get("rarity") or Rarity.common.value)
        except ValueError as e:
            raise CatalogLoadError(f"Bad achievement row in {path}: {row}") from e
        out.append(
            AchievementDefinition(
                id=_row_id(row),
                name=row["name"],
                requirement_kind=kind,
                requirement_value=_number(path, row, "requirement_value"),
                reward_coins=_number(path, row, "reward_coins"),
                rarity=rarity,
                description=row.get("description", ""),
            )
        )
    return DefinitionTable.from_rows(out)


def load_coin_shop_csv(path: Path) -> DefinitionTable[CoinShopDiscount]:
    rows = _read_csv_rows(path)
    _require_columns(path, rows, ("id", "name", "discount_percent", "cost"))
    return DefinitionTable.from_rows(
        [
            CoinShopDiscount(
                id=_row_id(row),
                name=row["name"],
                discount_percent=_number(path, row, "discount_percent", positive=True, maximum=100.0),
                cost=_number(path, row, "cost", positive=True),
                kind=row.get("kind") or "product",
            )
            for row in rows
        ]
    )


def load_catalog(*, catalog_dir: Path | None) -> Catalog:
    """Load the catalog from CSV files, or fall back to the built-in tables.

    Set CLICKER_STRICT_CATALOG=1 to make missing/broken CSVs an error instead.
    """

    from clicker.catalog.defaults import default_catalog

    strict = os.getenv("CLICKER_STRICT_CATALOG", "").strip().lower() in {"1", "true", "yes"}

    if catalog_dir is None:
        if strict:
            raise CatalogLoadError("CLICKER_STRICT_CATALOG is set but no catalog directory was given")
        return default_catalog()

    try:
        return Catalog(
            buildings=load_buildings_csv(catalog_dir / "buildings.csv"),
            upgrades=load_upgrades_csv(catalog_dir / "upgrades.csv"),
            achievements=load_achievements_csv(catalog_dir / "achievements.csv"),
            coin_shop=load_coin_shop_csv(catalog_dir / "coin_shop.csv"),
        )
    except CatalogLoadError:
        if strict:
            raise
        return default_catalog()
