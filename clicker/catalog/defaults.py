from __future__ import annotations

from functools import lru_cache

from clicker.catalog.registry import (
    AchievementDefinition,
    BuildingDefinition,
    Catalog,
    CoinShopDiscount,
    DefinitionTable,
    Rarity,
    RequirementKind,
    UpgradeDefinition,
    UpgradeEffect,
)


BUILDINGS: tuple[BuildingDefinition, ...] = (
    BuildingDefinition("cursor", "Cursor", 15, 0.3, "Clicks automatically every few seconds."),
    BuildingDefinition("grandma", "Grandma", 100, 3, "A nice grandma baking away."),
    BuildingDefinition("farm", "Farm", 1_100, 24, "Grows cookie plants."),
    BuildingDefinition("mine", "Mine", 12_000, 141, "Mines cookie dough and chocolate chips."),
    BuildingDefinition("factory", "Factory", 130_000, 780, "Mass-produces cookies."),
    BuildingDefinition("bank", "Bank", 1_400_000, 4_200, "Earns cookies through interest."),
    BuildingDefinition("temple", "Temple", 20_000_000, 23_400, "Full of precious, ancient chocolate."),
    BuildingDefinition("wizard_tower", "Wizard Tower", 330_000_000, 132_000, "Summons cookies with spells."),
    BuildingDefinition("shipment", "Shipment", 5_100_000_000, 780_000, "Brings cookies from outer space."),
    BuildingDefinition("alchemy_lab", "Alchemy Lab", 75_000_000_000, 4_800_000, "Turns lead into golden cookies."),
)

UPGRADES: tuple[UpgradeDefinition, ...] = (
    UpgradeDefinition("reinforced_index", "Reinforced Index Finger", 100, UpgradeEffect.multiply_click_yield, 2),
    UpgradeDefinition(
        "carpal_tunnel_prevention_cream", "Carpal Tunnel Cream", 500, UpgradeEffect.multiply_click_yield, 2
    ),
    UpgradeDefinition("ambidextrous", "Ambidextrous", 10_000, UpgradeEffect.multiply_click_yield, 2),
    UpgradeDefinition("thousand_fingers", "Thousand Fingers", 100_000, UpgradeEffect.multiply_click_yield, 2),
    UpgradeDefinition("million_fingers", "Million Fingers", 1_000_000, UpgradeEffect.multiply_click_yield, 2),
    UpgradeDefinition("billion_fingers", "Billion Fingers", 10_000_000, UpgradeEffect.multiply_click_yield, 2),
    UpgradeDefinition("sugar_rush", "Sugar Rush", 2_500, UpgradeEffect.add_click_yield, 5, "+5 cookies per click."),
    UpgradeDefinition(
        "assembly_line", "Assembly Line", 50_000, UpgradeEffect.multiply_production, 1.5, "+50% production."
    ),
    UpgradeDefinition(
        "cookie_conveyor", "Cookie Conveyor", 5_000_000, UpgradeEffect.multiply_production, 2, "Doubles production."
    ),
)

_T = RequirementKind

ACHIEVEMENTS: tuple[AchievementDefinition, ...] = (
    AchievementDefinition("first_click", "First Click", _T.clicks, 1, 10, Rarity.common),
    AchievementDefinition("hundred_cookies", "Seed of Wealth", _T.total_cookies, 100, 25, Rarity.common),
    AchievementDefinition("thousand_cookies", "First Bloom", _T.total_cookies, 1_000, 50, Rarity.common),
    AchievementDefinition("first_building", "Cornerstone", _T.buildings_owned, 1, 30, Rarity.common),
    AchievementDefinition("million_cookies", "Rise to a Million", _T.total_cookies, 1_000_000, 100, Rarity.uncommon),
    AchievementDefinition("combo_master", "Combo Master", _T.max_streak, 50, 150, Rarity.uncommon),
    AchievementDefinition("level_10", "Enlightened Clicker", _T.level, 10, 200, Rarity.uncommon),
    AchievementDefinition("billion_cookies", "Billion Master", _T.total_cookies, 1_000_000_000, 500, Rarity.rare),
    AchievementDefinition("prestige_master", "Prestige Master", _T.prestige_level, 1, 1_000, Rarity.rare),
    AchievementDefinition("level_50", "Higher Tier", _T.level, 50, 750, Rarity.rare),
    AchievementDefinition("trillion_cookies", "Trillion Treasure", _T.total_cookies, 1e12, 2_500, Rarity.epic),
    AchievementDefinition("combo_legend", "Epic Speed", _T.max_streak, 100, 2_000, Rarity.epic),
    AchievementDefinition("level_100", "Epic Tier", _T.level, 100, 3_000, Rarity.epic),
    AchievementDefinition("quadrillion_cookies", "Legendary Wealth", _T.total_cookies, 1e15, 10_000, Rarity.legendary),
    AchievementDefinition("combo_myth", "Legendary Speed", _T.max_streak, 500, 15_000, Rarity.legendary),
    AchievementDefinition("level_1000", "Legendary Tier", _T.level, 1_000, 20_000, Rarity.legendary),
    AchievementDefinition("quintillion_cookies", "Nebula Master", _T.total_cookies, 1e18, 50_000, Rarity.nebula),
    AchievementDefinition("combo_nebula", "Nebula Speed", _T.max_streak, 1_000, 40_000, Rarity.nebula),
    AchievementDefinition("level_nebula", "Nebula Tier", _T.level, 5_000, 60_000, Rarity.nebula),
)

COIN_SHOP: tuple[CoinShopDiscount, ...] = (
    CoinShopDiscount("product_discount_5", "5% product discount", 5, 500, "product"),
    CoinShopDiscount("product_discount_10", "10% product discount", 10, 2_000, "product"),
    CoinShopDiscount("product_discount_15", "15% product discount", 15, 5_000, "product"),
    CoinShopDiscount("drop_discount_10", "10% drop discount", 10, 1_000, "drop"),
    CoinShopDiscount("drop_discount_20", "20% drop discount", 20, 3_000, "drop"),
    CoinShopDiscount("drop_discount_30", "30% drop discount", 30, 8_000, "drop"),
)


@lru_cache(maxsize=1)
def default_catalog() -> Catalog:
    return Catalog(
        buildings=DefinitionTable.from_rows(list(BUILDINGS)),
        upgrades=DefinitionTable.from_rows(list(UPGRADES)),
        achievements=DefinitionTable.from_rows(list(ACHIEVEMENTS)),
        coin_shop=DefinitionTable.from_rows(list(COIN_SHOP)),
    )
