# Data Models
from .hero import (
    Hero,
    HeroStartingStat,
    HeroStartingStats,
    HeroScalingStat,
    PurchaseBonus,
)
from .item import (
    Item,
    ItemType,
    ItemProperty,
    ScaleFunction,
    PropertyUpgrade,
    WeaponInfo,
    WeaponItem,
    AbilityItem,
    AnyItem,
    parse_item,
)

__all__ = [
    "Hero",
    "HeroStartingStat",
    "HeroStartingStats",
    "HeroScalingStat",
    "PurchaseBonus",
    "Item",
    "ItemType",
    "ItemProperty",
    "ScaleFunction",
    "PropertyUpgrade",
    "WeaponInfo",
    "WeaponItem",
    "AbilityItem",
    "AnyItem",
    "parse_item",
]
