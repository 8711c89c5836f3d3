"""Property/upgrade resolver.

Turns an ability's raw property bag and its upgrade deltas into level-1 and
max-level values for a single named property:

    base      value at level 1
    scale     per-spirit-point coefficient at level 1
    base_max  value once every upgrade is bought
    scale_max coefficient once every upgrade is bought
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from src.data.models.item import ItemProperty, PropertyUpgrade

from .constants import PERCENT_MULTIPLIER_THRESHOLD, SPIRIT_POWER_STAT, UpgradeType
from .value_range import parse_numeric_value


@dataclass(frozen=True)
class ResolvedProperty:
    """Intercept and spirit scaling of a property at level 1 and max level."""

    base: Optional[float] = None
    scale: float = 0.0
    base_max: Optional[float] = None
    scale_max: float = 0.0

    @property
    def is_empty(self) -> bool:
        return (
            self.base is None
            and self.base_max is None
            and self.scale == 0
            and self.scale_max == 0
        )

    def scaled(self, factor: float) -> "ResolvedProperty":
        """Every term multiplied by ``factor``."""
        return ResolvedProperty(
            base=self.base * factor if self.base is not None else None,
            scale=self.scale * factor,
            base_max=self.base_max * factor if self.base_max is not None else None,
            scale_max=self.scale_max * factor,
        )


EMPTY_PROPERTY = ResolvedProperty()


def parse_property_value(prop: Optional[ItemProperty]) -> Optional[float]:
    if prop is None:
        return None
    return parse_numeric_value(prop.value)


def get_spirit_scale(prop: Optional[ItemProperty]) -> float:
    """Per-spirit-point coefficient of a property, 0 when it does not scale with spirit."""
    scale_fn = prop.scale_function if prop is not None else None
    if scale_fn is None:
        return 0.0

    stat_scale = parse_numeric_value(scale_fn.stat_scale)
    if stat_scale is None:
        stat_scale = parse_numeric_value(scale_fn.stat_scale_secondary)
    if stat_scale is None:
        stat_scale = 0.0

    if scale_fn.specific_stat_scale_type == SPIRIT_POWER_STAT:
        return stat_scale

    scaling_stats = [stat.lower() for stat in scale_fn.scaling_stats or [] if stat]
    class_name = (scale_fn.class_name or "").lower()
    subclass_name = (scale_fn.subclass_name or "").lower()
    references_spirit = (
        SPIRIT_POWER_STAT.lower() in scaling_stats
        or any(
            marker in name
            for name in (class_name, subclass_name)
            for marker in ("tech_damage", "techpower")
        )
    )
    return stat_scale if references_spirit else 0.0


def upgrade_multiplier(bonus: float) -> float:
    """Normalize a multiply-type upgrade bonus.

    Magnitudes above the threshold are percents, everything else is a
    literal factor. A zero bonus leaves the value unchanged.
    """
    if bonus == 0:
        return 1.0
    if abs(bonus) > PERCENT_MULTIPLIER_THRESHOLD:
        return 1 + bonus / 100
    return bonus


def group_upgrades(upgrades: Iterable[PropertyUpgrade]) -> Dict[str, List[PropertyUpgrade]]:
    """Upgrade deltas keyed by property name, tier order preserved."""
    grouped: Dict[str, List[PropertyUpgrade]] = {}
    for upgrade in upgrades:
        if upgrade.name:
            grouped.setdefault(upgrade.name, []).append(upgrade)
    return grouped


class PropertyResolver:
    """
    Resolves named properties of one ability.

    Usage:
        resolver = PropertyResolver.for_ability(ability_item)
        cooldown = resolver.resolve_first(COOLDOWN_KEYS)
    """

    def __init__(
        self,
        properties: Mapping[str, ItemProperty],
        upgrades: Iterable[PropertyUpgrade] = (),
    ):
        self.properties = dict(properties)
        self.upgrades = group_upgrades(upgrades)

    @classmethod
    def for_ability(cls, ability) -> "PropertyResolver":
        return cls(ability.property_bag(), ability.property_upgrades())

    def has(self, key: str) -> bool:
        """True when the property exists or any upgrade touches it."""
        return key in self.properties or key in self.upgrades

    def resolve(self, key: str) -> ResolvedProperty:
        """Fold every upgrade for ``key`` onto its level-1 value."""
        prop = self.properties.get(key)
        base = parse_property_value(prop)
        scale = get_spirit_scale(prop)
        base_max = base
        scale_max = scale

        for upgrade in self.upgrades.get(key, []):
            bonus = parse_numeric_value(upgrade.bonus)
            if bonus is None:
                continue

            upgrade_type = upgrade.upgrade_type
            if upgrade_type is None and upgrade.scale_stat_filter:
                upgrade_type = UpgradeType.ADD_TO_SCALE

            if upgrade_type == UpgradeType.ADD_TO_SCALE:
                # Scale upgrades filtered to a non-spirit stat are flat bonuses
                if upgrade.scale_stat_filter and upgrade.scale_stat_filter != SPIRIT_POWER_STAT:
                    base_max = (base_max or 0.0) + bonus
                else:
                    scale_max += bonus
            elif upgrade_type == UpgradeType.MULTIPLY_BASE:
                if base_max is not None:
                    base_max *= upgrade_multiplier(bonus)
            elif upgrade_type == UpgradeType.MULTIPLY_SCALE:
                scale_max *= upgrade_multiplier(bonus)
            else:
                # EAddToBase, untyped, and unknown types
                base_max = (base_max or 0.0) + bonus

        return ResolvedProperty(base=base, scale=scale, base_max=base_max, scale_max=scale_max)

    def resolve_first(self, keys: Sequence[str]) -> ResolvedProperty:
        """Resolve the first alias that has any data."""
        for key in keys:
            if self.has(key):
                return self.resolve(key)
        return EMPTY_PROPERTY


def resolve_property(
    properties: Mapping[str, ItemProperty],
    upgrades: Iterable[PropertyUpgrade],
    key: str,
) -> ResolvedProperty:
    """One-shot resolution of a single property."""
    return PropertyResolver(properties, upgrades).resolve(key)
