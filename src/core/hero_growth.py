"""Hero Growth Builder.

Weapon DPS and survivability of each hero from level 1 to max level, with
vitality purchase bonuses and spirit scaling layered on top.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

from src.data.models.hero import Hero
from src.data.models.item import AnyItem, WeaponInfo, WeaponItem

from .constants import (
    BULLET_DAMAGE_PER_LEVEL,
    DRIFTER_CLASS_NAME,
    DRIFTER_PELLET_NOTE,
    HEALTH_FLAT_BONUS_TYPES,
    HEALTH_PER_LEVEL,
    HEALTH_PERCENT_BONUS_TYPES,
    MOVE_SPEED_FLAT_BONUS_TYPES,
    MOVE_SPEED_PERCENT_BONUS_TYPES,
    PRIMARY_WEAPON_SLOT,
    REGEN_FLAT_BONUS_TYPES,
    REGEN_PERCENT_BONUS_TYPES,
    SCALING_BULLET_DAMAGE,
    SCALING_HEALTH_REGEN,
    SCALING_MOVE_SPEED,
    SCALING_ROUNDS_PER_SECOND,
    SCALING_SPRINT_SPEED,
    SECONDARY_WEAPON_SLOT,
    SPIRIT_CATEGORY,
    SPIRIT_FLAT_BONUS_TYPES,
    SPIRIT_PER_LEVEL,
    SPIRIT_POWER_STAT,
    SPRINT_FLAT_BONUS_TYPES,
    SPRINT_PERCENT_BONUS_TYPES,
    VITALITY_CATEGORY,
)
from .value_range import parse_numeric_value


logger = logging.getLogger(__name__)


@dataclass
class SpiritScalingDetail:
    stat_key: str
    display_name: str
    ratio_per_spirit: float
    max_bonus_at_max_level: float


@dataclass
class HeroGrowthRow:
    """Weapon and survivability growth of one hero."""

    hero_id: int
    hero_name: str
    hero_image: Optional[str]
    is_disabled: bool

    # Weapon
    base_bullet_damage: Optional[float] = None
    pellets: Optional[float] = None
    pellet_exception_note: Optional[str] = None
    alt_fire_name: Optional[str] = None
    alt_fire_damage: Optional[float] = None
    alt_fire_pellets: Optional[float] = None
    base_ammo: Optional[float] = None
    base_fire_rate: Optional[float] = None
    base_dps: Optional[float] = None
    base_spin_dps: Optional[float] = None
    dpm: Optional[float] = None
    falloff_range_min: Optional[float] = None
    falloff_range_max: Optional[float] = None

    # Survivability
    base_hp: Optional[float] = None
    base_regen: Optional[float] = None
    base_move_speed: Optional[float] = None
    base_sprint: Optional[float] = None
    base_stamina: Optional[float] = None
    max_health_with_boons: Optional[float] = None
    max_regen_with_boons: Optional[float] = None
    max_regen_with_boons_and_spirit: Optional[float] = None
    max_move_speed_with_boons: Optional[float] = None
    max_move_speed_with_boons_and_spirit: Optional[float] = None
    max_sprint_with_boons: Optional[float] = None
    max_sprint_with_boons_and_spirit: Optional[float] = None

    # Per-level growth
    dmg_gain: Optional[float] = None
    hp_gain: Optional[float] = None
    spirit_gain: Optional[float] = None
    max_level: int = 1
    total_spirit_at_max_level: float = 0.0
    max_level_hp: Optional[float] = None
    max_gun_damage: Optional[float] = None
    max_gun_dps: Optional[float] = None
    max_spin_gun_dps: Optional[float] = None
    max_dpm: Optional[float] = None

    # Spirit-infused gun
    spirit_bullet_damage_bonus: Optional[float] = None
    spirit_rounds_per_second_bonus: Optional[float] = None
    max_gun_damage_with_spirit: Optional[float] = None
    max_gun_dps_with_spirit: Optional[float] = None
    max_spin_gun_dps_with_spirit: Optional[float] = None

    dps_growth_percent: Optional[float] = None
    hp_growth_percent: Optional[float] = None
    spirit_details: List[SpiritScalingDetail] = field(default_factory=list)


@dataclass
class WeaponProfile:
    """Fire-cycle geometry of a hero's primary weapon."""

    bullet_damage: Optional[float]
    pellets: Optional[float]
    clip_size: Optional[float]
    burst_shot_count: float
    projectiles_per_shot: float
    effective_cycle_time: Optional[float]
    effective_max_spin_cycle_time: Optional[float]

    @property
    def projectile_multiplier(self) -> float:
        return self.projectiles_per_shot * self.burst_shot_count

    def cycle_time(self, max_spin: bool) -> Optional[float]:
        return self.effective_max_spin_cycle_time if max_spin else self.effective_cycle_time

    def fire_rate(self, max_spin: bool = False) -> Optional[float]:
        cycle = self.cycle_time(max_spin)
        if not cycle:
            return None
        return self.burst_shot_count / cycle

    def dps(self, damage: Optional[float], max_spin: bool = False) -> Optional[float]:
        """Damage per second for a per-bullet damage figure."""
        cycle = self.cycle_time(max_spin)
        if damage is None or not cycle or cycle <= 0:
            return None
        return damage * self.projectile_multiplier / cycle

    def dps_with_spirit(
        self,
        damage: Optional[float],
        bonus_damage: float,
        bonus_rate: float,
        max_spin: bool = False,
    ) -> Optional[float]:
        """DPS with additive bullet damage and rounds-per-second bonuses.

        The bonus rate is added to the weapon's fire rate and converted back
        to a cycle time; a non-positive adjusted rate yields None.
        """
        cycle = self.cycle_time(max_spin)
        if damage is None or not cycle or cycle <= 0:
            return None
        adjusted_rate = self.burst_shot_count / cycle + bonus_rate
        if adjusted_rate <= 0:
            return None
        adjusted_cycle = self.burst_shot_count / adjusted_rate
        return (damage + bonus_damage) * self.projectile_multiplier / adjusted_cycle


def weapon_info_for(hero: Hero, item_by_class: Dict[str, AnyItem], slot_names: Sequence[str]) -> tuple:
    """First weapon item found among ``slot_names``: ``(item, weapon_info)``."""
    slots = hero.items or {}
    class_name = next((slots.get(slot) for slot in slot_names if slots.get(slot)), None)
    item = item_by_class.get(class_name) if class_name else None
    if not isinstance(item, WeaponItem):
        return None, None
    return item, item.weapon_info


def build_weapon_profile(hero: Hero, info: Optional[WeaponInfo]) -> WeaponProfile:
    info = info or WeaponInfo()
    burst_shot_count = max(info.burst_shot_count or 1, 1)
    intra_burst = info.intra_burst_cycle_time or 0.0
    burst_adjustment = intra_burst * burst_shot_count if burst_shot_count > 1 else 0.0

    cycle_time = info.cycle_time
    max_spin_cycle = info.max_spin_cycle_time if info.max_spin_cycle_time is not None else cycle_time
    effective_cycle = cycle_time + burst_adjustment if cycle_time is not None else None
    effective_max_spin = (
        max_spin_cycle + burst_adjustment if max_spin_cycle is not None else effective_cycle
    )

    # Drifter's pellets do not stack damage
    if info.bullets is None or hero.class_name == DRIFTER_CLASS_NAME:
        projectiles = 1.0
    else:
        projectiles = info.bullets

    return WeaponProfile(
        bullet_damage=info.bullet_damage,
        pellets=info.bullets,
        clip_size=info.clip_size,
        burst_shot_count=burst_shot_count,
        projectiles_per_shot=projectiles,
        effective_cycle_time=effective_cycle,
        effective_max_spin_cycle_time=effective_max_spin,
    )


def sum_purchase_bonuses(hero: Hero, category: str, value_types: Sequence[str]) -> float:
    total = 0.0
    for bonus in hero.purchase_bonus_list(category):
        if bonus.value_type not in value_types:
            continue
        value = parse_numeric_value(bonus.value)
        if value is not None:
            total += value
    return total


def apply_flat_and_percent(base: Optional[float], flat: float, percent: float) -> Optional[float]:
    """Flat bonuses first, then the percent multiplier."""
    if base is None:
        return None
    return (base + flat) * (1 + percent / 100)


def growth_percent(base: Optional[float], max_value: Optional[float]) -> Optional[float]:
    if not base or max_value is None:
        return None
    return (max_value - base) / base * 100


def format_stat_name(stat_key: str) -> str:
    """``EBulletDamage`` -> ``Bullet Damage``."""
    if not stat_key:
        return "Unknown"
    name = stat_key[1:] if stat_key.startswith("E") else stat_key
    name = re.sub(r"([a-z])([A-Z])", r"\1 \2", name.replace("_", " "))
    return " ".join(segment.capitalize() for segment in name.lower().split())


def _scale(hero: Hero, stat_key: str) -> float:
    scaling = hero.scaling_for(stat_key)
    if scaling is None:
        return 0.0
    return parse_numeric_value(scaling.scale) or 0.0


def _starting(hero: Hero, stat: str) -> Optional[float]:
    return parse_numeric_value(hero.starting_stat(stat))


def _nonzero_or_none(value: float) -> Optional[float]:
    return value if value != 0 else None


def build_growth_row(hero: Hero, item_by_class: Dict[str, AnyItem]) -> HeroGrowthRow:
    weapon, info = weapon_info_for(hero, item_by_class, (PRIMARY_WEAPON_SLOT, SECONDARY_WEAPON_SLOT))
    alt_weapon, alt_info = weapon_info_for(hero, item_by_class, (SECONDARY_WEAPON_SLOT,))
    if info is None:
        logger.debug("Hero %s has no weapon data", hero.name)
    profile = build_weapon_profile(hero, info)

    max_level = hero.max_level
    level_increments = max(max_level - 1, 0)
    dmg_gain = hero.level_up_gain(BULLET_DAMAGE_PER_LEVEL)
    hp_gain = hero.level_up_gain(HEALTH_PER_LEVEL)
    spirit_gain = hero.level_up_gain(SPIRIT_PER_LEVEL)

    # Spirit from levels only; starting spirit is not part of the gun bonus
    total_spirit = (spirit_gain or 0.0) * level_increments
    spirit_from_boons = sum_purchase_bonuses(hero, SPIRIT_CATEGORY, SPIRIT_FLAT_BONUS_TYPES)
    total_spirit_with_boons = total_spirit + spirit_from_boons

    base_damage = profile.bullet_damage
    max_gun_damage = base_damage + dmg_gain * level_increments if base_damage is not None and dmg_gain is not None else base_damage
    base_dps = profile.dps(base_damage)
    max_gun_dps = profile.dps(max_gun_damage)
    max_spin_gun_dps = profile.dps(max_gun_damage, max_spin=True)
    if max_spin_gun_dps is None:
        max_spin_gun_dps = max_gun_dps
    base_spin_dps = profile.dps(base_damage, max_spin=True)
    if base_spin_dps is None:
        base_spin_dps = base_dps

    bullet_bonus = _nonzero_or_none(_scale(hero, SCALING_BULLET_DAMAGE) * total_spirit)
    rate_bonus = _nonzero_or_none(_scale(hero, SCALING_ROUNDS_PER_SECOND) * total_spirit)
    max_gun_damage_with_spirit = (
        max_gun_damage + (bullet_bonus or 0.0) if max_gun_damage is not None else None
    )
    if bullet_bonus is None and rate_bonus is None:
        max_gun_dps_with_spirit = max_gun_dps
        max_spin_gun_dps_with_spirit = max_spin_gun_dps
    else:
        max_gun_dps_with_spirit = profile.dps_with_spirit(
            max_gun_damage, bullet_bonus or 0.0, rate_bonus or 0.0
        )
        max_spin_gun_dps_with_spirit = profile.dps_with_spirit(
            max_gun_damage, bullet_bonus or 0.0, rate_bonus or 0.0, max_spin=True
        )
        if max_spin_gun_dps_with_spirit is None:
            max_spin_gun_dps_with_spirit = max_gun_dps_with_spirit

    clip = profile.clip_size
    dpm = base_damage * profile.projectiles_per_shot * clip if base_damage is not None and clip is not None else None
    max_dpm = (
        max_gun_damage * profile.projectiles_per_shot * clip
        if max_gun_damage is not None and clip is not None
        else None
    )

    base_hp = _starting(hero, "max_health")
    base_regen = _starting(hero, "base_health_regen")
    base_move_speed = _starting(hero, "max_move_speed")
    base_sprint = _starting(hero, "sprint_speed")
    max_level_hp = base_hp + hp_gain * level_increments if base_hp is not None and hp_gain is not None else base_hp

    def vitality(base: Optional[float], flat_types: Sequence[str], percent_types: Sequence[str]) -> Optional[float]:
        return apply_flat_and_percent(
            base,
            sum_purchase_bonuses(hero, VITALITY_CATEGORY, flat_types),
            sum_purchase_bonuses(hero, VITALITY_CATEGORY, percent_types),
        )

    def with_spirit(value: Optional[float], stat_key: str) -> Optional[float]:
        if value is None:
            return None
        return value + _scale(hero, stat_key) * total_spirit_with_boons

    regen_with_boons = vitality(base_regen, REGEN_FLAT_BONUS_TYPES, REGEN_PERCENT_BONUS_TYPES)
    move_with_boons = vitality(base_move_speed, MOVE_SPEED_FLAT_BONUS_TYPES, MOVE_SPEED_PERCENT_BONUS_TYPES)
    sprint_with_boons = vitality(base_sprint, SPRINT_FLAT_BONUS_TYPES, SPRINT_PERCENT_BONUS_TYPES)

    spirit_details = []
    for stat_key, detail in (hero.scaling_stats or {}).items():
        if detail is None or detail.scaling_stat != SPIRIT_POWER_STAT:
            continue
        ratio = detail.scale or 0.0
        if ratio == 0:
            continue
        spirit_details.append(SpiritScalingDetail(
            stat_key=stat_key,
            display_name=format_stat_name(stat_key),
            ratio_per_spirit=ratio,
            max_bonus_at_max_level=ratio * total_spirit,
        ))

    is_drifter = hero.class_name == DRIFTER_CLASS_NAME
    return HeroGrowthRow(
        hero_id=hero.id,
        hero_name=hero.name,
        hero_image=hero.image,
        is_disabled=hero.is_disabled,
        base_bullet_damage=base_damage,
        pellets=profile.pellets,
        pellet_exception_note=DRIFTER_PELLET_NOTE if is_drifter else None,
        alt_fire_name=alt_weapon.name if alt_weapon is not None else None,
        alt_fire_damage=alt_info.bullet_damage if alt_info else None,
        alt_fire_pellets=alt_info.bullets if alt_info else None,
        base_ammo=clip,
        base_fire_rate=profile.fire_rate(),
        base_dps=base_dps,
        base_spin_dps=base_spin_dps,
        dpm=dpm,
        falloff_range_min=info.damage_falloff_start_range if info else None,
        falloff_range_max=info.damage_falloff_end_range if info else None,
        base_hp=base_hp,
        base_regen=base_regen,
        base_move_speed=base_move_speed,
        base_sprint=base_sprint,
        base_stamina=_starting(hero, "stamina"),
        max_health_with_boons=vitality(max_level_hp, HEALTH_FLAT_BONUS_TYPES, HEALTH_PERCENT_BONUS_TYPES),
        max_regen_with_boons=regen_with_boons,
        max_regen_with_boons_and_spirit=with_spirit(regen_with_boons, SCALING_HEALTH_REGEN),
        max_move_speed_with_boons=move_with_boons,
        max_move_speed_with_boons_and_spirit=with_spirit(move_with_boons, SCALING_MOVE_SPEED),
        max_sprint_with_boons=sprint_with_boons,
        max_sprint_with_boons_and_spirit=with_spirit(sprint_with_boons, SCALING_SPRINT_SPEED),
        dmg_gain=dmg_gain,
        hp_gain=hp_gain,
        spirit_gain=spirit_gain,
        max_level=max_level,
        total_spirit_at_max_level=total_spirit,
        max_level_hp=max_level_hp,
        max_gun_damage=max_gun_damage,
        max_gun_dps=max_gun_dps,
        max_spin_gun_dps=max_spin_gun_dps,
        max_dpm=max_dpm,
        spirit_bullet_damage_bonus=bullet_bonus,
        spirit_rounds_per_second_bonus=rate_bonus,
        max_gun_damage_with_spirit=max_gun_damage_with_spirit,
        max_gun_dps_with_spirit=max_gun_dps_with_spirit,
        max_spin_gun_dps_with_spirit=max_spin_gun_dps_with_spirit,
        dps_growth_percent=growth_percent(base_dps, max_gun_dps),
        hp_growth_percent=growth_percent(base_hp, max_level_hp),
        spirit_details=spirit_details,
    )


def build_hero_growth_rows(heroes: Iterable[Hero], items: Iterable[AnyItem]) -> List[HeroGrowthRow]:
    """One growth row per hero, sorted by hero name."""
    item_by_class = {item.class_name: item for item in items}
    rows = [build_growth_row(hero, item_by_class) for hero in heroes]
    rows.sort(key=lambda row: row.hero_name.lower())
    return rows


# =============================================================================
# PER-LEVEL CURVES
# =============================================================================

@dataclass
class HeroGrowthProfile:
    """Per-level inputs for the growth chart."""

    hero_id: int
    hero_name: str
    max_level: int
    base_bullet_damage: Optional[float]
    dmg_gain: Optional[float]
    base_hp: Optional[float]
    hp_gain: Optional[float]
    base_spirit: float
    spirit_gain: float
    weapon: WeaponProfile
    bullet_damage_per_spirit: float
    rounds_per_second_per_spirit: float

    def levels(self) -> List[int]:
        return list(range(1, self.max_level + 1))

    def bullet_damage_at(self, level: int) -> Optional[float]:
        if self.base_bullet_damage is None:
            return None
        return self.base_bullet_damage + (self.dmg_gain or 0.0) * (level - 1)

    def hp_at(self, level: int) -> Optional[float]:
        if self.base_hp is None:
            return None
        return self.base_hp + (self.hp_gain or 0.0) * (level - 1)

    def spirit_at(self, level: int) -> float:
        return self.base_spirit + self.spirit_gain * (level - 1)

    def dps_at(self, level: int, max_spin: bool = False) -> Optional[float]:
        return self.weapon.dps(self.bullet_damage_at(level), max_spin=max_spin)

    def dps_with_spirit_at(self, level: int, max_spin: bool = True) -> Optional[float]:
        spirit = self.spirit_at(level)
        return self.weapon.dps_with_spirit(
            self.bullet_damage_at(level),
            self.bullet_damage_per_spirit * spirit,
            self.rounds_per_second_per_spirit * spirit,
            max_spin=max_spin,
        )


def build_growth_profile(hero: Hero, item_by_class: Dict[str, AnyItem]) -> HeroGrowthProfile:
    _, info = weapon_info_for(hero, item_by_class, (PRIMARY_WEAPON_SLOT, SECONDARY_WEAPON_SLOT))
    weapon = build_weapon_profile(hero, info)
    return HeroGrowthProfile(
        hero_id=hero.id,
        hero_name=hero.name,
        max_level=hero.max_level,
        base_bullet_damage=weapon.bullet_damage,
        dmg_gain=hero.level_up_gain(BULLET_DAMAGE_PER_LEVEL),
        base_hp=_starting(hero, "max_health"),
        hp_gain=hero.level_up_gain(HEALTH_PER_LEVEL),
        base_spirit=_starting(hero, "spirit_power") or 0.0,
        spirit_gain=hero.level_up_gain(SPIRIT_PER_LEVEL) or 0.0,
        weapon=weapon,
        bullet_damage_per_spirit=_scale(hero, SCALING_BULLET_DAMAGE),
        rounds_per_second_per_spirit=_scale(hero, SCALING_ROUNDS_PER_SECOND),
    )


def build_growth_profiles(heroes: Iterable[Hero], items: Iterable[AnyItem]) -> List[HeroGrowthProfile]:
    item_by_class = {item.class_name: item for item in items}
    profiles = [build_growth_profile(hero, item_by_class) for hero in heroes]
    profiles.sort(key=lambda profile: profile.hero_name.lower())
    return profiles
