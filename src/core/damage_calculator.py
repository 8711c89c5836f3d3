"""Damage calculator and ability-usage simulator.

Composes gun damage, ability damage and percent-of-health damage of each hero
over a combat window, then applies team amps, shreds and enemy resists to get
a time-to-kill against a given enemy health.
"""

import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

import numpy as np

from .ability_metrics import DamageVariant, HeroAbilityRow
from .constants import (
    DEFAULT_MAX_LEVEL,
    ENEMY_HEALTH_MAX_RATIO,
    ENEMY_HEALTH_MIN_RATIO,
    ENEMY_HEALTH_MIN_SPAN,
    ENEMY_HEALTH_SAMPLE_COUNT,
    IGNORED_DAMAGE_ABILITY_NAMES,
    MAX_CHARGE_SIMULATION_ITERATIONS,
    MIN_ENEMY_HEALTH,
    ModifierKey,
)
from .hero_growth import HeroGrowthRow
from .value_range import interpolate, range_at_level


# =============================================================================
# ABILITY USAGE
# =============================================================================

@dataclass(frozen=True)
class AbilityUsage:
    """Casts and active seconds of one ability inside a combat window."""

    cast_count: float
    uptime_seconds: float


def compute_ability_usage(
    window_seconds: float,
    charges: Optional[float],
    cooldown: Optional[float],
    charge_interval: Optional[float],
    duration: float,
) -> AbilityUsage:
    """Simulate how often an ability is cast in ``window_seconds``.

    Single-charge abilities recur every cooldown (or every duration when
    there is no cooldown) and may report fractional casts. Multi-charge
    abilities are stepped cast by cast: the first charges fire
    ``charge_interval`` apart, later casts wait for the oldest charge to
    recharge. Stepping stops at the window end or after
    MAX_CHARGE_SIMULATION_ITERATIONS casts.

    Args:
        window_seconds: Length of the combat window.
        charges: Charge count, 1 when unknown.
        cooldown: Recharge time of one charge. None or <= 0 means never.
        charge_interval: Minimum gap between consecutive casts.
        duration: Active time of one cast, used for uptime.

    Returns:
        AbilityUsage with cast count and uptime (uptime <= window).
    """
    if window_seconds <= 0:
        return AbilityUsage(0.0, 0.0)

    duration = max(duration, 0.0)
    if charges is None or not math.isfinite(charges):
        charges = 1
    initial_charges = max(1, math.floor(charges))
    recharge = cooldown if cooldown is not None and cooldown > 0 else math.inf
    interval = max(charge_interval or 0.0, 0.0)

    if initial_charges <= 1:
        if math.isfinite(recharge):
            cast_count = window_seconds / recharge
        else:
            cast_count = window_seconds / duration if duration > 0 else 0.0
        return AbilityUsage(cast_count, min(duration * cast_count, window_seconds))

    cast_times: List[float] = []
    for index in range(MAX_CHARGE_SIMULATION_ITERATIONS):
        if index < initial_charges:
            cast_time = interval * index
        else:
            ready_time = cast_times[index - initial_charges] + recharge
            cast_time = max(ready_time, cast_times[index - 1] + interval)
        if not math.isfinite(cast_time) or cast_time > window_seconds:
            break
        cast_times.append(cast_time)

    cast_count = float(len(cast_times))
    return AbilityUsage(cast_count, min(duration * cast_count, window_seconds))


# =============================================================================
# HERO PROFILES
# =============================================================================

@dataclass
class HeroProfile:
    """Calculator inputs of a hero that do not depend on the sliders."""

    hero_id: int
    hero_name: str
    hero_image: Optional[str]
    is_disabled: bool
    max_level: int
    base_spirit_power: float
    spirit_gain: float


def group_abilities_by_hero(ability_rows: Iterable[HeroAbilityRow]) -> Dict[int, List[HeroAbilityRow]]:
    """Ability rows per hero id, each list sorted by ability name."""
    grouped: Dict[int, List[HeroAbilityRow]] = {}
    for row in ability_rows:
        grouped.setdefault(row.hero_id, []).append(row)
    for rows in grouped.values():
        rows.sort(key=lambda row: row.ability_name.lower())
    return grouped


def build_hero_profiles(
    growth_rows: Sequence[HeroGrowthRow],
    ability_rows: Sequence[HeroAbilityRow],
) -> List[HeroProfile]:
    """One profile per hero: growth rows first, then heroes known only from abilities.

    Spirit inputs come from the hero's first ability row.
    """
    first_ability: Dict[int, HeroAbilityRow] = {}
    for row in ability_rows:
        first_ability.setdefault(row.hero_id, row)

    profiles: List[HeroProfile] = []
    seen = set()

    for row in growth_rows:
        meta = first_ability.get(row.hero_id)
        profiles.append(HeroProfile(
            hero_id=row.hero_id,
            hero_name=row.hero_name,
            hero_image=row.hero_image,
            is_disabled=row.is_disabled,
            max_level=meta.max_level if meta else DEFAULT_MAX_LEVEL,
            base_spirit_power=meta.base_spirit_power if meta else 0.0,
            spirit_gain=meta.spirit_gain if meta else (row.spirit_gain or 0.0),
        ))
        seen.add(row.hero_id)

    for row in ability_rows:
        if row.hero_id in seen:
            continue
        profiles.append(HeroProfile(
            hero_id=row.hero_id,
            hero_name=row.hero_name,
            hero_image=row.hero_image,
            is_disabled=row.is_disabled,
            max_level=row.max_level,
            base_spirit_power=row.base_spirit_power,
            spirit_gain=row.spirit_gain,
        ))
        seen.add(row.hero_id)

    profiles.sort(key=lambda profile: profile.hero_name.lower())
    return profiles


def global_max_level(profiles: Sequence[HeroProfile]) -> int:
    if not profiles:
        return DEFAULT_MAX_LEVEL
    return max(profile.max_level for profile in profiles)


def spirit_slider_max(ability_rows: Sequence[HeroAbilityRow]) -> int:
    """Upper bound for the spirit input, rounded up to a multiple of 25 plus headroom."""
    if not ability_rows:
        return 250
    max_spirit = max(row.max_spirit_power for row in ability_rows)
    return max(150, math.ceil(max_spirit / 25) * 25 + 50)


# =============================================================================
# DAMAGE MODEL
# =============================================================================

@dataclass
class PercentEffect:
    """A percent-of-max-health damage component and its window coefficient."""

    ability_name: str
    component_label: str
    mode: str  # "burst" or "sustained"
    percent_value: float
    per_window_coefficient: float
    uptime_seconds: float = 0.0


@dataclass
class HeroDamageModel:
    """Damage of one hero over a combat window, before resists and amps."""

    hero_id: int
    hero_name: str
    hero_image: Optional[str]
    is_disabled: bool
    level: int
    max_level: int
    base_spirit_power: float
    spirit_gain: float
    effective_spirit: float

    gun_damage_over_window: float = 0.0
    burst_damage_over_window: float = 0.0
    sustained_damage_over_window: float = 0.0
    percent_burst_coefficient: float = 0.0
    percent_sustained_coefficient: float = 0.0

    amp_all_percent: float = 0.0
    amp_gun_percent: float = 0.0
    amp_spirit_percent: float = 0.0
    gun_shred_percent: float = 0.0
    spirit_shred_percent: float = 0.0

    percent_effects: List[PercentEffect] = field(default_factory=list)

    @property
    def ability_damage_over_window(self) -> float:
        return self.burst_damage_over_window + self.sustained_damage_over_window

    @property
    def base_damage_over_window(self) -> float:
        return self.gun_damage_over_window + self.ability_damage_over_window

    @property
    def percent_coefficient(self) -> float:
        """Fraction of enemy max health dealt over the window by percent damage."""
        return self.percent_burst_coefficient + self.percent_sustained_coefficient


def _modifier_percent(ability: HeroAbilityRow, key: ModifierKey, ratio: float, spirit: float) -> float:
    effect = ability.metrics.modifiers.summary.get(key)
    if effect is None:
        return 0.0
    intercept = interpolate(effect.value.base, effect.value.max, ratio) or 0.0
    scaling = interpolate(effect.scaling.base, effect.scaling.max, ratio) or 0.0
    return intercept + scaling * spirit


def _component_value(component, ratio: float, spirit: float) -> float:
    intercept = interpolate(component.damage_base, component.damage_max, ratio) or 0.0
    scaling = interpolate(component.scaling_base, component.scaling_max, ratio) or 0.0
    return intercept + scaling * spirit


def _totals_per_cast(totals, ratio: float, spirit: float) -> float:
    intercept = interpolate(totals.intercept_base, totals.intercept_max, ratio) or 0.0
    scaling = interpolate(totals.scaling_base, totals.scaling_max, ratio) or 0.0
    return max(intercept + scaling * spirit, 0.0)


def build_hero_damage_model(
    profile: HeroProfile,
    abilities: Sequence[HeroAbilityRow],
    growth_row: Optional[HeroGrowthRow],
    level: float,
    spirit: float,
    gun_bonus_percent: float = 0.0,
    fire_rate_bonus_percent: float = 0.0,
    variant: DamageVariant = DamageVariant.MAX,
    combat_window: float = 10.0,
) -> HeroDamageModel:
    """Damage one hero deals over a combat window.

    Args:
        profile: Hero level and spirit inputs.
        abilities: The hero's ability rows.
        growth_row: The hero's growth row, None when it has no weapon data.
        level: Hero level, clamped to ``[1, max_level]``.
        spirit: Spirit power. Never below the spirit the level grants.
        gun_bonus_percent: Extra weapon damage in percent.
        fire_rate_bonus_percent: Extra fire rate in percent.
        variant: Which side of min/max damage pairs to use.
        combat_window: Window length in seconds, at least 1.

    Returns:
        HeroDamageModel with raw damage totals and modifier percents.
    """
    level = int(min(max(level, 1), profile.max_level))
    ratio = (level - 1) / (profile.max_level - 1) if profile.max_level > 1 else 0.0
    window_seconds = max(combat_window, 1)

    natural_spirit = profile.base_spirit_power + profile.spirit_gain * max(level - 1, 0)
    effective_spirit = max(spirit, natural_spirit)
    extra_spirit = max(effective_spirit - profile.base_spirit_power, 0.0)

    base_gun_dps = (growth_row.base_dps if growth_row else None) or 0.0
    max_gun_dps = growth_row.max_gun_dps if growth_row and growth_row.max_gun_dps is not None else base_gun_dps
    max_gun_dps_with_spirit = (
        growth_row.max_gun_dps_with_spirit
        if growth_row and growth_row.max_gun_dps_with_spirit is not None
        else max_gun_dps
    )
    spirit_from_levels = profile.spirit_gain * max(profile.max_level - 1, 0)
    dps_per_spirit = (
        (max_gun_dps_with_spirit - max_gun_dps) / spirit_from_levels if spirit_from_levels > 0 else 0.0
    )
    gun_dps = max(
        (base_gun_dps + (max_gun_dps - base_gun_dps) * ratio + dps_per_spirit * extra_spirit)
        * (1 + gun_bonus_percent / 100)
        * (1 + fire_rate_bonus_percent / 100),
        0.0,
    )

    model = HeroDamageModel(
        hero_id=profile.hero_id,
        hero_name=profile.hero_name,
        hero_image=profile.hero_image,
        is_disabled=profile.is_disabled,
        level=level,
        max_level=profile.max_level,
        base_spirit_power=profile.base_spirit_power,
        spirit_gain=profile.spirit_gain,
        effective_spirit=effective_spirit,
        gun_damage_over_window=gun_dps * window_seconds,
    )

    for ability in abilities:
        if ability.ability_name.strip().lower() in IGNORED_DAMAGE_ABILITY_NAMES:
            continue

        cadence = ability.metrics.cadence
        duration = range_at_level(cadence.duration, ratio) or 0.0
        charges = range_at_level(cadence.charges, ratio)
        if charges is None:
            charges = 1.0
        usage = compute_ability_usage(
            window_seconds=window_seconds,
            charges=charges,
            cooldown=range_at_level(cadence.cooldown, ratio),
            charge_interval=duration if charges > 1 else 0.0,
            duration=duration,
        )

        damage = ability.metrics.damage
        burst_per_cast = _totals_per_cast(damage.burst.totals[variant], ratio, effective_spirit)
        model.burst_damage_over_window += burst_per_cast * usage.cast_count
        sustained_per_second = _totals_per_cast(damage.sustained.totals[variant], ratio, effective_spirit)
        model.sustained_damage_over_window += sustained_per_second * usage.uptime_seconds

        for key in ability.burst_damage_component_order:
            component = ability.damage_components.get(key)
            if component is None or not component.is_percent:
                continue
            percent = _component_value(component, ratio, effective_spirit)
            if not math.isfinite(percent) or percent == 0:
                continue
            coefficient = percent / 100 * usage.cast_count
            model.percent_burst_coefficient += coefficient
            model.percent_effects.append(PercentEffect(
                ability_name=ability.ability_name,
                component_label=component.label or key,
                mode="burst",
                percent_value=percent,
                per_window_coefficient=coefficient,
            ))

        for key in ability.dps_damage_component_order:
            component = ability.damage_components.get(key)
            if component is None or not component.is_percent:
                continue
            percent = _component_value(component, ratio, effective_spirit)
            if not math.isfinite(percent) or percent == 0 or usage.uptime_seconds == 0:
                continue
            coefficient = percent / 100 * usage.uptime_seconds
            model.percent_sustained_coefficient += coefficient
            model.percent_effects.append(PercentEffect(
                ability_name=ability.ability_name,
                component_label=component.label or key,
                mode="sustained",
                percent_value=percent,
                per_window_coefficient=coefficient,
                uptime_seconds=usage.uptime_seconds,
            ))

        model.amp_all_percent += _modifier_percent(ability, ModifierKey.DAMAGE_AMP_ALL, ratio, effective_spirit)
        model.amp_gun_percent += _modifier_percent(ability, ModifierKey.DAMAGE_AMP_GUN, ratio, effective_spirit)
        model.amp_spirit_percent += _modifier_percent(ability, ModifierKey.DAMAGE_AMP_SPIRIT, ratio, effective_spirit)
        model.gun_shred_percent += _modifier_percent(ability, ModifierKey.GUN_SHRED, ratio, effective_spirit)
        model.spirit_shred_percent += _modifier_percent(ability, ModifierKey.SPIRIT_SHRED, ratio, effective_spirit)

    return model


def build_hero_damage_models(
    profiles: Sequence[HeroProfile],
    ability_rows: Sequence[HeroAbilityRow],
    growth_rows: Sequence[HeroGrowthRow],
    **kwargs,
) -> Dict[int, HeroDamageModel]:
    """Damage model of every hero, keyed by hero id. ``kwargs`` go to build_hero_damage_model."""
    abilities_by_hero = group_abilities_by_hero(ability_rows)
    growth_by_hero = {row.hero_id: row for row in growth_rows}
    return {
        profile.hero_id: build_hero_damage_model(
            profile,
            abilities_by_hero.get(profile.hero_id, []),
            growth_by_hero.get(profile.hero_id),
            **kwargs,
        )
        for profile in profiles
    }


# =============================================================================
# TEAM COMPOSITION
# =============================================================================

@dataclass(frozen=True)
class TeamModifiers:
    """Amps as multipliers (percent / 100), shreds as percents."""

    amp_all_multiplier: float = 0.0
    gun_amp_multiplier: float = 0.0
    spirit_amp_multiplier: float = 0.0
    total_gun_shred_percent: float = 0.0
    total_spirit_shred_percent: float = 0.0

    def gun_resist_multiplier(self, enemy_gun_resist: float) -> float:
        return max(0.0, 1 - (enemy_gun_resist - self.total_gun_shred_percent) / 100)

    def spirit_resist_multiplier(self, enemy_spirit_resist: float) -> float:
        return max(0.0, 1 - (enemy_spirit_resist - self.total_spirit_shred_percent) / 100)


def compose_team_modifiers(
    models: Mapping[int, HeroDamageModel],
    selected_ids: Iterable[int],
) -> TeamModifiers:
    """Sum amps and shreds of the selected heroes. Unknown ids are ignored."""
    amp_all = amp_gun = amp_spirit = gun_shred = spirit_shred = 0.0
    for hero_id in selected_ids:
        model = models.get(hero_id)
        if model is None:
            continue
        amp_all += model.amp_all_percent
        amp_gun += model.amp_gun_percent
        amp_spirit += model.amp_spirit_percent
        gun_shred += model.gun_shred_percent
        spirit_shred += model.spirit_shred_percent
    return TeamModifiers(
        amp_all_multiplier=amp_all / 100,
        gun_amp_multiplier=amp_gun / 100,
        spirit_amp_multiplier=amp_spirit / 100,
        total_gun_shred_percent=gun_shred,
        total_spirit_shred_percent=spirit_shred,
    )


@dataclass
class HeroDamageSummary:
    """Resisted and amplified damage of one hero against one enemy."""

    hero_id: int
    hero_name: str
    enemy_health: float
    base_damage: float
    extra_damage: float
    total_damage_over_window: float
    percent_burst_damage: float
    percent_sustained_damage: float
    total_gun_damage: float
    dps: float
    time_to_kill: Optional[float]


def evaluate_hero_damage(
    model: HeroDamageModel,
    team: TeamModifiers,
    enemy_health: float,
    enemy_gun_resist: float = 0.0,
    enemy_spirit_resist: float = 0.0,
    combat_window: float = 10.0,
) -> HeroDamageSummary:
    """Apply resists and the three-way amp split, then derive DPS and time-to-kill.

    Amp-all multiplies all base damage, gun amp only the gun part and spirit
    amp only the ability and percent parts.
    """
    window_seconds = max(combat_window, 1)
    gun_resist = team.gun_resist_multiplier(enemy_gun_resist)
    spirit_resist = team.spirit_resist_multiplier(enemy_spirit_resist)

    gun_base = model.gun_damage_over_window * gun_resist
    ability_base = model.ability_damage_over_window * spirit_resist
    percent_adjusted = model.percent_coefficient * enemy_health * spirit_resist
    base_damage = gun_base + ability_base + percent_adjusted
    extra_damage = (
        base_damage * team.amp_all_multiplier
        + gun_base * team.gun_amp_multiplier
        + (ability_base + percent_adjusted) * team.spirit_amp_multiplier
    )
    total = base_damage + extra_damage
    spirit_amplifier = 1 + team.amp_all_multiplier + team.spirit_amp_multiplier
    dps = total / window_seconds

    return HeroDamageSummary(
        hero_id=model.hero_id,
        hero_name=model.hero_name,
        enemy_health=enemy_health,
        base_damage=base_damage,
        extra_damage=extra_damage,
        total_damage_over_window=total,
        percent_burst_damage=model.percent_burst_coefficient * enemy_health * spirit_resist * spirit_amplifier,
        percent_sustained_damage=model.percent_sustained_coefficient * enemy_health * spirit_resist * spirit_amplifier,
        total_gun_damage=gun_base * (1 + team.amp_all_multiplier + team.gun_amp_multiplier),
        dps=dps,
        time_to_kill=enemy_health / dps if dps > 0 else None,
    )


@dataclass
class PercentEffectDamage:
    ability_name: str
    component_label: str
    mode: str
    percent_value: float
    damage_over_window: float
    damage_per_cast: Optional[float]
    uptime_seconds: float


@dataclass
class HeroPercentEffects:
    hero_id: int
    hero_name: str
    effects: List[PercentEffectDamage]


def describe_percent_effects(
    models: Mapping[int, HeroDamageModel],
    selected_ids: Iterable[int],
    team: TeamModifiers,
    enemy_health: float,
    enemy_spirit_resist: float = 0.0,
) -> List[HeroPercentEffects]:
    """Percent-of-health damage per selected hero, largest first, zero entries dropped."""
    spirit_resist = team.spirit_resist_multiplier(enemy_spirit_resist)
    amplifier = 1 + team.amp_all_multiplier + team.spirit_amp_multiplier
    scale = enemy_health * spirit_resist * amplifier

    result = []
    for hero_id in selected_ids:
        model = models.get(hero_id)
        if model is None:
            continue
        effects = [
            PercentEffectDamage(
                ability_name=effect.ability_name,
                component_label=effect.component_label,
                mode=effect.mode,
                percent_value=effect.percent_value,
                damage_over_window=effect.per_window_coefficient * scale,
                damage_per_cast=effect.percent_value / 100 * scale if effect.mode == "burst" else None,
                uptime_seconds=effect.uptime_seconds,
            )
            for effect in model.percent_effects
        ]
        effects = [effect for effect in effects if effect.damage_over_window != 0]
        effects.sort(key=lambda effect: effect.damage_over_window, reverse=True)
        result.append(HeroPercentEffects(hero_id=model.hero_id, hero_name=model.hero_name, effects=effects))
    return result


# =============================================================================
# ENEMY HEALTH SAMPLING
# =============================================================================

def _round_half_up(values: np.ndarray) -> List[int]:
    return [int(value) for value in np.floor(values + 0.5)]


def create_enemy_health_samples(center: float, count: int = ENEMY_HEALTH_SAMPLE_COUNT) -> List[int]:
    """Enemy health values spread linearly around ``center``."""
    safe_center = max(center, MIN_ENEMY_HEALTH)
    if count <= 1:
        return _round_half_up(np.array([safe_center]))
    low = max(MIN_ENEMY_HEALTH, safe_center * ENEMY_HEALTH_MIN_RATIO)
    high = max(low + ENEMY_HEALTH_MIN_SPAN, safe_center * ENEMY_HEALTH_MAX_RATIO)
    return _round_half_up(np.linspace(low, high, count))
