"""Chart-ready series built from the derivation rows.

Three families:
    growth      metric by hero level, one series per hero
    abilities   metric by spirit power, one series per ability, band and variant
    time-to-kill  seconds to kill by enemy health, one series per hero
"""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence

import numpy as np

from .ability_metrics import AbilityDamageSummary, AbilityTag, DamageTotals, DamageVariant, HeroAbilityRow
from .constants import EPSILON, SPIRIT_CHART_MAX, SPIRIT_CHART_MIN, SPIRIT_CHART_SAMPLES
from .damage_calculator import HeroDamageModel, TeamModifiers, evaluate_hero_damage
from .hero_growth import HeroGrowthProfile
from .value_range import ValueRange, compute_damage_value


@dataclass
class ChartPoint:
    x: float
    y: float


@dataclass
class ChartSeries:
    id: str
    label: str
    data: List[ChartPoint] = field(default_factory=list)


class LevelBand(StrEnum):
    """Which end of the upgrade path an ability chart shows."""
    BASE = "lv0"
    MAX = "max"


TAG_LABELS: Dict[AbilityTag, str] = {
    AbilityTag.BURST: "Burst",
    AbilityTag.SUSTAINED: "DPS",
    AbilityTag.CROWD_CONTROL: "CC",
    AbilityTag.BUFF: "Buff",
    AbilityTag.DEBUFF: "Debuff",
}


# =============================================================================
# GROWTH BY LEVEL
# =============================================================================

@dataclass(frozen=True)
class GrowthMetric:
    id: str
    label: str
    compute: Callable[[HeroGrowthProfile, int], Optional[float]]


GROWTH_METRICS: Dict[str, GrowthMetric] = {
    metric.id: metric
    for metric in (
        GrowthMetric("gunDpsBase", "Gun DPS (Base Spin)", lambda hero, level: hero.dps_at(level)),
        GrowthMetric("gunDpsMaxSpin", "Gun DPS (Max Spin)", lambda hero, level: hero.dps_at(level, max_spin=True)),
        GrowthMetric(
            "gunDpsMaxSpinSpirit",
            "Gun DPS (Full Spirit + Max Spin)",
            lambda hero, level: hero.dps_with_spirit_at(level, max_spin=True),
        ),
        GrowthMetric("gunDamage", "Gun Damage (per Shot)", lambda hero, level: hero.bullet_damage_at(level)),
        GrowthMetric("hp", "Max Health", lambda hero, level: hero.hp_at(level)),
        GrowthMetric("spirit", "Spirit", lambda hero, level: hero.spirit_at(level)),
    )
}


def growth_series(
    profiles: Sequence[HeroGrowthProfile],
    metric_id: str,
    hero_ids: Optional[Iterable[int]] = None,
) -> List[ChartSeries]:
    """Metric by level for the selected heroes (all heroes when ``hero_ids`` is None).

    Raises:
        ValueError: Unknown metric id.
    """
    metric = GROWTH_METRICS.get(metric_id)
    if metric is None:
        raise ValueError(f"Unknown growth metric: {metric_id}")

    by_id = {profile.hero_id: profile for profile in profiles}
    selected = list(hero_ids) if hero_ids is not None else list(by_id)

    result = []
    for hero_id in selected:
        profile = by_id.get(hero_id)
        if profile is None:
            continue
        points = []
        for level in profile.levels():
            value = metric.compute(profile, level)
            if value is not None:
                points.append(ChartPoint(x=level, y=value))
        if points:
            result.append(ChartSeries(id=str(profile.hero_id), label=profile.hero_name, data=points))
    return result


# =============================================================================
# ABILITIES BY SPIRIT
# =============================================================================

def create_spirit_samples(low: float, high: float, steps: int = 20) -> List[float]:
    if high <= low:
        return [low, high]
    return [float(value) for value in np.linspace(low, high, max(2, steps))]


def ability_key(row: HeroAbilityRow) -> str:
    return f"{row.hero_id}-{row.ability_slot}"


def _band_value(value_range: Optional[ValueRange], band: LevelBand) -> Optional[float]:
    if value_range is None:
        return None
    return value_range.base if band == LevelBand.BASE else value_range.max


def _totals_at(totals: DamageTotals, spirit: float, band: LevelBand) -> float:
    if band == LevelBand.BASE:
        return totals.intercept_base + totals.scaling_base * spirit
    return totals.intercept_max + totals.scaling_max * spirit


def _per_minute_multiplier(row: HeroAbilityRow, band: LevelBand) -> Optional[float]:
    cadence = row.metrics.cadence
    charges = _band_value(cadence.charges, band)
    cooldown = _band_value(cadence.cooldown, band)
    if not cooldown or cooldown <= 0:
        return None
    return max(charges if charges is not None else 1, 1) * 60 / cooldown


def _summary_at(summary: AbilityDamageSummary, spirit: float, band: LevelBand) -> Optional[float]:
    return compute_damage_value(_band_value(summary.intercept, band), _band_value(summary.scaling, band), spirit)


def _burst_dpm_at(row: HeroAbilityRow, spirit: float, band: LevelBand) -> Optional[float]:
    damage = _summary_at(row.metrics.damage.burst, spirit, band)
    multiplier = _per_minute_multiplier(row, band)
    if damage is None or multiplier is None:
        return None
    return damage * multiplier


@dataclass(frozen=True)
class AbilityMetric:
    id: str
    label: str
    description: str
    base_value: Callable[[HeroAbilityRow], Optional[float]]
    max_value: Callable[[HeroAbilityRow], Optional[float]]
    # None: the value does not depend on spirit and is drawn flat
    compute_at_spirit: Optional[Callable[[HeroAbilityRow, float, LevelBand], Optional[float]]] = None
    # Damage category split into min/max variants when they differ
    damage_summary: Optional[Callable[[HeroAbilityRow], AbilityDamageSummary]] = None
    per_minute: bool = False


def _burst(row: HeroAbilityRow) -> AbilityDamageSummary:
    return row.metrics.damage.burst


def _sustained(row: HeroAbilityRow) -> AbilityDamageSummary:
    return row.metrics.damage.sustained


def _stun(row: HeroAbilityRow) -> Optional[ValueRange]:
    return row.metrics.control.summary.stun


ABILITY_METRICS: Dict[str, AbilityMetric] = {
    metric.id: metric
    for metric in (
        AbilityMetric(
            "burstDamage",
            "Burst Damage per Cast",
            "Total ability burst damage using current spirit and charges",
            base_value=lambda row: _burst(row).value.base,
            max_value=lambda row: _burst(row).value.max,
            compute_at_spirit=lambda row, spirit, band: _summary_at(_burst(row), spirit, band),
            damage_summary=_burst,
        ),
        AbilityMetric(
            "burstDpm",
            "Burst Damage per Minute",
            "Damage output per minute assuming the ability is used on cooldown",
            base_value=lambda row: _band_value(_burst(row).per_minute, LevelBand.BASE),
            max_value=lambda row: _band_value(_burst(row).per_minute, LevelBand.MAX),
            compute_at_spirit=_burst_dpm_at,
            damage_summary=_burst,
            per_minute=True,
        ),
        AbilityMetric(
            "burstScaling",
            "Burst Scaling per Spirit",
            "Aggregate burst scaling applied to the ability per point of spirit",
            base_value=lambda row: _burst(row).scaling.base,
            max_value=lambda row: _burst(row).scaling.max,
            compute_at_spirit=lambda row, spirit, band: _band_value(_burst(row).scaling, band),
        ),
        AbilityMetric(
            "sustainedDps",
            "Sustained Damage per Second",
            "Damage per second from sustained components at the sampled spirit value",
            base_value=lambda row: _sustained(row).value.base,
            max_value=lambda row: _sustained(row).value.max,
            compute_at_spirit=lambda row, spirit, band: _summary_at(_sustained(row), spirit, band),
            damage_summary=_sustained,
        ),
        AbilityMetric(
            "sustainedScaling",
            "Sustained Scaling per Spirit",
            "Per-spirit scaling contributed by sustained damage components",
            base_value=lambda row: _sustained(row).scaling.base,
            max_value=lambda row: _sustained(row).scaling.max,
            compute_at_spirit=lambda row, spirit, band: _band_value(_sustained(row).scaling, band),
        ),
        AbilityMetric(
            "stunDuration",
            "Stun Duration",
            "Maximum stun duration applied by the ability",
            base_value=lambda row: _band_value(_stun(row), LevelBand.BASE),
            max_value=lambda row: _band_value(_stun(row), LevelBand.MAX),
        ),
    )
}


def available_ability_metrics(rows: Sequence[HeroAbilityRow]) -> List[AbilityMetric]:
    """Metrics that at least one ability has data for."""
    return [
        metric for metric in ABILITY_METRICS.values()
        if any(metric.base_value(row) is not None or metric.max_value(row) is not None for row in rows)
    ]


def _totals_equal(a: DamageTotals, b: DamageTotals) -> bool:
    return (
        abs(a.intercept_base - b.intercept_base) <= EPSILON
        and abs(a.intercept_max - b.intercept_max) <= EPSILON
        and abs(a.scaling_base - b.scaling_base) <= EPSILON
        and abs(a.scaling_max - b.scaling_max) <= EPSILON
    )


def damage_variants(summary: AbilityDamageSummary) -> List[tuple]:
    """``(key, label, totals)`` per variant: one ``total`` or separate min/max."""
    if summary.value.is_empty:
        return []
    low = summary.totals[DamageVariant.MIN]
    high = summary.totals[DamageVariant.MAX]
    if _totals_equal(low, high):
        return [("total", "", low)]
    return [("min", "Min", low), ("max", "Max", high)]


def _category_label(row: HeroAbilityRow) -> str:
    return " · ".join(TAG_LABELS[tag] for tag in AbilityTag if tag in row.tags)


def _series_label(row: HeroAbilityRow, band: LevelBand, variant_label: str = "") -> str:
    parts = ["Lv0" if band == LevelBand.BASE else "Max"]
    category = _category_label(row)
    if category:
        parts.append(category)
    if variant_label:
        parts.append(variant_label)
    return f"{row.hero_name} - {row.ability_name} ({' · '.join(parts)})"


def ability_series(
    rows: Sequence[HeroAbilityRow],
    metric_id: str,
    bands: Sequence[LevelBand] = (LevelBand.BASE, LevelBand.MAX),
    ability_keys: Optional[Iterable[str]] = None,
    spirit_min: float = SPIRIT_CHART_MIN,
    spirit_max: float = SPIRIT_CHART_MAX,
    samples: int = SPIRIT_CHART_SAMPLES,
) -> List[ChartSeries]:
    """Metric by spirit for the selected abilities (keys are ``heroId-slot``).

    Raises:
        ValueError: Unknown metric id.
    """
    metric = ABILITY_METRICS.get(metric_id)
    if metric is None:
        raise ValueError(f"Unknown ability metric: {metric_id}")

    by_key = {ability_key(row): row for row in rows}
    selected = list(ability_keys) if ability_keys is not None else list(by_key)
    spirits = create_spirit_samples(spirit_min, spirit_max, samples)

    result: List[ChartSeries] = []
    for key in selected:
        row = by_key.get(key)
        if row is None:
            continue

        variants = damage_variants(metric.damage_summary(row)) if metric.damage_summary else []
        if variants:
            for variant_key, variant_label, totals in variants:
                for band in bands:
                    multiplier = _per_minute_multiplier(row, band) if metric.per_minute else 1.0
                    if multiplier is None:
                        continue
                    points = [ChartPoint(x=spirit, y=_totals_at(totals, spirit, band) * multiplier) for spirit in spirits]
                    result.append(ChartSeries(
                        id=f"{key}-{variant_key}-{band.value}",
                        label=_series_label(row, band, variant_label),
                        data=points,
                    ))
            continue

        for band in bands:
            reference = metric.base_value(row) if band == LevelBand.BASE else metric.max_value(row)
            if reference is None:
                continue
            if metric.compute_at_spirit is None:
                points = [ChartPoint(x=spirit_min, y=reference), ChartPoint(x=spirit_max, y=reference)]
            else:
                points = []
                for spirit in spirits:
                    value = metric.compute_at_spirit(row, spirit, band)
                    if value is not None:
                        points.append(ChartPoint(x=spirit, y=value))
            if points:
                result.append(ChartSeries(
                    id=f"{key}-{band.value}",
                    label=_series_label(row, band),
                    data=points,
                ))
    return result


# =============================================================================
# TIME TO KILL BY ENEMY HEALTH
# =============================================================================

def time_to_kill_series(
    models: Mapping[int, HeroDamageModel],
    selected_ids: Iterable[int],
    team: TeamModifiers,
    health_samples: Sequence[float],
    enemy_gun_resist: float = 0.0,
    enemy_spirit_resist: float = 0.0,
    combat_window: float = 10.0,
) -> List[ChartSeries]:
    """Seconds to kill per enemy health sample. Zero-DPS points and empty series are dropped."""
    result = []
    for hero_id in selected_ids:
        model = models.get(hero_id)
        if model is None:
            continue
        points = []
        for health in health_samples:
            summary = evaluate_hero_damage(
                model, team, health, enemy_gun_resist, enemy_spirit_resist, combat_window
            )
            if summary.time_to_kill is not None:
                points.append(ChartPoint(x=health, y=summary.time_to_kill))
        if points:
            result.append(ChartSeries(id=str(model.hero_id), label=model.hero_name, data=points))
    return result
