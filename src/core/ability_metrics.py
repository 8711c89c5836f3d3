"""Ability Metric Builder.

Classifies each signature ability's properties into damage components,
cadence, crowd control and modifiers, and flattens the result into one
``HeroAbilityRow`` per (hero, signature slot).
"""

import logging
import re
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Dict, Iterable, List, Optional, Sequence

from src.data.models.hero import Hero
from src.data.models.item import AbilityItem, AnyItem, ItemProperty

from .constants import (
    ABILITY_OVERRIDES,
    AMP_LIKE_KEY_FRAGMENTS,
    AMP_LIKE_LABEL_FRAGMENTS,
    CHARGE_KEYS,
    COOLDOWN_KEYS,
    CROWD_CONTROL_CONFIG,
    DPS_KEY_INDICATORS,
    DURATION_KEYS,
    IGNORE_PERCENT_DAMAGE_ABILITIES,
    MODIFIER_CONFIGS,
    SIGNATURE_SLOT_PREFIX,
    SLOW_DURATION_KEYS,
    SLOW_PERCENT_KEYS,
    SPIRIT_PER_LEVEL,
    AbilityOverride,
    CrowdControlType,
    ModifierCategory,
    ModifierConfig,
    ModifierKey,
    ModifierTarget,
)
from .property_resolver import PropertyResolver, ResolvedProperty
from .value_range import (
    EMPTY_RANGE,
    ValueRange,
    compute_damage_value,
    get_max_range,
    is_approximately_zero,
    parse_numeric_value,
    primary_value,
    prune_zero_range,
    to_value_range,
)


logger = logging.getLogger(__name__)


class DamageCategory(StrEnum):
    BURST = "burst"
    DPS = "dps"


class DamageVariant(StrEnum):
    """Which side of a min/max damage pair to use."""
    MIN = "min"
    MAX = "max"


class AbilityTag(StrEnum):
    BURST = "burst"
    SUSTAINED = "sustained"
    CROWD_CONTROL = "crowd-control"
    BUFF = "buff"
    DEBUFF = "debuff"


# =============================================================================
# RESULT TYPES
# =============================================================================

@dataclass
class DamageTotals:
    """Summed intercept and spirit scaling of one damage variant."""

    intercept_base: float = 0.0
    intercept_max: float = 0.0
    scaling_base: float = 0.0
    scaling_max: float = 0.0

    def add(self, component: "DamageComponentEntry") -> None:
        self.intercept_base += component.damage_base or 0.0
        self.intercept_max += _first_not_none(component.damage_max, component.damage_base, 0.0)
        self.scaling_base += component.scaling_base or 0.0
        self.scaling_max += _first_not_none(component.scaling_max, component.scaling_base, 0.0)


@dataclass
class DamageComponentEntry:
    """One damage-dealing property as shown in the ability table."""

    label: str
    damage_base: Optional[float]
    damage_max: Optional[float]
    scaling_base: Optional[float]
    scaling_max: Optional[float]
    category: DamageCategory
    is_percent: bool = False
    note: Optional[str] = None
    unit: Optional[str] = None


@dataclass
class AbilityDamageComponent:
    """A damage component with its ranges evaluated at base and max spirit."""

    key: str
    label: str
    intercept: ValueRange
    scaling: ValueRange
    value: ValueRange
    is_percent: bool
    note: Optional[str] = None
    unit: Optional[str] = None


@dataclass
class AbilityDamageSummary:
    """All components of one damage category rolled into totals."""

    type: str  # "burst" or "sustained"
    unit: str  # "total" or "perSecond"
    value: ValueRange
    intercept: ValueRange
    scaling: ValueRange
    components: List[AbilityDamageComponent]
    totals: Dict[DamageVariant, DamageTotals]
    per_minute: Optional[ValueRange] = None


@dataclass
class CrowdControlEffect:
    key: str
    label: str
    type: CrowdControlType
    duration: ValueRange
    magnitude: Optional[ValueRange] = None
    magnitude_unit: Optional[str] = None


@dataclass
class SlowSummary:
    magnitude: Optional[ValueRange] = None
    duration: Optional[ValueRange] = None


@dataclass
class ControlSummary:
    """Strongest effect per crowd-control type; absent types stay None."""

    stun: Optional[ValueRange] = None
    silence: Optional[ValueRange] = None
    immobilize: Optional[ValueRange] = None
    displacement: Optional[ValueRange] = None
    slow: Optional[SlowSummary] = None


@dataclass
class ControlMetrics:
    effects: List[CrowdControlEffect] = field(default_factory=list)
    summary: ControlSummary = field(default_factory=ControlSummary)


@dataclass
class ModifierEffect:
    key: ModifierKey
    label: str
    stat: str
    type: ModifierCategory
    target: ModifierTarget
    value: ValueRange
    scaling: ValueRange
    unit: Optional[str] = None
    duration: Optional[ValueRange] = None


@dataclass
class ModifierMetrics:
    effects: List[ModifierEffect] = field(default_factory=list)
    # Sparse: categories without data are absent
    summary: Dict[ModifierKey, ModifierEffect] = field(default_factory=dict)


@dataclass
class CadenceMetrics:
    cooldown: ValueRange = EMPTY_RANGE
    duration: ValueRange = EMPTY_RANGE
    charges: ValueRange = EMPTY_RANGE


@dataclass
class AbilityDamage:
    burst: AbilityDamageSummary
    sustained: AbilityDamageSummary


@dataclass
class AbilityMetrics:
    """Canonical per-ability record."""

    cadence: CadenceMetrics
    damage: AbilityDamage
    control: ControlMetrics
    modifiers: ModifierMetrics


@dataclass
class HeroAbilityRow:
    """One row per (hero, signature ability slot)."""

    hero_id: int
    hero_name: str
    hero_image: Optional[str]
    is_disabled: bool
    ability_slot: str
    ability_class_name: str
    ability_name: str
    ability_type: Optional[str]
    ability_description: Optional[str]

    base_spirit_power: float
    max_spirit_power: float
    spirit_gain: float
    max_level: int

    cooldown_base: Optional[float]
    cooldown_max: Optional[float]
    duration_base: Optional[float]
    duration_max: Optional[float]
    charges_base: Optional[float]
    charges_max: Optional[float]

    burst_damage_base: Optional[float]
    burst_damage_max: Optional[float]
    burst_scaling_base: Optional[float]
    burst_scaling_max: Optional[float]
    burst_dpm_base: Optional[float]
    burst_dpm_max: Optional[float]
    sustained_dps_base: Optional[float]
    sustained_dps_max: Optional[float]
    sustained_scaling_base: Optional[float]
    sustained_scaling_max: Optional[float]
    spirit_scaling_base: Optional[float]
    spirit_scaling_max: Optional[float]

    gun_shred_total: Optional[float]
    spirit_shred_total: Optional[float]
    damage_amp_all: Optional[float]
    damage_amp_gun: Optional[float]
    damage_amp_spirit: Optional[float]

    damage_components: Dict[str, DamageComponentEntry]
    burst_damage_component_order: List[str]
    dps_damage_component_order: List[str]
    assumption_notes: List[str]
    metrics: AbilityMetrics
    tags: List[AbilityTag]

    @property
    def has_burst_components(self) -> bool:
        return bool(self.burst_damage_component_order)

    @property
    def has_dps_components(self) -> bool:
        return bool(self.dps_damage_component_order)


# =============================================================================
# CLASSIFIERS
# =============================================================================

def _first_not_none(*values):
    for value in values:
        if value is not None:
            return value
    return None


def get_damage_category(key: str) -> DamageCategory:
    normalized = key.lower()
    if any(indicator in normalized for indicator in DPS_KEY_INDICATORS):
        return DamageCategory.DPS
    return DamageCategory.BURST


def format_component_label(key: str) -> str:
    """``StompDamage_PerMeter`` -> ``Stomp Damage Per Meter``."""
    label = key.replace("_", " ")
    label = re.sub(r"([a-z0-9])([A-Z])", r"\1 \2", label)
    return re.sub(r"\s+", " ", label).strip()


def strip_html(content: Optional[str]) -> Optional[str]:
    if not content:
        return None
    text = re.sub(r"<[^>]*>", "", content)
    return re.sub(r"\s+", " ", text).strip() or None


def is_damage_property(key: str, prop: Optional[ItemProperty]) -> bool:
    """Name-based damage classifier. Tagged modifier properties never count."""
    if prop is None or prop.provided_property_type:
        return False
    normalized = key.lower()
    if "damage" in normalized:
        return "taken" not in normalized and "reduction" not in normalized
    return "damage" in (prop.css_class or "")


def get_property_unit(prop: Optional[ItemProperty]) -> Optional[str]:
    if prop is None:
        return None
    for candidate in (prop.postfix, prop.postvalue_label):
        if candidate and candidate.strip():
            return candidate.strip()
    return None


def is_percent_property(key: str, prop: Optional[ItemProperty]) -> bool:
    if get_property_unit(prop) == "%":
        return True
    normalized_key = key.lower()
    if "percent" in normalized_key or "pct" in normalized_key:
        return True
    label = (prop.label or "").lower() if prop else ""
    if "%" in label or "percent" in label:
        return True
    css_class = (prop.css_class or "").lower() if prop else ""
    return "percent" in css_class or "pct" in css_class


def is_amp_like_percent(key: str, label: str) -> bool:
    """Percent properties that read as damage modifiers rather than damage.

    The keyword lists are approximate. Properties matching neither the damage
    nor the amp heuristics need a manual entry in ABILITY_OVERRIDES.
    """
    normalized_key = key.lower()
    normalized_label = label.lower()
    return any(fragment in normalized_key for fragment in AMP_LIKE_KEY_FRAGMENTS) or any(
        fragment in normalized_label for fragment in AMP_LIKE_LABEL_FRAGMENTS
    )


def pick_damage_keys(ability: AbilityItem) -> List[str]:
    """Damage-bearing property keys: override table, tooltip keys, then full scan."""
    override = ABILITY_OVERRIDES.get(ability.class_name)
    if override and override.damage_keys:
        return list(override.damage_keys)

    properties = ability.property_bag()
    important = [
        key for key in ability.important_property_keys()
        if is_damage_property(key, properties.get(key))
    ]
    if important:
        return important

    fallback = [key for key, prop in properties.items() if is_damage_property(key, prop)]
    if fallback:
        logger.debug(
            "No tooltip damage keys for %s, using property scan: %s",
            ability.class_name,
            fallback,
        )
    return fallback


# =============================================================================
# DAMAGE
# =============================================================================

def _damage_group(key: str) -> tuple:
    """Canonical group key and min/max/default variant of a damage key."""
    for pattern, variant in (
        (r"MinimumDamage$", "min"),
        (r"MaximumDamage$", "max"),
        (r"MinDamage$", "min"),
        (r"MaxDamage$", "max"),
    ):
        if re.search(pattern, key, flags=re.IGNORECASE):
            return re.sub(pattern, "Damage", key, flags=re.IGNORECASE), variant
    return key, "default"


def build_damage_components(
    ability: AbilityItem,
    resolver: PropertyResolver,
) -> tuple:
    """Resolve damage components of an ability.

    Returns:
        ``(components, assumption_notes)``: components keyed by property key,
        notes in first-seen order.
    """
    override = ABILITY_OVERRIDES.get(ability.class_name) or AbilityOverride()
    ignore_percent = ability.name.strip().lower() in IGNORE_PERCENT_DAMAGE_ABILITIES

    components: Dict[str, DamageComponentEntry] = {}
    notes: Dict[str, None] = {}

    for key in pick_damage_keys(ability):
        if not resolver.has(key):
            continue
        prop = resolver.properties.get(key)
        is_percent = is_percent_property(key, prop)
        if ignore_percent and is_percent:
            continue

        stats = resolver.resolve(key)
        per_meter = override.per_meter_averages.get(key)
        apply_per_meter = per_meter is not None and not is_percent
        if apply_per_meter:
            stats = stats.scaled(per_meter)
            if override.forced_note:
                notes[override.forced_note] = None

        label = format_component_label(key)
        if is_percent and is_amp_like_percent(key, label):
            continue

        note = override.component_notes.get(key)
        if note is None and apply_per_meter:
            note = f"Scaled by {per_meter:g} m average height"

        components[key] = DamageComponentEntry(
            label=label,
            damage_base=stats.base,
            damage_max=_first_not_none(stats.base_max, stats.base),
            scaling_base=stats.scale if stats.scale != 0 else None,
            scaling_max=stats.scale_max if stats.scale_max != 0 else None,
            category=get_damage_category(key),
            is_percent=is_percent,
            note=note,
            unit=get_property_unit(prop) or ("%" if is_percent else None),
        )

    return components, list(notes)


def component_order(components: Dict[str, DamageComponentEntry], category: DamageCategory) -> List[str]:
    keys = [key for key, component in components.items() if component.category == category]
    return sorted(keys, key=lambda key: format_component_label(key).lower())


def aggregate_damage_category(
    keys: Sequence[str],
    components: Dict[str, DamageComponentEntry],
    base_spirit: float,
    max_spirit: float,
    summary_type: str,
    unit: str,
) -> AbilityDamageSummary:
    """Roll components into min/max totals.

    True Min/Max pairs go to separate totals; everything else counts in both.
    Percent-of-health components are listed but never summed.
    """
    groups: Dict[str, dict] = {}
    summaries: List[AbilityDamageComponent] = []

    for key in keys:
        component = components.get(key)
        if component is None:
            continue

        damage_max = _first_not_none(component.damage_max, component.damage_base)
        scaling_max = _first_not_none(component.scaling_max, component.scaling_base)
        summaries.append(AbilityDamageComponent(
            key=key,
            label=component.label or format_component_label(key),
            intercept=to_value_range(component.damage_base, damage_max),
            scaling=to_value_range(component.scaling_base, scaling_max),
            value=to_value_range(
                compute_damage_value(component.damage_base, component.scaling_base, base_spirit),
                compute_damage_value(damage_max, scaling_max, max_spirit),
            ),
            is_percent=component.is_percent,
            note=component.note,
            unit=component.unit,
        ))

        if component.is_percent:
            continue

        group_key, variant = _damage_group(key)
        entry = groups.setdefault(group_key, {"min": None, "max": None, "defaults": []})
        if variant == "default":
            entry["defaults"].append(component)
        else:
            entry[variant] = component

    min_totals = DamageTotals()
    max_totals = DamageTotals()
    totals = {DamageVariant.MIN: min_totals, DamageVariant.MAX: max_totals}

    if not summaries:
        return AbilityDamageSummary(
            type=summary_type,
            unit=unit,
            value=EMPTY_RANGE,
            intercept=EMPTY_RANGE,
            scaling=EMPTY_RANGE,
            components=[],
            totals=totals,
        )

    for entry in groups.values():
        if entry["min"] is not None and entry["max"] is not None:
            min_totals.add(entry["min"])
            max_totals.add(entry["max"])
            continue
        candidates = entry["defaults"] + [c for c in (entry["min"], entry["max"]) if c is not None]
        for component in candidates:
            min_totals.add(component)
            max_totals.add(component)

    return AbilityDamageSummary(
        type=summary_type,
        unit=unit,
        value=to_value_range(
            compute_damage_value(min_totals.intercept_base, min_totals.scaling_base, base_spirit),
            compute_damage_value(max_totals.intercept_max, max_totals.scaling_max, max_spirit),
        ),
        intercept=to_value_range(min_totals.intercept_base, max_totals.intercept_max),
        scaling=to_value_range(
            None if is_approximately_zero(min_totals.scaling_base) else min_totals.scaling_base,
            None if is_approximately_zero(max_totals.scaling_max) else max_totals.scaling_max,
        ),
        components=summaries,
        totals=totals,
    )


def burst_per_minute(damage: Optional[float], charges: float, cooldown: Optional[float]) -> Optional[float]:
    if damage is None or cooldown is None or cooldown <= 0:
        return None
    return damage * charges * 60 / cooldown


# =============================================================================
# CROWD CONTROL
# =============================================================================

def _duration_range(stats: ResolvedProperty) -> Optional[ValueRange]:
    return prune_zero_range(to_value_range(stats.base, _first_not_none(stats.base_max, stats.base)))


def build_control_metrics(resolver: PropertyResolver) -> ControlMetrics:
    effects: List[CrowdControlEffect] = []

    for config in CROWD_CONTROL_CONFIG:
        duration = _duration_range(resolver.resolve_first(config.keys))
        if duration is None:
            continue
        effects.append(CrowdControlEffect(
            key=config.keys[0],
            label=config.label,
            type=config.type,
            duration=duration,
        ))

    slow_magnitude = _duration_range(resolver.resolve_first(SLOW_PERCENT_KEYS))
    slow_duration = _duration_range(resolver.resolve_first(SLOW_DURATION_KEYS))
    if slow_magnitude is not None:
        effects.append(CrowdControlEffect(
            key="Slow",
            label="Slow",
            type=CrowdControlType.SLOW,
            duration=slow_duration or EMPTY_RANGE,
            magnitude=slow_magnitude,
            magnitude_unit="%",
        ))

    def strongest(effect_type: CrowdControlType) -> Optional[ValueRange]:
        return get_max_range(effect.duration for effect in effects if effect.type == effect_type)

    summary = ControlSummary(
        stun=strongest(CrowdControlType.STUN),
        silence=strongest(CrowdControlType.SILENCE),
        immobilize=strongest(CrowdControlType.IMMOBILIZE),
        displacement=strongest(CrowdControlType.DISPLACEMENT),
    )
    slows = [effect for effect in effects if effect.type == CrowdControlType.SLOW]
    slow_magnitude_summary = get_max_range(effect.magnitude for effect in slows)
    slow_duration_summary = get_max_range(effect.duration for effect in slows)
    if slow_magnitude_summary or slow_duration_summary:
        summary.slow = SlowSummary(magnitude=slow_magnitude_summary, duration=slow_duration_summary)

    return ControlMetrics(effects=effects, summary=summary)


# =============================================================================
# MODIFIERS
# =============================================================================

class ModifierAccumulator:
    """Running sums of every property feeding one modifier category."""

    def __init__(self, absolute: bool = False):
        self.absolute = absolute
        self.base = 0.0
        self.max = 0.0
        self.scale_base = 0.0
        self.scale_max = 0.0
        self.has_base = False
        self.has_max = False
        self.has_scale_base = False
        self.has_scale_max = False

    def _magnitude(self, value: float) -> float:
        return abs(value) if self.absolute else value

    def add(self, stats: ResolvedProperty) -> None:
        if stats.base is not None:
            self.base += self._magnitude(stats.base)
            self.has_base = True

        max_value = _first_not_none(stats.base_max, stats.base)
        if max_value is not None:
            self.max += self._magnitude(max_value)
            self.has_max = True

        if stats.scale != 0:
            self.scale_base += stats.scale
            self.has_scale_base = True
        if stats.scale_max != 0:
            self.scale_max += stats.scale_max
            self.has_scale_max = True

    def finalize(self, config: ModifierConfig) -> Optional[ModifierEffect]:
        value = prune_zero_range(to_value_range(
            self.base if self.has_base else None,
            self.max if self.has_max else None,
        ))
        scaling = prune_zero_range(to_value_range(
            self.scale_base if self.has_scale_base else None,
            self.scale_max if self.has_scale_max else None,
        ))
        if value is None and scaling is None:
            return None
        return ModifierEffect(
            key=config.key,
            label=config.label,
            stat=config.label,
            type=config.type,
            target=config.target,
            value=value or EMPTY_RANGE,
            scaling=scaling or EMPTY_RANGE,
            unit=config.unit,
        )


def _modifier_keys(config: ModifierConfig, resolver: PropertyResolver) -> List[str]:
    keys = {key: None for key in config.keys if resolver.has(key)}
    if config.provided_types:
        for key, prop in resolver.properties.items():
            if prop.provided_property_type in config.provided_types:
                keys[key] = None
    return list(keys)


def build_modifier_metrics(resolver: PropertyResolver) -> ModifierMetrics:
    metrics = ModifierMetrics()

    for config in MODIFIER_CONFIGS:
        accumulator = None
        for key in _modifier_keys(config, resolver):
            stats = resolver.resolve(key)
            if stats.is_empty:
                continue
            if accumulator is None:
                accumulator = ModifierAccumulator(absolute=config.absolute)
            accumulator.add(stats)
        if accumulator is None:
            continue
        effect = accumulator.finalize(config)
        if effect is not None:
            metrics.effects.append(effect)
            metrics.summary[config.key] = effect

    metrics.effects.sort(key=lambda effect: effect.label.lower())
    return metrics


# =============================================================================
# ROWS
# =============================================================================

def build_ability_tags(
    burst_order: Sequence[str],
    dps_order: Sequence[str],
    control: ControlMetrics,
    modifiers: ModifierMetrics,
) -> List[AbilityTag]:
    tags: List[AbilityTag] = []
    if burst_order:
        tags.append(AbilityTag.BURST)
    if dps_order:
        tags.append(AbilityTag.SUSTAINED)
    if control.effects:
        tags.append(AbilityTag.CROWD_CONTROL)
    if any(effect.type == ModifierCategory.BUFF for effect in modifiers.effects):
        tags.append(AbilityTag.BUFF)
    if any(effect.type != ModifierCategory.BUFF for effect in modifiers.effects):
        tags.append(AbilityTag.DEBUFF)
    return tags


def _nonzero(value: Optional[float]) -> Optional[float]:
    return None if is_approximately_zero(value) else value


def build_ability_row(
    hero: Hero,
    slot: str,
    ability: AbilityItem,
    base_spirit: float,
    spirit_gain: float,
    max_level: int,
) -> HeroAbilityRow:
    """Derive the full row for one hero signature ability."""
    max_spirit = base_spirit + spirit_gain * max(max_level - 1, 0)
    resolver = PropertyResolver.for_ability(ability)

    components, notes = build_damage_components(ability, resolver)
    burst_order = component_order(components, DamageCategory.BURST)
    dps_order = component_order(components, DamageCategory.DPS)

    charges = resolver.resolve_first(CHARGE_KEYS)
    charges_max = _first_not_none(charges.base_max, charges.base)
    charges_base_norm = max(charges.base, 1) if charges.base is not None else 1
    charges_max_norm = max(charges_max, 1) if charges_max is not None else charges_base_norm

    cooldown = resolver.resolve_first(COOLDOWN_KEYS)
    cooldown_max = _first_not_none(cooldown.base_max, cooldown.base)
    duration = resolver.resolve_first(DURATION_KEYS)
    duration_max = _first_not_none(duration.base_max, duration.base)

    burst = aggregate_damage_category(burst_order, components, base_spirit, max_spirit, "burst", "total")
    sustained = aggregate_damage_category(dps_order, components, base_spirit, max_spirit, "sustained", "perSecond")

    burst_dpm_base = burst_per_minute(burst.value.base, charges_base_norm, cooldown.base)
    burst_dpm_max = burst_per_minute(burst.value.max, charges_max_norm, cooldown_max)
    burst.per_minute = to_value_range(burst_dpm_base, burst_dpm_max)

    control = build_control_metrics(resolver)
    modifiers = build_modifier_metrics(resolver)

    metrics = AbilityMetrics(
        cadence=CadenceMetrics(
            cooldown=to_value_range(cooldown.base, cooldown_max),
            duration=to_value_range(duration.base, duration_max),
            charges=to_value_range(charges.base, charges_max),
        ),
        damage=AbilityDamage(burst=burst, sustained=sustained),
        control=control,
        modifiers=modifiers,
    )

    return HeroAbilityRow(
        hero_id=hero.id,
        hero_name=hero.name,
        hero_image=hero.image,
        is_disabled=hero.is_disabled,
        ability_slot=slot,
        ability_class_name=ability.class_name,
        ability_name=ability.name,
        ability_type=ability.ability_type,
        ability_description=strip_html(ability.description_text),
        base_spirit_power=base_spirit,
        max_spirit_power=max_spirit,
        spirit_gain=spirit_gain,
        max_level=max_level,
        cooldown_base=cooldown.base,
        cooldown_max=cooldown_max,
        duration_base=duration.base,
        duration_max=duration_max,
        charges_base=charges.base,
        charges_max=charges_max,
        burst_damage_base=burst.value.base,
        burst_damage_max=burst.value.max,
        burst_scaling_base=_nonzero(burst.scaling.base),
        burst_scaling_max=_nonzero(burst.scaling.max),
        burst_dpm_base=burst_dpm_base,
        burst_dpm_max=burst_dpm_max,
        sustained_dps_base=sustained.value.base,
        sustained_dps_max=sustained.value.max,
        sustained_scaling_base=_nonzero(sustained.scaling.base),
        sustained_scaling_max=_nonzero(sustained.scaling.max),
        spirit_scaling_base=_nonzero((burst.scaling.base or 0.0) + (sustained.scaling.base or 0.0)),
        spirit_scaling_max=_nonzero((burst.scaling.max or 0.0) + (sustained.scaling.max or 0.0)),
        gun_shred_total=primary_value(_summary_value(modifiers, ModifierKey.GUN_SHRED)),
        spirit_shred_total=primary_value(_summary_value(modifiers, ModifierKey.SPIRIT_SHRED)),
        damage_amp_all=primary_value(_summary_value(modifiers, ModifierKey.DAMAGE_AMP_ALL)),
        damage_amp_gun=primary_value(_summary_value(modifiers, ModifierKey.DAMAGE_AMP_GUN)),
        damage_amp_spirit=primary_value(_summary_value(modifiers, ModifierKey.DAMAGE_AMP_SPIRIT)),
        damage_components=components,
        burst_damage_component_order=burst_order,
        dps_damage_component_order=dps_order,
        assumption_notes=notes,
        metrics=metrics,
        tags=build_ability_tags(burst_order, dps_order, control, modifiers),
    )


def _summary_value(modifiers: ModifierMetrics, key: ModifierKey) -> Optional[ValueRange]:
    effect = modifiers.summary.get(key)
    return effect.value if effect else None


def hero_spirit_profile(hero: Hero) -> tuple:
    """``(base_spirit, spirit_gain, max_level)`` of a hero."""
    base_spirit = parse_numeric_value(hero.starting_stat("spirit_power")) or 0.0
    spirit_gain = hero.level_up_gain(SPIRIT_PER_LEVEL) or 0.0
    return base_spirit, spirit_gain, hero.max_level


def build_hero_ability_rows(heroes: Iterable[Hero], items: Iterable[AnyItem]) -> List[HeroAbilityRow]:
    """Build one row per (hero, signature slot).

    Slots whose item is missing or is not an ability are dropped.

    Returns:
        Rows sorted by hero name, then ability name.
    """
    item_by_class = {item.class_name: item for item in items}
    rows: List[HeroAbilityRow] = []

    for hero in heroes:
        base_spirit, spirit_gain, max_level = hero_spirit_profile(hero)
        for slot, class_name in hero.slot_items().items():
            if not slot.startswith(SIGNATURE_SLOT_PREFIX):
                continue
            ability = item_by_class.get(class_name)
            if not isinstance(ability, AbilityItem):
                logger.debug("Dropping %s/%s: %s is not an ability item", hero.name, slot, class_name)
                continue
            rows.append(build_ability_row(hero, slot, ability, base_spirit, spirit_gain, max_level))

    rows.sort(key=lambda row: (row.hero_name.lower(), row.ability_name.lower()))
    return rows
