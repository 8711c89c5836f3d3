# Core derivation modules
from .value_range import (
    ValueRange,
    EMPTY_RANGE,
    parse_numeric_value,
    to_value_range,
    is_approximately_zero,
    prune_zero_range,
    get_max_range,
    compute_damage_value,
)
from .property_resolver import PropertyResolver, ResolvedProperty, resolve_property
from .ability_metrics import (
    AbilityMetrics,
    AbilityTag,
    DamageVariant,
    HeroAbilityRow,
    build_hero_ability_rows,
)
from .hero_growth import (
    HeroGrowthRow,
    HeroGrowthProfile,
    build_hero_growth_rows,
    build_growth_profiles,
)
from .damage_calculator import (
    AbilityUsage,
    HeroProfile,
    HeroDamageModel,
    HeroDamageSummary,
    TeamModifiers,
    compute_ability_usage,
    build_hero_profiles,
    build_hero_damage_model,
    build_hero_damage_models,
    compose_team_modifiers,
    evaluate_hero_damage,
    describe_percent_effects,
    create_enemy_health_samples,
    spirit_slider_max,
)
from .chart_series import (
    ChartSeries,
    LevelBand,
    growth_series,
    ability_series,
    time_to_kill_series,
)

__all__ = [
    # Value ranges
    "ValueRange",
    "EMPTY_RANGE",
    "parse_numeric_value",
    "to_value_range",
    "is_approximately_zero",
    "prune_zero_range",
    "get_max_range",
    "compute_damage_value",
    # Property resolver
    "PropertyResolver",
    "ResolvedProperty",
    "resolve_property",
    # Abilities
    "AbilityMetrics",
    "AbilityTag",
    "DamageVariant",
    "HeroAbilityRow",
    "build_hero_ability_rows",
    # Growth
    "HeroGrowthRow",
    "HeroGrowthProfile",
    "build_hero_growth_rows",
    "build_growth_profiles",
    # Calculator
    "AbilityUsage",
    "HeroProfile",
    "HeroDamageModel",
    "HeroDamageSummary",
    "TeamModifiers",
    "compute_ability_usage",
    "build_hero_profiles",
    "build_hero_damage_model",
    "build_hero_damage_models",
    "compose_team_modifiers",
    "evaluate_hero_damage",
    "describe_percent_effects",
    "create_enemy_health_samples",
    "spirit_slider_max",
    # Charts
    "ChartSeries",
    "LevelBand",
    "growth_series",
    "ability_series",
    "time_to_kill_series",
]
