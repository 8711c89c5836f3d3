"""Deadlock asset vocabulary and derivation constants.

Every game-internal string the derivation engine looks up lives here: stat
ids, property-key aliases, classifier keywords and the per-ability exception
table. The asset API renames things between patches, so these tables are the
first place to look when a hero's numbers stop making sense.
"""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Final, Optional


# =============================================================================
# NUMERIC GUARDS
# =============================================================================
# Values with |x| <= EPSILON are treated as "no data"
EPSILON: Final[float] = 1e-6

# Upgrade multipliers above this magnitude are percents (25 -> x1.25)
PERCENT_MULTIPLIER_THRESHOLD: Final[float] = 10.0

# Hard cap on simulated casts for multi-charge abilities
MAX_CHARGE_SIMULATION_ITERATIONS: Final[int] = 2000

# Used when neither rows nor heroes define a level table
DEFAULT_MAX_LEVEL: Final[int] = 30


# =============================================================================
# HERO STAT IDS
# =============================================================================
SPIRIT_POWER_STAT: Final[str] = "ETechPower"

BULLET_DAMAGE_PER_LEVEL: Final[str] = "MODIFIER_VALUE_BASE_BULLET_DAMAGE_FROM_LEVEL"
HEALTH_PER_LEVEL: Final[str] = "MODIFIER_VALUE_BASE_HEALTH_FROM_LEVEL"
SPIRIT_PER_LEVEL: Final[str] = "MODIFIER_VALUE_TECH_POWER"

# scaling_stats keys
SCALING_BULLET_DAMAGE: Final[str] = "EBulletDamage"
SCALING_ROUNDS_PER_SECOND: Final[str] = "ERoundsPerSecond"
SCALING_HEALTH_REGEN: Final[str] = "EBaseHealthRegen"
SCALING_MOVE_SPEED: Final[str] = "EMaxMoveSpeed"
SCALING_SPRINT_SPEED: Final[str] = "ESprintSpeed"

# Hero whose shotgun pellets do not stack damage
DRIFTER_CLASS_NAME: Final[str] = "hero_drifter"
DRIFTER_PELLET_NOTE: Final[str] = (
    "Drifter's pellets do not stack damage. Calculations use a single pellet."
)

PRIMARY_WEAPON_SLOT: Final[str] = "weapon_primary"
SECONDARY_WEAPON_SLOT: Final[str] = "weapon_secondary"
SIGNATURE_SLOT_PREFIX: Final[str] = "signature"


# =============================================================================
# PURCHASE BONUSES
# =============================================================================
VITALITY_CATEGORY: Final[str] = "vitality"
SPIRIT_CATEGORY: Final[str] = "spirit"

HEALTH_FLAT_BONUS_TYPES: Final[tuple[str, ...]] = (
    "MODIFIER_VALUE_BASE_HEALTH",
    "MODIFIER_VALUE_MAX_HEALTH",
)
HEALTH_PERCENT_BONUS_TYPES: Final[tuple[str, ...]] = (
    "MODIFIER_VALUE_BASE_HEALTH_PERCENT",
    "MODIFIER_VALUE_MAX_HEALTH_PERCENT",
)
REGEN_FLAT_BONUS_TYPES: Final[tuple[str, ...]] = ("MODIFIER_VALUE_BASE_HEALTH_REGEN",)
REGEN_PERCENT_BONUS_TYPES: Final[tuple[str, ...]] = ("MODIFIER_VALUE_BASE_HEALTH_REGEN_PERCENT",)
MOVE_SPEED_FLAT_BONUS_TYPES: Final[tuple[str, ...]] = (
    "MODIFIER_VALUE_MAX_MOVE_SPEED",
    "MODIFIER_VALUE_BASE_MOVE_SPEED",
)
MOVE_SPEED_PERCENT_BONUS_TYPES: Final[tuple[str, ...]] = (
    "MODIFIER_VALUE_MAX_MOVE_SPEED_PERCENT",
    "MODIFIER_VALUE_BASE_MOVE_SPEED_PERCENT",
)
SPRINT_FLAT_BONUS_TYPES: Final[tuple[str, ...]] = (
    "MODIFIER_VALUE_SPRINT_SPEED",
    "MODIFIER_VALUE_BASE_SPRINT_SPEED",
)
SPRINT_PERCENT_BONUS_TYPES: Final[tuple[str, ...]] = (
    "MODIFIER_VALUE_SPRINT_SPEED_PERCENT",
    "MODIFIER_VALUE_BASE_SPRINT_SPEED_PERCENT",
)
SPIRIT_FLAT_BONUS_TYPES: Final[tuple[str, ...]] = ("MODIFIER_VALUE_TECH_POWER",)


# =============================================================================
# ABILITY UPGRADES
# =============================================================================
class UpgradeType(StrEnum):
    """How an upgrade tier changes a property."""
    ADD_TO_BASE = "EAddToBase"
    ADD_TO_SCALE = "EAddToScale"
    MULTIPLY_BASE = "EMultiplyBase"
    MULTIPLY_SCALE = "EMultiplyScale"


# =============================================================================
# ABILITY PROPERTY KEYS
# =============================================================================
COOLDOWN_KEYS: Final[tuple[str, ...]] = ("AbilityCooldown",)
DURATION_KEYS: Final[tuple[str, ...]] = ("AbilityDuration", "Duration")
CHARGE_KEYS: Final[tuple[str, ...]] = ("AbilityCharges", "AbilityMaxCharges")

# Substrings (on the lowercased key) that mark damage-over-time
DPS_KEY_INDICATORS: Final[tuple[str, ...]] = (
    "persecond",
    "per_second",
    "per second",
    "pertick",
    "per_tick",
    "per tick",
    "dot",
    "damageovertime",
    "damage_over_time",
    "damage over time",
    "dps",
)

# A percent property matching these is a damage modifier, not damage
AMP_LIKE_KEY_FRAGMENTS: Final[tuple[str, ...]] = (
    "damageamp",
    "damage_amp",
    "damageamppercent",
    "damagepercent",
    "damage_percent",
    "damageboost",
    "damage_boost",
    "weaponpower",
    "weapon_damage",
    "gun_damage",
    "damagebuff",
    "damage_buff",
)
AMP_LIKE_LABEL_FRAGMENTS: Final[tuple[str, ...]] = (
    "amp",
    "damage buff",
    "damage boost",
)


# =============================================================================
# CROWD CONTROL
# =============================================================================
class CrowdControlType(StrEnum):
    STUN = "stun"
    SILENCE = "silence"
    IMMOBILIZE = "immobilize"
    DISPLACEMENT = "displacement"
    SLOW = "slow"


@dataclass(frozen=True)
class CrowdControlConfig:
    keys: tuple[str, ...]
    type: CrowdControlType
    label: str


CROWD_CONTROL_CONFIG: Final[tuple[CrowdControlConfig, ...]] = (
    CrowdControlConfig(("StunDuration",), CrowdControlType.STUN, "Stun"),
    CrowdControlConfig(("SleepDuration",), CrowdControlType.STUN, "Sleep"),
    CrowdControlConfig(("PetrifyDuration",), CrowdControlType.STUN, "Petrify"),
    CrowdControlConfig(("ImmobilizeDuration",), CrowdControlType.IMMOBILIZE, "Immobilize"),
    CrowdControlConfig(("SilenceDuration",), CrowdControlType.SILENCE, "Silence"),
    CrowdControlConfig(("TossDuration",), CrowdControlType.DISPLACEMENT, "Displacement"),
)

SLOW_PERCENT_KEYS: Final[tuple[str, ...]] = (
    "SlowPercent",
    "EnemySlowPct",
    "MoveSlowPercent",
    "MoveSpeedSlowPct",
    "MovementSlow",
    "FireRateSlow",
)
SLOW_DURATION_KEYS: Final[tuple[str, ...]] = (
    "SlowDuration",
    "DebuffDuration",
    "AuraLingerDuration",
    "ZiplineProtectionSlowDurationOnHit",
    "LingerDuration",
)


# =============================================================================
# MODIFIERS (BUFFS / DEBUFFS / AMPS / SHREDS)
# =============================================================================
class ModifierCategory(StrEnum):
    BUFF = "buff"
    DEBUFF = "debuff"
    AMP = "amp"
    SHRED = "shred"


class ModifierTarget(StrEnum):
    SELF = "self"
    ALLY = "ally"
    ENEMY = "enemy"


class ModifierKey(StrEnum):
    WEAPON_DAMAGE = "weaponDamage"
    SPIRIT_POWER = "spiritPower"
    BULLET_RESIST = "bulletResist"
    SPIRIT_RESIST = "spiritResist"
    DAMAGE_AMP_ALL = "damageAmpAll"
    DAMAGE_AMP_GUN = "damageAmpGun"
    DAMAGE_AMP_SPIRIT = "damageAmpSpirit"
    GUN_SHRED = "gunShred"
    SPIRIT_SHRED = "spiritShred"


@dataclass(frozen=True)
class ModifierConfig:
    key: ModifierKey
    label: str
    type: ModifierCategory
    target: ModifierTarget
    unit: Optional[str] = None
    absolute: bool = False
    keys: tuple[str, ...] = ()
    provided_types: tuple[str, ...] = ()


MODIFIER_CONFIGS: Final[tuple[ModifierConfig, ...]] = (
    ModifierConfig(
        ModifierKey.WEAPON_DAMAGE, "Weapon Damage", ModifierCategory.BUFF, ModifierTarget.SELF,
        unit="%",
        keys=("WeaponPower", "WeaponPowerBuff"),
        provided_types=("MODIFIER_VALUE_WEAPON_POWER",),
    ),
    ModifierConfig(
        ModifierKey.SPIRIT_POWER, "Spirit Power", ModifierCategory.BUFF, ModifierTarget.SELF,
        keys=("TechPower",),
        provided_types=("MODIFIER_VALUE_TECH_POWER",),
    ),
    ModifierConfig(
        ModifierKey.BULLET_RESIST, "Bullet Resist", ModifierCategory.BUFF, ModifierTarget.SELF,
        unit="%",
        keys=("BulletResist",),
    ),
    ModifierConfig(
        ModifierKey.SPIRIT_RESIST, "Spirit Resist", ModifierCategory.BUFF, ModifierTarget.SELF,
        unit="%",
        keys=("TechResist",),
    ),
    ModifierConfig(
        ModifierKey.DAMAGE_AMP_ALL, "Damage Amp (All)", ModifierCategory.AMP, ModifierTarget.ENEMY,
        unit="%",
        absolute=True,
        provided_types=(
            "MODIFIER_VALUE_DAMAGE_PERCENT",
            "MODIFIER_VALUE_DAMAGE_TAKEN_INCREASE_PERCENT",
            "MODIFIER_VALUE_INCOMING_DAMAGE_PERCENTAGE",
        ),
    ),
    ModifierConfig(
        ModifierKey.DAMAGE_AMP_GUN, "Damage Amp (Gun)", ModifierCategory.BUFF, ModifierTarget.SELF,
        unit="%",
        provided_types=(
            "MODIFIER_VALUE_BASE_BULLET_DAMAGE_PERCENT",
            "MODIFIER_VALUE_BONUS_WEAPON_DAMAGE_CLOSE_RANGE_MAX_RANGE",
            "MODIFIER_VALUE_BONUS_WEAPON_DAMAGE_LONG_RANGE_MIN_RANGE",
            "MODIFIER_VALUE_CLOSE_RANGE_BONUS_BASE_DAMAGE_PERCENT",
            "MODIFIER_VALUE_LONG_RANGE_BONUS_BASE_DAMAGE_PERCENT",
            "MODIFIER_VALUE_BULLET_DAMAGE_TAKEN_INCREASE_PERCENT",
        ),
    ),
    ModifierConfig(
        ModifierKey.DAMAGE_AMP_SPIRIT, "Damage Amp (Spirit)", ModifierCategory.AMP, ModifierTarget.ENEMY,
        unit="%",
        provided_types=("MODIFIER_VALUE_TECH_DAMAGE_PERCENT", "MODIFIER_VALUE_TECH_POWER_PERCENT"),
    ),
    ModifierConfig(
        ModifierKey.GUN_SHRED, "Gun Shred", ModifierCategory.SHRED, ModifierTarget.ENEMY,
        unit="%",
        absolute=True,
        keys=("BulletArmorReduction",),
        provided_types=("MODIFIER_VALUE_BULLET_ARMOR_DAMAGE_RESIST_REDUCTION",),
    ),
    ModifierConfig(
        ModifierKey.SPIRIT_SHRED, "Spirit Shred", ModifierCategory.SHRED, ModifierTarget.ENEMY,
        unit="%",
        absolute=True,
        provided_types=("MODIFIER_VALUE_TECH_ARMOR_DAMAGE_RESIST_REDUCTION",),
    ),
)


# =============================================================================
# PER-ABILITY EXCEPTIONS
# =============================================================================
# Keyed by ability class_name. Fragile by nature: an upstream rename silently
# drops an ability back onto the generic heuristics.
@dataclass(frozen=True)
class AbilityOverride:
    """Corrections for abilities the generic damage heuristics misread."""

    damage_keys: tuple[str, ...] = ()
    # property key -> assumed meters for "damage per meter" properties
    per_meter_averages: dict[str, float] = field(default_factory=dict)
    forced_note: Optional[str] = None
    component_notes: dict[str, str] = field(default_factory=dict)


ABILITY_OVERRIDES: Final[dict[str, AbilityOverride]] = {
    "citadel_ability_lash_down_strike": AbilityOverride(
        damage_keys=("StompDamage", "StompDamagePerMeterPrimary"),
        per_meter_averages={"StompDamagePerMeterPrimary": 20},
        forced_note="Ground Strike damage per meter is multiplied by a forced 20 m average height.",
        component_notes={"StompDamagePerMeterPrimary": "20 m average height multiplier applied"},
    ),
    "ability_bebop_stickybomb2": AbilityOverride(damage_keys=("Damage",)),
    "citadel_ability_sticky_bomb": AbilityOverride(damage_keys=("Damage",)),
}

# Lowercased ability display names
IGNORE_PERCENT_DAMAGE_ABILITIES: Final[frozenset[str]] = frozenset({"kinetic pulse"})

# Self-damage utility abilities whose damage numbers are not dealt to enemies
IGNORED_DAMAGE_ABILITY_NAMES: Final[frozenset[str]] = frozenset({"bloodletting", "jump start"})


# =============================================================================
# CALCULATOR / CHARTS
# =============================================================================
MIN_ENEMY_HEALTH: Final[int] = 100
ENEMY_HEALTH_SAMPLE_COUNT: Final[int] = 18
ENEMY_HEALTH_MIN_RATIO: Final[float] = 0.4
ENEMY_HEALTH_MAX_RATIO: Final[float] = 1.6
ENEMY_HEALTH_MIN_SPAN: Final[int] = 150

SPIRIT_CHART_MIN: Final[float] = 0.0
SPIRIT_CHART_MAX: Final[float] = 250.0
SPIRIT_CHART_SAMPLES: Final[int] = 26
