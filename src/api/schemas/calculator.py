"""
Damage calculator API schemas.
"""

from pydantic import BaseModel, Field
from typing import List, Optional

from src.core.ability_metrics import DamageVariant

from ..config import settings
from .charts import ChartSeriesSchema


class CalculatorRequest(BaseModel):
    """Damage calculator request."""

    level: int = Field(default=1, ge=1, le=100)
    spirit: float = Field(default=settings.DEFAULT_SPIRIT, ge=0)
    gun_bonus_percent: float = Field(default=0, ge=-100, le=1000)
    fire_rate_bonus_percent: float = Field(default=0, ge=-100, le=1000)
    variant: DamageVariant = DamageVariant.MAX
    combat_window: float = Field(default=settings.DEFAULT_COMBAT_WINDOW, ge=1, le=600)
    enemy_health: float = Field(default=settings.DEFAULT_ENEMY_HEALTH, gt=0)
    enemy_gun_resist: float = Field(default=0, ge=-100, le=100)
    enemy_spirit_resist: float = Field(default=0, ge=-100, le=100)
    selected_hero_ids: List[int] = []
    health_sample_count: int = Field(default=18, ge=1, le=100)


class TeamModifiersSchema(BaseModel):
    """Summed amps and shreds of the selected heroes."""

    amp_all_multiplier: float
    gun_amp_multiplier: float
    spirit_amp_multiplier: float
    total_gun_shred_percent: float
    total_spirit_shred_percent: float


class HeroDamageModelSchema(BaseModel):
    """Raw damage of one hero over the combat window."""

    hero_id: int
    hero_name: str
    hero_image: Optional[str] = None
    is_disabled: bool
    level: int
    max_level: int
    effective_spirit: float
    gun_damage_over_window: float
    burst_damage_over_window: float
    sustained_damage_over_window: float
    percent_burst_coefficient: float
    percent_sustained_coefficient: float
    amp_all_percent: float
    amp_gun_percent: float
    amp_spirit_percent: float
    gun_shred_percent: float
    spirit_shred_percent: float


class HeroDamageSummarySchema(BaseModel):
    """Damage of one hero after resists and amps."""

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
    time_to_kill: Optional[float] = None


class PercentEffectSchema(BaseModel):
    """Percent-of-health damage from one ability component."""

    ability_name: str
    component_label: str
    mode: str
    percent_value: float
    damage_over_window: float
    damage_per_cast: Optional[float] = None
    uptime_seconds: float


class HeroPercentEffectsSchema(BaseModel):
    """Percent-of-health effects of one hero."""

    hero_id: int
    hero_name: str
    effects: List[PercentEffectSchema]


class CalculatorResponse(BaseModel):
    """Damage calculator result."""

    max_level: int
    spirit_slider_max: int
    team: TeamModifiersSchema
    models: List[HeroDamageModelSchema]
    summaries: List[HeroDamageSummarySchema]
    percent_effects: List[HeroPercentEffectsSchema]
    enemy_health_samples: List[int]
    time_to_kill: List[ChartSeriesSchema]
