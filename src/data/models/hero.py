"""Hero data model for the Deadlock asset API."""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field


class HeroStartingStat(BaseModel):
    """A single starting stat as published by the asset API."""
    value: Optional[Union[float, str]] = None
    display_stat_name: Optional[str] = None


class HeroStartingStats(BaseModel):
    """Level 1 stats. Unknown stats are kept as extra fields."""
    max_health: Optional[HeroStartingStat] = None
    weapon_power: Optional[HeroStartingStat] = None
    spirit_power: Optional[HeroStartingStat] = None
    base_health_regen: Optional[HeroStartingStat] = None
    max_move_speed: Optional[HeroStartingStat] = None
    sprint_speed: Optional[HeroStartingStat] = None
    stamina: Optional[HeroStartingStat] = None

    model_config = {"extra": "allow"}


class HeroScalingStat(BaseModel):
    """Spirit (or other stat) scaling for one hero stat."""
    scaling_stat: Optional[str] = None
    scale: Optional[float] = None


class PurchaseBonus(BaseModel):
    """A flat or percent bonus granted by shop category investment."""
    value_type: Optional[str] = None
    value: Optional[Union[float, str]] = None


class HeroDescription(BaseModel):
    role: Optional[str] = None
    playstyle: Optional[str] = None


class HeroImages(BaseModel):
    icon_image_small: Optional[str] = None
    icon_image_small_webp: Optional[str] = None
    icon_hero_card: Optional[str] = None


class Hero(BaseModel):
    """Deadlock hero definition."""
    id: int
    class_name: str = ""
    name: str = Field(..., description="Display name")
    hero_type: Optional[str] = None
    disabled: Optional[bool] = None
    description: Optional[HeroDescription] = None
    images: Optional[HeroImages] = None
    items: Optional[Dict[str, Optional[str]]] = Field(
        default=None, description="Slot name -> item class name"
    )
    starting_stats: Optional[HeroStartingStats] = None
    level_info: Optional[Dict[str, Any]] = None
    standard_level_up_upgrades: Optional[Dict[str, Optional[float]]] = None
    scaling_stats: Optional[Dict[str, Optional[HeroScalingStat]]] = None
    purchase_bonuses: Optional[Dict[str, Optional[List[Optional[PurchaseBonus]]]]] = None

    @property
    def is_disabled(self) -> bool:
        return bool(self.disabled)

    @property
    def image(self) -> Optional[str]:
        if not self.images:
            return None
        return self.images.icon_image_small or self.images.icon_hero_card

    @property
    def max_level(self) -> int:
        """Highest defined level, 1 when the hero has no level table."""
        levels = []
        for key in (self.level_info or {}):
            try:
                levels.append(int(key))
            except (TypeError, ValueError):
                continue
        return max(levels) if levels else 1

    def slot_items(self) -> Dict[str, str]:
        """Item slots with a class name assigned."""
        return {slot: name for slot, name in (self.items or {}).items() if name}

    def starting_stat(self, name: str) -> Any:
        """Raw value of a starting stat, None when absent."""
        if self.starting_stats is None:
            return None
        stat = getattr(self.starting_stats, name, None)
        if stat is None and self.starting_stats.model_extra:
            stat = self.starting_stats.model_extra.get(name)
        if isinstance(stat, dict):
            return stat.get("value")
        return stat.value if stat is not None else None

    def level_up_gain(self, key: str) -> Optional[float]:
        return (self.standard_level_up_upgrades or {}).get(key)

    def scaling_for(self, stat_key: str) -> Optional[HeroScalingStat]:
        return (self.scaling_stats or {}).get(stat_key)

    def purchase_bonus_list(self, category: str) -> List[PurchaseBonus]:
        entries = (self.purchase_bonuses or {}).get(category) or []
        return [entry for entry in entries if entry is not None]
