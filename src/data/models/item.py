"""Item data model for the Deadlock asset API.

Items are a tagged union on ``type``: weapons carry ``weapon_info``,
abilities carry a property bag plus per-upgrade deltas, everything else
(shop upgrades, tech items) is kept as a plain item.
"""

from enum import StrEnum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field


class ItemType(StrEnum):
    """Item classification."""
    WEAPON = "weapon"
    ABILITY = "ability"
    UPGRADE = "upgrade"


class ScaleFunction(BaseModel):
    """How a property scales with a hero stat."""
    class_name: Optional[str] = None
    subclass_name: Optional[str] = None
    specific_stat_scale_type: Optional[str] = None
    stat_scale: Optional[Union[float, str]] = None
    stat_scale_secondary: Optional[Union[float, str]] = None
    scaling_stats: Optional[List[Optional[str]]] = None


class ItemProperty(BaseModel):
    """One named entry of an item's property bag."""
    value: Optional[Union[float, str]] = None
    label: Optional[str] = None
    postfix: Optional[str] = None
    postvalue_label: Optional[str] = None
    css_class: Optional[str] = None
    icon: Optional[str] = None
    disable_value: Optional[Union[float, str]] = None
    provided_property_type: Optional[str] = None
    usage_flags: Optional[List[str]] = None
    negative_attribute: Optional[bool] = None
    scale_function: Optional[ScaleFunction] = None


class PropertyUpgrade(BaseModel):
    """A delta applied to one property by an ability upgrade tier."""
    name: Optional[str] = None
    bonus: Optional[Union[float, str]] = None
    upgrade_type: Optional[str] = None
    scale_stat_filter: Optional[str] = None


class AbilityUpgrade(BaseModel):
    property_upgrades: Optional[List[Optional[PropertyUpgrade]]] = None


class TooltipProperty(BaseModel):
    important_property: Optional[str] = None
    property_name: Optional[str] = None


class TooltipPropertiesBlock(BaseModel):
    properties: Optional[List[TooltipProperty]] = None


class TooltipInfoSection(BaseModel):
    properties_block: Optional[List[TooltipPropertiesBlock]] = None


class TooltipDetails(BaseModel):
    info_sections: Optional[List[TooltipInfoSection]] = None


class WeaponInfo(BaseModel):
    """Gun statistics of a weapon item."""
    bullet_damage: Optional[float] = None
    clip_size: Optional[float] = None
    cycle_time: Optional[float] = None
    reload_duration: Optional[float] = None
    bullets: Optional[float] = None
    max_spin_cycle_time: Optional[float] = None
    burst_shot_count: Optional[float] = None
    intra_burst_cycle_time: Optional[float] = None
    damage_falloff_start_range: Optional[float] = None
    damage_falloff_end_range: Optional[float] = None


class Item(BaseModel):
    """Fields shared by every item variant."""
    id: int
    class_name: str
    name: str = ""
    type: str = Field(default=ItemType.UPGRADE.value)
    image: Optional[str] = None
    image_webp: Optional[str] = None
    hero: Optional[int] = None
    heroes: Optional[List[int]] = None
    properties: Optional[Dict[str, Optional[ItemProperty]]] = None

    @property
    def is_weapon(self) -> bool:
        return self.type == ItemType.WEAPON

    @property
    def is_ability(self) -> bool:
        return self.type == ItemType.ABILITY

    def property_bag(self) -> Dict[str, ItemProperty]:
        """Properties with null entries removed."""
        return {key: prop for key, prop in (self.properties or {}).items() if prop is not None}


class WeaponItem(Item):
    """Weapon item (primary or alt fire)."""
    type: str = ItemType.WEAPON.value
    weapon_info: Optional[WeaponInfo] = None


class AbilityItem(Item):
    """Signature ability item."""
    type: str = ItemType.ABILITY.value
    ability_type: Optional[str] = None
    tooltip_details: Optional[TooltipDetails] = None
    description: Optional[Dict[str, Any]] = None
    upgrades: Optional[List[Optional[AbilityUpgrade]]] = None

    def important_property_keys(self) -> List[str]:
        """Property names highlighted in the tooltip, in first-seen order."""
        keys: Dict[str, None] = {}
        sections = self.tooltip_details.info_sections if self.tooltip_details else None
        for section in sections or []:
            for block in section.properties_block or []:
                for prop in block.properties or []:
                    key = prop.important_property or prop.property_name
                    if key:
                        keys[key] = None
        return list(keys)

    def property_upgrades(self) -> List[PropertyUpgrade]:
        """Every named property delta across all upgrade tiers, in tier order."""
        result = []
        for upgrade in self.upgrades or []:
            if upgrade is None:
                continue
            for entry in upgrade.property_upgrades or []:
                if entry is not None and entry.name:
                    result.append(entry)
        return result

    @property
    def description_text(self) -> Optional[str]:
        if not self.description:
            return None
        desc = self.description.get("desc")
        return desc if isinstance(desc, str) else None


AnyItem = Union[WeaponItem, AbilityItem, Item]


def parse_item(data: Dict[str, Any]) -> AnyItem:
    """Validate a raw item record into its variant model.

    Raises:
        pydantic.ValidationError: When required fields are missing or mistyped.
    """
    item_type = data.get("type")
    if item_type == ItemType.WEAPON:
        return WeaponItem.model_validate(data)
    if item_type == ItemType.ABILITY:
        return AbilityItem.model_validate(data)
    return Item.model_validate(data)
