"""
Hero table API routes.
"""

from fastapi import APIRouter, Depends
from typing import Optional, List, Dict, Any

from src.core.ability_metrics import AbilityTag

from ..services.roster_service import RosterService
from ..dependencies import get_roster_service

router = APIRouter()


@router.get("/growth")
async def get_growth_rows(
    include_disabled: bool = True,
    service: RosterService = Depends(get_roster_service),
) -> List[Dict[str, Any]]:
    """Weapon and vitality growth of every hero, sorted by hero name."""
    return service.growth_table(include_disabled=include_disabled)


@router.get("/abilities")
async def get_ability_rows(
    tag: Optional[AbilityTag] = None,
    include_disabled: bool = True,
    service: RosterService = Depends(get_roster_service),
) -> List[Dict[str, Any]]:
    """
    Signature abilities of every hero.

    Optionally filtered to abilities carrying ``tag``.
    """
    return service.ability_table(tag=tag, include_disabled=include_disabled)
