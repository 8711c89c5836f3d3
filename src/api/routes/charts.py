"""
Chart series API routes.
"""

from fastapi import APIRouter, HTTPException, Depends, Query
from typing import Optional, List

from src.core.chart_series import LevelBand
from src.core.constants import SPIRIT_CHART_MAX, SPIRIT_CHART_MIN, SPIRIT_CHART_SAMPLES

from ..schemas.charts import ChartResponse, MetricCatalog
from ..services.chart_service import ChartService
from ..dependencies import get_chart_service

router = APIRouter()


@router.get("/metrics", response_model=MetricCatalog)
async def get_metrics(service: ChartService = Depends(get_chart_service)):
    """List selectable growth and ability metrics."""
    return service.metric_catalog()


@router.get("/growth", response_model=ChartResponse)
async def get_growth_chart(
    metric: str = "gunDpsBase",
    hero_id: Optional[List[int]] = Query(default=None),
    service: ChartService = Depends(get_chart_service),
):
    """
    Hero growth metric by level.

    One series per hero; all heroes when no ``hero_id`` is given.
    """
    try:
        return service.growth_chart(metric, hero_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/abilities", response_model=ChartResponse)
async def get_ability_chart(
    metric: str = "burstDamage",
    band: List[LevelBand] = Query(default=[LevelBand.BASE, LevelBand.MAX]),
    ability: Optional[List[str]] = Query(default=None),
    spirit_min: float = Query(default=SPIRIT_CHART_MIN, ge=0),
    spirit_max: float = Query(default=SPIRIT_CHART_MAX, ge=0),
    samples: int = Query(default=SPIRIT_CHART_SAMPLES, ge=2, le=200),
    include_disabled: bool = True,
    service: ChartService = Depends(get_chart_service),
):
    """
    Ability metric by spirit power.

    ``ability`` keys are ``{heroId}-{slot}``; all abilities when omitted.
    """
    try:
        return service.ability_chart(
            metric,
            bands=band,
            ability_keys=ability,
            spirit_min=spirit_min,
            spirit_max=spirit_max,
            samples=samples,
            include_disabled=include_disabled,
        )
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
