"""
Chart API schemas.
"""

from pydantic import BaseModel
from typing import List, Optional


class ChartPointSchema(BaseModel):
    """Single chart point."""

    x: float
    y: float


class ChartSeriesSchema(BaseModel):
    """One line of a chart."""

    id: str
    label: str
    data: List[ChartPointSchema]


class MetricInfo(BaseModel):
    """Selectable chart metric."""

    id: str
    label: str
    description: Optional[str] = None


class MetricCatalog(BaseModel):
    """Metrics offered by the chart endpoints."""

    growth: List[MetricInfo]
    abilities: List[MetricInfo]


class ChartResponse(BaseModel):
    """Chart series for one metric."""

    metric: MetricInfo
    series: List[ChartSeriesSchema]
