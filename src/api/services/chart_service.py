"""
Chart series service.
"""

from dataclasses import asdict
from typing import Optional, Sequence

from src.core.chart_series import (
    ABILITY_METRICS,
    GROWTH_METRICS,
    LevelBand,
    ability_key,
    ability_series,
    available_ability_metrics,
    growth_series,
)
from src.core.constants import SPIRIT_CHART_MAX, SPIRIT_CHART_MIN, SPIRIT_CHART_SAMPLES

from ..schemas.charts import ChartResponse, MetricCatalog, MetricInfo
from .roster_service import RosterService


class ChartService:
    """Growth-by-level and ability-by-spirit chart series."""

    def __init__(self, roster: RosterService):
        self.roster = roster

    def metric_catalog(self) -> MetricCatalog:
        """Growth metrics and the ability metrics at least one ability has data for."""
        return MetricCatalog(
            growth=[MetricInfo(id=metric.id, label=metric.label) for metric in GROWTH_METRICS.values()],
            abilities=[
                MetricInfo(id=metric.id, label=metric.label, description=metric.description)
                for metric in available_ability_metrics(self.roster.ability_rows())
            ],
        )

    def growth_chart(self, metric_id: str, hero_ids: Optional[Sequence[int]] = None) -> ChartResponse:
        """
        Metric by level, one series per hero.

        Raises:
            ValueError: Unknown metric or hero id.
        """
        metric = GROWTH_METRICS.get(metric_id)
        if metric is None:
            raise ValueError(f"Unknown growth metric: {metric_id}")

        profiles = self.roster.growth_profiles()
        if hero_ids:
            known = {profile.hero_id for profile in profiles}
            missing = [hero_id for hero_id in hero_ids if hero_id not in known]
            if missing:
                raise ValueError(f"Unknown hero ids: {', '.join(str(hero_id) for hero_id in missing)}")

        series = growth_series(profiles, metric_id, hero_ids or None)
        return ChartResponse(
            metric=MetricInfo(id=metric.id, label=metric.label),
            series=[asdict(entry) for entry in series],
        )

    def ability_chart(
        self,
        metric_id: str,
        bands: Sequence[LevelBand] = (LevelBand.BASE, LevelBand.MAX),
        ability_keys: Optional[Sequence[str]] = None,
        spirit_min: float = SPIRIT_CHART_MIN,
        spirit_max: float = SPIRIT_CHART_MAX,
        samples: int = SPIRIT_CHART_SAMPLES,
        include_disabled: bool = True,
    ) -> ChartResponse:
        """
        Metric by spirit, one series per ability, band and damage variant.

        Raises:
            ValueError: Unknown metric or ability key.
        """
        metric = ABILITY_METRICS.get(metric_id)
        if metric is None:
            raise ValueError(f"Unknown ability metric: {metric_id}")

        rows = self.roster.ability_rows(include_disabled=include_disabled)
        if ability_keys:
            known = {ability_key(row) for row in rows}
            missing = [key for key in ability_keys if key not in known]
            if missing:
                raise ValueError(f"Unknown abilities: {', '.join(missing)}")

        series = ability_series(
            rows,
            metric_id,
            bands=bands,
            ability_keys=ability_keys or None,
            spirit_min=spirit_min,
            spirit_max=spirit_max,
            samples=samples,
        )
        return ChartResponse(
            metric=MetricInfo(id=metric.id, label=metric.label, description=metric.description),
            series=[asdict(entry) for entry in series],
        )
