"""
Damage calculator service.
"""

from dataclasses import asdict
from typing import List

from src.core.chart_series import time_to_kill_series
from src.core.damage_calculator import (
    build_hero_damage_models,
    build_hero_profiles,
    compose_team_modifiers,
    create_enemy_health_samples,
    describe_percent_effects,
    evaluate_hero_damage,
    global_max_level,
    spirit_slider_max,
)

from ..schemas.calculator import CalculatorRequest, CalculatorResponse
from .roster_service import RosterService


class CalculatorService:
    """Team damage and time-to-kill against a configurable enemy."""

    def __init__(self, roster: RosterService):
        self.roster = roster

    def _selected_ids(self, request: CalculatorRequest, known_ids: List[int]) -> List[int]:
        known = set(known_ids)
        unknown = [hero_id for hero_id in request.selected_hero_ids if hero_id not in known]
        if unknown:
            raise ValueError(f"Unknown hero ids: {', '.join(str(hero_id) for hero_id in unknown)}")
        # Keep request order, drop duplicates
        return list(dict.fromkeys(request.selected_hero_ids))

    def calculate(self, request: CalculatorRequest) -> CalculatorResponse:
        """
        Evaluate every hero's damage model and the selected team against one enemy.

        Args:
            request: Calculator sliders and the selected hero ids.

        Returns:
            Models for all heroes, summaries and time-to-kill for the selection.

        Raises:
            ValueError: A selected hero id is not in the roster.
        """
        growth_rows = self.roster.growth_rows()
        ability_rows = self.roster.ability_rows()
        profiles = build_hero_profiles(growth_rows, ability_rows)
        selected = self._selected_ids(request, [profile.hero_id for profile in profiles])

        models = build_hero_damage_models(
            profiles,
            ability_rows,
            growth_rows,
            level=request.level,
            spirit=request.spirit,
            gun_bonus_percent=request.gun_bonus_percent,
            fire_rate_bonus_percent=request.fire_rate_bonus_percent,
            variant=request.variant,
            combat_window=request.combat_window,
        )
        team = compose_team_modifiers(models, selected)

        summaries = [
            evaluate_hero_damage(
                models[hero_id],
                team,
                request.enemy_health,
                enemy_gun_resist=request.enemy_gun_resist,
                enemy_spirit_resist=request.enemy_spirit_resist,
                combat_window=request.combat_window,
            )
            for hero_id in selected
        ]
        percent_effects = describe_percent_effects(
            models,
            selected,
            team,
            request.enemy_health,
            enemy_spirit_resist=request.enemy_spirit_resist,
        )
        health_samples = create_enemy_health_samples(request.enemy_health, request.health_sample_count)
        ttk = time_to_kill_series(
            models,
            selected,
            team,
            health_samples,
            enemy_gun_resist=request.enemy_gun_resist,
            enemy_spirit_resist=request.enemy_spirit_resist,
            combat_window=request.combat_window,
        )

        return CalculatorResponse(
            max_level=global_max_level(profiles),
            spirit_slider_max=spirit_slider_max(ability_rows),
            team=asdict(team),
            models=[asdict(models[profile.hero_id]) for profile in profiles],
            summaries=[asdict(summary) for summary in summaries],
            percent_effects=[asdict(entry) for entry in percent_effects],
            enemy_health_samples=health_samples,
            time_to_kill=[asdict(series) for series in ttk],
        )
