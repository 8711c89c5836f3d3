"""Tests for chart series builders."""

import pytest

from src.core.ability_metrics import build_hero_ability_rows
from src.core.chart_series import (
    ABILITY_METRICS,
    GROWTH_METRICS,
    LevelBand,
    ability_key,
    ability_series,
    available_ability_metrics,
    create_spirit_samples,
    growth_series,
    time_to_kill_series,
)
from src.core.damage_calculator import HeroDamageModel, TeamModifiers
from src.core.hero_growth import build_growth_profiles
from src.data.models import Hero, parse_item


def create_test_hero(hero_id, name, abilities=(), weapon=None, max_level=3) -> Hero:
    items = {f"signature{index + 1}": class_name for index, class_name in enumerate(abilities)}
    if weapon:
        items["weapon_primary"] = weapon
    return Hero.model_validate({
        "id": hero_id,
        "class_name": f"hero_{name.lower()}",
        "name": name,
        "items": items,
        "starting_stats": {"spirit_power": {"value": 0}, "max_health": {"value": 600}},
        "level_info": {str(level): {} for level in range(1, max_level + 1)},
        "standard_level_up_upgrades": {
            "MODIFIER_VALUE_TECH_POWER": 2,
            "MODIFIER_VALUE_BASE_BULLET_DAMAGE_FROM_LEVEL": 2,
            "MODIFIER_VALUE_BASE_HEALTH_FROM_LEVEL": 50,
        },
    })


def create_test_ability(class_name, name, properties, upgrades=()):
    return parse_item({
        "id": abs(hash(class_name)) % 100000,
        "class_name": class_name,
        "name": name,
        "type": "ability",
        "properties": properties,
        "upgrades": [{"property_upgrades": list(tier)} for tier in upgrades],
    })


def spirit_scaled(value, scale):
    return {"value": value, "scale_function": {"specific_stat_scale_type": "ETechPower", "stat_scale": scale}}


class TestGrowthSeries:
    """Tests for metric-by-level series."""

    @pytest.fixture
    def profiles(self):
        weapon = parse_item({
            "id": 1,
            "class_name": "weapon_haze",
            "type": "weapon",
            "weapon_info": {"bullet_damage": 20, "bullets": 1, "cycle_time": 0.5},
        })
        heroes = [
            create_test_hero(1, "Haze", weapon="weapon_haze"),
            create_test_hero(2, "Seven"),
        ]
        return build_growth_profiles(heroes, [weapon])

    def test_gun_dps_by_level(self, profiles):
        series = growth_series(profiles, "gunDpsBase", [1])
        assert len(series) == 1
        assert series[0].id == "1"
        assert series[0].label == "Haze"
        assert [(point.x, point.y) for point in series[0].data] == [(1, 40), (2, 44), (3, 48)]

    def test_null_points_dropped(self, profiles):
        series = growth_series(profiles, "gunDpsBase")
        assert [entry.label for entry in series] == ["Haze"]

    def test_health_for_all_heroes(self, profiles):
        series = growth_series(profiles, "hp")
        assert {entry.label for entry in series} == {"Haze", "Seven"}
        assert series[0].data[-1].y == 700

    def test_spirit_by_level(self, profiles):
        series = growth_series(profiles, "spirit", [2])
        assert [point.y for point in series[0].data] == [0, 2, 4]

    def test_unknown_hero_skipped(self, profiles):
        assert growth_series(profiles, "hp", [404]) == []

    def test_unknown_metric(self, profiles):
        with pytest.raises(ValueError):
            growth_series(profiles, "manaRegen")

    def test_every_metric_registered(self):
        assert set(GROWTH_METRICS) == {
            "gunDpsBase",
            "gunDpsMaxSpin",
            "gunDpsMaxSpinSpirit",
            "gunDamage",
            "hp",
            "spirit",
        }


class TestAbilitySeries:
    """Tests for metric-by-spirit series."""

    @pytest.fixture
    def rows(self):
        items = [
            create_test_ability(
                "ability_nuke",
                "Nuke",
                {"Damage": spirit_scaled(100, 1.0), "AbilityCooldown": {"value": 20}},
                upgrades=[[{"name": "Damage", "bonus": 50}]],
            ),
            create_test_ability(
                "ability_charge",
                "Charge Shot",
                {"MinDamage": {"value": 50}, "MaxDamage": {"value": 100}},
            ),
            create_test_ability("ability_stun", "Stun", {"StunDuration": {"value": 1.5}}),
        ]
        heroes = [create_test_hero(1, "Haze", ["ability_nuke", "ability_charge", "ability_stun"])]
        return build_hero_ability_rows(heroes, items)

    def find(self, rows, name):
        return next(row for row in rows if row.ability_name == name)

    def test_spirit_samples(self):
        assert create_spirit_samples(0, 250, 26)[:3] == [0.0, 10.0, 20.0]
        assert create_spirit_samples(5, 5) == [5, 5]

    def test_burst_damage_bands(self, rows):
        key = ability_key(self.find(rows, "Nuke"))
        series = ability_series(rows, "burstDamage", ability_keys=[key], samples=3)
        assert [entry.id for entry in series] == [f"{key}-total-lv0", f"{key}-total-max"]
        base, top = series
        assert [(point.x, point.y) for point in base.data] == [(0, 100), (125, 225), (250, 350)]
        assert top.data[0].y == 150
        assert base.label == "Haze - Nuke (Lv0 · Burst)"

    def test_min_max_variants_split(self, rows):
        key = ability_key(self.find(rows, "Charge Shot"))
        series = ability_series(rows, "burstDamage", bands=[LevelBand.BASE], ability_keys=[key], samples=2)
        assert [entry.id for entry in series] == [f"{key}-min-lv0", f"{key}-max-lv0"]
        assert series[0].data[0].y == 50
        assert series[1].data[0].y == 100
        assert series[1].label.endswith("(Lv0 · Burst · Max)")

    def test_burst_dpm(self, rows):
        key = ability_key(self.find(rows, "Nuke"))
        series = ability_series(rows, "burstDpm", bands=[LevelBand.BASE], ability_keys=[key], samples=2)
        assert series[0].data[0].y == pytest.approx(100 * 60 / 20)

    def test_burst_dpm_skips_without_cooldown(self, rows):
        key = ability_key(self.find(rows, "Charge Shot"))
        assert ability_series(rows, "burstDpm", ability_keys=[key]) == []

    def test_stun_is_flat(self, rows):
        key = ability_key(self.find(rows, "Stun"))
        series = ability_series(rows, "stunDuration", bands=[LevelBand.MAX], ability_keys=[key])
        assert len(series) == 1
        assert [(point.x, point.y) for point in series[0].data] == [(0, 1.5), (250, 1.5)]

    def test_abilities_without_data_skipped(self, rows):
        series = ability_series(rows, "sustainedDps")
        assert series == []

    def test_unknown_metric(self, rows):
        with pytest.raises(ValueError):
            ability_series(rows, "healing")

    def test_available_metrics(self, rows):
        ids = {metric.id for metric in available_ability_metrics(rows)}
        assert {"burstDamage", "burstScaling", "stunDuration"} <= ids
        assert "sustainedDps" not in ids
        assert ids <= set(ABILITY_METRICS)


class TestTimeToKillSeries:
    """Tests for time-to-kill by enemy health."""

    def create_model(self, hero_id, gun_damage):
        return HeroDamageModel(
            hero_id=hero_id,
            hero_name=f"Hero {hero_id}",
            hero_image=None,
            is_disabled=False,
            level=1,
            max_level=30,
            base_spirit_power=0,
            spirit_gain=0,
            effective_spirit=0,
            gun_damage_over_window=gun_damage,
        )

    def test_series_per_hero(self):
        models = {1: self.create_model(1, 1000), 2: self.create_model(2, 0)}
        series = time_to_kill_series(models, [1, 2], TeamModifiers(), [1000, 2000], combat_window=10)
        assert len(series) == 1
        assert [(point.x, point.y) for point in series[0].data] == [(1000, 10), (2000, 20)]

    def test_unknown_ids_ignored(self):
        models = {1: self.create_model(1, 1000)}
        assert time_to_kill_series(models, [7], TeamModifiers(), [1000]) == []
