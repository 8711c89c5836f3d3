"""Tests for the damage calculator and ability-usage simulator."""

import math

import pytest

from src.core.ability_metrics import DamageVariant, build_hero_ability_rows
from src.core.damage_calculator import (
    HeroDamageModel,
    TeamModifiers,
    build_hero_damage_model,
    build_hero_damage_models,
    build_hero_profiles,
    compose_team_modifiers,
    compute_ability_usage,
    create_enemy_health_samples,
    describe_percent_effects,
    evaluate_hero_damage,
    global_max_level,
    group_abilities_by_hero,
    spirit_slider_max,
)
from src.core.hero_growth import build_hero_growth_rows
from src.data.models import Hero, parse_item


def create_test_hero(hero_id, name, abilities=(), weapon=None, max_level=3, spirit_gain=2, dmg_gain=2) -> Hero:
    items = {f"signature{index + 1}": class_name for index, class_name in enumerate(abilities)}
    if weapon:
        items["weapon_primary"] = weapon
    return Hero.model_validate({
        "id": hero_id,
        "class_name": f"hero_{name.lower()}",
        "name": name,
        "items": items,
        "starting_stats": {"spirit_power": {"value": 0}},
        "level_info": {str(level): {} for level in range(1, max_level + 1)},
        "standard_level_up_upgrades": {
            "MODIFIER_VALUE_TECH_POWER": spirit_gain,
            "MODIFIER_VALUE_BASE_BULLET_DAMAGE_FROM_LEVEL": dmg_gain,
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


def create_test_weapon(class_name="weapon_haze"):
    return parse_item({
        "id": 500,
        "class_name": class_name,
        "name": "Gun",
        "type": "weapon",
        "weapon_info": {"bullet_damage": 20, "bullets": 1, "cycle_time": 0.5, "clip_size": 10},
    })


def create_test_roster():
    """Haze: gun, nuke and percent execute. Seven: amp and shred. Ivy: self-damage only."""
    items = [
        create_test_weapon(),
        create_test_ability(
            "ability_nuke",
            "Nuke",
            {
                "Damage": {"value": 100, "scale_function": {"specific_stat_scale_type": "ETechPower", "stat_scale": 1.0}},
                "AbilityCooldown": {"value": 10},
            },
            upgrades=[[{"name": "Damage", "bonus": 50}]],
        ),
        create_test_ability(
            "ability_execute",
            "Execute",
            {"MaxHealthDamage": {"value": 5, "postfix": "%"}, "AbilityCooldown": {"value": 10}},
        ),
        create_test_ability(
            "ability_amp_aura",
            "Amp Aura",
            {
                "TechAmp": {"value": 20, "provided_property_type": "MODIFIER_VALUE_TECH_DAMAGE_PERCENT"},
                "BulletArmorReduction": {"value": -10},
                "AbilityCooldown": {"value": 30},
            },
        ),
        create_test_ability(
            "ability_bloodletting",
            "Bloodletting",
            {"Damage": {"value": 500}, "AbilityCooldown": {"value": 10}},
        ),
    ]
    heroes = [
        create_test_hero(1, "Haze", ["ability_nuke", "ability_execute"], weapon="weapon_haze"),
        create_test_hero(2, "Seven", ["ability_amp_aura"]),
        create_test_hero(3, "Ivy", ["ability_bloodletting"]),
    ]
    return build_hero_growth_rows(heroes, items), build_hero_ability_rows(heroes, items)


def create_test_model(**kwargs) -> HeroDamageModel:
    defaults = dict(
        hero_id=1,
        hero_name="Test",
        hero_image=None,
        is_disabled=False,
        level=1,
        max_level=30,
        base_spirit_power=0,
        spirit_gain=0,
        effective_spirit=0,
    )
    defaults.update(kwargs)
    return HeroDamageModel(**defaults)


class TestComputeAbilityUsage:
    """Tests for the cast simulator."""

    def test_charges_fire_before_recharge(self):
        usage = compute_ability_usage(5, charges=3, cooldown=10, charge_interval=1, duration=0)
        assert usage.cast_count == 3

    def test_recharge_resumes(self):
        # casts at 0, 1, 2, then 10, 11, 12
        usage = compute_ability_usage(12, charges=3, cooldown=10, charge_interval=1, duration=0)
        assert usage.cast_count == 6

    def test_single_charge_is_window_over_cooldown(self):
        usage = compute_ability_usage(10, charges=1, cooldown=4, charge_interval=0, duration=1)
        assert usage.cast_count == pytest.approx(2.5)
        assert usage.uptime_seconds == pytest.approx(2.5)

    def test_unknown_charges_default_to_one(self):
        usage = compute_ability_usage(10, charges=None, cooldown=5, charge_interval=None, duration=0)
        assert usage.cast_count == pytest.approx(2)

    def test_no_cooldown_uses_duration(self):
        assert compute_ability_usage(10, 1, None, 0, 2).cast_count == pytest.approx(5)
        assert compute_ability_usage(10, 1, 0, 0, 0).cast_count == 0

    def test_empty_window(self):
        usage = compute_ability_usage(0, 3, 10, 1, 2)
        assert usage.cast_count == 0
        assert usage.uptime_seconds == 0

    def test_uptime_capped_at_window(self):
        usage = compute_ability_usage(10, 1, 2, 0, 8)
        assert usage.uptime_seconds == 10

    @pytest.mark.parametrize("charges", [1, 2, 3, 5, 20])
    def test_cast_count_monotonic_in_window(self, charges):
        previous = 0.0
        for window in range(0, 60, 3):
            usage = compute_ability_usage(window, charges, cooldown=7, charge_interval=0.5, duration=1)
            assert usage.cast_count >= previous
            previous = usage.cast_count

    @pytest.mark.parametrize("charges", [1, 2, 7, 20])
    @pytest.mark.parametrize("cooldown", [1e-4, 0.5, 30])
    @pytest.mark.parametrize("interval", [0, 0.25])
    def test_terminates_with_bounded_output(self, charges, cooldown, interval):
        window = 1000
        usage = compute_ability_usage(window, charges, cooldown, interval, duration=3)
        assert math.isfinite(usage.cast_count)
        assert usage.cast_count >= 0
        assert 0 <= usage.uptime_seconds <= window

    def test_iteration_cap(self):
        usage = compute_ability_usage(1000, 5, 1e-4, 0, 0)
        assert usage.cast_count == 2000


class TestHeroProfiles:
    """Tests for calculator hero profiles."""

    @pytest.fixture
    def roster(self):
        return create_test_roster()

    def test_one_profile_per_hero_sorted(self, roster):
        growth_rows, ability_rows = roster
        profiles = build_hero_profiles(growth_rows, ability_rows)
        assert [profile.hero_name for profile in profiles] == ["Haze", "Ivy", "Seven"]

    def test_spirit_from_ability_rows(self, roster):
        growth_rows, ability_rows = roster
        haze = build_hero_profiles(growth_rows, ability_rows)[0]
        assert haze.max_level == 3
        assert haze.spirit_gain == 2
        assert haze.base_spirit_power == 0

    def test_default_max_level_without_abilities(self, roster):
        growth_rows, _ = roster
        profiles = build_hero_profiles(growth_rows, [])
        assert all(profile.max_level == 30 for profile in profiles)
        assert global_max_level(profiles) == 30
        assert global_max_level([]) == 30

    def test_ability_only_heroes_included(self, roster):
        _, ability_rows = roster
        profiles = build_hero_profiles([], ability_rows)
        assert {profile.hero_id for profile in profiles} == {1, 2, 3}

    def test_group_abilities_sorted(self, roster):
        _, ability_rows = roster
        grouped = group_abilities_by_hero(ability_rows)
        assert [row.ability_name for row in grouped[1]] == ["Execute", "Nuke"]

    def test_spirit_slider_max(self, roster):
        _, ability_rows = roster
        assert spirit_slider_max(ability_rows) == 150
        assert spirit_slider_max([]) == 250


class TestHeroDamageModel:
    """Tests for per-hero damage over a window."""

    @pytest.fixture
    def roster(self):
        return create_test_roster()

    def build_models(self, roster, **kwargs):
        growth_rows, ability_rows = roster
        profiles = build_hero_profiles(growth_rows, ability_rows)
        kwargs.setdefault("level", 1)
        kwargs.setdefault("spirit", 0)
        return build_hero_damage_models(profiles, ability_rows, growth_rows, **kwargs)

    def test_level_one_uses_base_values(self, roster):
        haze = self.build_models(roster)[1]
        assert haze.gun_damage_over_window == pytest.approx(400)
        assert haze.burst_damage_over_window == pytest.approx(100)
        assert haze.percent_burst_coefficient == pytest.approx(0.05)

    def test_max_level_uses_max_values(self, roster):
        haze = self.build_models(roster, level=3)[1]
        assert haze.effective_spirit == 4
        assert haze.gun_damage_over_window == pytest.approx(480)
        assert haze.burst_damage_over_window == pytest.approx(154)

    def test_level_clamped(self, roster):
        assert self.build_models(roster, level=99)[1].level == 3
        assert self.build_models(roster, level=-4)[1].level == 1

    def test_spirit_input_adds_scaling(self, roster):
        haze = self.build_models(roster, spirit=50)[1]
        assert haze.effective_spirit == 50
        assert haze.burst_damage_over_window == pytest.approx(150)

    def test_gun_bonuses(self, roster):
        haze = self.build_models(roster, gun_bonus_percent=50, fire_rate_bonus_percent=100)[1]
        assert haze.gun_damage_over_window == pytest.approx(400 * 1.5 * 2)

    def test_window_scales_damage(self, roster):
        haze = self.build_models(roster, combat_window=20)[1]
        assert haze.gun_damage_over_window == pytest.approx(800)
        assert haze.burst_damage_over_window == pytest.approx(200)
        assert haze.percent_burst_coefficient == pytest.approx(0.1)

    def test_window_minimum_one_second(self, roster):
        haze = self.build_models(roster, combat_window=0)[1]
        assert haze.gun_damage_over_window == pytest.approx(40)

    def test_ignored_abilities(self, roster):
        ivy = self.build_models(roster)[3]
        assert ivy.burst_damage_over_window == 0
        assert ivy.gun_damage_over_window == 0

    def test_modifier_percents(self, roster):
        seven = self.build_models(roster)[2]
        assert seven.amp_spirit_percent == pytest.approx(20)
        assert seven.gun_shred_percent == pytest.approx(10)
        assert seven.amp_all_percent == 0

    def test_percent_effects_recorded(self, roster):
        haze = self.build_models(roster)[1]
        assert len(haze.percent_effects) == 1
        effect = haze.percent_effects[0]
        assert effect.ability_name == "Execute"
        assert effect.mode == "burst"
        assert effect.percent_value == pytest.approx(5)

    def test_min_max_variant(self):
        items = [
            create_test_ability(
                "ability_charge",
                "Charge Shot",
                {"MinDamage": {"value": 50}, "MaxDamage": {"value": 100}, "AbilityCooldown": {"value": 10}},
            )
        ]
        heroes = [create_test_hero(4, "Vindicta", ["ability_charge"])]
        ability_rows = build_hero_ability_rows(heroes, items)
        profile = build_hero_profiles([], ability_rows)[0]
        low = build_hero_damage_model(profile, ability_rows, None, 1, 0, variant=DamageVariant.MIN)
        high = build_hero_damage_model(profile, ability_rows, None, 1, 0, variant=DamageVariant.MAX)
        assert low.burst_damage_over_window == pytest.approx(50)
        assert high.burst_damage_over_window == pytest.approx(100)


class TestTeamEvaluation:
    """Tests for amps, shreds, resists and time-to-kill."""

    @pytest.fixture
    def models(self):
        growth_rows, ability_rows = create_test_roster()
        profiles = build_hero_profiles(growth_rows, ability_rows)
        return build_hero_damage_models(profiles, ability_rows, growth_rows, level=1, spirit=0)

    def test_compose_team(self, models):
        team = compose_team_modifiers(models, [1, 2, 999])
        assert team.spirit_amp_multiplier == pytest.approx(0.2)
        assert team.total_gun_shred_percent == pytest.approx(10)
        assert team.amp_all_multiplier == 0

    def test_neutral_modifiers_sum_raw_damage(self, models):
        summary = evaluate_hero_damage(models[1], TeamModifiers(), 2000)
        assert summary.total_damage_over_window == pytest.approx(400 + 100 + 0.05 * 2000)
        assert summary.extra_damage == 0
        assert summary.dps == pytest.approx(60)
        assert summary.time_to_kill == pytest.approx(2000 / 60)

    def test_percent_damage_scales_with_health(self, models):
        low = evaluate_hero_damage(models[1], TeamModifiers(), 2000)
        high = evaluate_hero_damage(models[1], TeamModifiers(), 4000)
        assert low.percent_burst_damage == pytest.approx(100)
        assert high.percent_burst_damage == pytest.approx(2 * low.percent_burst_damage)

    def test_resists_shred_and_spirit_amp(self, models):
        team = compose_team_modifiers(models, [1, 2])
        summary = evaluate_hero_damage(models[1], team, 2000, enemy_gun_resist=30)
        # gun 400 x (1 - (30 - 10) / 100), spirit side 200 amped by 20%
        assert summary.base_damage == pytest.approx(320 + 100 + 100)
        assert summary.extra_damage == pytest.approx(40)
        assert summary.total_gun_damage == pytest.approx(320)

    def test_amp_all_multiplies_everything(self):
        model = create_test_model(gun_damage_over_window=100, burst_damage_over_window=100)
        team = TeamModifiers(amp_all_multiplier=0.5)
        summary = evaluate_hero_damage(model, team, 1000)
        assert summary.total_damage_over_window == pytest.approx(300)
        assert summary.total_gun_damage == pytest.approx(150)

    def test_resist_multiplier_floor(self):
        team = TeamModifiers()
        assert team.gun_resist_multiplier(150) == 0
        assert team.spirit_resist_multiplier(-50) == pytest.approx(1.5)

    def test_zero_damage_has_no_time_to_kill(self):
        summary = evaluate_hero_damage(create_test_model(), TeamModifiers(), 1000)
        assert summary.dps == 0
        assert summary.time_to_kill is None

    def test_describe_percent_effects(self, models):
        team = compose_team_modifiers(models, [1, 2])
        described = describe_percent_effects(models, [1, 2], team, 2000)
        assert [entry.hero_name for entry in described] == ["Haze", "Seven"]
        effect = described[0].effects[0]
        assert effect.damage_over_window == pytest.approx(0.05 * 2000 * 1.2)
        assert effect.damage_per_cast == pytest.approx(0.05 * 2000 * 1.2)
        assert described[1].effects == []


class TestEnemyHealthSamples:
    """Tests for enemy health sampling."""

    def test_spread_around_center(self):
        samples = create_enemy_health_samples(3000)
        assert len(samples) == 18
        assert samples[0] == 1200
        assert samples[-1] == 4800
        assert samples == sorted(samples)

    def test_low_center_floor(self):
        samples = create_enemy_health_samples(50, count=4)
        assert samples == [100, 150, 200, 250]

    def test_single_sample(self):
        assert create_enemy_health_samples(3000, count=1) == [3000]
        assert create_enemy_health_samples(100.5, count=1) == [101]
