"""Tests for the hero growth builder."""

import pytest

from src.core.constants import DRIFTER_PELLET_NOTE
from src.core.hero_growth import (
    apply_flat_and_percent,
    build_growth_profiles,
    build_hero_growth_rows,
    format_stat_name,
    growth_percent,
)
from src.data.models import Hero, parse_item


def create_test_weapon(class_name="weapon_test", name="Primary", **weapon_info):
    info = {"bullet_damage": 20, "bullets": 1, "cycle_time": 0.5, "clip_size": 10}
    info.update(weapon_info)
    return parse_item({
        "id": abs(hash(class_name)) % 100000,
        "class_name": class_name,
        "name": name,
        "type": "weapon",
        "weapon_info": info,
    })


def create_test_hero(
    hero_id=1,
    name="Haze",
    class_name=None,
    weapon="weapon_test",
    max_level=2,
    dmg_gain=2,
    hp_gain=None,
    spirit_gain=None,
    **kwargs,
) -> Hero:
    upgrades = {"MODIFIER_VALUE_BASE_BULLET_DAMAGE_FROM_LEVEL": dmg_gain}
    if hp_gain is not None:
        upgrades["MODIFIER_VALUE_BASE_HEALTH_FROM_LEVEL"] = hp_gain
    if spirit_gain is not None:
        upgrades["MODIFIER_VALUE_TECH_POWER"] = spirit_gain
    return Hero.model_validate({
        "id": hero_id,
        "class_name": class_name or f"hero_{name.lower()}",
        "name": name,
        "items": {"weapon_primary": weapon},
        "level_info": {str(level): {} for level in range(1, max_level + 1)},
        "standard_level_up_upgrades": upgrades,
        **kwargs,
    })


def build_single_row(hero, *items):
    rows = build_hero_growth_rows([hero], list(items))
    assert len(rows) == 1
    return rows[0]


class TestHelpers:
    """Tests for growth helpers."""

    def test_apply_flat_and_percent(self):
        assert apply_flat_and_percent(100, 50, 10) == pytest.approx(165)
        assert apply_flat_and_percent(None, 50, 10) is None

    def test_growth_percent(self):
        assert growth_percent(40, 44) == pytest.approx(10)
        assert growth_percent(0, 44) is None
        assert growth_percent(None, 44) is None

    def test_format_stat_name(self):
        assert format_stat_name("EBulletDamage") == "Bullet Damage"
        assert format_stat_name("EMaxMoveSpeed") == "Max Move Speed"
        assert format_stat_name("") == "Unknown"


class TestSimpleWeaponGrowth:
    """Single-pellet weapon, two levels."""

    @pytest.fixture
    def row(self):
        return build_single_row(create_test_hero(), create_test_weapon())

    def test_base_dps(self, row):
        assert row.base_dps == pytest.approx(40)
        assert row.base_fire_rate == pytest.approx(2)

    def test_max_level(self, row):
        assert row.max_gun_damage == pytest.approx(22)
        assert row.max_gun_dps == pytest.approx(44)
        assert row.dps_growth_percent == pytest.approx(10)

    def test_spin_falls_back(self, row):
        assert row.base_spin_dps == pytest.approx(40)
        assert row.max_spin_gun_dps == pytest.approx(44)

    def test_dpm_per_clip(self, row):
        assert row.dpm == pytest.approx(200)
        assert row.max_dpm == pytest.approx(220)

    def test_no_spirit_scaling(self, row):
        assert row.spirit_bullet_damage_bonus is None
        assert row.max_gun_dps_with_spirit == row.max_gun_dps
        assert row.max_gun_damage_with_spirit == row.max_gun_damage


class TestWeaponGeometry:
    """Tests for pellets, bursts and spin-up."""

    def test_pellets_multiply(self):
        row = build_single_row(create_test_hero(), create_test_weapon(bullets=4))
        assert row.base_dps == pytest.approx(160)

    def test_drifter_pellet_exception(self):
        hero = create_test_hero(class_name="hero_drifter")
        row = build_single_row(hero, create_test_weapon(bullets=4))
        assert row.base_dps == pytest.approx(40)
        assert row.pellets == 4
        assert row.pellet_exception_note == DRIFTER_PELLET_NOTE

    def test_burst_fire(self):
        weapon = create_test_weapon(burst_shot_count=3, intra_burst_cycle_time=0.1, cycle_time=0.6)
        row = build_single_row(create_test_hero(), weapon)
        # cycle 0.6 + 3 x 0.1, three shots per cycle
        assert row.base_dps == pytest.approx(20 * 3 / 0.9)
        assert row.base_fire_rate == pytest.approx(3 / 0.9)

    def test_max_spin(self):
        row = build_single_row(create_test_hero(), create_test_weapon(max_spin_cycle_time=0.25))
        assert row.base_spin_dps == pytest.approx(80)
        assert row.max_spin_gun_dps == pytest.approx(88)

    def test_zero_cycle_time(self):
        row = build_single_row(create_test_hero(), create_test_weapon(cycle_time=0))
        assert row.base_dps is None
        assert row.max_gun_dps is None

    def test_missing_weapon(self):
        row = build_single_row(create_test_hero(weapon="missing"))
        assert row.base_dps is None
        assert row.base_bullet_damage is None

    def test_alt_fire(self):
        hero = create_test_hero()
        hero.items["weapon_secondary"] = "weapon_alt"
        alt = create_test_weapon("weapon_alt", name="Alt Fire", bullet_damage=75, bullets=2)
        row = build_single_row(hero, create_test_weapon(), alt)
        assert row.alt_fire_name == "Alt Fire"
        assert row.alt_fire_damage == 75
        assert row.alt_fire_pellets == 2
        assert row.base_dps == pytest.approx(40)


class TestSpiritAndVitality:
    """Tests for spirit-infused gun and vitality boons."""

    @pytest.fixture
    def hero(self):
        return create_test_hero(
            max_level=3,
            hp_gain=50,
            spirit_gain=5,
            starting_stats={
                "max_health": {"value": 500},
                "base_health_regen": {"value": 2},
                "max_move_speed": {"value": 6.8},
                "spirit_power": {"value": 7},
            },
            scaling_stats={
                "EBulletDamage": {"scaling_stat": "ETechPower", "scale": 0.1},
                "EBaseHealthRegen": {"scaling_stat": "ETechPower", "scale": 0.2},
                "EMaxMoveSpeed": {"scaling_stat": "EBulletDamage", "scale": 9},
            },
            purchase_bonuses={
                "vitality": [
                    {"value_type": "MODIFIER_VALUE_BASE_HEALTH", "value": 100},
                    {"value_type": "MODIFIER_VALUE_BASE_HEALTH_PERCENT", "value": 10},
                    {"value_type": "MODIFIER_VALUE_BASE_HEALTH_REGEN", "value": "1"},
                ],
                "spirit": [{"value_type": "MODIFIER_VALUE_TECH_POWER", "value": 10}],
            },
        )

    @pytest.fixture
    def row(self, hero):
        return build_single_row(hero, create_test_weapon())

    def test_total_spirit_excludes_base(self, row):
        assert row.spirit_gain == 5
        assert row.total_spirit_at_max_level == 10

    def test_spirit_bullet_bonus(self, row):
        assert row.max_gun_damage == pytest.approx(24)
        assert row.spirit_bullet_damage_bonus == pytest.approx(1)
        assert row.max_gun_damage_with_spirit == pytest.approx(25)
        assert row.max_gun_dps_with_spirit == pytest.approx(50)
        assert row.spirit_rounds_per_second_bonus is None

    def test_health(self, row):
        assert row.base_hp == 500
        assert row.max_level_hp == 600
        assert row.hp_growth_percent == pytest.approx(20)
        assert row.max_health_with_boons == pytest.approx(770)

    def test_regen_with_boons_and_spirit(self, row):
        assert row.max_regen_with_boons == pytest.approx(3)
        # levels (10) plus spirit boon (10) at 0.2 per spirit
        assert row.max_regen_with_boons_and_spirit == pytest.approx(7)

    def test_spirit_details(self, row):
        details = {detail.stat_key: detail for detail in row.spirit_details}
        assert set(details) == {"EBulletDamage", "EBaseHealthRegen"}
        assert details["EBaseHealthRegen"].display_name == "Base Health Regen"
        assert details["EBulletDamage"].max_bonus_at_max_level == pytest.approx(1)

    def test_rate_bonus(self):
        hero = create_test_hero(
            spirit_gain=10,
            scaling_stats={"ERoundsPerSecond": {"scaling_stat": "ETechPower", "scale": 0.2}},
        )
        row = build_single_row(hero, create_test_weapon())
        # fire rate 2 + 10 x 0.2 = 4 rounds per second
        assert row.spirit_rounds_per_second_bonus == pytest.approx(2)
        assert row.max_gun_dps_with_spirit == pytest.approx(22 * 4)


class TestRowsAndProfiles:
    """Tests for row ordering and per-level profiles."""

    def test_rows_sorted_by_name(self):
        heroes = [create_test_hero(hero_id=1, name="Yamato"), create_test_hero(hero_id=2, name="bebop")]
        rows = build_hero_growth_rows(heroes, [create_test_weapon()])
        assert [row.hero_name for row in rows] == ["bebop", "Yamato"]

    def test_profile_curves(self):
        hero = create_test_hero(
            max_level=3,
            spirit_gain=4,
            starting_stats={"spirit_power": {"value": 2}, "max_health": {"value": 500}},
            hp_gain=25,
        )
        profile = build_growth_profiles([hero], [create_test_weapon()])[0]
        assert profile.levels() == [1, 2, 3]
        assert profile.bullet_damage_at(1) == 20
        assert profile.bullet_damage_at(3) == 24
        assert profile.dps_at(3) == pytest.approx(48)
        assert profile.hp_at(2) == 525
        assert profile.spirit_at(3) == 10

    def test_profile_level_boundaries_match_row(self):
        hero = create_test_hero(max_level=5)
        row = build_single_row(hero, create_test_weapon())
        profile = build_growth_profiles([hero], [create_test_weapon()])[0]
        assert profile.dps_at(1) == pytest.approx(row.base_dps)
        assert profile.dps_at(5) == pytest.approx(row.max_gun_dps)
