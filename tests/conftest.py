"""Shared fixtures: a small hand-built game-data bundle with easy-to-check curves."""
import logging
from pathlib import Path

import pytest

from stat_optimizer.models import (
    AffinityData,
    DamageChannel,
    GameData,
    ReinforceRates,
    ScalingCurve,
    Skill,
    SkillHit,
    StatScaling,
    WeaponEntry,
)
from stat_optimizer.optimizer import StatOptimizer

SAMPLE_DATA = Path(__file__).resolve().parents[1] / "data" / "sample_game_data.json"

# 0: piecewise linear, 40% at 20, 85% at 60, 100% at 99
SCENARIO_CURVE = ScalingCurve.linear(((1, 0), (20, 40), (60, 85), (99, 100)))
# 1: strictly concave over the whole range
CONCAVE_CURVE = ScalingCurve(points=((1.0, 0.0), (99.0, 100.0)), exponents=(-2.0,))
# 2: straight line, 50% at 50
LINEAR_CURVE = ScalingCurve.linear(((1, 0), (99, 100)))


def _weapon(name, channels, *, requirements=None, wep_type=0, is_dual_blade=False,
            max_upgrade_level=0, reinforce_type_id=0, sorcery=None, incantation=None):
    return WeaponEntry(
        name=name,
        requirements=requirements or {},
        affinities={
            "Standard": AffinityData(
                reinforce_type_id=reinforce_type_id,
                channels=channels,
                sorcery_scaling=sorcery,
                incantation_scaling=incantation,
            )
        },
        wep_type=wep_type,
        is_dual_blade=is_dual_blade,
        max_upgrade_level=max_upgrade_level,
    )


def _physical(curve_id, **scaling):
    return {
        "physical": DamageChannel(
            attack_base=100.0,
            scaling={a: StatScaling(base=v, curve_id=curve_id) for a, v in scaling.items()},
        )
    }


def make_game_data() -> GameData:
    weapons = [
        _weapon("Scenario Sword", _physical(0, strength=100.0)),
        _weapon(
            "Twin Scaler",
            {
                "physical": DamageChannel(100.0, {"strength": StatScaling(100.0, 1)}),
                "magic": DamageChannel(100.0, {"intelligence": StatScaling(100.0, 1)}),
            },
        ),
        _weapon(
            "Triple Scaler",
            {
                "physical": DamageChannel(100.0, {"strength": StatScaling(100.0, 1)}),
                "magic": DamageChannel(80.0, {"intelligence": StatScaling(120.0, 1)}),
                "holy": DamageChannel(60.0, {"faith": StatScaling(150.0, 1)}),
            },
        ),
        _weapon("Heavy Blade", _physical(2, strength=100.0, dexterity=50.0), requirements={"strength": 30}),
        _weapon(
            "Test Staff",
            {"physical": DamageChannel(20.0)},
            requirements={"intelligence": 20},
            sorcery={"intelligence": StatScaling(100.0, 2)},
        ),
        _weapon("Test Fists", _physical(2, strength=100.0), wep_type=35),
        _weapon("Test Bow", _physical(2, strength=100.0), wep_type=50),
        _weapon("Twinblade", _physical(2, strength=100.0), is_dual_blade=True),
        WeaponEntry(
            name="Reinforced Blade",
            requirements={},
            affinities={
                "Standard": AffinityData(
                    reinforce_type_id=100,
                    channels={"physical": DamageChannel(50.0, {"strength": StatScaling(40.0, 2)})},
                )
            },
            max_upgrade_level=5,
        ),
    ]
    skills = [
        Skill(
            name="Test Slash",
            hits=(
                SkillHit(name="slash", motion={"physical": 2.0}),
                SkillHit(name="wave", bullet={"magic": 50.0}),
            ),
        ),
        Skill(
            name="Scaled Bolt",
            hits=(
                SkillHit(
                    name="bolt",
                    bullet={"magic": 100.0},
                    bullet_scaling={"intelligence": StatScaling(100.0, 2, is_override=True)},
                ),
            ),
        ),
    ]
    return GameData(
        curves={0: SCENARIO_CURVE, 1: CONCAVE_CURVE, 2: LINEAR_CURVE},
        reinforce_rates={
            0: ReinforceRates(),
            103: ReinforceRates(attack={"physical": 2.0}, scaling={"strength": 1.5}),
        },
        weapons={w.name: w for w in weapons},
        skills={s.name: s for s in skills},
        version="test",
    )


@pytest.fixture
def game_data() -> GameData:
    return make_game_data()


@pytest.fixture
def test_logger() -> logging.Logger:
    # propagates to the root logger, so caplog sees it
    return logging.getLogger("tests.stat_optimizer")


@pytest.fixture
def optimizer(game_data, test_logger) -> StatOptimizer:
    return StatOptimizer(game_data, logger=test_logger)


@pytest.fixture
def sample_data_path() -> Path:
    return SAMPLE_DATA
