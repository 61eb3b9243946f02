import pytest

from src.battle_core.enums import StatType
from src.battle_core.schema.pokemon import Stat
from src.battle_core.stats import accuracy_multiplier, calc_ib_stat, calc_oob_hp, calc_oob_stat, evasion_multiplier, max_hp, stage_multiplier

from conftest import make_mon


def test_oob_formulas():
    assert calc_oob_stat(Stat(base=50), 10) == 15
    assert calc_oob_hp(Stat(base=50), 10) == 30

    trained = Stat(base=100, iv=31, ev=252)
    assert calc_oob_stat(trained, 50) == 152
    assert calc_oob_hp(trained, 50) == 207


@pytest.mark.parametrize(
    "stage, expected",
    [(0, 1.0), (1, 1.5), (2, 2.0), (6, 4.0), (-1, 2 / 3), (-2, 0.5), (-6, 0.25)],
)
def test_stage_multiplier(stage, expected):
    assert stage_multiplier(stage) == pytest.approx(expected)


def test_accuracy_and_evasion_multipliers_mirror_each_other():
    assert accuracy_multiplier(0) == evasion_multiplier(0) == 1.0
    assert accuracy_multiplier(3) == pytest.approx(2.0)
    assert evasion_multiplier(3) == pytest.approx(0.5)
    for stage in range(-6, 7):
        assert accuracy_multiplier(stage) * evasion_multiplier(stage) == pytest.approx(1.0)


def test_in_battle_stat_applies_stage():
    mon = make_mon()
    assert max_hp(mon) == 30
    assert calc_ib_stat(mon, StatType.ATTACK, 0) == 15
    assert calc_ib_stat(mon, StatType.ATTACK, 2) == 30
    assert calc_ib_stat(mon, StatType.SPEED, -2) == 7


def test_accuracy_has_no_in_battle_stat_value():
    with pytest.raises(ValueError):
        calc_ib_stat(make_mon(), StatType.ACCURACY, 0)
