"""Tests for summon_formulas.py — level bands, resistances, regen, item/affix levels."""

import pytest

from summon_formulas import (
    CRIT_FACTOR,
    RESIST_CAP,
    apply_affix_formula,
    band_index,
    banded_value,
    calculate_affix_level,
    calculate_effective_mf,
    calculate_item_level,
    calculate_regen,
    gated_percent,
    mage_life_fifty_per_level,
    mage_life_ten_minus_21,
    summon_life_regen,
    summon_resist_bonus,
    summon_resistances,
)

SKELETON_INCREMENTS = (1, 2, 3, 4, 5)


class TestBands:

    @pytest.mark.parametrize("level,band", [(1, 0), (8, 0), (9, 1), (16, 1), (17, 2), (22, 2),
                                            (23, 3), (28, 3), (29, 4), (60, 4)])
    def test_band_index(self, level, band):
        assert band_index(level) == band

    def test_banded_value(self):
        assert banded_value(0, 1, SKELETON_INCREMENTS) == 0
        assert banded_value(1, 1, SKELETON_INCREMENTS) == 1
        assert banded_value(8, 1, SKELETON_INCREMENTS) == 8
        assert banded_value(10, 1, SKELETON_INCREMENTS) == 12
        # 1 + 7×1 + 8×2 + 1×3
        assert banded_value(17, 1, SKELETON_INCREMENTS) == 27

    def test_gated_percent(self):
        assert gated_percent(3, 3, 7) == 0
        assert gated_percent(10, 3, 7) == 49
        assert gated_percent(5, 0, 0) == 0

    def test_crit_factor(self):
        assert CRIT_FACTOR == pytest.approx(1.10)


class TestResistances:

    def test_zero_level(self):
        assert summon_resist_bonus(0) == 0

    def test_values(self):
        assert summon_resist_bonus(1) == 28
        assert summon_resist_bonus(59) == 74
        assert summon_resist_bonus(60) == RESIST_CAP

    def test_monotonic_and_capped(self):
        previous = 0
        for level in range(0, 120):
            value = summon_resist_bonus(level)
            assert value >= previous
            assert value <= RESIST_CAP
            previous = value

    def test_other_resists_unaffected(self):
        low = summon_resistances(1, {"magic": 5, "fire": 60})
        high = summon_resistances(40, {"magic": 5, "fire": 60})
        assert low["magic"] == high["magic"] == 5
        assert low["physical"] == high["physical"] == 0
        assert high["fire"] == RESIST_CAP
        assert set(high) == {"fire", "cold", "lightning", "poison", "magic", "physical"}


class TestMageLife:

    def test_strategies_differ(self):
        assert mage_life_fifty_per_level(10) == 350
        assert mage_life_ten_minus_21(10) == 79

    def test_gated_below_four(self):
        for level in (0, 1, 2, 3):
            assert mage_life_fifty_per_level(level) == 0
            assert mage_life_ten_minus_21(level) == 0


class TestRegen:

    def test_calculate_regen(self):
        regen = calculate_regen(4, 4096)
        assert regen["life_per_second"] == 100.0
        assert regen["percent_per_second"] == 0.02

    def test_by_name(self):
        assert summon_life_regen("Iron Golem", 4096) == 75.0
        assert summon_life_regen("skeleton", 4096) == 100.0
        assert summon_life_regen("Revive", 4096) == 0.0


class TestItemLevel:

    def test_solve_ilvl(self):
        assert calculate_item_level(clvl=90, mlvl=85) == {"clvl": 90, "mlvl": 85, "ilvl": 88}

    def test_solve_mlvl(self):
        assert calculate_item_level(clvl=90, ilvl=88)["mlvl"] == 86

    def test_solve_clvl(self):
        assert calculate_item_level(mlvl=85, ilvl=88)["clvl"] == 91

    @pytest.mark.parametrize("args", [{}, {"clvl": 1}, {"clvl": 1, "mlvl": 2, "ilvl": 3}])
    def test_bad_arguments(self, args):
        with pytest.raises(ValueError):
            calculate_item_level(**args)


class TestAffixLevel:

    def test_low_branch(self):
        assert calculate_affix_level(50, 40) == 30

    def test_high_branch(self):
        assert calculate_affix_level(90, 65) == 81

    def test_out_of_range(self):
        with pytest.raises(ValueError):
            calculate_affix_level(0, 40)
        with pytest.raises(ValueError):
            calculate_affix_level(50, 100)

    def test_solve_each_way(self):
        assert apply_affix_formula(ilvl=50, qlvl=40)["alvl"] == 30
        assert apply_affix_formula(qlvl=40, alvl=30)["ilvl"] == 50
        assert apply_affix_formula(ilvl=50, alvl=30)["qlvl"] == 40

    def test_wrong_count(self):
        with pytest.raises(ValueError):
            apply_affix_formula(ilvl=50)
        with pytest.raises(ValueError):
            apply_affix_formula(ilvl=50, qlvl=40, alvl=30)


class TestMagicFind:

    def test_diminishing_returns(self):
        # floor(factor × 300 / (factor + 300))
        assert calculate_effective_mf(300) == {"unique": 136, "set": 187, "rare": 200, "magic": 300}

    def test_zero(self):
        assert calculate_effective_mf(0) == {"unique": 0, "set": 0, "rare": 0, "magic": 0}

    def test_numeric_string(self):
        assert calculate_effective_mf("300")["unique"] == 136

    @pytest.mark.parametrize("raw", [-1, "abc", "", None])
    def test_no_result(self, raw):
        assert calculate_effective_mf(raw) is None
