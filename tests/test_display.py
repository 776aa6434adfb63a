"""Tests for display.py — section grouping and rune word stat filtering."""

import pytest

from display import (
    ATTACK_RATING_LABEL,
    DAMAGE_LABEL,
    DEFAULT_SUMMON_SECTIONS,
    GOLEM_DAMAGE_LABEL,
    LIFE_LABEL,
    group_sections,
    resist_label,
    runeword_specific_stats,
    summon_sections,
)
from monster_stats import Difficulty
from range_value import Scenario
from runeword_parser import parse_runewords
from summon_calcs import EnemyClass, calculate_iron_golem, calculate_raise_skeleton
from tests.conftest import load_fixture


@pytest.fixture(scope="module")
def parsed():
    return parse_runewords(load_fixture("RuneWords/Weapons.txt"))


def test_group_sections_order_and_missing_labels():
    data = {"a": 1, "b": 2}
    key_map = {"Alpha": "a", "Beta": "b"}
    sections = {"First": ["Beta", "Gamma", "Alpha"], "Empty": ["Gamma"]}
    assert group_sections(data, key_map, sections) == [
        ("First", [("Beta", 2), ("Alpha", 1)]),
        ("Empty", []),
    ]


def test_resist_label():
    assert resist_label("fire") == "Fire Resist"


class TestSpecificStats:

    def test_folded_stats_removed(self, parsed):
        keys = {key for _, key in runeword_specific_stats(parsed["Steel Test"])}
        assert keys == {
            "MinDamage", "MaxDamage", "AddedDamage",
            "ElementalDamageFire", "ElementalDamageCold",
            "DamageVsUndead", "DamageVsDemon",
            "Aura_Might", "ChanceToCast_FrostNova_WhenStruck",
        }

    def test_labels_kept(self, parsed):
        labels = [label for label, _ in runeword_specific_stats(parsed["Steel Test"])]
        assert "Level 4-6 Might Aura When Equipped" in labels
        assert not any("Attack Rating" in label for label in labels)

    def test_none(self):
        assert runeword_specific_stats(None) == []


class TestSummonSections:

    def test_skeleton(self, row10):
        sections = summon_sections(calculate_raise_skeleton(row10, 10, resist_level=1))
        assert [title for title, _ in sections] == list(DEFAULT_SUMMON_SECTIONS)
        rows = dict(sections[0][1])
        assert rows[DAMAGE_LABEL] == "19-21"
        assert rows[ATTACK_RATING_LABEL] == "200/300/400"
        assert dict(sections[1][1])[LIFE_LABEL] == "205/375/545"
        assert dict(sections[2][1])["Fire Resist"] == 28

    def test_iron_golem_damage_per_difficulty(self, row1, one_hander, parsed):
        result = calculate_iron_golem(row1, 1, one_hander, parsed["Steel Test"])
        rows = dict(summon_sections(result)[0][1])
        assert DAMAGE_LABEL not in rows
        assert ATTACK_RATING_LABEL in rows
        expected = "/".join(
            f"{c.damage_min}-{c.damage_max}"
            for c in (result.cell(d, EnemyClass.NORMAL, Scenario.AVG) for d in Difficulty)
        )
        assert rows[GOLEM_DAMAGE_LABEL] == expected

    def test_skeleton_has_no_golem_damage_row(self, row10):
        rows = dict(summon_sections(calculate_raise_skeleton(row10, 10))[0][1])
        assert GOLEM_DAMAGE_LABEL not in rows

    def test_custom_sections(self, row10):
        result = calculate_raise_skeleton(row10, 10)
        assert summon_sections(result, {"Only": [LIFE_LABEL]}) == [("Only", [(LIFE_LABEL, "205/375/545")])]
