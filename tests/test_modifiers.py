"""Tests for modifiers.py — aura percent formulas and level resolution."""

import pytest

from modifiers import (
    BATTLE_ORDERS,
    FANATICISM,
    HEART_OF_WOLVERINE,
    MIGHT,
    AuraSource,
    ModifierSet,
    aggregate_modifiers,
    canonical_aura,
    get_fanaticism_resolver,
    linear_bonus,
    normalize_levels,
    resolve_fanaticism_always_ally,
    resolve_fanaticism_by_source,
    runeword_auras,
)
from range_value import RangeValue, Scenario
from runeword_parser import parse_runewords
from tests.conftest import load_fixture


@pytest.fixture(scope="module")
def parsed():
    return parse_runewords(load_fixture("RuneWords/Weapons.txt"))


class TestModifierSet:

    def test_linear_bonus(self):
        assert linear_bonus(0, 30, 10) == 0
        assert linear_bonus(1, 30, 10) == 40

    def test_damage(self):
        assert ModifierSet(levels={MIGHT: 10}).damage_percent() == 130
        assert ModifierSet(levels={MIGHT: 10}).damage_multiplier == pytest.approx(2.3)

    def test_fanaticism_ally_is_halved(self):
        ally = ModifierSet(fanaticism_level=10, fanaticism_source=AuraSource.ALLY)
        user = ModifierSet(fanaticism_level=10, fanaticism_source=AuraSource.USER)
        assert ally.damage_percent() == 70
        assert user.damage_percent() == 140
        # Attack rating is never halved
        assert ally.attack_rating_percent() == user.attack_rating_percent() == 85

    def test_attack_rating(self):
        mods = ModifierSet(levels={HEART_OF_WOLVERINE: 5})
        assert mods.attack_rating_percent() == 50
        assert mods.damage_percent() == 48

    def test_defense(self):
        assert ModifierSet(levels={"Defiance": 5, "Shout": 1}).defense_percent() == 210

    def test_life(self):
        assert ModifierSet(levels={BATTLE_ORDERS: 10, "OakSage": 4}).life_percent() == 107

    def test_empty(self):
        mods = ModifierSet()
        assert mods.damage_multiplier == 1.0
        assert mods.attack_rating_multiplier == 1.0
        assert mods.defense_percent() == 0


class TestNames:

    def test_canonical(self):
        assert canonical_aura("Heart of Wolverine") == HEART_OF_WOLVERINE
        assert canonical_aura("Battle Orders") == BATTLE_ORDERS
        assert canonical_aura("bo") == BATTLE_ORDERS
        assert canonical_aura("Meditation") is None
        assert canonical_aura("") is None

    def test_normalize_levels(self):
        assert normalize_levels({"bo": 3, "Battle Orders": 5, "Thorns": 9}) == {BATTLE_ORDERS: 5}
        assert normalize_levels(None) == {}


class TestFanaticism:

    def test_by_source(self):
        assert resolve_fanaticism_by_source(14, 12) == (14, AuraSource.USER)
        assert resolve_fanaticism_by_source(12, 12) == (12, AuraSource.ALLY)
        assert resolve_fanaticism_by_source(0, 0) == (0, AuraSource.ALLY)

    def test_always_ally(self):
        assert resolve_fanaticism_always_ally(14, 12) == (14, AuraSource.ALLY)

    def test_lookup(self):
        assert get_fanaticism_resolver("always_ally") is resolve_fanaticism_always_ally
        assert get_fanaticism_resolver("bogus") is resolve_fanaticism_by_source

    def test_scenarios(self, parsed):
        rw = parsed["Zeal Faith"]
        external = {"Fanaticism": 12}
        worst = aggregate_modifiers(external, rw, Scenario.WORST)
        avg = aggregate_modifiers(external, rw, Scenario.AVG)
        best = aggregate_modifiers(external, rw, Scenario.BEST)
        assert (worst.fanaticism_level, worst.fanaticism_source) == (12, AuraSource.ALLY)
        assert (avg.fanaticism_level, avg.fanaticism_source) == (12, AuraSource.ALLY)
        assert (best.fanaticism_level, best.fanaticism_source) == (14, AuraSource.USER)
        assert best.level(FANATICISM) == 14

    def test_swap_resolver(self, parsed):
        best = aggregate_modifiers({"Fanaticism": 12}, parsed["Zeal Faith"], Scenario.BEST,
                                   resolve_fanaticism_always_ally)
        assert best.fanaticism_source == AuraSource.ALLY
        assert best.damage_percent() == 90


class TestAggregate:

    def test_runeword_auras(self, parsed):
        assert runeword_auras(parsed["Steel Test"]) == {MIGHT: RangeValue(4, 6)}
        assert runeword_auras(parsed["Sixer"]) == {}
        assert runeword_auras(None) == {}

    def test_max_of_item_and_external(self, parsed):
        rw = parsed["Steel Test"]
        assert aggregate_modifiers({"Might": 5}, rw, Scenario.WORST).level(MIGHT) == 5
        assert aggregate_modifiers({"Might": 5}, rw, Scenario.BEST).level(MIGHT) == 6

    def test_external_only(self):
        mods = aggregate_modifiers({"Concentration": 2, "Might": 1})
        assert mods.damage_percent() == 75 + 40
