"""
Horadric - Summon Calculators
Damage, attack rating, defense, life and resistances of the four summons.

Every calculator combines:
    1. the monster-stat row for the controlling skill level (per difficulty)
    2. skill-level banded formulas from the summon's profile
    3. resolved aura modifiers

The Iron Golem also takes the weapon it was made from and the rune word in
it, and reports damage and attack rating for every difficulty, enemy class
and worst/avg/best roll of the rune word's ranges.

Calculators return None when the monster-stat row is missing: base attack
rating, defense and life would otherwise be silently wrong.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, FrozenSet, Mapping, Optional, Tuple

from base_tables import WeaponBase
from modifiers import (
    FanaticismResolver,
    ModifierSet,
    NO_MODIFIERS,
    aggregate_modifiers,
    resolve_fanaticism_by_source,
)
from monster_stats import Difficulty, MonsterStatRow
from range_value import RangeValue, Scenario, ZERO, parse_range
from runeword_parser import RuneWord, stat_values, sum_stat_values
from stat_parser import AttackMode, AttackRating, AttackTarget, GenericStat, StatType
from summon_formulas import (
    CRIT_FACTOR,
    banded_value,
    gated_percent,
    mage_life_fifty_per_level,
    summon_life_regen,
    summon_resistances,
)

logger = logging.getLogger(__name__)


class EnemyClass(str, Enum):
    NORMAL = "Normal"
    UNDEAD = "Undead"
    DEMON = "Demon"


# ─── Profiles ────────────────────────────────────

@dataclass(frozen=True)
class SummonProfile:
    """Per-summon constants for the shared formulas."""
    name: str
    regen_key: str
    damage_min_base: int = 0
    damage_min_increments: Tuple[int, ...] = (0, 0, 0, 0, 0)
    damage_max_base: int = 0
    damage_max_increments: Tuple[int, ...] = (0, 0, 0, 0, 0)
    damage_pct_threshold: int = 0
    damage_pct_per_level: int = 0
    support_damage_per_level: int = 0
    ar_per_level: int = 0
    defense_per_level: int = 0
    flat_defense_percent: int = 0
    life_base: int = 0
    support_life_per_level: int = 0
    support_life_percent_per_level: int = 0
    life_pct_threshold: int = 0
    life_pct_per_level: int = 0
    intrinsic_resists: Mapping[str, int] = field(default_factory=dict)


SKELETON = SummonProfile(
    name="Skeleton",
    regen_key="skeleton",
    damage_min_base=1, damage_min_increments=(1, 2, 3, 4, 5),
    damage_max_base=2, damage_max_increments=(1, 2, 3, 4, 5),
    damage_pct_threshold=3, damage_pct_per_level=7,
    support_damage_per_level=2,
    ar_per_level=10,
    defense_per_level=15,
    life_base=21, support_life_per_level=7,
    life_pct_threshold=3, life_pct_per_level=10,
)

SKELETON_MAGE = SummonProfile(
    name="Skeleton Mage",
    regen_key="skelemage",
    damage_min_base=1, damage_min_increments=(1, 1, 2, 2, 3),
    damage_max_base=3, damage_max_increments=(1, 2, 2, 3, 4),
    damage_pct_threshold=3, damage_pct_per_level=7,
    support_damage_per_level=2,
    ar_per_level=5,
    defense_per_level=10,
    life_base=61, support_life_per_level=7,
)

BLOOD_GOLEM = SummonProfile(
    name="Blood Golem",
    regen_key="bloodgolem",
    damage_min_base=6, damage_min_increments=(2, 3, 4, 5, 6),
    damage_max_base=16, damage_max_increments=(3, 4, 5, 6, 7),
    ar_per_level=25,
    defense_per_level=20,
    life_base=201,
    support_life_percent_per_level=20,
)

IRON_GOLEM = SummonProfile(
    name="Iron Golem",
    regen_key="irongolem",
    ar_per_level=35,
    defense_per_level=35,
    life_base=306,
    support_life_percent_per_level=20,
)

# Iron Golem attack rating per character level, by difficulty
CHARACTER_LEVEL_AR = {
    Difficulty.NORMAL: 2,
    Difficulty.NIGHTMARE: 3,
    Difficulty.HELL: 4,
}

# Flat physical damage an Iron Golem gets from a one-handed weapon
ONE_HAND_DAMAGE_BONUS = {
    Difficulty.NORMAL: 5,
    Difficulty.NIGHTMARE: 10,
    Difficulty.HELL: 15,
}

# Every Iron Golem weapon rolls as superior: up to +15% enhanced damage
SUPERIOR_ENHANCED_DAMAGE = 15

DIFFICULTIES = tuple(Difficulty)
ENEMY_CLASSES = tuple(EnemyClass)
SCENARIOS = (Scenario.WORST, Scenario.AVG, Scenario.BEST)


# ─── Results ─────────────────────────────────────

@dataclass
class DifficultyStats:
    attack_rating: int
    defense: int
    life: int
    life_regen: float

    def as_dict(self) -> dict:
        return {
            "attack_rating": self.attack_rating,
            "defense": self.defense,
            "life": self.life,
            "life_regen": self.life_regen,
        }


@dataclass
class SummonResult:
    summon: str
    skill_level: int
    damage_min: int
    damage_max: int
    per_difficulty: Dict[Difficulty, DifficultyStats]
    resistances: Dict[str, int]
    modifiers: ModifierSet = NO_MODIFIERS

    @property
    def damage_avg(self) -> int:
        return (self.damage_min + self.damage_max) // 2

    def as_dict(self) -> dict:
        return {
            "summon": self.summon,
            "skill_level": self.skill_level,
            "damage": {"min": self.damage_min, "max": self.damage_max, "avg": self.damage_avg},
            "per_difficulty": {d.value: s.as_dict() for d, s in self.per_difficulty.items()},
            "resistances": dict(self.resistances),
        }


@dataclass
class ScenarioCell:
    damage_min: int
    damage_max: int
    attack_rating: int

    @property
    def damage_avg(self) -> int:
        return (self.damage_min + self.damage_max) // 2

    def as_dict(self) -> dict:
        return {
            "damage_min": self.damage_min,
            "damage_max": self.damage_max,
            "damage_avg": self.damage_avg,
            "attack_rating": self.attack_rating,
        }


ScenarioMatrix = Dict[Difficulty, Dict[EnemyClass, Dict[Scenario, ScenarioCell]]]


@dataclass
class IronGolemResult:
    skill_level: int
    weapon: str
    category: str
    two_handed: bool
    ethereal: bool
    runeword: Optional[str]
    scenarios: ScenarioMatrix
    per_difficulty: Dict[Difficulty, DifficultyStats]
    resistances: Dict[str, int]
    fanaticism: Dict[Scenario, Tuple[int, str]] = field(default_factory=dict)
    summon: str = IRON_GOLEM.name

    def cell(self, difficulty: Difficulty, enemy: EnemyClass, scenario: Scenario) -> ScenarioCell:
        return self.scenarios[difficulty][enemy][scenario]

    def as_dict(self) -> dict:
        return {
            "summon": self.summon,
            "skill_level": self.skill_level,
            "weapon": self.weapon,
            "category": self.category,
            "two_handed": self.two_handed,
            "ethereal": self.ethereal,
            "runeword": self.runeword,
            "scenarios": {
                d.value: {
                    e.value: {s.value: c.as_dict() for s, c in by_scenario.items()}
                    for e, by_scenario in by_enemy.items()
                }
                for d, by_enemy in self.scenarios.items()
            },
            "per_difficulty": {d.value: s.as_dict() for d, s in self.per_difficulty.items()},
            "resistances": dict(self.resistances),
            "fanaticism": {s.value: {"level": lvl, "source": src} for s, (lvl, src) in self.fanaticism.items()},
        }


# ─── Shared Formula Pieces ───────────────────────

def summon_damage(profile: SummonProfile, skill_level: int, support_level: int,
                  modifiers: ModifierSet) -> Tuple[int, int]:
    """(min, max) damage after skill percent, auras and average crits."""
    support = profile.support_damage_per_level * support_level
    base_min = banded_value(skill_level, profile.damage_min_base, profile.damage_min_increments) + support
    base_max = banded_value(skill_level, profile.damage_max_base, profile.damage_max_increments) + support
    skill_pct = gated_percent(skill_level, profile.damage_pct_threshold, profile.damage_pct_per_level)
    multiplier = (1 + skill_pct / 100) * modifiers.damage_multiplier * CRIT_FACTOR
    return int(base_min * multiplier), int(base_max * multiplier)


def summon_attack_rating(profile: SummonProfile, row: MonsterStatRow, difficulty: Difficulty,
                         skill_level: int, modifiers: ModifierSet, extra: int = 0) -> int:
    base = row.bonus(difficulty) + profile.ar_per_level * skill_level + extra
    return int(base * modifiers.attack_rating_multiplier)


def summon_defense(profile: SummonProfile, row: MonsterStatRow, difficulty: Difficulty,
                   skill_level: int, modifiers: ModifierSet) -> int:
    base = row.bonus(difficulty) + profile.defense_per_level * skill_level
    return int(base * (1 + (profile.flat_defense_percent + modifiers.defense_percent()) / 100))


def summon_life(profile: SummonProfile, row: MonsterStatRow, difficulty: Difficulty,
                support_level: int, life_percent: int, modifiers: ModifierSet) -> int:
    base = row.bonus(difficulty) + profile.life_base + profile.support_life_per_level * support_level
    # Mastery percent stacks additively with the life auras
    bonus_pct = profile.support_life_percent_per_level * support_level + modifiers.life_percent()
    return int(base * (1 + life_percent / 100) * (1 + bonus_pct / 100))


def _profile_life_percent(profile: SummonProfile, skill_level: int) -> int:
    return gated_percent(skill_level, profile.life_pct_threshold, profile.life_pct_per_level)


def _missing_row(profile: SummonProfile, skill_level: int) -> None:
    logger.warning(f"SummonCalcs: {profile.name}: no monster stats for skill level {skill_level}")
    return None


def _calculate(profile: SummonProfile, row: Optional[MonsterStatRow], skill_level: int,
               support_level: int, resist_level: int, modifiers: ModifierSet,
               life_percent: int) -> Optional[SummonResult]:
    if row is None:
        return _missing_row(profile, skill_level)

    damage_min, damage_max = summon_damage(profile, skill_level, support_level, modifiers)

    per_difficulty = {}
    for difficulty in DIFFICULTIES:
        life = summon_life(profile, row, difficulty, support_level, life_percent, modifiers)
        per_difficulty[difficulty] = DifficultyStats(
            attack_rating=summon_attack_rating(profile, row, difficulty, skill_level, modifiers),
            defense=summon_defense(profile, row, difficulty, skill_level, modifiers),
            life=life,
            life_regen=summon_life_regen(profile.regen_key, life),
        )

    return SummonResult(
        summon=profile.name,
        skill_level=skill_level,
        damage_min=damage_min,
        damage_max=damage_max,
        per_difficulty=per_difficulty,
        resistances=summon_resistances(resist_level, dict(profile.intrinsic_resists)),
        modifiers=modifiers,
    )


# ─── Calculators ─────────────────────────────────

def calculate_raise_skeleton(row: Optional[MonsterStatRow], skill_level: int, mastery_level: int = 0,
                             resist_level: int = 0,
                             modifiers: ModifierSet = NO_MODIFIERS) -> Optional[SummonResult]:
    """Raise Skeleton; Skeleton Mastery adds flat damage and life."""
    return _calculate(SKELETON, row, skill_level, mastery_level, resist_level, modifiers,
                      _profile_life_percent(SKELETON, skill_level))


def calculate_skeleton_mage(row: Optional[MonsterStatRow], skill_level: int, mastery_level: int = 0,
                            resist_level: int = 0, modifiers: ModifierSet = NO_MODIFIERS,
                            life_strategy: Callable[[int], int] = mage_life_fifty_per_level,
                            ) -> Optional[SummonResult]:
    """
    Raise Skeletal Mage.

    The percent-life formula is injected: the two published versions
    disagree (see summon_formulas.MAGE_LIFE_STRATEGIES).
    """
    return _calculate(SKELETON_MAGE, row, skill_level, mastery_level, resist_level, modifiers,
                      life_strategy(skill_level))


def calculate_blood_golem(row: Optional[MonsterStatRow], skill_level: int, mastery_level: int = 0,
                          resist_level: int = 0,
                          modifiers: ModifierSet = NO_MODIFIERS) -> Optional[SummonResult]:
    """Blood Golem; Golem Mastery adds percent life."""
    return _calculate(BLOOD_GOLEM, row, skill_level, mastery_level, resist_level, modifiers, 0)


# ─── Iron Golem ──────────────────────────────────

@dataclass(frozen=True)
class RuneWordBonuses:
    """Rune word stats the Iron Golem calculation consumes, as ranges."""
    enhanced_damage: RangeValue = ZERO
    to_min_damage: RangeValue = ZERO
    to_max_damage: RangeValue = ZERO
    added_min: RangeValue = ZERO
    added_max: RangeValue = ZERO
    elemental_min: RangeValue = ZERO
    elemental_max: RangeValue = ZERO
    damage_vs_undead: RangeValue = ZERO
    damage_vs_demon: RangeValue = ZERO
    attack_rating: Dict[Tuple[AttackTarget, AttackMode], RangeValue] = field(default_factory=dict)

    def rating(self, target: AttackTarget, mode: AttackMode) -> RangeValue:
        return self.attack_rating.get((target, mode), ZERO)


def _damage_pair(runeword: Optional[RuneWord], kind: str) -> Tuple[RangeValue, RangeValue]:
    """Sum "Kind|...|min|max" stats into (min damage, max damage) ranges."""
    low, high = ZERO, ZERO
    if runeword is None:
        return low, high
    for stat in runeword.stats:
        if not isinstance(stat, GenericStat) or stat.kind.lower() != kind.lower():
            continue
        if stat.value_range is None:
            continue
        low = low + stat.value_range
        high = high + (parse_range(stat.extra_tokens[0]) if stat.extra_tokens else stat.value_range)
    return low, high


def extract_bonuses(runeword: Optional[RuneWord]) -> RuneWordBonuses:
    ratings: Dict[Tuple[AttackTarget, AttackMode], RangeValue] = {}
    if runeword is not None:
        for stat in runeword.stats_of_type(StatType.ATTACK_RATING):
            if isinstance(stat, AttackRating):
                key = (stat.target, stat.mode)
                ratings[key] = ratings.get(key, ZERO) + stat.amount_range

    added_min, added_max = _damage_pair(runeword, "AddedDamage")
    elemental_min, elemental_max = _damage_pair(runeword, "ElementalDamage")
    return RuneWordBonuses(
        enhanced_damage=stat_values(runeword, "EnhancedDamage"),
        to_min_damage=sum_stat_values(runeword, "MinDamage"),
        to_max_damage=sum_stat_values(runeword, "MaxDamage"),
        added_min=added_min,
        added_max=added_max,
        elemental_min=elemental_min,
        elemental_max=elemental_max,
        damage_vs_undead=sum_stat_values(runeword, "DamageVsUndead"),
        damage_vs_demon=sum_stat_values(runeword, "DamageVsDemon"),
        attack_rating=ratings,
    )


_ENEMY_TARGETS = {
    EnemyClass.UNDEAD: AttackTarget.UNDEAD,
    EnemyClass.DEMON: AttackTarget.DEMON,
}


def _iron_golem_cell(weapon: WeaponBase, ethereal: bool, two_handed: bool, row: MonsterStatRow,
                     skill_level: int, character_level: int, bonuses: RuneWordBonuses, modifiers: ModifierSet,
                     difficulty: Difficulty, enemy: EnemyClass, scenario: Scenario) -> ScenarioCell:
    base_min, base_max = weapon.damage(ethereal)

    # Superior roll widens the top of the enhanced damage range
    ed_range = RangeValue(bonuses.enhanced_damage.min,
                          bonuses.enhanced_damage.max + SUPERIOR_ENHANCED_DAMAGE)
    ed = ed_range.pick(scenario)

    one_hand = 0 if two_handed else ONE_HAND_DAMAGE_BONUS[difficulty]
    phys_min = base_min * (1 + ed / 100) + bonuses.to_min_damage.pick(scenario) + one_hand
    phys_max = base_max * (1 + ed / 100) + bonuses.to_max_damage.pick(scenario) + one_hand

    if enemy == EnemyClass.UNDEAD:
        class_ed = bonuses.damage_vs_undead.pick(scenario)
    elif enemy == EnemyClass.DEMON:
        class_ed = bonuses.damage_vs_demon.pick(scenario)
    else:
        class_ed = 0

    skill_pct = gated_percent(skill_level, IRON_GOLEM.damage_pct_threshold, IRON_GOLEM.damage_pct_per_level)
    multiplier = ((1 + skill_pct / 100)
                  * (1 + (modifiers.damage_percent() + class_ed) / 100)
                  * CRIT_FACTOR)

    flat_min = bonuses.added_min.pick(scenario) + bonuses.elemental_min.pick(scenario)
    flat_max = bonuses.added_max.pick(scenario) + bonuses.elemental_max.pick(scenario)
    damage_min = int(phys_min * multiplier) + flat_min
    damage_max = int(phys_max * multiplier) + flat_max

    # Additive rating joins the base; percent rating stays a separate factor
    additive = bonuses.rating(AttackTarget.ALL, AttackMode.ADDITIVE).pick(scenario)
    percent = bonuses.rating(AttackTarget.ALL, AttackMode.PERCENT).pick(scenario)
    target = _ENEMY_TARGETS.get(enemy)
    if target is not None:
        additive += bonuses.rating(target, AttackMode.ADDITIVE).pick(scenario)
        percent += bonuses.rating(target, AttackMode.PERCENT).pick(scenario)

    character_ar = CHARACTER_LEVEL_AR[difficulty] * character_level
    base_ar = row.bonus(difficulty) + IRON_GOLEM.ar_per_level * skill_level + character_ar + additive
    attack_rating = int(base_ar * modifiers.attack_rating_multiplier * (1 + percent / 100))

    return ScenarioCell(damage_min=damage_min, damage_max=damage_max, attack_rating=attack_rating)


def calculate_iron_golem(
    row: Optional[MonsterStatRow],
    skill_level: int,
    weapon: Optional[WeaponBase],
    runeword: Optional[RuneWord] = None,
    mastery_level: int = 0,
    resist_level: int = 0,
    external_auras: Optional[Mapping[str, int]] = None,
    character_level: int = 0,
    ethereal: bool = False,
    fanaticism_resolver: FanaticismResolver = resolve_fanaticism_by_source,
    two_hand_categories: Optional[FrozenSet[str]] = None,
) -> Optional[IronGolemResult]:
    """
    Iron Golem built from a weapon, optionally carrying a rune word.

    Args:
        row: monster-stat row for the Iron Golem skill level
        skill_level: Iron Golem skill level
        weapon: base weapon the golem was made from
        runeword: rune word socketed in the weapon
        mastery_level: Golem Mastery level (percent life)
        resist_level: Summon Resist level
        external_auras: aura name → level from the party / skill tree
        character_level: necromancer level (adds attack rating)
        ethereal: whether the weapon is ethereal
        fanaticism_resolver: Fanaticism level/source rule
        two_hand_categories: categories without the one-hand bonus
            (default base_tables.TWO_HAND_CATEGORIES)

    Returns:
        IronGolemResult, or None when row/weapon are missing or the rune
        word cannot go into the weapon.
    """
    if row is None:
        return _missing_row(IRON_GOLEM, skill_level)
    if weapon is None:
        logger.warning("SummonCalcs: Iron Golem needs a base weapon")
        return None
    if runeword is not None:
        if not runeword.fits(weapon.category):
            logger.warning(f"SummonCalcs: {runeword.name} cannot be made in {weapon.category}")
            return None
        if runeword.socket_count > weapon.max_sockets:
            logger.warning(f"SummonCalcs: {runeword.name} needs {runeword.socket_count} sockets, "
                           f"{weapon.name} has {weapon.max_sockets}")
            return None

    ethereal = ethereal and weapon.ethereal_capable
    two_handed = weapon.is_two_handed(two_hand_categories)
    bonuses = extract_bonuses(runeword)
    modifiers = {
        scenario: aggregate_modifiers(external_auras, runeword, scenario, fanaticism_resolver)
        for scenario in SCENARIOS
    }

    scenarios: ScenarioMatrix = {}
    for difficulty in DIFFICULTIES:
        scenarios[difficulty] = {}
        for enemy in ENEMY_CLASSES:
            scenarios[difficulty][enemy] = {
                scenario: _iron_golem_cell(weapon, ethereal, two_handed, row, skill_level, character_level,
                                           bonuses, modifiers[scenario], difficulty, enemy, scenario)
                for scenario in SCENARIOS
            }

    # Defense and life don't depend on the enemy; use average rolls
    avg_mods = modifiers[Scenario.AVG]
    per_difficulty = {}
    for difficulty in DIFFICULTIES:
        life = summon_life(IRON_GOLEM, row, difficulty, mastery_level, 0, avg_mods)
        per_difficulty[difficulty] = DifficultyStats(
            attack_rating=scenarios[difficulty][EnemyClass.NORMAL][Scenario.AVG].attack_rating,
            defense=summon_defense(IRON_GOLEM, row, difficulty, skill_level, avg_mods),
            life=life,
            life_regen=summon_life_regen(IRON_GOLEM.regen_key, life),
        )

    return IronGolemResult(
        skill_level=skill_level,
        weapon=weapon.name,
        category=weapon.category,
        two_handed=two_handed,
        ethereal=ethereal,
        runeword=runeword.name if runeword else None,
        scenarios=scenarios,
        per_difficulty=per_difficulty,
        resistances=summon_resistances(resist_level, dict(IRON_GOLEM.intrinsic_resists)),
        fanaticism={
            s: (m.fanaticism_level, m.fanaticism_source.value) for s, m in modifiers.items()
        },
    )
