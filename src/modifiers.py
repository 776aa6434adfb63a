"""
Horadric - Aura Modifiers
Resolves the effective level of every aura that touches a summon and turns
those levels into percent bonuses.

Auras come from two independent places:
    external  — levels typed in by the user (party members, own skill tree)
    item      — an Aura stat on the rune word the summon is holding

Most auras simply take the higher of the two. Fanaticism also records who
the aura belongs to: when the rune word wins the summon is the aura's
"user" and gets the full damage bonus; otherwise it is an "ally" and gets
half. The whole rule lives in one resolver so it can be swapped out.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Mapping, Optional, Tuple

from range_value import RangeValue, Scenario, ZERO
from runeword_parser import RuneWord
from stat_parser import Aura, StatType

logger = logging.getLogger(__name__)

MIGHT = "Might"
CONCENTRATION = "Concentration"
FANATICISM = "Fanaticism"
HEART_OF_WOLVERINE = "HeartOfWolverine"
BATTLE_ORDERS = "BattleOrders"
OAK_SAGE = "OakSage"
DEFIANCE = "Defiance"
SHOUT = "Shout"

AURA_NAMES = (
    MIGHT, CONCENTRATION, FANATICISM, HEART_OF_WOLVERINE,
    BATTLE_ORDERS, OAK_SAGE, DEFIANCE, SHOUT,
)

# Lowercased, space-free spelling → canonical name
_AURA_ALIASES = {
    "might": MIGHT,
    "concentration": CONCENTRATION,
    "fanaticism": FANATICISM,
    "heartofwolverine": HEART_OF_WOLVERINE,
    "wolverine": HEART_OF_WOLVERINE,
    "hwolverine": HEART_OF_WOLVERINE,
    "battleorders": BATTLE_ORDERS,
    "bo": BATTLE_ORDERS,
    "oaksage": OAK_SAGE,
    "heartofoaksage": OAK_SAGE,
    "hoaksage": OAK_SAGE,
    "defiance": DEFIANCE,
    "shout": SHOUT,
}


def canonical_aura(name: str) -> Optional[str]:
    """Map free-form aura spellings ("Heart of Wolverine") to canonical names."""
    if not name:
        return None
    return _AURA_ALIASES.get(name.replace(" ", "").replace("_", "").lower())


class AuraSource(str, Enum):
    USER = "user"
    ALLY = "ally"


# ─── Aura Percent Formulas ───────────────────────
# (base, per_level): bonus = base + per_level × L for L > 0, else 0

DAMAGE_AURAS = {
    MIGHT: (30, 10),
    CONCENTRATION: (45, 15),
    FANATICISM: (40, 10),
    HEART_OF_WOLVERINE: (13, 7),
}

ATTACK_RATING_AURAS = {
    FANATICISM: (35, 5),
    HEART_OF_WOLVERINE: (25, 5),
}

DEFENSE_AURAS = {
    DEFIANCE: (60, 10),
    SHOUT: (90, 10),
}

LIFE_AURAS = {
    BATTLE_ORDERS: (32, 3),
    OAK_SAGE: (25, 5),
}

ALLY_FANATICISM_DAMAGE_FACTOR = 0.5


def linear_bonus(level: int, base: int, per_level: int) -> int:
    if level <= 0:
        return 0
    return base + per_level * level


# ─── Fanaticism Resolution ───────────────────────

FanaticismResolver = Callable[[int, int], Tuple[int, AuraSource]]


def resolve_fanaticism_by_source(runeword_level: int, external_level: int) -> Tuple[int, AuraSource]:
    """Keep the larger level; the summon is the user only if the rune word won."""
    if runeword_level > external_level:
        return runeword_level, AuraSource.USER
    return external_level, AuraSource.ALLY


def resolve_fanaticism_always_ally(runeword_level: int, external_level: int) -> Tuple[int, AuraSource]:
    """Older rule: larger level wins, damage is always halved."""
    return max(runeword_level, external_level), AuraSource.ALLY


FANATICISM_RESOLVERS: Dict[str, FanaticismResolver] = {
    "by_source": resolve_fanaticism_by_source,
    "always_ally": resolve_fanaticism_always_ally,
}


def get_fanaticism_resolver(name: str) -> FanaticismResolver:
    resolver = FANATICISM_RESOLVERS.get(name)
    if resolver is None:
        logger.warning(f"Modifiers: unknown fanaticism resolver {name!r}, using by_source")
        return resolve_fanaticism_by_source
    return resolver


# ─── Modifier Set ────────────────────────────────

@dataclass(frozen=True)
class ModifierSet:
    """Resolved aura levels for one calculation (one scenario)."""
    levels: Dict[str, int] = field(default_factory=dict)
    fanaticism_level: int = 0
    fanaticism_source: AuraSource = AuraSource.ALLY

    def level(self, aura: str) -> int:
        if aura == FANATICISM:
            return self.fanaticism_level
        return self.levels.get(aura, 0)

    def _sum(self, table: Mapping[str, Tuple[int, int]]) -> int:
        return sum(linear_bonus(self.level(aura), *coeffs) for aura, coeffs in table.items())

    def damage_percent(self) -> float:
        total = 0.0
        for aura, coeffs in DAMAGE_AURAS.items():
            bonus = linear_bonus(self.level(aura), *coeffs)
            if aura == FANATICISM and self.fanaticism_source == AuraSource.ALLY:
                bonus *= ALLY_FANATICISM_DAMAGE_FACTOR
            total += bonus
        return total

    def attack_rating_percent(self) -> int:
        return self._sum(ATTACK_RATING_AURAS)

    def defense_percent(self) -> int:
        return self._sum(DEFENSE_AURAS)

    def life_percent(self) -> int:
        return self._sum(LIFE_AURAS)

    @property
    def damage_multiplier(self) -> float:
        return 1 + self.damage_percent() / 100

    @property
    def attack_rating_multiplier(self) -> float:
        return 1 + self.attack_rating_percent() / 100


NO_MODIFIERS = ModifierSet()


def runeword_auras(runeword: Optional[RuneWord]) -> Dict[str, RangeValue]:
    """Aura levels granted by a rune word, keyed by canonical name."""
    granted: Dict[str, RangeValue] = {}
    if runeword is None:
        return granted
    for stat in runeword.stats_of_type(StatType.AURA):
        if not isinstance(stat, Aura):
            continue
        name = canonical_aura(stat.aura_name)
        if name is None:
            logger.debug(f"Modifiers: {runeword.name} aura {stat.aura_name!r} does not affect summons")
            continue
        granted[name] = stat.level_range
    return granted


def normalize_levels(external: Optional[Mapping[str, int]]) -> Dict[str, int]:
    """Canonicalise user-supplied aura names; unknown names are dropped."""
    levels: Dict[str, int] = {}
    for raw_name, level in (external or {}).items():
        name = canonical_aura(raw_name)
        if name is None:
            logger.debug(f"Modifiers: ignoring unknown aura {raw_name!r}")
            continue
        levels[name] = max(levels.get(name, 0), int(level or 0))
    return levels


def aggregate_modifiers(
    external: Optional[Mapping[str, int]] = None,
    runeword: Optional[RuneWord] = None,
    scenario: Scenario = Scenario.AVG,
    fanaticism_resolver: FanaticismResolver = resolve_fanaticism_by_source,
) -> ModifierSet:
    """
    Combine external aura levels with rune-word auras for one scenario.

    Args:
        external: aura name → level typed in by the user
        runeword: rune word held by the summon, if any
        scenario: which end of rune-word level ranges to use
        fanaticism_resolver: decides Fanaticism level and source

    Returns:
        ModifierSet with effective levels for every known aura
    """
    external_levels = normalize_levels(external)
    granted = runeword_auras(runeword)

    levels: Dict[str, int] = {}
    for aura in AURA_NAMES:
        if aura == FANATICISM:
            continue
        item_level = granted.get(aura, ZERO).pick(scenario)
        levels[aura] = max(item_level, external_levels.get(aura, 0))

    fana_level, fana_source = fanaticism_resolver(
        granted.get(FANATICISM, ZERO).pick(scenario),
        external_levels.get(FANATICISM, 0),
    )

    return ModifierSet(levels=levels, fanaticism_level=fana_level, fanaticism_source=fana_source)
