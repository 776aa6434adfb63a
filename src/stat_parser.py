"""
Horadric - Stat Line Parser
Turns one "Stat:" line of a rune word definition into a typed stat record.

Each line is pipe-separated; the first field picks the matcher:

    Stat: ChanceToCast|20|15|Chain Lightning|OnStriking
    Stat: Aura|Fanaticism|12-15
    Stat: Skill|Raise Skeleton|1-3|Necromancer
    Stat: Charges|Teleport|1|20
    Stat: AfterEachKill|Life|5-10|Demon
    Stat: AttackRating|Undead|Percent|50
    Stat: EnhancedDamage|200-240            (anything else → generic)

Matching never raises. A specialised matcher that cannot make sense of its
fields hands the line to the generic matcher, so every input produces
exactly one stat plus the (label, key) pair used by the presentation layer.
"""

import re
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, ClassVar, List, Optional, Tuple, Union

from range_value import RangeValue, parse_range, is_numeric_token

logger = logging.getLogger(__name__)

STAT_PREFIX = "Stat:"


class StatType(str, Enum):
    CHANCE_TO_CAST = "ChanceToCast"
    AURA = "Aura"
    SKILL = "Skill"
    CHARGES = "Charges"
    AFTER_EACH_KILL = "AfterEachKill"
    ATTACK_RATING = "AttackRating"
    GENERIC = "Generic"


class AttackTarget(str, Enum):
    ALL = "All"
    DEMON = "Demon"
    UNDEAD = "Undead"


class AttackMode(str, Enum):
    ADDITIVE = "Additive"
    PERCENT = "Percent"


# ─── Stat Variants ───────────────────────────────

@dataclass(frozen=True)
class ChanceToCast:
    skill: str
    level_range: RangeValue
    chance_percent: int
    trigger: str
    type: ClassVar[StatType] = StatType.CHANCE_TO_CAST


@dataclass(frozen=True)
class Aura:
    aura_name: str
    level_range: RangeValue
    type: ClassVar[StatType] = StatType.AURA


@dataclass(frozen=True)
class Skill:
    skill_name: str
    level_range: RangeValue
    class_restriction: Optional[str] = None
    type: ClassVar[StatType] = StatType.SKILL


@dataclass(frozen=True)
class Charges:
    skill_name: str
    level_range: RangeValue
    charge_count: int
    type: ClassVar[StatType] = StatType.CHARGES


@dataclass(frozen=True)
class AfterEachKill:
    resource: str
    kill_target: str
    amount_range: RangeValue
    type: ClassVar[StatType] = StatType.AFTER_EACH_KILL


@dataclass(frozen=True)
class AttackRating:
    target: AttackTarget
    mode: AttackMode
    amount_range: RangeValue
    type: ClassVar[StatType] = StatType.ATTACK_RATING


@dataclass(frozen=True)
class GenericStat:
    kind: str
    subtype: Optional[str] = None
    value_range: Optional[RangeValue] = None
    extra_tokens: Tuple[str, ...] = ()
    type: ClassVar[StatType] = StatType.GENERIC


Stat = Union[ChanceToCast, Aura, Skill, Charges, AfterEachKill, AttackRating, GenericStat]


@dataclass(frozen=True)
class ParsedStat:
    """A stat plus its presentation metadata (display label → internal key)."""
    stat: Stat
    label: str
    key: str


# ─── Helpers ─────────────────────────────────────

_CAMEL_SPLIT = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def _humanize(token: str) -> str:
    """'OnStriking' → 'on striking', 'DamageVsUndead' → 'damage vs undead'."""
    return _CAMEL_SPLIT.sub(" ", token).lower().strip()


def _key_part(token: str) -> str:
    return re.sub(r"[^A-Za-z0-9]", "", token)


def _normalize_token(token: str) -> str:
    return token.replace(" ", "").lower()


def _field(fields: List[str], index: int) -> str:
    return fields[index] if index < len(fields) else ""


def _require(value: str, what: str) -> str:
    if not value:
        raise ValueError(f"missing {what}")
    return value


# ─── Specialised Matchers ────────────────────────
# Each takes the fields after the leading token.

def _match_chance_to_cast(fields: List[str]) -> ParsedStat:
    chance = parse_range(_require(_field(fields, 0), "chance")).avg
    level = parse_range(_field(fields, 1))
    skill = _require(_field(fields, 2), "skill")
    trigger = _field(fields, 3) or "OnStriking"
    stat = ChanceToCast(skill=skill, level_range=level, chance_percent=chance, trigger=trigger)
    label = f"{chance}% Chance to cast level {level} {skill} {_humanize(trigger)}"
    return ParsedStat(stat, label, f"ChanceToCast_{_key_part(skill)}_{_key_part(trigger)}")


def _match_aura(fields: List[str]) -> ParsedStat:
    name = _require(_field(fields, 0), "aura name")
    level = parse_range(_field(fields, 1))
    stat = Aura(aura_name=name, level_range=level)
    return ParsedStat(stat, f"Level {level} {name} Aura When Equipped", f"Aura_{_key_part(name)}")


def _match_skill(fields: List[str]) -> ParsedStat:
    name = _require(_field(fields, 0), "skill name")
    level = parse_range(_field(fields, 1))
    restriction = _field(fields, 2) or None
    stat = Skill(skill_name=name, level_range=level, class_restriction=restriction)
    label = f"+{level} to {name}"
    if restriction:
        label += f" ({restriction} Only)"
    return ParsedStat(stat, label, f"Skill_{_key_part(name)}")


def _match_charges(fields: List[str]) -> ParsedStat:
    name = _require(_field(fields, 0), "skill name")
    level = parse_range(_field(fields, 1))
    count = parse_range(_field(fields, 2)).max
    stat = Charges(skill_name=name, level_range=level, charge_count=count)
    return ParsedStat(stat, f"Level {level} {name} ({count} Charges)", f"Charges_{_key_part(name)}")


def _match_after_each_kill(fields: List[str]) -> ParsedStat:
    resource = _require(_field(fields, 0), "resource")
    amount = parse_range(_field(fields, 1))
    target = _field(fields, 2) or "All"
    stat = AfterEachKill(resource=resource, kill_target=target, amount_range=amount)
    if target == "All":
        label = f"+{amount} to {resource} after each Kill"
        key = f"{_key_part(resource)}AfterEachKill"
    else:
        label = f"+{amount} to {resource} after each {target} Kill"
        key = f"{_key_part(resource)}AfterEach{_key_part(target)}Kill"
    return ParsedStat(stat, label, key)


_TARGET_ALIASES = {
    "all": AttackTarget.ALL,
    "demon": AttackTarget.DEMON,
    "demons": AttackTarget.DEMON,
    "undead": AttackTarget.UNDEAD,
}

_MODE_ALIASES = {
    "additive": AttackMode.ADDITIVE,
    "flat": AttackMode.ADDITIVE,
    "percent": AttackMode.PERCENT,
    "%": AttackMode.PERCENT,
}


def _match_attack_rating(fields: List[str]) -> ParsedStat:
    target = _TARGET_ALIASES.get(_normalize_token(_field(fields, 0)))
    mode = _MODE_ALIASES.get(_normalize_token(_field(fields, 1)))
    if target is None or mode is None:
        raise ValueError(f"unknown attack rating target/mode {fields[:2]}")
    amount = parse_range(_field(fields, 2))
    stat = AttackRating(target=target, mode=mode, amount_range=amount)

    if mode == AttackMode.PERCENT:
        label = f"{amount}% Bonus to Attack Rating"
    else:
        label = f"+{amount} to Attack Rating"
    if target == AttackTarget.DEMON:
        label += " against Demons"
    elif target == AttackTarget.UNDEAD:
        label += " against Undead"
    return ParsedStat(stat, label, f"AttackRating{mode.value}{target.value}")


# ─── Generic Fallback ────────────────────────────

def _match_generic(fields: List[str]) -> ParsedStat:
    """Positional split: kind | subtype-or-value | value | extra...

    The second field is read as the value when it looks numeric, so both
    "EnhancedDamage|200-240" and "ElementalDamage|Fire|15|45" work.
    """
    kind = _field(fields, 0) or "Unknown"
    rest = fields[1:]
    subtype = None
    if rest and not is_numeric_token(rest[0]):
        subtype = rest[0] or None
        rest = rest[1:]
    value = parse_range(rest[0]) if rest else None
    extra = tuple(rest[1:])

    stat = GenericStat(kind=kind, subtype=subtype, value_range=value, extra_tokens=extra)

    parts = [_humanize(kind).title()]
    if subtype:
        parts.append(subtype)
    label = " ".join(parts)
    if value is not None:
        label += f": {value}"
        if extra:
            label += " to " + " ".join(extra)
    key = _key_part(kind) + (_key_part(subtype) if subtype else "")
    return ParsedStat(stat, label, key or "Unknown")


# Priority order matters: first matching leading token wins
MATCHERS: List[Tuple[str, Callable[[List[str]], ParsedStat]]] = [
    ("chancetocast", _match_chance_to_cast),
    ("aura", _match_aura),
    ("skill", _match_skill),
    ("charges", _match_charges),
    ("aftereachkill", _match_after_each_kill),
    ("attackrating", _match_attack_rating),
]


def split_fields(line: str) -> List[str]:
    text = line.strip() if line else ""
    if text.startswith(STAT_PREFIX):
        text = text[len(STAT_PREFIX):]
    return [f.strip() for f in text.split("|")]


def parse_stat_line(line: str) -> ParsedStat:
    """
    Parse one stat line into exactly one ParsedStat.

    Args:
        line: raw text, with or without the leading "Stat:" marker

    Returns:
        ParsedStat — a specialised variant when the leading token is known,
        otherwise GenericStat. Never raises.
    """
    fields = split_fields(line)
    lead = _normalize_token(fields[0]) if fields else ""

    for token, matcher in MATCHERS:
        if lead != token:
            continue
        try:
            return matcher(fields[1:])
        except ValueError as e:
            logger.debug(f"StatParser: {fields[0]!r} matcher rejected {line!r}: {e}")
        break

    return _match_generic(fields)
