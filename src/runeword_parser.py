"""
Horadric - Rune Word Parser
Splits rune word definition files into entries and assembles typed RuneWords.

File structure:
    Entry: Spirit
    ImageURL: https://example.com/spirit.png
    RuneOrder: Tal|Thul|Ort|Amn
    CompatibleItems: Swords|Shields
    Stat: Skill|All Skills|2
    Stat: FasterCastRate|25-35
    --------
    Entry: Insight
    ...

Each "Entry:" opens a new block. Blocks are parsed independently: a bad
block is logged and dropped, the rest of the file still loads.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional, Tuple

from config import CATEGORY_GROUPS
from range_value import RangeValue, ZERO
from stat_parser import GenericStat, ParsedStat, Stat, StatType, parse_stat_line

logger = logging.getLogger(__name__)

ENTRY_MARKER = "Entry:"
IMAGE_PREFIX = "ImageURL:"
RUNE_ORDER_PREFIX = "RuneOrder:"
COMPATIBLE_PREFIX = "CompatibleItems:"
STAT_PREFIX = "Stat:"

# Tokens with this suffix are group shorthands, not concrete categories
SHORTHAND_SUFFIX = "Weapons"


class RuneWordError(ValueError):
    """A rune word block that cannot be assembled."""


@dataclass(frozen=True)
class RuneWord:
    """Structured rune word data, immutable once assembled."""
    name: str
    image_url: str = ""
    rune_sequence: Tuple[str, ...] = ()
    compatible_item_categories: FrozenSet[str] = frozenset()
    stats: Tuple[Stat, ...] = ()
    key_map: Dict[str, str] = field(default_factory=dict, compare=False, hash=False)

    @property
    def socket_count(self) -> int:
        return len(self.rune_sequence)

    def stats_of_type(self, stat_type: StatType) -> List[Stat]:
        return [s for s in self.stats if s.type == stat_type]

    def fits(self, category: str) -> bool:
        return category in self.compatible_item_categories


# ─── Compatible Items ────────────────────────────

def expand_categories(tokens: List[str], groups: Optional[Dict[str, Tuple[str, ...]]] = None) -> FrozenSet[str]:
    """
    Expand shorthand groups ("All Weapons", "Melee Weapons", ...) into
    concrete categories. Other tokens are taken verbatim.

    Raises:
        RuneWordError: for a shorthand token that is not a known group
    """
    groups = CATEGORY_GROUPS if groups is None else groups
    categories = set()
    for token in tokens:
        if not token:
            continue
        if token in groups:
            categories.update(groups[token])
        elif token.endswith(SHORTHAND_SUFFIX):
            raise RuneWordError(f"unknown item group {token!r}")
        else:
            categories.add(token)
    return frozenset(categories)


def _split_pipes(value: str) -> List[str]:
    return [v.strip() for v in value.split("|") if v.strip()]


# ─── Assembly ────────────────────────────────────

def parse_entry(block: str, groups: Optional[Dict[str, Tuple[str, ...]]] = None) -> RuneWord:
    """
    Assemble one rune word from the text following an "Entry:" marker.

    Raises:
        RuneWordError: empty block or unknown compatible-item shorthand
    """
    lines = [l.strip() for l in block.split("\n") if l.strip()]
    if not lines:
        raise RuneWordError("empty entry")

    name = lines[0]
    image_url = ""
    runes: Tuple[str, ...] = ()
    categories: FrozenSet[str] = frozenset()
    stats: List[Stat] = []
    key_map: Dict[str, str] = {}

    for line in lines[1:]:
        if line.startswith(IMAGE_PREFIX):
            image_url = line[len(IMAGE_PREFIX):].strip()
        elif line.startswith(RUNE_ORDER_PREFIX):
            runes = tuple(_split_pipes(line[len(RUNE_ORDER_PREFIX):]))
        elif line.startswith(COMPATIBLE_PREFIX):
            categories = expand_categories(_split_pipes(line[len(COMPATIBLE_PREFIX):]), groups)
        elif line.startswith(STAT_PREFIX):
            parsed: ParsedStat = parse_stat_line(line)
            stats.append(parsed.stat)
            key_map[parsed.label] = parsed.key
        elif set(line) == {"-"}:
            continue  # visual separator
        else:
            logger.debug(f"RuneWordParser: {name}: ignoring line {line!r}")

    return RuneWord(
        name=name,
        image_url=image_url,
        rune_sequence=runes,
        compatible_item_categories=categories,
        stats=tuple(stats),
        key_map=key_map,
    )


def parse_runewords(text: str, groups: Optional[Dict[str, Tuple[str, ...]]] = None) -> Dict[str, RuneWord]:
    """
    Parse a full rune word file.

    Returns:
        Dict of name → RuneWord, in file order. A duplicated name keeps the
        last definition.
    """
    runewords: Dict[str, RuneWord] = {}
    if not text:
        return runewords

    blocks = text.split(ENTRY_MARKER)[1:]  # anything before the first marker is preamble
    for block in blocks:
        try:
            rw = parse_entry(block, groups)
        except RuneWordError as e:
            head = block.strip().split("\n", 1)[0][:40]
            logger.warning(f"RuneWordParser: skipping entry {head!r}: {e}")
            continue
        if rw.name in runewords:
            logger.debug(f"RuneWordParser: duplicate rune word {rw.name!r}, keeping last")
        runewords[rw.name] = rw

    logger.debug(f"RuneWordParser: assembled {len(runewords)}/{len(blocks)} rune words")
    return runewords


# ─── Stat Lookup ─────────────────────────────────

def _matches(stat: Stat, kind: str, subtype: Optional[str]) -> bool:
    if not isinstance(stat, GenericStat):
        return False
    if stat.kind.lower() != kind.lower():
        return False
    return subtype is None or (stat.subtype or "").lower() == subtype.lower()


def stat_values(runeword: Optional[RuneWord], kind: str, subtype: Optional[str] = None) -> RangeValue:
    """First generic stat of this kind (and subtype) as a RangeValue, else 0-0."""
    if runeword is None:
        return ZERO
    for stat in runeword.stats:
        if _matches(stat, kind, subtype) and stat.value_range is not None:
            return stat.value_range
    return ZERO


def sum_stat_values(runeword: Optional[RuneWord], kind: str, subtype: Optional[str] = None) -> RangeValue:
    """Sum of every generic stat of this kind (and subtype)."""
    total = ZERO
    if runeword is None:
        return total
    for stat in runeword.stats:
        if _matches(stat, kind, subtype) and stat.value_range is not None:
            total = total + stat.value_range
    return total
