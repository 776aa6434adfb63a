"""
Horadric - Monster Stat Table
Level-indexed per-difficulty bonuses that summons inherit from their
controlling skill level.

Table format (whitespace-delimited, one row per skill level):
    level normal nightmare hell
    1     2      102       202
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class Difficulty(str, Enum):
    NORMAL = "Normal"
    NIGHTMARE = "Nightmare"
    HELL = "Hell"


@dataclass(frozen=True)
class MonsterStatRow:
    level: int
    normal: int
    nightmare: int
    hell: int

    def bonus(self, difficulty: Difficulty) -> int:
        if difficulty == Difficulty.NIGHTMARE:
            return self.nightmare
        if difficulty == Difficulty.HELL:
            return self.hell
        return self.normal


class MonsterStatTable:
    """Rows keyed by skill level. Missing levels resolve to None."""

    def __init__(self, rows: Optional[Dict[int, MonsterStatRow]] = None):
        self._rows: Dict[int, MonsterStatRow] = dict(rows or {})

    def __len__(self) -> int:
        return len(self._rows)

    def __contains__(self, level: int) -> bool:
        return level in self._rows

    def row(self, level: int) -> Optional[MonsterStatRow]:
        found = self._rows.get(level)
        if found is None:
            logger.warning(f"MonsterStats: no row for skill level {level}")
        return found


def parse_monster_stats(text: str) -> MonsterStatTable:
    """Parse the whitespace table. Non-numeric lines (headers, comments) are skipped."""
    rows = {}
    for line in (text or "").split("\n"):
        parts = line.split()
        if len(parts) < 2:
            continue
        try:
            values = [int(p) for p in parts[:4]]
        except ValueError:
            logger.debug(f"MonsterStats: skipping non-numeric row {line.strip()!r}")
            continue
        values += [0] * (4 - len(values))
        level, normal, nightmare, hell = values
        rows[level] = MonsterStatRow(level, normal, nightmare, hell)
    return MonsterStatTable(rows)
