"""
Horadric - Range Values
Parses scalar or "min-max" tokens from the source tables.

Every numeric field in a rune word definition can be a bare integer ("7")
or a roll range ("10-20"). Malformed tokens collapse to 0-0 so a single bad
row never takes down a calculation.
"""

import re
from dataclasses import dataclass
from enum import Enum


class Scenario(str, Enum):
    """Which end of a rolled range to assume."""
    WORST = "worst"
    AVG = "avg"
    BEST = "best"


# Optional sign, digits, optional trailing '%'
_NUMBER = r"[+\-]?\d+%?"
RANGE_PATTERN = re.compile(rf"^\s*({_NUMBER})\s*-\s*({_NUMBER})\s*$")
SCALAR_PATTERN = re.compile(rf"^\s*({_NUMBER})\s*$")


@dataclass(frozen=True)
class RangeValue:
    min: int = 0
    max: int = 0

    @property
    def avg(self) -> int:
        # floor division keeps negative ranges consistent with math.floor
        return (self.min + self.max) // 2

    def pick(self, scenario: Scenario) -> int:
        if scenario == Scenario.WORST:
            return self.min
        if scenario == Scenario.BEST:
            return self.max
        return self.avg

    def __add__(self, other: "RangeValue") -> "RangeValue":
        return RangeValue(self.min + other.min, self.max + other.max)

    def as_dict(self) -> dict:
        return {"min": self.min, "max": self.max, "avg": self.avg}

    def __str__(self) -> str:
        if self.min == self.max:
            return str(self.min)
        return f"{self.min}-{self.max}"


ZERO = RangeValue(0, 0)


def _to_int(token: str) -> int:
    return int(token.rstrip("%"))


def parse_range(token) -> RangeValue:
    """
    Parse "10-20", "7", "+15%" or "-5--1" into a RangeValue.

    Returns RangeValue(0, 0) for empty or non-numeric input; never raises.
    """
    if token is None:
        return ZERO
    text = str(token).strip()
    if not text:
        return ZERO

    m = RANGE_PATTERN.match(text)
    if m:
        return RangeValue(_to_int(m.group(1)), _to_int(m.group(2)))

    m = SCALAR_PATTERN.match(text)
    if m:
        value = _to_int(m.group(1))
        return RangeValue(value, value)

    return ZERO


def is_numeric_token(token: str) -> bool:
    """True if the token looks like a scalar or range value."""
    if not token:
        return False
    text = token.strip()
    return bool(RANGE_PATTERN.match(text) or SCALAR_PATTERN.match(text))
