"""
Horadric - Shared Formulas
Pure functions used by the summon calculators plus the item-level,
affix-level and Magic Find calculators.
"""

import math
from typing import Callable, Dict, Optional, Sequence

# ─── Skill Level Bands ───────────────────────────
# Per-level increments change at these skill levels: 1-8, 9-16, 17-22, 23-28, 29+
BAND_STARTS = (1, 9, 17, 23, 29)

CRIT_CHANCE = 0.05
CRIT_MULTIPLIER = 2.0
# Average-damage inflation from critical hits, applied once to the final figure
CRIT_FACTOR = 1 + CRIT_CHANCE * CRIT_MULTIPLIER


def band_index(level: int) -> int:
    """Index into BAND_STARTS of the band containing this skill level."""
    index = 0
    for i, start in enumerate(BAND_STARTS):
        if level >= start:
            index = i
    return index


def banded_value(level: int, base: int, increments: Sequence[int]) -> int:
    """
    Value of a skill-level scaled stat.

    Starts at `base` for level 1 and adds the increment of the band each
    further level falls into. Levels below 1 yield 0.
    """
    if level < 1:
        return 0
    value = base
    for lvl in range(2, level + 1):
        value += increments[band_index(lvl)]
    return value


def gated_percent(level: int, threshold: int, per_level: int) -> int:
    """per_level × (level − threshold) above the threshold, else 0."""
    if level <= threshold:
        return 0
    return per_level * (level - threshold)


# ─── Resistances ─────────────────────────────────

RESIST_BASE = 20
RESIST_CAP = 75
ELEMENTAL_RESISTS = ("fire", "cold", "lightning", "poison")
OTHER_RESISTS = ("magic", "physical")


def summon_resist_bonus(level: int) -> int:
    """Diminishing-returns resistance from the summon resist skill, capped at 75."""
    if level <= 0:
        return 0
    scaled = 110 * level / (level + 6)
    return int(min(RESIST_BASE + (RESIST_CAP - RESIST_BASE) * scaled / 100, RESIST_CAP))


def summon_resistances(level: int, intrinsic: Optional[Dict[str, int]] = None) -> Dict[str, int]:
    """
    Resistances of a summon.

    The skill bonus applies to the four elements (capped at 75); magic and
    physical keep the summon's intrinsic values.
    """
    intrinsic = intrinsic or {}
    bonus = summon_resist_bonus(level)
    resists = {}
    for element in ELEMENTAL_RESISTS:
        resists[element] = min(intrinsic.get(element, 0) + bonus, RESIST_CAP)
    for element in OTHER_RESISTS:
        resists[element] = intrinsic.get(element, 0)
    return resists


# ─── Life ────────────────────────────────────────
# Skeleton Mage percent life: two published coefficients disagree and neither
# has been confirmed against the game. Both stay selectable by name.

def mage_life_fifty_per_level(level: int) -> int:
    return gated_percent(level, 3, 50)


def mage_life_ten_minus_21(level: int) -> int:
    if level <= 3:
        return 0
    return max(10 * level - 21, 0)


MAGE_LIFE_STRATEGIES: Dict[str, Callable[[int], int]] = {
    "fifty_per_level": mage_life_fifty_per_level,
    "ten_minus_21": mage_life_ten_minus_21,
}

FRAMES_PER_SECOND = 25
REGEN_DIVISOR = 4096

# Regeneration value per summon family (out of 4096 per frame)
SUMMON_REGEN_VALUES = {
    "clay": 3, "claygolem": 3, "cgolem": 3,
    "blood": 3, "bloodgolem": 3, "bgolem": 3,
    "iron": 3, "irongolem": 3, "igolem": 3,
    "skeleton": 4, "raiseskeleton": 4, "rskeleton": 4, "skeles": 4,
    "mage": 4, "skelemage": 4, "skeletonmage": 4, "necromage": 4,
}


def calculate_regen(regen_value: int, total_life: int) -> Dict[str, float]:
    per_frame = regen_value / REGEN_DIVISOR
    per_second = regen_value * FRAMES_PER_SECOND / REGEN_DIVISOR
    return {
        "percent_per_frame": round(per_frame, 2),
        "percent_per_second": round(per_second, 2),
        "life_per_frame": round(per_frame * total_life, 2),
        "life_per_second": round(per_second * total_life, 2),
    }


def summon_life_regen(summon_name: str, total_life: int) -> float:
    """Life regenerated per second; unknown summons regenerate nothing."""
    regen_value = SUMMON_REGEN_VALUES.get(summon_name.replace(" ", "").lower(), 0)
    return calculate_regen(regen_value, total_life)["life_per_second"]


# ─── Item & Affix Level ──────────────────────────

def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def calculate_item_level(clvl: Optional[int] = None, mlvl: Optional[int] = None,
                         ilvl: Optional[int] = None) -> Dict[str, int]:
    """
    Fill in the missing one of character, monster and item level.

    ilvl = round(clvl / 2 + mlvl / 2)

    Raises:
        ValueError: fewer or more than two values given
    """
    provided = sum(v is not None for v in (clvl, mlvl, ilvl))
    if provided < 2:
        raise ValueError("At least two values are required.")
    if provided == 3:
        raise ValueError("Leave one value empty to calculate it.")

    if ilvl is None:
        ilvl = _round_half_up(clvl / 2 + mlvl / 2)
    elif clvl is None:
        clvl = _round_half_up(ilvl * 2 - mlvl)
    else:
        mlvl = _round_half_up(ilvl * 2 - clvl)
    return {"clvl": clvl, "mlvl": mlvl, "ilvl": ilvl}


def _clamp_level(value: int) -> int:
    return min(max(value, 1), 99)


def _affix_threshold(qlvl: int) -> int:
    return 99 - qlvl // 2


def calculate_affix_level(ilvl: int, qlvl: int) -> int:
    """
    Affix level of a crafted item.

        if max(ilvl, qlvl) < 99 - qlvl/2:  alvl = max(ilvl, qlvl) - qlvl/2
        else:                              alvl = 2 × max(ilvl, qlvl) - 99

    Raises:
        ValueError: levels outside 1-99
    """
    for value in (ilvl, qlvl):
        if not isinstance(value, int) or not 1 <= value <= 99:
            raise ValueError("Values must be numbers between 1 and 99.")

    top = max(ilvl, qlvl)
    if top < _affix_threshold(qlvl):
        alvl = top - qlvl // 2
    else:
        alvl = 2 * top - 99
    return _clamp_level(alvl)


def apply_affix_formula(ilvl: Optional[int] = None, qlvl: Optional[int] = None,
                        alvl: Optional[int] = None) -> Dict[str, int]:
    """
    Given any two of ilvl, qlvl and alvl, solve for the third.

    Raises:
        ValueError: fewer or more than two values given
    """
    provided = sum(v is not None for v in (ilvl, qlvl, alvl))
    if provided < 2:
        raise ValueError("Provide at least two of ilvl, qlvl, or alvl.")
    if provided > 2:
        raise ValueError("Leave one parameter undefined to calculate it.")

    if alvl is None:
        alvl = calculate_affix_level(ilvl, qlvl)
    elif ilvl is None:
        candidate = alvl + qlvl // 2
        if candidate < _affix_threshold(qlvl):
            ilvl = max(candidate, qlvl)
        else:
            ilvl = max(math.ceil((alvl + 99) / 2), qlvl)
        ilvl = _clamp_level(ilvl)
    else:
        # Prefer the low-branch solution floor(qlvl/2) = ilvl - alvl
        candidate = max(math.ceil((alvl + 99 - 2 * ilvl) * 2), 1)
        low_branch = (ilvl - alvl) * 2
        if 0 < low_branch <= 99:
            candidate = low_branch
        qlvl = _clamp_level(candidate)
    return {"ilvl": ilvl, "qlvl": qlvl, "alvl": alvl}


# ─── Magic Find ──────────────────────────────────

# Diminishing-returns factor per item quality; magic items use raw MF
MF_FACTORS = {
    "unique": 250,
    "set": 500,
    "rare": 600,
}


def calculate_effective_mf(raw_mf) -> Optional[Dict[str, int]]:
    """
    Effective Magic Find per item quality.

        effective = floor(factor × mf / (factor + mf))

    Args:
        raw_mf: Magic Find from gear, as a number or numeric string

    Returns:
        {"unique", "set", "rare", "magic"} → percent, or None for negative
        or non-numeric input.
    """
    try:
        mf = int(raw_mf)
    except (TypeError, ValueError):
        return None
    if mf < 0:
        return None

    effective = {quality: factor * mf // (factor + mf) for quality, factor in MF_FACTORS.items()}
    effective["magic"] = mf
    return effective
