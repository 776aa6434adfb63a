"""
Horadric - Display Grouping
Turns result records into ordered (label, value) sections for a presenter.
No markup is produced here; labels and values are plain strings/numbers.
"""

import logging
from typing import Dict, List, Mapping, Sequence, Tuple, Union

from monster_stats import Difficulty
from range_value import Scenario
from runeword_parser import RuneWord
from summon_calcs import EnemyClass, IronGolemResult, SummonResult
from summon_formulas import ELEMENTAL_RESISTS, OTHER_RESISTS

logger = logging.getLogger(__name__)

Section = Tuple[str, List[Tuple[str, object]]]

# Stats matching any of these are already folded into the Iron Golem numbers
FOLDED_STAT_PATTERNS = ("resist", "enhanced", "life", "defense", "rating", "attribute", "mana")

DAMAGE_LABEL = "Damage"
ATTACK_RATING_LABEL = "Attack Rating (Norm/Night/Hell)"
DEFENSE_LABEL = "Defense (Norm/Night/Hell)"
LIFE_LABEL = "Life (Norm/Night/Hell)"
REGEN_LABEL = "Life Regen per Second (Norm/Night/Hell)"
# Iron Golem damage against normal enemies with average rolls
GOLEM_DAMAGE_LABEL = "Damage vs Normal, Avg Rolls (Norm/Night/Hell)"


def resist_label(element: str) -> str:
    return f"{element.capitalize()} Resist"


DEFAULT_SUMMON_SECTIONS: Dict[str, List[str]] = {
    "Damage & Attack Rating": [DAMAGE_LABEL, GOLEM_DAMAGE_LABEL, ATTACK_RATING_LABEL],
    "Life": [LIFE_LABEL, REGEN_LABEL],
    "Defenses": [DEFENSE_LABEL] + [resist_label(e) for e in ELEMENTAL_RESISTS + OTHER_RESISTS],
}


def group_sections(data: Mapping[str, object], key_map: Mapping[str, str],
                   sections: Mapping[str, Sequence[str]]) -> List[Section]:
    """
    Order label/value pairs into named sections.

    Args:
        data: key → value
        key_map: display label → key into `data`
        sections: section title → labels, in display order

    Returns:
        [(title, [(label, value), ...]), ...]. Labels missing from key_map
        are skipped; a section with none of its labels is kept empty.
    """
    grouped: List[Section] = []
    for title, labels in sections.items():
        rows = []
        for label in labels:
            key = key_map.get(label)
            if key is None:
                continue
            rows.append((label, data.get(key)))
        grouped.append((title, rows))
    return grouped


def _is_folded(label: str, key: str) -> bool:
    label, key = label.lower(), key.lower()
    return any(p in label or p in key for p in FOLDED_STAT_PATTERNS)


def runeword_specific_stats(runeword: RuneWord) -> List[Tuple[str, str]]:
    """(label, key) pairs of a rune word the golem calculation does not use."""
    if runeword is None:
        return []
    return [(label, key) for label, key in runeword.key_map.items() if not _is_folded(label, key)]


def _per_difficulty(values: Dict[Difficulty, object]) -> str:
    return "/".join(str(values[d]) for d in Difficulty)


def summon_fields(result: Union[SummonResult, IronGolemResult]) -> Tuple[Dict[str, object], Dict[str, str]]:
    """Flatten a summon result into (data, key_map) for group_sections."""
    per = result.per_difficulty
    data: Dict[str, object] = {
        "attack_rating": _per_difficulty({d: s.attack_rating for d, s in per.items()}),
        "defense": _per_difficulty({d: s.defense for d, s in per.items()}),
        "life": _per_difficulty({d: s.life for d, s in per.items()}),
        "life_regen": _per_difficulty({d: s.life_regen for d, s in per.items()}),
    }
    key_map = {
        ATTACK_RATING_LABEL: "attack_rating",
        DEFENSE_LABEL: "defense",
        LIFE_LABEL: "life",
        REGEN_LABEL: "life_regen",
    }

    if isinstance(result, SummonResult):
        data["damage"] = f"{result.damage_min}-{result.damage_max}"
        key_map[DAMAGE_LABEL] = "damage"
    else:
        cells = {d: result.cell(d, EnemyClass.NORMAL, Scenario.AVG) for d in Difficulty}
        data["damage"] = _per_difficulty({d: f"{c.damage_min}-{c.damage_max}" for d, c in cells.items()})
        key_map[GOLEM_DAMAGE_LABEL] = "damage"

    for element, value in result.resistances.items():
        key = f"resist_{element}"
        data[key] = value
        key_map[resist_label(element)] = key
    return data, key_map


def summon_sections(result: Union[SummonResult, IronGolemResult],
                    sections: Mapping[str, Sequence[str]] = None) -> List[Section]:
    data, key_map = summon_fields(result)
    return group_sections(data, key_map, sections or DEFAULT_SUMMON_SECTIONS)
