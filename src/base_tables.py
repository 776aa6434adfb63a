"""
Horadric - Base Item Tables
Parses the pipe-delimited weapon/armor base tables, the rune table and the
crafting recipe file.

Weapon row:  Name|Tier|QLvl|MinDmg|MaxDmg|Speed|Sockets|Range|Str|Dex|Lvl
Armor row:   Name|Tier|QLvl|MinDef|MaxDef|Sockets|Str|Lvl|SpeedPenalty
Rune row:    Number|Name|Creation|CombinesInto|Weapon|Armor|Shield|DropChance|ExpectedDrop

The first line of each table is a header and is skipped. Rows with fewer
than two fields are skipped; missing or malformed numbers become 0.
"""

import re
import logging
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional

from config import TWO_HAND_CATEGORIES

logger = logging.getLogger(__name__)

ETHEREAL_MULTIPLIER = 1.5
ETHEREAL_REQUIREMENT_REDUCTION = 10


def _int(parts: List[str], index: int) -> int:
    try:
        return int(float(parts[index]))
    except (IndexError, ValueError):
        return 0


def _float(parts: List[str], index: int) -> float:
    try:
        return float(parts[index])
    except (IndexError, ValueError):
        return 0.0


def _str(parts: List[str], index: int) -> str:
    return parts[index] if index < len(parts) else ""


def _table_rows(text: str, skip_header: bool = True):
    """Yield split rows of a pipe table, skipping header and junk lines."""
    lines = [l.strip() for l in (text or "").split("\n") if l.strip()]
    if skip_header:
        lines = lines[1:]
    for line in lines:
        parts = [p.strip() for p in line.split("|")]
        if len(parts) < 2:
            logger.debug(f"BaseTables: skipping malformed row {line!r}")
            continue
        yield parts


def is_ethereal_capable(category: str) -> bool:
    """Bow-type categories cannot roll ethereal."""
    return "bow" not in category.lower()


def _ethereal(value: int) -> int:
    return int(value * ETHEREAL_MULTIPLIER)


def _ethereal_requirement(value: int) -> int:
    return max(value - ETHEREAL_REQUIREMENT_REDUCTION, 0)


# ─── Weapons ─────────────────────────────────────

@dataclass(frozen=True)
class WeaponBase:
    name: str
    category: str
    tier: str = ""
    quality_level: int = 0
    min_damage: int = 0
    max_damage: int = 0
    speed: int = 0
    max_sockets: int = 0
    range: int = 0
    str_req: int = 0
    dex_req: int = 0
    level_req: int = 0

    @property
    def ethereal_capable(self) -> bool:
        return is_ethereal_capable(self.category)

    @property
    def two_handed(self) -> bool:
        return self.is_two_handed()

    def is_two_handed(self, categories: Optional[FrozenSet[str]] = None) -> bool:
        """Two-handed under `categories`, or under TWO_HAND_CATEGORIES when not given."""
        return self.category in (TWO_HAND_CATEGORIES if categories is None else categories)

    @property
    def avg_damage(self) -> float:
        return round((self.min_damage + self.max_damage) / 2, 2)

    def damage(self, ethereal: bool = False) -> tuple:
        """(min, max) base damage, ethereal-adjusted when the category allows it."""
        if ethereal and self.ethereal_capable:
            return _ethereal(self.min_damage), _ethereal(self.max_damage)
        return self.min_damage, self.max_damage

    def requirements(self, ethereal: bool = False) -> tuple:
        """(strength, dexterity) requirements."""
        if ethereal and self.ethereal_capable:
            return _ethereal_requirement(self.str_req), _ethereal_requirement(self.dex_req)
        return self.str_req, self.dex_req


def parse_weapon_table(text: str, category: str) -> Dict[str, WeaponBase]:
    weapons = {}
    for parts in _table_rows(text):
        weapon = WeaponBase(
            name=parts[0],
            category=category,
            tier=_str(parts, 1),
            quality_level=_int(parts, 2),
            min_damage=_int(parts, 3),
            max_damage=_int(parts, 4),
            speed=_int(parts, 5),
            max_sockets=_int(parts, 6),
            range=_int(parts, 7),
            str_req=_int(parts, 8),
            dex_req=_int(parts, 9),
            level_req=_int(parts, 10),
        )
        weapons[weapon.name] = weapon
    return weapons


# ─── Armor ───────────────────────────────────────

@dataclass(frozen=True)
class ArmorBase:
    name: str
    category: str
    tier: str = ""
    quality_level: int = 0
    min_defense: int = 0
    max_defense: int = 0
    max_sockets: int = 0
    str_req: int = 0
    level_req: int = 0
    speed_penalty: int = 0

    @property
    def ethereal_capable(self) -> bool:
        return is_ethereal_capable(self.category)

    def defense(self, ethereal: bool = False) -> tuple:
        if ethereal and self.ethereal_capable:
            return _ethereal(self.min_defense), _ethereal(self.max_defense)
        return self.min_defense, self.max_defense


def parse_armor_table(text: str, category: str) -> Dict[str, ArmorBase]:
    armors = {}
    for parts in _table_rows(text):
        armor = ArmorBase(
            name=parts[0],
            category=category,
            tier=_str(parts, 1),
            quality_level=_int(parts, 2),
            min_defense=_int(parts, 3),
            max_defense=_int(parts, 4),
            max_sockets=_int(parts, 5),
            str_req=_int(parts, 6),
            level_req=_int(parts, 7),
            speed_penalty=_int(parts, 8),
        )
        armors[armor.name] = armor
    return armors


# ─── Runes ───────────────────────────────────────

@dataclass(frozen=True)
class RuneInfo:
    number: int
    name: str
    creation: str = ""
    combines_into: str = ""
    weapon_effect: str = ""
    armor_effect: str = ""
    shield_effect: str = ""
    drop_chance: float = 0.0
    expected_drop: float = 0.0

    @property
    def display(self) -> str:
        return f"{self.name} (#{self.number})"


def parse_rune_table(text: str) -> List[RuneInfo]:
    runes = []
    lines = [l for l in (text or "").split("\n") if l.strip() and not l.startswith("RuneNumber")]
    for parts in _table_rows("\n".join(lines), skip_header=False):
        runes.append(RuneInfo(
            number=_int(parts, 0),
            name=parts[1],
            creation=_str(parts, 2),
            combines_into=_str(parts, 3),
            weapon_effect=_str(parts, 4),
            armor_effect=_str(parts, 5),
            shield_effect=_str(parts, 6),
            drop_chance=_float(parts, 7),
            expected_drop=_float(parts, 8),
        ))
    return runes


# ─── Crafting Recipes ────────────────────────────

_RECIPE_PAIR = re.compile(r"^\w+:\s*(.*?)\s*\|\s*(.*)$")


@dataclass
class CraftingRecipe:
    name: str
    category: str
    ingredients: List[str] = field(default_factory=list)
    preset_mods: Dict[str, str] = field(default_factory=dict)
    max_possible: Dict[str, str] = field(default_factory=dict)

    @property
    def item(self) -> str:
        return self.ingredients[0] if self.ingredients else ""

    @property
    def rune(self) -> str:
        return self.ingredients[2] if len(self.ingredients) > 2 else ""

    @property
    def misc(self) -> str:
        second = self.ingredients[1] if len(self.ingredients) > 1 else ""
        fourth = self.ingredients[3] if len(self.ingredients) > 3 else ""
        return f"{second} + {fourth}"

    def mod_summary(self) -> Dict[str, str]:
        """Preset mod ranges annotated with their crafted maximum."""
        summary = {}
        for mod, value in self.preset_mods.items():
            cap = self.max_possible.get(mod)
            summary[mod] = f"{value} (Max {cap})" if cap else value
        return summary


def parse_crafting_recipes(text: str, category: str) -> Dict[str, CraftingRecipe]:
    """Recipes are blank-line separated blocks of Name/Ingredients/PresetMod/MaxPossible lines."""
    recipes = {}
    for entry in re.split(r"\n\s*\n", text or ""):
        lines = [l.strip() for l in entry.strip().split("\n") if l.strip()]
        if not lines:
            continue
        recipe = CraftingRecipe(name="", category=category)
        for line in lines:
            if line.startswith("Name:"):
                recipe.name = line.split(":", 1)[1].strip()
            elif line.startswith("Ingredients:"):
                recipe.ingredients.extend(v.strip() for v in line.split(":", 1)[1].split("|"))
            elif line.startswith(("PresetMod:", "MaxPossible:")):
                m = _RECIPE_PAIR.match(line)
                if not m:
                    continue
                target = recipe.preset_mods if line.startswith("PresetMod:") else recipe.max_possible
                target[m.group(1).strip()] = m.group(2).strip()
        if recipe.name:
            recipes[recipe.name] = recipe
        else:
            logger.debug(f"BaseTables: crafting entry without a name in {category}")
    return recipes


def find_weapon(weapons: Dict[str, Dict[str, WeaponBase]], name: str,
                category: Optional[str] = None) -> Optional[WeaponBase]:
    """Look a weapon up by name, optionally within one category."""
    if category is not None:
        return weapons.get(category, {}).get(name)
    for table in weapons.values():
        if name in table:
            return table[name]
    return None
