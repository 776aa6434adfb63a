"""
Horadric - Configuration
All tunable constants in one place.
"""

import os
from pathlib import Path

from dotenv import load_dotenv
load_dotenv()

from bundle_paths import get_resource

# ─────────────────────────────────────────────
# Version
# ─────────────────────────────────────────────
_version_file = get_resource("resources/VERSION")
APP_VERSION = _version_file.read_text().strip() if _version_file.exists() else "dev"

# ─────────────────────────────────────────────
# Source Data
# ─────────────────────────────────────────────
# Either a local directory or an http(s):// base URL holding the text tables.
DATA_SOURCE = os.environ.get("HORADRIC_DATA_SOURCE", "") or str(get_resource("resources/assets"))

# Rune word definitions, one file per item family
RUNEWORD_FILES = [
    "RuneWords/Weapons.txt",
    "RuneWords/Armor.txt",
]

# Weapon base tables, category name is the file stem
WEAPON_FILES = [
    "WeaponStats/Axes.txt",
    "WeaponStats/2HAxes.txt",
    "WeaponStats/Polearms.txt",
    "WeaponStats/Swords.txt",
    "WeaponStats/2HSwords.txt",
    "WeaponStats/Maces.txt",
    "WeaponStats/2HMaces.txt",
    "WeaponStats/2HSpears.txt",
    "WeaponStats/Bows.txt",
]

ARMOR_FILES = [
    "ArmorStats/BodyArmors.txt",
    "ArmorStats/Boots.txt",
]

MONSTER_STAT_FILE = "MonsterStats/MonLvl.txt"
RUNE_INFO_FILE = "Runes/RuneInfo.txt"

CRAFTING_FILES = [
    "Crafting/BloodRecipes.txt",
]

# ─────────────────────────────────────────────
# Remote Fetching
# ─────────────────────────────────────────────
REQUEST_TIMEOUT = 15  # seconds
USER_AGENT = f"Horadric/{APP_VERSION}"

# Local copies of remotely fetched tables
CACHE_DIR = Path(
    os.environ.get("HORADRIC_CACHE_DIR", "")
    or Path(os.path.expanduser("~")) / ".horadric" / "cache"
)
CACHE_TTL = 7 * 86400  # 7 days

# ─────────────────────────────────────────────
# Item Categories
# ─────────────────────────────────────────────
MELEE_WEAPON_CATEGORIES = (
    "Axes", "2HAxes", "Polearms",
    "Swords", "2HSwords",
    "Maces", "2HMaces",
    "2HSpears",
)

RANGED_WEAPON_CATEGORIES = (
    "Bows",
)

# Shorthand tokens accepted in CompatibleItems: lines
CATEGORY_GROUPS = {
    "All Weapons": MELEE_WEAPON_CATEGORIES + RANGED_WEAPON_CATEGORIES,
    "Melee Weapons": MELEE_WEAPON_CATEGORIES,
    "Ranged Weapons": RANGED_WEAPON_CATEGORIES,
}

TWO_HAND_CATEGORIES = frozenset({
    "2HAxes", "2HSwords", "2HMaces", "2HSpears",
    "Polearms", "Bows",
})

# ─────────────────────────────────────────────
# Formula Strategies
# ─────────────────────────────────────────────
# Skeleton Mage percent-life formula: "fifty_per_level" or "ten_minus_21"
MAGE_LIFE_STRATEGY = "fifty_per_level"

# Fanaticism source resolution: "by_source" or "always_ally"
FANATICISM_RESOLVER = "by_source"

# ─────────────────────────────────────────────
# Logging
# ─────────────────────────────────────────────
LOG_LEVEL = os.environ.get("HORADRIC_LOG_LEVEL", "INFO")
LOG_FILE = Path(os.path.expanduser("~")) / ".horadric" / "horadric.log"
