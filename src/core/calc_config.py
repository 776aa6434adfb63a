"""
CalcConfig — configuration dataclass for the summon engine.

Every value the engine needs is a field here. Consumers build one (via a
factory like games.d2.create_d2_config) and pass it to SummonEngine, which
hands the values to the loaders and calculators.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, FrozenSet, List, Tuple


@dataclass
class CalcConfig:
    """Complete configuration for one game's calculator."""

    # ── Identity ────────────────────────────────────────────
    game_id: str                          # e.g. "d2"

    # ── Sources ─────────────────────────────────────────────
    data_source: str                      # local directory or http(s):// base URL
    cache_dir: Path                       # disk cache for remote tables
    cache_ttl: int = 7 * 86400            # seconds
    runeword_files: List[str] = field(default_factory=list)
    weapon_files: List[str] = field(default_factory=list)
    armor_files: List[str] = field(default_factory=list)
    monster_stat_file: str = ""
    rune_info_file: str = ""
    crafting_files: List[str] = field(default_factory=list)

    # ── Item classification ─────────────────────────────────
    # Empty means the defaults in config.py
    category_groups: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    two_hand_categories: FrozenSet[str] = field(default_factory=frozenset)

    # ── Formula strategies ──────────────────────────────────
    mage_life_strategy: str = "fifty_per_level"
    fanaticism_resolver: str = "by_source"
