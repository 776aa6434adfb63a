"""
Diablo II game configuration factory.

Creates a CalcConfig populated from config.py.
"""

from pathlib import Path
from typing import Optional

from core.calc_config import CalcConfig


def create_d2_config(
    data_source: Optional[str] = None,
    cache_dir: Optional[Path] = None,
    mage_life_strategy: Optional[str] = None,
    fanaticism_resolver: Optional[str] = None,
) -> CalcConfig:
    """Create a CalcConfig for Diablo II.

    Args:
        data_source: Override source directory/URL. Defaults to config.DATA_SOURCE.
        cache_dir: Override cache directory. Defaults to config.CACHE_DIR.
        mage_life_strategy: Override config.MAGE_LIFE_STRATEGY.
        fanaticism_resolver: Override config.FANATICISM_RESOLVER.

    Returns:
        Fully populated CalcConfig.
    """
    from config import (
        DATA_SOURCE,
        CACHE_DIR,
        CACHE_TTL,
        RUNEWORD_FILES,
        WEAPON_FILES,
        ARMOR_FILES,
        MONSTER_STAT_FILE,
        RUNE_INFO_FILE,
        CRAFTING_FILES,
        CATEGORY_GROUPS,
        TWO_HAND_CATEGORIES,
        MAGE_LIFE_STRATEGY,
        FANATICISM_RESOLVER,
    )

    return CalcConfig(
        game_id="d2",
        data_source=data_source or DATA_SOURCE,
        cache_dir=cache_dir or CACHE_DIR,
        cache_ttl=CACHE_TTL,
        runeword_files=list(RUNEWORD_FILES),
        weapon_files=list(WEAPON_FILES),
        armor_files=list(ARMOR_FILES),
        monster_stat_file=MONSTER_STAT_FILE,
        rune_info_file=RUNE_INFO_FILE,
        crafting_files=list(CRAFTING_FILES),
        category_groups=dict(CATEGORY_GROUPS),
        two_hand_categories=frozenset(TWO_HAND_CATEGORIES),
        mage_life_strategy=mage_life_strategy or MAGE_LIFE_STRATEGY,
        fanaticism_resolver=fanaticism_resolver or FANATICISM_RESOLVER,
    )
