"""
SummonEngine — facade over the data cache and the summon calculators.

Single entry point wrapping GameDataCache, the modifier aggregator and the
four calculators. Consumers pass a CalcConfig; the engine resolves names
(rune words, weapons, strategies) and returns plain result records.

Usage:
    from core import SummonEngine
    from games.d2 import create_d2_config

    engine = SummonEngine(create_d2_config())
    engine.initialize()
    golem = engine.iron_golem(20, "Colossus Blade", runeword="Insight")
"""

import logging
from typing import Callable, Dict, List, Mapping, Optional

from core.calc_config import CalcConfig

logger = logging.getLogger(__name__)


class SummonEngine:
    """Name-based calculator API.

    Every lookup that can't be resolved (unknown rune word, weapon or
    skill level) logs a warning and returns None.
    """

    def __init__(self, config: CalcConfig):
        self.config = config
        self._data = None
        self._mage_life: Optional[Callable[[int], int]] = None
        self._fanaticism = None
        self._ready = False

    @property
    def ready(self) -> bool:
        return self._ready

    @property
    def data(self):
        return self._data

    def initialize(self) -> bool:
        """Load all tables. Returns True if rune words and monster stats are available."""
        try:
            self._init_formulas()
            self._init_data()
            self._ready = (
                self._data is not None
                and len(self._data.get_monster_stats()) > 0
                and len(self._data.get_runewords()) > 0
            )
            logger.info(f"SummonEngine initialized (ready={self._ready}, "
                        f"game={self.config.game_id})")
            return self._ready
        except Exception as e:
            logger.error(f"SummonEngine init failed: {e}", exc_info=True)
            return False

    # ── Lookups ─────────────────────────────────────────────

    def runeword(self, name: str):
        if self._data is None:
            return None
        rw = self._data.get_runeword(name)
        if rw is None:
            logger.warning(f"SummonEngine: unknown rune word {name!r}")
        return rw

    def runewords_for(self, category: str) -> List:
        """Rune words that can be made in an item category, by name."""
        if self._data is None:
            return []
        found = [rw for rw in self._data.get_runewords().values() if rw.fits(category)]
        return sorted(found, key=lambda rw: rw.name)

    def weapon(self, name: str, category: Optional[str] = None):
        from base_tables import find_weapon

        if self._data is None:
            return None
        found = find_weapon(self._data.get_weapons(), name, category)
        if found is None:
            logger.warning(f"SummonEngine: unknown weapon {name!r}")
        return found

    def monster_row(self, skill_level: int):
        if self._data is None:
            return None
        return self._data.get_monster_stats().row(skill_level)

    def modifiers(self, auras: Optional[Mapping[str, int]] = None,
                  runeword: Optional[str] = None, scenario=None):
        """Aura modifiers for one scenario, optionally with a rune word's auras."""
        from modifiers import aggregate_modifiers
        from range_value import Scenario

        rw = self.runeword(runeword) if runeword else None
        return aggregate_modifiers(auras, rw, scenario or Scenario.AVG, self._fanaticism_resolver())

    # ── Calculators ─────────────────────────────────────────

    def skeleton(self, skill_level: int, mastery_level: int = 0, resist_level: int = 0,
                 auras: Optional[Mapping[str, int]] = None):
        from summon_calcs import calculate_raise_skeleton

        return calculate_raise_skeleton(self.monster_row(skill_level), skill_level,
                                        mastery_level, resist_level, self.modifiers(auras))

    def skeleton_mage(self, skill_level: int, mastery_level: int = 0, resist_level: int = 0,
                      auras: Optional[Mapping[str, int]] = None,
                      life_strategy: Optional[str] = None):
        from summon_calcs import calculate_skeleton_mage

        strategy = self._resolve_mage_life(life_strategy) if life_strategy else self._mage_life
        if strategy is None:
            strategy = self._resolve_mage_life(self.config.mage_life_strategy)
        return calculate_skeleton_mage(self.monster_row(skill_level), skill_level,
                                       mastery_level, resist_level, self.modifiers(auras),
                                       strategy)

    def blood_golem(self, skill_level: int, mastery_level: int = 0, resist_level: int = 0,
                    auras: Optional[Mapping[str, int]] = None):
        from summon_calcs import calculate_blood_golem

        return calculate_blood_golem(self.monster_row(skill_level), skill_level,
                                     mastery_level, resist_level, self.modifiers(auras))

    def iron_golem(self, skill_level: int, weapon: str, runeword: Optional[str] = None,
                   category: Optional[str] = None, mastery_level: int = 0,
                   resist_level: int = 0, auras: Optional[Mapping[str, int]] = None,
                   character_level: int = 0, ethereal: bool = False):
        from summon_calcs import calculate_iron_golem

        base = self.weapon(weapon, category)
        if base is None:
            return None
        rw = None
        if runeword:
            rw = self.runeword(runeword)
            if rw is None:
                return None
        return calculate_iron_golem(
            self.monster_row(skill_level), skill_level, base, rw,
            mastery_level=mastery_level,
            resist_level=resist_level,
            external_auras=auras,
            character_level=character_level,
            ethereal=ethereal,
            fanaticism_resolver=self._fanaticism_resolver(),
            two_hand_categories=self._two_hand_categories(),
        )

    def stats(self) -> Dict:
        if self._data is None:
            return {"ready": False}
        return {"ready": self._ready, **self._data.get_stats()}

    # ── Init ────────────────────────────────────────────────

    def _resolve_mage_life(self, name: str) -> Callable[[int], int]:
        from summon_formulas import MAGE_LIFE_STRATEGIES, mage_life_fifty_per_level

        strategy = MAGE_LIFE_STRATEGIES.get(name)
        if strategy is None:
            logger.warning(f"SummonEngine: unknown mage life strategy {name!r}, using fifty_per_level")
            return mage_life_fifty_per_level
        return strategy

    def _fanaticism_resolver(self):
        from modifiers import resolve_fanaticism_by_source

        return self._fanaticism or resolve_fanaticism_by_source

    def _two_hand_categories(self):
        """Configured two-handed categories; None defers to base_tables.TWO_HAND_CATEGORIES."""
        return self.config.two_hand_categories or None

    def _init_formulas(self):
        """Resolve the configured formula strategies."""
        from modifiers import get_fanaticism_resolver

        self._mage_life = self._resolve_mage_life(self.config.mage_life_strategy)
        self._fanaticism = get_fanaticism_resolver(self.config.fanaticism_resolver)

    def _init_data(self):
        from data_cache import GameDataCache

        self._data = GameDataCache(
            source=self.config.data_source,
            cache_dir=self.config.cache_dir,
            ttl=self.config.cache_ttl,
            category_groups=self.config.category_groups or None,
            runeword_files=self.config.runeword_files,
            weapon_files=self.config.weapon_files,
            armor_files=self.config.armor_files,
            monster_stat_file=self.config.monster_stat_file,
            rune_info_file=self.config.rune_info_file,
            crafting_files=self.config.crafting_files,
        )
        self._data.load_all()
