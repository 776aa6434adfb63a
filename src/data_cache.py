"""
Horadric - Game Data Cache
Loads every text table the calculators need, once, from either a local
directory or a remote base URL.

Remote tables are kept on disk under CACHE_DIR and reused until they are
older than CACHE_TTL. When a refresh fails a stale copy is still used.

Files load in parallel, one thread per file. A file that cannot be fetched
or parsed is logged and its category is left empty; the other categories
are unaffected.
"""

import time
import logging
import threading
from pathlib import Path
from typing import Callable, Dict, List, Optional

import requests

from config import (
    ARMOR_FILES,
    CACHE_DIR,
    CACHE_TTL,
    CATEGORY_GROUPS,
    CRAFTING_FILES,
    DATA_SOURCE,
    MONSTER_STAT_FILE,
    REQUEST_TIMEOUT,
    RUNE_INFO_FILE,
    RUNEWORD_FILES,
    USER_AGENT,
    WEAPON_FILES,
)
from base_tables import (
    ArmorBase,
    CraftingRecipe,
    RuneInfo,
    WeaponBase,
    parse_armor_table,
    parse_crafting_recipes,
    parse_rune_table,
    parse_weapon_table,
)
from monster_stats import MonsterStatTable, parse_monster_stats
from runeword_parser import RuneWord, parse_runewords

logger = logging.getLogger(__name__)


class DataFetchError(RuntimeError):
    """A source table could not be read locally or fetched remotely."""


def is_remote(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def category_of(relative_path: str) -> str:
    """Category name is the file stem: "WeaponStats/2HAxes.txt" → "2HAxes"."""
    return Path(relative_path).stem


# ─── Fetch ───────────────────────────────────────

def _read_cache(cache_file: Path, ttl: float, allow_stale: bool = False) -> Optional[str]:
    if not cache_file.exists():
        return None
    age = time.time() - cache_file.stat().st_mtime
    if age > ttl and not allow_stale:
        return None
    return cache_file.read_text(encoding="utf-8")


def _fetch_remote(base_url: str, relative_path: str, cache_dir: Path, ttl: float) -> str:
    cache_file = cache_dir / relative_path
    cached = _read_cache(cache_file, ttl)
    if cached is not None:
        logger.debug(f"DataCache: {relative_path} from disk cache")
        return cached

    url = f"{base_url.rstrip('/')}/{relative_path}"
    try:
        resp = requests.get(url, timeout=REQUEST_TIMEOUT, headers={"User-Agent": USER_AGENT})
        if resp.status_code != 200:
            raise DataFetchError(f"{url}: HTTP {resp.status_code}")
        text = resp.text
    except (requests.RequestException, DataFetchError) as e:
        stale = _read_cache(cache_file, ttl, allow_stale=True)
        if stale is not None:
            logger.warning(f"DataCache: refresh of {relative_path} failed ({e}), using stale copy")
            return stale
        if isinstance(e, DataFetchError):
            raise
        raise DataFetchError(f"{url}: {e}") from e

    try:
        cache_file.parent.mkdir(parents=True, exist_ok=True)
        cache_file.write_text(text, encoding="utf-8")
    except OSError as e:
        logger.debug(f"DataCache: could not write {cache_file}: {e}")
    return text


def fetch_text(source: str, relative_path: str, cache_dir: Path = CACHE_DIR,
               ttl: float = CACHE_TTL) -> str:
    """
    Text of one table.

    Raises:
        DataFetchError: file missing locally, or unreachable with no cached copy
    """
    if is_remote(source):
        return _fetch_remote(source, relative_path, Path(cache_dir), ttl)

    path = Path(source) / relative_path
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise DataFetchError(f"{path}: {e}") from e


# ─── Cache ───────────────────────────────────────

class GameDataCache:
    """
    All parsed game tables. `load_all()` runs once; later calls (from any
    thread) return immediately.
    """

    def __init__(self, source: str = DATA_SOURCE, cache_dir: Path = CACHE_DIR,
                 ttl: float = CACHE_TTL, category_groups: Optional[dict] = None,
                 runeword_files: Optional[List[str]] = None,
                 weapon_files: Optional[List[str]] = None,
                 armor_files: Optional[List[str]] = None,
                 monster_stat_file: str = MONSTER_STAT_FILE,
                 rune_info_file: str = RUNE_INFO_FILE,
                 crafting_files: Optional[List[str]] = None):
        self.source = source
        self.cache_dir = Path(cache_dir)
        self.ttl = ttl
        self.category_groups = category_groups or CATEGORY_GROUPS
        self.runeword_files = RUNEWORD_FILES if runeword_files is None else runeword_files
        self.weapon_files = WEAPON_FILES if weapon_files is None else weapon_files
        self.armor_files = ARMOR_FILES if armor_files is None else armor_files
        self.monster_stat_file = monster_stat_file
        self.rune_info_file = rune_info_file
        self.crafting_files = CRAFTING_FILES if crafting_files is None else crafting_files

        self.runewords: Dict[str, RuneWord] = {}
        self.monster_stats = MonsterStatTable()
        self.weapons: Dict[str, Dict[str, WeaponBase]] = {}
        self.armors: Dict[str, Dict[str, ArmorBase]] = {}
        self.runes: List[RuneInfo] = []
        self.recipes: Dict[str, Dict[str, CraftingRecipe]] = {}
        self.errors: Dict[str, str] = {}
        self.last_load: float = 0

        self._lock = threading.Lock()
        self._loaded = False

    @property
    def loaded(self) -> bool:
        return self._loaded

    def load_all(self):
        with self._lock:
            if self._loaded:
                return
            self._load_parallel()
            self._loaded = True
            self.last_load = time.time()

    def _jobs(self) -> Dict[str, Callable[[str], object]]:
        """relative path → parser for every configured file."""
        jobs: Dict[str, Callable[[str], object]] = {}
        for rel in self.runeword_files:
            jobs[rel] = lambda text: parse_runewords(text, self.category_groups)
        for rel in self.weapon_files:
            jobs[rel] = lambda text, cat=category_of(rel): parse_weapon_table(text, cat)
        for rel in self.armor_files:
            jobs[rel] = lambda text, cat=category_of(rel): parse_armor_table(text, cat)
        for rel in self.crafting_files:
            jobs[rel] = lambda text, cat=category_of(rel): parse_crafting_recipes(text, cat)
        if self.monster_stat_file:
            jobs[self.monster_stat_file] = parse_monster_stats
        if self.rune_info_file:
            jobs[self.rune_info_file] = parse_rune_table
        return jobs

    def _load_one(self, relative_path: str, parse: Callable[[str], object], results: dict):
        try:
            text = fetch_text(self.source, relative_path, self.cache_dir, self.ttl)
            results[relative_path] = parse(text)
        except DataFetchError as e:
            logger.warning(f"DataCache: {relative_path} unavailable: {e}")
            self.errors[relative_path] = str(e)
        except Exception as e:
            logger.error(f"DataCache: failed to parse {relative_path}: {e}")
            self.errors[relative_path] = str(e)

    def _load_parallel(self):
        results: dict = {}
        threads = []
        for rel, parse in self._jobs().items():
            t = threading.Thread(target=self._load_one, args=(rel, parse, results), daemon=True)
            t.start()
            threads.append(t)
        for t in threads:
            t.join()

        # Merge in configured order so later rune word files override earlier ones
        for rel in self.runeword_files:
            self.runewords.update(results.get(rel, {}))
        for rel in self.weapon_files:
            if rel in results:
                self.weapons[category_of(rel)] = results[rel]
        for rel in self.armor_files:
            if rel in results:
                self.armors[category_of(rel)] = results[rel]
        for rel in self.crafting_files:
            if rel in results:
                self.recipes[category_of(rel)] = results[rel]
        if self.monster_stat_file in results:
            self.monster_stats = results[self.monster_stat_file]
        self.runes = results.get(self.rune_info_file, [])

        logger.info(f"DataCache: {len(self.runewords)} rune words, "
                    f"{sum(len(t) for t in self.weapons.values())} weapons, "
                    f"{len(self.monster_stats)} monster levels "
                    f"({len(self.errors)} files failed)")

    # ─── Accessors ───────────────────────────────────

    def get_runewords(self) -> Dict[str, RuneWord]:
        self.load_all()
        return self.runewords

    def get_runeword(self, name: str) -> Optional[RuneWord]:
        return self.get_runewords().get(name)

    def get_monster_stats(self) -> MonsterStatTable:
        self.load_all()
        return self.monster_stats

    def get_weapons(self) -> Dict[str, Dict[str, WeaponBase]]:
        self.load_all()
        return self.weapons

    def get_armors(self) -> Dict[str, Dict[str, ArmorBase]]:
        self.load_all()
        return self.armors

    def get_runes(self) -> List[RuneInfo]:
        self.load_all()
        return self.runes

    def get_recipes(self) -> Dict[str, Dict[str, CraftingRecipe]]:
        self.load_all()
        return self.recipes

    def get_stats(self) -> dict:
        self.load_all()
        return {
            "source": self.source,
            "runewords": len(self.runewords),
            "weapons": sum(len(t) for t in self.weapons.values()),
            "armors": sum(len(t) for t in self.armors.values()),
            "monster_levels": len(self.monster_stats),
            "runes": len(self.runes),
            "recipes": sum(len(r) for r in self.recipes.values()),
            "errors": dict(self.errors),
            "last_load": time.strftime("%H:%M:%S", time.localtime(self.last_load)) if self.last_load else "Never",
        }
