"""Shared fixtures for the Horadric test suite."""

import sys
import logging
from pathlib import Path

import pytest

# Ensure src/ is importable
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from base_tables import WeaponBase
from data_cache import GameDataCache
from monster_stats import MonsterStatRow

logger = logging.getLogger(__name__)

# ── Fixtures directory ───────────────────────────────────

FIXTURES_DIR = Path(__file__).parent / "fixtures"

FIXTURE_RUNEWORD_FILES = ["RuneWords/Weapons.txt"]
FIXTURE_WEAPON_FILES = [
    "WeaponStats/Swords.txt",
    "WeaponStats/2HSwords.txt",
    "WeaponStats/Bows.txt",
]


def load_fixture(relative_path):
    """Load a single fixture file by path relative to fixtures/."""
    path = FIXTURES_DIR / relative_path
    if not path.exists():
        pytest.skip(f"Fixture {relative_path} not found")
    return path.read_text(encoding="utf-8")


def make_cache(tmp_path, source=None, **overrides):
    """GameDataCache over the fixtures directory with the fixture file lists."""
    kwargs = dict(
        source=str(source or FIXTURES_DIR),
        cache_dir=tmp_path / "cache",
        runeword_files=FIXTURE_RUNEWORD_FILES,
        weapon_files=FIXTURE_WEAPON_FILES,
        armor_files=[],
        monster_stat_file="MonsterStats/MonLvl.txt",
        rune_info_file="Runes/RuneInfo.txt",
        crafting_files=["Crafting/BloodRecipes.txt"],
    )
    kwargs.update(overrides)
    return GameDataCache(**kwargs)


# ── Shared objects ───────────────────────────────────────

@pytest.fixture
def data_cache(tmp_path):
    cache = make_cache(tmp_path)
    cache.load_all()
    return cache


@pytest.fixture
def runewords(data_cache):
    return data_cache.get_runewords()


@pytest.fixture
def row10():
    """Fixture row for skill level 10: 100 / 200 / 300."""
    return MonsterStatRow(level=10, normal=100, nightmare=200, hell=300)


@pytest.fixture
def row1():
    return MonsterStatRow(level=1, normal=10, nightmare=20, hell=30)


@pytest.fixture
def one_hander():
    return WeaponBase(name="Test Sword", category="Swords", min_damage=10, max_damage=20, max_sockets=4)


@pytest.fixture
def two_hander():
    return WeaponBase(name="Test Greatsword", category="2HSwords", min_damage=10, max_damage=20, max_sockets=6)
