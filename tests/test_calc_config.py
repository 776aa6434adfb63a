"""Tests for CalcConfig and the Diablo II config factory."""

from pathlib import Path


class TestCalcConfig:
    """Test the CalcConfig dataclass itself."""

    def test_create_minimal(self):
        from core.calc_config import CalcConfig
        cfg = CalcConfig(game_id="test", data_source="/tmp/data", cache_dir=Path("/tmp/cache"))
        assert cfg.game_id == "test"
        assert cfg.data_source == "/tmp/data"

    def test_defaults(self):
        from core.calc_config import CalcConfig
        cfg = CalcConfig(game_id="test", data_source="", cache_dir=Path("/tmp"))
        assert cfg.cache_ttl == 7 * 86400
        assert cfg.runeword_files == []
        assert cfg.category_groups == {}
        assert cfg.two_hand_categories == frozenset()
        assert cfg.mage_life_strategy == "fifty_per_level"
        assert cfg.fanaticism_resolver == "by_source"

    def test_lists_not_shared(self):
        from core.calc_config import CalcConfig
        a = CalcConfig(game_id="a", data_source="", cache_dir=Path("/tmp"))
        b = CalcConfig(game_id="b", data_source="", cache_dir=Path("/tmp"))
        a.weapon_files.append("WeaponStats/Swords.txt")
        assert b.weapon_files == []


class TestD2Config:
    """Test the create_d2_config() factory."""

    def test_defaults(self):
        from games.d2 import create_d2_config
        cfg = create_d2_config()

        assert cfg.game_id == "d2"
        assert cfg.data_source  # non-empty
        assert cfg.cache_dir.parts
        assert cfg.monster_stat_file == "MonsterStats/MonLvl.txt"
        assert "RuneWords/Weapons.txt" in cfg.runeword_files
        assert "WeaponStats/2HAxes.txt" in cfg.weapon_files

    def test_overrides(self):
        from games.d2 import create_d2_config
        cfg = create_d2_config(
            data_source="https://example.com/d2",
            cache_dir=Path("/tmp/custom-cache"),
            mage_life_strategy="ten_minus_21",
            fanaticism_resolver="always_ally",
        )
        assert cfg.data_source == "https://example.com/d2"
        assert cfg.cache_dir == Path("/tmp/custom-cache")
        assert cfg.mage_life_strategy == "ten_minus_21"
        assert cfg.fanaticism_resolver == "always_ally"

    def test_item_classification(self):
        from games.d2 import create_d2_config
        cfg = create_d2_config()

        assert "Swords" in cfg.category_groups["Melee Weapons"]
        assert "Bows" in cfg.category_groups["Ranged Weapons"]
        assert set(cfg.category_groups["All Weapons"]) >= {"Swords", "Bows"}
        assert "2HSwords" in cfg.two_hand_categories
        assert "Swords" not in cfg.two_hand_categories

    def test_factory_returns_copies(self):
        from games.d2 import create_d2_config
        first = create_d2_config()
        first.weapon_files.clear()
        assert create_d2_config().weapon_files
