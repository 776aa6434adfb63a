"""Tests for data_cache.py — local/remote loading, isolation, memoisation."""

import threading

import pytest
import requests

import data_cache as data_cache_module
from data_cache import DataFetchError, category_of, fetch_text, is_remote
from tests.conftest import FIXTURES_DIR, make_cache

REMOTE = "https://data.example.com/d2"


class FakeResponse:
    def __init__(self, status_code=200, text=""):
        self.status_code = status_code
        self.text = text


def serve_fixtures(calls=None):
    """requests.get replacement that serves files from tests/fixtures."""
    def fake_get(url, timeout=None, headers=None):
        if calls is not None:
            calls.append(url)
        assert url.startswith(REMOTE + "/")
        assert headers and "User-Agent" in headers
        path = FIXTURES_DIR / url[len(REMOTE) + 1:]
        if not path.exists():
            return FakeResponse(404)
        return FakeResponse(200, path.read_text(encoding="utf-8"))
    return fake_get


def test_helpers():
    assert is_remote("https://x.org")
    assert is_remote("http://x.org")
    assert not is_remote("/data/d2")
    assert category_of("WeaponStats/2HAxes.txt") == "2HAxes"


class TestLocal:

    def test_load_all(self, data_cache):
        assert data_cache.loaded
        assert set(data_cache.get_runewords()) == {"Steel Test", "Zeal Faith", "Sixer"}
        assert set(data_cache.get_weapons()) == {"Swords", "2HSwords", "Bows"}
        assert data_cache.get_weapons()["2HSwords"]["Test Greatsword"].two_handed
        assert len(data_cache.get_monster_stats()) == 30
        assert [r.name for r in data_cache.get_runes()] == ["El", "Eld"]
        assert "Blood Axe" in data_cache.get_recipes()["BloodRecipes"]
        assert data_cache.get_armors() == {}
        assert data_cache.errors == {}

    def test_missing_file_is_isolated(self, tmp_path):
        cache = make_cache(tmp_path, weapon_files=["WeaponStats/Swords.txt", "WeaponStats/Nope.txt"])
        cache.load_all()
        assert "WeaponStats/Nope.txt" in cache.errors
        assert "Nope" not in cache.weapons
        assert "Test Sword" in cache.weapons["Swords"]
        assert len(cache.runewords) == 3

    def test_empty_groups_use_defaults(self, tmp_path):
        cache = make_cache(tmp_path, category_groups={})
        cache.load_all()
        assert "Zeal Faith" in cache.runewords

    def test_missing_monster_table(self, tmp_path):
        cache = make_cache(tmp_path, monster_stat_file="MonsterStats/Missing.txt")
        cache.load_all()
        assert len(cache.get_monster_stats()) == 0
        assert cache.get_monster_stats().row(10) is None

    def test_lazy_and_memoised(self, tmp_path, monkeypatch):
        calls = []
        real = data_cache_module.fetch_text
        lock = threading.Lock()

        def counting(source, relative_path, *args, **kwargs):
            with lock:
                calls.append(relative_path)
            return real(source, relative_path, *args, **kwargs)

        monkeypatch.setattr(data_cache_module, "fetch_text", counting)
        cache = make_cache(tmp_path)
        assert not cache.loaded
        cache.get_runeword("Steel Test")
        assert cache.loaded
        first = len(calls)
        assert first == 7
        cache.load_all()
        cache.get_weapons()
        assert len(calls) == first

    def test_get_stats(self, data_cache):
        stats = data_cache.get_stats()
        assert stats["runewords"] == 3
        assert stats["weapons"] == 4
        assert stats["monster_levels"] == 30
        assert stats["errors"] == {}

    def test_fetch_text_missing(self):
        with pytest.raises(DataFetchError):
            fetch_text(str(FIXTURES_DIR), "Nope/Nothing.txt")


class TestRemote:

    def test_fetch_and_disk_cache(self, tmp_path, monkeypatch):
        calls = []
        monkeypatch.setattr(requests, "get", serve_fixtures(calls))
        cache = make_cache(tmp_path, source=REMOTE)
        cache.load_all()
        assert len(cache.runewords) == 3
        assert (tmp_path / "cache" / "RuneWords" / "Weapons.txt").exists()
        assert len(calls) == 7

        # Second cache reads the disk copies without touching the network
        def offline(*args, **kwargs):
            raise AssertionError("network used")
        monkeypatch.setattr(requests, "get", offline)
        again = make_cache(tmp_path, source=REMOTE)
        again.load_all()
        assert len(again.runewords) == 3

    def test_stale_copy_used_when_refresh_fails(self, tmp_path, monkeypatch):
        monkeypatch.setattr(requests, "get", serve_fixtures())
        fetch_text(REMOTE, "Runes/RuneInfo.txt", cache_dir=tmp_path)

        def down(*args, **kwargs):
            raise requests.ConnectionError("offline")
        monkeypatch.setattr(requests, "get", down)
        text = fetch_text(REMOTE, "Runes/RuneInfo.txt", cache_dir=tmp_path, ttl=-1)
        assert "Eld" in text

    def test_http_error_without_cache(self, tmp_path, monkeypatch):
        monkeypatch.setattr(requests, "get", serve_fixtures())
        with pytest.raises(DataFetchError):
            fetch_text(REMOTE, "Nope/Nothing.txt", cache_dir=tmp_path)

    def test_timeout_isolated(self, tmp_path, monkeypatch):
        served = serve_fixtures()

        def flaky(url, timeout=None, headers=None):
            if url.endswith("Bows.txt"):
                raise requests.Timeout("slow")
            return served(url, timeout=timeout, headers=headers)

        monkeypatch.setattr(requests, "get", flaky)
        cache = make_cache(tmp_path, source=REMOTE)
        cache.load_all()
        assert "WeaponStats/Bows.txt" in cache.errors
        assert "Bows" not in cache.weapons
        assert "Swords" in cache.weapons
