"""Tests for settings loading."""

import pytest

from booksearch.config import Settings, get_settings, reload_settings


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults():
    settings = Settings()

    assert settings.index_path == "searchindex.json"
    assert settings.search_param == "search"
    assert settings.highlight_param == "highlight"
    assert settings.hotkey == "s"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("BOOKSEARCH_SITE_ROOT", "https://docs.example/book")
    monkeypatch.setenv("BOOKSEARCH_HOTKEY", "K")

    settings = reload_settings()

    assert settings.site_root == "https://docs.example/book/"
    assert settings.hotkey == "k"


def test_settings_are_cached(monkeypatch):
    first = get_settings()
    monkeypatch.setenv("BOOKSEARCH_INDEX_PATH", "other.json")

    assert get_settings() is first
    assert reload_settings().index_path == "other.json"


def test_hotkey_must_be_single_character():
    with pytest.raises(ValueError):
        Settings(hotkey="ctrl+s")
