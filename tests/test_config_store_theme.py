import pytest

from core import config_store
from core.theme import (
    DEFAULT_THEME, THEMES, get_theme, load_theme_preference, save_theme_preference,
    status_badge_html, theme_css,
)

EMAIL = "coordinator.foet@example.com"


def test_get_missing_namespace_is_empty(engine):
    assert config_store.get(engine, EMAIL, "nothing") == {}


def test_save_keeps_history_and_rollback(engine):
    config_store.save(engine, EMAIL, "prefs", {"n": 1}, saved_by=EMAIL)
    _, previous = config_store.save(engine, EMAIL, "prefs", {"n": 2}, saved_by=EMAIL)
    assert previous == {"n": 1}
    config_store.save(engine, EMAIL, "prefs", {"n": 3}, saved_by=EMAIL)
    assert config_store.get(engine, EMAIL, "prefs") == {"n": 3}

    history = config_store.history(engine, EMAIL, "prefs")
    assert [h["config"] for h in history] == [{"n": 2}, {"n": 1}]

    oldest = history[-1]["version"]
    assert config_store.rollback(engine, EMAIL, "prefs", oldest, saved_by=EMAIL)
    assert config_store.get(engine, EMAIL, "prefs") == {"n": 1}
    assert not config_store.rollback(engine, EMAIL, "prefs", 999)


def test_history_is_capped(engine, monkeypatch):
    monkeypatch.setattr(config_store, "MAX_VERSIONS", 3)
    for n in range(6):
        config_store.save(engine, "*", "capped", {"n": n})
    assert len(config_store.history(engine, "*", "capped")) == 3


def test_owners_are_separate(engine):
    config_store.save(engine, "a@example.com", "ui_theme", {"name": "ocean"})
    assert config_store.get(engine, "b@example.com", "ui_theme") == {}


def test_theme_preference_round_trip(engine):
    assert load_theme_preference(engine, EMAIL) == DEFAULT_THEME
    assert save_theme_preference(engine, EMAIL, "forest")
    assert load_theme_preference(engine, EMAIL.upper()) == "forest"


def test_unknown_theme_is_rejected(engine):
    with pytest.raises(ValueError):
        save_theme_preference(engine, EMAIL, "neon")


def test_stale_stored_theme_falls_back(engine):
    config_store.save(engine, EMAIL, "ui_theme", {"name": "retired"})
    assert load_theme_preference(engine, EMAIL, default="dark") == "dark"


def test_no_user_gets_default():
    assert load_theme_preference(None, None) == DEFAULT_THEME


def test_every_theme_defines_the_same_variables():
    names = {tuple(sorted(t["colors"])) for t in THEMES.values()}
    assert len(names) == 1
    assert set(THEMES) == {"default", "ocean", "forest", "sunset", "dark"}


def test_theme_css_and_fallback():
    css = theme_css("ocean")
    assert "--primary-blue: #0e7490;" in css
    assert get_theme("missing") == THEMES[DEFAULT_THEME]


def test_status_badge():
    assert "Approved" in status_badge_html("Approved")
    assert "#e5e7eb" in status_badge_html("Whatever")
