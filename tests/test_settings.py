"""Tests for environment-driven settings."""

from __future__ import annotations

from pathlib import Path

import pytest

from boardcal.config import BACKEND_LOCAL, BACKEND_SUPABASE, get_settings
from boardcal.services import ServiceContext

ENV_VARS = (
    "SUPABASE_URL",
    "SUPABASE_ANON_KEY",
    "BOARDCAL_BACKEND",
    "BOARDCAL_LOCAL_STORE",
    "BOARDCAL_MAX_VISIBLE_BARS",
    "BOARDCAL_WEEK_START",
    "BOARDCAL_TIMEZONE",
    "BOARDCAL_VIEWER_ID",
    "BOARDCAL_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults():
    settings = get_settings()

    assert settings.storage.backend == BACKEND_LOCAL
    assert settings.storage.entries_table == "posts"
    assert settings.calendar.max_visible_bars == 3
    assert settings.calendar.week_start == 0
    assert settings.calendar.timezone == "UTC"
    assert settings.calendar.default_viewer_id is None
    assert settings.supabase.missing_env_vars == ["SUPABASE_URL", "SUPABASE_ANON_KEY"]
    assert settings.log_level == "INFO"


def test_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("BOARDCAL_BACKEND", "SUPABASE")
    monkeypatch.setenv("BOARDCAL_LOCAL_STORE", str(tmp_path / "store.json"))
    monkeypatch.setenv("BOARDCAL_MAX_VISIBLE_BARS", "5")
    monkeypatch.setenv("BOARDCAL_WEEK_START", "1")
    monkeypatch.setenv("BOARDCAL_TIMEZONE", "Asia/Seoul")
    monkeypatch.setenv("BOARDCAL_VIEWER_ID", "u-me")
    monkeypatch.setenv("BOARDCAL_LOG_LEVEL", "debug")

    settings = get_settings()

    assert settings.storage.backend == BACKEND_SUPABASE
    assert settings.storage.local_path == Path(tmp_path / "store.json")
    assert settings.calendar.max_visible_bars == 5
    assert settings.calendar.week_start == 1
    assert settings.calendar.tzinfo.key == "Asia/Seoul"
    assert settings.calendar.default_viewer_id == "u-me"
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize(("name", "value"), [("BOARDCAL_MAX_VISIBLE_BARS", "-1"), ("BOARDCAL_WEEK_START", "9")])
def test_out_of_range_integers_fall_back(monkeypatch, name, value):
    monkeypatch.setenv(name, value)

    settings = get_settings()

    assert settings.calendar.max_visible_bars == 3
    assert settings.calendar.week_start == 0


def test_unknown_backend_falls_back_to_local(monkeypatch):
    monkeypatch.setenv("BOARDCAL_BACKEND", "sqlite")

    assert get_settings().storage.backend == BACKEND_LOCAL


def test_local_context_requires_a_viewer(monkeypatch, tmp_path):
    monkeypatch.setenv("BOARDCAL_LOCAL_STORE", str(tmp_path / "store.json"))
    context = ServiceContext(settings=get_settings())

    assert not context.uses_supabase
    assert context.current_viewer_id("u-explicit") == "u-explicit"
    with pytest.raises(RuntimeError):
        context.current_viewer_id()
