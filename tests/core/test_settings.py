"""Tests for flw.core.settings - env-driven, validated, cached."""

import pytest
from pydantic import ValidationError

from flw.core.settings import FlwSettings, clear_settings_cache, get_settings


class TestFlwSettings:

    def test_defaults(self, monkeypatch):
        for var in ["FLW_DEFAULT_CONCURRENCY", "FLW_STOP_REASON", "FLW_SCHEDULE_DELAY", "FLW_LOG_LEVEL"]:
            monkeypatch.delenv(var, raising=False)
        s = FlwSettings(_env_file=None)
        assert s.default_concurrency == 3
        assert s.stop_reason == "stopped"
        assert s.schedule_delay == 0.0
        assert s.log_level == "WARNING"
        assert s.log_json is None

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("FLW_DEFAULT_CONCURRENCY", "7")
        monkeypatch.setenv("FLW_LOG_JSON", "true")
        s = FlwSettings(_env_file=None)
        assert s.default_concurrency == 7
        assert s.log_json is True

    def test_concurrency_must_be_positive(self, monkeypatch):
        monkeypatch.setenv("FLW_DEFAULT_CONCURRENCY", "0")
        with pytest.raises(ValidationError):
            FlwSettings(_env_file=None)

    def test_negative_delay_rejected(self):
        with pytest.raises(ValidationError):
            FlwSettings(_env_file=None, schedule_delay=-0.5)

    def test_unknown_env_ignored(self, monkeypatch):
        monkeypatch.setenv("FLW_NOT_A_SETTING", "x")
        FlwSettings(_env_file=None)


class TestGetSettings:

    def test_cached(self):
        assert get_settings() is get_settings()

    def test_force_reload(self, monkeypatch):
        first = get_settings()
        monkeypatch.setenv("FLW_STOP_REASON", "halted")
        assert get_settings().stop_reason == first.stop_reason
        assert get_settings(_force_reload=True).stop_reason == "halted"

    def test_clear_cache(self, monkeypatch):
        first = get_settings()
        clear_settings_cache()
        assert get_settings() is not first
