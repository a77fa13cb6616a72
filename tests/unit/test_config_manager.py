"""Unit tests for chamber_events.core.config_manager."""

import os
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import Mock

import pytest

from chamber_events.core.config_manager import (
    DEFAULT_MAX_ITERATIONS,
    ConfigManager,
    EngineConfig,
    get_config_value,
)
from chamber_events.exceptions import ConfigurationError

pytestmark = pytest.mark.unit


@pytest.fixture
def restore_environ():
    """Snapshot os.environ; load_env_file writes to it directly."""
    saved = dict(os.environ)
    yield
    os.environ.clear()
    os.environ.update(saved)


class TestConfigManager:
    """Tests for ConfigManager class."""

    def test_load_env_file_with_valid_file(self, tmp_path: Path, restore_environ):
        """Should load environment variables from .env file."""
        env_file = tmp_path / ".env"
        env_file.write_text(
            "# Comment line\n"
            "CHAMBER_EVENTS_DIGEST_LIMIT=8\n"
            "\n"
            'CHAMBER_EVENTS_TIMEZONE="America/Chicago"\n'
            "not a setting\n"
        )

        loaded = ConfigManager(env_file).load_env_file()

        assert loaded == ["CHAMBER_EVENTS_DIGEST_LIMIT", "CHAMBER_EVENTS_TIMEZONE"]
        assert os.environ["CHAMBER_EVENTS_DIGEST_LIMIT"] == "8"
        assert os.environ["CHAMBER_EVENTS_TIMEZONE"] == "America/Chicago"

    def test_load_env_file_does_not_override_environment(self, tmp_path: Path, monkeypatch):
        """Existing environment variables win over .env values."""
        env_file = tmp_path / ".env"
        env_file.write_text("CHAMBER_EVENTS_PAST_DAYS=10\n")
        monkeypatch.setenv("CHAMBER_EVENTS_PAST_DAYS", "30")

        loaded = ConfigManager(env_file).load_env_file()

        assert loaded == []
        assert os.environ["CHAMBER_EVENTS_PAST_DAYS"] == "30"

    def test_load_env_file_missing(self, tmp_path: Path):
        """A missing .env file is not an error."""
        assert ConfigManager(tmp_path / "nope.env").load_env_file() == []

    def test_build_config_from_env(self, monkeypatch):
        monkeypatch.setenv("CHAMBER_EVENTS_TIMEZONE", "America/Denver")
        monkeypatch.setenv("CHAMBER_EVENTS_MAX_ITERATIONS", "100")
        monkeypatch.setenv("CHAMBER_EVENTS_LISTING_DAYS", "180")

        cfg = ConfigManager().build_config_from_env()

        assert cfg == {
            "timezone": "America/Denver",
            "max_iterations": 100,
            "listing_days": 180,
        }

    def test_build_config_empty_environment(self):
        assert ConfigManager().build_config_from_env() == {}

    @pytest.mark.parametrize("raw", ["abc", "0", "-5", "1.5"])
    def test_invalid_integers_are_ignored(self, monkeypatch, caplog, raw):
        monkeypatch.setenv("CHAMBER_EVENTS_DIGEST_DAYS", raw)

        cfg = ConfigManager().build_config_from_env()

        assert "digest_days" not in cfg
        assert "CHAMBER_EVENTS_DIGEST_DAYS" in caplog.text

    def test_zero_past_days_accepted(self, monkeypatch):
        monkeypatch.setenv("CHAMBER_EVENTS_PAST_DAYS", "0")

        cfg = ConfigManager().build_config_from_env()

        assert cfg == {"past_days": 0}
        assert EngineConfig.from_settings(cfg).past_days == 0

    def test_log_level_is_left_to_logging_config(self, monkeypatch):
        monkeypatch.setenv("CHAMBER_EVENTS_LOG_LEVEL", "DEBUG")

        assert ConfigManager().build_config_from_env() == {}

    def test_invalid_timezone_falls_back(self, monkeypatch):
        monkeypatch.setenv("CHAMBER_EVENTS_TIMEZONE", "Mars/Olympus_Mons")

        assert ConfigManager().build_config_from_env()["timezone"] == "America/New_York"

    def test_load_full_config(self, tmp_path: Path, restore_environ):
        env_file = tmp_path / ".env"
        env_file.write_text("CHAMBER_EVENTS_DIGEST_LIMIT=3\n")
        cfg = ConfigManager(env_file).load_full_config()

        assert cfg == {"digest_limit": 3}


class TestGetConfigValue:
    """Tests for get_config_value()."""

    def test_dict(self):
        assert get_config_value({"a": 1}, "a") == 1
        assert get_config_value({}, "a", 5) == 5

    def test_object(self):
        assert get_config_value(SimpleNamespace(a=2), "a") == 2
        assert get_config_value(Mock(spec=[]), "a", 7) == 7

    def test_none(self):
        assert get_config_value(None, "a", "x") == "x"


class TestEngineConfig:
    """Tests for EngineConfig."""

    def test_defaults(self):
        config = EngineConfig()

        assert config.max_iterations == DEFAULT_MAX_ITERATIONS == 600
        assert config.timezone == "America/New_York"
        assert config.week_days == 7
        assert config.listing_days == 365
        assert config.past_days == 90
        assert config.digest_days == 45
        assert config.digest_limit == 5

    def test_from_settings_dict(self):
        config = EngineConfig.from_settings({"max_iterations": 50, "timezone": "UTC", "extra": 1})

        assert config.max_iterations == 50
        assert config.timezone == "UTC"
        assert config.listing_days == 365

    def test_from_settings_object(self):
        config = EngineConfig.from_settings(SimpleNamespace(digest_limit=9))
        assert config.digest_limit == 9

    def test_from_env(self, monkeypatch, tmp_path: Path):
        monkeypatch.setenv("CHAMBER_EVENTS_PAST_DAYS", "14")

        config = EngineConfig.from_env(tmp_path / ".env")

        assert config.past_days == 14

    @pytest.mark.parametrize(
        "kwargs",
        [{"max_iterations": 0}, {"week_days": -1}, {"digest_limit": "5"}, {"past_days": -1}],
    )
    def test_invalid_values_raise(self, kwargs):
        with pytest.raises(ConfigurationError):
            EngineConfig(**kwargs)

    def test_zero_past_days_allowed(self):
        assert EngineConfig(past_days=0).past_days == 0

    def test_timezone_resolved_at_construction(self, monkeypatch):
        monkeypatch.setenv("CHAMBER_EVENTS_TIMEZONE", "America/Denver")
        config = EngineConfig()

        monkeypatch.setenv("CHAMBER_EVENTS_TIMEZONE", "UTC")

        assert config.timezone == "America/Denver"
        assert EngineConfig(timezone="Europe/Paris").timezone == "Europe/Paris"
