"""Tests for Settings and get_settings()."""
from unittest.mock import patch

from workoutgen import config
from workoutgen.config import Settings, get_settings


class TestSettings:
    def test_defaults(self):
        settings = Settings(_env_file=None)
        assert settings.database_url == "sqlite:///./workouts.db"
        assert settings.time_zone == "UTC"
        assert settings.default_start_latitude == "50.1234"
        assert settings.default_start_longitude == "8.1234"
        assert settings.default_lap_length == "25"
        assert settings.default_lap_length_unit == "meter"
        assert settings.authorization_auto_approve is True
        assert settings.random_seed is None

    def test_reads_prefixed_env(self, monkeypatch):
        monkeypatch.setenv("WORKOUTGEN_TIME_ZONE", "Europe/Berlin")
        monkeypatch.setenv("WORKOUTGEN_RANDOM_SEED", "7")
        monkeypatch.setenv("WORKOUTGEN_AUTHORIZATION_AUTO_APPROVE", "false")
        settings = Settings(_env_file=None)
        assert settings.time_zone == "Europe/Berlin"
        assert settings.random_seed == 7
        assert settings.authorization_auto_approve is False


def test_get_settings_is_cached():
    with patch.object(config, "_settings", None):
        first = get_settings()
        assert get_settings() is first
