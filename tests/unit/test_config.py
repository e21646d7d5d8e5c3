"""
Unit tests for Settings.
"""

import pytest
from pydantic import ValidationError

from learnpath.config import Settings, get_settings


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self, settings):
        assert settings.log_level == "INFO"
        assert settings.log_file is None
        assert settings.get_mastery_config().base_increase == 0.1
        assert settings.get_xp_config().speed_bonus_seconds == 30.0
        assert settings.get_priority_config().time_cap == 2.0
        assert settings.get_review_config().top_interval_days == 14.0

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("LEARNPATH_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("LEARNPATH_MASTERY_BASE_INCREASE", "0.2")
        monkeypatch.setenv("LEARNPATH_DEFAULT_TOPIC_WEIGHT", "1.5")

        settings = Settings(_env_file=None)

        assert settings.log_level == "DEBUG"
        assert settings.get_mastery_config().base_increase == 0.2
        assert settings.get_priority_config().default_weight == 1.5

    def test_invalid_value_rejected(self, monkeypatch):
        monkeypatch.setenv("LEARNPATH_PRIORITY_TIME_CAP", "0")

        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_get_settings_is_cached(self):
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()
