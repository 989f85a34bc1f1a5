"""
Tests for settings validation.
"""
import pytest
from pydantic import ValidationError

from calorel.config import DEFAULT_AI_FEATURE_LIMITS, Settings


class TestSettings:
    """Tests for startup validation of quota settings."""

    def test_defaults_are_valid(self):
        """Test the shipped defaults load."""
        settings = Settings()
        assert settings.quota_timezone == "UTC"
        assert settings.ai_feature_limits == DEFAULT_AI_FEATURE_LIMITS

    def test_known_timezone(self):
        """Test an IANA zone is accepted."""
        assert Settings(quota_timezone="America/Mexico_City").quota_timezone == "America/Mexico_City"

    @pytest.mark.parametrize("tz", ["Mars/Olympus_Mons", "America/Mexico City", ""])
    def test_unknown_timezone_rejected(self, tz):
        """Test a timezone typo fails when settings load."""
        with pytest.raises(ValidationError):
            Settings(quota_timezone=tz)

    def test_unknown_timezone_from_env(self, monkeypatch):
        """Test the environment variable is validated too."""
        monkeypatch.setenv("QUOTA_TIMEZONE", "Europe/Atlantis")
        with pytest.raises(ValidationError):
            Settings()

    def test_custom_limits_accepted(self):
        """Test valid per-feature limits."""
        limits = {"food_scan": {"limit": 3}, "exercise_ai": {"limit": 0, "time_frame": "weekly"}, "diet_plan": None}
        assert Settings(ai_feature_limits=limits).ai_feature_limits == limits

    @pytest.mark.parametrize("limits", [
        {"horoscope": {"limit": 1}},
        {"food_scan": {"limit": -1}},
        {"food_scan": {"limit": "lots"}},
        {"food_scan": {}},
        {"food_scan": {"limit": 1, "time_frame": "monthly"}},
    ])
    def test_invalid_limits_rejected(self, limits):
        """Test a bad feature name, limit or time frame fails when settings load."""
        with pytest.raises(ValidationError):
            Settings(ai_feature_limits=limits)
