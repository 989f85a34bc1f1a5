"""
Tests for Pydantic schemas validation.
"""
import pytest
from pydantic import ValidationError

from calorel.models.ai_usage import AIFeature
from calorel.schemas.ai_usage import QuotaDecisionResponse, UsageLoggedResponse
from calorel.schemas.nutrition import UserStatsRequest, BmiResponse
from calorel.services.quota_service import QuotaDecision, QuotaStatus, TimeFrame


class TestUserStatsRequest:
    """Tests for calculator input schema."""

    def test_camel_case_aliases(self):
        """Test the app's camelCase keys."""
        schema = UserStatsRequest.model_validate({"workoutsPerWeek": 4, "weeklyRate": 0.5})
        assert schema.activity_level == 4
        assert schema.weekly_rate == 0.5

    def test_activity_level_alias(self):
        """Test activityLevel alias."""
        schema = UserStatsRequest.model_validate({"activityLevel": 6})
        assert schema.activity_level == 6

    def test_snake_case(self):
        """Test snake_case keys."""
        schema = UserStatsRequest(activity_level=2, weekly_rate=0.25)
        assert schema.activity_level == 2
        assert schema.weekly_rate == 0.25

    def test_empty_is_valid(self):
        """Test every field is optional."""
        schema = UserStatsRequest()
        assert schema.model_dump() == {
            "weight": None,
            "height": None,
            "age": None,
            "gender": None,
            "activity_level": None,
            "goal": None,
            "weekly_rate": None,
        }

    def test_garbage_passes_through(self):
        """Test malformed values are left for the calculator to default."""
        schema = UserStatsRequest(weight="abc")
        assert schema.weight == "abc"


class TestQuotaSchemas:
    """Tests for quota schemas."""

    def test_from_decision_allowed(self):
        """Test allowed decision mapping."""
        decision = QuotaDecision(status=QuotaStatus.ALLOWED, limit=2, time_frame=TimeFrame.WEEKLY, used=1)
        schema = QuotaDecisionResponse.from_decision(AIFeature.AI_SUGGESTIONS, decision)

        assert schema.allowed is True
        assert schema.status == QuotaStatus.ALLOWED
        assert schema.used == 1
        assert schema.message is None

    def test_from_decision_exceeded(self):
        """Test denied decision mapping."""
        decision = QuotaDecision(
            status=QuotaStatus.QUOTA_EXCEEDED, limit=1, time_frame=TimeFrame.DAILY, used=1, message="limit"
        )
        schema = QuotaDecisionResponse.from_decision(AIFeature.FOOD_SCAN, decision)

        assert schema.allowed is False
        assert schema.model_dump(mode="json")["time_frame"] == "daily"

    def test_usage_logged_invalid_feature(self):
        """Test unknown feature is rejected."""
        with pytest.raises(ValidationError):
            UsageLoggedResponse(feature="horoscope", logged=True)


class TestBmiResponse:
    """Tests for BMI schema."""

    def test_position_bounds(self):
        """Test gauge position must be within 0..100."""
        with pytest.raises(ValidationError):
            BmiResponse(bmi=50.0, category="obese", position=120.0)
