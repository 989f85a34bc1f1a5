"""
Pydantic schemas for nutrition endpoints.
Inputs are deliberately loose: bad values reach the calculator, which
substitutes defaults instead of failing the request.
"""
from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from typing import Any, Optional

from calorel.services.nutrition_calculator import BmiCategory, MacroStrategy


class UserStatsRequest(BaseModel):
    """Biometric and goal profile. Accepts snake_case or the app's camelCase keys."""
    model_config = ConfigDict(populate_by_name=True)

    weight: Any = Field(None, description="Body weight in kg")
    height: Any = Field(None, description="Height in cm")
    age: Any = Field(None, description="Age in years")
    gender: Any = Field(None, description="male, female or unspecified")
    activity_level: Any = Field(
        None,
        validation_alias=AliasChoices("activity_level", "activityLevel", "workoutsPerWeek", "workouts_per_week"),
        description="Workout sessions per week"
    )
    goal: Any = Field(None, description="lose_weight, maintain_weight or gain_weight")
    weekly_rate: Any = Field(
        None,
        validation_alias=AliasChoices("weekly_rate", "weeklyRate"),
        description="Target weight change in kg per week"
    )


class NutritionPlanResponse(BaseModel):
    """Full daily targets."""
    calories: int
    protein: int
    carbs: int
    fats: int
    sugars: int
    fiber: Optional[int] = None
    strategy: MacroStrategy
    bmr: float
    tdee: int


class MacrosResponse(BaseModel):
    """Macro targets in the shape the mobile app's onboarding expects."""
    calories: int
    protein: int
    carbs: int
    fats: int
    sugars: int


class BmiRequest(BaseModel):
    weight: Any = None
    height: Any = None


class BmiResponse(BaseModel):
    bmi: float
    category: BmiCategory
    position: float = Field(..., ge=0, le=100, description="Gauge position (BMI 15..40 mapped to 0..100)")
