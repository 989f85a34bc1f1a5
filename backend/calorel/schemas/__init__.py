"""
Pydantic schemas for API request/response validation.
"""
from calorel.schemas.nutrition import (
    UserStatsRequest,
    NutritionPlanResponse,
    MacrosResponse,
    BmiRequest,
    BmiResponse,
)
from calorel.schemas.ai_usage import (
    QuotaDecisionResponse,
    UsageLoggedResponse,
)

__all__ = [
    "UserStatsRequest",
    "NutritionPlanResponse",
    "MacrosResponse",
    "BmiRequest",
    "BmiResponse",
    "QuotaDecisionResponse",
    "UsageLoggedResponse",
]
