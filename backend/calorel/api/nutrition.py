"""
Nutrition endpoints: daily plan, onboarding macros and BMI.
Pure computation, no authentication or database access.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Query

from calorel.config import settings
from calorel.schemas.nutrition import (
    UserStatsRequest,
    NutritionPlanResponse,
    MacrosResponse,
    BmiRequest,
    BmiResponse,
)
from calorel.services.nutrition_calculator import (
    MacroStrategy,
    SafetyFloorPolicy,
    UserStats,
    compute_bmi,
    compute_plan,
)
from calorel.utils.logging import log_plan_computed
from calorel.utils.metrics import nutrition_plans_computed_total

logger = logging.getLogger(__name__)

router = APIRouter()


def _plan_for(request: UserStatsRequest, strategy: MacroStrategy):
    stats = UserStats.from_raw(**request.model_dump())
    plan = compute_plan(
        stats,
        strategy=strategy,
        floor_policy=SafetyFloorPolicy(settings.nutrition_safety_floor),
    )
    nutrition_plans_computed_total.labels(strategy=plan.strategy.value).inc()
    log_plan_computed(logger, strategy=plan.strategy.value, calories=plan.calories, goal=stats.goal.value)
    return plan


@router.post("/plan", response_model=NutritionPlanResponse)
async def nutrition_plan(
    request: UserStatsRequest,
    strategy: Optional[MacroStrategy] = Query(None, description="Macro split; server default if omitted")
):
    """
    Compute daily calorie and macro targets.
    Invalid fields are replaced by defaults; this endpoint never rejects a profile.
    """
    plan = _plan_for(request, strategy or MacroStrategy(settings.nutrition_macro_strategy))
    return NutritionPlanResponse(
        calories=plan.calories,
        protein=plan.protein,
        carbs=plan.carbs,
        fats=plan.fats,
        sugars=plan.sugars,
        fiber=plan.fiber,
        strategy=plan.strategy,
        bmr=plan.bmr,
        tdee=plan.tdee,
    )


@router.post("/calculate-macros", response_model=MacrosResponse)
async def calculate_macros(request: UserStatsRequest):
    """
    Onboarding macro calculation.
    Body: {gender, age, height, weight, workoutsPerWeek, goal, weeklyRate}.
    """
    plan = _plan_for(request, MacroStrategy(settings.nutrition_server_strategy))
    return MacrosResponse(
        calories=plan.calories,
        protein=plan.protein,
        carbs=plan.carbs,
        fats=plan.fats,
        sugars=plan.sugars,
    )


@router.post("/bmi", response_model=BmiResponse)
async def bmi(request: BmiRequest):
    """Body-mass index with category and gauge position."""
    result = compute_bmi(request.weight, request.height)
    return BmiResponse(bmi=result.bmi, category=result.category, position=result.position)
