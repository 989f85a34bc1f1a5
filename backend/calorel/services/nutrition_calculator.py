"""
Nutrition plan calculator.

Derives daily calorie and macro targets from a user's biometric profile:
Mifflin-St Jeor BMR, an activity multiplier chosen by weekly workout count,
a goal adjustment from the target weekly weight change, and one of two
macro split strategies. Pure functions, no I/O; invalid inputs are replaced
by defaults instead of raising.
"""
import enum
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Optional, Tuple

from calorel.utils.logging import log_input_defaulted

logger = logging.getLogger(__name__)


class Gender(str, enum.Enum):
    MALE = "male"
    FEMALE = "female"
    UNSPECIFIED = "unspecified"


class Goal(str, enum.Enum):
    LOSE_WEIGHT = "lose_weight"
    MAINTAIN_WEIGHT = "maintain_weight"
    GAIN_WEIGHT = "gain_weight"


class MacroStrategy(str, enum.Enum):
    """Macro split variants. Both are in use by different callers."""
    PERCENTAGE = "percentage"
    PER_KILOGRAM = "per_kilogram"


class SafetyFloorPolicy(str, enum.Enum):
    """Minimum daily calories applied when losing weight."""
    FLAT = "flat"
    BY_GENDER = "by_gender"


@dataclass(frozen=True)
class NutritionConstants:
    """Every tunable number used by the calculator."""

    kcal_per_kg_body_fat: float = 7700.0
    days_per_week: int = 7

    # BMR offsets by sex (male is also the fallback)
    male_offset: float = 5.0
    female_offset: float = -161.0

    # (minimum weekly sessions, multiplier), checked top to bottom
    activity_multipliers: Tuple[Tuple[int, float], ...] = (
        (6, 1.725),
        (4, 1.55),
        (2, 1.375),
        (0, 1.2),
    )

    # Safety floors
    flat_floor_kcal: int = 1200
    male_floor_kcal: int = 1500
    female_floor_kcal: int = 1200

    kcal_per_gram_protein: float = 4.0
    kcal_per_gram_carbs: float = 4.0
    kcal_per_gram_fat: float = 9.0

    # Percentage strategy
    protein_ratio: float = 0.30
    fat_ratio: float = 0.35
    carb_ratio: float = 0.35
    sugar_ratio: float = 0.10
    fiber_per_1000_kcal: float = 14.0

    # Per-kilogram strategy
    protein_g_per_kg: float = 2.0
    max_protein_ratio: float = 0.35
    per_kg_fat_ratio: float = 0.30
    strict_sugar_ratio: float = 0.05
    max_sugar_g: int = 30

    # Substitutes for missing or invalid inputs
    default_weight_kg: float = 70.0
    default_height_cm: float = 170.0
    default_age: int = 30
    default_workouts_per_week: int = 3

    # Plausibility bounds; values outside them are treated as invalid
    min_weight_kg: float = 2.0
    max_weight_kg: float = 500.0
    min_height_cm: float = 30.0
    max_height_cm: float = 300.0
    min_age: int = 1
    max_age: int = 150
    max_weekly_rate_kg: float = 2.0


DEFAULT_CONSTANTS = NutritionConstants()


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer with halves going up (2.5 -> 3, -2.5 -> -2).

    Non-finite values give 0.
    """
    if not math.isfinite(value):
        return 0
    return int(math.floor(value + 0.5))


def _as_number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def _in_range(number: Optional[float], minimum: float, maximum: float) -> bool:
    return number is not None and minimum <= number <= maximum


def _in_range_or_default(name: str, value: Any, minimum: float, maximum: float, default):
    number = _as_number(value)
    if not _in_range(number, minimum, maximum):
        log_input_defaulted(logger, field=name, value=value, default=default)
        return default
    return number


@dataclass(frozen=True)
class UserStats:
    """Calculator input. Build it with `from_raw` to get input sanitizing."""

    weight: float
    height: float
    age: int
    gender: Gender = Gender.UNSPECIFIED
    activity_level: int = 0
    goal: Goal = Goal.MAINTAIN_WEIGHT
    weekly_rate: float = 0.0

    @classmethod
    def from_raw(
        cls,
        weight: Any = None,
        height: Any = None,
        age: Any = None,
        gender: Any = None,
        activity_level: Any = None,
        goal: Any = None,
        weekly_rate: Any = None,
        constants: NutritionConstants = DEFAULT_CONSTANTS,
    ) -> "UserStats":
        """
        Build stats from loosely typed input.

        Missing, malformed or implausible numbers fall back to the defaults in
        `constants`. Unknown gender maps to UNSPECIFIED, unknown goal to
        MAINTAIN_WEIGHT.
        """
        c = constants
        weight_kg = _in_range_or_default("weight", weight, c.min_weight_kg, c.max_weight_kg, c.default_weight_kg)
        height_cm = _in_range_or_default("height", height, c.min_height_cm, c.max_height_cm, c.default_height_cm)

        # Range check after rounding so 0.3 years does not become age 0
        age_number = _as_number(age)
        age_years = round_half_up(age_number) if age_number is not None else None
        if not _in_range(age_years, c.min_age, c.max_age):
            log_input_defaulted(logger, field="age", value=age, default=c.default_age)
            age_years = c.default_age

        workouts = _as_number(activity_level)
        if workouts is None or workouts < 0:
            log_input_defaulted(
                logger, field="activity_level", value=activity_level,
                default=constants.default_workouts_per_week
            )
            workouts = constants.default_workouts_per_week

        rate = _as_number(weekly_rate)
        if rate is None or abs(rate) > c.max_weekly_rate_kg:
            if weekly_rate is not None:
                log_input_defaulted(logger, field="weekly_rate", value=weekly_rate, default=0.0)
            rate = 0.0

        return cls(
            weight=weight_kg,
            height=height_cm,
            age=age_years,
            gender=parse_gender(gender),
            activity_level=int(workouts),
            goal=parse_goal(goal),
            weekly_rate=abs(rate),
        )


@dataclass(frozen=True)
class NutritionPlan:
    """Daily targets. Recomputed whenever the stats change."""

    calories: int
    protein: int
    carbs: int
    fats: int
    sugars: int
    fiber: Optional[int] = None
    strategy: MacroStrategy = MacroStrategy.PERCENTAGE
    bmr: float = field(default=0.0, compare=False)
    tdee: int = field(default=0, compare=False)


def parse_gender(value: Any) -> Gender:
    if isinstance(value, Gender):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized == Gender.FEMALE.value:
            return Gender.FEMALE
        if normalized == Gender.MALE.value:
            return Gender.MALE
    return Gender.UNSPECIFIED


def parse_goal(value: Any) -> Goal:
    if isinstance(value, Goal):
        return value
    try:
        return Goal(str(value).strip().lower())
    except ValueError:
        if value is not None:
            log_input_defaulted(logger, field="goal", value=value, default=Goal.MAINTAIN_WEIGHT.value)
        return Goal.MAINTAIN_WEIGHT


def basal_metabolic_rate(stats: UserStats, constants: NutritionConstants = DEFAULT_CONSTANTS) -> float:
    """Mifflin-St Jeor. Unspecified gender uses the male offset."""
    bmr = 10 * stats.weight + 6.25 * stats.height - 5 * stats.age
    if stats.gender == Gender.FEMALE:
        return bmr + constants.female_offset
    return bmr + constants.male_offset


def activity_multiplier(workouts_per_week: int, constants: NutritionConstants = DEFAULT_CONSTANTS) -> float:
    for min_sessions, multiplier in constants.activity_multipliers:
        if workouts_per_week >= min_sessions:
            return multiplier
    return constants.activity_multipliers[-1][1]


def daily_calorie_delta(weekly_rate: float, constants: NutritionConstants = DEFAULT_CONSTANTS) -> int:
    """kcal/day needed to change body mass by `weekly_rate` kg per week."""
    return round_half_up(abs(weekly_rate) * constants.kcal_per_kg_body_fat / constants.days_per_week)


def safety_floor(
    gender: Gender,
    policy: SafetyFloorPolicy = SafetyFloorPolicy.BY_GENDER,
    constants: NutritionConstants = DEFAULT_CONSTANTS,
) -> int:
    if policy == SafetyFloorPolicy.FLAT:
        return constants.flat_floor_kcal
    if gender == Gender.FEMALE:
        return constants.female_floor_kcal
    return constants.male_floor_kcal


def target_calories(
    stats: UserStats,
    floor_policy: SafetyFloorPolicy = SafetyFloorPolicy.BY_GENDER,
    constants: NutritionConstants = DEFAULT_CONSTANTS,
) -> Tuple[float, int, int]:
    """Return (bmr, tdee, target) for the given stats."""
    bmr = basal_metabolic_rate(stats, constants)
    tdee = round_half_up(bmr * activity_multiplier(stats.activity_level, constants))
    delta = daily_calorie_delta(stats.weekly_rate, constants)

    if stats.goal == Goal.LOSE_WEIGHT:
        target = max(tdee - delta, safety_floor(stats.gender, floor_policy, constants))
    elif stats.goal == Goal.GAIN_WEIGHT:
        target = tdee + delta
    else:
        target = tdee

    return bmr, tdee, max(target, 0)


def _percentage_split(target: int, stats: UserStats, c: NutritionConstants) -> dict:
    return {
        "protein": round_half_up(target * c.protein_ratio / c.kcal_per_gram_protein),
        "fats": round_half_up(target * c.fat_ratio / c.kcal_per_gram_fat),
        "carbs": round_half_up(target * c.carb_ratio / c.kcal_per_gram_carbs),
        "sugars": round_half_up(target * c.sugar_ratio / c.kcal_per_gram_carbs),
        "fiber": round_half_up(target / 1000 * c.fiber_per_1000_kcal),
    }


def _per_kilogram_split(target: int, stats: UserStats, c: NutritionConstants) -> dict:
    protein = round_half_up(c.protein_g_per_kg * stats.weight)
    max_protein_kcal = target * c.max_protein_ratio
    if protein * c.kcal_per_gram_protein > max_protein_kcal:
        protein = round_half_up(max_protein_kcal / c.kcal_per_gram_protein)

    fats = round_half_up(target * c.per_kg_fat_ratio / c.kcal_per_gram_fat)
    remaining_kcal = target - protein * c.kcal_per_gram_protein - fats * c.kcal_per_gram_fat
    carbs = max(0, round_half_up(remaining_kcal / c.kcal_per_gram_carbs))
    sugars = min(c.max_sugar_g, round_half_up(target * c.strict_sugar_ratio / c.kcal_per_gram_carbs))

    return {"protein": protein, "fats": fats, "carbs": carbs, "sugars": sugars, "fiber": None}


_SPLITS = {
    MacroStrategy.PERCENTAGE: _percentage_split,
    MacroStrategy.PER_KILOGRAM: _per_kilogram_split,
}


def compute_plan(
    stats: UserStats,
    strategy: MacroStrategy = MacroStrategy.PERCENTAGE,
    floor_policy: SafetyFloorPolicy = SafetyFloorPolicy.BY_GENDER,
    constants: NutritionConstants = DEFAULT_CONSTANTS,
) -> NutritionPlan:
    """
    Compute daily calorie and macro targets.

    Args:
        stats: Sanitized user stats (see UserStats.from_raw)
        strategy: Macro split variant
        floor_policy: Safety floor applied to weight-loss targets
        constants: Formula constants

    Returns:
        NutritionPlan with non-negative integer targets
    """
    strategy = MacroStrategy(strategy)
    bmr, tdee, target = target_calories(stats, SafetyFloorPolicy(floor_policy), constants)
    macros = _SPLITS[strategy](target, stats, constants)

    fiber = macros.pop("fiber")
    clamped = {name: max(0, grams) for name, grams in macros.items()}

    return NutritionPlan(
        calories=target,
        fiber=max(0, fiber) if fiber is not None else None,
        strategy=strategy,
        bmr=bmr,
        tdee=tdee,
        **clamped,
    )


class BmiCategory(str, enum.Enum):
    INCOMPLETE = "incomplete"
    UNDERWEIGHT = "underweight"
    HEALTHY = "healthy"
    OVERWEIGHT = "overweight"
    OBESE = "obese"


@dataclass(frozen=True)
class BmiResult:
    bmi: float
    category: BmiCategory
    position: float  # 0-100 along the 15..40 gauge


BMI_GAUGE_MIN = 15.0
BMI_GAUGE_MAX = 40.0


def compute_bmi(weight: Any, height: Any, constants: NutritionConstants = DEFAULT_CONSTANTS) -> BmiResult:
    """Body-mass index with its category and gauge position."""
    weight_kg = _as_number(weight)
    height_cm = _as_number(height)
    if not (
        _in_range(weight_kg, constants.min_weight_kg, constants.max_weight_kg)
        and _in_range(height_cm, constants.min_height_cm, constants.max_height_cm)
    ):
        return BmiResult(bmi=0.0, category=BmiCategory.INCOMPLETE, position=0.0)

    height_m = height_cm / 100
    bmi = weight_kg / (height_m * height_m)

    if bmi < 18.5:
        category = BmiCategory.UNDERWEIGHT
    elif bmi < 25:
        category = BmiCategory.HEALTHY
    elif bmi < 30:
        category = BmiCategory.OVERWEIGHT
    else:
        category = BmiCategory.OBESE

    clamped = min(max(bmi, BMI_GAUGE_MIN), BMI_GAUGE_MAX)
    position = (clamped - BMI_GAUGE_MIN) / (BMI_GAUGE_MAX - BMI_GAUGE_MIN) * 100

    return BmiResult(
        bmi=round_half_up(bmi * 10) / 10,
        category=category,
        position=round_half_up(position * 10) / 10,
    )
