"""
core/nutrition_calc.py
────────────────────────────────────────────────────────────────────────
Source-of-truth for calorie + macro targets:

1. BMR  (Mifflin–St Jeor)
2. TDEE (activity multiplier)
3. Goal calories (fixed delta per fitness goal)
4. Base macros (2 g/kg protein, 25 % fat, carbs remainder)
5. Adjusted plan (preset kcal delta on top of the base plan)
6. Weight progress (distance-to-target heuristic)

Everything here is pure and stateless: the caller owns persistence of
which adjustment is active.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any

Logger = logging.getLogger(__name__)

# ──────────────────────────────────────────────────────────────────────
#  Constants
# ──────────────────────────────────────────────────────────────────────
KCAL_PER_G_PROTEIN = 4
KCAL_PER_G_CARBS = 4
KCAL_PER_G_FAT = 9

PROTEIN_G_PER_KG = 2
FAT_SHARE = 0.25

KCAL_PER_KG_FAT = 7700
HEALTHY_RATE_KG_PER_WEEK = 0.5

PROGRESS_NORMALISATION_KG = 10
ON_TRACK_THRESHOLD_KG = 20


class CalculationError(ValueError):
    """Invalid input handed to the calculator (bad number or unknown key)."""


# ──────────────────────────────────────────────────────────────────────
#  Enumerations + lookup tables
# ──────────────────────────────────────────────────────────────────────
class Sex(str, Enum):
    male = "male"
    female = "female"
    other = "other"


class ActivityLevel(str, Enum):
    sedentary = "sedentary"
    lightly_active = "lightly_active"
    moderately_active = "moderately_active"
    very_active = "very_active"
    extremely_active = "extremely_active"

    @property
    def multiplier(self) -> float:
        return ACTIVITY_MULTIPLIERS[self]

    @property
    def label(self) -> str:
        return ACTIVITY_LABELS[self]


class FitnessGoal(str, Enum):
    lose = "lose"
    maintain = "maintain"
    gain = "gain"
    recomposition = "recomposition"

    @property
    def calorie_delta(self) -> int:
        return GOAL_DELTAS[self]

    @property
    def label(self) -> str:
        return GOAL_LABELS[self]


class CalorieAdjustment(str, Enum):
    none = "none"
    deficit_200 = "deficit_200"
    deficit_400 = "deficit_400"
    deficit_600 = "deficit_600"
    surplus_200 = "surplus_200"
    surplus_400 = "surplus_400"
    surplus_600 = "surplus_600"

    @property
    def kcal(self) -> int:
        return ADJUSTMENT_KCAL[self]

    @property
    def label(self) -> str:
        return ADJUSTMENT_LABELS[self]


ACTIVITY_MULTIPLIERS: dict[ActivityLevel, float] = {
    ActivityLevel.sedentary: 1.2,
    ActivityLevel.lightly_active: 1.375,
    ActivityLevel.moderately_active: 1.55,
    ActivityLevel.very_active: 1.725,
    ActivityLevel.extremely_active: 1.9,
}

ACTIVITY_LABELS: dict[ActivityLevel, str] = {
    ActivityLevel.sedentary: "Sedentary (little/no exercise)",
    ActivityLevel.lightly_active: "Lightly active (light exercise 1-3 days/week)",
    ActivityLevel.moderately_active: "Moderately active (moderate exercise 3-5 days/week)",
    ActivityLevel.very_active: "Very active (hard exercise 6-7 days/week)",
    ActivityLevel.extremely_active: "Extremely active (very hard exercise, physical job)",
}

GOAL_DELTAS: dict[FitnessGoal, int] = {
    FitnessGoal.lose: -500,
    FitnessGoal.maintain: 0,
    FitnessGoal.gain: 300,
    FitnessGoal.recomposition: -200,
}

GOAL_LABELS: dict[FitnessGoal, str] = {
    FitnessGoal.lose: "Lose weight",
    FitnessGoal.maintain: "Maintain weight",
    FitnessGoal.gain: "Gain weight",
    FitnessGoal.recomposition: "Body recomposition",
}

ADJUSTMENT_KCAL: dict[CalorieAdjustment, int] = {
    CalorieAdjustment.none: 0,
    CalorieAdjustment.deficit_200: -200,
    CalorieAdjustment.deficit_400: -400,
    CalorieAdjustment.deficit_600: -600,
    CalorieAdjustment.surplus_200: 200,
    CalorieAdjustment.surplus_400: 400,
    CalorieAdjustment.surplus_600: 600,
}

ADJUSTMENT_LABELS: dict[CalorieAdjustment, str] = {
    CalorieAdjustment.none: "No adjustment (base plan)",
    CalorieAdjustment.deficit_200: "-200 kcal (gentle deficit)",
    CalorieAdjustment.deficit_400: "-400 kcal (moderate deficit)",
    CalorieAdjustment.deficit_600: "-600 kcal (aggressive deficit)",
    CalorieAdjustment.surplus_200: "+200 kcal (lean surplus)",
    CalorieAdjustment.surplus_400: "+400 kcal (moderate surplus)",
    CalorieAdjustment.surplus_600: "+600 kcal (aggressive surplus)",
}


# ──────────────────────────────────────────────────────────────────────
#  Value types
# ──────────────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class BodyMetrics:
    weight_kg: float
    height_cm: float
    age_years: int
    sex: Sex | str

    def __post_init__(self) -> None:
        _positive(self.weight_kg, "weight_kg")
        _positive(self.height_cm, "height_cm")
        _positive_int(self.age_years, "age_years")
        object.__setattr__(self, "sex", _parse(Sex, self.sex, "sex"))


@dataclass(frozen=True)
class MacroTarget:
    grams: int
    percentage: int


@dataclass(frozen=True)
class MacroSplit:
    protein: MacroTarget
    carbs: MacroTarget
    fat: MacroTarget

    @property
    def calories(self) -> int:
        """kcal implied by the rounded gram values."""
        return (
            self.protein.grams * KCAL_PER_G_PROTEIN
            + self.carbs.grams * KCAL_PER_G_CARBS
            + self.fat.grams * KCAL_PER_G_FAT
        )


@dataclass(frozen=True)
class BasePlan:
    maintenance_calories: int
    goal_calories: int
    goal_name: str
    macros: MacroSplit


@dataclass(frozen=True)
class AdjustedPlan:
    adjusted_calories: int
    adjustment_kcal: int
    weekly_change_kg: float
    expected_weekly_change: str
    macros: MacroSplit


@dataclass(frozen=True)
class WeightProgress:
    weight_difference: float
    progress_percentage: float
    is_on_track: bool
    weeks_to_goal: int
    time_to_goal: str


# ──────────────────────────────────────────────────────────────────────
#  Energy expenditure
# ──────────────────────────────────────────────────────────────────────
def compute_bmr(
    weight_kg: float, height_cm: float, age_years: int, sex: Sex | str
) -> float:
    """Mifflin–St Jeor. ``other`` uses the female constant."""
    _positive(weight_kg, "weight_kg")
    _positive(height_cm, "height_cm")
    _positive_int(age_years, "age_years")
    sex = _parse(Sex, sex, "sex")

    base = 10 * weight_kg + 6.25 * height_cm - 5 * age_years
    return base + (5 if sex is Sex.male else -161)


def compute_tdee(bmr: float, activity_level: ActivityLevel | str | None) -> float:
    """
    BMR × activity multiplier.

    Unknown or missing activity levels fall back to the sedentary
    multiplier instead of raising; this is the only lenient lookup.
    """
    _finite(bmr, "bmr")
    try:
        level = _parse(ActivityLevel, activity_level, "activity_level")
    except CalculationError:
        Logger.debug("activity level %r unknown – using sedentary", activity_level)
        level = ActivityLevel.sedentary
    return bmr * level.multiplier


# ──────────────────────────────────────────────────────────────────────
#  Base plan
# ──────────────────────────────────────────────────────────────────────
def compute_goal_calories(tdee: float, goal: FitnessGoal | str) -> int:
    _finite(tdee, "tdee")
    goal = _parse(FitnessGoal, goal, "fitness_goal")
    return max(0, round_half_up(tdee + goal.calorie_delta))


def compute_base_macros(goal_calories: float, body_weight_kg: float) -> MacroSplit:
    """
    a. protein = 2 g per kg body weight (goal independent)
    b. fat     = 25 % of calories
    c. carbs   = whatever is left, never below 0 g
    """
    _finite(goal_calories, "goal_calories")
    _positive(body_weight_kg, "body_weight_kg")

    protein_g = round_half_up(body_weight_kg * PROTEIN_G_PER_KG)
    fat_kcal = round_half_up(goal_calories * FAT_SHARE)
    fat_g = round_half_up(fat_kcal / KCAL_PER_G_FAT)
    remaining_kcal = goal_calories - protein_g * KCAL_PER_G_PROTEIN - fat_kcal
    carbs_g = max(0, round_half_up(remaining_kcal / KCAL_PER_G_CARBS))

    if goal_calories > 0:
        protein_pc = round_half_up(protein_g * KCAL_PER_G_PROTEIN / goal_calories * 100)
        carbs_pc = max(0, round_half_up(remaining_kcal / goal_calories * 100))
        fat_pc = round_half_up(FAT_SHARE * 100)
    else:
        # nothing to divide by; grams are already clamped
        protein_pc = carbs_pc = fat_pc = 0

    return MacroSplit(
        protein=MacroTarget(protein_g, protein_pc),
        carbs=MacroTarget(carbs_g, carbs_pc),
        fat=MacroTarget(fat_g, fat_pc),
    )


def build_base_plan(
    metrics: BodyMetrics,
    activity_level: ActivityLevel | str | None,
    goal: FitnessGoal | str,
) -> BasePlan:
    goal = _parse(FitnessGoal, goal, "fitness_goal")
    bmr = compute_bmr(metrics.weight_kg, metrics.height_cm, metrics.age_years, metrics.sex)
    tdee = compute_tdee(bmr, activity_level)
    kcal = compute_goal_calories(tdee, goal)

    return BasePlan(
        maintenance_calories=max(0, round_half_up(tdee)),
        goal_calories=kcal,
        goal_name=goal.label,
        macros=compute_base_macros(kcal, metrics.weight_kg),
    )


# ──────────────────────────────────────────────────────────────────────
#  Adjustment layer
# ──────────────────────────────────────────────────────────────────────
def adjustment_kcal(adjustment: CalorieAdjustment | str) -> int:
    return _parse(CalorieAdjustment, adjustment, "calorie_adjustment").kcal


def apply_adjustment(
    base_goal_calories: float, adjustment: int, body_weight_kg: float
) -> AdjustedPlan:
    """Shift the base goal calories by ``adjustment`` kcal/day and redo macros."""
    _finite(base_goal_calories, "base_goal_calories")
    _finite(adjustment, "adjustment")

    adjusted = max(0, round_half_up(base_goal_calories + adjustment))
    weekly_kg = abs(adjustment * 7) / KCAL_PER_KG_FAT

    if adjustment == 0:
        expected = "No change expected"
    elif adjustment < 0:
        expected = f"~{weekly_kg:.2f} kg/week loss"
    else:
        expected = f"~{weekly_kg:.2f} kg/week gain"

    return AdjustedPlan(
        adjusted_calories=adjusted,
        adjustment_kcal=int(adjustment),
        weekly_change_kg=round(weekly_kg, 2),
        expected_weekly_change=expected,
        macros=compute_base_macros(adjusted, body_weight_kg),
    )


def plan_for_adjustment(
    metrics: BodyMetrics,
    activity_level: ActivityLevel | str | None,
    goal: FitnessGoal | str,
    adjustment: CalorieAdjustment | str = CalorieAdjustment.none,
) -> tuple[BasePlan, AdjustedPlan | None]:
    """
    Base plan plus the adjusted plan for ``adjustment``.

    ``none`` means the base plan is active, so no adjusted plan is
    returned. Reverting an adjustment is just calling this with ``none``.
    """
    adj = _parse(CalorieAdjustment, adjustment, "calorie_adjustment")
    base = build_base_plan(metrics, activity_level, goal)
    if adj is CalorieAdjustment.none:
        return base, None
    return base, apply_adjustment(base.goal_calories, adj.kcal, metrics.weight_kg)


# ──────────────────────────────────────────────────────────────────────
#  Weight progress
# ──────────────────────────────────────────────────────────────────────
def compute_weight_progress(
    current_weight_kg: float, target_weight_kg: float
) -> WeightProgress:
    """
    Proximity score only: 10 kg away reads as 0 %, on target as 100 %.
    There is no memory of the starting weight.
    """
    _positive(current_weight_kg, "current_weight_kg")
    _positive(target_weight_kg, "target_weight_kg")

    diff = target_weight_kg - current_weight_kg
    gap = abs(diff)
    if gap > 0:
        pct = max(0.0, min(100.0, (1 - gap / PROGRESS_NORMALISATION_KG) * 100))
    else:
        pct = 100.0

    weeks = math.ceil(round(gap / HEALTHY_RATE_KG_PER_WEEK, 9))
    return WeightProgress(
        weight_difference=diff,
        progress_percentage=pct,
        is_on_track=gap <= ON_TRACK_THRESHOLD_KG,
        weeks_to_goal=weeks,
        time_to_goal=format_time_to_goal(weeks),
    )


def format_time_to_goal(weeks: int) -> str:
    if weeks > 52:
        years = math.ceil(weeks / 52)
        return f"{years} year{'' if years == 1 else 's'}"
    return f"{weeks} week{'' if weeks == 1 else 's'}"


# ──────────────────────────────────────────────────────────────────────
#  Helpers
# ──────────────────────────────────────────────────────────────────────
def round_half_up(value: float) -> int:
    """Round .5 towards +inf; ``round()`` would give 1508 for 1508.5."""
    # absorb float noise such as 1508.4999999999998
    return int(math.floor(round(value, 9) + 0.5))


def _finite(value: Any, name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise CalculationError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise CalculationError(f"{name} must be finite, got {value!r}")


def _positive(value: Any, name: str) -> None:
    _finite(value, name)
    if value <= 0:
        raise CalculationError(f"{name} must be > 0, got {value!r}")


def _positive_int(value: Any, name: str) -> None:
    _positive(value, name)
    if value != int(value):
        raise CalculationError(f"{name} must be a whole number, got {value!r}")


def _parse(enum_cls: type[Enum], value: Any, name: str) -> Any:
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        try:
            return enum_cls(value.strip().lower())
        except ValueError:
            pass
    allowed = ", ".join(m.value for m in enum_cls)
    raise CalculationError(f"unknown {name} {value!r} (expected one of: {allowed})")
