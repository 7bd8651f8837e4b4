"""Re-export individual schema modules for easy imports."""

from .user import LoginIn, ProfileIn, ProfileOut, SignupIn, SignupOut, TokenOut
from .meal import MealIn, MealOut, MealUpdate
from .plan import AdjustedPlanOut, AdjustmentIn, AdjustmentOption, BasePlanOut, PlanOut, WeightProgressOut
from .weight import WeightLogIn, WeightLogOut
from .workout import ExerciseProgressOut, WorkoutSessionIn, WorkoutSessionOut
from .nutrition import BarcodeIn, EstimateIn, FoodSuggestionOut, NutritionOut, ProductOut
from .stats import DailyStatsOut, WeeklySummaryOut

__all__ = [
    "LoginIn",
    "ProfileIn",
    "ProfileOut",
    "SignupIn",
    "SignupOut",
    "TokenOut",
    "MealIn",
    "MealOut",
    "MealUpdate",
    "AdjustedPlanOut",
    "AdjustmentIn",
    "AdjustmentOption",
    "BasePlanOut",
    "PlanOut",
    "WeightProgressOut",
    "WeightLogIn",
    "WeightLogOut",
    "ExerciseProgressOut",
    "WorkoutSessionIn",
    "WorkoutSessionOut",
    "BarcodeIn",
    "EstimateIn",
    "FoodSuggestionOut",
    "NutritionOut",
    "ProductOut",
    "DailyStatsOut",
    "WeeklySummaryOut",
]
