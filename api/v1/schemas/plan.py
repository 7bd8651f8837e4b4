from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from core.nutrition_calc import CalorieAdjustment


class MacroTargetOut(BaseModel):
    grams: int
    percentage: int

    model_config = ConfigDict(from_attributes=True)


class MacroSplitOut(BaseModel):
    protein: MacroTargetOut
    carbs: MacroTargetOut
    fat: MacroTargetOut

    model_config = ConfigDict(from_attributes=True)


class BasePlanOut(BaseModel):
    maintenance_calories: int
    goal_calories: int
    goal_name: str
    macros: MacroSplitOut

    model_config = ConfigDict(from_attributes=True)


class AdjustedPlanOut(BaseModel):
    adjusted_calories: int
    adjustment_kcal: int
    weekly_change_kg: float
    expected_weekly_change: str
    macros: MacroSplitOut

    model_config = ConfigDict(from_attributes=True)


class WeightProgressOut(BaseModel):
    weight_difference: float
    progress_percentage: float
    is_on_track: bool
    weeks_to_goal: int
    time_to_goal: str

    model_config = ConfigDict(from_attributes=True)


class AdjustmentIn(BaseModel):
    adjustment: CalorieAdjustment


class AdjustmentOption(BaseModel):
    value: CalorieAdjustment
    label: str
    kcal: int


class PlanOut(BaseModel):
    base_plan: BasePlanOut
    current_adjustment: CalorieAdjustment
    adjusted_plan: AdjustedPlanOut | None = None
    weight_progress: WeightProgressOut | None = None
    adjustments: list[AdjustmentOption] = []
