from __future__ import annotations
import datetime as dt

from pydantic import BaseModel, ConfigDict


class DailyStatsOut(BaseModel):
    date: dt.date
    total_calories: float
    total_protein: float
    total_carbs: float
    total_fat: float
    target_calories: float
    target_protein: float
    target_carbs: float
    target_fat: float
    remaining_calories: float
    calories_pct: float
    protein_pct: float
    carbs_pct: float
    fat_pct: float
    meal_count: int

    model_config = ConfigDict(from_attributes=True)


class DayTotals(BaseModel):
    date: dt.date
    calories: float
    protein: float
    carbs: float
    fat: float
    meal_count: int


class WeeklySummaryOut(BaseModel):
    start: dt.date
    end: dt.date
    days: list[DayTotals]
    average_calories: float
