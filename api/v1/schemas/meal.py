from __future__ import annotations
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

MealType = Literal["breakfast", "lunch", "dinner", "snack", "other"]


class MealIn(BaseModel):
    food_name: str = Field(..., min_length=1)
    calories: float = Field(..., ge=0)
    protein: float = Field(0, ge=0)
    carbs: float = Field(0, ge=0)
    fat: float = Field(0, ge=0)
    serving_size: str | None = None
    meal_type: MealType = "other"
    source: str | None = None
    created_at: datetime | None = None   # back-dating; defaults to now


class MealUpdate(BaseModel):
    food_name: str | None = Field(None, min_length=1)
    calories: float | None = Field(None, ge=0)
    protein: float | None = Field(None, ge=0)
    carbs: float | None = Field(None, ge=0)
    fat: float | None = Field(None, ge=0)
    serving_size: str | None = None
    meal_type: MealType | None = None

    # omit a field to keep it; only serving_size may be cleared
    @field_validator("food_name", "calories", "protein", "carbs", "fat", "meal_type")
    @classmethod
    def _not_null(cls, v):
        if v is None:
            raise ValueError("may be omitted but not null")
        return v


class MealOut(BaseModel):
    id: int
    user_id: int
    food_name: str
    calories: float
    protein: float
    carbs: float
    fat: float
    serving_size: str | None = None
    meal_type: str
    source: str | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
