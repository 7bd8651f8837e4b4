from __future__ import annotations
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from core.nutrition_calc import CalorieAdjustment, FitnessGoal, Sex


class SignupIn(BaseModel):
    email: EmailStr
    password: str
    name: str | None = None


class SignupOut(BaseModel):
    id: int
    email: str
    name: str | None = None

    model_config = ConfigDict(from_attributes=True)


class TokenOut(BaseModel):
    access_token: str
    token_type: str = "bearer"


class ProfileIn(BaseModel):
    name: str | None = None
    age: int | None = Field(None, gt=0)
    gender: Sex | None = None
    height_cm: float | None = Field(None, gt=0)
    current_weight_kg: float | None = Field(None, gt=0)
    target_weight_kg: float | None = Field(None, gt=0)
    # free text on purpose: unknown levels fall back to sedentary
    activity_level: str | None = None
    fitness_goal: FitnessGoal | None = None


class ProfileOut(BaseModel):
    id: int
    email: str
    name: str | None = None
    age: int | None = None
    gender: str | None = None
    height_cm: float | None = None
    current_weight_kg: float | None = None
    target_weight_kg: float | None = None
    activity_level: str | None = None
    fitness_goal: str | None = None
    target_calories: int | None = None
    target_protein: int | None = None
    target_carbs: int | None = None
    target_fat: int | None = None
    current_adjustment: CalorieAdjustment = CalorieAdjustment.none
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class LoginIn(BaseModel):
    email: EmailStr
    password: str
