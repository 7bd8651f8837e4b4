from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class EstimateIn(BaseModel):
    food_description: str = ""


class BarcodeIn(BaseModel):
    barcode: str = ""


class NutritionOut(BaseModel):
    calories: float
    protein: float
    carbs: float
    fat: float
    source: str
    name: str | None = None

    model_config = ConfigDict(from_attributes=True)


class FoodSuggestionOut(BaseModel):
    id: int
    name: str
    brand: str | None = None
    calories: int
    protein: int
    carbs: int
    fat: int
    category: str

    model_config = ConfigDict(from_attributes=True)


class ProductOut(BaseModel):
    barcode: str
    name: str
    brand: str | None = None
    calories: int
    protein: int
    carbs: int
    fat: int
    fiber: int
    sugar: int
    sodium: int
    category: str
    image_url: str | None = None
    serving_size: str
    source: str

    model_config = ConfigDict(from_attributes=True)
