from __future__ import annotations

import datetime as dt
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class MealType(str, Enum):
    breakfast = "breakfast"
    lunch = "lunch"
    dinner = "dinner"
    snack = "snack"


class FoodPortionIn(BaseModel):
    """A food-database item (per-100 g values) and the grams eaten."""
    name: str = Field(..., min_length=1)
    calories_per_100g: float = Field(..., ge=0)
    protein_per_100g: float = Field(0, ge=0)
    carbs_per_100g: float = Field(0, ge=0)
    fat_per_100g: float = Field(0, ge=0)
    grams: float = Field(100, gt=0)


class NutritionLogIn(BaseModel):
    """
    Either `food` (scaled from per-100 g values) or a manual entry with at
    least `food_name` and `calories`.
    """
    date: dt.date
    meal_type: MealType = MealType.breakfast
    time: str = Field(..., pattern=r"^\d{2}:\d{2}$", examples=["08:30"])

    food: FoodPortionIn | None = None

    food_name: str | None = None
    calories: int | None = Field(None, ge=0)
    protein: float | None = Field(None, ge=0)
    carbs: float | None = Field(None, ge=0)
    fat: float | None = Field(None, ge=0)
    portion: str | None = None


class NutritionLogOut(BaseModel):
    id: int
    user_id: str
    date: dt.date
    meal_type: MealType
    food_name: str
    calories: int
    protein: int | None = None
    carbs: int | None = None
    fat: int | None = None
    portion: str
    time: str
    created_at: dt.datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class NutritionOut(BaseModel):
    calories: int
    protein: int
    carbs: int
    fat: int


class DailyProgressOut(BaseModel):
    date: dt.date
    totals: NutritionOut
    targets: NutritionOut
    percent: NutritionOut      # of target, rounded, not capped
