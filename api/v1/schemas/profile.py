from __future__ import annotations
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from core.nutrition_calc import ActivityLevel, Gender, Goal, PreferredDiet


class OnboardingIn(BaseModel):
    """
    Raw onboarding answers. Every field is optional here so that an
    incomplete submission reaches the calculator's own completeness check.
    """
    gender: Gender | None = None
    age: int | None = Field(None, examples=[30])
    height_cm: float | None = Field(None, examples=[180])
    weight_kg: float | None = Field(None, examples=[80])
    activity_level: ActivityLevel | None = None
    goal: Goal | None = None
    preferred_diet: PreferredDiet | None = None
    health_notes: str | None = None
    workout_days_per_week: int | None = Field(None, examples=[4])


class NutritionTargetsOut(BaseModel):
    calorie_goal: int
    protein_grams: int
    carbs_grams: int
    fat_grams: int

    model_config = ConfigDict(from_attributes=True)


class ProfileOut(NutritionTargetsOut):
    user_id: str
    gender: Gender
    age: int
    height_cm: float
    weight_kg: float
    activity_level: ActivityLevel
    goal: Goal
    preferred_diet: PreferredDiet
    health_notes: str | None = None
    workout_days_per_week: int
    bmr: int
    tdee: int
    created_at: datetime | None = None
    updated_at: datetime | None = None
