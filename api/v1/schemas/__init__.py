"""Re-export individual schema modules for easy imports."""

from .profile import NutritionTargetsOut, OnboardingIn, ProfileOut
from .nutrition_log import (
    DailyProgressOut,
    FoodPortionIn,
    MealType,
    NutritionLogIn,
    NutritionLogOut,
    NutritionOut,
)

__all__ = [
    "NutritionTargetsOut",
    "OnboardingIn",
    "ProfileOut",
    "DailyProgressOut",
    "FoodPortionIn",
    "MealType",
    "NutritionLogIn",
    "NutritionLogOut",
    "NutritionOut",
]
