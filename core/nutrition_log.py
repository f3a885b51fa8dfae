"""
core/nutrition_log.py
────────────────────────────────────────────────────────────────────────
Food-log arithmetic for the daily tracker:

* scale a food's per-100 g values to the logged portion
* sum a day's logged entries
* compare the day's totals with the profile's targets (percent of goal)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from core.nutrition_calc import round_half_up


@dataclass(frozen=True)
class FoodItem:
    name: str
    calories_per_100g: float
    protein_per_100g: float = 0
    carbs_per_100g: float = 0
    fat_per_100g: float = 0


@dataclass(frozen=True)
class Nutrition:
    calories: int = 0
    protein: int = 0
    carbs: int = 0
    fat: int = 0


def nutrition_for_portion(food: FoodItem, grams: float) -> Nutrition:
    """Per-100 g values scaled to `grams`, each rounded on its own."""
    factor = grams / 100
    return Nutrition(
        calories=round_half_up(food.calories_per_100g * factor),
        protein=round_half_up(food.protein_per_100g * factor),
        carbs=round_half_up(food.carbs_per_100g * factor),
        fat=round_half_up(food.fat_per_100g * factor),
    )


def daily_totals(logs: Iterable[Any]) -> Nutrition:
    """
    Sum `calories`, `protein`, `carbs` and `fat` over log entries (rows or
    any objects with those attributes). Macros left blank count as 0.
    """
    cal = prot = carbs = fat = 0
    for log in logs:
        cal += log.calories
        prot += log.protein or 0
        carbs += log.carbs or 0
        fat += log.fat or 0
    return Nutrition(calories=cal, protein=prot, carbs=carbs, fat=fat)


def percent_of_goal(current: float, goal: float) -> int:
    """Rounded percentage; not capped, so an overshoot reads e.g. 112."""
    if goal <= 0:
        return 0
    return round_half_up(current / goal * 100)


@dataclass(frozen=True)
class DailyProgress:
    totals: Nutrition
    targets: Nutrition
    percent: Nutrition


def daily_progress(
    logs: Iterable[Any],
    calorie_goal: int,
    protein_grams: int,
    carbs_grams: int,
    fat_grams: int,
) -> DailyProgress:
    totals = daily_totals(logs)
    targets = Nutrition(calorie_goal, protein_grams, carbs_grams, fat_grams)
    return DailyProgress(
        totals=totals,
        targets=targets,
        percent=Nutrition(
            calories=percent_of_goal(totals.calories, targets.calories),
            protein=percent_of_goal(totals.protein, targets.protein),
            carbs=percent_of_goal(totals.carbs, targets.carbs),
            fat=percent_of_goal(totals.fat, targets.fat),
        ),
    )
