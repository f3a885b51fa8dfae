"""
core/nutrition_calc.py
────────────────────────────────────────────────────────────────────────
Turns completed onboarding answers into a daily nutrient budget:

1. BMR          (Mifflin–St Jeor)
2. TDEE         (activity multiplier)
3. Calorie goal (fixed offset per goal)
4. Macros       (protein / carbs / fat split per goal)

Everything here is pure arithmetic – no I/O, no state between calls.
"""

from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass, fields
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

Logger = logging.getLogger(__name__)


# ──────────────────────────────────────────────────────────────────────
#  Answer enums
# ──────────────────────────────────────────────────────────────────────
class Gender(str, Enum):
    male = "male"
    female = "female"
    other = "other"


class ActivityLevel(str, Enum):
    sedentary = "sedentary"
    lightly_active = "lightly_active"
    active = "active"
    very_active = "very_active"


class Goal(str, Enum):
    fat_loss = "fat_loss"
    muscle_gain = "muscle_gain"
    maintenance = "maintenance"
    strength_gain = "strength_gain"


class PreferredDiet(str, Enum):
    veg = "veg"
    non_veg = "non_veg"
    vegan = "vegan"
    keto = "keto"
    paleo = "paleo"


# ──────────────────────────────────────────────────────────────────────
#  Policy tables
# ──────────────────────────────────────────────────────────────────────
ACTIVITY_MULTIPLIERS: Mapping[ActivityLevel, float] = MappingProxyType({
    ActivityLevel.sedentary: 1.2,
    ActivityLevel.lightly_active: 1.375,
    ActivityLevel.active: 1.55,
    ActivityLevel.very_active: 1.725,
})

GOAL_CALORIE_OFFSETS: Mapping[Goal, float] = MappingProxyType({
    Goal.fat_loss: -500,
    Goal.muscle_gain: 250,
    Goal.strength_gain: 250,
    Goal.maintenance: 0,
})

# (protein, carbs, fat) share of calories – each row sums to 1.0
MACRO_SPLITS: Mapping[Goal, tuple[float, float, float]] = MappingProxyType({
    Goal.fat_loss: (0.40, 0.30, 0.30),
    Goal.muscle_gain: (0.30, 0.40, 0.30),
    Goal.strength_gain: (0.35, 0.35, 0.30),
    Goal.maintenance: (0.30, 0.40, 0.30),
})

KCAL_PER_G_PROTEIN = 4
KCAL_PER_G_CARBS = 4
KCAL_PER_G_FAT = 9

REQUIRED_FIELDS: tuple[str, ...] = (
    "gender",
    "age",
    "height_cm",
    "weight_kg",
    "activity_level",
    "goal",
    "preferred_diet",
    "workout_days_per_week",
)


class MissingOnboardingDataError(ValueError):
    """Raised when answers are incomplete; nothing has been computed yet."""

    message = "Missing required onboarding data"

    def __init__(self, missing: list[str]):
        super().__init__(self.message)
        self.missing = missing


def round_half_up(value: float) -> int:
    """Nearest integer, halves go up (2.5 → 3, -2.5 → -2)."""
    return int(math.floor(value + 0.5))


def _coerce(enum_cls: type[Enum], value: Any) -> Enum | None:
    try:
        return enum_cls(value)
    except ValueError:
        return None


# ──────────────────────────────────────────────────────────────────────
#  Records
# ──────────────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class OnboardingAnswers:
    gender: str | None = None              # "male" | "female" | "other"
    age: int | None = None                 # 13–100
    height_cm: float | None = None         # 100–250
    weight_kg: float | None = None         # 30–300
    activity_level: str | None = None
    goal: str | None = None
    preferred_diet: str | None = None      # carried through only
    health_notes: str | None = None        # carried through only
    workout_days_per_week: int | None = None  # 1–7, carried through only

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> OnboardingAnswers:
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    def missing_fields(self) -> list[str]:
        return [name for name in REQUIRED_FIELDS if _is_missing(name, getattr(self, name))]


# workout days only has to be defined; every other answer must be non-empty / non-zero
_DEFINED_ONLY = frozenset({"workout_days_per_week"})


def _is_missing(name: str, value: Any) -> bool:
    if value is None:
        return True
    if name in _DEFINED_ONLY:
        return False
    if isinstance(value, str):
        return not value.strip()
    return not value


@dataclass(frozen=True)
class MacroTargets:
    protein_grams: int
    carbs_grams: int
    fat_grams: int

    @property
    def kcal(self) -> int:
        return (
            self.protein_grams * KCAL_PER_G_PROTEIN
            + self.carbs_grams * KCAL_PER_G_CARBS
            + self.fat_grams * KCAL_PER_G_FAT
        )


@dataclass(frozen=True)
class NutritionProfile:
    user_id: str
    gender: str
    age: int
    height_cm: float
    weight_kg: float
    activity_level: str
    goal: str
    preferred_diet: str
    health_notes: str
    workout_days_per_week: int
    bmr: int
    tdee: int
    calorie_goal: int
    protein_grams: int
    carbs_grams: int
    fat_grams: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# ──────────────────────────────────────────────────────────────────────
#  Calculator
# ──────────────────────────────────────────────────────────────────────
class NutritionalCalculator:
    """Source-of-truth for bmr / tdee / calorie goal / macros."""

    # --------------- BMR --------------------------------------------
    def estimate_bmr(
        self, gender: str, weight_kg: float, height_cm: float, age: int
    ) -> float:
        base = 10 * weight_kg + 6.25 * height_cm - 5 * age
        # female and other share the -161 constant
        return base + (5 if gender == Gender.male else -161)

    # --------------- TDEE -------------------------------------------
    def project_tdee(self, bmr: float, activity_level: str) -> float:
        level = _coerce(ActivityLevel, activity_level)
        if level is None:
            Logger.warning("unknown activity_level %r – using sedentary", activity_level)
            level = ActivityLevel.sedentary
        return bmr * ACTIVITY_MULTIPLIERS[level]

    # --------------- Calories ---------------------------------------
    def adjust_calorie_goal(self, tdee: float, goal: str) -> float:
        return tdee + GOAL_CALORIE_OFFSETS[self._goal(goal)]

    # --------------- Macros -----------------------------------------
    def allocate_macros(self, calorie_goal: float, goal: str) -> MacroTargets:
        prot_pc, carbs_pc, fat_pc = MACRO_SPLITS[self._goal(goal)]
        return MacroTargets(
            protein_grams=round_half_up(calorie_goal * prot_pc / KCAL_PER_G_PROTEIN),
            carbs_grams=round_half_up(calorie_goal * carbs_pc / KCAL_PER_G_CARBS),
            fat_grams=round_half_up(calorie_goal * fat_pc / KCAL_PER_G_FAT),
        )

    def _goal(self, goal: str) -> Goal:
        parsed = _coerce(Goal, goal)
        if parsed is None:
            Logger.warning("unknown goal %r – using maintenance", goal)
            return Goal.maintenance
        return parsed

    # --------------- public entrypoint --------------------------------
    def process(
        self, answers: OnboardingAnswers | Mapping[str, Any], user_id: str
    ) -> NutritionProfile:
        if not isinstance(answers, OnboardingAnswers):
            answers = OnboardingAnswers.from_mapping(answers)

        missing = answers.missing_fields()
        if missing:
            raise MissingOnboardingDataError(missing)

        bmr = self.estimate_bmr(
            answers.gender, answers.weight_kg, answers.height_cm, answers.age
        )
        tdee = self.project_tdee(bmr, answers.activity_level)
        calorie_goal = self.adjust_calorie_goal(tdee, answers.goal)
        macros = self.allocate_macros(calorie_goal, answers.goal)

        profile = NutritionProfile(
            user_id=user_id,
            gender=_plain(answers.gender),
            age=answers.age,
            height_cm=answers.height_cm,
            weight_kg=answers.weight_kg,
            activity_level=_plain(answers.activity_level),
            goal=_plain(answers.goal),
            preferred_diet=_plain(answers.preferred_diet),
            health_notes=answers.health_notes or "",
            workout_days_per_week=answers.workout_days_per_week,
            bmr=round_half_up(bmr),
            tdee=round_half_up(tdee),
            calorie_goal=round_half_up(calorie_goal),
            protein_grams=macros.protein_grams,
            carbs_grams=macros.carbs_grams,
            fat_grams=macros.fat_grams,
        )
        Logger.debug(
            "targets for %s: bmr=%s tdee=%s kcal=%s P/C/F=%s/%s/%s",
            user_id, profile.bmr, profile.tdee, profile.calorie_goal,
            profile.protein_grams, profile.carbs_grams, profile.fat_grams,
        )
        return profile


def _plain(value: Any) -> Any:
    """Store enum members as their raw string value."""
    return value.value if isinstance(value, Enum) else value


def process_onboarding_data(
    answers: OnboardingAnswers | Mapping[str, Any], user_id: str
) -> NutritionProfile:
    return NutritionalCalculator().process(answers, user_id)
