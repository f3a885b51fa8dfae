"""
core/onboarding.py
────────────────────────────────────────────────────────────────────────
The nine onboarding questions, in the order they are asked, plus the
per-question checks that must pass before the calculator runs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping

from core.nutrition_calc import OnboardingAnswers


@dataclass(frozen=True)
class OnboardingStep:
    id: int
    title: str
    subtitle: str
    field: str


ONBOARDING_STEPS: tuple[OnboardingStep, ...] = (
    OnboardingStep(1, "Gender", "Personal Information", "gender"),
    OnboardingStep(2, "Age", "Personal Information", "age"),
    OnboardingStep(3, "Height", "Physical Measurements", "height_cm"),
    OnboardingStep(4, "Weight", "Physical Measurements", "weight_kg"),
    OnboardingStep(5, "Activity Level", "Lifestyle", "activity_level"),
    OnboardingStep(6, "Fitness Goal", "Objectives", "goal"),
    OnboardingStep(7, "Diet Preference", "Nutrition", "preferred_diet"),
    OnboardingStep(8, "Health Notes", "Safety", "health_notes"),
    OnboardingStep(9, "Workout Days", "Schedule", "workout_days_per_week"),
)


def _chosen(value: Any) -> bool:
    return bool(value)


def _between(lo: float, hi: float) -> Callable[[Any], bool]:
    def check(value: Any) -> bool:
        return bool(value) and lo <= value <= hi
    return check


# field → rule; health notes are optional
_RULES: dict[str, Callable[[Any], bool]] = {
    "gender": _chosen,
    "age": _between(13, 100),
    "height_cm": _between(100, 250),
    "weight_kg": _between(30, 300),
    "activity_level": _chosen,
    "goal": _chosen,
    "preferred_diet": _chosen,
    "health_notes": lambda _value: True,
    "workout_days_per_week": _between(1, 7),
}


def _as_answers(answers: OnboardingAnswers | Mapping[str, Any]) -> OnboardingAnswers:
    if isinstance(answers, OnboardingAnswers):
        return answers
    return OnboardingAnswers.from_mapping(answers)


def is_step_valid(step_index: int, answers: OnboardingAnswers | Mapping[str, Any]) -> bool:
    """True when the answer for the zero-based `step_index` may be submitted."""
    if not 0 <= step_index < len(ONBOARDING_STEPS):
        return False
    field = ONBOARDING_STEPS[step_index].field
    return _RULES[field](getattr(_as_answers(answers), field))


def out_of_range_fields(answers: OnboardingAnswers | Mapping[str, Any]) -> list[str]:
    """
    Fields that were answered but fail their step rule.

    Unanswered fields are not reported here; the calculator rejects those
    with `MissingOnboardingDataError`.
    """
    ans = _as_answers(answers)
    bad: list[str] = []
    for idx, step in enumerate(ONBOARDING_STEPS):
        if getattr(ans, step.field) is None:
            continue
        if not is_step_valid(idx, ans):
            bad.append(step.field)
    return bad
