"""
scripts/refresh_profiles.py
────────────────────────────────────────────────────────────────────────
Recompute the derived columns of `user_profile` from the stored answers
(run after a formula or table change):

    python -m scripts.refresh_profiles               # all users

    python -m scripts.refresh_profiles --user abc123 # one user
"""
from __future__ import annotations

import asyncio
import logging
from argparse import ArgumentParser

from dotenv import load_dotenv
load_dotenv()

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.nutrition_calc import (
    MissingOnboardingDataError,
    NutritionalCalculator,
    OnboardingAnswers,
)
from services.db import UserProfile, session_scope
from utils.logging_config import setup_logging

_LOG = logging.getLogger(__name__)

calc = NutritionalCalculator()

_ANSWER_COLUMNS = (
    "gender",
    "age",
    "height_cm",
    "weight_kg",
    "activity_level",
    "goal",
    "preferred_diet",
    "health_notes",
    "workout_days_per_week",
)


def _answers(row: UserProfile) -> OnboardingAnswers:
    return OnboardingAnswers(**{c: getattr(row, c) for c in _ANSWER_COLUMNS})


# ───────────────────────────────
# Per-row refresh
# ───────────────────────────────
def refresh_row(row: UserProfile) -> bool:
    """Recompute one row in place. Returns False when its answers are incomplete."""
    try:
        profile = calc.process(_answers(row), row.user_id)
    except MissingOnboardingDataError as exc:
        _LOG.warning("· skip %s – missing %s", row.user_id, ", ".join(exc.missing))
        return False

    row.apply(profile)
    return True


async def refresh_profiles(db: AsyncSession, user_id: str | None = None) -> int:
    """Refresh one user's profile (or every profile) and commit. Returns rows updated."""
    stmt = select(UserProfile)
    if user_id is not None:
        stmt = stmt.where(UserProfile.user_id == user_id)

    rows = (await db.execute(stmt)).scalars().all()
    if not rows:
        _LOG.warning("· nothing to refresh%s", f" for {user_id}" if user_id else "")
        return 0

    updated = sum(1 for row in rows if refresh_row(row))
    await db.commit()
    _LOG.info("✓ %d/%d profiles refreshed", updated, len(rows))
    return updated


# ───────────────────────────────
# CLI entrypoint
# ───────────────────────────────
async def _async_main() -> None:
    ap = ArgumentParser()
    ap.add_argument("--user", help="refresh only this user-id")
    args = ap.parse_args()

    async with session_scope() as db:
        await refresh_profiles(db, args.user)


if __name__ == "__main__":  # pragma: no cover
    setup_logging()
    asyncio.run(_async_main())
