from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.nutrition_calc import MissingOnboardingDataError, process_onboarding_data
from core.onboarding import out_of_range_fields
from services.db import UserProfile, get_session
from api.v1.schemas import NutritionTargetsOut, OnboardingIn, ProfileOut

router = APIRouter()
_LOG = logging.getLogger(__name__)


# ───────────────────────── helpers ──────────────────────────
async def _fetch(db: AsyncSession, user_id: str) -> UserProfile | None:
    return (
        await db.execute(select(UserProfile).where(UserProfile.user_id == user_id))
    ).scalar_one_or_none()


async def _fetch_or_404(db: AsyncSession, user_id: str) -> UserProfile:
    row = await _fetch(db, user_id)
    if row is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    return row


# ───────────────────────── create ──────────────────────────
@router.post(
    "/{user_id}/profile",
    response_model=ProfileOut,
    status_code=status.HTTP_201_CREATED,
    summary="Submit onboarding answers and store the computed profile",
)
async def create_profile(
    user_id: str,
    body: OnboardingIn,
    db: AsyncSession = Depends(get_session),
) -> ProfileOut:
    answers = body.model_dump(mode="json")

    bad = out_of_range_fields(answers)
    if bad:
        raise HTTPException(
            status_code=422,
            detail={"message": "Onboarding answers out of range", "fields": bad},
        )

    try:
        profile = process_onboarding_data(answers, user_id)
    except MissingOnboardingDataError as exc:
        raise HTTPException(
            status_code=422,
            detail={"message": str(exc), "missing": exc.missing},
        ) from exc

    if await _fetch(db, user_id) is not None:
        raise HTTPException(status_code=409, detail="Profile already exists")

    row = UserProfile.from_profile(profile)
    db.add(row)
    try:
        await db.commit()
    except IntegrityError as exc:          # lost a race with a parallel submit
        await db.rollback()
        raise HTTPException(status_code=409, detail="Profile already exists") from exc

    await db.refresh(row)
    _LOG.info("profile stored for user %s (%s kcal)", user_id, profile.calorie_goal)
    return ProfileOut.model_validate(row, from_attributes=True)


# ───────────────────────── read ─────────────────────────────
@router.get("/{user_id}/profile", response_model=ProfileOut)
async def fetch_profile(
    user_id: str,
    db: AsyncSession = Depends(get_session),
) -> ProfileOut:
    row = await _fetch_or_404(db, user_id)
    return ProfileOut.model_validate(row, from_attributes=True)


@router.get(
    "/{user_id}/profile/targets",
    response_model=NutritionTargetsOut,
    summary="Daily calorie and macro targets only",
)
async def fetch_targets(
    user_id: str,
    db: AsyncSession = Depends(get_session),
) -> NutritionTargetsOut:
    row = await _fetch_or_404(db, user_id)
    return NutritionTargetsOut.model_validate(row, from_attributes=True)


# ───────────────────────── delete ───────────────────────────
@router.delete(
    "/{user_id}/profile",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_profile(
    user_id: str,
    db: AsyncSession = Depends(get_session),
) -> Response:
    row = await _fetch_or_404(db, user_id)
    await db.delete(row)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
