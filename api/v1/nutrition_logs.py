from __future__ import annotations

import datetime as dt
import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.nutrition_calc import round_half_up
from core.nutrition_log import FoodItem, daily_progress, nutrition_for_portion
from services.db import NutritionLog, UserProfile, get_session
from api.v1.schemas import DailyProgressOut, NutritionLogIn, NutritionLogOut, NutritionOut

router = APIRouter()
_LOG = logging.getLogger(__name__)


# ───────────────────────── helpers ──────────────────────────
async def _logs_for_day(db: AsyncSession, user_id: str, on: dt.date) -> list[NutritionLog]:
    result = await db.execute(
        select(NutritionLog)
        .where(NutritionLog.user_id == user_id, NutritionLog.date == on)
        .order_by(NutritionLog.time, NutritionLog.id)
    )
    return list(result.scalars().all())


def _rounded_or_none(value: float | None) -> int | None:
    return round_half_up(value) if value else None


def _build_row(user_id: str, body: NutritionLogIn) -> NutritionLog:
    common = dict(
        user_id=user_id,
        date=body.date,
        meal_type=body.meal_type.value,
        time=body.time,
    )

    if body.food is not None:
        food = body.food
        n = nutrition_for_portion(
            FoodItem(
                name=food.name,
                calories_per_100g=food.calories_per_100g,
                protein_per_100g=food.protein_per_100g,
                carbs_per_100g=food.carbs_per_100g,
                fat_per_100g=food.fat_per_100g,
            ),
            food.grams,
        )
        return NutritionLog(
            **common,
            food_name=food.name,
            calories=n.calories,
            protein=n.protein,
            carbs=n.carbs,
            fat=n.fat,
            portion=f"{food.grams:g}g",
        )

    # manual entry: name and a non-zero calorie count are required
    if not body.food_name or not body.calories:
        raise HTTPException(
            status_code=422,
            detail="Manual entries need food_name and calories (or send `food`)",
        )
    return NutritionLog(
        **common,
        food_name=body.food_name,
        calories=body.calories,
        protein=_rounded_or_none(body.protein),
        carbs=_rounded_or_none(body.carbs),
        fat=_rounded_or_none(body.fat),
        portion=body.portion or "1 serving",
    )


# ───────────────────────── create ──────────────────────────
@router.post(
    "/{user_id}/nutrition-logs",
    response_model=NutritionLogOut,
    status_code=status.HTTP_201_CREATED,
    summary="Log a food (from per-100 g values or entered by hand)",
)
async def add_log(
    user_id: str,
    body: NutritionLogIn,
    db: AsyncSession = Depends(get_session),
) -> NutritionLogOut:
    row = _build_row(user_id, body)
    db.add(row)
    await db.commit()
    await db.refresh(row)
    _LOG.info("logged %s kcal for user %s on %s", row.calories, user_id, row.date)
    return NutritionLogOut.model_validate(row, from_attributes=True)


# ───────────────────────── read ─────────────────────────────
@router.get(
    "/{user_id}/nutrition-logs",
    response_model=list[NutritionLogOut],
    summary="One day's log, ordered by time",
)
async def list_logs(
    user_id: str,
    on: dt.date = Query(..., alias="date"),
    db: AsyncSession = Depends(get_session),
) -> list[NutritionLogOut]:
    return [
        NutritionLogOut.model_validate(r, from_attributes=True)
        for r in await _logs_for_day(db, user_id, on)
    ]


@router.get(
    "/{user_id}/nutrition-logs/progress",
    response_model=DailyProgressOut,
    summary="Day totals against the profile's calorie and macro targets",
)
async def day_progress(
    user_id: str,
    on: dt.date = Query(..., alias="date"),
    db: AsyncSession = Depends(get_session),
) -> DailyProgressOut:
    profile = (
        await db.execute(select(UserProfile).where(UserProfile.user_id == user_id))
    ).scalar_one_or_none()
    if profile is None:
        raise HTTPException(status_code=404, detail="Profile not found")

    prog = daily_progress(
        await _logs_for_day(db, user_id, on),
        calorie_goal=profile.calorie_goal,
        protein_grams=profile.protein_grams,
        carbs_grams=profile.carbs_grams,
        fat_grams=profile.fat_grams,
    )
    return DailyProgressOut(
        date=on,
        totals=NutritionOut(**asdict(prog.totals)),
        targets=NutritionOut(**asdict(prog.targets)),
        percent=NutritionOut(**asdict(prog.percent)),
    )


# ───────────────────────── delete ───────────────────────────
@router.delete(
    "/{user_id}/nutrition-logs/{log_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_log(
    user_id: str,
    log_id: int,
    db: AsyncSession = Depends(get_session),
) -> Response:
    row = await db.get(NutritionLog, log_id)
    if row is None or row.user_id != user_id:
        raise HTTPException(status_code=404, detail="Log entry not found")
    await db.delete(row)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
