"""
services/db.py
────────────────────────────────────────────────────────────────────────
* Async SQLAlchemy v2 setup
* `UserProfile` model – one row per user in `user_profile`
* `NutritionLog` model – one row per logged food in `nutrition_logs`
* Session helpers for routers (dependency) and scripts (context manager)
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
import datetime as dt
from datetime import datetime
from typing import AsyncGenerator, AsyncIterator

from sqlalchemy import Date, DateTime, Float, Integer, String, Text, func
from sqlalchemy.ext.asyncio import (
    AsyncAttrs,
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import Mapped, declarative_base, mapped_column

from config import settings
from core.nutrition_calc import NutritionProfile

_LOG = logging.getLogger(__name__)

# ───────── connection helper ────────────────────────────────────────
_ENGINE: AsyncEngine | None = None


async def _create_engine() -> AsyncEngine:
    # 1) plain URL
    if settings.database_url:
        return create_async_engine(settings.database_url, pool_pre_ping=True)

    # 2) Cloud SQL connector (only if URL not supplied)
    if not settings.cloud_sql_connection_name:
        raise RuntimeError(
            "Set either DATABASE_URL or CLOUD_SQL_CONNECTION_NAME env var"
        )

    # lazy import here
    try:
        from google.cloud.sql.connector import IPTypes, create_async_connector  # type: ignore
    except ImportError as exc:
        raise RuntimeError(
            "cloud-sql-python-connector missing. Run:\n"
            "pip install 'cloud-sql-python-connector[asyncpg]'"
        ) from exc

    connector = await create_async_connector()

    async def _getconn():  # type: ignore[no-untyped-def]
        return await connector.connect_async(
            settings.cloud_sql_connection_name,
            "asyncpg",
            user=settings.db_user,
            password=settings.db_pass,
            db=settings.db_name,
            ip_type=IPTypes.PRIVATE,
        )

    _LOG.info("using Cloud SQL instance %s", settings.cloud_sql_connection_name)
    return create_async_engine(
        "postgresql+asyncpg://",
        async_creator=_getconn,
        pool_pre_ping=True,
    )


async def engine() -> AsyncEngine:
    global _ENGINE
    if _ENGINE is None:
        _ENGINE = await _create_engine()
    return _ENGINE


# ───────── declarative base ──────────────────────────────────────────
Base = declarative_base(cls=AsyncAttrs)


class UserProfile(Base):
    __tablename__ = "user_profile"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String, unique=True, index=True)

    # onboarding answers (carried through)
    gender: Mapped[str] = mapped_column(String)
    age: Mapped[int] = mapped_column(Integer)
    height_cm: Mapped[float] = mapped_column(Float)
    weight_kg: Mapped[float] = mapped_column(Float)
    activity_level: Mapped[str] = mapped_column(String)
    goal: Mapped[str] = mapped_column(String)
    preferred_diet: Mapped[str] = mapped_column(String)
    health_notes: Mapped[str | None] = mapped_column(Text)
    workout_days_per_week: Mapped[int] = mapped_column(Integer)

    # derived targets
    bmr: Mapped[int] = mapped_column(Integer)
    tdee: Mapped[int] = mapped_column(Integer)
    calorie_goal: Mapped[int] = mapped_column(Integer)
    protein_grams: Mapped[int] = mapped_column(Integer)
    carbs_grams: Mapped[int] = mapped_column(Integer)
    fat_grams: Mapped[int] = mapped_column(Integer)

    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), onupdate=func.now()
    )

    @classmethod
    def from_profile(cls, profile: NutritionProfile) -> UserProfile:
        return cls(**profile.to_dict())

    def apply(self, profile: NutritionProfile) -> None:
        """Overwrite every column with the freshly computed profile."""
        for key, value in profile.to_dict().items():
            setattr(self, key, value)


class NutritionLog(Base):
    __tablename__ = "nutrition_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String, index=True)
    date: Mapped[dt.date] = mapped_column(Date, index=True)
    meal_type: Mapped[str] = mapped_column(String)     # breakfast / lunch / dinner / snack
    food_name: Mapped[str] = mapped_column(String)
    calories: Mapped[int] = mapped_column(Integer)
    protein: Mapped[int | None] = mapped_column(Integer)
    carbs: Mapped[int | None] = mapped_column(Integer)
    fat: Mapped[int | None] = mapped_column(Integer)
    portion: Mapped[str] = mapped_column(String)
    time: Mapped[str] = mapped_column(String)          # "HH:MM"
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())


# ───────── session helpers ───────────────────────────────────────────

async def _sessionmaker() -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(await engine(), expire_on_commit=False)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    async_session = await _sessionmaker()
    async with async_session() as session:
        yield session


@asynccontextmanager
async def session_scope() -> AsyncIterator[AsyncSession]:
    async_session = await _sessionmaker()
    async with async_session() as session:
        yield session
