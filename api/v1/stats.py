from __future__ import annotations

import datetime as dt
from dataclasses import asdict

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import current_user_id
from api.v1.meals import day_bounds
from api.v1.users import load_user
from core.daily_stats import daily_stats, weekly_summary
from services.db import Meal, get_session
from api.v1.schemas import DailyStatsOut, WeeklySummaryOut

router = APIRouter()


def _today() -> dt.date:
    return dt.datetime.now(dt.timezone.utc).date()


async def _meals_between(
    db: AsyncSession, user_id: int, start: dt.datetime, end: dt.datetime
) -> list[dict]:
    result = await db.execute(
        select(Meal).where(
            Meal.user_id == user_id, Meal.created_at >= start, Meal.created_at < end
        )
    )
    return [
        {
            "calories": m.calories,
            "protein": m.protein,
            "carbs": m.carbs,
            "fat": m.fat,
            "created_at": m.created_at,
        }
        for m in result.scalars().all()
    ]


@router.get("/daily", response_model=DailyStatsOut)
async def get_daily_stats(
    date: dt.date | None = Query(None),
    user_id: int = Depends(current_user_id),
    db: AsyncSession = Depends(get_session),
) -> DailyStatsOut:
    day = date or _today()
    usr = await load_user(db, user_id)
    meals = await _meals_between(db, user_id, *day_bounds(day))
    targets = {
        "target_calories": usr.target_calories,
        "target_protein": usr.target_protein,
        "target_carbs": usr.target_carbs,
        "target_fat": usr.target_fat,
    }
    return DailyStatsOut(date=day, **asdict(daily_stats(meals, targets)))


@router.get("/weekly", response_model=WeeklySummaryOut)
async def get_weekly_summary(
    days: int = Query(7, ge=1, le=31),
    end: dt.date | None = Query(None),
    user_id: int = Depends(current_user_id),
    db: AsyncSession = Depends(get_session),
) -> WeeklySummaryOut:
    last = end or _today()
    start, _ = day_bounds(last - dt.timedelta(days=days - 1))
    _, stop = day_bounds(last)
    meals = await _meals_between(db, user_id, start, stop)
    return WeeklySummaryOut.model_validate(weekly_summary(meals, days=days, today=last))
