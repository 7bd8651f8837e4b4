# api/v1/meals.py
from __future__ import annotations

import datetime as dt

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import current_user_id
from services.db import Meal, get_session
from api.v1.schemas import MealIn, MealOut, MealUpdate

router = APIRouter()


def day_bounds(day: dt.date) -> tuple[dt.datetime, dt.datetime]:
    start = dt.datetime.combine(day, dt.time.min)
    return start, start + dt.timedelta(days=1)


async def _owned_meal(db: AsyncSession, meal_id: int, user_id: int) -> Meal:
    meal = await db.get(Meal, meal_id)
    if not meal:
        raise HTTPException(status_code=404, detail="Meal not found")
    if meal.user_id != user_id:
        raise HTTPException(status_code=403, detail="Not allowed to modify this meal")
    return meal


@router.get(
    "",
    response_model=list[MealOut],
    status_code=status.HTTP_200_OK,
    summary="List the current user's meals, newest first",
)
async def list_meals(
    date: dt.date | None = Query(None, description="only meals logged on this day"),
    user_id: int = Depends(current_user_id),
    db: AsyncSession = Depends(get_session),
) -> list[MealOut]:
    q = select(Meal).where(Meal.user_id == user_id)
    if date is not None:
        start, end = day_bounds(date)
        q = q.where(Meal.created_at >= start, Meal.created_at < end)
    result = await db.execute(q.order_by(Meal.created_at.desc(), Meal.id.desc()))
    return [MealOut.model_validate(m, from_attributes=True) for m in result.scalars().all()]


@router.post(
    "",
    response_model=MealOut,
    status_code=status.HTTP_201_CREATED,
)
async def create_meal(
    body: MealIn,
    user_id: int = Depends(current_user_id),
    db: AsyncSession = Depends(get_session),
) -> MealOut:
    data = body.model_dump(exclude_none=True)
    if body.created_at is not None and body.created_at.tzinfo is not None:
        # stored as naive UTC
        data["created_at"] = body.created_at.astimezone(dt.timezone.utc).replace(tzinfo=None)
    meal = Meal(user_id=user_id, **data)
    db.add(meal)
    await db.commit()
    await db.refresh(meal)
    return MealOut.model_validate(meal, from_attributes=True)


@router.put("/{meal_id}", response_model=MealOut)
async def update_meal(
    meal_id: int,
    body: MealUpdate,
    user_id: int = Depends(current_user_id),
    db: AsyncSession = Depends(get_session),
) -> MealOut:
    meal = await _owned_meal(db, meal_id, user_id)
    for field, value in body.model_dump(exclude_unset=True).items():
        setattr(meal, field, value)
    await db.commit()
    await db.refresh(meal)
    return MealOut.model_validate(meal, from_attributes=True)


@router.delete(
    "/{meal_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete one of the current user's meals",
)
async def delete_meal(
    meal_id: int,
    user_id: int = Depends(current_user_id),
    db: AsyncSession = Depends(get_session),
) -> Response:
    meal = await _owned_meal(db, meal_id, user_id)
    await db.delete(meal)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
