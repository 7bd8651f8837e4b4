from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import current_user_id
from core.nutrition_calc import BodyMetrics, CalorieAdjustment, MacroSplit, build_base_plan
from services.db import User, get_session
from api.v1.schemas import ProfileIn, ProfileOut

router = APIRouter()
_LOG = logging.getLogger(__name__)


# ───────────────────────── helpers ──────────────────────────
async def load_user(db: AsyncSession, user_id: int) -> User:
    usr = await db.get(User, user_id)
    if usr is None:
        raise HTTPException(status_code=404, detail="User not found")
    return usr


def body_metrics(usr: User) -> BodyMetrics | None:
    """BodyMetrics from the stored profile, or None while it is incomplete."""
    if None in (usr.current_weight_kg, usr.height_cm, usr.age, usr.gender):
        return None
    return BodyMetrics(
        weight_kg=usr.current_weight_kg,
        height_cm=usr.height_cm,
        age_years=usr.age,
        sex=usr.gender,
    )


def store_targets(
    usr: User, calories: int, macros: MacroSplit, adjustment: CalorieAdjustment
) -> None:
    usr.target_calories = calories
    usr.target_protein = macros.protein.grams
    usr.target_carbs = macros.carbs.grams
    usr.target_fat = macros.fat.grams
    usr.current_adjustment = adjustment.value


# ───────────────────────── read ─────────────────────────────
@router.get("", response_model=ProfileOut)
async def get_profile(
    user_id: int = Depends(current_user_id),
    db: AsyncSession = Depends(get_session),
) -> ProfileOut:
    return ProfileOut.model_validate(await load_user(db, user_id), from_attributes=True)


# ───────────────────────── update ───────────────────────────
@router.put(
    "",
    response_model=ProfileOut,
    status_code=status.HTTP_200_OK,
)
async def update_profile(
    body: ProfileIn,
    user_id: int = Depends(current_user_id),
    db: AsyncSession = Depends(get_session),
) -> ProfileOut:
    """
    Save profile fields. Once every metric needed for a plan is known,
    the base plan is recomputed and becomes the active target (any
    implemented adjustment is dropped).
    """
    usr = await load_user(db, user_id)
    for field, value in body.model_dump(exclude_unset=True, mode="json").items():
        setattr(usr, field, value)

    metrics = body_metrics(usr)
    if metrics is not None and usr.fitness_goal:
        plan = build_base_plan(metrics, usr.activity_level, usr.fitness_goal)
        store_targets(usr, plan.goal_calories, plan.macros, CalorieAdjustment.none)
        _LOG.info("user %s: base plan %s kcal", user_id, plan.goal_calories)

    await db.commit()
    await db.refresh(usr)
    return ProfileOut.model_validate(usr, from_attributes=True)
