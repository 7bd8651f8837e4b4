"""
Calorie & macro plan of the current user.

The base plan is always re-derived from the stored profile; the only
plan state kept in the database is the active adjustment key plus the
targets it produced.
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import current_user_id
from api.v1.users import body_metrics, load_user, store_targets
from core.nutrition_calc import (
    AdjustedPlan,
    BasePlan,
    CalorieAdjustment,
    compute_weight_progress,
    plan_for_adjustment,
)
from services.db import User, get_session
from api.v1.schemas import (
    AdjustedPlanOut,
    AdjustmentIn,
    AdjustmentOption,
    BasePlanOut,
    PlanOut,
    WeightProgressOut,
)

router = APIRouter()
_LOG = logging.getLogger(__name__)

_OPTIONS = [AdjustmentOption(value=a, label=a.label, kcal=a.kcal) for a in CalorieAdjustment]


def _plans(usr: User, adjustment: CalorieAdjustment | str) -> tuple[BasePlan, AdjustedPlan | None]:
    metrics = body_metrics(usr)
    if metrics is None or not usr.fitness_goal:
        raise HTTPException(
            status_code=400,
            detail="Complete your profile (weight, height, age, gender, goal) first",
        )
    return plan_for_adjustment(metrics, usr.activity_level, usr.fitness_goal, adjustment)


def _out(
    usr: User,
    base: BasePlan,
    adjusted: AdjustedPlan | None,
    adjustment: CalorieAdjustment | str,
) -> PlanOut:
    progress = None
    if usr.current_weight_kg and usr.target_weight_kg:
        progress = WeightProgressOut.model_validate(
            compute_weight_progress(usr.current_weight_kg, usr.target_weight_kg),
            from_attributes=True,
        )
    return PlanOut(
        base_plan=BasePlanOut.model_validate(base, from_attributes=True),
        current_adjustment=adjustment,
        adjusted_plan=(
            AdjustedPlanOut.model_validate(adjusted, from_attributes=True)
            if adjusted is not None
            else None
        ),
        weight_progress=progress,
        adjustments=_OPTIONS,
    )


@router.get("/plan", response_model=PlanOut)
async def get_plan(
    user_id: int = Depends(current_user_id),
    db: AsyncSession = Depends(get_session),
) -> PlanOut:
    usr = await load_user(db, user_id)
    base, adjusted = _plans(usr, usr.current_adjustment or CalorieAdjustment.none)
    return _out(usr, base, adjusted, usr.current_adjustment or CalorieAdjustment.none)


@router.post("/plan/preview", response_model=PlanOut)
async def preview_adjustment(
    body: AdjustmentIn,
    user_id: int = Depends(current_user_id),
    db: AsyncSession = Depends(get_session),
) -> PlanOut:
    """What `body.adjustment` would do – nothing is saved."""
    usr = await load_user(db, user_id)
    base, adjusted = _plans(usr, body.adjustment)
    return _out(usr, base, adjusted, body.adjustment)


@router.post("/plan/adjustment", response_model=PlanOut)
async def implement_adjustment(
    body: AdjustmentIn,
    user_id: int = Depends(current_user_id),
    db: AsyncSession = Depends(get_session),
) -> PlanOut:
    usr = await load_user(db, user_id)
    base, adjusted = _plans(usr, body.adjustment)
    if adjusted is None:
        store_targets(usr, base.goal_calories, base.macros, CalorieAdjustment.none)
    else:
        store_targets(usr, adjusted.adjusted_calories, adjusted.macros, body.adjustment)
    await db.commit()
    _LOG.info("user %s: adjustment %s implemented", user_id, body.adjustment.value)
    return _out(usr, base, adjusted, body.adjustment)


@router.post("/plan/revert", response_model=PlanOut)
async def revert_to_base(
    user_id: int = Depends(current_user_id),
    db: AsyncSession = Depends(get_session),
) -> PlanOut:
    usr = await load_user(db, user_id)
    base, _ = _plans(usr, CalorieAdjustment.none)
    store_targets(usr, base.goal_calories, base.macros, CalorieAdjustment.none)
    await db.commit()
    _LOG.info("user %s: reverted to base plan", user_id)
    return _out(usr, base, None, CalorieAdjustment.none)
