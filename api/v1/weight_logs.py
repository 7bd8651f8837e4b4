from __future__ import annotations

import logging
import math

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import current_user_id
from api.v1.users import load_user
from core.nutrition_calc import compute_weight_progress
from services.db import WeightLog, get_session
from api.v1.schemas import WeightLogIn, WeightLogOut, WeightProgressOut

router = APIRouter()
_LOG = logging.getLogger(__name__)


@router.get("", response_model=list[WeightLogOut])
async def list_weight_logs(
    limit: int = Query(30, ge=1, le=365),
    user_id: int = Depends(current_user_id),
    db: AsyncSession = Depends(get_session),
) -> list[WeightLogOut]:
    result = await db.execute(
        select(WeightLog)
        .where(WeightLog.user_id == user_id)
        .order_by(WeightLog.logged_at.desc(), WeightLog.id.desc())
        .limit(limit)
    )
    return [WeightLogOut.model_validate(w, from_attributes=True) for w in result.scalars().all()]


@router.post(
    "",
    response_model=WeightLogOut,
    status_code=status.HTTP_201_CREATED,
)
async def log_weight(
    body: WeightLogIn,
    user_id: int = Depends(current_user_id),
    db: AsyncSession = Depends(get_session),
) -> WeightLogOut:
    """Record a weigh-in; it also becomes the profile's current weight."""
    if body.weight_kg is None or not math.isfinite(body.weight_kg) or body.weight_kg <= 0:
        raise HTTPException(status_code=400, detail="Valid weight is required")

    usr = await load_user(db, user_id)
    log = WeightLog(user_id=user_id, weight_kg=body.weight_kg, notes=body.notes or None)
    db.add(log)
    # targets are not recomputed here; PUT /profile or /profile/plan/revert does that
    usr.current_weight_kg = body.weight_kg
    await db.commit()
    await db.refresh(log)
    _LOG.info("user %s logged %.1f kg", user_id, body.weight_kg)
    return WeightLogOut.model_validate(log, from_attributes=True)


@router.get("/progress", response_model=WeightProgressOut)
async def weight_progress(
    user_id: int = Depends(current_user_id),
    db: AsyncSession = Depends(get_session),
) -> WeightProgressOut:
    usr = await load_user(db, user_id)
    if not usr.current_weight_kg or not usr.target_weight_kg:
        raise HTTPException(status_code=400, detail="Current and target weight are required")
    return WeightProgressOut.model_validate(
        compute_weight_progress(usr.current_weight_kg, usr.target_weight_kg),
        from_attributes=True,
    )
