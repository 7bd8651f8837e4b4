from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import current_user_id
from core.workout_progress import WorkoutValidationError, exercise_progress, validate_exercises
from services.db import WorkoutSession, get_session
from api.v1.schemas import ExerciseProgressOut, WorkoutSessionIn, WorkoutSessionOut

router = APIRouter()


@router.get("", response_model=list[WorkoutSessionOut])
async def list_workouts(
    workout: str | None = Query(None, description="filter by workout name"),
    limit: int = Query(50, ge=1, le=500),
    user_id: int = Depends(current_user_id),
    db: AsyncSession = Depends(get_session),
) -> list[WorkoutSessionOut]:
    q = select(WorkoutSession).where(WorkoutSession.user_id == user_id)
    if workout:
        q = q.where(WorkoutSession.workout_name == workout)
    result = await db.execute(
        q.order_by(WorkoutSession.created_at.desc(), WorkoutSession.id.desc()).limit(limit)
    )
    return [WorkoutSessionOut.model_validate(w, from_attributes=True) for w in result.scalars().all()]


@router.post(
    "",
    response_model=WorkoutSessionOut,
    status_code=status.HTTP_201_CREATED,
)
async def create_workout(
    body: WorkoutSessionIn,
    user_id: int = Depends(current_user_id),
    db: AsyncSession = Depends(get_session),
) -> WorkoutSessionOut:
    data = body.model_dump()
    try:
        validate_exercises(data["workout_name"], data["exercises"])
    except WorkoutValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    sess = WorkoutSession(
        user_id=user_id,
        workout_name=data["workout_name"],
        exercises=data["exercises"],
        notes=data["notes"] or None,
        duration_minutes=data["duration_minutes"] or None,
    )
    db.add(sess)
    await db.commit()
    await db.refresh(sess)
    return WorkoutSessionOut.model_validate(sess, from_attributes=True)


@router.get("/progress", response_model=ExerciseProgressOut)
async def workout_progress(
    exercise: str | None = Query(None),
    user_id: int = Depends(current_user_id),
    db: AsyncSession = Depends(get_session),
) -> ExerciseProgressOut:
    if not exercise:
        raise HTTPException(status_code=400, detail="Exercise name is required")

    result = await db.execute(
        select(WorkoutSession)
        .where(WorkoutSession.user_id == user_id)
        .order_by(WorkoutSession.created_at.asc())
    )
    sessions = [
        {"exercises": s.exercises, "created_at": s.created_at}
        for s in result.scalars().all()
    ]
    return ExerciseProgressOut.model_validate(exercise_progress(sessions, exercise))


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_workout(
    session_id: int,
    user_id: int = Depends(current_user_id),
    db: AsyncSession = Depends(get_session),
) -> Response:
    sess = await db.get(WorkoutSession, session_id)
    if not sess:
        raise HTTPException(status_code=404, detail="Workout session not found")
    if sess.user_id != user_id:
        raise HTTPException(status_code=403, detail="Not allowed to delete this workout")
    await db.delete(sess)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
