from __future__ import annotations
import datetime as dt

from pydantic import BaseModel, ConfigDict


class WorkoutSet(BaseModel):
    weight: float | None = None
    reps: int | None = None
    rest_seconds: int | None = None


class WorkoutExercise(BaseModel):
    name: str | None = None
    sets: list[WorkoutSet] = []


class WorkoutSessionIn(BaseModel):
    workout_name: str | None = None
    exercises: list[WorkoutExercise] = []
    notes: str | None = None
    duration_minutes: int | None = None


class WorkoutSessionOut(BaseModel):
    id: int
    user_id: int
    workout_name: str
    exercises: list[WorkoutExercise]
    notes: str | None = None
    duration_minutes: int | None = None
    created_at: dt.datetime

    model_config = ConfigDict(from_attributes=True)


class ProgressSet(BaseModel):
    set_number: int
    weight: float
    reps: int


class ProgressDay(BaseModel):
    date: dt.date
    max_weight: float
    total_volume: float
    total_reps: int
    sets: list[ProgressSet]


class ExerciseProgressOut(BaseModel):
    exercise: str
    progress: list[ProgressDay]
    total_sessions: int
