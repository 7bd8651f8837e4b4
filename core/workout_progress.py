"""
core/workout_progress.py
────────────────────────────────────────────────────────────────────────
Workout session checks + per-exercise progress.

A session is ``{"workout_name", "exercises": [{"name", "sets": [{"weight",
"reps", "rest_seconds"?}]}], "created_at"}`` – the same shape stored in
the `workout_sessions.exercises` JSON column.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, List

import pandas as pd

_LOG = logging.getLogger(__name__)


class WorkoutValidationError(ValueError):
    pass


def _positive(v: Any) -> bool:
    # NaN slips past a plain `<= 0` check
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        return False
    return math.isfinite(v) and v > 0


def validate_exercises(workout_name: str | None, exercises: List[Dict[str, Any]] | None) -> None:
    if not workout_name or not exercises:
        raise WorkoutValidationError("Workout name and exercises are required")

    for ex in exercises:
        if not ex.get("name") or not ex.get("sets"):
            raise WorkoutValidationError(
                "Each exercise must have a name and at least one set"
            )
        for s in ex["sets"]:
            weight, reps = s.get("weight"), s.get("reps")
            if not (_positive(weight) and _positive(reps)):
                raise WorkoutValidationError("All sets must have valid weight and reps")


def _flatten(sessions: List[Dict[str, Any]], exercise_name: str) -> pd.DataFrame:
    wanted = exercise_name.strip().lower()
    rows = []
    for sess in sessions:
        for ex in sess.get("exercises") or []:
            if (ex.get("name") or "").strip().lower() != wanted:
                continue
            for n, s in enumerate(ex.get("sets") or [], start=1):
                rows.append(
                    {
                        "created_at": sess["created_at"],
                        "set_number": n,
                        "weight": float(s["weight"]),
                        "reps": int(s["reps"]),
                    }
                )
    return pd.DataFrame(rows, columns=["created_at", "set_number", "weight", "reps"])


def exercise_progress(
    sessions: List[Dict[str, Any]], exercise_name: str
) -> Dict[str, Any]:
    """
    Group every logged set of `exercise_name` by calendar day:
    max weight, total volume (Σ weight × reps) and total reps.
    """
    df = _flatten(sessions, exercise_name)
    if df.empty:
        return {"exercise": exercise_name, "progress": [], "total_sessions": 0}

    df["date"] = pd.to_datetime(df["created_at"]).dt.date
    df["volume"] = df["weight"] * df["reps"]

    progress = []
    for day, grp in df.sort_values("created_at").groupby("date", sort=True):
        progress.append(
            {
                "date": day,
                "max_weight": float(grp["weight"].max()),
                "total_volume": float(grp["volume"].sum()),
                "total_reps": int(grp["reps"].sum()),
                "sets": grp[["set_number", "weight", "reps"]].to_dict("records"),
            }
        )

    _LOG.debug("%s: %d training days", exercise_name, len(progress))
    return {
        "exercise": exercise_name,
        "progress": progress,
        "total_sessions": len(progress),
    }
