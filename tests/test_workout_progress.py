from datetime import date, datetime

import pytest

from core.workout_progress import WorkoutValidationError, exercise_progress, validate_exercises

SESSIONS = [
    {
        "created_at": datetime(2026, 3, 1, 18, 0),
        "exercises": [
            {"name": "Bench Press", "sets": [{"weight": 60, "reps": 10}, {"weight": 70, "reps": 8}]},
            {"name": "Squat", "sets": [{"weight": 100, "reps": 5}]},
        ],
    },
    {
        "created_at": datetime(2026, 3, 4, 18, 0),
        "exercises": [
            {"name": "bench press", "sets": [{"weight": 72.5, "reps": 6}]},
        ],
    },
]


def test_progress_grouped_by_day():
    out = exercise_progress(SESSIONS, "Bench Press")
    assert out["total_sessions"] == 2

    first, second = out["progress"]
    assert first["date"] == date(2026, 3, 1)
    assert first["max_weight"] == 70
    assert first["total_volume"] == 60 * 10 + 70 * 8
    assert first["total_reps"] == 18
    assert [s["set_number"] for s in first["sets"]] == [1, 2]

    assert second["date"] == date(2026, 3, 4)
    assert second["max_weight"] == 72.5


def test_progress_unknown_exercise_is_empty():
    assert exercise_progress(SESSIONS, "Deadlift") == {
        "exercise": "Deadlift",
        "progress": [],
        "total_sessions": 0,
    }


def test_validate_accepts_good_session():
    validate_exercises("Push day", SESSIONS[0]["exercises"])


@pytest.mark.parametrize(
    "name, exercises",
    [
        ("", [{"name": "Squat", "sets": [{"weight": 100, "reps": 5}]}]),
        ("Legs", []),
        ("Legs", [{"name": "", "sets": [{"weight": 100, "reps": 5}]}]),
        ("Legs", [{"name": "Squat", "sets": []}]),
        ("Legs", [{"name": "Squat", "sets": [{"weight": 0, "reps": 5}]}]),
        ("Legs", [{"name": "Squat", "sets": [{"weight": 100, "reps": None}]}]),
        ("Legs", [{"name": "Squat", "sets": [{"weight": float("nan"), "reps": 5}]}]),
        ("Legs", [{"name": "Squat", "sets": [{"weight": float("inf"), "reps": 5}]}]),
        ("Legs", [{"name": "Squat", "sets": [{"weight": True, "reps": 5}]}]),
    ],
)
def test_validate_rejects_bad_session(name, exercises):
    with pytest.raises(WorkoutValidationError):
        validate_exercises(name, exercises)
