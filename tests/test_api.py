"""
HTTP flows through the FastAPI app (TestClient + in-memory SQLite).
"""
import pytest
from sqlalchemy import select

from conftest import signup_and_login
from services import food_data, nutrition
from services.db import NutritionLookupFailure
from services.food_data import FoodSuggestion, NutritionFacts, NutritionLookupError, Product

API = "/api/v1"

PROFILE = {
    "age": 30,
    "gender": "male",
    "height_cm": 175,
    "current_weight_kg": 70,
    "target_weight_kg": 65,
    "activity_level": "sedentary",
    "fitness_goal": "lose",
}


def _with_profile(client, auth):
    r = client.put(f"{API}/profile", json=PROFILE, headers=auth)
    assert r.status_code == 200, r.text
    return r.json()


# ───────────────────────── auth ──────────────────────────
def test_health(client):
    assert client.get("/health").json()["status"] == "ok"


def test_signup_rules(client):
    r = client.post(f"{API}/auth/signup", json={"email": "a@example.com", "password": "123"})
    assert r.status_code == 400

    signup_and_login(client, email="a@example.com")
    r = client.post(f"{API}/auth/signup", json={"email": "A@example.com", "password": "secret123"})
    assert r.status_code == 409


def test_bad_login(client):
    signup_and_login(client)
    r = client.post(f"{API}/auth/token", json={"email": "sam@example.com", "password": "wrong-pass"})
    assert r.status_code == 401


@pytest.mark.parametrize("headers", [{}, {"Authorization": "Bearer not-a-jwt"}])
def test_protected_routes_need_token(client, headers):
    assert client.get(f"{API}/profile", headers=headers).status_code == 401
    assert client.get(f"{API}/meals", headers=headers).status_code == 401


# ───────────────────────── profile & plan ─────────────────
def test_profile_update_sets_targets(client, auth):
    body = _with_profile(client, auth)
    # 1648.75 × 1.2 − 500
    assert body["target_calories"] == 1479
    assert (body["target_protein"], body["target_carbs"], body["target_fat"]) == (140, 137, 41)
    assert body["current_adjustment"] == "none"


def test_partial_profile_has_no_plan(client, auth):
    client.put(f"{API}/profile", json={"age": 30}, headers=auth)
    assert client.get(f"{API}/profile/plan", headers=auth).status_code == 400


def test_plan_preview_implement_revert(client, auth):
    _with_profile(client, auth)

    plan = client.get(f"{API}/profile/plan", headers=auth).json()
    assert plan["base_plan"]["maintenance_calories"] == 1979
    assert plan["adjusted_plan"] is None
    assert plan["weight_progress"]["weeks_to_goal"] == 10
    assert len(plan["adjustments"]) == 7

    preview = client.post(f"{API}/profile/plan/preview", json={"adjustment": "deficit_400"}, headers=auth)
    assert preview.json()["adjusted_plan"]["adjusted_calories"] == 1079
    # preview is not persisted
    assert client.get(f"{API}/profile", headers=auth).json()["target_calories"] == 1479

    r = client.post(f"{API}/profile/plan/adjustment", json={"adjustment": "deficit_400"}, headers=auth)
    assert r.status_code == 200
    prof = client.get(f"{API}/profile", headers=auth).json()
    assert prof["target_calories"] == 1079
    assert prof["current_adjustment"] == "deficit_400"
    assert client.get(f"{API}/profile/plan", headers=auth).json()["adjusted_plan"]["expected_weekly_change"] == (
        "~0.36 kg/week loss"
    )

    client.post(f"{API}/profile/plan/revert", headers=auth)
    prof = client.get(f"{API}/profile", headers=auth).json()
    assert prof["target_calories"] == 1479
    assert prof["current_adjustment"] == "none"


def test_unknown_adjustment_rejected(client, auth):
    _with_profile(client, auth)
    r = client.post(f"{API}/profile/plan/preview", json={"adjustment": "deficit_800"}, headers=auth)
    assert r.status_code == 422


def test_unknown_activity_level_uses_sedentary(client, auth):
    body = _with_profile(client, auth)
    r = client.put(f"{API}/profile", json={"activity_level": "couch potato"}, headers=auth)
    assert r.json()["target_calories"] == body["target_calories"]


# ───────────────────────── meals ──────────────────────────
MEAL = {"food_name": "Oatmeal", "calories": 350, "protein": 15, "carbs": 55, "fat": 8, "meal_type": "breakfast"}


def test_meal_crud_and_ownership(client, auth):
    r = client.post(f"{API}/meals", json=MEAL, headers=auth)
    assert r.status_code == 201
    meal_id = r.json()["id"]

    r = client.put(f"{API}/meals/{meal_id}", json={"calories": 400}, headers=auth)
    assert r.json()["calories"] == 400
    assert r.json()["food_name"] == "Oatmeal"

    other = signup_and_login(client, email="other@example.com")
    assert client.put(f"{API}/meals/{meal_id}", json={"calories": 1}, headers=other).status_code == 403
    assert client.delete(f"{API}/meals/{meal_id}", headers=other).status_code == 403
    assert client.get(f"{API}/meals", headers=other).json() == []

    assert client.delete(f"{API}/meals/{meal_id}", headers=auth).status_code == 204
    assert client.delete(f"{API}/meals/{meal_id}", headers=auth).status_code == 404


@pytest.mark.parametrize("field", ["food_name", "calories", "protein", "meal_type"])
def test_meal_update_rejects_null(client, auth, field):
    meal_id = client.post(f"{API}/meals", json=MEAL, headers=auth).json()["id"]
    r = client.put(f"{API}/meals/{meal_id}", json={field: None}, headers=auth)
    assert r.status_code == 422
    assert client.get(f"{API}/meals", headers=auth).json()[0]["calories"] == 350

    # clearing an optional field is fine
    r = client.put(f"{API}/meals/{meal_id}", json={"serving_size": None}, headers=auth)
    assert r.status_code == 200


def test_meals_filtered_by_day(client, auth):
    client.post(f"{API}/meals", json={**MEAL, "created_at": "2026-01-10T08:30:00"}, headers=auth)
    client.post(f"{API}/meals", json={**MEAL, "food_name": "Soup", "created_at": "2026-01-11T12:00:00"}, headers=auth)

    day = client.get(f"{API}/meals", params={"date": "2026-01-11"}, headers=auth).json()
    assert [m["food_name"] for m in day] == ["Soup"]
    assert [m["food_name"] for m in client.get(f"{API}/meals", headers=auth).json()] == ["Soup", "Oatmeal"]


def test_daily_and_weekly_stats(client, auth):
    _with_profile(client, auth)
    client.post(f"{API}/meals", json={**MEAL, "created_at": "2026-01-10T08:30:00"}, headers=auth)
    client.post(f"{API}/meals", json={**MEAL, "created_at": "2026-01-10T19:00:00"}, headers=auth)

    daily = client.get(f"{API}/stats/daily", params={"date": "2026-01-10"}, headers=auth).json()
    assert daily["total_calories"] == 700
    assert daily["target_calories"] == 1479
    assert daily["remaining_calories"] == 779
    assert daily["meal_count"] == 2

    weekly = client.get(f"{API}/stats/weekly", params={"end": "2026-01-12"}, headers=auth).json()
    assert len(weekly["days"]) == 7
    assert weekly["days"][4] == {
        "date": "2026-01-10", "calories": 700, "protein": 30, "carbs": 110, "fat": 16, "meal_count": 2
    }
    assert weekly["average_calories"] == 100


# ───────────────────────── weight ─────────────────────────
def test_weight_logs(client, auth):
    _with_profile(client, auth)
    assert client.post(f"{API}/weight-logs", json={}, headers=auth).status_code == 400
    assert client.post(f"{API}/weight-logs", json={"weight_kg": -3}, headers=auth).status_code == 400

    r = client.post(f"{API}/weight-logs", json={"weight_kg": 68, "notes": "morning"}, headers=auth)
    assert r.status_code == 201
    assert client.get(f"{API}/profile", headers=auth).json()["current_weight_kg"] == 68
    assert len(client.get(f"{API}/weight-logs", headers=auth).json()) == 1

    progress = client.get(f"{API}/weight-logs/progress", headers=auth).json()
    assert progress["weight_difference"] == -3
    assert progress["time_to_goal"] == "6 weeks"


def test_weight_progress_needs_target(client, auth):
    assert client.get(f"{API}/weight-logs/progress", headers=auth).status_code == 400


# ───────────────────────── workouts ───────────────────────
WORKOUT = {
    "workout_name": "Push",
    "exercises": [{"name": "Bench Press", "sets": [{"weight": 60, "reps": 10}, {"weight": 70, "reps": 8}]}],
}


def test_workout_flow(client, auth):
    r = client.post(f"{API}/workouts", json={"workout_name": "Push", "exercises": []}, headers=auth)
    assert r.status_code == 400

    # the stdlib JSON parser accepts a bare NaN literal
    nan_body = '{"workout_name": "Push", "exercises": [{"name": "Bench Press", "sets": [{"weight": NaN, "reps": 5}]}]}'
    r = client.post(
        f"{API}/workouts", content=nan_body, headers={**auth, "Content-Type": "application/json"}
    )
    assert r.status_code == 400

    r = client.post(f"{API}/workouts", json=WORKOUT, headers=auth)
    assert r.status_code == 201
    session_id = r.json()["id"]

    assert client.get(f"{API}/workouts/progress", headers=auth).status_code == 400
    progress = client.get(f"{API}/workouts/progress", params={"exercise": "bench press"}, headers=auth).json()
    assert progress["total_sessions"] == 1
    assert progress["progress"][0]["total_volume"] == 1160

    assert [w["workout_name"] for w in client.get(f"{API}/workouts", params={"workout": "Push"}, headers=auth).json()] == ["Push"]
    assert client.get(f"{API}/workouts", params={"workout": "Legs"}, headers=auth).json() == []

    other = signup_and_login(client, email="other@example.com")
    assert client.delete(f"{API}/workouts/{session_id}", headers=other).status_code == 403
    assert client.delete(f"{API}/workouts/{session_id}", headers=auth).status_code == 204
    assert client.delete(f"{API}/workouts/{session_id}", headers=auth).status_code == 404


# ───────────────────────── nutrition lookup ───────────────
def test_nutrition_search(client, auth, monkeypatch):
    async def fake(q):
        return [FoodSuggestion(1, "Apple", None, 52, 0, 14, 0, "Fruits")]

    monkeypatch.setattr(food_data, "search_foods", fake)
    r = client.get(f"{API}/nutrition/search", params={"q": "apple"}, headers=auth)
    assert r.json()[0]["name"] == "Apple"


def test_nutrition_barcode(client, auth, monkeypatch):
    async def fake(code):
        if code != "3017620422003":
            return None
        return Product("3017620422003", "Bar", None, 200, 5, 20, 10, 1, 12, 0, "Snacks", None, "100g")

    monkeypatch.setattr(food_data, "lookup_barcode", fake)
    assert client.post(f"{API}/nutrition/barcode", json={"barcode": " "}, headers=auth).status_code == 400
    for bad in ["12345", "123456789012345", "../../x.json", "3017620422003?x=1"]:
        assert client.post(f"{API}/nutrition/barcode", json={"barcode": bad}, headers=auth).status_code == 400
    assert client.post(f"{API}/nutrition/barcode", json={"barcode": "5449000000996"}, headers=auth).status_code == 404
    r = client.post(f"{API}/nutrition/barcode", json={"barcode": "3017620422003"}, headers=auth)
    assert r.json()["source"] == "Open Food Facts"


def test_nutrition_estimate(client, auth, monkeypatch):
    async def ok(desc):
        return NutritionFacts(95, 0.5, 25, 0.3, source="USDA", name=desc)

    monkeypatch.setattr(nutrition, "get_nutrition_info", ok)
    assert client.post(f"{API}/nutrition/estimate", json={"food_description": ""}, headers=auth).status_code == 400
    r = client.post(f"{API}/nutrition/estimate", json={"food_description": "apple"}, headers=auth)
    assert r.json()["source"] == "USDA"


def test_nutrition_estimate_failure_is_502(client, auth, monkeypatch):
    async def broken(desc):
        raise NutritionLookupError("No JSON found in Gemini response", raw_output="hmm")

    monkeypatch.setattr(nutrition, "get_nutrition_info", broken)
    r = client.post(f"{API}/nutrition/estimate", json={"food_description": "mystery"}, headers=auth)
    assert r.status_code == 502
    rows = client.portal.call(_lookup_failures, client.sessions)
    assert len(rows) == 1
    assert (rows[0].provider, rows[0].lookup_query, rows[0].raw_output) == ("gemini", "mystery", "hmm")


async def _lookup_failures(sessions):
    async with sessions() as db:
        return (await db.execute(select(NutritionLookupFailure))).scalars().all()
