# api/v1/router.py
from fastapi import APIRouter

from . import auth, meals, nutrition, plan, stats, users, weight_logs, workouts

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["Auth"])
api_router.include_router(users.router, prefix="/profile", tags=["Profile"])
api_router.include_router(meals.router, prefix="/meals", tags=["Meals"])
api_router.include_router(weight_logs.router, prefix="/weight-logs", tags=["Weight"])
api_router.include_router(workouts.router, prefix="/workouts", tags=["Workouts"])
api_router.include_router(nutrition.router, prefix="/nutrition", tags=["Nutrition"])
api_router.include_router(stats.router, prefix="/stats", tags=["Stats"])

# plan lives *under* the profile resource
api_router.include_router(
    plan.router,
    prefix="/profile",          # results in /profile/plan...
    tags=["Plan"],
)
