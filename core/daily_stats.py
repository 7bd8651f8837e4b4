"""
core/daily_stats.py
────────────────────────────────────────────────────────────────────────
Intake totals for the dashboard.

* `daily_stats()`     – one day's meals vs. the stored targets
* `weekly_summary()`  – trailing window of per-day totals (zero-filled)

Meals are plain dicts shaped like rows of the `meals` table:
``calories · protein · carbs · fat · created_at``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Dict, List

import pandas as pd

_LOG = logging.getLogger(__name__)

NUTRIENTS = ["calories", "protein", "carbs", "fat"]


@dataclass(frozen=True)
class DailyStats:
    total_calories: float
    total_protein: float
    total_carbs: float
    total_fat: float
    target_calories: float
    target_protein: float
    target_carbs: float
    target_fat: float
    remaining_calories: float
    calories_pct: float
    protein_pct: float
    carbs_pct: float
    fat_pct: float
    meal_count: int


def _frame(meals: List[Dict[str, Any]]) -> pd.DataFrame:
    df = pd.DataFrame(meals)
    for col in NUTRIENTS:
        if col not in df.columns:
            df[col] = 0.0
    df[NUTRIENTS] = df[NUTRIENTS].apply(pd.to_numeric, errors="coerce").fillna(0.0)
    return df


def _pct(total: float, target: float) -> float:
    # not clamped: going over target should be visible
    if not target:
        return 0.0
    return round(total / target * 100, 1)


def daily_stats(
    meals: List[Dict[str, Any]], targets: Dict[str, Any]
) -> DailyStats:
    totals = _frame(meals)[NUTRIENTS].sum() if meals else pd.Series(0.0, index=NUTRIENTS)
    tgt = {k: float(targets.get(f"target_{k}") or 0) for k in NUTRIENTS}

    return DailyStats(
        total_calories=round(float(totals["calories"]), 1),
        total_protein=round(float(totals["protein"]), 1),
        total_carbs=round(float(totals["carbs"]), 1),
        total_fat=round(float(totals["fat"]), 1),
        target_calories=tgt["calories"],
        target_protein=tgt["protein"],
        target_carbs=tgt["carbs"],
        target_fat=tgt["fat"],
        remaining_calories=round(tgt["calories"] - float(totals["calories"]), 1),
        calories_pct=_pct(float(totals["calories"]), tgt["calories"]),
        protein_pct=_pct(float(totals["protein"]), tgt["protein"]),
        carbs_pct=_pct(float(totals["carbs"]), tgt["carbs"]),
        fat_pct=_pct(float(totals["fat"]), tgt["fat"]),
        meal_count=len(meals),
    )


def weekly_summary(
    meals: List[Dict[str, Any]],
    days: int = 7,
    today: date | None = None,
) -> Dict[str, Any]:
    """Per-day totals for the `days` ending on `today` (inclusive)."""
    if days < 1:
        raise ValueError("days must be >= 1")
    today = today or date.today()
    start = today - timedelta(days=days - 1)
    index = pd.date_range(start, today, freq="D").date

    if meals:
        df = _frame(meals)
        df["date"] = pd.to_datetime(df["created_at"]).dt.date
        df = df[(df["date"] >= start) & (df["date"] <= today)]
        daily = df.groupby("date")[NUTRIENTS].sum()
        counts = df.groupby("date").size()
    else:
        daily = pd.DataFrame(columns=NUTRIENTS, dtype=float)
        counts = pd.Series(dtype=int)

    daily = daily.reindex(index, fill_value=0.0)
    counts = counts.reindex(index, fill_value=0)
    _LOG.debug("weekly summary %s → %s over %d meals", start, today, int(counts.sum()))

    out_days = [
        {
            "date": d,
            "calories": round(float(row["calories"]), 1),
            "protein": round(float(row["protein"]), 1),
            "carbs": round(float(row["carbs"]), 1),
            "fat": round(float(row["fat"]), 1),
            "meal_count": int(counts[d]),
        }
        for d, row in daily.iterrows()
    ]
    return {
        "start": start,
        "end": today,
        "days": out_days,
        "average_calories": round(float(daily["calories"].mean()), 1),
    }
