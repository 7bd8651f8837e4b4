"""
services/nutrition.py
────────────────────────────────────────────────────────────────────────
Free-text food → nutrition facts: USDA first, Gemini estimate second.
"""
from __future__ import annotations

import asyncio
import logging

import httpx
from sqlalchemy.ext.asyncio import AsyncSession

from services import gemini
from services.db import NutritionLookupFailure
from services.food_data import NutritionFacts, lookup_usda

_LOG = logging.getLogger(__name__)


async def get_nutrition_info(
    food_description: str, client: httpx.AsyncClient | None = None
) -> NutritionFacts:
    """Raises `NutritionLookupError` when neither provider yields data."""
    _LOG.info("Looking up nutrition for %r", food_description)

    found = await lookup_usda(food_description, client=client)
    if found is not None:
        _LOG.info("Found %r in USDA database", food_description)
        return found

    _LOG.info("Not in USDA, falling back to Gemini estimate for %r", food_description)
    return await asyncio.to_thread(gemini.estimate_nutrition, food_description)


# ───────────── Error Logging ─────────────
async def log_failure_to_db(
    db: AsyncSession,
    user_id: int | None,
    provider: str,
    query: str,
    error: str,
    raw_output: str | None = None,
) -> None:
    """Persist a provider failure so bad lookups can be reviewed later."""
    db.add(
        NutritionLookupFailure(
            user_id=user_id,
            provider=provider,
            lookup_query=query,
            error_message=error,
            raw_output=raw_output,
        )
    )
    await db.commit()
