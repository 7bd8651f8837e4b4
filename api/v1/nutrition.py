from __future__ import annotations

import logging
import re

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import current_user_id
from services import food_data, nutrition
from services.db import get_session
from services.food_data import NutritionLookupError
from api.v1.schemas import BarcodeIn, EstimateIn, FoodSuggestionOut, NutritionOut, ProductOut

router = APIRouter()
_LOG = logging.getLogger(__name__)

# EAN-8 / UPC-A / EAN-13 / GTIN-14, plus short in-store codes
_BARCODE = re.compile(r"^\d{6,14}$")


@router.get("/search", response_model=list[FoodSuggestionOut])
async def search(
    q: str = Query(""),
    _: int = Depends(current_user_id),
) -> list[FoodSuggestionOut]:
    found = await food_data.search_foods(q)
    return [FoodSuggestionOut.model_validate(f, from_attributes=True) for f in found]


@router.post("/barcode", response_model=ProductOut)
async def barcode_lookup(
    body: BarcodeIn,
    _: int = Depends(current_user_id),
) -> ProductOut:
    code = body.barcode.strip()
    if not code:
        raise HTTPException(status_code=400, detail="Barcode is required")
    if not _BARCODE.match(code):
        raise HTTPException(status_code=400, detail="Barcode must be 6-14 digits")

    product = await food_data.lookup_barcode(code)
    if product is None:
        raise HTTPException(
            status_code=404,
            detail="This barcode was not found in our food databases. You can still add it manually.",
        )
    return ProductOut.model_validate(product, from_attributes=True)


@router.post("/estimate", response_model=NutritionOut)
async def estimate(
    body: EstimateIn,
    user_id: int = Depends(current_user_id),
    db: AsyncSession = Depends(get_session),
) -> NutritionOut:
    desc = body.food_description.strip()
    if not desc:
        raise HTTPException(status_code=400, detail="Food description is required")

    try:
        facts = await nutrition.get_nutrition_info(desc)
    except NutritionLookupError as exc:
        _LOG.error("nutrition estimate failed for %r: %s", desc, exc)
        await nutrition.log_failure_to_db(
            db, user_id, provider="gemini", query=desc, error=str(exc), raw_output=exc.raw_output
        )
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to get nutrition information",
        ) from exc
    return NutritionOut.model_validate(facts, from_attributes=True)
