"""
services/food_data.py
────────────────────────────────────────────────────────────────────────
Public food databases:

* USDA FoodData Central – text search (`lookup_usda`, `search_foods`)
* Open Food Facts       – barcode → product (`lookup_barcode`)

A miss is ``None``; transport/HTTP failures are logged and also count
as a miss so the caller can fall through to the next provider.
"""
from __future__ import annotations

import asyncio
import logging
import re
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Dict, List

import httpx

from config import settings

_LOG = logging.getLogger(__name__)

# FoodData Central nutrient ids
USDA_ENERGY = 1008
USDA_PROTEIN = 1003
USDA_CARBS = 1005
USDA_FAT = 1004

MIN_QUERY_LEN = 2
MAX_SUGGESTIONS = 8

_DESCRIPTORS = re.compile(r"\b(raw|cooked|fresh|frozen|canned)\b", re.IGNORECASE)


@dataclass(frozen=True)
class NutritionFacts:
    calories: float
    protein: float
    carbs: float
    fat: float
    source: str
    name: str | None = None


@dataclass(frozen=True)
class FoodSuggestion:
    id: int
    name: str
    brand: str | None
    calories: int
    protein: int
    carbs: int
    fat: int
    category: str


@dataclass(frozen=True)
class Product:
    barcode: str
    name: str
    brand: str | None
    calories: int
    protein: int
    carbs: int
    fat: int
    fiber: int
    sugar: int
    sodium: int
    category: str
    image_url: str | None
    serving_size: str
    source: str = "Open Food Facts"


class NutritionLookupError(RuntimeError):
    """A provider answered, but not with usable nutrition data."""

    def __init__(self, message: str, raw_output: str | None = None) -> None:
        super().__init__(message)
        self.raw_output = raw_output


@asynccontextmanager
async def _http(client: httpx.AsyncClient | None) -> AsyncIterator[httpx.AsyncClient]:
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient(timeout=settings.http_timeout_s) as http:
        yield http


# ───────────────────────── USDA ─────────────────────────────
def _nutrient(nutrients: List[Dict[str, Any]], nutrient_id: int) -> float:
    for n in nutrients:
        if (n.get("nutrient") or {}).get("id") == nutrient_id:
            return float(n.get("amount") or 0)
    return 0.0


def clean_food_name(description: str) -> str:
    name = description.split(",", 1)[0]
    name = _DESCRIPTORS.sub("", name)
    return re.sub(r"\s{2,}", " ", name).strip()


async def _usda_detail(http: httpx.AsyncClient, fdc_id: int, api_key: str) -> Dict[str, Any]:
    r = await http.get(f"{settings.usda_base_url}/food/{fdc_id}", params={"api_key": api_key})
    r.raise_for_status()
    return r.json()


async def _usda_search(
    http: httpx.AsyncClient, query: str, api_key: str, page_size: int
) -> List[Dict[str, Any]]:
    r = await http.get(
        f"{settings.usda_base_url}/foods/search",
        params={"query": query, "api_key": api_key, "pageSize": page_size},
    )
    r.raise_for_status()
    return r.json().get("foods") or []


async def lookup_usda(
    query: str,
    client: httpx.AsyncClient | None = None,
    api_key: str | None = None,
) -> NutritionFacts | None:
    """Best USDA match for `query`, or None."""
    api_key = api_key or settings.usda_api_key
    if not api_key:
        _LOG.warning("USDA_API_KEY not configured – skipping USDA lookup")
        return None

    try:
        async with _http(client) as http:
            foods = await _usda_search(http, query, api_key, page_size=1)
            if not foods:
                _LOG.info("USDA: no match for %r", query)
                return None
            detail = await _usda_detail(http, foods[0]["fdcId"], api_key)
    except httpx.HTTPError:
        _LOG.error("USDA lookup failed for %r", query, exc_info=True)
        return None

    nutrients = detail.get("foodNutrients") or []
    return NutritionFacts(
        calories=_nutrient(nutrients, USDA_ENERGY),
        protein=_nutrient(nutrients, USDA_PROTEIN),
        carbs=_nutrient(nutrients, USDA_CARBS),
        fat=_nutrient(nutrients, USDA_FAT),
        source="USDA",
        name=detail.get("description") or foods[0].get("description"),
    )


async def search_foods(
    query: str,
    client: httpx.AsyncClient | None = None,
    api_key: str | None = None,
) -> List[FoodSuggestion]:
    """Up to eight USDA suggestions with per-item nutrition."""
    query = (query or "").strip()
    api_key = api_key or settings.usda_api_key
    if len(query) < MIN_QUERY_LEN or not api_key:
        return []

    async with _http(client) as http:
        try:
            foods = await _usda_search(http, query, api_key, page_size=10)
        except httpx.HTTPError:
            _LOG.error("USDA search failed for %r", query, exc_info=True)
            return []

        async def _one(food: Dict[str, Any]) -> FoodSuggestion | None:
            try:
                detail = await _usda_detail(http, food["fdcId"], api_key)
            except httpx.HTTPError:
                _LOG.warning("USDA detail failed for fdcId=%s", food.get("fdcId"))
                return None
            nutrients = detail.get("foodNutrients") or []
            return FoodSuggestion(
                id=food["fdcId"],
                name=clean_food_name(food.get("description") or ""),
                brand=food.get("brandOwner"),
                calories=round(_nutrient(nutrients, USDA_ENERGY)),
                protein=round(_nutrient(nutrients, USDA_PROTEIN)),
                carbs=round(_nutrient(nutrients, USDA_CARBS)),
                fat=round(_nutrient(nutrients, USDA_FAT)),
                category=food.get("foodCategory") or "Food",
            )

        results = await asyncio.gather(*(_one(f) for f in foods[:MAX_SUGGESTIONS]))
    return [r for r in results if r is not None]


# ───────────────────────── Open Food Facts ──────────────────
def _n(nutriments: Dict[str, Any], *keys: str) -> int:
    for k in keys:
        v = nutriments.get(k)
        if v not in (None, ""):
            try:
                return round(float(v))
            except (TypeError, ValueError):
                continue
    return 0


async def lookup_barcode(
    barcode: str, client: httpx.AsyncClient | None = None
) -> Product | None:
    """Per-100 g product data from Open Food Facts, or None."""
    try:
        async with _http(client) as http:
            r = await http.get(f"{settings.open_food_facts_url}/product/{barcode}.json")
    except httpx.HTTPError:
        _LOG.error("Open Food Facts request failed for %s", barcode, exc_info=True)
        return None

    if r.status_code != 200:
        _LOG.info("Open Food Facts: HTTP %s for %s", r.status_code, barcode)
        return None

    try:
        data = r.json()
    except ValueError:
        _LOG.warning("Open Food Facts: non-JSON body for %s", barcode)
        return None
    product = data.get("product") if isinstance(data, dict) else None
    if not product or data.get("status") == 0:
        return None

    nutr = product.get("nutriments") or {}
    return Product(
        barcode=barcode,
        name=product.get("product_name") or product.get("product_name_en") or "Unknown Product",
        brand=product.get("brands") or None,
        calories=_n(nutr, "energy_kcal_100g", "energy-kcal_100g"),
        protein=_n(nutr, "proteins_100g"),
        carbs=_n(nutr, "carbohydrates_100g"),
        fat=_n(nutr, "fat_100g"),
        fiber=_n(nutr, "fiber_100g"),
        sugar=_n(nutr, "sugars_100g"),
        sodium=_n(nutr, "sodium_100g"),
        category=product.get("categories") or "Food",
        image_url=product.get("image_front_url") or product.get("image_url"),
        serving_size=product.get("serving_size") or "100g",
    )
