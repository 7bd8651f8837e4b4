# services/gemini.py
import functools
import json
import logging
import random
import re
import time

from google import genai
from google.genai import types, errors as gerrors

from config import settings
from services.food_data import NutritionFacts, NutritionLookupError

_LOG = logging.getLogger(__name__)

SOURCE = "Gemini AI"

_PROMPT = """Estimate the nutritional information for: "{food}"

Please provide ONLY a JSON response with the following format (no additional text):
{{
  "calories": number,
  "protein": number,
  "carbs": number,
  "fat": number
}}

Values should be per typical serving size in grams for macros and total calories."""

_JSON_BLOCK = re.compile(r"\{[\s\S]*\}")


# ───────────── Client (created on first use) ─────────────
@functools.lru_cache(maxsize=1)
def _client() -> genai.Client:
    if not settings.gemini_api_key:
        raise NutritionLookupError("GEMINI_API_KEY not set in environment")
    return genai.Client(api_key=settings.gemini_api_key)


# ───────────── Generation (sync + retry) ─────────────
def generate(
    prompt: str,
    temperature: float = 0.2,
    max_output_tokens: int = 512,
) -> str:
    """Run a completion and return the LLM's text, retrying on rate limits."""
    for attempt in range(4):
        try:
            resp = _client().models.generate_content(
                model=settings.gemini_model,
                contents=[prompt],
                config=types.GenerateContentConfig(
                    temperature=temperature,
                    max_output_tokens=max_output_tokens,
                ),
            )
            return resp.text or ""
        except gerrors.ClientError as e:
            if getattr(e, "status", None) == "RESOURCE_EXHAUSTED":
                backoff = (2 ** attempt) + random.random()
                _LOG.warning("Gemini 429, retrying in %.1fs", backoff)
                time.sleep(backoff)
                continue
            raise NutritionLookupError(f"Gemini request failed: {e}") from e
        except gerrors.APIError as e:
            raise NutritionLookupError(f"Gemini request failed: {e}") from e
    raise NutritionLookupError("Gemini retries exhausted")


def parse_nutrition(raw: str) -> dict[str, float]:
    """Pull the first {...} block out of `raw` and coerce the four macros."""
    match = _JSON_BLOCK.search(raw or "")
    if not match:
        raise NutritionLookupError("No JSON found in Gemini response")
    try:
        data = json.loads(match.group(0))
        return {k: float(data.get(k) or 0) for k in ("calories", "protein", "carbs", "fat")}
    except (json.JSONDecodeError, TypeError, ValueError, AttributeError) as exc:
        raise NutritionLookupError(f"Unparseable Gemini response: {exc}") from exc


def estimate_nutrition(food_description: str) -> NutritionFacts:
    raw = generate(_PROMPT.format(food=food_description))
    try:
        values = parse_nutrition(raw)
    except NutritionLookupError as exc:
        raise NutritionLookupError(str(exc), raw_output=raw) from exc
    return NutritionFacts(source=SOURCE, name=food_description, **values)
