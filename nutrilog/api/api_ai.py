import re
import json
import logging
from json import JSONDecodeError
from typing import Optional
from openai import OpenAI
from fastapi import APIRouter, Depends, HTTPException

from nutrilog.api.dependencies import get_ai_quota, get_subscription_tier, get_user_id
from nutrilog.logic.quota.ai_quota import AIQuotaLimiter
from nutrilog.utilities.config import OPENAI_API_KEY, OPENAI_MODEL
from nutrilog.utilities.constants import MEAL_ANALYSIS_JSON_FORMAT, MEAL_ANALYSIS_PROMPT
from nutrilog.utilities.errors import QuotaExceededError
from nutrilog.utilities.validators import MealAnalysisInput

logger = logging.getLogger(__name__)


# === Helper: Get OpenAI Client ===
def _get_openai_client() -> Optional[OpenAI]:
    """Return an OpenAI client if OPENAI_API_KEY is set, otherwise None."""
    if not OPENAI_API_KEY:
        return None
    return OpenAI(api_key=OPENAI_API_KEY)


# === Text Cleaning Helpers ===
def _strip_code_fences(text: str) -> str:
    """Remove common markdown code fences and leading/trailing whitespace."""
    text = re.sub(r"```(?:json)?\n(.*?)```", r"\1", text, flags=re.S)
    text = re.sub(r"^```|```$", "", text)
    return text.strip()


def _remove_trailing_commas(text: str) -> str:
    return re.sub(r",\s*(\}|\])", r"\1", text)


def parse_analysis(raw: str) -> Optional[dict]:
    """Best-effort parse of the model's answer into a dict; None when no JSON object is found."""
    cleaned = _remove_trailing_commas(_strip_code_fences(raw or ""))
    if not cleaned:
        return None
    try:
        parsed = json.loads(cleaned)
    except JSONDecodeError:
        match = re.search(r"\{.*\}", cleaned, flags=re.S)
        if not match:
            return None
        try:
            parsed = json.loads(match.group(0))
        except JSONDecodeError:
            logger.exception("Failed to decode extracted JSON from AI output")
            return None
    return parsed if isinstance(parsed, dict) else None


# === Meal Analysis ===
def analyze_meal_image(client: OpenAI, image_base64: str, language: str = "english",
                       update_text: Optional[str] = None) -> Optional[dict]:
    prompt = MEAL_ANALYSIS_PROMPT.format(language=language) + MEAL_ANALYSIS_JSON_FORMAT
    if update_text:
        prompt += f"\nThe user adds this correction: {update_text}"

    response = client.responses.create(
        model=OPENAI_MODEL,
        input=[{
            "role": "user",
            "content": [
                {"type": "input_text", "text": prompt},
                {"type": "input_image", "image_url": f"data:image/jpeg;base64,{image_base64}"},
            ],
        }],
    )
    analysis = parse_analysis(response.output_text)
    if analysis is None:
        logger.warning("AI returned no usable meal analysis")
    return analysis


# === FastAPI Endpoint ===
router = APIRouter(prefix="/api/nutrition", tags=["analysis"])


@router.post("/analyze")
def analyze_meal(payload: MealAnalysisInput,
                 user_id: str = Depends(get_user_id),
                 tier: Optional[str] = Depends(get_subscription_tier),
                 quota: AIQuotaLimiter = Depends(get_ai_quota)):
    client = _get_openai_client()
    if client is None:
        logger.warning("OPENAI_API_KEY not set, meal analysis unavailable.")
        raise HTTPException(status_code=503, detail="Meal analysis is not configured")

    if tier:
        quota.set_subscription(user_id, tier)
    try:
        quota.consume(user_id)
    except QuotaExceededError as e:
        raise HTTPException(status_code=429, detail=str(e))

    try:
        analysis = analyze_meal_image(client, payload.image_base64, payload.language, payload.update_text)
    except Exception:
        logger.exception("Meal analysis failed for user %s", user_id)
        raise HTTPException(status_code=502, detail="Meal analysis failed")
    if analysis is None:
        raise HTTPException(status_code=502, detail="AI did not return a valid meal analysis")

    return {"success": True, "data": analysis, "remainingAnalyses": quota.remaining(user_id)}
