from typing import Final

DATE_FORMAT: Final[str] = "%Y-%m-%d"

DAILY_CALORIE_GOAL: Final[int] = 2000
MEALS_PER_DAY_BASELINE: Final[int] = 3
TREND_DAYS: Final[int] = 7
RECENT_MEALS_LIMIT: Final[int] = 100

PERIOD_DAYS: Final[dict[str, int]] = {"week": 7, "month": 30, "custom": 14}
PROCESSED_LEVELS: Final[frozenset[str]] = frozenset({"PROCESSED", "HIGHLY_PROCESSED"})

# Substring heuristics for vegetable/fruit meals
PLANT_CATEGORY_KEYWORDS: Final[tuple[str, ...]] = ("vegetable", "fruit")
PLANT_NAME_KEYWORDS: Final[tuple[str, ...]] = ("salad", "fruit")

NUTRIENT_FIELDS: Final[tuple[str, ...]] = (
    "calories", "protein_g", "carbs_g", "fats_g", "fiber_g",
    "sugar_g", "sodium_mg", "fluids_ml", "alcohol_g", "caffeine_mg",
)

# AI analysis quota
AI_REQUEST_LIMITS: Final[dict[str, int]] = {"FREE": 10, "BASIC": 50, "PREMIUM": 200}
DEFAULT_SUBSCRIPTION: Final[str] = "FREE"
AI_QUOTA_RESET_HOURS: Final[int] = 24

MEAL_ANALYSIS_PROMPT: Final[str] = (
    """
    Analyse the meal in the photo and estimate its nutrition for the whole portion.
    Answer in {language}. Return ONLY a JSON object with the following format:

    """
)
MEAL_ANALYSIS_JSON_FORMAT: Final[str] = (
    """
{
    "name": str,
    "description": str,
    "calories": int,
    "protein": float,
    "carbs": float,
    "fat": float,
    "fiber": float,
    "sugar": float,
    "sodium": float,
    "confidence": int (0-100),
    "ingredients": [str, str],
    "servingSize": str,
    "cookingMethod": str,
    "healthNotes": str
}
    """
)
