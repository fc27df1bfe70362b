"""MealRecord domain entity: one logged meal with nutrient values, upload time and history metadata."""
import math
from datetime import datetime
from typing import List, Optional

from nutrilog.utilities.constants import NUTRIENT_FIELDS, PROCESSED_LEVELS
from nutrilog.utilities.errors import InvalidInputError

FEEDBACK_FIELDS = ("taste_rating", "satiety_rating", "energy_rating", "heaviness_rating")


def parse_timestamp(value, field: str = "upload_time") -> datetime:
    '''Accepts a datetime or an ISO-8601 string (trailing Z means UTC).'''
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith('Z'):
            text = text[:-1] + '+00:00'
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            pass
    raise InvalidInputError(f"{field} must be a datetime or ISO-8601 string, got {value!r}")


def _parse_optional_timestamp(value, field: str) -> Optional[datetime]:
    if value in (None, ""):
        return None
    return parse_timestamp(value, field)


def _coerce_nutrient(field: str, value) -> float:
    if value is None:
        return 0
    if isinstance(value, bool):
        raise InvalidInputError(f"{field} must be numeric, got {value!r}")
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            raise InvalidInputError(f"{field} must be numeric, got {value!r}") from None
    if not isinstance(value, (int, float)):
        raise InvalidInputError(f"{field} must be numeric, got {type(value).__name__}")
    try:
        number = float(value)
    except OverflowError:
        raise InvalidInputError(f"{field} is out of range") from None
    if math.isnan(number) or math.isinf(number) or number < 0:
        raise InvalidInputError(f"{field} must be a non-negative finite number, got {value!r}")
    return value


def _optional_text(field: str, value) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidInputError(f"{field} must be a string, got {type(value).__name__}")
    return value


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if isinstance(value, datetime) else None


class MealFeedback:
    """How the meal felt: four optional 1-5 ratings plus when they were given."""

    def __init__(self, taste_rating: Optional[int] = None, satiety_rating: Optional[int] = None,
                 energy_rating: Optional[int] = None, heaviness_rating: Optional[int] = None,
                 updated_at: Optional[datetime] = None):
        self.taste_rating = taste_rating
        self.satiety_rating = satiety_rating
        self.energy_rating = energy_rating
        self.heaviness_rating = heaviness_rating
        self.updated_at = updated_at

    @staticmethod
    def from_dict(data) -> "MealFeedback":
        d = dict(data) if isinstance(data, dict) else {}
        ratings = {k: d.get(k) for k in FEEDBACK_FIELDS}
        return MealFeedback(updated_at=_parse_optional_timestamp(d.get("updated_at"), "updated_at"), **ratings)

    def to_dict(self):
        data = {k: getattr(self, k) for k in FEEDBACK_FIELDS}
        data["updated_at"] = _iso(self.updated_at)
        return data

    def __eq__(self, other):
        return isinstance(other, MealFeedback) and self.to_dict() == other.to_dict()


class MealRecord:
    def __init__(self, upload_time, name: str = "", calories=0, protein_g=0, carbs_g=0, fats_g=0,
                 fiber_g=0, sugar_g=0, sodium_mg=0, fluids_ml=0, alcohol_g=0, caffeine_mg=0,
                 processing_level: Optional[str] = None, food_category: Optional[str] = None,
                 allergens: Optional[List[str]] = None, health_risk_notes: Optional[str] = None,
                 meal_id: Optional[int] = None, user_id: Optional[str] = None, image_url: str = "",
                 additives: Optional[List[str]] = None, is_favorite: bool = False,
                 favorite_updated_at: Optional[datetime] = None, feedback: Optional[MealFeedback] = None,
                 duplicated_from: Optional[int] = None):
        self.upload_time = parse_timestamp(upload_time)
        self.name = _optional_text("name", name) or ""
        nutrients = {
            "calories": calories, "protein_g": protein_g, "carbs_g": carbs_g, "fats_g": fats_g,
            "fiber_g": fiber_g, "sugar_g": sugar_g, "sodium_mg": sodium_mg, "fluids_ml": fluids_ml,
            "alcohol_g": alcohol_g, "caffeine_mg": caffeine_mg,
        }
        for field, value in nutrients.items():
            setattr(self, field, _coerce_nutrient(field, value))
        self.processing_level = _optional_text("processing_level", processing_level)
        self.food_category = _optional_text("food_category", food_category)
        if allergens is not None and not isinstance(allergens, (list, tuple, set)):
            raise InvalidInputError(f"allergens must be a list of strings, got {type(allergens).__name__}")
        self.allergens = [str(a) for a in allergens] if allergens else []
        self.health_risk_notes = _optional_text("health_risk_notes", health_risk_notes) or ""
        self.meal_id = meal_id
        self.user_id = user_id
        self.image_url = image_url or ""
        self.additives = list(additives) if additives else []
        self.is_favorite = bool(is_favorite)
        self.favorite_updated_at = _parse_optional_timestamp(favorite_updated_at, "favorite_updated_at")
        self.feedback = feedback
        self.duplicated_from = duplicated_from

    @property
    def is_processed(self) -> bool:
        return (self.processing_level or "").upper() in PROCESSED_LEVELS

    def __str__(self) -> str:
        return f"{self.name or 'Unnamed meal'} @ {self.upload_time.isoformat()} - {self.calories} kcal"

    __repr__ = __str__

    @staticmethod
    def from_dict(data) -> "MealRecord":
        '''Creates a MealRecord from a dictionary (storage or API shape). Ignores unknown keys.'''
        if not isinstance(data, dict):
            raise InvalidInputError(f"meal record must be a mapping, got {type(data).__name__}")
        d = dict(data)
        if "upload_time" not in d and "uploadTime" in d:
            d["upload_time"] = d.pop("uploadTime")
        if "upload_time" not in d:
            raise InvalidInputError("meal record is missing upload_time")
        feedback = d.get("feedback")
        if isinstance(feedback, dict):
            d["feedback"] = MealFeedback.from_dict(feedback)
        elif feedback is not None and not isinstance(feedback, MealFeedback):
            d["feedback"] = None
        allowed = {
            "upload_time", "name", "processing_level", "food_category", "allergens", "health_risk_notes",
            "meal_id", "user_id", "image_url", "additives", "is_favorite", "favorite_updated_at",
            "feedback", "duplicated_from", *NUTRIENT_FIELDS,
        }
        filtered = {k: v for k, v in d.items() if k in allowed}
        return MealRecord(**filtered)

    def to_dict(self):
        '''Converts the MealRecord to a JSON-ready dictionary.'''
        data = {
            "meal_id": self.meal_id,
            "user_id": self.user_id,
            "name": self.name,
            "upload_time": self.upload_time.isoformat(),
            "image_url": self.image_url,
        }
        for field in NUTRIENT_FIELDS:
            data[field] = getattr(self, field)
        data.update({
            "processing_level": self.processing_level,
            "food_category": self.food_category,
            "allergens": list(self.allergens),
            "health_risk_notes": self.health_risk_notes,
            "additives": list(self.additives),
            "is_favorite": self.is_favorite,
            "favorite_updated_at": _iso(self.favorite_updated_at),
            "feedback": self.feedback.to_dict() if self.feedback else None,
            "duplicated_from": self.duplicated_from,
        })
        return data
