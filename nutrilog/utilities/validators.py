"""
Input validation schemas using Pydantic for API payloads.
"""
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import datetime


class MealInput(BaseModel):
    """Schema for a meal logged by the client."""
    name: str = Field(..., min_length=1, max_length=200)
    upload_time: Optional[datetime] = None
    calories: float = Field(0, ge=0)
    protein_g: float = Field(0, ge=0)
    carbs_g: float = Field(0, ge=0)
    fats_g: float = Field(0, ge=0)
    fiber_g: float = Field(0, ge=0)
    sugar_g: float = Field(0, ge=0)
    sodium_mg: float = Field(0, ge=0)
    fluids_ml: float = Field(0, ge=0)
    alcohol_g: float = Field(0, ge=0)
    caffeine_mg: float = Field(0, ge=0)
    processing_level: Optional[str] = Field(None, pattern=r'^(UNPROCESSED|MINIMALLY_PROCESSED|PROCESSED|HIGHLY_PROCESSED)$')
    food_category: Optional[str] = Field(None, max_length=100)
    allergens: List[str] = Field(default_factory=list)
    additives: List[str] = Field(default_factory=list)
    health_risk_notes: Optional[str] = None
    image_url: Optional[str] = None

    @field_validator('name', 'food_category')
    @classmethod
    def strip_whitespace(cls, v):
        """Remove leading/trailing whitespace."""
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator('allergens', 'additives')
    @classmethod
    def validate_tags(cls, v):
        """Drop blanks and duplicates, keep first-seen order."""
        cleaned = [item.strip() for item in v if item and item.strip()]
        return list(dict.fromkeys(cleaned))


class FeedbackInput(BaseModel):
    """Schema for post-meal feedback; each rating is optional, 1-5."""
    taste_rating: Optional[int] = Field(None, ge=1, le=5)
    satiety_rating: Optional[int] = Field(None, ge=1, le=5)
    energy_rating: Optional[int] = Field(None, ge=1, le=5)
    heaviness_rating: Optional[int] = Field(None, ge=1, le=5)


class DuplicateInput(BaseModel):
    new_date: Optional[datetime] = None


class MealAnalysisInput(BaseModel):
    """Schema for an AI meal photo analysis request."""
    image_base64: str = Field(..., min_length=1)
    language: str = Field("english", min_length=2, max_length=30)
    update_text: Optional[str] = Field(None, max_length=500)

    @field_validator('image_base64')
    @classmethod
    def strip_data_url(cls, v):
        """Accept both raw base64 and data: URLs."""
        if v.startswith('data:') and ',' in v:
            return v.split(',', 1)[1]
        return v
