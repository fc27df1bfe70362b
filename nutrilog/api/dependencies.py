"""FastAPI dependencies shared by the routers; tests swap them via app.dependency_overrides."""
from typing import Optional

from fastapi import Header, HTTPException

from nutrilog.infra.Meal_Repository import MealRepository
from nutrilog.logic.quota.ai_quota import GLOBAL_AI_QUOTA, AIQuotaLimiter


def get_meal_repository() -> MealRepository:
    return MealRepository()


def get_ai_quota() -> AIQuotaLimiter:
    return GLOBAL_AI_QUOTA


def get_user_id(x_user_id: Optional[str] = Header(default=None)) -> str:
    """Opaque user id supplied by the authenticating proxy in front of the API."""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")
    return x_user_id.strip()


def get_subscription_tier(x_subscription_tier: Optional[str] = Header(default=None)) -> Optional[str]:
    """Subscription tier (FREE, BASIC, PREMIUM) forwarded by the same proxy; None when not sent."""
    if not x_subscription_tier or not x_subscription_tier.strip():
        return None
    return x_subscription_tier.strip().upper()
