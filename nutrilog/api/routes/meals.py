import logging
from datetime import datetime, timedelta
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from nutrilog.api.dependencies import get_meal_repository, get_user_id
from nutrilog.domain.MealRecord import MealFeedback
from nutrilog.infra.Meal_Repository import MealRepository
from nutrilog.logic.reporting.nutrition import compute_daily_totals
from nutrilog.utilities.constants import DATE_FORMAT, RECENT_MEALS_LIMIT
from nutrilog.utilities.errors import InvalidInputError, MealNotFoundError, MealStoreError
from nutrilog.utilities.validators import DuplicateInput, FeedbackInput, MealInput

router = APIRouter(prefix="/api/nutrition", tags=["nutrition"])
logger = logging.getLogger(__name__)


def _store_failure(action: str):
    logger.exception("Meal store failure while trying to %s", action)
    return HTTPException(status_code=500, detail=f"Failed to {action}")


@router.get("/meals")
def list_meals(limit: int = Query(default=RECENT_MEALS_LIMIT, ge=1, le=RECENT_MEALS_LIMIT),
               user_id: str = Depends(get_user_id),
               repo: MealRepository = Depends(get_meal_repository)):
    try:
        meals = repo.recent_meals(user_id, limit)
    except MealStoreError:
        raise _store_failure("fetch meals")
    return {"success": True, "data": [m.to_dict() for m in meals]}


@router.post("/meals", status_code=201)
def save_meal(payload: MealInput,
              user_id: str = Depends(get_user_id),
              repo: MealRepository = Depends(get_meal_repository)):
    try:
        meal = repo.save_meal(user_id, payload.model_dump())
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except MealStoreError:
        raise _store_failure("save meal")
    return {"success": True, "data": meal.to_dict()}


@router.get("/stats/{date}")
def daily_stats(date: str,
                user_id: str = Depends(get_user_id),
                repo: MealRepository = Depends(get_meal_repository)):
    try:
        day_start = datetime.strptime(date, DATE_FORMAT)
    except ValueError:
        raise HTTPException(status_code=400, detail="Date must be in YYYY-MM-DD format")
    day_end = day_start + timedelta(days=1) - timedelta(microseconds=1)
    try:
        meals = repo.list_meals(user_id, day_start, day_end)
    except MealStoreError:
        raise _store_failure("fetch daily stats")
    return {"success": True, "data": compute_daily_totals(meals)}


@router.post("/meals/{meal_id}/feedback")
def save_feedback(meal_id: int, payload: FeedbackInput,
                  user_id: str = Depends(get_user_id),
                  repo: MealRepository = Depends(get_meal_repository)):
    try:
        meal = repo.save_feedback(user_id, meal_id, MealFeedback(**payload.model_dump()))
    except MealNotFoundError:
        raise HTTPException(status_code=404, detail="Meal not found")
    except MealStoreError:
        raise _store_failure("save feedback")
    return {"success": True, "data": meal.to_dict()}


@router.post("/meals/{meal_id}/favorite")
def toggle_favorite(meal_id: int,
                    user_id: str = Depends(get_user_id),
                    repo: MealRepository = Depends(get_meal_repository)):
    try:
        meal = repo.toggle_favorite(user_id, meal_id)
    except MealNotFoundError:
        raise HTTPException(status_code=404, detail="Meal not found")
    except MealStoreError:
        raise _store_failure("toggle favorite")
    return {"success": True, "isFavorite": meal.is_favorite, "data": meal.to_dict()}


@router.post("/meals/{meal_id}/duplicate", status_code=201)
def duplicate_meal(meal_id: int, payload: Optional[DuplicateInput] = None,
                   user_id: str = Depends(get_user_id),
                   repo: MealRepository = Depends(get_meal_repository)):
    try:
        meal = repo.duplicate_meal(user_id, meal_id, payload.new_date if payload else None)
    except MealNotFoundError:
        raise HTTPException(status_code=404, detail="Original meal not found")
    except MealStoreError:
        raise _store_failure("duplicate meal")
    return {"success": True, "data": meal.to_dict()}
