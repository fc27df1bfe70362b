import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from nutrilog.api.dependencies import get_meal_repository, get_user_id
from nutrilog.domain.NutritionStatistics import NutritionStatistics
from nutrilog.domain.StatisticsPeriod import resolve_period
from nutrilog.infra.Meal_Repository import MealRepository
from nutrilog.infra.pdf_utils import generate_pdf_for_statistics
from nutrilog.logic.reporting.statistics import build_statistics
from nutrilog.utilities.errors import InvalidInputError, MealStoreError

router = APIRouter(prefix="/api/statistics", tags=["statistics"])
logger = logging.getLogger(__name__)


def load_statistics(repo: MealRepository, user_id: str, period: str) -> NutritionStatistics:
    """Fetch the user's meals for the period and aggregate them.

    A store failure is a 500, never an empty (zeroed) statistics payload.
    """
    try:
        start_date, end_date, _ = resolve_period(period)
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    try:
        meals = repo.list_meals(user_id, start_date, end_date)
    except MealStoreError:
        logger.exception("Could not fetch meals for user %s", user_id)
        raise HTTPException(status_code=500, detail="Failed to generate nutrition statistics")
    logger.info("Generating %s statistics for user %s from %d meals", period, user_id, len(meals))
    try:
        return build_statistics(meals, start_date, end_date)
    except InvalidInputError:
        logger.exception("Malformed meal data for user %s", user_id)
        raise HTTPException(status_code=500, detail="Failed to generate nutrition statistics")


@router.get("")
def get_statistics(period: str = Query(default="week"),
                   user_id: str = Depends(get_user_id),
                   repo: MealRepository = Depends(get_meal_repository)):
    stats = load_statistics(repo, user_id, period)
    return {"success": True, "data": stats.to_dict()}


@router.get("/insights")
def get_insights(user_id: str = Depends(get_user_id),
                 repo: MealRepository = Depends(get_meal_repository)):
    """Insights and recommendations over the last month."""
    stats = load_statistics(repo, user_id, "month")
    return {"success": True, "data": {"insights": stats.insights, "recommendations": stats.recommendations}}


@router.get("/pdf")
def get_statistics_pdf(period: str = Query(default="month"),
                       user_id: str = Depends(get_user_id),
                       repo: MealRepository = Depends(get_meal_repository)):
    stats = load_statistics(repo, user_id, period)
    pdf_bytes = generate_pdf_for_statistics(stats, period)
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="nutrition-report-{period}.pdf"'},
    )
