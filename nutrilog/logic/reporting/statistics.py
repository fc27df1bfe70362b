"""Nutrition statistics for a user's meals over a trailing period.

`compute_nutrition_statistics` is a pure transform: the caller fetches the meals
and passes them in, nothing here touches storage or the network. The result
depends only on the meals and on `now`, which fixes the end of the period.
"""
import logging
import math
from dataclasses import replace
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence, Union

from nutrilog.domain.MealRecord import MealRecord
from nutrilog.domain.NutritionStatistics import (
    GeneralStats, HealthInsights, NutritionStatistics, WeeklyTrends, default_statistics,
)
from nutrilog.domain.StatisticsPeriod import DAY, count_days, local_time, resolve_period
from nutrilog.logic.reporting.eating_patterns import (
    eating_window, fasting_hours, most_common_meal_time,
)
from nutrilog.logic.reporting.insights import generate_insights, generate_recommendations, health_insights
from nutrilog.logic.reporting.metrics import NutritionMetrics
from nutrilog.logic.reporting.scoring import calculate_nutrition_score
from nutrilog.utilities.constants import (
    DAILY_CALORIE_GOAL, MEALS_PER_DAY_BASELINE, NUTRIENT_FIELDS,
    PLANT_CATEGORY_KEYWORDS, PLANT_NAME_KEYWORDS, TREND_DAYS,
)
from nutrilog.utilities.errors import InvalidInputError
from nutrilog.utilities.formatting import percentage, round_half_up

logger = logging.getLogger(__name__)

MealLike = Union[MealRecord, dict]

TREND_FIELDS = {
    "calories": "calories",
    "protein": "protein_g",
    "carbs": "carbs_g",
    "fats": "fats_g",
}


def _as_records(meals: Iterable[MealLike]) -> List[MealRecord]:
    if meals is None:
        return []
    records = []
    for meal in meals:
        if isinstance(meal, MealRecord):
            records.append(meal)
        elif isinstance(meal, dict):
            records.append(MealRecord.from_dict(meal))
        else:
            raise InvalidInputError(f"Expected a meal record, got {type(meal).__name__}")
    return records


def sum_nutrients(meals: Sequence[MealRecord]) -> Dict[str, float]:
    totals = {field: 0 for field in NUTRIENT_FIELDS}
    for meal in meals:
        for field in NUTRIENT_FIELDS:
            totals[field] += getattr(meal, field) or 0
    return totals


def weekly_trends(meals: Sequence[MealRecord], start_date: datetime) -> WeeklyTrends:
    """Per-day calorie and macro totals for the first seven days after start_date.

    Meals outside that week are left out, whatever the length of the period.
    """
    buckets = {key: [0] * TREND_DAYS for key in TREND_FIELDS}
    start = local_time(start_date)
    for meal in meals:
        day_index = math.floor((local_time(meal.upload_time) - start) / DAY)
        if 0 <= day_index < TREND_DAYS:
            for key, field in TREND_FIELDS.items():
                buckets[key][day_index] += getattr(meal, field) or 0
    rounded = {key: [round_half_up(v) for v in values] for key, values in buckets.items()}
    return WeeklyTrends(**rounded)


def alcohol_caffeine_intake(meals: Sequence[MealRecord]) -> float:
    """Alcohol grams plus caffeine expressed as gram-equivalents (mg / 100)."""
    return sum((meal.alcohol_g or 0) + (meal.caffeine_mg or 0) / 100 for meal in meals)


def _is_plant_based(meal: MealRecord) -> bool:
    category = (meal.food_category or "").lower()
    name = (meal.name or "").lower()
    return (any(word in category for word in PLANT_CATEGORY_KEYWORDS)
            or any(word in name for word in PLANT_NAME_KEYWORDS))


def vegetable_fruit_intake(meals: Sequence[MealRecord]) -> int:
    return percentage(sum(1 for meal in meals if _is_plant_based(meal)), len(meals))


def full_logging_percentage(meal_count: int, total_days: int) -> int:
    return min(100, percentage(meal_count, total_days * MEALS_PER_DAY_BASELINE))


def missed_meals(meal_count: int, total_days: int) -> int:
    return max(0, total_days * MEALS_PER_DAY_BASELINE - meal_count)


def allergen_alerts(meals: Sequence[MealRecord]) -> List[str]:
    seen = {}
    for meal in meals:
        for allergen in meal.allergens or []:
            seen.setdefault(allergen, None)
    return list(seen)


def health_risk_percentage(meals: Sequence[MealRecord]) -> int:
    return percentage(sum(1 for meal in meals if meal.health_risk_notes), len(meals))


def build_statistics(meals: Iterable[MealLike], start_date: datetime, end_date: datetime) -> NutritionStatistics:
    """Statistics for meals logged in [start_date, end_date)."""
    records = _as_records(meals)
    if not records:
        return default_statistics()

    total_days = count_days(start_date, end_date)
    meal_count = len(records)
    totals = sum_nutrients(records)
    averages = {field: totals[field] / total_days for field in NUTRIENT_FIELDS}

    goal_percent = min(100, averages["calories"] / DAILY_CALORIE_GOAL * 100)
    processed_percent = sum(1 for meal in records if meal.is_processed) / meal_count * 100

    metrics = NutritionMetrics(
        average_calories_daily=averages["calories"],
        average_protein_daily=averages["protein_g"],
        average_fiber_daily=averages["fiber_g"],
        processed_food_percentage=processed_percent,
        calorie_goal_achievement_percent=goal_percent,
        meal_count=meal_count,
        total_days=total_days,
    )
    score = calculate_nutrition_score(metrics)
    scored = replace(metrics, nutrition_score=score)

    window = eating_window(records)

    return NutritionStatistics(
        average_calories_daily=round_half_up(averages["calories"]),
        calorie_goal_achievement_percent=round_half_up(goal_percent),
        average_protein_daily=round_half_up(averages["protein_g"]),
        average_carbs_daily=round_half_up(averages["carbs_g"]),
        average_fats_daily=round_half_up(averages["fats_g"]),
        average_fiber_daily=round_half_up(averages["fiber_g"]),
        average_sodium_daily=round_half_up(averages["sodium_mg"]),
        average_sugar_daily=round_half_up(averages["sugar_g"]),
        average_fluids_daily=round_half_up(averages["fluids_ml"]),
        processed_food_percentage=round_half_up(processed_percent),
        alcohol_caffeine_intake=alcohol_caffeine_intake(records),
        vegetable_fruit_intake=vegetable_fruit_intake(records),
        full_logging_percentage=full_logging_percentage(meal_count, total_days),
        allergen_alerts=allergen_alerts(records),
        health_risk_percentage=health_risk_percentage(records),
        average_eating_hours=window,
        intermittent_fasting_hours=fasting_hours(window),
        missed_meals_alert=missed_meals(meal_count, total_days),
        nutrition_score=score,
        weekly_trends=weekly_trends(records, start_date),
        insights=generate_insights(scored),
        recommendations=generate_recommendations(scored),
        general_stats=GeneralStats(
            average_calories_per_meal=round_half_up(totals["calories"] / meal_count),
            average_protein_per_meal=round_half_up(totals["protein_g"] / meal_count),
            most_common_meal_time=most_common_meal_time(records),
            average_meals_per_day=round_half_up(meal_count / total_days, 1),
        ),
        health_insights=HealthInsights(**health_insights(scored)),
    )


def compute_nutrition_statistics(meals: Iterable[MealLike], period: str = "week",
                                 now: Optional[datetime] = None) -> NutritionStatistics:
    """Statistics for `meals` over the trailing `period` (week, month or custom) ending at `now`.

    Raises InvalidInputError for an unknown period or a malformed meal record.
    An empty meal list is valid and yields `default_statistics()`.
    """
    start_date, end_date, _ = resolve_period(period, now)
    records = _as_records(meals)
    logger.info("Generating %s statistics from %d meals", period, len(records))
    return build_statistics(records, start_date, end_date)


__all__ = [
    "build_statistics", "compute_nutrition_statistics", "sum_nutrients", "weekly_trends",
    "alcohol_caffeine_intake", "vegetable_fruit_intake", "full_logging_percentage",
    "missed_meals", "allergen_alerts", "health_risk_percentage",
]
