"""Daily nutrition totals for the meals logged on a single day."""
from collections import defaultdict
from typing import Any, Dict, Iterable

from nutrilog.domain.MealRecord import MealRecord

DAILY_TOTAL_FIELDS = {
    'calories': 'calories',
    'protein': 'protein_g',
    'carbs': 'carbs_g',
    'fat': 'fats_g',
    'fiber': 'fiber_g',
    'sugar': 'sugar_g',
}


def compute_daily_totals(meals: Iterable[MealRecord]) -> Dict[str, Any]:
    """Sum a day's meals.

    Returns structure:
    { 'calories': n, 'protein': g, 'carbs': g, 'fat': g, 'fiber': g, 'sugar': g, 'mealCount': int }
    """
    totals = defaultdict(int)
    meal_count = 0
    for meal in meals:
        for key, field in DAILY_TOTAL_FIELDS.items():
            totals[key] += getattr(meal, field, 0) or 0
        meal_count += 1

    result = {key: totals[key] for key in DAILY_TOTAL_FIELDS}
    result['mealCount'] = meal_count
    return result

__all__ = ["compute_daily_totals"]
