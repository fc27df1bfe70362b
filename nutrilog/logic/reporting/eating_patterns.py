"""Time-of-day patterns over a set of meals: eating window, fasting estimate, usual meal hour."""
from collections import Counter
from typing import Iterable, List

from nutrilog.domain.MealRecord import MealRecord
from nutrilog.domain.NutritionStatistics import EatingWindow
from nutrilog.domain.StatisticsPeriod import local_time
from nutrilog.utilities.formatting import clock_to_minutes, format_clock, round_half_up

DEFAULT_MEAL_TIME = "12:00"
MINUTES_PER_DAY = 24 * 60


def eating_window(meals: Iterable[MealRecord]) -> EatingWindow:
    hours: List[float] = []
    for meal in meals:
        t = local_time(meal.upload_time)
        hours.append(t.hour + t.minute / 60)
    if not hours:
        return EatingWindow()
    return EatingWindow(start=format_clock(min(hours)), end=format_clock(max(hours)))


def fasting_hours(window: EatingWindow) -> int:
    start = clock_to_minutes(window.start)
    end = clock_to_minutes(window.end)
    if end > start:
        fasting = MINUTES_PER_DAY - (end - start)
    else:
        # window wraps past midnight
        fasting = start - end
    return round_half_up(fasting / 60)


def most_common_meal_time(meals: Iterable[MealRecord]) -> str:
    """Hour of day with most meals as HH:00.

    Ties go to the hour seen first in the input order, not to the later or larger hour.
    """
    counts = Counter(local_time(meal.upload_time).hour for meal in meals)
    if not counts:
        return DEFAULT_MEAL_TIME
    hour, _ = counts.most_common(1)[0]
    return f"{hour:02d}:00"


__all__ = ["eating_window", "fasting_hours", "most_common_meal_time"]
