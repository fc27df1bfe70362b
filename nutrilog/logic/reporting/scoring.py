"""Nutrition score: an additive heuristic over four banded components.

Each component is a table of (predicate, points) bands checked top to bottom;
the first band that matches contributes its points and the rest are skipped.
The sum is added to BASE_SCORE and clamped to [MIN_SCORE, MAX_SCORE].
"""
from typing import Callable, Sequence, Tuple

from nutrilog.logic.reporting.metrics import NutritionMetrics
from nutrilog.utilities.formatting import round_half_up

Band = Tuple[Callable[[float], bool], int]

BASE_SCORE = 50
MIN_SCORE = 1
MAX_SCORE = 100

CALORIE_GOAL_BANDS: Sequence[Band] = (
    (lambda pct: 90 <= pct <= 110, 20),
    (lambda pct: 80 <= pct <= 120, 15),
    (lambda pct: 70 <= pct <= 130, 10),
)

PROTEIN_BANDS: Sequence[Band] = (
    (lambda grams: grams >= 120, 15),
    (lambda grams: grams >= 80, 10),
    (lambda grams: grams >= 50, 5),
)

FIBER_BANDS: Sequence[Band] = (
    (lambda grams: grams >= 25, 10),
    (lambda grams: grams >= 15, 7),
    (lambda grams: grams >= 10, 5),
)

PROCESSED_FOOD_BANDS: Sequence[Band] = (
    (lambda pct: pct <= 10, 5),
    (lambda pct: pct <= 20, 0),
    (lambda pct: pct <= 40, -5),
    (lambda pct: True, -15),
)

SCORE_COMPONENTS: Sequence[Tuple[str, Sequence[Band]]] = (
    ("calorie_goal_achievement_percent", CALORIE_GOAL_BANDS),
    ("average_protein_daily", PROTEIN_BANDS),
    ("average_fiber_daily", FIBER_BANDS),
    ("processed_food_percentage", PROCESSED_FOOD_BANDS),
)


def band_points(value: float, bands: Sequence[Band]) -> int:
    for matches, points in bands:
        if matches(value):
            return points
    return 0


def score_breakdown(metrics: NutritionMetrics) -> dict:
    """Points contributed by each component, keyed by metric name."""
    return {name: band_points(getattr(metrics, name), bands) for name, bands in SCORE_COMPONENTS}


def calculate_nutrition_score(metrics: NutritionMetrics) -> int:
    score = BASE_SCORE + sum(score_breakdown(metrics).values())
    return max(MIN_SCORE, min(MAX_SCORE, round_half_up(score)))


__all__ = [
    "BASE_SCORE", "CALORIE_GOAL_BANDS", "PROTEIN_BANDS", "FIBER_BANDS", "PROCESSED_FOOD_BANDS",
    "band_points", "score_breakdown", "calculate_nutrition_score",
]
