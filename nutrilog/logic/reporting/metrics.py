"""Derived metrics shared by the score, insight and recommendation rules."""
from dataclasses import dataclass


@dataclass(frozen=True)
class NutritionMetrics:
    """Unrounded period metrics; rules compare against these, output fields are rounded separately."""

    average_calories_daily: float
    average_protein_daily: float
    average_fiber_daily: float
    processed_food_percentage: float
    calorie_goal_achievement_percent: float
    meal_count: int = 0
    total_days: int = 1
    nutrition_score: int = 50

    @property
    def meals_per_day(self) -> float:
        return self.meal_count / self.total_days if self.total_days else 0.0


__all__ = ["NutritionMetrics"]
