"""NutritionStatistics: the derived statistics payload returned to the mobile client.

Computed fresh on every request and never persisted. `to_dict` produces the
camelCase JSON shape the client renders.
"""
from dataclasses import dataclass, field
from typing import Dict, List

from nutrilog.utilities.constants import TREND_DAYS


def _empty_trend() -> List[int]:
    return [0] * TREND_DAYS


@dataclass
class EatingWindow:
    start: str = "08:00"
    end: str = "20:00"


@dataclass
class WeeklyTrends:
    calories: List[int] = field(default_factory=_empty_trend)
    protein: List[int] = field(default_factory=_empty_trend)
    carbs: List[int] = field(default_factory=_empty_trend)
    fats: List[int] = field(default_factory=_empty_trend)


@dataclass
class GeneralStats:
    average_calories_per_meal: int = 0
    average_protein_per_meal: int = 0
    most_common_meal_time: str = "12:00"
    average_meals_per_day: float = 0


@dataclass
class HealthInsights:
    protein_adequacy: str = "Start logging meals to track protein intake"
    calorie_distribution: str = "Begin meal logging to analyze calorie patterns"
    fiber_intake: str = "Track your meals to monitor fiber consumption"


@dataclass
class NutritionStatistics:
    average_calories_daily: int = 0
    calorie_goal_achievement_percent: int = 0
    average_protein_daily: int = 0
    average_carbs_daily: int = 0
    average_fats_daily: int = 0
    average_fiber_daily: int = 0
    average_sodium_daily: int = 0
    average_sugar_daily: int = 0
    average_fluids_daily: int = 0
    processed_food_percentage: int = 0
    alcohol_caffeine_intake: float = 0
    vegetable_fruit_intake: int = 0
    full_logging_percentage: int = 0
    allergen_alerts: List[str] = field(default_factory=list)
    health_risk_percentage: int = 0
    average_eating_hours: EatingWindow = field(default_factory=EatingWindow)
    intermittent_fasting_hours: int = 12
    missed_meals_alert: int = 0
    nutrition_score: int = 50
    weekly_trends: WeeklyTrends = field(default_factory=WeeklyTrends)
    insights: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)
    general_stats: GeneralStats = field(default_factory=GeneralStats)
    health_insights: HealthInsights = field(default_factory=HealthInsights)

    def to_dict(self) -> Dict:
        return {
            "averageCaloriesDaily": self.average_calories_daily,
            "calorieGoalAchievementPercent": self.calorie_goal_achievement_percent,
            "averageProteinDaily": self.average_protein_daily,
            "averageCarbsDaily": self.average_carbs_daily,
            "averageFatsDaily": self.average_fats_daily,
            "averageFiberDaily": self.average_fiber_daily,
            "averageSodiumDaily": self.average_sodium_daily,
            "averageSugarDaily": self.average_sugar_daily,
            "averageFluidsDaily": self.average_fluids_daily,
            "processedFoodPercentage": self.processed_food_percentage,
            "alcoholCaffeineIntake": self.alcohol_caffeine_intake,
            "vegetableFruitIntake": self.vegetable_fruit_intake,
            "fullLoggingPercentage": self.full_logging_percentage,
            "allergenAlerts": list(self.allergen_alerts),
            "healthRiskPercentage": self.health_risk_percentage,
            "averageEatingHours": {
                "start": self.average_eating_hours.start,
                "end": self.average_eating_hours.end,
            },
            "intermittentFastingHours": self.intermittent_fasting_hours,
            "missedMealsAlert": self.missed_meals_alert,
            "nutritionScore": self.nutrition_score,
            "weeklyTrends": {
                "calories": list(self.weekly_trends.calories),
                "protein": list(self.weekly_trends.protein),
                "carbs": list(self.weekly_trends.carbs),
                "fats": list(self.weekly_trends.fats),
            },
            "insights": list(self.insights),
            "recommendations": list(self.recommendations),
            "generalStats": {
                "averageCaloriesPerMeal": self.general_stats.average_calories_per_meal,
                "averageProteinPerMeal": self.general_stats.average_protein_per_meal,
                "mostCommonMealTime": self.general_stats.most_common_meal_time,
                "averageMealsPerDay": self.general_stats.average_meals_per_day,
            },
            "healthInsights": {
                "proteinAdequacy": self.health_insights.protein_adequacy,
                "calorieDistribution": self.health_insights.calorie_distribution,
                "fiberIntake": self.health_insights.fiber_intake,
            },
        }


def default_statistics() -> NutritionStatistics:
    """The fixed empty-state statistics returned when no meals were logged in the period."""
    return NutritionStatistics(
        insights=["Start logging meals to see personalized insights!"],
        recommendations=["Begin by logging your meals regularly to get personalized recommendations."],
    )


__all__ = [
    "EatingWindow", "WeeklyTrends", "GeneralStats", "HealthInsights",
    "NutritionStatistics", "default_statistics",
]
