"""Insight and recommendation texts derived from period metrics.

Rules are grouped. Every group is an ordered tuple of (predicate, text); the
first predicate that matches emits its text and the group stops, so a group
contributes at most one line. Groups are evaluated in declaration order and
that order is the order of the output.
"""
from typing import Callable, List, Sequence, Tuple

from nutrilog.logic.reporting.metrics import NutritionMetrics

Rule = Tuple[Callable[[NutritionMetrics], bool], str]
RuleGroup = Sequence[Rule]


def _always(_metrics: NutritionMetrics) -> bool:
    return True


INSIGHT_RULES: Sequence[RuleGroup] = (
    (
        (lambda m: m.nutrition_score >= 80,
         "Excellent nutrition habits! You're maintaining a well-balanced diet."),
        (lambda m: m.nutrition_score >= 60,
         "Good nutrition foundation with room for improvement."),
        (_always,
         "Your nutrition could benefit from some adjustments."),
    ),
    (
        (lambda m: m.average_protein_daily >= 120,
         "Great protein intake! This supports muscle maintenance and satiety."),
        (lambda m: m.average_protein_daily < 80,
         "Consider increasing protein intake for better muscle support and satiety."),
    ),
    (
        (lambda m: m.processed_food_percentage > 30,
         "High processed food intake detected. Try incorporating more whole foods."),
        (lambda m: m.processed_food_percentage < 15,
         "Excellent focus on whole foods! This supports overall health."),
    ),
    (
        (lambda m: m.meals_per_day < 2,
         "Consider logging more meals for better nutrition tracking."),
        (lambda m: m.meals_per_day > 5,
         "Frequent eating pattern detected. Ensure portion control."),
    ),
)

RECOMMENDATION_RULES: Sequence[RuleGroup] = (
    (
        (lambda m: m.average_protein_daily < 100,
         "Add lean proteins like chicken, fish, or legumes to your meals."),
    ),
    (
        (lambda m: m.average_fiber_daily < 20,
         "Increase fiber intake with vegetables, fruits, and whole grains."),
    ),
    (
        (lambda m: m.processed_food_percentage > 25,
         "Replace processed foods with whole food alternatives when possible."),
    ),
    (
        (lambda m: m.average_calories_daily < 1500,
         "Consider if you're eating enough to meet your energy needs."),
        (lambda m: m.average_calories_daily > 2500,
         "Monitor portion sizes to align with your calorie goals."),
    ),
    (
        (_always,
         "Stay hydrated and maintain regular meal timing for optimal metabolism."),
    ),
)

PROTEIN_ADEQUACY_RULES: RuleGroup = (
    (lambda m: m.average_protein_daily >= 120,
     "Excellent protein intake supporting muscle health and satiety"),
    (lambda m: m.average_protein_daily >= 80,
     "Good protein levels, consider slight increase for optimal benefits"),
    (_always,
     "Protein intake below recommended levels - focus on lean proteins"),
)

CALORIE_DISTRIBUTION_RULES: RuleGroup = (
    (lambda m: 1800 <= m.average_calories_daily <= 2200,
     "Calorie intake appears well-balanced for most adults"),
    (lambda m: m.average_calories_daily < 1500,
     "Calorie intake may be too low - ensure adequate energy for daily needs"),
    (_always,
     "Higher calorie intake - monitor portion sizes and activity levels"),
)

FIBER_INTAKE_RULES: RuleGroup = (
    (lambda m: m.average_fiber_daily >= 25,
     "Excellent fiber intake supporting digestive health"),
    (lambda m: m.average_fiber_daily >= 15,
     "Good fiber levels, aim for 25g daily for optimal benefits"),
    (_always,
     "Low fiber intake - increase vegetables, fruits, and whole grains"),
)


def first_match(group: RuleGroup, metrics: NutritionMetrics):
    for matches, text in group:
        if matches(metrics):
            return text
    return None


def apply_rules(groups: Sequence[RuleGroup], metrics: NutritionMetrics) -> List[str]:
    lines = []
    for group in groups:
        text = first_match(group, metrics)
        if text is not None:
            lines.append(text)
    return lines


def generate_insights(metrics: NutritionMetrics) -> List[str]:
    return apply_rules(INSIGHT_RULES, metrics)


def generate_recommendations(metrics: NutritionMetrics) -> List[str]:
    return apply_rules(RECOMMENDATION_RULES, metrics)


def health_insights(metrics: NutritionMetrics) -> dict:
    """One-line assessments for protein, calories and fiber (each group always matches)."""
    return {
        "protein_adequacy": first_match(PROTEIN_ADEQUACY_RULES, metrics),
        "calorie_distribution": first_match(CALORIE_DISTRIBUTION_RULES, metrics),
        "fiber_intake": first_match(FIBER_INTAKE_RULES, metrics),
    }


__all__ = [
    "INSIGHT_RULES", "RECOMMENDATION_RULES", "apply_rules", "first_match",
    "generate_insights", "generate_recommendations", "health_insights",
]
