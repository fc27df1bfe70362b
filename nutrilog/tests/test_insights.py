import unittest

from nutrilog.logic.reporting.insights import generate_insights, generate_recommendations, health_insights
from nutrilog.logic.reporting.metrics import NutritionMetrics

HYDRATION = "Stay hydrated and maintain regular meal timing for optimal metabolism."


def metrics(**overrides):
    values = dict(
        average_calories_daily=2000,
        average_protein_daily=100,
        average_fiber_daily=20,
        processed_food_percentage=20,
        calorie_goal_achievement_percent=100,
        meal_count=21,
        total_days=7,
        nutrition_score=70,
    )
    values.update(overrides)
    return NutritionMetrics(**values)


class TestInsights(unittest.TestCase):
    def test_exactly_one_score_line(self):
        cases = {
            80: "Excellent nutrition habits! You're maintaining a well-balanced diet.",
            79: "Good nutrition foundation with room for improvement.",
            60: "Good nutrition foundation with room for improvement.",
            59: "Your nutrition could benefit from some adjustments.",
        }
        for score, expected in cases.items():
            with self.subTest(score=score):
                self.assertEqual(generate_insights(metrics(nutrition_score=score)), [expected])

    def test_middle_values_are_silent(self):
        # protein 100, processed 20, 3 meals/day -> only the score line
        self.assertEqual(len(generate_insights(metrics())), 1)

    def test_rule_order(self):
        lines = generate_insights(metrics(nutrition_score=40, average_protein_daily=50,
                                          processed_food_percentage=45, meal_count=42))
        self.assertEqual(lines, [
            "Your nutrition could benefit from some adjustments.",
            "Consider increasing protein intake for better muscle support and satiety.",
            "High processed food intake detected. Try incorporating more whole foods.",
            "Frequent eating pattern detected. Ensure portion control.",
        ])

    def test_positive_notes(self):
        lines = generate_insights(metrics(average_protein_daily=120, processed_food_percentage=14.9, meal_count=13))
        self.assertIn("Great protein intake! This supports muscle maintenance and satiety.", lines)
        self.assertIn("Excellent focus on whole foods! This supports overall health.", lines)
        self.assertIn("Consider logging more meals for better nutrition tracking.", lines)


class TestRecommendations(unittest.TestCase):
    def test_hydration_always_last(self):
        self.assertEqual(generate_recommendations(metrics()), [HYDRATION])

    def test_all_rules_fire_in_order(self):
        lines = generate_recommendations(metrics(average_protein_daily=60, average_fiber_daily=5,
                                                 processed_food_percentage=26, average_calories_daily=1200))
        self.assertEqual(lines, [
            "Add lean proteins like chicken, fish, or legumes to your meals.",
            "Increase fiber intake with vegetables, fruits, and whole grains.",
            "Replace processed foods with whole food alternatives when possible.",
            "Consider if you're eating enough to meet your energy needs.",
            HYDRATION,
        ])

    def test_high_calories(self):
        lines = generate_recommendations(metrics(average_calories_daily=2600))
        self.assertEqual(lines, ["Monitor portion sizes to align with your calorie goals.", HYDRATION])


class TestHealthInsights(unittest.TestCase):
    def test_texts(self):
        texts = health_insights(metrics(average_protein_daily=85, average_calories_daily=1400, average_fiber_daily=30))
        self.assertEqual(texts["protein_adequacy"], "Good protein levels, consider slight increase for optimal benefits")
        self.assertEqual(texts["calorie_distribution"],
                         "Calorie intake may be too low - ensure adequate energy for daily needs")
        self.assertEqual(texts["fiber_intake"], "Excellent fiber intake supporting digestive health")

    def test_high_calorie_text(self):
        texts = health_insights(metrics(average_calories_daily=2500))
        self.assertEqual(texts["calorie_distribution"],
                         "Higher calorie intake - monitor portion sizes and activity levels")


if __name__ == '__main__':
    unittest.main()
