import json
import tempfile
import unittest
from datetime import datetime, timedelta
from pathlib import Path

from nutrilog.domain.MealRecord import MealFeedback
from nutrilog.infra.Meal_Repository import MealRepository
from nutrilog.utilities.errors import MealNotFoundError, MealStoreError


class TestMealRepository(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp.name) / "meals.json"
        self.repo = MealRepository(self.path)
        self.day = datetime(2025, 7, 14)

    def tearDown(self):
        self._tmp.cleanup()

    def _save(self, user="alice", hour=12, **fields):
        data = {"name": "Meal", "upload_time": self.day.replace(hour=hour), "calories": 500}
        data.update(fields)
        return self.repo.save_meal(user, data)

    def test_missing_file_is_empty_store(self):
        self.assertEqual(self.repo.recent_meals("alice"), [])

    def test_corrupt_file_raises(self):
        self.path.write_text("{not json", encoding="utf-8")
        with self.assertRaises(MealStoreError):
            self.repo.list_meals("alice", self.day, self.day + timedelta(days=1))

    def _write_malformed_meal(self):
        self.path.write_text(json.dumps([{"meal_id": 1, "user_id": "alice", "name": "Soup",
                                          "upload_time": "2025-07-14T12:00:00", "calories": "lots"}]),
                             encoding="utf-8")

    def test_malformed_record_is_a_store_error(self):
        self._write_malformed_meal()
        with self.assertRaises(MealStoreError):
            self.repo.get_meal("alice", 1)
        with self.assertRaises(MealStoreError):
            self.repo.toggle_favorite("alice", 1)
        with self.assertRaises(MealStoreError):
            self.repo.recent_meals("alice")

    def test_non_object_entries_are_a_store_error(self):
        self.path.write_text("[1, 2]", encoding="utf-8")
        with self.assertRaises(MealStoreError):
            self.repo.get_meal("alice", 1)

    def test_save_assigns_ids_and_persists(self):
        first = self._save()
        second = self._save(user="bob")
        self.assertEqual((first.meal_id, second.meal_id), (1, 2))
        reloaded = MealRepository(self.path).get_meal("alice", 1)
        self.assertEqual(reloaded.calories, 500)
        self.assertEqual(reloaded.user_id, "alice")

    def test_list_meals_window_and_order(self):
        self._save(hour=19, name="Dinner")
        self._save(hour=8, name="Breakfast")
        self._save(user="bob", hour=10)
        self.repo.save_meal("alice", {"name": "Old", "upload_time": self.day - timedelta(days=3)})
        meals = self.repo.list_meals("alice", self.day, self.day + timedelta(days=1))
        self.assertEqual([m.name for m in meals], ["Breakfast", "Dinner"])

    def test_recent_meals_newest_first_with_limit(self):
        for hour in (8, 12, 19):
            self._save(hour=hour, name=f"h{hour}")
        self.assertEqual([m.name for m in self.repo.recent_meals("alice", limit=2)], ["h19", "h12"])

    def test_other_users_meal_not_found(self):
        meal = self._save(user="bob")
        with self.assertRaises(MealNotFoundError):
            self.repo.get_meal("alice", meal.meal_id)

    def test_feedback(self):
        meal = self._save()
        self.repo.save_feedback("alice", meal.meal_id, MealFeedback(taste_rating=4, heaviness_rating=2))
        stored = self.repo.get_meal("alice", meal.meal_id)
        self.assertEqual(stored.feedback.taste_rating, 4)
        self.assertEqual(stored.feedback.heaviness_rating, 2)
        self.assertIsNotNone(stored.feedback.updated_at)

    def test_toggle_favorite(self):
        meal = self._save()
        self.assertTrue(self.repo.toggle_favorite("alice", meal.meal_id).is_favorite)
        self.assertFalse(self.repo.toggle_favorite("alice", meal.meal_id).is_favorite)
        self.assertIsNotNone(self.repo.get_meal("alice", meal.meal_id).favorite_updated_at)

    def test_duplicate_meal(self):
        meal = self._save(allergens=["nuts"], processing_level="PROCESSED")
        self.repo.toggle_favorite("alice", meal.meal_id)
        new_date = self.day + timedelta(days=1, hours=9)
        copy = self.repo.duplicate_meal("alice", meal.meal_id, new_date)
        self.assertNotEqual(copy.meal_id, meal.meal_id)
        self.assertEqual(copy.duplicated_from, meal.meal_id)
        self.assertEqual(copy.upload_time, new_date)
        self.assertEqual(copy.allergens, ["nuts"])
        self.assertEqual(copy.processing_level, "PROCESSED")
        self.assertFalse(copy.is_favorite)

    def test_duplicate_missing_meal(self):
        with self.assertRaises(MealNotFoundError):
            self.repo.duplicate_meal("alice", 99)


if __name__ == '__main__':
    unittest.main()
