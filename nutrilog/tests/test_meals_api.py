import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from fastapi.testclient import TestClient

from nutrilog.api.api_run import app
from nutrilog.api.dependencies import get_ai_quota, get_meal_repository
from nutrilog.infra.Meal_Repository import MealRepository
from nutrilog.logic.quota.ai_quota import AIQuotaLimiter

HEADERS = {"X-User-Id": "alice"}


class TestMealsAPI(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.repo = MealRepository(Path(self._tmp.name) / "meals.json")
        self.quota = AIQuotaLimiter(limits={"FREE": 1})
        app.dependency_overrides[get_meal_repository] = lambda: self.repo
        app.dependency_overrides[get_ai_quota] = lambda: self.quota

    def tearDown(self):
        app.dependency_overrides.clear()
        self._tmp.cleanup()

    def _log(self, **fields):
        body = {"name": "Lentil soup", "upload_time": "2025-07-14T12:30:00", "calories": 450,
                "protein_g": 22, "fiber_g": 9, "sugar_g": 4}
        body.update(fields)
        resp = self.client.post('/api/nutrition/meals', json=body, headers=HEADERS)
        self.assertEqual(resp.status_code, 201)
        return resp.json()['data']

    def test_save_and_list_meals(self):
        saved = self._log(allergens=["celery", " ", "celery"])
        self.assertEqual(saved['meal_id'], 1)
        self.assertEqual(saved['allergens'], ["celery"])
        resp = self.client.get('/api/nutrition/meals', headers=HEADERS)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual([m['name'] for m in resp.json()['data']], ["Lentil soup"])

    def test_meals_are_per_user(self):
        self._log()
        resp = self.client.get('/api/nutrition/meals', headers={"X-User-Id": "bob"})
        self.assertEqual(resp.json()['data'], [])

    def test_rejects_negative_nutrients(self):
        resp = self.client.post('/api/nutrition/meals', json={"name": "Bad", "calories": -5}, headers=HEADERS)
        self.assertEqual(resp.status_code, 422)

    def test_daily_stats(self):
        self._log()
        self._log(name="Apple", upload_time="2025-07-14T16:00:00", calories=95, protein_g=0, fiber_g=4, sugar_g=19)
        self._log(name="Late snack", upload_time="2025-07-15T00:10:00")
        resp = self.client.get('/api/nutrition/stats/2025-07-14', headers=HEADERS)
        self.assertEqual(resp.status_code, 200)
        data = resp.json()['data']
        self.assertEqual(data['calories'], 545)
        self.assertEqual(data['fiber'], 13)
        self.assertEqual(data['sugar'], 23)
        self.assertEqual(data['mealCount'], 2)

    def test_daily_stats_bad_date(self):
        resp = self.client.get('/api/nutrition/stats/14-07-2025', headers=HEADERS)
        self.assertEqual(resp.status_code, 400)

    def test_feedback(self):
        meal = self._log()
        resp = self.client.post(f"/api/nutrition/meals/{meal['meal_id']}/feedback",
                                json={"taste_rating": 5, "satiety_rating": 4}, headers=HEADERS)
        self.assertEqual(resp.status_code, 200)
        feedback = resp.json()['data']['feedback']
        self.assertEqual(feedback['taste_rating'], 5)
        self.assertIsNone(feedback['energy_rating'])

    def test_feedback_rating_out_of_range(self):
        meal = self._log()
        resp = self.client.post(f"/api/nutrition/meals/{meal['meal_id']}/feedback",
                                json={"taste_rating": 6}, headers=HEADERS)
        self.assertEqual(resp.status_code, 422)

    def test_toggle_favorite(self):
        meal = self._log()
        url = f"/api/nutrition/meals/{meal['meal_id']}/favorite"
        self.assertTrue(self.client.post(url, headers=HEADERS).json()['isFavorite'])
        self.assertFalse(self.client.post(url, headers=HEADERS).json()['isFavorite'])

    def test_duplicate(self):
        meal = self._log()
        resp = self.client.post(f"/api/nutrition/meals/{meal['meal_id']}/duplicate",
                                json={"new_date": "2025-07-16T13:00:00"}, headers=HEADERS)
        self.assertEqual(resp.status_code, 201)
        copy = resp.json()['data']
        self.assertEqual(copy['duplicated_from'], meal['meal_id'])
        self.assertEqual(copy['upload_time'], "2025-07-16T13:00:00")
        self.assertEqual(copy['calories'], 450)

    def test_unknown_meal_is_404(self):
        for path in ("feedback", "favorite", "duplicate"):
            resp = self.client.post(f"/api/nutrition/meals/42/{path}", json={}, headers=HEADERS)
            self.assertEqual(resp.status_code, 404, path)

    def test_malformed_stored_meal_is_a_server_error(self):
        self.repo.path.write_text(
            '[{"meal_id": 1, "user_id": "alice", "upload_time": "2025-07-14T12:00:00", "name": 5}]',
            encoding="utf-8")
        resp = self.client.post('/api/nutrition/meals/1/feedback', json={"taste_rating": 3}, headers=HEADERS)
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json()['detail'], "Failed to save feedback")

    def test_analyze_without_api_key(self):
        with patch('nutrilog.api.api_ai._get_openai_client', return_value=None):
            resp = self.client.post('/api/nutrition/analyze', json={"image_base64": "abc"}, headers=HEADERS)
        self.assertEqual(resp.status_code, 503)

    def test_analyze_respects_quota(self):
        analysis = {"name": "Pasta", "calories": 650}
        with patch('nutrilog.api.api_ai._get_openai_client', return_value=object()), \
                patch('nutrilog.api.api_ai.analyze_meal_image', return_value=analysis) as analyze:
            first = self.client.post('/api/nutrition/analyze',
                                     json={"image_base64": "data:image/jpeg;base64,abc"}, headers=HEADERS)
            second = self.client.post('/api/nutrition/analyze', json={"image_base64": "abc"}, headers=HEADERS)
        self.assertEqual(first.status_code, 200)
        self.assertEqual(first.json()['data'], analysis)
        self.assertEqual(first.json()['remainingAnalyses'], 0)
        self.assertEqual(analyze.call_args[0][1], "abc")
        self.assertEqual(second.status_code, 429)
        self.assertIn("Daily AI analysis limit reached (1)", second.json()['detail'])

    def test_analyze_uses_subscription_tier_header(self):
        self.quota = AIQuotaLimiter(limits={"FREE": 1, "PREMIUM": 3})
        premium = {**HEADERS, "X-Subscription-Tier": "premium"}
        with patch('nutrilog.api.api_ai._get_openai_client', return_value=object()), \
                patch('nutrilog.api.api_ai.analyze_meal_image', return_value={"calories": 1}):
            codes = [self.client.post('/api/nutrition/analyze', json={"image_base64": "abc"}, headers=premium)
                     for _ in range(4)]
            other = self.client.post('/api/nutrition/analyze', json={"image_base64": "abc"},
                                     headers={"X-User-Id": "bob", "X-Subscription-Tier": "GOLD"})
        self.assertEqual([r.status_code for r in codes], [200, 200, 200, 429])
        self.assertEqual(codes[0].json()['remainingAnalyses'], 2)
        self.assertEqual(other.json()['remainingAnalyses'], 0)

    def test_analyze_unparseable_answer(self):
        with patch('nutrilog.api.api_ai._get_openai_client', return_value=object()), \
                patch('nutrilog.api.api_ai.analyze_meal_image', return_value=None):
            resp = self.client.post('/api/nutrition/analyze', json={"image_base64": "abc"}, headers=HEADERS)
        self.assertEqual(resp.status_code, 502)


class TestParseAnalysis(unittest.TestCase):
    def test_code_fences_and_trailing_commas(self):
        from nutrilog.api.api_ai import parse_analysis
        raw = '```json\n{"name": "Soup", "calories": 300,}\n```'
        self.assertEqual(parse_analysis(raw), {"name": "Soup", "calories": 300})

    def test_embedded_object(self):
        from nutrilog.api.api_ai import parse_analysis
        self.assertEqual(parse_analysis('Here you go: {"calories": 10} enjoy'), {"calories": 10})

    def test_no_json(self):
        from nutrilog.api.api_ai import parse_analysis
        self.assertIsNone(parse_analysis("sorry, I cannot see the image"))


if __name__ == '__main__':
    unittest.main()
