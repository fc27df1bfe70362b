import json
import logging
import os
import shutil
import tempfile
from datetime import datetime
from pathlib import Path
from threading import Lock
from typing import List, Optional

from nutrilog.domain.MealRecord import MealFeedback, MealRecord
from nutrilog.domain.StatisticsPeriod import local_time
from nutrilog.infra.paths import MEALS_FILE
from nutrilog.utilities.constants import RECENT_MEALS_LIMIT
from nutrilog.utilities.errors import InvalidInputError, MealNotFoundError, MealStoreError

logger = logging.getLogger(__name__)

_write_lock = Lock()


class MealRepository:
    """JSON-file meal store: a single list of meal dicts shared by all users.

    A missing file is an empty store. A file that cannot be read or parsed
    raises MealStoreError, so callers can tell "no meals" from "no data".
    """

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path is not None else MEALS_FILE

    # -------------------- raw storage --------------------
    def _load(self) -> List[dict]:
        if not self.path.exists():
            return []
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                store = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.exception("Failed to read meal store %s", self.path)
            raise MealStoreError(f"Could not read meal store: {e}") from e
        if not isinstance(store, list) or not all(isinstance(m, dict) for m in store):
            raise MealStoreError(f"Meal store {self.path} is not a list of meal objects")
        return store

    def _atomic_write(self, store: List[dict]) -> None:
        os.makedirs(self.path.parent, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".meals_", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                json.dump(store, tmp, indent=2, ensure_ascii=False)
            shutil.move(tmp_path, self.path)
        except OSError as e:
            logger.exception("Failed to write meal store %s", self.path)
            raise MealStoreError(f"Could not write meal store: {e}") from e
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)

    def _records(self, user_id: str) -> List[MealRecord]:
        return [self._record(m) for m in self._load() if m.get("user_id") == user_id]

    def _find(self, store: List[dict], user_id: str, meal_id: int) -> dict:
        for raw in store:
            if raw.get("user_id") == user_id and raw.get("meal_id") == meal_id:
                return raw
        raise MealNotFoundError(f"Meal {meal_id} not found")

    def _record(self, raw: dict) -> MealRecord:
        try:
            return MealRecord.from_dict(raw)
        except InvalidInputError as e:
            raise MealStoreError(f"Meal store contains a malformed record: {e}") from e

    def _update(self, user_id: str, meal_id: int, change) -> MealRecord:
        with _write_lock:
            store = self._load()
            raw = self._find(store, user_id, meal_id)
            meal = self._record(raw)
            change(meal)
            raw.clear()
            raw.update(meal.to_dict())
            self._atomic_write(store)
        return meal

    # -------------------- queries --------------------
    def list_meals(self, user_id: str, start: datetime, end: datetime) -> List[MealRecord]:
        """Meals uploaded between start and end (both inclusive), oldest first."""
        lo, hi = local_time(start), local_time(end)
        meals = [m for m in self._records(user_id) if lo <= local_time(m.upload_time) <= hi]
        meals.sort(key=lambda m: local_time(m.upload_time))
        return meals

    def recent_meals(self, user_id: str, limit: int = RECENT_MEALS_LIMIT) -> List[MealRecord]:
        meals = sorted(self._records(user_id), key=lambda m: local_time(m.upload_time), reverse=True)
        return meals[:limit]

    def get_meal(self, user_id: str, meal_id: int) -> MealRecord:
        return self._record(self._find(self._load(), user_id, meal_id))

    # -------------------- commands --------------------
    def save_meal(self, user_id: str, data: dict) -> MealRecord:
        payload = dict(data)
        payload.setdefault("upload_time", datetime.now())
        if payload["upload_time"] is None:
            payload["upload_time"] = datetime.now()
        with _write_lock:
            store = self._load()
            next_id = max((m.get("meal_id") or 0 for m in store), default=0) + 1
            payload.update({"meal_id": next_id, "user_id": user_id})
            meal = MealRecord.from_dict(payload)
            store.append(meal.to_dict())
            self._atomic_write(store)
        logger.info("Saved meal %s for user %s", meal.meal_id, user_id)
        return meal

    def save_feedback(self, user_id: str, meal_id: int, feedback: MealFeedback) -> MealRecord:
        if feedback.updated_at is None:
            feedback.updated_at = datetime.now()

        def _apply(meal: MealRecord):
            meal.feedback = feedback

        return self._update(user_id, meal_id, _apply)

    def toggle_favorite(self, user_id: str, meal_id: int) -> MealRecord:
        def _apply(meal: MealRecord):
            meal.is_favorite = not meal.is_favorite
            meal.favorite_updated_at = datetime.now()

        return self._update(user_id, meal_id, _apply)

    def duplicate_meal(self, user_id: str, meal_id: int, new_date: Optional[datetime] = None) -> MealRecord:
        """Copy a meal to a new upload time (now by default); feedback and favourite state are not copied."""
        original = self.get_meal(user_id, meal_id)
        copy = original.to_dict()
        for key in ("meal_id", "feedback", "favorite_updated_at"):
            copy.pop(key, None)
        copy.update({
            "is_favorite": False,
            "duplicated_from": original.meal_id,
            "upload_time": new_date or datetime.now(),
        })
        return self.save_meal(user_id, copy)


__all__ = ["MealRepository"]
