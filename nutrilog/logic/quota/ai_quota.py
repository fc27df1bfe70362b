"""Per-user daily quota for AI meal analyses.

Each user has a counter and the time it was last reset. Once
AI_QUOTA_RESET_HOURS have passed since the reset, the counter starts from zero
again. The limit depends on the user's subscription tier; unknown tiers get the
FREE limit.

State is in memory and per process, guarded by a Lock.
"""
from __future__ import annotations
import logging
from datetime import datetime, timedelta
from threading import Lock
from typing import Callable, Dict, Optional

from nutrilog.utilities.constants import AI_QUOTA_RESET_HOURS, AI_REQUEST_LIMITS, DEFAULT_SUBSCRIPTION
from nutrilog.utilities.errors import QuotaExceededError

logger = logging.getLogger(__name__)


class _Usage:
    __slots__ = ("count", "reset_at")

    def __init__(self, reset_at: datetime):
        self.count = 0
        self.reset_at = reset_at


class AIQuotaLimiter:
    def __init__(self, limits: Optional[Dict[str, int]] = None,
                 reset_after: timedelta = timedelta(hours=AI_QUOTA_RESET_HOURS),
                 clock: Callable[[], datetime] = datetime.now):
        self._limits = dict(limits or AI_REQUEST_LIMITS)
        self._reset_after = reset_after
        self._clock = clock
        self._lock = Lock()
        self._usage: Dict[str, _Usage] = {}
        self._subscriptions: Dict[str, str] = {}

    def set_subscription(self, user_id: str, subscription_type: str) -> None:
        with self._lock:
            self._subscriptions[user_id] = subscription_type

    def limit_for(self, user_id: str) -> int:
        tier = self._subscriptions.get(user_id, DEFAULT_SUBSCRIPTION)
        return self._limits.get(tier, self._limits[DEFAULT_SUBSCRIPTION])

    def _current(self, user_id: str) -> _Usage:
        now = self._clock()
        usage = self._usage.get(user_id)
        if usage is None:
            usage = self._usage[user_id] = _Usage(now)
        elif now - usage.reset_at >= self._reset_after:
            logger.debug("Resetting AI quota for user %s", user_id)
            usage.count = 0
            usage.reset_at = now
        return usage

    def check(self, user_id: str) -> bool:
        """True while the user still has analyses left in the current window."""
        with self._lock:
            return self._current(user_id).count < self.limit_for(user_id)

    def record(self, user_id: str) -> int:
        """Count one analysis against the user's quota; returns the new count."""
        with self._lock:
            usage = self._current(user_id)
            usage.count += 1
            return usage.count

    def consume(self, user_id: str) -> int:
        """check + record in one step; raises QuotaExceededError when the quota is used up."""
        with self._lock:
            usage = self._current(user_id)
            limit = self.limit_for(user_id)
            if usage.count >= limit:
                logger.info("AI quota exhausted for user %s (%d/%d)", user_id, usage.count, limit)
                raise QuotaExceededError(limit)
            usage.count += 1
            return usage.count

    def remaining(self, user_id: str) -> int:
        with self._lock:
            return max(0, self.limit_for(user_id) - self._current(user_id).count)


# Process-wide instance used by the API layer
GLOBAL_AI_QUOTA = AIQuotaLimiter()

__all__ = ["AIQuotaLimiter", "GLOBAL_AI_QUOTA"]
