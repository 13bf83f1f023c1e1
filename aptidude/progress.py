"""Per-topic level completion and the accumulated XP/streak counters."""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, timezone
from typing import List, Optional

from .errors import ContractViolationError
from .models import Progress, UserStats
from .storage import RecordSchema, RecordStore, model_schema

logger = logging.getLogger(__name__)

PROGRESS_KEY_PREFIX = "progress-"
USER_STATS_KEY = "user-stats"

USER_STATS = model_schema(USER_STATS_KEY, UserStats, UserStats)


def progress_key(topic_id: str) -> str:
    return f"{PROGRESS_KEY_PREFIX}{topic_id}"


def _progress_schema(topic_id: str) -> RecordSchema[Optional[Progress]]:
    return model_schema(progress_key(topic_id), Progress, lambda: None)


def _require_identifier(kind: str, value: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ContractViolationError(f"{kind} must be a non-empty string.")
    return value


def _require_xp(kind: str, amount: int) -> int:
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise ContractViolationError(f"{kind} expects an int, got {type(amount).__name__}.")
    if amount < 0:
        raise ContractViolationError(f"{kind} cannot be negative.")
    return amount


def advance_streak(stats: UserStats, active_on: date) -> UserStats:
    """Count ``active_on`` towards the streak without ever lowering it."""
    last = stats.last_active_on
    if last is None:
        return stats.model_copy(update={"streak": max(stats.streak, 1), "last_active_on": active_on})
    if active_on <= last:
        return stats
    if active_on == last + timedelta(days=1):
        return stats.model_copy(update={"streak": stats.streak + 1, "last_active_on": active_on})
    return stats.model_copy(update={"last_active_on": active_on})


class ProgressStore:
    """Owns ``progress-*`` records and the ``user-stats`` record.

    XP and streak are stored directly and kept consistent here on every
    write; reads never recompute them from the progress records.
    """

    def __init__(self, records: RecordStore) -> None:
        self._records = records

    def record_level_completion(
        self,
        topic_id: str,
        level_id: str,
        *,
        xp_earned: int = 0,
        active_on: Optional[date] = None,
    ) -> Progress:
        _require_identifier("topic_id", topic_id)
        _require_identifier("level_id", level_id)
        _require_xp("xp_earned", xp_earned)

        schema = _progress_schema(topic_id)
        progress = self._records.get(schema) or Progress(topic_id=topic_id)
        if progress.has_level(level_id):
            logger.debug("Level %s/%s already completed; nothing to record", topic_id, level_id)
            return progress

        now = datetime.now(timezone.utc)
        progress = progress.model_copy(
            update={
                "completed_levels": [*progress.completed_levels, level_id],
                "last_completed_at": now,
            }
        )
        self._records.set(schema, progress)

        stats = self.get_stats()
        stats = advance_streak(stats, active_on or now.date())
        stats = stats.model_copy(update={"xp": stats.xp + xp_earned})
        self._records.set(USER_STATS, stats)
        logger.info("Recorded level %s/%s (+%d XP)", topic_id, level_id, xp_earned)
        return progress

    def award_xp(self, amount: int, *, active_on: Optional[date] = None) -> UserStats:
        _require_xp("amount", amount)
        stats = self.get_stats()
        stats = advance_streak(stats, active_on or datetime.now(timezone.utc).date())
        stats = stats.model_copy(update={"xp": stats.xp + amount})
        return self._records.set(USER_STATS, stats)

    def get_progress(self, topic_id: str) -> Optional[Progress]:
        return self._records.get(_progress_schema(topic_id))

    def get_all_progress(self) -> List[Progress]:
        found: List[Progress] = []
        for key in self._records.keys(PROGRESS_KEY_PREFIX):
            progress = self.get_progress(key[len(PROGRESS_KEY_PREFIX):])
            if progress is not None and progress.completed_levels:
                found.append(progress)
        found.sort(key=lambda item: (item.started_at, item.topic_id))
        return found

    def get_stats(self) -> UserStats:
        stats = self._records.get(USER_STATS)
        return stats if stats is not None else UserStats()

    def total_completed_levels(self) -> int:
        return sum(len(progress.completed_levels) for progress in self.get_all_progress())


__all__ = [
    "PROGRESS_KEY_PREFIX",
    "ProgressStore",
    "USER_STATS",
    "USER_STATS_KEY",
    "advance_streak",
    "progress_key",
]
