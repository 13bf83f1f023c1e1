"""Tests for level completion, XP and streak accounting."""

from __future__ import annotations

from datetime import date

import pytest

from aptidude.errors import ContractViolationError
from aptidude.models import UserStats
from aptidude.progress import ProgressStore, advance_streak
from aptidude.storage import InMemoryBackend, RecordStore

DAY = date(2026, 3, 2)


@pytest.fixture()
def progress(records: RecordStore) -> ProgressStore:
    return ProgressStore(records)


def test_recording_twice_is_idempotent(progress: ProgressStore) -> None:
    once = progress.record_level_completion("percentages", "level-1", xp_earned=10, active_on=DAY)
    twice = progress.record_level_completion("percentages", "level-1", xp_earned=10, active_on=DAY)

    assert once.completed_levels == ["level-1"]
    assert twice.completed_levels == ["level-1"]
    assert progress.get_progress("percentages").completed_levels == ["level-1"]
    assert progress.get_stats().xp == 10


def test_levels_accumulate_per_topic(progress: ProgressStore, backend: InMemoryBackend) -> None:
    progress.record_level_completion("percentages", "level-1", active_on=DAY)
    progress.record_level_completion("percentages", "level-2", active_on=DAY)
    progress.record_level_completion("time-work", "level-1", active_on=DAY)

    assert sorted(key for key in backend.keys() if key.startswith("progress-")) == [
        "progress-percentages",
        "progress-time-work",
    ]
    assert [item.topic_id for item in progress.get_all_progress()] == ["percentages", "time-work"]
    assert progress.total_completed_levels() == 3


def test_no_activity_means_no_progress(progress: ProgressStore) -> None:
    assert progress.get_all_progress() == []
    assert progress.total_completed_levels() == 0
    assert progress.get_stats() == UserStats()
    assert progress.get_progress("unknown") is None


def test_xp_accumulates_monotonically(progress: ProgressStore) -> None:
    progress.record_level_completion("ratios", "level-1", xp_earned=15, active_on=DAY)
    progress.record_level_completion("ratios", "level-2", xp_earned=20, active_on=DAY)
    stats = progress.award_xp(5, active_on=DAY)
    assert stats.xp == 40
    assert progress.get_stats().xp == 40


def test_negative_xp_is_rejected(progress: ProgressStore) -> None:
    with pytest.raises(ContractViolationError):
        progress.record_level_completion("ratios", "level-1", xp_earned=-5)
    with pytest.raises(ContractViolationError):
        progress.award_xp(-1)
    assert progress.get_all_progress() == []


@pytest.mark.parametrize("amount", [2.5, "5", True, None])
def test_non_integer_xp_is_rejected_and_stats_survive(progress: ProgressStore, amount) -> None:
    progress.record_level_completion("ratios", "level-1", xp_earned=50, active_on=DAY)

    with pytest.raises(ContractViolationError):
        progress.record_level_completion("ratios", "level-2", xp_earned=amount, active_on=DAY)
    with pytest.raises(ContractViolationError):
        progress.award_xp(amount, active_on=DAY)

    stats = progress.get_stats()
    assert stats.xp == 50
    assert stats.streak == 1
    assert progress.get_progress("ratios").completed_levels == ["level-1"]


@pytest.mark.parametrize(("topic_id", "level_id"), [("", "level-1"), ("ratios", "  ")])
def test_blank_identifiers_are_rejected(progress: ProgressStore, topic_id: str, level_id: str) -> None:
    with pytest.raises(ContractViolationError):
        progress.record_level_completion(topic_id, level_id)


def test_streak_counts_consecutive_days(progress: ProgressStore) -> None:
    progress.record_level_completion("ratios", "level-1", active_on=date(2026, 3, 1))
    progress.record_level_completion("ratios", "level-2", active_on=date(2026, 3, 1))
    assert progress.get_stats().streak == 1
    progress.record_level_completion("ratios", "level-3", active_on=date(2026, 3, 2))
    progress.record_level_completion("ratios", "level-4", active_on=date(2026, 3, 3))
    assert progress.get_stats().streak == 3
    assert progress.get_stats().last_active_on == date(2026, 3, 3)


def test_streak_never_decreases() -> None:
    stats = UserStats(xp=0, streak=4, last_active_on=date(2026, 3, 1))
    after_gap = advance_streak(stats, date(2026, 3, 9))
    assert after_gap.streak == 4
    assert after_gap.last_active_on == date(2026, 3, 9)
    assert advance_streak(after_gap, date(2026, 3, 2)) == after_gap
    assert advance_streak(after_gap, date(2026, 3, 10)).streak == 5


def test_corrupt_progress_record_reads_as_absent(backend: InMemoryBackend) -> None:
    backend.write("progress-ratios", "not-json")
    store = ProgressStore(RecordStore(backend))
    assert store.get_all_progress() == []
    store.record_level_completion("ratios", "level-1", active_on=DAY)
    assert store.get_progress("ratios").completed_levels == ["level-1"]


def test_corrupt_stats_fall_back_to_zero(backend: InMemoryBackend) -> None:
    backend.write("user-stats", '{"xp": -3, "streak": 1}')
    assert ProgressStore(RecordStore(backend)).get_stats() == UserStats()
