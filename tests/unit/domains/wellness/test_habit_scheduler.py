"""Tests for habit scheduling, streaks and completion rates."""

from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from aria.domains.wellness.domain_logic.habit_scheduler import (
    completion_rate,
    compute_stats,
    current_streak,
    due_habits,
    expected_occurrences,
    is_due_today,
    overall_progress,
)
from aria.domains.wellness.domain_logic.vocabulary import HabitFrequency, HabitType

NOW = datetime(2026, 3, 4, 9, 30)  # Wednesday
TODAY = NOW.date()
SATURDAY = date(2026, 3, 7)


def _days_ago(days: int, hour: int = 8) -> datetime:
    return (NOW - timedelta(days=days)).replace(hour=hour, minute=0)


class TestIsDueToday:
    def test_daily_is_due_until_completed(self, habit_factory, completion_factory):
        habit = habit_factory()
        assert is_due_today(habit, TODAY, [])
        done = [completion_factory(_days_ago(0))]
        assert not is_due_today(habit, TODAY, done)

    def test_yesterdays_completion_does_not_count(self, habit_factory, completion_factory):
        habit = habit_factory()
        assert is_due_today(habit, TODAY, [completion_factory(_days_ago(1))])

    def test_other_habits_completion_does_not_count(self, habit_factory, completion_factory):
        habit = habit_factory()
        assert is_due_today(habit, TODAY, [completion_factory(_days_ago(0), habit_id="other")])

    def test_inactive_is_never_due(self, habit_factory):
        assert not is_due_today(habit_factory(is_active=False), TODAY, [])

    def test_weekdays(self, habit_factory):
        habit = habit_factory(frequency=HabitFrequency.WEEKDAYS)
        assert is_due_today(habit, TODAY, [])
        assert not is_due_today(habit, SATURDAY, [])

    def test_weekends(self, habit_factory):
        habit = habit_factory(frequency=HabitFrequency.WEEKENDS)
        assert not is_due_today(habit, TODAY, [])
        assert is_due_today(habit, SATURDAY, [])

    def test_weekly_once_per_iso_week(self, habit_factory, completion_factory):
        habit = habit_factory(frequency=HabitFrequency.WEEKLY)
        monday = [completion_factory(_days_ago(2))]
        last_sunday = [completion_factory(_days_ago(3))]
        assert not is_due_today(habit, TODAY, monday)
        assert is_due_today(habit, TODAY, last_sunday)

    def test_biweekly_uses_epoch_parity(self, habit_factory):
        habit = habit_factory(frequency=HabitFrequency.BIWEEKLY)
        assert not is_due_today(habit, TODAY, [])
        assert is_due_today(habit, date(2026, 3, 12), [])

    def test_custom_is_always_due(self, habit_factory):
        assert is_due_today(habit_factory(frequency=HabitFrequency.CUSTOM), SATURDAY, [])

    def test_due_habits_keeps_order(self, habit_factory, completion_factory):
        first = habit_factory(id="a", name="A")
        second = habit_factory(id="b", name="B")
        third = habit_factory(id="c", name="C")
        done = [completion_factory(_days_ago(0), habit_id="b")]
        assert due_habits([first, second, third], TODAY, done) == [first, third]


class TestExpectedOccurrences:
    @pytest.mark.parametrize(
        ("frequency", "window", "expected"),
        [
            (HabitFrequency.DAILY, 7, 7),
            (HabitFrequency.CUSTOM, 30, 30),
            (HabitFrequency.WEEKDAYS, 7, 5),
            (HabitFrequency.WEEKENDS, 7, 2),
            (HabitFrequency.WEEKLY, 7, 1),
            (HabitFrequency.WEEKLY, 30, 4),
            (HabitFrequency.BIWEEKLY, 7, 1),  # 0.5 rounds up
            (HabitFrequency.BIWEEKLY, 30, 2),
        ],
    )
    def test_expected(self, habit_factory, frequency, window, expected):
        assert expected_occurrences(habit_factory(frequency=frequency), window) == expected


class TestStreak:
    def test_consecutive_days(self, completion_factory):
        completions = [completion_factory(_days_ago(d)) for d in (0, 1, 2)]
        assert current_streak("habit-1", completions, TODAY, 30) == 3

    def test_missing_today_is_zero(self, completion_factory):
        completions = [completion_factory(_days_ago(d)) for d in (1, 2, 3)]
        assert current_streak("habit-1", completions, TODAY, 30) == 0

    def test_gap_stops_the_scan(self, completion_factory):
        completions = [completion_factory(_days_ago(d)) for d in (0, 1, 3, 4)]
        assert current_streak("habit-1", completions, TODAY, 30) == 2

    def test_several_completions_one_day_count_once(self, completion_factory):
        completions = [
            completion_factory(_days_ago(0, hour=7)),
            completion_factory(_days_ago(0, hour=9)),
        ]
        assert current_streak("habit-1", completions, TODAY, 30) == 1

    def test_limited_by_window(self, completion_factory):
        completions = [completion_factory(_days_ago(d)) for d in range(10)]
        assert current_streak("habit-1", completions, TODAY, 7) == 7


class TestCompletionRate:
    def test_ratio(self):
        assert completion_rate(3, 6) == 0.5

    def test_clamped(self):
        assert completion_rate(9, 7) == 1.0

    def test_nothing_expected(self):
        assert completion_rate(2, 0) == 0.0


class TestComputeStats:
    def test_window_stats(self, habit_factory, completion_factory):
        habit = habit_factory()
        completions = [
            completion_factory(_days_ago(0), rating=4),
            completion_factory(_days_ago(1), rating=5),
            completion_factory(_days_ago(2)),
            completion_factory(_days_ago(3)),
            completion_factory(_days_ago(10), rating=1),  # outside the window
            completion_factory(_days_ago(0), habit_id="other"),
        ]
        stats = compute_stats(habit, completions, 7, NOW)
        assert stats.current_streak == 4
        assert stats.total_completions == 4
        assert stats.expected_completions == 7
        assert stats.completion_rate == pytest.approx(4 / 7)
        assert stats.average_rating == 4.5
        assert stats.last_completed_at == _days_ago(0)
        assert stats.to_dict()["habit_name"] == "Morning Mindfulness"

    def test_no_completions(self, habit_factory):
        stats = compute_stats(habit_factory(), [], 7, NOW)
        assert stats.current_streak == 0
        assert stats.completion_rate == 0.0
        assert stats.average_rating is None
        assert stats.last_completed_at is None


class TestOverallProgress:
    def test_aggregates_active_habits(self, habit_factory, completion_factory):
        meditation = habit_factory(id="a")
        weekly = habit_factory(id="b", frequency=HabitFrequency.WEEKLY)
        archived = habit_factory(id="c", is_active=False)
        completions = [
            completion_factory(_days_ago(0), habit_id="a"),
            completion_factory(_days_ago(1), habit_id="a"),
            completion_factory(_days_ago(2), habit_id="b"),
            completion_factory(_days_ago(0), habit_id="c"),
        ]
        progress = overall_progress([meditation, weekly, archived], completions, 7, NOW)
        assert progress["total_habits"] == 2
        assert progress["total_expected"] == 8
        assert progress["total_completed"] == 3
        assert progress["completion_rate"] == pytest.approx(3 / 8)
        assert progress["habit_types"] == [HabitType.MEDITATION.value]
        assert progress["days_analyzed"] == 7

    def test_no_habits(self):
        progress = overall_progress([], [], 7, NOW)
        assert progress["completion_rate"] == 0.0
        assert progress["total_habits"] == 0
