"""Tests for daily check-in aggregation and statistics."""

from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from aria.domains.wellness.domain_logic.checkin_aggregator import (
    analyze_trend,
    checkin_message,
    checkin_stats,
    checkin_streak,
    date_key,
    find_for_day,
    numeric_values,
    personalized_questions,
    record_response,
    upsert,
)
from aria.domains.wellness.domain_logic.vocabulary import CheckInCategory
from aria.domains.wellness.domain_logic.wellness_models import DailyCheckIn

NOW = datetime(2026, 3, 4, 9, 30)


def _checkin(days_ago: int, **responses) -> DailyCheckIn:
    parsed = {CheckInCategory(k): v for k, v in responses.items()}
    return DailyCheckIn(
        id=f"checkin-{days_ago}",
        date=(NOW - timedelta(days=days_ago)).date(),
        responses=parsed,
        completion_score=len(parsed) / 8,
        created_at=NOW - timedelta(days=days_ago),
    )


def _history(stress: list[int]) -> list[DailyCheckIn]:
    return [_checkin(i, stress=value) for i, value in enumerate(stress)]


class TestRecordResponse:
    def test_creates_todays_checkin(self):
        checkin = record_response([], CheckInCategory.MOOD, "happy", NOW)
        assert checkin.date == NOW.date()
        assert checkin.responses == {CheckInCategory.MOOD: "happy"}
        assert checkin.completion_score == 0.125
        assert checkin.created_at == NOW

    def test_same_category_overwrites(self):
        first = record_response([], CheckInCategory.MOOD, "happy", NOW)
        second = record_response([first], CheckInCategory.MOOD, "calm", NOW + timedelta(hours=2))
        assert second.id == first.id
        assert second.responses[CheckInCategory.MOOD] == "calm"
        assert second.completion_score == 0.125
        assert first.responses[CheckInCategory.MOOD] == "happy"

    def test_four_of_eight_is_half(self):
        checkins: list[DailyCheckIn] = []
        for category, value in [
            (CheckInCategory.MOOD, "calm"),
            (CheckInCategory.ENERGY, 6),
            (CheckInCategory.STRESS, 4),
            (CheckInCategory.GRATITUDE, "coffee"),
        ]:
            checkins = upsert(checkins, record_response(checkins, category, value, NOW))
        assert len(checkins) == 1
        assert checkins[0].completion_score == 0.5

    def test_new_day_starts_fresh(self):
        yesterday = _checkin(1, mood="tired", energy=3)
        today = record_response([yesterday], CheckInCategory.MOOD, "happy", NOW)
        assert today.id != yesterday.id
        assert today.responses == {CheckInCategory.MOOD: "happy"}


class TestUpsert:
    def test_most_recent_first(self):
        checkins = upsert([_checkin(2), _checkin(5)], _checkin(0))
        assert [c.id for c in checkins] == ["checkin-0", "checkin-2", "checkin-5"]

    def test_replaces_same_day(self):
        updated = _checkin(0, mood="calm")
        checkins = upsert([_checkin(0), _checkin(1)], updated)
        assert len(checkins) == 2
        assert checkins[0].responses == {CheckInCategory.MOOD: "calm"}

    def test_find_for_day(self):
        checkins = [_checkin(0), _checkin(1)]
        assert find_for_day(checkins, NOW).id == "checkin-0"
        assert find_for_day(checkins, NOW - timedelta(days=7)) is None

    def test_date_key(self):
        assert date_key(date(2026, 3, 7)) == "2026-03-07"


class TestTrends:
    def test_increasing(self):
        assert analyze_trend(_history([8, 8, 8, 5, 5, 5]), CheckInCategory.STRESS) == "increasing"

    def test_decreasing(self):
        assert analyze_trend(_history([3, 3, 4, 7, 7, 8]), CheckInCategory.STRESS) == "decreasing"

    def test_stable(self):
        assert analyze_trend(_history([5, 5, 6, 5, 5, 5]), CheckInCategory.STRESS) == "stable"

    def test_three_values_compare_with_themselves(self):
        assert analyze_trend(_history([9, 1, 5]), CheckInCategory.STRESS) == "stable"

    def test_too_few_values(self):
        assert analyze_trend(_history([9, 1]), CheckInCategory.STRESS) == "neutral"

    def test_non_numeric_values_are_skipped(self):
        checkins = [_checkin(0, stress="high"), _checkin(1, stress=4)]
        assert numeric_values(checkins, CheckInCategory.STRESS) == [4.0]


class TestStreakAndStats:
    def test_streak(self):
        checkins = [_checkin(d) for d in (0, 1, 2, 4)]
        assert checkin_streak(checkins, NOW.date(), 30) == 3

    def test_streak_without_today(self):
        assert checkin_streak([_checkin(1)], NOW.date(), 30) == 0

    def test_empty_stats(self):
        stats = checkin_stats([], now=NOW)
        assert stats["total_checkins"] == 0
        assert stats["stress_trend"] == "neutral"
        assert stats["days_analyzed"] == 30

    def test_stats(self):
        checkins = [
            _checkin(0, mood="calm", energy=6, stress=3, gratitude="tea"),
            _checkin(1, mood="calm", energy=5, stress=4),
            _checkin(2, energy=5, stress=6),
            _checkin(40, energy=1, stress=9),
        ]
        stats = checkin_stats(checkins, now=NOW)
        assert stats["total_checkins"] == 3
        assert stats["average_completion"] == pytest.approx((4 + 3 + 2) / 24)
        assert stats["streak"] == 3
        assert stats["energy_trend"] == "stable"
        assert stats["mood_trend"] == "neutral"


class TestConversationHelpers:
    def test_base_questions(self):
        questions = personalized_questions({"stress_trend": "stable", "energy_trend": "stable"})
        assert len(questions) == 5
        assert questions[0] == "How are you feeling emotionally right now?"
        assert questions[-1] == "What would make tomorrow feel successful for you?"

    def test_tailored_questions(self):
        questions = personalized_questions(
            {"stress_trend": "increasing", "energy_trend": "decreasing"},
            habit_completion_rate=0.2,
        )
        assert "What's been the biggest source of stress lately?" in questions
        assert "How has your sleep been recently?" in questions
        assert "What's making it challenging to keep up with your wellness habits?" in questions
        assert len(questions) == 8

    @pytest.mark.parametrize(
        ("hour", "opening"),
        [(8, "Good morning!"), (14, "How has your day been going?"), (20, "As your day winds down")],
    )
    def test_message_without_checkin(self, hour, opening):
        assert checkin_message(None, NOW.replace(hour=hour)).startswith(opening)

    def test_message_for_thorough_checkin(self):
        full = _checkin(0, mood="calm", energy=6, stress=3, sleep=7, gratitude="tea",
                        challenges="none", goals="walk")
        assert checkin_message(full, NOW).startswith("Thanks for being so thoughtful")

    def test_message_for_partial_checkin(self):
        assert checkin_message(_checkin(0, mood="calm"), NOW).startswith("I appreciate you starting")
