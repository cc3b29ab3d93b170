"""Tests for the daily check-in service."""

from __future__ import annotations

import pytest

from aria.domains.wellness.domain_logic.vocabulary import (
    CheckInCategory,
    HabitDifficulty,
    HabitFrequency,
    HabitType,
)
from aria.domains.wellness.services.daily_checkin import (
    CheckInNotStartedError,
    DailyCheckInService,
    normalize_response,
)
from aria.domains.wellness.services.habit_tracking import HabitTrackingService


def _make_service(store, clock, **kwargs) -> DailyCheckInService:
    return DailyCheckInService(store, clock=clock, **kwargs)


def _titles(update) -> list[str]:
    return [i.title for i in update.insights]


class TestNormalizeResponse:
    def test_mood_by_name_or_value(self):
        assert normalize_response(CheckInCategory.MOOD, "happy") == "happy"
        assert normalize_response(CheckInCategory.MOOD, "Overwhelmed") == "overwhelmed"

    def test_unknown_mood(self):
        with pytest.raises(ValueError, match="Unknown Mood"):
            normalize_response(CheckInCategory.MOOD, "grumpy")

    def test_levels_from_text(self):
        assert normalize_response(CheckInCategory.STRESS, "7") == 7
        assert normalize_response(CheckInCategory.ENERGY, "6.5") == 6.5
        assert normalize_response(CheckInCategory.ENERGY, 8.0) == 8
        assert isinstance(normalize_response(CheckInCategory.ENERGY, 8.0), int)

    @pytest.mark.parametrize("value", [0, 11, "eleven", True])
    def test_levels_out_of_range(self, value):
        with pytest.raises(ValueError):
            normalize_response(CheckInCategory.STRESS, value)

    def test_free_text_untouched(self):
        assert normalize_response(CheckInCategory.GRATITUDE, "sunshine") == "sunshine"


class TestRecordResponse:
    def test_no_insights_below_half_completion(self, store, clock):
        service = _make_service(store, clock)
        update = service.record_response(CheckInCategory.STRESS, 8)
        assert update.insights == []
        assert update.checkin.responses == {CheckInCategory.STRESS: 8}
        update = service.record_response(CheckInCategory.ENERGY, 2)
        update = service.record_response(CheckInCategory.MOOD, "tired")
        assert update.insights == []
        assert update.checkin.completion_score == 0.375
        assert service.insights == ()

    def test_early_answers_count_at_half_completion(self, store, clock):
        service = _make_service(store, clock)
        service.record_response(CheckInCategory.ENERGY, 2)
        service.record_response(CheckInCategory.MOOD, "tired")
        service.record_response(CheckInCategory.SLEEP, 5)
        update = service.record_response(CheckInCategory.GOALS, "rest more")
        assert update.checkin.completion_score == 0.5
        assert _titles(update) == ["Low Energy Alert"]

    def test_answers_after_half_completion_react(self, store, clock):
        service = _make_service(store, clock)
        service.record_response(CheckInCategory.ENERGY, 2)
        service.record_response(CheckInCategory.MOOD, "tired")
        service.record_response(CheckInCategory.SLEEP, 5)
        service.record_response(CheckInCategory.GOALS, "rest more")
        update = service.record_response(CheckInCategory.STRESS, 9)
        assert _titles(update) == ["High Stress Detected"]

    def test_overwrite_same_day(self, store, clock):
        service = _make_service(store, clock)
        service.record_response(CheckInCategory.MOOD, "tired")
        clock.advance(hours=3)
        update = service.record_response(CheckInCategory.MOOD, "happy")
        assert update.checkin.responses[CheckInCategory.MOOD] == "happy"
        assert len(service.checkins) == 1

    def test_persisted(self, store, clock):
        service = _make_service(store, clock)
        service.record_response(CheckInCategory.GRATITUDE, "a long walk")
        service.complete_checkin()
        reloaded = _make_service(store, clock)
        assert reloaded.today_checkin().responses == {CheckInCategory.GRATITUDE: "a long walk"}
        assert [i.title for i in reloaded.insights] == ["Gratitude Practice"]

    def test_invalid_value_is_not_stored(self, store, clock):
        service = _make_service(store, clock)
        with pytest.raises(ValueError):
            service.record_response(CheckInCategory.ENERGY, 42)
        assert service.checkins == ()


class TestCompleteCheckIn:
    def test_requires_a_response(self, store, clock):
        with pytest.raises(CheckInNotStartedError):
            _make_service(store, clock).complete_checkin("nothing yet")

    def test_notes_are_attached(self, store, clock):
        service = _make_service(store, clock)
        service.record_response(CheckInCategory.MOOD, "calm")
        update = service.complete_checkin("quiet morning")
        assert update.checkin.notes == "quiet morning"
        assert service.today_checkin().notes == "quiet morning"

    def test_completion_reacts_to_every_answer(self, store, clock):
        service = _make_service(store, clock)
        service.record_response(CheckInCategory.STRESS, 8)
        service.record_response(CheckInCategory.ENERGY, 3)
        update = service.complete_checkin()
        assert _titles(update) == ["High Stress Detected", "Low Energy Alert"]
        assert service.complete_checkin().insights == []

    def test_one_week_streak(self, store, clock):
        clock.advance(days=-6)
        service = _make_service(store, clock)
        for _ in range(6):
            service.record_response(CheckInCategory.MOOD, "calm")
            clock.advance(days=1)
        service.record_response(CheckInCategory.MOOD, "calm")
        update = service.complete_checkin()
        assert "One Week Streak!" in _titles(update)
        assert service.stats()["streak"] == 7


class TestDailyBatch:
    def test_needs_three_checkins(self, store, clock):
        clock.advance(days=-1)
        service = _make_service(store, clock)
        service.record_response(CheckInCategory.MOOD, "calm")
        clock.advance(days=1)
        service.record_response(CheckInCategory.MOOD, "calm")
        assert service.last_batch_run is None

    def test_cooldown_is_six_hours(self, store, clock):
        clock.advance(days=-2)
        service = _make_service(store, clock)
        for _ in range(2):
            service.record_response(CheckInCategory.ENERGY, 6)
            clock.advance(days=1)
        service.record_response(CheckInCategory.ENERGY, 6)
        first_run = service.last_batch_run
        assert first_run == clock.now

        clock.advance(hours=5)
        service.record_response(CheckInCategory.STRESS, 4)
        assert service.last_batch_run == first_run

        clock.advance(hours=1)
        service.record_response(CheckInCategory.STRESS, 5)
        assert service.last_batch_run == clock.now

    def test_cursor_survives_restart(self, store, clock):
        clock.advance(days=-2)
        service = _make_service(store, clock)
        for _ in range(3):
            service.record_response(CheckInCategory.ENERGY, 6)
            clock.advance(days=1)
        clock.advance(days=-1)
        reloaded = _make_service(store, clock)
        assert reloaded.last_batch_run == service.last_batch_run
        assert reloaded.run_daily_batch() == []

    def test_positive_mood_streak(self, store, clock):
        clock.advance(days=-4)
        service = _make_service(store, clock)
        for mood in ["happy", "calm", "focused", "energetic"]:
            service.record_response(CheckInCategory.MOOD, mood)
            clock.advance(days=1)
        update = service.record_response(CheckInCategory.MOOD, "happy")
        assert _titles(update) == ["Positive Mood Streak!"]

    def test_insights_sorted_newest_first(self, store, clock):
        service = _make_service(store, clock)
        service.record_response(CheckInCategory.STRESS, 9)
        service.complete_checkin()
        clock.advance(minutes=5)
        service.record_response(CheckInCategory.GRATITUDE, "friends")
        service.complete_checkin()
        assert [i.title for i in service.insights] == ["Gratitude Practice", "High Stress Detected"]
        reloaded = _make_service(store, clock)
        assert [i.title for i in reloaded.insights] == ["High Stress Detected", "Gratitude Practice"]


class TestConversationHelpers:
    def test_questions_include_habit_struggles(self, store, clock):
        habits = HabitTrackingService(store, clock=clock, seed_defaults=False)
        habits.create_habit(
            name="Evening Stretch",
            description="",
            habit_type=HabitType.STRETCHING,
            frequency=HabitFrequency.DAILY,
            difficulty=HabitDifficulty.EASY,
            target_duration_minutes=10,
        )
        questions = _make_service(store, clock, habits=habits).questions()
        assert "What's making it challenging to keep up with your wellness habits?" in questions

    def test_questions_without_habits(self, store, clock):
        assert len(_make_service(store, clock).questions()) == 5

    def test_message(self, store, clock):
        service = _make_service(store, clock)
        assert service.message().startswith("Good morning!")
        service.record_response(CheckInCategory.MOOD, "calm")
        assert service.message().startswith("I appreciate you starting")
