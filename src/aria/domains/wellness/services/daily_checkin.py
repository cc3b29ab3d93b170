"""Daily check-in service: structured self-reports and wellness insights.

Owns the ``daily_checkins`` and ``wellness_insights`` collections plus the
``insight_cursor`` that records when the daily insight batch last ran.
The wellness insight log keeps the 50 most recent insights, newest first.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any

from aria.core.storage.collection_store import (
    DAILY_CHECKINS,
    INSIGHT_CURSOR,
    WELLNESS_INSIGHTS,
    CollectionStore,
)
from aria.domains.wellness.domain_logic import checkin_aggregator, insight_generator
from aria.domains.wellness.domain_logic.insight_generator import InsightLog
from aria.domains.wellness.domain_logic.scoring import is_number
from aria.domains.wellness.domain_logic.vocabulary import CheckInCategory, Mood, parse_enum
from aria.domains.wellness.domain_logic.wellness_models import DailyCheckIn, Insight

if TYPE_CHECKING:
    from aria.domains.wellness.services.habit_tracking import HabitTrackingService
    from aria.domains.wellness.services.mindfulness import MindfulnessService

logger = logging.getLogger(__name__)

QUESTION_HABIT_WINDOW_DAYS = 3
WEEK_DAYS = 7
STATS_WINDOW_DAYS = 30
# Answer insights wait until at least half of today's categories are answered
RESPONSE_INSIGHTS_AT_COMPLETION = 0.5


class CheckInNotStartedError(LookupError):
    """Completing a check-in requires at least one response today."""


_SCALED_CATEGORIES = frozenset({CheckInCategory.ENERGY, CheckInCategory.STRESS})


def normalize_response(category: CheckInCategory, value: Any) -> Any:
    """Validate an answer and convert it to its stored form.

    Mood answers are stored as mood values; energy and stress as numbers
    on a 1-10 scale. Other categories are free text or numbers.

    Raises:
        ValueError: For an unknown mood or an out-of-range level.
    """
    if category is CheckInCategory.MOOD and isinstance(value, str):
        return parse_enum(Mood, value).value
    if category in _SCALED_CATEGORIES:
        if isinstance(value, str):
            try:
                value = float(value)
            except ValueError:
                raise ValueError(f"{category.value} must be a number, got {value!r}") from None
        if not is_number(value) or not 1 <= value <= 10:
            raise ValueError(f"{category.value} must be between 1 and 10, got {value!r}")
        return int(value) if float(value).is_integer() else value
    return value


@dataclass(frozen=True)
class CheckInUpdate:
    """Today's check-in after a change, plus the insights it produced."""

    checkin: DailyCheckIn
    insights: list[Insight] = field(default_factory=list)


class DailyCheckInService:
    """Records daily check-ins and generates wellness insights.

    Habit and meditation services are optional; without them the
    cross-service (holistic) checks are skipped.

    Usage::

        checkins = DailyCheckInService(store, habits=habit_service)
        checkins.record_response(CheckInCategory.STRESS, 8)
        update = checkins.complete_checkin()
        [i.title for i in update.insights]  # ['High Stress Detected']
    """

    def __init__(
        self,
        store: CollectionStore,
        *,
        habits: HabitTrackingService | None = None,
        mindfulness: MindfulnessService | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._store = store
        self._habits = habits
        self._mindfulness = mindfulness
        self._clock = clock
        self._checkins: list[DailyCheckIn] = store.load_records(
            DAILY_CHECKINS, DailyCheckIn.from_dict
        )
        self._checkins.sort(key=lambda c: c.date, reverse=True)
        self._insights = InsightLog(
            store.load_records(WELLNESS_INSIGHTS, Insight.from_dict),
            limit=insight_generator.CHECKIN_INSIGHT_LIMIT,
            newest_first=True,
        )
        self._insights.sort_by_priority()
        self._last_batch_run = self._load_cursor()

    def _load_cursor(self) -> datetime | None:
        raw = self._store.load(INSIGHT_CURSOR, default={})
        value = raw.get("last_daily_batch") if isinstance(raw, dict) else None
        if not value:
            return None
        try:
            return datetime.fromisoformat(value)
        except (TypeError, ValueError):
            logger.warning("Ignoring malformed insight cursor: %r", value)
            return None

    def _save_cursor(self) -> None:
        last = self._last_batch_run.isoformat() if self._last_batch_run else None
        self._store.save(INSIGHT_CURSOR, {"last_daily_batch": last})

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    @property
    def checkins(self) -> tuple[DailyCheckIn, ...]:
        return tuple(self._checkins)

    @property
    def insights(self) -> tuple[Insight, ...]:
        return self._insights.insights

    @property
    def unread_insights(self) -> tuple[Insight, ...]:
        return self._insights.unread()

    @property
    def last_batch_run(self) -> datetime | None:
        return self._last_batch_run

    def today_checkin(self) -> DailyCheckIn | None:
        return checkin_aggregator.find_for_day(self._checkins, self._clock())

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def record_response(self, category: CheckInCategory, value: Any) -> CheckInUpdate:
        """Set today's answer for ``category`` (last write wins)."""
        value = normalize_response(category, value)
        now = self._clock()
        checkin = checkin_aggregator.record_response(self._checkins, category, value, now)
        self._store_checkin(checkin)
        logger.info(
            "Check-in response recorded: %s (completion %.2f)",
            category.value,
            checkin.completion_score,
        )

        emitted: list[Insight] = []
        if checkin.completion_score >= RESPONSE_INSIGHTS_AT_COMPLETION:
            emitted = self._emit(insight_generator.checkin_responses(checkin.responses), now)
        emitted.extend(self.run_daily_batch())
        return CheckInUpdate(checkin=checkin, insights=emitted)

    def complete_checkin(self, notes: str | None = None) -> CheckInUpdate:
        """Attach notes to today's check-in and react to all of its answers.

        Raises:
            CheckInNotStartedError: No response has been recorded today.
        """
        now = self._clock()
        today = self.today_checkin()
        if today is None:
            raise CheckInNotStartedError("No check-in responses recorded today")
        checkin = checkin_aggregator.with_notes(today, notes)
        self._store_checkin(checkin)

        streak = self.stats(STATS_WINDOW_DAYS)["streak"]
        candidates = [
            *insight_generator.checkin_responses(checkin.responses),
            insight_generator.checkin_streak(streak),
        ]
        emitted = self._emit(candidates, now)
        emitted.extend(self.run_daily_batch())
        logger.info("Check-in completed (streak=%d)", streak)
        return CheckInUpdate(checkin=checkin, insights=emitted)

    def mark_insight_read(self, insight_id: str) -> Insight | None:
        updated = self._insights.mark_read(insight_id)
        if updated is not None:
            self._store.save_records(WELLNESS_INSIGHTS, self._insights.insights)
        return updated

    def run_daily_batch(self) -> list[Insight]:
        """Pattern and holistic checks over recent check-ins.

        Runs at most once per 6 hours (tracked by the persisted cursor) and
        only with at least three check-ins in the last 14 days.
        """
        now = self._clock()
        if not insight_generator.daily_batch_due(self._last_batch_run, now):
            return []
        recent = checkin_aggregator.recent_checkins(
            self._checkins, insight_generator.DAILY_BATCH_LOOKBACK_DAYS, now
        )
        if len(recent) < insight_generator.DAILY_BATCH_MIN_CHECKINS:
            return []

        candidates: list[insight_generator.InsightCandidate | None] = [
            insight_generator.mood_pattern(
                checkin_aggregator.values_for(recent, CheckInCategory.MOOD)
            )
        ]
        candidates.extend(insight_generator.energy_stress_pattern(
            checkin_aggregator.numeric_values(recent, CheckInCategory.ENERGY),
            checkin_aggregator.numeric_values(recent, CheckInCategory.STRESS),
        ))
        candidates.extend(self._holistic_candidates())

        self._last_batch_run = now
        self._save_cursor()
        emitted = self._emit(candidates, now)
        logger.info("Daily insight batch ran: %d insights", len(emitted))
        return emitted

    def _holistic_candidates(self) -> list[insight_generator.InsightCandidate]:
        week = self.stats(WEEK_DAYS)
        habit_rate = None
        if self._habits is not None:
            habit_rate = self._habits.overall_progress(WEEK_DAYS)["completion_rate"]
        meditation_sessions = None
        if self._mindfulness is not None:
            meditation_sessions = self._mindfulness.stats(WEEK_DAYS)["total_sessions"]
        return insight_generator.holistic(
            habit_rate,
            week["average_completion"],
            meditation_sessions=meditation_sessions,
            stress_trend=week["stress_trend"],
        )

    def _store_checkin(self, checkin: DailyCheckIn) -> None:
        self._checkins = checkin_aggregator.upsert(self._checkins, checkin)
        self._store.save_records(DAILY_CHECKINS, self._checkins)

    def _emit(self, candidates, now: datetime) -> list[Insight]:
        emitted = self._insights.maybe_emit(candidates, now=now)
        if emitted:
            self._store.save_records(WELLNESS_INSIGHTS, self._insights.insights)
            for insight in emitted:
                logger.info("Wellness insight: %s", insight.title)
        return emitted

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def stats(self, days: int = STATS_WINDOW_DAYS) -> dict[str, Any]:
        return checkin_aggregator.checkin_stats(self._checkins, days=days, now=self._clock())

    def questions(self) -> list[str]:
        habit_rate = None
        if self._habits is not None:
            habit_rate = self._habits.overall_progress(QUESTION_HABIT_WINDOW_DAYS)["completion_rate"]
        return checkin_aggregator.personalized_questions(self.stats(WEEK_DAYS), habit_rate)

    def message(self) -> str:
        return checkin_aggregator.checkin_message(self.today_checkin(), self._clock())
