"""Habit tracking service: habits, completions and coaching insights.

Owns three collections (habits, habit_completions, coaching_insights).
Every mutating call persists the affected collections and returns the new
state together with any insights it produced.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import datetime
from pathlib import Path
from typing import Any

import yaml

from aria.core.storage.collection_store import (
    COACHING_INSIGHTS,
    HABIT_COMPLETIONS,
    HABITS,
    CollectionStore,
)
from aria.domains.wellness.domain_logic import habit_scheduler, insight_generator
from aria.domains.wellness.domain_logic.habit_scheduler import HabitStats
from aria.domains.wellness.domain_logic.insight_generator import InsightLog
from aria.domains.wellness.domain_logic.scoring import round_half_away
from aria.domains.wellness.domain_logic.vocabulary import (
    HabitDifficulty,
    HabitFrequency,
    HabitType,
)
from aria.domains.wellness.domain_logic.wellness_models import (
    HabitCompletion,
    Insight,
    WellnessHabit,
)

logger = logging.getLogger(__name__)

DEFAULT_HABITS_FILE = Path(__file__).resolve().parent.parent / "data" / "default_habits.yaml"

STATS_WINDOW_DAYS = 7
STREAK_WINDOW_DAYS = 30


class HabitNotFoundError(KeyError):
    """No habit with the given id (or it is archived, for completions)."""


class InvalidRatingError(ValueError):
    """Completion ratings must be between 1 and 5."""


@dataclass(frozen=True)
class HabitCreated:
    habit: WellnessHabit
    insights: list[Insight] = field(default_factory=list)


@dataclass(frozen=True)
class HabitCompleted:
    completion: HabitCompletion
    stats: HabitStats
    insights: list[Insight] = field(default_factory=list)


def load_default_habits(path: str | Path = DEFAULT_HABITS_FILE) -> list[dict[str, Any]]:
    """Read the default habit templates from YAML."""
    with open(path, encoding="utf-8") as f:
        data: dict[str, Any] = yaml.safe_load(f) or {}
    return list(data.get("habits", []))


class HabitTrackingService:
    """Manages wellness habits and their coaching insights.

    Usage::

        habits = HabitTrackingService(store)
        habits.initialize()
        created = habits.create_habit(
            name="Evening Stretch",
            description="10 minutes of gentle stretching",
            habit_type=HabitType.STRETCHING,
            frequency=HabitFrequency.DAILY,
            difficulty=HabitDifficulty.EASY,
            target_duration_minutes=10,
        )
        done = habits.complete_habit(created.habit.id, rating=4)
    """

    def __init__(
        self,
        store: CollectionStore,
        *,
        clock: Callable[[], datetime] = datetime.now,
        seed_defaults: bool = True,
        defaults_file: str | Path = DEFAULT_HABITS_FILE,
    ) -> None:
        self._store = store
        self._clock = clock
        self._seed_defaults = seed_defaults
        self._defaults_file = defaults_file
        self._habits: list[WellnessHabit] = store.load_records(HABITS, WellnessHabit.from_dict)
        self._completions: list[HabitCompletion] = store.load_records(
            HABIT_COMPLETIONS, HabitCompletion.from_dict
        )
        self._insights = InsightLog(store.load_records(COACHING_INSIGHTS, Insight.from_dict))

    def initialize(self) -> list[Insight]:
        """Seed default habits on an empty data bank, then run the habit batch."""
        emitted: list[Insight] = []
        if not self._habits and self._seed_defaults:
            for template in load_default_habits(self._defaults_file):
                created = self.create_habit(
                    name=template["name"],
                    description=template.get("description", ""),
                    habit_type=HabitType(template["type"]),
                    frequency=HabitFrequency(template["frequency"]),
                    difficulty=HabitDifficulty(template["difficulty"]),
                    target_duration_minutes=int(template["target_duration_minutes"]),
                )
                emitted.extend(created.insights)
            logger.info("Seeded %d default habits", len(self._habits))
        emitted.extend(self.run_habit_batch())
        return emitted

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    @property
    def habits(self) -> tuple[WellnessHabit, ...]:
        return tuple(self._habits)

    @property
    def active_habits(self) -> tuple[WellnessHabit, ...]:
        return tuple(h for h in self._habits if h.is_active)

    @property
    def completions(self) -> tuple[HabitCompletion, ...]:
        return tuple(self._completions)

    @property
    def insights(self) -> tuple[Insight, ...]:
        return self._insights.insights

    @property
    def unread_insights(self) -> tuple[Insight, ...]:
        return self._insights.unread()

    def get_habit(self, habit_id: str) -> WellnessHabit:
        for habit in self._habits:
            if habit.id == habit_id:
                return habit
        raise HabitNotFoundError(f"Unknown habit: {habit_id}")

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create_habit(
        self,
        *,
        name: str,
        description: str,
        habit_type: HabitType,
        frequency: HabitFrequency,
        difficulty: HabitDifficulty,
        target_duration_minutes: int,
        custom_frequency: str | None = None,
        settings: dict[str, Any] | None = None,
    ) -> HabitCreated:
        if not name.strip():
            raise ValueError("Habit name must not be empty")
        if target_duration_minutes <= 0:
            raise ValueError("target_duration_minutes must be positive")
        now = self._clock()
        habit = WellnessHabit(
            id=str(uuid.uuid4()),
            name=name.strip(),
            description=description,
            type=habit_type,
            frequency=frequency,
            difficulty=difficulty,
            target_duration_minutes=target_duration_minutes,
            created_at=now,
            custom_frequency=custom_frequency,
            settings=dict(settings or {}),
        )
        self._habits.append(habit)
        self._store.save_records(HABITS, self._habits)
        logger.info("Habit created: %s (%s, %s)", habit.name, habit.type.value, habit.frequency.value)

        emitted = self._emit([insight_generator.habit_created(habit)], now)
        return HabitCreated(habit=habit, insights=emitted)

    def complete_habit(
        self,
        habit_id: str,
        *,
        notes: str | None = None,
        rating: int | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> HabitCompleted:
        """Record a completion and check the habit's streak milestones.

        Raises:
            HabitNotFoundError: Unknown or archived habit.
            InvalidRatingError: Rating outside 1-5.
        """
        habit = self.get_habit(habit_id)
        if not habit.is_active:
            raise HabitNotFoundError(f"Habit is archived: {habit_id}")
        if rating is not None and not 1 <= rating <= 5:
            raise InvalidRatingError(f"Rating must be between 1 and 5, got {rating}")

        now = self._clock()
        completion = HabitCompletion(
            id=str(uuid.uuid4()),
            habit_id=habit_id,
            completed_at=now,
            notes=notes,
            rating=rating,
            metadata=dict(metadata or {}),
        )
        self._completions.append(completion)
        self._store.save_records(HABIT_COMPLETIONS, self._completions)

        streak_stats = habit_scheduler.compute_stats(habit, self._completions, STREAK_WINDOW_DAYS, now)
        emitted = self._emit(
            [insight_generator.habit_streak(habit, streak_stats.current_streak)], now
        )
        emitted.extend(self.run_habit_batch())
        logger.info(
            "Habit completed: %s (streak=%d, insights=%d)",
            habit.name,
            streak_stats.current_streak,
            len(emitted),
        )
        return HabitCompleted(
            completion=completion,
            stats=self.habit_stats(habit_id),
            insights=emitted,
        )

    def archive_habit(self, habit_id: str) -> WellnessHabit:
        """Soft-delete a habit; its completions are kept."""
        habit = self.get_habit(habit_id)
        if not habit.is_active:
            return habit
        archived = replace(habit, is_active=False, archived_at=self._clock())
        self._habits = [archived if h.id == habit_id else h for h in self._habits]
        self._store.save_records(HABITS, self._habits)
        logger.info("Habit archived: %s", habit.name)
        return archived

    def mark_insight_read(self, insight_id: str) -> Insight | None:
        updated = self._insights.mark_read(insight_id)
        if updated is not None:
            self._store.save_records(COACHING_INSIGHTS, self._insights.insights)
        return updated

    def run_habit_batch(self) -> list[Insight]:
        """Weekly consistency check, at most once per calendar day."""
        now = self._clock()
        if self._insights.emitted_on(now):
            return []
        rate = self.overall_progress(STATS_WINDOW_DAYS)["completion_rate"]
        return self._emit([insight_generator.weekly_consistency(rate)], now)

    def _emit(self, candidates, now: datetime) -> list[Insight]:
        emitted = self._insights.maybe_emit(candidates, now=now)
        if emitted:
            self._store.save_records(COACHING_INSIGHTS, self._insights.insights)
            for insight in emitted:
                logger.info("Coaching insight: %s", insight.title)
        return emitted

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def habit_stats(self, habit_id: str, days: int = STATS_WINDOW_DAYS) -> HabitStats:
        habit = self.get_habit(habit_id)
        return habit_scheduler.compute_stats(habit, self._completions, days, self._clock())

    def todays_habits(self) -> tuple[WellnessHabit, ...]:
        today = self._clock().date()
        return tuple(habit_scheduler.due_habits(self._habits, today, self._completions))

    def overall_progress(self, days: int = STATS_WINDOW_DAYS) -> dict[str, Any]:
        return habit_scheduler.overall_progress(self._habits, self._completions, days, self._clock())

    def coaching_message(self) -> str:
        """The message ARIA opens a habit conversation with."""
        unread = self._insights.unread()
        if unread:
            return unread[0].message

        due = self.todays_habits()
        if due:
            return (
                f"I noticed you haven't done your {due[0].name} today yet. Would you like some "
                "gentle encouragement or shall we adjust the timing?"
            )

        rate = self.overall_progress(STATS_WINDOW_DAYS)["completion_rate"]
        if rate > 0.8:
            return (
                "You're doing amazingly well with your wellness habits! Your consistency rate is "
                f"{round_half_away(rate * 100)}%. How are you feeling about your progress?"
            )
        if rate < 0.3:
            return (
                "I've noticed your wellness routine has been a bit inconsistent lately. That's "
                "totally normal! Would you like to talk about what's been challenging or maybe "
                "adjust your goals?"
            )
        return (
            "How are your wellness habits going? I'm here to support you in whatever way "
            "feels right for you."
        )
