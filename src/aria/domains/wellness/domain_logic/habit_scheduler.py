"""Habit scheduling and progress statistics.

Pure functions over a habit and its completion history: whether the habit
is due on a given day, how many occurrences a trailing window expects, the
current streak and the completion rate. Callers pass ``today`` / ``now``
explicitly; nothing here reads the clock.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any

from aria.domains.wellness.domain_logic.scoring import clamp, round_half_away, same_day
from aria.domains.wellness.domain_logic.vocabulary import HabitFrequency
from aria.domains.wellness.domain_logic.wellness_models import (
    HabitCompletion,
    WellnessHabit,
)

_EPOCH = date(1970, 1, 1)


@dataclass(frozen=True)
class HabitStats:
    """Progress of one habit over a trailing window."""

    habit_id: str
    habit_name: str
    current_streak: int
    completion_rate: float  # 0-1
    total_completions: int
    expected_completions: int
    average_rating: float | None
    last_completed_at: datetime | None
    window_days: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "habit_id": self.habit_id,
            "habit_name": self.habit_name,
            "current_streak": self.current_streak,
            "completion_rate": round(self.completion_rate, 4),
            "total_completions": self.total_completions,
            "expected_completions": self.expected_completions,
            "average_rating": self.average_rating,
            "last_completed_at": (
                self.last_completed_at.isoformat() if self.last_completed_at else None
            ),
            "window_days": self.window_days,
        }


def _for_habit(habit_id: str, completions: Iterable[HabitCompletion]) -> list[HabitCompletion]:
    return [c for c in completions if c.habit_id == habit_id]


# ---------------------------------------------------------------------------
# Due today
# ---------------------------------------------------------------------------

def completed_on(habit_id: str, day: date, completions: Iterable[HabitCompletion]) -> bool:
    """True if the habit has at least one completion on ``day``."""
    return any(c.habit_id == habit_id and same_day(c.completed_at, day) for c in completions)


def matches_schedule(
    habit: WellnessHabit,
    today: date,
    completions: Iterable[HabitCompletion] = (),
) -> bool:
    """Apply the frequency rule alone (ignores same-day completion)."""
    frequency = habit.frequency
    if frequency is HabitFrequency.DAILY:
        return True
    if frequency is HabitFrequency.WEEKDAYS:
        return today.isoweekday() <= 5
    if frequency is HabitFrequency.WEEKENDS:
        return today.isoweekday() > 5
    if frequency is HabitFrequency.WEEKLY:
        week_start = today - timedelta(days=today.isoweekday() - 1)
        return not any(
            c.habit_id == habit.id and week_start <= c.completed_at.date() <= today
            for c in completions
        )
    if frequency is HabitFrequency.BIWEEKLY:
        # Global epoch-anchored 14-day parity, shared by every biweekly habit.
        days_since_epoch = (today - _EPOCH).days
        return (days_since_epoch // 14) % 2 == 0
    if frequency is HabitFrequency.CUSTOM:
        return True
    raise ValueError(f"Unhandled habit frequency: {frequency!r}")


def is_due_today(
    habit: WellnessHabit,
    today: date,
    completions: Sequence[HabitCompletion] = (),
) -> bool:
    """True when an active habit should still be done on ``today``.

    A habit already completed earlier the same day is never due, whatever
    its frequency.
    """
    if not habit.is_active:
        return False
    if completed_on(habit.id, today, completions):
        return False
    return matches_schedule(habit, today, completions)


def due_habits(
    habits: Iterable[WellnessHabit],
    today: date,
    completions: Sequence[HabitCompletion],
) -> list[WellnessHabit]:
    """Active habits still due on ``today``, in their stored order."""
    return [h for h in habits if is_due_today(h, today, completions)]


# ---------------------------------------------------------------------------
# Expected occurrences and statistics
# ---------------------------------------------------------------------------

def expected_occurrences(habit: WellnessHabit, window_days: int) -> int:
    """How many completions a ``window_days`` trailing window should contain."""
    frequency = habit.frequency
    if frequency in (HabitFrequency.DAILY, HabitFrequency.CUSTOM):
        return window_days
    if frequency is HabitFrequency.WEEKDAYS:
        return round_half_away(window_days / 7 * 5)
    if frequency is HabitFrequency.WEEKENDS:
        return round_half_away(window_days / 7 * 2)
    if frequency is HabitFrequency.WEEKLY:
        return round_half_away(window_days / 7)
    if frequency is HabitFrequency.BIWEEKLY:
        return round_half_away(window_days / 14)
    raise ValueError(f"Unhandled habit frequency: {frequency!r}")


def current_streak(
    habit_id: str,
    completions: Iterable[HabitCompletion],
    today: date,
    window_days: int,
) -> int:
    """Consecutive days ending today with at least one completion.

    The scan walks back at most ``window_days`` days and stops at the
    first day without a completion; a missing today yields 0.
    """
    days_done = {c.completed_at.date() for c in completions if c.habit_id == habit_id}
    streak = 0
    for offset in range(window_days):
        if today - timedelta(days=offset) in days_done:
            streak += 1
        else:
            break
    return streak


def completion_rate(actual: int, expected: int) -> float:
    """actual / expected clamped to [0, 1]; 0 when nothing was expected."""
    if expected <= 0:
        return 0.0
    return clamp(actual / expected)


def compute_stats(
    habit: WellnessHabit,
    completions: Sequence[HabitCompletion],
    window_days: int,
    now: datetime,
) -> HabitStats:
    """Streak, completion rate and rating summary for ``habit``.

    Only completions after ``now - window_days`` count toward the rate and
    the rating average.
    """
    cutoff = now - timedelta(days=window_days)
    recent = [c for c in _for_habit(habit.id, completions) if c.completed_at > cutoff]

    expected = expected_occurrences(habit, window_days)
    ratings = [c.rating for c in recent if c.rating is not None]

    return HabitStats(
        habit_id=habit.id,
        habit_name=habit.name,
        current_streak=current_streak(habit.id, recent, now.date(), window_days),
        completion_rate=completion_rate(len(recent), expected),
        total_completions=len(recent),
        expected_completions=expected,
        average_rating=sum(ratings) / len(ratings) if ratings else None,
        last_completed_at=max((c.completed_at for c in recent), default=None),
        window_days=window_days,
    )


def overall_progress(
    habits: Iterable[WellnessHabit],
    completions: Sequence[HabitCompletion],
    window_days: int,
    now: datetime,
) -> dict[str, Any]:
    """Aggregate completion rate across all active habits."""
    active = [h for h in habits if h.is_active]
    cutoff = now - timedelta(days=window_days)

    total_expected = 0
    total_completed = 0
    for habit in active:
        total_expected += expected_occurrences(habit, window_days)
        total_completed += sum(
            1 for c in completions if c.habit_id == habit.id and c.completed_at > cutoff
        )

    habit_types: list[str] = []
    for habit in active:
        if habit.type.value not in habit_types:
            habit_types.append(habit.type.value)

    return {
        "total_habits": len(active),
        "completion_rate": completion_rate(total_completed, total_expected),
        "total_completed": total_completed,
        "total_expected": total_expected,
        "habit_types": habit_types,
        "days_analyzed": window_days,
    }
