"""Coaching insight rules and the deduplicating insight log.

Rule functions are pure: they inspect a trigger context (a streak, a
check-in, an aggregate rate) and return zero or more ``InsightCandidate``
values. ``InsightLog.maybe_emit`` turns candidates into stored ``Insight``
records, suppressing any title already emitted within the last 24 hours.

All thresholds are fixed constants. Streak milestones use exact equality,
so a streak that skips past a milestone (backfilled data) does not fire.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from typing import Any

from aria.domains.wellness.domain_logic.scoring import is_number, mean, round_half_away, same_day
from aria.domains.wellness.domain_logic.vocabulary import (
    NEGATIVE_MOODS,
    POSITIVE_MOODS,
    CheckInCategory,
    InsightCategory,
)
from aria.domains.wellness.domain_logic.wellness_models import (
    Insight,
    WellnessHabit,
)

DEDUP_WINDOW = timedelta(hours=24)
DAILY_BATCH_COOLDOWN = timedelta(hours=6)
DAILY_BATCH_LOOKBACK_DAYS = 14
DAILY_BATCH_MIN_CHECKINS = 3
CHECKIN_INSIGHT_LIMIT = 50

CONSISTENCY_CELEBRATE_AT = 0.9
CONSISTENCY_ENCOURAGE_BELOW = 0.3
HIGH_STRESS_AT = 7
LOW_ENERGY_AT = 3


@dataclass(frozen=True)
class InsightCandidate:
    """An insight a rule wants to emit, before deduplication."""

    title: str
    message: str
    category: InsightCategory
    priority: float = 0.5
    habit_id: str | None = None
    data: dict[str, Any] = field(default_factory=dict)


def _pct(rate: float) -> int:
    return round_half_away(rate * 100)


# ---------------------------------------------------------------------------
# Habit rules
# ---------------------------------------------------------------------------

def habit_created(habit: WellnessHabit) -> InsightCandidate:
    return InsightCandidate(
        title="New Habit Added",
        message=(
            f'Great job setting up "{habit.name}"! Starting small and being consistent '
            "is the key to lasting change. I'm here to cheer you on."
        ),
        category=InsightCategory.ENCOURAGEMENT,
        habit_id=habit.id,
    )


def weekly_consistency(completion_rate: float) -> InsightCandidate | None:
    """Celebrate >=90% or gently encourage <30% weekly completion."""
    if completion_rate >= CONSISTENCY_CELEBRATE_AT:
        return InsightCandidate(
            title="Amazing Consistency!",
            message=(
                f"You're absolutely crushing your wellness goals with {_pct(completion_rate)}% "
                "completion rate this week! Your dedication is inspiring."
            ),
            category=InsightCategory.CELEBRATION,
            priority=0.8,
            data={"completion_rate": completion_rate},
        )
    if completion_rate < CONSISTENCY_ENCOURAGE_BELOW:
        return InsightCandidate(
            title="Gentle Reminder",
            message=(
                "Life gets busy, and that's okay! Your wellness habits are here to support you, "
                "not stress you out. What feels manageable for you right now?"
            ),
            category=InsightCategory.ENCOURAGEMENT,
            data={"completion_rate": completion_rate},
        )
    return None


_HABIT_STREAK_MILESTONES: dict[int, tuple[str, str]] = {
    3: (
        "3-Day Streak!",
        "You're building momentum with {name}! Three days in a row shows real commitment.",
    ),
    7: (
        "One Week Strong!",
        "A full week of {name} - you're creating a real habit! The neural pathways are forming.",
    ),
    21: (
        "Habit Mastery!",
        "Three weeks of consistent {name}! You've officially built this into your routine. "
        "Incredible work!",
    ),
}


def habit_streak(habit: WellnessHabit, streak: int) -> InsightCandidate | None:
    """Celebrate a habit streak of exactly 3, 7 or 21 days."""
    milestone = _HABIT_STREAK_MILESTONES.get(streak)
    if milestone is None:
        return None
    title, template = milestone
    return InsightCandidate(
        title=title,
        message=template.format(name=habit.name),
        category=InsightCategory.CELEBRATION,
        priority=0.8,
        habit_id=habit.id,
        data={"streak": streak},
    )


# ---------------------------------------------------------------------------
# Check-in rules
# ---------------------------------------------------------------------------

def checkin_responses(responses: Mapping[CheckInCategory, Any]) -> list[InsightCandidate]:
    """Immediate reactions to a single day's check-in answers."""
    candidates: list[InsightCandidate] = []

    stress = responses.get(CheckInCategory.STRESS)
    if is_number(stress) and stress >= HIGH_STRESS_AT:
        candidates.append(InsightCandidate(
            title="High Stress Detected",
            message=(
                f"I noticed you're feeling quite stressed today ({stress}/10). Would you like to "
                "try a quick breathing exercise or talk about what's causing the stress?"
            ),
            category=InsightCategory.CONCERN,
            priority=0.9,
        ))

    energy = responses.get(CheckInCategory.ENERGY)
    if is_number(energy) and energy <= LOW_ENERGY_AT:
        candidates.append(InsightCandidate(
            title="Low Energy Alert",
            message=(
                "Your energy seems quite low today. This could be related to sleep, nutrition, "
                "or stress. Would you like some gentle suggestions for an energy boost?"
            ),
            category=InsightCategory.SUGGESTION,
            priority=0.7,
        ))

    gratitude = responses.get(CheckInCategory.GRATITUDE)
    if gratitude not in (None, ""):
        candidates.append(InsightCandidate(
            title="Gratitude Practice",
            message=(
                f'I love that you took time to reflect on gratitude: "{gratitude}". '
                "This mindful appreciation really contributes to wellbeing."
            ),
            category=InsightCategory.ACHIEVEMENT,
            priority=0.6,
        ))

    return candidates


def mood_pattern(mood_answers: Sequence[Any]) -> InsightCandidate | None:
    """Look for a week of uniformly positive or negative moods.

    ``mood_answers`` is most recent first; at least five are required and
    only the seven most recent are inspected.
    """
    if len(mood_answers) < 5:
        return None
    window = list(mood_answers[:7])
    positive = {m.value for m in POSITIVE_MOODS}
    negative = {m.value for m in NEGATIVE_MOODS}

    if all(isinstance(m, str) and m in positive for m in window):
        return InsightCandidate(
            title="Positive Mood Streak!",
            message=(
                "You've been maintaining a positive emotional state for the past week! "
                "Your consistent wellbeing practices are really paying off."
            ),
            category=InsightCategory.ACHIEVEMENT,
            priority=0.8,
        )
    if all(isinstance(m, str) and m in negative for m in window):
        return InsightCandidate(
            title="Emotional Support Available",
            message=(
                "I've noticed you've been struggling emotionally lately. You're not alone in "
                "this. Would you like to explore some coping strategies together?"
            ),
            category=InsightCategory.CONCERN,
            priority=0.9,
        )
    return None


def energy_stress_pattern(
    energy_values: Sequence[float],
    stress_values: Sequence[float],
) -> list[InsightCandidate]:
    """Burnout and recovery patterns across recent check-ins (most recent first)."""
    if len(energy_values) < 5 or len(stress_values) < 5:
        return []

    candidates: list[InsightCandidate] = []
    avg_energy = mean(energy_values)
    avg_stress = mean(stress_values)
    if avg_stress > 6 and avg_energy < 5:
        candidates.append(InsightCandidate(
            title="Energy-Stress Pattern",
            message=(
                f"I've noticed a pattern of high stress ({avg_stress:.1f}) and low energy "
                f"({avg_energy:.1f}). This often indicates burnout. Let's work on some "
                "recovery strategies."
            ),
            category=InsightCategory.PATTERN,
            priority=0.8,
            data={"average_stress": avg_stress, "average_energy": avg_energy},
        ))

    if len(energy_values) >= 7:
        recent = mean(energy_values[:3])
        older = mean(energy_values[4:7])
        if recent > older + 1:
            candidates.append(InsightCandidate(
                title="Energy Trending Up!",
                message=(
                    "Great news! Your energy levels have been improving over the past few days. "
                    "Your wellness efforts are working!"
                ),
                category=InsightCategory.ACHIEVEMENT,
                priority=0.7,
            ))
    return candidates


def holistic(
    habit_completion_rate: float | None,
    checkin_average_completion: float,
    meditation_sessions: int | None = None,
    stress_trend: str | None = None,
) -> list[InsightCandidate]:
    """Cross-service checks combining habits, check-ins and meditation."""
    candidates: list[InsightCandidate] = []
    if (
        habit_completion_rate is not None
        and habit_completion_rate > 0.8
        and checkin_average_completion > 0.7
    ):
        candidates.append(InsightCandidate(
            title="Wellness Champion!",
            message=(
                "You've been incredibly consistent with both your wellness habits "
                f"({_pct(habit_completion_rate)}%) and daily check-ins. This level of "
                "self-care is inspiring!"
            ),
            category=InsightCategory.ACHIEVEMENT,
            priority=0.9,
        ))
    if meditation_sessions is not None and meditation_sessions >= 3 and stress_trend == "decreasing":
        candidates.append(InsightCandidate(
            title="Meditation Impact",
            message=(
                f"Your regular meditation practice ({meditation_sessions} sessions this week) "
                "seems to be helping with stress management. Keep up this wonderful practice!"
            ),
            category=InsightCategory.PATTERN,
            priority=0.8,
        ))
    return candidates


_CHECKIN_STREAK_MILESTONES: dict[int, tuple[str, str, float]] = {
    7: (
        "One Week Streak!",
        "Amazing! You've checked in on your wellbeing for 7 days straight. This consistent "
        "self-awareness is building a powerful habit.",
        0.8,
    ),
    21: (
        "Three Week Milestone!",
        "Incredible dedication! 21 days of consistent wellness check-ins shows real "
        "commitment to your mental health and growth.",
        0.9,
    ),
    30: (
        "Monthly Master!",
        "A full month of daily wellness check-ins! You've built an extraordinary habit of "
        "self-reflection and awareness. Congratulations!",
        1.0,
    ),
}


def checkin_streak(streak: int) -> InsightCandidate | None:
    """Milestone insight for a check-in streak of exactly 7, 21 or 30 days."""
    milestone = _CHECKIN_STREAK_MILESTONES.get(streak)
    if milestone is None:
        return None
    title, message, priority = milestone
    return InsightCandidate(
        title=title,
        message=message,
        category=InsightCategory.ACHIEVEMENT,
        priority=priority,
        data={"streak": streak},
    )


def daily_batch_due(last_run: datetime | None, now: datetime) -> bool:
    """True when the daily batch has not run within the 6 hour cooldown."""
    return last_run is None or now - last_run >= DAILY_BATCH_COOLDOWN


# ---------------------------------------------------------------------------
# Insight log
# ---------------------------------------------------------------------------

def _new_id() -> str:
    return str(uuid.uuid4())


class InsightLog:
    """Ordered, deduplicating store of emitted insights.

    Usage::

        log = InsightLog(limit=50, newest_first=True)
        emitted = log.maybe_emit([checkin_streak(7)], now=now)
        emitted_again = log.maybe_emit([checkin_streak(7)], now=now)  # []

    Args:
        insights: Existing insights, in stored order.
        limit: Keep at most this many (oldest pruned). None = unbounded.
        newest_first: Insert new insights at the front instead of appending.
    """

    def __init__(
        self,
        insights: Iterable[Insight] = (),
        *,
        limit: int | None = None,
        newest_first: bool = False,
        id_factory: Callable[[], str] = _new_id,
    ) -> None:
        self._insights: list[Insight] = list(insights)
        self._limit = limit
        self._newest_first = newest_first
        self._id_factory = id_factory

    @property
    def insights(self) -> tuple[Insight, ...]:
        return tuple(self._insights)

    def unread(self) -> tuple[Insight, ...]:
        return tuple(i for i in self._insights if not i.is_read)

    def __len__(self) -> int:
        return len(self._insights)

    def is_duplicate(self, title: str, now: datetime) -> bool:
        """True if ``title`` was emitted within the last 24 hours."""
        return any(
            i.title == title and now - i.timestamp < DEDUP_WINDOW
            for i in self._insights
        )

    def emitted_on(self, now: datetime) -> bool:
        """True if any insight was emitted on the calendar day of ``now``."""
        return any(same_day(i.timestamp, now) for i in self._insights)

    def maybe_emit(
        self,
        candidates: Iterable[InsightCandidate | None],
        *,
        now: datetime,
    ) -> list[Insight]:
        """Store every candidate whose title is not a recent duplicate.

        ``None`` entries are ignored so rule results can be passed straight in.

        Returns:
            The insights actually stored, in emission order.
        """
        emitted: list[Insight] = []
        for candidate in candidates:
            if candidate is None or self.is_duplicate(candidate.title, now):
                continue
            insight = Insight(
                id=self._id_factory(),
                timestamp=now,
                title=candidate.title,
                message=candidate.message,
                category=candidate.category,
                priority=candidate.priority,
                habit_id=candidate.habit_id,
                data=dict(candidate.data),
            )
            if self._newest_first:
                self._insights.insert(0, insight)
            else:
                self._insights.append(insight)
            emitted.append(insight)
        self._prune()
        return emitted

    def mark_read(self, insight_id: str) -> Insight | None:
        """Flag an insight as read. Returns the updated insight, or None if unknown."""
        for index, insight in enumerate(self._insights):
            if insight.id == insight_id:
                updated = replace(insight, is_read=True)
                self._insights[index] = updated
                return updated
        return None

    def sort_by_priority(self) -> None:
        """Order by priority descending, then newest first."""
        self._insights.sort(key=lambda i: (i.priority, i.timestamp), reverse=True)

    def _prune(self) -> None:
        if self._limit is None or len(self._insights) <= self._limit:
            return
        if self._newest_first:
            del self._insights[self._limit:]
        else:
            del self._insights[: len(self._insights) - self._limit]
