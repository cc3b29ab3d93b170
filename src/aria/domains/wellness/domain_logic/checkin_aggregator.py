"""Daily check-in aggregation.

One check-in per calendar day, keyed ``YYYY-MM-DD``. Recording a response
overwrites that category's previous value for the day (last write wins);
the completion score is the fraction of the eight categories answered.
Check-ins from earlier days are never touched again.
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Any

from aria.domains.wellness.domain_logic.scoring import is_number, mean
from aria.domains.wellness.domain_logic.vocabulary import CheckInCategory
from aria.domains.wellness.domain_logic.wellness_models import DailyCheckIn

TOTAL_CATEGORIES = len(CheckInCategory)
TREND_THRESHOLD = 0.5


def date_key(day: date | datetime) -> str:
    """Calendar-day key, e.g. ``2026-03-07``."""
    return f"{day.year:04d}-{day.month:02d}-{day.day:02d}"


def completion_score(responses: dict[CheckInCategory, Any]) -> float:
    """Fraction of the eight check-in categories that have an answer."""
    return len(responses) / TOTAL_CATEGORIES


def find_for_day(checkins: Sequence[DailyCheckIn], day: date | datetime) -> DailyCheckIn | None:
    key = date_key(day)
    for checkin in checkins:
        if date_key(checkin.date) == key:
            return checkin
    return None


def record_response(
    checkins: Sequence[DailyCheckIn],
    category: CheckInCategory,
    value: Any,
    now: datetime,
) -> DailyCheckIn:
    """Return today's check-in with ``category`` set to ``value``.

    Creates today's check-in when none exists yet. The input sequence is
    not modified; callers store the returned record with ``upsert``.
    """
    existing = find_for_day(checkins, now)
    if existing is None:
        responses = {category: value}
        return DailyCheckIn(
            id=str(uuid.uuid4()),
            date=now.date(),
            responses=responses,
            completion_score=completion_score(responses),
            created_at=now,
        )
    responses = dict(existing.responses)
    responses[category] = value
    return replace(existing, responses=responses, completion_score=completion_score(responses))


def with_notes(checkin: DailyCheckIn, notes: str | None) -> DailyCheckIn:
    return replace(checkin, notes=notes)


def upsert(checkins: Sequence[DailyCheckIn], checkin: DailyCheckIn) -> list[DailyCheckIn]:
    """Replace the check-in for the same day, or add it; most recent day first."""
    key = date_key(checkin.date)
    updated = [c for c in checkins if date_key(c.date) != key]
    updated.append(checkin)
    updated.sort(key=lambda c: c.date, reverse=True)
    return updated


# ---------------------------------------------------------------------------
# Statistics
# ---------------------------------------------------------------------------

def recent_checkins(
    checkins: Sequence[DailyCheckIn],
    days: int,
    now: datetime,
) -> list[DailyCheckIn]:
    """Check-ins whose day starts after ``now - days``, most recent first."""
    cutoff = now - timedelta(days=days)
    recent = [c for c in checkins if datetime.combine(c.date, datetime.min.time()) > cutoff]
    recent.sort(key=lambda c: c.date, reverse=True)
    return recent


def values_for(checkins: Sequence[DailyCheckIn], category: CheckInCategory) -> list[Any]:
    return [c.responses[category] for c in checkins if category in c.responses]


def numeric_values(checkins: Sequence[DailyCheckIn], category: CheckInCategory) -> list[float]:
    return [float(v) for v in values_for(checkins, category) if is_number(v)]


def analyze_trend(checkins: Sequence[DailyCheckIn], category: CheckInCategory) -> str:
    """Compare the three most recent numeric answers with the three oldest.

    Returns ``increasing`` / ``decreasing`` when the means differ by more
    than 0.5, ``stable`` otherwise, and ``neutral`` with fewer than three
    numeric values.
    """
    values = numeric_values(checkins, category)
    if len(values) < 3:
        return "neutral"
    recent = values[:3]
    older = values[-3:] if len(values) > 3 else recent
    difference = mean(recent) - mean(older)
    if difference > TREND_THRESHOLD:
        return "increasing"
    if difference < -TREND_THRESHOLD:
        return "decreasing"
    return "stable"


def checkin_streak(checkins: Sequence[DailyCheckIn], today: date, days: int) -> int:
    """Consecutive days ending today that have a check-in."""
    keys = {date_key(c.date) for c in checkins}
    streak = 0
    for offset in range(days):
        if date_key(today - timedelta(days=offset)) in keys:
            streak += 1
        else:
            break
    return streak


def checkin_stats(
    checkins: Sequence[DailyCheckIn],
    *,
    days: int = 30,
    now: datetime,
) -> dict[str, Any]:
    """Totals, average completion, streak and trends over ``days``."""
    recent = recent_checkins(checkins, days, now)
    if not recent:
        return {
            "total_checkins": 0,
            "average_completion": 0.0,
            "streak": 0,
            "mood_trend": "neutral",
            "energy_trend": "neutral",
            "stress_trend": "neutral",
            "days_analyzed": days,
        }
    return {
        "total_checkins": len(recent),
        "average_completion": mean(c.completion_score for c in recent),
        "streak": checkin_streak(recent, now.date(), days),
        "mood_trend": analyze_trend(recent, CheckInCategory.MOOD),
        "energy_trend": analyze_trend(recent, CheckInCategory.ENERGY),
        "stress_trend": analyze_trend(recent, CheckInCategory.STRESS),
        "days_analyzed": days,
    }


# ---------------------------------------------------------------------------
# Conversation helpers
# ---------------------------------------------------------------------------

def personalized_questions(
    stats: dict[str, Any],
    habit_completion_rate: float | None = None,
) -> list[str]:
    """Check-in questions tailored to last week's trends."""
    questions = [
        "How are you feeling emotionally right now?",
        "What's your energy level like today (1-10)?",
        "How stressed do you feel (1-10)?",
    ]
    if stats.get("stress_trend") == "increasing":
        questions.append("What's been the biggest source of stress lately?")
    if stats.get("energy_trend") == "decreasing":
        questions.append("How has your sleep been recently?")
    if habit_completion_rate is not None and habit_completion_rate < 0.5:
        questions.append("What's making it challenging to keep up with your wellness habits?")
    questions.extend([
        "What's one thing you're grateful for today?",
        "What would make tomorrow feel successful for you?",
    ])
    return questions


def checkin_message(today_checkin: DailyCheckIn | None, now: datetime) -> str:
    """Opening line ARIA uses to invite or acknowledge today's check-in."""
    if today_checkin is None:
        if now.hour < 12:
            return (
                "Good morning! I'd love to do a quick wellness check-in with you. "
                "How are you feeling as you start your day?"
            )
        if now.hour < 17:
            return (
                "How has your day been going? I'd like to check in on your wellbeing - "
                "what's your energy and mood like right now?"
            )
        return (
            "As your day winds down, how are you feeling? I'd love to do an evening "
            "wellness check-in with you."
        )
    if today_checkin.completion_score >= 0.8:
        return (
            "Thanks for being so thoughtful about your wellness check-in today! Your "
            "self-awareness really shows in how you're tracking your wellbeing."
        )
    return (
        "I appreciate you starting your wellness check-in today. Would you like to share "
        "a bit more about how you're feeling?"
    )
