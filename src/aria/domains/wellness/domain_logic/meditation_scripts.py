"""Guided meditation scripts, recommendations and practice statistics.

A script is a flat list of ``MeditationSegment``: spoken instructions
interleaved with silences. Every script opens with a type-specific welcome
and a settling breath, runs a main practice sized to the session length
minus two minutes, and closes with two return-to-the-room segments.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timedelta
from typing import Any

from aria.domains.wellness.domain_logic.scoring import round_half_away, same_day
from aria.domains.wellness.domain_logic.vocabulary import (
    SESSION_MINUTES,
    MeditationLevel,
    MeditationType,
    Mood,
    SessionDuration,
)
from aria.domains.wellness.domain_logic.wellness_models import (
    MeditationSegment,
    MeditationSession,
)

COMPLETION_ANNOUNCEMENT = "Your meditation is complete. Take a moment to notice how you feel."

_OPENINGS: dict[MeditationType, str] = {
    MeditationType.GUIDED_MEDITATION: (
        "Welcome to your guided meditation. Find a comfortable seated position and allow "
        "your body to relax."
    ),
    MeditationType.BREATHING_EXERCISE: (
        "Let's begin a calming breathing exercise. Sit comfortably and place one hand on "
        "your chest, one on your belly."
    ),
    MeditationType.BODY_SCAN: (
        "We'll practice a body scan meditation. Lie down comfortably or sit with your back "
        "straight and supported."
    ),
    MeditationType.LOVING_KINDNESS: (
        "This loving-kindness meditation will help cultivate compassion. Sit comfortably "
        "and bring a gentle smile to your face."
    ),
    MeditationType.MINDFULNESS_BREAK: (
        "Time for a mindful pause. Simply sit or stand comfortably wherever you are."
    ),
    MeditationType.SLEEP_MEDITATION: (
        "This meditation will help prepare your body and mind for restful sleep. Make "
        "yourself comfortable in bed."
    ),
    MeditationType.ANXIETY_RELIEF: (
        "Let's work together to calm your anxious mind. Find a safe, comfortable place to sit."
    ),
    MeditationType.STRESS_RELEASE: (
        "We'll release tension and stress from your body and mind. Sit comfortably and let "
        "your shoulders drop."
    ),
    MeditationType.FOCUS_BOOST: (
        "This meditation will help sharpen your focus and clarity. Sit upright but relaxed."
    ),
    MeditationType.GRATITUDE_PRACTICE: (
        "Let's cultivate gratitude and appreciation. Sit comfortably and bring to mind "
        "something you're thankful for."
    ),
}

_BREATHING_CUES = (
    "Now we'll focus on the natural rhythm of your breath. Simply notice each inhale and exhale.",
    "If your mind wanders, that's perfectly normal. Gently return your attention to your breath.",
    "Feel the cool air entering through your nose, and the warm air leaving your body.",
    "Let each exhale release any tension you're holding in your body.",
    "Continue following your breath, allowing it to be your anchor in this moment.",
)

_BODY_PARTS = (
    "Start by bringing attention to the top of your head. Notice any sensations there.",
    "Move your awareness to your forehead, allowing it to soften and relax.",
    "Notice your eyes, letting them rest gently in their sockets.",
    "Bring attention to your jaw. Let it drop slightly and release any tension.",
    "Feel your neck and shoulders. Let them drop and soften.",
    "Notice your arms, from shoulders down to fingertips.",
    "Bring awareness to your chest. Feel it rising and falling with each breath.",
    "Notice your stomach and lower back. Let them soften.",
    "Feel your hips and pelvis, letting them settle.",
    "Bring attention to your thighs and knees.",
    "Notice your calves and shins.",
    "Finally, feel your feet and toes. Let them completely relax.",
)

_LOVING_KINDNESS_PHASES = (
    'Begin by offering loving-kindness to yourself. Silently repeat: "May I be happy, may I '
    'be healthy, may I be at peace."',
    "Now bring to mind someone you love dearly. Send them loving-kindness: \"May you be "
    'happy, may you be healthy, may you be at peace."',
    "Think of a neutral person - someone you neither love nor dislike. Offer them the same wishes.",
    "Now, if you feel ready, bring to mind someone difficult. Send them loving-kindness as well.",
    'Finally, extend these wishes to all beings everywhere: "May all beings be happy, may all '
    'beings be healthy, may all beings be at peace."',
)

# Seconds between spoken cues during breathing practice
_GUIDANCE_INTERVAL = {
    MeditationLevel.BEGINNER: 60,
    MeditationLevel.INTERMEDIATE: 120,
    MeditationLevel.ADVANCED: 180,
}

_RECOMMENDATIONS: dict[Mood, MeditationType] = {
    Mood.STRESSED: MeditationType.STRESS_RELEASE,
    Mood.ANXIOUS: MeditationType.ANXIETY_RELIEF,
    Mood.TIRED: MeditationType.SLEEP_MEDITATION,
    Mood.OVERWHELMED: MeditationType.BREATHING_EXERCISE,
    Mood.HAPPY: MeditationType.GRATITUDE_PRACTICE,
    Mood.ENERGETIC: MeditationType.FOCUS_BOOST,
    Mood.CALM: MeditationType.MINDFULNESS_BREAK,
    Mood.FOCUSED: MeditationType.GUIDED_MEDITATION,
}


def _say(instruction: str, seconds: int) -> MeditationSegment:
    return MeditationSegment(instruction=instruction, duration_seconds=seconds)


def _silence(seconds: int) -> list[MeditationSegment]:
    # Zero or negative gaps are dropped, which happens for very short sessions.
    if seconds <= 0:
        return []
    return [MeditationSegment(instruction="", duration_seconds=seconds, is_silence=True)]


def session_minutes(duration: SessionDuration, custom_minutes: int | None = None) -> int:
    return custom_minutes if custom_minutes is not None else SESSION_MINUTES[duration]


# ---------------------------------------------------------------------------
# Main practices
# ---------------------------------------------------------------------------

def _breathing(total_seconds: int, level: MeditationLevel) -> list[MeditationSegment]:
    interval = _GUIDANCE_INTERVAL[level]
    segments: list[MeditationSegment] = []
    used = 0
    cue = 0
    while used < total_seconds:
        segments.append(_say(_BREATHING_CUES[cue % len(_BREATHING_CUES)], 15))
        used += 15
        gap = min(max(interval - 15, 30), total_seconds - used)
        segments.extend(_silence(gap))
        used += max(gap, 0)
        cue += 1
    return segments


def _paced(phases: Sequence[str], spoken_seconds: int, total_seconds: int) -> list[MeditationSegment]:
    per_phase = total_seconds // len(phases)
    segments: list[MeditationSegment] = []
    for instruction in phases:
        segments.append(_say(instruction, spoken_seconds))
        segments.extend(_silence(per_phase - spoken_seconds))
    return segments


def _body_scan(total_seconds: int, level: MeditationLevel) -> list[MeditationSegment]:
    return _paced(_BODY_PARTS, 10, total_seconds)


def _loving_kindness(total_seconds: int, level: MeditationLevel) -> list[MeditationSegment]:
    return _paced(_LOVING_KINDNESS_PHASES, 20, total_seconds)


def _anxiety_relief(total_seconds: int, level: MeditationLevel) -> list[MeditationSegment]:
    return [
        _say(
            "Notice that you are safe in this moment. Feel your body supported by what you're "
            "sitting on.",
            30,
        ),
        _say(
            "Take a deep breath in for 4 counts... hold for 4... and exhale for 6 counts. This "
            "longer exhale activates your calming response.",
            45,
        ),
        *_breathing(total_seconds - 75, level),
    ]


def _stress_release(total_seconds: int, level: MeditationLevel) -> list[MeditationSegment]:
    return [
        _say(
            "Imagine stress leaving your body with each exhale. See it as gray smoke flowing "
            "out and dissolving.",
            30,
        ),
        _say(
            "Tense all the muscles in your body for 5 seconds... and now release completely. "
            "Feel the wave of relaxation.",
            30,
        ),
        *_body_scan(total_seconds - 60, level),
    ]


def _gratitude(total_seconds: int, level: MeditationLevel) -> list[MeditationSegment]:
    return [
        _say("Bring to mind three things you're grateful for today. They can be big or small.", 30),
        _say("Feel the warmth of gratitude in your heart. Let it spread throughout your body.", 30),
        _say("Think of someone who has helped or supported you. Send them silent thanks.", 30),
        *_silence(total_seconds - 90),
    ]


_PRACTICES = {
    MeditationType.BREATHING_EXERCISE: _breathing,
    MeditationType.BODY_SCAN: _body_scan,
    MeditationType.LOVING_KINDNESS: _loving_kindness,
    MeditationType.ANXIETY_RELIEF: _anxiety_relief,
    MeditationType.STRESS_RELEASE: _stress_release,
    MeditationType.GRATITUDE_PRACTICE: _gratitude,
}


def generate_script(
    meditation_type: MeditationType,
    duration: SessionDuration,
    level: MeditationLevel = MeditationLevel.BEGINNER,
    custom_minutes: int | None = None,
) -> list[MeditationSegment]:
    """Build the full segment list for a guided session.

    Types without a dedicated practice (guided, mindfulness break, sleep,
    focus) use the breathing practice.
    """
    minutes = session_minutes(duration, custom_minutes)
    practice = _PRACTICES.get(meditation_type, _breathing)

    return [
        _say(_OPENINGS[meditation_type], 60 if level is MeditationLevel.BEGINNER else 45),
        _say(
            "Close your eyes gently and take three deep breaths with me. Breathe in slowly... "
            "and breathe out completely.",
            30,
        ),
        *_silence(30),
        # Two minutes are reserved for the opening and closing
        *practice((minutes - 2) * 60, level),
        _say("Begin to bring your attention back to the room. Wiggle your fingers and toes gently.", 30),
        _say("When you're ready, slowly open your eyes. Notice how you feel in this moment.", 30),
    ]


# ---------------------------------------------------------------------------
# Recommendation and statistics
# ---------------------------------------------------------------------------

def recommend(mood: Mood | None) -> MeditationType:
    """Pick a practice suited to the current mood (mindfulness break if unknown)."""
    if mood is None:
        return MeditationType.MINDFULNESS_BREAK
    return _RECOMMENDATIONS[mood]


def meditation_stats(
    sessions: Sequence[MeditationSession],
    *,
    days: int = 30,
    now: datetime,
) -> dict[str, Any]:
    """Completed-session totals, rating, streak and favorite type over ``days``."""
    cutoff = now - timedelta(days=days)
    recent = [s for s in sessions if s.start_time > cutoff]
    completed = [s for s in recent if s.completed]

    ratings = [s.rating for s in completed if s.rating is not None]
    average_rating = round_half_away(sum(ratings) / len(ratings)) if ratings else None

    streak = 0
    for offset in range(days):
        day = now - timedelta(days=offset)
        if any(s.completed and same_day(s.start_time, day) for s in recent):
            streak += 1
        else:
            break

    counts: dict[MeditationType, int] = {}
    for session in completed:
        counts[session.type] = counts.get(session.type, 0) + 1
    favorite = None
    for kind, count in counts.items():
        if favorite is None or not counts[favorite] > count:
            favorite = kind

    return {
        "total_sessions": len(completed),
        "total_minutes": sum(s.actual_minutes for s in completed),
        "average_rating": average_rating,
        "streak": streak,
        "favorite_type": favorite.value if favorite else None,
        "days_analyzed": days,
    }


def meditation_message(stats: dict[str, Any]) -> str:
    """A first-person prompt the user can send ARIA about their practice."""
    total = stats["total_sessions"]
    if total == 0:
        return (
            "I'm interested in trying some meditation or mindfulness practice. Can you guide "
            "me through something calming?"
        )
    if total >= 5:
        return (
            f"I've been keeping up with my meditation practice - {total} sessions this week "
            f"for {stats['total_minutes']} minutes total. It's really helping my wellbeing."
        )
    return (
        "I did some meditation this week but would love to be more consistent. What would "
        "you recommend for building a regular practice?"
    )
