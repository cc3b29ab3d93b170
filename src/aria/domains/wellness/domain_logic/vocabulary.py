"""Closed wellness vocabularies and their canonical presentation table.

Every enumerated label in the wellness domain (moods, activities, habit
types and schedules, check-in categories, insight categories, meditation
types) is defined here once. Display labels, icon keys and color keys live
in a single lookup so tools and prompts never re-derive them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Mood(str, Enum):
    ENERGETIC = "energetic"
    CALM = "calm"
    STRESSED = "stressed"
    TIRED = "tired"
    HAPPY = "happy"
    ANXIOUS = "anxious"
    FOCUSED = "focused"
    OVERWHELMED = "overwhelmed"


class WellnessActivity(str, Enum):
    MEDITATION = "meditation"
    EXERCISE = "exercise"
    SLEEP = "sleep"
    NUTRITION = "nutrition"
    SOCIALIZING = "socializing"
    WORK = "work"
    RELAXATION = "relaxation"
    LEARNING = "learning"


class HabitType(str, Enum):
    EXERCISE = "exercise"
    MEDITATION = "meditation"
    SLEEP = "sleep"
    HYDRATION = "hydration"
    NUTRITION = "nutrition"
    SOCIALIZING = "socializing"
    LEARNING = "learning"
    CREATIVITY = "creativity"
    OUTDOORS = "outdoors"
    GRATITUDE = "gratitude"
    BREATHING_EXERCISE = "breathingExercise"
    STRETCHING = "stretching"
    READING = "reading"
    JOURNALING = "journaling"
    SELF_CARE = "selfCare"


class HabitFrequency(str, Enum):
    DAILY = "daily"
    WEEKDAYS = "weekdays"
    WEEKENDS = "weekends"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    CUSTOM = "custom"


class HabitDifficulty(str, Enum):
    EASY = "easy"                # 1-2 minutes
    MODERATE = "moderate"        # 5-15 minutes
    CHALLENGING = "challenging"  # 20+ minutes


class CheckInCategory(str, Enum):
    MOOD = "mood"
    ENERGY = "energy"
    STRESS = "stress"
    SLEEP = "sleep"
    GRATITUDE = "gratitude"
    CHALLENGES = "challenges"
    GOALS = "goals"
    REFLECTION = "reflection"


class InsightCategory(str, Enum):
    CELEBRATION = "celebration"
    ENCOURAGEMENT = "encouragement"
    SUGGESTION = "suggestion"
    CONCERN = "concern"
    PATTERN = "pattern"
    ACHIEVEMENT = "achievement"


class MeditationType(str, Enum):
    GUIDED_MEDITATION = "guidedMeditation"
    BREATHING_EXERCISE = "breathingExercise"
    BODY_SCAN = "bodyscan"
    LOVING_KINDNESS = "lovingKindness"
    MINDFULNESS_BREAK = "mindfulnessBreak"
    SLEEP_MEDITATION = "sleepMeditation"
    ANXIETY_RELIEF = "anxietyRelief"
    STRESS_RELEASE = "stressRelease"
    FOCUS_BOOST = "focusBoost"
    GRATITUDE_PRACTICE = "gratitudePractice"


class SessionDuration(str, Enum):
    QUICK = "quick"
    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"
    CUSTOM = "custom"


class MeditationLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


# ---------------------------------------------------------------------------
# Canonical presentation table
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Presentation:
    """How a vocabulary member is shown to the user."""

    label: str
    icon: str
    color: str


_PRESENTATION: dict[Enum, Presentation] = {
    # Moods
    Mood.HAPPY: Presentation("Happy", "sentiment_very_satisfied", "accentGreen"),
    Mood.ENERGETIC: Presentation("Energetic", "bolt", "accentOrange"),
    Mood.CALM: Presentation("Calm", "spa", "accentCyan"),
    Mood.STRESSED: Presentation("Stressed", "sentiment_dissatisfied", "accentOrange"),
    Mood.TIRED: Presentation("Tired", "bedtime", "indigo"),
    Mood.ANXIOUS: Presentation("Anxious", "sentiment_neutral", "accentViolet"),
    Mood.FOCUSED: Presentation("Focused", "center_focus_strong", "accentCyan"),
    Mood.OVERWHELMED: Presentation("Overwhelmed", "sentiment_very_dissatisfied", "accentPink"),
    # Habit types
    HabitType.EXERCISE: Presentation("Exercise", "fitness_center", "accentOrange"),
    HabitType.MEDITATION: Presentation("Meditation", "self_improvement", "accentViolet"),
    HabitType.SLEEP: Presentation("Sleep", "bedtime", "accentCyan"),
    HabitType.HYDRATION: Presentation("Hydration", "local_drink", "blue"),
    HabitType.NUTRITION: Presentation("Nutrition", "restaurant", "accentGreen"),
    HabitType.SOCIALIZING: Presentation("Socializing", "people", "accentPink"),
    HabitType.LEARNING: Presentation("Learning", "school", "indigo"),
    HabitType.CREATIVITY: Presentation("Creativity", "palette", "purple"),
    HabitType.OUTDOORS: Presentation("Outdoors", "park", "green"),
    HabitType.GRATITUDE: Presentation("Gratitude", "favorite", "accentPink"),
    HabitType.BREATHING_EXERCISE: Presentation("Breathing", "air", "accentCyan"),
    HabitType.STRETCHING: Presentation("Stretching", "accessibility_new", "accentViolet"),
    HabitType.READING: Presentation("Reading", "book", "brown"),
    HabitType.JOURNALING: Presentation("Journaling", "edit_note", "teal"),
    HabitType.SELF_CARE: Presentation("Self Care", "spa", "accentViolet"),
    # Insight categories
    InsightCategory.CELEBRATION: Presentation("Celebration", "celebration", "accentGreen"),
    InsightCategory.ENCOURAGEMENT: Presentation("Encouragement", "favorite", "accentCyan"),
    InsightCategory.SUGGESTION: Presentation("Suggestion", "lightbulb", "accentViolet"),
    InsightCategory.CONCERN: Presentation("Concern", "warning", "accentOrange"),
    InsightCategory.PATTERN: Presentation("Pattern", "trending_up", "accentViolet"),
    InsightCategory.ACHIEVEMENT: Presentation("Achievement", "emoji_events", "accentGreen"),
    # Meditation types
    MeditationType.GUIDED_MEDITATION: Presentation("Guided Meditation", "self_improvement", "accentViolet"),
    MeditationType.BREATHING_EXERCISE: Presentation("Breathing Exercise", "air", "accentCyan"),
    MeditationType.BODY_SCAN: Presentation("Body Scan", "accessibility_new", "accentGreen"),
    MeditationType.LOVING_KINDNESS: Presentation("Loving Kindness", "favorite", "accentPink"),
    MeditationType.MINDFULNESS_BREAK: Presentation("Mindfulness Break", "pause_circle", "accentViolet"),
    MeditationType.SLEEP_MEDITATION: Presentation("Sleep Meditation", "bedtime", "indigo"),
    MeditationType.ANXIETY_RELIEF: Presentation("Anxiety Relief", "healing", "accentCyan"),
    MeditationType.STRESS_RELEASE: Presentation("Stress Release", "spa", "accentGreen"),
    MeditationType.FOCUS_BOOST: Presentation("Focus Boost", "center_focus_strong", "accentOrange"),
    MeditationType.GRATITUDE_PRACTICE: Presentation("Gratitude Practice", "wb_sunny", "amber"),
}


def presentation(member: Enum) -> Presentation:
    """Return the display label, icon key and color key for a vocabulary member.

    Raises:
        KeyError: If the member has no presentation (e.g. schedules, which
            are never rendered on their own).
    """
    return _PRESENTATION[member]


# Energy / stress (1-10) assumed when the user picks a mood by hand.
MOOD_DEFAULT_LEVELS: dict[Mood, tuple[int, int]] = {
    Mood.ENERGETIC: (9, 3),
    Mood.HAPPY: (8, 2),
    Mood.FOCUSED: (7, 4),
    Mood.CALM: (6, 2),
    Mood.ANXIOUS: (4, 7),
    Mood.STRESSED: (3, 8),
    Mood.TIRED: (2, 5),
    Mood.OVERWHELMED: (2, 9),
}

POSITIVE_MOODS = frozenset({Mood.HAPPY, Mood.ENERGETIC, Mood.CALM, Mood.FOCUSED})
NEGATIVE_MOODS = frozenset({Mood.STRESSED, Mood.ANXIOUS, Mood.TIRED, Mood.OVERWHELMED})

SESSION_MINUTES: dict[SessionDuration, int] = {
    SessionDuration.QUICK: 3,
    SessionDuration.SHORT: 7,
    SessionDuration.MEDIUM: 12,
    SessionDuration.LONG: 25,
    SessionDuration.CUSTOM: 10,
}


def parse_enum(enum_cls: type[Enum], value: str) -> Enum:
    """Look up a vocabulary member by its wire value or its Python name.

    Raises:
        ValueError: If ``value`` names no member of ``enum_cls``.
    """
    try:
        return enum_cls(value)
    except ValueError:
        pass
    try:
        return enum_cls[value.upper()]
    except KeyError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValueError(f"Unknown {enum_cls.__name__} {value!r} (expected one of: {allowed})") from None
