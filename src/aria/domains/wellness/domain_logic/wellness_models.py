"""Data models for the wellness domain.

Records are immutable once created; services replace a record (via
``dataclasses.replace``) rather than mutating it. Each record serializes to a
JSON-compatible dict with ``to_dict`` and is rebuilt with ``from_dict``.
Timestamps are naive local datetimes stored as ISO 8601 strings.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from aria.domains.wellness.domain_logic.vocabulary import (
    CheckInCategory,
    HabitDifficulty,
    HabitFrequency,
    HabitType,
    InsightCategory,
    MeditationType,
    Mood,
    SessionDuration,
    WellnessActivity,
)


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _dt(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def _enum(enum_cls, value):
    return enum_cls(value) if value is not None else None


# ---------------------------------------------------------------------------
# Mood observations
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class VoiceMetrics:
    """Prosodic features extracted from one voice capture."""

    average_amplitude: float
    speech_rate: float  # words per minute
    pause_frequency: float  # pauses per minute
    average_pause_duration: float  # seconds
    energy_level: float  # 0-1
    timestamp: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "average_amplitude": self.average_amplitude,
            "speech_rate": self.speech_rate,
            "pause_frequency": self.pause_frequency,
            "average_pause_duration": self.average_pause_duration,
            "energy_level": self.energy_level,
            "timestamp": _iso(self.timestamp),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> VoiceMetrics:
        return cls(
            average_amplitude=float(data.get("average_amplitude") or 0.0),
            speech_rate=float(data.get("speech_rate") or 0.0),
            pause_frequency=float(data.get("pause_frequency") or 0.0),
            average_pause_duration=float(data.get("average_pause_duration") or 0.0),
            energy_level=float(data.get("energy_level") or 0.0),
            timestamp=datetime.fromisoformat(data["timestamp"]),
        )


@dataclass(frozen=True)
class MoodAnalysisResult:
    """Outcome of one mood classification. Never mutated."""

    detected_mood: Mood
    confidence: float  # 0-1
    energy_level: int  # 1-10
    stress_level: int  # 1-10
    indicators: tuple[str, ...]
    timestamp: datetime
    voice_metrics: VoiceMetrics | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "detected_mood": self.detected_mood.value,
            "confidence": self.confidence,
            "energy_level": self.energy_level,
            "stress_level": self.stress_level,
            "indicators": list(self.indicators),
            "voice_metrics": self.voice_metrics.to_dict() if self.voice_metrics else None,
            "timestamp": _iso(self.timestamp),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MoodAnalysisResult:
        voice = data.get("voice_metrics")
        return cls(
            detected_mood=Mood(data["detected_mood"]),
            confidence=float(data.get("confidence") or 0.0),
            energy_level=int(data.get("energy_level", 5)),
            stress_level=int(data.get("stress_level", 5)),
            indicators=tuple(data.get("indicators") or ()),
            timestamp=datetime.fromisoformat(data["timestamp"]),
            voice_metrics=VoiceMetrics.from_dict(voice) if voice else None,
        )


@dataclass(frozen=True)
class WellnessEntry:
    """One mood observation: manual, text-derived or voice-derived."""

    id: str
    timestamp: datetime
    mood: Mood | None = None
    energy_level: int | None = None  # 1-10
    stress_level: int | None = None  # 1-10
    notes: str | None = None
    activity: WellnessActivity | None = None
    # source ('text_analysis' | 'voice_analysis' | 'manual_selection'),
    # confidence, indicators
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": _iso(self.timestamp),
            "mood": self.mood.value if self.mood else None,
            "energy_level": self.energy_level,
            "stress_level": self.stress_level,
            "notes": self.notes,
            "activity": self.activity.value if self.activity else None,
            "metadata": dict(self.metadata),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> WellnessEntry:
        return cls(
            id=data["id"],
            timestamp=datetime.fromisoformat(data["timestamp"]),
            mood=_enum(Mood, data.get("mood")),
            energy_level=data.get("energy_level"),
            stress_level=data.get("stress_level"),
            notes=data.get("notes"),
            activity=_enum(WellnessActivity, data.get("activity")),
            metadata=dict(data.get("metadata") or {}),
        )


# ---------------------------------------------------------------------------
# Habits
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class WellnessHabit:
    """A recurring wellness action. Soft-deleted via ``is_active=False``."""

    id: str
    name: str
    description: str
    type: HabitType
    frequency: HabitFrequency
    difficulty: HabitDifficulty
    target_duration_minutes: int
    created_at: datetime
    archived_at: datetime | None = None
    is_active: bool = True
    custom_frequency: str | None = None
    settings: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "type": self.type.value,
            "frequency": self.frequency.value,
            "difficulty": self.difficulty.value,
            "target_duration_minutes": self.target_duration_minutes,
            "created_at": _iso(self.created_at),
            "archived_at": _iso(self.archived_at),
            "is_active": self.is_active,
            "custom_frequency": self.custom_frequency,
            "settings": dict(self.settings),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> WellnessHabit:
        return cls(
            id=data["id"],
            name=data["name"],
            description=data.get("description", ""),
            type=HabitType(data["type"]),
            frequency=HabitFrequency(data["frequency"]),
            difficulty=HabitDifficulty(data["difficulty"]),
            target_duration_minutes=int(data["target_duration_minutes"]),
            created_at=datetime.fromisoformat(data["created_at"]),
            archived_at=_dt(data.get("archived_at")),
            is_active=data.get("is_active", True),
            custom_frequency=data.get("custom_frequency"),
            settings=dict(data.get("settings") or {}),
        )


@dataclass(frozen=True)
class HabitCompletion:
    """One completion event for a habit. Append-only."""

    id: str
    habit_id: str
    completed_at: datetime
    notes: str | None = None
    rating: int | None = None  # 1-5
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "habit_id": self.habit_id,
            "completed_at": _iso(self.completed_at),
            "notes": self.notes,
            "rating": self.rating,
            "metadata": dict(self.metadata),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HabitCompletion:
        return cls(
            id=data["id"],
            habit_id=data["habit_id"],
            completed_at=datetime.fromisoformat(data["completed_at"]),
            notes=data.get("notes"),
            rating=data.get("rating"),
            metadata=dict(data.get("metadata") or {}),
        )


# ---------------------------------------------------------------------------
# Insights
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Insight:
    """A generated coaching message. Only ``is_read`` ever changes."""

    id: str
    timestamp: datetime
    title: str
    message: str
    category: InsightCategory
    priority: float = 0.5  # 0-1
    habit_id: str | None = None
    is_read: bool = False
    data: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": _iso(self.timestamp),
            "title": self.title,
            "message": self.message,
            "category": self.category.value,
            "priority": self.priority,
            "habit_id": self.habit_id,
            "is_read": self.is_read,
            "data": dict(self.data),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Insight:
        return cls(
            id=data["id"],
            timestamp=datetime.fromisoformat(data["timestamp"]),
            title=data["title"],
            message=data["message"],
            category=InsightCategory(data["category"]),
            priority=float(data.get("priority", 0.5)),
            habit_id=data.get("habit_id"),
            is_read=data.get("is_read", False),
            data=dict(data.get("data") or {}),
        )


# ---------------------------------------------------------------------------
# Daily check-ins
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DailyCheckIn:
    """Structured responses for one calendar day."""

    id: str
    date: date
    responses: dict[CheckInCategory, Any]
    completion_score: float  # answered / 8
    created_at: datetime
    notes: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "responses": {cat.value: value for cat, value in self.responses.items()},
            "completion_score": self.completion_score,
            "created_at": _iso(self.created_at),
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DailyCheckIn:
        responses: dict[CheckInCategory, Any] = {}
        for key, value in (data.get("responses") or {}).items():
            try:
                responses[CheckInCategory(key)] = value
            except ValueError:
                continue  # unknown category keys are dropped, not fatal
        raw_date = data["date"]
        return cls(
            id=data["id"],
            date=date.fromisoformat(raw_date[:10]),
            responses=responses,
            completion_score=float(data.get("completion_score") or 0.0),
            created_at=datetime.fromisoformat(data["created_at"]),
            notes=data.get("notes"),
        )


# ---------------------------------------------------------------------------
# Meditation
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MeditationSegment:
    """One step of a guided meditation script."""

    instruction: str
    duration_seconds: int
    is_silence: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "instruction": self.instruction,
            "duration_seconds": self.duration_seconds,
            "is_silence": self.is_silence,
        }


@dataclass(frozen=True)
class MeditationSession:
    """A finished (completed or stopped early) meditation session."""

    id: str
    type: MeditationType
    duration: SessionDuration
    actual_minutes: int
    start_time: datetime
    end_time: datetime
    completed: bool
    rating: int | None = None  # 1-5
    notes: str | None = None
    mood_before: Mood | None = None
    mood_after: Mood | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "duration": self.duration.value,
            "actual_minutes": self.actual_minutes,
            "start_time": _iso(self.start_time),
            "end_time": _iso(self.end_time),
            "completed": self.completed,
            "rating": self.rating,
            "notes": self.notes,
            "mood_before": self.mood_before.value if self.mood_before else None,
            "mood_after": self.mood_after.value if self.mood_after else None,
            "metadata": dict(self.metadata),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MeditationSession:
        return cls(
            id=data["id"],
            type=MeditationType(data["type"]),
            duration=SessionDuration(data["duration"]),
            actual_minutes=int(data["actual_minutes"]),
            start_time=datetime.fromisoformat(data["start_time"]),
            end_time=datetime.fromisoformat(data["end_time"]),
            completed=bool(data["completed"]),
            rating=data.get("rating"),
            notes=data.get("notes"),
            mood_before=_enum(Mood, data.get("mood_before")),
            mood_after=_enum(Mood, data.get("mood_after")),
            metadata=dict(data.get("metadata") or {}),
        )


# ---------------------------------------------------------------------------
# Conversation
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ConversationContext:
    """State carried across one conversation session."""

    session_start: datetime
    previous_topics: tuple[str, ...] = ()
    detected_mood: Mood | None = None
    conversation_depth: int = 0  # message count
    user_preferences: dict[str, Any] = field(default_factory=dict)
    last_wellness_check_in: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "session_start": _iso(self.session_start),
            "previous_topics": list(self.previous_topics),
            "detected_mood": self.detected_mood.value if self.detected_mood else None,
            "conversation_depth": self.conversation_depth,
            "user_preferences": dict(self.user_preferences),
            "last_wellness_check_in": _iso(self.last_wellness_check_in),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ConversationContext:
        return cls(
            session_start=datetime.fromisoformat(data["session_start"]),
            previous_topics=tuple(data.get("previous_topics") or ()),
            detected_mood=_enum(Mood, data.get("detected_mood")),
            conversation_depth=int(data.get("conversation_depth") or 0),
            user_preferences=dict(data.get("user_preferences") or {}),
            last_wellness_check_in=_dt(data.get("last_wellness_check_in")),
        )


@dataclass(frozen=True)
class ChatMessage:
    """One turn in the conversation transcript (not persisted)."""

    text: str
    is_user: bool
    timestamp: datetime
    tokens_per_second: float | None = None
    total_tokens: int | None = None
    is_error: bool = False
    was_cancelled: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "text": self.text,
            "is_user": self.is_user,
            "timestamp": _iso(self.timestamp),
            "tokens_per_second": self.tokens_per_second,
            "total_tokens": self.total_tokens,
            "is_error": self.is_error,
            "was_cancelled": self.was_cancelled,
        }
