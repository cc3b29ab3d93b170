"""Mood analysis service: text, voice and manual mood observations."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import datetime, timedelta
from typing import Any

from aria.core.voice.session import VoiceSession, capture_utterance
from aria.domains.wellness.domain_logic import mood_classifier
from aria.domains.wellness.domain_logic.vocabulary import (
    MOOD_DEFAULT_LEVELS,
    Mood,
    WellnessActivity,
)
from aria.domains.wellness.domain_logic.wellness_models import (
    MoodAnalysisResult,
    WellnessEntry,
)
from aria.domains.wellness.services.wellness_records import WellnessRecordService

logger = logging.getLogger(__name__)

MAX_RECENT_ANALYSES = 50


class MoodAnalysisService:
    """Classifies moods and records each observation as a wellness entry.

    Recent analyses are kept in memory, newest first, capped at 50. The
    wellness entry log is the durable record.
    """

    def __init__(
        self,
        records: WellnessRecordService,
        *,
        clock: Callable[[], datetime] = datetime.now,
        listen_seconds: float = 15.0,
    ) -> None:
        self._records = records
        self._clock = clock
        self._listen_seconds = listen_seconds
        self._recent: list[MoodAnalysisResult] = []
        self._current_mood: Mood | None = records.context.detected_mood

    @property
    def current_mood(self) -> Mood | None:
        return self._current_mood

    @property
    def recent_analyses(self) -> tuple[MoodAnalysisResult, ...]:
        return tuple(self._recent)

    def _remember(self, result: MoodAnalysisResult) -> None:
        self._recent.insert(0, result)
        del self._recent[MAX_RECENT_ANALYSES:]
        self._current_mood = result.detected_mood
        self._records.update_context(detected_mood=result.detected_mood)

    def analyze_text(self, text: str) -> MoodAnalysisResult | None:
        """Classify free text; a result is stored as a ``text_analysis`` entry."""
        result = mood_classifier.classify(text, now=self._clock())
        if result is None:
            return None
        self._remember(result)
        self._records.record_analysis(result, source="text_analysis", notes=text)
        return result

    def analyze_audio(
        self,
        audio_levels: Sequence[float],
        speech_start: datetime,
        speech_end: datetime,
        transcript: str,
    ) -> MoodAnalysisResult | None:
        """Classify a transcript together with its prosodic features."""
        if not transcript.strip():
            return None
        now = self._clock()
        metrics = mood_classifier.compute_voice_metrics(
            audio_levels, speech_start, speech_end, transcript, now=now
        )
        result = mood_classifier.classify(transcript, metrics, now=now)
        if result is None:
            return None
        self._remember(result)
        self._records.record_analysis(result, source="voice_analysis", notes=transcript)
        return result

    def analyze_utterance(
        self,
        audio_levels: Sequence[float],
        speech_seconds: float,
        transcript: str,
    ) -> MoodAnalysisResult | None:
        """Classify a transcript whose speech ended just now and lasted ``speech_seconds``."""
        speech_end = self._clock()
        return self.analyze_audio(
            audio_levels,
            speech_end - timedelta(seconds=speech_seconds),
            speech_end,
            transcript,
        )

    async def analyze_voice(self, session: VoiceSession) -> MoodAnalysisResult | None:
        """Listen for one utterance and classify it.

        Returns None (and stores nothing) when no speech is heard inside the
        listening window.
        """
        capture = await capture_utterance(
            session,
            listen_seconds=self._listen_seconds,
            clock=self._clock,
        )
        if capture is None:
            return None
        return self.analyze_audio(
            capture.audio_levels,
            capture.speech_start,
            capture.speech_end,
            capture.transcript,
        )

    def log_manual_mood(
        self,
        mood: Mood,
        *,
        notes: str | None = None,
        activity: WellnessActivity | None = None,
    ) -> WellnessEntry:
        """Record a mood the user picked by hand, with its default levels."""
        energy, stress = MOOD_DEFAULT_LEVELS[mood]
        now = self._clock()
        self._remember(MoodAnalysisResult(
            detected_mood=mood,
            confidence=1.0,
            energy_level=energy,
            stress_level=stress,
            indicators=("manual selection",),
            timestamp=now,
        ))
        return self._records.add_entry(
            mood=mood,
            energy_level=energy,
            stress_level=stress,
            notes=notes,
            activity=activity,
            metadata={"source": "manual_selection", "confidence": 1.0},
        )

    def trend(self, days: int = 7) -> dict[str, Any]:
        return mood_classifier.mood_trend(self._recent, days=days, now=self._clock())
