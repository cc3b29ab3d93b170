"""Guided meditation sessions: script playback through TTS and session history."""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import Awaitable, Callable
from dataclasses import replace
from datetime import datetime
from typing import Any

from aria.core.storage.collection_store import MEDITATION_SESSIONS, CollectionStore
from aria.core.voice.session import SpeechSynthesizer
from aria.domains.wellness.domain_logic import meditation_scripts
from aria.domains.wellness.domain_logic.vocabulary import (
    MeditationLevel,
    MeditationType,
    Mood,
    SessionDuration,
)
from aria.domains.wellness.domain_logic.wellness_models import (
    MeditationSegment,
    MeditationSession,
)

logger = logging.getLogger(__name__)


class SessionInProgressError(RuntimeError):
    """A guided session is already playing."""


class SessionNotFoundError(KeyError):
    """No recorded meditation session with the given id."""


class MindfulnessService:
    """Plays guided meditations and keeps the session history.

    Args:
        store: Collection store holding ``meditation_sessions``.
        synthesizer: Speaks each instruction. Without one, sessions run silently.
        sleep: Awaited with each segment's duration in seconds.
        clock: Current local time.
    """

    def __init__(
        self,
        store: CollectionStore,
        *,
        synthesizer: SpeechSynthesizer | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._store = store
        self._synthesizer = synthesizer
        self._sleep = sleep
        self._clock = clock
        self._sessions: list[MeditationSession] = store.load_records(
            MEDITATION_SESSIONS, MeditationSession.from_dict
        )
        self._active = False
        self._stop_requested = False
        self._current_segment: MeditationSegment | None = None

    @property
    def sessions(self) -> tuple[MeditationSession, ...]:
        return tuple(self._sessions)

    @property
    def is_active(self) -> bool:
        return self._active

    @property
    def current_segment(self) -> MeditationSegment | None:
        return self._current_segment

    def script(
        self,
        meditation_type: MeditationType,
        duration: SessionDuration,
        level: MeditationLevel = MeditationLevel.BEGINNER,
        custom_minutes: int | None = None,
    ) -> list[MeditationSegment]:
        return meditation_scripts.generate_script(meditation_type, duration, level, custom_minutes)

    async def _speak(self, text: str) -> None:
        if self._synthesizer is None:
            return
        try:
            await self._synthesizer.synthesize(text)
        except Exception:
            logger.exception("Speech synthesis failed, continuing session")

    async def run_session(
        self,
        meditation_type: MeditationType,
        duration: SessionDuration,
        *,
        level: MeditationLevel = MeditationLevel.BEGINNER,
        custom_minutes: int | None = None,
        mood_before: Mood | None = None,
    ) -> MeditationSession:
        """Play a guided session to the end, or until ``stop()`` is called.

        Raises:
            SessionInProgressError: Another session is already playing.
        """
        if self._active:
            raise SessionInProgressError("A meditation session is already in progress")

        segments = self.script(meditation_type, duration, level, custom_minutes)
        planned_minutes = meditation_scripts.session_minutes(duration, custom_minutes)
        start = self._clock()
        self._active = True
        self._stop_requested = False
        logger.info(
            "Meditation started: %s, %d min, %d segments",
            meditation_type.value,
            planned_minutes,
            len(segments),
        )

        try:
            for segment in segments:
                if self._stop_requested:
                    break
                self._current_segment = segment
                if not segment.is_silence:
                    await self._speak(segment.instruction)
                await self._sleep(segment.duration_seconds)
            completed = not self._stop_requested
            if completed:
                await self._speak(meditation_scripts.COMPLETION_ANNOUNCEMENT)
        finally:
            self._active = False
            self._current_segment = None

        end = self._clock()
        if completed:
            actual_minutes = planned_minutes
        else:
            actual_minutes = int((end - start).total_seconds() // 60)

        session = MeditationSession(
            id=str(uuid.uuid4()),
            type=meditation_type,
            duration=duration,
            actual_minutes=actual_minutes,
            start_time=start,
            end_time=end,
            completed=completed,
            mood_before=mood_before,
            metadata={"level": level.value, "segments": len(segments)},
        )
        self._sessions.append(session)
        self._store.save_records(MEDITATION_SESSIONS, self._sessions)
        logger.info(
            "Meditation %s: %s, %d min",
            "completed" if completed else "stopped",
            meditation_type.value,
            actual_minutes,
        )
        return session

    def stop(self) -> bool:
        """Ask the playing session to stop after the current segment."""
        if not self._active:
            return False
        self._stop_requested = True
        return True

    def rate_session(
        self,
        session_id: str,
        *,
        rating: int | None = None,
        notes: str | None = None,
        mood_after: Mood | None = None,
    ) -> MeditationSession:
        if rating is not None and not 1 <= rating <= 5:
            raise ValueError(f"Rating must be between 1 and 5, got {rating}")
        for index, session in enumerate(self._sessions):
            if session.id == session_id:
                updated = replace(session, rating=rating, notes=notes, mood_after=mood_after)
                self._sessions[index] = updated
                self._store.save_records(MEDITATION_SESSIONS, self._sessions)
                return updated
        raise SessionNotFoundError(f"Unknown meditation session: {session_id}")

    def stats(self, days: int = 30) -> dict[str, Any]:
        return meditation_scripts.meditation_stats(self._sessions, days=days, now=self._clock())

    def recommend(self, mood: Mood | None) -> MeditationType:
        return meditation_scripts.recommend(mood)

    def message(self) -> str:
        return meditation_scripts.meditation_message(self.stats(days=7))
