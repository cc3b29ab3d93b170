"""Voice session protocol and utterance capture.

Speech-to-text, voice activity detection and text-to-speech run outside this
package. A voice session only has to emit the events below while it listens;
``capture_utterance`` turns one listening window into the raw material for
voice mood analysis.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol, Union, runtime_checkable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VoiceSessionConfig:
    """Listening parameters passed to ``VoiceSession.start``."""

    speech_threshold: float = 0.02
    silence_duration: float = 2.0  # seconds of silence that end a turn
    auto_play_tts: bool = False
    continuous_mode: bool = False


# Mood analysis only needs a single turn and no spoken reply.
MOOD_ANALYSIS_CONFIG = VoiceSessionConfig()


# ---------------------------------------------------------------------------
# Session events
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Listening:
    audio_level: float


@dataclass(frozen=True)
class SpeechStarted:
    pass


@dataclass(frozen=True)
class Transcribed:
    text: str


@dataclass(frozen=True)
class Stopped:
    pass


@dataclass(frozen=True)
class TurnCompleted:
    pass


VoiceEvent = Union[Listening, SpeechStarted, Transcribed, Stopped, TurnCompleted]


@runtime_checkable
class VoiceSession(Protocol):
    """A listening session on some audio device."""

    def start(self, config: VoiceSessionConfig) -> AsyncIterator[VoiceEvent]:
        """Begin listening and yield events until the session ends."""
        ...

    async def stop(self) -> None:
        ...


@runtime_checkable
class SpeechSynthesizer(Protocol):
    """Text-to-speech output."""

    async def synthesize(self, text: str) -> None:
        ...


# ---------------------------------------------------------------------------
# Capture
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class VoiceCapture:
    """Everything heard during one listening window."""

    audio_levels: tuple[float, ...]
    speech_start: datetime
    speech_end: datetime
    transcript: str


async def capture_utterance(
    session: VoiceSession,
    *,
    config: VoiceSessionConfig = MOOD_ANALYSIS_CONFIG,
    listen_seconds: float = 15.0,
    clock: Callable[[], datetime] = datetime.now,
) -> VoiceCapture | None:
    """Listen for one utterance, for at most ``listen_seconds``.

    Audio levels are kept for the whole window. The session is always
    stopped before returning.

    Returns:
        The capture, or None when no speech started or nothing was
        transcribed inside the window.
    """
    audio_levels: list[float] = []
    speech_start: datetime | None = None
    speech_end: datetime | None = None
    transcript = ""

    async def _listen() -> None:
        nonlocal speech_start, speech_end, transcript
        async for event in session.start(config):
            if isinstance(event, Listening):
                audio_levels.append(event.audio_level)
            elif isinstance(event, SpeechStarted):
                speech_start = clock()
            elif isinstance(event, Transcribed):
                transcript = event.text
                speech_end = clock()
            elif isinstance(event, (Stopped, TurnCompleted)):
                break

    try:
        await asyncio.wait_for(_listen(), timeout=listen_seconds)
    except asyncio.TimeoutError:
        logger.debug("Voice capture window of %.1fs elapsed", listen_seconds)
    finally:
        await session.stop()

    if speech_start is None or not transcript:
        logger.info("No speech detected during voice capture")
        return None

    return VoiceCapture(
        audio_levels=tuple(audio_levels),
        speech_start=speech_start,
        speech_end=speech_end or clock(),
        transcript=transcript,
    )
