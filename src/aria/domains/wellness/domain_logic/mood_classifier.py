"""Deterministic mood classification from free text and voice features.

Keyword sets are matched by substring containment on the lower-cased text,
so "sadness" counts as "sad". Voice metrics, when supplied, shift the stress
counter and act as the energy multiplier for the final 1-10 levels.

No LLM, no randomness: the same input always yields the same result.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime, timedelta
from typing import Any

from aria.domains.wellness.domain_logic.scoring import clamp, round_half_away
from aria.domains.wellness.domain_logic.vocabulary import Mood
from aria.domains.wellness.domain_logic.wellness_models import (
    MoodAnalysisResult,
    VoiceMetrics,
)

# ---------------------------------------------------------------------------
# Keyword sets
# ---------------------------------------------------------------------------

STRESS_WORDS = (
    "stressed", "anxious", "worried", "overwhelmed", "panic", "pressure",
    "deadline", "exhausted", "burned out", "cant cope", "too much",
)
POSITIVE_WORDS = (
    "happy", "great", "amazing", "wonderful", "excited", "grateful",
    "love", "joy", "fantastic", "awesome", "good",
)
NEGATIVE_WORDS = (
    "sad", "depressed", "angry", "frustrated", "upset", "terrible",
    "awful", "hate", "horrible", "bad", "miserable",
)
LOW_ENERGY_WORDS = ("tired", "exhausted", "sleepy", "drained")
HIGH_ENERGY_WORDS = ("energetic", "pumped", "motivated", "excited", "alert")

# Voice thresholds
HESITANT_PAUSES_PER_MINUTE = 3.0
NORMAL_SPEECH_RATE = (80.0, 180.0)  # wpm
HESITANT_STRESS_MULTIPLIER = 1.3

# Energy multiplier when no voice capture is supplied
DEFAULT_VOICE_ENERGY = 1.0

# Pause detection over the sampled audio level stream
PAUSE_START_ABOVE = 0.02
PAUSE_START_BELOW = 0.01
PAUSE_END_ABOVE = 0.02
SAMPLE_INTERVAL_MS = 100  # 10 Hz


def _count_hits(text: str, words: Iterable[str]) -> int:
    return sum(1 for word in words if word in text)


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------

def classify(
    text: str,
    voice_metrics: VoiceMetrics | None = None,
    *,
    now: datetime | None = None,
) -> MoodAnalysisResult | None:
    """Classify the mood expressed in ``text``.

    Args:
        text: Free text (typed message or voice transcript).
        voice_metrics: Optional prosodic features from a voice capture.
        now: Timestamp for the result. Defaults to ``datetime.now()``.

    Returns:
        A MoodAnalysisResult, or None when the text is empty or whitespace.
    """
    if not text or not text.strip():
        return None

    lowered = text.lower()
    stress = _count_hits(lowered, STRESS_WORDS)
    positive = _count_hits(lowered, POSITIVE_WORDS)
    negative = _count_hits(lowered, NEGATIVE_WORDS)
    low_energy = _count_hits(lowered, LOW_ENERGY_WORDS)
    high_energy = _count_hits(lowered, HIGH_ENERGY_WORDS)

    indicators: list[str] = []
    stress_multiplier = 1.0
    energy_multiplier = DEFAULT_VOICE_ENERGY

    if voice_metrics is not None:
        if voice_metrics.pause_frequency > HESITANT_PAUSES_PER_MINUTE:
            stress += 2
            indicators.append("hesitant speech pattern")
            stress_multiplier = HESITANT_STRESS_MULTIPLIER

        low_rate, high_rate = NORMAL_SPEECH_RATE
        if voice_metrics.speech_rate > high_rate or voice_metrics.speech_rate < low_rate:
            stress += 1
            indicators.append("unusual speech rate")

        energy_multiplier = voice_metrics.energy_level
        if energy_multiplier < 0.3:
            indicators.append("low voice energy")
        elif energy_multiplier > 0.7:
            indicators.append("high voice energy")

    # First match wins
    if stress > 2:
        mood = Mood.STRESSED
        confidence = clamp(stress * 0.2, 0.5, 0.9)
        indicators.append("stress indicators in text")
    elif negative > positive and negative > 1:
        mood = Mood.ANXIOUS
        confidence = 0.7
        indicators.append("negative emotional language")
    elif positive > negative and positive > 1:
        mood = Mood.HAPPY
        confidence = 0.8
        indicators.append("positive emotional language")
    elif low_energy > 0 or energy_multiplier < 0.4:
        mood = Mood.TIRED
        confidence = 0.6
        indicators.append("low energy detected")
    elif high_energy > 0 or energy_multiplier > 0.8:
        mood = Mood.ENERGETIC
        confidence = 0.7
        indicators.append("high energy detected")
    else:
        mood = Mood.CALM
        confidence = 0.5
        indicators.append("neutral emotional state")

    energy_level = round_half_away(5 + (energy_multiplier - 0.5) * 4 + (positive - negative) * 0.5)
    stress_level = round_half_away(5 + stress * stress_multiplier + negative * 0.5)

    return MoodAnalysisResult(
        detected_mood=mood,
        confidence=confidence,
        energy_level=int(clamp(energy_level, 1, 10)),
        stress_level=int(clamp(stress_level, 1, 10)),
        indicators=tuple(indicators),
        timestamp=now or datetime.now(),
        voice_metrics=voice_metrics,
    )


# ---------------------------------------------------------------------------
# Voice feature extraction
# ---------------------------------------------------------------------------

def compute_voice_metrics(
    audio_levels: Sequence[float],
    speech_start: datetime,
    speech_end: datetime,
    transcript: str,
    *,
    now: datetime | None = None,
) -> VoiceMetrics:
    """Derive speech rate, pause statistics and vocal energy from a capture.

    Audio levels are assumed to be sampled at 10 Hz from ``speech_start``.
    A pause opens when the level drops from above 0.02 to below 0.01 and
    closes when it climbs back above 0.02.
    """
    avg_amplitude = sum(audio_levels) / len(audio_levels) if audio_levels else 0.0

    # Whole seconds, as reported by the capture clock
    duration_minutes = int((speech_end - speech_start).total_seconds()) / 60.0
    word_count = len([w for w in transcript.split(" ") if w])
    speech_rate = word_count / duration_minutes if duration_minutes > 0 else 0.0

    pause_count = 0
    total_pause_seconds = 0.0
    pause_started_at: int | None = None
    for i in range(1, len(audio_levels)):
        previous, current = audio_levels[i - 1], audio_levels[i]
        if pause_started_at is None and previous > PAUSE_START_ABOVE and current < PAUSE_START_BELOW:
            pause_started_at = i
            pause_count += 1
        if pause_started_at is not None and current > PAUSE_END_ABOVE:
            total_pause_seconds += (i - pause_started_at) * SAMPLE_INTERVAL_MS / 1000.0
            pause_started_at = None

    pause_frequency = pause_count / duration_minutes if duration_minutes > 0 else 0.0
    average_pause = total_pause_seconds / pause_count if pause_count else 0.0
    energy = clamp(avg_amplitude * 0.7 + clamp(speech_rate / 120.0) * 0.3)

    return VoiceMetrics(
        average_amplitude=avg_amplitude,
        speech_rate=speech_rate,
        pause_frequency=pause_frequency,
        average_pause_duration=average_pause,
        energy_level=energy,
        timestamp=now or datetime.now(),
    )


# ---------------------------------------------------------------------------
# Trend over recent analyses
# ---------------------------------------------------------------------------

def _dominant(counts: dict[Any, int]) -> Any:
    """Most frequent key; on a tie the key counted later wins."""
    best = None
    for key, count in counts.items():
        if best is None or not counts[best] > count:
            best = key
    return best


def mood_trend(
    analyses: Sequence[MoodAnalysisResult],
    *,
    days: int = 7,
    now: datetime,
) -> dict[str, Any]:
    """Summarize analyses newer than ``now - days``.

    Returns ``{"trend": "no_data"}`` when nothing falls inside the window.
    """
    cutoff = now - timedelta(days=days)
    recent = [a for a in analyses if a.timestamp > cutoff]
    if not recent:
        return {"trend": "no_data"}

    counts: dict[Mood, int] = {}
    for analysis in recent:
        counts[analysis.detected_mood] = counts.get(analysis.detected_mood, 0) + 1

    return {
        "trend": "available",
        "average_energy": round_half_away(sum(a.energy_level for a in recent) / len(recent)),
        "average_stress": round_half_away(sum(a.stress_level for a in recent) / len(recent)),
        "dominant_mood": _dominant(counts).value,
        "total_analyses": len(recent),
        "mood_distribution": {mood.value: n for mood, n in counts.items()},
    }
