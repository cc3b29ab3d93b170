"""Tests for keyword and voice based mood classification."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from aria.domains.wellness.domain_logic.mood_classifier import (
    classify,
    compute_voice_metrics,
    mood_trend,
)
from aria.domains.wellness.domain_logic.vocabulary import Mood
from aria.domains.wellness.domain_logic.wellness_models import (
    MoodAnalysisResult,
    VoiceMetrics,
)

NOW = datetime(2026, 3, 4, 9, 30)


def _voice(**overrides) -> VoiceMetrics:
    values = {
        "average_amplitude": 0.1,
        "speech_rate": 120.0,
        "pause_frequency": 1.0,
        "average_pause_duration": 0.3,
        "energy_level": 0.5,
        "timestamp": NOW,
    }
    values.update(overrides)
    return VoiceMetrics(**values)


def _analysis(mood: Mood, energy: int, stress: int, *, hours_ago: float = 1) -> MoodAnalysisResult:
    return MoodAnalysisResult(
        detected_mood=mood,
        confidence=0.7,
        energy_level=energy,
        stress_level=stress,
        indicators=(),
        timestamp=NOW - timedelta(hours=hours_ago),
    )


class TestClassifyText:
    def test_stress_keywords(self):
        result = classify("I am so stressed and overwhelmed with deadlines", now=NOW)
        assert result.detected_mood is Mood.STRESSED
        assert result.confidence == pytest.approx(0.6)
        assert result.stress_level == 8
        assert result.energy_level == 7
        assert "stress indicators in text" in result.indicators
        assert result.timestamp == NOW

    def test_positive_language(self):
        result = classify("I feel happy and grateful today", now=NOW)
        assert result.detected_mood is Mood.HAPPY
        assert result.confidence == 0.8
        assert result.energy_level == 8
        assert result.stress_level == 5

    def test_negative_language(self):
        result = classify("Everything is awful and I am so upset", now=NOW)
        assert result.detected_mood is Mood.ANXIOUS
        assert result.confidence == 0.7
        assert "negative emotional language" in result.indicators

    def test_low_energy(self):
        result = classify("I'm so tired", now=NOW)
        assert result.detected_mood is Mood.TIRED
        assert result.confidence == 0.6

    def test_high_energy(self):
        result = classify("Feeling motivated", now=NOW)
        assert result.detected_mood is Mood.ENERGETIC

    def test_plain_text_reads_as_energetic(self):
        result = classify("just had lunch", now=NOW)
        assert result.detected_mood is Mood.ENERGETIC
        assert result.confidence == 0.7
        assert result.energy_level == 7
        assert result.stress_level == 5
        assert result.indicators == ("high energy detected",)

    def test_single_positive_word_lifts_energy(self):
        result = classify("feeling good", now=NOW)
        assert result.detected_mood is Mood.ENERGETIC
        assert result.energy_level == 8

    def test_keywords_match_inside_words(self):
        assert classify("so much sadness and anger, angry and upset", now=NOW).detected_mood is Mood.ANXIOUS

    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    def test_empty_text_yields_nothing(self, text):
        assert classify(text, now=NOW) is None

    def test_is_deterministic(self):
        text = "Pressure at work, but the team is great"
        assert classify(text, now=NOW) == classify(text, now=NOW)

    def test_levels_stay_in_range(self):
        text = " ".join(["stressed anxious worried overwhelmed panic pressure deadline"] * 3)
        result = classify(text + " sad awful terrible", voice_metrics=_voice(pause_frequency=10), now=NOW)
        assert 1 <= result.stress_level <= 10
        assert 1 <= result.energy_level <= 10
        assert result.confidence <= 0.9


class TestClassifyWithVoice:
    def test_hesitant_speech_adds_stress(self):
        result = classify("I have a deadline", voice_metrics=_voice(pause_frequency=4.0), now=NOW)
        assert result.detected_mood is Mood.STRESSED
        assert result.stress_level == 9
        assert result.indicators[0] == "hesitant speech pattern"
        assert result.voice_metrics is not None

    def test_unusual_rate_is_flagged(self):
        result = classify("Hello there", voice_metrics=_voice(speech_rate=220.0), now=NOW)
        assert "unusual speech rate" in result.indicators

    def test_low_voice_energy_means_tired(self):
        result = classify("Hello there", voice_metrics=_voice(energy_level=0.2), now=NOW)
        assert result.detected_mood is Mood.TIRED
        assert "low voice energy" in result.indicators

    def test_moderate_voice_energy_is_calm(self):
        result = classify("Hello there", voice_metrics=_voice(), now=NOW)
        assert result.detected_mood is Mood.CALM
        assert result.confidence == 0.5
        assert result.energy_level == 5
        assert result.indicators == ("neutral emotional state",)

    def test_high_voice_energy_means_energetic(self):
        result = classify("Hello there", voice_metrics=_voice(energy_level=0.9), now=NOW)
        assert result.detected_mood is Mood.ENERGETIC
        assert result.energy_level == 7


class TestComputeVoiceMetrics:
    def test_rate_and_pauses(self):
        start = NOW
        end = NOW + timedelta(seconds=30)
        metrics = compute_voice_metrics(
            [0.05, 0.005, 0.005, 0.05],
            start,
            end,
            "one two three four five",
            now=NOW,
        )
        assert metrics.speech_rate == pytest.approx(10.0)
        assert metrics.pause_frequency == pytest.approx(2.0)
        assert metrics.average_pause_duration == pytest.approx(0.2)
        assert metrics.average_amplitude == pytest.approx(0.0275)
        assert metrics.energy_level == pytest.approx(0.0275 * 0.7 + (10 / 120) * 0.3)

    def test_zero_duration_has_no_rate(self):
        metrics = compute_voice_metrics([0.1, 0.2], NOW, NOW, "hello", now=NOW)
        assert metrics.speech_rate == 0.0
        assert metrics.pause_frequency == 0.0

    def test_no_levels(self):
        metrics = compute_voice_metrics([], NOW, NOW + timedelta(seconds=60), "", now=NOW)
        assert metrics.average_amplitude == 0.0
        assert metrics.energy_level == 0.0


class TestMoodTrend:
    def test_no_data(self):
        assert mood_trend([], now=NOW) == {"trend": "no_data"}

    def test_old_analyses_are_ignored(self):
        assert mood_trend([_analysis(Mood.CALM, 5, 5, hours_ago=24 * 8)], now=NOW) == {"trend": "no_data"}

    def test_summary(self):
        trend = mood_trend(
            [
                _analysis(Mood.STRESSED, 3, 8),
                _analysis(Mood.STRESSED, 4, 7),
                _analysis(Mood.CALM, 6, 2),
            ],
            now=NOW,
        )
        assert trend["trend"] == "available"
        assert trend["dominant_mood"] == "stressed"
        assert trend["average_energy"] == 4  # 13/3
        assert trend["average_stress"] == 6  # 17/3
        assert trend["total_analyses"] == 3
        assert trend["mood_distribution"] == {"stressed": 2, "calm": 1}

    def test_tie_goes_to_later_mood(self):
        trend = mood_trend([_analysis(Mood.HAPPY, 8, 2), _analysis(Mood.TIRED, 2, 5)], now=NOW)
        assert trend["dominant_mood"] == "tired"
