"""MCP tools for mood classification and logging."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from fastmcp import Context, FastMCP

from aria.domains.wellness.domain_logic.vocabulary import (
    Mood,
    WellnessActivity,
    parse_enum,
    presentation,
)
from aria.domains.wellness.domain_logic.wellness_models import MoodAnalysisResult

if TYPE_CHECKING:
    from aria.domains.wellness.services.mood_analysis import MoodAnalysisService


def _analysis_payload(result: MoodAnalysisResult) -> dict:
    payload = result.to_dict()
    look = presentation(result.detected_mood)
    payload["mood_label"] = look.label
    payload["icon"] = look.icon
    payload["color"] = look.color
    return payload


def register_mood_tools(mcp: FastMCP, moods: MoodAnalysisService) -> None:
    """Register mood analysis tools on the MCP server."""

    @mcp.tool
    async def classify_mood(
        ctx: Context,
        text: str,
        audio_levels: list[float] | None = None,
        speech_seconds: float | None = None,
    ) -> str:
        """Detect the mood expressed in a message and log it.

        Pass ``audio_levels`` (0-1, sampled at 10 Hz) and ``speech_seconds``
        when the text is a voice transcript to include speech rate, pauses and
        vocal energy in the analysis.

        Args:
            text: What the user said or wrote.
            audio_levels: Optional microphone levels captured while speaking.
            speech_seconds: Optional length of the spoken utterance in seconds.
        """
        if audio_levels is not None and speech_seconds is not None:
            result = moods.analyze_utterance(audio_levels, speech_seconds, text)
        else:
            result = moods.analyze_text(text)
        if result is None:
            return json.dumps({"status": "no_result", "message": "No mood could be detected"})
        return json.dumps({"status": "ok", "analysis": _analysis_payload(result)})

    @mcp.tool
    async def log_mood(
        ctx: Context,
        mood: str,
        notes: str = "",
        activity: str = "",
    ) -> str:
        """Log how you feel right now.

        Args:
            mood: energetic, calm, stressed, tired, happy, anxious, focused or overwhelmed.
            notes: Optional notes.
            activity: Optional activity (meditation, exercise, sleep, nutrition,
                socializing, work, relaxation, learning).
        """
        try:
            selected = parse_enum(Mood, mood)
            chosen_activity = parse_enum(WellnessActivity, activity) if activity else None
        except ValueError as exc:
            return json.dumps({"status": "error", "message": str(exc)})
        entry = moods.log_manual_mood(selected, notes=notes or None, activity=chosen_activity)
        look = presentation(selected)
        return json.dumps({
            "status": "logged",
            "entry": entry.to_dict(),
            "mood_label": look.label,
            "icon": look.icon,
            "color": look.color,
        })

    @mcp.tool
    async def mood_trend(ctx: Context, days: int = 7) -> str:
        """Average energy and stress, dominant mood and mood distribution.

        Args:
            days: Size of the trailing window in days.
        """
        return json.dumps({"status": "ok", "trend": moods.trend(days)})
