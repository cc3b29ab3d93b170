"""MCP tools for guided meditation."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from fastmcp import Context, FastMCP

from aria.domains.wellness.domain_logic import meditation_scripts
from aria.domains.wellness.domain_logic.vocabulary import (
    MeditationLevel,
    MeditationType,
    Mood,
    SessionDuration,
    parse_enum,
    presentation,
)

if TYPE_CHECKING:
    from aria.domains.wellness.services.mindfulness import MindfulnessService
    from aria.domains.wellness.services.mood_analysis import MoodAnalysisService


def register_meditation_tools(
    mcp: FastMCP,
    mindfulness: MindfulnessService,
    moods: MoodAnalysisService,
) -> None:
    """Register meditation tools on the MCP server."""

    @mcp.tool
    async def meditation_recommendation(ctx: Context, mood: str = "") -> str:
        """Suggest a meditation for a mood (defaults to your current mood).

        Args:
            mood: Optional mood name; when empty the last detected mood is used.
        """
        try:
            selected = parse_enum(Mood, mood) if mood else moods.current_mood
        except ValueError as exc:
            return json.dumps({"status": "error", "message": str(exc)})
        recommended = mindfulness.recommend(selected)
        look = presentation(recommended)
        return json.dumps({
            "status": "ok",
            "mood": selected.value if selected else None,
            "meditation_type": recommended.value,
            "label": look.label,
            "icon": look.icon,
            "color": look.color,
        })

    @mcp.tool
    async def meditation_script(
        ctx: Context,
        meditation_type: str,
        duration: str = "short",
        level: str = "beginner",
        custom_minutes: int | None = None,
    ) -> str:
        """Generate the segments of a guided meditation.

        Args:
            meditation_type: guidedMeditation, breathingExercise, bodyscan,
                lovingKindness, mindfulnessBreak, sleepMeditation, anxietyRelief,
                stressRelease, focusBoost or gratitudePractice.
            duration: quick (3 min), short (7), medium (12), long (25) or custom.
            level: beginner, intermediate or advanced.
            custom_minutes: Length in minutes when duration is 'custom'.
        """
        try:
            kind = parse_enum(MeditationType, meditation_type)
            length = parse_enum(SessionDuration, duration)
            tier = parse_enum(MeditationLevel, level)
        except ValueError as exc:
            return json.dumps({"status": "error", "message": str(exc)})
        if custom_minutes is not None and custom_minutes < 3:
            return json.dumps({"status": "error", "message": "custom_minutes must be at least 3"})
        segments = mindfulness.script(kind, length, tier, custom_minutes)
        return json.dumps({
            "status": "ok",
            "meditation_type": kind.value,
            "minutes": meditation_scripts.session_minutes(length, custom_minutes),
            "total_seconds": sum(s.duration_seconds for s in segments),
            "segments": [s.to_dict() for s in segments],
        })

    @mcp.tool
    async def meditation_stats(ctx: Context, days: int = 30) -> str:
        """Completed sessions, minutes, average rating, streak and favorite practice.

        Args:
            days: Size of the trailing window in days.
        """
        return json.dumps({
            "status": "ok",
            "stats": mindfulness.stats(days),
            "message": mindfulness.message(),
        })
