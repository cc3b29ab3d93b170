"""MCP tools for wellness habits: create, complete, archive and track progress."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from fastmcp import Context, FastMCP

from aria.domains.wellness.domain_logic.vocabulary import (
    HabitDifficulty,
    HabitFrequency,
    HabitType,
    parse_enum,
    presentation,
)
from aria.domains.wellness.domain_logic.wellness_models import Insight, WellnessHabit

if TYPE_CHECKING:
    from aria.domains.wellness.services.habit_tracking import HabitTrackingService

logger = logging.getLogger(__name__)


def habit_payload(habit: WellnessHabit) -> dict[str, Any]:
    """Stored habit fields plus its display icon and color."""
    payload = habit.to_dict()
    look = presentation(habit.type)
    payload["type_label"] = look.label
    payload["icon"] = look.icon
    payload["color"] = look.color
    return payload


def insight_payload(insight: Insight) -> dict[str, Any]:
    payload = insight.to_dict()
    look = presentation(insight.category)
    payload["icon"] = look.icon
    payload["color"] = look.color
    return payload


def _error(message: str) -> str:
    return json.dumps({"status": "error", "message": message})


def register_habit_tools(mcp: FastMCP, habits: HabitTrackingService) -> None:
    """Register habit tracking tools on the MCP server."""

    @mcp.tool
    async def list_habits(ctx: Context, include_archived: bool = False) -> str:
        """List your wellness habits.

        Args:
            include_archived: Also include habits you have archived.
        """
        selected = habits.habits if include_archived else habits.active_habits
        return json.dumps({
            "status": "ok",
            "count": len(selected),
            "habits": [habit_payload(h) for h in selected],
        })

    @mcp.tool
    async def create_habit(
        ctx: Context,
        name: str,
        habit_type: str,
        frequency: str = "daily",
        difficulty: str = "easy",
        target_duration_minutes: int = 5,
        description: str = "",
        custom_frequency: str = "",
    ) -> str:
        """Create a new wellness habit.

        Args:
            name: Short habit name (e.g., 'Evening Stretch').
            habit_type: One of exercise, meditation, sleep, hydration, nutrition,
                socializing, learning, creativity, outdoors, gratitude,
                breathingExercise, stretching, reading, journaling, selfCare.
            frequency: daily, weekdays, weekends, weekly, biweekly or custom.
            difficulty: easy, moderate or challenging.
            target_duration_minutes: How long the habit takes.
            description: Optional longer description.
            custom_frequency: Free-form schedule note for custom habits.
        """
        try:
            created = habits.create_habit(
                name=name,
                description=description,
                habit_type=parse_enum(HabitType, habit_type),
                frequency=parse_enum(HabitFrequency, frequency),
                difficulty=parse_enum(HabitDifficulty, difficulty),
                target_duration_minutes=target_duration_minutes,
                custom_frequency=custom_frequency or None,
            )
        except ValueError as exc:
            return _error(str(exc))
        return json.dumps({
            "status": "created",
            "habit": habit_payload(created.habit),
            "insights": [insight_payload(i) for i in created.insights],
        })

    @mcp.tool
    async def complete_habit(
        ctx: Context,
        habit_id: str,
        notes: str = "",
        rating: int | None = None,
    ) -> str:
        """Mark a habit as done for today.

        Args:
            habit_id: Id of the habit (see list_habits).
            notes: Optional notes about how it went.
            rating: Optional 1-5 rating of the session.
        """
        try:
            done = habits.complete_habit(habit_id, notes=notes or None, rating=rating)
        except KeyError as exc:
            return _error(exc.args[0])
        except ValueError as exc:
            return _error(str(exc))
        return json.dumps({
            "status": "completed",
            "completion": done.completion.to_dict(),
            "stats": done.stats.to_dict(),
            "insights": [insight_payload(i) for i in done.insights],
        })

    @mcp.tool
    async def archive_habit(ctx: Context, habit_id: str) -> str:
        """Archive a habit. Its history is kept; it stops appearing in today's list.

        Args:
            habit_id: Id of the habit to archive.
        """
        try:
            archived = habits.archive_habit(habit_id)
        except KeyError as exc:
            return _error(exc.args[0])
        return json.dumps({"status": "archived", "habit": habit_payload(archived)})

    @mcp.tool
    async def habit_stats(ctx: Context, habit_id: str, days: int = 7) -> str:
        """Streak, completion rate and rating summary for one habit.

        Args:
            habit_id: Id of the habit.
            days: Size of the trailing window in days.
        """
        try:
            stats = habits.habit_stats(habit_id, days=days)
        except KeyError as exc:
            return _error(exc.args[0])
        return json.dumps({"status": "ok", "stats": stats.to_dict()})

    @mcp.tool
    async def todays_habits(ctx: Context) -> str:
        """Habits still due today."""
        due = habits.todays_habits()
        return json.dumps({
            "status": "ok",
            "count": len(due),
            "habits": [habit_payload(h) for h in due],
        })

    @mcp.tool
    async def habit_progress(ctx: Context, days: int = 7) -> str:
        """Overall completion rate across all active habits.

        Args:
            days: Size of the trailing window in days.
        """
        return json.dumps({"status": "ok", "progress": habits.overall_progress(days)})

    @mcp.tool
    async def coaching_message(ctx: Context) -> str:
        """ARIA's current coaching message about your habits."""
        return json.dumps({"status": "ok", "message": habits.coaching_message()})
