"""MCP tools for the daily wellness check-in."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from fastmcp import Context, FastMCP

from aria.domains.wellness.domain_logic.vocabulary import CheckInCategory, parse_enum
from aria.domains.wellness.services.daily_checkin import CheckInNotStartedError
from aria.domains.wellness.tools.habit_tools import insight_payload

if TYPE_CHECKING:
    from aria.domains.wellness.services.daily_checkin import DailyCheckInService

logger = logging.getLogger(__name__)


def register_checkin_tools(mcp: FastMCP, checkins: DailyCheckInService) -> None:
    """Register daily check-in tools on the MCP server."""

    @mcp.tool
    async def record_checkin_response(
        ctx: Context,
        category: str,
        value: str | float,
    ) -> str:
        """Answer one question of today's wellness check-in.

        Answering the same category again today replaces the earlier answer.

        Args:
            category: mood, energy, stress, sleep, gratitude, challenges, goals or reflection.
            value: The answer. Mood takes a mood name (e.g. 'calm'); energy and
                stress take a 1-10 number; the others take free text.
        """
        try:
            update = checkins.record_response(parse_enum(CheckInCategory, category), value)
        except ValueError as exc:
            return json.dumps({"status": "error", "message": str(exc)})
        return json.dumps({
            "status": "recorded",
            "checkin": update.checkin.to_dict(),
            "insights": [insight_payload(i) for i in update.insights],
        })

    @mcp.tool
    async def complete_checkin(ctx: Context, notes: str = "") -> str:
        """Finish today's check-in, optionally adding notes.

        Args:
            notes: Anything else you want to remember about today.
        """
        try:
            update = checkins.complete_checkin(notes or None)
        except CheckInNotStartedError as exc:
            return json.dumps({"status": "error", "message": str(exc)})
        return json.dumps({
            "status": "completed",
            "checkin": update.checkin.to_dict(),
            "insights": [insight_payload(i) for i in update.insights],
            "message": checkins.message(),
        })

    @mcp.tool
    async def checkin_stats(ctx: Context, days: int = 30) -> str:
        """Check-in totals, streak and mood/energy/stress trends.

        Args:
            days: Size of the trailing window in days.
        """
        return json.dumps({"status": "ok", "stats": checkins.stats(days)})

    @mcp.tool
    async def checkin_questions(ctx: Context) -> str:
        """Today's check-in questions, tailored to your recent trends."""
        today = checkins.today_checkin()
        return json.dumps({
            "status": "ok",
            "message": checkins.message(),
            "questions": checkins.questions(),
            "today": today.to_dict() if today else None,
        })
