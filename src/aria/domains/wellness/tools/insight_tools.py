"""MCP tools for coaching and wellness insights."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from fastmcp import Context, FastMCP

from aria.domains.wellness.tools.habit_tools import insight_payload

if TYPE_CHECKING:
    from aria.domains.wellness.services.daily_checkin import DailyCheckInService
    from aria.domains.wellness.services.habit_tracking import HabitTrackingService

INSIGHT_SOURCES = ("coaching", "wellness", "all")


def register_insight_tools(
    mcp: FastMCP,
    habits: HabitTrackingService,
    checkins: DailyCheckInService,
) -> None:
    """Register insight listing tools on the MCP server."""

    @mcp.tool
    async def list_insights(
        ctx: Context,
        source: str = "all",
        unread_only: bool = False,
    ) -> str:
        """List insights ARIA has generated for you.

        Args:
            source: 'coaching' (habit insights), 'wellness' (check-in insights) or 'all'.
            unread_only: Only return insights you have not read yet.
        """
        if source not in INSIGHT_SOURCES:
            return json.dumps({
                "status": "error",
                "message": f"Unknown source {source!r} (expected one of: {', '.join(INSIGHT_SOURCES)})",
            })
        result: dict[str, list] = {}
        if source in ("coaching", "all"):
            selected = habits.unread_insights if unread_only else habits.insights
            result["coaching"] = [insight_payload(i) for i in selected]
        if source in ("wellness", "all"):
            selected = checkins.unread_insights if unread_only else checkins.insights
            result["wellness"] = [insight_payload(i) for i in selected]
        return json.dumps({"status": "ok", **result})

    @mcp.tool
    async def mark_insight_read(ctx: Context, insight_id: str) -> str:
        """Mark an insight as read.

        Args:
            insight_id: Id of a coaching or wellness insight.
        """
        updated = habits.mark_insight_read(insight_id) or checkins.mark_insight_read(insight_id)
        if updated is None:
            return json.dumps({"status": "error", "message": f"Unknown insight: {insight_id}"})
        return json.dumps({"status": "ok", "insight": insight_payload(updated)})
