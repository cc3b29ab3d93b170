"""MCP tools for talking with ARIA."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from fastmcp import Context, FastMCP

from aria.domains.wellness.services.conversation import ConversationBusyError

if TYPE_CHECKING:
    from aria.domains.wellness.services.conversation import ConversationOrchestrator


def register_conversation_tools(mcp: FastMCP, conversation: ConversationOrchestrator) -> None:
    """Register ARIA conversation tools on the MCP server."""

    @mcp.tool
    async def chat(ctx: Context, message: str) -> str:
        """Send a message to ARIA, your wellness companion, and get a reply.

        Args:
            message: What you want to say.
        """
        try:
            reply = await conversation.send_message(message)
        except ConversationBusyError as exc:
            return json.dumps({"status": "busy", "message": str(exc)})
        if reply is None:
            return json.dumps({"status": "error", "message": "Message is empty"})
        return json.dumps({
            "status": "error" if reply.is_error else "ok",
            "reply": reply.to_dict(),
            "conversation_depth": len(conversation.messages),
        })

    @mcp.tool
    async def new_session(ctx: Context) -> str:
        """Start a fresh conversation with ARIA and get an opening greeting."""
        conversation.new_session()
        return json.dumps({"status": "ok", "greeting": conversation.greeting()})
