"""MCP Prompts: pre-built interaction templates for wellness journeys."""

from __future__ import annotations

from fastmcp import FastMCP


def register_wellness_prompts(mcp: FastMCP) -> None:
    """Register wellness domain MCP prompts."""

    @mcp.prompt()
    def daily_checkin_prompt() -> str:
        """Prompt template for a guided daily wellness check-in."""
        return """I'd like to do my daily wellness check-in. Please:

1. Ask me how I'm feeling emotionally and record my mood
2. Ask for my energy and stress levels (1-10)
3. Ask what I'm grateful for today
4. Tell me about any insights from my recent check-ins

Keep it warm and conversational, one question at a time."""

    @mcp.prompt()
    def habit_review_prompt(time_period: str = "this week") -> str:
        """Prompt template for reviewing habit progress over a period."""
        return f"""Let's review my wellness habits for {time_period}. I'd like to:

1. See which habits I kept up with and my current streaks
2. Understand where I struggled
3. Decide whether any habit needs a smaller goal or different timing
4. Celebrate what went well

Please focus on progress over perfection."""

    @mcp.prompt()
    def meditation_prompt(mood: str = "") -> str:
        """Prompt template for choosing and starting a meditation."""
        feeling = f"I'm feeling {mood} right now. " if mood else ""
        return f"""{feeling}I'd like to take a few minutes for mindfulness.

Please recommend a meditation that suits how I feel, show me the guided
script, and tell me how my practice has been going lately."""
