"""ARIA Wellness MCP Server: application factory.

This module provides:
- create_app() for testability (integration tests create fresh server instances)
- Module-level `mcp` variable for FastMCP discovery
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from fastmcp import FastMCP

from aria.core.config.settings import get_settings
from aria.core.llm.client import ConversationLLMClient
from aria.core.llm.provider import LLMProvider, create_provider
from aria.core.storage.codecs import CodecError, private_codec
from aria.core.storage.collection_store import CollectionStore
from aria.domains.wellness.prompts.wellness_prompts import register_wellness_prompts
from aria.domains.wellness.services.conversation import ConversationOrchestrator
from aria.domains.wellness.services.daily_checkin import DailyCheckInService
from aria.domains.wellness.services.habit_tracking import HabitTrackingService
from aria.domains.wellness.services.mindfulness import MindfulnessService
from aria.domains.wellness.services.mood_analysis import MoodAnalysisService
from aria.domains.wellness.services.wellness_records import WellnessRecordService
from aria.domains.wellness.tools.checkin_tools import register_checkin_tools
from aria.domains.wellness.tools.conversation_tools import register_conversation_tools
from aria.domains.wellness.tools.habit_tools import register_habit_tools
from aria.domains.wellness.tools.insight_tools import register_insight_tools
from aria.domains.wellness.tools.meditation_tools import register_meditation_tools
from aria.domains.wellness.tools.mood_tools import register_mood_tools

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


def _select_provider(settings) -> LLMProvider:
    if settings.llm_provider == "mock":
        provider_name = "mock"
        api_key = ""
        model = ""
    elif settings.llm_provider == "anthropic":
        api_key = settings.anthropic_api_key
        model = settings.anthropic_model
        provider_name = "anthropic" if api_key else "mock"
    elif settings.llm_provider == "openai":
        api_key = settings.openai_api_key
        model = settings.openai_model
        provider_name = "openai" if api_key else "mock"
    else:  # pragma: no cover
        raise ValueError(f"Unknown LLM provider: {settings.llm_provider!r}")

    if provider_name == "mock" and settings.llm_provider != "mock":
        logger.warning(
            "No API key configured for provider '%s'; falling back to mock provider",
            settings.llm_provider,
        )

    return create_provider(provider_name=provider_name, api_key=api_key, model=model)


def create_app(
    *,
    store_override: CollectionStore | None = None,
    provider_override: LLMProvider | None = None,
    clock: Callable[[], datetime] = datetime.now,
) -> FastMCP:
    """Create and configure the ARIA Wellness MCP server.

    This is the main application factory. It:
    1. Creates the FastMCP server instance
    2. Opens the collection store (the local wellness data bank)
    3. Creates the conversation LLM client
    4. Builds the wellness services and seeds default habits
    5. Registers all tools and prompts
    """
    settings = get_settings()

    # --- Server instance ---
    server = FastMCP(
        "ARIA Wellness",
        instructions=(
            "ARIA (Adaptive Reality Intelligence Assistant) wellness companion. "
            "Tracks moods, habits, daily check-ins and meditation locally, "
            "generates coaching insights, and holds supportive conversations "
            "through a conversational LLM."
        ),
    )

    # --- Initialize storage (wellness data bank) ---
    if store_override is not None:
        store = store_override
    else:
        try:
            codec = private_codec(settings.encryption_key)
        except CodecError as exc:
            logger.error("Invalid ENCRYPTION_KEY: %s", exc)
            logger.warning("Falling back to base64 obfuscation for private collections")
            codec = private_codec("")
        store = CollectionStore(settings.aria_data_dir, private_codec=codec)
    logger.info("Wellness data bank: %s", store.data_dir)

    # --- Initialize conversation LLM ---
    provider = provider_override or _select_provider(settings)
    llm_client = ConversationLLMClient(
        provider,
        max_tokens=settings.max_tokens,
        temperature=settings.temperature,
    )

    # --- Wellness services ---
    records = WellnessRecordService(store, clock=clock)
    moods = MoodAnalysisService(records, clock=clock, listen_seconds=settings.voice_listen_seconds)
    habits = HabitTrackingService(store, clock=clock, seed_defaults=settings.seed_default_habits)
    habits.initialize()
    mindfulness = MindfulnessService(store, clock=clock)
    checkins = DailyCheckInService(store, habits=habits, mindfulness=mindfulness, clock=clock)
    conversation = ConversationOrchestrator(llm_client, records, moods, habits=habits, clock=clock)

    # --- Register tools ---
    @server.tool
    def health_check() -> dict:
        """Check server health and return basic status information."""
        return {
            "status": "ok",
            "server": "ARIA Wellness",
            "version": VERSION,
            "llm_model": getattr(provider, "model", ""),
            "data_dir": str(store.data_dir),
            "active_habits": len(habits.active_habits),
            "checkins_stored": len(checkins.checkins),
            "meditation_sessions": len(mindfulness.sessions),
        }

    register_mood_tools(server, moods)
    register_habit_tools(server, habits)
    register_insight_tools(server, habits, checkins)
    register_checkin_tools(server, checkins)
    register_meditation_tools(server, mindfulness, moods)
    register_conversation_tools(server, conversation)
    logger.info("Wellness tools registered")

    # --- Register prompts ---
    register_wellness_prompts(server)

    return server


# Module-level instance for FastMCP discovery ("...app.py:mcp").
# Lazy: only created when this module is loaded directly (not when tests import create_app).
def __getattr__(name: str):
    if name == "mcp":
        global mcp  # noqa: PLW0603
        mcp = create_app()
        return mcp
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
