"""ARIA conversation: prompt assembly, streamed replies and session state."""

from __future__ import annotations

import logging
import random
from collections.abc import Callable
from datetime import datetime

from aria.core.llm.client import ConversationLLMClient, StreamingGeneration
from aria.core.llm.system_prompt import HabitContext, build_wellness_system_prompt
from aria.domains.wellness.domain_logic.wellness_models import ChatMessage
from aria.domains.wellness.services.habit_tracking import HabitTrackingService
from aria.domains.wellness.services.mood_analysis import MoodAnalysisService
from aria.domains.wellness.services.wellness_records import WellnessRecordService

logger = logging.getLogger(__name__)

FALLBACK_MESSAGE = (
    "I apologize, but I'm having trouble connecting right now. Please try again in a moment."
)

_MORNING_GREETINGS = (
    "Good morning! I hope you slept well. How are you feeling as you start your day?",
    "Morning! What's on your mind today? I'm here to listen and support you.",
    "Hello there! Ready to tackle a new day? I'd love to hear how you're doing.",
)
_AFTERNOON_GREETINGS = (
    "Good afternoon! How has your day been treating you so far?",
    "Hey! Hope your day is going well. Want to share what's on your mind?",
    "Afternoon check-in! I'm curious how you're feeling right now.",
)
_EVENING_GREETINGS = (
    "Good evening! How are you winding down after your day?",
    "Evening! I hope you're taking some time for yourself. How are you feeling?",
    "Hey there! As the day comes to a close, how are you doing emotionally?",
)
INTRODUCTION = (
    "I'm ARIA, your personal wellness companion. I'm here to listen, support, and help you "
    "with your wellbeing journey. What would you like to talk about?"
)


class ConversationBusyError(RuntimeError):
    """A reply is already being generated."""


class ConversationOrchestrator:
    """Runs one ARIA conversation at a time.

    Each ``send_message`` builds the system prompt from the user's mood,
    stress history and habit progress, then streams the reply. Only one
    generation may be in flight; ``cancel()`` stops it and keeps the
    partial reply.

    Usage::

        chat = ConversationOrchestrator(llm_client, records, moods, habits=habits)
        reply = await chat.send_message("I've been so stressed with deadlines")
    """

    def __init__(
        self,
        llm_client: ConversationLLMClient,
        records: WellnessRecordService,
        moods: MoodAnalysisService,
        *,
        habits: HabitTrackingService | None = None,
        clock: Callable[[], datetime] = datetime.now,
        rng: random.Random | None = None,
    ) -> None:
        self._llm = llm_client
        self._records = records
        self._moods = moods
        self._habits = habits
        self._clock = clock
        self._rng = rng or random.Random()
        self._messages: list[ChatMessage] = []
        self._generation: StreamingGeneration | None = None

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        return tuple(self._messages)

    @property
    def is_generating(self) -> bool:
        return self._generation is not None

    # ------------------------------------------------------------------
    # Prompt
    # ------------------------------------------------------------------

    def _habit_context(self) -> HabitContext | None:
        if self._habits is None:
            return None
        unread = self._habits.unread_insights
        return HabitContext(
            completion_rate=self._habits.overall_progress(7)["completion_rate"],
            todays_count=len(self._habits.todays_habits()),
            recent_insight=unread[0].message if unread else None,
        )

    def system_prompt(self) -> str:
        return build_wellness_system_prompt(
            now=self._clock(),
            recent_stress_levels=self._records.recent_stress_levels(days=7),
            last_check_in=self._records.context.last_wellness_check_in,
            current_mood=self._moods.current_mood,
            habits=self._habit_context(),
        )

    # ------------------------------------------------------------------
    # Messaging
    # ------------------------------------------------------------------

    async def send_message(
        self,
        text: str,
        *,
        on_token: Callable[[str], None] | None = None,
    ) -> ChatMessage | None:
        """Send a user message and stream ARIA's reply.

        Returns:
            The reply (an error message on provider failure, the partial
            text when cancelled), or None for blank input or a
            cancellation before any text arrived.

        Raises:
            ConversationBusyError: A reply is already streaming.
        """
        if self._generation is not None:
            raise ConversationBusyError("ARIA is still replying to the previous message")
        text = text.strip()
        if not text:
            return None

        self._messages.append(ChatMessage(text=text, is_user=True, timestamp=self._clock()))
        generation = self._llm.stream(text, system_prompt=self.system_prompt())
        self._generation = generation

        try:
            async for token in generation.tokens():
                if on_token is not None:
                    on_token(token)
        except Exception:
            logger.exception("Conversation generation failed")
            reply = ChatMessage(
                text=FALLBACK_MESSAGE,
                is_user=False,
                timestamp=self._clock(),
                is_error=True,
            )
            self._messages.append(reply)
            return reply
        finally:
            self._generation = None
            self._llm.log_completion(generation)

        metrics = generation.metrics
        if generation.cancelled:
            if not generation.text:
                return None
            reply = ChatMessage(
                text=generation.text,
                is_user=False,
                timestamp=self._clock(),
                tokens_per_second=metrics.tokens_per_second,
                total_tokens=metrics.tokens_used,
                was_cancelled=True,
            )
            self._messages.append(reply)
            return reply

        reply = ChatMessage(
            text=generation.text,
            is_user=False,
            timestamp=self._clock(),
            tokens_per_second=metrics.tokens_per_second,
            total_tokens=metrics.tokens_used,
        )
        self._messages.append(reply)
        self._records.update_context(
            conversation_depth=len(self._messages),
            last_wellness_check_in=self._clock(),
        )
        self._moods.analyze_text(text)
        return reply

    def cancel(self) -> bool:
        """Stop the in-flight reply, if any."""
        if self._generation is None:
            return False
        self._generation.cancel()
        logger.info("Conversation generation cancelled")
        return True

    def greeting(self) -> str:
        """Pick an opening line for the time of day."""
        now = self._clock()
        if now.hour < 12:
            options = list(_MORNING_GREETINGS)
        elif now.hour < 17:
            options = list(_AFTERNOON_GREETINGS)
        else:
            options = list(_EVENING_GREETINGS)
        if not self._records.recent_entries(days=1):
            options.append(INTRODUCTION)
        return self._rng.choice(options)

    def new_session(self) -> None:
        """Clear the transcript and start a fresh conversation context."""
        if self._generation is not None:
            self._generation.cancel()
        self._messages.clear()
        self._records.start_new_session()
