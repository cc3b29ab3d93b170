"""Wellness entries and conversation context (the private collections)."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Any

from aria.core.storage.collection_store import (
    CONVERSATION_CONTEXT,
    WELLNESS_ENTRIES,
    CollectionStore,
)
from aria.domains.wellness.domain_logic.vocabulary import Mood, WellnessActivity
from aria.domains.wellness.domain_logic.wellness_models import (
    ConversationContext,
    MoodAnalysisResult,
    WellnessEntry,
)

logger = logging.getLogger(__name__)


def _check_level(name: str, value: int | None) -> None:
    if value is not None and not 1 <= value <= 10:
        raise ValueError(f"{name} must be between 1 and 10, got {value}")


class WellnessRecordService:
    """Owns the append-only wellness entry log and the conversation context.

    Both collections are stored through the store's private codec.

    Usage::

        records = WellnessRecordService(store)
        entry = records.add_entry(mood=Mood.CALM, energy_level=6, stress_level=2)
        records.recent_entries(days=7)
    """

    def __init__(
        self,
        store: CollectionStore,
        *,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._store = store
        self._clock = clock
        self._entries: list[WellnessEntry] = store.load_records(
            WELLNESS_ENTRIES, WellnessEntry.from_dict
        )
        self._entries.sort(key=lambda e: e.timestamp)
        self._context = self._load_context()

    def _load_context(self) -> ConversationContext:
        raw = self._store.load(CONVERSATION_CONTEXT, default=None)
        if isinstance(raw, dict):
            try:
                return ConversationContext.from_dict(raw)
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Discarding malformed conversation context: %s", exc)
        return ConversationContext(session_start=self._clock())

    # ------------------------------------------------------------------
    # Entries
    # ------------------------------------------------------------------

    @property
    def entries(self) -> tuple[WellnessEntry, ...]:
        return tuple(self._entries)

    def add_entry(
        self,
        *,
        mood: Mood | None = None,
        energy_level: int | None = None,
        stress_level: int | None = None,
        notes: str | None = None,
        activity: WellnessActivity | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> WellnessEntry:
        """Append a new entry stamped with the current time.

        Raises:
            ValueError: If a level is outside 1-10.
        """
        _check_level("energy_level", energy_level)
        _check_level("stress_level", stress_level)
        entry = WellnessEntry(
            id=str(uuid.uuid4()),
            timestamp=self._clock(),
            mood=mood,
            energy_level=energy_level,
            stress_level=stress_level,
            notes=notes,
            activity=activity,
            metadata=dict(metadata or {}),
        )
        self._entries.append(entry)
        self._store.save_records(WELLNESS_ENTRIES, self._entries)
        logger.debug("Wellness entry added: mood=%s source=%s", mood, entry.metadata.get("source"))
        return entry

    def record_analysis(
        self,
        result: MoodAnalysisResult,
        *,
        source: str,
        notes: str | None = None,
    ) -> WellnessEntry:
        """Persist a mood classification as a wellness entry."""
        return self.add_entry(
            mood=result.detected_mood,
            energy_level=result.energy_level,
            stress_level=result.stress_level,
            notes=notes,
            metadata={
                "source": source,
                "confidence": result.confidence,
                "indicators": list(result.indicators),
            },
        )

    def recent_entries(self, days: int = 7) -> tuple[WellnessEntry, ...]:
        cutoff = self._clock() - timedelta(days=days)
        return tuple(e for e in self._entries if e.timestamp > cutoff)

    def recent_stress_levels(self, days: int = 7) -> list[int]:
        return [e.stress_level for e in self.recent_entries(days) if e.stress_level is not None]

    # ------------------------------------------------------------------
    # Conversation context
    # ------------------------------------------------------------------

    @property
    def context(self) -> ConversationContext:
        return self._context

    def update_context(self, **changes: Any) -> ConversationContext:
        """Replace fields of the current context and persist it."""
        self._context = replace(self._context, **changes)
        self._store.save(CONVERSATION_CONTEXT, self._context.to_dict())
        return self._context

    def start_new_session(self) -> ConversationContext:
        """Reset the context, keeping user preferences and the last check-in."""
        previous = self._context
        self._context = ConversationContext(
            session_start=self._clock(),
            user_preferences=dict(previous.user_preferences),
            last_wellness_check_in=previous.last_wellness_check_in,
        )
        self._store.save(CONVERSATION_CONTEXT, self._context.to_dict())
        logger.info("Started new conversation session")
        return self._context
