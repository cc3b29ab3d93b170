"""JSON collection store for the wellness data bank.

Each logical collection lives in one file under the data directory and is
read and written whole. A missing file loads as an empty collection. A
corrupt or undecodable file also loads as empty (the failure is logged);
the next save overwrites it. Save failures are logged and reported through
the return value, never raised.

There is no atomic rename: a crash mid-write can leave a corrupt file,
which then loads as empty.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any, TypeVar

from aria.core.storage.codecs import Base64Codec, Codec, CodecError, PlainCodec

logger = logging.getLogger(__name__)

T = TypeVar("T")

# ---------------------------------------------------------------------------
# Collection layout
# ---------------------------------------------------------------------------

HABITS = "habits"
HABIT_COMPLETIONS = "habit_completions"
COACHING_INSIGHTS = "coaching_insights"
DAILY_CHECKINS = "daily_checkins"
WELLNESS_INSIGHTS = "wellness_insights"
WELLNESS_ENTRIES = "wellness_entries"
CONVERSATION_CONTEXT = "conversation_context"
MEDITATION_SESSIONS = "meditation_sessions"
INSIGHT_CURSOR = "insight_cursor"

COLLECTION_FILES: dict[str, str] = {
    HABITS: "wellness_habits.json",
    HABIT_COMPLETIONS: "habit_completions.json",
    COACHING_INSIGHTS: "coaching_insights.json",
    DAILY_CHECKINS: "daily_checkins.json",
    WELLNESS_INSIGHTS: "wellness_insights.json",
    WELLNESS_ENTRIES: "wellness_data.json",
    CONVERSATION_CONTEXT: "conversation_context.json",
    MEDITATION_SESSIONS: "meditation_sessions.json",
    INSIGHT_CURSOR: "insight_cursor.json",
}

PRIVATE_COLLECTIONS = frozenset({WELLNESS_ENTRIES, CONVERSATION_CONTEXT})


class CollectionStoreError(Exception):
    """Raised for misuse of the store (unknown collection names)."""


class CollectionStore:
    """Whole-file JSON persistence, one file per collection.

    Usage::

        store = CollectionStore("~/.aria")
        store.save("habits", [habit.to_dict() for habit in habits])
        raw = store.load("habits", default=[])
    """

    def __init__(self, data_dir: str | Path, private_codec: Codec | None = None) -> None:
        self.data_dir = Path(data_dir).expanduser()
        self._plain = PlainCodec()
        self._private = private_codec or Base64Codec()

    def path(self, collection: str) -> Path:
        try:
            return self.data_dir / COLLECTION_FILES[collection]
        except KeyError:
            raise CollectionStoreError(f"Unknown collection: {collection!r}") from None

    def _codec(self, collection: str) -> Codec:
        return self._private if collection in PRIVATE_COLLECTIONS else self._plain

    def load(self, collection: str, default: Any) -> Any:
        """Read a collection, falling back to ``default`` when missing or corrupt."""
        file_path = self.path(collection)
        if not file_path.exists():
            return default
        try:
            stored = file_path.read_text(encoding="utf-8")
            return json.loads(self._codec(collection).decode(stored))
        except (OSError, CodecError, json.JSONDecodeError) as exc:
            logger.warning("Could not load %s from %s, starting empty: %s", collection, file_path, exc)
            return default

    def save(self, collection: str, payload: Any) -> bool:
        """Overwrite a collection. Returns False (and logs) on failure."""
        file_path = self.path(collection)
        try:
            text = json.dumps(payload, separators=(",", ":"))
            self.data_dir.mkdir(parents=True, exist_ok=True)
            file_path.write_text(self._codec(collection).encode(text), encoding="utf-8")
        except (OSError, TypeError, ValueError, CodecError) as exc:
            logger.error("Failed to save %s to %s: %s", collection, file_path, exc)
            return False
        logger.debug("Saved %s (%s)", collection, file_path)
        return True

    def load_records(
        self,
        collection: str,
        from_dict: Callable[[dict[str, Any]], T],
    ) -> list[T]:
        """Load a list collection, rebuilding each record with ``from_dict``.

        Records that fail to rebuild (unknown enum values, missing fields)
        are dropped with a warning; the rest of the collection survives.
        """
        raw = self.load(collection, default=[])
        if not isinstance(raw, list):
            logger.warning("Collection %s is not a list, starting empty", collection)
            return []
        records: list[T] = []
        for item in raw:
            try:
                records.append(from_dict(item))
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping malformed %s record: %s", collection, exc)
        return records

    def save_records(self, collection: str, records: Iterable[Any]) -> bool:
        """Save records that expose ``to_dict()``."""
        return self.save(collection, [record.to_dict() for record in records])
