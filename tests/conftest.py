"""Shared test fixtures for ARIA wellness tests."""

from __future__ import annotations

import sys
from datetime import datetime, timedelta
from pathlib import Path

import pytest

# ---------------------------------------------------------------------------
# Test hermeticity
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _force_hermetic_test_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("LLM_PROVIDER", "mock")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "")
    monkeypatch.setenv("OPENAI_API_KEY", "")
    monkeypatch.setenv("ENCRYPTION_KEY", "")
    monkeypatch.setenv("ARIA_DATA_DIR", str(tmp_path / "aria-data"))

# Allow running tests without `pip install -e .` by making `src/` importable.
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_SRC_DIR = _PROJECT_ROOT / "src"
if str(_SRC_DIR) not in sys.path:
    sys.path.insert(0, str(_SRC_DIR))

from aria.core.storage.collection_store import CollectionStore  # noqa: E402
from aria.domains.wellness.domain_logic.vocabulary import (  # noqa: E402
    HabitDifficulty,
    HabitFrequency,
    HabitType,
)
from aria.domains.wellness.domain_logic.wellness_models import (  # noqa: E402
    HabitCompletion,
    WellnessHabit,
)

# Wednesday morning; day arithmetic in tests is relative to this.
DEFAULT_NOW = datetime(2026, 3, 4, 9, 30)


class FakeClock:
    """Settable clock for services that take a ``clock`` callable."""

    def __init__(self, now: datetime = DEFAULT_NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


def make_habit(
    id: str = "habit-1",
    name: str = "Morning Mindfulness",
    frequency: HabitFrequency = HabitFrequency.DAILY,
    created_at: datetime = DEFAULT_NOW - timedelta(days=30),
    is_active: bool = True,
) -> WellnessHabit:
    """Create a test habit with sensible defaults."""
    return WellnessHabit(
        id=id,
        name=name,
        description="5 minutes of breathing",
        type=HabitType.MEDITATION,
        frequency=frequency,
        difficulty=HabitDifficulty.EASY,
        target_duration_minutes=5,
        created_at=created_at,
        is_active=is_active,
    )


def make_completion(
    completed_at: datetime,
    habit_id: str = "habit-1",
    rating: int | None = None,
) -> HabitCompletion:
    return HabitCompletion(
        id=f"c-{habit_id}-{completed_at.isoformat()}",
        habit_id=habit_id,
        completed_at=completed_at,
        rating=rating,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(tmp_path: Path) -> CollectionStore:
    """A collection store in a fresh temporary directory."""
    return CollectionStore(tmp_path / "data")


@pytest.fixture
def habit_factory():
    """Factory for test habits (see ``make_habit``)."""
    return make_habit


@pytest.fixture
def completion_factory():
    """Factory for test completions (see ``make_completion``)."""
    return make_completion
