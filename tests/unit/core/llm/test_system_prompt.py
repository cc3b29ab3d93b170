"""Tests for the ARIA system prompt builder."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from aria.core.llm.system_prompt import (
    ARIA_PERSONA,
    HabitContext,
    build_wellness_system_prompt,
    time_of_day,
)
from aria.domains.wellness.domain_logic.vocabulary import Mood

NOW = datetime(2026, 3, 4, 9, 30)


class TestTimeOfDay:
    @pytest.mark.parametrize(
        ("hour", "expected"),
        [(0, "morning"), (11, "morning"), (12, "afternoon"), (16, "afternoon"), (17, "evening")],
    )
    def test_buckets(self, hour, expected):
        assert time_of_day(NOW.replace(hour=hour)) == expected


class TestBuildPrompt:
    def test_plain_prompt(self):
        prompt = build_wellness_system_prompt(now=NOW)
        assert prompt == ARIA_PERSONA.format(time_of_day="morning", context="")
        assert "You are ARIA (Adaptive Reality Intelligence Assistant)" in prompt

    def test_high_stress(self):
        prompt = build_wellness_system_prompt(now=NOW, recent_stress_levels=[7, 8, 6])
        assert "higher stress levels recently" in prompt

    def test_low_stress(self):
        prompt = build_wellness_system_prompt(now=NOW, recent_stress_levels=[2, 3])
        assert "managing stress well" in prompt

    def test_moderate_stress_adds_nothing(self):
        prompt = build_wellness_system_prompt(now=NOW, recent_stress_levels=[5, 5])
        assert "stress levels recently" not in prompt
        assert "managing stress well" not in prompt

    def test_long_gap_since_check_in(self):
        prompt = build_wellness_system_prompt(now=NOW, last_check_in=NOW - timedelta(days=3))
        assert "a few days since their last wellness check-in" in prompt
        recent = build_wellness_system_prompt(now=NOW, last_check_in=NOW - timedelta(days=1))
        assert "a few days" not in recent

    def test_mood_guidance(self):
        prompt = build_wellness_system_prompt(now=NOW, current_mood=Mood.ANXIOUS)
        assert "grounding techniques" in prompt

    def test_habit_context(self):
        prompt = build_wellness_system_prompt(
            now=NOW.replace(hour=18),
            habits=HabitContext(completion_rate=0.857, todays_count=2, recent_insight="Keep going!"),
        )
        assert "- Time: evening" in prompt
        assert "(86% completion rate)" in prompt
        assert "They have 2 wellness habits remaining for today." in prompt
        assert "Recent coaching insight: Keep going!" in prompt

    def test_struggling_with_habits(self):
        prompt = build_wellness_system_prompt(now=NOW, habits=HabitContext(completion_rate=0.1))
        assert "struggling with habit consistency (10% rate)" in prompt
