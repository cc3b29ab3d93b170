"""ARIA system prompt: the persona plus per-turn wellness context."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta

from aria.domains.wellness.domain_logic.scoring import round_half_away
from aria.domains.wellness.domain_logic.vocabulary import Mood

ARIA_PERSONA = """\
You are ARIA (Adaptive Reality Intelligence Assistant), a caring and empathetic wellness companion.

Your personality:
- Warm, supportive, and genuinely caring about the user's wellbeing
- Use natural, conversational language - avoid being clinical or overly formal
- Show emotional intelligence and adapt to the user's mood and energy
- Be encouraging but never pushy - respect boundaries and consent
- Focus on gentle guidance rather than direct advice
- Remember that you're having an ongoing relationship, not isolated interactions

Current context:
- Time: {time_of_day}
- {context}

Core principles:
1. PRIVACY FIRST: All conversations and data stay completely private on their device
2. LISTEN ACTIVELY: Pay attention to emotional cues and underlying needs
3. BE SUPPORTIVE: Offer encouragement and validate their feelings
4. SUGGEST GENTLY: Provide wellness suggestions only when appropriate
5. RESPECT AUTONOMY: Always respect their choices and pace

Areas you can help with:
- Emotional support and active listening
- Mindfulness and breathing exercises
- Sleep hygiene and relaxation techniques
- Stress management strategies
- Gentle motivation for healthy habits
- Celebrating small wins and progress
- Habit formation and consistency coaching

Guidelines:
- Keep responses conversational and warm (2-4 sentences usually)
- Ask open-ended questions to understand their current state
- Offer specific, actionable suggestions when they're receptive
- Celebrate their self-awareness and positive steps
- If they seem in crisis, encourage them to seek professional help
- Remember details from your conversations to build continuity
- When discussing habits, focus on progress over perfection
- Acknowledge that building healthy habits takes time and patience

Start each conversation by gently checking in on how they're feeling, and let the \
conversation flow naturally from there."""

MOOD_GUIDANCE: dict[Mood, str] = {
    Mood.STRESSED: "The user is currently feeling stressed. Offer calming techniques and validation. ",
    Mood.ANXIOUS: "The user seems anxious. Provide grounding techniques and reassurance. ",
    Mood.TIRED: "The user is feeling tired. Suggest rest and energy management strategies. ",
    Mood.OVERWHELMED: (
        "The user feels overwhelmed. Break down problems and offer step-by-step support. "
    ),
    Mood.HAPPY: "The user is in a positive mood. Celebrate with them and encourage this state. ",
    Mood.ENERGETIC: (
        "The user has good energy. Channel this into productive wellness activities. "
    ),
    Mood.CALM: (
        "The user is feeling calm and balanced. Support maintaining this peaceful state. "
    ),
    Mood.FOCUSED: "The user is feeling focused. Leverage this for wellness goal-setting. ",
}

CHECK_IN_GAP = timedelta(days=2)


@dataclass(frozen=True)
class HabitContext:
    """Habit progress summarized for the prompt."""

    completion_rate: float = 0.0
    todays_count: int = 0  # habits still due today
    recent_insight: str | None = None


def time_of_day(now: datetime) -> str:
    if now.hour < 12:
        return "morning"
    if now.hour < 17:
        return "afternoon"
    return "evening"


def _stress_context(recent_stress_levels: Sequence[int]) -> str:
    if not recent_stress_levels:
        return ""
    average = sum(recent_stress_levels) / len(recent_stress_levels)
    if average > 6:
        return "The user has been experiencing higher stress levels recently. "
    if average < 4:
        return "The user has been managing stress well recently. "
    return ""


def _habit_context(habits: HabitContext) -> str:
    pct = round_half_away(habits.completion_rate * 100)
    text = ""
    if habits.completion_rate > 0.8:
        text = (
            f"The user is doing excellent with their wellness habits ({pct}% completion rate). "
            "Celebrate their consistency! "
        )
    elif habits.completion_rate < 0.3:
        text = (
            f"The user has been struggling with habit consistency ({pct}% rate). "
            "Offer gentle support and ask about barriers. "
        )
    if habits.todays_count > 0:
        text += f"They have {habits.todays_count} wellness habits remaining for today. "
    if habits.recent_insight:
        text += f"Recent coaching insight: {habits.recent_insight} "
    return text


def build_wellness_system_prompt(
    *,
    now: datetime,
    recent_stress_levels: Sequence[int] = (),
    last_check_in: datetime | None = None,
    current_mood: Mood | None = None,
    habits: HabitContext | None = None,
) -> str:
    """Assemble the ARIA system prompt for one conversation turn.

    Args:
        now: Current local time (drives the time-of-day line).
        recent_stress_levels: Stress levels (1-10) logged in the last week.
        last_check_in: When the user last had a wellness conversation.
        current_mood: Most recently detected mood, if any.
        habits: Habit progress, if habit tracking is available.
    """
    context = _stress_context(recent_stress_levels)
    if last_check_in is not None and now - last_check_in > CHECK_IN_GAP:
        context += "It has been a few days since their last wellness check-in. "
    if current_mood is not None:
        context += MOOD_GUIDANCE[current_mood]
    if habits is not None:
        context += _habit_context(habits)
    return ARIA_PERSONA.format(time_of_day=time_of_day(now), context=context)
