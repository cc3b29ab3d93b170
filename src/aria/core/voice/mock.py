"""Scripted voice session and recording synthesizer for testing."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Iterable

from aria.core.voice.session import VoiceEvent, VoiceSessionConfig


class ScriptedVoiceSession:
    """Plays back a fixed list of events.

    Args:
        events: Events to emit, in order.
        event_delay: Seconds to sleep before each event.
        hold_open: After the script ends, keep listening until stopped
            (lets tests exercise the capture timeout).
    """

    def __init__(
        self,
        events: Iterable[VoiceEvent],
        *,
        event_delay: float = 0.0,
        hold_open: bool = False,
    ) -> None:
        self.events = list(events)
        self.event_delay = event_delay
        self.hold_open = hold_open
        self.last_config: VoiceSessionConfig | None = None
        self.stopped = False

    async def start(self, config: VoiceSessionConfig) -> AsyncIterator[VoiceEvent]:
        self.last_config = config
        for event in self.events:
            if self.event_delay:
                await asyncio.sleep(self.event_delay)
            if self.stopped:
                return
            yield event
        while self.hold_open and not self.stopped:
            await asyncio.sleep(0.01)

    async def stop(self) -> None:
        self.stopped = True


class RecordingSynthesizer:
    """Records every spoken text; optionally fails on chosen phrases."""

    def __init__(self, fail_on: Iterable[str] = ()) -> None:
        self.spoken: list[str] = []
        self.fail_on = set(fail_on)

    async def synthesize(self, text: str) -> None:
        if text in self.fail_on:
            raise RuntimeError(f"TTS unavailable for: {text[:30]}")
        self.spoken.append(text)
