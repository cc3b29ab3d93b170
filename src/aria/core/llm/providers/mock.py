"""Mock LLM provider for testing."""

from __future__ import annotations

import asyncio
import re
from collections.abc import AsyncIterator

from aria.core.llm.provider import GenerationOptions, StreamChunk


class MockProvider:
    """Mock provider for testing: streams a canned response word by word.

    Args:
        response_content: Text to stream back.
        fail_with: If set, raised after ``fail_after`` chunks have been sent.
        fail_after: Number of text chunks emitted before ``fail_with`` is raised.
        chunk_delay: Seconds to sleep between chunks (lets tests cancel mid-stream).
    """

    def __init__(
        self,
        response_content: str = "Mock ARIA response.",
        *,
        fail_with: Exception | None = None,
        fail_after: int = 0,
        chunk_delay: float = 0.0,
    ) -> None:
        self.model = "mock"
        self.response_content = response_content
        self.fail_with = fail_with
        self.fail_after = fail_after
        self.chunk_delay = chunk_delay
        self.last_system_message: str = ""
        self.last_user_message: str = ""
        self.last_options: GenerationOptions | None = None
        self.call_count: int = 0

    async def generate_stream(
        self,
        user_message: str,
        options: GenerationOptions,
    ) -> AsyncIterator[StreamChunk]:
        self.last_system_message = options.system_prompt
        self.last_user_message = user_message
        self.last_options = options
        self.call_count += 1

        # Keep trailing whitespace on each word so the chunks rejoin exactly.
        pieces = re.findall(r"\S+\s*", self.response_content)
        for index, piece in enumerate(pieces):
            if self.fail_with is not None and index >= self.fail_after:
                raise self.fail_with
            if self.chunk_delay:
                await asyncio.sleep(self.chunk_delay)
            yield StreamChunk(text=piece)

        if self.fail_with is not None:
            raise self.fail_with

        yield StreamChunk(
            input_tokens=len(options.system_prompt.split()) + len(user_message.split()),
            output_tokens=len(pieces),
        )
