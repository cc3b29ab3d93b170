"""Conversation LLM client: streamed replies with cancellation and metrics."""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator, Callable
from dataclasses import dataclass

from aria.core.llm.provider import GenerationOptions, LLMProvider, StreamChunk

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationMetrics:
    """Final figures for one streamed generation."""

    tokens_used: int
    tokens_per_second: float
    latency_ms: float
    input_tokens: int | None = None


class StreamingGeneration:
    """A single in-flight streamed reply.

    Iterate ``tokens()`` to receive text as it arrives. ``cancel()`` stops the
    stream after the current chunk; the text received so far stays
    available as ``text``.

    Usage::

        generation = client.stream("I feel stressed", system_prompt=prompt)
        async for token in generation.tokens():
            print(token, end="")
        metrics = generation.metrics
    """

    def __init__(
        self,
        chunks: AsyncIterator[StreamChunk],
        *,
        model: str = "",
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._chunks = chunks
        self.model = model
        self._clock = clock
        self._parts: list[str] = []
        self._text_chunks = 0
        self._input_tokens: int | None = None
        self._output_tokens: int | None = None
        self._started: float | None = None
        self._finished: float | None = None
        self._cancelled = False
        self._done = False

    @property
    def text(self) -> str:
        return "".join(self._parts)

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def done(self) -> bool:
        return self._done

    def cancel(self) -> None:
        """Stop consuming the stream; partial text is kept."""
        if not self._done:
            self._cancelled = True

    async def tokens(self) -> AsyncIterator[str]:
        """Yield text chunks until the stream ends or is cancelled."""
        self._started = self._clock()
        try:
            async for chunk in self._chunks:
                if self._cancelled:
                    break
                if chunk.input_tokens is not None:
                    self._input_tokens = chunk.input_tokens
                if chunk.output_tokens is not None:
                    self._output_tokens = chunk.output_tokens
                if chunk.text:
                    self._parts.append(chunk.text)
                    self._text_chunks += 1
                    yield chunk.text
                if self._cancelled:
                    break
        finally:
            self._finished = self._clock()
            self._done = True
            aclose = getattr(self._chunks, "aclose", None)
            if aclose is not None:
                await aclose()

    async def result(self) -> str:
        """Drain any remaining tokens and return the full text."""
        if not self._done:
            async for _ in self.tokens():
                pass
        return self.text

    @property
    def metrics(self) -> GenerationMetrics:
        tokens_used = self._output_tokens if self._output_tokens is not None else self._text_chunks
        elapsed = 0.0
        if self._started is not None and self._finished is not None:
            elapsed = max(self._finished - self._started, 0.0)
        return GenerationMetrics(
            tokens_used=tokens_used,
            tokens_per_second=tokens_used / elapsed if elapsed > 0 else 0.0,
            latency_ms=elapsed * 1000,
            input_tokens=self._input_tokens,
        )


class ConversationLLMClient:
    """Starts streamed ARIA replies on the configured provider."""

    def __init__(
        self,
        provider: LLMProvider,
        *,
        max_tokens: int = 512,
        temperature: float = 0.7,
    ) -> None:
        self.provider = provider
        self.max_tokens = max_tokens
        self.temperature = temperature

    def stream(self, user_message: str, *, system_prompt: str) -> StreamingGeneration:
        """Begin a streamed reply to ``user_message``."""
        options = GenerationOptions(
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            system_prompt=system_prompt,
        )
        model = getattr(self.provider, "model", "")
        logger.debug(
            "Starting stream: model=%s, max_tokens=%d, temperature=%.2f",
            model,
            options.max_tokens,
            options.temperature,
        )
        return StreamingGeneration(
            self.provider.generate_stream(user_message, options),
            model=model,
        )

    @staticmethod
    def log_completion(generation: StreamingGeneration) -> None:
        metrics = generation.metrics
        logger.info(
            "Conversation LLM call: model=%s, tokens=%d, %.1f tok/s, latency=%.0fms, cancelled=%s",
            generation.model,
            metrics.tokens_used,
            metrics.tokens_per_second,
            metrics.latency_ms,
            generation.cancelled,
        )
