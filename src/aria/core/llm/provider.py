"""LLM provider protocol: streaming interface for conversation replies."""

from __future__ import annotations

from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class GenerationOptions:
    """Per-call generation settings."""

    max_tokens: int = 512
    temperature: float = 0.7
    system_prompt: str = ""


@dataclass(frozen=True)
class StreamChunk:
    """One item from a provider stream.

    Text chunks carry ``text``; the final chunk of a stream may instead carry
    provider-reported token usage.
    """

    text: str = ""
    input_tokens: int | None = None
    output_tokens: int | None = None


@runtime_checkable
class LLMProvider(Protocol):
    """Abstract interface for streamed LLM calls."""

    model: str

    def generate_stream(
        self,
        user_message: str,
        options: GenerationOptions,
    ) -> AsyncIterator[StreamChunk]: ...


def create_provider(
    provider_name: str,
    api_key: str = "",
    model: str = "",
) -> LLMProvider:
    """Factory function to create an LLM provider by name.

    Args:
        provider_name: "anthropic", "openai", or "mock"
        api_key: API key for the provider.
        model: Model identifier override.

    Returns:
        An LLMProvider instance.
    """
    if provider_name == "anthropic":
        from aria.core.llm.providers.anthropic import AnthropicProvider

        return AnthropicProvider(api_key=api_key, model=model or "claude-sonnet-4-5-20250929")
    elif provider_name == "openai":
        from aria.core.llm.providers.openai import OpenAIProvider

        return OpenAIProvider(api_key=api_key, model=model or "gpt-4o")
    elif provider_name == "mock":
        from aria.core.llm.providers.mock import MockProvider

        return MockProvider()
    else:
        raise ValueError(f"Unknown LLM provider: {provider_name}")
