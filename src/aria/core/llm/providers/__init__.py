"""LLM provider implementations."""

from aria.core.llm.providers.anthropic import AnthropicProvider
from aria.core.llm.providers.mock import MockProvider
from aria.core.llm.providers.openai import OpenAIProvider

__all__ = ["AnthropicProvider", "MockProvider", "OpenAIProvider"]
