"""Anthropic Claude provider."""

from __future__ import annotations

from collections.abc import AsyncIterator

from aria.core.llm.provider import GenerationOptions, StreamChunk


class AnthropicProvider:
    """Claude provider using the Anthropic SDK's streaming messages API."""

    def __init__(self, api_key: str, model: str = "claude-sonnet-4-5-20250929") -> None:
        import anthropic

        self.client = anthropic.AsyncAnthropic(api_key=api_key)
        self.model = model

    async def generate_stream(
        self,
        user_message: str,
        options: GenerationOptions,
    ) -> AsyncIterator[StreamChunk]:
        async with self.client.messages.stream(
            model=self.model,
            max_tokens=options.max_tokens,
            temperature=options.temperature,
            system=options.system_prompt,
            messages=[{"role": "user", "content": user_message}],
        ) as stream:
            async for text in stream.text_stream:
                if text:
                    yield StreamChunk(text=text)
            final = await stream.get_final_message()

        yield StreamChunk(
            input_tokens=final.usage.input_tokens,
            output_tokens=final.usage.output_tokens,
        )
