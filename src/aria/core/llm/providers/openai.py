"""OpenAI GPT provider."""

from __future__ import annotations

from collections.abc import AsyncIterator

from aria.core.llm.provider import GenerationOptions, StreamChunk


class OpenAIProvider:
    """OpenAI provider using streamed chat completions."""

    def __init__(self, api_key: str, model: str = "gpt-4o") -> None:
        import openai

        self.client = openai.AsyncOpenAI(api_key=api_key)
        self.model = model

    async def generate_stream(
        self,
        user_message: str,
        options: GenerationOptions,
    ) -> AsyncIterator[StreamChunk]:
        messages = []
        if options.system_prompt:
            messages.append({"role": "system", "content": options.system_prompt})
        messages.append({"role": "user", "content": user_message})

        stream = await self.client.chat.completions.create(
            model=self.model,
            max_tokens=options.max_tokens,
            temperature=options.temperature,
            messages=messages,
            stream=True,
            stream_options={"include_usage": True},
        )

        usage = None
        async for chunk in stream:
            if chunk.choices:
                delta = chunk.choices[0].delta.content
                if delta:
                    yield StreamChunk(text=delta)
            if chunk.usage is not None:
                usage = chunk.usage

        if usage is not None:
            yield StreamChunk(
                input_tokens=usage.prompt_tokens,
                output_tokens=usage.completion_tokens,
            )
