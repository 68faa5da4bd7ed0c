"""OpenAI chat-completions summarization adapter."""

from __future__ import annotations

import logging
from typing import Any

from openai import APIError, AsyncOpenAI

from podcast_digest.errors import ProviderError

from .base import SummarizationAdapter, SummarizeOptions

logger = logging.getLogger(__name__)


class OpenAIAdapter(SummarizationAdapter):
    name = "openai"

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o",
        temperature: float = 0.5,
        max_output_tokens: int = 1024,
        max_input_chars: int = 48_000,
        base_url: str | None = None,
        client: AsyncOpenAI | None = None,
    ):
        if not api_key and client is None:
            raise ValueError("OpenAI API key required for the OpenAI adapter.")
        if client is None:
            client_kwargs: dict[str, Any] = {"api_key": api_key}
            if base_url:
                client_kwargs["base_url"] = base_url
            client = AsyncOpenAI(**client_kwargs)
        self._client = client
        self.model = model
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens
        self.max_input_chars = max_input_chars

    def prepare_content(self, content: str) -> str:
        if len(content) <= self.max_input_chars:
            return content
        logger.info("Truncating content for %s from %d to %d chars", self.name, len(content), self.max_input_chars)
        return content[: self.max_input_chars]

    async def _generate(self, system_instruction: str, prompt: str, opts: SummarizeOptions) -> str:
        try:
            completion = await self._client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_instruction},
                    {"role": "user", "content": prompt},
                ],
                max_tokens=opts.max_output_tokens or self.max_output_tokens,
                temperature=self.temperature,
                response_format={"type": "json_object"},
            )
        except APIError as e:
            # covers RateLimitError, APIConnectionError and APITimeoutError
            logger.warning("OpenAI request failed (%s): %s", e.__class__.__name__, e)
            raise ProviderError(self.name, f"{e.__class__.__name__}: {e}") from e

        if not completion.choices:
            raise ProviderError(self.name, "malformed response: no choices")
        content = completion.choices[0].message.content
        return (content or "").strip()

    async def aclose(self) -> None:
        await self._client.close()
