"""Gemini summarization adapter (google-genai SDK).

Gemini's context window is large enough for full transcripts, so content is
sent untruncated.
"""

from __future__ import annotations

import logging

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from podcast_digest.errors import ProviderError

from .base import SummarizationAdapter, SummarizeOptions

logger = logging.getLogger(__name__)


class GeminiAdapter(SummarizationAdapter):
    name = "gemini"

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.0-flash",
        temperature: float = 0.5,
        max_output_tokens: int = 1024,
        client: genai.Client | None = None,
    ):
        if not api_key and client is None:
            raise ValueError("Gemini API key required for the Gemini adapter.")
        self._client = client or genai.Client(api_key=api_key)
        self.model = model
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens

    async def _generate(self, system_instruction: str, prompt: str, opts: SummarizeOptions) -> str:
        config = types.GenerateContentConfig(
            system_instruction=system_instruction,
            temperature=self.temperature,
            max_output_tokens=opts.max_output_tokens or self.max_output_tokens,
            response_mime_type="application/json",
        )
        try:
            response = await self._client.aio.models.generate_content(
                model=self.model,
                contents=prompt,
                config=config,
            )
        except genai_errors.APIError as e:
            # 429 is quota/rate limit, 5xx is the service itself
            logger.warning("Gemini request failed (code=%s): %s", e.code, e.message)
            raise ProviderError(self.name, f"API error {e.code}: {e.message}") from e
        except httpx.HTTPError as e:
            logger.warning("Gemini transport failure: %s", e)
            raise ProviderError(self.name, f"transport error: {e}") from e

        # None when the candidate was blocked or has no text part
        return response.text or ""
