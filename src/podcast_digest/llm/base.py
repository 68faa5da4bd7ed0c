from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from podcast_digest.errors import ProviderError
from podcast_digest.models import SummarizationResult

from .parsing import result_from_output
from .prompts import build_system_instruction, build_user_prompt

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SummarizeOptions:
    is_from_transcript: bool
    language_name: str | None = None
    max_output_tokens: int | None = None


@dataclass(frozen=True)
class Ok:
    result: SummarizationResult


@dataclass(frozen=True)
class Err:
    error: ProviderError


ProviderOutcome = Ok | Err


class SummarizationAdapter:
    """One LLM provider behind the summarization contract.

    Subclasses implement `_generate` (one request, raw text back, SDK errors
    translated to ProviderError). Prompting and output parsing are shared.
    """

    name: str = "provider"

    async def _generate(self, system_instruction: str, prompt: str, opts: SummarizeOptions) -> str:
        raise NotImplementedError

    def prepare_content(self, content: str) -> str:
        return content

    async def summarize(self, content: str, opts: SummarizeOptions) -> SummarizationResult:
        system_instruction = build_system_instruction(
            is_from_transcript=opts.is_from_transcript, language=opts.language_name
        )
        prompt = build_user_prompt(
            self.prepare_content(content), is_from_transcript=opts.is_from_transcript
        )
        raw = await self._generate(system_instruction, prompt, opts)
        return result_from_output(raw)

    async def try_summarize(
        self, content: str, opts: SummarizeOptions, timeout: float | None = None
    ) -> ProviderOutcome:
        try:
            result = await asyncio.wait_for(self.summarize(content, opts), timeout)
        except asyncio.TimeoutError:
            return Err(ProviderError(self.name, f"timed out after {timeout:g}s"))
        except ProviderError as e:
            return Err(e)
        return Ok(result)

    async def aclose(self) -> None:
        return None
