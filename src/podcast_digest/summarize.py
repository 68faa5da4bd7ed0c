"""Summarization with provider fallback.

Adapters are tried in order and the first non-empty summary wins. An error
or an empty summary from one provider is logged and the next one is tried;
only the last provider's failure reaches the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from podcast_digest.errors import ProviderError, ValidationError
from podcast_digest.llm import Err, SummarizationAdapter, SummarizeOptions
from podcast_digest.llm.prompts import language_name
from podcast_digest.models import SummarizationRequest, SummarizationResult
from podcast_digest.store import SummaryStore
from podcast_digest.text_clean import sanitize_for_model

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SummarizeOutcome:
    result: SummarizationResult
    cached: bool
    is_from_transcript: bool


class Summarizer:
    def __init__(
        self,
        adapters: Sequence[SummarizationAdapter],
        store: SummaryStore,
        timeout: float | None = 60.0,
        max_output_tokens: int | None = None,
    ):
        self.adapters = list(adapters)
        self.store = store
        self.timeout = timeout
        self.max_output_tokens = max_output_tokens

    @property
    def provider_names(self) -> list[str]:
        return [a.name for a in self.adapters]

    async def summarize(
        self,
        episode_id: str,
        transcript: str | None = None,
        description: str | None = None,
        language_code: str | None = None,
        user_id: str | None = None,
    ) -> SummarizeOutcome:
        has_transcript = bool(transcript and transcript.strip())
        if not has_transcript and not (description and description.strip()):
            raise ValidationError("No transcript or description provided")

        # a transcript that cleans down to nothing gives way to the description
        clean_transcript = sanitize_for_model(transcript)
        from_transcript = bool(clean_transcript)

        existing = await self.store.find_by_episode(episode_id, user_id=user_id)
        if existing is not None:
            logger.info("Using saved summary %s for episode %s", existing.id, episode_id)
            return SummarizeOutcome(
                result=existing.to_result(), cached=True, is_from_transcript=from_transcript
            )

        request = SummarizationRequest(
            episode_id=episode_id,
            content=clean_transcript if from_transcript else sanitize_for_model(description),
            content_kind="transcript" if from_transcript else "description",
            language_code=language_code,
        )
        if not request.content:
            raise ValidationError("Transcript and description are empty after cleanup")

        result = await self.run_providers(request)
        return SummarizeOutcome(result=result, cached=False, is_from_transcript=from_transcript)

    async def run_providers(self, request: SummarizationRequest) -> SummarizationResult:
        if not self.adapters:
            raise ProviderError("summarizer", "no summarization providers configured")

        opts = SummarizeOptions(
            is_from_transcript=request.content_kind == "transcript",
            language_name=language_name(request.language_code),
            max_output_tokens=self.max_output_tokens,
        )

        last_error: ProviderError | None = None
        for adapter in self.adapters:
            outcome = await adapter.try_summarize(request.content, opts, timeout=self.timeout)
            if isinstance(outcome, Err):
                last_error = outcome.error
                logger.warning(
                    "Provider %s failed for episode %s: %s", adapter.name, request.episode_id, outcome.error
                )
                continue
            if not outcome.result.summary.strip():
                last_error = ProviderError(adapter.name, "empty summary")
                logger.warning("Provider %s returned an empty summary for episode %s", adapter.name, request.episode_id)
                continue
            if adapter is not self.adapters[0]:
                logger.info("Episode %s summarized by fallback provider %s", request.episode_id, adapter.name)
            return outcome.result

        raise last_error
