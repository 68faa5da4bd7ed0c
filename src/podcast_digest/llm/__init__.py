"""LLM provider adapters for episode summarization."""

from __future__ import annotations

import logging

from podcast_digest.settings import PodcastDigestSettings

from .base import Err, Ok, ProviderOutcome, SummarizationAdapter, SummarizeOptions

logger = logging.getLogger(__name__)

__all__ = [
    "Err",
    "Ok",
    "ProviderOutcome",
    "SummarizationAdapter",
    "SummarizeOptions",
    "build_adapters",
]


def _build_one(name: str, cfg: PodcastDigestSettings) -> SummarizationAdapter | None:
    if name == "gemini":
        if not cfg.gemini_api_key:
            return None
        from .gemini import GeminiAdapter

        return GeminiAdapter(
            api_key=cfg.gemini_api_key,
            model=cfg.gemini_model,
            temperature=cfg.gemini_temperature,
            max_output_tokens=cfg.max_output_tokens,
        )
    if name == "openai":
        if not cfg.openai_api_key:
            return None
        from .openai_adapter import OpenAIAdapter

        return OpenAIAdapter(
            api_key=cfg.openai_api_key,
            model=cfg.openai_model,
            temperature=cfg.openai_temperature,
            max_output_tokens=cfg.max_output_tokens,
            max_input_chars=cfg.openai_max_input_chars,
        )
    raise ValueError(f"Unknown summarization provider: {name!r}")


def build_adapters(cfg: PodcastDigestSettings) -> list[SummarizationAdapter]:
    """Adapters in fallback order; providers without an API key are skipped."""
    adapters: list[SummarizationAdapter] = []
    for name in (n.strip().lower() for n in cfg.provider_order.split(",")):
        if not name:
            continue
        adapter = _build_one(name, cfg)
        if adapter is None:
            logger.warning("Provider %s has no API key configured; skipping", name)
            continue
        adapters.append(adapter)
    return adapters
