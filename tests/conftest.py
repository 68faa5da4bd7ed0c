"""Shared fakes for summarizer and service tests."""

from __future__ import annotations

import asyncio

import pytest

from podcast_digest.errors import ProviderError
from podcast_digest.llm import SummarizationAdapter, SummarizeOptions
from podcast_digest.store import MemorySummaryStore


class ScriptedAdapter(SummarizationAdapter):
    """Adapter that returns canned raw text (or raises) and records its calls."""

    def __init__(self, name: str, raw: str = "", error: str | None = None, delay: float = 0.0):
        self.name = name
        self.raw = raw
        self.error = error
        self.delay = delay
        self.calls: list[tuple[str, str, SummarizeOptions]] = []
        self.closed = False

    async def _generate(self, system_instruction: str, prompt: str, opts: SummarizeOptions) -> str:
        self.calls.append((system_instruction, prompt, opts))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise ProviderError(self.name, self.error)
        return self.raw

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def store() -> MemorySummaryStore:
    return MemorySummaryStore()


@pytest.fixture
def make_adapter():
    return ScriptedAdapter
