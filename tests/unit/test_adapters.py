"""Tests for the Gemini and OpenAI adapters with mocked SDK clients."""

import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import openai
import pytest
from google.genai import errors as genai_errors

from podcast_digest.errors import ProviderError
from podcast_digest.llm import Err, Ok, SummarizeOptions, build_adapters
from podcast_digest.llm.gemini import GeminiAdapter
from podcast_digest.llm.openai_adapter import OpenAIAdapter
from podcast_digest.settings import PodcastDigestSettings

GOOD = '{"summary": "S", "keyPoints": ["k"], "sentiment": "negative"}'
OPTS = SummarizeOptions(is_from_transcript=True, language_name="Spanish", max_output_tokens=256)


def run(coro):
    return asyncio.run(coro)


def _gemini_client(text=None, side_effect=None):
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock(
        return_value=SimpleNamespace(text=text), side_effect=side_effect
    )
    return client


def _openai_client(content=None, choices=True, side_effect=None):
    client = MagicMock()
    completion = SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))] if choices else []
    )
    client.chat.completions.create = AsyncMock(return_value=completion, side_effect=side_effect)
    client.close = AsyncMock()
    return client


class TestGeminiAdapter:
    def test_requires_key_or_client(self) -> None:
        with pytest.raises(ValueError):
            GeminiAdapter(api_key="")

    def test_sends_prompt_and_config(self) -> None:
        client = _gemini_client(text=GOOD)
        adapter = GeminiAdapter(api_key="", model="gemini-test", client=client)

        result = run(adapter.summarize("the transcript", OPTS))

        assert result.summary == "S"
        assert result.sentiment == "negative"
        kwargs = client.aio.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-test"
        assert kwargs["contents"] == "Podcast transcript:\nthe transcript"
        assert kwargs["config"].max_output_tokens == 256
        assert "entirely in Spanish" in kwargs["config"].system_instruction

    def test_content_not_truncated(self) -> None:
        client = _gemini_client(text=GOOD)
        adapter = GeminiAdapter(api_key="", client=client)
        long = "word " * 20_000
        run(adapter.summarize(long, OPTS))
        assert long in client.aio.models.generate_content.call_args.kwargs["contents"]

    def test_api_error_becomes_err(self) -> None:
        error = genai_errors.APIError(429, {"error": {"code": 429, "message": "quota", "status": "RESOURCE_EXHAUSTED"}})
        adapter = GeminiAdapter(api_key="", client=_gemini_client(side_effect=error))
        outcome = run(adapter.try_summarize("x", OPTS))
        assert isinstance(outcome, Err)
        assert outcome.error.provider == "gemini"
        assert "429" in outcome.error.message

    def test_transport_error_becomes_err(self) -> None:
        adapter = GeminiAdapter(api_key="", client=_gemini_client(side_effect=httpx.ConnectError("down")))
        outcome = run(adapter.try_summarize("x", OPTS))
        assert isinstance(outcome, Err)

    def test_no_text_gives_empty_summary(self) -> None:
        adapter = GeminiAdapter(api_key="", client=_gemini_client(text=None))
        outcome = run(adapter.try_summarize("x", OPTS))
        assert isinstance(outcome, Ok)
        assert outcome.result.summary == ""


class TestOpenAIAdapter:
    def test_requires_key_or_client(self) -> None:
        with pytest.raises(ValueError):
            OpenAIAdapter(api_key="")

    def test_sends_messages(self) -> None:
        client = _openai_client(content=f"  {GOOD}\n")
        adapter = OpenAIAdapter(api_key="", model="gpt-test", client=client)

        result = run(adapter.summarize("body", OPTS))

        assert result.key_points == ("k",)
        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-test"
        assert kwargs["max_tokens"] == 256
        assert kwargs["response_format"] == {"type": "json_object"}
        assert [m["role"] for m in kwargs["messages"]] == ["system", "user"]

    def test_truncates_long_content(self) -> None:
        client = _openai_client(content=GOOD)
        adapter = OpenAIAdapter(api_key="", max_input_chars=10, client=client)
        run(adapter.summarize("abcdefghijKLMNOP", OPTS))
        user = client.chat.completions.create.call_args.kwargs["messages"][1]["content"]
        assert user == "Podcast transcript:\nabcdefghij"

    def test_api_error_becomes_err(self) -> None:
        request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        client = _openai_client(side_effect=openai.APIConnectionError(request=request))
        outcome = run(OpenAIAdapter(api_key="", client=client).try_summarize("x", OPTS))
        assert isinstance(outcome, Err)
        assert outcome.error.provider == "openai"

    def test_no_choices_is_malformed(self) -> None:
        adapter = OpenAIAdapter(api_key="", client=_openai_client(choices=False))
        with pytest.raises(ProviderError, match="no choices"):
            run(adapter.summarize("x", OPTS))

    def test_aclose_closes_client(self) -> None:
        client = _openai_client(content=GOOD)
        run(OpenAIAdapter(api_key="", client=client).aclose())
        client.close.assert_awaited_once()


class TestBuildAdapters:
    def test_order_and_missing_keys(self) -> None:
        cfg = PodcastDigestSettings(provider_order="openai,gemini", openai_api_key="sk-test", gemini_api_key=None)
        adapters = build_adapters(cfg)
        assert [a.name for a in adapters] == ["openai"]

    def test_unknown_provider(self) -> None:
        with pytest.raises(ValueError):
            build_adapters(PodcastDigestSettings(provider_order="claude"))
