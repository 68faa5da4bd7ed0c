"""Turning free-form model output into a SummarizationResult.

Models do not reliably honor format instructions, so parsing never raises:
it yields either ``Parsed`` or ``Unparsed`` and the caller decides.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any

from podcast_digest.models import Sentiment, SummarizationResult

_FENCE_RE = re.compile(r"^```(?:json|JSON)?\s*(.*?)\s*```$", re.DOTALL)

SENTIMENT_ALIASES: dict[str, Sentiment] = {
    "positive": "positive",
    "negative": "negative",
    "neutral": "neutral",
    # Chinese
    "积极": "positive",
    "消极": "negative",
    "中性": "neutral",
    # Spanish
    "positivo": "positive",
    "negativo": "negative",
    # French
    "positif": "positive",
    "négatif": "negative",
    "negatif": "negative",
    "neutre": "neutral",
    # German
    "positiv": "positive",
    "negativ": "negative",
    # Italian / Portuguese
    "neutro": "neutral",
}


@dataclass(frozen=True)
class Parsed:
    result: SummarizationResult


@dataclass(frozen=True)
class Unparsed:
    raw_text: str


ParseOutcome = Parsed | Unparsed


def normalize_sentiment(value: Any) -> Sentiment:
    if not isinstance(value, str):
        return "neutral"
    return SENTIMENT_ALIASES.get(value.strip().lower(), "neutral")


def _key_points(value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return ()
    points = (str(v).strip() for v in value if v is not None)
    return tuple(p for p in points if p)


def strip_code_fence(text: str) -> str:
    m = _FENCE_RE.match(text.strip())
    return m.group(1) if m else text.strip()


def parse_model_output(raw_text: str) -> ParseOutcome:
    candidate = strip_code_fence(raw_text or "")
    try:
        data = json.loads(candidate)
    except ValueError:
        return Unparsed(raw_text or "")

    if not isinstance(data, dict) or not isinstance(data.get("summary"), str):
        return Unparsed(raw_text or "")

    key_points = data.get("keyPoints", data.get("key_points"))
    return Parsed(
        SummarizationResult(
            summary=data["summary"].strip(),
            key_points=_key_points(key_points),
            sentiment=normalize_sentiment(data.get("sentiment")),
        )
    )


def result_from_output(raw_text: str) -> SummarizationResult:
    """Parsed JSON when possible, otherwise the raw text as the summary."""
    outcome = parse_model_output(raw_text)
    if isinstance(outcome, Parsed):
        return outcome.result
    return SummarizationResult(summary=outcome.raw_text, key_points=(), sentiment="neutral")
