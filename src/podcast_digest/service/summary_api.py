from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import APIRouter
from pydantic import field_validator

from podcast_digest.errors import AlreadyExistsError, NotFoundError, ValidationError
from podcast_digest.llm.parsing import normalize_sentiment
from podcast_digest.models import CamelModel, EpisodeMetadata, SummarizationResult, SummaryType
from podcast_digest.store import SummaryStore
from podcast_digest.summarize import Summarizer

logger = logging.getLogger(__name__)


class SummarizeIn(CamelModel):
    episode_id: str | None = None
    transcript: str | None = None
    description: str | None = None
    language: str | None = None
    user_id: str | None = None


class SaveSummaryIn(CamelModel):
    user_id: str | None = None
    # the episode id; the client posts the episode object as-is
    id: str | None = None
    title: str | None = None
    description: str | None = None
    pub_date: str | None = None
    audio: str | None = None
    summary: str | None = None
    podcast_id: str | None = None
    podcast_title: str | None = None
    key_points: list[str] | None = None
    sentiment: str | None = None
    episode_image: str | None = None
    summary_type: SummaryType = "auto"
    tags: list[str] | None = None

    @field_validator("pub_date", mode="before")
    @classmethod
    def _pub_date_as_text(cls, v: Any) -> Any:
        # pub_date_ms arrives as a number
        return str(v) if isinstance(v, (int, float)) else v

    @field_validator("key_points", mode="before")
    @classmethod
    def _key_points_from_json(cls, v: Any) -> Any:
        # the summaries page forwards keyPoints JSON-encoded in a query string
        if isinstance(v, str):
            if not v.strip():
                return []
            try:
                decoded = json.loads(v)
            except ValueError:
                return [v]
            return decoded if isinstance(decoded, list) else [str(decoded)]
        return v


def build_summary_router(summarizer: Summarizer, store: SummaryStore) -> APIRouter:
    r = APIRouter(tags=["summaries"])

    @r.post("/summarize")
    async def summarize(payload: SummarizeIn):
        if not payload.episode_id:
            raise ValidationError("Missing episodeId")

        outcome = await summarizer.summarize(
            episode_id=payload.episode_id,
            transcript=payload.transcript,
            description=payload.description,
            language_code=payload.language,
            user_id=payload.user_id,
        )
        body = outcome.result.to_json_dict()
        body["cached"] = outcome.cached
        body["isFromTranscript"] = outcome.is_from_transcript
        return body

    @r.get("/summaries")
    async def list_summaries(userId: str | None = None):
        if not userId:
            raise ValidationError("Missing userId")
        summaries = await store.list_for_user(userId)
        return {"summaries": [s.to_json_dict() for s in summaries]}

    @r.post("/summaries")
    async def save_summary(payload: SaveSummaryIn):
        if not payload.user_id or not payload.id or not payload.summary:
            raise ValidationError("Missing required fields")

        result = SummarizationResult(
            summary=payload.summary,
            key_points=tuple(payload.key_points or ()),
            sentiment=normalize_sentiment(payload.sentiment),
        )
        metadata = EpisodeMetadata(
            podcast_id=payload.podcast_id,
            podcast_title=payload.podcast_title,
            title=payload.title,
            description=payload.description,
            pub_date=payload.pub_date,
            audio=payload.audio,
            episode_image=payload.episode_image,
        )
        try:
            saved = await store.create(
                payload.user_id,
                payload.id,
                result,
                metadata,
                summary_type=payload.summary_type,
                tags=payload.tags,
            )
        except AlreadyExistsError:
            logger.info("Summary for episode %s already saved", payload.id)
            return {"alreadyExists": True}
        return {"summary": saved.to_json_dict()}

    @r.delete("/summaries")
    async def delete_summaries(userId: str | None = None, summaryId: str | None = None):
        if not userId:
            raise ValidationError("Missing userId")
        if summaryId:
            if not await store.delete_one(userId, summaryId):
                raise NotFoundError("Summary not found or not deleted")
            return {"success": True}

        deleted = await store.delete_all_for_user(userId)
        logger.info("Deleted %d summaries for a user", deleted)
        return {"success": True, "deleted": deleted}

    return r
