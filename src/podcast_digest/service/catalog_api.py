from __future__ import annotations

import logging

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from podcast_digest.catalog import ListenNotesClient
from podcast_digest.errors import UpstreamCatalogError, ValidationError
from podcast_digest.settings import settings

logger = logging.getLogger(__name__)


def build_catalog_router(catalog: ListenNotesClient) -> APIRouter:
    r = APIRouter(tags=["catalog"])

    @r.get("/episodes")
    async def episodes(
        podcastId: str | None = None,
        page: int = Query(default=1, ge=1),
        page_size: int = Query(default=settings.default_page_size, ge=1, le=50),
    ):
        if not podcastId:
            raise ValidationError("Missing podcastId")
        eps = await catalog.episodes(podcastId, page=page, page_size=page_size)
        return {"episodes": [e.model_dump() for e in eps]}

    @r.get("/episodes/transcript")
    async def transcript(episodeId: str | None = None):
        if not episodeId:
            raise ValidationError("Missing episodeId")
        text = await catalog.episode_text(episodeId)
        return {
            "transcript": text.transcript,
            "description": text.description,
            "hasTranscript": text.has_transcript,
        }

    @r.get("/search-podcasts")
    async def search_podcasts(
        q: str | None = None,
        page: int = Query(default=1, ge=1),
        page_size: int = Query(default=settings.default_page_size, ge=1, le=50),
    ):
        if not q or not q.strip():
            raise ValidationError("Missing search query")
        podcasts = await catalog.search_podcasts(q.strip(), page=page, page_size=page_size)
        return {"podcasts": [p.model_dump() for p in podcasts]}

    @r.get("/best-podcasts")
    async def best_podcasts(
        page: int = Query(default=1, ge=1),
        page_size: int = Query(default=settings.default_page_size, ge=1, le=50),
        genre_id: int | None = None,
        region: str | None = None,
    ):
        try:
            podcasts = await catalog.best_podcasts(
                page=page, page_size=page_size, genre_id=genre_id, region=region
            )
        except UpstreamCatalogError as e:
            # body keeps the podcasts key on failure
            return JSONResponse(status_code=500, content={"podcasts": [], "error": e.message})
        return {"podcasts": [p.model_dump() for p in podcasts]}

    return r
