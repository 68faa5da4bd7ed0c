from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from podcast_digest import __version__
from podcast_digest.catalog import ListenNotesClient
from podcast_digest.errors import PodcastDigestError
from podcast_digest.llm import build_adapters
from podcast_digest.settings import PodcastDigestSettings, settings
from podcast_digest.store import SummaryStore, build_store
from podcast_digest.summarize import Summarizer

from .catalog_api import build_catalog_router
from .summary_api import build_summary_router

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Long-lived collaborators shared by all requests."""

    catalog: ListenNotesClient
    store: SummaryStore
    summarizer: Summarizer

    async def aclose(self) -> None:
        await self.catalog.aclose()
        for adapter in self.summarizer.adapters:
            await adapter.aclose()
        await self.store.aclose()


def build_services(cfg: PodcastDigestSettings = settings) -> Services:
    store = build_store(dsn=cfg.postgres_dsn)
    adapters = build_adapters(cfg)
    if not adapters:
        logger.warning("No summarization provider configured; /summarize will fail")
    summarizer = Summarizer(
        adapters,
        store,
        timeout=cfg.provider_timeout_seconds,
        max_output_tokens=cfg.max_output_tokens,
    )
    catalog = ListenNotesClient(
        api_key=cfg.listen_notes_api_key,
        use_mock=cfg.listen_notes_use_mock,
        retry_attempts=cfg.catalog_retry_attempts,
        timeout=cfg.catalog_timeout_seconds,
    )
    return Services(catalog=catalog, store=store, summarizer=summarizer)


def create_app(services: Services) -> FastAPI:
    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        try:
            yield
        finally:
            await services.aclose()

    app = FastAPI(title="Podcast Digest", version=__version__, lifespan=lifespan)

    @app.exception_handler(PodcastDigestError)
    async def digest_error(_request: Request, exc: PodcastDigestError):
        if exc.status_code >= 500:
            logger.error("%s: %s", exc.__class__.__name__, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_invalid(_request: Request, exc: RequestValidationError):
        errors = exc.errors()
        first = errors[0] if errors else {}
        where = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = f"Invalid {where}: {first.get('msg')}" if where else "Invalid request body"
        return JSONResponse(status_code=400, content={"error": message})

    @app.exception_handler(Exception)
    async def unhandled(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    @app.get("/health")
    async def health():
        return {
            "ok": True,
            "version": __version__,
            "providers": services.summarizer.provider_names,
            "store": type(services.store).__name__,
        }

    app.include_router(build_catalog_router(services.catalog))
    app.include_router(build_summary_router(services.summarizer, services.store))
    return app
