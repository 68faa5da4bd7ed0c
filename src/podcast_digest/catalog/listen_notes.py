from __future__ import annotations

import logging
from typing import Any

import httpx
from tenacity import AsyncRetrying, retry_if_exception, stop_after_attempt, wait_exponential_jitter

from podcast_digest.catalog.paging import dedupe_by_id, overfetch_size, page_slice
from podcast_digest.errors import UpstreamCatalogError
from podcast_digest.models import Episode, EpisodeText, Podcast
from podcast_digest.settings import settings
from podcast_digest.text_clean import sanitize_for_display

logger = logging.getLogger(__name__)

LIVE_API = "https://listen-api.listennotes.com/api/v2"
MOCK_API = "https://listen-api-test.listennotes.com/api/v2"

# quota exhausted or a gateway hiccup; other 4xx will not change on retry
RETRY_STATUSES = frozenset({429, 500, 502, 503, 504})


def _worth_retrying(exc: BaseException) -> bool:
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code in RETRY_STATUSES
    return isinstance(exc, (httpx.TimeoutException, httpx.NetworkError, httpx.RemoteProtocolError))


class ListenNotesClient:
    """Listen Notes v2 API client.

    Docs: https://www.listennotes.com/api/docs/

    The mock host serves canned data and needs no key; it is handy for local
    runs. Search and episode listing have no usable cursor here, so pages are
    produced by over-fetching and slicing locally.

    Timeouts, rate limits (429) and 5xx answers are retried with jittered
    backoff up to `retry_attempts` tries; anything else fails at once.
    """

    def __init__(
        self,
        api_key: str | None = None,
        use_mock: bool | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        retry_attempts: int | None = None,
        timeout: float | None = None,
        backoff: float = 0.5,
    ):
        key = api_key if api_key is not None else settings.listen_notes_api_key
        mock = settings.listen_notes_use_mock if use_mock is None else use_mock
        self.base_url = MOCK_API if mock else LIVE_API
        self.retry_attempts = max(1, retry_attempts or settings.catalog_retry_attempts)
        self.backoff = backoff
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={"X-ListenAPI-Key": key} if key else None,
            timeout=httpx.Timeout(timeout or settings.catalog_timeout_seconds, connect=5.0),
            limits=httpx.Limits(max_connections=20, max_keepalive_connections=5),
            transport=transport,
        )

    async def aclose(self):
        await self._client.aclose()

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        retrying = AsyncRetrying(
            reraise=True,
            stop=stop_after_attempt(self.retry_attempts),
            wait=wait_exponential_jitter(initial=self.backoff, max=8.0, jitter=self.backoff),
            retry=retry_if_exception(_worth_retrying),
        )
        async for attempt in retrying:
            with attempt:
                r = await self._client.get(path, params=params)
                r.raise_for_status()
                return r.json()

    async def _fetch(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        try:
            return await self._get(path, params)
        except httpx.HTTPStatusError as e:
            logger.warning("Listen Notes %s returned %s", path, e.response.status_code)
            raise UpstreamCatalogError(
                f"Listen Notes API error: {e.response.status_code} {e.response.reason_phrase}"
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Listen Notes %s failed: %s", path, e)
            raise UpstreamCatalogError(f"Listen Notes API error: {e}") from e

    async def search_podcasts(self, query: str, page: int = 1, page_size: int = 8) -> list[Podcast]:
        data = await self._fetch(
            "/search",
            {"q": query, "type": "podcast", "offset": 0, "page_size": overfetch_size(page, page_size)},
        )
        podcasts = dedupe_by_id(self._to_podcast(d) for d in data.get("results") or [])
        return page_slice(podcasts, page, page_size)

    async def podcast(self, podcast_id: str, page_size: int | None = None) -> dict[str, Any]:
        params = {"page_size": page_size} if page_size else None
        return await self._fetch(f"/podcasts/{podcast_id}", params)

    async def episodes(self, podcast_id: str, page: int = 1, page_size: int = 8) -> list[Episode]:
        data = await self.podcast(podcast_id, page_size=overfetch_size(page, page_size))
        episodes = dedupe_by_id(self._to_episode(d) for d in data.get("episodes") or [])
        return page_slice(episodes, page, page_size)

    async def episode_text(self, episode_id: str) -> EpisodeText:
        d = await self._fetch(f"/episodes/{episode_id}")
        return EpisodeText(
            episode_id=episode_id,
            transcript=d.get("transcript") or None,
            description=sanitize_for_display(d.get("description")),
        )

    async def best_podcasts(
        self,
        page: int = 1,
        page_size: int = 8,
        genre_id: int | None = None,
        region: str | None = None,
        safe_mode: bool = False,
    ) -> list[Podcast]:
        params: dict[str, Any] = {
            "page": max(1, page),
            "page_size": page_size,
            "region": region or settings.catalog_region,
            "safe_mode": 1 if safe_mode else 0,
        }
        if genre_id is not None:
            params["genre_id"] = genre_id
        data = await self._fetch("/best_podcasts", params)
        podcasts = dedupe_by_id(self._to_podcast(d) for d in data.get("podcasts") or [])
        # upstream pages are its own size; trim to what the caller asked for
        return podcasts[: max(1, page_size)]

    def _to_podcast(self, d: dict) -> Podcast:
        # search results carry *_original fields instead of the plain ones
        title = d.get("title") or d.get("title_original") or ""
        description = d.get("description") or d.get("description_original") or ""
        publisher = d.get("publisher") or d.get("publisher_original")
        extra = {
            k: v
            for k, v in d.items()
            if k not in {"id", "title", "description", "publisher", "image", "thumbnail"}
        }
        return Podcast(
            id=str(d.get("id") or ""),
            title=sanitize_for_display(title),
            description=sanitize_for_display(description),
            publisher=publisher,
            image=d.get("image"),
            thumbnail=d.get("thumbnail"),
            **extra,
        )

    def _to_episode(self, d: dict) -> Episode:
        extra = {
            k: v
            for k, v in d.items()
            if k
            not in {
                "id",
                "title",
                "description",
                "pub_date_ms",
                "audio",
                "audio_length_sec",
                "image",
                "thumbnail",
            }
        }
        return Episode(
            id=str(d.get("id") or ""),
            title=d.get("title") or "",
            description=sanitize_for_display(d.get("description")),
            pub_date_ms=d.get("pub_date_ms"),
            audio=d.get("audio"),
            audio_length_sec=d.get("audio_length_sec"),
            image=d.get("image"),
            thumbnail=d.get("thumbnail"),
            **extra,
        )
