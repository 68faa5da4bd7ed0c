from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from podcast_digest.errors import AlreadyExistsError
from podcast_digest.models import EpisodeMetadata, SavedSummary, SummarizationResult, SummaryType

logger = logging.getLogger(__name__)


class SummaryStore:
    """Saved summaries keyed by (user_id, episode_id).

    `create` is a lookup followed by an insert, not an atomic upsert. Two
    concurrent saves of the same pair can both pass the lookup; backends keep
    a unique index so the second insert fails, and that failure surfaces as
    a StoreError rather than AlreadyExistsError.
    """

    async def find_by_episode(self, episode_id: str, user_id: str | None = None) -> SavedSummary | None:
        raise NotImplementedError

    async def _insert(self, summary: SavedSummary) -> SavedSummary:
        raise NotImplementedError

    async def delete_one(self, user_id: str, summary_id: str) -> bool:
        raise NotImplementedError

    async def delete_all_for_user(self, user_id: str) -> int:
        raise NotImplementedError

    async def list_for_user(self, user_id: str) -> list[SavedSummary]:
        raise NotImplementedError

    async def aclose(self) -> None:
        return None

    async def create(
        self,
        user_id: str,
        episode_id: str,
        result: SummarizationResult,
        metadata: EpisodeMetadata | None = None,
        summary_type: SummaryType = "auto",
        tags: list[str] | None = None,
    ) -> SavedSummary:
        if await self.find_by_episode(episode_id, user_id=user_id) is not None:
            raise AlreadyExistsError(user_id, episode_id)

        md = metadata or EpisodeMetadata()
        now = datetime.now(timezone.utc)
        summary = SavedSummary(
            id=uuid.uuid4().hex,
            user_id=user_id,
            episode_id=episode_id,
            podcast_id=md.podcast_id,
            podcast_title=md.podcast_title,
            title=md.title,
            description=md.description,
            pub_date=md.pub_date,
            audio=md.audio,
            episode_image=md.episode_image,
            content=result.summary,
            key_points=list(result.key_points),
            tags=list(tags or []),
            sentiment=result.sentiment,
            summary_type=summary_type,
            status="completed",
            created_at=now,
            updated_at=now,
        )
        saved = await self._insert(summary)
        logger.info("Saved summary %s for episode %s", saved.id, episode_id)
        return saved
