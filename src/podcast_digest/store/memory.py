from __future__ import annotations

from dataclasses import dataclass, field

from podcast_digest.errors import StoreError
from podcast_digest.models import SavedSummary

from .base import SummaryStore


@dataclass
class MemorySummaryStore(SummaryStore):
    """Process-local store for development and tests. Nothing survives a restart."""

    _rows: dict[str, SavedSummary] = field(default_factory=dict)

    async def find_by_episode(self, episode_id: str, user_id: str | None = None) -> SavedSummary | None:
        matches = [
            s
            for s in self._rows.values()
            if s.episode_id == episode_id and (user_id is None or s.user_id == user_id)
        ]
        if not matches:
            return None
        return max(matches, key=lambda s: s.created_at)

    async def _insert(self, summary: SavedSummary) -> SavedSummary:
        # unique (user_id, episode_id), as the database index would enforce
        for s in self._rows.values():
            if s.user_id == summary.user_id and s.episode_id == summary.episode_id:
                raise StoreError("Failed to save summary: duplicate (user_id, episode_id)")
        self._rows[summary.id] = summary
        return summary

    async def delete_one(self, user_id: str, summary_id: str) -> bool:
        s = self._rows.get(summary_id)
        if s is None or s.user_id != user_id:
            return False
        del self._rows[summary_id]
        return True

    async def delete_all_for_user(self, user_id: str) -> int:
        ids = [k for k, s in self._rows.items() if s.user_id == user_id]
        for k in ids:
            del self._rows[k]
        return len(ids)

    async def list_for_user(self, user_id: str) -> list[SavedSummary]:
        rows = [s for s in reversed(self._rows.values()) if s.user_id == user_id]
        # reversed insertion order breaks created_at ties newest-first
        return sorted(rows, key=lambda s: s.created_at, reverse=True)
