"""Saved-summary persistence."""

from __future__ import annotations

from .base import SummaryStore
from .memory import MemorySummaryStore

__all__ = ["MemorySummaryStore", "SummaryStore", "build_store"]


def build_store(*, dsn: str | None) -> SummaryStore:
    if dsn:
        from .postgres import Database, PostgresSummaryStore

        return PostgresSummaryStore(Database(dsn))
    return MemorySummaryStore()
