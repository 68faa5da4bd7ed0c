"""Podcast catalog access (Listen Notes) and list helpers."""

from .listen_notes import ListenNotesClient
from .paging import dedupe_by_id, page_slice

__all__ = ["ListenNotesClient", "dedupe_by_id", "page_slice"]
