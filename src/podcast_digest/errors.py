"""Error taxonomy shared by the summarization pipeline and the HTTP layer.

Each error carries the HTTP status it maps to; the service registers a
single handler that renders ``{"error": message}`` with that status.
"""

from __future__ import annotations


class PodcastDigestError(Exception):
    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(PodcastDigestError):
    """Missing or malformed required input."""

    status_code = 400


class NotFoundError(PodcastDigestError):
    status_code = 404


class AlreadyExistsError(PodcastDigestError):
    """A summary for this (user, episode) pair is already stored.

    Not surfaced as an HTTP error: the summaries route answers
    ``{"alreadyExists": true}``.
    """

    status_code = 409

    def __init__(self, user_id: str, episode_id: str):
        super().__init__(f"Summary already exists for episode {episode_id}")
        self.user_id = user_id
        self.episode_id = episode_id


class ProviderError(PodcastDigestError):
    """An LLM provider call failed (transport, rate limit, timeout, bad envelope)."""

    status_code = 502

    def __init__(self, provider: str, message: str):
        super().__init__(f"{provider}: {message}")
        self.provider = provider


class UpstreamCatalogError(PodcastDigestError):
    status_code = 500


class StoreError(PodcastDigestError):
    status_code = 500
