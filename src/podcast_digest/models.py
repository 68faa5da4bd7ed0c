from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Sentiment = Literal["positive", "neutral", "negative"]
ContentKind = Literal["transcript", "description"]
SummaryType = Literal["auto", "manual"]
SummaryStatus = Literal["pending", "completed", "failed"]


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class SummarizationResult(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    summary: str
    key_points: tuple[str, ...] = ()
    sentiment: Sentiment = "neutral"


class SummarizationRequest(CamelModel):
    episode_id: str
    content: str
    content_kind: ContentKind
    language_code: str | None = None


class EpisodeMetadata(CamelModel):
    podcast_id: str | None = None
    podcast_title: str | None = None
    title: str | None = None
    description: str | None = None
    pub_date: str | None = None
    audio: str | None = None
    episode_image: str | None = None


class SavedSummary(CamelModel):
    id: str
    user_id: str
    episode_id: str
    podcast_id: str | None = None
    podcast_title: str | None = None
    title: str | None = None
    description: str | None = None
    pub_date: str | None = None
    audio: str | None = None
    episode_image: str | None = None
    content: str
    key_points: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    sentiment: Sentiment = "neutral"
    summary_type: SummaryType = "auto"
    status: SummaryStatus = "pending"
    created_at: datetime
    updated_at: datetime

    def to_result(self) -> SummarizationResult:
        return SummarizationResult(
            summary=self.content, key_points=tuple(self.key_points), sentiment=self.sentiment
        )


class Podcast(BaseModel):
    """Catalog podcast. Fields the catalog returns beyond these are kept as-is."""

    model_config = ConfigDict(extra="allow")

    id: str
    title: str = ""
    description: str = ""
    publisher: str | None = None
    image: str | None = None
    thumbnail: str | None = None


class Episode(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    title: str = ""
    description: str = ""
    pub_date_ms: int | None = None
    audio: str | None = None
    audio_length_sec: int | None = None
    image: str | None = None
    thumbnail: str | None = None


class EpisodeText(BaseModel):
    """Transcript and description of one episode, as the catalog returns them."""

    episode_id: str
    transcript: str | None = None
    description: str = ""

    @property
    def has_transcript(self) -> bool:
        return bool(self.transcript and self.transcript.strip())
