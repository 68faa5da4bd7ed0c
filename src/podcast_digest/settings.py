from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PodcastDigestSettings(BaseSettings):
    """Service configuration.

    Environment variables are prefixed with PODCAST_DIGEST_.
    """

    model_config = SettingsConfigDict(env_prefix="PODCAST_DIGEST_", extra="ignore")

    # HTTP
    bind_host: str = "0.0.0.0"
    bind_port: int = 8090

    # Logging
    log_level: str = "INFO"

    # Catalog (Listen Notes)
    listen_notes_api_key: str | None = None
    listen_notes_use_mock: bool = Field(
        default=False, description="Use the Listen Notes mock host (no key needed)"
    )
    catalog_region: str = "us"
    default_page_size: int = 8
    catalog_timeout_seconds: float = Field(default=20.0, gt=0)
    catalog_retry_attempts: int = Field(default=3, ge=1)

    # Providers, tried in this order
    provider_order: str = "gemini,openai"
    provider_timeout_seconds: float = Field(default=60.0, gt=0)
    max_output_tokens: int = 1024

    gemini_api_key: str | None = None
    gemini_model: str = "gemini-2.0-flash"
    gemini_temperature: float = 0.5

    openai_api_key: str | None = None
    openai_model: str = "gpt-4o"
    openai_temperature: float = 0.5
    openai_max_input_chars: int = Field(
        default=48_000, description="Content budget sent to OpenAI; longer input is cut"
    )

    # Summary store
    postgres_dsn: str | None = Field(
        default=None,
        description="asyncpg DSN. If unset, summaries are kept in process memory.",
    )


settings = PodcastDigestSettings()
