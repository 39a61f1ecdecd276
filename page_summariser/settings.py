"""Summariser configuration. Env prefix: SUMMARISER_. API key: SUMMARISER_API_KEY."""
from __future__ import annotations

from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from page_summariser.llm.registry import FREE_MODELS


class SummariserSettings(BaseSettings):
    """Settings for the request executor, orchestrator and state stores. All overridable via SUMMARISER_* env vars."""

    model_config = SettingsConfigDict(
        env_prefix="SUMMARISER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Provider
    api_base: str = Field(default="https://openrouter.ai/api/v1", description="OpenRouter API base URL")
    api_key: str | None = Field(default=None, description="Default API key for the CLI (env: SUMMARISER_API_KEY)")
    app_referer: str = Field(default="https://github.com/page-summariser", description="HTTP-Referer attribution")
    app_title: str = Field(default="Page Summariser", description="X-Title attribution")
    free_models: list[str] = Field(
        default_factory=lambda: list(FREE_MODELS),
        description="Free models to cycle through, in order of preference",
    )

    # Request executor
    request_timeout_s: float = Field(default=60.0, gt=0, description="Wall-clock timeout per API call")
    max_retries: int = Field(default=1, ge=0, description="Same-model retries for transient errors")
    retry_delay_s: float = Field(default=3.0, ge=0, description="Fixed delay before a same-model retry")
    temperature: float = Field(default=0.7, ge=0, le=2)
    max_tokens_per_chunk: int = Field(default=500, gt=0, description="Max output tokens for each chunk summary")
    max_tokens_combined: int = Field(default=1000, gt=0, description="Max output tokens for the merge call")

    # Orchestrator
    chunk_size: int = Field(default=1500, ge=1, description="Characters per chunk (~375 tokens)")
    delay_between_chunks_s: float = Field(default=4.0, ge=0, description="Pacing between sequential calls")
    model_switch_delay_s: float = Field(default=1.0, ge=0, description="Pause before retrying on the next model")
    merge_skip_multiplier: float = Field(
        default=2.0,
        gt=0,
        description="Join chunk summaries verbatim when they exceed chunk_size * multiplier",
    )

    # State
    state_dir: Path = Field(default=Path.home() / ".page_summariser", description="Exhaustion and history files")
    history_limit: int = Field(default=50, ge=1, description="Max history entries kept (newest first)")

    @model_validator(mode="after")
    def validate_models(self) -> "SummariserSettings":
        models = [m.strip() for m in self.free_models if m.strip()]
        if not models:
            raise ValueError("free_models must contain at least one model id")
        if len(set(models)) != len(models):
            raise ValueError("free_models must not contain duplicates")
        self.free_models = models
        return self
