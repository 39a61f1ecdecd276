"""Request, outcome and status models for the summarisation engine (Pydantic v2)."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Union

from pydantic import BaseModel, ConfigDict

from page_summariser.llm.types import ModelInfo


class PageContent(BaseModel):
    """What the content-extraction collaborator hands over. text is opaque to the engine."""

    text: str
    title: str = ""
    url: str = ""


class SummarizeRequest(BaseModel):
    """explicit_model is set only when the caller opted out of free-model cycling."""

    text: str
    api_key: str
    explicit_model: str | None = None


class SummarizeSuccess(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    success: Literal[True] = True
    summary: str
    model_used: str
    model_info: ModelInfo
    fallback_used: bool
    chunk_count: int
    attempts: int = 1
    input_tokens_estimate: int = 0
    output_tokens_estimate: int = 0


class SummarizeFailure(BaseModel):
    success: Literal[False] = False
    reason: str
    error_code: str
    is_retryable_elsewhere: bool = False


SummarizeOutcome = Union[SummarizeSuccess, SummarizeFailure]


class ModelAvailability(BaseModel):
    """Best-effort snapshot for status display."""

    available_models: list[str]
    exhausted_models: list[str]
    total_models: int


@dataclass(frozen=True)
class Chunk:
    """1-indexed, trimmed, non-empty slice of the input. start/end are offsets of the trimmed text."""

    index: int
    text: str
    start: int
    end: int


@dataclass
class AttemptState:
    """Owned by one summarize() call; never shared."""

    model: str
    attempt: int = 0
    chunk_summaries: list[str] = field(default_factory=list)
