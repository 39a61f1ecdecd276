"""Build the process-wide tracker, history store and orchestrator from settings."""
from __future__ import annotations

import httpx

from page_summariser.llm.client_httpx import OpenRouterClient
from page_summariser.llm.ports import SleepFunc
from page_summariser.llm.registry import ModelRegistry
from page_summariser.settings import SummariserSettings
from page_summariser.state.clock import Clock, utc_now
from page_summariser.state.exhaustion import ExhaustionTracker, JsonExhaustionStore
from page_summariser.state.filestore import LocalJsonFileStore
from page_summariser.state.history import HistoryStore
from page_summariser.summarize.orchestrator import SummarizationOrchestrator
from page_summariser.summarize.summarizer import ChunkSummarizer


def build_tracker(settings: SummariserSettings, *, clock: Clock = utc_now) -> ExhaustionTracker:
    """Create and load the exhaustion tracker. Call once per process."""
    tracker = ExhaustionTracker(JsonExhaustionStore(LocalJsonFileStore(settings.state_dir)), clock=clock)
    tracker.load()
    return tracker


def build_history(settings: SummariserSettings) -> HistoryStore:
    return HistoryStore(LocalJsonFileStore(settings.state_dir), limit=settings.history_limit)


def build_orchestrator(
    settings: SummariserSettings,
    tracker: ExhaustionTracker,
    *,
    http_client: httpx.AsyncClient | None = None,
    sleep: SleepFunc | None = None,
) -> SummarizationOrchestrator:
    client = OpenRouterClient(settings, http_client=http_client, sleep=sleep)
    summarizer = ChunkSummarizer(
        client,
        max_tokens_per_chunk=settings.max_tokens_per_chunk,
        max_tokens_combined=settings.max_tokens_combined,
    )
    return SummarizationOrchestrator(
        summarizer,
        tracker,
        ModelRegistry(settings.free_models),
        chunk_size=settings.chunk_size,
        delay_between_chunks_s=settings.delay_between_chunks_s,
        model_switch_delay_s=settings.model_switch_delay_s,
        merge_skip_multiplier=settings.merge_skip_multiplier,
        sleep=sleep,
    )
