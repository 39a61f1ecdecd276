"""
SummarizationOrchestrator: chunking + model selection + fallback on daily exhaustion.

States per call: SelectModel -> Execute -> Success | RateLimited -> MarkExhausted -> SelectModel | FatalError.
Selection mode is fixed for the whole call: an explicit model outside the free
catalogue gets exactly one attempt; otherwise models are cycled, at most once each.
"""
from __future__ import annotations

import asyncio
import logging
import math

from page_summariser.llm.errors import LLMError
from page_summariser.llm.ports import SleepFunc
from page_summariser.llm.registry import ModelRegistry
from page_summariser.state.exhaustion import ExhaustionTracker
from page_summariser.summarize.chunking import split_into_chunks
from page_summariser.summarize.errors import AllModelsExhausted, OrchestratorError, RequestValidationError
from page_summariser.summarize.summarizer import ChunkSummarizer
from page_summariser.summarize.types import (
    AttemptState,
    ModelAvailability,
    SummarizeFailure,
    SummarizeOutcome,
    SummarizeRequest,
    SummarizeSuccess,
)

logger = logging.getLogger(__name__)

CHUNK_SEPARATOR = "\n\n---\n\n"


def _estimate_tokens(text: str) -> int:
    return math.ceil(len(text) / 4)


def _failure(err: OrchestratorError | LLMError) -> SummarizeFailure:
    return SummarizeFailure(
        reason=str(err),
        error_code=err.code,
        is_retryable_elsewhere=isinstance(err, LLMError) and err.is_rate_limited,
    )


class SummarizationOrchestrator:
    """Drives one summarize request to Success or Failure. Tracker is the process-wide instance."""

    def __init__(
        self,
        summarizer: ChunkSummarizer,
        tracker: ExhaustionTracker,
        registry: ModelRegistry,
        *,
        chunk_size: int = 1500,
        delay_between_chunks_s: float = 4.0,
        model_switch_delay_s: float = 1.0,
        merge_skip_multiplier: float = 2.0,
        sleep: SleepFunc | None = None,
    ) -> None:
        self._summarizer = summarizer
        self._tracker = tracker
        self._registry = registry
        self._chunk_size = chunk_size
        self._chunk_delay = delay_between_chunks_s
        self._switch_delay = model_switch_delay_s
        self._merge_skip_multiplier = merge_skip_multiplier
        self._sleep = sleep or asyncio.sleep

    def model_status(self) -> ModelAvailability:
        catalogue = self._registry.free_models
        return ModelAvailability(
            available_models=self._tracker.available_models(catalogue),
            exhausted_models=[m for m in self._tracker.exhausted_models() if m in catalogue],
            total_models=len(catalogue),
        )

    @staticmethod
    def _validate(request: SummarizeRequest) -> None:
        if not request.api_key or not request.api_key.strip():
            raise RequestValidationError("API key is required")
        if not request.api_key.isascii():
            raise RequestValidationError("API key contains invalid characters. Please check your OpenRouter API key.")
        if not request.text or not request.text.strip():
            raise RequestValidationError("No content found on this page.")

    async def summarize(self, request: SummarizeRequest) -> SummarizeOutcome:
        """Run the fallback state machine. Never raises; unexpected errors become INTERNAL_ERROR failures."""
        try:
            self._validate(request)
        except RequestValidationError as e:
            logger.info("Rejected summarize request: %s", e)
            return _failure(e)

        try:
            return await self._summarize(request)
        except Exception as e:
            logger.exception("Unexpected error while summarizing")
            return _failure(OrchestratorError(f"Unexpected error: {type(e).__name__}", code="INTERNAL_ERROR"))

    async def _summarize(self, request: SummarizeRequest) -> SummarizeOutcome:
        text = request.text
        api_key = request.api_key.strip()
        catalogue = self._registry.free_models
        explicit = (request.explicit_model or "").strip() or None
        cycling = explicit is None or self._registry.is_catalogued(explicit)

        first_model = explicit or await asyncio.to_thread(self._tracker.first_available, catalogue)
        if first_model is None:
            return _failure(AllModelsExhausted(tried=len(catalogue)))

        max_attempts = len(catalogue) if cycling else 1
        logger.info(
            "Summarizing %d chars (~%d tokens) starting with %s; free model cycling %s",
            len(text),
            _estimate_tokens(text),
            first_model,
            "enabled" if cycling else "disabled (custom model)",
        )

        state = AttemptState(model=first_model)
        while state.attempt < max_attempts:
            state.attempt += 1
            state.chunk_summaries = []
            logger.info("Attempt %d/%d with model %s", state.attempt, max_attempts, state.model)
            try:
                summary, chunk_count = await self._run_pass(text, api_key, state)
            except LLMError as e:
                logger.warning("Model %s failed: %s (%s)", state.model, e, e.code)
                if not (e.is_rate_limited and cycling):
                    return _failure(e)
                await asyncio.to_thread(self._tracker.mark_exhausted, state.model)
                next_model = await asyncio.to_thread(self._tracker.next_available, catalogue, state.model)
                if next_model is None:
                    exhausted = await asyncio.to_thread(self._tracker.exhausted_models)
                    return _failure(AllModelsExhausted(tried=len(exhausted)))
                logger.info("Switching to fallback model: %s", next_model)
                await self._sleep(self._switch_delay)
                state.model = next_model
                continue

            logger.info("Success with %s: %d chars, %d chunks", state.model, len(summary), chunk_count)
            return SummarizeSuccess(
                summary=summary,
                model_used=state.model,
                model_info=self._registry.resolve(state.model),
                fallback_used=state.model != first_model,
                chunk_count=chunk_count,
                attempts=state.attempt,
                input_tokens_estimate=_estimate_tokens(text),
                output_tokens_estimate=_estimate_tokens(summary),
            )

        return _failure(
            OrchestratorError("Failed to summarize after trying all available models.", code="ATTEMPTS_EXCEEDED")
        )

    async def _run_pass(self, text: str, api_key: str, state: AttemptState) -> tuple[str, int]:
        """One full pass on state.model. Returns (summary, chunk_count). Raises LLMError."""
        if len(text) <= self._chunk_size:
            summary = await self._summarizer.summarize_chunk(text, api_key, state.model, "full")
            return summary, 1

        chunks = split_into_chunks(text, self._chunk_size)
        total = len(chunks)
        logger.info("Using chunking strategy: %d chunks", total)
        for chunk in chunks:
            if chunk.index > 1:
                await self._sleep(self._chunk_delay)
            logger.info("Processing chunk %d/%d", chunk.index, total)
            state.chunk_summaries.append(
                await self._summarizer.summarize_chunk(
                    chunk.text, api_key, state.model, f"part {chunk.index} of {total}"
                )
            )

        if total == 1:
            return state.chunk_summaries[0], 1

        combined = CHUNK_SEPARATOR.join(state.chunk_summaries)
        if len(combined) > self._chunk_size * self._merge_skip_multiplier:
            logger.info("Chunk summaries too long to merge (%d chars); joining verbatim", len(combined))
            return "\n\n".join(state.chunk_summaries), total

        logger.info("Combining %d chunk summaries", total)
        await self._sleep(self._chunk_delay)
        return await self._summarizer.combine_summaries(combined, api_key, state.model), total
