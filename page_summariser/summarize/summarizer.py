"""ChunkSummarizer: prompt assembly + delegation to the completion client. No state, no classification."""
from __future__ import annotations

import logging

from page_summariser.llm.ports import CompletionClientPort
from page_summariser.summarize.prompts import build_chunk_prompt, build_merge_prompt

logger = logging.getLogger(__name__)


class ChunkSummarizer:
    """Summarize one chunk, or merge prior chunk summaries, on a given model."""

    def __init__(
        self,
        client: CompletionClientPort,
        *,
        max_tokens_per_chunk: int = 500,
        max_tokens_combined: int = 1000,
    ) -> None:
        self._client = client
        self._max_tokens_per_chunk = max_tokens_per_chunk
        self._max_tokens_combined = max_tokens_combined

    async def summarize_chunk(self, text: str, api_key: str, model: str, part_label: str) -> str:
        logger.debug("summarize_chunk: %d chars, %s", len(text), part_label)
        return await self._client.execute(
            build_chunk_prompt(text, part_label), api_key, model, self._max_tokens_per_chunk
        )

    async def combine_summaries(self, combined_summaries: str, api_key: str, model: str) -> str:
        logger.debug("combine_summaries: %d chars", len(combined_summaries))
        return await self._client.execute(
            build_merge_prompt(combined_summaries), api_key, model, self._max_tokens_combined
        )
