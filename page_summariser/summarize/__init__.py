"""Summarisation engine: chunking, prompt assembly and the model-fallback orchestrator."""
from page_summariser.summarize.chunking import split_into_chunks
from page_summariser.summarize.errors import AllModelsExhausted, OrchestratorError, RequestValidationError
from page_summariser.summarize.orchestrator import SummarizationOrchestrator
from page_summariser.summarize.summarizer import ChunkSummarizer
from page_summariser.summarize.types import (
    Chunk,
    ModelAvailability,
    PageContent,
    SummarizeFailure,
    SummarizeOutcome,
    SummarizeRequest,
    SummarizeSuccess,
)

__all__ = [
    "SummarizationOrchestrator",
    "ChunkSummarizer",
    "split_into_chunks",
    "Chunk",
    "PageContent",
    "SummarizeRequest",
    "SummarizeSuccess",
    "SummarizeFailure",
    "SummarizeOutcome",
    "ModelAvailability",
    "OrchestratorError",
    "RequestValidationError",
    "AllModelsExhausted",
]
