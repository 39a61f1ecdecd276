"""Port interfaces for the LLM module. The summarizer depends on these, not on the httpx client."""
from __future__ import annotations

from typing import Awaitable, Callable, Protocol, runtime_checkable

from page_summariser.llm.types import Prompt

# Injectable sleep so tests can record delays instead of waiting.
SleepFunc = Callable[[float], Awaitable[None]]


@runtime_checkable
class CompletionClientPort(Protocol):
    """One bounded chat completion against one model."""

    async def execute(
        self,
        prompt: Prompt,
        api_key: str,
        model: str,
        max_output_tokens: int,
    ) -> str:
        """Return the trimmed model output. Raises LLMError on failure."""
        ...
