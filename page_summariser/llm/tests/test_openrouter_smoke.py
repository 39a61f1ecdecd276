"""OpenRouter smoke test. Skipped if no API key."""
import os

import pytest

from page_summariser.llm.client_httpx import OpenRouterClient
from page_summariser.llm.errors import LLMRateLimited
from page_summariser.llm.registry import FREE_MODELS
from page_summariser.llm.types import Prompt
from page_summariser.settings import SummariserSettings


@pytest.mark.integration
@pytest.mark.skipif(
    not os.environ.get("SUMMARISER_API_KEY"),
    reason="SUMMARISER_API_KEY not set",
)
@pytest.mark.asyncio
async def test_openrouter_smoke() -> None:
    settings = SummariserSettings()
    client = OpenRouterClient(settings)
    prompt = Prompt(instructions="Reply with one word.", content="Say OK")
    try:
        text = await client.execute(prompt, settings.api_key or "", FREE_MODELS[0], 20)
    except LLMRateLimited as e:
        pytest.skip(f"Free model rate limited: {e}")
    assert text
