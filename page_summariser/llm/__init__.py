"""
LLM module: typed async access to the OpenRouter chat-completions API.
Public API: OpenRouterClient, ModelRegistry, classify_error, Prompt, ModelInfo and the LLMError taxonomy.
Other modules must not call httpx directly.
"""
from page_summariser.llm.classifier import ErrorClassification, classify_error
from page_summariser.llm.client_httpx import OpenRouterClient
from page_summariser.llm.errors import (
    LLMAuthError,
    LLMBadRequest,
    LLMBillingError,
    LLMError,
    LLMNetworkError,
    LLMRateLimited,
    LLMResponseInvalid,
    LLMTimeout,
    LLMUnavailable,
)
from page_summariser.llm.registry import FREE_MODELS, ModelRegistry
from page_summariser.llm.types import LLMMessage, ModelInfo, Prompt

__all__ = [
    "OpenRouterClient",
    "ModelRegistry",
    "FREE_MODELS",
    "ErrorClassification",
    "classify_error",
    "Prompt",
    "LLMMessage",
    "ModelInfo",
    "LLMError",
    "LLMTimeout",
    "LLMNetworkError",
    "LLMRateLimited",
    "LLMUnavailable",
    "LLMAuthError",
    "LLMBillingError",
    "LLMBadRequest",
    "LLMResponseInvalid",
]
