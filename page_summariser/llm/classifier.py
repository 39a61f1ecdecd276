"""
Error classification for non-2xx OpenRouter responses.

Pure functions: HTTP status + parsed error body -> ErrorClassification, and
ErrorClassification -> LLMError subclass. Table:
  - 429 + per-day marker        -> rate limited, not retryable here (daily)
  - 429 + "temporarily rate-limited" -> rate limited, retryable here
  - 429 otherwise               -> rate limited, not retryable here (assumed daily)
  - 502 / 503                   -> retryable here
  - 401 / 402 / 400 / other     -> fatal
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from page_summariser.llm.errors import (
    LLMAuthError,
    LLMBadRequest,
    LLMBillingError,
    LLMError,
    LLMRateLimited,
    LLMUnavailable,
)

DAILY_LIMIT_MARKER = "free-models-per-day"
TRANSIENT_LIMIT_MARKER = "temporarily rate-limited"
UNKNOWN_MODEL_MARKER = "not a valid model"


@dataclass(frozen=True)
class ErrorClassification:
    """What the executor and orchestrator need to know about one failed response."""

    status_code: int
    message: str
    retryable_here: bool
    is_rate_limited: bool
    daily_limit: bool = False


def parse_error_body(text: str) -> dict[str, Any]:
    """Parse a response body; non-JSON (or non-object) bodies become {"rawText": text}."""
    try:
        data = json.loads(text)
    except (TypeError, ValueError):
        return {"rawText": text}
    if not isinstance(data, dict):
        return {"rawText": text}
    return data


def _error_section(body: dict[str, Any]) -> dict[str, Any]:
    err = body.get("error")
    return err if isinstance(err, dict) else {}


def _raw_message(body: dict[str, Any]) -> str:
    msg = _error_section(body).get("message")
    return msg if isinstance(msg, str) else ""


def _remaining_header(body: dict[str, Any]) -> str | None:
    metadata = _error_section(body).get("metadata")
    if not isinstance(metadata, dict):
        return None
    headers = metadata.get("headers")
    if not isinstance(headers, dict):
        return None
    value = headers.get("X-RateLimit-Remaining")
    return None if value is None else str(value)


def classify_error(status_code: int, body: dict[str, Any], model: str) -> ErrorClassification:
    """Classify one non-success response. Unclassified 429s are treated as daily exhaustion (policy)."""
    raw = _raw_message(body)

    if status_code == 429:
        if DAILY_LIMIT_MARKER in raw or _remaining_header(body) == "0":
            return ErrorClassification(
                status_code, f"Daily limit reached for {model}",
                retryable_here=False, is_rate_limited=True, daily_limit=True,
            )
        if TRANSIENT_LIMIT_MARKER in raw:
            return ErrorClassification(
                status_code, f"{model} temporarily busy",
                retryable_here=True, is_rate_limited=True,
            )
        return ErrorClassification(
            status_code, f"Rate limit hit for {model}",
            retryable_here=False, is_rate_limited=True, daily_limit=True,
        )
    if status_code in (502, 503):
        return ErrorClassification(
            status_code, "Server temporarily unavailable", retryable_here=True, is_rate_limited=False
        )
    if status_code == 401:
        return ErrorClassification(
            status_code, "Invalid API key. Please check your OpenRouter API key.",
            retryable_here=False, is_rate_limited=False,
        )
    if status_code == 402:
        return ErrorClassification(
            status_code, "Insufficient credits. Add credits to OpenRouter.",
            retryable_here=False, is_rate_limited=False,
        )
    if status_code == 400:
        message = f"Invalid model: {model}" if UNKNOWN_MODEL_MARKER in raw else (raw or "Bad request")
        return ErrorClassification(status_code, message, retryable_here=False, is_rate_limited=False)
    return ErrorClassification(
        status_code, raw or f"API error: {status_code}", retryable_here=False, is_rate_limited=False
    )


def error_from_classification(c: ErrorClassification, *, model: str, details: str | None = None) -> LLMError:
    """Map a classification to the matching LLMError subclass."""
    common = {"model": model, "status_code": c.status_code, "details": details}
    if c.is_rate_limited:
        return LLMRateLimited(c.message, daily=c.daily_limit, retryable=c.retryable_here, **common)
    if c.status_code in (502, 503):
        return LLMUnavailable(c.message, **common)
    if c.status_code == 401:
        return LLMAuthError(c.message, **common)
    if c.status_code == 402:
        return LLMBillingError(c.message, **common)
    if c.status_code == 400:
        return LLMBadRequest(c.message, **common)
    return LLMError(c.message, code="API_ERROR", retryable=c.retryable_here, **common)
