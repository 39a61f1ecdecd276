"""Observability: redaction, structured logging, metrics. No ad hoc logs of prompts or keys in client code."""
from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from typing import Any

logger = logging.getLogger(__name__)

_KEY_PATTERNS = (
    re.compile(r"sk-or-(?:v1-)?[A-Za-z0-9]+"),
    re.compile(r"sk-[A-Za-z0-9]{20,}"),
    re.compile(r"(?i)bearer\s+\S+"),
)
_EMAIL = re.compile(r"[\w.%+-]+@[\w-]+(?:\.[\w-]+)*\.[A-Za-z]{2,}")
_WHITESPACE = re.compile(r"\s+")
ERROR_BODY_PREVIEW_CHARS = 200


def redact_preview(text: str, *, secrets: Iterable[str] = (), limit: int = ERROR_BODY_PREVIEW_CHARS) -> str:
    """One-line, key-free preview of an upstream error body.

    Exact `secrets` (the API key of the call) are masked first, then anything shaped like an
    OpenRouter/OpenAI key or bearer token, then email addresses.
    """
    if not text:
        return ""
    out = text
    for secret in secrets:
        if secret:
            out = out.replace(secret, "[API_KEY]")
    for pattern in _KEY_PATTERNS:
        out = pattern.sub("[API_KEY]", out)
    out = _EMAIL.sub("[EMAIL]", out)
    out = _WHITESPACE.sub(" ", out).strip()
    return out if len(out) <= limit else out[:limit] + "..."


def log_llm_call(
    *,
    model: str,
    attempt: int,
    latency_ms: int,
    status: str,
    http_status: int | None = None,
    error_code: str | None = None,
) -> None:
    """Emit structured log for one HTTP call. Never log prompt text or API keys."""
    extra: dict[str, Any] = {
        "model": model,
        "attempt": attempt,
        "latency_ms": latency_ms,
        "status": status,
    }
    if http_status is not None:
        extra["http_status"] = http_status
    if error_code is not None:
        extra["error_code"] = error_code
    logger.info("llm_call", extra=extra)


def emit_latency_metric(model: str, latency_ms: float) -> None:
    logger.debug("metric llm_latency_ms %s %s", model, latency_ms)


def emit_error_metric(model: str, code: str) -> None:
    logger.debug("metric llm_errors %s %s", model, code)
