"""
OpenRouter client over httpx: one bounded, timed chat completion with a single same-model retry.
Exception mapping (httpx / HTTP status -> LLMError):
  - httpx.TimeoutException           -> LLMTimeout
  - other httpx.RequestError         -> LLMNetworkError (transport, decoding, redirects)
  - non-2xx status                   -> classify_error() -> LLMRateLimited / LLMUnavailable / LLMAuthError /
                                        LLMBillingError / LLMBadRequest / LLMError
  - 2xx without choices[0].message.content -> LLMResponseInvalid
Only classifications with retryable_here are retried, and only max_retries times.
"""
from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING, Any

import httpx

from page_summariser.llm.classifier import classify_error, error_from_classification, parse_error_body
from page_summariser.llm.errors import LLMError, LLMNetworkError, LLMResponseInvalid, LLMTimeout
from page_summariser.llm.ports import SleepFunc
from page_summariser.llm.telemetry import emit_error_metric, emit_latency_metric, log_llm_call, redact_preview
from page_summariser.llm.types import ChatCompletionPayload, Prompt

if TYPE_CHECKING:
    from page_summariser.settings import SummariserSettings

logger = logging.getLogger(__name__)


def _extract_content(data: Any) -> str | None:
    """choices[0].message.content, or None when any step is missing."""
    if not isinstance(data, dict):
        return None
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    message = first.get("message") if isinstance(first, dict) else None
    content = message.get("content") if isinstance(message, dict) else None
    return content if isinstance(content, str) else None


class OpenRouterClient:
    """Async OpenRouter wrapper: timeout, bounded retry, status classification, response normalization."""

    def __init__(
        self,
        settings: SummariserSettings,
        *,
        http_client: httpx.AsyncClient | None = None,
        sleep: SleepFunc | None = None,
    ) -> None:
        self._settings = settings
        self._url = settings.api_base.rstrip("/") + "/chat/completions"
        self._http = http_client
        self._sleep = sleep or asyncio.sleep

    def _headers(self, api_key: str) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {api_key}",
            "HTTP-Referer": self._settings.app_referer,
            "X-Title": self._settings.app_title,
        }

    async def _post(self, payload: dict[str, Any], headers: dict[str, str]) -> httpx.Response:
        timeout = httpx.Timeout(self._settings.request_timeout_s)
        if self._http is not None:
            return await self._http.post(self._url, json=payload, headers=headers, timeout=timeout)
        async with httpx.AsyncClient(timeout=timeout) as client:
            return await client.post(self._url, json=payload, headers=headers)

    async def execute(
        self,
        prompt: Prompt,
        api_key: str,
        model: str,
        max_output_tokens: int,
    ) -> str:
        """Execute one completion on `model`. Retries transient failures in place. Raises LLMError on failure."""
        payload = ChatCompletionPayload(
            model=model,
            messages=prompt.to_messages(),
            temperature=self._settings.temperature,
            max_tokens=max_output_tokens,
        ).model_dump()
        headers = self._headers(api_key)
        max_retries = self._settings.max_retries

        attempt = 0
        while True:
            logger.debug(
                "API request: model=%s prompt_chars=%d max_tokens=%d attempt=%d",
                model,
                len(prompt.instructions) + len(prompt.content),
                max_output_tokens,
                attempt,
            )
            t0 = time.perf_counter()
            try:
                resp = await self._post(payload, headers)
            except httpx.TimeoutException as e:
                err: LLMError = LLMTimeout(model=model, details=type(e).__name__)
                self._record_failure(model, attempt, t0, err)
                raise err from e
            except httpx.RequestError as e:
                err = LLMNetworkError(model=model, details=type(e).__name__)
                self._record_failure(model, attempt, t0, err)
                raise err from e
            latency_ms = int((time.perf_counter() - t0) * 1000)

            if resp.is_success:
                text = self._parse_success(resp, model)
                emit_latency_metric(model, float(latency_ms))
                log_llm_call(
                    model=model, attempt=attempt, latency_ms=latency_ms,
                    status="SUCCEEDED", http_status=resp.status_code,
                )
                return text

            body_text = resp.text
            logger.warning(
                "API error %s from %s: %s", resp.status_code, model, redact_preview(body_text, secrets=(api_key,))
            )
            classification = classify_error(resp.status_code, parse_error_body(body_text), model)
            err = error_from_classification(classification, model=model, details=f"HTTP {resp.status_code}")
            self._record_failure(model, attempt, t0, err, http_status=resp.status_code)

            if classification.retryable_here and attempt < max_retries:
                logger.info(
                    "%s; retrying %s in %.1fs (attempt %d/%d)",
                    classification.message,
                    model,
                    self._settings.retry_delay_s,
                    attempt + 1,
                    max_retries,
                )
                await self._sleep(self._settings.retry_delay_s)
                attempt += 1
                continue
            raise err

    def _parse_success(self, resp: httpx.Response, model: str) -> str:
        try:
            data = resp.json()
        except ValueError as e:
            raise LLMResponseInvalid(model=model, status_code=resp.status_code, details="body is not JSON") from e
        content = _extract_content(data)
        if not content or not content.strip():
            raise LLMResponseInvalid(model=model, status_code=resp.status_code, details="missing message content")
        text = content.strip()
        logger.debug("Got %d char response from %s", len(text), model)
        return text

    def _record_failure(
        self,
        model: str,
        attempt: int,
        t0: float,
        err: LLMError,
        *,
        http_status: int | None = None,
    ) -> None:
        emit_error_metric(model, err.code)
        log_llm_call(
            model=model,
            attempt=attempt,
            latency_ms=int((time.perf_counter() - t0) * 1000),
            status="FAILED",
            http_status=http_status,
            error_code=err.code,
        )
