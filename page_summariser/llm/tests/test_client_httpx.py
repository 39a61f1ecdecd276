"""OpenRouterClient tests over httpx.MockTransport (no network)."""
import json

import httpx
import pytest

from page_summariser.llm.client_httpx import OpenRouterClient
from page_summariser.llm.errors import (
    LLMAuthError,
    LLMNetworkError,
    LLMRateLimited,
    LLMResponseInvalid,
    LLMTimeout,
    LLMUnavailable,
)
from page_summariser.llm.types import Prompt
from page_summariser.settings import SummariserSettings

MODEL = "google/gemini-2.0-flash-exp:free"
PROMPT = Prompt(instructions="Summarize as bullets.", content="Some page text.")


def _ok(text: str) -> httpx.Response:
    return httpx.Response(200, json={"choices": [{"message": {"role": "assistant", "content": text}}]})


def _err(status: int, message: str = "") -> httpx.Response:
    return httpx.Response(status, json={"error": {"message": message, "code": status}})


class _Sleeps:
    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


def _client(handler, sleeps: _Sleeps | None = None) -> OpenRouterClient:
    settings = SummariserSettings(_env_file=None, app_title="Test Title", app_referer="https://example.test")
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return OpenRouterClient(settings, http_client=http, sleep=sleeps or _Sleeps())


@pytest.mark.asyncio
async def test_execute_sends_payload_and_trims_output() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return _ok("  • point one\n• point two \n")

    out = await _client(handler).execute(PROMPT, "sk-or-test", MODEL, 500)

    assert out == "• point one\n• point two"
    req = seen[0]
    assert req.method == "POST"
    assert str(req.url) == "https://openrouter.ai/api/v1/chat/completions"
    assert req.headers["Authorization"] == "Bearer sk-or-test"
    assert req.headers["X-Title"] == "Test Title"
    assert req.headers["HTTP-Referer"] == "https://example.test"
    body = json.loads(req.content)
    assert body["model"] == MODEL
    assert body["max_tokens"] == 500
    assert body["temperature"] == 0.7
    assert body["messages"] == [
        {"role": "system", "content": "Summarize as bullets."},
        {"role": "user", "content": "Some page text."},
    ]


@pytest.mark.asyncio
async def test_retries_once_on_503_then_succeeds() -> None:
    responses = [_err(503), _ok("• ok")]
    sleeps = _Sleeps()

    out = await _client(lambda request: responses.pop(0), sleeps).execute(PROMPT, "k", MODEL, 500)

    assert out == "• ok"
    assert sleeps.calls == [3.0]


@pytest.mark.asyncio
async def test_retry_ceiling_is_one() -> None:
    calls = []
    sleeps = _Sleeps()

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return _err(502)

    with pytest.raises(LLMUnavailable):
        await _client(handler, sleeps).execute(PROMPT, "k", MODEL, 500)
    assert len(calls) == 2
    assert sleeps.calls == [3.0]


@pytest.mark.asyncio
async def test_temporary_throttle_retried_then_surfaces_as_rate_limited() -> None:
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return _err(429, "model is temporarily rate-limited upstream")

    with pytest.raises(LLMRateLimited) as exc_info:
        await _client(handler).execute(PROMPT, "k", MODEL, 500)
    assert len(calls) == 2
    assert exc_info.value.daily is False
    assert exc_info.value.is_rate_limited is True


@pytest.mark.asyncio
async def test_daily_limit_is_not_retried() -> None:
    calls = []
    sleeps = _Sleeps()

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return _err(429, "Rate limit exceeded: free-models-per-day")

    with pytest.raises(LLMRateLimited) as exc_info:
        await _client(handler, sleeps).execute(PROMPT, "k", MODEL, 500)
    assert len(calls) == 1
    assert sleeps.calls == []
    assert str(exc_info.value) == f"Daily limit reached for {MODEL}"


@pytest.mark.asyncio
async def test_auth_error_is_fatal() -> None:
    with pytest.raises(LLMAuthError) as exc_info:
        await _client(lambda request: _err(401, "No auth credentials found")).execute(PROMPT, "bad", MODEL, 500)
    assert exc_info.value.retryable is False
    assert exc_info.value.status_code == 401


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"choices": []},
        {"choices": [{"message": {}}]},
        {"choices": [{"message": {"content": "   "}}]},
    ],
)
async def test_missing_content_is_malformed(payload: dict) -> None:
    with pytest.raises(LLMResponseInvalid):
        await _client(lambda request: httpx.Response(200, json=payload)).execute(PROMPT, "k", MODEL, 500)


@pytest.mark.asyncio
async def test_non_json_success_body_is_malformed() -> None:
    with pytest.raises(LLMResponseInvalid):
        await _client(lambda request: httpx.Response(200, text="<html>ok</html>")).execute(PROMPT, "k", MODEL, 500)


@pytest.mark.asyncio
async def test_timeout_maps_to_llm_timeout() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(LLMTimeout) as exc_info:
        await _client(handler).execute(PROMPT, "k", MODEL, 500)
    assert exc_info.value.code == "TIMEOUT"


@pytest.mark.asyncio
async def test_connection_error_maps_to_network_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(LLMNetworkError) as exc_info:
        await _client(handler).execute(PROMPT, "k", MODEL, 500)
    assert exc_info.value.code == "NETWORK_ERROR"


@pytest.mark.asyncio
async def test_undecodable_body_maps_to_network_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            headers={"Content-Encoding": "gzip"},
            stream=httpx.ByteStream(b"definitely not gzip"),
        )

    with pytest.raises(LLMNetworkError) as exc_info:
        await _client(handler).execute(PROMPT, "k", MODEL, 500)
    assert exc_info.value.code == "NETWORK_ERROR"
    assert exc_info.value.details == "DecodingError"
