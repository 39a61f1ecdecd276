"""Error classification and exception mapping tests."""
import pytest

from page_summariser.llm.classifier import classify_error, error_from_classification, parse_error_body
from page_summariser.llm.errors import (
    LLMAuthError,
    LLMBadRequest,
    LLMBillingError,
    LLMRateLimited,
    LLMUnavailable,
)

MODEL = "deepseek/deepseek-r1:free"


def _body(message: str = "", headers: dict | None = None) -> dict:
    err: dict = {"message": message}
    if headers is not None:
        err["metadata"] = {"headers": headers}
    return {"error": err}


def test_429_daily_marker_is_not_retryable_here() -> None:
    c = classify_error(429, _body("Rate limit exceeded: free-models-per-day"), MODEL)
    assert c.is_rate_limited is True
    assert c.retryable_here is False
    assert c.daily_limit is True
    assert c.message == f"Daily limit reached for {MODEL}"


def test_429_remaining_header_zero_is_daily() -> None:
    c = classify_error(429, _body("Rate limit exceeded", {"X-RateLimit-Remaining": "0"}), MODEL)
    assert c.daily_limit is True
    assert c.retryable_here is False


def test_429_temporary_throttle_is_retryable_here() -> None:
    c = classify_error(429, _body(f"{MODEL} is temporarily rate-limited upstream"), MODEL)
    assert c.is_rate_limited is True
    assert c.retryable_here is True
    assert c.message == f"{MODEL} temporarily busy"


def test_429_unclassified_is_treated_as_daily() -> None:
    c = classify_error(429, {"rawText": "Too Many Requests"}, MODEL)
    assert c.is_rate_limited is True
    assert c.retryable_here is False
    assert MODEL in c.message


@pytest.mark.parametrize("status", [502, 503])
def test_server_unavailable_is_retryable_not_rate_limited(status: int) -> None:
    c = classify_error(status, {}, MODEL)
    assert c.is_rate_limited is False
    assert c.retryable_here is True
    assert c.message == "Server temporarily unavailable"


def test_fatal_statuses() -> None:
    assert "Invalid API key" in classify_error(401, {}, MODEL).message
    assert "Insufficient credits" in classify_error(402, {}, MODEL).message
    for status in (400, 401, 402, 500):
        c = classify_error(status, {}, MODEL)
        assert c.retryable_here is False
        assert c.is_rate_limited is False


def test_400_messages() -> None:
    assert classify_error(400, _body("foo is not a valid model ID"), "foo").message == "Invalid model: foo"
    assert classify_error(400, _body("max_tokens too large"), MODEL).message == "max_tokens too large"
    assert classify_error(400, {}, MODEL).message == "Bad request"


def test_other_status_uses_body_message_or_generic() -> None:
    assert classify_error(500, _body("upstream exploded"), MODEL).message == "upstream exploded"
    assert classify_error(504, {}, MODEL).message == "API error: 504"


def test_parse_error_body() -> None:
    assert parse_error_body('{"error": {"message": "x"}}') == {"error": {"message": "x"}}
    assert parse_error_body("<html>Bad Gateway</html>") == {"rawText": "<html>Bad Gateway</html>"}
    assert parse_error_body("[1, 2]") == {"rawText": "[1, 2]"}


def test_error_from_classification_types() -> None:
    daily = error_from_classification(classify_error(429, _body("free-models-per-day"), MODEL), model=MODEL)
    assert isinstance(daily, LLMRateLimited)
    assert daily.daily is True
    assert daily.is_rate_limited is True
    assert daily.model == MODEL
    assert daily.status_code == 429

    assert isinstance(error_from_classification(classify_error(503, {}, MODEL), model=MODEL), LLMUnavailable)
    assert isinstance(error_from_classification(classify_error(401, {}, MODEL), model=MODEL), LLMAuthError)
    assert isinstance(error_from_classification(classify_error(402, {}, MODEL), model=MODEL), LLMBillingError)
    assert isinstance(error_from_classification(classify_error(400, {}, MODEL), model=MODEL), LLMBadRequest)
    other = error_from_classification(classify_error(500, {}, MODEL), model=MODEL)
    assert other.code == "API_ERROR"
    assert other.retryable is False
