"""Error taxonomy for OpenRouter calls. Codes are stable for outcomes and logs; details must not leak secrets."""
from __future__ import annotations


class LLMError(Exception):
    """Base for all API errors. retryable means "worth retrying on the same model"."""

    def __init__(
        self,
        message: str,
        *,
        code: str = "API_ERROR",
        retryable: bool = False,
        is_rate_limited: bool = False,
        model: str | None = None,
        status_code: int | None = None,
        details: str | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.retryable = retryable
        self.is_rate_limited = is_rate_limited
        self.model = model
        self.status_code = status_code
        self.details = details or ""


class LLMTimeout(LLMError):
    """Request exceeded the wall-clock timeout."""

    def __init__(self, message: str = "Request timed out. Please try again.", **kwargs: object) -> None:
        super().__init__(message, code="TIMEOUT", retryable=False, **kwargs)


class LLMNetworkError(LLMError):
    """Connection-level failure (DNS, refused, reset)."""

    def __init__(self, message: str = "Network error. Check your connection.", **kwargs: object) -> None:
        super().__init__(message, code="NETWORK_ERROR", retryable=False, **kwargs)


class LLMRateLimited(LLMError):
    """429. daily=True means the model's per-day quota is gone."""

    def __init__(
        self,
        message: str = "Rate limit hit",
        *,
        daily: bool = True,
        retryable: bool = False,
        **kwargs: object,
    ) -> None:
        super().__init__(message, code="RATE_LIMITED", retryable=retryable, is_rate_limited=True, **kwargs)
        self.daily = daily


class LLMUnavailable(LLMError):
    """502/503 from the provider."""

    def __init__(self, message: str = "Server temporarily unavailable", **kwargs: object) -> None:
        super().__init__(message, code="SERVER_UNAVAILABLE", retryable=True, **kwargs)


class LLMAuthError(LLMError):
    """401: the API key was rejected."""

    def __init__(
        self, message: str = "Invalid API key. Please check your OpenRouter API key.", **kwargs: object
    ) -> None:
        super().__init__(message, code="AUTH_ERROR", retryable=False, **kwargs)


class LLMBillingError(LLMError):
    """402: account has no credits left."""

    def __init__(self, message: str = "Insufficient credits. Add credits to OpenRouter.", **kwargs: object) -> None:
        super().__init__(message, code="BILLING_ERROR", retryable=False, **kwargs)


class LLMBadRequest(LLMError):
    """400: invalid params or unknown model."""

    def __init__(self, message: str = "Bad request", **kwargs: object) -> None:
        super().__init__(message, code="BAD_REQUEST", retryable=False, **kwargs)


class LLMResponseInvalid(LLMError):
    """2xx response without choices[0].message.content."""

    def __init__(self, message: str = "Invalid response from API", **kwargs: object) -> None:
        super().__init__(message, code="MALFORMED_RESPONSE", retryable=False, **kwargs)
