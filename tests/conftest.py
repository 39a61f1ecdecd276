"""Pytest fixtures for end-to-end summarisation flows: fake OpenRouter, recorded sleeps, temp state dir."""
import json
from datetime import datetime, timezone
from typing import Callable

import httpx
import pytest

from page_summariser.factory import build_orchestrator, build_tracker
from page_summariser.settings import SummariserSettings

FIXED_NOW = datetime(2026, 6, 1, 9, 0, tzinfo=timezone.utc)


def ok_response(text: str) -> httpx.Response:
    return httpx.Response(200, json={"choices": [{"message": {"role": "assistant", "content": text}}]})


def error_response(status: int, message: str = "") -> httpx.Response:
    return httpx.Response(status, json={"error": {"message": message, "code": status}})


class FakeOpenRouter:
    """httpx.MockTransport handler; records JSON bodies and answers via responder(body, call_number)."""

    def __init__(self, responder: Callable[[dict, int], httpx.Response]) -> None:
        self._responder = responder
        self.bodies: list[dict] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        self.bodies.append(body)
        return self._responder(body, len(self.bodies))

    @property
    def models_called(self) -> list[str]:
        return [b["model"] for b in self.bodies]


class SleepRecorder:
    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def settings(tmp_path) -> SummariserSettings:
    """Settings isolated from .env and the user's home directory."""
    return SummariserSettings(_env_file=None, state_dir=tmp_path / "state")


@pytest.fixture
def sleeps() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def make_orchestrator(settings: SummariserSettings, sleeps: SleepRecorder):
    """Build (orchestrator, tracker) wired to a FakeOpenRouter, a recording sleep and a fixed clock."""

    def _make(fake: FakeOpenRouter):
        tracker = build_tracker(settings, clock=lambda: FIXED_NOW)
        http = httpx.AsyncClient(transport=httpx.MockTransport(fake))
        return build_orchestrator(settings, tracker, http_client=http, sleep=sleeps), tracker

    return _make
