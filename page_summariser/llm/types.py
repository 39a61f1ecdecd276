"""Typed prompt, wire payload and model descriptor models for the LLM module (Pydantic v2)."""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class LLMMessage(BaseModel):
    """Single message in OpenAI-style format."""

    role: Literal["system", "user", "assistant"]
    content: str


class Prompt(BaseModel):
    """Instructions go in the system message, page content in the user message."""

    instructions: str
    content: str

    def to_messages(self) -> list[LLMMessage]:
        return [
            LLMMessage(role="system", content=self.instructions.strip()),
            LLMMessage(role="user", content=self.content),
        ]


class ChatCompletionPayload(BaseModel):
    """JSON body for POST /chat/completions."""

    model: str
    messages: list[LLMMessage]
    temperature: float = 0.7
    max_tokens: int = Field(gt=0)


class ModelInfo(BaseModel):
    """Descriptive info for a model id. Derived on demand, never stored."""

    id: str
    display_name: str
    context_size_label: str = "Unknown"
    provider_name: str = "Unknown"
    is_free: bool = False
