"""ModelRegistry: static model catalogue and id -> ModelInfo resolution."""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from page_summariser.llm.types import ModelInfo

FREE_SUFFIX = ":free"


@dataclass(frozen=True)
class CatalogueEntry:
    """Static metadata for a known model."""

    display_name: str
    context_size_label: str
    provider_name: str


# Free models in fallback order (first is preferred).
FREE_MODELS: tuple[str, ...] = (
    "google/gemini-2.0-flash-exp:free",
    "meta-llama/llama-3.3-70b-instruct:free",
    "deepseek/deepseek-r1:free",
    "qwen/qwen-2.5-coder-32b-instruct:free",
    "cognitivecomputations/dolphin-mistral-24b-venice-edition:free",
)

MODEL_CATALOGUE: dict[str, CatalogueEntry] = {
    "google/gemini-2.0-flash-exp:free": CatalogueEntry("Gemini 2.0 Flash", "1M tokens", "Google"),
    "meta-llama/llama-3.3-70b-instruct:free": CatalogueEntry("Llama 3.3 70B", "128K tokens", "Meta"),
    "deepseek/deepseek-r1:free": CatalogueEntry("DeepSeek R1", "128K tokens", "DeepSeek"),
    "qwen/qwen-2.5-coder-32b-instruct:free": CatalogueEntry("Qwen 2.5 Coder 32B", "32K tokens", "Alibaba"),
    "cognitivecomputations/dolphin-mistral-24b-venice-edition:free": CatalogueEntry(
        "Dolphin Mistral 24B", "32K tokens", "Cognitive Computations"
    ),
    "openai/gpt-3.5-turbo": CatalogueEntry("GPT-3.5 Turbo", "16K tokens", "OpenAI"),
    "openai/gpt-4o-mini": CatalogueEntry("GPT-4o Mini", "128K tokens", "OpenAI"),
    "anthropic/claude-3-haiku": CatalogueEntry("Claude 3 Haiku", "200K tokens", "Anthropic"),
}


def is_free_model_id(model_id: str) -> bool:
    return model_id.endswith(FREE_SUFFIX)


def _parse_unknown(model_id: str) -> ModelInfo:
    """Heuristic info for ids not in the catalogue: provider/name[:free]."""
    is_free = is_free_model_id(model_id)
    bare = model_id[: -len(FREE_SUFFIX)] if is_free else model_id
    if "/" in bare:
        provider, _, name = bare.partition("/")
    else:
        provider, name = "", bare
    provider = provider.strip()
    name = name.strip() or bare.strip() or "Unknown model"
    return ModelInfo(
        id=model_id,
        display_name=name + (" (Free)" if is_free else ""),
        context_size_label="Unknown",
        provider_name=provider[:1].upper() + provider[1:] if provider else "Unknown",
        is_free=is_free,
    )


class ModelRegistry:
    """Free-model fallback catalogue plus descriptive lookup for any model id. No side effects."""

    def __init__(
        self,
        free_models: Sequence[str] = FREE_MODELS,
        catalogue: dict[str, CatalogueEntry] | None = None,
    ) -> None:
        self._free_models = tuple(free_models)
        self._catalogue = catalogue if catalogue is not None else MODEL_CATALOGUE

    @property
    def free_models(self) -> tuple[str, ...]:
        """Ordered fallback catalogue."""
        return self._free_models

    def is_catalogued(self, model_id: str) -> bool:
        """True when model_id takes part in automatic free-model cycling."""
        return model_id in self._free_models

    def resolve(self, model_id: str) -> ModelInfo:
        """Return ModelInfo for any id. Never raises."""
        entry = self._catalogue.get(model_id)
        if entry is None:
            return _parse_unknown(model_id)
        return ModelInfo(
            id=model_id,
            display_name=entry.display_name,
            context_size_label=entry.context_size_label,
            provider_name=entry.provider_name,
            is_free=is_free_model_id(model_id),
        )
