"""Orchestrator-specific exceptions."""


class OrchestratorError(Exception):
    """Base exception for orchestration failures."""

    def __init__(self, message: str, *, code: str = "ORCHESTRATOR_ERROR") -> None:
        super().__init__(message)
        self.code = code


class RequestValidationError(OrchestratorError):
    """Missing text or API key. Never retried."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="VALIDATION_ERROR")


class AllModelsExhausted(OrchestratorError):
    """Every free model hit its daily limit."""

    def __init__(self, tried: int = 0) -> None:
        lines = ["All free models exhausted for today!"]
        if tried:
            lines.append(f"Tried {tried} models.")
        lines.append(
            "Options:\n"
            "• Wait until midnight UTC for reset\n"
            "• Add credits to OpenRouter\n"
            "• Use a paid model (e.g., openai/gpt-4o-mini)"
        )
        super().__init__("\n\n".join(lines), code="ALL_MODELS_EXHAUSTED")
        self.tried = tried
