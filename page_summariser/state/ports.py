"""Port interfaces for persisted state. The tracker depends on these, not on the file layout."""
from __future__ import annotations

from typing import Protocol, runtime_checkable

from pydantic import BaseModel, Field


class ExhaustionSnapshot(BaseModel):
    """Exhausted model ids plus the UTC day (YYYY-MM-DD) they are valid for. Persisted as one document."""

    models: list[str] = Field(default_factory=list)
    day_stamp: str


@runtime_checkable
class ExhaustionStorePort(Protocol):
    """Load/save the exhaustion snapshot. Implementations raise OSError/ValueError on storage failure."""

    def load(self) -> ExhaustionSnapshot | None:
        """Return the stored snapshot, or None when nothing was stored yet."""
        ...

    def save(self, snapshot: ExhaustionSnapshot) -> None:
        """Persist set and stamp together."""
        ...
