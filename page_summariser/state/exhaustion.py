"""
ExhaustionTracker: which models hit their daily quota today (UTC).

Every read first runs the lazy reset: when the stored day stamp is not today's
UTC date, the set is cleared and restamped. Storage failures are logged and
never fatal; the in-memory set stays authoritative for the process lifetime.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence

from pydantic import ValidationError

from page_summariser.state.clock import Clock, current_utc_day_stamp, utc_now
from page_summariser.state.filestore import LocalJsonFileStore
from page_summariser.state.ports import ExhaustionSnapshot, ExhaustionStorePort

logger = logging.getLogger(__name__)

EXHAUSTION_KEY = "exhaustion.json"


class JsonExhaustionStore:
    """ExhaustionStorePort backed by one JSON document in a LocalJsonFileStore."""

    def __init__(self, file_store: LocalJsonFileStore, key: str = EXHAUSTION_KEY) -> None:
        self._files = file_store
        self._key = key

    def load(self) -> ExhaustionSnapshot | None:
        data = self._files.read_json(self._key)
        if data is None:
            return None
        try:
            return ExhaustionSnapshot.model_validate(data)
        except ValidationError as e:
            raise ValueError(f"Corrupt exhaustion state in {self._key}: {e}") from e

    def save(self, snapshot: ExhaustionSnapshot) -> None:
        self._files.write_json(self._key, snapshot.model_dump())


class ExhaustionTracker:
    """Process-wide exhaustion set. Created once at startup and injected where needed."""

    def __init__(self, store: ExhaustionStorePort, *, clock: Clock = utc_now) -> None:
        self._store = store
        self._clock = clock
        self._exhausted: set[str] = set()
        self._day_stamp = current_utc_day_stamp(self._clock())

    @property
    def day_stamp(self) -> str:
        return self._day_stamp

    def load(self) -> None:
        """Read persisted state. A snapshot from another UTC day is discarded."""
        today = current_utc_day_stamp(self._clock())
        try:
            snapshot = self._store.load()
        except (OSError, ValueError) as e:
            logger.warning("Could not load exhaustion state, starting fresh: %s", e)
            snapshot = None
        self._day_stamp = today
        if snapshot is not None and snapshot.day_stamp == today:
            self._exhausted = set(snapshot.models)
            logger.info("Loaded %d exhausted models from storage", len(self._exhausted))
        else:
            self._exhausted = set()
            logger.info("Starting fresh - no exhausted models")

    def _check_daily_reset(self) -> None:
        today = current_utc_day_stamp(self._clock())
        if today == self._day_stamp:
            return
        logger.info(
            "New UTC day %s detected. Resetting exhausted models. Previous: %d models",
            today,
            len(self._exhausted),
        )
        self._exhausted.clear()
        self._day_stamp = today
        self._persist()

    def _persist(self) -> None:
        snapshot = ExhaustionSnapshot(models=sorted(self._exhausted), day_stamp=self._day_stamp)
        try:
            self._store.save(snapshot)
        except (OSError, ValueError) as e:
            logger.warning("Could not persist exhaustion state (keeping in memory): %s", e)

    def is_exhausted(self, model_id: str) -> bool:
        self._check_daily_reset()
        return model_id in self._exhausted

    def mark_exhausted(self, model_id: str) -> None:
        """Add model_id for today and persist set + stamp together."""
        self._check_daily_reset()
        self._exhausted.add(model_id)
        self._persist()
        logger.info("Model %s marked as exhausted. Total exhausted: %d", model_id, len(self._exhausted))

    def exhausted_models(self) -> list[str]:
        self._check_daily_reset()
        return sorted(self._exhausted)

    def available_models(self, catalogue: Sequence[str]) -> list[str]:
        """Catalogue minus exhausted models, catalogue order preserved."""
        self._check_daily_reset()
        return [m for m in catalogue if m not in self._exhausted]

    def first_available(self, catalogue: Sequence[str]) -> str | None:
        available = self.available_models(catalogue)
        return available[0] if available else None

    def next_available(self, catalogue: Sequence[str], current: str) -> str | None:
        """Round-robin: first unexhausted entry after current's position, wrapping. None when all are exhausted."""
        self._check_daily_reset()
        if not catalogue:
            return None
        start = catalogue.index(current) if current in catalogue else -1
        n = len(catalogue)
        for step in range(1, n + 1):
            candidate = catalogue[(start + step) % n]
            if candidate not in self._exhausted:
                return candidate
        return None
