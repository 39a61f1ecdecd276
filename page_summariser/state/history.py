"""Summary history: newest-first list of saved summaries, capped, persisted as one JSON document."""
from __future__ import annotations

import logging
import re
from datetime import datetime
from urllib.parse import urlparse
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from page_summariser.llm.types import ModelInfo
from page_summariser.state.clock import Clock, utc_now
from page_summariser.state.filestore import LocalJsonFileStore

logger = logging.getLogger(__name__)

HISTORY_KEY = "history.json"


class HistoryEntry(BaseModel):
    """One saved summary."""

    model_config = ConfigDict(protected_namespaces=())

    id: str = Field(default_factory=lambda: uuid4().hex)
    title: str = "Untitled Page"
    url: str = ""
    hostname: str = ""
    summary: str
    word_count: int = 0
    char_count: int = 0
    model_info: ModelInfo | None = None
    created_at: datetime


_entries_adapter = TypeAdapter(list[HistoryEntry])

EXPORT_RULE = "=" * 50
_UNSAFE_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*]')


def _hostname(url: str | None) -> str:
    if not url:
        return ""
    try:
        return urlparse(url).hostname or ""
    except ValueError:
        return ""


def export_filename(title: str) -> str:
    """Filesystem-safe `<title>.txt`: reserved characters dropped, whitespace runs to `_`, 100 chars max."""
    name = re.sub(r"\s+", "_", _UNSAFE_FILENAME_CHARS.sub("", title.strip()))[:100].strip()
    return f"{name or 'summary'}.txt"


def format_export(entry: HistoryEntry) -> str:
    """Plain-text export: header block, page metadata, then the summary."""
    lines = [
        "Page Summary",
        EXPORT_RULE,
        "",
        f"Title: {entry.title}",
        f"URL: {entry.url}",
        f"Date: {entry.created_at:%Y-%m-%d %H:%M:%S %Z}".rstrip(),
    ]
    if entry.model_info is not None:
        lines.append(f"Model: {entry.model_info.display_name}")
    lines += ["", EXPORT_RULE, "", entry.summary, ""]
    return "\n".join(lines)


class HistoryStore:
    """Load-on-demand history list. Storage errors on read are logged and yield an empty history."""

    def __init__(self, file_store: LocalJsonFileStore, *, limit: int = 50, clock: Clock = utc_now) -> None:
        self._files = file_store
        self._limit = limit
        self._clock = clock

    def list_entries(self) -> list[HistoryEntry]:
        try:
            data = self._files.read_json(HISTORY_KEY)
        except (OSError, ValueError) as e:
            logger.warning("Could not read history: %s", e)
            return []
        if data is None:
            return []
        try:
            return _entries_adapter.validate_python(data)
        except ValidationError as e:
            logger.warning("Ignoring corrupt history file: %s", e)
            return []

    def _save(self, entries: list[HistoryEntry]) -> None:
        self._files.write_json(HISTORY_KEY, _entries_adapter.dump_python(entries, mode="json"))

    def add(
        self,
        *,
        summary: str,
        text: str,
        title: str | None = None,
        url: str | None = None,
        model_info: ModelInfo | None = None,
    ) -> HistoryEntry:
        """Prepend a new entry and trim to the limit. Returns the stored entry."""
        entry = HistoryEntry(
            title=(title or "").strip() or "Untitled Page",
            url=url or "",
            hostname=_hostname(url),
            summary=summary,
            word_count=len(text.split()),
            char_count=len(text),
            model_info=model_info,
            created_at=self._clock(),
        )
        entries = [entry, *self.list_entries()][: self._limit]
        self._save(entries)
        return entry

    def get(self, entry_id: str) -> HistoryEntry | None:
        return next((e for e in self.list_entries() if e.id == entry_id), None)

    def delete(self, entry_id: str) -> bool:
        """Remove one entry. Returns False when the id is unknown."""
        entries = self.list_entries()
        kept = [e for e in entries if e.id != entry_id]
        if len(kept) == len(entries):
            return False
        self._save(kept)
        return True

    def clear(self) -> int:
        """Remove all entries. Returns how many were removed."""
        count = len(self.list_entries())
        self._save([])
        return count
