"""Persisted state: daily model exhaustion set and summary history."""
from page_summariser.state.exhaustion import ExhaustionTracker, JsonExhaustionStore
from page_summariser.state.filestore import LocalJsonFileStore
from page_summariser.state.history import HistoryEntry, HistoryStore, export_filename, format_export
from page_summariser.state.ports import ExhaustionSnapshot, ExhaustionStorePort

__all__ = [
    "ExhaustionTracker",
    "JsonExhaustionStore",
    "ExhaustionSnapshot",
    "ExhaustionStorePort",
    "LocalJsonFileStore",
    "HistoryEntry",
    "HistoryStore",
    "export_filename",
    "format_export",
]
