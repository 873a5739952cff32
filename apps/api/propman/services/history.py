"""Audit history helpers shared by every record type."""
from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from ..schemas.common import HistoryLog, SourcedHistoryLog


def generate_id(prefix: str) -> str:
    """Return a unique identifier tagged with the record kind."""

    return f"{prefix}-{uuid4().hex}"


def new_entry(user_id: str, description: str, *, timestamp: datetime | None = None) -> HistoryLog:
    """Build a history entry attributed to ``user_id``."""

    return HistoryLog(
        id=generate_id("log"),
        user_id=user_id,
        description=description,
        timestamp=timestamp or datetime.now(timezone.utc),
    )


def appended(history: Sequence[dict[str, Any]] | None, entry: HistoryLog) -> list[dict[str, Any]]:
    """Return a new history list with ``entry`` after the existing entries.

    Existing entries are copied as-is so the stored sequence only ever grows.
    """

    return [*(history or []), entry.model_dump(mode="json")]


def newest_first(entries: Iterable[HistoryLog]) -> list[HistoryLog]:
    return sorted(entries, key=lambda item: _sort_key(item.timestamp), reverse=True)


def merge_histories(
    sources: Iterable[tuple[str, str, Sequence[dict[str, Any]] | None]],
) -> list[SourcedHistoryLog]:
    """Merge the histories of several records into one newest-first feed.

    Each source is ``(kind, record_id, history)``; every entry keeps a label
    naming the record it came from.
    """

    merged = [
        SourcedHistoryLog(**raw, source=kind, source_id=record_id)
        for kind, record_id, history in sources
        for raw in history or []
    ]
    return newest_first(merged)


def _sort_key(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
