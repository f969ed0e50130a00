"""api-test history - append-only JSON request log."""

import json
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path
from typing import Any


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def make_record(
    method: str,
    url: str,
    headers: dict[str, str] | None = None,
    query: dict[str, str] | None = None,
    data: Any = None,
    status: int | None = None,
) -> dict:
    """Build a request record in the shape stored in the history file."""
    return {
        "method": method.lower(),
        "url": url,
        "options": {
            "headers": dict(headers or {}),
            "query": dict(query or {}),
            "data": data,
        },
        "status": status,
    }


class HistoryStore:
    """History of sent requests, kept as one JSON array in a single file.

    Every append reads the whole file, adds one record and rewrites it.
    There is no locking, so two processes appending at once can lose a
    record (last writer wins).
    """

    def __init__(self, path: str | Path, clock: Callable[[], str] | None = None):
        self.path = Path(path)
        self._clock = clock or _utc_now

    def load(self) -> list:
        """Return all records in append order.

        A missing, unreadable or malformed file reads as an empty history.
        Entries are returned as stored, including ones that are not
        records, so a rewrite never drops them.
        """
        try:
            data = json.loads(self.path.read_text())
        except (OSError, ValueError):
            return []
        if not isinstance(data, list):
            return []
        return data

    def append(self, record: dict) -> dict:
        """Timestamp a record and append it. Raises OSError if unwritable."""
        entry = {**record, "timestamp": self._clock()}
        hist = self.load()
        hist.append(entry)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(hist, indent=2))
        return entry
