"""Durable key/value cache for last-known-good datasets.

One JSON file per key under the cache directory. Writes land in a temp file
that is renamed over the previous value, so readers see either the old or the
new document, never a partial one.
"""

from __future__ import annotations

import json
import os
import re
import tempfile
from pathlib import Path
from typing import Any

# Keys persisted by the dashboard
MEMBERS = "members"
AGENT_ROWS = "agent_rows"
UNASSIGNED_TICKET_NUMBERS = "unassigned_ticket_numbers"
LATEST_UNASSIGNED_TICKET_NUMBER = "latest_unassigned_ticket_number"
METRICS_ROWS = "metrics_rows"
DEPARTMENTS = "departments"
SELECTED_DEPARTMENTS = "selected_departments"
SELECTED_CANDIDATES = "selected_candidates"
SELECTED_STATUSES = "selected_statuses"
DEPARTMENT_ROWS = "department_rows"
DEPARTMENT_SUMMARY_ROWS = "department_summary_rows"

ALL_KEYS: tuple[str, ...] = (
    MEMBERS,
    AGENT_ROWS,
    UNASSIGNED_TICKET_NUMBERS,
    LATEST_UNASSIGNED_TICKET_NUMBER,
    METRICS_ROWS,
    DEPARTMENTS,
    SELECTED_DEPARTMENTS,
    SELECTED_CANDIDATES,
    SELECTED_STATUSES,
    DEPARTMENT_ROWS,
    DEPARTMENT_SUMMARY_ROWS,
)

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class CacheStore:
    """File-backed JSON store with get/set/remove by key."""

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key):
            raise ValueError(f"Invalid cache key: {key!r}")
        return self.directory / f"{key}.json"

    def get(self, key: str, default: Any = None) -> Any:
        """Return the stored value, or ``default`` when missing or unreadable."""
        path = self._path(key)
        if not path.exists():
            return default
        try:
            return json.loads(path.read_text(encoding="utf-8-sig"))
        except Exception:
            return default

    def set(self, key: str, value: Any) -> None:
        path = self._path(key)
        self.directory.mkdir(parents=True, exist_ok=True)
        content = json.dumps(value, ensure_ascii=False, indent=2, default=str)

        fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(content)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def remove(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)

    def keys(self) -> list[str]:
        if not self.directory.exists():
            return []
        return sorted(p.stem for p in self.directory.glob("*.json"))

    def clear(self) -> int:
        """Remove every key. Returns the number of keys removed."""
        removed = 0
        for key in self.keys():
            self.remove(key)
            removed += 1
        return removed
