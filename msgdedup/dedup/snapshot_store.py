"""Persistent JSON snapshot of seen message ids."""

from __future__ import annotations

import enum
import json
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional


class SnapshotErrorKind(enum.Enum):
    MISSING = "missing"
    UNREADABLE = "unreadable"
    MALFORMED = "malformed"
    DIRECTORY = "directory"
    WRITE = "write"
    RENAME = "rename"


@dataclass
class LoadResult:
    path: Path
    entries: Dict[str, int] = field(default_factory=dict)
    error: Optional[SnapshotErrorKind] = None
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class SaveResult:
    path: Path
    count: int = 0
    error: Optional[SnapshotErrorKind] = None
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None


class SnapshotStore:
    """Load and save the id -> first-seen mapping as a single JSON file.

    The file holds ``{"entries": {"<id>": <ms epoch>}}``. Saves write
    ``<path>.tmp`` and then replace ``<path>`` so readers never observe a
    partial document. Neither method raises on I/O or parse failures;
    the outcome is returned as a result value instead.
    """

    def __init__(self, state_file: Path) -> None:
        self.state_file = Path(state_file)

    @property
    def tmp_file(self) -> Path:
        return self.state_file.with_suffix(f"{self.state_file.suffix}.tmp")

    def load(self) -> LoadResult:
        """Read persisted entries in file order."""
        if not self.state_file.exists():
            return LoadResult(self.state_file, error=SnapshotErrorKind.MISSING)

        try:
            raw = self.state_file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            return LoadResult(
                self.state_file, error=SnapshotErrorKind.UNREADABLE, detail=str(e)
            )

        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as e:
            return LoadResult(
                self.state_file, error=SnapshotErrorKind.MALFORMED, detail=str(e)
            )

        entries = self._parse_entries(payload)
        if entries is None:
            return LoadResult(
                self.state_file,
                error=SnapshotErrorKind.MALFORMED,
                detail="expected an object with an 'entries' object",
            )
        return LoadResult(self.state_file, entries=entries)

    def save(self, entries: Mapping[str, int]) -> SaveResult:
        """Write all entries, replacing the previous snapshot atomically."""
        payload = {"entries": dict(entries)}

        try:
            self.state_file.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            return SaveResult(
                self.state_file, error=SnapshotErrorKind.DIRECTORY, detail=str(e)
            )

        tmp_file = self.tmp_file
        try:
            tmp_file.write_text(
                json.dumps(payload),
                encoding="utf-8",
            )
        except (OSError, ValueError) as e:
            return SaveResult(
                self.state_file, error=SnapshotErrorKind.WRITE, detail=str(e)
            )

        try:
            tmp_file.replace(self.state_file)
        except OSError as e:
            return SaveResult(
                self.state_file, error=SnapshotErrorKind.RENAME, detail=str(e)
            )

        return SaveResult(self.state_file, count=len(payload["entries"]))

    @staticmethod
    def _parse_entries(payload: Any) -> Optional[Dict[str, int]]:
        if not isinstance(payload, dict):
            return None

        raw_entries = payload.get("entries")
        if raw_entries is None:
            return {}
        if not isinstance(raw_entries, dict):
            return None

        entries: Dict[str, int] = {}
        for message_id, raw_ts in raw_entries.items():
            # bool is an int subclass but never a valid timestamp
            if isinstance(raw_ts, bool) or not isinstance(raw_ts, (int, float)):
                continue
            if isinstance(raw_ts, float) and not math.isfinite(raw_ts):
                continue
            entries[str(message_id)] = int(raw_ts)
        return entries
