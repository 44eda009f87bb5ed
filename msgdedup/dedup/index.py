"""Insertion-ordered index of seen message ids."""

from __future__ import annotations

from collections import OrderedDict
from typing import Dict, Iterator, Tuple


class SeenIndex:
    """Map message id to first-seen timestamp (ms epoch), oldest first."""

    def __init__(self) -> None:
        self._entries: OrderedDict[str, int] = OrderedDict()

    def contains(self, message_id: str) -> bool:
        return message_id in self._entries

    def insert(self, message_id: str, first_seen_at: int) -> None:
        """Append a new entry at the end of insertion order."""
        if message_id in self._entries:
            raise ValueError(f"Message id already indexed: {message_id!r}")
        self._entries[message_id] = first_seen_at

    def remove_oldest(self) -> str:
        """Remove and return the earliest-inserted id.

        Raises ``KeyError`` when the index is empty.
        """
        if not self._entries:
            raise KeyError("remove_oldest() on empty index")
        message_id, _ = self._entries.popitem(last=False)
        return message_id

    def remove(self, message_id: str) -> None:
        self._entries.pop(message_id, None)

    def iterate(self) -> Iterator[Tuple[str, int]]:
        """Yield ``(id, first_seen_at)`` in insertion order.

        Iterates a detached copy, so the caller may remove the current
        entry during the pass.
        """
        return iter(list(self._entries.items()))

    def size(self) -> int:
        return len(self._entries)

    def snapshot(self) -> Dict[str, int]:
        """Return a plain dict copy in insertion order."""
        return dict(self._entries)

    def __contains__(self, message_id: object) -> bool:
        return message_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)
