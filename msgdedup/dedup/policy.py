"""TTL sweep and capacity eviction policies for the seen index."""

from __future__ import annotations

from typing import List, Optional

import structlog

from .index import SeenIndex

logger = structlog.get_logger()


class SweepPolicy:
    """Throttled TTL expiry.

    The sweep runs lazily from the decision path and at most once per
    ``cleanup_interval_ms``; entries may outlive ``ttl_ms`` by up to one
    interval.
    """

    def __init__(self, *, ttl_ms: int, cleanup_interval_ms: int, started_at: int) -> None:
        self.ttl_ms = max(0, int(ttl_ms))
        self.cleanup_interval_ms = max(0, int(cleanup_interval_ms))
        self.last_sweep_at = started_at

    def is_due(self, now: int) -> bool:
        return now - self.last_sweep_at > self.cleanup_interval_ms

    def is_expired(self, first_seen_at: int, now: int) -> bool:
        return now - first_seen_at > self.ttl_ms

    def is_live(self, first_seen_at: int, now: int) -> bool:
        """Whether a persisted entry is still young enough to restore."""
        return now - first_seen_at < self.ttl_ms

    def maybe_sweep(self, index: SeenIndex, now: int) -> List[str]:
        """Remove expired entries if the throttle allows; return removed ids."""
        if not self.is_due(now):
            return []

        removed: List[str] = []
        for message_id, first_seen_at in index.iterate():
            if self.is_expired(first_seen_at, now):
                index.remove(message_id)
                removed.append(message_id)
        self.last_sweep_at = now

        if removed:
            logger.debug("Expired dedup entries swept", removed=len(removed))
        return removed


class EvictionPolicy:
    """Strict FIFO eviction once the index reaches ``max_size``."""

    def __init__(self, *, max_size: int) -> None:
        self.max_size = max(1, int(max_size))

    def make_room(self, index: SeenIndex) -> Optional[str]:
        """Evict the oldest entry if inserting one more would overflow."""
        if index.size() < self.max_size:
            return None
        evicted = index.remove_oldest()
        logger.debug("Dedup capacity reached, evicted oldest", message_id=evicted)
        return evicted
