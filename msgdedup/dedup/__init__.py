"""Message deduplication core.

Key Components:
- MessageDedupService: the try_record_message decision
- SeenIndex: insertion-ordered id -> first-seen index
- SweepPolicy / EvictionPolicy: TTL expiry and FIFO capacity eviction
- SnapshotStore: debounced JSON persistence with atomic replace
"""

from .index import SeenIndex
from .policy import EvictionPolicy, SweepPolicy
from .service import MessageDedupService
from .snapshot_store import LoadResult, SaveResult, SnapshotErrorKind, SnapshotStore

__all__ = [
    "MessageDedupService",
    "SeenIndex",
    "SweepPolicy",
    "EvictionPolicy",
    "SnapshotStore",
    "SnapshotErrorKind",
    "LoadResult",
    "SaveResult",
]
