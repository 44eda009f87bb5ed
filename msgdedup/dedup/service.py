"""Message dedup service.

Decides whether an incoming message id is new (process it) or a
redelivery of something already handled (drop it). The service owns the
in-memory index, the sweep and eviction policies, and a debounced save of
the index to a JSON snapshot.

Saves are debounced with an asyncio timer on the running loop. When the
service is used without a running loop, mutations only mark it dirty and
are written by ``flush()`` or ``shutdown()``.
"""

from __future__ import annotations

import asyncio
import time
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Optional, Union

import structlog

from ..utils.constants import (
    DEFAULT_CLEANUP_INTERVAL_SECONDS,
    DEFAULT_MAX_SIZE,
    DEFAULT_TTL_HOURS,
    DEFAULT_WRITE_DEBOUNCE_MS,
    MS_PER_HOUR,
    MS_PER_SECOND,
)
from .index import SeenIndex
from .policy import EvictionPolicy, SweepPolicy
from .snapshot_store import LoadResult, SaveResult, SnapshotErrorKind, SnapshotStore

if TYPE_CHECKING:
    from ..config.settings import Settings

logger = structlog.get_logger()

PersistenceResult = Union[LoadResult, SaveResult]
PersistenceHook = Callable[[PersistenceResult], None]


def epoch_ms() -> int:
    """Current wall-clock time in milliseconds since the epoch."""
    return int(time.time() * MS_PER_SECOND)


class MessageDedupService:
    """Record message ids and report whether each one is new."""

    def __init__(
        self,
        state_file: Path,
        *,
        ttl_ms: int = DEFAULT_TTL_HOURS * MS_PER_HOUR,
        max_size: int = DEFAULT_MAX_SIZE,
        cleanup_interval_ms: int = DEFAULT_CLEANUP_INTERVAL_SECONDS * MS_PER_SECOND,
        write_debounce_ms: int = DEFAULT_WRITE_DEBOUNCE_MS,
        clock: Optional[Callable[[], int]] = None,
        on_persistence: Optional[PersistenceHook] = None,
    ) -> None:
        self.store = SnapshotStore(state_file)
        self.write_debounce_seconds = max(0, int(write_debounce_ms)) / MS_PER_SECOND
        self._clock = clock or epoch_ms
        self._on_persistence = on_persistence

        self._index = SeenIndex()
        self._sweep = SweepPolicy(
            ttl_ms=ttl_ms,
            cleanup_interval_ms=cleanup_interval_ms,
            started_at=self._clock(),
        )
        self._eviction = EvictionPolicy(max_size=max_size)

        self._dirty = False
        self._save_handle: Optional[asyncio.TimerHandle] = None
        self._closed = False

        self._restore()

    @classmethod
    def from_settings(cls, settings: "Settings", **kwargs: Any) -> "MessageDedupService":
        """Build a service from application settings."""
        return cls(
            settings.snapshot_path,
            ttl_ms=settings.ttl_ms,
            max_size=settings.max_size,
            cleanup_interval_ms=settings.cleanup_interval_ms,
            write_debounce_ms=settings.write_debounce_ms,
            **kwargs,
        )

    @property
    def max_size(self) -> int:
        return self._eviction.max_size

    @property
    def save_pending(self) -> bool:
        """Whether mutations are waiting to be written."""
        return self._dirty

    def try_record_message(self, message_id: str) -> bool:
        """Return True if ``message_id`` is new and record it, else False.

        Never raises for persistence problems; the decision is made from
        the in-memory index alone.
        """
        now = self._clock()

        if self._sweep.maybe_sweep(self._index, now):
            self._schedule_save()

        if self._index.contains(message_id):
            logger.debug("Duplicate message dropped", message_id=message_id)
            return False

        if self._eviction.make_room(self._index) is not None:
            self._schedule_save()

        self._index.insert(message_id, now)
        self._schedule_save()
        return True

    def flush(self) -> Optional[SaveResult]:
        """Write the index now if there are unsaved mutations."""
        self._cancel_timer()
        if not self._dirty:
            return None
        return self._save()

    def shutdown(self) -> Optional[SaveResult]:
        """Cancel the pending timer and write any unsaved mutations."""
        result = self.flush()
        self._closed = True
        logger.info("Dedup service stopped", entries=len(self._index))
        return result

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, message_id: object) -> bool:
        return message_id in self._index

    def _restore(self) -> None:
        result = self.store.load()
        self._report(result)

        if not result.ok:
            if result.error is SnapshotErrorKind.MISSING:
                logger.info("No dedup snapshot found, starting empty", path=str(result.path))
            else:
                logger.warning(
                    "Dedup snapshot unusable, starting empty",
                    path=str(result.path),
                    kind=result.error.value,
                    error=result.detail,
                )
            return

        now = self._clock()
        skipped = 0
        for message_id, first_seen_at in result.entries.items():
            if self._sweep.is_live(first_seen_at, now):
                self._index.insert(message_id, first_seen_at)
            else:
                skipped += 1

        # A snapshot written with a larger max_size keeps only the newest ids
        while self._index.size() > self._eviction.max_size:
            self._index.remove_oldest()

        logger.info(
            "Dedup snapshot loaded",
            path=str(result.path),
            restored=len(self._index),
            skipped_expired=skipped,
        )

    def _schedule_save(self) -> None:
        self._dirty = True
        if self._closed:
            logger.debug("Dedup service stopped, mutation kept until flush()")
            return
        if self._save_handle is not None:
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop: the write happens on flush()/shutdown()
            return

        self._save_handle = loop.call_later(
            self.write_debounce_seconds, self._run_scheduled_save
        )

    def _run_scheduled_save(self) -> None:
        self._save_handle = None
        if self._dirty:
            self._save()

    def _cancel_timer(self) -> None:
        if self._save_handle is not None:
            self._save_handle.cancel()
            self._save_handle = None

    def _save(self) -> SaveResult:
        result = self.store.save(self._index.snapshot())
        if result.ok:
            self._dirty = False
        else:
            # Stays dirty so the next mutation or flush retries the write
            logger.warning(
                "Dedup snapshot save failed",
                path=str(result.path),
                kind=result.error.value,
                error=result.detail,
            )
        self._report(result)
        return result

    def _report(self, result: PersistenceResult) -> None:
        if self._on_persistence is None:
            return
        try:
            self._on_persistence(result)
        except Exception:
            logger.exception(
                "Dedup persistence hook failed", operation=type(result).__name__
            )
