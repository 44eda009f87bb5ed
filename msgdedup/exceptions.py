"""Exceptions raised by msgdedup.

Persistence failures are reported as values (see
``msgdedup.dedup.snapshot_store.SnapshotErrorKind``), not raised.
"""


class MsgDedupError(Exception):
    """Base exception for msgdedup."""


class ConfigurationError(MsgDedupError):
    """Settings could not be loaded or failed validation."""
