"""Default values shared by settings and the dedup service."""

DEFAULT_TTL_HOURS = 72
DEFAULT_MAX_SIZE = 1_000
DEFAULT_CLEANUP_INTERVAL_SECONDS = 5 * 60
DEFAULT_WRITE_DEBOUNCE_MS = 500

DEFAULT_SNAPSHOT_FILENAME = "dedup.json"

MS_PER_SECOND = 1_000
MS_PER_HOUR = 60 * 60 * MS_PER_SECOND
