"""Configuration management using Pydantic Settings.

Features:
- Environment variable loading (``MSGDEDUP_`` prefix)
- Type validation
- Default values
- Computed properties
"""

from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from msgdedup.utils.constants import (
    DEFAULT_CLEANUP_INTERVAL_SECONDS,
    DEFAULT_MAX_SIZE,
    DEFAULT_SNAPSHOT_FILENAME,
    DEFAULT_TTL_HOURS,
    DEFAULT_WRITE_DEBOUNCE_MS,
    MS_PER_HOUR,
    MS_PER_SECOND,
)


class Settings(BaseSettings):
    """Dedup settings loaded from environment variables."""

    # Storage
    data_dir: Path = Field(
        default_factory=lambda: Path.home() / ".msgdedup" / "data",
        description="Directory holding the dedup snapshot",
    )
    snapshot_filename: str = Field(
        DEFAULT_SNAPSHOT_FILENAME, description="Snapshot file name inside data_dir"
    )

    # Cache behaviour
    ttl_hours: int = Field(
        DEFAULT_TTL_HOURS,
        description="Hours a message id is remembered",
        ge=1,
        le=24 * 365,
    )
    max_size: int = Field(
        DEFAULT_MAX_SIZE, description="Maximum remembered message ids", ge=1
    )
    cleanup_interval_seconds: int = Field(
        DEFAULT_CLEANUP_INTERVAL_SECONDS,
        description="Minimum seconds between expiry sweeps",
        ge=0,
    )
    write_debounce_ms: int = Field(
        DEFAULT_WRITE_DEBOUNCE_MS,
        description="Delay coalescing snapshot writes",
        ge=0,
        le=60000,
    )

    # Monitoring
    log_level: str = Field("INFO", description="Logging level")

    # Development
    debug: bool = Field(False, description="Enable debug mode")

    model_config = SettingsConfigDict(
        env_prefix="MSGDEDUP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("data_dir", mode="before")
    @classmethod
    def expand_data_dir(cls, v: Any) -> Path:
        """Expand ~ and make the data directory absolute."""
        if isinstance(v, str):
            v = Path(v)
        return v.expanduser().resolve()  # type: ignore[no-any-return]

    @field_validator("snapshot_filename")
    @classmethod
    def validate_snapshot_filename(cls, v: str) -> str:
        """Snapshot file must be a plain name inside data_dir."""
        name = v.strip()
        if not name or name in (".", ".."):
            raise ValueError("snapshot_filename must not be empty")
        if Path(name).name != name:
            raise ValueError(f"snapshot_filename must not contain a path: {v}")
        return name

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: Any) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return v.upper()  # type: ignore[no-any-return]

    @property
    def snapshot_path(self) -> Path:
        return self.data_dir / self.snapshot_filename

    @property
    def ttl_ms(self) -> int:
        return self.ttl_hours * MS_PER_HOUR

    @property
    def cleanup_interval_ms(self) -> int:
        return self.cleanup_interval_seconds * MS_PER_SECOND
