"""Load validated settings from the environment or an env file."""

from pathlib import Path
from typing import Optional

import structlog
from pydantic import ValidationError

from msgdedup.exceptions import ConfigurationError

from .settings import Settings

logger = structlog.get_logger()


def load_config(config_file: Optional[Path] = None) -> Settings:
    """Build settings, optionally reading overrides from ``config_file``.

    Raises ConfigurationError when the file is missing or values are invalid.
    """
    if config_file is not None and not config_file.exists():
        raise ConfigurationError(f"Configuration file not found: {config_file}")

    try:
        if config_file is not None:
            settings = Settings(_env_file=config_file)  # type: ignore[call-arg]
        else:
            settings = Settings()
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e

    logger.debug(
        "Settings loaded",
        config_file=str(config_file) if config_file else None,
        snapshot_path=str(settings.snapshot_path),
    )
    return settings
