"""Main entry point for msgdedup."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, TextIO

import structlog

from msgdedup import __version__
from msgdedup.config.loader import load_config
from msgdedup.config.settings import Settings
from msgdedup.dedup import MessageDedupService
from msgdedup.exceptions import ConfigurationError


def setup_logging(debug: bool = False, level_name: Optional[str] = None) -> None:
    """Configure structured logging."""
    level = logging.DEBUG if debug else getattr(logging, level_name or "INFO")

    # Logs go to stderr; stdout carries the decisions
    logging.basicConfig(
        level=level,
        format="%(message)s",
        stream=sys.stderr,
        force=True,
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            (
                structlog.processors.JSONRenderer()
                if not debug
                else structlog.dev.ConsoleRenderer()
            ),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Record message ids and report which ones are new",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--version", action="version", version=f"msgdedup {__version__}"
    )

    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    parser.add_argument("--config-file", type=Path, help="Path to env-style settings file")

    parser.add_argument(
        "message_ids",
        nargs="*",
        help="Message ids to record (read from stdin, one per line, if omitted)",
    )

    return parser.parse_args(argv)


def iter_message_ids(args: Iterable[str], stream: TextIO) -> Iterator[str]:
    """Yield ids from arguments, or non-blank stdin lines when none given."""
    given = [arg for arg in args if arg.strip()]
    if given:
        yield from given
        return
    for line in stream:
        message_id = line.strip()
        if message_id:
            yield message_id


async def run_dedup(
    config: Settings, message_ids: Iterable[str], out: TextIO
) -> int:
    """Record each id and print its decision; return the count of new ids."""
    logger = structlog.get_logger()
    service = MessageDedupService.from_settings(config)
    logger.info(
        "Dedup service ready",
        snapshot_path=str(config.snapshot_path),
        entries=len(service),
    )

    new_count = 0
    try:
        for message_id in message_ids:
            if service.try_record_message(message_id):
                new_count += 1
                print(f"new {message_id}", file=out)
            else:
                print(f"duplicate {message_id}", file=out)
            # Let a due debounce timer fire between ids
            await asyncio.sleep(0)
    finally:
        service.shutdown()

    return new_count


async def main(argv: Optional[List[str]] = None) -> None:
    """Main application entry point."""
    args = parse_args(argv)
    setup_logging(debug=args.debug)

    logger = structlog.get_logger()

    try:
        config = load_config(config_file=args.config_file)
        if not args.debug:
            setup_logging(debug=config.debug, level_name=config.log_level)

        new_count = await run_dedup(
            config, iter_message_ids(args.message_ids, sys.stdin), sys.stdout
        )
        logger.info("Dedup run complete", new=new_count)

    except ConfigurationError as e:
        logger.error("Configuration error", error=str(e))
        sys.exit(1)


def run() -> None:
    """Synchronous entry point for setuptools."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\nShutdown requested by user", file=sys.stderr)
        sys.exit(0)


if __name__ == "__main__":
    run()
