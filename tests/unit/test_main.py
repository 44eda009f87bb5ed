"""Tests for logging setup and the command line runner."""

import io
import json
import logging

import pytest

from msgdedup.config.settings import Settings
from msgdedup.main import iter_message_ids, parse_args, run_dedup, setup_logging


def test_setup_logging_sets_root_level() -> None:
    """Debug flag should switch the root logger to DEBUG."""
    setup_logging(debug=True)
    assert logging.getLogger().level == logging.DEBUG

    setup_logging(debug=False, level_name="WARNING")
    assert logging.getLogger().level == logging.WARNING


def test_parse_args_collects_message_ids() -> None:
    """Positional arguments are message ids."""
    args = parse_args(["--debug", "m1", "m2"])

    assert args.debug is True
    assert args.message_ids == ["m1", "m2"]


def test_iter_message_ids_falls_back_to_stdin() -> None:
    """Without arguments ids come from non-blank stdin lines."""
    stream = io.StringIO("m1\n\n  m2  \n")

    assert list(iter_message_ids([], stream)) == ["m1", "m2"]
    assert list(iter_message_ids(["a"], stream)) == ["a"]


@pytest.mark.asyncio
async def test_run_dedup_reports_decisions_and_persists(tmp_path) -> None:
    """Runner prints new/duplicate per id and flushes on exit."""
    config = Settings(data_dir=tmp_path, write_debounce_ms=10_000)
    out = io.StringIO()

    new_count = await run_dedup(config, ["m1", "m2", "m1"], out)

    assert new_count == 2
    assert out.getvalue().splitlines() == ["new m1", "new m2", "duplicate m1"]
    payload = json.loads(config.snapshot_path.read_text(encoding="utf-8"))
    assert set(payload["entries"]) == {"m1", "m2"}

    out = io.StringIO()
    assert await run_dedup(config, ["m2", "m3"], out) == 1
    assert out.getvalue().splitlines() == ["duplicate m2", "new m3"]
