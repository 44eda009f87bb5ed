"""Tests for sweep and eviction policies."""

from msgdedup.dedup.index import SeenIndex
from msgdedup.dedup.policy import EvictionPolicy, SweepPolicy


def _index(**entries: int) -> SeenIndex:
    index = SeenIndex()
    for message_id, ts in entries.items():
        index.insert(message_id, ts)
    return index


def test_sweep_throttled_until_interval_elapsed():
    """Sweep should not run until strictly more than the interval passed."""
    policy = SweepPolicy(ttl_ms=10, cleanup_interval_ms=100, started_at=0)
    index = _index(old=0)

    assert policy.maybe_sweep(index, 100) == []
    assert index.contains("old") is True

    assert policy.maybe_sweep(index, 101) == ["old"]
    assert policy.last_sweep_at == 101


def test_sweep_removes_only_expired_entries():
    """Entries older than TTL are removed; younger ones stay in order."""
    policy = SweepPolicy(ttl_ms=50, cleanup_interval_ms=0, started_at=0)
    index = _index(a=0, b=60, c=10, d=100)

    removed = policy.maybe_sweep(index, 100)

    assert removed == ["a", "c"]
    assert list(index.snapshot()) == ["b", "d"]


def test_sweep_updates_last_sweep_even_without_removals():
    """A sweep that removes nothing still resets the throttle."""
    policy = SweepPolicy(ttl_ms=1000, cleanup_interval_ms=10, started_at=0)
    index = _index(a=0)

    assert policy.maybe_sweep(index, 20) == []
    assert policy.last_sweep_at == 20
    assert policy.is_due(25) is False


def test_entry_at_exact_ttl_is_live_for_sweep_but_not_restore():
    """Sweep removes strictly older than TTL; restore keeps strictly younger."""
    policy = SweepPolicy(ttl_ms=100, cleanup_interval_ms=0, started_at=0)

    assert policy.is_expired(0, 100) is False
    assert policy.is_live(0, 100) is False
    assert policy.is_expired(0, 101) is True
    assert policy.is_live(0, 99) is True


def test_eviction_removes_single_oldest_at_capacity():
    """At capacity exactly one oldest entry should be evicted."""
    policy = EvictionPolicy(max_size=2)
    index = _index(a=1, b=2)

    assert policy.make_room(index) == "a"
    assert list(index.snapshot()) == ["b"]


def test_eviction_noop_below_capacity():
    """Nothing is evicted while there is room."""
    policy = EvictionPolicy(max_size=3)
    index = _index(a=1, b=2)

    assert policy.make_room(index) is None
    assert index.size() == 2
