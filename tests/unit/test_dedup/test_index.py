"""Tests for the insertion-ordered seen index."""

import pytest

from msgdedup.dedup.index import SeenIndex


def test_insert_and_contains():
    """Inserted ids should be members; others should not."""
    index = SeenIndex()
    index.insert("m1", 1000)

    assert index.contains("m1") is True
    assert "m1" in index
    assert index.contains("m2") is False
    assert index.size() == 1


def test_insert_existing_id_rejected():
    """Re-inserting an indexed id should raise instead of moving it."""
    index = SeenIndex()
    index.insert("m1", 1000)

    with pytest.raises(ValueError):
        index.insert("m1", 2000)
    assert index.snapshot() == {"m1": 1000}


def test_remove_oldest_follows_insertion_order():
    """Oldest entry is the earliest inserted, not the smallest timestamp."""
    index = SeenIndex()
    index.insert("late", 5000)
    index.insert("early", 1000)

    assert index.remove_oldest() == "late"
    assert index.remove_oldest() == "early"
    assert len(index) == 0


def test_remove_oldest_on_empty_raises():
    """Callers must check size before evicting."""
    with pytest.raises(KeyError):
        SeenIndex().remove_oldest()


def test_iterate_allows_removing_current_entry():
    """Removing the current entry while iterating should not break the pass."""
    index = SeenIndex()
    for i in range(5):
        index.insert(f"m{i}", i)

    seen = []
    for message_id, _ in index.iterate():
        seen.append(message_id)
        if message_id in ("m1", "m3"):
            index.remove(message_id)

    assert seen == ["m0", "m1", "m2", "m3", "m4"]
    assert list(index.snapshot()) == ["m0", "m2", "m4"]
