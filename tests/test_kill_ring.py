import pytest

from emacs_engine.buffer import KillRing, KillRingEmpty


def make_ring(*texts: str, capacity: int = 60) -> KillRing:
    ring = KillRing(capacity)
    for text in texts:
        ring.push(text)
        ring.last_was_kill = False
    return ring


def test_push_is_most_recent_first() -> None:
    ring = make_ring("one", "two", "three")

    assert ring.entries == ("three", "two", "one")
    assert ring.yank() == "three"


def test_consecutive_kills_append_or_prepend() -> None:
    ring = KillRing()

    ring.push("foo")
    ring.push(" bar")
    ring.push("<", "backward")

    assert ring.entries == ("<foo bar",)


def test_kill_after_non_kill_starts_new_entry() -> None:
    ring = KillRing()
    ring.push("first")
    ring.last_was_kill = False

    ring.push("second")

    assert ring.entries == ("second", "first")


def test_capacity_evicts_oldest() -> None:
    ring = make_ring("a", "b", "c", "d", capacity=3)

    assert ring.entries == ("d", "c", "b")


def test_yank_pop_cycles_with_wraparound() -> None:
    ring = make_ring("a", "b", "c")

    assert ring.yank_pop() == "b"
    assert ring.yank_pop() == "a"
    assert ring.yank_pop() == "c"
    ring.yank_pop()
    ring.reset_yank()
    assert ring.yank() == "c"


def test_empty_ring_raises() -> None:
    ring = KillRing()

    with pytest.raises(KillRingEmpty, match="Kill ring is empty"):
        ring.yank()
    with pytest.raises(KillRingEmpty):
        ring.yank_pop()
    assert ring.peek() is None


def test_pieces_merge_per_cursor() -> None:
    ring = KillRing()

    ring.push("ab", pieces=("a", "b"))
    ring.push("xy", pieces=("x", "y"))

    entry = ring.current_entry()
    assert entry.text == "abxy"
    assert entry.pieces == ("ax", "by")


def test_empty_text_is_ignored() -> None:
    ring = KillRing()

    ring.push("")

    assert len(ring) == 0
    assert ring.last_was_kill is False
