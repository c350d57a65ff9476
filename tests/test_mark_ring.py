from emacs_engine.buffer import MarkRing


def make_ring(*marks: int, capacity: int = 16) -> MarkRing:
    ring = MarkRing(capacity)
    for mark in marks:
        ring.push(mark)
    return ring


def test_push_skips_repeat_of_newest_mark() -> None:
    ring = make_ring(3, 3, 5)

    assert list(ring) == [5, 3]


def test_capacity_drops_oldest_marks() -> None:
    ring = make_ring(1, 2, 3, capacity=2)

    assert list(ring) == [3, 2]


def test_rotate_files_current_mark_at_the_back() -> None:
    ring = make_ring(1, 2)

    assert ring.rotate(9) == 2
    assert list(ring) == [1, 9]
    assert ring.rotate() == 1
    assert list(ring) == [9]


def test_rotate_on_empty_ring() -> None:
    assert MarkRing().rotate(4) is None


def test_marks_follow_edits() -> None:
    ring = make_ring(2, 10)

    ring.adjust_for_edit(4, 6, 0)

    assert list(ring) == [8, 2]
    assert ring.pop() == 8
    assert ring.current() == 2
