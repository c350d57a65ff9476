import pytest

from emacs_engine.buffer import (
    Buffer,
    Cursor,
    CursorEdit,
    CursorSet,
    Delete,
    OutOfRange,
    ReadOnlyViolation,
)
from emacs_engine.runtime.config import EngineConfig


def make_buffer(text: str, *positions: int, read_only: bool = False) -> Buffer:
    buffer = Buffer.from_text(
        text, read_only=read_only, config=EngineConfig(rope_leaf_size=4)
    )
    if positions:
        buffer.cursors = CursorSet([Cursor(position) for position in positions])
    return buffer


def test_simultaneous_inserts_shift_later_cursors() -> None:
    buffer = make_buffer("abcdefghij", 2, 5)

    buffer.apply_edits(
        [CursorEdit(2, 2, "X", cursor=0), CursorEdit(5, 5, "X", cursor=1)]
    )

    assert buffer.contents() == "abXcdeXfghij"
    assert buffer.cursors.positions == (3, 7)


def test_overlapping_deletions_merge_into_one_entry() -> None:
    buffer = make_buffer("one two three", 0, 2)

    removed = buffer.apply_edits([CursorEdit(0, 4, cursor=0), CursorEdit(2, 8)])

    assert removed == ["one two "]
    assert buffer.contents() == "three"
    assert buffer.cursors.positions == (0,)
    deletes = [entry for entry in buffer.undo.entries if isinstance(entry, Delete)]
    assert len(deletes) == 1


def test_keep_and_end_point_placement() -> None:
    buffer = make_buffer("ab", 1)

    buffer.apply_edits([CursorEdit(1, 1, "\n", cursor=0, point="keep")])
    assert buffer.cursors.positions == (1,)

    buffer.apply_edits([CursorEdit(0, 1, "A", cursor=0, point="end")])
    assert buffer.contents() == "A\nb"
    assert buffer.cursors.positions == (1,)


def test_marks_stay_in_front_of_inserted_text() -> None:
    buffer = make_buffer("abc")
    buffer.cursors = CursorSet([Cursor(1, mark=1, mark_active=True)])

    buffer.insert(1, "zz")

    assert buffer.cursors.primary.position == 3
    assert buffer.cursors.primary.mark == 1


def test_invalid_range_is_rejected_before_any_change() -> None:
    buffer = make_buffer("abc")

    with pytest.raises(OutOfRange):
        buffer.apply_edits([CursorEdit(0, 1), CursorEdit(2, 7)])

    assert buffer.contents() == "abc"
    assert len(buffer.undo) == 0


def test_read_only_buffer_rejects_edits() -> None:
    buffer = make_buffer("abc", read_only=True)

    with pytest.raises(ReadOnlyViolation):
        buffer.insert(0, "x")

    assert buffer.contents() == "abc"
    assert buffer.modified is False

    with pytest.raises(ReadOnlyViolation):
        buffer.apply_edits([])


def test_snapshot_exposes_a_line_window() -> None:
    buffer = make_buffer("one\ntwo\nthree", 5)

    view = buffer.snapshot(first_line=1, line_count=5)

    assert view.lines == ("two", "three")
    assert view.line_count == 3
    assert view.cursor.as_tuple() == (1, 1)
    assert view.read_only is False


def test_load_text_resets_state() -> None:
    buffer = make_buffer("old", 2)
    buffer.insert(0, "x")

    buffer.load_text("fresh\ntext")

    assert buffer.contents() == "fresh\ntext"
    assert buffer.cursors.positions == (0,)
    assert len(buffer.undo) == 0
    assert buffer.modified is False


def test_modified_flag_tracks_edits_until_saved() -> None:
    buffer = make_buffer("abc")

    buffer.insert(3, "d")
    assert buffer.modified is True

    buffer.mark_saved()
    assert buffer.modified is False
    assert buffer.snapshot().modified is False
