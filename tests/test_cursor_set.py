import pytest

from emacs_engine.buffer import Cursor, CursorSet
from emacs_engine.buffer.cursor import shift_offset


def make_cursors(*positions: int, primary: int = 0) -> CursorSet:
    return CursorSet([Cursor(position) for position in positions], primary=primary)


def test_default_set_has_single_cursor_at_start() -> None:
    cursors = CursorSet()

    assert cursors.positions == (0,)
    assert cursors.primary_index == 0


def test_normalize_sorts_clamps_and_merges() -> None:
    cursors = make_cursors(9, 3, 3, 20, primary=1)

    cursors.normalize(10)

    assert cursors.positions == (3, 9, 10)
    assert cursors.primary.position == 3


def test_primary_survives_merge() -> None:
    cursors = CursorSet(
        [Cursor(4, goal_column=1), Cursor(4, goal_column=7)], primary=1
    )

    cursors.normalize(10)

    assert len(cursors) == 1
    assert cursors.primary.goal_column == 7


def test_add_cursor_keeps_order_and_primary() -> None:
    cursors = make_cursors(5)

    assert cursors.add_cursor(2) is True
    assert cursors.add_cursor(5) is False

    assert cursors.positions == (2, 5)
    assert cursors.primary.position == 5


def test_remove_secondary_keeps_primary_only() -> None:
    cursors = make_cursors(1, 4, 8, primary=2)

    assert cursors.remove_secondary() == 2
    assert cursors.positions == (8,)
    assert cursors.primary_index == 0


def test_adjust_for_insert_advances_points_but_not_marks() -> None:
    cursors = CursorSet([Cursor(2, mark=2, mark_active=True), Cursor(6)])

    cursors.adjust_for_edit(2, 2, 3)

    assert cursors.positions == (5, 9)
    assert cursors[0].mark == 2


def test_adjust_for_edit_drops_goal_column_of_moved_points() -> None:
    cursors = CursorSet([Cursor(1, goal_column=4), Cursor(6, goal_column=4)])

    cursors.adjust_for_edit(3, 3, 2)

    assert cursors.positions == (1, 8)
    assert cursors[0].goal_column == 4
    assert cursors[1].goal_column is None


def test_adjust_for_delete_collapses_inside_points() -> None:
    cursors = make_cursors(1, 3, 5, 8)

    cursors.adjust_for_edit(2, 6, 0)

    assert cursors.positions == (1, 2, 2, 4)


def test_shift_offset_replacement() -> None:
    assert shift_offset(1, 2, 4, 1, sticky=False) == 1
    assert shift_offset(3, 2, 4, 1, sticky=False) == 2
    assert shift_offset(4, 2, 4, 1, sticky=False) == 3
    assert shift_offset(2, 2, 2, 3, sticky=True) == 2


def test_snapshot_restore_round_trip() -> None:
    cursors = make_cursors(1, 4, primary=1)
    snapshot = cursors.snapshot()

    cursors.remove_secondary()
    cursors.restore(snapshot)

    assert cursors.positions == (1, 4)
    assert cursors.primary_index == 1


def test_check_invariant_flags_unsorted_cursors() -> None:
    cursors = make_cursors(4, 2)

    with pytest.raises(AssertionError):
        cursors.check_invariant(10)


def test_region_requires_active_mark() -> None:
    cursor = Cursor(7).with_mark(3)

    assert cursor.region() == (3, 7)
    assert cursor.deactivated().region() is None
