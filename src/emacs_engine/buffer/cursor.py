"""Cursor, mark and multi-cursor bookkeeping for buffers."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterator, List, Optional, Sequence

from .validation import clamp


@dataclass(frozen=True, slots=True)
class Cursor:
    """A point with its own mark, goal column and region flags."""

    position: int
    goal_column: Optional[int] = None
    mark: Optional[int] = None
    mark_active: bool = False
    shift_selected: bool = False

    def moved(self, position: int, *, goal_column: Optional[int] = None) -> "Cursor":
        return replace(self, position=position, goal_column=goal_column)

    def with_mark(
        self, mark: int, *, active: bool = True, shift: bool = False
    ) -> "Cursor":
        return replace(self, mark=mark, mark_active=active, shift_selected=shift)

    def deactivated(self) -> "Cursor":
        if not self.mark_active and not self.shift_selected:
            return self
        return replace(self, mark_active=False, shift_selected=False)

    def region(self) -> Optional[tuple[int, int]]:
        """``(start, end)`` between point and mark, only while the mark is active."""

        if not self.mark_active or self.mark is None:
            return None
        return (min(self.position, self.mark), max(self.position, self.mark))


@dataclass(frozen=True, slots=True)
class CursorSnapshot:
    """Immutable copy of a cursor set, recorded by undo entries."""

    cursors: tuple[Cursor, ...]
    primary: int = 0

    @property
    def positions(self) -> tuple[int, ...]:
        return tuple(cursor.position for cursor in self.cursors)


def shift_offset(
    offset: int, start: int, end: int, inserted: int, *, sticky: bool
) -> int:
    """Map ``offset`` across replacing ``[start, end)`` with ``inserted`` chars.

    Offsets inside the replaced span collapse to ``start``. An offset sitting
    exactly on a pure insertion moves past the new text unless ``sticky``.
    """

    if offset < start:
        return offset
    if offset == start and (start < end or sticky):
        return offset
    if offset < end:
        return start
    return offset + inserted - (end - start)


class CursorSet:
    """Ordered, duplicate-free collection of cursors with one primary.

    Between commands cursors are strictly increasing by position. Commands
    may break that ordering while they run; ``normalize`` restores it.
    """

    def __init__(
        self, cursors: Sequence[Cursor] | None = None, *, primary: int = 0
    ) -> None:
        self._cursors: List[Cursor] = list(cursors or (Cursor(0),))
        if not 0 <= primary < len(self._cursors):
            raise ValueError("primary index out of range")
        self._primary = primary

    def __len__(self) -> int:
        return len(self._cursors)

    def __iter__(self) -> Iterator[Cursor]:
        return iter(tuple(self._cursors))

    def __getitem__(self, index: int) -> Cursor:
        return self._cursors[index]

    @property
    def cursors(self) -> tuple[Cursor, ...]:
        return tuple(self._cursors)

    @property
    def primary(self) -> Cursor:
        return self._cursors[self._primary]

    @property
    def primary_index(self) -> int:
        return self._primary

    @property
    def positions(self) -> tuple[int, ...]:
        return tuple(cursor.position for cursor in self._cursors)

    def snapshot(self) -> CursorSnapshot:
        return CursorSnapshot(cursors=tuple(self._cursors), primary=self._primary)

    def restore(self, snapshot: CursorSnapshot) -> None:
        self._cursors = list(snapshot.cursors)
        self._primary = snapshot.primary

    def replace_all(self, cursors: Sequence[Cursor]) -> None:
        """Swap in updated cursors, index for index."""

        if len(cursors) != len(self._cursors):
            raise ValueError("replace_all must keep the cursor count")
        self._cursors = list(cursors)

    def set_primary(self, cursor: Cursor) -> None:
        self._cursors[self._primary] = cursor

    def add_cursor(self, position: int) -> bool:
        """Add a secondary cursor; returns False if one already sits there."""

        if position in self.positions:
            return False
        primary = self.primary
        self._cursors.append(Cursor(position))
        self._cursors.sort(key=lambda cursor: cursor.position)
        self._primary = self._cursors.index(primary)
        return True

    def remove_secondary(self) -> int:
        removed = len(self._cursors) - 1
        self._cursors = [self.primary]
        self._primary = 0
        return removed

    def move(self, index: int, position: int) -> None:
        self._cursors[index] = self._cursors[index].moved(position)

    def adjust_for_edit(self, start: int, end: int, inserted: int) -> None:
        """Shift every point and mark across one applied edit.

        Points on a pure insertion advance past it; marks stay before it. A
        point that moves loses its goal column.
        """

        adjusted = []
        for cursor in self._cursors:
            position = shift_offset(cursor.position, start, end, inserted, sticky=False)
            mark = cursor.mark
            if mark is not None:
                mark = shift_offset(mark, start, end, inserted, sticky=True)
            if position != cursor.position:
                cursor = cursor.moved(position)
            if mark != cursor.mark:
                cursor = replace(cursor, mark=mark)
            adjusted.append(cursor)
        self._cursors = adjusted

    def clear_goal_columns(self) -> None:
        self._cursors = [replace(cursor, goal_column=None) for cursor in self._cursors]

    def deactivate_marks(self, *, shift_only: bool = False) -> None:
        self._cursors = [
            cursor.deactivated()
            if not shift_only or cursor.shift_selected
            else cursor
            for cursor in self._cursors
        ]

    def normalize(self, length: int) -> None:
        """Clamp, sort and merge coincident cursors; the primary wins merges."""

        clamped: List[tuple[Cursor, bool]] = []
        for index, cursor in enumerate(self._cursors):
            position = clamp(cursor.position, length)
            mark = None if cursor.mark is None else clamp(cursor.mark, length)
            if position != cursor.position or mark != cursor.mark:
                cursor = replace(cursor, position=position, mark=mark)
            clamped.append((cursor, index == self._primary))

        clamped.sort(key=lambda item: (item[0].position, not item[1]))
        merged: List[Cursor] = []
        primary_index = 0
        for cursor, is_primary in clamped:
            if merged and merged[-1].position == cursor.position:
                continue
            if is_primary:
                primary_index = len(merged)
            merged.append(cursor)
        self._cursors = merged
        self._primary = primary_index

    def check_invariant(self, length: int) -> None:
        positions = self.positions
        assert positions, "cursor set is empty"
        assert 0 <= self._primary < len(positions), "primary index out of range"
        assert all(0 <= p <= length for p in positions), (
            f"cursor out of bounds: {positions}"
        )
        assert all(a < b for a, b in zip(positions, positions[1:])), (
            f"cursors not strictly increasing: {positions}"
        )


__all__ = ["Cursor", "CursorSet", "CursorSnapshot", "shift_offset"]
