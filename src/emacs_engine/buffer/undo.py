"""Linear undo log where undoing is itself recorded and undoable."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Union

from emacs_engine.runtime import telemetry

from .cursor import CursorSnapshot


@dataclass(frozen=True, slots=True)
class Insert:
    position: int
    text: str


@dataclass(frozen=True, slots=True)
class Delete:
    position: int
    text: str


@dataclass(frozen=True, slots=True)
class CursorMove:
    before: CursorSnapshot
    after: CursorSnapshot


@dataclass(frozen=True, slots=True)
class Boundary:
    pass


UndoEntry = Union[Insert, Delete, CursorMove, Boundary]
BOUNDARY = Boundary()


class UndoEmpty(RuntimeError):
    """Raised when there is nothing left to undo."""

    def __init__(self, message: str = "No further undo information") -> None:
        super().__init__(message)


class UndoHistory:
    """Flat log of undo entries plus a read position.

    ``entries[:position]`` is the stretch ``undo`` walks back through.
    Recording a fresh edit drops everything past ``position``; undo steps
    append their own inverse edits at the end of the log instead, so a
    later ``undo`` that starts from the end redoes them.
    """

    def __init__(self) -> None:
        self.entries: List[UndoEntry] = []
        self.position = 0
        self.in_undo_sequence = False
        self._boundary_pending = False

    def __len__(self) -> int:
        return len(self.entries)

    def boundary(self) -> None:
        """Start a new group before the next recorded entry."""

        self._boundary_pending = True

    def record(self, entries: Sequence[UndoEntry]) -> None:
        if not entries:
            return
        if self.position < len(self.entries):
            telemetry.record_event(
                "undo.truncate",
                level="debug",
                data={"dropped": len(self.entries) - self.position},
            )
            del self.entries[self.position :]
        if self._boundary_pending:
            self._append_boundary()
            self._boundary_pending = False
        self.entries.extend(entries)
        self.position = len(self.entries)
        self.in_undo_sequence = False

    def can_undo(self) -> bool:
        return self._rewind() > 0

    def begin_undo(self) -> List[UndoEntry]:
        """Claim the group before ``position``, newest entry first.

        Moves ``position`` onto the group's boundary so that the next call
        continues further back.
        """

        end = self._rewind()
        if end == 0:
            raise UndoEmpty()
        start = end
        while start > 0 and not isinstance(self.entries[start - 1], Boundary):
            start -= 1
        group = self.entries[start:end]
        self.position = max(start - 1, 0)
        self.in_undo_sequence = True
        return list(reversed(group))

    def record_undo(self, entries: Sequence[UndoEntry]) -> None:
        """Append the edits an undo step applied as their own group."""

        self._append_boundary()
        self.entries.extend(entries)
        self._boundary_pending = True

    def finish_command(self, *, was_undo: bool) -> None:
        """Close an undo sequence once a different command has run."""

        if was_undo:
            return
        if self.in_undo_sequence:
            self.position = len(self.entries)
            self.in_undo_sequence = False

    def clear(self) -> None:
        self.entries.clear()
        self.position = 0
        self.in_undo_sequence = False
        self._boundary_pending = False

    def check_invariant(self) -> None:
        assert 0 <= self.position <= len(self.entries), (
            f"undo position {self.position} outside 0..{len(self.entries)}"
        )

    def _rewind(self) -> int:
        end = self.position
        while end > 0 and isinstance(self.entries[end - 1], Boundary):
            end -= 1
        return end

    def _append_boundary(self) -> None:
        if self.entries and not isinstance(self.entries[-1], Boundary):
            self.entries.append(BOUNDARY)


__all__ = [
    "BOUNDARY",
    "Boundary",
    "CursorMove",
    "Delete",
    "Insert",
    "UndoEmpty",
    "UndoEntry",
    "UndoHistory",
]
