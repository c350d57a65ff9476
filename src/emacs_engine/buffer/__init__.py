"""Buffer abstractions: rope storage, cursors, marks, undo and kills."""

from .buffer import Buffer, BufferView, CursorEdit, Transaction
from .cursor import Cursor, CursorSet, CursorSnapshot
from .document import BufferDocument
from .kill_ring import KillEntry, KillRing, KillRingEmpty
from .mark import MarkRing
from .position import Position
from .sync import BufferMirror, BufferSync, BufferValidationError
from .undo import Boundary, CursorMove, Delete, Insert, UndoEmpty, UndoHistory
from .validation import OutOfRange, ReadOnlyViolation

__all__ = [
    "BufferDocument",
    "Position",
    "Cursor",
    "CursorSet",
    "CursorSnapshot",
    "MarkRing",
    "KillRing",
    "KillEntry",
    "KillRingEmpty",
    "UndoHistory",
    "UndoEmpty",
    "Insert",
    "Delete",
    "CursorMove",
    "Boundary",
    "Buffer",
    "BufferView",
    "CursorEdit",
    "Transaction",
    "BufferMirror",
    "BufferSync",
    "BufferValidationError",
    "OutOfRange",
    "ReadOnlyViolation",
]
