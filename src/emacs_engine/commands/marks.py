"""Mark and region commands."""

from __future__ import annotations

from typing import Optional

from emacs_engine.buffer import Cursor

from .helpers import map_cursors, push_mark
from .models import ExecutionContext


def set_mark_command(context: ExecutionContext) -> Optional[str]:
    """Set an active mark at every point, or pop the mark ring with a prefix."""

    if context.has_prefix:
        return _pop_to_mark(context)
    push_mark(context, context.cursors.primary.position, active=True)
    map_cursors(context, lambda cursor: cursor.with_mark(cursor.position))
    return "Mark set"


def _pop_to_mark(context: ExecutionContext) -> Optional[str]:
    primary = context.cursors.primary
    if primary.mark is None:
        return "No mark set in this buffer"
    target = primary.mark
    new_mark = context.buffer.marks.rotate(target)
    context.cursors.set_primary(
        primary.moved(target).with_mark(
            target if new_mark is None else new_mark, active=False
        )
    )
    context.cursors.normalize(len(context.document))
    return None


def exchange_point_and_mark(context: ExecutionContext) -> None:
    def swap(cursor: Cursor) -> Cursor:
        if not cursor.mark_active or cursor.mark is None:
            return cursor
        return cursor.moved(cursor.mark).with_mark(
            cursor.position, shift=cursor.shift_selected
        )

    map_cursors(context, swap)


def mark_whole_buffer(context: ExecutionContext) -> str:
    """Collapse to the primary cursor and select the whole buffer."""

    cursors = context.cursors
    cursors.remove_secondary()
    push_mark(context, 0, active=True)
    cursors.set_primary(
        cursors.primary.moved(len(context.document)).with_mark(0)
    )
    return "Mark set"


def keyboard_quit(context: ExecutionContext) -> str:
    context.cursors.deactivate_marks()
    context.cursors.remove_secondary()
    return "Quit"


__all__ = [
    "exchange_point_and_mark",
    "keyboard_quit",
    "mark_whole_buffer",
    "set_mark_command",
]
