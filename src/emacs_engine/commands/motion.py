"""Point motion commands, plain and shift-selecting."""

from __future__ import annotations

from typing import Callable, Optional

from emacs_engine.buffer import BufferDocument, Cursor
from emacs_engine.buffer.validation import clamp

from .helpers import forward_word, map_cursors, push_mark
from .models import ExecutionContext

Target = Callable[[BufferDocument, Cursor, int], Cursor]


def _move(context: ExecutionContext, target: Target, *, shift: bool) -> None:
    """Move every cursor; shift motion opens a region, plain motion closes one."""

    document = context.document
    count = context.count

    def update(cursor: Cursor) -> Cursor:
        if shift and not cursor.mark_active:
            cursor = cursor.with_mark(cursor.position, shift=True)
        elif not shift and cursor.shift_selected:
            cursor = cursor.deactivated()
        return target(document, cursor, count)

    map_cursors(context, update)


def _chars(sign: int) -> Target:
    def target(document: BufferDocument, cursor: Cursor, count: int) -> Cursor:
        return cursor.moved(clamp(cursor.position + sign * count, len(document)))

    return target


def _lines(sign: int) -> Target:
    def target(document: BufferDocument, cursor: Cursor, count: int) -> Cursor:
        here = document.offset_to_position(cursor.position)
        goal = cursor.goal_column if cursor.goal_column is not None else here.column
        line = max(0, min(here.line + sign * count, document.line_count() - 1))
        column = min(goal, document.line_length(line))
        return cursor.moved(document.line_start(line) + column, goal_column=goal)

    return target


def _words(sign: int) -> Target:
    def target(document: BufferDocument, cursor: Cursor, count: int) -> Cursor:
        return cursor.moved(forward_word(document, cursor.position, sign * count))

    return target


def _line_start(document: BufferDocument, cursor: Cursor, _count: int) -> Cursor:
    line = document.line_of(cursor.position)
    return cursor.moved(document.line_start(line))


def _line_end(document: BufferDocument, cursor: Cursor, _count: int) -> Cursor:
    line = document.line_of(cursor.position)
    return cursor.moved(document.line_end(line))


def _buffer_start(document: BufferDocument, cursor: Cursor, _count: int) -> Cursor:
    return cursor.moved(0)


def _buffer_end(document: BufferDocument, cursor: Cursor, _count: int) -> Cursor:
    return cursor.moved(len(document))


def forward_char(context: ExecutionContext, *, shift: bool = False) -> None:
    _move(context, _chars(1), shift=shift)


def backward_char(context: ExecutionContext, *, shift: bool = False) -> None:
    _move(context, _chars(-1), shift=shift)


def next_line(context: ExecutionContext, *, shift: bool = False) -> None:
    _move(context, _lines(1), shift=shift)


def previous_line(context: ExecutionContext, *, shift: bool = False) -> None:
    _move(context, _lines(-1), shift=shift)


def forward_word_command(context: ExecutionContext, *, shift: bool = False) -> None:
    _move(context, _words(1), shift=shift)


def backward_word_command(context: ExecutionContext, *, shift: bool = False) -> None:
    _move(context, _words(-1), shift=shift)


def move_beginning_of_line(context: ExecutionContext, *, shift: bool = False) -> None:
    _move(context, _line_start, shift=shift)


def move_end_of_line(context: ExecutionContext, *, shift: bool = False) -> None:
    _move(context, _line_end, shift=shift)


def _push_mark_before_jump(context: ExecutionContext) -> Optional[str]:
    primary = context.cursors.primary
    if primary.mark_active:
        return None
    push_mark(context, primary.position, active=False)
    return "Mark set"


def beginning_of_buffer(
    context: ExecutionContext, *, shift: bool = False
) -> Optional[str]:
    message = None if shift else _push_mark_before_jump(context)
    _move(context, _buffer_start, shift=shift)
    return message


def end_of_buffer(context: ExecutionContext, *, shift: bool = False) -> Optional[str]:
    message = None if shift else _push_mark_before_jump(context)
    _move(context, _buffer_end, shift=shift)
    return message


def goto_line(context: ExecutionContext) -> Optional[str]:
    """Jump every cursor to the start of line ``prefix_arg`` (1-based)."""

    if context.context.prefix_arg is None:
        return "goto-line needs a line number"
    document = context.document
    line = max(0, min(context.context.prefix_arg - 1, document.line_count() - 1))
    offset = document.line_start(line)
    map_cursors(context, lambda cursor: cursor.deactivated().moved(offset))
    return None


__all__ = [
    "backward_char",
    "backward_word_command",
    "beginning_of_buffer",
    "end_of_buffer",
    "forward_char",
    "forward_word_command",
    "goto_line",
    "move_beginning_of_line",
    "move_end_of_line",
    "next_line",
    "previous_line",
]
