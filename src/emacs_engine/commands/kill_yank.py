"""Kill and yank commands.

Kill commands never touch the kill ring directly: they hand the removed
text to ``ExecutionContext.record_kill`` and the engine pushes it once the
command is done, which is where appending to the previous kill happens.
"""

from __future__ import annotations

from typing import List, Optional

from emacs_engine.buffer import BufferDocument, CursorEdit

from .helpers import backward_word, forward_word, region_edits
from .models import ExecutionContext

YANK_COMMANDS = frozenset({"yank", "yank-pop"})


def _kill_line_span(
    document: BufferDocument, point: int, count: Optional[int]
) -> tuple[int, int]:
    line = document.line_of(point)
    last_line = document.line_count() - 1
    if count is None:
        line_end = document.line_end(line)
        rest = document.slice(point, line_end)
        if (not rest or rest.isspace()) and line_end < len(document):
            return point, line_end + 1
        return point, line_end
    if count > 0:
        target = line + count
        end = document.line_start(target) if target <= last_line else len(document)
        return point, end
    return document.line_start(max(line + count, 0)), point


def kill_line(context: ExecutionContext) -> None:
    """Kill to the end of the line, or the newline when nothing else is left.

    With a prefix argument ``n`` kill ``n`` whole lines forward from point
    (backward to the start of an earlier line when ``n <= 0``).
    """

    document = context.document
    prefix = context.context.prefix_arg
    edits = []
    for index, cursor in enumerate(context.cursors):
        start, end = _kill_line_span(document, cursor.position, prefix)
        if start < end:
            edits.append(CursorEdit(start, end, cursor=index))
    killed = context.buffer.apply_edits(edits)
    backward = prefix is not None and prefix <= 0
    context.record_kill(killed, "backward" if backward else "forward")


def kill_word(context: ExecutionContext) -> None:
    document = context.document
    edits = []
    for index, cursor in enumerate(context.cursors):
        end = forward_word(document, cursor.position, context.count)
        start, end = sorted((cursor.position, end))
        if start < end:
            edits.append(CursorEdit(start, end, cursor=index))
    killed = context.buffer.apply_edits(edits)
    context.record_kill(killed, "forward" if context.count >= 0 else "backward")


def backward_kill_word(context: ExecutionContext) -> None:
    document = context.document
    edits = []
    for index, cursor in enumerate(context.cursors):
        start = backward_word(document, cursor.position, context.count)
        start, end = sorted((start, cursor.position))
        if start < end:
            edits.append(CursorEdit(start, end, cursor=index))
    killed = context.buffer.apply_edits(edits)
    context.record_kill(killed, "backward" if context.count >= 0 else "forward")


def kill_region(context: ExecutionContext) -> Optional[str]:
    edits = region_edits(context)
    if not edits:
        return "The mark is not active now"
    killed = context.buffer.apply_edits(edits)
    context.record_kill(killed)
    return None


def copy_region_as_kill(context: ExecutionContext) -> Optional[str]:
    edits = region_edits(context)
    if not edits:
        return "The mark is not active now"
    document = context.document
    context.record_kill([document.slice(edit.start, edit.end) for edit in edits])
    return "Region saved"


def _yank_texts(context: ExecutionContext) -> List[str]:
    """Text for each cursor: one piece each when the kill has a piece per cursor."""

    entry = context.kill_ring.current_entry()
    count = len(context.cursors)
    if count > 1 and len(entry.pieces) == count:
        return list(entry.pieces)
    return [entry.text] * count


def _mark_yanked(context: ExecutionContext, texts: List[str]) -> None:
    cursors = context.cursors
    cursors.replace_all(
        [
            cursor.with_mark(max(cursor.position - len(text), 0), active=False)
            for cursor, text in zip(cursors, texts)
        ]
    )


def yank(context: ExecutionContext) -> None:
    """Insert the most recent kill at every cursor, leaving mark before it."""

    if context.last_command not in YANK_COMMANDS:
        context.kill_ring.reset_yank()
    texts = _yank_texts(context)
    context.buffer.apply_edits(
        [
            CursorEdit(cursor.position, cursor.position, text, cursor=index)
            for index, (cursor, text) in enumerate(zip(context.cursors, texts))
        ]
    )
    _mark_yanked(context, texts)


def yank_pop(context: ExecutionContext) -> Optional[str]:
    """Replace the text just yanked with the next older kill."""

    if context.last_command not in YANK_COMMANDS:
        return "Previous command was not a yank"
    context.kill_ring.yank_pop()
    texts = _yank_texts(context)
    edits = []
    for index, (cursor, text) in enumerate(zip(context.cursors, texts)):
        mark = cursor.mark if cursor.mark is not None else cursor.position
        start, end = sorted((mark, cursor.position))
        edits.append(CursorEdit(start, end, text, cursor=index, point="end"))
    context.buffer.apply_edits(edits)
    _mark_yanked(context, texts)
    return None


__all__ = [
    "backward_kill_word",
    "copy_region_as_kill",
    "kill_line",
    "kill_region",
    "kill_word",
    "yank",
    "yank_pop",
]
