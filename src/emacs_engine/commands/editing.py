"""Insertion, deletion and case commands."""

from __future__ import annotations

from typing import Callable, Optional

from emacs_engine.buffer import CursorEdit

from .helpers import clip_overlaps, forward_word, region_edits
from .models import ExecutionContext


def self_insert_command(context: ExecutionContext) -> None:
    """Insert ``context.text`` at every cursor, ``count`` times over."""

    text = context.context.text
    if not text or context.count <= 0:
        return
    text = text * context.count
    context.buffer.apply_edits(
        [
            CursorEdit(cursor.position, cursor.position, text, cursor=index)
            for index, cursor in enumerate(context.cursors)
        ]
    )


def _delete_chars(context: ExecutionContext, count: int) -> None:
    """Delete active regions when there are any, else ``count`` characters."""

    regions = region_edits(context)
    if regions:
        context.buffer.apply_edits(regions)
        return
    length = len(context.document)
    edits = []
    for index, cursor in enumerate(context.cursors):
        if count >= 0:
            start, end = cursor.position, min(cursor.position + count, length)
        else:
            start, end = max(cursor.position + count, 0), cursor.position
        if start < end:
            edits.append(CursorEdit(start, end, cursor=index))
    context.buffer.apply_edits(edits)


def delete_char(context: ExecutionContext) -> None:
    _delete_chars(context, context.count)


def delete_backward_char(context: ExecutionContext) -> None:
    _delete_chars(context, -context.count)


def newline(context: ExecutionContext) -> None:
    if context.count <= 0:
        return
    context.buffer.apply_edits(
        [
            CursorEdit(cursor.position, cursor.position, "\n" * context.count, cursor=i)
            for i, cursor in enumerate(context.cursors)
        ]
    )


def open_line(context: ExecutionContext) -> None:
    """Insert newlines after point without moving it."""

    if context.count <= 0:
        return
    context.buffer.apply_edits(
        [
            CursorEdit(
                cursor.position,
                cursor.position,
                "\n" * context.count,
                cursor=i,
                point="keep",
            )
            for i, cursor in enumerate(context.cursors)
        ]
    )


def transpose_chars(context: ExecutionContext) -> Optional[str]:
    """Swap the characters around point and step past them.

    At the end of a line or of the buffer the two characters before point
    are swapped instead and point stays put.
    """

    document = context.document
    length = len(document)
    if length < 2:
        return "Beginning of buffer"
    edits = []
    reach = 0
    for index, cursor in enumerate(context.cursors):
        pos = cursor.position
        at_line_end = pos >= length or document.char_at(pos) == "\n"
        if pos == 0:
            first = 0
        elif at_line_end and pos >= 2:
            first = pos - 2
        else:
            first = pos - 1
        if first < reach:
            continue
        pair = document.slice(first, first + 2)
        edits.append(
            CursorEdit(first, first + 2, pair[::-1], cursor=index, point="end")
        )
        reach = first + 2
    context.buffer.apply_edits(edits)
    return None


def _case_region(context: ExecutionContext, transform: Callable[[str], str]) -> None:
    spans = []
    for index, cursor in enumerate(context.cursors):
        region = cursor.region()
        if region is not None:
            spans.append((index, *region))
    edits = [
        CursorEdit(start, end, transform(context.document.slice(start, end)), cursor=i)
        for i, start, end in clip_overlaps(spans)
        if start < end
    ]
    context.buffer.apply_edits(edits)


def _case_word(context: ExecutionContext, transform: Callable[[str], str]) -> None:
    document = context.document
    spans = []
    for index, cursor in enumerate(context.cursors):
        end = forward_word(document, cursor.position, context.count)
        start, end = sorted((cursor.position, end))
        spans.append((index, start, end))
    moves_forward = context.count >= 0
    context.buffer.apply_edits(
        [
            CursorEdit(
                start,
                end,
                transform(document.slice(start, end)),
                cursor=index,
                point="end" if moves_forward else "auto",
            )
            for index, start, end in clip_overlaps(spans)
        ]
    )


def upcase_region(context: ExecutionContext) -> None:
    _case_region(context, str.upper)


def downcase_region(context: ExecutionContext) -> None:
    _case_region(context, str.lower)


def upcase_word(context: ExecutionContext) -> None:
    _case_word(context, str.upper)


def downcase_word(context: ExecutionContext) -> None:
    _case_word(context, str.lower)


__all__ = [
    "delete_backward_char",
    "delete_char",
    "downcase_region",
    "downcase_word",
    "newline",
    "open_line",
    "self_insert_command",
    "transpose_chars",
    "upcase_region",
    "upcase_word",
]
