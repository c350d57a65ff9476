"""Text scanning and cursor plumbing shared by command implementations."""

from __future__ import annotations

from typing import Callable, List, Optional, Sequence

from emacs_engine.buffer import BufferDocument, Cursor, CursorEdit

from .models import ExecutionContext


def is_word_char(char: str) -> bool:
    return char.isalnum() or char == "_"


def forward_word(document: BufferDocument, offset: int, count: int = 1) -> int:
    """Offset after ``count`` words forward (backward when negative)."""

    if count < 0:
        return backward_word(document, offset, -count)
    length = len(document)
    for _ in range(count):
        while offset < length and not is_word_char(document.char_at(offset)):
            offset += 1
        while offset < length and is_word_char(document.char_at(offset)):
            offset += 1
    return offset


def backward_word(document: BufferDocument, offset: int, count: int = 1) -> int:
    if count < 0:
        return forward_word(document, offset, -count)
    for _ in range(count):
        while offset > 0 and not is_word_char(document.char_at(offset - 1)):
            offset -= 1
        while offset > 0 and is_word_char(document.char_at(offset - 1)):
            offset -= 1
    return offset


def word_around(document: BufferDocument, offset: int) -> Optional[tuple[int, int]]:
    """Bounds of the word touching ``offset``, if any."""

    start = end = offset
    while start > 0 and is_word_char(document.char_at(start - 1)):
        start -= 1
    while end < len(document) and is_word_char(document.char_at(end)):
        end += 1
    return (start, end) if start < end else None


def push_mark(context: ExecutionContext, position: int, *, active: bool) -> None:
    """Set the primary mark, filing the previous one in the mark ring."""

    primary = context.cursors.primary
    if primary.mark is not None:
        context.buffer.marks.push(primary.mark)
    context.cursors.set_primary(primary.with_mark(position, active=active))


def map_cursors(context: ExecutionContext, update: Callable[[Cursor], Cursor]) -> None:
    """Replace every cursor with ``update(cursor)`` and restore ordering."""

    cursors = context.cursors
    cursors.replace_all([update(cursor) for cursor in cursors])
    cursors.normalize(len(context.document))


def region_edits(
    context: ExecutionContext, transform: Callable[[str], str] | None = None
) -> List[CursorEdit]:
    """One edit per active region; regions are deleted unless ``transform`` is set."""

    edits = []
    for index, cursor in enumerate(context.cursors):
        region = cursor.region()
        if region is None or region[0] == region[1]:
            continue
        start, end = region
        text = transform(context.document.slice(start, end)) if transform else ""
        edits.append(CursorEdit(start, end, text, cursor=index))
    return edits


def clip_overlaps(
    spans: Sequence[tuple[int, int, int]]
) -> List[tuple[int, int, int]]:
    """Trim ``(cursor, start, end)`` spans so none overlaps an earlier one."""

    clipped = []
    reach = 0
    for cursor, start, end in sorted(spans, key=lambda span: (span[1], span[2])):
        start = max(start, reach)
        end = max(end, start)
        clipped.append((cursor, start, end))
        reach = end
    return clipped


__all__ = [
    "backward_word",
    "clip_overlaps",
    "forward_word",
    "is_word_char",
    "map_cursors",
    "push_mark",
    "region_edits",
    "word_around",
]
