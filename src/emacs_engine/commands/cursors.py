"""Commands that add or remove cursors."""

from __future__ import annotations

from typing import Optional

from .helpers import is_word_char, word_around
from .models import ExecutionContext


def _add_cursor_on_line(context: ExecutionContext, step: int) -> Optional[str]:
    document = context.document
    cursors = context.cursors
    anchor = cursors[-1] if step > 0 else cursors[0]
    here = document.offset_to_position(anchor.position)
    line = here.line + step
    if line < 0 or line >= document.line_count():
        return "No next line" if step > 0 else "No previous line"
    goal = anchor.goal_column if anchor.goal_column is not None else here.column
    column = min(goal, document.line_length(line))
    cursors.add_cursor(document.line_start(line) + column)
    return None


def add_cursor_next_line(context: ExecutionContext) -> Optional[str]:
    """Add a cursor one line below the bottom cursor, at the same column."""

    return _add_cursor_on_line(context, 1)


def add_cursor_previous_line(context: ExecutionContext) -> Optional[str]:
    return _add_cursor_on_line(context, -1)


def spawn_cursors_at_word_matches(context: ExecutionContext) -> str:
    """Add a cursor at every other whole-word occurrence of the word at point.

    The active region, when there is one, supplies the word instead. Each new
    cursor sits at the same offset into its match as point does in the
    original.
    """

    document = context.document
    cursors = context.cursors
    if len(cursors) > 1:
        return "Already using multiple cursors"
    primary = cursors.primary
    bounds = primary.region() or word_around(document, primary.position)
    if bounds is None or bounds[0] == bounds[1]:
        return "No word at point"
    start, end = bounds
    word = document.slice(start, end)
    relative = primary.position - start
    text = document.text()

    found = text.find(word)
    while found != -1:
        match_end = found + len(word)
        whole = (found == 0 or not is_word_char(text[found - 1])) and (
            match_end == len(text) or not is_word_char(text[match_end])
        )
        if whole and found != start:
            cursors.add_cursor(found + relative)
        found = text.find(word, found + 1)
    return f"Spawned {len(cursors)} cursor(s)"


def clear_multiple_cursors(context: ExecutionContext) -> str:
    removed = context.cursors.remove_secondary()
    return f"Cleared {removed} cursor(s)"


__all__ = [
    "add_cursor_next_line",
    "add_cursor_previous_line",
    "clear_multiple_cursors",
    "spawn_cursors_at_word_matches",
]
