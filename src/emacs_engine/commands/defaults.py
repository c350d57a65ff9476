"""Built-in command table that seeds the immutable registry."""

from __future__ import annotations

from functools import partial
from typing import Sequence

from . import cursors as cursor_commands
from . import editing, kill_yank, marks, motion
from . import undo as undo_commands
from .models import CommandSpec, Repeat, UndoClass
from .registry import CommandRegistry


def _motion(
    command_id: str,
    handler,
    *,
    repeat: Repeat,
    description: str,
    vertical: bool = False,
) -> tuple[CommandSpec, CommandSpec]:
    """A plain motion plus its ``-shift`` variant that extends the region.

    Vertical motions keep each cursor's goal column for the next command.
    """

    metadata = {"goal_column": True} if vertical else {}
    return (
        CommandSpec(
            id=command_id,
            handler=handler,
            repeat=repeat,
            preserves_mark=True,
            description=description,
            metadata=metadata,
        ),
        CommandSpec(
            id=f"{command_id}-shift",
            handler=partial(handler, shift=True),
            repeat=repeat,
            preserves_mark=True,
            description=f"{description}, extending the region",
            metadata={**metadata, "shift_select": True},
        ),
    )


MOTION_COMMANDS: tuple[CommandSpec, ...] = (
    *_motion(
        "forward-char",
        motion.forward_char,
        repeat=Repeat.COUNT,
        description="Move point right",
    ),
    *_motion(
        "backward-char",
        motion.backward_char,
        repeat=Repeat.COUNT,
        description="Move point left",
    ),
    *_motion(
        "next-line",
        motion.next_line,
        repeat=Repeat.COUNT,
        description="Move to the next line, keeping the goal column",
        vertical=True,
    ),
    *_motion(
        "previous-line",
        motion.previous_line,
        repeat=Repeat.COUNT,
        description="Move to the previous line, keeping the goal column",
        vertical=True,
    ),
    *_motion(
        "move-beginning-of-line",
        motion.move_beginning_of_line,
        repeat=Repeat.NONE,
        description="Move to the start of the line",
    ),
    *_motion(
        "move-end-of-line",
        motion.move_end_of_line,
        repeat=Repeat.NONE,
        description="Move to the end of the line",
    ),
    *_motion(
        "beginning-of-buffer",
        motion.beginning_of_buffer,
        repeat=Repeat.NONE,
        description="Move to the start of the buffer",
    ),
    *_motion(
        "end-of-buffer",
        motion.end_of_buffer,
        repeat=Repeat.NONE,
        description="Move to the end of the buffer",
    ),
    *_motion(
        "forward-word",
        motion.forward_word_command,
        repeat=Repeat.COUNT,
        description="Move past the next word",
    ),
    *_motion(
        "backward-word",
        motion.backward_word_command,
        repeat=Repeat.COUNT,
        description="Move back to the start of a word",
    ),
    CommandSpec(
        id="goto-line",
        handler=motion.goto_line,
        description="Jump to the line given by the prefix argument",
    ),
)

EDITING_COMMANDS: tuple[CommandSpec, ...] = (
    CommandSpec(
        id="self-insert-command",
        handler=editing.self_insert_command,
        undo_class=UndoClass.SELF_INSERT,
        repeat=Repeat.COUNT,
        description="Insert the typed text",
    ),
    CommandSpec(
        id="delete-char",
        handler=editing.delete_char,
        undo_class=UndoClass.DELETION,
        repeat=Repeat.COUNT,
        description="Delete the following character",
    ),
    CommandSpec(
        id="delete-backward-char",
        handler=editing.delete_backward_char,
        undo_class=UndoClass.DELETION,
        repeat=Repeat.COUNT,
        description="Delete the preceding character",
    ),
    CommandSpec(
        id="newline",
        handler=editing.newline,
        undo_class=UndoClass.SELF_INSERT,
        repeat=Repeat.COUNT,
        description="Insert a line break",
    ),
    CommandSpec(
        id="open-line",
        handler=editing.open_line,
        repeat=Repeat.COUNT,
        description="Insert a line break after point",
    ),
    CommandSpec(
        id="transpose-chars",
        handler=editing.transpose_chars,
        repeat=Repeat.LOOP,
        description="Swap the characters around point",
    ),
    CommandSpec(
        id="upcase-region",
        handler=editing.upcase_region,
        description="Upcase each active region",
    ),
    CommandSpec(
        id="downcase-region",
        handler=editing.downcase_region,
        description="Downcase each active region",
    ),
    CommandSpec(
        id="upcase-word",
        handler=editing.upcase_word,
        repeat=Repeat.COUNT,
        description="Upcase the following word",
    ),
    CommandSpec(
        id="downcase-word",
        handler=editing.downcase_word,
        repeat=Repeat.COUNT,
        description="Downcase the following word",
    ),
)

MARK_COMMANDS: tuple[CommandSpec, ...] = (
    CommandSpec(
        id="set-mark-command",
        handler=marks.set_mark_command,
        preserves_mark=True,
        description="Set the mark at point, or pop to the previous mark",
    ),
    CommandSpec(
        id="exchange-point-and-mark",
        handler=marks.exchange_point_and_mark,
        preserves_mark=True,
        description="Swap point and mark",
    ),
    CommandSpec(
        id="mark-whole-buffer",
        handler=marks.mark_whole_buffer,
        preserves_mark=True,
        description="Select the whole buffer",
    ),
    CommandSpec(
        id="keyboard-quit",
        handler=marks.keyboard_quit,
        description="Deactivate regions and drop secondary cursors",
    ),
)

KILL_COMMANDS: tuple[CommandSpec, ...] = (
    CommandSpec(
        id="kill-line",
        handler=kill_yank.kill_line,
        undo_class=UndoClass.KILL,
        is_kill=True,
        description="Kill to the end of the line",
    ),
    CommandSpec(
        id="kill-word",
        handler=kill_yank.kill_word,
        undo_class=UndoClass.KILL,
        is_kill=True,
        repeat=Repeat.COUNT,
        description="Kill to the end of the word",
    ),
    CommandSpec(
        id="backward-kill-word",
        handler=kill_yank.backward_kill_word,
        undo_class=UndoClass.KILL,
        is_kill=True,
        repeat=Repeat.COUNT,
        description="Kill back to the start of the word",
    ),
    CommandSpec(
        id="kill-region",
        handler=kill_yank.kill_region,
        undo_class=UndoClass.KILL,
        is_kill=True,
        description="Kill each active region",
    ),
    CommandSpec(
        id="copy-region-as-kill",
        handler=kill_yank.copy_region_as_kill,
        is_kill=True,
        description="Save each active region without deleting it",
    ),
    CommandSpec(
        id="yank",
        handler=kill_yank.yank,
        description="Insert the most recent kill",
    ),
    CommandSpec(
        id="yank-pop",
        handler=kill_yank.yank_pop,
        description="Replace the yanked text with an older kill",
    ),
)

UNDO_COMMANDS: tuple[CommandSpec, ...] = (
    CommandSpec(
        id="undo",
        handler=undo_commands.undo,
        repeat=Repeat.LOOP,
        preserves_mark=True,
        description="Undo the last change group",
        metadata={"undo": True},
    ),
)

CURSOR_COMMANDS: tuple[CommandSpec, ...] = (
    CommandSpec(
        id="add-cursor-next-line",
        handler=cursor_commands.add_cursor_next_line,
        repeat=Repeat.LOOP,
        preserves_mark=True,
        description="Add a cursor on the line below",
        metadata={"goal_column": True},
    ),
    CommandSpec(
        id="add-cursor-previous-line",
        handler=cursor_commands.add_cursor_previous_line,
        repeat=Repeat.LOOP,
        preserves_mark=True,
        description="Add a cursor on the line above",
        metadata={"goal_column": True},
    ),
    CommandSpec(
        id="spawn-cursors-at-word-matches",
        handler=cursor_commands.spawn_cursors_at_word_matches,
        description="Add cursors at every match of the word at point",
    ),
    CommandSpec(
        id="clear-multiple-cursors",
        handler=cursor_commands.clear_multiple_cursors,
        description="Keep only the primary cursor",
    ),
)

DEFAULT_COMMANDS: tuple[CommandSpec, ...] = (
    *MOTION_COMMANDS,
    *EDITING_COMMANDS,
    *MARK_COMMANDS,
    *KILL_COMMANDS,
    *UNDO_COMMANDS,
    *CURSOR_COMMANDS,
)


def build_default_registry(
    *,
    include: Sequence[str] | None = None,
    exclude: Sequence[str] | None = None,
    extra_commands: Sequence[CommandSpec] = (),
    logger_name: str | None = None,
) -> CommandRegistry:
    """Build the registry from the built-in table plus any host commands."""

    filters = _build_filters(include, exclude)
    selected = [
        command for command in DEFAULT_COMMANDS if _selected(command.id, filters)
    ]
    return CommandRegistry([*selected, *extra_commands], logger_name=logger_name)


def _build_filters(
    include: Sequence[str] | None, exclude: Sequence[str] | None
) -> tuple[set[str] | None, set[str]]:
    include_set = set(include) if include else None
    exclude_set = set(exclude or ())
    return include_set, exclude_set


def _selected(item_id: str, filters: tuple[set[str] | None, set[str]]) -> bool:
    include, exclude = filters
    if include is not None and item_id not in include:
        return False
    if item_id in exclude:
        return False
    return True


__all__ = ["DEFAULT_COMMANDS", "build_default_registry"]
