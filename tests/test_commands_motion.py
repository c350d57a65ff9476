from typing import Optional

from emacs_engine.buffer import Buffer, Cursor, CursorSet
from emacs_engine.commands import CommandContext, CommandEngine, CommandResult


def make_buffer(text: str, *positions: int) -> Buffer:
    buffer = Buffer.from_text(text)
    if positions:
        buffer.cursors = CursorSet([Cursor(position) for position in positions])
    return buffer


def run(
    engine: CommandEngine,
    buffer: Buffer,
    command_id: str,
    *,
    prefix: Optional[int] = None,
) -> CommandResult:
    return engine.execute(buffer, command_id, CommandContext(prefix_arg=prefix))


def test_char_motion_clamps_to_buffer() -> None:
    engine = CommandEngine()
    buffer = make_buffer("abc", 1)

    run(engine, buffer, "backward-char", prefix=5)
    assert buffer.point == 0
    run(engine, buffer, "forward-char", prefix=2)
    assert buffer.point == 2
    run(engine, buffer, "forward-char", prefix=9)
    assert buffer.point == 3


def test_line_motion_keeps_goal_column() -> None:
    engine = CommandEngine()
    buffer = make_buffer("abcdef\nab\nabcdef", 5)

    run(engine, buffer, "next-line")
    assert buffer.point == 9
    run(engine, buffer, "next-line")
    assert buffer.point == 15
    run(engine, buffer, "previous-line", prefix=2)
    assert buffer.point == 5


def test_typing_between_line_motions_resets_goal_column() -> None:
    engine = CommandEngine()
    buffer = make_buffer("abcdefgh\nabcdefgh\nabcdefgh", 2)

    run(engine, buffer, "next-line")
    engine.execute(buffer, "self-insert-command", CommandContext(text="XYZ"))
    run(engine, buffer, "next-line")

    assert buffer.contents().split("\n")[1] == "abXYZcdefgh"
    assert buffer.point == 26


def test_deletion_without_moving_point_resets_goal_column() -> None:
    engine = CommandEngine()
    buffer = make_buffer("abcdef\nab\nabcdef", 5)

    run(engine, buffer, "next-line")
    assert buffer.point == 9
    run(engine, buffer, "delete-char")
    run(engine, buffer, "previous-line")

    assert buffer.contents() == "abcdef\nababcdef"
    assert buffer.point == 2


def test_word_motion() -> None:
    engine = CommandEngine()
    buffer = make_buffer("foo bar  baz", 0)

    run(engine, buffer, "forward-word")
    assert buffer.point == 3
    run(engine, buffer, "forward-word")
    assert buffer.point == 7
    run(engine, buffer, "end-of-buffer")
    run(engine, buffer, "backward-word", prefix=2)
    assert buffer.point == 4


def test_line_edges_for_every_cursor() -> None:
    engine = CommandEngine()
    buffer = make_buffer("one\ntwo\nthree", 1, 5, 9)

    run(engine, buffer, "move-end-of-line")
    assert buffer.cursors.positions == (3, 7, 13)
    run(engine, buffer, "move-beginning-of-line")
    assert buffer.cursors.positions == (0, 4, 8)


def test_buffer_jumps_leave_mark_behind() -> None:
    engine = CommandEngine()
    buffer = make_buffer("hello\nworld", 3)

    result = run(engine, buffer, "end-of-buffer")

    assert result.message == "Mark set"
    assert buffer.point == 11
    assert buffer.cursors.primary.mark == 3
    assert buffer.cursors.primary.mark_active is False

    run(engine, buffer, "beginning-of-buffer")
    assert buffer.point == 0
    assert buffer.cursors.primary.mark == 11
    assert list(buffer.marks) == [3]


def test_shift_motion_selects_until_plain_motion() -> None:
    engine = CommandEngine()
    buffer = make_buffer("abcdef", 0)

    run(engine, buffer, "forward-char-shift")
    run(engine, buffer, "forward-char-shift")
    assert buffer.cursors.primary.region() == (0, 2)

    run(engine, buffer, "forward-char")
    assert buffer.cursors.primary.region() is None
    assert buffer.point == 3


def test_goto_line_uses_prefix_argument() -> None:
    engine = CommandEngine()
    buffer = make_buffer("a\nb\nc", 0)

    assert run(engine, buffer, "goto-line").message == "goto-line needs a line number"
    run(engine, buffer, "goto-line", prefix=3)
    assert buffer.point == 4
    run(engine, buffer, "goto-line", prefix=99)
    assert buffer.point == 4
