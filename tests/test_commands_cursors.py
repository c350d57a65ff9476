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


def test_add_cursor_next_line_keeps_column() -> None:
    engine = CommandEngine()
    buffer = make_buffer("abc\nde\nfgh", 2)

    run(engine, buffer, "add-cursor-next-line", prefix=2)

    assert buffer.cursors.positions == (2, 6, 9)
    assert buffer.cursors.primary.position == 2


def test_add_cursor_stops_at_buffer_edges() -> None:
    engine = CommandEngine()
    buffer = make_buffer("abc\ndef", 1)

    assert run(engine, buffer, "add-cursor-previous-line").message == "No previous line"
    run(engine, buffer, "add-cursor-next-line")
    assert run(engine, buffer, "add-cursor-next-line").message == "No next line"
    assert buffer.cursors.positions == (1, 5)


def test_spawn_cursors_at_whole_word_matches() -> None:
    engine = CommandEngine()
    buffer = make_buffer("foo food foo", 1)

    result = run(engine, buffer, "spawn-cursors-at-word-matches")

    assert result.message == "Spawned 2 cursor(s)"
    assert buffer.cursors.positions == (1, 10)


def test_spawn_cursors_guards() -> None:
    engine = CommandEngine()
    blank = make_buffer("   ", 1)
    busy = make_buffer("a a", 0, 2)

    assert run(engine, blank, "spawn-cursors-at-word-matches").message == (
        "No word at point"
    )
    assert run(engine, busy, "spawn-cursors-at-word-matches").message == (
        "Already using multiple cursors"
    )


def test_clear_multiple_cursors_keeps_primary() -> None:
    engine = CommandEngine()
    buffer = make_buffer("abc\ndef")
    buffer.cursors = CursorSet([Cursor(0), Cursor(4)], primary=1)

    result = run(engine, buffer, "clear-multiple-cursors")

    assert result.message == "Cleared 1 cursor(s)"
    assert buffer.cursors.positions == (4,)
