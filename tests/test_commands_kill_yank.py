from typing import Optional

from emacs_engine.buffer import Buffer, Cursor, CursorSet, KillRing
from emacs_engine.commands import CommandContext, CommandEngine, CommandResult


def make_buffer(text: str, *positions: int) -> Buffer:
    buffer = Buffer.from_text(text)
    if positions:
        buffer.cursors = CursorSet([Cursor(position) for position in positions])
    return buffer


def make_ring(*texts: str) -> KillRing:
    ring = KillRing()
    for text in texts:
        ring.push(text)
        ring.last_was_kill = False
    return ring


def run(
    engine: CommandEngine,
    buffer: Buffer,
    command_id: str,
    *,
    prefix: Optional[int] = None,
) -> CommandResult:
    return engine.execute(buffer, command_id, CommandContext(prefix_arg=prefix))


def test_repeated_kill_line_takes_newline_and_appends() -> None:
    engine = CommandEngine()
    buffer = make_buffer("ab\ncd", 0)

    run(engine, buffer, "kill-line")
    run(engine, buffer, "kill-line")

    assert buffer.contents() == "cd"
    assert engine.kill_ring.entries == ("ab\n",)


def test_kill_line_with_prefix_kills_whole_lines() -> None:
    engine = CommandEngine()
    buffer = make_buffer("a\nb\nc", 0)

    run(engine, buffer, "kill-line", prefix=2)

    assert buffer.contents() == "c"
    assert engine.kill_ring.yank() == "a\nb\n"


def test_backward_kills_prepend() -> None:
    engine = CommandEngine()
    buffer = make_buffer("one two", 7)

    run(engine, buffer, "backward-kill-word")
    run(engine, buffer, "backward-kill-word")

    assert buffer.contents() == ""
    assert engine.kill_ring.entries == ("one two",)


def test_intervening_command_starts_new_kill() -> None:
    engine = CommandEngine()
    buffer = make_buffer("one two", 0)

    run(engine, buffer, "kill-word")
    run(engine, buffer, "forward-char")
    run(engine, buffer, "kill-word")

    assert buffer.contents() == " "
    assert engine.kill_ring.entries == ("two", "one")


def test_copy_region_keeps_text() -> None:
    engine = CommandEngine()
    buffer = make_buffer("one two", 0)
    run(engine, buffer, "set-mark-command")
    run(engine, buffer, "forward-word")

    result = run(engine, buffer, "copy-region-as-kill")

    assert result.message == "Region saved"
    assert buffer.contents() == "one two"
    assert engine.kill_ring.yank() == "one"
    assert buffer.cursors.primary.mark_active is False


def test_kill_region_then_yank_restores() -> None:
    engine = CommandEngine()
    buffer = make_buffer("hello world", 6)
    run(engine, buffer, "set-mark-command")
    run(engine, buffer, "end-of-buffer-shift")

    run(engine, buffer, "kill-region")
    assert buffer.contents() == "hello "

    run(engine, buffer, "yank")
    assert buffer.contents() == "hello world"
    assert buffer.point == 11
    assert buffer.cursors.primary.mark == 6


def test_yank_pop_cycles_back_to_first_entry() -> None:
    engine = CommandEngine(kill_ring=make_ring("one", "two", "three"))
    buffer = make_buffer("", 0)

    run(engine, buffer, "yank")
    assert buffer.contents() == "three"

    seen = []
    for _ in range(3):
        run(engine, buffer, "yank-pop")
        seen.append(buffer.contents())

    assert seen == ["two", "one", "three"]
    assert buffer.point == 5


def test_yank_pop_requires_previous_yank() -> None:
    engine = CommandEngine(kill_ring=make_ring("one"))
    buffer = make_buffer("abc", 0)

    result = run(engine, buffer, "yank-pop")

    assert result.message == "Previous command was not a yank"
    assert buffer.contents() == "abc"


def test_multi_cursor_kill_and_yank_is_piecewise() -> None:
    engine = CommandEngine()
    buffer = make_buffer("ab\ncd", 0, 3)

    run(engine, buffer, "kill-line")
    assert buffer.contents() == "\n"
    assert engine.kill_ring.yank() == "abcd"

    run(engine, buffer, "yank")
    assert buffer.contents() == "ab\ncd"
    assert buffer.cursors.positions == (2, 5)


def test_single_cursor_yank_of_multi_cursor_kill_uses_whole_text() -> None:
    engine = CommandEngine()
    buffer = make_buffer("ab\ncd", 0, 3)
    run(engine, buffer, "kill-line")
    run(engine, buffer, "clear-multiple-cursors")

    run(engine, buffer, "yank")

    assert buffer.contents() == "abcd\n"
