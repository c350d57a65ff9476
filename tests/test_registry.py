import pytest

from emacs_engine.commands import (
    DEFAULT_COMMANDS,
    CommandNotFound,
    CommandRegistry,
    CommandSpec,
    UndoClass,
    build_default_registry,
)


def make_spec(command_id: str = "test-command", **kwargs) -> CommandSpec:
    return CommandSpec(id=command_id, handler=lambda context: None, **kwargs)


def test_default_registry_covers_builtin_table() -> None:
    registry = build_default_registry()

    assert len(registry) == len(DEFAULT_COMMANDS)
    for command_id in (
        "forward-char",
        "forward-char-shift",
        "self-insert-command",
        "kill-line",
        "yank-pop",
        "undo",
        "spawn-cursors-at-word-matches",
    ):
        assert command_id in registry
    assert registry.names() == tuple(sorted(registry.names()))


def test_undo_classes_of_builtin_commands() -> None:
    registry = build_default_registry()

    assert registry.undo_class_of("self-insert-command") is UndoClass.SELF_INSERT
    assert registry.undo_class_of("newline") is UndoClass.SELF_INSERT
    assert registry.undo_class_of("delete-char") is UndoClass.DELETION
    assert registry.undo_class_of("kill-word") is UndoClass.KILL
    assert registry.undo_class_of("yank") is UndoClass.OTHER
    assert registry.undo_class_of(None) is None
    assert registry.undo_class_of("missing") is None


def test_duplicate_ids_are_rejected() -> None:
    with pytest.raises(ValueError):
        CommandRegistry([make_spec(), make_spec()])


def test_unknown_command_lookup() -> None:
    registry = CommandRegistry([make_spec()])

    with pytest.raises(CommandNotFound) as excinfo:
        registry.get("other")

    assert excinfo.value.command_id == "other"


def test_registry_table_is_read_only() -> None:
    registry = CommandRegistry([make_spec(metadata={"k": 1})])

    with pytest.raises(TypeError):
        registry.commands["new"] = make_spec("new")  # type: ignore[index]
    with pytest.raises(TypeError):
        registry.get("test-command").metadata["k"] = 2  # type: ignore[index]


def test_build_filters_and_extra_commands() -> None:
    registry = build_default_registry(
        include=["forward-char", "yank"],
        exclude=["yank"],
        extra_commands=[make_spec("host-save")],
    )

    assert registry.names() == ("forward-char", "host-save")


def test_stats_summarize_commands() -> None:
    registry = build_default_registry()

    stats = registry.stats()

    assert stats.command_count == len(DEFAULT_COMMANDS)
    assert stats.kill_commands == 5
    assert stats.undo_classes == ("deletion", "kill", "other", "self-insert")


def test_spec_validation() -> None:
    with pytest.raises(ValueError):
        make_spec("")
    with pytest.raises(TypeError):
        CommandSpec(id="bad", handler=None)  # type: ignore[arg-type]
