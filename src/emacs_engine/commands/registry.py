"""Immutable command table built once at startup."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, Mapping

from emacs_engine.runtime.telemetry import span

from .models import CommandSpec, UndoClass


@dataclass(slots=True)
class RegistryStats:
    """Lightweight snapshot describing registry state."""

    command_count: int
    kill_commands: int
    undo_classes: tuple[str, ...]


class CommandError(RuntimeError):
    """Base class for engine-level command failures."""

    def __init__(self, message: str, *, command_id: str | None = None) -> None:
        super().__init__(message)
        self.command_id = command_id


class CommandNotFound(CommandError):
    def __init__(self, command_id: str) -> None:
        super().__init__(f"Unknown command: {command_id}", command_id=command_id)


class CommandRegistry:
    """Read-only mapping from command identifier to ``CommandSpec``.

    There is no ``register`` method: the table is fixed when the registry is
    built, so nothing can add or replace commands at runtime.
    """

    def __init__(
        self, commands: Iterable[CommandSpec], *, logger_name: str | None = None
    ) -> None:
        table: Dict[str, CommandSpec] = {}
        with span(
            "commands::build_registry",
            logger_name=logger_name,
            component="commands",
        ) as handle:
            for command in commands:
                if command.id in table:
                    handle.add_metadata("duplicate", command.id)
                    raise ValueError(f"Command '{command.id}' already registered")
                table[command.id] = command
            handle.add_metadata("command_count", len(table))
        self._commands: Mapping[str, CommandSpec] = MappingProxyType(table)

    @property
    def commands(self) -> Mapping[str, CommandSpec]:
        return self._commands

    def get(self, command_id: str) -> CommandSpec:
        try:
            return self._commands[command_id]
        except KeyError as exc:
            raise CommandNotFound(command_id) from exc

    def undo_class_of(self, command_id: str | None) -> UndoClass | None:
        if command_id is None or command_id not in self._commands:
            return None
        return self._commands[command_id].undo_class

    def names(self) -> tuple[str, ...]:
        return tuple(sorted(self._commands))

    def __contains__(self, command_id: object) -> bool:
        return command_id in self._commands

    def __iter__(self) -> Iterator[CommandSpec]:
        return iter(self._commands.values())

    def __len__(self) -> int:
        return len(self._commands)

    def stats(self) -> RegistryStats:
        return RegistryStats(
            command_count=len(self._commands),
            kill_commands=sum(1 for command in self if command.is_kill),
            undo_classes=tuple(
                sorted({command.undo_class.value for command in self})
            ),
        )


__all__ = ["CommandError", "CommandNotFound", "CommandRegistry", "RegistryStats"]
