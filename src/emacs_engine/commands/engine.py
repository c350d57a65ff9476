"""Single entry point that runs one resolved command against a buffer."""

from __future__ import annotations

from dataclasses import replace
from typing import Optional

from emacs_engine.buffer import (
    Buffer,
    KillRing,
    KillRingEmpty,
    OutOfRange,
    ReadOnlyViolation,
    UndoEmpty,
)
from emacs_engine.runtime import telemetry
from emacs_engine.runtime.config import EngineConfig

from .defaults import build_default_registry
from .models import (
    CommandContext,
    CommandResult,
    CommandSpec,
    ErrorKind,
    ExecutionContext,
    Repeat,
    UndoClass,
)
from .registry import CommandNotFound, CommandRegistry

_ERROR_KINDS: tuple[tuple[type[Exception], ErrorKind], ...] = (
    (ReadOnlyViolation, ErrorKind.READ_ONLY),
    (OutOfRange, ErrorKind.OUT_OF_RANGE),
    (UndoEmpty, ErrorKind.UNDO_EMPTY),
    (KillRingEmpty, ErrorKind.KILL_RING_EMPTY),
)


class CommandEngine:
    """Applies commands to every cursor of a buffer as one undoable step.

    Undo grouping, kill-ring appending and mark clearing all depend on the
    previous command, so the engine remembers the last identifier it ran.
    Callers that track it themselves can pass ``CommandContext.last_command``.
    """

    def __init__(
        self,
        registry: Optional[CommandRegistry] = None,
        *,
        kill_ring: Optional[KillRing] = None,
        config: Optional[EngineConfig] = None,
    ) -> None:
        self.config = config or EngineConfig()
        self.registry = registry if registry is not None else build_default_registry()
        if kill_ring is None:
            kill_ring = KillRing(self.config.kill_ring_capacity)
        self.kill_ring = kill_ring
        self.last_command: Optional[str] = None
        self.logger = telemetry.get_logger("emacs_engine.commands")

    def execute(
        self,
        buffer: Buffer,
        command_id: str,
        context: Optional[CommandContext] = None,
    ) -> CommandResult:
        context = context or CommandContext()
        if context.last_command is None and self.last_command is not None:
            context = replace(context, last_command=self.last_command)

        try:
            spec = self.registry.get(command_id)
        except CommandNotFound as exc:
            telemetry.record_event(
                "command.not_found", level="warning", data={"command": command_id}
            )
            return CommandResult.failure(
                command_id, ErrorKind.COMMAND_NOT_FOUND, str(exc)
            )

        if self._starts_undo_group(spec, context.last_command):
            buffer.undo.boundary()

        run = ExecutionContext(
            command_id=command_id,
            buffer=buffer,
            kill_ring=self.kill_ring,
            context=context,
            config=self.config,
        )
        with telemetry.span(
            name=f"command::{command_id}",
            component="commands",
            metadata={"buffer": buffer.name, "cursors": len(buffer.cursors)},
        ) as handle:
            try:
                with buffer.transaction(command_id):
                    message = self._run(spec, run)
            except (ReadOnlyViolation, OutOfRange, UndoEmpty, KillRingEmpty) as exc:
                kind = _error_kind(exc)
                handle.add_metadata("error", kind.value)
                telemetry.record_event(
                    "command.error",
                    level="warning",
                    data={
                        "command": command_id,
                        "kind": kind.value,
                        "reason": str(exc),
                    },
                )
                result = CommandResult.failure(command_id, kind, str(exc))
            else:
                result = (
                    CommandResult.info(command_id, message)
                    if message
                    else CommandResult.ok(command_id)
                )

        self._finish(spec, run)
        return result

    def _starts_undo_group(
        self, spec: CommandSpec, last_command: Optional[str]
    ) -> bool:
        if spec.undo_class is UndoClass.OTHER:
            return True
        return self.registry.undo_class_of(last_command) is not spec.undo_class

    def _run(self, spec: CommandSpec, run: ExecutionContext) -> Optional[str]:
        prefix = run.context.prefix_arg
        if spec.repeat is Repeat.LOOP:
            message = None
            for _ in range(1 if prefix is None else prefix):
                message = spec(run) or message
            return message
        if spec.repeat is Repeat.COUNT:
            run.count = 1 if prefix is None else prefix
        return spec(run)

    def _finish(self, spec: CommandSpec, run: ExecutionContext) -> None:
        buffer = run.buffer
        for kill in run.kills:
            self.kill_ring.push(kill.text, kill.direction, pieces=kill.pieces)
        if not spec.is_kill:
            self.kill_ring.last_was_kill = False
        if not spec.preserves_mark:
            buffer.cursors.deactivate_marks()
        if not spec.metadata.get("goal_column"):
            buffer.cursors.clear_goal_columns()
        buffer.undo.finish_command(was_undo=bool(spec.metadata.get("undo")))

        buffer.cursors.check_invariant(len(buffer))
        buffer.undo.check_invariant()
        self.last_command = spec.id
        self.logger.debug(
            f"command::{spec.id} done cursors={buffer.cursors.positions} "
            f"undo={buffer.undo.position}/{len(buffer.undo)}"
        )


def _error_kind(exc: Exception) -> ErrorKind:
    for exc_type, kind in _ERROR_KINDS:
        if isinstance(exc, exc_type):
            return kind
    raise TypeError(f"No error kind for {type(exc).__name__}")


__all__ = ["CommandEngine"]
