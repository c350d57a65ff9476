"""Dataclasses describing commands, their context and their results."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Callable, List, Literal, Mapping, Optional, Sequence

from emacs_engine.buffer import Buffer, BufferDocument, CursorSet, KillRing
from emacs_engine.buffer.kill_ring import KillDirection
from emacs_engine.runtime.config import EngineConfig


class UndoClass(Enum):
    """Consecutive commands of the same class share one undo group."""

    SELF_INSERT = "self-insert"
    DELETION = "deletion"
    KILL = "kill"
    OTHER = "other"


class Repeat(Enum):
    """How a numeric prefix argument drives a command."""

    NONE = "none"
    LOOP = "loop"
    COUNT = "count"


class ErrorKind(Enum):
    OUT_OF_RANGE = "out-of-range"
    READ_ONLY = "read-only"
    UNDO_EMPTY = "undo-empty"
    KILL_RING_EMPTY = "kill-ring-empty"
    COMMAND_NOT_FOUND = "command-not-found"


@dataclass(frozen=True, slots=True)
class CommandContext:
    """What the key resolver knows when it hands over a command."""

    prefix_arg: Optional[int] = None
    last_command: Optional[str] = None
    text: Optional[str] = None


ResultStatus = Literal["ok", "message", "error"]


@dataclass(frozen=True, slots=True)
class CommandResult:
    command_id: str
    status: ResultStatus = "ok"
    message: Optional[str] = None
    error: Optional[ErrorKind] = None

    @classmethod
    def ok(cls, command_id: str) -> "CommandResult":
        return cls(command_id=command_id)

    @classmethod
    def info(cls, command_id: str, message: str) -> "CommandResult":
        return cls(command_id=command_id, status="message", message=message)

    @classmethod
    def failure(
        cls, command_id: str, kind: ErrorKind, message: str
    ) -> "CommandResult":
        return cls(command_id=command_id, status="error", message=message, error=kind)

    @property
    def is_error(self) -> bool:
        return self.status == "error"


@dataclass(slots=True)
class PendingKill:
    pieces: tuple[str, ...]
    direction: KillDirection = "forward"

    @property
    def text(self) -> str:
        return "".join(self.pieces)


@dataclass(slots=True)
class ExecutionContext:
    """Everything a command handler may touch while it runs."""

    command_id: str
    buffer: Buffer
    kill_ring: KillRing
    context: CommandContext
    config: EngineConfig
    count: int = 1
    kills: List[PendingKill] = field(default_factory=list)

    @property
    def document(self) -> BufferDocument:
        return self.buffer.document

    @property
    def cursors(self) -> CursorSet:
        return self.buffer.cursors

    @property
    def has_prefix(self) -> bool:
        return self.context.prefix_arg is not None

    @property
    def last_command(self) -> Optional[str]:
        return self.context.last_command

    def record_kill(
        self, pieces: Sequence[str], direction: KillDirection = "forward"
    ) -> None:
        """Queue killed text; the engine pushes it once the command finishes."""

        kept = tuple(piece for piece in pieces if piece)
        if kept:
            self.kills.append(PendingKill(kept, direction))


Handler = Callable[[ExecutionContext], Optional[str]]


@dataclass(frozen=True, slots=True)
class CommandSpec:
    """Static description of one registered command."""

    id: str
    handler: Handler
    undo_class: UndoClass = UndoClass.OTHER
    is_kill: bool = False
    repeat: Repeat = Repeat.NONE
    preserves_mark: bool = False
    description: str = ""
    metadata: Mapping[str, object] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("CommandSpec id cannot be empty")
        if not callable(self.handler):
            raise TypeError("handler must be callable")
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    def __call__(self, context: ExecutionContext) -> Optional[str]:
        return self.handler(context)


__all__ = [
    "CommandContext",
    "CommandResult",
    "CommandSpec",
    "ErrorKind",
    "ExecutionContext",
    "Handler",
    "PendingKill",
    "Repeat",
    "UndoClass",
]
