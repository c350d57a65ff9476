"""Command registry, built-in command table and the execution engine."""

from .defaults import DEFAULT_COMMANDS, build_default_registry
from .engine import CommandEngine
from .models import (
    CommandContext,
    CommandResult,
    CommandSpec,
    ErrorKind,
    ExecutionContext,
    Handler,
    PendingKill,
    Repeat,
    UndoClass,
)
from .registry import CommandError, CommandNotFound, CommandRegistry, RegistryStats

__all__ = [
    "CommandEngine",
    "CommandRegistry",
    "RegistryStats",
    "CommandError",
    "CommandNotFound",
    "CommandSpec",
    "CommandContext",
    "CommandResult",
    "ExecutionContext",
    "ErrorKind",
    "Handler",
    "PendingKill",
    "Repeat",
    "UndoClass",
    "DEFAULT_COMMANDS",
    "build_default_registry",
]
