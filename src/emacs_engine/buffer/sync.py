"""Adapter boundary types for syncing buffers with host widgets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from .position import Position


@dataclass(slots=True)
class BufferMirror:
    """Host-friendly snapshot describing the current buffer state."""

    text: str
    cursors: tuple[Position, ...]
    primary: int
    regions: tuple[tuple[Position, Position], ...] = ()
    attributes: dict[str, str] = field(default_factory=dict)

    @property
    def cursor(self) -> Position:
        return self.cursors[self.primary]


class BufferSync(Protocol):
    """Protocol describing how hosts exchange data with the buffer layer."""

    def pull_buffer(self) -> BufferMirror:
        """Return the latest buffer snapshot that the host should render."""
        ...

    def push_host_text(self, text: str) -> None:
        """Replace the buffer contents with text loaded by the host."""
        ...


class BufferValidationError(RuntimeError):
    """Raised when callers provide positions the buffer cannot honour."""

    def __init__(self, message: str, *, offset: int | None = None) -> None:
        super().__init__(message)
        self.offset = offset
