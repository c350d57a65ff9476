"""Line/column coordinates for character offsets."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True, order=True)
class Position:
    """Zero-based ``(line, column)`` pair; columns count characters."""

    line: int
    column: int

    def __post_init__(self) -> None:
        if self.line < 0 or self.column < 0:
            raise ValueError("Position coordinates must be non-negative")

    def as_tuple(self) -> tuple[int, int]:
        return (self.line, self.column)


__all__ = ["Position"]
