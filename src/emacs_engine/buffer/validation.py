"""Validation helpers shared across buffer services."""

from __future__ import annotations

from .sync import BufferValidationError


class OutOfRange(BufferValidationError):
    """An offset or range lies outside the text it addresses."""

    def __init__(
        self, message: str, *, offset: int | None = None, length: int | None = None
    ) -> None:
        super().__init__(message, offset=offset)
        self.length = length


class ReadOnlyViolation(BufferValidationError):
    """A mutation was attempted on a read-only buffer."""

    def __init__(self, buffer_name: str) -> None:
        super().__init__(f"Buffer is read-only: {buffer_name}")
        self.buffer_name = buffer_name


def ensure_offset(offset: int, length: int) -> int:
    if offset < 0 or offset > length:
        raise OutOfRange(
            f"Offset {offset} outside 0..{length}", offset=offset, length=length
        )
    return offset


def ensure_range(start: int, end: int, length: int) -> tuple[int, int]:
    if start > end:
        raise OutOfRange(
            f"Range start {start} is after end {end}", offset=start, length=length
        )
    ensure_offset(start, length)
    ensure_offset(end, length)
    return start, end


def clamp(offset: int, length: int) -> int:
    return max(0, min(offset, length))


__all__ = [
    "OutOfRange",
    "ReadOnlyViolation",
    "clamp",
    "ensure_offset",
    "ensure_range",
]
