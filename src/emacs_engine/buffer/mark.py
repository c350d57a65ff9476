"""Per-buffer ring of previously set marks."""

from __future__ import annotations

from collections import deque
from typing import Deque, Iterator, Optional

from emacs_engine.runtime.config import DEFAULT_MARK_RING_CAPACITY

from .cursor import shift_offset


class MarkRing:
    """Bounded, most-recent-first history of mark positions."""

    def __init__(self, capacity: int = DEFAULT_MARK_RING_CAPACITY) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self._marks: Deque[int] = deque()

    def __len__(self) -> int:
        return len(self._marks)

    def __iter__(self) -> Iterator[int]:
        return iter(tuple(self._marks))

    def push(self, position: int) -> None:
        if self._marks and self._marks[0] == position:
            return
        self._marks.appendleft(position)
        while len(self._marks) > self.capacity:
            self._marks.pop()

    def pop(self) -> Optional[int]:
        return self._marks.popleft() if self._marks else None

    def current(self) -> Optional[int]:
        return self._marks[0] if self._marks else None

    def rotate(self, current_mark: Optional[int] = None) -> Optional[int]:
        """Take the most recent mark, filing ``current_mark`` at the oldest end."""

        if not self._marks:
            return None
        target = self._marks.popleft()
        if current_mark is not None:
            self._marks.append(current_mark)
        return target

    def clear(self) -> None:
        self._marks.clear()

    def adjust_for_edit(self, start: int, end: int, inserted: int) -> None:
        self._marks = deque(
            shift_offset(mark, start, end, inserted, sticky=True)
            for mark in self._marks
        )


__all__ = ["MarkRing"]
