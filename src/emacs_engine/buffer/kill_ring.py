"""Process-wide kill ring with append merging and yank cycling."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Literal, Optional, Sequence

from emacs_engine.runtime.config import DEFAULT_KILL_RING_CAPACITY

KillDirection = Literal["forward", "backward"]


class KillRingEmpty(RuntimeError):
    """Raised when yanking from a ring that holds nothing."""

    def __init__(self, message: str = "Kill ring is empty") -> None:
        super().__init__(message)


@dataclass(frozen=True, slots=True)
class KillEntry:
    """Killed text plus the per-cursor pieces it was assembled from."""

    text: str
    pieces: tuple[str, ...] = ()

    def extended(
        self, text: str, pieces: Sequence[str], direction: KillDirection
    ) -> "KillEntry":
        merged_pieces: tuple[str, ...] = ()
        if pieces and len(pieces) == len(self.pieces):
            if direction == "forward":
                merged_pieces = tuple(a + b for a, b in zip(self.pieces, pieces))
            else:
                merged_pieces = tuple(b + a for a, b in zip(self.pieces, pieces))
        if direction == "forward":
            return KillEntry(self.text + text, merged_pieces)
        return KillEntry(text + self.text, merged_pieces)


class KillRing:
    """Bounded, most-recent-first ring of killed text.

    One ring is shared by every buffer; it is handed to the command engine
    rather than kept as a module global.
    """

    def __init__(self, capacity: int = DEFAULT_KILL_RING_CAPACITY) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self._entries: List[KillEntry] = []
        self._yank_index = 0
        self.last_was_kill = False

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> tuple[str, ...]:
        return tuple(entry.text for entry in self._entries)

    @property
    def yank_index(self) -> int:
        return self._yank_index

    def push(
        self,
        text: str,
        direction: KillDirection = "forward",
        *,
        pieces: Sequence[str] = (),
    ) -> None:
        """Record killed text, merging into the newest entry after a kill."""

        if not text:
            return
        if self.last_was_kill and self._entries:
            self._entries[0] = self._entries[0].extended(text, pieces, direction)
        else:
            self._entries.insert(0, KillEntry(text, tuple(pieces)))
            del self._entries[self.capacity :]
        self._yank_index = 0
        self.last_was_kill = True

    def current_entry(self) -> KillEntry:
        if not self._entries:
            raise KillRingEmpty()
        return self._entries[self._yank_index]

    def yank(self) -> str:
        return self.current_entry().text

    def yank_pop(self) -> str:
        if not self._entries:
            raise KillRingEmpty()
        self._yank_index = (self._yank_index + 1) % len(self._entries)
        return self._entries[self._yank_index].text

    def reset_yank(self) -> None:
        self._yank_index = 0

    def peek(self, index: int = 0) -> Optional[str]:
        if 0 <= index < len(self._entries):
            return self._entries[index].text
        return None


__all__ = ["KillDirection", "KillEntry", "KillRing", "KillRingEmpty"]
