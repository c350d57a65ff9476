"""High-level buffer façade combining document, cursors, marks, and undo."""

from __future__ import annotations

from contextlib import AbstractContextManager
from dataclasses import dataclass, field
from typing import ContextManager, List, Literal, Optional, Sequence

from emacs_engine.runtime import telemetry
from emacs_engine.runtime.config import EngineConfig

from .cursor import CursorSet
from .document import BufferDocument
from .mark import MarkRing
from .position import Position
from .sync import BufferMirror
from .undo import CursorMove, Delete, Insert, UndoEntry, UndoHistory
from .validation import ReadOnlyViolation, ensure_range

PointPlacement = Literal["auto", "keep", "end"]


@dataclass(frozen=True, slots=True)
class CursorEdit:
    """Replace ``[start, end)`` with ``text`` on behalf of one cursor.

    ``point`` controls where the owning cursor (``cursor`` index) lands:
    ``"auto"`` shifts it like every other offset, ``"keep"`` leaves it
    before the new text and ``"end"`` puts it after the new text.
    """

    start: int
    end: int
    text: str = ""
    cursor: Optional[int] = None
    point: PointPlacement = "auto"

    @property
    def is_deletion(self) -> bool:
        return self.start < self.end and not self.text


@dataclass(slots=True)
class _Span:
    start: int
    end: int
    parts: List[CursorEdit] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "".join(part.text for part in self.parts)


@dataclass(slots=True)
class BufferView:
    """Read-only snapshot handed to rendering collaborators."""

    name: str
    version: int
    first_line: int
    lines: tuple[str, ...]
    line_count: int
    cursors: tuple[Position, ...]
    primary: int
    regions: tuple[tuple[Position, Position], ...]
    modified: bool
    read_only: bool

    @property
    def text(self) -> str:
        return "\n".join(self.lines)

    @property
    def cursor(self) -> Position:
        return self.cursors[self.primary]


class Buffer:
    def __init__(
        self,
        *,
        name: str = "default",
        document: Optional[BufferDocument] = None,
        cursors: Optional[CursorSet] = None,
        marks: Optional[MarkRing] = None,
        undo: Optional[UndoHistory] = None,
        read_only: bool = False,
        config: Optional[EngineConfig] = None,
    ) -> None:
        self.config = config or EngineConfig()
        self.name = name
        self.document = (
            document
            if document is not None
            else BufferDocument(leaf_size=self.config.rope_leaf_size)
        )
        self.cursors = cursors if cursors is not None else CursorSet()
        self.marks = (
            marks if marks is not None else MarkRing(self.config.mark_ring_capacity)
        )
        self.undo = undo if undo is not None else UndoHistory()
        self.read_only = read_only
        self.modified = False
        self._transaction: Optional[Transaction] = None

    @classmethod
    def from_text(
        cls,
        text: str,
        *,
        name: str = "default",
        read_only: bool = False,
        config: Optional[EngineConfig] = None,
    ) -> "Buffer":
        config = config or EngineConfig()
        document = BufferDocument.from_text(text, leaf_size=config.rope_leaf_size)
        return cls(name=name, document=document, read_only=read_only, config=config)

    # ------------------------------------------------------------------
    # File I/O boundary
    # ------------------------------------------------------------------
    def load_text(self, text: str) -> None:
        """Replace the whole buffer with freshly loaded text."""

        self.document = BufferDocument.from_text(
            text, leaf_size=self.config.rope_leaf_size
        )
        self.cursors = CursorSet()
        self.marks.clear()
        self.undo.clear()
        self.modified = False
        telemetry.record_event(
            "buffer.load",
            data={"buffer": self.name, "length": len(self.document)},
        )

    def contents(self) -> str:
        return self.document.text()

    def mark_saved(self) -> None:
        self.modified = False

    def __len__(self) -> int:
        return len(self.document)

    @property
    def point(self) -> int:
        return self.cursors.primary.position

    # ------------------------------------------------------------------
    # Rendering boundary
    # ------------------------------------------------------------------
    def snapshot(
        self, *, first_line: int = 0, line_count: Optional[int] = None
    ) -> BufferView:
        total = self.document.line_count()
        first = max(0, min(first_line, total - 1))
        last = total if line_count is None else min(total, first + max(line_count, 0))
        return BufferView(
            name=self.name,
            version=self.document.version,
            first_line=first,
            lines=tuple(self.document.get_line(line) for line in range(first, last)),
            line_count=total,
            cursors=self._cursor_positions(),
            primary=self.cursors.primary_index,
            regions=self._regions(),
            modified=self.modified,
            read_only=self.read_only,
        )

    def mirror(self, *, attributes: Optional[dict[str, str]] = None) -> BufferMirror:
        return BufferMirror(
            text=self.document.text(),
            cursors=self._cursor_positions(),
            primary=self.cursors.primary_index,
            regions=self._regions(),
            attributes=dict(attributes or {}),
        )

    def _cursor_positions(self) -> tuple[Position, ...]:
        return tuple(
            self.document.offset_to_position(cursor.position) for cursor in self.cursors
        )

    def _regions(self) -> tuple[tuple[Position, Position], ...]:
        regions = []
        for cursor in self.cursors:
            region = cursor.region()
            if region is not None:
                start, end = region
                regions.append(
                    (
                        self.document.offset_to_position(start),
                        self.document.offset_to_position(end),
                    )
                )
        return tuple(regions)

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------
    def ensure_writable(self) -> None:
        if self.read_only:
            raise ReadOnlyViolation(self.name)

    def transaction(self, label: str) -> "Transaction":
        return Transaction(self, label)

    def apply_edits(self, edits: Sequence[CursorEdit]) -> list[str]:
        """Apply one edit per cursor as a single simultaneous change.

        Overlapping spans, and touching deletions, are merged into their
        union first. Spans are then applied from the highest offset down and
        every cursor and mark is shifted after each one. Returns the removed
        text of each merged span in ascending order.
        """

        self.ensure_writable()
        if not edits:
            return []
        length = len(self.document)
        for edit in edits:
            ensure_range(edit.start, edit.end, length)

        spans = _merge_edits(edits)
        removed = [""] * len(spans)
        with self.transaction("apply_edits") as tx:
            for index in range(len(spans) - 1, -1, -1):
                span = spans[index]
                removed[index] = self._splice(span.start, span.end, span.text, tx=tx)

        self._place_points(spans)
        self.cursors.normalize(len(self.document))
        return removed

    def insert(self, offset: int, text: str) -> None:
        self.apply_edits([CursorEdit(offset, offset, text)])

    def delete(self, start: int, end: int) -> str:
        removed = self.apply_edits([CursorEdit(start, end)])
        return removed[0] if removed else ""

    def _place_points(self, spans: Sequence[_Span]) -> None:
        drift = 0
        for span in spans:
            final_start = span.start + drift
            offset = 0
            for part in span.parts:
                if part.cursor is not None and part.point != "auto":
                    target = final_start + offset
                    if part.point == "end":
                        target += len(part.text)
                    self.cursors.move(part.cursor, target)
                offset += len(part.text)
            drift += len(span.text) - (span.end - span.start)

    def _splice(
        self, start: int, end: int, text: str, *, tx: Optional["Transaction"] = None
    ) -> str:
        removed = self.document.delete(start, end) if end > start else ""
        if text:
            self.document.insert(start, text)
        if tx is not None:
            if removed:
                tx.record(Delete(start, removed))
            if text:
                tx.record(Insert(start, text))
        self.cursors.adjust_for_edit(start, end, len(text))
        self.marks.adjust_for_edit(start, end, len(text))
        if removed or text:
            self.modified = True
        return removed

    def undo_step(self) -> int:
        """Undo the group before the undo position; returns entries reverted."""

        self.ensure_writable()
        with telemetry.span(
            name="buffer::undo",
            component=True,
            metadata={"buffer": self.name},
        ) as handle:
            group = self.undo.begin_undo()
            before = self.cursors.snapshot()
            applied: List[UndoEntry] = []
            restore = None
            for entry in group:
                if isinstance(entry, Insert):
                    end = entry.position + len(entry.text)
                    removed = self._splice(entry.position, end, "")
                    assert removed == entry.text, "undo log out of sync with text"
                    applied.append(Delete(entry.position, entry.text))
                elif isinstance(entry, Delete):
                    self._splice(entry.position, entry.position, entry.text)
                    applied.append(Insert(entry.position, entry.text))
                elif isinstance(entry, CursorMove):
                    restore = entry.before

            if restore is not None:
                self.cursors.restore(restore)
            self.cursors.normalize(len(self.document))
            restored = self.cursors.snapshot()
            self.undo.record_undo([CursorMove(before, restored), *applied])
            handle.add_metadata("reverted", len(group))
        telemetry.record_event(
            "undo.step",
            level="debug",
            data={
                "buffer": self.name,
                "entries": len(group),
                "position": self.undo.position,
            },
        )
        return len(group)


class Transaction(AbstractContextManager["Transaction"]):
    """Collects the undo entries of one command into a single log record.

    Nested transactions join the outermost one, which writes a
    ``CursorMove`` followed by every edit on exit.
    """

    def __init__(self, buffer: Buffer, label: str) -> None:
        self.buffer = buffer
        self.label = label
        self.entries: List[UndoEntry] = []
        self._span_cm: Optional[ContextManager[object]] = None
        self._outer: Optional[Transaction] = None
        self._before = buffer.cursors.snapshot()

    def __enter__(self) -> "Transaction":
        self._outer = self.buffer._transaction
        if self._outer is not None:
            return self
        self._before = self.buffer.cursors.snapshot()
        self.buffer._transaction = self
        self._span_cm = telemetry.span(
            name=f"buffer::{self.label}",
            component=True,
            metadata={"buffer": self.buffer.name},
        )
        self._span_cm.__enter__()
        return self

    def record(self, entry: UndoEntry) -> None:
        if self._outer is not None:
            self._outer.record(entry)
        else:
            self.entries.append(entry)

    def commit(self) -> None:
        # Edits already applied must reach the log even if the command failed.
        if self.entries:
            after = self.buffer.cursors.snapshot()
            self.buffer.undo.record([CursorMove(self._before, after), *self.entries])
            self.entries = []

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self._outer is not None:
            return False
        try:
            self.commit()
        finally:
            self.buffer._transaction = None
            if self._span_cm is not None:
                self._span_cm.__exit__(exc_type, exc, tb)
        return False


def _merge_edits(edits: Sequence[CursorEdit]) -> List[_Span]:
    ordered = sorted(edits, key=lambda edit: (edit.start, edit.end))
    spans: List[_Span] = []
    for edit in ordered:
        if spans:
            current = spans[-1]
            overlaps = edit.start < current.end
            touching_deletes = (
                edit.start == current.end
                and edit.is_deletion
                and all(part.is_deletion for part in current.parts)
            )
            if overlaps or touching_deletes:
                current.end = max(current.end, edit.end)
                current.parts.append(edit)
                continue
        spans.append(_Span(edit.start, edit.end, [edit]))
    return spans


__all__ = ["Buffer", "BufferView", "CursorEdit", "PointPlacement", "Transaction"]
