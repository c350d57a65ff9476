"""Rope-backed text storage for emacs_engine buffers.

Text lives in a persistent, height-balanced binary tree of string leaves.
Every node caches its character length, UTF-8 byte length and newline
count, so offset, byte and line lookups descend a single root-to-leaf path.
Nodes are never mutated once built: an edit produces a new root that
shares every untouched subtree with the previous one, which makes
``snapshot()`` free.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from emacs_engine.runtime.config import DEFAULT_ROPE_LEAF_SIZE

from .position import Position
from .validation import OutOfRange, ensure_offset, ensure_range


@dataclass(frozen=True, slots=True)
class _Node:
    text: str
    left: Optional["_Node"]
    right: Optional["_Node"]
    length: int
    nbytes: int
    newlines: int
    height: int

    @property
    def is_leaf(self) -> bool:
        return self.left is None


def _leaf(text: str) -> _Node:
    return _Node(
        text=text,
        left=None,
        right=None,
        length=len(text),
        nbytes=len(text.encode("utf-8")),
        newlines=text.count("\n"),
        height=1,
    )


def _branch(left: _Node, right: _Node) -> _Node:
    return _Node(
        text="",
        left=left,
        right=right,
        length=left.length + right.length,
        nbytes=left.nbytes + right.nbytes,
        newlines=left.newlines + right.newlines,
        height=1 + max(left.height, right.height),
    )


def _height(node: Optional[_Node]) -> int:
    return node.height if node is not None else 0


def _balance(left: _Node, right: _Node) -> _Node:
    if left.height > right.height + 1:
        assert left.left is not None and left.right is not None
        if left.left.height >= left.right.height:
            return _branch(left.left, _branch(left.right, right))
        inner = left.right
        assert inner.left is not None and inner.right is not None
        return _branch(_branch(left.left, inner.left), _branch(inner.right, right))
    if right.height > left.height + 1:
        assert right.left is not None and right.right is not None
        if right.right.height >= right.left.height:
            return _branch(_branch(left, right.left), right.right)
        inner = right.left
        assert inner.left is not None and inner.right is not None
        return _branch(_branch(left, inner.left), _branch(inner.right, right.right))
    return _branch(left, right)


def _concat(
    left: Optional[_Node], right: Optional[_Node], leaf_size: int
) -> Optional[_Node]:
    if left is None or left.length == 0:
        return right
    if right is None or right.length == 0:
        return left
    if left.is_leaf and right.is_leaf and left.length + right.length <= leaf_size:
        return _leaf(left.text + right.text)

    if left.height > right.height + 1:
        assert left.left is not None
        joined = _concat(left.right, right, leaf_size)
        assert joined is not None
        return _balance(left.left, joined)
    if right.height > left.height + 1:
        assert right.right is not None
        joined = _concat(left, right.left, leaf_size)
        assert joined is not None
        return _balance(joined, right.right)
    return _branch(left, right)


def _split(
    node: Optional[_Node], offset: int, leaf_size: int
) -> tuple[Optional[_Node], Optional[_Node]]:
    if node is None:
        return None, None
    if offset <= 0:
        return None, node
    if offset >= node.length:
        return node, None
    if node.is_leaf:
        return _leaf(node.text[:offset]), _leaf(node.text[offset:])

    assert node.left is not None and node.right is not None
    if offset < node.left.length:
        head, tail = _split(node.left, offset, leaf_size)
        return head, _concat(tail, node.right, leaf_size)
    if offset == node.left.length:
        return node.left, node.right
    head, tail = _split(node.right, offset - node.left.length, leaf_size)
    return _concat(node.left, head, leaf_size), tail


def _build(text: str, leaf_size: int) -> Optional[_Node]:
    if not text:
        return None
    level: List[_Node] = [
        _leaf(text[i : i + leaf_size]) for i in range(0, len(text), leaf_size)
    ]
    while len(level) > 1:
        paired = [
            _branch(level[i], level[i + 1]) for i in range(0, len(level) - 1, 2)
        ]
        if len(level) % 2:
            paired[-1] = _balance(paired[-1], level[-1])
        level = paired
    return level[0]


def _leaves(node: Optional[_Node]) -> Iterator[str]:
    stack: List[_Node] = [node] if node is not None else []
    while stack:
        current = stack.pop()
        if current.is_leaf:
            yield current.text
            continue
        assert current.left is not None and current.right is not None
        stack.append(current.right)
        stack.append(current.left)


def _collect(node: Optional[_Node], start: int, end: int, out: List[str]) -> None:
    if node is None or start >= end:
        return
    if node.is_leaf:
        out.append(node.text[start:end])
        return
    assert node.left is not None and node.right is not None
    split = node.left.length
    if start < split:
        _collect(node.left, start, min(end, split), out)
    if end > split:
        _collect(node.right, max(start, split) - split, end - split, out)


def _newlines_before(node: Optional[_Node], offset: int) -> int:
    count = 0
    while node is not None and offset > 0:
        if node.is_leaf:
            return count + node.text.count("\n", 0, offset)
        assert node.left is not None and node.right is not None
        if offset <= node.left.length:
            node = node.left
        else:
            count += node.left.newlines
            offset -= node.left.length
            node = node.right
    return count


def _offset_after_newline(node: _Node, ordinal: int) -> int:
    """Offset just past the ``ordinal``-th newline (1-based) under ``node``."""

    base = 0
    while not node.is_leaf:
        assert node.left is not None and node.right is not None
        if node.left.newlines >= ordinal:
            node = node.left
        else:
            ordinal -= node.left.newlines
            base += node.left.length
            node = node.right
    index = -1
    for _ in range(ordinal):
        index = node.text.index("\n", index + 1)
    return base + index + 1


def _bytes_before(node: Optional[_Node], offset: int) -> int:
    total = 0
    while node is not None and offset > 0:
        if node.is_leaf:
            return total + len(node.text[:offset].encode("utf-8"))
        assert node.left is not None and node.right is not None
        if offset <= node.left.length:
            node = node.left
        else:
            total += node.left.nbytes
            offset -= node.left.length
            node = node.right
    return total


@dataclass(slots=True)
class BufferDocument:
    """Persistent rope with character, byte and line addressing.

    All public offsets are character (code point) offsets. Byte offsets are
    only accepted and produced by ``offset_to_byte``/``byte_to_offset``.
    """

    _root: Optional[_Node] = None
    leaf_size: int = DEFAULT_ROPE_LEAF_SIZE
    version: int = field(default=0)

    @classmethod
    def from_text(
        cls, text: str, *, leaf_size: int = DEFAULT_ROPE_LEAF_SIZE
    ) -> "BufferDocument":
        return cls(_root=_build(text, leaf_size), leaf_size=leaf_size)

    def snapshot(self) -> "BufferDocument":
        """Return an independent document sharing this one's structure."""

        return BufferDocument(
            _root=self._root, leaf_size=self.leaf_size, version=self.version
        )

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def insert(self, offset: int, text: str) -> int:
        ensure_offset(offset, len(self))
        if text:
            head, tail = _split(self._root, offset, self.leaf_size)
            middle = _build(text, self.leaf_size)
            joined = _concat(head, middle, self.leaf_size)
            self._root = _concat(joined, tail, self.leaf_size)
            self.version += 1
        return len(self)

    def delete(self, start: int, end: int) -> str:
        ensure_range(start, end, len(self))
        if start == end:
            return ""
        head, rest = _split(self._root, start, self.leaf_size)
        removed, tail = _split(rest, end - start, self.leaf_size)
        self._root = _concat(head, tail, self.leaf_size)
        self.version += 1
        return "".join(_leaves(removed))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def __len__(self) -> int:
        return self._root.length if self._root is not None else 0

    @property
    def byte_length(self) -> int:
        return self._root.nbytes if self._root is not None else 0

    @property
    def depth(self) -> int:
        return _height(self._root)

    def text(self) -> str:
        return "".join(_leaves(self._root))

    def slice(self, start: int, end: int) -> str:
        ensure_range(start, end, len(self))
        pieces: List[str] = []
        _collect(self._root, start, end, pieces)
        return "".join(pieces)

    def char_at(self, offset: int) -> str:
        if offset < 0 or offset >= len(self):
            raise OutOfRange(
                f"No character at offset {offset}", offset=offset, length=len(self)
            )
        return self.slice(offset, offset + 1)

    def line_count(self) -> int:
        return (self._root.newlines if self._root is not None else 0) + 1

    def _ensure_line(self, line: int) -> None:
        if line < 0 or line >= self.line_count():
            raise OutOfRange(f"Line {line} outside 0..{self.line_count() - 1}")

    def line_start(self, line: int) -> int:
        self._ensure_line(line)
        if line == 0:
            return 0
        assert self._root is not None
        return _offset_after_newline(self._root, line)

    def line_end(self, line: int) -> int:
        """Offset of the line's terminating newline, or the buffer end."""

        self._ensure_line(line)
        if line == self.line_count() - 1:
            return len(self)
        return self.line_start(line + 1) - 1

    def line_length(self, line: int) -> int:
        return self.line_end(line) - self.line_start(line)

    def get_line(self, line: int) -> str:
        return self.slice(self.line_start(line), self.line_end(line))

    def line_of(self, offset: int) -> int:
        ensure_offset(offset, len(self))
        return _newlines_before(self._root, offset)

    def offset_to_position(self, offset: int) -> Position:
        line = self.line_of(offset)
        return Position(line, offset - self.line_start(line))

    def position_to_offset(self, position: Position) -> int:
        self._ensure_line(position.line)
        if position.column > self.line_length(position.line):
            raise OutOfRange(
                f"Column {position.column} past end of line {position.line}"
            )
        return self.line_start(position.line) + position.column

    def offset_to_byte(self, offset: int) -> int:
        ensure_offset(offset, len(self))
        return _bytes_before(self._root, offset)

    def byte_to_offset(self, byte: int) -> int:
        if byte < 0 or byte > self.byte_length:
            raise OutOfRange(
                f"Byte offset {byte} outside 0..{self.byte_length}", offset=byte
            )
        node = self._root
        chars = 0
        remaining = byte
        while node is not None and not node.is_leaf:
            assert node.left is not None and node.right is not None
            if remaining <= node.left.nbytes:
                node = node.left
            else:
                remaining -= node.left.nbytes
                chars += node.left.length
                node = node.right
        if node is None:
            return 0
        consumed = 0
        for index, char in enumerate(node.text):
            if consumed == remaining:
                return chars + index
            consumed += len(char.encode("utf-8"))
            if consumed > remaining:
                raise OutOfRange(
                    f"Byte offset {byte} falls inside a character", offset=byte
                )
        return chars + node.length


__all__ = ["BufferDocument"]
