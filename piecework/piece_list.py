"""Ordered piece list with an order-statistics index.

The list is an implicit treap: pieces are kept in document order by tree
position rather than by key, and every node caches the number of pieces and
the total text length of its subtree. That makes offset lookup, indexing and
splicing each expected O(log n) in the number of pieces.
"""

import random
from typing import Iterable, Iterator, Optional

from .constants import BufferConstants
from .errors import OutOfBoundsError
from .piece import Piece


class _Node:
    __slots__ = ("piece", "priority", "left", "right", "count", "length")

    def __init__(self, piece: Piece, priority: float):
        self.piece = piece
        self.priority = priority
        self.left: Optional[_Node] = None
        self.right: Optional[_Node] = None
        self.count = 1
        self.length = piece.length


def _count(node: Optional[_Node]) -> int:
    return node.count if node else 0


def _length(node: Optional[_Node]) -> int:
    return node.length if node else 0


def _update(node: _Node) -> None:
    node.count = 1 + _count(node.left) + _count(node.right)
    node.length = node.piece.length + _length(node.left) + _length(node.right)


def _merge(a: Optional[_Node], b: Optional[_Node]) -> Optional[_Node]:
    """Join two treaps where every piece of a precedes every piece of b."""
    if a is None:
        return b
    if b is None:
        return a
    if a.priority > b.priority:
        a.right = _merge(a.right, b)
        _update(a)
        return a
    b.left = _merge(a, b.left)
    _update(b)
    return b


def _split(node: Optional[_Node], k: int) -> tuple[Optional[_Node], Optional[_Node]]:
    """Split into (first k pieces, remaining pieces)."""
    if node is None:
        return None, None
    if k <= _count(node.left):
        left, node.left = _split(node.left, k)
        _update(node)
        return left, node
    node.right, right = _split(node.right, k - _count(node.left) - 1)
    _update(node)
    return node, right


def _walk(node: Optional[_Node]) -> Iterator[Piece]:
    stack: list[_Node] = []
    while stack or node:
        while node:
            stack.append(node)
            node = node.left
        node = stack.pop()
        yield node.piece
        node = node.right


class PieceList:
    """Ordered sequence of pieces whose concatenation is the document."""

    def __init__(self, pieces: Iterable[Piece] = (), seed: Optional[int] = None):
        self._random = random.Random(BufferConstants.TREAP_SEED if seed is None else seed)
        self._root: Optional[_Node] = None
        self._root = self._build(pieces)

    def _build(self, pieces: Iterable[Piece]) -> Optional[_Node]:
        root = None
        for piece in pieces:
            if piece.length <= 0:
                raise ValueError(f"zero-length piece {piece!r}")
            root = _merge(root, _Node(piece, self._random.random()))
        return root

    def __len__(self) -> int:
        """Number of pieces."""
        return _count(self._root)

    @property
    def length(self) -> int:
        """Total text length, i.e. the document length."""
        return _length(self._root)

    def __iter__(self) -> Iterator[Piece]:
        return _walk(self._root)

    def __getitem__(self, index: int) -> Piece:
        count = len(self)
        if index < 0:
            index += count
        if not 0 <= index < count:
            raise IndexError(f"piece index {index} out of range")
        node = self._root
        while node:
            left_count = _count(node.left)
            if index < left_count:
                node = node.left
            elif index == left_count:
                return node.piece
            else:
                index -= left_count + 1
                node = node.right
        raise AssertionError("piece counts are inconsistent")

    def locate(self, offset: int) -> tuple[int, int]:
        """Map a logical offset to (piece index, offset within that piece).

        An offset on a boundary between two pieces resolves to the start of
        the following piece. The end of the document resolves to the end of
        the last piece, and offset 0 of an empty list to (0, 0).
        """
        total = self.length
        if offset < 0 or offset > total:
            raise OutOfBoundsError(offset, total)
        count = len(self)
        if offset == total:
            if count == 0:
                return 0, 0
            return count - 1, self[count - 1].length

        node = self._root
        index = 0
        while node:
            left_length = _length(node.left)
            if offset < left_length:
                node = node.left
                continue
            offset -= left_length
            index += _count(node.left)
            if offset < node.piece.length:
                return index, offset
            offset -= node.piece.length
            index += 1
            node = node.right
        raise AssertionError("piece lengths are inconsistent")

    def iter_from(self, index: int) -> Iterator[Piece]:
        """Yield pieces in order starting at the given index."""
        stack: list[_Node] = []
        node = self._root
        while node:
            left_count = _count(node.left)
            if index < left_count:
                stack.append(node)
                node = node.left
            elif index == left_count:
                stack.append(node)
                break
            else:
                index -= left_count + 1
                node = node.right
        while stack:
            node = stack.pop()
            yield node.piece
            child = node.right
            while child:
                stack.append(child)
                child = child.left

    def splice(self, index: int, remove_count: int, new_pieces: Iterable[Piece] = ()) -> tuple[Piece, ...]:
        """Replace remove_count pieces at index with new_pieces.

        Returns the removed pieces in order.
        """
        count = len(self)
        if not 0 <= index <= count:
            raise IndexError(f"splice index {index} out of range")
        if remove_count < 0 or index + remove_count > count:
            raise IndexError(f"cannot remove {remove_count} pieces at {index}")
        inserted = self._build(new_pieces)
        left, rest = _split(self._root, index)
        middle, right = _split(rest, remove_count)
        self._root = _merge(_merge(left, inserted), right)
        return tuple(_walk(middle))
