"""Read-only views over buffer content."""

from bisect import bisect_right
from dataclasses import dataclass, field
from itertools import accumulate
from typing import Iterable, Iterator, Optional

from .errors import InvalidRangeError, OutOfBoundsError
from .piece import Piece
from .store import StoreManager


def resolve_range(start: int, end: Optional[int], length: int) -> tuple[int, int]:
    """Validate a [start, end) request against a document length."""
    if end is None:
        end = length
    if start < 0 or start > length:
        raise OutOfBoundsError(start, length)
    if end < 0 or end > length:
        raise OutOfBoundsError(end, length)
    if start > end:
        raise InvalidRangeError(f"range start {start} is after end {end}")
    return start, end


def clip_pieces(pieces: Iterable[Piece], skip: int, length: int) -> tuple[Piece, ...]:
    """Narrow consecutive pieces to `length` units, dropping `skip` from the first."""
    spans = []
    for piece in pieces:
        if length <= 0:
            break
        if skip:
            piece = piece.tail(skip)
            skip = 0
        if piece.length > length:
            piece = piece.head(length)
        spans.append(piece)
        length -= piece.length
    return tuple(spans)


class TextRange:
    """Lazy, restartable sequence of the characters in a document range.

    Holds only piece descriptors; text is sliced from the stores each time
    the range is iterated.
    """

    def __init__(self, stores: StoreManager, spans: tuple[Piece, ...]):
        self._stores = stores
        self._spans = spans
        self._length = sum(p.length for p in spans)

    def __len__(self) -> int:
        return self._length

    def chunks(self) -> Iterator[str]:
        """Yield the text contributed by each piece, in order."""
        for span in self._spans:
            yield self._stores.slice(span.origin, span.start, span.length)

    def __iter__(self) -> Iterator[str]:
        for chunk in self.chunks():
            yield from chunk

    def __str__(self) -> str:
        return "".join(self.chunks())

    def __repr__(self) -> str:
        return f"TextRange({str(self)!r})"


@dataclass(frozen=True)
class BufferSnapshot:
    """Frozen copy of the piece list, readable without holding the buffer lock.

    Safe to read from another thread: the stores it refers to only ever grow.
    """
    stores: StoreManager
    pieces: tuple[Piece, ...]
    _offsets: tuple[int, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "_offsets", (0, *accumulate(p.length for p in self.pieces)))

    def __len__(self) -> int:
        return self._offsets[-1]

    def read(self, start: int = 0, end: Optional[int] = None) -> TextRange:
        start, end = resolve_range(start, end, len(self))
        if start == end:
            return TextRange(self.stores, ())
        index = bisect_right(self._offsets, start) - 1
        skip = start - self._offsets[index]
        return TextRange(self.stores, clip_pieces(self.pieces[index:], skip, end - start))

    def text(self) -> str:
        return str(self.read())
