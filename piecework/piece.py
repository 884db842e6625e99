from dataclasses import dataclass
from enum import Enum


class Origin(Enum):
    """Which backing store a piece refers to."""
    ORIGINAL = "original"
    ADDED = "added"


@dataclass(frozen=True)
class Piece:
    """A contiguous span of text in one backing store."""
    origin: Origin
    start: int
    length: int

    @property
    def end(self) -> int:
        return self.start + self.length

    def head(self, n: int) -> "Piece":
        """Return the first n units of this piece."""
        assert 0 < n <= self.length
        return Piece(self.origin, self.start, n)

    def tail(self, n: int) -> "Piece":
        """Return this piece with the first n units dropped."""
        assert 0 <= n < self.length
        return Piece(self.origin, self.start + n, self.length - n)

    def split(self, offset: int) -> tuple["Piece", "Piece"]:
        """Split at an interior offset into two non-empty fragments."""
        assert 0 < offset < self.length
        return self.head(offset), self.tail(offset)

    def extended(self, n: int) -> "Piece":
        return Piece(self.origin, self.start, self.length + n)
