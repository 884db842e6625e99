"""Backing stores for the piece table.

The original store holds the text the buffer was created from and is never
touched again. The added store accumulates every inserted span in the order
it was inserted. Neither store ever shrinks or rewrites text, so any
(start, length) pair handed out stays valid for the lifetime of the buffer.
"""

from bisect import bisect_right

from .errors import OutOfBoundsError
from .piece import Origin


class OriginalStore:
    """Immutable text as loaded."""

    def __init__(self, text: str = ""):
        self._text = text

    def __len__(self) -> int:
        return len(self._text)

    def slice(self, start: int, length: int) -> str:
        if start < 0 or length < 0 or start + length > len(self._text):
            raise OutOfBoundsError(start + max(length, 0), len(self._text))
        return self._text[start:start + length]


class AddedStore:
    """Append-only accumulation of inserted text.

    Each append is kept as its own chunk; ``_starts`` holds the logical
    offset of every chunk so a slice can find its first chunk by bisection.
    """

    def __init__(self):
        self._chunks: list[str] = []
        self._starts: list[int] = []
        self._length = 0

    def __len__(self) -> int:
        return self._length

    def append(self, text: str) -> tuple[int, int]:
        """Append text and return the (start, length) it now occupies."""
        start = self._length
        if text:
            self._chunks.append(text)
            self._starts.append(start)
            self._length += len(text)
        return start, len(text)

    def slice(self, start: int, length: int) -> str:
        if start < 0 or length < 0 or start + length > self._length:
            raise OutOfBoundsError(start + max(length, 0), self._length)
        if length == 0:
            return ""
        i = bisect_right(self._starts, start) - 1
        offset = start - self._starts[i]
        chunk = self._chunks[i]
        # Pieces never straddle appends unless coalesced, so this is the usual path
        if offset + length <= len(chunk):
            return chunk[offset:offset + length]
        parts = [chunk[offset:]]
        remaining = length - len(parts[0])
        while remaining > 0:
            i += 1
            part = self._chunks[i][:remaining]
            parts.append(part)
            remaining -= len(part)
        return "".join(parts)


class StoreManager:
    """Owns both stores for as long as any piece refers to them."""

    def __init__(self, original: str = ""):
        self.original = OriginalStore(original)
        self.added = AddedStore()

    def store(self, origin: Origin):
        if origin is Origin.ORIGINAL:
            return self.original
        return self.added

    def slice(self, origin: Origin, start: int, length: int) -> str:
        return self.store(origin).slice(start, length)

    def append(self, text: str) -> tuple[int, int]:
        return self.added.append(text)
