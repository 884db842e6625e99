"""Piece table text buffer.

A TextBuffer never copies the document on an edit. Inserted text is appended
to the added store and the piece list is spliced so that it refers to the new
span; deletions only narrow or drop piece descriptors. Positions and lengths
are in code points (``str`` indices).
"""

import os
import threading
from itertools import islice
from typing import Optional, Union

from .constants import BufferConstants
from .errors import EncodingError, InvalidRangeError, InvariantViolation, OutOfBoundsError
from .piece import Origin, Piece
from .piece_list import PieceList
from .snapshot import BufferSnapshot, TextRange, clip_pieces, resolve_range
from .store import StoreManager
from .undo import UndoEntry, UndoManager


def as_text(text: Union[str, bytes]) -> str:
    """Return text as a str of valid code points or raise EncodingError."""
    if isinstance(text, (bytes, bytearray)):
        try:
            return bytes(text).decode(BufferConstants.DEFAULT_ENCODING)
        except UnicodeDecodeError as e:
            raise EncodingError(f"text is not valid {BufferConstants.DEFAULT_ENCODING}: {e}") from e
    if not isinstance(text, str):
        raise TypeError(f"expected str or bytes, got {type(text).__name__}")
    try:
        # Lone surrogates survive in str but can never be saved
        text.encode(BufferConstants.DEFAULT_ENCODING)
    except UnicodeEncodeError as e:
        raise EncodingError(f"text contains unencodable code points: {e}") from e
    return text


class TextBuffer:
    """Editable document backed by a piece table.

    All mutation and range capture happens under one re-entrant lock, so a
    reader on another thread never sees a half-finished splice.
    """

    def __init__(
        self,
        text: Union[str, bytes] = "",
        *,
        coalesce: bool = True,
        debug: Optional[bool] = None,
        undo_limit: int = BufferConstants.UNDO_MAX_ENTRIES,
    ):
        text = as_text(text)
        self._stores = StoreManager(text)
        self._pieces = PieceList([Piece(Origin.ORIGINAL, 0, len(text))] if text else [])
        self._lock = threading.RLock()
        self._undo = UndoManager(undo_limit)
        self.coalesce = coalesce
        if debug is None:
            debug = bool(os.environ.get(BufferConstants.DEBUG_ENV_VAR))
        self.debug = debug
        self._check()

    def __len__(self) -> int:
        with self._lock:
            return self._pieces.length

    def __repr__(self) -> str:
        return f"<TextBuffer length={len(self)} pieces={self.piece_count}>"

    @property
    def stores(self) -> StoreManager:
        return self._stores

    @property
    def piece_count(self) -> int:
        return len(self._pieces)

    def pieces(self) -> tuple[Piece, ...]:
        with self._lock:
            return tuple(self._pieces)

    def locate(self, offset: int) -> tuple[int, int]:
        with self._lock:
            return self._pieces.locate(offset)

    # --- Editing ---

    def insert(self, position: int, text: Union[str, bytes]) -> None:
        """Insert text so that it starts at the given position."""
        text = as_text(text)
        with self._lock:
            length = len(self)
            if position < 0 or position > length:
                raise OutOfBoundsError(position, length)
            if not text:
                return
            start, n = self._stores.append(text)
            entry = self._insertion(position, Piece(Origin.ADDED, start, n))
            self._apply(entry.index, entry.removed, entry.inserted)
            # Consecutive typing undoes as one step
            self._undo.push(entry, merge=True)

    def _insertion(self, position: int, new: Piece) -> UndoEntry:
        pieces = self._pieces
        if not len(pieces):
            return UndoEntry(0, (), (new,))

        index, offset = pieces.locate(position)
        piece = pieces[index]
        if 0 < offset < piece.length:
            left, right = piece.split(offset)
            return UndoEntry(index, (piece,), (left, new, right))

        if offset == piece.length:
            # End of document
            previous, index = piece, index + 1
        else:
            previous = pieces[index - 1] if index > 0 else None
        if previous is not None and self._extends(previous, new):
            return UndoEntry(index - 1, (previous,), (previous.extended(new.length),))
        return UndoEntry(index, (), (new,))

    def _extends(self, previous: Piece, new: Piece) -> bool:
        """True when new text directly continues the added span of previous."""
        return self.coalesce and previous.origin is Origin.ADDED and previous.end == new.start

    def delete(self, position: int, length: int) -> None:
        """Remove length units starting at position."""
        with self._lock:
            total = len(self)
            if position < 0 or position > total:
                raise OutOfBoundsError(position, total)
            if length < 0:
                raise InvalidRangeError(f"negative delete length {length}")
            if position + length > total:
                raise InvalidRangeError(
                    f"cannot delete {length} at {position} from document of length {total}"
                )
            if length == 0:
                return

            first, first_offset = self._pieces.locate(position)
            last, last_offset = self._pieces.locate(position + length)
            if last_offset == 0:
                # Range ends on a boundary; the last touched piece is the one before
                last -= 1
                last_offset = self._pieces[last].length
            removed = tuple(islice(self._pieces.iter_from(first), last - first + 1))

            remainders = []
            if first_offset > 0:
                remainders.append(removed[0].head(first_offset))
            if last_offset < removed[-1].length:
                remainders.append(removed[-1].tail(last_offset))
            entry = UndoEntry(first, removed, tuple(remainders))
            self._apply(entry.index, entry.removed, entry.inserted)
            self._undo.push(entry)

    def _apply(self, index: int, removed: tuple[Piece, ...], inserted: tuple[Piece, ...]) -> None:
        actual = self._pieces.splice(index, len(removed), inserted)
        if self.debug and actual != removed:
            raise InvariantViolation(f"spliced out {actual!r}, expected {removed!r}")
        self._check()

    # --- Undo ---

    def undo(self) -> bool:
        with self._lock:
            return self._undo.undo(self)

    def redo(self) -> bool:
        with self._lock:
            return self._undo.redo(self)

    def can_undo(self) -> bool:
        with self._lock:
            return self._undo.can_undo()

    def can_redo(self) -> bool:
        with self._lock:
            return self._undo.can_redo()

    def clear_history(self) -> None:
        with self._lock:
            self._undo.clear()

    def _revert(self, entry: UndoEntry) -> None:
        self._apply(entry.index, entry.inserted, entry.removed)

    def _reapply(self, entry: UndoEntry) -> None:
        self._apply(entry.index, entry.removed, entry.inserted)

    # --- Reading ---

    def read(self, start: int = 0, end: Optional[int] = None) -> TextRange:
        """Return the characters in [start, end) as a lazy TextRange."""
        with self._lock:
            start, end = resolve_range(start, end, len(self))
            if start == end:
                return TextRange(self._stores, ())
            index, skip = self._pieces.locate(start)
            spans = clip_pieces(self._pieces.iter_from(index), skip, end - start)
        return TextRange(self._stores, spans)

    def text(self) -> str:
        return str(self.read())

    def snapshot(self) -> BufferSnapshot:
        with self._lock:
            return BufferSnapshot(self._stores, tuple(self._pieces))

    # --- Consistency ---

    def check_invariants(self) -> None:
        """Raise InvariantViolation if the piece list disagrees with itself."""
        total = 0
        for piece in self._pieces:
            if piece.length <= 0:
                raise InvariantViolation(f"empty piece {piece!r}")
            store = self._stores.store(piece.origin)
            if piece.start < 0 or piece.end > len(store):
                raise InvariantViolation(f"piece {piece!r} outside its store")
            total += piece.length
        if total != self._pieces.length:
            raise InvariantViolation(
                f"piece lengths sum to {total}, document length is {self._pieces.length}"
            )

    def _check(self) -> None:
        if self.debug:
            self.check_invariants()
